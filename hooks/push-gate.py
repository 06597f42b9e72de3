#!/usr/bin/env python3
"""
Push Gate - PreToolUse Hook

Runs a local pre-flight verification before Claude Code executes `git push`:
branch naming, commit message lint, lint, type check, tests and a
dependency audit. All six checks always run; the push is blocked if any
check fails.

Input (stdin):
    JSON with tool invocation details:
    {
        "tool_name": "Bash",
        "tool_input": {"command": "git push origin feature/x"},
        "cwd": "/path/to/project"
    }

Output (stdout):
    {
        "continue": true | false,
        "hookSpecificOutput": {
            "hookEventName": "PreToolUse",
            "additionalContext": "<failure reason on block>"
        }
    }

    Exit code 0 allows the push, exit code 2 blocks it. The human-readable
    report is written to stderr.

Environment:
    CLAUDE_PROJECT_DIR: Project directory (when stdin has no cwd)
    CLAUDE_SKIP_PUSH_GATE: Set to bypass the gate

Design:
    - FAIL OPEN on malformed input and on any internal error
    - Commands other than `git push` pass through with no checks
"""
import os
import sys
from pathlib import Path

# Add lib to path
lib_path = Path(__file__).resolve().parent / 'lib'
sys.path.insert(0, str(lib_path))

from check_result import GateDecision
from config import GateConfig
from console import build_console, emit_json
from git_utils import resolve_project_root
from hook_utils import (
    EXIT_ALLOW,
    build_hook_response,
    exit_code_for,
    get_command,
    parse_hook_input,
)
from logger import get_logger
from pipeline import run_gate
from report import summary_line
from trigger import is_push_command


def allow(context: str = '') -> int:
    """Emit an allow payload and return the allow exit code."""
    emit_json(build_hook_response(GateDecision(allowed=True), context))
    return EXIT_ALLOW


def main() -> int:
    """
    Hook entry point.

    Returns:
        Exit code: 0 (allow) or 2 (block)
    """
    try:
        stdin_content = sys.stdin.read()
    except (OSError, UnicodeDecodeError):
        stdin_content = ''

    logger = get_logger(base_context={"hook": "PreToolUse"})

    input_data, parse_error = parse_hook_input(stdin_content)
    if parse_error:
        logger.warning("Unusable hook input, allowing", error=parse_error)
        return allow()

    logger = logger.bind(
        session=input_data.get('session_id'),
        tool=input_data.get('tool_name'),
    )

    if os.environ.get('CLAUDE_SKIP_PUSH_GATE'):
        logger.info("Skipping push gate (env override)", reason='CLAUDE_SKIP_PUSH_GATE')
        return allow()

    try:
        command = get_command(input_data)
        cwd = input_data.get('cwd')
        project_dir = resolve_project_root(cwd if isinstance(cwd, str) else None)
        config = GateConfig(project_dir)

        if not config.is_enabled():
            logger.info("Push gate disabled via config", project_dir=project_dir)
            return allow()

        if not is_push_command(command, config.get_trigger_pattern()):
            return allow()

        logger = get_logger(
            config.get_logging_config(),
            base_context={
                "hook": "PreToolUse",
                "session": input_data.get('session_id'),
                "project_dir": project_dir,
            },
        )
        logger.info("Gating push", command=command)
        for warning in config.warnings:
            logger.warning("Config problem", detail=warning)
        config.emit_warnings()

        console = build_console(config.get_console_config())
        run = run_gate(project_dir, config, console, logger)

    except Exception as e:
        # FAIL OPEN with visible warning
        print(f"⚠️ Push gate error (push allowed): {e}", file=sys.stderr)
        logger.error("Unhandled push gate error", error=str(e))
        return allow()

    decision = run.decision
    emit_json(build_hook_response(decision, summary_line(run)))
    return exit_code_for(decision)


if __name__ == '__main__':
    sys.exit(main())
