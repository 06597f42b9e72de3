#!/usr/bin/env python3
"""
Push Gate CLI Tool

Run the push gate by hand and inspect how it sees the current project.

Usage:
    push-gate run           # Run all checks, print the report (exit 0/2)
    push-gate run --json    # Also print the hook payload on stdout
    push-gate checks        # Show which checks apply, without running tools
    push-gate config        # Show merged configuration

Shell Alias (add to ~/.zshrc or ~/.bashrc):
    alias push-gate='python3 ~/.claude/hooks/push-gate-cli.py'
"""
import argparse
import sys
from pathlib import Path

# Add lib to path (resolve symlinks to find actual location)
lib_path = Path(__file__).resolve().parent / 'lib'
sys.path.insert(0, str(lib_path))

import yaml

from base_check import ToolCheck
from check_registry import CHECKS
from colors import bold, dim, error, header, success, use_stream, warning
from config import GateConfig
from console import build_console, emit_json
from git_utils import is_git_repo, resolve_project_root
from hook_utils import build_hook_response, exit_code_for
from logger import get_logger
from pipeline import build_context, run_gate
from report import summary_line


def get_project_dir(args) -> str:
    """Project directory (resolves to git root from subdirectories)."""
    return resolve_project_root(getattr(args, 'project_dir', None))


def cmd_run(args) -> int:
    """
    Run the full gate against the current project.

    The report goes to stderr like in the hook; --json prints the payload the
    hook would send to the host on stdout.
    """
    project_dir = get_project_dir(args)
    config = GateConfig(project_dir)
    logger = get_logger(config.get_logging_config(), base_context={"hook": "cli"})
    config.emit_warnings()
    console = build_console(config.get_console_config(), stream=sys.stderr)

    run = run_gate(project_dir, config, console, logger)
    decision = run.decision

    if args.json:
        emit_json(build_hook_response(decision, summary_line(run)))
    return exit_code_for(decision)


def cmd_checks(args) -> int:
    """List checks with their enabled state and tool probe result."""
    project_dir = get_project_dir(args)
    config = GateConfig(project_dir)
    config.emit_warnings()
    context = build_context(project_dir, config)

    print(header(f"📋 Push gate checks for {project_dir}"))
    print(dim(f"   Branch: {context.branch}"))
    print()

    for check in CHECKS:
        if not config.is_check_enabled(check.name):
            print(f"  {warning('○')} {check.title:<16} {dim('disabled in config')}")
            continue

        if isinstance(check, ToolCheck):
            try:
                availability = check.availability(context)
            except Exception as e:
                print(f"  {error('!')} {check.title:<16} {error(f'probe error: {e}')}")
                continue
            marker = success('●') if availability.applicable else warning('○')
            timeout = config.get_timeout(check.name)
            detail = availability.describe()
            if availability.applicable:
                detail += f" (timeout {timeout:g}s)"
            print(f"  {marker} {check.title:<16} {detail}")
        else:
            print(f"  {success('●')} {check.title:<16} {dim('git metadata')}")

    return 0


def cmd_config(args) -> int:
    """Show merged configuration and validation errors."""
    project_dir = get_project_dir(args)
    config = GateConfig(project_dir)

    if args.sources:
        print(bold("Configuration sources (lowest to highest precedence):"))
        print(f"  • {dim('built-in defaults')}")
        for source in config.sources:
            print(f"  • {source}")
        print()

    print(yaml.safe_dump(config.to_dict(), default_flow_style=False, sort_keys=False, allow_unicode=True))

    problems = config.warnings
    if problems:
        print(error(f"❌ {len(problems)} configuration problem(s):"))
        for message in problems:
            print(f"  - {message}")
        return 1
    return 0


def main() -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='push-gate',
        description='Local pre-flight verification before git push',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
    push-gate run                       # Verify before pushing
    push-gate checks                    # Which checks apply here?
    push-gate config --sources          # Where does each setting come from?

Environment Variables:
    CLAUDE_SKIP_PUSH_GATE=1             # Bypass the hook entirely
'''
    )
    parser.add_argument('--project-dir', '-C', dest='project_dir', help='Project directory (default: cwd)')

    subparsers = parser.add_subparsers(dest='command', help='Command')

    run_parser = subparsers.add_parser('run', help='Run all checks and print the report')
    run_parser.add_argument('--json', action='store_true', help='Print the hook payload on stdout')

    subparsers.add_parser('checks', help='Show which checks apply (no tools are run)')

    config_parser = subparsers.add_parser('config', help='Show merged configuration')
    config_parser.add_argument('--sources', action='store_true', help='List loaded config files')

    args = parser.parse_args()

    if not args.command:
        args.command = 'run'
        args.json = False

    if args.command in ('checks', 'config'):
        # Listings go to stdout; the run report goes to stderr
        use_stream(sys.stdout)

    if args.command != 'config' and not is_git_repo(get_project_dir(args)):
        print(warning("⚠️  Not inside a git repository; branch and commit checks will be skipped."),
              file=sys.stderr)

    commands = {
        'run': cmd_run,
        'checks': cmd_checks,
        'config': cmd_config,
    }

    return commands[args.command](args)


if __name__ == '__main__':
    sys.exit(main())
