"""Shared utilities for the push-gate hook: input parsing and host payloads."""
import json
from typing import Any, Dict, Optional, Tuple

from check_result import GateDecision

HOOK_EVENT_NAME = 'PreToolUse'

# Process exit codes understood by the host
EXIT_ALLOW = 0
EXIT_BLOCK = 2


def parse_hook_input(stdin_content: str) -> Tuple[Dict[str, Any], Optional[str]]:
    """
    Parse and validate basic hook input structure from stdin.

    Following fail-open semantics: returns an error string rather than
    raising, and the caller allows the operation.

    Args:
        stdin_content: Raw stdin content (may be empty or malformed)

    Returns:
        Tuple of (input_data, error):
        - input_data: Parsed dict; 'tool_input' is always a dict
        - error: Error message string if input is unusable, None on success
    """
    if not stdin_content or not stdin_content.strip():
        return {}, "Empty hook input"

    try:
        input_data = json.loads(stdin_content)
    except json.JSONDecodeError as e:
        return {}, f"JSON parse error: {e}"

    if not isinstance(input_data, dict):
        return {}, f"Expected dict, got {type(input_data).__name__}"

    tool_input = input_data.get('tool_input')
    if tool_input is None:
        input_data['tool_input'] = {}
    elif not isinstance(tool_input, dict):
        return {}, f"tool_input: expected dict, got {type(tool_input).__name__}"

    command = input_data['tool_input'].get('command')
    if command is not None and not isinstance(command, str):
        return {}, f"tool_input.command: expected str, got {type(command).__name__}"

    return input_data, None


def get_command(input_data: Dict[str, Any]) -> str:
    """Shell command the host is about to run ('' if absent)."""
    return input_data.get('tool_input', {}).get('command') or ''


def build_hook_response(decision: GateDecision, context: str = '') -> dict:
    """
    Build the host payload for a gate decision.

    On block additionalContext is the aggregated failure reason; on allow it
    is the optional informational `context`.

    Returns:
        {"continue": bool, "hookSpecificOutput": {"hookEventName", "additionalContext"}}
    """
    return {
        "continue": decision.allowed,
        "hookSpecificOutput": {
            "hookEventName": HOOK_EVENT_NAME,
            "additionalContext": context if decision.allowed else decision.reason,
        },
    }


def exit_code_for(decision: GateDecision) -> int:
    return EXIT_ALLOW if decision.allowed else EXIT_BLOCK
