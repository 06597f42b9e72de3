#!/usr/bin/env python3
"""
Trigger filter for the push gate.

A cheap syntactic filter, not a shell parser: the gate runs only when the
command the host is about to execute contains a `git push`.
"""
import re
import sys
from typing import Optional

# Word boundaries keep `./pushit.sh` and `git stash push` out
DEFAULT_PUSH_PATTERN = r'\bgit\s+push\b'


def compile_trigger(pattern: Optional[str] = None) -> re.Pattern:
    """
    Compile a trigger pattern (case-insensitive).

    Invalid patterns fall back to DEFAULT_PUSH_PATTERN with a warning.
    """
    if pattern:
        try:
            return re.compile(pattern, re.IGNORECASE)
        except re.error as e:
            print(f"⚠️ Invalid push-gate trigger pattern '{pattern}': {e}", file=sys.stderr)
    return re.compile(DEFAULT_PUSH_PATTERN, re.IGNORECASE)


def is_push_command(command: object, pattern: Optional[str] = None) -> bool:
    """
    Check if a shell command is a push that must be gated.

    Args:
        command: Shell command string from the hook input
        pattern: Optional override for DEFAULT_PUSH_PATTERN

    Returns:
        True if the command contains `git push` (any case, any arguments)

    Examples:
        is_push_command('git push origin feature/x --force')  # True
        is_push_command('./pushit.sh')                        # False
    """
    if not isinstance(command, str) or not command:
        return False
    return compile_trigger(pattern).search(command) is not None
