#!/usr/bin/env python3
"""
Terminal color utilities for the push-gate report.

The report is written to stderr, so colour support is detected on the
stream that receives it rather than on stdout. Respects NO_COLOR,
FORCE_COLOR, and TTY detection.

Usage:
    from colors import success, error, warning, header, dim, bold

    print(success("✅ PUSH AUTHORIZED"), file=sys.stderr)
    print(error("🚫 PUSH BLOCKED"), file=sys.stderr)

Environment Variables:
    NO_COLOR=1      Disable all colors (https://no-color.org/)
    FORCE_COLOR=1   Force colors even in non-TTY
    TERM=dumb       Disable colors for dumb terminals
"""
import os
import sys
from typing import Optional, TextIO


class Colors:
    """ANSI escape code constants."""

    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'

    BLUE = '\033[34m'
    GRAY = '\033[90m'

    BRIGHT_RED = '\033[91m'
    BRIGHT_GREEN = '\033[92m'
    BRIGHT_YELLOW = '\033[93m'


def supports_color(stream: Optional[TextIO] = None) -> bool:
    """
    Check if a stream supports colors.

    Checks in order:
    1. NO_COLOR env var - disables colors
    2. FORCE_COLOR env var - forces colors on
    3. stream.isatty() - must be a TTY (stderr by default)
    4. TERM != 'dumb'
    """
    if os.environ.get('NO_COLOR'):
        return False

    if os.environ.get('FORCE_COLOR'):
        return True

    target = stream if stream is not None else sys.stderr
    try:
        if not target.isatty():
            return False
    except (AttributeError, ValueError):
        return False

    return os.environ.get('TERM', '') != 'dumb'


# Cached decision (set to None to re-detect, or to a bool in tests)
_color_enabled = None


def colors_enabled() -> bool:
    """Check if colors are enabled (cached)."""
    global _color_enabled
    if _color_enabled is None:
        _color_enabled = supports_color()
    return _color_enabled


def set_colors_enabled(enabled: Optional[bool]) -> None:
    """Override colour detection (None re-enables auto-detection)."""
    global _color_enabled
    _color_enabled = enabled


def use_stream(stream: TextIO) -> None:
    """Detect colour support on the stream that will receive coloured text."""
    set_colors_enabled(supports_color(stream))


def _wrap(text: str, color: str) -> str:
    if not colors_enabled():
        return text
    return f"{color}{text}{Colors.RESET}"


def success(text: str) -> str:
    """Green text for passed checks and authorization."""
    return _wrap(text, Colors.BRIGHT_GREEN)


def error(text: str) -> str:
    """Red text for failed checks and blocks."""
    return _wrap(text, Colors.BRIGHT_RED)


def warning(text: str) -> str:
    """Yellow text for skipped checks."""
    return _wrap(text, Colors.BRIGHT_YELLOW)


def header(text: str) -> str:
    return _wrap(text, f"{Colors.BOLD}{Colors.BLUE}")


def dim(text: str) -> str:
    return _wrap(text, Colors.GRAY)


def bold(text: str) -> str:
    return _wrap(text, Colors.BOLD)
