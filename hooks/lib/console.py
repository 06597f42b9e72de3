#!/usr/bin/env python3
"""
Console output for the human-readable push-gate report.

stdout belongs to the JSON payload the host parses, so the report never
goes there. By default it is written to stderr; config can add a plain-text
copy in a file or raise the level to silence it. Output errors are swallowed
so the report can never break the hook.
"""
from __future__ import annotations

import json
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO

from logger import LEVELS


DEFAULT_CONSOLE_CONFIG = {
    "level": "info",
    "destinations": ["stderr"],
}
DEFAULT_REPORT_FILE = Path.home() / ".claude" / "push-gate-report.log"

ANSI_ESCAPE = re.compile(r'\x1b\[[0-9;]*m')


class OutputHandler:
    """Base handler for report text."""

    def emit(self, message: str) -> None:
        raise NotImplementedError


class StreamHandler(OutputHandler):
    """Writes report text to a stream (stderr by default)."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream or sys.stderr

    def emit(self, message: str) -> None:
        try:
            self.stream.write(_ensure_trailing_newline(message))
            self.stream.flush()
        except Exception:
            pass


class FileHandler(OutputHandler):
    """Appends a colourless copy of the report to a file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def emit(self, message: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(_ensure_trailing_newline(ANSI_ESCAPE.sub('', message)))
        except OSError:
            pass


@dataclass(frozen=True)
class Console:
    """Level-aware report output."""

    level_name: str
    level: int
    handlers: tuple[OutputHandler, ...]

    def debug(self, message: str) -> None:
        self._write("debug", message)

    def info(self, message: str) -> None:
        self._write("info", message)

    def warning(self, message: str) -> None:
        self._write("warning", message)

    def error(self, message: str) -> None:
        self._write("error", message)

    def _write(self, level: str, message: str) -> None:
        if LEVELS.get(level, 0) < self.level:
            return
        for handler in self.handlers:
            try:
                handler.emit(message)
            except Exception:
                pass


def _ensure_trailing_newline(message: str) -> str:
    return message if message.endswith("\n") else f"{message}\n"


def _build_handlers(console_config: dict) -> list[OutputHandler]:
    destinations = console_config.get("destinations", DEFAULT_CONSOLE_CONFIG["destinations"])
    if isinstance(destinations, str):
        destinations = [destinations]

    handlers: list[OutputHandler] = []
    for destination in destinations or []:
        dest = str(destination or "").lower().strip()
        if dest == "stderr":
            handlers.append(StreamHandler())
        elif dest == "file":
            file_path = console_config.get("file") or DEFAULT_REPORT_FILE
            handlers.append(FileHandler(Path(file_path).expanduser()))
        # stdout is reserved for the hook payload
    return handlers


def build_console(config: Optional[dict] = None, stream: Optional[TextIO] = None) -> Console:
    """
    Build a console from the `console` config section.

    Args:
        config: Console config dict (level, destinations, file)
        stream: If given, replaces all configured destinations (tests, CLI)
    """
    merged = dict(DEFAULT_CONSOLE_CONFIG)
    if isinstance(config, dict):
        merged.update(config)

    level_name = str(merged.get("level")).lower()
    if level_name not in LEVELS:
        level_name = DEFAULT_CONSOLE_CONFIG["level"]

    if stream is not None:
        handlers = [StreamHandler(stream)]
    else:
        handlers = _build_handlers(merged)
    return Console(level_name=level_name, level=LEVELS[level_name], handlers=tuple(handlers))


def emit_json(payload: dict, stream: Optional[TextIO] = None) -> None:
    """Write the hook payload as one JSON line (stdout by default)."""
    target = stream or sys.stdout
    try:
        target.write(json.dumps(payload) + "\n")
        target.flush()
    except Exception:
        pass
