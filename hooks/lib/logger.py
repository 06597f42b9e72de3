#!/usr/bin/env python3
"""
Structured JSON-lines logging for the push gate.

One JSON object per line, appended to ~/.claude/push-gate.log by default.
A stderr destination exists for debugging; stdout is never a destination
because it carries the hook's payload.

Usage:
    logger = get_logger(config.get_logging_config(), {"hook": "PreToolUse"})
    logger = logger.bind(branch="feature/x")
    with logger.timed("Gate finished", level="info") as fields:
        run = run_pipeline(context)
        fields["allowed"] = run.decision.allowed
"""
import json
import sys
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Iterator, Optional


LEVELS = {
    "debug": 10,
    "info": 20,
    "warning": 30,
    "error": 40,
}

DEFAULT_LOG_FILE = Path.home() / ".claude" / "push-gate.log"


class Handler:
    """Base handler for emitting log records."""

    def emit(self, record: dict) -> None:
        raise NotImplementedError


class StreamHandler(Handler):
    """Writes JSON records to a stream (stderr by default)."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stderr

    def emit(self, record: dict) -> None:
        try:
            self.stream.write(json.dumps(record, default=str) + "\n")
            self.stream.flush()
        except Exception:
            pass


class FileHandler(Handler):
    """Appends JSON records to a file, creating its directory on first write."""

    def __init__(self, path: Path):
        self.path = path

    def emit(self, record: dict) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(record, default=str) + "\n")
        except OSError:
            pass


class JsonLogger:
    """Level-filtered JSON logger with bound context fields."""

    def __init__(
        self,
        level: str = "error",
        handlers: Optional[Iterable[Handler]] = None,
        context: Optional[dict] = None,
    ) -> None:
        self.level_name = str(level).lower()
        self.level = LEVELS.get(self.level_name, LEVELS["error"])
        self.handlers = list(handlers) if handlers else []
        self.context = context or {}

    def bind(self, **context: object) -> "JsonLogger":
        """Return a new logger with additional context fields (None values dropped)."""
        merged = self.context.copy()
        merged.update({k: v for k, v in context.items() if v is not None})
        return JsonLogger(self.level_name, self.handlers, merged)

    def debug(self, message: str, **fields: object) -> None:
        self._log("debug", message, fields)

    def info(self, message: str, **fields: object) -> None:
        self._log("info", message, fields)

    def warning(self, message: str, **fields: object) -> None:
        self._log("warning", message, fields)

    def error(self, message: str, **fields: object) -> None:
        self._log("error", message, fields)

    @contextmanager
    def timed(self, message: str, level: str = "debug", **fields: object) -> Iterator[dict]:
        """
        Log one record when the block exits, with its duration in ms.

        The yielded dict can be filled with result fields inside the block.
        """
        extra = dict(fields)
        start = time.monotonic()
        try:
            yield extra
        finally:
            extra["duration_ms"] = int((time.monotonic() - start) * 1000)
            self._log(level, message, extra)

    def _log(self, level: str, message: str, fields: dict) -> None:
        if LEVELS.get(level, 0) < self.level:
            return

        record = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": level,
            "message": message,
        }
        record.update(self.context)
        record.update({k: v for k, v in fields.items() if v is not None})

        for handler in self.handlers:
            try:
                handler.emit(record)
            except Exception:
                pass


def _build_handlers(logging_config: dict) -> list[Handler]:
    destinations = logging_config.get("destinations", ["file"])
    if isinstance(destinations, str):
        destinations = [destinations]

    handlers: list[Handler] = []
    for destination in destinations or []:
        dest = str(destination or "").lower().strip()
        if dest == "stderr":
            handlers.append(StreamHandler())
        elif dest == "file":
            file_path = logging_config.get("file") or DEFAULT_LOG_FILE
            handlers.append(FileHandler(Path(file_path).expanduser()))
    return handlers


def get_logger(logging_config: Optional[dict] = None, base_context: Optional[dict] = None) -> JsonLogger:
    """
    Create a configured JsonLogger.

    Args:
        logging_config: The `logging` config section (level, destinations, file)
        base_context: Fields included in every record

    Returns:
        JsonLogger with configured handlers
    """
    cfg = logging_config or {}
    return JsonLogger(
        level=cfg.get("level", "error"),
        handlers=_build_handlers(cfg),
        context=base_context or {},
    )
