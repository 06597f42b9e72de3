#!/usr/bin/env python3
"""
Timeout-protected subprocess execution for toolchain checks.

run_command() never raises: a missing binary, a timeout and any other OS
error are each reported through CommandResult so callers can tell
"not installed" apart from "hung" apart from "crashed".
"""
import os
import subprocess
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Sequence


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command."""

    command: tuple[str, ...]
    returncode: Optional[int] = None
    stdout: str = ''
    stderr: str = ''
    timed_out: bool = False
    not_found: bool = False
    error: str = ''
    timeout: Optional[float] = None

    @property
    def ran(self) -> bool:
        """True if the command ran to completion and produced an exit code."""
        return self.returncode is not None and not self.timed_out

    @property
    def ok(self) -> bool:
        return self.ran and self.returncode == 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr, stripped."""
        parts = [p.strip() for p in (self.stdout, self.stderr) if p and p.strip()]
        return "\n".join(parts)

    def fault_message(self) -> str:
        """Describe why the command could not produce a verdict ('' if it ran)."""
        program = self.command[0] if self.command else 'command'
        if self.not_found:
            return f"{program} is not installed"
        if self.timed_out:
            seconds = f"{self.timeout:g}s" if self.timeout is not None else "its limit"
            return f"{program} timed out after {seconds}"
        if self.error:
            return f"Could not run {program}: {self.error}"
        return ''


# Signature of the command runner injected into RepoContext
CommandRunner = Callable[..., CommandResult]


def _decode(value) -> str:
    if value is None:
        return ''
    if isinstance(value, bytes):
        return value.decode('utf-8', errors='replace')
    return value


def run_command(
    command: Sequence[str],
    cwd: str,
    timeout: float,
    env: Optional[Mapping[str, str]] = None,
) -> CommandResult:
    """
    Run a command with captured output and a hard timeout.

    Args:
        command: Argument vector (no shell)
        cwd: Working directory for the command
        timeout: Seconds before the command is killed
        env: Extra environment variables layered over os.environ

    Returns:
        CommandResult (never raises)
    """
    argv = tuple(command)
    full_env = None
    if env:
        full_env = os.environ.copy()
        full_env.update(env)

    try:
        result = subprocess.run(
            list(argv),
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            env=full_env,
        )
        return CommandResult(
            command=argv,
            returncode=result.returncode,
            stdout=result.stdout or '',
            stderr=result.stderr or '',
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        return CommandResult(
            command=argv,
            stdout=_decode(e.stdout),
            stderr=_decode(e.stderr),
            timed_out=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        return CommandResult(command=argv, not_found=True, timeout=timeout)
    except (OSError, ValueError, subprocess.SubprocessError) as e:
        return CommandResult(command=argv, error=str(e), timeout=timeout)


TRUNCATION_MARKER = "\n... (output truncated)"


def truncate_output(text: str, limit: int) -> str:
    """Bound tool output for display; the result, marker included, fits in `limit`."""
    text = (text or '').strip()
    if len(text) <= limit:
        return text
    keep = max(limit - len(TRUNCATION_MARKER), 0)
    return text[:keep].rstrip() + TRUNCATION_MARKER
