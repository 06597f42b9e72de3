#!/usr/bin/env python3
"""
Base class for push-gate checks.

Each check is a total function from RepoContext to CheckResult. Subclasses
implement evaluate(); run() wraps it so that a disabled check, an exception
or a malformed verdict can never escape as anything but a `skip`.
"""
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from check_result import CheckResult, check_title
from config import GateConfig
from manifest import Manifest, ToolAvailability
from process_utils import CommandResult, CommandRunner, run_command, truncate_output

# Display bound for toolchain output in failure messages
MAX_OUTPUT_CHARS = 2000

# Shell exit status for "command not found"
EXIT_COMMAND_NOT_FOUND = 127
NPX_MISSING_MARKER = re.compile(r'could not determine executable to run', re.IGNORECASE)


@dataclass(frozen=True)
class RepoContext:
    """
    Everything a check may look at, resolved once per pipeline run.

    Attributes:
        working_directory: Project root every command runs in
        branch: Current branch (git_utils.UNKNOWN_BRANCH if unresolvable)
        config: Loaded push-gate configuration
        runner: Command runner (injectable for tests)
    """

    working_directory: str
    branch: str
    config: GateConfig
    runner: CommandRunner = field(default=run_command)

    def run(
        self,
        command: Sequence[str],
        timeout: float,
        env: Optional[Mapping[str, str]] = None,
    ) -> CommandResult:
        """Run a command in the working directory."""
        return self.runner(list(command), cwd=self.working_directory, timeout=timeout, env=env)


class Check(ABC):
    """
    Abstract base class for push-gate checks.

    Subclasses set `name` (a CheckName) and implement evaluate().
    """

    name: str = ''

    @property
    def title(self) -> str:
        return check_title(self.name)

    def run(self, context: RepoContext) -> CheckResult:
        """
        Run the check. Never raises.

        Returns:
            CheckResult with a final status (pass/fail/skip)
        """
        if not context.config.is_check_enabled(self.name):
            return CheckResult.skipped("Disabled in push-gate config")

        try:
            result = self.evaluate(context)
        except Exception as e:
            return CheckResult.skipped(f"Check error: {e}")

        if not isinstance(result, CheckResult) or not result.is_final:
            return CheckResult.skipped("Check produced no verdict")
        return result

    @abstractmethod
    def evaluate(self, context: RepoContext) -> CheckResult:
        """
        Compute the verdict for this check.

        May raise; run() downgrades any exception to a skip.
        """


class ToolCheck(Check):
    """
    Check that runs an external tool.

    Subclasses implement probe(); evaluate() turns the probe into a command
    run, honouring a configured command override and the check timeout.
    """

    env: Optional[Mapping[str, str]] = None

    @abstractmethod
    def probe(self, context: RepoContext, manifest: Optional[Manifest]) -> ToolAvailability:
        """Decide whether and how the tool applies, without running it."""

    def availability(self, context: RepoContext) -> ToolAvailability:
        """Probe result, with any configured command taking precedence."""
        override = context.config.get_command_override(self.name)
        if override:
            return ToolAvailability.configured_via(override, reason="push-gate config")
        return self.probe(context, Manifest.load(context.working_directory))

    def evaluate(self, context: RepoContext) -> CheckResult:
        availability = self.availability(context)
        if not availability.applicable:
            return CheckResult.skipped(availability.reason)

        result = context.run(
            availability.command,
            timeout=context.config.get_timeout(self.name),
            env=self.env,
        )
        fault = result.fault_message()
        if fault:
            return CheckResult.skipped(fault)
        return self.verdict(result)

    def verdict(self, result: CommandResult) -> CheckResult:
        """Map a completed command to a verdict (exit code by default)."""
        if result.returncode == 0:
            return CheckResult.passed()
        missing = missing_tool_reason(result)
        if missing:
            return CheckResult.skipped(missing)
        output = truncate_output(result.output, MAX_OUTPUT_CHARS)
        header = f"{' '.join(result.command)} exited with code {result.returncode}"
        return CheckResult.failed(f"{header}\n{output}" if output else header)


def missing_tool_reason(result: CommandResult) -> str:
    """
    Detect a script or npx wrapper whose underlying tool is not installed.

    npm scripts run through a shell, so a missing binary surfaces as exit
    code 127 rather than as FileNotFoundError; `npx --no-install` reports it
    in its output instead.

    Returns:
        Skip reason, or '' if the tool ran
    """
    if result.returncode == EXIT_COMMAND_NOT_FOUND or NPX_MISSING_MARKER.search(result.output):
        first_line = result.output.splitlines()[0] if result.output else ''
        reason = f"Toolchain for '{' '.join(result.command)}' is not installed"
        return f"{reason}: {first_line}" if first_line else reason
    return ''
