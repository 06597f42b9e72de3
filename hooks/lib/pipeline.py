#!/usr/bin/env python3
"""
Push-gate pipeline.

Runs every registered check, in order, with no short-circuiting, and
collects the verdicts into an immutable PipelineRun. Checks share nothing
but the read-only RepoContext.
"""
import time
from typing import Callable, Iterable, Optional

from base_check import Check, RepoContext
from check_registry import CHECKS
from check_result import CheckResult, PipelineRun
from config import GateConfig
from console import Console
from git_utils import UNKNOWN_BRANCH, get_current_branch
from logger import JsonLogger, get_logger
from process_utils import CommandRunner, run_command
from report import ReportWriter

# Called as each check finishes: (check, result)
ProgressCallback = Callable[[Check, CheckResult], None]


def build_context(
    working_directory: str,
    config: GateConfig,
    runner: CommandRunner = run_command,
    branch: Optional[str] = None,
) -> RepoContext:
    """
    Resolve the per-run context.

    The branch is read once here; `unknown` stands in when it cannot be
    determined (not a repo, detached HEAD, git failure).
    """
    if branch is None:
        branch = get_current_branch(working_directory) or UNKNOWN_BRANCH
    return RepoContext(
        working_directory=working_directory,
        branch=branch,
        config=config,
        runner=runner,
    )


def run_pipeline(
    context: RepoContext,
    checks: Iterable[Check] = CHECKS,
    on_result: Optional[ProgressCallback] = None,
) -> PipelineRun:
    """
    Run all checks sequentially and collect their verdicts.

    Args:
        context: Resolved repository context
        checks: Checks to run, in reporting order
        on_result: Optional progress callback, invoked after each check

    Returns:
        PipelineRun holding exactly one final result per check
    """
    results = {}
    for check in checks:
        result = check.run(context)
        results[check.name] = result
        if on_result is not None:
            try:
                on_result(check, result)
            except Exception:
                # Progress output must not abort the remaining checks
                pass

    return PipelineRun(branch=context.branch, results=results)


def run_gate(
    working_directory: str,
    config: GateConfig,
    console: Console,
    logger: Optional[JsonLogger] = None,
    runner: CommandRunner = run_command,
) -> PipelineRun:
    """
    Run the full gate with incremental report output.

    Writes header, progress lines, summary and verdict to the console and
    logs one record per check.
    """
    context = build_context(working_directory, config, runner=runner)
    logger = (logger or get_logger()).bind(branch=context.branch, project_dir=working_directory)
    writer = ReportWriter(console)
    last_finished = time.monotonic()

    def on_result(check: Check, result: CheckResult) -> None:
        nonlocal last_finished
        now = time.monotonic()
        writer.progress(check, result)
        logger.debug(
            "Check finished",
            check=check.name,
            status=result.status,
            duration_ms=int((now - last_finished) * 1000),
        )
        last_finished = now

    writer.start(context.branch)
    with logger.timed("Gate finished", level="info") as fields:
        run = run_pipeline(context, on_result=on_result)
        fields["allowed"] = run.decision.allowed
        fields["failed"] = [name for name, _ in run.failed]
        fields["skipped"] = [name for name, _ in run.skipped]
    writer.finish(run)
    return run
