#!/usr/bin/env python3
"""
Human-readable push-gate report.

Layout, in emission order:
1. Header (once, before the first check)
2. One progress line per check, written as soon as that check finishes
3. Summary grouping passed / skipped / failed
4. Either a PUSH BLOCKED section with every failure message in full,
   or a PUSH AUTHORIZED confirmation

The render_* functions are pure; ReportWriter sends them to a Console.
"""
from check_result import CheckResult, CheckStatus, PipelineRun, check_title
from colors import bold, dim, error, header, success, warning
from console import Console

RULE = '─' * 60

MARKERS = {
    CheckStatus.PASS: '✅',
    CheckStatus.FAIL: '❌',
    CheckStatus.SKIP: '⏭️ ',
}


def _paint(status: str, text: str) -> str:
    if status == CheckStatus.PASS:
        return success(text)
    if status == CheckStatus.FAIL:
        return error(text)
    return warning(text)


def render_header(branch: str) -> str:
    return "\n".join([
        "",
        header(f"🔒 Push gate: verifying branch '{branch}'"),
        dim(RULE),
    ])


def render_progress(name: str, result: CheckResult) -> str:
    """One line per check; skips carry their reason, fails point below."""
    marker = MARKERS.get(result.status, '•')
    line = f"  {marker} {check_title(name)}"
    if result.status == CheckStatus.SKIP and result.message:
        line += dim(f" (skipped: {result.message.splitlines()[0]})")
    elif result.status == CheckStatus.FAIL:
        line += dim(" (failed, see below)")
    return _paint(result.status, line) if result.status != CheckStatus.SKIP else line


def render_summary(run: PipelineRun) -> str:
    passed, skipped, failed = run.passed, run.skipped, run.failed
    lines = [
        "",
        dim(RULE),
        bold(f"Summary: {len(passed)} passed, {len(skipped)} skipped, {len(failed)} failed"),
    ]
    if passed:
        lines.append(success("  Passed:  ") + ", ".join(check_title(n) for n, _ in passed))
    if skipped:
        lines.append(warning("  Skipped: ") + ", ".join(check_title(n) for n, _ in skipped))
    if failed:
        lines.append(error("  Failed:  ") + ", ".join(check_title(n) for n, _ in failed))
    return "\n".join(lines)


def render_verdict(run: PipelineRun) -> str:
    failed = run.failed
    if not failed:
        return "\n".join([
            "",
            success("✅ PUSH AUTHORIZED: no check failed"),
            "",
        ])

    lines = ["", error(f"🚫 PUSH BLOCKED: {len(failed)} check(s) failed"), ""]
    for name, result in failed:
        lines.append(error(f"❌ {check_title(name)}"))
        for message_line in result.message.splitlines() or ['']:
            lines.append(f"   {message_line}")
        lines.append("")
    lines.append(dim("Fix the issues above and push again."))
    lines.append("")
    return "\n".join(lines)


def summary_line(run: PipelineRun) -> str:
    """Plain one-line outcome for the host payload on allow."""
    return (
        f"Push gate passed on '{run.branch}': {len(run.passed)} passed, "
        f"{len(run.skipped)} skipped, {len(run.failed)} failed."
    )


def render_report(run: PipelineRun) -> str:
    """Whole report at once (CLI and tests)."""
    parts = [render_header(run.branch)]
    parts.extend(render_progress(name, result) for name, result in run.results.items())
    parts.append(render_summary(run))
    parts.append(render_verdict(run))
    return "\n".join(parts)


class ReportWriter:
    """Writes the report incrementally to a Console."""

    def __init__(self, console: Console):
        self.console = console

    def start(self, branch: str) -> None:
        self.console.info(render_header(branch))

    def progress(self, check, result: CheckResult) -> None:
        """Pipeline progress callback."""
        self.console.info(render_progress(check.name, result))

    def finish(self, run: PipelineRun) -> None:
        self.console.info(render_summary(run))
        self.console.info(render_verdict(run))
