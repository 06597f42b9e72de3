#!/usr/bin/env python3
"""
Dependency audit check.

npm audit exits nonzero for findings below the requested level on some npm
versions and for its own errors (no lockfile, registry unreachable). Only
high/critical findings fail the push. A nonzero exit is a clean `pass` only
when the audit actually produced a vulnerability report; otherwise the audit
could not run and the result is `skip`.
"""
import re
from typing import Optional

from base_check import RepoContext, ToolCheck
from check_result import CheckName, CheckResult
from manifest import Manifest, ToolAvailability, probe_audit
from process_utils import CommandResult, truncate_output

MAX_AUDIT_OUTPUT_CHARS = 500

SEVERE_MARKER = re.compile(r'\b(high|critical)\b', re.IGNORECASE)
REPORT_MARKER = re.compile(r'vulnerabilit(y|ies)|severity', re.IGNORECASE)


class SecurityAuditCheck(ToolCheck):
    """Fail only on high or critical advisories."""

    name = CheckName.SECURITY

    def probe(self, context: RepoContext, manifest: Optional[Manifest]) -> ToolAvailability:
        return probe_audit(manifest)

    def verdict(self, result: CommandResult) -> CheckResult:
        if result.returncode == 0:
            return CheckResult.passed()

        output = result.output
        if SEVERE_MARKER.search(output):
            return CheckResult.failed(
                "High or critical vulnerabilities found:\n"
                + truncate_output(output, MAX_AUDIT_OUTPUT_CHARS)
            )

        if REPORT_MARKER.search(output):
            # Findings below the blocking threshold
            return CheckResult.passed()

        detail = truncate_output(output, MAX_AUDIT_OUTPUT_CHARS)
        reason = f"Audit could not complete (exit code {result.returncode})"
        return CheckResult.skipped(f"{reason}: {detail}" if detail else reason)
