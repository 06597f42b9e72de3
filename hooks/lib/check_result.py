#!/usr/bin/env python3
"""
Core data types for the push gate.

A push attempt produces one PipelineRun: the branch it ran on plus exactly one
CheckResult per check in CHECK_ORDER. The GateDecision is derived from the
results and never stored.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


class CheckStatus:
    """Tri-state verdict values (plus the transient initial state)."""

    PENDING = 'pending'
    PASS = 'pass'
    FAIL = 'fail'
    SKIP = 'skip'

    FINAL = frozenset({PASS, FAIL, SKIP})


class CheckName:
    """Names of the six fixed checks."""

    BRANCH_NAMING = 'branch_naming'
    COMMIT_LINT = 'commit_lint'
    LINT = 'lint'
    TYPECHECK = 'typecheck'
    TESTS = 'tests'
    SECURITY = 'security'


# Execution and reporting order
CHECK_ORDER = (
    CheckName.BRANCH_NAMING,
    CheckName.COMMIT_LINT,
    CheckName.LINT,
    CheckName.TYPECHECK,
    CheckName.TESTS,
    CheckName.SECURITY,
)

CHECK_TITLES = {
    CheckName.BRANCH_NAMING: 'Branch naming',
    CheckName.COMMIT_LINT: 'Commit messages',
    CheckName.LINT: 'Lint',
    CheckName.TYPECHECK: 'Type check',
    CheckName.TESTS: 'Tests',
    CheckName.SECURITY: 'Security audit',
}


def check_title(name: str) -> str:
    """Human-readable title for a check name."""
    return CHECK_TITLES.get(name, name)


@dataclass(frozen=True)
class CheckResult:
    """Outcome of a single check."""

    status: str = CheckStatus.PENDING
    message: str = ''

    @classmethod
    def passed(cls) -> 'CheckResult':
        return cls(CheckStatus.PASS, '')

    @classmethod
    def failed(cls, message: str) -> 'CheckResult':
        return cls(CheckStatus.FAIL, message)

    @classmethod
    def skipped(cls, reason: str) -> 'CheckResult':
        return cls(CheckStatus.SKIP, reason)

    @property
    def is_final(self) -> bool:
        return self.status in CheckStatus.FINAL


@dataclass(frozen=True)
class GateDecision:
    """Allow/block decision plus the aggregated reason for a block."""

    allowed: bool
    reason: str = ''


@dataclass(frozen=True)
class PipelineRun:
    """
    Immutable record of one pipeline execution.

    Attributes:
        branch: Branch the checks ran against (resolved once)
        results: Mapping of check name -> CheckResult, in CHECK_ORDER
    """

    branch: str
    results: Mapping[str, CheckResult] = field(default_factory=dict)

    def __post_init__(self):
        ordered = {name: self.results[name] for name in CHECK_ORDER if name in self.results}
        for name, result in self.results.items():
            if name not in ordered:
                ordered[name] = result
        object.__setattr__(self, 'results', MappingProxyType(ordered))

    def _with_status(self, status: str) -> list[tuple[str, CheckResult]]:
        return [(name, result) for name, result in self.results.items() if result.status == status]

    @property
    def passed(self) -> list[tuple[str, CheckResult]]:
        return self._with_status(CheckStatus.PASS)

    @property
    def skipped(self) -> list[tuple[str, CheckResult]]:
        return self._with_status(CheckStatus.SKIP)

    @property
    def failed(self) -> list[tuple[str, CheckResult]]:
        return self._with_status(CheckStatus.FAIL)

    @property
    def decision(self) -> GateDecision:
        """Block iff at least one check failed; skips never block."""
        failures = self.failed
        if not failures:
            return GateDecision(allowed=True)

        parts = [f"Push blocked: {len(failures)} check(s) failed on branch '{self.branch}'."]
        for name, result in failures:
            parts.append(f"[{name}] {check_title(name)}: {result.message}")
        return GateDecision(allowed=False, reason="\n\n".join(parts))
