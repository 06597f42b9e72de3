#!/usr/bin/env python3
"""
Toolchain checks: lint, type check and tests.

Each probes the project for its tool, then runs it with a bounded timeout.
A tool that is absent, hangs or crashes yields `skip`, never `fail`.
"""
from typing import Optional

from base_check import RepoContext, ToolCheck
from check_result import CheckName
from manifest import Manifest, ToolAvailability, probe_lint, probe_tests, probe_typecheck


class LintCheck(ToolCheck):
    """Lint with a zero-warnings threshold."""

    name = CheckName.LINT

    def probe(self, context: RepoContext, manifest: Optional[Manifest]) -> ToolAvailability:
        return probe_lint(manifest)


class TypecheckCheck(ToolCheck):
    """Type check in no-emit mode."""

    name = CheckName.TYPECHECK

    def probe(self, context: RepoContext, manifest: Optional[Manifest]) -> ToolAvailability:
        return probe_typecheck(manifest, context.working_directory)


class TestsCheck(ToolCheck):
    """Run the project's test script in CI mode."""

    name = CheckName.TESTS
    env = {'CI': 'true'}

    # Not a pytest test class
    __test__ = False

    def probe(self, context: RepoContext, manifest: Optional[Manifest]) -> ToolAvailability:
        return probe_tests(manifest)
