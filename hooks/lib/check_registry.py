#!/usr/bin/env python3
"""
Check registry - the fixed, ordered list of push-gate checks.

This module sits at the top of the dependency graph and instantiates all
concrete checks. Checks are stateless, so single instances are shared.
"""

from audit_check import SecurityAuditCheck
from naming_checks import BranchNamingCheck, CommitLintCheck
from toolchain_checks import LintCheck, TestsCheck, TypecheckCheck


CHECKS = (
    BranchNamingCheck(),
    CommitLintCheck(),
    LintCheck(),
    TypecheckCheck(),
    TestsCheck(),
    SecurityAuditCheck(),
)
