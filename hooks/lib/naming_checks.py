#!/usr/bin/env python3
"""
Naming checks: branch name and commit message conventions.

Both are pure pattern checks over git metadata; neither runs a toolchain.
"""
import re

from base_check import Check, RepoContext
from check_result import CheckName, CheckResult
from git_utils import UNKNOWN_BRANCH, detect_mainline_branch, get_commit_subjects


class BranchNamingCheck(Check):
    """Branch must be `<type>/<slug>`; protected branches are skipped."""

    name = CheckName.BRANCH_NAMING

    def evaluate(self, context: RepoContext) -> CheckResult:
        settings = context.config.get_check_config(self.name)
        branch = context.branch

        if not branch or branch == UNKNOWN_BRANCH:
            return CheckResult.skipped("Could not determine current branch")

        if branch in settings['protected_branches']:
            return CheckResult.skipped(f"Protected branch ({branch})")

        pattern = settings['pattern']
        if re.match(pattern, branch):
            return CheckResult.passed()

        return CheckResult.failed(
            f"Invalid branch name '{branch}'. Expected pattern: {pattern}"
        )


class CommitLintCheck(Check):
    """Every commit about to be pushed must follow Conventional Commits."""

    name = CheckName.COMMIT_LINT

    def evaluate(self, context: RepoContext) -> CheckResult:
        settings = context.config.get_check_config(self.name)

        mainline = detect_mainline_branch(
            context.working_directory,
            tuple(settings['mainline_branches']),
        )
        subjects = get_commit_subjects(
            context.working_directory,
            mainline=mainline,
            fallback_count=settings['fallback_count'],
        )
        if not subjects:
            return CheckResult.skipped("No commits to check")

        return lint_commit_subjects(subjects, settings['pattern'])


def lint_commit_subjects(subjects: list[str], pattern: str) -> CheckResult:
    """
    Lint commit subjects against a pattern.

    Returns:
        pass if all subjects conform, otherwise fail listing every
        non-conforming subject verbatim
    """
    compiled = re.compile(pattern)
    invalid = [subject for subject in subjects if not compiled.match(subject)]
    if not invalid:
        return CheckResult.passed()

    lines = [f"Invalid commit messages ({len(invalid)} of {len(subjects)}):"]
    lines.extend(f"  - {subject}" for subject in invalid)
    lines.append("Expected Conventional Commits format: type(scope)?: description")
    return CheckResult.failed("\n".join(lines))
