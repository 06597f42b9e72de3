#!/usr/bin/env python3
"""
Git operation helpers for the push gate.

Provides safe, timeout-protected, read-only git queries for:
- Getting the current branch name
- Detecting the main-line branch
- Listing commit subjects in a range
- Resolving the project root

None of these ever modify the repository.
"""
import os
import shlex
import subprocess
from typing import Optional

UNKNOWN_BRANCH = 'unknown'
DEFAULT_MAINLINE_BRANCHES = ('main', 'master')
DEFAULT_FALLBACK_COUNT = 10


def run_git(cmd: str, cwd: Optional[str] = None, timeout: float = 5) -> tuple[int, str, str]:
    """
    Run a git command safely with timeout.

    Args:
        cmd: Git command to run (e.g., "git status")
        cwd: Working directory (defaults to current)
        timeout: Seconds before the command is abandoned

    Returns:
        Tuple of (exit_code, stdout, stderr)
        - exit_code: 0 for success, non-zero for failure
        - stdout: Command output (stripped)
        - stderr: Error output (stripped)
    """
    if cwd is None:
        cwd = os.getcwd()

    try:
        result = subprocess.run(
            cmd,
            shell=True,
            capture_output=True,
            text=True,
            cwd=cwd,
            timeout=timeout,
        )
        return result.returncode, result.stdout.strip(), result.stderr.strip()
    except subprocess.TimeoutExpired:
        return -1, "", "timeout"
    except Exception as e:
        return -1, "", str(e)


def get_current_branch(project_dir: Optional[str] = None) -> Optional[str]:
    """
    Get the current git branch name.

    Args:
        project_dir: Project directory (defaults to cwd)

    Returns:
        Branch name (e.g., "feature/auth") or None if:
        - Not a git repo
        - Detached HEAD state
        - Git command failed
    """
    code, branch, _ = run_git("git symbolic-ref --short HEAD", project_dir)
    return branch if code == 0 and branch else None


def branch_exists(branch: str, project_dir: Optional[str] = None) -> bool:
    """Check if a local branch exists."""
    code, _, _ = run_git(
        f"git rev-parse --verify --quiet {shlex.quote('refs/heads/' + branch)}",
        project_dir,
    )
    return code == 0


def detect_mainline_branch(
    project_dir: Optional[str] = None,
    candidates: tuple = DEFAULT_MAINLINE_BRANCHES,
) -> Optional[str]:
    """
    Find the repository's main-line branch.

    Tries each candidate in order and returns the first that exists.

    Returns:
        Branch name, or None if no candidate exists
    """
    for candidate in candidates:
        if branch_exists(candidate, project_dir):
            return candidate
    return None


def get_commit_subjects(
    project_dir: Optional[str] = None,
    mainline: Optional[str] = None,
    fallback_count: int = DEFAULT_FALLBACK_COUNT,
) -> list[str]:
    """
    Get subjects of the commits that a push would publish.

    With a main-line branch this is `<mainline>..HEAD`; without one it is the
    most recent `fallback_count` commits. Merge commits are excluded.

    Returns:
        Commit subjects, newest first (empty list on any git failure)
    """
    if mainline:
        rev_range = shlex.quote(f"{mainline}..HEAD")
    else:
        rev_range = f"-n {int(fallback_count)} HEAD"

    code, output, _ = run_git(f"git log --no-merges --format=%s {rev_range}", project_dir)
    if code != 0 or not output:
        return []
    return [line for line in output.split('\n') if line.strip()]


def is_git_repo(project_dir: Optional[str] = None) -> bool:
    """
    Check if directory is inside a git repository.

    Args:
        project_dir: Directory to check (defaults to cwd)

    Returns:
        True if inside a git repo, False otherwise
    """
    code, _, _ = run_git("git rev-parse --git-dir", project_dir)
    return code == 0


def get_git_root(project_dir: Optional[str] = None) -> Optional[str]:
    """
    Get the root directory of the git repository.

    Args:
        project_dir: Starting directory (defaults to cwd)

    Returns:
        Absolute path to git root, or None if not in a repo
    """
    code, root, _ = run_git("git rev-parse --show-toplevel", project_dir)
    return root if code == 0 and root else None


def resolve_project_root(start_dir: Optional[str] = None) -> str:
    """
    Resolve the project directory for a hook invocation.

    Order: explicit start_dir, then CLAUDE_PROJECT_DIR, then cwd; whichever is
    chosen is lifted to its git root when it sits inside a repository.
    """
    base = start_dir or os.environ.get('CLAUDE_PROJECT_DIR') or os.getcwd()
    if not os.path.isdir(base):
        base = os.getcwd()
    return get_git_root(base) or base


if __name__ == "__main__":
    # Quick test
    print(f"Is git repo: {is_git_repo()}")
    print(f"Current branch: {get_current_branch()}")
    print(f"Main-line branch: {detect_mainline_branch()}")
    print(f"Commits to push: {get_commit_subjects(mainline=detect_mainline_branch())}")
