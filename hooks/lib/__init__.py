"""
Push Gate Library

Local pre-flight verification for `git push`, run as a Claude Code
PreToolUse hook. Six checks always run in a fixed order; any failure blocks
the push, skips never do.

Architecture:
- check_result.py: CheckResult, PipelineRun, GateDecision
- trigger.py: Push command detection
- config.py: Configuration loading (global → project → local)
- git_utils.py: Read-only git queries
- manifest.py: package.json access and ToolAvailability probes
- process_utils.py: Timeout-bounded subprocess execution
- base_check.py / naming_checks.py / toolchain_checks.py / audit_check.py: Checks
- check_registry.py: Ordered check list
- pipeline.py: Sequential runner and gate
- report.py: Human-readable report

Usage:
    from config import GateConfig
    from pipeline import build_context, run_pipeline

    config = GateConfig('/path/to/project')
    run = run_pipeline(build_context('/path/to/project', config))
    if not run.decision.allowed:
        print(run.decision.reason)
"""

__version__ = "1.0.0"
