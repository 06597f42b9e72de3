#!/usr/bin/env python3
"""
Project manifest access and tool availability probing.

The manifest is the project's package.json. The gate only reads it to decide
whether a toolchain check applies and how to invoke it.

ToolAvailability is the result of probing one tool. It answers "is this
check applicable, and with which command" without running anything, so
applicability can be tested separately from the verdict.
"""
import json
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

MANIFEST_FILENAME = 'package.json'
TSCONFIG_FILENAME = 'tsconfig.json'

# `npm init` writes this as the default test script
NPM_PLACEHOLDER_TEST = 'no test specified'


class ManifestError(Exception):
    """Raised when package.json exists but cannot be read."""


class Manifest:
    """Read-only view of a package.json file."""

    def __init__(self, path: Path, data: dict):
        self.path = path
        self._data = data

    @classmethod
    def load(cls, working_directory: str) -> Optional['Manifest']:
        """
        Load the manifest from a project directory.

        Returns:
            Manifest, or None if the project has no package.json

        Raises:
            ManifestError: If package.json is unreadable or not a JSON object
        """
        path = Path(working_directory) / MANIFEST_FILENAME
        if not path.is_file():
            return None

        try:
            data = json.loads(path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            raise ManifestError(f"Could not read {MANIFEST_FILENAME}: {e}") from e

        if not isinstance(data, dict):
            raise ManifestError(f"{MANIFEST_FILENAME} must contain a JSON object")
        return cls(path, data)

    @property
    def scripts(self) -> dict:
        scripts = self._data.get('scripts')
        return scripts if isinstance(scripts, dict) else {}

    @property
    def dependencies(self) -> set[str]:
        """Names from dependencies and devDependencies."""
        names = set()
        for key in ('dependencies', 'devDependencies'):
            section = self._data.get(key)
            if isinstance(section, dict):
                names.update(section.keys())
        return names

    def get_script(self, name: str) -> Optional[str]:
        script = self.scripts.get(name)
        return script if isinstance(script, str) and script.strip() else None

    def has_dependency(self, name: str) -> bool:
        return name in self.dependencies


@dataclass(frozen=True)
class ToolAvailability:
    """
    Tagged result of a tool probe.

    kind is one of NOT_CONFIGURED, CONFIGURED_VIA, DEPENDENCY_DETECTED.
    command is set for the two applicable kinds; reason explains the probe.
    """

    NOT_CONFIGURED = 'not_configured'
    CONFIGURED_VIA = 'configured_via'
    DEPENDENCY_DETECTED = 'dependency_detected'

    kind: str
    command: tuple[str, ...] = ()
    reason: str = ''

    @classmethod
    def not_configured(cls, reason: str) -> 'ToolAvailability':
        return cls(cls.NOT_CONFIGURED, (), reason)

    @classmethod
    def configured_via(cls, command: list[str], reason: str = '') -> 'ToolAvailability':
        return cls(cls.CONFIGURED_VIA, tuple(command), reason)

    @classmethod
    def dependency_detected(cls, command: list[str], reason: str = '') -> 'ToolAvailability':
        return cls(cls.DEPENDENCY_DETECTED, tuple(command), reason)

    @property
    def applicable(self) -> bool:
        return self.kind != self.NOT_CONFIGURED

    def describe(self) -> str:
        if not self.applicable:
            return self.reason
        label = 'configured' if self.kind == self.CONFIGURED_VIA else 'detected'
        return f"{label}: {' '.join(self.command)}"


def probe_lint(manifest: Optional[Manifest]) -> ToolAvailability:
    """Lint applies via a `lint` script or an eslint dependency."""
    if manifest is None:
        return ToolAvailability.not_configured(f"No {MANIFEST_FILENAME} found")
    if manifest.get_script('lint'):
        return ToolAvailability.configured_via(
            ['npm', 'run', 'lint', '--', '--max-warnings=0'],
            reason="lint script",
        )
    if manifest.has_dependency('eslint'):
        return ToolAvailability.dependency_detected(
            ['npx', '--no-install', 'eslint', '.', '--max-warnings=0'],
            reason="eslint dependency",
        )
    return ToolAvailability.not_configured("No lint script or eslint dependency")


def find_typescript_compiler(working_directory: str) -> Optional[str]:
    """Locate tsc: project-local node_modules first, then PATH."""
    root = Path(working_directory) / 'node_modules' / '.bin'
    for name in ('tsc', 'tsc.cmd'):
        local = root / name
        if local.is_file():
            return str(local)
    return shutil.which('tsc')


def probe_typecheck(manifest: Optional[Manifest], working_directory: str) -> ToolAvailability:
    """Type checking applies when tsconfig.json exists and TypeScript can run."""
    if not (Path(working_directory) / TSCONFIG_FILENAME).is_file():
        return ToolAvailability.not_configured(f"No {TSCONFIG_FILENAME} found")

    if manifest is not None:
        for script in ('typecheck', 'type-check'):
            if manifest.get_script(script):
                return ToolAvailability.configured_via(['npm', 'run', script], reason=f"{script} script")

    tsc = find_typescript_compiler(working_directory)
    if tsc is None:
        return ToolAvailability.not_configured("TypeScript is not installed")
    return ToolAvailability.dependency_detected([tsc, '--noEmit'], reason="typescript compiler")


def probe_tests(manifest: Optional[Manifest]) -> ToolAvailability:
    """Tests apply when a real (non-placeholder) `test` script exists."""
    if manifest is None:
        return ToolAvailability.not_configured(f"No {MANIFEST_FILENAME} found")
    script = manifest.get_script('test')
    if script is None:
        return ToolAvailability.not_configured("No test script")
    if NPM_PLACEHOLDER_TEST in script.lower():
        return ToolAvailability.not_configured("Test script is the npm placeholder")
    return ToolAvailability.configured_via(['npm', 'test'], reason="test script")


def probe_audit(manifest: Optional[Manifest]) -> ToolAvailability:
    """Dependency audit applies to any project with a manifest."""
    if manifest is None:
        return ToolAvailability.not_configured(f"No {MANIFEST_FILENAME} found")
    return ToolAvailability.dependency_detected(
        ['npm', 'audit', '--audit-level=high'],
        reason="npm manifest",
    )
