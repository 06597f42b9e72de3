#!/usr/bin/env python3
"""
Configuration loading for the push gate.

Implements cascading configuration:
1. Global defaults (~/.claude/push-gate.yaml)
2. Project config (.claude/push-gate.yaml) - committed to repo
3. Local overrides (.claude/push-gate.local.yaml) - gitignored

Every key has a built-in default, so the gate runs without any config file.
Invalid per-check settings are reported and replaced by their defaults.
"""
import copy
import re
import shlex
import sys
from pathlib import Path
from typing import Optional, TextIO

import yaml

from check_result import CHECK_ORDER, CheckName
from trigger import DEFAULT_PUSH_PATTERN

CONFIG_FILENAME = 'push-gate.yaml'
LOCAL_CONFIG_FILENAME = 'push-gate.local.yaml'

BRANCH_PATTERN = r'^(feature|bugfix|hotfix|release|chore|docs|refactor|test)/[a-z0-9._-]+$'
COMMIT_PATTERN = (
    r'^(feat|fix|docs|style|refactor|perf|test|build|ci|chore|revert)'
    r'(\([^)]+\))?!?: .+$'
)

DEFAULT_CONFIG = {
    'enabled': True,
    'trigger': {
        'command_pattern': DEFAULT_PUSH_PATTERN,
    },
    'checks': {
        CheckName.BRANCH_NAMING: {
            'enabled': True,
            'pattern': BRANCH_PATTERN,
            'protected_branches': ['main', 'master', 'develop'],
        },
        CheckName.COMMIT_LINT: {
            'enabled': True,
            'pattern': COMMIT_PATTERN,
            'mainline_branches': ['main', 'master'],
            'fallback_count': 10,
        },
        CheckName.LINT: {'enabled': True, 'timeout': 60, 'command': None},
        CheckName.TYPECHECK: {'enabled': True, 'timeout': 120, 'command': None},
        CheckName.TESTS: {'enabled': True, 'timeout': 300, 'command': None},
        CheckName.SECURITY: {'enabled': True, 'timeout': 60, 'command': None},
    },
    'logging': {
        'level': 'error',
        'destinations': ['file'],
    },
    'console': {
        'level': 'info',
        'destinations': ['stderr'],
    },
}

# field -> (accepted types, description used in error messages)
CHECK_SCHEMA = {
    'enabled': ((bool,), 'a boolean'),
    'timeout': ((int, float), 'a positive number'),
    'command': ((str, list, type(None)), 'a string or list of strings'),
    'pattern': ((str,), 'a regular expression string'),
    'protected_branches': ((list,), 'a list of branch names'),
    'mainline_branches': ((list,), 'a list of branch names'),
    'fallback_count': ((int,), 'a positive integer'),
}


class ConfigFileError(Exception):
    """Raised when a config file exists but cannot be used."""


def load_yaml(path: Path) -> dict:
    """
    Load a YAML config file.

    Args:
        path: Path to config file

    Returns:
        Parsed config dictionary (empty dict if the file does not exist)

    Raises:
        ConfigFileError: If the file is unreadable, unparseable or not a mapping
    """
    if not path.exists():
        return {}

    try:
        data = yaml.safe_load(path.read_text(encoding='utf-8'))
    except yaml.YAMLError as e:
        raise ConfigFileError(f"YAML parse error in {path}: {e}") from e
    except OSError as e:
        raise ConfigFileError(f"Could not load {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(f"Ignoring {path}: expected a mapping, got {type(data).__name__}")
    return data



def deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge override into base dictionary.

    Recursively merges nested dictionaries. Non-dict values are replaced.

    Args:
        base: Base dictionary (modified in place)
        override: Dictionary with values to merge

    Returns:
        Merged dictionary (same as base)
    """
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def global_config_path() -> Path:
    return Path.home() / '.claude' / CONFIG_FILENAME


class GateConfig:
    """
    Configuration manager for the push gate.

    Loads and merges configuration from global, project, and local sources
    on top of DEFAULT_CONFIG. Problems are collected in `warnings` rather
    than printed, so callers decide whether the user sees them.
    """

    def __init__(self, project_dir: str):
        """
        Initialize config for project.

        Args:
            project_dir: Project root directory
        """
        self.project_dir = project_dir
        self.validation_errors: list[str] = []
        self.warnings: list[str] = []
        self.sources: list[str] = []
        self._config = self._load_cascade()

    def _load_cascade(self) -> dict:
        """
        Load configuration cascade: defaults → global → project → local.

        Returns:
            Merged and validated configuration dictionary
        """
        config = copy.deepcopy(DEFAULT_CONFIG)

        # 1. Global defaults
        global_file = global_config_path()
        global_config = self._read(global_file)
        if global_config:
            deep_merge(config, global_config)
            self.sources.append(str(global_file))

        # 2. Project config (versioned)
        project_file = Path(self.project_dir) / '.claude' / CONFIG_FILENAME
        project_config = self._read(project_file)
        if project_config:
            if not project_config.get('inherit', True):
                # Replace global layer entirely (defaults still apply)
                config = copy.deepcopy(DEFAULT_CONFIG)
                self.sources = []
            deep_merge(config, project_config)
            self.sources.append(str(project_file))

        # 3. Local overrides (gitignored)
        local_file = Path(self.project_dir) / '.claude' / LOCAL_CONFIG_FILENAME
        local_config = self._read(local_file)
        if local_config:
            deep_merge(config, local_config)
            self.sources.append(str(local_file))

        self._validate(config)
        return config

    def _read(self, path: Path) -> dict:
        try:
            return load_yaml(path)
        except ConfigFileError as e:
            self.warnings.append(str(e))
            return {}

    def _validate(self, config: dict) -> None:
        """Validate in place, resetting invalid sections to defaults (fail-safe)."""
        if not isinstance(config.get('enabled'), bool):
            self._error(f"'enabled' must be a boolean, got {config.get('enabled')!r}")
            config['enabled'] = DEFAULT_CONFIG['enabled']

        trigger = config.get('trigger')
        pattern = trigger.get('command_pattern') if isinstance(trigger, dict) else None
        if not isinstance(pattern, str) or not _is_valid_regex(pattern):
            self._error(f"trigger.command_pattern is not a valid regex: {pattern!r}")
            config['trigger'] = copy.deepcopy(DEFAULT_CONFIG['trigger'])

        checks = config.get('checks')
        if not isinstance(checks, dict):
            self._error("'checks' must be a mapping")
            config['checks'] = copy.deepcopy(DEFAULT_CONFIG['checks'])
            return

        for name in list(checks.keys()):
            if name not in CHECK_ORDER:
                self._error(f"Unknown check '{name}' (known: {', '.join(CHECK_ORDER)})")
                del checks[name]

        for name in CHECK_ORDER:
            try:
                self._validate_check(name, checks.get(name))
            except ValueError as e:
                self._error(f"{e}; using defaults for this check")
                checks[name] = copy.deepcopy(DEFAULT_CONFIG['checks'][name])

        for section in ('logging', 'console'):
            if not isinstance(config.get(section), dict):
                self._error(f"'{section}' must be a mapping")
                config[section] = copy.deepcopy(DEFAULT_CONFIG[section])

    def _validate_check(self, name: str, check_config: object) -> None:
        """
        Validate one check's configuration.

        Raises:
            ValueError: If configuration is invalid
        """
        if not isinstance(check_config, dict):
            raise ValueError(f"Check '{name}' config must be a mapping")

        for field_name, value in check_config.items():
            rules = CHECK_SCHEMA.get(field_name)
            if rules is None:
                raise ValueError(f"Check '{name}' has unknown field '{field_name}'")

            types, description = rules
            # bool is an int subclass; reject it for numeric fields
            if not isinstance(value, types) or (isinstance(value, bool) and bool not in types):
                raise ValueError(f"Check '{name}' field '{field_name}' must be {description}")

            if field_name in ('timeout', 'fallback_count') and value <= 0:
                raise ValueError(f"Check '{name}' field '{field_name}' must be {description}")

            if field_name == 'pattern' and not _is_valid_regex(value):
                raise ValueError(f"Check '{name}' pattern is not a valid regex: {value!r}")

            if field_name == 'command' and isinstance(value, list):
                if not value or not all(isinstance(part, str) for part in value):
                    raise ValueError(f"Check '{name}' field 'command' must be {description}")

            if field_name.endswith('_branches'):
                if not all(isinstance(branch, str) for branch in value):
                    raise ValueError(f"Check '{name}' field '{field_name}' must contain only strings")

    def _error(self, message: str) -> None:
        self.validation_errors.append(message)
        self.warnings.append(f"Push-gate config validation error: {message}")

    def emit_warnings(self, stream: Optional[TextIO] = None) -> None:
        """Print collected config problems (stderr by default)."""
        target = stream or sys.stderr
        for warning in self.warnings:
            print(f"⚠️ {warning}", file=target)

    def get_validation_errors(self) -> list[str]:
        """Return any validation errors encountered while loading config."""
        return list(self.validation_errors)

    def is_enabled(self) -> bool:
        """Check if the gate is enabled for this project."""
        return self._config.get('enabled', True)

    def get_trigger_pattern(self) -> str:
        return self._config['trigger']['command_pattern']

    def get_check_config(self, name: str) -> dict:
        """Get merged config for a check (defaults filled in)."""
        merged = copy.deepcopy(DEFAULT_CONFIG['checks'].get(name, {}))
        merged.update(self._config['checks'].get(name, {}))
        return merged

    def is_check_enabled(self, name: str) -> bool:
        return bool(self.get_check_config(name).get('enabled', True))

    def get_timeout(self, name: str) -> Optional[float]:
        return self.get_check_config(name).get('timeout')

    def get_command_override(self, name: str) -> Optional[list[str]]:
        """
        Get a user-configured command for a toolchain check.

        Strings are split shell-style; None means "probe the project".
        """
        command = self.get_check_config(name).get('command')
        if not command:
            return None
        if isinstance(command, str):
            return shlex.split(command)
        return list(command)

    def get_logging_config(self) -> dict:
        logging_config = dict(self._config['logging'])
        if 'file' in logging_config:
            logging_config['file'] = str(Path(str(logging_config['file'])).expanduser())
        return logging_config

    def get_console_config(self) -> dict:
        return dict(self._config['console'])

    def to_dict(self) -> dict:
        """Full merged configuration (deep copy)."""
        return copy.deepcopy(self._config)


def _is_valid_regex(pattern: str) -> bool:
    try:
        re.compile(pattern)
    except re.error:
        return False
    return True
