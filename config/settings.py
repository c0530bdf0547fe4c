"""
Engine settings: resource ceilings and log level.

Settings come from code, a YAML/JSON file or PARAMSCHEMA_* environment
variables. Every top-level validation takes one snapshot of the current
settings, so swapping them mid-validation has no effect on that call.
log_level is applied to the engine's loggers whenever settings are set.
"""
import os
import sys
import json
import yaml
from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional
from utils.logging_config import get_logger, LoggerFactory
from utils.exceptions import SettingsError

logger = get_logger(__name__)

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
ENV_PREFIX = 'PARAMSCHEMA_'


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def max_depth_ceiling() -> int:
    """Largest max_depth the interpreter stack can serve; a level costs several frames."""
    return max(1, sys.getrecursionlimit() // 8)


def _settings_schema():
    """Object schema the settings values are checked against."""
    from validation.schema import Schema

    return Schema.object().set_field_schemas({
        'max_depth': Schema.number(required=False).set_validate(
            lambda value: _is_int(value) and 1 <= value <= max_depth_ceiling()
        ),
        'max_elements': Schema.number(required=False).set_validate(
            lambda value: _is_int(value) and value >= 0
        ),
        'log_level': Schema.string(required=False, range=LOG_LEVELS),
    })


@dataclass(frozen=True)
class ValidationSettings:
    """Settings read by every validation call."""
    # Deepest composite nesting accepted before a value is rejected
    max_depth: int = 64
    # Largest object or array (composite or scalar) accepted; 0 means unlimited
    max_elements: int = 0
    log_level: str = "WARNING"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_yaml(self, filepath: str):
        """Save settings to a YAML file."""
        with open(filepath, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ValidationSettings':
        """Create settings from a dictionary; unknown keys are ignored."""
        if not isinstance(data, dict):
            raise SettingsError(
                f"Settings must be a mapping, got {type(data).__name__}",
                details={'actual_type': type(data).__name__}
            )
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown settings: {sorted(unknown)}")

        if isinstance(data.get('log_level'), str):
            data = {**data, 'log_level': data['log_level'].upper()}

        report = _settings_schema().explain(data)
        if not report.accepted:
            raise SettingsError(
                f"Invalid settings at {report.location}: {report.reason}",
                details={'path': list(report.path), 'reason': report.reason}
            )
        return cls(**report.value)

    @classmethod
    def from_file(cls, filepath: str) -> 'ValidationSettings':
        """Load settings from a YAML or JSON file."""
        path = Path(filepath)

        if not path.exists():
            raise SettingsError(
                f"Settings file not found: {filepath}",
                details={'filepath': str(path)}
            )

        with open(path, 'r') as f:
            try:
                if path.suffix in ['.yaml', '.yml']:
                    data = yaml.safe_load(f)
                elif path.suffix == '.json':
                    data = json.load(f)
                else:
                    raise SettingsError(
                        f"Unsupported file format: {path.suffix}",
                        details={'filepath': str(path)}
                    )
            except (yaml.YAMLError, json.JSONDecodeError) as e:
                raise SettingsError(
                    f"Failed to parse settings file {filepath}: {e}",
                    details={'filepath': str(path), 'error': str(e)}
                ) from e

        settings = cls.from_dict(data or {})
        logger.info(f"Loaded settings from {filepath}")
        return settings

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX, base: Optional['ValidationSettings'] = None) -> 'ValidationSettings':
        """
        Overlay environment variables on base settings.

        PARAMSCHEMA_MAX_DEPTH=10 sets max_depth; values are JSON-decoded
        when possible and used as plain strings otherwise.
        """
        data = (base or cls()).to_dict()
        loaded = 0

        for key, value in os.environ.items():
            if key.startswith(prefix):
                try:
                    parsed_value = json.loads(value)
                except json.JSONDecodeError:
                    parsed_value = value
                data[key[len(prefix):].lower()] = parsed_value
                loaded += 1

        logger.info(f"Loaded {loaded} settings from environment")
        return cls.from_dict(data)


_current_settings = ValidationSettings()


def get_settings() -> ValidationSettings:
    """Get the process-wide settings."""
    return _current_settings


def set_settings(settings: ValidationSettings) -> ValidationSettings:
    """Replace the process-wide settings and apply the log level."""
    global _current_settings
    if not isinstance(settings, ValidationSettings):
        raise SettingsError(
            f"Expected ValidationSettings, got {type(settings).__name__}",
            details={'actual_type': type(settings).__name__}
        )
    _current_settings = settings
    LoggerFactory.set_level(settings.log_level)
    return settings


def configure(**overrides) -> ValidationSettings:
    """Update selected settings, e.g. configure(max_depth=10)."""
    unknown = set(overrides) - {f.name for f in fields(ValidationSettings)}
    if unknown:
        raise SettingsError(
            f"Unknown settings: {sorted(unknown)}",
            details={'unknown': sorted(unknown)}
        )
    merged = replace(get_settings(), **overrides)
    return set_settings(ValidationSettings.from_dict(merged.to_dict()))


def load_settings(filepath: str) -> ValidationSettings:
    """Load settings from a file and make them current."""
    return set_settings(ValidationSettings.from_file(filepath))


def reset_settings() -> ValidationSettings:
    """Restore the default settings."""
    return set_settings(ValidationSettings())
