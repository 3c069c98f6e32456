"""
Config check use case — validate the settings file and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from dvmsetup.core.config.loader import (
    ConfigError,
    find_settings_file,
    load_settings,
    validate_settings,
)
from dvmsetup.core.models.settings import Settings


@dataclass
class ConfigCheckResult:
    """Result of settings validation."""

    valid: bool = False
    settings: Settings | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "settings": self.settings.model_dump(mode="json") if self.settings else None,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Load the effective settings and report problems.

    No settings file is valid: the built-in defaults apply.
    """
    result = ConfigCheckResult()

    try:
        config_path = find_settings_file(config_path)
        result.config_path = config_path
        settings = load_settings(config_path)
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    result.settings = settings
    result.warnings = validate_settings(settings)
    result.valid = True
    return result
