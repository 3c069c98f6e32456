"""
Settings loader — reads settings.yml into the Settings model.

Lookup order:
    1. explicit path (``--config``)
    2. DVMSETUP_CONFIG env var
    3. /etc/dvmsetup/settings.yml
    4. built-in defaults

A file that exists but is unreadable or invalid is an error; a file
that does not exist at the default location is not.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml

from dvmsetup.core.models.settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = Path("/etc/dvmsetup/settings.yml")
SETTINGS_ENV_VAR = "DVMSETUP_CONFIG"


class ConfigError(Exception):
    """Raised when the settings file is invalid or cannot be read."""


def find_settings_file(
    explicit: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path | None:
    """Resolve which settings file applies, if any.

    Returns:
        Path to the settings file, or None to use built-in defaults.

    Raises:
        ConfigError: If an explicitly requested file does not exist.
    """
    env = os.environ if environ is None else environ

    if explicit is not None:
        if not explicit.is_file():
            raise ConfigError(f"Settings file not found: {explicit}")
        return explicit

    from_env = env.get(SETTINGS_ENV_VAR)
    if from_env:
        path = Path(from_env)
        if not path.is_file():
            raise ConfigError(f"Settings file not found: {path} (from {SETTINGS_ENV_VAR})")
        return path

    if DEFAULT_SETTINGS_FILE.is_file():
        return DEFAULT_SETTINGS_FILE

    return None


def load_settings(path: Path | None = None) -> Settings:
    """Load and validate settings.

    Args:
        path: Settings file to read. None returns the built-in defaults.

    Returns:
        Validated Settings model.

    Raises:
        ConfigError: If the file is unreadable or invalid.
    """
    if path is None:
        logger.debug("No settings file, using defaults")
        return Settings()

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Settings()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = Settings.model_validate(data)
    except ValueError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    logger.info("Loaded settings from %s", path)
    return settings


def validate_settings(settings: Settings) -> list[str]:
    """Return warnings for settings that are valid but suspicious."""
    warnings: list[str] = []

    if not settings.templates.site_types:
        warnings.append("No site types defined; 'configure' has nothing to generate")
    for key, site in settings.templates.site_types.items():
        if not site.templates:
            warnings.append(f"Site type '{key}' lists no templates")

    if not settings.host.supported_os_versions:
        warnings.append("No supported OS versions; every host will fail validation")
    if not settings.packages:
        warnings.append("Package list is empty")

    install = settings.install
    if not Path(install.app_dir).is_absolute():
        warnings.append(f"install.app_dir is not absolute: {install.app_dir}")
    if not Path(install.config_dir).is_absolute():
        warnings.append(f"install.config_dir is not absolute: {install.config_dir}")

    return warnings
