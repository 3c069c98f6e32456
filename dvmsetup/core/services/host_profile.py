"""
Host profile detection — read the OS version and hardware model once.

Test mode: when DVMSETUP_TEST_MODE=1, DVMSETUP_TEST_OS_VERSION and
DVMSETUP_TEST_PI_MODEL replace the inspected values. Outside test mode
those variables are ignored.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from dvmsetup.adapters.host.view import HostView
from dvmsetup.core.models.host import HostProfile
from dvmsetup.core.models.settings import Settings

logger = logging.getLogger(__name__)

TEST_MODE_VAR = "DVMSETUP_TEST_MODE"
TEST_OS_VAR = "DVMSETUP_TEST_OS_VERSION"
TEST_MODEL_VAR = "DVMSETUP_TEST_PI_MODEL"


def parse_os_release(text: str) -> dict[str, str]:
    """Parse os-release KEY=value lines, stripping surrounding quotes."""
    values: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        values[key.strip()] = value.strip().strip('"').strip("'")
    return values


def read_os_version(host: HostView, os_release_file: str) -> str | None:
    text = host.read_text(os_release_file)
    if text is None:
        return None
    return parse_os_release(text).get("VERSION_ID") or None


def read_hardware_model(host: HostView, model_file: str) -> str | None:
    text = host.read_text(model_file)
    if text is None:
        return None
    # device-tree strings are NUL-terminated
    model = text.replace("\x00", "").strip()
    return model or None


def detect_host_profile(
    host: HostView,
    settings: Settings,
    environ: Mapping[str, str] | None = None,
) -> HostProfile:
    """Build the HostProfile for this run."""
    env = os.environ if environ is None else environ

    os_version = read_os_version(host, settings.host.os_release_file)
    model = read_hardware_model(host, settings.host.model_file)

    if env.get(TEST_MODE_VAR) == "1":
        override_os = env.get(TEST_OS_VAR)
        override_model = env.get(TEST_MODEL_VAR)
        if override_os or override_model:
            logger.warning(
                "Test mode: host profile overridden (os=%s, model=%s)",
                override_os or os_version, override_model or model,
            )
            return HostProfile(
                os_version_id=override_os or os_version,
                hardware_model=override_model or model,
                source="override",
            )

    logger.debug("Host profile: os=%s model=%s", os_version, model)
    return HostProfile(os_version_id=os_version, hardware_model=model)


def check_os_version(profile: HostProfile, settings: Settings) -> str | None:
    """Why this OS release is unsupported, or None."""
    versions = settings.host.supported_os_versions
    if profile.os_version_id is None:
        return f"Cannot determine OS version (no VERSION_ID in {settings.host.os_release_file})"
    if profile.os_version_id not in versions:
        return (
            f"Unsupported OS version: {profile.os_version_id} "
            f"(must be {' or '.join(versions)})"
        )
    return None


def check_supported(profile: HostProfile, settings: Settings) -> str | None:
    """Why this host is unsupported, or None if it is supported."""
    problem = check_os_version(profile, settings)
    if problem:
        return problem

    models = settings.host.supported_models
    if profile.hardware_model is None:
        return f"Cannot determine hardware model (cannot read {settings.host.model_file})"
    if not any(m in profile.hardware_model for m in models):
        return (
            f"Unsupported hardware: {profile.hardware_model} "
            f"(must be {' or '.join(models)})"
        )
    return None
