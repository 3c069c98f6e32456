"""
HostProfile — the OS and hardware identity of the machine being prepared.

Derived once per run by ``core.services.host_profile.detect_host_profile``.
Probes and remediation phases read the profile instead of re-reading
``/etc/os-release`` or the device-tree model, so tests can hand in any
profile without touching the real filesystem.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict


class HostProfile(BaseModel):
    """Immutable host identity for one run."""

    model_config = ConfigDict(frozen=True)

    os_version_id: str | None = None    # VERSION_ID from os-release, None if unreadable
    hardware_model: str | None = None   # device-tree model string, None if unreadable
    source: Literal["host", "override"] = "host"

    @property
    def pi_generation(self) -> int | None:
        """5, 4, or None for anything that is not a Pi 4/5."""
        model = self.hardware_model or ""
        if "Raspberry Pi 5" in model:
            return 5
        if "Raspberry Pi 4" in model:
            return 4
        return None

    @property
    def is_pi5(self) -> bool:
        return self.pi_generation == 5
