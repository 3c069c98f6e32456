"""
Domain models — Pydantic types for dvmsetup.

All models are re-exported here for convenient access:

    from dvmsetup.core.models import HostProfile, ProbeResult, Settings, Template
"""

from dvmsetup.core.models.action import Action, Receipt
from dvmsetup.core.models.host import HostProfile
from dvmsetup.core.models.outcome import PhaseOutcome
from dvmsetup.core.models.probe import ProbeResult, ProbeStatus
from dvmsetup.core.models.settings import (
    BootSettings,
    HostSettings,
    InstallSettings,
    MeshSettings,
    Settings,
    SiteType,
    TemplateSettings,
)
from dvmsetup.core.models.template import GeneratedFile, Template

__all__ = [
    # action.py
    "Action",
    "Receipt",
    # host.py
    "HostProfile",
    # outcome.py
    "PhaseOutcome",
    # probe.py
    "ProbeResult",
    "ProbeStatus",
    # settings.py
    "BootSettings",
    "HostSettings",
    "InstallSettings",
    "MeshSettings",
    "Settings",
    "SiteType",
    "TemplateSettings",
    # template.py
    "GeneratedFile",
    "Template",
]
