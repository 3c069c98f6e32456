"""
Run context — everything one invocation works against.

Built once by the CLI (or by a test) and handed to every use case:

    settings   effective Settings
    host       HostView (LocalHost in production, FakeHost in tests)
    registry   AdapterRegistry for commands and downloads
    profile    HostProfile, detected once
    audit      AuditWriter for the ledger under settings.state_dir
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from dvmsetup.adapters.host.view import HostView
from dvmsetup.adapters.registry import AdapterRegistry, build_default_registry
from dvmsetup.core.models.host import HostProfile
from dvmsetup.core.models.settings import Settings
from dvmsetup.core.persistence.audit import AuditWriter, default_audit_path
from dvmsetup.core.services.host_profile import detect_host_profile
from dvmsetup.core.services.probes import ProbeRegistry, build_probe_registry


@dataclass
class RunContext:
    settings: Settings
    host: HostView
    registry: AdapterRegistry
    profile: HostProfile
    audit: AuditWriter

    def probes(self) -> ProbeRegistry:
        return build_probe_registry(self.host, self.profile, self.settings)


def build_context(
    settings: Settings,
    host: HostView | None = None,
    registry: AdapterRegistry | None = None,
    mock_mode: bool = False,
    environ: Mapping[str, str] | None = None,
) -> RunContext:
    """Assemble a RunContext, filling in production defaults."""
    if host is None:
        from dvmsetup.adapters.host.local import LocalHost

        host = LocalHost()
    if registry is None:
        registry = build_default_registry(mock_mode=mock_mode)

    return RunContext(
        settings=settings,
        host=host,
        registry=registry,
        profile=detect_host_profile(host, settings, environ),
        audit=AuditWriter(default_audit_path(settings.state_dir)),
    )
