"""
Probes — read-only checks that classify the host's state.

A probe is a zero-argument callable returning ``(ProbeStatus, evidence)``.
The registry runs them in registration order, never caches, and turns
an exception into an ``indeterminate`` result so one broken probe cannot
take down the status report.

Groups:
    requirements   OS version and hardware model (preconditions)
    prepare        what host preparation changes
    install        what application installation changes
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from dvmsetup.adapters.host.view import HostView
from dvmsetup.core.models.host import HostProfile
from dvmsetup.core.models.probe import ProbeResult, ProbeStatus
from dvmsetup.core.models.settings import Settings
from dvmsetup.core.services import boot_config

logger = logging.getLogger(__name__)

ProbeFn = Callable[[], tuple[ProbeStatus, str]]

GROUP_ORDER = ("requirements", "prepare", "install")
GROUP_TITLES = {
    "requirements": "System Requirements",
    "prepare": "Host Preparation",
    "install": "Application Installation",
}


@dataclass
class _Probe:
    identifier: str
    fn: ProbeFn
    title: str
    group: str


class ProbeRegistry:
    """Ordered collection of named probes."""

    def __init__(self):
        self._probes: dict[str, _Probe] = {}

    def register(
        self,
        identifier: str,
        fn: ProbeFn,
        *,
        title: str = "",
        group: str = "",
    ) -> None:
        if identifier in self._probes:
            logger.warning("Overwriting existing probe: %s", identifier)
        self._probes[identifier] = _Probe(identifier, fn, title or identifier, group)

    def identifiers(self) -> list[str]:
        return list(self._probes)

    def run(self, identifier: str) -> ProbeResult:
        """Run one probe. Raises KeyError for an unknown identifier."""
        probe = self._probes[identifier]
        try:
            status, evidence = probe.fn()
        except Exception as e:
            logger.warning("Probe %s raised: %s", identifier, e)
            status, evidence = ProbeStatus.INDETERMINATE, f"probe error: {e}"
        return ProbeResult(
            identifier=probe.identifier,
            title=probe.title,
            group=probe.group,
            status=status,
            evidence=evidence,
        )

    def run_all(self) -> list[ProbeResult]:
        return [self.run(identifier) for identifier in self._probes]


def group_results(results: list[ProbeResult]) -> dict[str, list[ProbeResult]]:
    """Results keyed by group, in display order."""
    grouped: dict[str, list[ProbeResult]] = {g: [] for g in GROUP_ORDER}
    for result in results:
        grouped.setdefault(result.group, []).append(result)
    return {g: rs for g, rs in grouped.items() if rs}


def count_statuses(results: list[ProbeResult]) -> dict[str, int]:
    counts = {status.value: 0 for status in ProbeStatus}
    for result in results:
        counts[result.status.value] += 1
    return counts


# ── Required probes ─────────────────────────────────────────────


def build_probe_registry(
    host: HostView,
    profile: HostProfile,
    settings: Settings,
) -> ProbeRegistry:
    """Registry with every probe the status report and menu show."""
    boot = settings.boot
    registry = ProbeRegistry()

    def os_version() -> tuple[ProbeStatus, str]:
        version = profile.os_version_id
        if version is None:
            return ProbeStatus.INDETERMINATE, f"cannot read {settings.host.os_release_file}"
        if version in settings.host.supported_os_versions:
            return ProbeStatus.SATISFIED, f"VERSION_ID={version}"
        return ProbeStatus.UNSATISFIED, f"VERSION_ID={version} (unsupported)"

    def hardware_model() -> tuple[ProbeStatus, str]:
        model = profile.hardware_model
        if model is None:
            return ProbeStatus.INDETERMINATE, f"cannot read {settings.host.model_file}"
        if any(m in model for m in settings.host.supported_models):
            return ProbeStatus.SATISFIED, model
        return ProbeStatus.UNSATISFIED, f"{model} (unsupported)"

    def serial_console_disabled() -> tuple[ProbeStatus, str]:
        text = host.read_text(boot.cmdline_file)
        if text is None:
            return ProbeStatus.INDETERMINATE, f"{boot.cmdline_file} not found"
        if boot_config.has_token(text, boot.console_token):
            return ProbeStatus.UNSATISFIED, f"{boot.console_token} present"
        return ProbeStatus.SATISFIED, f"{boot.console_token} absent"

    def bluetooth_disabled() -> tuple[ProbeStatus, str]:
        text = host.read_text(boot.config_file)
        if text is None:
            return ProbeStatus.INDETERMINATE, f"{boot.config_file} not found"
        if boot_config.has_active_line(text, boot.bluetooth_overlay):
            return ProbeStatus.SATISFIED, f"{boot.bluetooth_overlay} present"
        return ProbeStatus.UNSATISFIED, f"{boot.bluetooth_overlay} missing"

    def uart_configured() -> tuple[ProbeStatus, str]:
        if profile.hardware_model is None:
            return ProbeStatus.INDETERMINATE, "hardware model unknown"
        if not profile.is_pi5:
            return ProbeStatus.NOT_APPLICABLE, "only required on Raspberry Pi 5"
        text = host.read_text(boot.config_file)
        if text is None:
            return ProbeStatus.INDETERMINATE, f"{boot.config_file} not found"
        ok, missing = boot_config.uart_configured(text, boot.uart_lines)
        if ok:
            return ProbeStatus.SATISFIED, ", ".join(boot.uart_lines)
        return ProbeStatus.UNSATISFIED, f"missing: {', '.join(missing)}"

    def conflicting_services_disabled() -> tuple[ProbeStatus, str]:
        enabled = []
        for unit in settings.services:
            state = host.unit_is_enabled(unit)
            if state is None:
                return ProbeStatus.INDETERMINATE, "systemctl not available"
            if state:
                enabled.append(unit)
        if enabled:
            return ProbeStatus.UNSATISFIED, f"enabled: {', '.join(enabled)}"
        return ProbeStatus.SATISFIED, f"{len(settings.services)} services disabled"

    def packages_installed() -> tuple[ProbeStatus, str]:
        missing = []
        for package in settings.packages:
            state = host.package_installed(package)
            if state is None:
                return ProbeStatus.INDETERMINATE, "dpkg-query not available"
            if not state:
                missing.append(package)
        if missing:
            return ProbeStatus.UNSATISFIED, f"missing: {', '.join(missing)}"
        return ProbeStatus.SATISFIED, " ".join(settings.packages)

    def mesh_client_installed() -> tuple[ProbeStatus, str]:
        if host.has_command(settings.mesh.command):
            return ProbeStatus.SATISFIED, f"{settings.mesh.command} on PATH"
        return ProbeStatus.UNSATISFIED, f"{settings.mesh.command} not found"

    def directories_present() -> tuple[ProbeStatus, str]:
        missing = [d for d in settings.install.directories if not host.is_dir(d)]
        if missing:
            return ProbeStatus.UNSATISFIED, f"missing: {', '.join(missing)}"
        return ProbeStatus.SATISFIED, f"{len(settings.install.directories)} directories"

    def app_binaries_present() -> tuple[ProbeStatus, str]:
        app_dir = settings.install.app_dir
        if host.is_non_empty_dir(app_dir):
            return ProbeStatus.SATISFIED, app_dir
        return ProbeStatus.UNSATISFIED, f"{app_dir} missing or empty"

    registry.register("os_version", os_version,
                      title="Supported OS version", group="requirements")
    registry.register("hardware_model", hardware_model,
                      title="Supported hardware", group="requirements")
    registry.register("serial_console_disabled", serial_console_disabled,
                      title="Serial console removed from cmdline", group="prepare")
    registry.register("bluetooth_disabled", bluetooth_disabled,
                      title="Bluetooth overlay disabled", group="prepare")
    registry.register("uart_configured", uart_configured,
                      title="UART configured (Pi 5)", group="prepare")
    registry.register("conflicting_services_disabled", conflicting_services_disabled,
                      title="Conflicting services disabled", group="prepare")
    registry.register("packages_installed", packages_installed,
                      title="Required packages installed", group="install")
    registry.register("mesh_client_installed", mesh_client_installed,
                      title="Mesh VPN client installed", group="install")
    registry.register("directories_present", directories_present,
                      title="Application directories present", group="install")
    registry.register("app_binaries_present", app_binaries_present,
                      title="DVMHost binaries present", group="install")

    return registry
