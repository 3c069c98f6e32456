"""
Application installation — packages, mesh VPN client, directories, binaries.

Phases:
    validate_host → refresh_package_index → upgrade_packages
    → install_dependencies → install_mesh_client → ensure_directories
    → fetch_and_extract_archive

A package-manager or download failure stops the action. Temp files
(installer script, release archive) are removed whether the phase that
created them succeeds or not.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from dvmsetup.adapters.host.view import HostView
from dvmsetup.adapters.registry import AdapterRegistry
from dvmsetup.core.engine.executor import ActionReport, Phase, run_phases
from dvmsetup.core.models.host import HostProfile
from dvmsetup.core.models.outcome import PhaseOutcome
from dvmsetup.core.models.settings import Settings
from dvmsetup.core.services.commands import download, run_command
from dvmsetup.core.services.host_profile import check_supported

logger = logging.getLogger(__name__)

ACTION_NAME = "install"
APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}

Confirm = Callable[[str], bool]


def _decline(_question: str) -> bool:
    return False


class AppInstallation:
    """The application installation action, one instance per run.

    Args:
        confirm: Asked before an existing application directory is
            replaced. Defaults to declining.
    """

    def __init__(
        self,
        host: HostView,
        profile: HostProfile,
        settings: Settings,
        registry: AdapterRegistry,
        confirm: Confirm | None = None,
    ):
        self.host = host
        self.profile = profile
        self.settings = settings
        self.registry = registry
        self.confirm = confirm or _decline

    def _apt(self, phase: str, argv: list[str], message: str) -> PhaseOutcome:
        receipt = run_command(self.registry, f"apt:{phase}", argv, env=APT_ENV)
        if receipt.failed:
            return PhaseOutcome.failure(phase, f"{' '.join(argv)} failed: {receipt.error}")
        return PhaseOutcome.success(phase, message)

    # ── Phases ──────────────────────────────────────────────────

    def validate_host(self) -> PhaseOutcome:
        problem = check_supported(self.profile, self.settings)
        if problem:
            return PhaseOutcome.failure("validate_host", problem, kind="precondition")
        return PhaseOutcome.success(
            "validate_host",
            f"Debian {self.profile.os_version_id} on {self.profile.hardware_model}",
        )

    def refresh_package_index(self) -> PhaseOutcome:
        return self._apt("refresh_package_index", ["apt-get", "update"],
                         "Package index refreshed")

    def upgrade_packages(self) -> PhaseOutcome:
        return self._apt("upgrade_packages", ["apt-get", "upgrade", "-y"],
                         "System packages upgraded")

    def install_dependencies(self) -> PhaseOutcome:
        packages = self.settings.packages
        return self._apt(
            "install_dependencies",
            ["apt-get", "install", "-y", *packages],
            f"Installed {' '.join(packages)}",
        )

    def install_mesh_client(self) -> PhaseOutcome:
        mesh = self.settings.mesh
        if self.host.has_command(mesh.command):
            return PhaseOutcome.skip("install_mesh_client", f"{mesh.command} already installed")

        script = self.host.make_temp_file(suffix=".sh")
        try:
            receipt = download(self.registry, "download:mesh-installer",
                               mesh.installer_url, script)
            if receipt.failed:
                return PhaseOutcome.failure(
                    "install_mesh_client",
                    f"Failed to download {mesh.installer_url}: {receipt.error}",
                    kind="transfer",
                )
            receipt = run_command(self.registry, "run:mesh-installer", ["sh", script])
            if receipt.failed:
                return PhaseOutcome.failure(
                    "install_mesh_client", f"{mesh.command} installer failed: {receipt.error}",
                )
        finally:
            self.host.remove_file(script)

        return PhaseOutcome.success("install_mesh_client", f"Installed {mesh.command}")

    def ensure_directories(self) -> PhaseOutcome:
        created = []
        for directory in self.settings.install.directories:
            if self.host.is_dir(directory):
                continue
            self.host.make_dirs(directory)
            logger.info("Created %s", directory)
            created.append(directory)

        if not created:
            return PhaseOutcome.skip("ensure_directories", "All directories exist")
        return PhaseOutcome.success(
            "ensure_directories", f"Created {len(created)} director(ies)", created=created,
        )

    def fetch_and_extract_archive(self) -> PhaseOutcome:
        install = self.settings.install
        app_dir = install.app_dir

        if self.host.is_non_empty_dir(app_dir):
            if not self.confirm(f"{app_dir} already exists. Remove and reinstall?"):
                return PhaseOutcome.skip(
                    "fetch_and_extract_archive", f"Kept existing {app_dir}",
                )
            self.host.remove_tree(app_dir)
            logger.info("Removed %s", app_dir)

        self.host.make_dirs(app_dir)
        archive = self.host.make_temp_file(suffix=".tar.xz")
        try:
            receipt = download(self.registry, "download:app-archive", install.archive_url, archive)
            if receipt.failed:
                return PhaseOutcome.failure(
                    "fetch_and_extract_archive",
                    f"Failed to download {install.archive_url}: {receipt.error}",
                    kind="transfer",
                )
            receipt = run_command(
                self.registry, "extract:app-archive", ["tar", "-xf", archive, "-C", app_dir],
            )
            if receipt.failed:
                return PhaseOutcome.failure(
                    "fetch_and_extract_archive", f"Failed to extract archive: {receipt.error}",
                )
        finally:
            self.host.remove_file(archive)

        return PhaseOutcome.success(
            "fetch_and_extract_archive", f"Extracted DVMHost into {app_dir}",
        )

    # ── Run ─────────────────────────────────────────────────────

    def phases(self) -> list[Phase]:
        return [
            Phase("validate_host", self.validate_host),
            Phase("refresh_package_index", self.refresh_package_index),
            Phase("upgrade_packages", self.upgrade_packages),
            Phase("install_dependencies", self.install_dependencies),
            Phase("install_mesh_client", self.install_mesh_client),
            Phase("ensure_directories", self.ensure_directories),
            Phase("fetch_and_extract_archive", self.fetch_and_extract_archive),
        ]

    def run(self, operation_id: str | None = None) -> ActionReport:
        return run_phases(ACTION_NAME, self.phases(), operation_id)
