"""
Host preparation — free the serial UART for the modem and back up first.

Phases:
    validate_host → backup_boot_files → edit_cmdline → edit_config_overlay
    → edit_uart_block (Pi 5) → disable_and_mask_services → reboot_required

Every edit is computed by ``boot_config`` and is a no-op on a file that
already has it, so running this action twice changes nothing the second
time (and takes no second backup). Nothing is rolled back: the
timestamped backups are the recovery path.
"""

from __future__ import annotations

import logging
from datetime import datetime

from dvmsetup.adapters.host.view import HostView
from dvmsetup.adapters.registry import AdapterRegistry
from dvmsetup.core.engine.executor import ActionReport, Phase, run_phases
from dvmsetup.core.models.host import HostProfile
from dvmsetup.core.models.outcome import PhaseOutcome
from dvmsetup.core.models.settings import Settings
from dvmsetup.core.services import boot_config
from dvmsetup.core.services.commands import run_command
from dvmsetup.core.services.host_profile import check_supported

logger = logging.getLogger(__name__)

ACTION_NAME = "prepare"
BACKUP_STAMP_FORMAT = "%Y%m%d_%H%M%S"


def backup_path(path: str, when: datetime) -> str:
    return f"{path}.backup.{when.strftime(BACKUP_STAMP_FORMAT)}"


class HostPreparation:
    """The host preparation action, one instance per run."""

    def __init__(
        self,
        host: HostView,
        profile: HostProfile,
        settings: Settings,
        registry: AdapterRegistry,
    ):
        self.host = host
        self.profile = profile
        self.settings = settings
        self.registry = registry
        self.boot = settings.boot

    # ── Planned edits ───────────────────────────────────────────

    def _edited_cmdline(self, text: str) -> str:
        return boot_config.remove_cmdline_token(text, self.boot.console_token)

    def _edited_config(self, text: str) -> str:
        text = boot_config.ensure_line(text, self.boot.bluetooth_overlay)
        if self.profile.is_pi5:
            text = boot_config.ensure_uart_block(
                text, self.boot.uart_section, self.boot.uart_lines,
            )
        return text

    # ── Phases ──────────────────────────────────────────────────

    def validate_host(self) -> PhaseOutcome:
        problem = check_supported(self.profile, self.settings)
        if problem:
            return PhaseOutcome.failure("validate_host", problem, kind="precondition")
        return PhaseOutcome.success(
            "validate_host",
            f"Debian {self.profile.os_version_id} on {self.profile.hardware_model}",
        )

    def backup_boot_files(self) -> PhaseOutcome:
        now = datetime.now()
        plan = [
            (self.boot.cmdline_file, self._edited_cmdline),
            (self.boot.config_file, self._edited_config),
        ]
        backups = []
        for path, edit in plan:
            text = self.host.read_text(path)
            if text is None or edit(text) == text:
                continue
            dest = backup_path(path, now)
            self.host.copy_file(path, dest)
            logger.info("Backed up %s to %s", path, dest)
            backups.append(dest)

        if not backups:
            return PhaseOutcome.skip("backup_boot_files", "No boot file needs changing")
        return PhaseOutcome.success(
            "backup_boot_files", f"Backed up {len(backups)} file(s)", files=backups,
        )

    def edit_cmdline(self) -> PhaseOutcome:
        path = self.boot.cmdline_file
        text = self.host.read_text(path)
        if text is None:
            logger.warning("%s not found, skipping serial console removal", path)
            return PhaseOutcome.skip("edit_cmdline", f"{path} not found")

        new = self._edited_cmdline(text)
        if new == text:
            return PhaseOutcome.skip("edit_cmdline", "Serial console already removed")
        self.host.write_text_atomic(path, new)
        return PhaseOutcome.success(
            "edit_cmdline", f"Removed {self.boot.console_token}", files=[path],
        )

    def edit_config_overlay(self) -> PhaseOutcome:
        path = self.boot.config_file
        text = self.host.read_text(path)
        if text is None:
            return PhaseOutcome.failure("edit_config_overlay", f"{path} not found", kind="io")

        new = boot_config.ensure_line(text, self.boot.bluetooth_overlay)
        if new == text:
            return PhaseOutcome.skip("edit_config_overlay", "Bluetooth already disabled")
        self.host.write_text_atomic(path, new)
        return PhaseOutcome.success(
            "edit_config_overlay", f"Added {self.boot.bluetooth_overlay}", files=[path],
        )

    def edit_uart_block(self) -> PhaseOutcome:
        if not self.profile.is_pi5:
            return PhaseOutcome.skip("edit_uart_block", "Not applicable (not a Raspberry Pi 5)")

        path = self.boot.config_file
        text = self.host.read_text(path)
        if text is None:
            return PhaseOutcome.failure("edit_uart_block", f"{path} not found", kind="io")

        new = boot_config.ensure_uart_block(text, self.boot.uart_section, self.boot.uart_lines)
        if new == text:
            return PhaseOutcome.skip("edit_uart_block", "UART already configured")
        self.host.write_text_atomic(path, new)
        return PhaseOutcome.success(
            "edit_uart_block", f"Configured UART under {self.boot.uart_section}", files=[path],
        )

    def disable_and_mask_services(self) -> PhaseOutcome:
        masked: list[str] = []
        warnings: list[str] = []

        for unit in self.settings.services:
            known = self.host.unit_file_exists(unit)
            if known is None:
                warnings.append("systemctl not available")
                logger.warning("systemctl not available, cannot disable services")
                break
            if not known:
                warnings.append(f"{unit} not found")
                logger.warning("Service %s not found, skipping", unit)
                continue

            for verb in ("disable", "mask"):
                receipt = run_command(
                    self.registry, f"systemctl-{verb}:{unit}", ["systemctl", verb, unit],
                )
                if receipt.failed:
                    warnings.append(f"{verb} {unit}: {receipt.error}")
                    logger.warning("systemctl %s %s failed: %s", verb, unit, receipt.error)
            masked.append(unit)

        return PhaseOutcome.success(
            "disable_and_mask_services",
            f"Disabled and masked {len(masked)} service(s)",
            services=masked,
            warnings=warnings,
        )

    def reboot_required(self) -> PhaseOutcome:
        return PhaseOutcome.success(
            "reboot_required",
            "Reboot required for changes to take effect",
            reboot_required=True,
        )

    # ── Run ─────────────────────────────────────────────────────

    def phases(self) -> list[Phase]:
        return [
            Phase("validate_host", self.validate_host),
            Phase("backup_boot_files", self.backup_boot_files),
            Phase("edit_cmdline", self.edit_cmdline),
            Phase("edit_config_overlay", self.edit_config_overlay),
            Phase("edit_uart_block", self.edit_uart_block),
            Phase("disable_and_mask_services", self.disable_and_mask_services),
            Phase("reboot_required", self.reboot_required),
        ]

    def run(self, operation_id: str | None = None) -> ActionReport:
        return run_phases(ACTION_NAME, self.phases(), operation_id)
