"""
Run use case — execute a remediation action and record it in the ledger.

    run_prepare     host preparation
    run_install     application installation
    run_setup_all   preparation, then installation if preparation succeeded
"""

from __future__ import annotations

import logging

from dvmsetup.core.context import RunContext
from dvmsetup.core.engine.executor import ActionReport, write_audit_entry
from dvmsetup.core.services.app_install import AppInstallation, Confirm
from dvmsetup.core.services.host_prep import HostPreparation

logger = logging.getLogger(__name__)


def _audit_context(ctx: RunContext) -> dict:
    return {
        "mock": ctx.registry.mock_mode,
        "os_version": ctx.profile.os_version_id,
        "hardware_model": ctx.profile.hardware_model,
        "profile_source": ctx.profile.source,
    }


def run_prepare(ctx: RunContext) -> ActionReport:
    """Prepare the host (boot files, services)."""
    action = HostPreparation(ctx.host, ctx.profile, ctx.settings, ctx.registry)
    report = action.run()
    write_audit_entry(report, ctx.audit, _audit_context(ctx))
    return report


def run_install(ctx: RunContext, confirm: Confirm | None = None) -> ActionReport:
    """Install packages, the mesh client and the DVMHost binaries.

    Args:
        confirm: Asked before replacing an existing installation.
            None declines, keeping what is there.
    """
    action = AppInstallation(ctx.host, ctx.profile, ctx.settings, ctx.registry, confirm)
    report = action.run()
    write_audit_entry(report, ctx.audit, _audit_context(ctx))
    return report


def run_setup_all(ctx: RunContext, confirm: Confirm | None = None) -> list[ActionReport]:
    """Prepare, then install only if preparation succeeded."""
    prepare = run_prepare(ctx)
    if not prepare.ok:
        logger.warning("Preparation failed, skipping installation")
        return [prepare]
    return [prepare, run_install(ctx, confirm)]
