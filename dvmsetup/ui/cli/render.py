"""
Terminal rendering for probe results and action reports.

Shared by the one-shot commands and the interactive menu.
"""

from __future__ import annotations

import click

from dvmsetup.core.engine.executor import ActionReport
from dvmsetup.core.models.host import HostProfile
from dvmsetup.core.models.probe import ProbeResult, ProbeStatus
from dvmsetup.core.services.probes import GROUP_TITLES, group_results

STATUS_MARKERS: dict[ProbeStatus, tuple[str, str]] = {
    ProbeStatus.SATISFIED: ("✓", "green"),
    ProbeStatus.UNSATISFIED: ("✗", "red"),
    ProbeStatus.INDETERMINATE: ("⚠", "yellow"),
    ProbeStatus.NOT_APPLICABLE: ("⊘", "white"),
}

REPORT_COLORS = {"ok": "green", "failed": "red", "precondition_failed": "red"}


def render_profile(profile: HostProfile) -> None:
    os_label = profile.os_version_id or "unknown"
    model_label = profile.hardware_model or "unknown"
    click.echo(f"   Host: Debian {os_label} on {model_label}", nl=False)
    if profile.source == "override":
        click.secho("  [test override]", fg="yellow")
    else:
        click.echo()


def render_status(results: list[ProbeResult], verbose: bool = False) -> None:
    """Grouped probe summary."""
    for group, group_results_ in group_results(results).items():
        click.echo()
        click.secho(f"   {GROUP_TITLES.get(group, group)}:", fg="yellow", bold=True)
        for result in group_results_:
            marker, color = STATUS_MARKERS[result.status]
            click.secho(f"     {marker} ", fg=color, nl=False)
            click.echo(result.title, nl=False)
            if verbose or result.status is not ProbeStatus.SATISFIED:
                click.secho(f"  ({result.evidence})", dim=True)
            else:
                click.echo()


def render_report(report: ActionReport, verbose: bool = False) -> None:
    """Per-phase outcomes and the final status line."""
    click.echo()
    for outcome in report.outcomes:
        if outcome.ok:
            click.secho(f"   ✓ {outcome.phase}", fg="green", nl=False)
        elif outcome.failed:
            click.secho(f"   ✗ {outcome.phase}", fg="red", nl=False)
        else:
            click.secho(f"   ⊘ {outcome.phase}", fg="yellow", nl=False)
        click.echo(f"  {outcome.message}" if outcome.message else "")

        for warning in outcome.details.get("warnings", []):
            click.secho(f"     ⚠ {warning}", fg="yellow")
        if verbose:
            for path in outcome.details.get("files", []):
                click.echo(f"     │ {path}")

    not_run = report.phases_total - len(report.outcomes)
    if not_run > 0:
        click.secho(f"   … {not_run} phase(s) not run", dim=True)

    click.echo()
    color = REPORT_COLORS.get(report.status, "white")
    click.secho(
        f"   {report.action}: {report.status} (exit code {report.exit_code})",
        fg=color,
        bold=True,
    )
    failure = report.failure
    if failure is not None:
        click.secho(f"   {failure.message}", fg="red")
    if report.reboot_required:
        click.secho("   ↻ Reboot required for changes to take effect", fg="cyan")
