"""
Click view for the reconciliation menu.
"""

from __future__ import annotations

import click

from dvmsetup.core.engine.executor import ActionReport
from dvmsetup.core.models.host import HostProfile
from dvmsetup.core.models.probe import ProbeResult
from dvmsetup.core.services.menu import MenuChoice, MenuView
from dvmsetup.ui.cli.render import render_profile, render_report, render_status


class ClickMenuView(MenuView):
    """Renders the menu on the terminal and reads choices from stdin."""

    def __init__(self, profile: HostProfile, verbose: bool = False):
        self.profile = profile
        self.verbose = verbose

    def show_status(self, results: list[ProbeResult]) -> None:
        click.echo()
        click.secho("   ═══ Raspberry Pi DVMHost Setup ═══", fg="cyan", bold=True)
        render_profile(self.profile)
        render_status(results, verbose=self.verbose)

    def show_options(self, options: list[tuple[MenuChoice, str]]) -> None:
        click.echo()
        click.secho("   Options:", bold=True)
        for choice, label in options:
            click.echo(f"     {choice.value}) {label}")
        click.echo()

    def read_choice(self) -> str | None:
        try:
            return click.prompt("Select an option", default="", show_default=False)
        except click.Abort:
            click.echo()
            return None

    def show_invalid(self, raw: str) -> None:
        click.secho(f"   Invalid option: {raw!r}", fg="red")

    def show_starting(self, action: str) -> None:
        click.echo()
        click.secho(f"   ▶ Running {action}...", fg="blue", bold=True)

    def show_report(self, report: ActionReport) -> None:
        render_report(report, verbose=self.verbose)

    def show_skipped(self, action: str, reason: str) -> None:
        click.secho(f"   ⊘ {action} not run: {reason}", fg="yellow")


def confirm_replace(question: str) -> bool:
    """Ask before replacing an existing installation. EOF declines."""
    try:
        return click.confirm(question, default=False)
    except click.Abort:
        return False
