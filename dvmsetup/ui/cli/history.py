"""
CLI command for the audit ledger.

Usage::

    dvmsetup history
    dvmsetup history -n 5 --json
"""

from __future__ import annotations

import json

import click

from dvmsetup.core.persistence.audit import AuditWriter, default_audit_path
from dvmsetup.ui.cli.common import get_settings

_STATUS_STYLE = {
    "ok": ("✓", "green"),
    "failed": ("✗", "red"),
    "precondition_failed": ("✗", "red"),
}


@click.command()
@click.option("-n", "count", default=20, show_default=True, help="Number of entries.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def history(ctx: click.Context, count: int, as_json: bool) -> None:
    """Show recent actions from the audit ledger."""
    settings = get_settings(ctx)
    writer = AuditWriter(default_audit_path(settings.state_dir))
    entries = writer.read_recent(count)

    if as_json:
        click.echo(json.dumps([e.model_dump(mode="json") for e in entries], indent=2))
        return

    if not entries:
        click.echo(f"No entries in {writer.path}")
        return

    click.echo()
    for entry in entries:
        marker, color = _STATUS_STYLE.get(entry.status, ("•", "white"))
        click.secho(f"   {marker} ", fg=color, nl=False)
        click.echo(f"{entry.timestamp}  {entry.operation_type:<10} {entry.status}")
        for path in entry.files:
            click.echo(f"       │ {path}")
        for error in entry.errors:
            click.secho(f"       │ {error}", fg="red")
    click.echo()
