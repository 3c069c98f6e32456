"""
dvmsetup — CLI entrypoint.

Usage:
    sudo dvmsetup status
    sudo dvmsetup menu
    sudo dvmsetup prepare
    sudo dvmsetup install --yes
    sudo dvmsetup configure --site-type cc-vc
    dvmsetup config check
    dvmsetup history
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from dvmsetup import __version__
from dvmsetup.core.observability.logging_config import setup_logging
from dvmsetup.ui.cli.common import get_context, require_root


@click.group()
@click.version_option(version=__version__, prog_name="dvmsetup")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to settings.yml (default: $DVMSETUP_CONFIG or /etc/dvmsetup/settings.yml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Prepare a Raspberry Pi for DVMHost and generate its configuration."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("DVMSETUP_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("DVMSETUP_LOG_FILE"),
        log_file_level=os.environ.get("DVMSETUP_LOG_FILE_LEVEL"),
    )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def status(ctx: click.Context, as_json: bool) -> None:
    """Run every probe and show what still needs doing."""
    from dvmsetup.core.use_cases.status import get_status
    from dvmsetup.ui.cli.render import render_profile, render_status

    require_root()
    result = get_status(get_context(ctx))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    assert result.profile is not None
    click.secho("\n📋 DVMHost host status", fg="cyan", bold=True)
    render_profile(result.profile)
    render_status(result.results, verbose=ctx.obj.get("verbose", False))

    counts = result.counts
    click.echo()
    click.echo(
        f"   {counts['satisfied']} satisfied | {counts['unsatisfied']} unsatisfied | "
        f"{counts['indeterminate']} indeterminate | {counts['not_applicable']} n/a"
    )
    click.echo()


@cli.command()
@click.option("--mock", is_flag=True, help="Use mock adapters (no commands or downloads).")
@click.pass_context
def menu(ctx: click.Context, mock: bool) -> None:
    """Interactive status and remediation menu."""
    from dvmsetup.core.services.menu import ReconciliationMenu
    from dvmsetup.core.use_cases.run import run_install, run_prepare
    from dvmsetup.ui.cli.menu import ClickMenuView, confirm_replace

    require_root()
    run_ctx = get_context(ctx, mock=mock)
    view = ClickMenuView(run_ctx.profile, verbose=ctx.obj.get("verbose", False))

    ReconciliationMenu(
        run_probes=lambda: run_ctx.probes().run_all(),
        prepare=lambda: run_prepare(run_ctx),
        install=lambda: run_install(run_ctx, confirm_replace),
        view=view,
    ).run()
    click.echo("Bye.")


def _emit_report(ctx: click.Context, report, as_json: bool, mock: bool) -> None:
    from dvmsetup.ui.cli.render import render_report

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    mode_label = "[mock] " if mock else ""
    click.secho(f"\n⚡ {mode_label}{report.action}", fg="cyan", bold=True)
    render_report(report, verbose=ctx.obj.get("verbose", False))
    click.echo()


@cli.command()
@click.option("--mock", is_flag=True, help="Use mock adapters (no commands or downloads).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def prepare(ctx: click.Context, mock: bool, as_json: bool) -> None:
    """Prepare the Pi: serial console, Bluetooth, UART, services."""
    from dvmsetup.core.use_cases.run import run_prepare

    require_root()
    report = run_prepare(get_context(ctx, mock=mock))
    _emit_report(ctx, report, as_json, mock)
    sys.exit(report.exit_code)


@cli.command()
@click.option("--mock", is_flag=True, help="Use mock adapters (no commands or downloads).")
@click.option("--yes", "-y", "assume_yes", is_flag=True,
              help="Replace an existing installation without asking.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(ctx: click.Context, mock: bool, assume_yes: bool, as_json: bool) -> None:
    """Install packages, the mesh VPN client and the DVMHost binaries."""
    from dvmsetup.core.use_cases.run import run_install
    from dvmsetup.ui.cli.menu import confirm_replace

    require_root()
    confirm = (lambda _question: True) if assume_yes else confirm_replace
    report = run_install(get_context(ctx, mock=mock), confirm)
    _emit_report(ctx, report, as_json, mock)
    sys.exit(report.exit_code)


@cli.command("setup-all")
@click.option("--mock", is_flag=True, help="Use mock adapters (no commands or downloads).")
@click.option("--yes", "-y", "assume_yes", is_flag=True,
              help="Replace an existing installation without asking.")
@click.pass_context
def setup_all(ctx: click.Context, mock: bool, assume_yes: bool) -> None:
    """Prepare, then install if preparation succeeded."""
    from dvmsetup.core.use_cases.run import run_setup_all
    from dvmsetup.ui.cli.menu import confirm_replace

    require_root()
    confirm = (lambda _question: True) if assume_yes else confirm_replace
    reports = run_setup_all(get_context(ctx, mock=mock), confirm)

    for report in reports:
        _emit_report(ctx, report, False, mock)

    if len(reports) == 1 and not reports[0].ok:
        click.secho("   Preparation failed. Installation was not run.", fg="red")
    for report in reports:
        if not report.ok:
            sys.exit(report.exit_code)


@cli.group()
def config() -> None:
    """Settings file commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate the settings file and show the effective values."""
    from dvmsetup.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.settings is not None
        settings = result.settings
        click.secho("✅ Settings are valid", fg="green", bold=True)
        source = str(result.config_path) if result.config_path else "built-in defaults"
        click.echo(f"   Source: {source}")
        click.echo(f"   Boot files: {settings.boot.cmdline_file}, {settings.boot.config_file}")
        click.echo(f"   Packages: {' '.join(settings.packages)}")
        click.echo(f"   Install root: {settings.install.root_dir}")
        click.echo(f"   Site types: {', '.join(settings.templates.site_types)}")
        click.echo(f"   Templates: {settings.templates.base_url}")
    else:
        click.secho("❌ Settings errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


# ── Register commands from dvmsetup/ui/cli/ ───────────────────────

from dvmsetup.ui.cli.configure import configure  # noqa: E402
from dvmsetup.ui.cli.history import history  # noqa: E402

cli.add_command(configure)
cli.add_command(history)


if __name__ == "__main__":
    cli()
