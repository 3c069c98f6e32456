"""
Helpers shared by the CLI commands: root check, settings, run context.

Tests hand in a FakeHost and a mock registry through ``ctx.obj``
(``host``, ``registry``); in production both are built here.
"""

from __future__ import annotations

import os
import sys

import click

from dvmsetup.core.config.loader import ConfigError, find_settings_file, load_settings
from dvmsetup.core.context import RunContext, build_context
from dvmsetup.core.models.settings import Settings

ROOT_REQUIRED_MESSAGE = "This command must be run as root (use sudo)"


def require_root() -> None:
    """Exit 1 unless running with euid 0."""
    if os.geteuid() != 0:
        click.secho(f"❌ {ROOT_REQUIRED_MESSAGE}", fg="red", err=True)
        sys.exit(1)


def get_settings(ctx: click.Context) -> Settings:
    """Effective settings, loaded once per invocation. Exit 1 on a bad file."""
    settings = ctx.obj.get("settings")
    if settings is not None:
        return settings
    try:
        settings = load_settings(find_settings_file(ctx.obj.get("config_path")))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)
    ctx.obj["settings"] = settings
    return settings


def get_context(ctx: click.Context, mock: bool = False) -> RunContext:
    """Build the run context for a command."""
    settings = get_settings(ctx)
    registry = ctx.obj.get("registry")
    if registry is not None and mock:
        registry.set_mock_mode(True)
    return build_context(
        settings,
        host=ctx.obj.get("host"),
        registry=registry,
        mock_mode=mock,
    )
