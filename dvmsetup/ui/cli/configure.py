"""
CLI command for site configuration generation.

Usage::

    dvmsetup configure
    dvmsetup configure --site-type cc-vc
    dvmsetup configure --site-type conventional --answers answers.yml
    dvmsetup configure --template-url file:///srv/templates
    dvmsetup configure --site-type cc-vc --answers answers.yml --json
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
import yaml

from dvmsetup.core.models.settings import Settings
from dvmsetup.core.services.templating.collector import (
    AnswersInput,
    InputProvider,
    PromptInput,
)
from dvmsetup.ui.cli.common import get_context, get_settings, require_root


def _prompt_site_type(settings: Settings) -> str | None:
    """Numbered site-type selection. Re-asks on invalid input; None at EOF."""
    keys = list(settings.templates.site_types)
    click.echo()
    click.echo("Please select your site type:")
    for i, key in enumerate(keys, start=1):
        click.echo(f"  {i}) {settings.templates.site_types[key].label}")
    click.echo()

    while True:
        try:
            raw = click.prompt(
                f"Enter choice (1-{len(keys)})", default="", show_default=False,
            )
        except click.Abort:
            return None
        raw = raw.strip()
        if raw.isdigit() and 1 <= int(raw) <= len(keys):
            return keys[int(raw) - 1]
        if raw in keys:
            return raw
        click.secho(f"   Invalid choice: {raw!r}", fg="red")


def _load_answers(path: Path) -> InputProvider:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        click.secho(f"❌ Cannot read answers file {path}: {e}", fg="red", err=True)
        sys.exit(1)
    if not isinstance(data, dict):
        click.secho(f"❌ Answers file {path} must be a mapping of NAME: value",
                    fg="red", err=True)
        sys.exit(1)
    return AnswersInput(data)


@click.command()
@click.option("--site-type", "site_type", default=None,
              help="Site type key (e.g. cc-vc, conventional). Prompts if omitted.")
@click.option("--answers", "answers_path", type=click.Path(path_type=Path), default=None,
              help="YAML file of placeholder answers (non-interactive).")
@click.option("--template-url", default=None, help="Override the template repository URL.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def configure(
    ctx: click.Context,
    site_type: str | None,
    answers_path: Path | None,
    template_url: str | None,
    as_json: bool,
) -> None:
    """Generate DVMHost configuration files from the site templates."""
    from dvmsetup.core.use_cases.configure import run_configure

    require_root()
    settings = get_settings(ctx)

    if as_json and (answers_path is None or site_type is None):
        click.secho("❌ --json needs --site-type and --answers (no prompts in JSON mode)",
                    fg="red", err=True)
        sys.exit(1)

    if site_type is None:
        site_type = _prompt_site_type(settings)
        if site_type is None:
            click.secho("❌ No site type selected", fg="red", err=True)
            sys.exit(1)
    elif settings.get_site_type(site_type) is None:
        choices = ", ".join(settings.templates.site_types)
        click.secho(f"❌ Unknown site type '{site_type}' (choose from: {choices})",
                    fg="red", err=True)
        sys.exit(1)

    provider = _load_answers(answers_path) if answers_path else PromptInput()
    run_ctx = get_context(ctx)
    site = settings.get_site_type(site_type)
    assert site is not None

    if not as_json:
        click.secho(f"\n⚙ Configuring {site.label} site", fg="cyan", bold=True)

    result = run_configure(run_ctx, site_type, provider, base_url=template_url)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    click.echo()
    for generated in result.generated:
        click.secho(f"   ✓ {generated.path}", fg="green", nl=False)
        click.echo(f"  ({len(generated.placeholders)} value(s))")

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        if result.generated:
            click.secho("   Files written before the failure were kept.", fg="yellow")
        sys.exit(result.exit_code)

    click.echo()
    click.secho("✅ Configuration complete", fg="green", bold=True)
    click.echo()
