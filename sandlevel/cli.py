#!/usr/bin/env python3
"""
sandlevel CLI - inspect the effective Windows sandbox level.

Usage:
    sandlevel resolve [--config PATH] [--profile NAME] [--json]
    sandlevel explain [--config PATH] [--profile NAME]
    sandlevel levels
"""

import json
import logging
import sys

import click
from rich.table import Table

from sandlevel import __version__
from sandlevel.cli_helpers import (
    build_examples_epilog,
    console,
    format_level_color,
    format_mode,
    print_error,
)
from sandlevel.config.loader import (
    ConfigError,
    active_profile_name,
    build_config,
    load_document,
    select_profile,
)
from sandlevel.config.models import SandboxMode
from sandlevel.features import Feature
from sandlevel.sandbox.levels import (
    LEVEL_CAPABILITIES,
    SandboxLevel,
    get_level_description,
    resolve_level,
)
from sandlevel.sandbox.mode import STOP, explain_mode, resolve_mode_with_source


config_option = click.option(
    "--config", "config_path", type=click.Path(dir_okay=False),
    help="Config file (default: $SANDLEVEL_CONFIG or ~/.sandlevel/config.yaml)",
)
profile_option = click.option("--profile", "-p", help="Profile to resolve against")


@click.group()
@click.version_option(version=__version__, prog_name="sandlevel")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def main(verbose: bool):
    """sandlevel - resolve the effective Windows sandbox level."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _load(config_path, profile):
    """Load document and profile, exiting with status 1 on config errors."""
    try:
        document = load_document(config_path)
        return document, select_profile(document, profile)
    except ConfigError as e:
        print_error(str(e), fix_hint="Check the file with 'sandlevel explain --config PATH'")
        sys.exit(1)


@main.command(
    epilog=build_examples_epilog([
        ("sandlevel resolve", "Resolve using the default config"),
        ("sandlevel resolve --profile work", "Resolve for a named profile"),
        ("sandlevel resolve --json", "Machine-readable output"),
    ]),
)
@config_option
@profile_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def resolve(config_path, profile, as_json):
    """Print the resolved sandbox mode and level."""
    document, active = _load(config_path, profile)
    mode, mode_source = resolve_mode_with_source(document, active)
    config = build_config(document, profile)
    level = resolve_level(config)
    source = f"windows_sandbox_mode ({mode_source})" if mode is not None else "feature flags"

    if as_json:
        click.echo(json.dumps({
            "profile": config.active_profile,
            "mode": mode.value if mode else None,
            "level": level.name.lower(),
            "source": source,
            "features": [f.key for f in config.features.enabled_features()],
        }, indent=2))
        return

    console.print(f"Profile: {config.active_profile or '[dim]none[/dim]'}")
    console.print(f"Mode:    {format_mode(mode)}")
    console.print(f"Level:   {format_level_color(level)}")
    console.print(f"Source:  {source}")


@main.command()
@config_option
@profile_option
def explain(config_path, profile):
    """Show every precedence step and what it saw."""
    document, active = _load(config_path, profile)
    mode, decided_by = resolve_mode_with_source(document, active)

    table = Table(title="Sandbox mode precedence")
    table.add_column("#", justify="right")
    table.add_column("Source")
    table.add_column("Result")
    table.add_column("", justify="center")

    for i, (name, result) in enumerate(explain_mode(document, active), start=1):
        if result is STOP:
            shown = "stop (legacy keys present)"
        elif isinstance(result, SandboxMode):
            shown = result.value
        else:
            shown = "[dim]-[/dim]"
        marker = "[bold green]<-[/bold green]" if name == decided_by else ""
        table.add_row(str(i), name, shown, marker)
    console.print(table)

    config = build_config(document, profile)
    console.print(f"Profile: {active_profile_name(document, profile) or '[dim]none[/dim]'}")
    console.print(f"Mode:    {format_mode(mode)}")
    for feature in Feature:
        state = "on" if config.features.enabled(feature) else "off"
        console.print(f"Feature {feature.key}: {state}")
    console.print(f"Level:   {format_level_color(resolve_level(config))}")


@main.command()
def levels():
    """List sandbox levels and what each applies."""
    table = Table(title="Sandbox levels")
    table.add_column("Level", style="cyan")
    table.add_column("Description")
    table.add_column("Restrictions")
    for level in SandboxLevel:
        caps = ", ".join(sorted(LEVEL_CAPABILITIES[level])) or "-"
        table.add_row(format_level_color(level), get_level_description(level), caps)
    console.print(table)


if __name__ == "__main__":
    main()
