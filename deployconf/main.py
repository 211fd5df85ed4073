"""
deployconf — CLI entrypoint.

Usage:
    python -m deployconf.main --help
    python -m deployconf.main resolve
    python -m deployconf.main -C environment=prod plan
    python -m deployconf.main config check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from deployconf import __version__
from deployconf.core.observability.logging_config import (
    ENV_LOG_FILE,
    ENV_LOG_FILE_LEVEL,
    level_from_flags,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="deployconf")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to deploy.yml (default: auto-detect).",
)
@click.option(
    "--manifest",
    "-m",
    "manifest_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to package.json or pyproject.toml (default: project root).",
)
@click.option(
    "--context",
    "-C",
    "context_pairs",
    multiple=True,
    metavar="KEY=VALUE",
    help="Override a configuration value (repeatable).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    manifest_path: str | None,
    context_pairs: tuple[str, ...],
) -> None:
    """deployconf — resolve deployment configuration for container stacks."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj["manifest_path"] = Path(manifest_path) if manifest_path else None
    ctx.obj["context_pairs"] = list(context_pairs)

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=level_from_flags(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_LOG_FILE),
        log_file_level=os.environ.get(ENV_LOG_FILE_LEVEL),
    )


def _source_args(ctx: click.Context, as_json: bool = False) -> dict:
    """Config/manifest paths and parsed --context values for a use case."""
    from deployconf.core.config.loader import ConfigError, parse_context_pairs

    try:
        cli_context = parse_context_pairs(ctx.obj.get("context_pairs", []))
    except ConfigError as e:
        if as_json:
            click.echo(json.dumps({"error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    return {
        "config_path": ctx.obj.get("config_path"),
        "manifest_path": ctx.obj.get("manifest_path"),
        "cli_context": cli_context,
    }


def _fail(message: str) -> None:
    click.secho(f"❌ {message}", fg="red")
    sys.exit(1)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def resolve(ctx: click.Context, as_json: bool) -> None:
    """Show the resolved deployment configuration."""
    from deployconf.core.use_cases.resolve import resolve_deployment

    result = resolve_deployment(**_source_args(ctx, as_json))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.error:
        _fail(result.error)

    config = result.config
    assert config is not None

    click.secho(f"\n📋 {config.project} ({config.environment})", fg="cyan", bold=True)
    click.echo(f"   Version:          {config.version}")
    click.echo(f"   Image:            {config.registry_repo_name}:{config.registry_image_tag}")
    click.echo(f"   Monitored domain: {config.monitored_domain}")
    click.echo(f"   Desired count:    {config.desired_instance_count}")

    if not ctx.obj.get("quiet") and result.sources:
        sources = result.sources
        click.echo()
        click.secho("   Sources:", fg="white", bold=True)
        click.echo(f"     settings:    {sources.settings_path or '(none)'}")
        click.echo(f"     environment: {sources.env_defaults_path or '(none)'}")
        click.echo(f"     manifest:    {sources.manifest_path or '(none)'}")

    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def names(ctx: click.Context, as_json: bool) -> None:
    """Show canonical stack ids, resource names and tags."""
    from deployconf.core.config import naming
    from deployconf.core.use_cases.resolve import resolve_deployment

    result = resolve_deployment(**_source_args(ctx, as_json))

    if result.error:
        if as_json:
            click.echo(json.dumps(result.to_dict(), indent=2))
            sys.exit(1)
        _fail(result.error)

    config = result.config
    assert config is not None
    unit_names = naming.unit_names(config)
    tag_set = naming.tags(config)

    if as_json:
        click.echo(json.dumps({"units": unit_names, "tags": tag_set}, indent=2))
        return

    click.secho(f"\n🏷️  {naming.stack_prefix(config)}*", fg="cyan", bold=True)
    click.echo("   Tags: " + ", ".join(f"{k}={v}" for k, v in tag_set.items()))
    for unit, entries in unit_names.items():
        click.echo()
        click.secho(f"   {unit}", fg="white", bold=True)
        for key, value in entries.items():
            click.echo(f"     {key:<24} {value}")
    click.echo()


@cli.command()
@click.option(
    "--unit",
    "-u",
    "units",
    multiple=True,
    help="Only plan this unit (repeatable): registry, compute, observability.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def plan(ctx: click.Context, units: tuple[str, ...], as_json: bool) -> None:
    """Print the declarative plan of each provisioning unit."""
    from deployconf.core.services.units import render_plan
    from deployconf.core.use_cases.plan import plan_units

    result = plan_units(**_source_args(ctx, as_json), units=list(units) or None)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        _fail(result.error)

    for unit_plan in result.plans:
        click.secho(f"# ── {unit_plan.stack_id} ", fg="cyan", bold=True)
        click.echo(render_plan(unit_plan))


@cli.command()
@click.option(
    "--out",
    "out_dir",
    default="plan.out",
    show_default=True,
    help="Output directory, relative to the project root.",
)
@click.option("--force", is_flag=True, help="Overwrite existing plan files.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def synth(ctx: click.Context, out_dir: str, force: bool, as_json: bool) -> None:
    """Write one plan file per provisioning unit."""
    from deployconf.core.use_cases.plan import synth_units

    result = synth_units(**_source_args(ctx, as_json), out_dir=out_dir, overwrite=force)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        _fail(result.error)

    click.secho(f"\n📝 Plan files → {result.out_dir}", fg="cyan", bold=True)
    for path in result.written:
        click.secho(f"   ✓ {path}", fg="green")
    for path in result.skipped:
        click.secho(f"   ⊘ {path} (exists, use --force)", fg="yellow")
    click.echo()


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate deploy.yml, environment defaults and the manifest."""
    from deployconf.core.use_cases.config_check import check_config

    result = check_config(**_source_args(ctx, as_json))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.config is not None  # guaranteed when valid
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Project:     {result.config.project}")
        click.echo(f"   Environment: {result.config.environment}")
        click.echo(f"   Version:     {result.config.version}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
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


if __name__ == "__main__":
    cli()
