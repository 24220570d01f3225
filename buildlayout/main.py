"""
Build layout — CLI entrypoint.

Usage:
    python -m buildlayout.main --help
    python -m buildlayout.main configure
    python -m buildlayout.main clean
    python -m buildlayout.main config check
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from buildlayout import __version__
from buildlayout.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="buildlayout")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to build.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Build layout — redirect build outputs and pin toolchains across subprojects."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(debug=debug, verbose=verbose, quiet=quiet)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--no-save", is_flag=True, help="Don't save the resolved layout to state.")
@click.pass_context
def configure(ctx: click.Context, as_json: bool, no_save: bool) -> None:
    """Resolve output directories, evaluation order and toolchain version."""
    from buildlayout.core.use_cases.configure import configure_build

    result = configure_build(config_path=ctx.obj.get("config_path"), save=not no_save)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    report = result.report
    build = result.build
    assert report is not None and build is not None

    if not ctx.obj.get("quiet"):
        click.secho(f"\n🏗  {report.project_name}", fg="cyan", bold=True)
        click.echo(f"   Output root: {report.output_root}")
        click.echo(f"   Toolchain:   {report.toolchain_version}")
        if report.repositories:
            click.echo(f"   Repositories: {', '.join(report.repositories)}")
        click.echo()

    click.secho(f"   Subprojects: {len(build.graph.subprojects)}", fg="white", bold=True)
    for project in build.graph.subprojects:
        steps = f" [{len(project.compile_steps)} compile]" if project.compile_steps else ""
        click.echo(f"     • {project.name}{steps}  → {project.output_dir}")

    if report.namespaces_defaulted:
        click.echo()
        click.secho("   Defaulted namespaces:", fg="white", bold=True)
        for name, namespace in report.namespaces_defaulted.items():
            click.echo(f"     • {name}: {namespace}")

    if report.evaluation_sequence:
        click.echo()
        click.secho("   Evaluation order:", fg="white", bold=True)
        click.echo(f"     {' → '.join(report.evaluation_sequence)}")

    if result.state_saved:
        click.echo()
        click.secho("   💾 Layout saved to .state/layout.json", fg="cyan")

    click.echo()


@cli.command()
@click.pass_context
def clean(ctx: click.Context) -> None:
    """Delete the redirected build output root."""
    from buildlayout.core.use_cases.clean import run_clean

    result = run_clean(config_path=ctx.obj.get("config_path"))

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if ctx.obj.get("quiet"):
        return

    if result.existed:
        click.secho(f"🧹 Deleted {result.output_root}", fg="green")
    else:
        click.echo(f"Nothing to clean at {result.output_root}")


@cli.group()
def config() -> None:
    """Build configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate build.yml configuration."""
    from buildlayout.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.build is not None  # guaranteed when valid
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Project: {result.build.name}")
        click.echo(f"   Subprojects: {len(result.build.subprojects)}")
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
