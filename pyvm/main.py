"""
pyvm — CLI entrypoint.

Usage:
    pyvm --help
    pyvm install latest
    pyvm install 3.11.4
    pyvm use 3.10.11
    pyvm list --all
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import NoReturn

import click

from pyvm import __version__
from pyvm.core.config.loader import ConfigError
from pyvm.core.errors import PyvmError
from pyvm.core.models.session import InstallSession, InstallStage
from pyvm.core.observability.logging_config import setup_from_env
from pyvm.core.use_cases.client import Client, build_client


@click.group()
@click.version_option(version=__version__, prog_name="pyvm")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to pyvm.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """pyvm — install and switch between Python versions."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_from_env(debug=debug, verbose=verbose, quiet=quiet)


def fail(error: Exception) -> NoReturn:
    """Print an error and exit. The only place pyvm terminates on failure."""
    click.secho(f"❌ {error}", fg="red")
    sys.exit(1)


def get_client(ctx: click.Context) -> Client:
    """Build (once per invocation) the Client for this command."""
    client = ctx.obj.get("client")
    if client is None:
        try:
            client = build_client(ctx.obj.get("config_path"))
        except ConfigError as e:
            fail(e)
        ctx.obj["client"] = client
    return client


# ── Install ─────────────────────────────────────────────────────

_STAGE_LABELS = {
    InstallStage.REFRESH_CATALOG: "Checking available versions",
    InstallStage.TRANSFORM: "Unpacking and installing pip",
    InstallStage.CLEANUP: "Cleaning up",
    InstallStage.ACTIVATE: "Making symlink",
}


def _progress_printer(quiet: bool):
    def on_progress(session: InstallSession, status: str) -> None:
        if quiet:
            return
        if session.stage == InstallStage.DOWNLOAD and session.descriptor:
            label = f'Downloading "{session.descriptor.installer_filename}"'
        else:
            label = _STAGE_LABELS.get(session.stage)
        if label is None:
            return

        if status == "started":
            click.echo(f"{label}... ", nl=False)
        elif status == "done":
            click.secho("Done!", fg="green")
        else:
            click.secho("Failed", fg="red")

    return on_progress


@cli.command()
@click.argument("version")
@click.option("--no-activate", is_flag=True, help="Install without pointing the alias at it.")
@click.pass_context
def install(ctx: click.Context, version: str, no_activate: bool) -> None:
    """Install VERSION (e.g. 3.11.4, or 'latest') and activate it."""
    client = get_client(ctx)
    pipeline = client.pipeline(on_progress=_progress_printer(ctx.obj.get("quiet", False)))

    try:
        path = pipeline.install(version, activate=not no_activate)
    except PyvmError as e:
        fail(e)

    click.secho(f"✅ Python {path.name} installed successfully!", fg="green", bold=True)
    if not ctx.obj.get("quiet"):
        click.echo(f"   📁 {path}")
        if not no_activate:
            click.echo(f"   🔗 {client.settings.alias} → {path}")


@cli.command()
@click.argument("version")
@click.pass_context
def use(ctx: click.Context, version: str) -> None:
    """Point the alias at an installed VERSION."""
    from pyvm.core.services.installed import installed_path

    client = get_client(ctx)
    try:
        source = installed_path(client.settings, version)
        client.activation.activate(version, source)
    except PyvmError as e:
        fail(e)

    click.secho(f"✅ Now using Python {version}", fg="green")
    if not ctx.obj.get("quiet"):
        click.echo(f"   🔗 {client.settings.alias} → {source.resolve()}")


@cli.command()
@click.argument("version")
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation.")
@click.pass_context
def uninstall(ctx: click.Context, version: str, yes: bool) -> None:
    """Delete an installed VERSION."""
    from pyvm.core.services.installed import uninstall as remove_version

    client = get_client(ctx)
    if not yes:
        click.confirm(f"Remove Python {version}?", abort=True)

    try:
        path = remove_version(client.settings, client.activation, version)
    except PyvmError as e:
        fail(e)

    click.secho(f"🗑️  Removed Python {version} ({path})", fg="green")


# ── Observe ─────────────────────────────────────────────────────


@cli.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include pre-releases.")
@click.option("--unstable", is_flag=True, help="Only pre-releases.")
@click.option("--refresh", is_flag=True, help="Ignore the cached catalog.")
@click.option("--limit", "-n", default=20, show_default=True, help="Max versions to show (0 = all).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_versions(
    ctx: click.Context,
    show_all: bool,
    unstable: bool,
    refresh: bool,
    limit: int,
    as_json: bool,
) -> None:
    """List versions available for install."""
    client = get_client(ctx)
    try:
        catalog = client.cache.refresh() if refresh else client.cache.ensure_fresh()
    except PyvmError as e:
        fail(e)

    if unstable:
        versions = catalog.unstable
    elif show_all:
        versions = catalog.all
    else:
        versions = catalog.stable

    if as_json:
        click.echo(json.dumps({
            "versions": versions,
            "latest": catalog.stable[0] if catalog.stable else None,
            "fetched_at": catalog.fetched_at.isoformat(),
        }, indent=2))
        return

    if not versions:
        click.secho("⚠️  No versions found", fg="yellow")
        return

    installed = {iv.version for iv in _installed(client)}
    shown = versions[:limit] if limit > 0 else versions
    click.secho(f"🐍 Available ({len(versions)}):", fg="cyan", bold=True)
    for v in shown:
        marker = " ✓ installed" if v in installed else ""
        latest = " (latest)" if catalog.stable and v == catalog.stable[0] else ""
        click.echo(f"   {v}{latest}{marker}")
    if len(shown) < len(versions):
        click.echo(f"   … {len(versions) - len(shown)} more (use --limit 0)")


def _installed(client: Client):
    from pyvm.core.services.installed import list_installed

    return list_installed(client.settings, client.activation)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def installed(ctx: click.Context, as_json: bool) -> None:
    """List installed versions."""
    client = get_client(ctx)
    versions = _installed(client)

    if as_json:
        click.echo(json.dumps([iv.to_dict() for iv in versions], indent=2))
        return

    if not versions:
        click.secho("⚠️  No Python versions installed", fg="yellow")
        click.echo("   Try: pyvm install latest")
        return

    click.secho(f"📦 Installed ({len(versions)}):", fg="cyan", bold=True)
    for iv in versions:
        if iv.active:
            click.secho(f"   * {iv.version}", fg="green", nl=False)
            click.echo("  (active)")
        else:
            click.echo(f"     {iv.version}")


@cli.command()
@click.pass_context
def current(ctx: click.Context) -> None:
    """Show which version the alias points at."""
    client = get_client(ctx)
    target = client.activation.current()
    if target is None:
        click.secho("⚠️  No active Python version", fg="yellow")
        sys.exit(1)
    click.echo(f"{target.name}  → {target}")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def info(ctx: click.Context, as_json: bool) -> None:
    """Show client, paths, adapters and catalog cache status."""
    client = get_client(ctx)
    data = client.info()

    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    click.secho(f"\n🖥️  {data['client']}", fg="cyan", bold=True)
    click.echo(f"   App root:  {data['app_root']}")
    click.echo(f"   Versions:  {data['versions_dir']}")
    click.echo(f"   Alias:     {data['alias']}")
    click.echo(f"   Active:    {data['active'] or '(none)'}")

    click.echo()
    click.secho("   Adapters:", fg="white", bold=True)
    for role, status in data["adapters"].items():
        icon = "✅" if status["available"] else "❌"
        click.echo(f"     {icon} {role}: {status['name']}")

    cat = data["catalog"]
    click.echo()
    click.secho("   Catalog:", fg="white", bold=True)
    if cat["cached"]:
        freshness = "stale" if cat["stale"] else "fresh"
        click.echo(f"     {cat['versions']} versions, {freshness} (expires {cat['expires_at']})")
    else:
        click.echo("     not cached yet")
    click.echo()


from pyvm.ui.cli.cache import cache  # noqa: E402

cli.add_command(cache)


if __name__ == "__main__":
    cli()
