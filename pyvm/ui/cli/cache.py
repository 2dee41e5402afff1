"""
CLI commands for the version catalog cache.

Thin wrappers over ``pyvm.core.services.catalog.CatalogCache``.
"""

from __future__ import annotations

import click


@click.group()
def cache() -> None:
    """Catalog cache — show, refresh, clear."""


@cache.command()
@click.pass_context
def show(ctx: click.Context) -> None:
    """Show where the catalog cache lives and whether it is fresh."""
    from pyvm.main import get_client

    client = get_client(ctx)
    catalog = client.cache.catalog

    click.echo(f"   📄 {client.cache.path}")
    if catalog is None:
        click.secho("   ⚠️  No cached catalog", fg="yellow")
        return

    state = "stale" if client.cache.is_stale() else "fresh"
    color = "yellow" if state == "stale" else "green"
    click.echo(f"   {len(catalog.all)} versions, fetched {catalog.fetched_at.isoformat()}")
    click.secho(f"   {state} until {catalog.expires_at.isoformat()}", fg=color)


@cache.command()
@click.pass_context
def refresh(ctx: click.Context) -> None:
    """Refetch the version catalog now."""
    from pyvm.core.errors import PyvmError
    from pyvm.main import fail, get_client

    client = get_client(ctx)
    try:
        catalog = client.cache.refresh()
    except PyvmError as e:
        fail(e)

    click.secho(f"✅ Catalog refreshed: {len(catalog.all)} versions", fg="green")


@cache.command()
@click.pass_context
def clear(ctx: click.Context) -> None:
    """Delete the cached catalog."""
    from pyvm.main import get_client

    client = get_client(ctx)
    if client.cache.clear():
        click.secho("✅ Catalog cache cleared", fg="green")
    else:
        click.echo("   Nothing to clear")
