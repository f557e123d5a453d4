"""CLI commands for inspecting the search cache.

Usage:
    vodhub cache stats
    vodhub cache show "keyword"
"""

from __future__ import annotations

import asyncio
from datetime import datetime

import typer

from vodhub.cache import create_cache_store

app = typer.Typer(help="Inspect the configured cache store")


@app.command("stats")
def stats() -> None:
    """Show entry counts per cache domain."""

    async def run() -> None:
        store = await create_cache_store()
        try:
            counts = await store.stats()
        finally:
            await store.close()
        typer.echo(f"Backend: {store.name}")
        typer.echo(f"  Search entries: {counts['search']}")
        typer.echo(f"  Detail entries: {counts['detail']}")

    asyncio.run(run())


@app.command("show")
def show(keyword: str = typer.Argument(..., help="Search keyword")) -> None:
    """Show the cached search entry for a keyword."""

    async def run() -> None:
        store = await create_cache_store()
        try:
            entry = await store.get_search(keyword)
        finally:
            await store.close()

        if entry is None:
            typer.echo(f"No live cache entry for '{keyword}'")
            raise typer.Exit(code=1)

        created = datetime.fromtimestamp(entry.ts / 1000).isoformat() if entry.ts else "unknown"
        typer.echo(f"Keyword: {entry.keyword}")
        typer.echo(f"  Items: {len(entry.data)}")
        typer.echo(f"  TTL: {entry.ttl or 'never expires'}")
        typer.echo(f"  Created: {created}")
        for item in entry.data:
            typer.echo(f"  - [{item.get('site_key')}] {item.get('vod_name', item.get('vod_id'))}")

    asyncio.run(run())
