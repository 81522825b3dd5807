"""CLI commands for bundle cache management"""

import asyncio
import sys

import click
from rich.console import Console
from rich.table import Table

from incbundler.bundler import Bundler
from incbundler.cli.utils.args import load_bundler
from incbundler.cli.utils.logging import logger
from incbundler.exceptions import BundlerError


@click.group(name="cache")
def cache():
    """Manage the module cache."""
    pass


async def _clear(bundler: Bundler) -> None:
    async with bundler:
        await bundler.clear()


async def _records(bundler: Bundler) -> dict:
    async with bundler:
        return await bundler.records()


@cache.command("clear")
@click.argument("config", type=click.Path(exists=True, dir_okay=False))
def clear(config: str):
    """Delete all cached modules and the cache store.

    Example:

      incbundle cache clear bundle.yaml
    """
    bundler = load_bundler(config)
    try:
        asyncio.run(_clear(bundler))
    except (BundlerError, OSError) as e:
        logger.error(f"Failed to clear cache: {e}")
        sys.exit(1)


@cache.command("describe")
@click.argument("config", type=click.Path(exists=True, dir_okay=False))
def describe(config: str):
    """List cached modules in bundle order.

    Example:

      incbundle cache describe bundle.yaml
    """
    bundler = load_bundler(config)
    try:
        records = asyncio.run(_records(bundler))
    except (BundlerError, OSError) as e:
        logger.error(f"Failed to read cache: {e}")
        sys.exit(1)

    if not records:
        logger.info(f"Cache {bundler.cache_dir} is empty")
        return

    table = Table(title=f"{bundler.name} ({bundler.cache_dir})")
    table.add_column("Module")
    table.add_column("Modified")
    table.add_column("Dependencies")
    for path, record in records.items():
        table.add_row(
            path,
            record.mtime.isoformat(),
            ", ".join(record.dependencies or []),
        )
    Console().print(table)
