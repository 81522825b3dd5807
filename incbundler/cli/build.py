"""CLI command to refresh modules and write the bundle"""

import asyncio
import sys
from typing import Dict, List, Tuple

import click

from incbundler.bundler import Bundler
from incbundler.cli.progress import ProgressDisplay
from incbundler.cli.utils.args import load_bundler, parse_dependency_args
from incbundler.cli.utils.logging import logger
from incbundler.exceptions import BundlerError


async def _build(
    bundler: Bundler,
    entries: Tuple[str, ...],
    dependencies: Dict[str, List[str]],
    write_bundle: bool,
) -> None:
    async with bundler:
        for entry in entries:
            module = await bundler.get_module(entry, dependencies.get(entry))
            logger.debug(f"{entry} -> {module.relative_path}")
        if write_bundle:
            await bundler.bundle()


@click.command(name="build")
@click.argument("config", type=click.Path(exists=True, dir_okay=False))
@click.argument("entries", nargs=-1)
@click.option(
    "--dep",
    "deps",
    multiple=True,
    metavar="ENTRY=DEP[,DEP...]",
    help="Declare dependencies of an entry. Can be repeated.",
)
@click.option(
    "--no-bundle",
    is_flag=True,
    help="Only refresh the cache, do not write the bundle.",
)
def build(config: str, entries: Tuple[str, ...], deps: Tuple[str, ...], no_bundle: bool):
    """Refresh ENTRIES in the cache and write the bundle.

    ENTRIES are module specifiers: relative paths (./src/app) resolved against
    the include directories, or package names (@scope/pkg) resolved against
    the configured node_modules roots.

    Example:

      incbundle build bundle.yaml ./src/app ./src/main --dep ./src/app=./src/util
    """
    dependencies = parse_dependency_args(deps)
    bundler = load_bundler(config, progress=ProgressDisplay())

    try:
        asyncio.run(_build(bundler, entries, dependencies, not no_bundle))
    except (BundlerError, OSError) as e:
        logger.error(f"Build failed: {e}")
        sys.exit(1)
