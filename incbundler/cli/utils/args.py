"""Argument helpers shared by CLI commands."""

import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import click

from incbundler.bundler import Bundler
from incbundler.config import BundleConfig
from incbundler.core.interfaces import BundleProgress
from incbundler.exceptions import InvalidConfigurationError

from .logging import logger


def parse_dependency_args(values: Sequence[str]) -> Dict[str, List[str]]:
    """Parse repeated ``ENTRY=DEP[,DEP...]`` options into a mapping.

    Example:
        ["./a=./b,./c", "./a=./d"] -> {"./a": ["./b", "./c", "./d"]}
    """
    deps: Dict[str, List[str]] = {}
    for value in values:
        entry, sep, rest = value.partition("=")
        if not sep or not entry or not rest:
            raise click.BadParameter(
                f"expected ENTRY=DEP[,DEP...], got '{value}'", param_hint="--dep"
            )
        deps.setdefault(entry, []).extend(d for d in rest.split(",") if d)
    return deps


def load_bundler(config_path: str, progress: Optional[BundleProgress] = None) -> Bundler:
    """Build a bundler from a config file, exiting with status 1 on bad config."""
    try:
        config = BundleConfig.from_yaml(Path(config_path))
        return Bundler(config, progress=progress)
    except InvalidConfigurationError as e:
        logger.error(f"Invalid configuration {config_path}: {e}")
        sys.exit(1)
