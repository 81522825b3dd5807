"""
Module specifier resolution.

Maps a specifier to a concrete file under one of the configured roots:

    ./src/app          include directories, in order
    @scope/pkg/lib     package roots whose allow-list matches, in order
    node_modules/x     same as ``x``; the vendor prefix is optional

For every eligible root the specifier is tried verbatim, then with each
fallback suffix (``.js``, ``.json``, ``/index.js``, ``/index.json``). The
first root that yields a regular file wins; later roots are never consulted.

Resolution keeps no cache of its own: repeated calls re-stat the
filesystem.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, Optional, Sequence, Tuple

from incbundler.constants import FALLBACK_SUFFIXES, VENDOR_PREFIX
from incbundler.exceptions import NotFoundError
from incbundler.model import (
    IncludeDirectory,
    PackageRoot,
    ResolutionRoot,
    ResolvedModule,
)
from incbundler.utils import to_posix_path

logger = logging.getLogger(__name__)


def is_relative_specifier(specifier: str) -> bool:
    """Relative specifiers start with a dot (``.``, ``./``, ``../``)."""
    return specifier.startswith(".")


def split_package_specifier(specifier: str) -> Tuple[str, str]:
    """
    Split a bare specifier into (package_name, lookup_path).

    Examples:
        "@scope/pkg"              -> ("@scope/pkg", "node_modules/@scope/pkg")
        "node_modules/@scope/pkg" -> ("@scope/pkg", "node_modules/@scope/pkg")
    """
    if specifier.startswith(VENDOR_PREFIX):
        return specifier[len(VENDOR_PREFIX) :], specifier
    return specifier, f"{VENDOR_PREFIX}{specifier}"


def _candidates(base: str) -> Iterator[str]:
    yield base
    for suffix in FALLBACK_SUFFIXES:
        yield f"{base}{suffix}"


def find_file(root: Path, lookup_path: str) -> Optional[Path]:
    """
    Find the first existing regular file for ``lookup_path`` under ``root``.

    Args:
        root: Absolute resolution root
        lookup_path: Specifier path, joined to the root and normalized

    Returns:
        Absolute path of the first hit, or None
    """
    base = os.path.normpath(os.path.join(str(root), lookup_path))
    for candidate in _candidates(base):
        if os.path.isfile(candidate):
            return Path(candidate)
    return None


def relative_to_root(local_path: Path, root: Path) -> str:
    """Cache key for ``local_path``: relative to ``root``, forward slashes."""
    return to_posix_path(os.path.relpath(str(local_path), str(root)))


def resolve(specifier: str, roots: Sequence[ResolutionRoot]) -> ResolvedModule:
    """
    Resolve a module specifier against the given roots.

    Args:
        specifier: Relative path (``./x``) or bare package specifier
        roots: Include directories and package roots, in precedence order

    Returns:
        The resolved module

    Raises:
        NotFoundError: If no root and suffix combination names a file
    """
    if is_relative_specifier(specifier):
        lookup_path = specifier
        eligible = [r for r in roots if isinstance(r, IncludeDirectory)]
    else:
        package_name, lookup_path = split_package_specifier(specifier)
        eligible = [
            r for r in roots if isinstance(r, PackageRoot) and r.allows(package_name)
        ]

    for root in eligible:
        hit = find_file(root.path, lookup_path)
        if hit is None:
            continue

        relative_path = relative_to_root(hit, root.path)
        logger.debug(f"Resolved '{specifier}' to {hit} ({relative_path})")
        return ResolvedModule(local_path=hit, root=root, relative_path=relative_path)

    raise NotFoundError(specifier)
