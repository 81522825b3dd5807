"""
Incremental bundler.

A ``Bundler`` keeps a copy of every module it has seen under its cache
directory, together with a store (``db.json``) recording the modification
time each copy was taken at:

    <cache_dir>/
        db.json                       {"src/app.js": {"mtime": ...}, ...}
        src/app.js                    cached body
        node_modules/@scope/pkg.js    cached body

``get_module`` serves the cached body while the source's mtime is unchanged
and none of its declared dependencies changed, and refreshes both the body
and its record otherwise. ``bundle`` concatenates every cached ``.js`` entry
in store order into ``<output_dir>/<name>``.

Example:

    async with Bundler(BundleConfig.from_yaml("bundle.yaml")) as b:
        await b.get_module("./src/app")
        await b.bundle()
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from incbundler.backend.cache import EvictionPolicy, StoreHandle
from incbundler.backend.resolver import resolve
from incbundler.config import BundleConfig
from incbundler.constants import BUNDLE_SEPARATOR, BUNDLE_SUFFIX
from incbundler.core.interfaces import (
    BundleProgress,
    BundlerHooks,
    LogProgress,
    NullHooks,
    call_hook,
)
from incbundler.exceptions import CachePathError, DependencyCycleError
from incbundler.io import files
from incbundler.model import (
    BundleEntry,
    BundleResult,
    Module,
    ModuleRecord,
    ResolutionRoot,
)

logger = logging.getLogger(__name__)


class Bundler:
    """Incremental bundler bound to one cache directory and one store file."""

    def __init__(
        self,
        config: BundleConfig,
        hooks: Optional[BundlerHooks] = None,
        progress: Optional[BundleProgress] = None,
        eviction: Optional[EvictionPolicy] = None,
    ):
        """
        Args:
            config: Validated configuration
            hooks: Callbacks for module refreshes and bundle assembly
            progress: Receives bundle progress, defaults to debug logging
            eviction: When to drop the idle store from memory

        Raises:
            InvalidConfigurationError: If an include directory does not exist
        """
        self.config = config
        self.name = config.name
        self.cache_dir = config.cache_path
        self.output_dir = config.output_path
        self.roots: List[ResolutionRoot] = config.resolution_roots()
        self.hooks = hooks if hooks is not None else NullHooks()
        self.progress = progress if progress is not None else LogProgress()
        self.store = StoreHandle(config.store_path, eviction)

    @property
    def store_path(self) -> Path:
        return self.store.path

    async def __aenter__(self) -> "Bundler":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the in-memory store and cancel its idle timer."""
        self.store.dispose()

    def cache_file(self, relative_path: str) -> Path:
        """
        Where the cached body of ``relative_path`` lives.

        Raises:
            CachePathError: If the key points outside the cache directory
        """
        parts = relative_path.split("/")
        if os.path.isabs(relative_path) or ".." in parts:
            raise CachePathError(relative_path)
        return self.cache_dir / relative_path

    async def create_module(self, specifier: str) -> Module:
        """Resolve ``specifier`` and stat the file it names."""
        resolved = await asyncio.to_thread(resolve, specifier, self.roots)
        module = Module(resolved)
        module.mtime = await files.stat_mtime(resolved.local_path)
        return module

    async def get_module(
        self, specifier: str, dependencies: Optional[Sequence[str]] = None
    ) -> Module:
        """
        Return a module, refreshing the cache when it is stale.

        Args:
            specifier: Relative path or package specifier
            dependencies: Specifiers this module depends on. Changes to any of
                them make this module stale.

        Returns:
            The module with ``content`` loaded

        Raises:
            NotFoundError: If the specifier cannot be resolved
            DependencyCycleError: If declared dependencies form a cycle
            CachePathError: If the module would be cached outside the cache
                directory
        """
        module = await self.create_module(specifier)
        cached = self.cache_file(module.relative_path)
        if dependencies:
            module.dependencies = list(dependencies)

        if await self.is_updated(module):
            logger.debug(f"Refreshing {module.relative_path}")
            if not module.dependencies:
                module.dependencies = await self._recorded_dependencies(module)
            module.content = await files.read_text(module.local_path)
            await call_hook(self.hooks.on_module_updated(module))
            await self.save_module(module)
        else:
            logger.debug(f"Cache hit for {module.relative_path}")
            module.content = await files.read_text(cached)
            self.store.touch()

        return module

    async def is_updated(self, module: Module) -> bool:
        """
        Whether ``module`` differs from its cached copy.

        A module is stale when it has no record, when its mtime differs from
        the recorded one in either direction, or when any of its dependencies
        is stale. Dependencies are the module's own declared list, or the
        recorded list when it declares none.

        Raises:
            DependencyCycleError: If a dependency leads back to a module
                that is still being checked
        """
        try:
            return await self._is_updated(module, [], set())
        finally:
            self.store.touch()

    async def _recorded_dependencies(self, module: Module) -> List[str]:
        records = await self.store.load()
        record = records.get(module.relative_path)
        if record is None or not record.dependencies:
            return []
        return list(record.dependencies)

    async def _is_updated(
        self, module: Module, path: List[str], fresh: set
    ) -> bool:
        key = module.relative_path
        if key in path:
            raise DependencyCycleError([*path[path.index(key) :], key])
        if key in fresh:
            return False

        records = await self.store.load()
        record = records.get(key)
        if record is None:
            return True
        if module.mtime != record.mtime:
            return True

        dependencies = module.dependencies or record.dependencies or []
        path.append(key)
        try:
            for specifier in dependencies:
                dependency = await self.create_module(specifier)
                if await self._is_updated(dependency, path, fresh):
                    logger.debug(f"{key} is stale through {dependency.relative_path}")
                    return True
        finally:
            path.pop()

        fresh.add(key)
        return False

    async def save_module(self, module: Module) -> None:
        """Write the module body to the cache and record its mtime."""
        if module.content is None or module.mtime is None:
            raise ValueError(f"Module {module.relative_path} is not loaded")

        target = self.cache_file(module.relative_path)
        await files.ensure_dir(target.parent)
        await files.write_text(target, module.content)

        records = await self.store.load()
        records[module.relative_path] = ModuleRecord(
            mtime=module.mtime,
            dependencies=list(module.dependencies) or None,
        )
        await self.store.save(records)
        self.store.touch()
        logger.info(f"Cached {module.relative_path}")

    async def bundle(self) -> Path:
        """
        Concatenate every cached ``.js`` entry into the output file.

        Entries are joined by a blank line in store order. ``on_bundle_entry``
        sees each entry before it is joined and ``on_before_write`` sees the
        assembled result before it is written.

        Returns:
            Path of the written bundle
        """
        records = await self.store.load()
        paths = [key for key in records if key.endswith(BUNDLE_SUFFIX)]
        self.store.touch()

        self.progress.start(self.name, len(paths))
        entries: List[BundleEntry] = []
        try:
            for index, relative_path in enumerate(paths):
                content = await files.read_text(self.cache_file(relative_path))
                entry = BundleEntry(path=relative_path, content=content)
                await call_hook(self.hooks.on_bundle_entry(entry))
                entries.append(entry)
                self.progress.update((index + 1) * 100 // len(paths))

            result = BundleResult(
                content=BUNDLE_SEPARATOR.join(e.content for e in entries)
            )
            await call_hook(self.hooks.on_before_write(result))

            await files.ensure_dir(self.output_dir)
            output = self.output_dir / self.name
            await files.write_text(output, result.content)
        finally:
            self.progress.finish()

        logger.info(f"Wrote {output} ({len(entries)} modules)")
        return output

    async def clear(self) -> None:
        """
        Delete every cached body, the store file and the emptied directories.

        Directories under the cache root that still hold other files are
        kept. Does nothing when the cache directory does not exist.
        """
        if not await files.exists(self.cache_dir):
            return

        records = await self.store.load()
        for target in [self.cache_file(key) for key in records]:
            await files.unlink(target)
        if await files.exists(self.store_path):
            await files.unlink(self.store_path)
        await files.remove_empty_dirs(self.cache_dir)
        self.store.evict()
        logger.info(f"Cleared cache {self.cache_dir}")

    async def records(self) -> Dict[str, ModuleRecord]:
        """A snapshot of the persisted records, in store order."""
        records = await self.store.load()
        self.store.touch()
        return dict(records)
