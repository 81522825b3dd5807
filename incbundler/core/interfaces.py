"""Protocol interfaces for bundler callbacks.

Hooks let callers observe or transform content at fixed points of the
pipeline without the bundler depending on them. Every hook may be a plain
function or a coroutine; the bundler awaits whatever it returns.
"""

import inspect
import logging
from typing import Any, Awaitable, Optional, Protocol, Union

from incbundler.model import BundleEntry, BundleResult, Module

logger = logging.getLogger(__name__)

HookReturn = Union[None, Awaitable[None]]


class BundlerHooks(Protocol):
    """Named callbacks invoked by the bundler."""

    def on_module_updated(self, module: Module) -> HookReturn:
        """Called once per freshly read module, before it is persisted."""
        ...

    def on_bundle_entry(self, entry: BundleEntry) -> HookReturn:
        """Called once per cached body concatenated by ``bundle()``."""
        ...

    def on_before_write(self, result: BundleResult) -> HookReturn:
        """Called once per ``bundle()`` with the assembled, mutable result."""
        ...


class NullHooks:
    """Hooks that do nothing. Subclass and override what you need."""

    def on_module_updated(self, module: Module) -> HookReturn:
        return None

    def on_bundle_entry(self, entry: BundleEntry) -> HookReturn:
        return None

    def on_before_write(self, result: BundleResult) -> HookReturn:
        return None


async def call_hook(result: Any) -> None:
    """Await a hook's return value when it is awaitable."""
    if inspect.isawaitable(result):
        await result


class BundleProgress(Protocol):
    """Minimal interface for reporting ``bundle()`` progress."""

    def start(self, name: str, total: int) -> None: ...

    def update(self, percent: int) -> None: ...

    def finish(self) -> None: ...


class LogProgress:
    """Progress reporter writing percentages to the debug log."""

    def __init__(self):
        self._name: Optional[str] = None

    def start(self, name: str, total: int) -> None:
        self._name = name
        logger.debug(f"Building {name}: {total} entries")

    def update(self, percent: int) -> None:
        logger.debug(f"Building {self._name}: {percent}%")

    def finish(self) -> None:
        logger.debug(f"Building {self._name}: done")
        self._name = None
