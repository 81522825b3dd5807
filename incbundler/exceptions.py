"""
Exception classes for incbundler.
"""

from pathlib import Path
from typing import Sequence, Union


class BundlerError(Exception):
    """Base exception for all bundler errors."""

    pass


class InvalidConfigurationError(BundlerError):
    """Raised when the bundler configuration is malformed or incomplete."""

    pass


class NotFoundError(BundlerError):
    """Raised when a module specifier matches no root and no suffix."""

    def __init__(self, specifier: str):
        self.specifier = specifier
        super().__init__(f"Not found: '{specifier}'")


class SerializationError(BundlerError):
    """Raised when the persisted store exists but cannot be parsed."""

    def __init__(self, path: Union[str, Path], reason: str = ""):
        self.path = Path(path)
        if reason:
            super().__init__(f"Corrupt cache store {path}: {reason}")
        else:
            super().__init__(f"Corrupt cache store {path}")


class DependencyCycleError(BundlerError):
    """Raised when declared dependencies loop back onto themselves."""

    def __init__(self, chain: Sequence[str]):
        self.chain = list(chain)
        super().__init__(f"Dependency cycle detected: {' -> '.join(self.chain)}")


class CachePathError(BundlerError):
    """Raised when a cache key would place a file outside the cache root."""

    def __init__(self, relative_path: str):
        self.relative_path = relative_path
        super().__init__(f"Cache key escapes the cache directory: '{relative_path}'")
