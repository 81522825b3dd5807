"""Data model for incbundler."""

from .module import (
    BundleEntry,
    BundleResult,
    IncludeDirectory,
    Module,
    ModuleRecord,
    PackageRoot,
    ResolutionRoot,
    ResolvedModule,
)

__all__ = [
    "BundleEntry",
    "BundleResult",
    "IncludeDirectory",
    "Module",
    "ModuleRecord",
    "PackageRoot",
    "ResolutionRoot",
    "ResolvedModule",
]
