"""Data model for resolved and cached modules."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator


@dataclass(frozen=True)
class IncludeDirectory:
    """Local root searched for relative specifiers."""

    path: Path

    def __post_init__(self):
        if not Path(self.path).is_absolute():
            raise ValueError(f"Include directory must be absolute: {self.path}")
        object.__setattr__(self, "path", Path(self.path))


@dataclass(frozen=True)
class PackageRoot:
    """Vendored package root, restricted to an allow-list of package prefixes."""

    path: Path
    packages: Tuple[str, ...]

    def __post_init__(self):
        if not Path(self.path).is_absolute():
            raise ValueError(f"Package root must be absolute: {self.path}")
        if not self.packages:
            raise ValueError(f"Package root {self.path} allows no packages")
        object.__setattr__(self, "path", Path(self.path))
        object.__setattr__(self, "packages", tuple(self.packages))

    def allows(self, package_name: str) -> bool:
        return any(package_name.startswith(p) for p in self.packages)


ResolutionRoot = Union[IncludeDirectory, PackageRoot]


@dataclass(frozen=True)
class ResolvedModule:
    """A specifier pinned to a file under one resolution root.

    ``relative_path`` always uses forward slashes and is the cache key.
    """

    local_path: Path
    root: ResolutionRoot
    relative_path: str


@dataclass
class Module:
    """A resolved module together with its stat and content."""

    resolved: ResolvedModule
    mtime: Optional[datetime] = None
    content: Optional[str] = None
    dependencies: List[str] = field(default_factory=list)

    @property
    def relative_path(self) -> str:
        return self.resolved.relative_path

    @property
    def local_path(self) -> Path:
        return self.resolved.local_path


class ModuleRecord(BaseModel):
    """Persisted cache entry for one relative path."""

    mtime: datetime = Field(..., description="Modification time when cached")
    dependencies: Optional[List[str]] = Field(
        None, description="Dependency specifiers declared at refresh time"
    )

    @field_validator("mtime")
    @classmethod
    def validate_timezone(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            raise ValueError("mtime must carry a timezone")
        return v


@dataclass
class BundleEntry:
    """One cached body as it is concatenated into the bundle."""

    path: str
    content: str


@dataclass
class BundleResult:
    """Assembled bundle content, open to rewriting before it is written."""

    content: str
