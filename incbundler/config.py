"""Bundler configuration: pydantic models loaded from YAML or JSON."""

import os
from pathlib import Path
from typing import List, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from incbundler.constants import STORE_FILENAME
from incbundler.exceptions import InvalidConfigurationError
from incbundler.model import IncludeDirectory, PackageRoot, ResolutionRoot
from incbundler.utils import expand_home


def validate_non_empty_string(v: str) -> str:
    """Validate that a string is not empty."""
    if not v or not v.strip():
        raise ValueError("must be a non-empty string")
    return v


def absolute_path(path: str) -> Path:
    """Expand the ``~/`` shorthand and make ``path`` absolute."""
    return Path(os.path.abspath(expand_home(path)))


class PackageRootConfig(BaseModel):
    """A vendored package directory and the packages it may serve."""

    model_config = ConfigDict(extra="forbid")

    root_dir: str = Field(..., description="Directory containing node_modules/")
    packages: List[str] = Field(..., description="Allowed package-name prefixes")

    @field_validator("root_dir")
    @classmethod
    def validate_root_dir(cls, v: str) -> str:
        return validate_non_empty_string(v)

    @field_validator("packages")
    @classmethod
    def validate_packages(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("at least one package prefix is required")
        for name in v:
            validate_non_empty_string(name)
        return v

    def to_root(self) -> PackageRoot:
        return PackageRoot(absolute_path(self.root_dir), tuple(self.packages))


class BundleConfig(BaseModel):
    """Configuration of one bundler instance."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., description="File name of the bundle")
    cache_dir: str = Field(..., description="Directory holding cached bodies")
    output_dir: str = Field(..., description="Directory the bundle is written to")
    include_dirs: List[str] = Field(
        default_factory=list, description="Roots for relative specifiers"
    )
    node_modules: List[PackageRootConfig] = Field(
        default_factory=list, description="Roots for bare package specifiers"
    )

    @field_validator("name", "cache_dir", "output_dir")
    @classmethod
    def validate_required_string(cls, v: str) -> str:
        return validate_non_empty_string(v)

    @classmethod
    def from_dict(cls, data: dict) -> "BundleConfig":
        """Validate a configuration mapping.

        Raises:
            InvalidConfigurationError: If required fields are missing or malformed
        """
        if not isinstance(data, dict):
            raise InvalidConfigurationError(
                f"Configuration must be a mapping, got {type(data).__name__}"
            )
        try:
            return cls(**data)
        except PydanticValidationError as e:
            raise InvalidConfigurationError(f"Invalid configuration: {e}") from e

    @classmethod
    def from_yaml(cls, path_or_content: Union[str, Path]) -> "BundleConfig":
        """Load configuration from a YAML (or JSON) file or string content."""
        try:
            if isinstance(path_or_content, Path) or "\n" not in path_or_content:
                # Treat as file path
                with open(path_or_content, "r") as f:
                    data = yaml.safe_load(f)
            else:
                # Treat as YAML content string
                data = yaml.safe_load(path_or_content)
        except OSError as e:
            raise InvalidConfigurationError(
                f"Cannot read configuration {path_or_content}: {e}"
            ) from e
        except yaml.YAMLError as e:
            raise InvalidConfigurationError(f"Malformed configuration: {e}") from e

        return cls.from_dict(data)

    @property
    def cache_path(self) -> Path:
        return absolute_path(self.cache_dir)

    @property
    def store_path(self) -> Path:
        return self.cache_path / STORE_FILENAME

    @property
    def output_path(self) -> Path:
        return absolute_path(self.output_dir)

    @property
    def bundle_path(self) -> Path:
        return self.output_path / self.name

    def include_directories(self) -> List[IncludeDirectory]:
        """
        Absolute include directories, in configured order.

        Raises:
            InvalidConfigurationError: If a directory does not exist
        """
        dirs = []
        for raw in self.include_dirs:
            path = absolute_path(raw)
            if not path.is_dir():
                raise InvalidConfigurationError(f"'{path}' is not a directory")
            dirs.append(IncludeDirectory(path))
        return dirs

    def package_roots(self) -> List[PackageRoot]:
        return [entry.to_root() for entry in self.node_modules]

    def resolution_roots(self) -> List[ResolutionRoot]:
        """Include directories followed by package roots."""
        return [*self.include_directories(), *self.package_roots()]
