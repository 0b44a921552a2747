"""Data models for package requirements and version selection."""

from dataclasses import dataclass
from typing import Union

from constants import Registries


@dataclass(frozen=True)
class PackageReq:
    """A package name plus the version constraint text the user typed.

    ``version_text`` is ``"*"`` when no constraint was supplied.
    """
    name: str
    version_text: str = "*"

    def __str__(self) -> str:
        if self.version_text == "*":
            return self.name
        return f"{self.name}@{self.version_text}"


@dataclass(frozen=True)
class AddPackageReq:
    """A classified requirement: which registry, and what to look up."""
    registry: Registries
    req: PackageReq

    @property
    def prefixed_name(self) -> str:
        """Registry-prefixed package name, e.g. ``jsr:@std/path``."""
        return f"{self.registry.value}:{self.req.name}"


@dataclass(frozen=True)
class PackageNv:
    """A concrete published version of a package."""
    name: str
    version: str


@dataclass(frozen=True)
class SelectedPackage:
    """A resolved entry ready to merge into a manifest."""
    import_name: str
    package_name: str  # registry-prefixed
    version_req: str  # range operator + resolved version


@dataclass(frozen=True)
class PackageNotFound:
    """Lookup succeeded but no published version matched."""
    package_name: str


PackageAndVersion = Union[SelectedPackage, PackageNotFound]
