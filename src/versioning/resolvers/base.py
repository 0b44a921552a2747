"""Base class for registry version resolvers."""

from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional

import aiohttp
import semantic_version

from constants import Registries
from ..models import PackageNv, PackageReq


class VersionResolver(ABC):
    """Resolve a package requirement to a concrete published version.

    Instances hold only a shared HTTP session and a base URL, so one
    resolver can serve every concurrent lookup of a run.
    """

    def __init__(self, session: aiohttp.ClientSession, base_url: str):
        """Initialize the resolver.

        Args:
            session: Open aiohttp session shared across lookups.
            base_url: Registry base URL without trailing slash.
        """
        self.session = session
        self.base_url = base_url.rstrip("/")

    @property
    @abstractmethod
    def registry(self) -> Registries:
        """Registry served by this resolver."""

    @abstractmethod
    async def fetch_candidates(self, req: PackageReq) -> Optional[Any]:
        """Fetch registry metadata for ``req.name``; None when the package is unknown."""

    @abstractmethod
    def pick(self, req: PackageReq, info: Any) -> Optional[str]:
        """Select a version string from fetched metadata, or None."""

    async def req_to_nv(self, req: PackageReq) -> Optional[PackageNv]:
        """Map a requirement to a name/version pair, or None when nothing matches.

        Raises:
            LookupFailure: When the registry cannot be queried.
        """
        info = await self.fetch_candidates(req)
        if info is None:
            return None
        version = self.pick(req, info)
        if version is None:
            return None
        return PackageNv(name=req.name, version=version)


def parse_versions(candidates: Iterable[str]) -> List[semantic_version.Version]:
    """Parse version strings, skipping anything that is not valid semver."""
    parsed = []
    for v in candidates:
        try:
            parsed.append(semantic_version.Version(v))
        except ValueError:
            continue  # Skip invalid versions
    return parsed


def select_preferring_latest(
    version_text: str,
    candidates: Iterable[str],
    latest: Optional[str],
) -> Optional[str]:
    """Pick ``latest`` if it satisfies the range, else the highest match.

    Args:
        version_text: npm-style range text ("*" for any).
        candidates: Selectable version strings.
        latest: Version the registry advertises as latest, if any.
    """
    try:
        spec = semantic_version.NpmSpec(version_text)
    except ValueError:
        return None
    versions = parse_versions(candidates)
    if latest:
        try:
            latest_version = semantic_version.Version(latest)
        except ValueError:
            latest_version = None
        if latest_version is not None and latest_version in versions and spec.match(latest_version):
            return str(latest_version)
    best = spec.select(versions)
    return str(best) if best is not None else None
