"""NPM version resolver using semantic versioning and dist-tags."""

import logging
import urllib.parse
from typing import Any, Optional

from constants import Registries
from common.http_client import get_json
from common.logging_utils import extra_context, is_debug_enabled
from ..models import PackageReq
from ..parser import is_dist_tag
from .base import VersionResolver, select_preferring_latest

logger = logging.getLogger(__name__)


class NpmVersionResolver(VersionResolver):
    """Resolver for NPM packages using the registry packument."""

    @property
    def registry(self) -> Registries:
        """Return the NPM registry."""
        return Registries.NPM

    def packument_url(self, name: str) -> str:
        """Packument URL; the scope separator of ``@scope/name`` is encoded."""
        return f"{self.base_url}/{urllib.parse.quote(name, safe='@')}"

    async def fetch_candidates(self, req: PackageReq) -> Optional[Any]:
        """Fetch the abbreviated packument; None when the package does not exist."""
        headers = {
            "Accept": "application/vnd.npm.install-v1+json; q=1.0, application/json; q=0.8, */*"
        }
        status, data = await get_json(
            self.session, self.packument_url(req.name), context="npm", headers=headers
        )
        if status == 404 or not isinstance(data, dict):
            return None
        return data

    def pick(self, req: PackageReq, info: Any) -> Optional[str]:
        """Apply dist-tag or semver range rules to select a version."""
        versions = list((info.get("versions") or {}).keys())
        dist_tags = info.get("dist-tags") or {}

        if is_dist_tag(req.version_text):
            tagged = dist_tags.get(req.version_text)
            picked = tagged if tagged in versions else None
        else:
            picked = select_preferring_latest(req.version_text, versions, dist_tags.get("latest"))

        if is_debug_enabled(logger):
            logger.debug(
                "NPM version selection",
                extra=extra_context(
                    event="decision",
                    component="npm_resolver",
                    action="pick",
                    target=str(req),
                    outcome="selected" if picked else "no_match",
                    candidate_count=len(versions),
                ),
            )
        return picked
