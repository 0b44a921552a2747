"""JSR version resolver backed by the package ``meta.json`` document."""

import logging
from typing import Any, Optional

from constants import Registries
from common.http_client import get_json
from common.logging_utils import extra_context, is_debug_enabled
from ..models import PackageReq
from .base import VersionResolver, select_preferring_latest

logger = logging.getLogger(__name__)


class JsrVersionResolver(VersionResolver):
    """Resolver for JSR packages (``@scope/name``)."""

    @property
    def registry(self) -> Registries:
        """Return the JSR registry."""
        return Registries.JSR

    def meta_url(self, name: str) -> str:
        """URL of the package metadata document for ``@scope/name``."""
        return f"{self.base_url}/{name}/meta.json"

    async def fetch_candidates(self, req: PackageReq) -> Optional[Any]:
        """Fetch ``meta.json``; None when the package does not exist."""
        status, data = await get_json(self.session, self.meta_url(req.name), context="jsr")
        if status == 404 or not isinstance(data, dict):
            return None
        return data

    def pick(self, req: PackageReq, info: Any) -> Optional[str]:
        """Pick the best non-yanked version matching the requirement."""
        versions = info.get("versions") or {}
        candidates = [
            v for v, meta in versions.items()
            if not (isinstance(meta, dict) and meta.get("yanked"))
        ]
        picked = select_preferring_latest(req.version_text, candidates, info.get("latest"))
        if is_debug_enabled(logger):
            logger.debug(
                "JSR version selection",
                extra=extra_context(
                    event="decision",
                    component="jsr_resolver",
                    action="pick",
                    target=str(req),
                    outcome="selected" if picked else "no_match",
                    candidate_count=len(candidates),
                ),
            )
        return picked
