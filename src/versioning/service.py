"""Version resolution service: one requirement, and the bounded batch driver."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List

from constants import Constants
from common.errors import PackageNotFoundError
from common.logging_utils import extra_context, is_debug_enabled
from .models import AddPackageReq, PackageAndVersion, PackageNotFound, SelectedPackage
from .resolvers.base import VersionResolver

logger = logging.getLogger(__name__)


def range_symbol_for(version_text: str) -> str:
    """Keep ``~`` when the user asked for it; everything else becomes ``^``."""
    return "~" if version_text.startswith("~") else "^"


async def select_version_for_req(
    jsr_resolver: VersionResolver,
    npm_resolver: VersionResolver,
    add_req: AddPackageReq,
) -> PackageAndVersion:
    """Resolve one requirement to a SelectedPackage or a PackageNotFound.

    Raises:
        LookupFailure: When the registry lookup itself fails.
    """
    resolvers = {r.registry: r for r in (jsr_resolver, npm_resolver)}
    resolver = resolvers[add_req.registry]
    req = add_req.req
    prefixed_name = add_req.prefixed_name

    nv = await resolver.req_to_nv(req)
    if nv is None:
        return PackageNotFound(prefixed_name)

    return SelectedPackage(
        import_name=req.name,
        package_name=prefixed_name,
        version_req=f"{range_symbol_for(req.version_text)}{nv.version}",
    )


async def resolve_all(
    add_reqs: Iterable[AddPackageReq],
    jsr_resolver: VersionResolver,
    npm_resolver: VersionResolver,
    max_concurrency: int = 0,
) -> List[SelectedPackage]:
    """Resolve every requirement with bounded concurrency, failing fast.

    Results are collected in completion order. The first PackageNotFound
    raises PackageNotFoundError and the first lookup error is re-raised;
    lookups still in flight are cancelled and their results discarded.
    """
    limit = max_concurrency or Constants.MAX_CONCURRENCY
    semaphore = asyncio.Semaphore(limit)

    async def _bounded(add_req: AddPackageReq) -> PackageAndVersion:
        async with semaphore:
            return await select_version_for_req(jsr_resolver, npm_resolver, add_req)

    tasks = [asyncio.ensure_future(_bounded(r)) for r in add_reqs]
    if is_debug_enabled(logger):
        logger.debug(
            "Resolving packages",
            extra=extra_context(
                event="function_entry",
                component="resolution",
                action="resolve_all",
                count=len(tasks),
                max_concurrency=limit,
            ),
        )

    selected: List[SelectedPackage] = []
    try:
        for next_done in asyncio.as_completed(tasks):
            result = await next_done
            if isinstance(result, PackageNotFound):
                raise PackageNotFoundError(result.package_name)
            selected.append(result)
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()
        # Retrieve every outcome so abandoned lookups do not warn at shutdown.
        await asyncio.gather(*tasks, return_exceptions=True)
    return selected
