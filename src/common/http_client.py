"""Shared async HTTP helpers used by the registry lookup clients.

Encapsulates session setup and request/timeout error handling so the
resolvers avoid duplicating try/except blocks. Transport failures are
raised as ``LookupFailure``; a 404 is reported back to the caller, which
decides what "missing" means for its registry.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Optional, Tuple

import aiohttp

from constants import Constants
from common.errors import LookupFailure
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def create_session(timeout: Optional[int] = None) -> aiohttp.ClientSession:
    """Create a client session sized for the resolution pool."""
    client_timeout = aiohttp.ClientTimeout(total=timeout or Constants.REQUEST_TIMEOUT)
    connector = aiohttp.TCPConnector(limit=max(Constants.MAX_CONCURRENCY, 1))
    return aiohttp.ClientSession(
        timeout=client_timeout,
        connector=connector,
        headers={"User-Agent": Constants.USER_AGENT},
    )


async def get_json(
    session: aiohttp.ClientSession,
    url: str,
    *,
    context: str,
    headers: Optional[Dict[str, str]] = None,
) -> Tuple[int, Optional[Any]]:
    """Perform a GET request and parse the JSON body with DEBUG traces.

    Args:
        session: Open aiohttp session.
        url: Target URL.
        context: Human-readable source tag for logs (e.g., "jsr", "npm").
        headers: Optional request headers.

    Returns:
        Tuple of (status_code, parsed_json). ``parsed_json`` is None for 404.

    Raises:
        LookupFailure: On connection errors, timeouts, unexpected status
            codes or a body that is not JSON.
    """
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context,
                ),
            )
        try:
            async with session.get(url, headers=headers) as res:
                status = res.status
                text = await res.text() if status == 200 else ""
        except asyncio.TimeoutError as exc:
            logger.error(
                "%s request timed out after %s seconds",
                context,
                Constants.REQUEST_TIMEOUT,
            )
            raise LookupFailure(f"{context} request to {safe_target} timed out") from exc
        except aiohttp.ClientError as exc:
            logger.error("%s connection error: %s", context, exc)
            raise LookupFailure(f"{context} connection error for {safe_target}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise LookupFailure(f"{context} registry returned an undecodable body for {safe_target}") from exc

    if is_debug_enabled(logger):
        logger.debug(
            "HTTP response",
            extra=extra_context(
                event="http_response",
                component="http_client",
                action="GET",
                status_code=status,
                duration_ms=t.duration_ms(),
                target=safe_target,
                context=context,
            ),
        )

    if status == 404:
        return status, None
    if status != 200:
        raise LookupFailure(f"{context} registry returned HTTP {status} for {safe_target}")
    try:
        return status, json.loads(text)
    except json.JSONDecodeError as exc:
        raise LookupFailure(f"{context} registry returned invalid JSON for {safe_target}") from exc
