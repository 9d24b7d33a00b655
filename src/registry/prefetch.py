"""Concurrent packument prefetch for a batch of requested packages.

Only warms a ``PackumentFetcher``; failures are logged at DEBUG and left
for the sequential resolution path to report.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Dict, Iterable, List, Optional

import aiohttp

from constants import Constants
from common.errors import InvalidPackumentDataError
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from domain.packument import Packument
from domain.registry import Registry
from registry.client import PackumentFetcher, packument_url, request_headers

logger = logging.getLogger(__name__)


async def _fetch_one(
    session: aiohttp.ClientSession,
    semaphore: asyncio.Semaphore,
    registry: Registry,
    name: str,
) -> Optional[Packument]:
    """Return the packument, None for 404, or raise on any other outcome."""
    url = packument_url(registry, name)
    async with semaphore:
        async with session.get(url, headers=request_headers(registry)) as response:
            if response.status == 404:
                return None
            if response.status < 200 or response.status >= 300:
                raise aiohttp.ClientResponseError(
                    response.request_info, (), status=response.status
                )
            text = await response.text()
    return Packument.from_json(json.loads(text))


async def prefetch_packuments_async(
    registry: Registry,
    names: Iterable[str],
    session: Optional[aiohttp.ClientSession] = None,
    max_concurrency: int = Constants.PREFETCH_MAX_CONCURRENCY,
) -> Dict[str, Optional[Packument]]:
    """Fetch packuments for ``names`` concurrently.

    Returns:
        Mapping from name to packument (None for 404) for every name whose
        fetch completed. Names that failed are absent.
    """
    unique: List[str] = list(dict.fromkeys(names))
    semaphore = asyncio.Semaphore(max_concurrency)
    owns_session = session is None
    if session is None:
        session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=Constants.REQUEST_TIMEOUT)
        )
    try:
        results = await asyncio.gather(
            *(_fetch_one(session, semaphore, registry, name) for name in unique),
            return_exceptions=True,
        )
    finally:
        if owns_session:
            await session.close()

    fetched: Dict[str, Optional[Packument]] = {}
    for name, result in zip(unique, results):
        if isinstance(result, (aiohttp.ClientError, asyncio.TimeoutError,
                               InvalidPackumentDataError, ValueError)):
            if is_debug_enabled(logger):
                logger.debug(
                    "Prefetch failed",
                    extra=extra_context(
                        event="http_exception",
                        component="prefetch",
                        outcome=type(result).__name__,
                        target=safe_url(packument_url(registry, name))
                    )
                )
            continue
        if isinstance(result, BaseException):
            raise result
        fetched[name] = result
    return fetched


def prefetch_packuments(fetcher: PackumentFetcher, registry: Registry, names: Iterable[str]) -> int:
    """Warm ``fetcher`` with the packuments of ``names``.

    Returns:
        Number of names now cached.
    """
    pending = [n for n in dict.fromkeys(names) if not fetcher.is_cached(registry, n)]
    if not pending:
        return 0
    fetched = asyncio.run(prefetch_packuments_async(registry, pending))
    for name, packument in fetched.items():
        fetcher.remember(registry, name, packument)
    logger.debug("Prefetched %d of %d packuments", len(fetched), len(pending))
    return len(fetched)
