"""Registry client: fetch packuments from npm style registries."""

from __future__ import annotations

import logging
import urllib.parse
from typing import Dict, Optional, Tuple

from constants import Constants
from common.errors import InvalidPackumentDataError, RegistryFetchError
from common.http_client import get_json
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from domain.packument import Packument
from domain.registry import Registry

logger = logging.getLogger(__name__)


def packument_url(registry: Registry, name: str) -> str:
    return f"{registry.url}/{urllib.parse.quote(name, safe='@')}"


def request_headers(registry: Registry) -> Dict[str, str]:
    headers = {
        "Accept": Constants.NPM_INSTALL_ACCEPT,
        "User-Agent": Constants.USER_AGENT,
    }
    if registry.auth is not None:
        headers.update(registry.auth.auth_headers())
    return headers


class PackumentFetcher:
    """Fetches packuments and remembers them for the rest of the invocation.

    Not-found answers are remembered too; transport errors are not, so a
    later call may succeed.
    """

    def __init__(self) -> None:
        self._memo: Dict[Tuple[str, str], Optional[Packument]] = {}

    def remember(self, registry: Registry, name: str, packument: Optional[Packument]) -> None:
        self._memo[(str(registry.url), name)] = packument

    def is_cached(self, registry: Registry, name: str) -> bool:
        return (str(registry.url), name) in self._memo

    def fetch_packument(self, registry: Registry, name: str) -> Optional[Packument]:
        """Fetch the packument for ``name``.

        Returns:
            The packument, or None if the registry answered 404.

        Raises:
            RegistryFetchError: On transport failure, a non-2xx/404 status or
                a body that is not a packument.
        """
        key = (str(registry.url), name)
        if key in self._memo:
            return self._memo[key]

        url = packument_url(registry, name)
        status_code, data = get_json(url, context="registry", headers=request_headers(registry))

        if status_code == 404:
            logger.debug(
                "Packument not found",
                extra=extra_context(
                    event="http_response",
                    component="registry_client",
                    outcome="not_found",
                    status_code=status_code,
                    target=safe_url(url)
                )
            )
            self._memo[key] = None
            return None
        if not 200 <= status_code < 300 or data is None:
            raise RegistryFetchError(safe_url(url), status_code)

        try:
            packument = Packument.from_json(data)
        except InvalidPackumentDataError as exc:
            raise RegistryFetchError(safe_url(url), status_code, str(exc)) from exc

        if is_debug_enabled(logger):
            logger.debug(
                "Packument fetched",
                extra=extra_context(
                    event="decision",
                    component="registry_client",
                    action="fetch_packument",
                    outcome="found",
                    target=safe_url(url),
                    count=len(packument.versions)
                )
            )
        self._memo[key] = packument
        return packument

    __call__ = fetch_packument
