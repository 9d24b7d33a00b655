"""Shared HTTP helpers used by the registry client.

Encapsulates common request/timeout error handling so callers avoid
duplicating try/except blocks. Transport failures surface as
``RegistryFetchError``; deciding what to do with them is up to the caller.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple

import requests

from constants import Constants
from common.errors import RegistryFetchError
from common.logging_utils import extra_context, is_debug_enabled, redact, safe_url, Timer

logger = logging.getLogger(__name__)


def safe_get(url: str, *, context: str, **kwargs: Any) -> requests.Response:
    """Perform a GET request with consistent error handling and DEBUG traces.

    Raises:
        RegistryFetchError: On timeout or connection failure.
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
                    context=context
                )
            )
        try:
            res = requests.get(url, timeout=Constants.REQUEST_TIMEOUT, **kwargs)
        except requests.Timeout as exc:
            logger.warning(
                "%s request timed out after %s seconds",
                context,
                Constants.REQUEST_TIMEOUT,
            )
            raise RegistryFetchError(safe_target, cause="timeout") from exc
        except requests.RequestException as exc:  # includes ConnectionError
            # Proxy and adapter errors can echo the request headers.
            cause = redact(str(exc))
            logger.warning("%s connection error: %s", context, cause)
            raise RegistryFetchError(safe_target, cause=cause) from exc

    if is_debug_enabled(logger):
        logger.debug(
            "HTTP response",
            extra=extra_context(
                event="http_response",
                component="http_client",
                action="GET",
                outcome="success" if res.ok else "non_2xx",
                status_code=res.status_code,
                duration_ms=t.duration_ms(),
                target=safe_target,
                context=context
            )
        )
    return res


def get_json(
    url: str,
    *,
    context: str,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Optional[Any]]:
    """Perform a GET request and parse a JSON body.

    Returns:
        Tuple of (status_code, parsed_json_or_none). The body is only parsed
        for 2xx responses.

    Raises:
        RegistryFetchError: On transport failure or an undecodable 2xx body.
    """
    res = safe_get(url, context=context, headers=headers, **kwargs)
    if not 200 <= res.status_code < 300:
        return res.status_code, None
    try:
        return res.status_code, json.loads(res.text)
    except json.JSONDecodeError as exc:
        if is_debug_enabled(logger):
            logger.debug(
                "JSON decode error",
                extra=extra_context(
                    event="parse",
                    component="http_client",
                    action="get_json",
                    outcome="json_decode_error",
                    status_code=res.status_code,
                    target=safe_url(url)
                )
            )
        raise RegistryFetchError(safe_url(url), res.status_code, "invalid json") from exc
