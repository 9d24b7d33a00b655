"""Resolve a package name plus version spec against registries."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from common.errors import PackumentNotFoundError, RegistryFetchError, VersionNotFoundError
from common.logging_utils import extra_context, is_debug_enabled
from domain.packument import Packument, PackumentVersion
from domain.registry import Registry
from domain.versions import SpecKind, VersionSpec
from resolving.models import FetchPackument, ResolvedPackument, ResolveError

logger = logging.getLogger(__name__)


def try_resolve_packument_version(
    packument: Packument, spec: Optional[VersionSpec]
) -> Tuple[Optional[PackumentVersion], Optional[VersionNotFoundError]]:
    """Select the version of ``packument`` matching ``spec``.

    ``None`` and the ``latest`` tag pick the highest release; when only
    prereleases exist the ``latest`` dist-tag is used. Other tags go through
    dist-tags, semantic versions must match exactly.
    """
    available = packument.version_list()

    if spec is not None and spec.kind == SpecKind.URL:
        raise ValueError("package urls are not resolved against a registry")

    if spec is None or spec.is_latest:
        version = packument.latest_release() or packument.dist_tags.get("latest")
        requested = "latest"
    elif spec.kind == SpecKind.TAG:
        version = packument.dist_tags.get(spec.raw)
        requested = spec.raw
    else:
        version = spec.raw
        requested = spec.raw

    if version is None or version not in packument.versions:
        return None, VersionNotFoundError(packument.name, requested, available)
    return packument.versions[version], None


def try_resolve(
    fetch_packument: FetchPackument,
    name: str,
    spec: Optional[VersionSpec],
    registry: Registry,
) -> Tuple[Optional[ResolvedPackument], Optional[ResolveError]]:
    """Fetch the packument for ``name`` from ``registry`` and pick a version.

    Returns:
        ``(resolved, None)`` or ``(None, error)`` where error is one of
        PackumentNotFoundError, VersionNotFoundError or RegistryFetchError.
    """
    try:
        packument = fetch_packument(registry, name)
    except RegistryFetchError as exc:
        return None, exc
    if packument is None:
        return None, PackumentNotFoundError(name)

    version, error = try_resolve_packument_version(packument, spec)
    if error is not None:
        return None, error
    return ResolvedPackument(packument=packument, packument_version=version, source=registry), None


def try_resolve_from_registries(
    fetch_packument: FetchPackument,
    name: str,
    spec: Optional[VersionSpec],
    primary: Registry,
    upstream: Registry,
    use_upstream: bool = True,
) -> Tuple[Optional[ResolvedPackument], Optional[ResolveError], bool]:
    """Resolve against ``primary``, then ``upstream`` if allowed.

    Returns:
        ``(resolved, error, is_upstream)``. When both registries fail the
        primary error is kept, unless the primary failed at the transport
        level and upstream gave an authoritative answer.
    """
    resolved, error = try_resolve(fetch_packument, name, spec, primary)
    if error is None or not use_upstream:
        return resolved, error, False

    upstream_resolved, upstream_error = try_resolve(fetch_packument, name, spec, upstream)
    if upstream_error is None:
        if is_debug_enabled(logger):
            logger.debug(
                "Resolved from upstream",
                extra=extra_context(
                    event="decision",
                    component="resolver",
                    action="fallback",
                    outcome="upstream",
                    target=name
                )
            )
        return upstream_resolved, None, True

    if isinstance(error, RegistryFetchError) and not isinstance(upstream_error, RegistryFetchError):
        return None, upstream_error, False
    return None, error, False
