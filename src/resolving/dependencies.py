"""Breadth-first walk over the dependency graph of a package.

Each package is visited once; the first spec seen for a name wins and later
conflicting requests for the same name are ignored. This is deliberately not
a solver: there is no backtracking and no range intersection.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, List, Mapping, Optional, Set, Tuple

import semantic_version

from common.errors import VersionNotFoundError
from common.logging_utils import extra_context, is_debug_enabled
from domain.domain_name import is_builtin_package
from domain.registry import Registry
from domain.versions import (
    SpecKind,
    VersionSpec,
    is_package_url,
    is_semantic_version,
    parse_semantic_version,
    parse_version_spec,
)
from resolving.models import FetchPackument, ResolvedDependency, UnresolvedDependency
from resolving.resolver import try_resolve_from_registries

logger = logging.getLogger(__name__)


def _tag_covers(installed: str, tag: str) -> bool:
    """True if ``tag`` is an npm range that the semver ``installed`` falls in.

    Named dist-tags other than latest can not be judged without the registry.
    """
    if not is_semantic_version(installed):
        return False
    try:
        npm_range = semantic_version.NpmSpec(tag)
    except ValueError:
        return False
    return npm_range.match(parse_semantic_version(installed))


def is_satisfied_by(installed: Optional[str], spec: Optional[VersionSpec]) -> bool:
    """Return True if an installed manifest version covers ``spec``.

    A url install covers anything and any install covers latest. A semver
    install covers a requested semver it equals or exceeds within the same
    major, or the same minor while the major is 0. Range tags such as
    ``^2.0.0`` are matched with npm semantics.
    """
    if installed is None:
        return False
    if is_package_url(installed):
        return True
    if spec is None or spec.is_latest:
        return True
    if spec.kind == SpecKind.URL:
        return installed == spec.raw
    if spec.kind == SpecKind.TAG:
        return _tag_covers(installed, spec.raw)
    if not is_semantic_version(installed):
        return False
    have = parse_semantic_version(installed)
    want = parse_semantic_version(spec.raw)
    if have.major != want.major:
        return False
    if have.major == 0 and have.minor != want.minor:
        return False
    return have >= want


def resolve_dependencies(
    fetch_packument: FetchPackument,
    primary: Registry,
    upstream: Registry,
    root_name: str,
    root_spec: Optional[VersionSpec],
    deep: bool,
    installed: Optional[Mapping[str, str]] = None,
    use_upstream: bool = True,
) -> Tuple[List[ResolvedDependency], List[UnresolvedDependency]]:
    """Resolve ``root_name`` and its dependencies.

    Args:
        fetch_packument: Packument source, see ``resolving.models.FetchPackument``.
        primary: Registry tried first for every node.
        upstream: Fallback registry.
        root_name: Package to start from; always resolved, never internal.
        root_spec: Requested version of the root, None for latest.
        deep: Also expand the dependencies of dependencies.
        installed: Current manifest dependencies, used to mark nodes internal.
        use_upstream: Whether the fallback registry may be used.

    Returns:
        ``(resolved, unresolved)`` in breadth-first visiting order.
    """
    if root_spec is not None and root_spec.kind == SpecKind.URL:
        raise ValueError("dependencies of url packages can not be resolved")
    installed = installed or {}
    resolved: List[ResolvedDependency] = []
    unresolved: List[UnresolvedDependency] = []
    visited: Set[str] = set()
    queue: Deque[Tuple[str, Optional[str]]] = deque([(root_name, None)])
    root_pending = True

    while queue:
        name, raw_spec = queue.popleft()
        if name in visited:
            continue
        visited.add(name)
        is_self = root_pending
        root_pending = False

        if is_self:
            spec = root_spec
        else:
            try:
                spec = parse_version_spec(raw_spec)
            except ValueError:
                unresolved.append(UnresolvedDependency(
                    name=name, spec=None,
                    reason=VersionNotFoundError(name, raw_spec or "", []),
                ))
                continue

        if not is_self:
            if is_builtin_package(name) or is_satisfied_by(installed.get(name), spec):
                resolved.append(ResolvedDependency(
                    name=name,
                    version=installed.get(name) or (spec.raw if spec else ""),
                    upstream=False,
                    internal=True,
                ))
                continue
            if spec is not None and spec.kind == SpecKind.URL:
                resolved.append(ResolvedDependency(
                    name=name, version=spec.raw, upstream=False, internal=True,
                ))
                continue

        result, error, is_upstream = try_resolve_from_registries(
            fetch_packument, name, spec, primary, upstream, use_upstream
        )
        if error is not None:
            if is_debug_enabled(logger):
                logger.debug(
                    "Dependency unresolved",
                    extra=extra_context(
                        event="decision",
                        component="dependency_walker",
                        outcome=type(error).__name__,
                        target=name
                    )
                )
            unresolved.append(UnresolvedDependency(name=name, spec=spec, reason=error))
            continue

        version = result.packument_version
        resolved.append(ResolvedDependency(
            name=name,
            version=version.version,
            upstream=is_upstream,
            internal=False,
            is_self=is_self,
        ))

        if is_self or deep:
            for dep_name in sorted(version.dependencies):
                if dep_name not in visited:
                    queue.append((dep_name, version.dependencies[dep_name]))

    return resolved, unresolved
