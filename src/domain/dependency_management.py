"""Removing a dependency together with everything that references it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from common.errors import PackumentNotFoundError
from domain.project_manifest import (
    UnityProjectManifest,
    map_all_scoped_registries,
    remove_dependency,
    remove_testable,
)
from domain.scoped_registry import remove_scope


@dataclass(frozen=True)
class RemovedDependency:
    name: str
    version: str


def try_remove_project_dependency(
    manifest: UnityProjectManifest, name: str
) -> Tuple[Optional[Tuple[UnityProjectManifest, RemovedDependency]], Optional[PackumentNotFoundError]]:
    """Remove ``name`` from dependencies, scopes and testables.

    Returns:
        ``((updated, removed), None)`` on success, or
        ``(None, PackumentNotFoundError(name))`` if the manifest does not
        depend on ``name``.
    """
    version = manifest.dependencies.get(name)
    if version is None:
        return None, PackumentNotFoundError(name)

    updated = remove_dependency(manifest, name)
    updated = map_all_scoped_registries(updated, lambda r: remove_scope(r, name))
    updated = remove_testable(updated, name)
    return (updated, RemovedDependency(name=name, version=version)), None
