"""The Unity project manifest (Packages/manifest.json) and pure edits on it.

Every function here takes a manifest and returns a new one; inputs are never
modified, so callers can keep the previous value around and diff.

Optional collections follow one rule: ``scoped_registries`` and
``testables`` are either None (property absent on disk) or non-empty once a
function in this module has touched them.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from domain.domain_name import DomainName
from domain.registry import RegistryUrl
from domain.scoped_registry import ScopedRegistry

_KNOWN_KEYS = ("dependencies", "scopedRegistries", "testables")


@dataclass(frozen=True)
class UnityProjectManifest:
    dependencies: Mapping[str, str] = field(default_factory=dict)
    scoped_registries: Optional[Tuple[ScopedRegistry, ...]] = None
    testables: Optional[Tuple[DomainName, ...]] = None
    # Any other top-level keys, written back untouched.
    extras: Mapping[str, Any] = field(default_factory=dict)
    key_order: Tuple[str, ...] = field(default=(), compare=False)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "UnityProjectManifest":
        """Build from the decoded manifest.json object.

        Raises:
            ValueError: If a known property has the wrong shape.
        """
        if not isinstance(data, Mapping):
            raise ValueError("manifest must be a json object")
        deps = data.get("dependencies", {})
        if not isinstance(deps, Mapping):
            raise ValueError("'dependencies' must be an object")

        scoped = None
        if "scopedRegistries" in data:
            raw = data["scopedRegistries"]
            if not isinstance(raw, list):
                raise ValueError("'scopedRegistries' must be an array")
            scoped = tuple(ScopedRegistry.from_json(entry) for entry in raw)

        testables = None
        if "testables" in data:
            raw = data["testables"]
            if not isinstance(raw, list) or not all(isinstance(t, str) for t in raw):
                raise ValueError("'testables' must be an array of strings")
            testables = tuple(DomainName(t) for t in raw)

        return cls(
            dependencies={DomainName(k): str(v) for k, v in deps.items()},
            scoped_registries=scoped,
            testables=testables,
            extras={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
            key_order=tuple(data.keys()),
        )

    def to_json(self) -> Dict[str, Any]:
        """Encode to the on-disk shape, keeping the original key order."""
        values: Dict[str, Any] = dict(self.extras)
        values["dependencies"] = {str(k): v for k, v in self.dependencies.items()}
        if self.scoped_registries is not None:
            values["scopedRegistries"] = [r.to_json() for r in self.scoped_registries]
        if self.testables is not None:
            values["testables"] = [str(t) for t in self.testables]

        ordered: Dict[str, Any] = {}
        for key in self.key_order:
            if key in values:
                ordered[key] = values.pop(key)
        for key in _KNOWN_KEYS:
            if key in values:
                ordered[key] = values.pop(key)
        ordered.update(values)
        return ordered


def has_dependency(manifest: UnityProjectManifest, name: str) -> bool:
    return name in manifest.dependencies


def add_dependency(manifest: UnityProjectManifest, name: str, version: str) -> UnityProjectManifest:
    """Insert or overwrite the dependency entry for ``name``."""
    dependencies = dict(manifest.dependencies)
    dependencies[DomainName(name)] = str(version)
    return replace(manifest, dependencies=dependencies)


def remove_dependency(manifest: UnityProjectManifest, name: str) -> UnityProjectManifest:
    if name not in manifest.dependencies:
        return manifest
    dependencies = {k: v for k, v in manifest.dependencies.items() if k != name}
    return replace(manifest, dependencies=dependencies)


def _with_scoped_registries(manifest, registries) -> UnityProjectManifest:
    registries = tuple(r for r in registries if r.scopes)
    return replace(manifest, scoped_registries=registries or None)


def map_scoped_registry(
    manifest: UnityProjectManifest,
    url: RegistryUrl,
    fn: Callable[[Optional[ScopedRegistry]], Optional[ScopedRegistry]],
) -> UnityProjectManifest:
    """Replace the scoped registry for ``url`` with ``fn(current)``.

    ``current`` is None when no entry for ``url`` exists. Returning None
    removes the entry. Entries left without scopes are dropped, and the
    property itself is dropped when no entries remain.
    """
    registries = list(manifest.scoped_registries or ())
    index = next((i for i, r in enumerate(registries) if r.url == url), None)
    current = registries[index] if index is not None else None
    updated = fn(current)

    if index is not None:
        if updated is None:
            del registries[index]
        else:
            registries[index] = updated
    elif updated is not None:
        registries.append(updated)
    return _with_scoped_registries(manifest, registries)


def map_all_scoped_registries(
    manifest: UnityProjectManifest,
    fn: Callable[[ScopedRegistry], Optional[ScopedRegistry]],
) -> UnityProjectManifest:
    """Apply ``fn`` to every scoped registry with the same dropping rules."""
    if manifest.scoped_registries is None:
        return manifest
    updated = (fn(r) for r in manifest.scoped_registries)
    return _with_scoped_registries(manifest, (r for r in updated if r is not None))


def add_testable(manifest: UnityProjectManifest, name: str) -> UnityProjectManifest:
    testables = manifest.testables or ()
    if name in testables:
        return manifest
    return replace(manifest, testables=testables + (DomainName(name),))


def remove_testable(manifest: UnityProjectManifest, name: str) -> UnityProjectManifest:
    if manifest.testables is None:
        return manifest
    remaining = tuple(t for t in manifest.testables if t != name)
    return replace(manifest, testables=remaining or None)
