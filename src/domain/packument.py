"""Packument model: the registry metadata document of one package."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from common.errors import InvalidPackumentDataError
from domain.versions import is_semantic_version, parse_semantic_version, sort_versions


@dataclass(frozen=True)
class PackumentVersion:
    """The package.json of one published version."""
    name: str
    version: str
    dependencies: Mapping[str, str] = field(default_factory=dict)
    unity: Optional[str] = None
    unity_release: Optional[str] = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "PackumentVersion":
        """Build from a version entry of a packument.

        Raises:
            InvalidPackumentDataError: If required fields are missing.
        """
        if not isinstance(data, Mapping):
            raise InvalidPackumentDataError("version entry is not an object")
        name = data.get("name")
        version = data.get("version")
        if not isinstance(name, str) or not isinstance(version, str):
            raise InvalidPackumentDataError("version entry lacks name or version")
        deps = data.get("dependencies")
        if deps is None:
            deps = {}
        if not isinstance(deps, Mapping):
            raise InvalidPackumentDataError(f"dependencies of {name}@{version} is not an object")
        unity = data.get("unity")
        unity_release = data.get("unityRelease")
        return cls(
            name=name,
            version=version,
            dependencies={str(k): str(v) for k, v in deps.items()},
            unity=unity if isinstance(unity, str) else None,
            unity_release=unity_release if isinstance(unity_release, str) else None,
        )


def target_editor_version_for(version: PackumentVersion) -> Optional[str]:
    """Return the minimum editor version a package version declares, if any."""
    if not version.unity:
        return None
    if version.unity_release:
        return f"{version.unity}.{version.unity_release}"
    return version.unity


@dataclass(frozen=True)
class Packument:
    name: str
    versions: Mapping[str, PackumentVersion] = field(default_factory=dict)
    dist_tags: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Packument":
        """Build from a registry response body.

        Raises:
            InvalidPackumentDataError: If the document is not a packument.
        """
        if not isinstance(data, Mapping) or not isinstance(data.get("name"), str):
            raise InvalidPackumentDataError("packument lacks a name")
        raw_versions = data.get("versions")
        if raw_versions is None:
            raw_versions = {}
        if not isinstance(raw_versions, Mapping):
            raise InvalidPackumentDataError(f"versions of {data['name']} is not an object")
        versions: Dict[str, PackumentVersion] = {}
        for key, entry in raw_versions.items():
            versions[key] = PackumentVersion.from_json(entry)
        dist_tags = data.get("dist-tags")
        if not isinstance(dist_tags, Mapping):
            dist_tags = {}
        return cls(
            name=data["name"],
            versions=versions,
            dist_tags={k: v for k, v in dist_tags.items() if isinstance(v, str)},
        )

    def version_list(self) -> List[str]:
        """Published semantic versions, ascending."""
        return sort_versions(self.versions.keys())

    def latest_release(self) -> Optional[str]:
        """Highest non-prerelease version, or None if there is none."""
        releases = [v for v in self.versions if is_semantic_version(v)
                    and not parse_semantic_version(v).prerelease]
        ordered = sort_versions(releases)
        return ordered[-1] if ordered else None
