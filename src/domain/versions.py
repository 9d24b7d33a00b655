"""Version primitives: semantic versions, package urls and version specs."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

import semantic_version

from domain.domain_name import DomainName

_PACKAGE_URL_RE = re.compile(r"^(?:(?:git|git\+ssh|git\+https?|ssh|https?|file):|git@)")

LATEST_TAG = "latest"


def is_semantic_version(text: str) -> bool:
    """Return True if ``text`` is a strict ``MAJOR.MINOR.PATCH[-pre][+build]``."""
    if not isinstance(text, str):
        return False
    try:
        semantic_version.Version(text)
    except ValueError:
        return False
    return True


def parse_semantic_version(text: str) -> semantic_version.Version:
    """Parse a strict semantic version.

    Raises:
        ValueError: If ``text`` is not a semantic version.
    """
    return semantic_version.Version(text)


def sort_versions(versions: Iterable[str]) -> List[str]:
    """Sort version strings ascending by semver precedence.

    Strings that are not semantic versions are dropped.
    """
    parsed = []
    for v in versions:
        try:
            parsed.append((semantic_version.Version(v), v))
        except ValueError:
            continue
    parsed.sort(key=lambda item: item[0])
    return [raw for _, raw in parsed]


def is_package_url(text: str) -> bool:
    """Return True if ``text`` references a package by url instead of version."""
    return isinstance(text, str) and _PACKAGE_URL_RE.match(text) is not None


class PackageUrl(str):
    """A git/http/file reference used in place of a registry version."""

    __slots__ = ()

    @classmethod
    def parse(cls, text: str) -> "PackageUrl":
        if not is_package_url(text):
            raise ValueError(f"'{text}' is not a package url")
        return cls(text)


class SpecKind(Enum):
    """Which representation a version spec carries."""
    SEMVER = "semver"
    URL = "url"
    TAG = "tag"


@dataclass(frozen=True)
class VersionSpec:
    """A requested version: exactly one of semver, package url or dist-tag.

    An absent spec (``None`` where a ``VersionSpec`` is expected) means latest.
    """
    raw: str
    kind: SpecKind

    @classmethod
    def semver(cls, version: str) -> "VersionSpec":
        parse_semantic_version(version)
        return cls(raw=version, kind=SpecKind.SEMVER)

    @classmethod
    def url(cls, url: str) -> "VersionSpec":
        return cls(raw=str(PackageUrl.parse(url)), kind=SpecKind.URL)

    @classmethod
    def tag(cls, tag: str) -> "VersionSpec":
        if not tag or any(ch.isspace() for ch in tag):
            raise ValueError(f"'{tag}' is not a valid tag")
        return cls(raw=tag, kind=SpecKind.TAG)

    @property
    def is_latest(self) -> bool:
        return self.kind == SpecKind.TAG and self.raw == LATEST_TAG

    def __str__(self) -> str:
        return self.raw


def parse_version_spec(text: Optional[str]) -> Optional[VersionSpec]:
    """Classify a raw version string.

    Returns None for a missing or empty string.

    Raises:
        ValueError: If ``text`` is none of semver, url or tag.
    """
    if text is None:
        return None
    text = text.strip()
    if not text:
        return None
    if is_package_url(text):
        return VersionSpec.url(text)
    if is_semantic_version(text):
        return VersionSpec.semver(text)
    return VersionSpec.tag(text)


def split_package_reference(reference: str) -> Tuple[DomainName, Optional[VersionSpec]]:
    """Split ``name[@spec]`` into a validated name and an optional spec.

    Raises:
        ValueError: If the name or the spec is invalid.
    """
    reference = reference.strip()
    name, sep, spec = reference.partition("@")
    if sep and not spec:
        raise ValueError(f"'{reference}' has an empty version")
    return DomainName.parse(name), parse_version_spec(spec) if sep else None


def make_package_reference(name: str, spec: Optional[object] = None) -> str:
    """Inverse of ``split_package_reference``; ``spec`` may be a str or VersionSpec."""
    if spec is None:
        return str(name)
    return f"{name}@{spec}"
