"""Scoped registry entries of a project manifest."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from domain.domain_name import DomainName
from domain.registry import RegistryUrl


@dataclass(frozen=True)
class ScopedRegistry:
    """A registry that serves only the packages named in ``scopes``.

    ``url`` is normalized and used for matching. ``raw_url`` keeps the text
    read from the manifest so an untouched entry is written back as is.
    """
    name: str
    url: RegistryUrl
    scopes: Tuple[DomainName, ...] = ()
    raw_url: Optional[str] = field(default=None, compare=False)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "ScopedRegistry":
        """Raises ValueError on malformed entries."""
        if not isinstance(data, Mapping):
            raise ValueError("scoped registry must be an object")
        name, url = data.get("name"), data.get("url")
        if not isinstance(name, str) or not isinstance(url, str):
            raise ValueError("scoped registry needs a string 'name' and 'url'")
        raw_scopes = data.get("scopes", [])
        if not isinstance(raw_scopes, list) or not all(isinstance(s, str) for s in raw_scopes):
            raise ValueError(f"'scopes' of scoped registry {name} must be an array of strings")
        return cls(
            name=name,
            url=RegistryUrl.parse(url),
            scopes=tuple(DomainName(s) for s in raw_scopes),
            raw_url=url,
        )

    def to_json(self) -> Dict[str, Any]:
        url = self.raw_url if self.raw_url is not None else str(self.url)
        return {"name": self.name, "url": url, "scopes": [str(s) for s in self.scopes]}


def make_scoped_registry(name: str, url: RegistryUrl, scopes: Iterable[str] = ()) -> ScopedRegistry:
    unique = []
    for scope in scopes:
        if scope not in unique:
            unique.append(DomainName(scope))
    return ScopedRegistry(name=name, url=url, scopes=tuple(unique))


def make_empty_scoped_registry_for(url: RegistryUrl) -> ScopedRegistry:
    """A new entry for ``url`` named after its host, with no scopes yet."""
    return make_scoped_registry(RegistryUrl(url).host or str(url), url)


def has_scope(registry: ScopedRegistry, name: str) -> bool:
    return name in registry.scopes


def add_scope(registry: ScopedRegistry, name: str) -> ScopedRegistry:
    """Add ``name`` to the scopes; returns ``registry`` itself if already present."""
    if has_scope(registry, name):
        return registry
    return replace(registry, scopes=registry.scopes + (DomainName(name),))


def remove_scope(registry: ScopedRegistry, name: str) -> ScopedRegistry:
    if not has_scope(registry, name):
        return registry
    return replace(registry, scopes=tuple(s for s in registry.scopes if s != name))
