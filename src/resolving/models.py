"""Data models for registry resolution and dependency walking."""

from dataclasses import dataclass
from typing import Callable, Optional, Union

from common.errors import PackumentNotFoundError, RegistryFetchError, VersionNotFoundError
from domain.packument import Packument, PackumentVersion
from domain.registry import Registry
from domain.versions import VersionSpec

# (registry, name) -> packument, or None when the registry has no such package.
FetchPackument = Callable[[Registry, str], Optional[Packument]]

ResolveError = Union[PackumentNotFoundError, VersionNotFoundError, RegistryFetchError]


@dataclass(frozen=True)
class ResolvedPackument:
    """A packument together with the version selected from it."""
    packument: Packument
    packument_version: PackumentVersion
    source: Registry


@dataclass(frozen=True)
class ResolvedDependency:
    """A node of the dependency walk that needs no further action or can be added."""
    name: str
    version: str
    upstream: bool
    internal: bool
    is_self: bool = False


@dataclass(frozen=True)
class UnresolvedDependency:
    name: str
    spec: Optional[VersionSpec]
    reason: ResolveError
