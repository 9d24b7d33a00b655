"""Shared fixtures and builders for the test-suite."""

from typing import Dict, Iterable, Mapping, Optional, Set, Tuple

import pytest

from common.errors import RegistryFetchError
from domain.packument import Packument, PackumentVersion
from domain.registry import Registry, RegistryUrl
from env import Env

PRIMARY_URL = "https://package.openupm.com"
UPSTREAM_URL = "https://packages.unity.com"


def make_packument(
    name: str,
    versions: Mapping[str, Optional[Mapping[str, str]]],
    dist_tags: Optional[Mapping[str, str]] = None,
    unity: Optional[str] = None,
    unity_release: Optional[str] = None,
) -> Packument:
    """Build a packument; ``versions`` maps version -> dependencies."""
    return Packument(
        name=name,
        versions={
            v: PackumentVersion(
                name=name,
                version=v,
                dependencies=dict(deps or {}),
                unity=unity,
                unity_release=unity_release,
            )
            for v, deps in versions.items()
        },
        dist_tags=dict(dist_tags or {}),
    )


class FakeFetch:
    """In-memory ``FetchPackument`` keyed by registry url and package name."""

    def __init__(
        self,
        registries: Mapping[str, Iterable[Packument]],
        failing: Iterable[Tuple[str, str]] = (),
    ):
        self.packuments: Dict[str, Dict[str, Packument]] = {
            url: {p.name: p for p in packuments} for url, packuments in registries.items()
        }
        self.failing: Set[Tuple[str, str]] = set(failing)
        self.calls = []

    def __call__(self, registry: Registry, name: str) -> Optional[Packument]:
        self.calls.append((str(registry.url), name))
        if (str(registry.url), name) in self.failing:
            raise RegistryFetchError(f"{registry.url}/{name}", 500)
        return self.packuments.get(str(registry.url), {}).get(name)


@pytest.fixture
def primary():
    return Registry(url=RegistryUrl.parse(PRIMARY_URL))


@pytest.fixture
def upstream():
    return Registry(url=RegistryUrl.parse(UPSTREAM_URL))


@pytest.fixture
def env(tmp_path, primary, upstream):
    return Env(
        cwd=str(tmp_path),
        system_user=False,
        upstream=True,
        registry=primary,
        upstream_registry=upstream,
        editor_version="2021.3.5f1",
    )
