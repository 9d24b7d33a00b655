"""Registry resolution and dependency walking."""

from .dependencies import resolve_dependencies
from .resolver import try_resolve, try_resolve_from_registries, try_resolve_packument_version

__all__ = [
    "resolve_dependencies",
    "try_resolve",
    "try_resolve_from_registries",
    "try_resolve_packument_version",
]
