"""Validated package names (reverse-domain identifiers)."""

from __future__ import annotations

import re

from constants import Constants

_SEGMENT = r"[a-z0-9](?:[a-z0-9\-_]*[a-z0-9])?"
_DOMAIN_NAME_RE = re.compile(rf"^{_SEGMENT}(?:\.{_SEGMENT})*$")


def is_domain_name(text: str) -> bool:
    """Return True if ``text`` is a valid package name."""
    return isinstance(text, str) and _DOMAIN_NAME_RE.match(text) is not None


class DomainName(str):
    """A package name such as ``com.unity.ugui``.

    Compares and hashes like the plain string, so it can be used as a key in
    dicts read straight from JSON.
    """

    __slots__ = ()

    @classmethod
    def parse(cls, text: str) -> "DomainName":
        """Validate ``text`` and wrap it.

        Raises:
            ValueError: If ``text`` is not a valid package name.
        """
        if not is_domain_name(text):
            raise ValueError(f"'{text}' is not a valid package name")
        return cls(text)


def is_builtin_package(name: str) -> bool:
    """Return True for packages bundled with the editor."""
    return name.startswith(Constants.BUILTIN_PACKAGE_PREFIX) or name in Constants.BUILTIN_PACKAGES
