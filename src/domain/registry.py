"""Registry urls, auth info and registries."""

from __future__ import annotations

import base64
import urllib.parse
from dataclasses import dataclass
from typing import Dict, Optional


class RegistryUrl(str):
    """Absolute http(s) url of a registry, without a trailing slash."""

    __slots__ = ()

    @classmethod
    def parse(cls, text: str) -> "RegistryUrl":
        """Validate and normalize a registry url.

        Raises:
            ValueError: If ``text`` is not an absolute http(s) url.
        """
        if not isinstance(text, str):
            raise ValueError("registry url must be a string")
        parts = urllib.parse.urlsplit(text.strip())
        if parts.scheme.lower() not in ("http", "https") or not parts.netloc:
            raise ValueError(f"'{text}' is not a valid registry url")
        normalized = urllib.parse.urlunsplit(
            (parts.scheme.lower(), parts.netloc.lower(), parts.path, parts.query, "")
        )
        return cls(normalized.rstrip("/"))

    @property
    def host(self) -> str:
        return urllib.parse.urlsplit(self).hostname or ""


def coerce_registry_url(text: str) -> RegistryUrl:
    """Parse a user supplied url, assuming http when no scheme is given."""
    text = text.strip()
    if "://" not in text:
        text = "http://" + text
    return RegistryUrl.parse(text)


@dataclass(frozen=True)
class AuthInfo:
    """Credentials for a registry: either a token or basic auth."""
    token: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    @classmethod
    def from_basic(cls, encoded: str) -> "AuthInfo":
        """Build from an npm style ``_auth`` value (base64 of ``user:pass``).

        Raises:
            ValueError: If ``encoded`` is not valid base64 ``user:pass``.
        """
        try:
            decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
        except (ValueError, UnicodeDecodeError) as exc:
            raise ValueError("_auth is not valid base64") from exc
        username, sep, password = decoded.partition(":")
        if not sep:
            raise ValueError("_auth must encode 'user:password'")
        return cls(username=username, password=password)

    def auth_headers(self) -> Dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        if self.username is not None and self.password is not None:
            raw = f"{self.username}:{self.password}".encode("utf-8")
            return {"Authorization": "Basic " + base64.b64encode(raw).decode("ascii")}
        return {}


@dataclass(frozen=True)
class Registry:
    """A registry endpoint plus the auth used to talk to it."""
    url: RegistryUrl
    auth: Optional[AuthInfo] = None
