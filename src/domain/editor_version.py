"""Unity editor versions such as ``2021.3.5f1`` or ``2019.1``."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

_EDITOR_VERSION_RE = re.compile(
    r"^(?P<major>\d+)\.(?P<minor>\d+)"
    r"(?:\.(?P<patch>\d+)"
    r"(?:(?P<flag>[abcfp])(?P<build>\d+)(?:c(?P<loc>\d+))?)?)?$"
)

# c (china) builds are finals with a localization suffix.
_FLAG_ORDER = {"a": 0, "b": 1, "f": 2, "c": 2, "p": 3}


@dataclass(frozen=True)
class EditorVersion:
    major: int
    minor: int
    patch: Optional[int] = None
    flag: Optional[str] = None
    build: Optional[int] = None
    loc: Optional[int] = None

    def sort_key(self):
        return (
            self.major,
            self.minor,
            self.patch if self.patch is not None else 0,
            _FLAG_ORDER[self.flag] if self.flag is not None else -1,
            self.build if self.build is not None else 0,
            self.loc if self.loc is not None else 0,
        )

    def __str__(self) -> str:
        return stringify_editor_version(self)


def try_parse_editor_version(text: Optional[str]) -> Optional[EditorVersion]:
    """Parse an editor version, returning None if ``text`` is not one."""
    if not text:
        return None
    m = _EDITOR_VERSION_RE.match(text.strip())
    if not m:
        return None

    def _int(group: str) -> Optional[int]:
        value = m.group(group)
        return int(value) if value is not None else None

    return EditorVersion(
        major=int(m.group("major")),
        minor=int(m.group("minor")),
        patch=_int("patch"),
        flag=m.group("flag"),
        build=_int("build"),
        loc=_int("loc"),
    )


def compare_editor_version(a: EditorVersion, b: EditorVersion) -> int:
    """Three-way compare: negative if a < b, 0 if equal, positive if a > b."""
    ka, kb = a.sort_key(), b.sort_key()
    return (ka > kb) - (ka < kb)


def stringify_editor_version(version: EditorVersion) -> str:
    text = f"{version.major}.{version.minor}"
    if version.patch is not None:
        text += f".{version.patch}"
        if version.flag is not None and version.build is not None:
            text += f"{version.flag}{version.build}"
            if version.loc is not None:
                text += f"c{version.loc}"
    return text
