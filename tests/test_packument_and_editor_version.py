"""Tests for the packument model and editor version handling."""

import pytest

from common.errors import InvalidPackumentDataError
from domain.editor_version import (
    compare_editor_version,
    stringify_editor_version,
    try_parse_editor_version,
)
from domain.packument import Packument, PackumentVersion, target_editor_version_for

PACKUMENT_JSON = {
    "name": "com.example.tools",
    "dist-tags": {"latest": "1.1.0", "preview": "2.0.0-pre.1"},
    "versions": {
        "1.0.0": {"name": "com.example.tools", "version": "1.0.0"},
        "1.1.0": {
            "name": "com.example.tools",
            "version": "1.1.0",
            "unity": "2020.3",
            "unityRelease": "0f1",
            "dependencies": {"com.example.core": "1.0.0"},
        },
        "2.0.0-pre.1": {"name": "com.example.tools", "version": "2.0.0-pre.1"},
    },
    "time": {"1.0.0": "2023-01-01T00:00:00.000Z"},
}


class TestPackument:
    """Tests for packument parsing."""

    def test_from_json(self):
        """Versions, dependencies and dist-tags are read."""
        packument = Packument.from_json(PACKUMENT_JSON)
        assert packument.name == "com.example.tools"
        assert packument.dist_tags["preview"] == "2.0.0-pre.1"
        assert packument.versions["1.1.0"].dependencies == {"com.example.core": "1.0.0"}

    def test_version_list_is_ascending(self):
        """Versions are listed in semver order."""
        packument = Packument.from_json(PACKUMENT_JSON)
        assert packument.version_list() == ["1.0.0", "1.1.0", "2.0.0-pre.1"]

    def test_latest_release_skips_prereleases(self):
        """The latest release ignores prereleases."""
        packument = Packument.from_json(PACKUMENT_JSON)
        assert packument.latest_release() == "1.1.0"

    def test_latest_release_none_when_only_prereleases(self):
        """Only prereleases means no latest release."""
        packument = Packument.from_json({
            "name": "com.example.pre",
            "versions": {"0.1.0-pre": {"name": "com.example.pre", "version": "0.1.0-pre"}},
        })
        assert packument.latest_release() is None

    @pytest.mark.parametrize("data", [
        {},
        {"name": 5},
        {"name": "com.bad", "versions": []},
        {"name": "com.bad", "versions": {"1.0.0": {"name": "com.bad"}}},
        {"name": "com.bad", "versions": {"1.0.0": {"name": "com.bad", "version": "1.0.0", "dependencies": []}}},
    ])
    def test_malformed(self, data):
        """Malformed documents raise InvalidPackumentDataError."""
        with pytest.raises(InvalidPackumentDataError):
            Packument.from_json(data)

    def test_target_editor_version(self):
        """unity and unityRelease combine into the target editor."""
        packument = Packument.from_json(PACKUMENT_JSON)
        assert target_editor_version_for(packument.versions["1.1.0"]) == "2020.3.0f1"
        assert target_editor_version_for(packument.versions["1.0.0"]) is None
        assert target_editor_version_for(
            PackumentVersion(name="com.x", version="1.0.0", unity="2019.4")
        ) == "2019.4"


class TestEditorVersion:
    """Tests for Unity editor versions."""

    def test_parse_full(self):
        """All parts of a full editor version are read."""
        version = try_parse_editor_version("2021.3.5f1c1")
        assert (version.major, version.minor, version.patch) == (2021, 3, 5)
        assert (version.flag, version.build, version.loc) == ("f", 1, 1)
        assert stringify_editor_version(version) == "2021.3.5f1c1"

    def test_parse_short(self):
        """major.minor is a valid editor version."""
        version = try_parse_editor_version("2019.1")
        assert version.patch is None
        assert str(version) == "2019.1"

    @pytest.mark.parametrize("text", [None, "", "2019", "2019.x", "2019.1.0z1"])
    def test_parse_invalid(self, text):
        """Malformed editor versions give None."""
        assert try_parse_editor_version(text) is None

    @pytest.mark.parametrize("a,b,expected", [
        ("2020.3.0f1", "2021.1.0f1", -1),
        ("2021.1.0f1", "2021.1.0f1", 0),
        ("2021.1.0b5", "2021.1.0f1", -1),
        ("2021.1.0a9", "2021.1.0b1", -1),
        ("2021.1.1f1", "2021.1.0f9", 1),
        ("2019.1", "2019.1.0a1", -1),
    ])
    def test_compare(self, a, b, expected):
        """Versions order by number, then release flag."""
        result = compare_editor_version(try_parse_editor_version(a), try_parse_editor_version(b))
        assert result == expected
