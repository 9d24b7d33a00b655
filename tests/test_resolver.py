"""Tests for resolving a package against primary and upstream registries."""

import pytest

from common.errors import PackumentNotFoundError, RegistryFetchError, VersionNotFoundError
from domain.versions import VersionSpec
from resolving.resolver import (
    try_resolve,
    try_resolve_from_registries,
    try_resolve_packument_version,
)

from conftest import FakeFetch, PRIMARY_URL, UPSTREAM_URL, make_packument

TOOLS = make_packument(
    "com.example.tools",
    {"1.0.0": None, "1.2.0": None, "1.10.0": None, "2.0.0-pre.1": None},
    dist_tags={"latest": "1.10.0", "preview": "2.0.0-pre.1", "stale": "0.9.0"},
)


class TestResolvePackumentVersion:
    """Tests for picking a version from a packument."""

    def test_latest_picks_highest_release(self):
        """No spec picks the highest release."""
        version, error = try_resolve_packument_version(TOOLS, None)
        assert error is None
        assert version.version == "1.10.0"

    def test_latest_tag_equals_absent(self):
        """latest behaves like no spec."""
        version, _ = try_resolve_packument_version(TOOLS, VersionSpec.tag("latest"))
        assert version.version == "1.10.0"

    def test_latest_falls_back_to_dist_tag_for_prerelease_only(self):
        """Without releases latest uses dist-tags."""
        packument = make_packument("com.pre", {"0.1.0-pre": None}, dist_tags={"latest": "0.1.0-pre"})
        version, _ = try_resolve_packument_version(packument, None)
        assert version.version == "0.1.0-pre"

    def test_latest_without_any_release(self):
        """No release and no dist-tag is VersionNotFoundError."""
        packument = make_packument("com.pre", {"0.1.0-pre": None})
        _, error = try_resolve_packument_version(packument, None)
        assert error == VersionNotFoundError("com.pre", "latest", ["0.1.0-pre"])

    def test_exact_prerelease_when_requested(self):
        """An exact prerelease can be requested."""
        version, _ = try_resolve_packument_version(TOOLS, VersionSpec.semver("2.0.0-pre.1"))
        assert version.version == "2.0.0-pre.1"

    def test_tag(self):
        """A tag resolves through dist-tags."""
        version, _ = try_resolve_packument_version(TOOLS, VersionSpec.tag("preview"))
        assert version.version == "2.0.0-pre.1"

    def test_tag_pointing_to_unpublished_version(self):
        """A tag for an unpublished version is not found."""
        _, error = try_resolve_packument_version(TOOLS, VersionSpec.tag("stale"))
        assert isinstance(error, VersionNotFoundError)
        assert error.requested_version == "stale"

    def test_unknown_tag(self):
        """An unknown tag is not found."""
        _, error = try_resolve_packument_version(TOOLS, VersionSpec.tag("nightly"))
        assert error.requested_version == "nightly"

    def test_missing_version_lists_available_ascending(self):
        """The error lists available versions in order."""
        _, error = try_resolve_packument_version(TOOLS, VersionSpec.semver("3.0.0"))
        assert error.available_versions == ["1.0.0", "1.2.0", "1.10.0", "2.0.0-pre.1"]

    def test_url_spec_is_rejected(self):
        """Url specs never reach a registry."""
        with pytest.raises(ValueError):
            try_resolve_packument_version(TOOLS, VersionSpec.url("https://github.com/o/r.git"))


class TestTryResolve:
    """Tests for resolving against one registry."""

    def test_version_not_found(self, primary):
        """A missing version is returned as an error."""
        fetch = FakeFetch({PRIMARY_URL: [make_packument("com.bar", {"1.0.0": None})]})
        resolved, error = try_resolve(fetch, "com.bar", VersionSpec.semver("2.0.0"), primary)
        assert resolved is None
        assert error == VersionNotFoundError("com.bar", "2.0.0", ["1.0.0"])

    def test_packument_not_found(self, primary):
        """A missing package is returned as an error."""
        resolved, error = try_resolve(FakeFetch({}), "com.bar", None, primary)
        assert resolved is None
        assert error == PackumentNotFoundError("com.bar")

    def test_fetch_error_is_returned(self, primary):
        """Transport errors are returned, not raised."""
        fetch = FakeFetch({}, failing=[(PRIMARY_URL, "com.bar")])
        _, error = try_resolve(fetch, "com.bar", None, primary)
        assert isinstance(error, RegistryFetchError)

    def test_success(self, primary):
        """The packument, version and source registry are returned."""
        fetch = FakeFetch({PRIMARY_URL: [TOOLS]})
        resolved, error = try_resolve(fetch, "com.example.tools", VersionSpec.semver("1.2.0"), primary)
        assert error is None
        assert resolved.packument is TOOLS
        assert resolved.packument_version.version == "1.2.0"
        assert resolved.source == primary


class TestResolveFromRegistries:
    """Tests for primary then upstream resolution."""

    def test_primary_wins(self, primary, upstream):
        """Upstream is not asked when primary answers."""
        fetch = FakeFetch({PRIMARY_URL: [TOOLS], UPSTREAM_URL: [TOOLS]})
        resolved, error, is_upstream = try_resolve_from_registries(
            fetch, "com.example.tools", None, primary, upstream
        )
        assert error is None
        assert not is_upstream
        assert fetch.calls == [(PRIMARY_URL, "com.example.tools")]

    def test_falls_back_to_upstream(self, primary, upstream):
        """A package only upstream is flagged as upstream."""
        fetch = FakeFetch({UPSTREAM_URL: [TOOLS]})
        resolved, error, is_upstream = try_resolve_from_registries(
            fetch, "com.example.tools", None, primary, upstream
        )
        assert error is None
        assert is_upstream
        assert resolved.source == upstream

    def test_no_fallback_when_disabled(self, primary, upstream):
        """Upstream is skipped when disabled."""
        fetch = FakeFetch({UPSTREAM_URL: [TOOLS]})
        _, error, is_upstream = try_resolve_from_registries(
            fetch, "com.example.tools", None, primary, upstream, use_upstream=False
        )
        assert error == PackumentNotFoundError("com.example.tools")
        assert not is_upstream
        assert fetch.calls == [(PRIMARY_URL, "com.example.tools")]

    def test_both_fail_reports_primary_error(self, primary, upstream):
        """The primary error is reported when both fail."""
        fetch = FakeFetch({PRIMARY_URL: [make_packument("com.bar", {"1.0.0": None})]})
        _, error, _ = try_resolve_from_registries(
            fetch, "com.bar", VersionSpec.semver("2.0.0"), primary, upstream
        )
        assert isinstance(error, VersionNotFoundError)

    def test_transport_error_replaced_by_upstream_answer(self, primary, upstream):
        """An authoritative upstream answer replaces a primary transport error."""
        fetch = FakeFetch({}, failing=[(PRIMARY_URL, "com.bar")])
        _, error, _ = try_resolve_from_registries(fetch, "com.bar", None, primary, upstream)
        assert error == PackumentNotFoundError("com.bar")
