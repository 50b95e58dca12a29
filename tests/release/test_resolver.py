"""
Unit tests for release identity resolution.
"""

import pytest
from unittest.mock import Mock

from setup_ispc.core.exceptions import (
    AutodetectionUnsupportedError,
    InvalidVersionError,
    UnsupportedArchitectureError,
    UnsupportedPlatformError,
    VersionDiscoveryFailed,
)
from setup_ispc.core.platform import HostInfo
from setup_ispc.release.resolver import (
    SUPPORTED_ARCHITECTURES,
    SUPPORTED_PLATFORMS,
    ResolvedIdentity,
    resolve_architecture,
    resolve_identity,
    resolve_platform,
    resolve_version,
)
from setup_ispc.release.version import VersionSpec


def _host(os="linux", arch="x64"):
    return lambda: HostInfo(os=os, arch=arch)


def _no_host():
    raise AssertionError("host detection must not be used")


class TestResolvePlatform:
    """Tests for platform resolution."""

    @pytest.mark.parametrize("platform", SUPPORTED_PLATFORMS)
    def test_supported_platforms(self, platform):
        assert resolve_platform(platform, _no_host) == platform

    @pytest.mark.parametrize("platform", ["solaris", "Linux", "macos", "win32"])
    def test_unsupported_platform(self, platform):
        with pytest.raises(UnsupportedPlatformError) as exc_info:
            resolve_platform(platform, _no_host)
        assert platform in str(exc_info.value)
        assert "linux" in str(exc_info.value)

    @pytest.mark.parametrize("raw", [None, ""])
    def test_autodetect(self, raw):
        assert resolve_platform(raw, _host(os="macOS")) == "macOS"

    def test_autodetect_unsupported_os(self):
        def host():
            return HostInfo(os=None, arch="x64", system="SunOS")

        with pytest.raises(AutodetectionUnsupportedError):
            resolve_platform(None, host)


class TestResolveArchitecture:
    """Tests for architecture validation and autodetection."""

    @pytest.mark.parametrize(
        "platform,architecture",
        [
            (platform, architecture)
            for platform, allowed in SUPPORTED_ARCHITECTURES.items()
            for architecture in allowed
        ],
    )
    def test_accepts_every_allowed_member(self, platform, architecture):
        assert resolve_architecture(platform, architecture, _no_host) == architecture

    @pytest.mark.parametrize(
        "platform,architecture",
        [
            ("linux", "arm64"),
            ("linux", "universal"),
            ("linux", "x64"),
            ("macOS", ""),
            ("macOS", "aarch64"),
            ("macOS", "oneapi"),
            ("windows", "arm64"),
            ("windows", "oneapi"),
            ("windows", "aarch64"),
        ],
    )
    def test_rejects_members_of_other_platforms(self, platform, architecture):
        with pytest.raises(UnsupportedArchitectureError) as exc_info:
            resolve_architecture(platform, architecture, _no_host)
        assert exc_info.value.platform == platform
        assert exc_info.value.architecture == architecture

    def test_empty_string_is_valid_on_linux_and_windows_only(self):
        assert resolve_architecture("linux", "", _no_host) == ""
        assert resolve_architecture("windows", "", _no_host) == ""
        with pytest.raises(UnsupportedArchitectureError):
            resolve_architecture("macOS", "", _no_host)

    @pytest.mark.parametrize("platform", ["linux", "windows"])
    def test_x86_64_normalized_to_empty(self, platform):
        assert resolve_architecture(platform, "x86_64", _no_host) == ""

    @pytest.mark.parametrize("platform", ["linux", "windows"])
    def test_x86_64_matches_autodetected_default(self, platform):
        explicit = resolve_architecture(platform, "x86_64", _no_host)
        detected = resolve_architecture(platform, None, _host(os=platform, arch="x64"))
        assert explicit == detected == ""

    def test_x86_64_kept_on_macos(self):
        assert resolve_architecture("macOS", "x86_64", _no_host) == "x86_64"

    def test_linux_arm64_host(self):
        assert resolve_architecture("linux", None, _host(arch="arm64")) == "aarch64"

    def test_linux_x64_host(self):
        assert resolve_architecture("linux", None, _host(arch="x64")) == ""

    def test_linux_autodetect_ignores_unmapped_os(self):
        host = lambda: HostInfo(os=None, arch="arm64", system="FreeBSD")
        assert resolve_architecture("linux", None, host) == "aarch64"

    @pytest.mark.parametrize("cpu", ["x86", "arm", "riscv64"])
    def test_linux_unsupported_host_cpu(self, cpu):
        with pytest.raises(AutodetectionUnsupportedError, match=cpu):
            resolve_architecture("linux", None, _host(arch=cpu))

    @pytest.mark.parametrize("cpu", ["x64", "arm64", "x86"])
    def test_macos_always_universal(self, cpu):
        assert resolve_architecture("macOS", None, _host("macOS", cpu)) == "universal"

    def test_windows_always_empty(self):
        assert resolve_architecture("windows", None, _no_host) == ""


class TestResolveVersion:
    """Tests for version resolution."""

    def test_literal_version(self):
        discovery = Mock()
        assert resolve_version("1.21.0", discovery) == VersionSpec("1.21.0")
        discovery.latest_version.assert_not_called()

    @pytest.mark.parametrize("raw", ["v1.21.0", " 1.21.0 ", "1.21.0\n"])
    def test_literal_is_not_normalized(self, raw):
        discovery = Mock()
        with pytest.raises(InvalidVersionError):
            resolve_version(raw, discovery)
        discovery.latest_version.assert_not_called()

    @pytest.mark.parametrize("raw", [None, "", "latest"])
    def test_latest_uses_discovery(self, raw, fixed_discovery):
        assert resolve_version(raw, fixed_discovery) == VersionSpec("1.22.0")
        fixed_discovery.latest_version.assert_called_once()

    @pytest.mark.parametrize("raw", ["1.21", "one.two.three", "1.21.0-beta"])
    def test_invalid_literal(self, raw):
        with pytest.raises(InvalidVersionError):
            resolve_version(raw, Mock())

    def test_discovery_failure_propagates(self):
        discovery = Mock()
        discovery.latest_version.side_effect = VersionDiscoveryFailed("a", "b")
        with pytest.raises(VersionDiscoveryFailed):
            resolve_version("latest", discovery)


class TestResolveIdentity:
    """Tests for the full resolution."""

    def test_explicit_inputs(self):
        identity = resolve_identity("1.21.0", "linux", "", host=_no_host)
        assert identity == ResolvedIdentity(VersionSpec("1.21.0"), "linux", "")

    def test_macos_latest_defaults_universal(self, fixed_discovery):
        identity = resolve_identity(
            None, "macOS", None, host=_no_host, discovery=fixed_discovery
        )
        assert identity.version == VersionSpec("1.22.0")
        assert identity.architecture == "universal"
        fixed_discovery.latest_version.assert_called_once()

    def test_unsupported_platform_fails_before_discovery(self, fixed_discovery):
        with pytest.raises(UnsupportedPlatformError):
            resolve_identity(
                None, "solaris", None, host=_no_host, discovery=fixed_discovery
            )
        fixed_discovery.latest_version.assert_not_called()

    def test_fully_autodetected(self, fixed_discovery, linux_arm64_host):
        identity = resolve_identity(
            host=linux_arm64_host, discovery=fixed_discovery
        )
        assert identity == ResolvedIdentity(VersionSpec("1.22.0"), "linux", "aarch64")

    def test_str(self):
        identity = ResolvedIdentity(VersionSpec("1.21.0"), "windows", "")
        assert str(identity) == "ispc 1.21.0 (windows, default)"
