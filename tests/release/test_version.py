"""
Unit tests for release version identifiers.
"""

import pytest

from setup_ispc.core.exceptions import InvalidVersionError
from setup_ispc.release.version import (
    VersionSpec,
    find_version,
    is_latest_request,
    strip_tag_prefix,
)


class TestVersionSpec:
    """Tests for VersionSpec."""

    def test_valid_version(self):
        version = VersionSpec("1.21.0")
        assert str(version) == "1.21.0"
        assert version.tag == "v1.21.0"

    def test_parse_strips_single_v(self):
        assert VersionSpec.parse("v1.22.0") == VersionSpec("1.22.0")

    def test_parse_strips_whitespace(self):
        assert VersionSpec.parse(" 1.22.0\n") == VersionSpec("1.22.0")

    @pytest.mark.parametrize(
        "raw",
        [
            "1.21",
            "1.21.0.1",
            "vv1.21.0",
            "1.21.0-rc1",
            "a.b.c",
            "latest",
            "",
            "1..0",
            "\u0661.\u0662.\u0663",
        ],
    )
    def test_invalid_versions(self, raw):
        with pytest.raises(InvalidVersionError) as exc_info:
            VersionSpec.parse(raw)
        assert "MAJOR.MINOR.PATCH" in str(exc_info.value)

    @pytest.mark.parametrize(
        "raw", ["1.21.0\n", "\u0661.\u0662.\u0663", "v1.21.0", " 1.21.0 "]
    )
    def test_constructor_is_strict(self, raw):
        with pytest.raises(InvalidVersionError) as exc_info:
            VersionSpec(raw)
        assert "MAJOR.MINOR.PATCH" in str(exc_info.value)

    def test_immutable(self):
        version = VersionSpec("1.21.0")
        with pytest.raises(AttributeError):
            version.value = "1.22.0"


class TestHelpers:
    """Tests for version helpers."""

    @pytest.mark.parametrize("raw", [None, "", "latest"])
    def test_latest_requests(self, raw):
        assert is_latest_request(raw) is True

    @pytest.mark.parametrize("raw", ["1.21.0", "Latest", "v1.21.0", " latest", "  "])
    def test_literal_requests(self, raw):
        assert is_latest_request(raw) is False

    def test_strip_tag_prefix(self):
        assert strip_tag_prefix("v1.2.3") == "1.2.3"
        assert strip_tag_prefix("1.2.3") == "1.2.3"

    def test_find_version_first_match(self):
        text = "Intel(r) ISPC, 1.21.0 (build commit abc @ 20231101, LLVM 16.0.6)"
        assert find_version(text) == "1.21.0"

    def test_find_version_ascii_only(self):
        assert find_version("ispc \u0661.\u0662.\u0663 then 1.21.0") == "1.21.0"

    def test_find_version_none(self):
        assert find_version("no version here") is None
