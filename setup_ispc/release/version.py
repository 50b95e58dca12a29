"""
ISPC release version identifiers.

Example:
    >>> v = VersionSpec.parse("v1.21.0")
    >>> str(v), v.tag
    ('1.21.0', 'v1.21.0')
"""

import re
from dataclasses import dataclass

from setup_ispc.core.exceptions import InvalidVersionError

# ASCII digits only; fullmatch rejects a trailing newline.
VERSION_PATTERN = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)")
VERSION_SEARCH_PATTERN = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)")
LATEST = "latest"


def strip_tag_prefix(value: str) -> str:
    """Strip a single leading 'v' from a release tag."""
    return value[1:] if value.startswith("v") else value


@dataclass(frozen=True)
class VersionSpec:
    """Validated MAJOR.MINOR.PATCH release version."""

    value: str

    def __post_init__(self):
        if not VERSION_PATTERN.fullmatch(self.value):
            raise InvalidVersionError(self.value)

    @classmethod
    def parse(cls, raw: str) -> "VersionSpec":
        """
        Parse a release tag as published upstream.

        User supplied literals are validated with the constructor instead.

        Args:
            raw: '1.21.0' or 'v1.21.0'

        Raises:
            InvalidVersionError: If the numeric part is not MAJOR.MINOR.PATCH
        """
        return cls(strip_tag_prefix(raw.strip()))

    @property
    def tag(self) -> str:
        """Upstream release tag ('v1.21.0')."""
        return f"v{self.value}"

    def __str__(self) -> str:
        return self.value


def is_latest_request(raw) -> bool:
    """True when the raw input asks for discovery instead of a literal."""
    return raw is None or raw in ("", LATEST)


def find_version(text: str):
    """Return the first MAJOR.MINOR.PATCH substring of text, or None."""
    match = VERSION_SEARCH_PATTERN.search(text)
    return match.group(0) if match else None
