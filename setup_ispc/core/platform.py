"""
Host platform detection for setup-ispc.

This module maps the local OS and CPU identity onto the names used by the
ISPC release artifacts. It is only consulted when the caller does not pin a
platform or architecture explicitly.

Detection itself never fails: an OS without ISPC releases is reported as
``os=None`` and only becomes an error once a platform actually has to be
autodetected (see ``HostInfo.require_os``).

Usage:
    from setup_ispc.core.platform import detect_host

    host = detect_host()
    print(f"OS: {host.require_os()}")
    print(f"Architecture: {host.arch}")
"""

import functools
import platform
from dataclasses import dataclass, field
from typing import Optional

from setup_ispc.core.exceptions import AutodetectionUnsupportedError


# OS identifiers reported by platform.system() -> canonical release platform.
OS_MAP = {
    "linux": "linux",
    "darwin": "macOS",
    "windows": "windows",
}


@dataclass(frozen=True)
class HostInfo:
    """
    Host identity as seen by the release resolver.

    Attributes:
        os: Canonical release platform ('linux', 'macOS', 'windows'), or
            None when the OS has no ISPC release
        arch: Normalized CPU architecture ('x64', 'arm64', 'x86', 'arm', ...)
        system: Raw OS name as reported by the interpreter
    """

    os: Optional[str]
    arch: str
    system: str = field(default="", compare=False)

    def require_os(self) -> str:
        """
        Return the canonical platform.

        Raises:
            AutodetectionUnsupportedError: If the OS has no ISPC release
        """
        if self.os is None:
            raise AutodetectionUnsupportedError(
                f"Unable to autodetect platform for OS '{self.system}'; "
                "pass the platform explicitly"
            )
        return self.os

    def __str__(self) -> str:
        return f"{self.os or self.system}-{self.arch}"


@functools.lru_cache(maxsize=1)
def detect_host() -> HostInfo:
    """
    Detect current host information.

    This function is cached - it only runs detection once per process.

    Returns:
        HostInfo with the canonical platform and normalized architecture
    """
    system = platform.system()
    return HostInfo(
        os=OS_MAP.get(system.lower()),
        arch=detect_architecture(),
        system=system,
    )


@functools.lru_cache(maxsize=1)
def detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', 'x86', 'arm'
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    else:
        # Unknown architectures are passed through so errors can name them
        return machine


def clear_host_cache():
    """Clear the host detection cache (used by tests)."""
    detect_host.cache_clear()
    detect_architecture.cache_clear()


__all__ = [
    "HostInfo",
    "OS_MAP",
    "detect_host",
    "detect_architecture",
    "clear_host_cache",
]
