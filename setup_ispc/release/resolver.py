"""
Identity resolution for ISPC release artifacts.

Turns loosely specified user inputs (a version or 'latest', an optional
platform, an optional architecture) into a fully specified and validated
(version, platform, architecture) triple.

Platform and architecture are resolved first since they need no network
access; the version is resolved last and may trigger release discovery.

Example:
    >>> identity = resolve_identity("1.21.0", "linux", "oneapi")
    >>> identity.platform, identity.architecture
    ('linux', 'oneapi')
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from setup_ispc.core.exceptions import (
    AutodetectionUnsupportedError,
    UnsupportedArchitectureError,
    UnsupportedPlatformError,
)
from setup_ispc.core.platform import HostInfo, detect_host
from setup_ispc.release.discovery import ReleaseDiscovery
from setup_ispc.release.version import VersionSpec, is_latest_request

logger = logging.getLogger(__name__)

SUPPORTED_PLATFORMS: Tuple[str, ...] = ("linux", "macOS", "windows")

# Architectures published per platform; "" means no architecture suffix.
SUPPORTED_ARCHITECTURES: Dict[str, Tuple[str, ...]] = {
    "linux": ("oneapi", "aarch64", ""),
    "macOS": ("x86_64", "arm64", "universal"),
    "windows": ("",),
}

# Host CPU -> linux architecture suffix.
LINUX_HOST_ARCHITECTURES = {
    "arm64": "aarch64",
    "x64": "",
}

# Platforms whose archives never carry an explicit x86_64 suffix.
IMPLICIT_X86_64_PLATFORMS = ("linux", "windows")


@dataclass(frozen=True)
class ResolvedIdentity:
    """Fully resolved release identity."""

    version: VersionSpec
    platform: str
    architecture: str

    def __str__(self) -> str:
        arch = self.architecture or "default"
        return f"ispc {self.version} ({self.platform}, {arch})"


def resolve_platform(
    raw_platform: Optional[str], host: Callable[[], HostInfo] = detect_host
) -> str:
    """
    Resolve the release platform.

    Args:
        raw_platform: User supplied platform, or None/'' to autodetect
        host: Provider of the local host identity

    Raises:
        UnsupportedPlatformError: If the given platform is not published
        AutodetectionUnsupportedError: If the host OS is not recognized
    """
    if raw_platform:
        if raw_platform not in SUPPORTED_PLATFORMS:
            raise UnsupportedPlatformError(raw_platform, SUPPORTED_PLATFORMS)
        return raw_platform

    platform = host().require_os()
    logger.debug(f"Autodetected platform: {platform}")
    return platform


def normalize_architecture(platform: str, architecture: str) -> str:
    """Map an explicit 'x86_64' onto the unsuffixed linux/windows archives."""
    if architecture == "x86_64" and platform in IMPLICIT_X86_64_PLATFORMS:
        return ""
    return architecture


def resolve_architecture(
    platform: str,
    raw_architecture: Optional[str],
    host: Callable[[], HostInfo] = detect_host,
) -> str:
    """
    Resolve the architecture suffix for an already resolved platform.

    Args:
        platform: Resolved platform (one of SUPPORTED_PLATFORMS)
        raw_architecture: User supplied architecture; None autodetects,
            '' explicitly requests the unsuffixed archive
        host: Provider of the local host identity

    Raises:
        UnsupportedArchitectureError: If the architecture is not published
            for the platform
        AutodetectionUnsupportedError: If the host CPU has no linux archive
    """
    allowed = SUPPORTED_ARCHITECTURES[platform]

    if raw_architecture is not None:
        architecture = normalize_architecture(platform, raw_architecture)
        if architecture not in allowed:
            raise UnsupportedArchitectureError(platform, raw_architecture, allowed)
        return architecture

    if platform == "macOS":
        architecture = "universal"
    elif platform == "windows":
        architecture = ""
    else:
        cpu = host().arch
        if cpu not in LINUX_HOST_ARCHITECTURES:
            raise AutodetectionUnsupportedError(
                f"Unable to autodetect linux architecture for CPU '{cpu}'; "
                f"pass one of: {', '.join(repr(a) for a in allowed)}"
            )
        architecture = LINUX_HOST_ARCHITECTURES[cpu]

    logger.debug(f"Autodetected architecture for {platform}: '{architecture}'")
    return normalize_architecture(platform, architecture)


def resolve_version(
    raw_version: Optional[str], discovery: Optional[ReleaseDiscovery] = None
) -> VersionSpec:
    """
    Resolve the release version.

    Args:
        raw_version: Literal MAJOR.MINOR.PATCH, 'latest', or None/'' for latest
        discovery: Discovery used for 'latest' (a default one is created)

    Raises:
        InvalidVersionError: If the literal is not MAJOR.MINOR.PATCH
        VersionDiscoveryFailed: If 'latest' cannot be discovered
    """
    if is_latest_request(raw_version):
        logger.info("Resolving latest ISPC release")
        return (discovery or ReleaseDiscovery()).latest_version()
    return VersionSpec(raw_version)


def resolve_identity(
    raw_version: Optional[str] = None,
    raw_platform: Optional[str] = None,
    raw_architecture: Optional[str] = None,
    host: Callable[[], HostInfo] = detect_host,
    discovery: Optional[ReleaseDiscovery] = None,
) -> ResolvedIdentity:
    """
    Resolve raw inputs into a validated release identity.

    Raises:
        ResolutionError: Any of its subclasses, see the resolve_* functions
    """
    platform = resolve_platform(raw_platform, host)
    architecture = resolve_architecture(platform, raw_architecture, host)
    version = resolve_version(raw_version, discovery)

    identity = ResolvedIdentity(
        version=version, platform=platform, architecture=architecture
    )
    logger.info(f"Resolved {identity}")
    return identity
