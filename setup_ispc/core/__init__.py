"""
Core functionality for setup-ispc.

This package contains the foundational modules that other components depend on.
"""

from .exceptions import (
    SetupIspcError,
    ConfigError,
    ResolutionError,
    InvalidVersionError,
    VersionDiscoveryFailed,
    UnsupportedPlatformError,
    UnsupportedArchitectureError,
    AutodetectionUnsupportedError,
    DownloadFailedError,
    ExtractionError,
    UnsupportedArchiveFormatError,
    InsecureArchiveError,
    AttestationError,
    ExecutionFailedError,
    VersionMismatchError,
)

from .platform import (
    HostInfo,
    detect_host,
    detect_architecture,
    clear_host_cache,
)

__all__ = [
    "SetupIspcError",
    "ConfigError",
    "ResolutionError",
    "InvalidVersionError",
    "VersionDiscoveryFailed",
    "UnsupportedPlatformError",
    "UnsupportedArchitectureError",
    "AutodetectionUnsupportedError",
    "DownloadFailedError",
    "ExtractionError",
    "UnsupportedArchiveFormatError",
    "InsecureArchiveError",
    "AttestationError",
    "ExecutionFailedError",
    "VersionMismatchError",
    "HostInfo",
    "detect_host",
    "detect_architecture",
    "clear_host_cache",
]
