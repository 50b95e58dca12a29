"""
Centralized exception hierarchy for setup-ispc.

Every failure of an installation run is one of the exceptions below. They are
all terminal: the CLI reports ``str(error)`` through the CI failure channel and
stops, no stage is retried.
"""

from typing import Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class SetupIspcError(Exception):
    """Base exception for all setup-ispc errors."""

    pass


class ConfigError(SetupIspcError):
    """Configuration parsing or validation error."""

    pass


# ============================================================================
# Identity Resolution Exceptions
# ============================================================================


class ResolutionError(SetupIspcError):
    """Base exception for version/platform/architecture resolution errors."""

    pass


class InvalidVersionError(ResolutionError):
    """Version string is not MAJOR.MINOR.PATCH."""

    def __init__(self, version: str):
        self.version = version
        super().__init__(
            f"Invalid version '{version}': expected MAJOR.MINOR.PATCH (e.g. 1.21.0)"
        )


class VersionDiscoveryFailed(ResolutionError):
    """Neither the release index nor the git fallback produced a version."""

    def __init__(self, primary_error: str, fallback_error: str):
        self.primary_error = primary_error
        self.fallback_error = fallback_error
        super().__init__(
            "Unable to query latest version. "
            f"Release index: {primary_error}; git fallback: {fallback_error}"
        )


class UnsupportedPlatformError(ResolutionError):
    """Requested platform is not one of the published release platforms."""

    def __init__(self, platform: str, supported):
        self.platform = platform
        self.supported = list(supported)
        super().__init__(
            f"Platform {platform} not in list of supported platforms: "
            f"{', '.join(self.supported)}"
        )


class UnsupportedArchitectureError(ResolutionError):
    """Requested architecture is not published for the platform."""

    def __init__(self, platform: str, architecture: str, supported):
        self.platform = platform
        self.architecture = architecture
        self.supported = list(supported)
        allowed = ", ".join(repr(a) for a in self.supported)
        super().__init__(
            f"Platform {platform} does not support arch '{architecture}' "
            f"(supported: {allowed})"
        )


class AutodetectionUnsupportedError(ResolutionError):
    """Host OS or CPU cannot be mapped onto a release artifact."""

    pass


# ============================================================================
# Fetch and Extract Exceptions
# ============================================================================


class DownloadFailedError(SetupIspcError):
    """Release archive could not be downloaded."""

    def __init__(self, url: str, status_code: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status_code = status_code
        if status_code is not None:
            msg = f"Unexpected response: {status_code} at {url}"
        else:
            msg = f"Download failed for {url}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class ExtractionError(SetupIspcError):
    """Archive extraction failed or produced an unexpected layout."""

    pass


class UnsupportedArchiveFormatError(ExtractionError):
    """Archive extension is neither .zip nor .tar.gz/.gz."""

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"Unexpected file extension {extension}")


class InsecureArchiveError(ExtractionError):
    """Archive member would be written outside of the destination."""

    pass


# ============================================================================
# Version Attestation Exceptions
# ============================================================================


class AttestationError(SetupIspcError):
    """Base exception for version attestation errors."""

    pass


class ExecutionFailedError(AttestationError):
    """Extracted executable could not be run or produced no version."""

    pass


class VersionMismatchError(AttestationError):
    """Executable reports a different version than the one resolved."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Unable to match ispc version {expected} with {actual}")
