"""
Release artifact naming.

Maps a resolved identity onto the upstream archive name, file extension and
download URL. Pure functions only: no network or filesystem access.

Upstream naming:
    ispc-v<version>-<platform>[<sep><arch>]<ext>

where <sep> is '-' for the oneapi (GPU offload) variant and '.' for CPU
architecture variants, and <ext> is '.zip' on windows, '.tar.gz' elsewhere.
"""

from dataclasses import dataclass

from setup_ispc.release.resolver import ResolvedIdentity

RELEASE_DOWNLOAD_BASE_URL = "https://github.com/ispc/ispc/releases/download"
ONEAPI = "oneapi"


@dataclass(frozen=True)
class ArtifactIdentity:
    """
    Download coordinates of one release archive.

    Attributes:
        archive_name: Archive file name without extension
        download_url: Full URL of the archive
        extension: '.zip' or '.tar.gz'
        extract_name: Top-level directory name inside the archive
    """

    archive_name: str
    download_url: str
    extension: str
    extract_name: str

    @property
    def file_name(self) -> str:
        return f"{self.archive_name}{self.extension}"


def architecture_suffix(architecture: str) -> str:
    """
    Suffix appended to the platform in archive names.

    Example:
        >>> architecture_suffix("oneapi"), architecture_suffix("aarch64")
        ('-oneapi', '.aarch64')
    """
    if not architecture:
        return ""
    separator = "-" if architecture == ONEAPI else "."
    return f"{separator}{architecture}"


def archive_extension(platform: str) -> str:
    return ".zip" if platform == "windows" else ".tar.gz"


def locate_artifact(
    identity: ResolvedIdentity, base_url: str = RELEASE_DOWNLOAD_BASE_URL
) -> ArtifactIdentity:
    """
    Compute the archive identity for a resolved release.

    Args:
        identity: Resolved version/platform/architecture
        base_url: Release download base URL (overridable for mirrors)

    Returns:
        ArtifactIdentity

    Example:
        >>> artifact = locate_artifact(ResolvedIdentity(VersionSpec("1.21.0"), "linux", ""))
        >>> artifact.download_url
        'https://github.com/ispc/ispc/releases/download/v1.21.0/ispc-v1.21.0-linux.tar.gz'
    """
    tag = identity.version.tag
    stem = f"ispc-{tag}-{identity.platform}"
    archive_name = stem + architecture_suffix(identity.architecture)
    extension = archive_extension(identity.platform)

    # oneapi archives unpack into a directory without the suffix
    extract_name = stem if identity.architecture == ONEAPI else archive_name

    return ArtifactIdentity(
        archive_name=archive_name,
        download_url=f"{base_url.rstrip('/')}/{tag}/{archive_name}{extension}",
        extension=extension,
        extract_name=extract_name,
    )
