"""
ISPC download and installation pipeline.

This module orchestrates one installation run:
1. Resolve version, platform and architecture
2. Compute the release artifact identity
3. Download the archive into the workspace root
4. Extract it into <workspace>/ispc-releases
5. Attest the extracted compiler's version

The archive and the extracted tree are left in place after a successful run.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

from setup_ispc.core.download import fetch_to_file
from setup_ispc.core.exceptions import ExtractionError
from setup_ispc.core.filesystem import extract_archive
from setup_ispc.core.platform import HostInfo, detect_host
from setup_ispc.release.discovery import ReleaseDiscovery
from setup_ispc.release.locator import (
    RELEASE_DOWNLOAD_BASE_URL,
    ArtifactIdentity,
    locate_artifact,
)
from setup_ispc.release.resolver import ResolvedIdentity, resolve_identity
from setup_ispc.toolchain.verifier import ExtractedToolchain, attest_version

logger = logging.getLogger(__name__)

EXTRACT_DIR_NAME = "ispc-releases"


@dataclass
class InstallResult:
    """Result of an installation run."""

    identity: ResolvedIdentity
    """Resolved version/platform/architecture"""

    artifact: ArtifactIdentity
    """Archive that was installed"""

    archive_path: Path
    """Downloaded archive"""

    toolchain: ExtractedToolchain
    """Attested binary directory"""

    download_time: float
    """Time spent downloading in seconds"""

    extraction_time: float
    """Time spent extracting in seconds"""

    @property
    def bin_dir(self) -> Path:
        return self.toolchain.bin_dir


class ToolchainInstaller:
    """
    Downloads, extracts and attests an ISPC release.

    Example:
        >>> installer = ToolchainInstaller(Path("."))
        >>> result = installer.install("1.21.0", "linux", "")
        >>> print(f"Installed at: {result.bin_dir}")
    """

    def __init__(
        self,
        workspace_root: Union[str, Path],
        timeout: Optional[float] = None,
        download_base_url: str = RELEASE_DOWNLOAD_BASE_URL,
        discovery: Optional[ReleaseDiscovery] = None,
        host: Callable[[], HostInfo] = detect_host,
    ):
        """
        Initialize installer.

        Args:
            workspace_root: Directory receiving the archive and extracted tree
            timeout: Timeout in seconds for network calls and the version
                check (None waits forever)
            download_base_url: Release download base URL
            discovery: Latest-version discovery (a default one is created)
            host: Provider of the local host identity
        """
        self.workspace_root = Path(workspace_root).resolve()
        self.extract_dir = self.workspace_root / EXTRACT_DIR_NAME
        self.timeout = timeout
        self.download_base_url = download_base_url
        self.discovery = discovery or ReleaseDiscovery(timeout=timeout)
        self.host = host

        logger.debug(f"Initialized installer with workspace: {self.workspace_root}")

    def install(
        self,
        version: Optional[str] = None,
        platform: Optional[str] = None,
        architecture: Optional[str] = None,
    ) -> InstallResult:
        """
        Run the complete pipeline for raw user inputs.

        Args:
            version: Literal version, 'latest' or None
            platform: Release platform or None to autodetect
            architecture: Architecture, '' for no suffix, None to autodetect

        Returns:
            InstallResult with the attested toolchain

        Raises:
            SetupIspcError: Any stage failure; no later stage runs
        """
        identity = resolve_identity(
            version, platform, architecture, host=self.host, discovery=self.discovery
        )
        artifact = locate_artifact(identity, base_url=self.download_base_url)

        download_start = time.time()
        archive_path = self.download(artifact)
        download_time = time.time() - download_start
        logger.info(f"Download complete in {download_time:.2f}s")

        extraction_start = time.time()
        bin_dir = self.extract(artifact, archive_path)
        extraction_time = time.time() - extraction_start
        logger.info(f"Extraction complete in {extraction_time:.2f}s")

        toolchain = attest_version(
            bin_dir, identity.version, identity.platform, timeout=self.timeout
        )

        return InstallResult(
            identity=identity,
            artifact=artifact,
            archive_path=archive_path,
            toolchain=toolchain,
            download_time=download_time,
            extraction_time=extraction_time,
        )

    def download(self, artifact: ArtifactIdentity) -> Path:
        """Download the artifact archive into the workspace root."""
        destination = self.workspace_root / artifact.file_name
        logger.info(f"Downloading {artifact.download_url}")
        return fetch_to_file(artifact.download_url, destination, timeout=self.timeout)

    def extract(self, artifact: ArtifactIdentity, archive_path: Path) -> Path:
        """
        Extract the archive and locate its bin directory.

        Returns:
            <workspace>/ispc-releases/<extract_name>/bin

        Raises:
            UnsupportedArchiveFormatError: If the archive extension is unknown
            ExtractionError: If extraction fails or bin/ is missing
        """
        logger.info(f"Extracting to: {self.extract_dir}")
        extract_archive(archive_path, self.extract_dir)

        bin_dir = self.bin_dir_for(artifact)
        if not bin_dir.is_dir():
            raise ExtractionError(
                f"Extracted archive {archive_path.name} has no directory {bin_dir}"
            )
        return bin_dir

    def bin_dir_for(self, artifact: ArtifactIdentity) -> Path:
        return self.extract_dir / artifact.extract_name / "bin"


def install_ispc(
    workspace_root: Union[str, Path],
    version: Optional[str] = None,
    platform: Optional[str] = None,
    architecture: Optional[str] = None,
    timeout: Optional[float] = None,
) -> InstallResult:
    """
    Convenience function to install ISPC in one call.

    Example:
        >>> from setup_ispc.toolchain.installer import install_ispc
        >>> result = install_ispc(".", version="latest")
        >>> print(result.bin_dir)
    """
    installer = ToolchainInstaller(workspace_root, timeout=timeout)
    return installer.install(version, platform, architecture)
