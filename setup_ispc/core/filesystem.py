"""
File system utilities for setup-ispc.

This module provides:
- Archive extraction (zip, tar.gz) with path traversal protection
- Safe directory removal (read-only files on Windows, prefix guard)
- Temporary directories with guaranteed cleanup
"""

import os
import shutil
import sys
import tarfile
import tempfile
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union

from setup_ispc.core.exceptions import (
    ExtractionError,
    InsecureArchiveError,
    UnsupportedArchiveFormatError,
)

IS_WINDOWS = os.name == "nt"

ZIP_EXTENSIONS = (".zip",)
TAR_GZ_EXTENSIONS = (".tar.gz", ".tgz", ".gz")


# ============================================================================
# Archive Extraction
# ============================================================================


def archive_extension(archive_path: Union[str, Path]) -> str:
    """
    Return the archive extension used for format dispatch.

    Example:
        >>> archive_extension("ispc-v1.21.0-linux.tar.gz")
        '.tar.gz'
    """
    name = Path(archive_path).name.lower()
    if name.endswith(".tar.gz"):
        return ".tar.gz"
    return Path(name).suffix


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not member_path.is_relative_to(destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "Extraction has been blocked."
        )


def extract_archive(
    archive_path: Union[str, Path], destination: Union[str, Path]
) -> Path:
    """
    Extract an archive to a destination directory.

    The format is chosen purely from the file extension:
    - .zip
    - .tar.gz, .tgz, .gz

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to (created if missing)

    Returns:
        The destination directory

    Raises:
        UnsupportedArchiveFormatError: If the extension is not recognized
        InsecureArchiveError: If archive contains malicious paths
        ExtractionError: If extraction fails

    Example:
        >>> extract_archive('ispc-v1.21.0-windows.zip', 'ispc-releases')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    extension = archive_extension(archive_path)
    if extension in ZIP_EXTENSIONS:
        extractor = _extract_zip
    elif extension in TAR_GZ_EXTENSIONS:
        extractor = _extract_tar_gz
    else:
        raise UnsupportedArchiveFormatError(extension or archive_path.name)

    if not archive_path.exists():
        raise ExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)

    try:
        extractor(archive_path, destination)
    except InsecureArchiveError:
        raise
    except (OSError, zipfile.BadZipFile, tarfile.TarError) as e:
        raise ExtractionError(f"Failed to extract {archive_path}: {e}") from e

    return destination


def _extract_zip(archive_path: Path, destination: Path) -> None:
    """Extract a ZIP archive, restoring stored Unix permission bits."""
    with zipfile.ZipFile(archive_path, "r") as zf:
        members = zf.infolist()

        for member in members:
            _validate_archive_path(member.filename, destination)

        for member in members:
            extracted = zf.extract(member, destination)
            mode = (member.external_attr >> 16) & 0o777
            if mode and not IS_WINDOWS:
                os.chmod(extracted, mode)


def _extract_tar_gz(archive_path: Path, destination: Path) -> None:
    """Extract a gzip-compressed tar archive."""
    with tarfile.open(archive_path, "r:gz") as tar:
        for member in tar.getmembers():
            _validate_archive_path(member.name, destination)

        # Python 3.12+ ships extraction filters; paths are validated above
        if sys.version_info >= (3, 12):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)


# ============================================================================
# Safe File Operations
# ============================================================================


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree with safeguards.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        OSError: If deletion fails
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not path.is_relative_to(require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if IS_WINDOWS:

        def handle_remove_readonly(func, path, exc):
            """Error handler for read-only files (git objects)."""
            if not os.access(path, os.W_OK):
                os.chmod(path, 0o777)
                func(path)
            else:
                raise

        shutil.rmtree(path, onerror=handle_remove_readonly)
    else:
        shutil.rmtree(path)


@contextmanager
def temporary_directory(prefix: str = "setup_ispc_"):
    """
    Context manager for a temporary directory that is always removed.

    Yields:
        Path to temporary directory
    """
    temp_dir = Path(tempfile.mkdtemp(prefix=prefix))

    try:
        yield temp_dir
    finally:
        if temp_dir.exists():
            safe_rmtree(temp_dir, require_prefix=tempfile.gettempdir())


__all__ = [
    "archive_extension",
    "extract_archive",
    "safe_rmtree",
    "temporary_directory",
]
