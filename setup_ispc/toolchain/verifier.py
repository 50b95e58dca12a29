"""
Version attestation of an extracted ISPC toolchain.

Runs the extracted compiler with ``--version`` and checks that the first
MAJOR.MINOR.PATCH it prints is exactly the resolved version. A toolchain is
only handed to the caller after this check passes.
"""

import logging
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from setup_ispc.core.exceptions import ExecutionFailedError, VersionMismatchError
from setup_ispc.release.version import VersionSpec, find_version

logger = logging.getLogger(__name__)

EXECUTABLE_NAME = "ispc"


@dataclass(frozen=True)
class ExtractedToolchain:
    """Version-attested ISPC binary directory."""

    bin_dir: Path
    version: VersionSpec


def executable_path(bin_dir: Path, platform: str) -> Path:
    """Path of the ispc executable inside bin_dir for the release platform."""
    exe = ".exe" if platform == "windows" else ""
    return Path(bin_dir) / f"{EXECUTABLE_NAME}{exe}"


def read_reported_version(executable: Path, timeout: Optional[float] = None) -> str:
    """
    Run ``<executable> --version`` and parse the reported version.

    The child's stdout and stderr are forwarded to this process' streams.

    Raises:
        ExecutionFailedError: If the process cannot run, exits non-zero,
            times out or prints no MAJOR.MINOR.PATCH
    """
    cmd = [str(executable), "--version"]
    logger.debug(f"Running: {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired as e:
        raise ExecutionFailedError(
            f"Unable to run ispc at {executable}: timed out after {timeout}s"
        ) from e
    except OSError as e:
        raise ExecutionFailedError(f"Unable to run ispc at {executable}: {e}") from e

    if result.stdout:
        sys.stdout.write(result.stdout)
    if result.stderr:
        sys.stderr.write(result.stderr)

    if result.returncode != 0:
        raise ExecutionFailedError(
            f"Unable to run ispc at {executable}: exited with code {result.returncode}"
        )

    reported = find_version(result.stdout)
    if reported is None:
        raise ExecutionFailedError(
            f"Unable to parse ispc version from output of {executable}: "
            f"{result.stdout.strip()[:100]!r}"
        )
    return reported


def attest_version(
    bin_dir: Path,
    version: VersionSpec,
    platform: str,
    timeout: Optional[float] = None,
) -> ExtractedToolchain:
    """
    Confirm the extracted executable reports the resolved version.

    Args:
        bin_dir: Extracted binary directory
        version: Resolved version
        platform: Resolved release platform (selects the .exe suffix)
        timeout: Optional timeout in seconds for the --version run

    Returns:
        ExtractedToolchain ready to be exposed to the caller

    Raises:
        ExecutionFailedError: If the executable cannot report a version
        VersionMismatchError: If the reported version differs
    """
    executable = executable_path(bin_dir, platform)
    reported = read_reported_version(executable, timeout=timeout)

    if reported != version.value:
        raise VersionMismatchError(version.value, reported)

    logger.info(f"ISPC ({version}) Installation Success")
    return ExtractedToolchain(bin_dir=Path(bin_dir), version=version)
