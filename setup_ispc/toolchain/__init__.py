"""
Toolchain installation: download, extraction and version attestation.
"""

from .installer import InstallResult, ToolchainInstaller, install_ispc
from .verifier import ExtractedToolchain, attest_version

__all__ = [
    "InstallResult",
    "ToolchainInstaller",
    "install_ispc",
    "ExtractedToolchain",
    "attest_version",
]
