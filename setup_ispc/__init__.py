"""
setup-ispc: install the ISPC compiler in CI pipelines.

Resolves a requested ISPC release, downloads the archive for the platform and
architecture, extracts it, checks the extracted compiler's version and
exposes its bin directory on PATH.
"""

from setup_ispc.toolchain.installer import InstallResult, ToolchainInstaller, install_ispc

__all__ = [
    "InstallResult",
    "ToolchainInstaller",
    "install_ispc",
]
