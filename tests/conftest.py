"""
Pytest configuration and shared fixtures for setup-ispc tests.
"""

import io
import stat
import tarfile
import zipfile
from pathlib import Path
from typing import Callable
from unittest.mock import Mock

import pytest

from setup_ispc.core.platform import HostInfo, clear_host_cache
from setup_ispc.release.version import VersionSpec


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_host_cache():
    """Host detection is cached per process; reset it around every test."""
    clear_host_cache()
    yield
    clear_host_cache()


@pytest.fixture
def linux_x64_host() -> Callable[[], HostInfo]:
    return lambda: HostInfo(os="linux", arch="x64")


@pytest.fixture
def linux_arm64_host() -> Callable[[], HostInfo]:
    return lambda: HostInfo(os="linux", arch="arm64")


@pytest.fixture
def fixed_discovery():
    """Discovery stub that always reports 1.22.0."""
    discovery = Mock()
    discovery.latest_version.return_value = VersionSpec("1.22.0")
    return discovery


def version_banner(version: str) -> str:
    """Text printed by `ispc --version`."""
    return (
        f"Intel(r) Implicit SPMD Program Compiler (Intel(r) ISPC), {version} "
        "(build commit 8b8b2b9 @ 20231101, LLVM 16.0.6)\n"
    )


@pytest.fixture
def banner() -> Callable[[str], str]:
    return version_banner


def _fake_ispc_script(version: str) -> bytes:
    return f"#!/bin/sh\necho '{version_banner(version).strip()}'\n".encode()


def build_tar_gz(path: Path, top_dir: str, version: str) -> Path:
    """Create a release-shaped .tar.gz with <top_dir>/bin/ispc."""
    data = _fake_ispc_script(version)
    with tarfile.open(path, "w:gz") as tar:
        for directory in (top_dir, f"{top_dir}/bin"):
            info = tarfile.TarInfo(directory)
            info.type = tarfile.DIRTYPE
            info.mode = 0o755
            tar.addfile(info)
        info = tarfile.TarInfo(f"{top_dir}/bin/ispc")
        info.size = len(data)
        info.mode = 0o755
        tar.addfile(info, io.BytesIO(data))
    return path


def build_zip(path: Path, top_dir: str, version: str, exe: str = ".exe") -> Path:
    """Create a release-shaped .zip with <top_dir>/bin/ispc<exe>."""
    with zipfile.ZipFile(path, "w") as zf:
        info = zipfile.ZipInfo(f"{top_dir}/bin/ispc{exe}")
        info.external_attr = (stat.S_IFREG | 0o755) << 16
        zf.writestr(info, _fake_ispc_script(version))
    return path


@pytest.fixture
def release_archive(tmp_path) -> Callable[..., bytes]:
    """Factory returning the bytes of a release-shaped archive."""

    def factory(top_dir: str, version: str, extension: str = ".tar.gz") -> bytes:
        source = tmp_path / f"source{extension}"
        if extension == ".zip":
            build_zip(source, top_dir, version)
        else:
            build_tar_gz(source, top_dir, version)
        return source.read_bytes()

    return factory
