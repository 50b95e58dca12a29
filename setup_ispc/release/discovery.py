"""
Latest ISPC release discovery.

The latest version is read from the GitHub release index. When the index
cannot be used (network error, rate limiting, malformed payload) the upstream
repository is shallow-cloned and the tag reachable from the most recently
created tag ref is used instead. Note that this picks the most recently pushed
tag, which is not necessarily the highest version number.

Example:
    >>> from setup_ispc.release.discovery import discover_latest_version
    >>> str(discover_latest_version())
    '1.21.0'
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import requests
from requests.exceptions import RequestException

from setup_ispc.core.exceptions import InvalidVersionError, VersionDiscoveryFailed
from setup_ispc.core.filesystem import temporary_directory
from setup_ispc.release.version import VersionSpec

logger = logging.getLogger(__name__)

LATEST_RELEASE_URL = "https://api.github.com/repos/ispc/ispc/releases/latest"
REPOSITORY_URL = "https://github.com/ispc/ispc.git"


class DiscoveryError(Exception):
    """A single discovery path failed."""

    pass


@dataclass(frozen=True)
class ReleaseInfo:
    """Typed view of the release index payload."""

    tag_name: str

    @classmethod
    def from_json(cls, payload) -> "ReleaseInfo":
        """
        Decode the release index JSON object.

        Raises:
            DiscoveryError: If the payload has no string 'tag_name'
        """
        if not isinstance(payload, dict):
            raise DiscoveryError(
                f"expected a JSON object, got {type(payload).__name__}"
            )
        tag_name = payload.get("tag_name")
        if not isinstance(tag_name, str) or not tag_name:
            raise DiscoveryError("release payload has no 'tag_name' string")
        return cls(tag_name=tag_name)

    def version(self) -> VersionSpec:
        """Convert the tag into a VersionSpec."""
        try:
            return VersionSpec.parse(self.tag_name)
        except InvalidVersionError as e:
            raise DiscoveryError(f"release tag is not a version: {e}") from e


class ReleaseDiscovery:
    """
    Resolves the 'latest' ISPC version.

    Args:
        api_url: Release index endpoint returning {"tag_name": ...}
        repository_url: Upstream git repository used by the fallback
        repository_dir: Existing local clone to reuse for the fallback
        timeout: Timeout in seconds for each network/git call (None waits)
        session: Optional requests session
    """

    def __init__(
        self,
        api_url: str = LATEST_RELEASE_URL,
        repository_url: str = REPOSITORY_URL,
        repository_dir: Optional[Path] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_url = api_url
        self.repository_url = repository_url
        self.repository_dir = Path(repository_dir) if repository_dir else None
        self.timeout = timeout
        self.session = session

    def latest_version(self) -> VersionSpec:
        """
        Discover the latest released version.

        Raises:
            VersionDiscoveryFailed: If both discovery paths fail
        """
        try:
            version = self.query_release_index()
            logger.info(f"Latest ISPC release from index: {version}")
            return version
        except DiscoveryError as primary:
            logger.warning(
                f"Release index unavailable ({primary}), falling back to git tags"
            )
            try:
                version = self.query_git_tags()
            except DiscoveryError as fallback:
                raise VersionDiscoveryFailed(str(primary), str(fallback)) from fallback
            logger.info(f"Latest ISPC release from git tags: {version}")
            return version

    def query_release_index(self) -> VersionSpec:
        """Read the latest release tag from the release index endpoint."""
        getter = self.session.get if self.session else requests.get
        try:
            response = getter(
                self.api_url,
                headers={"Accept": "application/vnd.github+json"},
                timeout=self.timeout,
            )
        except RequestException as e:
            raise DiscoveryError(f"request to {self.api_url} failed: {e}") from e

        if response.status_code != 200:
            raise DiscoveryError(
                f"unexpected response {response.status_code} from {self.api_url}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise DiscoveryError(f"invalid JSON from {self.api_url}: {e}") from e

        return ReleaseInfo.from_json(payload).version()

    def query_git_tags(self) -> VersionSpec:
        """Read the most recently created tag from the upstream repository."""
        if self.repository_dir and (self.repository_dir / ".git").exists():
            logger.debug(f"Reusing local clone at {self.repository_dir}")
            return self._describe_latest_tag(self.repository_dir)

        with temporary_directory(prefix="ispc_tags_") as tmp:
            clone_dir = tmp / "ispc"
            self._git(["clone", "--depth", "1", self.repository_url, str(clone_dir)])
            return self._describe_latest_tag(clone_dir)

    def _describe_latest_tag(self, repo: Path) -> VersionSpec:
        self._git(["fetch", "--tags"], cwd=repo)
        sha = self._git(["rev-list", "--tags", "--max-count=1"], cwd=repo)
        if not sha:
            raise DiscoveryError(f"no tags found in {self.repository_url}")
        tag = self._git(["describe", "--tags", sha], cwd=repo)
        try:
            return VersionSpec.parse(tag)
        except InvalidVersionError as e:
            raise DiscoveryError(f"latest tag '{tag}' is not a version") from e

    def _git(self, args: List[str], cwd: Optional[Path] = None) -> str:
        """Run a git command and return its stripped stdout."""
        cmd = ["git"] + args
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise DiscoveryError("git executable not found") from e
        except subprocess.TimeoutExpired as e:
            raise DiscoveryError(f"'git {args[0]}' timed out") from e

        if result.returncode != 0:
            raise DiscoveryError(
                f"'git {args[0]}' failed with code {result.returncode}: "
                f"{result.stderr.strip()}"
            )
        return result.stdout.strip()


def discover_latest_version(**kwargs) -> VersionSpec:
    """
    Convenience function to discover the latest version.

    Keyword arguments are passed to ReleaseDiscovery.
    """
    return ReleaseDiscovery(**kwargs).latest_version()
