"""
ISPC release identity: version resolution, discovery and artifact naming.
"""

from .version import VersionSpec
from .resolver import ResolvedIdentity, resolve_identity
from .locator import ArtifactIdentity, locate_artifact
from .discovery import ReleaseDiscovery, discover_latest_version

__all__ = [
    "VersionSpec",
    "ResolvedIdentity",
    "resolve_identity",
    "ArtifactIdentity",
    "locate_artifact",
    "ReleaseDiscovery",
    "discover_latest_version",
]
