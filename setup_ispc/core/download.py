"""
Network download of release archives.

This module fetches a single URL to a local file:
- HTTP 301/302 redirects are followed by re-issuing the request against the
  ``Location`` target, with no limit on the chain length
- The whole body is buffered in arrival order and only then written to disk
- The file is flushed, synced and closed before the path is returned
- An optional timeout bounds every individual request

There is deliberately no retry: a failed download fails the run.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional, Union
from urllib.parse import urljoin

import requests
from requests.exceptions import RequestException

from setup_ispc.core.exceptions import DownloadFailedError

logger = logging.getLogger(__name__)

REDIRECT_STATUSES = (301, 302)
CHUNK_SIZE = 64 * 1024
USER_AGENT = "setup-ispc"


def fetch_to_file(
    url: str,
    destination: Union[str, Path],
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
) -> Path:
    """
    Download URL to destination, following redirects.

    Args:
        url: URL to download from
        destination: Local path to save file
        timeout: Per-request timeout in seconds (None waits forever)
        session: Optional requests session (a new one is created otherwise)

    Returns:
        Path to downloaded file

    Raises:
        DownloadFailedError: On a non-redirect, non-200 response or a
            transport error
        ValueError: If URL or destination is empty

    Example:
        >>> fetch_to_file(
        ...     "https://github.com/ispc/ispc/releases/download/v1.21.0/ispc-v1.21.0-linux.tar.gz",
        ...     Path("ispc-v1.21.0-linux.tar.gz"),
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    owns_session = session is None
    if owns_session:
        session = requests.Session()
        session.headers["User-Agent"] = USER_AGENT

    try:
        chunks = _fetch_chunks(session, url, timeout)
    finally:
        if owns_session:
            session.close()

    _write_chunks(destination, chunks)

    logger.info(f"Download complete: {destination}")
    return destination


def _fetch_chunks(
    session: requests.Session, url: str, timeout: Optional[float]
) -> List[bytes]:
    """
    Issue GET requests until a non-redirect response arrives.

    Returns:
        Body chunks in arrival order
    """
    current = url
    hops = 0

    while True:
        logger.debug(f"GET {current}")
        try:
            with session.get(
                current, stream=True, allow_redirects=False, timeout=timeout
            ) as response:
                if response.status_code in REDIRECT_STATUSES:
                    location = response.headers.get("Location")
                    if not location:
                        raise DownloadFailedError(
                            current,
                            response.status_code,
                            "redirect without Location header",
                        )
                    current = urljoin(current, location)
                    hops += 1
                    logger.debug(f"Following redirect #{hops} to {current}")
                    continue

                if response.status_code != 200:
                    raise DownloadFailedError(current, response.status_code)

                logger.info(f"Downloading from {current}")
                return [
                    chunk
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE)
                    if chunk
                ]
        except RequestException as e:
            raise DownloadFailedError(current, reason=str(e)) from e


def _write_chunks(destination: Path, chunks: List[bytes]) -> None:
    """Write buffered chunks sequentially and sync them to disk."""
    total = 0
    with open(destination, "wb") as f:
        for chunk in chunks:
            f.write(chunk)
            total += len(chunk)
        f.flush()
        os.fsync(f.fileno())

    logger.debug(f"Wrote {total} bytes to {destination}")


__all__ = [
    "fetch_to_file",
    "REDIRECT_STATUSES",
]
