"""
GitHub Actions step binding.

Reads step inputs from ``INPUT_*`` environment variables, publishes outputs
and PATH additions through the files named by ``GITHUB_OUTPUT`` and
``GITHUB_PATH``, and reports failures as workflow commands.

Outside of GitHub Actions the file-based channels are simply skipped.
"""

import logging
import os
import sys
from pathlib import Path
from typing import MutableMapping, Optional, TextIO

logger = logging.getLogger(__name__)


def _env(environ: Optional[MutableMapping[str, str]]) -> MutableMapping[str, str]:
    return os.environ if environ is None else environ


def get_input(
    name: str, environ: Optional[MutableMapping[str, str]] = None
) -> Optional[str]:
    """
    Read a step input.

    Args:
        name: Input name as declared in action.yml (e.g. 'version')
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Stripped input value, or None when unset or empty

    Example:
        >>> get_input("version", {"INPUT_VERSION": " 1.21.0 "})
        '1.21.0'
    """
    key = f"INPUT_{name.replace(' ', '_').upper()}"
    value = _env(environ).get(key, "").strip()
    return value or None


def _append_line(file_var: str, line: str, environ) -> bool:
    target = _env(environ).get(file_var)
    if not target:
        return False
    with open(target, "a", encoding="utf-8") as f:
        f.write(f"{line}\n")
    return True


def add_path(
    directory: Path, environ: Optional[MutableMapping[str, str]] = None
) -> None:
    """
    Expose a directory on PATH for this process and later workflow steps.

    Args:
        directory: Directory to add
        environ: Environment mapping (defaults to os.environ)
    """
    env = _env(environ)
    directory = str(directory)

    if _append_line("GITHUB_PATH", directory, env):
        logger.debug(f"Appended {directory} to GITHUB_PATH")

    current = env.get("PATH", "")
    env["PATH"] = f"{directory}{os.pathsep}{current}" if current else directory


def set_output(
    name: str, value: str, environ: Optional[MutableMapping[str, str]] = None
) -> None:
    """Publish a step output when running under GitHub Actions."""
    if _append_line("GITHUB_OUTPUT", f"{name}={value}", environ):
        logger.debug(f"Set output {name}={value}")


def escape_data(message: str) -> str:
    """Escape a workflow command message."""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def set_failed(message: str, stream: Optional[TextIO] = None) -> None:
    """Report a failure message through the workflow error command."""
    stream = stream or sys.stdout
    stream.write(f"::error::{escape_data(message)}\n")
    stream.flush()
