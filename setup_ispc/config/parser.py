"""YAML configuration for setup-ispc.

Settings are merged from three layers, highest precedence first:
command-line flags, GitHub Actions step inputs, and an optional YAML file.
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from setup_ispc.ci.actions import get_input
from setup_ispc.core.exceptions import ConfigError
from setup_ispc.release.locator import RELEASE_DOWNLOAD_BASE_URL

logger = logging.getLogger(__name__)

INPUT_NAMES = ("version", "platform", "architecture")


@dataclass
class SetupConfig:
    """Settings of one installation run."""

    version: Optional[str] = None  # literal, 'latest' or None
    platform: Optional[str] = None  # None autodetects
    architecture: Optional[str] = None  # '' means no suffix, None autodetects
    workspace: Path = Path(".")
    timeout: Optional[float] = None
    download_base_url: str = RELEASE_DOWNLOAD_BASE_URL


CONFIG_KEYS = tuple(f.name for f in fields(SetupConfig))


def load_config_file(config_path: Path) -> Dict[str, Any]:
    """
    Parse a setup-ispc YAML configuration file.

    Args:
        config_path: Path to the YAML file

    Returns:
        Mapping of recognized keys to values

    Raises:
        ConfigError: If the file is missing, invalid YAML, not a mapping,
            or contains unknown keys
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    logger.debug(f"Loading configuration from {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}")

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration in {config_path} must be a mapping")

    unknown = sorted(set(data) - set(CONFIG_KEYS))
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys in {config_path}: {', '.join(unknown)}"
        )

    return data


def _coerce(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert raw layer values to SetupConfig field types."""
    result: Dict[str, Any] = {}
    for key, value in data.items():
        if value is None:
            continue
        if key == "workspace":
            result[key] = Path(value)
        elif key == "timeout":
            try:
                result[key] = float(value)
            except (TypeError, ValueError):
                raise ConfigError(f"timeout must be a number, got {value!r}")
            if result[key] <= 0:
                raise ConfigError(f"timeout must be positive, got {value!r}")
        else:
            # YAML reads versions like 1.21 as floats; keep the text form
            result[key] = str(value)
    return result


def build_config(
    cli_values: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
    config_path: Optional[Path] = None,
) -> SetupConfig:
    """
    Merge configuration layers into a SetupConfig.

    Args:
        cli_values: Values given on the command line (None entries ignored)
        environ: Environment holding INPUT_* step inputs
        config_path: Optional YAML configuration file

    Raises:
        ConfigError: If a layer is invalid
    """
    merged: Dict[str, Any] = {}

    if config_path is not None:
        merged.update(_coerce(load_config_file(config_path)))

    inputs = {name: get_input(name, environ) for name in INPUT_NAMES}
    merged.update(_coerce(inputs))

    if cli_values:
        merged.update(
            _coerce({k: v for k, v in cli_values.items() if k in CONFIG_KEYS})
        )

    config = SetupConfig(**merged)
    logger.debug(f"Configuration: {config}")
    return config
