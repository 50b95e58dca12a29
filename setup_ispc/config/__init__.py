"""Configuration handling for setup-ispc."""

from .parser import SetupConfig, build_config, load_config_file

__all__ = ["SetupConfig", "build_config", "load_config_file"]
