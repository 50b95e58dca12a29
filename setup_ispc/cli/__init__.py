"""Command-line interface for setup-ispc."""
