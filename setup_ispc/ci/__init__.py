"""CI platform bindings (GitHub Actions inputs, outputs and PATH)."""
