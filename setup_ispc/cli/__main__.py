"""
Entry point for running the setup-ispc CLI as a module.

Usage: python -m setup_ispc.cli [VERSION] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
