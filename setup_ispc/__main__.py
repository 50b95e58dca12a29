"""
Entry point for running setup-ispc as a module.

Usage: python -m setup_ispc [VERSION] [options]
"""

from setup_ispc.cli.parser import main

if __name__ == "__main__":
    main()
