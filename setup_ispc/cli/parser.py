"""
setup-ispc command-line interface.

This module implements the command-line entry point using argparse. The same
entry point serves as the GitHub Actions step: inputs not given on the
command line are read from ``INPUT_*`` environment variables.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Mapping, Optional

from setup_ispc.ci import actions
from setup_ispc.config.parser import build_config
from setup_ispc.toolchain.installer import ToolchainInstaller

try:
    from importlib.metadata import version

    __version__ = version("setup-ispc")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """setup-ispc command-line interface."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """
        Initialize CLI with argument parser.

        Args:
            environ: Environment used for step inputs and outputs
                (defaults to os.environ)
        """
        self.environ = environ
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="setup-ispc",
            description="Download ISPC and add it to the PATH of CI jobs",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "ispc_version",
            nargs="?",
            metavar="VERSION",
            help="ISPC version (e.g. 1.21.0) or 'latest' [default: latest]",
        )
        parser.add_argument(
            "--platform",
            metavar="PLATFORM",
            help="Release platform (linux|macOS|windows) [default: autodetect]",
        )
        parser.add_argument(
            "--architecture",
            metavar="ARCH",
            help="Release architecture (e.g. oneapi, aarch64, universal; "
            "'' for none) [default: autodetect]",
        )
        parser.add_argument(
            "--workspace",
            type=Path,
            metavar="DIR",
            help="Directory receiving the archive and extracted files "
            "(default: current directory)",
        )
        parser.add_argument(
            "--timeout",
            type=float,
            metavar="SECONDS",
            help="Timeout for each network request and the version check",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to YAML configuration file",
        )
        parser.add_argument(
            "--version", action="version", version=f"setup-ispc {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )

        return parser

    def parse_args(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)
        self._configure_logging(parsed_args)

        try:
            return self._install(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            actions.set_failed(str(e))
            return 1

    def _install(self, args: argparse.Namespace) -> int:
        config = build_config(
            cli_values={
                "version": args.ispc_version,
                "platform": args.platform,
                "architecture": args.architecture,
                "workspace": args.workspace,
                "timeout": args.timeout,
            },
            environ=self.environ,
            config_path=args.config,
        )

        installer = ToolchainInstaller(
            config.workspace,
            timeout=config.timeout,
            download_base_url=config.download_base_url,
        )
        result = installer.install(
            config.version, config.platform, config.architecture
        )

        actions.add_path(result.bin_dir, self.environ)
        actions.set_output("ispc-version", str(result.toolchain.version), self.environ)
        actions.set_output("ispc-bin-dir", str(result.bin_dir), self.environ)

        print(result.bin_dir)
        return 0

    def _configure_logging(self, args: argparse.Namespace):
        """Configure logging from --verbose/--quiet."""
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            stream=sys.stderr,
            force=True,
        )


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
