#!/usr/bin/env python3
"""
Sigflow - filter pipeline and spectral analysis for tabular time-series recordings

This module serves as the entry point for the package when run as:
    python -m Sigflow

It parses command line arguments, configures logging and runs the command.
"""

import sys
import logging

from Sigflow.shared.logging_config import setup_logging


def main(argv=None):
    """Main entry point for the application."""
    from Sigflow.application.cli import build_parser, run_cli

    args = build_parser().parse_args(argv)

    if args.version:
        from Sigflow import __version__
        print(f"Sigflow version {__version__}")
        return 0

    setup_logging(dev_mode=args.dev, log_dir=args.log_dir)
    logger = logging.getLogger('Sigflow.main')
    logger.info("Starting Sigflow...")
    logger.debug(f"Command line arguments: {args}")

    try:
        return run_cli(args)
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
