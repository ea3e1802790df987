#!/usr/bin/env python3
"""
km-tools - Main CLI Interface

Tools for working with k-mer abundance matrices (k-mers as rows, samples as columns).

Available Commands:
  filter      - Keep k-mers that are absent from some samples and present in others

Example Usage:
  km-tools filter -a 5 -f 0.5 -F 0.1 -o filtered.mat counts.mat
  zcat counts.mat.gz | km-tools filter -n 20 -N 20 - > filtered.mat

For more information on any command, use:
  km-tools [command] --help
"""

import sys
import argparse
import logging

from km_tools import __version__
from km_tools.cli import filter_cli

logger = logging.getLogger('km_tools')

COMMANDS = {
    'filter': (filter_cli.main, "Filter a k-mer matrix by presence/absence across samples"),
}


def print_main_help():
    parser = argparse.ArgumentParser(
        prog="km-tools",
        description="km-tools - Filtering of k-mer abundance matrices",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.print_help()


def main(argv=None):
    """
    Main entry point for km-tools CLI.

    Dispatches to the command module named by the first argument, passing it
    the remaining arguments.
    """
    if argv is None:
        argv = sys.argv[1:]

    if not argv or argv[0] in ('-h', '--help'):
        print_main_help()
        return 0

    if argv[0] == '--version':
        print(f"km-tools {__version__}")
        return 0

    command, command_args = argv[0], argv[1:]
    if command not in COMMANDS:
        logger.error(f"Unknown command: {command}")
        print("\nAvailable commands:", file=sys.stderr)
        for name, (_, description) in COMMANDS.items():
            print(f"  {name:<11} - {description}", file=sys.stderr)
        print("\nFor more information on any command, use:", file=sys.stderr)
        print("  km-tools [command] --help", file=sys.stderr)
        return 1

    command_main, _ = COMMANDS[command]
    return command_main(command_args)


if __name__ == "__main__":
    sys.exit(main())
