"""
ForceBubbles CLI

Command-line interface with subcommands for rendering and animation.
"""

import argparse
import sys
from .cli import render, animate
from .session import NotConfiguredError


def main():
    parser = argparse.ArgumentParser(
        prog='forcebubbles',
        description='ForceBubbles: Animated force-directed bubble charts of per-entity time series'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Add subcommand parsers
    render.add_parser(subparsers)
    animate.add_parser(subparsers)

    # Parse arguments
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Execute the appropriate subcommand
    try:
        if args.command == 'render':
            render.run(args)
        elif args.command == 'animate':
            animate.run(args)
    except NotConfiguredError as e:
        parser.exit(2, f"forcebubbles: error: {e}\n")


if __name__ == "__main__":
    main()
