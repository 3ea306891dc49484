"""Animate subcommand - GIF of the entrance and every year change"""

from __future__ import annotations
from argparse import ArgumentParser, Namespace, _SubParsersAction
import logging

from .common import add_common_arguments, configure_logging, start_session, output_path
from ..visualizer import BubblePlotter

logger = logging.getLogger(__name__)


def add_parser(subparsers: _SubParsersAction) -> ArgumentParser:
    """
    Add animate subcommand parser

    Args:
        subparsers: Subparser action from main argument parser

    Returns:
        Configured ArgumentParser for animate subcommand
    """
    parser = subparsers.add_parser(
        'animate',
        help='Record the year-by-year animation as a GIF'
    )
    add_common_arguments(parser)

    parser.add_argument('--fps', type=int,
                        help='Frames per second (default: from preset)')
    parser.add_argument('--frames-per-year', type=int,
                        help='Frames between year changes (default: one full transition)')
    parser.add_argument('--years', type=int, nargs='+', metavar='YEAR',
                        help='Years to visit in order (default: every year after the start year)')

    return parser  # type: ignore[no-any-return]


def run(args: Namespace) -> None:
    """
    Execute animate subcommand

    Args:
        args: Parsed command-line arguments from argparse
    """
    configure_logging(args)
    logger.info("=== ForceBubbles: Animate ===")

    gif_file = output_path(args, 'forcebubbles.gif')
    logger.info(f"Output: {gif_file}")

    vis = start_session(args)
    if args.fps is not None:
        vis.config.fps = args.fps

    plotter = BubblePlotter(vis.config)
    n_frames = plotter.animate(
        vis,
        str(gif_file),
        years=args.years,
        frames_per_year=args.frames_per_year
    )

    logger.info(f"✓ Animation saved: {gif_file} ({n_frames} frames)")
