"""Render subcommand - settled snapshot of one year"""

from __future__ import annotations
from argparse import ArgumentParser, Namespace, _SubParsersAction
import logging

from .common import add_common_arguments, configure_logging, start_session, output_path
from ..io import write_layout
from ..visualizer import BubblePlotter

logger = logging.getLogger(__name__)


def add_parser(subparsers: _SubParsersAction) -> ArgumentParser:
    """
    Add render subcommand parser

    Args:
        subparsers: Subparser action from main argument parser

    Returns:
        Configured ArgumentParser for render subcommand
    """
    parser = subparsers.add_parser(
        'render',
        help='Render a settled layout for one year (PNG + layout TSV)'
    )
    add_common_arguments(parser)

    parser.add_argument('-y', '--year', type=int,
                        help='Year to render (default: start year)')
    parser.add_argument('--max-frames', type=int, default=5000,
                        help='Frame limit while waiting for the layout to settle (default: 5000)')

    return parser  # type: ignore[no-any-return]


def run(args: Namespace) -> None:
    """
    Execute render subcommand

    Args:
        args: Parsed command-line arguments from argparse
    """
    configure_logging(args)
    logger.info("=== ForceBubbles: Render ===")

    plot_file = output_path(args, 'forcebubbles.png')
    layout_file = output_path(args, 'forcebubbles_layout.tsv')
    logger.info(f"Output: {plot_file}, {layout_file}")

    vis = start_session(args)
    frames = vis.settle(max_frames=args.max_frames)
    logger.info(f"Entrance settled after {frames} frames")

    if args.year is not None and args.year != vis.selected_year:
        if not vis.select_year(args.year):
            logger.warning(f"Year {args.year} is outside {args.start_year}-{args.end_year}; "
                           f"rendering {vis.selected_year}")
        else:
            frames = vis.settle(max_frames=args.max_frames)
            logger.info(f"Year {args.year} settled after {frames} frames")

    plotter = BubblePlotter(vis.config)
    plotter.plot(vis.state, str(plot_file), legend_tags=vis.legend_tags)
    write_layout(vis.state, str(layout_file))

    logger.info(f"✓ Plot saved: {plot_file}")
