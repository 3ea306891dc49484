"""Arguments and setup shared by the render and animate subcommands"""

from __future__ import annotations
from argparse import ArgumentParser, Namespace
from pathlib import Path
import logging

from ..config import PlotConfig
from ..data import DEFAULT_POPULATION_CSV
from ..io import read_rows
from ..session import NotConfiguredError, Visualisation

logger = logging.getLogger(__name__)

PRESETS = {
    'default': PlotConfig,
    'mobile': PlotConfig.mobile,
    'presentation': PlotConfig.presentation,
    'debug': PlotConfig.debug,
}


def add_common_arguments(parser: ArgumentParser) -> None:
    """Input, year range, output and engine options"""
    # Sample identification
    parser.add_argument('--prefix', default='forcebubbles',
                        help='Prefix for output files (default: forcebubbles)')
    parser.add_argument('--output-dir', default='.',
                        help='Output directory (default: current directory)')

    # Input
    parser.add_argument('-i', '--input', nargs='?', const='default', default='default',
                        metavar='CSV_FILE',
                        help='Input CSV (World Bank layout). Uses the built-in sample if not specified')
    parser.add_argument('-s', '--start-year', type=int, required=True,
                        help='First year of the data (inclusive)')
    parser.add_argument('-e', '--end-year', type=int, required=True,
                        help='Last year of the data (inclusive)')

    # Engine
    parser.add_argument('--preset', choices=sorted(PRESETS), default='default',
                        help='Configuration preset (default: default)')
    parser.add_argument('--strength', type=float,
                        help='Centering force strength (default: 0.2)')
    parser.add_argument('--scale', type=float,
                        help='Radius scale k, radius = sqrt(value) * k (default: 0.005)')
    parser.add_argument('--constrained', action='store_true',
                        help='Drop entities below 500,000 in the first year (small devices)')
    parser.add_argument('--low-tag', default='less',
                        help="Legend text for small bubbles (default: 'less')")
    parser.add_argument('--high-tag', default='more',
                        help="Legend text for large bubbles (default: 'more')")
    parser.add_argument('--seed', type=int, default=0,
                        help='Seed for packing and collision jiggle (default: 0)')

    # Debug flag
    parser.add_argument('--debug', action='store_true', help='Enable debug logging for troubleshooting')


def configure_logging(args: Namespace) -> None:
    """Configure logging for a subcommand"""
    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "debug", False) else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        force=True
    )

    # Silence very noisy third-party loggers (matplotlib font discovery etc.)
    for noisy in ("matplotlib", "matplotlib.font_manager", "PIL", "PIL.Image", "fontTools"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def build_config(args: Namespace) -> PlotConfig:
    """Preset plus command-line overrides"""
    config = PRESETS[args.preset]()
    if args.strength is not None:
        config.forces.strength = args.strength
    if args.scale is not None:
        config.layout.radius_scale = args.scale
    return config


def start_session(args: Namespace) -> Visualisation:
    """
    Read the input and start a visualisation

    Args:
        args: Parsed command-line arguments

    Returns:
        Started Visualisation
    """
    if args.input == 'default':
        input_file = DEFAULT_POPULATION_CSV
        logger.info("Using built-in sample population data")
    else:
        input_file = args.input
        logger.info(f"Input: {input_file}")

    if not Path(input_file).exists():
        raise FileNotFoundError(f"Input file not found: {input_file}")
    if args.start_year > args.end_year:
        raise NotConfiguredError(f"Invalid year range {args.start_year}-{args.end_year}")

    vis = Visualisation(build_config(args), seed=args.seed)
    vis.set_year_range(args.start_year, args.end_year)
    vis.set_legend_tags(args.low_tag, args.high_tag)

    # Small screens always get the reduced entity set
    constrained = args.constrained or args.preset == 'mobile'

    rows = read_rows(input_file, (args.start_year, args.end_year))
    vis.start(rows, constrained=constrained)
    return vis


def output_path(args: Namespace, suffix: str) -> Path:
    """<output-dir>/<prefix>.<suffix>, creating the directory"""
    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir / f"{args.prefix}.{suffix}"
