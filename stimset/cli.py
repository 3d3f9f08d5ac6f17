"""
Command-line interface for the stimulus selection project.

Provides commands for:
- Running the selection pipeline and exporting the stimulus set
- Generating report figures
- Generating synthetic input data for dry runs
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from config.settings import get_config

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Semantic/episodic cue stimulus selection CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Select command
    select_parser = subparsers.add_parser("select", help="Run the selection pipeline")
    _add_input_arguments(select_parser)
    select_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output directory for exported tables"
    )
    select_parser.add_argument(
        "--format",
        choices=["csv", "json", "parquet", "excel"],
        default="csv",
        help="Export format"
    )

    # Figures command
    figures_parser = subparsers.add_parser("figures", help="Generate report figures")
    _add_input_arguments(figures_parser)
    figures_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output directory for figures"
    )
    figures_parser.add_argument(
        "--format",
        choices=["pdf", "png", "svg", "all"],
        default="all",
        help="Output format"
    )

    # Generate command
    generate_parser = subparsers.add_parser("generate", help="Generate synthetic input data")
    generate_parser.add_argument(
        "--n-targets",
        type=int,
        default=60,
        help="Number of base target words"
    )
    generate_parser.add_argument(
        "--seed",
        type=int,
        default=12345,
        help="Random seed for reproducibility"
    )
    generate_parser.add_argument(
        "--output",
        type=Path,
        default=Path("data/demo"),
        help="Output directory"
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    # Route to appropriate handler
    if args.command == "select":
        run_select(args)
    elif args.command == "figures":
        run_figures(args)
    elif args.command == "generate":
        run_generate(args)


def _add_input_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--norms",
        type=Path,
        default=None,
        help="Raw association norms csv (defaults to NORMS_PATH)"
    )
    subparser.add_argument(
        "--frequency",
        type=Path,
        default=None,
        help="Word frequency csv (defaults to FREQUENCY_PATH)"
    )
    subparser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for episodic pairing (defaults to STIMSET_SEED)"
    )
    subparser.add_argument(
        "--exclude-responses",
        type=Path,
        default=None,
        help="File with one manually excluded target per line"
    )


def _run_pipeline(args):
    from stimset.selection.pipeline import StimulusSelector

    app_config = get_config()
    if args.exclude_responses is not None:
        words = args.exclude_responses.read_text().split()
        app_config = replace(
            app_config,
            selection=replace(
                app_config.selection,
                excluded_responses=[w.strip().lower() for w in words],
            ),
        )
        logger.info(f"Loaded {len(words)} manually excluded targets from {args.exclude_responses}")

    selector = StimulusSelector(app_config)
    selector.load_data(args.norms, args.frequency)
    selector.run_full_pipeline(seed=args.seed)
    return selector


def run_select(args):
    """Run the selection pipeline and export the results."""
    logger.info("Running stimulus selection...")

    selector = _run_pipeline(args)
    output = args.output or get_config().paths.exports_dir
    selector.export_results(output, format=args.format)

    logger.info(f"Selection complete. Results saved to {output}")


def run_figures(args):
    """Generate report figures."""
    logger.info("Generating figures...")

    from stimset.visualization.figures import FigureGenerator

    selector = _run_pipeline(args)
    results = selector.results

    generator = FigureGenerator(output_dir=args.output)
    if args.format != "all":
        generator.config.formats = [args.format]
    else:
        generator.config.formats = ["pdf", "png", "svg"]

    figures = generator.generate_all_figures(
        results.semantic_set, results.stimulus_table, results.episodic_cues
    )

    logger.info(f"Generated {len(figures)} figures in {generator.output_dir}")


def run_generate(args):
    """Generate synthetic input data."""
    logger.info(f"Generating synthetic norms for {args.n_targets} targets...")

    from stimset.data.synthetic import write_synthetic_norms

    norms_path, frequency_path = write_synthetic_norms(args.output, args.n_targets, args.seed)

    logger.info(f"Synthetic inputs saved to {norms_path} and {frequency_path}")


if __name__ == "__main__":
    main()
