"""
Command-line entry point for generating move-prediction datasets from PGN.
"""

import argparse
import logging
import sys

from utils.config_loader import default_config, load_config, validate_config

from .game_record import PgnFormatError
from .move_replay import MoveReplayError
from .pipeline import generate_dataset

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert a PGN archive into per-piece move-prediction datasets."
    )
    parser.add_argument("pgn", help="Path to the PGN archive.")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a YAML configuration file (defaults apply when omitted).",
    )
    parser.add_argument("--output-dir", type=str, help="Directory for the CSV datasets.")
    parser.add_argument("--min-rating", type=int, help="Minimum rating of both players.")
    parser.add_argument("--max-games", type=int, help="Stop after this many qualifying games.")
    parser.add_argument(
        "--side",
        choices=["white", "black"],
        help="Side whose moves are encoded.",
    )
    parser.add_argument(
        "--on-error",
        choices=["skip", "abort"],
        help="Skip games with unplayable moves or abort the run.",
    )
    parser.add_argument("--log-level", type=str, help="Logging level, e.g. DEBUG or INFO.")
    parser.add_argument("--no-progress", action="store_true", help="Disable the progress bar.")
    return parser


def resolve_config(args: argparse.Namespace) -> dict:
    """Load the config file (if any) and apply command-line overrides."""
    config = load_config(args.config) if args.config else default_config()

    overrides = {
        ("output", "dir"): args.output_dir,
        ("dataset", "min_rating"): args.min_rating,
        ("dataset", "max_games"): args.max_games,
        ("dataset", "encoding_side"): args.side,
        ("dataset", "on_move_error"): args.on_error,
        ("logging", "level"): args.log_level,
    }
    for (section, key), value in overrides.items():
        if value is not None:
            config[section][key] = value
    if args.no_progress:
        config["logging"]["progress"] = False

    return validate_config(config)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = resolve_config(args)
    except (FileNotFoundError, ValueError) as e:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
        logger.error(f"Loading configuration failed: {e}")
        return 1

    logging.basicConfig(
        level=getattr(logging, config["logging"]["level"].upper(), logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s',
    )

    try:
        generate_dataset(args.pgn, config)
    except PgnFormatError as e:
        logger.error(f"Reading PGN archive failed: {e}")
        return 1
    except UnicodeDecodeError as e:
        logger.error(f"Reading PGN archive failed: not valid UTF-8 ({e})")
        return 1
    except MoveReplayError as e:
        logger.error(f"Replaying game failed: {e}")
        return 1
    except OSError as e:
        logger.error(f"File I/O failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
