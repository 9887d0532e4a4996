"""End-to-end run: archive lines -> qualifying games -> plane datasets."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from tqdm import tqdm

from utils.chess_env import color_from_name
from utils.config_loader import default_config
from utils.plane_writer import PlaneWriter

from .move_replay import MoveReplayDriver
from .pgn_segmenter import PgnSegmenter

logger = logging.getLogger(__name__)


@dataclass
class PipelineStats:
    """Counters reported at the end of a run."""

    lines_read: int = 0
    games_seen: int = 0
    games_rejected: int = 0
    games_processed: int = 0
    games_skipped: int = 0
    positions_written: int = 0
    cap_reached: bool = False


def run_pipeline(lines: Iterable[str], writer: PlaneWriter, config: Optional[dict] = None) -> PipelineStats:
    """Segment *lines*, replay each qualifying game and write its planes.

    Stops early, without error, once ``dataset.max_games`` qualifying games
    have been handed to the replay driver (skipped games included).
    """
    dataset_cfg = (config or default_config())["dataset"]

    segmenter = PgnSegmenter(min_rating=dataset_cfg["min_rating"])
    driver = MoveReplayDriver(
        writer,
        own_color=color_from_name(dataset_cfg["encoding_side"]),
        on_error=dataset_cfg["on_move_error"],
    )
    stats = PipelineStats()

    for record in segmenter.segment(lines):
        driver.process(record)
        stats.games_processed += 1
        if stats.games_processed >= dataset_cfg["max_games"]:
            stats.cap_reached = True
            logger.info(f"Reached the cap of {dataset_cfg['max_games']} games")
            break

    stats.lines_read = segmenter.lines_read
    stats.games_seen = segmenter.games_seen
    stats.games_rejected = segmenter.games_rejected
    stats.games_skipped = driver.games_skipped
    stats.positions_written = driver.positions_written
    return stats


def generate_dataset(pgn_path: str, config: Optional[dict] = None) -> PipelineStats:
    """Read the archive at *pgn_path* and write the datasets under ``output.dir``."""
    config = config or default_config()
    pgn_path = Path(pgn_path)
    if not pgn_path.exists():
        raise FileNotFoundError(f"PGN archive not found at: {pgn_path}")

    with PlaneWriter.open(config["output"]["dir"]) as writer, \
            open(pgn_path, "r", encoding="utf-8-sig") as pgn_file:
        lines = tqdm(pgn_file, desc="Reading PGN", unit=" lines",
                     disable=not config["logging"]["progress"])
        stats = run_pipeline(lines, writer, config)

    logger.info(
        f"Processed {stats.games_processed} of {stats.games_seen} games "
        f"({stats.games_rejected} below rating, {stats.games_skipped} skipped), "
        f"wrote {stats.positions_written} positions"
    )
    return stats
