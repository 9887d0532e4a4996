"""Delimited-text writer for encoded plane sets.

Every encoded move produces two records, each spanning two lines:

* in the ``selector`` stream: the six occupancy grids on one line, then the
  selected-square grid on the next;
* in the stream of the piece type that moved: the same occupancy line, then
  the destination-square grid.

A grid is 64 comma-separated integers padded to width 2, in row-major order
(a8 first, h1 last). The occupancy line is the pawn, bishop, knight, rook,
queen and king grids joined with the same separator.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, Mapping, TextIO

import chess
import numpy as np

from .board_utils import PlaneSet

logger = logging.getLogger(__name__)

SELECTOR_STREAM = "selector"
PIECE_STREAMS: Dict[chess.PieceType, str] = {
    chess.PAWN: "pawn",
    chess.KNIGHT: "knight",
    chess.BISHOP: "bishop",
    chess.ROOK: "rook",
    chess.QUEEN: "queen",
    chess.KING: "king",
}
STREAM_NAMES = (SELECTOR_STREAM, *PIECE_STREAMS.values())

# Serialization order of the occupancy grids (differs from plane order).
OCCUPANCY_ORDER = (chess.PAWN, chess.BISHOP, chess.KNIGHT, chess.ROOK, chess.QUEEN, chess.KING)


def format_grid(grid: np.ndarray) -> str:
    """Render an 8x8 grid as 64 width-2 integers separated by commas."""
    return ",".join(f"{int(v):2d}" for v in np.asarray(grid).reshape(64))


def format_occupancy(plane_set: PlaneSet) -> str:
    return ",".join(format_grid(plane_set.occupancy(pt)) for pt in OCCUPANCY_ORDER)


def parse_grid_line(line: str) -> list[int]:
    """Inverse of the line format: split on commas and strip the padding."""
    return [int(field.strip()) for field in line.rstrip("\r\n").split(",")]


class PlaneWriter:
    """Append-only writer over the selector and per-piece streams.

    Parameters
    ----------
    streams: Mapping[str, TextIO]
        One writable text stream per name in :data:`STREAM_NAMES`.
    """

    def __init__(self, streams: Mapping[str, TextIO], *, owns_streams: bool = False) -> None:
        missing = [name for name in STREAM_NAMES if name not in streams]
        if missing:
            raise ValueError(f"Missing output streams: {', '.join(missing)}")
        self._streams = dict(streams)
        self._owns_streams = owns_streams
        self.counts: Dict[str, int] = {name: 0 for name in STREAM_NAMES}

    @classmethod
    def open(cls, output_dir: str | Path) -> "PlaneWriter":
        """Create *output_dir* and create/truncate one ``<name>.csv`` per stream."""
        root = Path(output_dir)
        root.mkdir(parents=True, exist_ok=True)

        streams: Dict[str, TextIO] = {}
        try:
            for name in STREAM_NAMES:
                streams[name] = open(root / f"{name}.csv", "w", encoding="utf-8")
        except OSError:
            for stream in streams.values():
                stream.close()
            raise

        logger.info(f"Writing plane datasets to {root}")
        return cls(streams, owns_streams=True)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def write(self, plane_set: PlaneSet, piece_type: chess.PieceType) -> None:
        """Append the selector record and the record for *piece_type*."""
        occupancy = format_occupancy(plane_set)
        piece_stream = PIECE_STREAMS[piece_type]

        self._write_record(SELECTOR_STREAM, occupancy, format_grid(plane_set.selected))
        self._write_record(piece_stream, occupancy, format_grid(plane_set.destination))

    def write_all(self, encoded: Iterable[tuple[chess.PieceType, PlaneSet]]) -> int:
        written = 0
        for piece_type, plane_set in encoded:
            self.write(plane_set, piece_type)
            written += 1
        return written

    def close(self) -> None:
        """Flush every stream and close the ones this writer opened."""
        for stream in self._streams.values():
            if self._owns_streams:
                stream.close()
            else:
                stream.flush()

    def _write_record(self, name: str, first: str, second: str) -> None:
        stream = self._streams[name]
        stream.write(first)
        stream.write("\n")
        stream.write(second)
        stream.write("\n")
        self.counts[name] += 1

    # ------------------------------------------------------------------
    # Context manager protocol
    # ------------------------------------------------------------------

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

