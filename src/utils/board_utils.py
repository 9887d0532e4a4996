"""
Plane encoding of a position plus the move about to be played.

A :class:`PlaneSet` stacks eight 8x8 ``int8`` grids:

* planes 0-5: pawn, knight, bishop, rook, queen and king occupancy, with
  ``+1`` for a piece of the encoding side, ``-1`` for an opposing piece and
  ``0`` for an empty square;
* plane 6: one-hot grid of the square the moving piece is selected from;
* plane 7: one-hot grid of the square it moves to.

Grid cells follow the printed board: row 0 is rank 8, row 7 is rank 1 and
columns run from the a-file to the h-file. Flattening a grid row-major
therefore walks a8, b8, ..., h8, a7, ..., h1.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

import chess
import numpy as np

PIECE_TYPES = (chess.PAWN, chess.KNIGHT, chess.BISHOP, chess.ROOK, chess.QUEEN, chess.KING)
PIECE_TO_PLANE: Dict[chess.PieceType, int] = {pt: i for i, pt in enumerate(PIECE_TYPES)}
SELECTED_PLANE = 6
DESTINATION_PLANE = 7
NUM_PLANES = 8

PLANE_LABELS = {
    chess.PAWN: "Pawns",
    chess.KNIGHT: "Knights",
    chess.BISHOP: "Bishops",
    chess.ROOK: "Rooks",
    chess.QUEEN: "Queens",
    chess.KING: "Kings",
}


def square_to_cell(square: chess.Square) -> Tuple[int, int]:
    """Return the ``(row, col)`` grid cell of *square* (a8 -> (0, 0), h1 -> (7, 7))."""
    return 7 - chess.square_rank(square), chess.square_file(square)


def square_to_index(square: chess.Square) -> int:
    """Row-major position of *square* inside a flattened grid."""
    row, col = square_to_cell(square)
    return row * 8 + col


@dataclass(frozen=True)
class PlaneSet:
    """Encoded position for a single move."""

    planes: np.ndarray

    def occupancy(self, piece_type: chess.PieceType) -> np.ndarray:
        return self.planes[PIECE_TO_PLANE[piece_type]]

    @property
    def selected(self) -> np.ndarray:
        return self.planes[SELECTED_PLANE]

    @property
    def destination(self) -> np.ndarray:
        return self.planes[DESTINATION_PLANE]

    def render(self) -> str:
        """Human-readable dump of every plane, used for debug logging."""
        sections = [(PLANE_LABELS[pt], self.occupancy(pt)) for pt in
                    (chess.PAWN, chess.BISHOP, chess.KNIGHT, chess.ROOK, chess.KING, chess.QUEEN)]
        sections.append(("Piece Selected", self.selected))
        sections.append(("Destination", self.destination))

        lines = []
        for label, grid in sections:
            lines.append(label)
            for row in grid:
                lines.append(" ".join(f"{int(v):2d}" for v in row))
        return "\n".join(lines) + "\n"


def encode_position(
    board,
    from_square: chess.Square,
    to_square: chess.Square,
    own_color: chess.Color = chess.WHITE,
) -> PlaneSet:
    """
    Encode *board* and the move ``from_square -> to_square`` as a :class:`PlaneSet`.

    The board is only queried through ``piece_at`` and is never modified.

    Args:
        board: Position before the move (anything with ``piece_at``).
        from_square: Origin square of the move.
        to_square: Destination square of the move.
        own_color: Side counted as ``+1`` in the occupancy planes.

    Returns:
        PlaneSet: ``int8`` planes of shape ``(8, 8, 8)``.
    """
    planes = np.zeros((NUM_PLANES, 8, 8), dtype=np.int8)

    # Walk rank 8 down to rank 1, a-file to h-file.
    for row in range(8):
        for col in range(8):
            piece = board.piece_at(chess.square(col, 7 - row))
            if piece is None:
                continue
            planes[PIECE_TO_PLANE[piece.piece_type], row, col] = 1 if piece.color == own_color else -1

    row, col = square_to_cell(from_square)
    planes[SELECTED_PLANE, row, col] = 1
    row, col = square_to_cell(to_square)
    planes[DESTINATION_PLANE, row, col] = 1

    return PlaneSet(planes)
