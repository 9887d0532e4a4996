"""Replays qualifying games and turns the designated side's moves into plane sets."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import chess

from utils.board_utils import PlaneSet, encode_position
from utils.chess_env import BoardFactory, starting_board
from utils.plane_writer import PlaneWriter

from .game_record import GameRecord

logger = logging.getLogger(__name__)


class MoveReplayError(RuntimeError):
    """A move token could not be resolved or played on the board."""


@dataclass
class ReplayResult:
    """Outcome of replaying one game."""

    moves_played: int = 0
    planes: List[Tuple[chess.PieceType, PlaneSet]] = field(default_factory=list)
    skipped_reason: Optional[str] = None
    error: Optional[Exception] = field(default=None, repr=False)

    @property
    def ok(self) -> bool:
        return self.skipped_reason is None


class MoveReplayDriver:
    """Drives a rules engine through each game and writes encoded positions.

    Planes of a game are only written once the whole game replayed, so a game
    skipped halfway contributes nothing to the output streams.
    """

    def __init__(
        self,
        writer: PlaneWriter,
        own_color: chess.Color = chess.WHITE,
        board_factory: BoardFactory = starting_board,
        on_error: str = "skip",
    ):
        if on_error not in ("skip", "abort"):
            raise ValueError(f"on_error must be 'skip' or 'abort', got {on_error!r}")
        self.writer = writer
        self.own_color = own_color
        self.board_factory = board_factory
        self.on_error = on_error

        self.games_replayed = 0
        self.games_skipped = 0
        self.positions_written = 0

    def replay(self, record: GameRecord) -> ReplayResult:
        """Encode every move of the designated side without writing anything."""
        board = self.board_factory()
        result = ReplayResult()

        for ply, san in enumerate(record.moves, start=1):
            try:
                side_to_move = board.turn
                move = board.parse_san(san)
                if not move:
                    raise ValueError("null move")
                if side_to_move == self.own_color:
                    piece = board.piece_at(move.from_square)
                    if piece is None:
                        raise ValueError(f"no piece on {chess.square_name(move.from_square)}")
                    plane_set = encode_position(board, move.from_square, move.to_square, self.own_color)
                    result.planes.append((piece.piece_type, plane_set))
                    if logger.isEnabledFor(logging.DEBUG):
                        logger.debug(f"Ply {ply} {san}:\n{plane_set.render()}")
                board.push_san(san)
            except ValueError as e:
                result.skipped_reason = f"ply {ply} ({san!r}): {e}"
                result.error = e
                result.planes = []
                return result
            result.moves_played += 1

        return result

    def process(self, record: GameRecord) -> ReplayResult:
        """Replay *record* and append its planes to the writer."""
        index = self.games_replayed + self.games_skipped + 1
        result = self.replay(record)

        if not result.ok:
            if self.on_error == "abort":
                raise MoveReplayError(f"Game {index}: cannot replay {result.skipped_reason}") from result.error
            self.games_skipped += 1
            logger.warning(f"Skipping game {index}: cannot replay {result.skipped_reason}")
            return result

        self.positions_written += self.writer.write_all(result.planes)
        self.games_replayed += 1
        return result
