"""
Rules-engine contract used while replaying games.

The dataset generator never implements chess rules itself. Anything that
behaves like :class:`chess.Board` for the handful of calls below can drive the
replay, which keeps tests free to substitute scripted boards.
"""

from typing import Callable, Optional, Protocol

import chess


class RulesEngine(Protocol):
    """Minimal interface the move-replay driver needs from a board."""

    turn: chess.Color

    def parse_san(self, san: str) -> chess.Move:  # noqa: D401
        """Resolve *san* against the current position.

        Raises a :class:`ValueError` subclass for malformed, ambiguous or
        illegal notation.
        """
        ...

    def push_san(self, san: str) -> chess.Move:
        ...

    def piece_at(self, square: chess.Square) -> Optional[chess.Piece]:
        ...


BoardFactory = Callable[[], RulesEngine]


def starting_board() -> RulesEngine:
    """Return a fresh board in the standard starting position."""
    return chess.Board()


def color_from_name(name: str) -> chess.Color:
    """Map ``"white"``/``"black"`` to the python-chess colour constant."""
    try:
        return {"white": chess.WHITE, "black": chess.BLACK}[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown side: {name!r}") from None
