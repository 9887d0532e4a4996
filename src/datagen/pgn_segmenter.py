"""
Line-oriented splitting of a PGN archive into game records.

The archive is expected to hold, per game, a block of ``[Tag "value"]`` header
lines followed by the complete movetext on a single line. A game ends on the
first body line after its header block: that line is added to the record, the
ratings are checked and a fresh record is started. Any further body lines
before the next header block are collected into that fresh record, so
archives with multi-line movetext are not supported.
"""

import logging
from typing import Iterable, Iterator, Optional

from .game_record import GameRecord, PgnFormatError, parse_tag

logger = logging.getLogger(__name__)

HEADER = "header"
BODY = "body"


class PgnSegmenter:
    """Stateful splitter that turns archive lines into qualifying :class:`GameRecord` objects."""

    def __init__(self, min_rating: int = 2000):
        self.min_rating = min_rating
        self.current = GameRecord()
        self.previous_kind = BODY

        self.lines_read = 0
        self.games_seen = 0
        self.games_rejected = 0

    def feed(self, line: str) -> Optional[GameRecord]:
        """Consume one archive line; return a finished record when it qualifies."""
        self.lines_read += 1
        line = line.rstrip("\r\n")
        if not line:
            return None

        if line[0] == "[":
            kind = HEADER
            try:
                name, value = parse_tag(line)
            except PgnFormatError as e:
                raise PgnFormatError(
                    f"header line has no tag separator: {line!r}", self.lines_read, line
                ) from e
            self.current.apply_tag(name, value)
        else:
            kind = BODY
            self.current.raw_movetext += line

        finished = None
        if kind == BODY and self.previous_kind == HEADER:
            finished = self._close_game()

        self.previous_kind = kind
        return finished

    def segment(self, lines: Iterable[str]) -> Iterator[GameRecord]:
        """Yield every qualifying game in *lines*, in archive order."""
        for line in lines:
            record = self.feed(line)
            if record is not None:
                yield record

    def _close_game(self) -> Optional[GameRecord]:
        record = self.current
        self.current = GameRecord()
        self.games_seen += 1

        if not record.is_qualifying(self.min_rating):
            self.games_rejected += 1
            logger.debug(
                f"Rejected game {self.games_seen}: ratings {record.white_rating}/{record.black_rating}"
            )
            return None

        return record.parse_moves()
