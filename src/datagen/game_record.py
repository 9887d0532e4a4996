"""Per-game metadata and move list assembled from a PGN archive."""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

MAX_RATING = 65535
_ANNOTATIONS = re.compile(r"[?!]")


class PgnFormatError(ValueError):
    """Archive line that breaks the expected header/movetext layout."""

    def __init__(self, message: str, line_number: Optional[int] = None, line: Optional[str] = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number
        self.line = line


def parse_tag(line: str) -> Tuple[str, str]:
    """Split a header line such as ``[WhiteElo "2100"]`` into ``("WhiteElo", "2100")``."""
    stripped = line.replace("]", "").replace("[", "").replace('"', "")
    name, sep, value = stripped.partition(" ")
    if not sep:
        raise PgnFormatError(f"header line has no tag separator: {line!r}", line=line)
    return name, value


def parse_rating(text: str) -> Optional[int]:
    """Parse an unsigned 16-bit rating, returning ``None`` for anything else (``"?"``, ``"-"``)."""
    if not text or not text.isascii() or not text.isdigit():
        return None
    value = int(text)
    return value if value <= MAX_RATING else None


def strip_comments(text: str) -> str:
    """Drop everything inside (possibly nested) ``{...}`` comments."""
    depth = 0
    kept = []
    for char in text:
        if char == "{":
            depth += 1
        if depth == 0:
            kept.append(char)
        if char == "}":
            depth -= 1
    return "".join(kept)


def parse_movetext(text: str) -> List[str]:
    """Extract SAN move tokens from *text*, dropping move numbers and the result marker."""
    cleaned = _ANNOTATIONS.sub("", strip_comments(text))
    tokens = [tok for tok in cleaned.split() if "." not in tok]
    return tokens[:-1]


@dataclass
class GameRecord:
    """A single game read from the archive.

    ``raw_movetext`` accumulates every body line attributed to this record;
    ``moves`` stays empty until :meth:`parse_moves` finalizes it.
    """

    white_rating: Optional[int] = None
    black_rating: Optional[int] = None
    raw_movetext: str = ""
    moves: List[str] = field(default_factory=list)

    def is_qualifying(self, min_rating: int) -> bool:
        """Both ratings known and at least *min_rating*."""
        if self.white_rating is None or self.black_rating is None:
            return False
        return self.white_rating >= min_rating and self.black_rating >= min_rating

    def apply_tag(self, name: str, value: str) -> None:
        if name == "WhiteElo":
            self.white_rating = parse_rating(value)
        elif name == "BlackElo":
            self.black_rating = parse_rating(value)

    def parse_moves(self) -> "GameRecord":
        self.moves = parse_movetext(self.raw_movetext)
        return self
