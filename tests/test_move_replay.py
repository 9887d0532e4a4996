import io
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT / "src"))

import chess
import pytest

from datagen.game_record import GameRecord  # noqa: E402
from datagen.move_replay import MoveReplayDriver, MoveReplayError  # noqa: E402
from utils.plane_writer import STREAM_NAMES, PlaneWriter, parse_grid_line  # noqa: E402


def _writer():
    streams = {name: io.StringIO() for name in STREAM_NAMES}
    return PlaneWriter(streams), streams


def _lines(streams, name):
    return streams[name].getvalue().splitlines()


class CountingBoard(chess.Board):
    created = 0

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        CountingBoard.created += 1


def test_encodes_only_white_moves():
    writer, streams = _writer()
    driver = MoveReplayDriver(writer)
    record = GameRecord(2100, 2100, moves=["e4", "e5", "Nf3", "Nc6", "Bb5"])

    result = driver.process(record)

    assert result.ok
    assert result.moves_played == 5
    assert [pt for pt, _ in result.planes] == [chess.PAWN, chess.KNIGHT, chess.BISHOP]
    assert len(_lines(streams, "selector")) == 6
    assert len(_lines(streams, "pawn")) == 2
    assert len(_lines(streams, "knight")) == 2
    assert len(_lines(streams, "bishop")) == 2
    assert _lines(streams, "rook") == []
    assert driver.positions_written == 3


def test_planes_use_pre_move_position():
    writer, streams = _writer()
    MoveReplayDriver(writer).process(GameRecord(2100, 2100, moves=["e4", "e5", "Nf3"]))

    selector = _lines(streams, "selector")
    second_occupancy = parse_grid_line(selector[2])
    pawns = second_occupancy[:64]
    # After 1. e4 e5 the e4 and e5 pawns are on the board, the e2 pawn is gone.
    assert pawns[36] == 1
    assert pawns[28] == -1
    assert pawns[52] == 0
    assert parse_grid_line(selector[3]).index(1) == 62
    assert parse_grid_line(_lines(streams, "knight")[1]).index(1) == 45


def test_castling_is_a_king_move():
    writer, streams = _writer()
    moves = ["e4", "e5", "Nf3", "Nc6", "Bc4", "Bc5", "O-O"]
    MoveReplayDriver(writer).process(GameRecord(2100, 2100, moves=moves))

    king = _lines(streams, "king")
    assert len(king) == 2
    assert parse_grid_line(king[1]).index(1) == 62
    assert parse_grid_line(_lines(streams, "selector")[-1]).index(1) == 60


def test_black_encoding_side():
    writer, streams = _writer()
    driver = MoveReplayDriver(writer, own_color=chess.BLACK)
    driver.process(GameRecord(2100, 2100, moves=["e4", "e5", "Nf3", "Nc6"]))

    assert len(_lines(streams, "selector")) == 4
    first = parse_grid_line(_lines(streams, "selector")[0])
    assert first[8:16] == [1] * 8
    assert parse_grid_line(_lines(streams, "selector")[1]).index(1) == 12


def test_illegal_move_skips_whole_game(caplog):
    writer, streams = _writer()
    driver = MoveReplayDriver(writer)

    result = driver.process(GameRecord(2100, 2100, moves=["e4", "e5", "Qh8", "Nc6"]))

    assert not result.ok
    assert "ply 3" in result.skipped_reason
    assert result.planes == []
    assert all(_lines(streams, name) == [] for name in STREAM_NAMES)
    assert driver.games_skipped == 1
    assert "Skipping game 1" in caplog.text


def test_illegal_move_by_other_side_skips_game():
    writer, _ = _writer()
    result = MoveReplayDriver(writer).process(GameRecord(2100, 2100, moves=["e4", "Ke3"]))
    assert not result.ok
    assert "ply 2" in result.skipped_reason


def test_abort_policy_raises():
    writer, _ = _writer()
    driver = MoveReplayDriver(writer, on_error="abort")
    with pytest.raises(MoveReplayError) as excinfo:
        driver.process(GameRecord(2100, 2100, moves=["e4", "e5", "Zz9"]))
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_invalid_policy_rejected():
    writer, _ = _writer()
    with pytest.raises(ValueError):
        MoveReplayDriver(writer, on_error="retry")


def test_fresh_board_per_game():
    writer, _ = _writer()
    CountingBoard.created = 0
    driver = MoveReplayDriver(writer, board_factory=CountingBoard)
    driver.process(GameRecord(2100, 2100, moves=["e4"]))
    driver.process(GameRecord(2100, 2100, moves=["d4"]))
    assert CountingBoard.created == 2
    assert driver.games_replayed == 2


def test_null_move_skips_game():
    writer, streams = _writer()
    driver = MoveReplayDriver(writer)

    result = driver.process(GameRecord(2100, 2100, moves=["e4", "e5", "--", "Nc6"]))

    assert not result.ok
    assert "null move" in result.skipped_reason
    assert all(_lines(streams, name) == [] for name in STREAM_NAMES)


def test_null_move_by_other_side_skips_game():
    writer, streams = _writer()
    result = MoveReplayDriver(writer).process(GameRecord(2100, 2100, moves=["e4", "--", "d4"]))

    assert not result.ok
    assert "ply 2" in result.skipped_reason
    assert _lines(streams, "selector") == []


def test_debug_logging_renders_planes(caplog):
    writer, _ = _writer()
    with caplog.at_level(logging.DEBUG, logger="datagen.move_replay"):
        MoveReplayDriver(writer).process(GameRecord(2100, 2100, moves=["e4", "e5"]))

    assert "Ply 1 e4:" in caplog.text
    assert "Piece Selected" in caplog.text
