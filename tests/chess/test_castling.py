"""Unit tests for /src/chess/castling.py"""

import pytest

from src.chess.castling import (
    CASTLING_RULES,
    CastlingDirection,
    CastlingRights,
    castling_direction_for_king_move,
    squares_between_on_row,
)
from src.chess.square import Position
from src.core.shared_types import Color


def squares(*names: str) -> list[Position]:
    return [Position.from_algebraic(name) for name in names]


@pytest.mark.parametrize(
    "castle_fen",
    ["KQkq", "KQ", "kq", "Kq", "Qk", "K", "q", "-"],
)
def test_castling_rights_fen_roundtrip(castle_fen: str) -> None:
    assert CastlingRights.from_fen(castle_fen).to_fen() == castle_fen


def test_no_rights_left() -> None:
    assert CastlingRights.none().to_fen() == "-"
    assert not CastlingRights.none().has_any(Color.WHITE)


def test_revoke_creates_new_rights() -> None:
    """Rights only ever get turned off, and never on the original object"""
    rights = CastlingRights()
    revoked = rights.revoke(CastlingDirection.WHITE_KING_SIDE)

    assert revoked.to_fen() == "Qkq"
    assert rights.to_fen() == "KQkq"
    # revoking again changes nothing
    assert revoked.revoke(CastlingDirection.WHITE_KING_SIDE) == revoked


def test_revoke_all_of_one_color() -> None:
    rights = CastlingRights().revoke_all(Color.BLACK)
    assert rights.to_fen() == "KQ"
    assert rights.has_any(Color.WHITE)
    assert not rights.has_any(Color.BLACK)


@pytest.mark.parametrize(
    "direction, color",
    [
        (CastlingDirection.WHITE_KING_SIDE, Color.WHITE),
        (CastlingDirection.WHITE_QUEEN_SIDE, Color.WHITE),
        (CastlingDirection.BLACK_KING_SIDE, Color.BLACK),
        (CastlingDirection.BLACK_QUEEN_SIDE, Color.BLACK),
    ],
)
def test_direction_color(direction: CastlingDirection, color: Color) -> None:
    assert direction.color == color


def test_squares_between() -> None:
    assert squares_between_on_row(*squares("e1", "h1")) == squares("f1", "g1")
    assert squares_between_on_row(*squares("e8", "a8")) == squares("d8", "c8", "b8")
    assert squares_between_on_row(*squares("e1", "f1")) == []


def test_squares_between_needs_same_rank() -> None:
    with pytest.raises(ValueError):
        squares_between_on_row(*squares("e1", "e8"))


def test_queen_side_paths() -> None:
    """The b-file square has to be empty, but it may be attacked: the king never crosses it"""
    rule = CASTLING_RULES[CastlingDirection.WHITE_QUEEN_SIDE]
    assert rule.path == squares("d1", "c1", "b1")
    assert rule.king_path == squares("d1", "c1")


def test_king_side_paths() -> None:
    rule = CASTLING_RULES[CastlingDirection.BLACK_KING_SIDE]
    assert rule.path == squares("f8", "g8")
    assert rule.king_path == squares("f8", "g8")


@pytest.mark.parametrize(
    "king_from, king_to, expected",
    [
        ("e1", "g1", CastlingDirection.WHITE_KING_SIDE),
        ("e1", "c1", CastlingDirection.WHITE_QUEEN_SIDE),
        ("e8", "g8", CastlingDirection.BLACK_KING_SIDE),
        ("e8", "c8", CastlingDirection.BLACK_QUEEN_SIDE),
        ("e1", "f1", None),
        ("d1", "b1", None),
    ],
)
def test_direction_for_king_move(king_from: str, king_to: str, expected) -> None:
    assert castling_direction_for_king_move(*squares(king_from, king_to)) == expected
