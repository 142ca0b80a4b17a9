"""Unit tests for /src/chess/square.py"""

from string import ascii_lowercase

import pytest

from src.chess.square import (
    BOARD_DIMENSIONS,
    Position,
    all_positions,
    position_to_square,
    square_to_position,
)
from src.core.exceptions import InvalidNotationError

ALL_SQUARES = [f"{file}{rank}" for file in ascii_lowercase[:8] for rank in range(1, 9)]


@pytest.mark.parametrize(
    "notation, row, col",
    [
        ("a8", 0, 0),
        ("h8", 0, 7),
        ("a1", 7, 0),
        ("h1", 7, 7),
        ("e4", 4, 4),
        ("e2", 6, 4),
        ("d5", 3, 3),
    ],
)
def test_creating_from_algebraic(notation: str, row: int, col: int) -> None:
    """Rank 8 is the top row (row 0), the a-file is the first column"""
    position = square_to_position(notation)
    assert position == Position(row, col)


@pytest.mark.parametrize("notation", ALL_SQUARES)
def test_notation_roundtrip(notation: str) -> None:
    """Converting to a position and back should give the same square, for every square on the board"""
    assert position_to_square(square_to_position(notation)) == notation


def test_every_position_has_a_unique_square() -> None:
    """...and the other way around: the 64 positions map onto 64 different squares"""
    squares = [position_to_square(position) for position in all_positions()]
    assert len(set(squares)) == 64
    assert all(square_to_position(square) == position for square, position in zip(squares, all_positions()))


@pytest.mark.parametrize("notation", ["", "e", "e44", "i1", "a0", "a9", "E4", "4e", "--", "e 4"])
def test_malformed_notation_raises(notation: str) -> None:
    """Never silently default to some square"""
    with pytest.raises(InvalidNotationError):
        square_to_position(notation)


def test_off_board_position_has_no_notation() -> None:
    with pytest.raises(InvalidNotationError):
        position_to_square(Position(8, 0))


def test_square_within_bounds() -> None:
    """happy case: positions within the dimensions of the board"""
    for row in range(BOARD_DIMENSIONS[1]):
        for col in range(BOARD_DIMENSIONS[0]):
            assert Position(row, col).is_within_bounds()


def test_square_out_of_bounds() -> None:
    assert not Position(BOARD_DIMENSIONS[1], 0).is_within_bounds()
    assert not Position(0, BOARD_DIMENSIONS[0]).is_within_bounds()
    assert not Position(-1, -1).is_within_bounds()


def test_offset() -> None:
    """One step up the board (towards rank 8) is a lower row number"""
    e4 = square_to_position("e4")
    assert e4.offset(-1, 0) == square_to_position("e5")
    assert e4.offset(1, 1) == square_to_position("f3")
