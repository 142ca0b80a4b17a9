"""
A position on the board, and the conversion to/from algebraic notation ('e4').

(placed in its own module as multiple other modules need to import it)

Board indexing follows the layout of the rendered board:
* row 0 is the 8th rank (black's back rank), row 7 is the 1st rank (white's back rank)
* col 0 is the a-file, col 7 is the h-file
"""

from __future__ import annotations

from dataclasses import dataclass

from src.core.exceptions import InvalidNotationError

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)

FILES = "abcdefgh"
RANKS = "12345678"


@dataclass(frozen=True)
class Position:
    row: int
    col: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Position:
        """Algebraic notation: 'a8' -> (0, 0), 'h1' -> (7, 7)"""
        if not isinstance(sq, str) or len(sq) != 2:
            raise InvalidNotationError(f"Not an algebraic square: {sq!r}")
        file_char, rank_char = sq[0], sq[1]
        if file_char not in FILES or rank_char not in RANKS:
            raise InvalidNotationError(f"Not an algebraic square: {sq!r}")
        col = FILES.index(file_char)
        row = BOARD_DIMENSIONS[1] - int(rank_char)
        return cls(row, col)

    def to_algebraic(self) -> str:
        if not self.is_within_bounds():
            raise InvalidNotationError(f"{self} lies outside of the board")
        return f"{FILES[self.col]}{BOARD_DIMENSIONS[1] - self.row}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_DIMENSIONS[1]) and (
            0 <= self.col < BOARD_DIMENSIONS[0]
        )

    def offset(self, d_row: int, d_col: int) -> Position:
        """Neighbouring position. Can lie outside of the board, check with is_within_bounds()."""
        return Position(self.row + d_row, self.col + d_col)

    def __str__(self) -> str:
        if self.is_within_bounds():
            return self.to_algebraic()
        return f"({self.row}, {self.col})"


def square_to_position(notation: str) -> Position:
    return Position.from_algebraic(notation)


def position_to_square(position: Position) -> str:
    return position.to_algebraic()


def all_positions() -> list[Position]:
    """The 64 squares, rank 8 to rank 1, a-file to h-file (same order as a FEN string is read)."""
    return [
        Position(row, col)
        for row in range(BOARD_DIMENSIONS[1])
        for col in range(BOARD_DIMENSIONS[0])
    ]
