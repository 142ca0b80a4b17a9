"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Self

from src.chess.square import Position
from src.core.shared_types import Color


class CastlingDirection(Enum):
    """The four castling directions. Values represent their encodings in FEN string."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"

    @property
    def color(self) -> Color:
        return Color.WHITE if self.value.isupper() else Color.BLACK


# Order in which the rights are written in a FEN string
CASTLING_ORDER: tuple[CastlingDirection, ...] = (
    CastlingDirection.WHITE_KING_SIDE,
    CastlingDirection.WHITE_QUEEN_SIDE,
    CastlingDirection.BLACK_KING_SIDE,
    CastlingDirection.BLACK_QUEEN_SIDE,
)


def squares_between_on_row(from_square: Position, to_square: Position) -> list[Position]:
    """
    Find the squares strictly in between the two squares specified, that are on the same row (rank)
    """
    if from_square.row != to_square.row:
        raise ValueError(
            f"squares_between_on_row requires both squares to lie on the same rank. \n from: {from_square}\n to:{to_square}"
        )
    step = 1 if to_square.col > from_square.col else -1
    return [
        Position(from_square.row, col)
        for col in range(from_square.col + step, to_square.col, step)
    ]


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: If castling rights have not been revoked, the king / rook are normally still at their starting squares.
    But boards built by hand (tests, FEN imports) do not guarantee this, so the rules still check the board.
    """

    king_from: Position
    king_to: Position
    rook_from: Position
    rook_to: Position

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below (from CastlingDirection) more readable"""
        king_from = Position.from_algebraic(k_from)
        king_to = Position.from_algebraic(k_to)
        rook_from = Position.from_algebraic(r_from)
        rook_to = Position.from_algebraic(r_to)
        return cls(king_from, king_to, rook_from, rook_to)

    @property
    def path(self) -> list[Position]:
        """Squares between king and rook. These all need to be empty."""
        return squares_between_on_row(self.king_from, self.rook_from)

    @property
    def king_path(self) -> list[Position]:
        """Squares the king passes through + lands on. None of these may be attacked."""
        return squares_between_on_row(self.king_from, self.king_to) + [self.king_to]


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    CastlingDirection.WHITE_KING_SIDE: CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1"
    ),
    CastlingDirection.WHITE_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1"
    ),
    CastlingDirection.BLACK_KING_SIDE: CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8"
    ),
    CastlingDirection.BLACK_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8"
    ),
}


def castling_directions(color: Color) -> list[CastlingDirection]:
    return [direction for direction in CASTLING_ORDER if direction.color == color]


def castling_direction_for_king_move(
    king_from: Position, king_to: Position
) -> CastlingDirection | None:
    """Which castling move (if any) corresponds to the king moving between these squares."""
    for direction, squares in CASTLING_RULES.items():
        if squares.king_from == king_from and squares.king_to == king_to:
            return direction
    return None


@dataclass(frozen=True)
class CastlingRights:
    """
    Rights get revoked during the game, but never restored.
    revoke() therefore only ever turns flags off, and returns a new object.
    """

    white_king_side: bool = True
    white_queen_side: bool = True
    black_king_side: bool = True
    black_queen_side: bool = True

    @classmethod
    def none(cls) -> Self:
        return cls(False, False, False, False)

    @classmethod
    def from_fen(cls, castle_fen: str) -> Self:
        """parse the part of the FEN string that encodes castling rights ('KQkq', 'Kq', '-', ...)"""
        return cls(
            white_king_side="K" in castle_fen,
            white_queen_side="Q" in castle_fen,
            black_king_side="k" in castle_fen,
            black_queen_side="q" in castle_fen,
        )

    def to_fen(self) -> str:
        """create the part of the FEN string that encodes castling rights"""
        castling_chars = "".join(
            direction.value for direction in CASTLING_ORDER if self.has(direction)
        )
        return castling_chars or "-"

    def has(self, direction: CastlingDirection) -> bool:
        return getattr(self, _FIELD_NAMES[direction])

    def has_any(self, color: Color) -> bool:
        return any(self.has(direction) for direction in castling_directions(color))

    def revoke(self, *directions: CastlingDirection) -> Self:
        return replace(self, **{_FIELD_NAMES[direction]: False for direction in directions})

    def revoke_all(self, color: Color) -> Self:
        return self.revoke(*castling_directions(color))


_FIELD_NAMES: dict[CastlingDirection, str] = {
    CastlingDirection.WHITE_KING_SIDE: "white_king_side",
    CastlingDirection.WHITE_QUEEN_SIDE: "white_queen_side",
    CastlingDirection.BLACK_KING_SIDE: "black_king_side",
    CastlingDirection.BLACK_QUEEN_SIDE: "black_queen_side",
}
