"""Defines the chess pieces"""

from dataclasses import dataclass, replace
from typing import Self

from src.core.exceptions import UnknownPieceError
from src.core.shared_types import Color, PieceType

FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}

# A pawn reaching the last rank can become any of these. Order is the order in which moves get listed.
PROMOTION_OPTIONS: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


@dataclass(frozen=True)
class Piece:
    """
    A piece never changes in place. Moving it (has_moved) or promoting it creates a new Piece.

    NOTE: has_moved is only relevant for kings, rooks (castling) and pawns (double step).
    """

    type: PieceType
    color: Color
    has_moved: bool = False

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        if character.lower() not in FEN_TO_PIECE:
            raise UnknownPieceError(f"Unknown piece letter: {character!r}")
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )

    def moved(self) -> Self:
        return replace(self, has_moved=True)

    def promote_to(self, new_type: PieceType) -> Self:
        return replace(self, type=new_type, has_moved=True)
