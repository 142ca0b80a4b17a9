"""Unit tests for /src/chess/pieces.py"""

import pytest

from src.chess.pieces import PIECE_TO_FEN, Piece
from src.core.exceptions import UnknownPieceError
from src.core.shared_types import Color, PieceType


@pytest.mark.parametrize("piece_type", list(PieceType))
def test_piece_from_fen_white(piece_type: PieceType) -> None:
    """Capital letters are white pieces"""
    piece = Piece.from_fen(PIECE_TO_FEN[piece_type].upper())
    assert piece == Piece(piece_type, Color.WHITE)


@pytest.mark.parametrize("piece_type", list(PieceType))
def test_piece_from_fen_black(piece_type: PieceType) -> None:
    """Lower case letters are black pieces"""
    piece = Piece.from_fen(PIECE_TO_FEN[piece_type])
    assert piece == Piece(piece_type, Color.BLACK)


@pytest.mark.parametrize("character", list("PNBRQKpnbrqk"))
def test_piece_to_fen(character: str) -> None:
    assert Piece.from_fen(character).to_fen() == character


@pytest.mark.parametrize("character", ["x", "1", "Z", " "])
def test_unknown_piece_letter(character: str) -> None:
    with pytest.raises(UnknownPieceError):
        Piece.from_fen(character)


def test_moving_creates_new_piece() -> None:
    """Pieces are immutable: marking it as moved leaves the original alone"""
    rook = Piece(PieceType.ROOK, Color.WHITE)
    moved_rook = rook.moved()
    assert moved_rook.has_moved
    assert not rook.has_moved
    assert moved_rook.type == rook.type and moved_rook.color == rook.color


def test_promotion() -> None:
    pawn = Piece(PieceType.PAWN, Color.BLACK)
    knight = pawn.promote_to(PieceType.KNIGHT)
    assert knight == Piece(PieceType.KNIGHT, Color.BLACK, has_moved=True)
    assert pawn.type == PieceType.PAWN
