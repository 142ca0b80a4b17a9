"""The Game board: the configuration of pieces on the 8x8 grid.

The board is immutable. Every edit (placing, removing, moving a piece) returns a new Board,
so a board handed to a caller (renderer, test harness, ...) can never change underneath it.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Self

from src.chess.pieces import Piece
from src.chess.square import BOARD_DIMENSIONS, Position, all_positions
from src.core.shared_types import Color, PieceType

Grid = tuple[tuple[Optional[Piece], ...], ...]

# Back rank in the standard starting position, from the a-file to the h-file
BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

# Rows (see square.py) of the back rank and the pawn rank of each player
HOME_ROW: dict[Color, int] = {Color.WHITE: 7, Color.BLACK: 0}
PAWN_ROW: dict[Color, int] = {Color.WHITE: 6, Color.BLACK: 1}


@dataclass(frozen=True)
class Board:
    grid: Grid

    @classmethod
    def empty(cls) -> Self:
        num_files, num_ranks = BOARD_DIMENSIONS
        return cls(tuple((None,) * num_files for _ in range(num_ranks)))

    @classmethod
    def starting_position(cls) -> Self:
        """Pieces on their standard starting squares, none of them has moved."""
        rows: list[tuple[Optional[Piece], ...]] = []
        for row in range(BOARD_DIMENSIONS[1]):
            if row == HOME_ROW[Color.BLACK]:
                rows.append(tuple(Piece(t, Color.BLACK) for t in BACK_RANK))
            elif row == PAWN_ROW[Color.BLACK]:
                rows.append(tuple(Piece(PieceType.PAWN, Color.BLACK) for _ in BACK_RANK))
            elif row == PAWN_ROW[Color.WHITE]:
                rows.append(tuple(Piece(PieceType.PAWN, Color.WHITE) for _ in BACK_RANK))
            elif row == HOME_ROW[Color.WHITE]:
                rows.append(tuple(Piece(t, Color.WHITE) for t in BACK_RANK))
            else:
                rows.append((None,) * BOARD_DIMENSIONS[0])
        return cls(tuple(rows))

    @classmethod
    def from_pieces(cls, pieces: dict[Position, Piece]) -> Self:
        """Convenience method: build a (partial) board in one go, e.g. for test positions."""
        board = cls.empty()
        for position, piece in pieces.items():
            board = board.place_piece(piece, position)
        return board

    # --- QUERIES ---
    def piece(self, position: Position) -> Optional[Piece]:
        """The piece on the square, or None if it is empty (or not on the board at all)."""
        if not position.is_within_bounds():
            return None
        return self.grid[position.row][position.col]

    def is_empty(self, position: Position) -> bool:
        return self.piece(position) is None

    def is_any_occupied(self, positions: list[Position]) -> bool:
        return any(not self.is_empty(position) for position in positions)

    def pieces(self) -> Iterator[tuple[Position, Piece]]:
        """All occupied squares, in FEN reading order."""
        for position in all_positions():
            piece = self.piece(position)
            if piece is not None:
                yield position, piece

    def locate_color(self, color: Color) -> list[Position]:
        return [position for position, piece in self.pieces() if piece.color == color]

    def locate_pieces(self, piece_type: PieceType, color: Color) -> list[Position]:
        return [
            position
            for position, piece in self.pieces()
            if piece.type == piece_type and piece.color == color
        ]

    def locate_king(self, color: Color) -> Optional[Position]:
        """NOTE: test boards may lack a king, so this can return None."""
        kings = self.locate_pieces(PieceType.KING, color)
        return kings[0] if kings else None

    # --- EDITS (each returns a new board) ---
    def place_piece(self, piece: Optional[Piece], position: Position) -> Self:
        rows = [list(row) for row in self.grid]
        rows[position.row][position.col] = piece
        return type(self)(tuple(tuple(row) for row in rows))

    def remove_piece(self, position: Position) -> Self:
        return self.place_piece(None, position)

    def move_piece(self, from_square: Position, to_square: Position) -> Self:
        """Relocate the piece (capturing whatever stood on the target square) and mark it as moved."""
        piece = self.piece(from_square)
        if piece is None:
            raise ValueError(f"No piece to move on {from_square}")
        return self.remove_piece(from_square).place_piece(piece.moved(), to_square)

    def __str__(self) -> str:
        """Text diagram, white at the bottom. Handy in failing test output and debug logs."""
        return "\n".join(
            " ".join(piece.to_fen() if piece else "." for piece in row)
            for row in self.grid
        )
