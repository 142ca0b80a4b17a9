"""
The full state of a game at one moment: the board plus everything a FEN string records next to it,
the move history, and the check / checkmate / stalemate flags of the side to move.
"""

from dataclasses import dataclass, field
from typing import Optional

from src.chess.board import Board
from src.chess.castling import CastlingRights
from src.chess.moves import Move
from src.chess.pieces import Piece
from src.chess.square import Position
from src.core.shared_types import Color


@dataclass(frozen=True)
class GameState:
    """
    Treated as a persistent value: moves produce a NEW GameState (see game.py), an existing one never changes.
    Several readers (a renderer, a test, the service) can safely hold on to the same instance.

    * en_passant_target: square the opponent's pawn skipped over on its double step in the move just played.
        Only the immediately following move may capture en passant, so it gets cleared on every other move.
    * half_move_clock: moves since the last capture or pawn move (only tracked).
    * full_move_number: starts at 1, incremented after every move black makes.
    * is_check / is_checkmate / is_stalemate: describe the position for current_turn, the side about to move.
    """

    board: Board
    current_turn: Color = Color.WHITE
    castling_rights: CastlingRights = field(default_factory=CastlingRights)
    en_passant_target: Optional[Position] = None
    half_move_clock: int = 0
    full_move_number: int = 1
    move_history: tuple[Move, ...] = ()
    is_check: bool = False
    is_checkmate: bool = False
    is_stalemate: bool = False

    # --- READ-ONLY QUERIES (rendering layer) ---
    def piece_at(self, position: Position) -> Optional[Piece]:
        return self.board.piece(position)

    @property
    def last_move(self) -> Optional[Move]:
        return self.move_history[-1] if self.move_history else None

    @property
    def is_game_over(self) -> bool:
        return self.is_checkmate or self.is_stalemate


def initialize_board() -> Board:
    return Board.starting_position()


def initialize_game_state() -> GameState:
    """Standard starting position, white to move, all castling rights available.

    NOTE nobody can be in check / mated in the starting position, so no need to compute the flags.
    """
    return GameState(board=initialize_board())
