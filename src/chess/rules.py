"""
Legality & check detection.

Takes the pseudo-legal moves of moves.py and
1. removes every move that would leave (or put) the own king in check
2. adds the moves that depend on the state next to the board: castling and en passant

King safety is checked by simulate-then-test: play the candidate move on a copy of the board and see if the own king is attacked.
A board only has 64 squares and the game is played at human pace, so there is no incremental attack map.
"""

import logging
from dataclasses import replace
from typing import Optional

from src.chess.board import Board
from src.chess.castling import CASTLING_RULES, CastlingDirection, castling_directions
from src.chess.moves import (
    Move,
    attacked_squares,
    candidate_moves,
    pawn_direction,
    promotion_row,
)
from src.chess.pieces import PROMOTION_OPTIONS, Piece
from src.chess.square import Position
from src.chess.state import GameState
from src.core.shared_types import Color, PieceType

logger = logging.getLogger(__name__)


# --- ATTACK & CHECK DETECTION ---
def is_square_under_attack(board: Board, square: Position, attacker_color: Color) -> bool:
    """True if any piece of attacker_color could capture on the square (scans the whole board)."""
    for position in board.locate_color(attacker_color):
        if square in attacked_squares(position, board):
            return True
    return False


def is_in_check(board: Board, color: Color) -> bool:
    """
    Is the king of this color attacked?

    NOTE: Boards built by hand (tests) can be missing a king. Then there is no king to be in check: return False.
    """
    king_square = board.locate_king(color)
    if king_square is None:
        return False
    return is_square_under_attack(board, king_square, color.opponent)


# --- LEGAL MOVES ---
def get_valid_moves(state: GameState, from_square: Position) -> list[Position]:
    """
    Destination squares the piece on from_square can legally move to.
    ----

    ----
    1. No piece on the square, or not the turn of its color? --> no moves
    2. generate candidate moves, using the basic movement rules for the piece
    3. keep those moves that do not put (or leave) you in check
    4. unmoved king --> add the castling moves that are allowed
    5. pawn + en passant square available --> add the en passant capture if allowed
    """
    piece = state.board.piece(from_square)
    if piece is None or piece.color != state.current_turn:
        return []

    valid_moves = [
        to_square
        for to_square in candidate_moves(from_square, state.board)
        if not _is_putting_yourself_in_check(state.board, from_square, to_square)
    ]

    if piece.type == PieceType.KING and not piece.has_moved:
        valid_moves.extend(castling_moves(state, from_square))

    if piece.type == PieceType.PAWN and state.en_passant_target is not None:
        en_passant = en_passant_move(state, from_square)
        if en_passant is not None:
            valid_moves.append(en_passant)

    return valid_moves


def is_valid_move(state: GameState, from_square: Position, to_square: Position) -> bool:
    """Is to_square among the legal destinations of the piece on from_square?"""
    return to_square in get_valid_moves(state, from_square)


def legal_moves(state: GameState) -> list[Move]:
    """
    Every legal move of the side to move.

    A pawn push onto the last rank is listed once for every piece type it can promote into.
    Castling / en passant flags are set, so the moves can be shown / sent as-is.
    """
    moves: list[Move] = []
    for from_square in state.board.locate_color(state.current_turn):
        piece = state.board.piece(from_square)
        assert piece is not None
        for to_square in get_valid_moves(state, from_square):
            moves.extend(_describe_moves(state, piece, from_square, to_square))
    return moves


def has_any_valid_moves(state: GameState, color: Color) -> bool:
    """Does this color have at least one legal move? (looked at as if it were this color's turn)"""
    perspective = state if state.current_turn == color else replace(state, current_turn=color)
    return any(
        get_valid_moves(perspective, from_square)
        for from_square in state.board.locate_color(color)
    )


def is_checkmate(state: GameState, color: Color) -> bool:
    """In check and no legal move to get out of it."""
    if not is_in_check(state.board, color):
        return False
    return not has_any_valid_moves(state, color)


def is_stalemate(state: GameState, color: Color) -> bool:
    """Not in check, but no legal move either."""
    if is_in_check(state.board, color):
        return False
    return not has_any_valid_moves(state, color)


# --- CASTLING RULE HELPERS ---
def castling_moves(state: GameState, king_square: Position) -> list[Position]:
    """
    Destination squares of the king for the castling moves that are allowed right now.
    ---

    **you are allowed to castle if**

    * Castling rights are not yet revoked (for that direction).
    * King and rook are both on their starting squares and have not moved yet.
    * All squares in between the king and the rook are empty.
    * You are not currently in check (you cannot castle out of check).
    * The square the king passes through and the square it lands on are not under attack.
    """
    king = state.board.piece(king_square)
    if king is None or king.type != PieceType.KING or king.has_moved:
        return []

    if not state.castling_rights.has_any(king.color):
        return []

    # Cannot castle out of a check.
    if is_in_check(state.board, king.color):
        return []

    moves: list[Position] = []
    for direction in castling_directions(king.color):
        if _can_castle(state, direction, king_square):
            moves.append(CASTLING_RULES[direction].king_to)
    return moves


def _can_castle(state: GameState, direction: CastlingDirection, king_square: Position) -> bool:
    if not state.castling_rights.has(direction):
        return False

    squares = CASTLING_RULES[direction]
    if king_square != squares.king_from:
        return False

    color = direction.color
    rook = state.board.piece(squares.rook_from)
    if rook != Piece(PieceType.ROOK, color, has_moved=False):
        return False

    if state.board.is_any_occupied(squares.path):
        return False

    opponent = color.opponent
    if any(
        is_square_under_attack(state.board, square, opponent)
        for square in squares.king_path
    ):
        return False

    # for good measure: play the full castling move and check the king is safe
    return not is_in_check(castle_on_board(state.board, direction), color)


def castle_on_board(board: Board, direction: CastlingDirection) -> Board:
    """Move both the King and the Rook"""
    squares = CASTLING_RULES[direction]
    return board.move_piece(squares.king_from, squares.king_to).move_piece(
        squares.rook_from, squares.rook_to
    )


def is_castling_move(piece: Piece, from_square: Position, to_square: Position) -> bool:
    """The king moving two files can only be castling."""
    return piece.type == PieceType.KING and abs(to_square.col - from_square.col) == 2


# --- EN PASSANT RULE HELPERS ---
def is_en_passant_move(state: GameState, piece: Piece, to_square: Position) -> bool:
    """A pawn moving onto the en passant square captures en passant."""
    return piece.type == PieceType.PAWN and to_square == state.en_passant_target


def en_passant_capture_square(pawn_square: Position, en_passant_target: Position) -> Position:
    """
    The pawn taken en passant does NOT stand on the square the capturing pawn moves to.

    NOTE The pawn removed stands in the same file as the en passant square
    NOTE ,, ,, the same rank as the capturing pawn is standing at.
    """
    return Position(row=pawn_square.row, col=en_passant_target.col)


def en_passant_move(state: GameState, pawn_square: Position) -> Optional[Position]:
    """
    The en passant square, if the pawn on pawn_square may capture there.

    * the pawn must stand on an adjacent file, one rank behind the en passant square (in its direction of travel)
    * an opponent's pawn must actually stand right behind the en passant square
    * the capture may not leave the own king in check
    """
    target = state.en_passant_target
    if target is None:
        return None

    pawn = state.board.piece(pawn_square)
    if pawn is None or pawn.type != PieceType.PAWN:
        return None

    direction = pawn_direction(pawn.color)
    is_adjacent = (pawn_square.row + direction == target.row) and (
        abs(pawn_square.col - target.col) == 1
    )
    if not is_adjacent:
        return None

    capture_square = en_passant_capture_square(pawn_square, target)
    captured = state.board.piece(capture_square)
    if captured is None or captured.type != PieceType.PAWN or captured.color == pawn.color:
        return None

    board_after = state.board.move_piece(pawn_square, target).remove_piece(capture_square)
    if is_in_check(board_after, pawn.color):
        logger.debug(
            "En passant %s%s would expose the king", pawn_square, target
        )
        return None
    return target


# --- PRIVATE HELPERS ---
def _is_putting_yourself_in_check(
    board: Board, from_square: Position, to_square: Position
) -> bool:
    """Return True if the move puts you in check

    plan:
    1. Copy the board (the board is immutable: moving a piece returns the copy)
    2. make the candidate move
    3. determine if king is in check on the new board
    """
    piece = board.piece(from_square)
    assert piece is not None
    return is_in_check(board.move_piece(from_square, to_square), piece.color)


def _describe_moves(
    state: GameState, piece: Piece, from_square: Position, to_square: Position
) -> list[Move]:
    """Turn a legal destination into Move record(s), with the flags filled in."""
    if is_castling_move(piece, from_square, to_square):
        return [Move(from_square, to_square, is_castling=True)]

    if is_en_passant_move(state, piece, to_square):
        capture_square = en_passant_capture_square(from_square, to_square)
        return [
            Move(
                from_square,
                to_square,
                is_en_passant=True,
                captured_piece=state.board.piece(capture_square),
            )
        ]

    captured = state.board.piece(to_square)
    if piece.type == PieceType.PAWN and to_square.row == promotion_row(piece.color):
        return [
            Move(from_square, to_square, promotion=option, captured_piece=captured)
            for option in PROMOTION_OPTIONS
        ]
    return [Move(from_square, to_square, captured_piece=captured)]
