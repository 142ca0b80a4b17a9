"""
State transitions: applying a move to a GameState.

make_move() is the only way a game advances. It never changes the state it receives:
it validates the move against the legal move set, and builds a NEW GameState with
* the board updated (for castling both the king and the rook, for en passant the captured pawn removed)
* castling rights, en passant square and move counters updated
* the move appended to the move history
* the check / checkmate / stalemate flags recomputed for the side that has to move next
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional

from src.chess.castling import (
    CASTLING_RULES,
    CastlingRights,
    castling_direction_for_king_move,
    castling_directions,
)
from src.chess.moves import Move, parse_uci_move, promotion_row
from src.chess.pieces import PROMOTION_OPTIONS, Piece
from src.chess.rules import (
    castle_on_board,
    en_passant_capture_square,
    get_valid_moves,
    has_any_valid_moves,
    is_castling_move,
    is_en_passant_move,
    is_in_check,
)
from src.chess.square import Position
from src.chess.state import GameState
from src.core.exceptions import IllegalMoveError
from src.core.shared_types import Color, PieceType

logger = logging.getLogger(__name__)

# A pawn reaching the last rank without a requested piece type becomes a queen.
DEFAULT_PROMOTION = PieceType.QUEEN


@dataclass(frozen=True)
class _Transition:
    """What changed on the board, before the bookkeeping common to every move gets done."""

    board_state: GameState
    move: Move
    castling_rights: CastlingRights
    en_passant_target: Optional[Position]
    resets_half_move_clock: bool


def make_move(
    state: GameState,
    from_square: Position,
    to_square: Position,
    promotion: Optional[PieceType] = None,
) -> GameState:
    """
    Attempt to make a move
    -----

    Raises IllegalMoveError (and leaves the state alone) if to_square is not a legal destination of the piece on from_square.
    promotion is only used when a pawn reaches the last rank. If not given, DEFAULT_PROMOTION is used.
    """
    if to_square not in get_valid_moves(state, from_square):
        raise IllegalMoveError(
            f"Move not allowed: {from_square} -> {to_square} ({state.current_turn} to move)"
        )
    if promotion is not None and promotion not in PROMOTION_OPTIONS:
        raise IllegalMoveError(f"Cannot promote a pawn into a {promotion}")

    piece = state.board.piece(from_square)
    assert piece is not None

    if is_castling_move(piece, from_square, to_square):
        transition = _castling_transition(state, from_square, to_square)
    elif is_en_passant_move(state, piece, to_square):
        transition = _en_passant_transition(state, from_square, to_square)
    else:
        transition = _regular_transition(state, piece, from_square, to_square, promotion)

    new_state = _finish_turn(state, transition)
    logger.debug(
        "%s played %s -> %s", state.current_turn, transition.move.to_uci(), _flags(new_state)
    )
    return new_state


def apply_uci_move(state: GameState, uci: str) -> GameState:
    """
    Boundary for moves coming from outside (e.g. a move-search engine answering 'e7e8q').
    The move is parsed and goes through the full validation of make_move(): an external move is never trusted.
    """
    from_square, to_square, promotion = parse_uci_move(uci)
    return make_move(state, from_square, to_square, promotion)


def with_game_status(state: GameState) -> GameState:
    """(Re)compute check / checkmate / stalemate for the side to move."""
    color = state.current_turn
    in_check = is_in_check(state.board, color)
    has_moves = has_any_valid_moves(state, color)
    return replace(
        state,
        is_check=in_check,
        is_checkmate=in_check and not has_moves,
        is_stalemate=not in_check and not has_moves,
    )


# --- THE THREE MOVE SHAPES ---
def _castling_transition(
    state: GameState, king_from: Position, king_to: Position
) -> _Transition:
    """King and rook move in the same transition. Castling gives up both rights of that color."""
    direction = castling_direction_for_king_move(king_from, king_to)
    assert direction is not None
    color = direction.color
    return _Transition(
        board_state=replace(state, board=castle_on_board(state.board, direction)),
        move=Move(king_from, king_to, is_castling=True),
        castling_rights=state.castling_rights.revoke_all(color),
        en_passant_target=None,
        resets_half_move_clock=False,
    )


def _en_passant_transition(
    state: GameState, pawn_from: Position, pawn_to: Position
) -> _Transition:
    """
    1. Move the pawn diagonally
    2. Remove the opponent's pawn that gets taken (NOT on the square moved to)
    """
    capture_square = en_passant_capture_square(pawn_from, pawn_to)
    captured = state.board.piece(capture_square)
    board = state.board.move_piece(pawn_from, pawn_to).remove_piece(capture_square)
    return _Transition(
        board_state=replace(state, board=board),
        move=Move(pawn_from, pawn_to, is_en_passant=True, captured_piece=captured),
        castling_rights=state.castling_rights,
        en_passant_target=None,
        resets_half_move_clock=True,
    )


def _regular_transition(
    state: GameState,
    piece: Piece,
    from_square: Position,
    to_square: Position,
    promotion: Optional[PieceType],
) -> _Transition:
    """Any other move, including ordinary captures and promotions."""
    captured = state.board.piece(to_square)
    board = state.board.move_piece(from_square, to_square)

    promoted_to: Optional[PieceType] = None
    if piece.type == PieceType.PAWN and to_square.row == promotion_row(piece.color):
        promoted_to = promotion or DEFAULT_PROMOTION
        board = board.place_piece(piece.promote_to(promoted_to), to_square)

    en_passant_target: Optional[Position] = None
    if piece.type == PieceType.PAWN and abs(to_square.row - from_square.row) == 2:
        en_passant_target = Position((from_square.row + to_square.row) // 2, from_square.col)

    return _Transition(
        board_state=replace(state, board=board),
        move=Move(from_square, to_square, promotion=promoted_to, captured_piece=captured),
        castling_rights=_revoke_castling_rights_if_needed(
            state.castling_rights, piece, from_square, to_square, captured
        ),
        en_passant_target=en_passant_target,
        resets_half_move_clock=captured is not None or piece.type == PieceType.PAWN,
    )


def _finish_turn(state: GameState, transition: _Transition) -> GameState:
    """Bookkeeping common to every move: counters, history, turn, status flags."""
    half_move_clock = (
        0 if transition.resets_half_move_clock else state.half_move_clock + 1
    )
    full_move_number = (
        state.full_move_number + 1
        if state.current_turn == Color.BLACK
        else state.full_move_number
    )
    new_state = replace(
        transition.board_state,
        current_turn=state.current_turn.opponent,
        castling_rights=transition.castling_rights,
        en_passant_target=transition.en_passant_target,
        half_move_clock=half_move_clock,
        full_move_number=full_move_number,
        move_history=state.move_history + (transition.move,),
    )
    return with_game_status(new_state)


# --- CASTLING RIGHTS ---
def _revoke_castling_rights_if_needed(
    rights: CastlingRights,
    piece: Piece,
    from_square: Position,
    to_square: Position,
    captured: Optional[Piece],
) -> CastlingRights:
    """
    Checks which rights should get revoked
    ----

    1. If you are moving your king --> revoke both
    2. If you are moving a rook away from its starting square --> revoke the right in that direction
    3. If you are taking your opponent's rook on its starting square --> revoke that right of your opponent
       (the rook is gone anyway, but this keeps the FEN string in the form other engines expect)
    """
    if piece.type == PieceType.KING:
        return rights.revoke_all(piece.color)

    if piece.type == PieceType.ROOK:
        for direction in castling_directions(piece.color):
            if CASTLING_RULES[direction].rook_from == from_square:
                rights = rights.revoke(direction)

    if captured is not None and captured.type == PieceType.ROOK:
        for direction in castling_directions(captured.color):
            if CASTLING_RULES[direction].rook_from == to_square:
                rights = rights.revoke(direction)

    return rights


# --- PRIVATE HELPERS ---
def _flags(state: GameState) -> str:
    if state.is_checkmate:
        return "checkmate"
    if state.is_stalemate:
        return "stalemate"
    if state.is_check:
        return "check"
    return "ok"
