"""Unit tests for /src/chess/game.py"""

from dataclasses import FrozenInstanceError

import pytest

from src.chess.castling import CastlingRights
from src.chess.fen import STARTING_FEN, fen_to_game_state, game_state_to_fen
from src.chess.game import DEFAULT_PROMOTION, apply_uci_move, make_move
from src.chess.pieces import Piece
from src.chess.rules import legal_moves
from src.chess.square import Position
from src.chess.state import GameState, initialize_game_state
from src.core.exceptions import IllegalMoveError, InvalidNotationError
from src.core.shared_types import Color, PieceType


def sq(name: str) -> Position:
    return Position.from_algebraic(name)


def play(state: GameState, *ucis: str) -> GameState:
    for uci in ucis:
        state = apply_uci_move(state, uci)
    return state


def test_initial_state() -> None:
    state = initialize_game_state()
    assert game_state_to_fen(state) == STARTING_FEN
    assert state.current_turn == Color.WHITE
    assert state.move_history == ()
    assert not state.is_game_over


def test_simple_move() -> None:
    state = initialize_game_state()
    new_state = make_move(state, sq("e2"), sq("e4"))

    assert new_state.piece_at(sq("e4")) == Piece(PieceType.PAWN, Color.WHITE, has_moved=True)
    assert new_state.piece_at(sq("e2")) is None
    assert new_state.current_turn == Color.BLACK
    assert new_state.en_passant_target == sq("e3")
    assert new_state.half_move_clock == 0
    assert new_state.full_move_number == 1
    assert new_state.last_move is not None and new_state.last_move.to_uci() == "e2e4"


def test_original_state_is_untouched() -> None:
    state = initialize_game_state()
    make_move(state, sq("e2"), sq("e4"))
    assert game_state_to_fen(state) == STARTING_FEN
    assert state.move_history == ()


def test_state_is_immutable() -> None:
    state = initialize_game_state()
    with pytest.raises(FrozenInstanceError):
        state.current_turn = Color.BLACK  # type: ignore[misc]


@pytest.mark.parametrize(
    "from_square, to_square",
    [("e2", "e5"), ("e7", "e5"), ("e4", "e5"), ("g1", "g3"), ("e1", "g1")],
)
def test_illegal_move_raises(from_square: str, to_square: str) -> None:
    """wrong pattern, wrong color, empty square, castling through own pieces"""
    state = initialize_game_state()
    with pytest.raises(IllegalMoveError):
        make_move(state, sq(from_square), sq(to_square))


def test_counters() -> None:
    """Half move clock counts quiet moves, full move number goes up after black moved"""
    state = play(initialize_game_state(), "g1f3", "g8f6", "b1c3")
    assert state.half_move_clock == 3
    assert state.full_move_number == 2
    assert state.current_turn == Color.BLACK

    state = play(state, "e7e5")
    assert state.half_move_clock == 0
    assert state.full_move_number == 3


def test_capture_resets_half_move_clock() -> None:
    state = play(initialize_game_state(), "e2e4", "d7d5", "g1f3", "b8c6", "e4d5")
    assert state.half_move_clock == 0
    assert state.last_move is not None
    assert state.last_move.captured_piece == Piece(PieceType.PAWN, Color.BLACK, has_moved=True)


def test_en_passant_target_only_lives_for_one_move() -> None:
    state = play(initialize_game_state(), "e2e4")
    assert state.en_passant_target == sq("e3")
    state = play(state, "g8f6")
    assert state.en_passant_target is None


def test_en_passant_scenario() -> None:
    """e4, a6, e5, d5, exd6: the pawn on d5 disappears"""
    state = play(initialize_game_state(), "e2e4", "a7a6", "e4e5", "d7d5")
    assert state.en_passant_target == sq("d6")

    state = make_move(state, sq("e5"), sq("d6"))
    assert state.piece_at(sq("d5")) is None
    assert state.piece_at(sq("e5")) is None
    assert state.piece_at(sq("d6")) == Piece(PieceType.PAWN, Color.WHITE, has_moved=True)

    move = state.last_move
    assert move is not None
    assert move.is_en_passant
    assert move.captured_piece == Piece(PieceType.PAWN, Color.BLACK, has_moved=True)
    assert state.half_move_clock == 0


def test_en_passant_expires() -> None:
    state = play(initialize_game_state(), "e2e4", "a7a6", "e4e5", "d7d5", "g1f3", "h7h6")
    with pytest.raises(IllegalMoveError):
        make_move(state, sq("e5"), sq("d6"))


def test_castling_king_side() -> None:
    state = fen_to_game_state("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 3 10")
    new_state = make_move(state, sq("e1"), sq("g1"))

    assert new_state.piece_at(sq("g1")) == Piece(PieceType.KING, Color.WHITE, has_moved=True)
    assert new_state.piece_at(sq("f1")) == Piece(PieceType.ROOK, Color.WHITE, has_moved=True)
    assert new_state.piece_at(sq("e1")) is None
    assert new_state.piece_at(sq("h1")) is None
    assert new_state.castling_rights == CastlingRights(False, False, True, True)
    assert new_state.half_move_clock == 4
    assert new_state.last_move is not None and new_state.last_move.is_castling


def test_castling_queen_side_black() -> None:
    state = fen_to_game_state("r3k2r/8/8/8/8/8/8/R3K2R b KQkq - 0 10")
    new_state = apply_uci_move(state, "e8c8")

    assert new_state.piece_at(sq("c8")) == Piece(PieceType.KING, Color.BLACK, has_moved=True)
    assert new_state.piece_at(sq("d8")) == Piece(PieceType.ROOK, Color.BLACK, has_moved=True)
    assert new_state.piece_at(sq("a8")) is None
    assert new_state.castling_rights.to_fen() == "KQ"
    assert new_state.full_move_number == 11


@pytest.mark.parametrize(
    "uci, expected_rights",
    [
        ("e1e2", "kq"),  # king moved: both rights gone
        ("h1h5", "Qkq"),  # rook left its square
        ("a1a5", "Kkq"),
        ("h1h8", "Qq"),  # rook takes rook: own and opponent's right gone
    ],
)
def test_castling_rights_revoked(uci: str, expected_rights: str) -> None:
    state = fen_to_game_state("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    assert apply_uci_move(state, uci).castling_rights.to_fen() == expected_rights


def test_rights_stay_gone_when_rook_returns() -> None:
    state = fen_to_game_state("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    state = play(state, "h1h2", "a8a7", "h2h1", "a7a8")
    assert state.castling_rights.to_fen() == "Qk"
    assert "e1g1" not in [move.to_uci() for move in legal_moves(state)]


def test_default_promotion_is_queen() -> None:
    state = fen_to_game_state("8/4P3/8/8/8/8/8/k1K5 w - - 0 1")
    new_state = make_move(state, sq("e7"), sq("e8"))

    assert DEFAULT_PROMOTION == PieceType.QUEEN
    assert new_state.piece_at(sq("e8")) == Piece(PieceType.QUEEN, Color.WHITE, has_moved=True)
    assert new_state.last_move is not None
    assert new_state.last_move.promotion == PieceType.QUEEN


@pytest.mark.parametrize("piece_type", [PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT])
def test_under_promotion(piece_type: PieceType) -> None:
    state = fen_to_game_state("8/4P3/8/8/8/8/8/k1K5 w - - 0 1")
    new_state = make_move(state, sq("e7"), sq("e8"), piece_type)
    assert new_state.piece_at(sq("e8")) == Piece(piece_type, Color.WHITE, has_moved=True)


@pytest.mark.parametrize("piece_type", [PieceType.KING, PieceType.PAWN])
def test_cannot_promote_to_king_or_pawn(piece_type: PieceType) -> None:
    state = fen_to_game_state("8/4P3/8/8/8/8/8/k1K5 w - - 0 1")
    with pytest.raises(IllegalMoveError):
        make_move(state, sq("e7"), sq("e8"), piece_type)


def test_promotion_by_capture_black() -> None:
    state = fen_to_game_state("4k3/8/8/8/8/8/6p1/4K2R b K - 0 1")
    new_state = apply_uci_move(state, "g2h1n")

    assert new_state.piece_at(sq("h1")) == Piece(PieceType.KNIGHT, Color.BLACK, has_moved=True)
    assert new_state.castling_rights.to_fen() == "-"
    assert new_state.last_move is not None
    assert new_state.last_move.captured_piece == Piece(PieceType.ROOK, Color.WHITE)


def test_move_gives_check() -> None:
    state = play(initialize_game_state(), "e2e4", "f7f6", "d2d4", "e8f7", "f1c4")
    assert state.is_check
    assert not state.is_checkmate


def test_fools_mate() -> None:
    state = play(initialize_game_state(), "f2f3", "e7e5", "g2g4", "d8h4")
    assert state.is_check
    assert state.is_checkmate
    assert state.is_game_over
    assert state.current_turn == Color.WHITE


def test_apply_uci_rejects_garbage() -> None:
    with pytest.raises(InvalidNotationError):
        apply_uci_move(initialize_game_state(), "castle")


def test_move_history_grows() -> None:
    state = play(initialize_game_state(), "e2e4", "e7e5", "g1f3")
    assert [move.to_uci() for move in state.move_history] == ["e2e4", "e7e5", "g1f3"]
