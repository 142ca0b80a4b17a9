"""
FEN codec: Board <-> piece placement string, GameState <-> full FEN string.

FEN, or Forsyth-Edwards Notation, is a standard notation for describing a particular board position of a chess game.
The purpose of FEN is to provide all the necessary information to restart a game from a particular position.
It is also what an external move-search engine reads.

<board position string> <active color> <castling rights> <en passant square> <# half move clock> <number turns played>

* The board position is written rank by rank, starting at the 8th rank, each rank from the a-file to the h-file.
    Letters are pieces (upper case white, lower case black), digits count consecutive empty squares. Ranks are separated by '/'.
* The active color is either "w" or "b"
* Castling rights are denoted as "k" for king-side or "q" for queen-side. Capital letters for the white pieces, small letters for the black pieces.
    In the starting position: KQkq (all rights available), and as rights get revoked the letter disappears. "-" if none are left.
* The en passant square is the square a pawn skipped over with its double step in the previous move. If not available a "-" is used.
* The half move clock counts the number of moves made since the last pawn move or capture.
* The number of turns starts at 1 and increments after every move black makes.

ex) The standard starting position has a FEN
rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1

KNOWN LIMITATION: FEN does not record whether a piece has moved. On import a piece counts as unmoved
if (and only if) it stands on a starting square of its type and color. A rook that left and came back is therefore
treated as unmoved (castling itself is still bound by the castling field of the FEN string).
"""

import logging

from src.chess.board import BACK_RANK, HOME_ROW, PAWN_ROW, Board
from src.chess.castling import CastlingRights
from src.chess.game import with_game_status
from src.chess.pieces import Piece
from src.chess.square import BOARD_DIMENSIONS, FILES, RANKS, Position
from src.chess.state import GameState
from src.core.exceptions import InvalidFENError, InvalidRankError, UnknownPieceError
from src.core.shared_types import Color, PieceType

logger = logging.getLogger(__name__)

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
VALID_CASTLING_ENCODINGS = [
    "-",
    "K",
    "Q",
    "k",
    "q",
    "KQ",
    "Kk",
    "Kq",
    "Qk",
    "Qq",
    "kq",
    "KQk",
    "KQq",
    "Kkq",
    "Qkq",
    "KQkq",
]
COLOR_CODES: dict[str, Color] = {"w": Color.WHITE, "b": Color.BLACK}
# The square skipped over by a double step is on the 3rd (white pawn) or 6th rank (black pawn)
EN_PASSANT_RANKS = "36"


# --- PIECE PLACEMENT ---
def board_to_fen(board: Board) -> str:
    """Ranks are separated by slashes in FEN string."""
    return "/".join(_row_to_fen(board, row) for row in range(BOARD_DIMENSIONS[1]))


def _row_to_fen(board: Board, row: int) -> str:
    """FEN string of a single rank"""
    fen_characters: list[str] = []
    empty_count = 0
    for col in range(BOARD_DIMENSIONS[0]):
        piece = board.piece(Position(row, col))
        if piece is None:
            empty_count += 1
            continue
        if empty_count > 0:
            fen_characters.append(str(empty_count))
            empty_count = 0
        fen_characters.append(piece.to_fen())

    # if the entire rank is empty, then we still place this number in the string
    if empty_count > 0:
        fen_characters.append(str(empty_count))
    return "".join(fen_characters)


def fen_to_board(placement: str) -> Board:
    """Construct a board using the first part of a FEN string (the piece placement).

    ex. standard starting position:
    rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
    means:
    * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
    * pawns cover 7th rank entirely
    * ranks 6 through 3 have 8 consecutive empty squares
    * rank 2 are the white pawns (capital letters)
    * 1st rank are the white pieces.

    Raises InvalidRankError / UnknownPieceError. The board only gets built once the full string has been read.
    """
    num_files, num_ranks = BOARD_DIMENSIONS
    fen_by_ranks = placement.split("/")
    if len(fen_by_ranks) != num_ranks:
        raise InvalidRankError(
            f"Expected {num_ranks} ranks, found {len(fen_by_ranks)}: {placement!r}"
        )

    pieces: dict[Position, Piece] = {}
    for row, fen_one_rank in enumerate(fen_by_ranks):
        col = 0
        for character in fen_one_rank:
            if character in "0123456789":
                empty_squares = int(character)
                if not 1 <= empty_squares <= num_files:
                    raise InvalidRankError(
                        f"Invalid count of empty squares {character!r} in rank {fen_one_rank!r}"
                    )
                col += empty_squares
            else:
                piece = Piece.from_fen(character)
                position = Position(row, col)
                if col < num_files:
                    pieces[position] = Piece(
                        piece.type,
                        piece.color,
                        has_moved=not is_starting_square(piece, position),
                    )
                col += 1
        if col != num_files:
            raise InvalidRankError(
                f"Rank {fen_one_rank!r} covers {col} files instead of {num_files}"
            )
    return Board.from_pieces(pieces)


def is_starting_square(piece: Piece, position: Position) -> bool:
    """Would this piece stand here in the standard starting position?"""
    if piece.type == PieceType.PAWN:
        return position.row == PAWN_ROW[piece.color]
    return position.row == HOME_ROW[piece.color] and BACK_RANK[position.col] == piece.type


# --- FULL FEN STRING ---
def game_state_to_fen(state: GameState) -> str:
    """write a FEN from the given state. The move history is not part of FEN."""
    active_color = "w" if state.current_turn == Color.WHITE else "b"
    en_passant_algebraic = (
        state.en_passant_target.to_algebraic()
        if state.en_passant_target is not None
        else "-"
    )
    return " ".join(
        [
            board_to_fen(state.board),
            active_color,
            state.castling_rights.to_fen(),
            en_passant_algebraic,
            str(state.half_move_clock),
            str(state.full_move_number),
        ]
    )


def fen_to_game_state(fen: str) -> GameState:
    """
    Parse the FEN into a GameState
    ----

    A bare FEN carries no history: the move history starts empty and
    check / checkmate / stalemate get computed from the position rather than trusted.
    """
    parts = fen.strip().split()
    if len(parts) != 6:
        raise InvalidFENError(f"FEN needs 6 space separated fields, got {len(parts)}: {fen!r}")

    (
        placement,
        active_color,
        castling_str,
        en_passant_algebraic,
        half_move_clock,
        full_move_number,
    ) = parts

    board = fen_to_board(placement)

    if not is_valid_color_code(active_color):
        raise InvalidFENError(f"Active color must be 'w' or 'b', got {active_color!r}")
    if not is_valid_castling_rights(castling_str):
        raise InvalidFENError(f"Invalid castling rights: {castling_str!r}")
    if not is_valid_en_passant(en_passant_algebraic):
        raise InvalidFENError(f"Invalid en passant square: {en_passant_algebraic!r}")
    if not (
        is_valid_move_counter(half_move_clock) and is_valid_move_counter(full_move_number)
    ):
        raise InvalidFENError(
            f"Move counters must be non-negative numbers: {half_move_clock!r} {full_move_number!r}"
        )

    state = GameState(
        board=board,
        current_turn=COLOR_CODES[active_color],
        castling_rights=CastlingRights.from_fen(castling_str),
        en_passant_target=(
            Position.from_algebraic(en_passant_algebraic)
            if en_passant_algebraic != "-"
            else None
        ),
        half_move_clock=int(half_move_clock),
        full_move_number=int(full_move_number),
    )
    return with_game_status(state)


# --- VALIDATION ---
def is_valid_fen(fen: str) -> bool:
    """
    Check if given string follows proper FEN notation.
    """
    try:
        fen_to_game_state(fen)
    except InvalidFENError as error:
        logger.debug("Rejected FEN %r: %s", fen, error)
        return False
    return True


def is_valid_position(placement: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    try:
        fen_to_board(placement)
    except (InvalidRankError, UnknownPieceError):
        return False
    return True


def is_valid_color_code(color: str) -> bool:
    return color in COLOR_CODES


def is_valid_castling_rights(castling: str) -> bool:
    """A valid castling encoding has either KQkq, KQk, etc. or a '-' if all rights have been revoked."""
    return castling in VALID_CASTLING_ENCODINGS


def is_valid_en_passant(en_passant: str) -> bool:
    """Valid en passant square encoding is a square on the 3rd or 6th rank, or a '-'"""
    return (en_passant == "-") or (
        is_valid_square(en_passant) and en_passant[1] in EN_PASSANT_RANKS
    )


def is_valid_square(square: str) -> bool:
    """Valid square is exactly a letter for the file + a digit for the rank ('e3')"""
    return len(square) == 2 and square[0] in FILES and square[1] in RANKS


def is_valid_move_counter(counter: str) -> bool:
    # isdigit() alone also accepts characters like '²', which int() does not
    return counter.isascii() and counter.isdigit()
