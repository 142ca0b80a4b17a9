"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the pseudo-legal destination squares for each piece type.
Pseudo-legal: follows the movement pattern and occupancy rules, but ignores whether the own king ends up in check.

Legality (king safety, castling, en passant) is checked later by src/chess/rules.py
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from src.chess.pieces import FEN_TO_PIECE, PIECE_TO_FEN, PROMOTION_OPTIONS, Piece
from src.chess.square import Position
from src.core.exceptions import InvalidNotationError
from src.core.shared_types import Color, PieceType


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, position: Position) -> Optional[Piece]: ...


Vector = tuple[int, int]


@dataclass(frozen=True)
class Move:
    """
    A move as recorded in the move history.

    Immutable once appended. The animation layer only needs this record to know what to move / fade / highlight:
    * captured_piece: the piece that got taken (for en passant NOT standing on to_square)
    * is_castling: the rook moved as well
    """

    from_square: Position
    to_square: Position
    promotion: Optional[PieceType] = None
    is_castling: bool = False
    is_en_passant: bool = False
    captured_piece: Optional[Piece] = None

    @classmethod
    def from_uci(cls, uci: str) -> Self:
        """
        Universal Chess Interface:
        ---
        ---
        One of the standard chess notations for moves, and what a move-search engine answers with.

        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)
        * "e1g1": the king castles king side

        NOTE: Castling / En Passant / captured piece will be set when the move actually gets made
        """
        from_square, to_square, promotion = parse_uci_move(uci)
        return cls(from_square, to_square, promotion=promotion)

    def to_uci(self) -> str:
        """Convert into UCI notation"""
        piece_char = PIECE_TO_FEN[self.promotion] if self.promotion else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{piece_char}"


def parse_uci_move(uci: str) -> tuple[Position, Position, Optional[PieceType]]:
    """Split 'e7e8q' into (e7, e8, queen). Anything that is not 4 or 5 characters of that shape is rejected."""
    if not isinstance(uci, str) or len(uci) not in (4, 5):
        raise InvalidNotationError(f"Not a UCI move: {uci!r}")
    from_square = Position.from_algebraic(uci[:2])
    to_square = Position.from_algebraic(uci[2:4])
    promotion: Optional[PieceType] = None
    if len(uci) == 5:
        promotion = FEN_TO_PIECE.get(uci[4])
        if promotion not in PROMOTION_OPTIONS:
            raise InvalidNotationError(
                f"Unknown promotion piece {uci[4]!r} in UCI move {uci!r}"
            )
    return from_square, to_square, promotion


# --- DIRECTIONS (row, col) ---
ROOK_DIRECTIONS: list[Vector] = [(-1, 0), (1, 0), (0, -1), (0, 1)]
BISHOP_DIRECTIONS: list[Vector] = [(-1, -1), (-1, 1), (1, -1), (1, 1)]
QUEEN_DIRECTIONS: list[Vector] = ROOK_DIRECTIONS + BISHOP_DIRECTIONS
KNIGHT_DELTAS: list[Vector] = [
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
]
KING_DELTAS: list[Vector] = [
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
]


def pawn_direction(color: Color) -> int:
    """White moves UP the board (towards row 0), black moves DOWN."""
    return -1 if color == Color.WHITE else 1


def pawn_start_row(color: Color) -> int:
    return 6 if color == Color.WHITE else 1


def promotion_row(color: Color) -> int:
    return 0 if color == Color.WHITE else 7


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Position, board: Board, directions: list[Vector]
) -> list[Position]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.
    """
    piece = board.piece(square)
    assert piece is not None

    moves: list[Position] = []
    for d_row, d_col in directions:
        target = square.offset(d_row, d_col)
        while target.is_within_bounds():
            occupant = board.piece(target)
            if occupant is not None:
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if occupant.color != piece.color:
                    moves.append(target)
                break
            moves.append(target)
            target = target.offset(d_row, d_col)
    return moves


def single_step_move(
    square: Position, board: Board, deltas: list[Vector]
) -> list[Position]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just jump a single step along a direction"""
    piece = board.piece(square)
    assert piece is not None

    moves: list[Position] = []
    for d_row, d_col in deltas:
        target = square.offset(d_row, d_col)
        if not target.is_within_bounds():
            continue
        occupant = board.piece(target)
        if occupant is None or occupant.color != piece.color:
            moves.append(target)
    return moves


def candidate_pawn_moves(square: Position, board: Board) -> list[Position]:
    """
    A pawn:
    - moves by a single square forward (never capturing that way).
    - It can move by two in their first move (so when on their starting rank, and both squares are empty)
    - takes diagonally, only if there is an opponent's piece to take

    NOTE: En passant will be taken care of in rules.py
    """
    pawn = board.piece(square)
    assert pawn is not None
    direction = pawn_direction(pawn.color)

    moves: list[Position] = []
    one_step = square.offset(direction, 0)
    if one_step.is_within_bounds() and board.piece(one_step) is None:
        moves.append(one_step)

        two_steps = square.offset(2 * direction, 0)
        on_start_row = square.row == pawn_start_row(pawn.color)
        if (
            on_start_row
            and not pawn.has_moved
            and two_steps.is_within_bounds()
            and board.piece(two_steps) is None
        ):
            moves.append(two_steps)

    for target in _pawn_diagonals(square, pawn.color):
        occupant = board.piece(target)
        if occupant is not None and occupant.color != pawn.color:
            moves.append(target)
    return moves


def candidate_knight_moves(square: Position, board: Board) -> list[Position]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(square, board, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Position, board: Board) -> list[Position]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(square, board, BISHOP_DIRECTIONS)


def candidate_rook_moves(square: Position, board: Board) -> list[Position]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, ROOK_DIRECTIONS)


def candidate_queen_moves(square: Position, board: Board) -> list[Position]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return raycasting_move(square, board, QUEEN_DIRECTIONS)


def candidate_king_moves(square: Position, board: Board) -> list[Position]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (handled separately).
    """
    return single_step_move(square, board, KING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Position, Board], list[Position]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


# --- ATTACKING RULES ---
def _pawn_diagonals(square: Position, color: Color) -> list[Position]:
    direction = pawn_direction(color)
    diagonals = [square.offset(direction, -1), square.offset(direction, 1)]
    return [target for target in diagonals if target.is_within_bounds()]


def pawn_attack_moves(square: Position, board: Board) -> list[Position]:
    """
    Pawns take diagonally
    ----

    Unlike candidate_pawn_moves(), the diagonal squares count regardless of whether they are empty:
    a pawn threatens any square it could capture on. It never threatens a square held by its own side.
    Only used to check if squares are under attack.
    """
    pawn = board.piece(square)
    assert pawn is not None
    attacked: list[Position] = []
    for target in _pawn_diagonals(square, pawn.color):
        occupant = board.piece(target)
        if occupant is None or occupant.color != pawn.color:
            attacked.append(target)
    return attacked


# --- STRATEGY PATTERN: ATTACKING RULES ---
# For all other pieces, the squares they attack are the squares they can move to.
ATTACK_RULES: dict[PieceType, CandidateMovesFn] = {
    **MOVEMENT_RULES,
    PieceType.PAWN: pawn_attack_moves,
}


def candidate_moves(square: Position, board: Board) -> list[Position]:
    """Pseudo-legal destinations of whatever piece stands on the square."""
    piece = board.piece(square)
    if piece is None:
        return []
    return MOVEMENT_RULES[piece.type](square, board)


def attacked_squares(square: Position, board: Board) -> list[Position]:
    piece = board.piece(square)
    if piece is None:
        return []
    return ATTACK_RULES[piece.type](square, board)
