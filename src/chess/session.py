"""
The GameSession is the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating a game as a sequence of immutable GameStates -->
passes this information to the service layer, which can then pass it onwards to the API layer.

A session is fully described by its starting FEN and the UCI moves played since.
Rebuilding it (from_model) replays those moves, so the has_moved flags and the move history are exact again,
instead of being guessed from the current FEN.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from src.chess.fen import STARTING_FEN, fen_to_game_state, game_state_to_fen
from src.chess.game import apply_uci_move
from src.chess.moves import Move
from src.chess.rules import get_valid_moves, legal_moves
from src.chess.square import Position
from src.chess.state import GameState
from src.core.exceptions import GameStateError
from src.core.models import GameModel
from src.core.shared_types import Status

logger = logging.getLogger(__name__)

# How often the same position has to occur to call it a draw
REPETITION_LIMIT = 3
# Half moves without a capture or pawn move (fifty by each side) before the game is drawn
FIFTY_MOVE_LIMIT = 100


@dataclass
class GameSession:
    starting_fen: str
    states: list[GameState]
    moves_uci: list[str] = field(default_factory=list)

    @classmethod
    def new_game(cls, starting_fen: Optional[str] = None) -> Self:
        """Start from the standard starting position, or from a custom FEN."""
        fen = starting_fen or STARTING_FEN
        return cls(starting_fen=fen, states=[fen_to_game_state(fen)])

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a GameSession from the information the Service layer actually has"""
        # Before the first move gets played, the starting FEN equals the current FEN. Otherwise it is the first recorded FEN in history.
        starting_fen = model.history_fen[0] if model.history_fen else model.current_fen
        session = cls.new_game(starting_fen)
        for uci in model.moves_uci:
            session._push(uci)

        if session.current_fen != model.current_fen:
            raise GameStateError(
                f"Stored moves do not lead to the stored position: {session.current_fen!r} != {model.current_fen!r}"
            )
        return session

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            current_fen=self.current_fen,
            history_fen=[game_state_to_fen(state) for state in self.states[:-1]],
            moves_uci=list(self.moves_uci),
            status=self.status.value,
        )

    # --- QUERIES ---
    @property
    def state(self) -> GameState:
        return self.states[-1]

    @property
    def current_fen(self) -> str:
        return game_state_to_fen(self.state)

    @property
    def last_move(self) -> Optional[Move]:
        return self.state.last_move

    @property
    def status(self) -> Status:
        if self.state.is_checkmate:
            return Status.CHECKMATE
        if self.state.is_stalemate:
            return Status.STALEMATE
        if self._is_three_fold_repetition():
            return Status.DRAW_REPETITION
        if self.state.half_move_clock >= FIFTY_MOVE_LIMIT:
            return Status.DRAW_FIFTY_MOVE_RULE
        return Status.IN_PROGRESS

    def legal_moves(self, square: Optional[str] = None) -> list[str]:
        """
        Legal moves (UCI) of the side to move. Optionally only those of the piece on the given square.
        These can be used to display to the user.
        """
        moves = legal_moves(self.state)
        if square is not None:
            from_square = Position.from_algebraic(square)
            moves = [move for move in moves if move.from_square == from_square]
        return [move.to_uci() for move in moves]

    def legal_destinations(self, square: str) -> list[str]:
        """Squares the piece on the given square can go to (what a board UI highlights)."""
        return [
            position.to_algebraic()
            for position in get_valid_moves(self.state, Position.from_algebraic(square))
        ]

    # --- ACTIONS ---
    def make_move(self, uci: str) -> Move:
        """
        Attempt to make a move
        -----

        Raises GameStateError if the game is already over, IllegalMoveError if the move is not legal.
        Returns the move record (what moved, what got captured, castling / en passant flags).
        """
        if self.status != Status.IN_PROGRESS:
            raise GameStateError(f"Game is not in progress. status: {self.status}")
        self._push(uci)
        move = self.last_move
        assert move is not None
        logger.info("Move %s accepted, status now %s", uci, self.status)
        return move

    # -- PRIVATE HELPERS ---
    def _push(self, uci: str) -> None:
        new_state = apply_uci_move(self.state, uci)
        self.states.append(new_state)
        self.moves_uci.append(new_state.move_history[-1].to_uci())

    def _is_three_fold_repetition(self) -> bool:
        """Check if the current position occurred 3 times. Compares placement, turn, castling, en passant (not the counters)."""
        current = _repetition_key(self.state)
        count = sum(1 for state in self.states if _repetition_key(state) == current)
        return count >= REPETITION_LIMIT


def _repetition_key(state: GameState) -> str:
    return " ".join(game_state_to_fen(state).split(" ")[:4])
