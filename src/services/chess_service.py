"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from uuid import UUID

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    EngineMoveRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    MoveResponse,
    UciMoveRequest,
)
from src.chess.moves import Move
from src.chess.pieces import PIECE_TO_FEN
from src.chess.session import GameSession
from src.core.exceptions import GameStateError, IllegalMoveError, RepositoryError
from src.core.models import GameModel
from src.core.shared_types import PieceType
from src.db.repository import GameRepository
from src.services.move_search import MoveSearchEngine

logger = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Create a new game (standard starting position unless a FEN is supplied)."""

        session = GameSession.new_game(request.starting_fen)
        _, game_id = self.repo.create_game(session.to_model())
        logger.info("Created game %s from %r", game_id, session.starting_fen)
        return self._create_game_response(game_id, session)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check if the opponent / engine has moved for instance.
        """
        session = self._load_session(request.game_id)
        return self._create_game_response(request.game_id, session)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """retrieve set of legal moves (of one piece, if a square is given)."""

        session = self._load_session(request.game_id)
        return LegalMovesResponse(
            game_id=request.game_id,
            color=session.state.current_turn,
            legal_moves=session.legal_moves(request.square),
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt."""

        session = self._load_session(request.game_id)
        session.make_move(
            build_uci(request.from_square, request.to_square, request.promote_to)
        )
        return self._store(request.game_id, session)

    def make_uci_move(self, request: UciMoveRequest) -> GameResponse:
        """Same as make_move, for a move already written in UCI notation."""
        session = self._load_session(request.game_id)
        session.make_move(request.uci)
        return self._store(request.game_id, session)

    def play_engine_move(
        self, request: EngineMoveRequest, engine: MoveSearchEngine
    ) -> GameResponse:
        """
        Let the move-search engine play the side to move.

        NOTE the engine's answer gets validated like any other move. An illegal answer raises IllegalMoveError and
        nothing gets stored.
        """
        session = self._load_session(request.game_id)
        if session.state.is_game_over:
            raise GameStateError(f"Game is not in progress. status: {session.status}")

        engine_move = engine.best_move(session.current_fen)
        logger.info("Engine answered %r for game %s", engine_move, request.game_id)
        try:
            session.make_move(engine_move.strip())
        except IllegalMoveError:
            logger.warning(
                "Engine move %r rejected in position %s", engine_move, session.current_fen
            )
            raise
        return self._store(request.game_id, session)

    def list_games(self) -> list[GameResponse]:
        """Show all recorded games."""
        return [
            self._create_game_response(game_id, GameSession.from_model(model))
            for game_id, model in self.repo.list_games()
        ]

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        if self.repo.delete_game(request.game_id) is None:
            raise RepositoryError(f"Game with game_id={request.game_id} not found.")
        logger.info("Deleted game %s", request.game_id)

    # -- Internal helpers --
    def _load_session(self, game_id: UUID) -> GameSession:
        return GameSession.from_model(self._fetch_game(game_id))

    def _store(self, game_id: UUID, session: GameSession) -> GameResponse:
        if self.repo.update_game(game_id, session.to_model()) is None:
            raise RepositoryError(f"Game with {game_id=} could not be updated.")
        return self._create_game_response(game_id, session)

    def _create_game_response(self, game_id: UUID, session: GameSession) -> GameResponse:
        """Convert the session into a GameResponse (for game with given ID.)"""
        state = session.state
        return GameResponse(
            game_id=game_id,
            fen_state=session.current_fen,
            starting_state=session.starting_fen,
            move_history=list(session.moves_uci),
            status=session.status,
            color_to_move=state.current_turn,
            is_check=state.is_check,
            last_move=_move_response(session.last_move),
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model


def build_uci(
    from_square_alg: str, to_square_alg: str, promotion: PieceType | None = None
) -> str:
    """Squares in algebraic notation (+ optional promotion piece) into a single UCI string."""
    piece_char = PIECE_TO_FEN[promotion] if promotion else ""
    return f"{from_square_alg}{to_square_alg}{piece_char}"


def _move_response(move: Move | None) -> MoveResponse | None:
    if move is None:
        return None
    return MoveResponse(
        uci=move.to_uci(),
        from_square=move.from_square.to_algebraic(),
        to_square=move.to_square.to_algebraic(),
        captured=move.captured_piece.to_fen() if move.captured_piece else None,
        is_castling=move.is_castling,
        is_en_passant=move.is_en_passant,
        promotion=move.promotion,
    )
