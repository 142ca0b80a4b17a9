"""Protocol repository (implemented with SQLAlchemy in sql_repository.py, mocked with a dict in the tests)"""

from typing import Protocol
from uuid import UUID

from src.core.models import GameModel


class GameRepository(Protocol):
    """Persistence of games: the starting position + moves played, and the position / status they lead to."""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        ...

    def list_games(self) -> list[tuple[UUID, GameModel]]:
        """All stored games, oldest first."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Replace the position / moves / status of an existing record. None if there is no such record."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record. Returns what was removed (None if nothing was)."""
        ...
