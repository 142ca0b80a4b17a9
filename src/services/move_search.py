"""
Contract with an external move-search engine (e.g. a UCI engine running in its own process).

The engine reads a position as a FEN string and answers with a move in UCI notation ('e2e4', 'e7e8q').
How it gets there (search depth, time limits, cancelling a search) is up to the implementation: the rules engine only
consumes the answer, and always re-validates it before applying it.
"""

from typing import Protocol


class MoveSearchEngine(Protocol):
    def best_move(self, fen: str) -> str:
        """Best move in UCI notation for the side to move in the given position."""
        ...
