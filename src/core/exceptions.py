"""
Custom exceptions shared by all layers.

Every error raised on purpose derives from GameError, so the service / API layers can catch one type
and leave the specific meaning to the layer that raised it.
"""


class GameError(Exception):
    """Top-level exception of the application."""


# --- NOTATION / PARSING ---
class InvalidNotationError(GameError):
    """A square or move could not be read as algebraic / UCI notation."""


class InvalidFENError(GameError):
    """The supplied string cannot be interpreted as FEN."""


class InvalidRankError(InvalidFENError):
    """Wrong number of ranks, or a rank that does not add up to exactly 8 files."""


class UnknownPieceError(InvalidFENError):
    """A character in the piece placement that is neither a piece letter nor a digit 1-8."""


# --- RULES ---
class IllegalMoveError(GameError):
    """The requested move is not in the set of legal moves."""


class GameStateError(GameError):
    """The action does not fit the current status of the game (e.g. moving after checkmate)."""


# --- BOUNDARIES ---
class InvalidRequestError(GameError):
    """Request data that does not pass validation."""


class RepositoryError(GameError):
    """Something went wrong (or could not be found) in the persistence layer."""
