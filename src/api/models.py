"""Requests and Response models"""

import re
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, PieceType, Status

SQUARE_PATTERN = re.compile(r"^[a-h][1-8]$")
UCI_PATTERN = re.compile(r"^[a-h][1-8][a-h][1-8][qrbn]?$")


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    starting_fen: Optional[str] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        parts = value.strip().split()
        if len(parts) != 6:
            raise InvalidRequestError(
                "FEN string must contain 6 space-separated parts."
            )
        return " ".join(parts)


class GetGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    square: Optional[str] = None

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not SQUARE_PATTERN.match(value):
            raise InvalidRequestError(
                f"Cannot interpret square: {value!r} as a valid square name."
            )
        return value


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: str
    to_square: str
    promote_to: Optional[PieceType] = None

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not SQUARE_PATTERN.match(value):
            raise InvalidRequestError(
                f"Cannot interpret square: {value!r} as a valid square name."
            )
        return value


class UciMoveRequest(BaseModel):
    """A move written as a single UCI string ('e2e4', 'e7e8q'), as external tools send them."""

    game_id: UUID
    uci: str

    @field_validator("uci")
    @classmethod
    def validate_uci(cls, value: str) -> str:
        value = value.strip()
        if not UCI_PATTERN.match(value):
            raise InvalidRequestError(f"Cannot interpret {value!r} as a UCI move.")
        return value


class EngineMoveRequest(BaseModel):
    """Ask the move-search engine to play the next move of the game."""

    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class MoveResponse(BaseModel):
    """
    The last move played. All an animation layer needs to decide what to visually move, fade or highlight.
    """

    uci: str
    from_square: str
    to_square: str
    captured: Optional[str] = None  # FEN letter of the captured piece
    is_castling: bool = False
    is_en_passant: bool = False
    promotion: Optional[PieceType] = None


class GameResponse(BaseModel):
    game_id: UUID
    fen_state: str
    starting_state: str
    move_history: list[str]
    status: Status
    color_to_move: Color
    is_check: bool
    last_move: Optional[MoveResponse] = None


class LegalMovesResponse(BaseModel):
    game_id: UUID
    color: Color
    legal_moves: list[str]
