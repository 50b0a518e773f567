"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, PieceType, Status

SquareName = str
FENCharacter = str


def _is_algebraic_notation(value: str) -> bool:
    if len(value) != 2:
        return False

    file_character, rank_character = value[0], value[1]
    return file_character in "abcdefgh" and rank_character in "12345678"


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    starting_fen: Optional[str] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        parts = value.strip().split(" ")
        if len(parts) != 6:
            raise InvalidRequestError(
                "FEN string must contain 6 space-separated parts."
            )
        return value.strip()


class GetGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    square: SquareName

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret square: {value!r} as a valid square name."
            )
        return value


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: SquareName
    to_square: SquareName
    promote_to: Optional[PieceType] = None

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value


class UndoRequest(BaseModel):
    game_id: UUID


class RedoRequest(BaseModel):
    game_id: UUID


class ResetRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    """Everything a board view needs to draw the current state of a game."""

    game_id: UUID
    fen_state: str
    starting_state: str
    board: dict[SquareName, Optional[FENCharacter]]
    side_to_move: Color
    status: Status
    status_line: str
    winner: Optional[Color] = None
    in_check: bool
    move_history: list[str]
    captured_pieces: dict[Color, list[FENCharacter]]
    can_undo: bool
    can_redo: bool


class MoveResponse(BaseModel):
    game_id: UUID
    san: str
    uci: str
    captured_piece: Optional[FENCharacter] = None
    game: GameResponse


class LegalMovesResponse(BaseModel):
    game_id: UUID
    square: SquareName
    destinations: list[SquareName]
