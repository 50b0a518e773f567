"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DRAW_FIFTY_MOVE = "draw by fifty-move rule"
    DRAW_REPETITION = "draw by repetition"
    DRAW_INSUFFICIENT_MATERIAL = "draw by insufficient material"

    @property
    def is_terminal(self) -> bool:
        return self != Status.IN_PROGRESS

    @property
    def is_draw(self) -> bool:
        return self in DRAW_STATUSES


DRAW_STATUSES: frozenset[Status] = frozenset(
    {
        Status.STALEMATE,
        Status.DRAW_FIFTY_MOVE,
        Status.DRAW_REPETITION,
        Status.DRAW_INSUFFICIENT_MATERIAL,
    }
)


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"
