"""
Draw conditions that do not depend on the legal move set: fifty-move rule, threefold repetition and insufficient material.

(Stalemate needs the legal moves and is decided by the Game.)
"""

from collections import Counter
from typing import Iterable, Sequence

from src.chess.board import Board
from src.core.shared_types import PieceType

FIFTY_MOVE_HALF_MOVES = 100
REPETITIONS_FOR_DRAW = 3
MINOR_PIECES = {PieceType.KNIGHT, PieceType.BISHOP}


def is_fifty_move_draw(board: Board) -> bool:
    """Fifty moves by each side (100 half-moves) without a capture or pawn move."""
    return board.half_move_clock >= FIFTY_MOVE_HALF_MOVES


def count_repetitions(history: Sequence[Board], board: Board) -> int:
    """How often the position of `board` occurs in `history`. Full rescan."""
    key = board.repetition_key()
    return sum(1 for previous in history if previous.repetition_key() == key)


def is_insufficient_material(board: Board) -> bool:
    """
    Neither side can possibly checkmate:

    * king vs king
    * king + a single knight or bishop vs king
    * kings + bishops only, all bishops standing on squares of the same color
    """
    others = [
        (square, piece)
        for square, piece in board.pieces()
        if piece.type != PieceType.KING
    ]
    if not others:
        return True

    if len(others) == 1:
        return others[0][1].type in MINOR_PIECES

    if all(piece.type == PieceType.BISHOP for _, piece in others):
        return len({square.is_light() for square, _ in others}) == 1
    return False


class RepetitionTracker:
    """
    Running count of the positions in a game's history.

    Kept in step with the history by the Game (push after a move, pop on undo) so a status query
    does not have to rescan the whole game. Always agrees with count_repetitions() on the same history.
    """

    def __init__(self, boards: Iterable[Board] = ()) -> None:
        self._counts: Counter[str] = Counter()
        for board in boards:
            self.push(board)

    def push(self, board: Board) -> None:
        self._counts[board.repetition_key()] += 1

    def pop(self, board: Board) -> None:
        key = board.repetition_key()
        self._counts[key] -= 1
        if self._counts[key] <= 0:
            del self._counts[key]

    def count(self, board: Board) -> int:
        return self._counts.get(board.repetition_key(), 0)

    def is_threefold(self, board: Board) -> bool:
        return self.count(board) >= REPETITIONS_FOR_DRAW

    def clear(self) -> None:
        self._counts.clear()
