"""Perft: count the leaf nodes of the legal move tree. The standard check for move generator correctness."""

from src.chess.applier import apply_move
from src.chess.board import Board
from src.chess.generator import generate_legal_moves


def perft(board: Board, depth: int) -> int:
    """Leaf nodes of the legal move tree `depth` plies below `board` (depth 0 counts the board itself)."""
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1

    moves = generate_legal_moves(board)
    if depth == 1:
        return len(moves)
    return sum(perft(apply_move(board, move), depth - 1) for move in moves)


def divide(board: Board, depth: int) -> dict[str, int]:
    """Perft per root move (in UCI), for tracking down which move a wrong count comes from."""
    if depth < 1:
        raise ValueError("depth must be >= 1")
    return {
        move.to_uci(): perft(apply_move(board, move), depth - 1)
        for move in generate_legal_moves(board)
    }
