"""
Legal move generation
----

1. generate candidate (pseudo-legal) moves, using the basic movement rules for all pieces
2. add candidate castling moves
3. remove illegal options --> a move that would put you in check or you are in check and the move does not get you out of it.

Step 3 plays every candidate on a copy of the position and looks at the king afterwards. That covers pins, blocking checks,
discovered checks by en passant captures, and the king walking into an attacked square in one go.
"""

from dataclasses import replace
from typing import Iterator

from src.chess.applier import apply_move
from src.chess.board import Board
from src.chess.castling import CASTLING_DIRECTIONS, CASTLING_RULES
from src.chess.moves import MOVEMENT_RULES, Move
from src.chess.pieces import Piece
from src.chess.square import Square
from src.core.shared_types import Color, PieceType


def generate_candidate_moves(board: Board) -> list[Move]:
    """Pseudo-legal moves of the side to move, in square order of the moving pieces. Castling last."""
    color = board.side_to_move
    candidate_moves: list[Move] = []
    for starting_square, piece in board.pieces(color):
        candidate_moves.extend(MOVEMENT_RULES[piece.type](starting_square, board))
    candidate_moves.extend(candidate_castling_moves(board, color))
    return candidate_moves


def candidate_castling_moves(board: Board, color: Color) -> list[Move]:
    """
    Find the castling moves for the given color
    ---

    **you are allowed to castle if**

    * Castling rights are not yet revoked (and king and rook still stand on their starting squares).
    * All squares in between the king and the rook are empty.
    * The king is not in check, and does not pass through or land on a square that is under attack.
    """
    king = Piece(PieceType.KING, color)
    rook = Piece(PieceType.ROOK, color)

    moves: list[Move] = []
    for direction in CASTLING_DIRECTIONS[color]:
        if direction not in board.castling_rights:
            continue

        rule = CASTLING_RULES[direction]
        if board.piece_at(rule.king_from) != king or board.piece_at(rule.rook_from) != rook:
            continue

        if any(board.piece_at(square) is not None for square in rule.empty_path):
            continue

        if any(board.is_square_attacked(square, color.opponent) for square in rule.king_path):
            continue

        moves.append(
            Move(from_square=rule.king_from, to_square=rule.king_to, castling_direction=direction)
        )
    return moves


def is_legal(board: Board, move: Move) -> bool:
    """A move is legal if your own king is not under attack once it has been made."""
    return not apply_move(board, move).is_check(board.side_to_move)


def _legal_moves(board: Board) -> Iterator[Move]:
    generated_from = board.to_fen()
    for move in generate_candidate_moves(board):
        if is_legal(board, move):
            yield replace(move, generated_from=generated_from)


def generate_legal_moves(board: Board) -> list[Move]:
    """All legal moves for the side to move. Order is deterministic for a given board."""
    return list(_legal_moves(board))


def has_legal_moves(board: Board) -> bool:
    """Stops at the first legal move found: cheaper than generating them all."""
    return any(True for _ in _legal_moves(board))


def legal_destinations(board: Board, square: Square) -> list[Square]:
    """
    Squares the piece on `square` can move to, for highlighting a selection.

    Empty when there is no piece or it is not that piece's turn.
    """
    piece = board.piece_at(square)
    if piece is None or piece.color != board.side_to_move:
        return []

    candidates = [
        move
        for move in generate_candidate_moves(board)
        if move.from_square == square and is_legal(board, move)
    ]
    return sorted({move.to_square for move in candidates})
