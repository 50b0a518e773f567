"""
Standard Algebraic Notation (SAN): how moves are written down in the move list.

examples: "e4", "Nf3", "exd5", "Raxd1", "e8=Q+", "O-O", "Qxf7#"
"""

from typing import Sequence

from src.chess.applier import apply_move
from src.chess.board import Board
from src.chess.generator import has_legal_moves
from src.chess.moves import Move
from src.chess.pieces import PIECE_TO_FEN
from src.core.shared_types import PieceType

KING_SIDE_CASTLE = "O-O"
QUEEN_SIDE_CASTLE = "O-O-O"


def piece_letter(piece_type: PieceType) -> str:
    """Pawns have no letter in SAN"""
    return "" if piece_type == PieceType.PAWN else PIECE_TO_FEN[piece_type].upper()


def to_san(board: Board, move: Move, legal_moves: Sequence[Move]) -> str:
    """
    Write `move` (legal on `board`) in SAN.

    `legal_moves` is the full legal move set of the board: it decides whether the origin square
    needs to be mentioned to tell two pieces of the same type apart.
    """
    if move.castling_direction is not None:
        san = KING_SIDE_CASTLE if move.castling_direction.is_king_side else QUEEN_SIDE_CASTLE
    else:
        san = _piece_move_san(board, move, legal_moves)
    return san + _check_suffix(board, move)


def _piece_move_san(board: Board, move: Move, legal_moves: Sequence[Move]) -> str:
    piece = board.piece_at(move.from_square)
    assert piece is not None, f"No piece to move on {move.from_square}"
    destination = move.to_square.to_algebraic()
    capture = "x" if move.is_capture else ""

    if piece.type == PieceType.PAWN:
        # pawn captures are identified by the file they come from
        origin = move.from_square.to_algebraic()[0] if move.is_capture else ""
        promotion = f"={piece_letter(move.promote_to)}" if move.promote_to else ""
        return f"{origin}{capture}{destination}{promotion}"

    disambiguation = _disambiguation(board, move, legal_moves)
    return f"{piece_letter(piece.type)}{disambiguation}{capture}{destination}"


def _disambiguation(board: Board, move: Move, legal_moves: Sequence[Move]) -> str:
    """
    Other pieces of the same type that can reach the same square?

    Prefer the file of the origin square, then the rank, and both only if neither is unique.
    """
    piece = board.piece_at(move.from_square)
    rivals = [
        other.from_square
        for other in legal_moves
        if other.to_square == move.to_square
        and other.from_square != move.from_square
        and board.piece_at(other.from_square) == piece
    ]
    if not rivals:
        return ""

    origin = move.from_square.to_algebraic()
    if all(square.file != move.from_square.file for square in rivals):
        return origin[0]
    if all(square.rank != move.from_square.rank for square in rivals):
        return origin[1]
    return origin


def _check_suffix(board: Board, move: Move) -> str:
    after = apply_move(board, move)
    if not after.is_check():
        return ""
    return "+" if has_legal_moves(after) else "#"
