"""
Making a move: Board + Move -> new Board.

The move is trusted to be legal for the board (see generator.py). This module only takes care of
getting the resulting state right: pieces, castling rights, en passant square and move counters.
"""

from typing import Optional

from src.chess.board import Board
from src.chess.castling import (
    CASTLING_DIRECTIONS,
    CASTLING_RULES,
    ROOK_HOME_SQUARES,
    CastlingDirection,
)
from src.chess.moves import Move
from src.chess.pieces import Piece
from src.chess.square import Square
from src.core.shared_types import Color, PieceType


def apply_move(board: Board, move: Move) -> Board:
    """Return the board as it looks after `move` has been played."""
    position = dict(board.position)

    moving_piece = position.pop(move.from_square)
    # NOTE for en passant the captured pawn is not standing on the target square
    if move.captured_square is not None:
        position.pop(move.captured_square, None)

    position[move.to_square] = (
        moving_piece.promote_to(move.promote_to) if move.promote_to else moving_piece
    )

    # castling: the king move is the move itself, the rook comes along
    if move.castling_direction is not None:
        rule = CASTLING_RULES[move.castling_direction]
        position[rule.rook_to] = position.pop(rule.rook_from)

    resets_clock = moving_piece.type == PieceType.PAWN or move.is_capture
    # a turn is complete once black has moved
    full_move_number = (
        board.full_move_number + 1
        if board.side_to_move == Color.BLACK
        else board.full_move_number
    )
    return Board(
        position=position,
        side_to_move=board.side_to_move.opponent,
        castling_rights=revoke_castling_rights(board.castling_rights, move, moving_piece),
        en_passant_square=en_passant_target(move),
        half_move_clock=0 if resets_clock else board.half_move_clock + 1,
        full_move_number=full_move_number,
    )


def revoke_castling_rights(
    rights: frozenset[CastlingDirection], move: Move, moving_piece: Piece
) -> frozenset[CastlingDirection]:
    """
    Checks which rights should get revoked
    ----

    1. Moving your king (castling included) --> revoke both of your rights
    2. Moving away from a rook's starting square --> that rook moved, revoke the right in its direction
    3. Moving onto a rook's starting square --> that rook got captured, revoke the right in its direction

    Once revoked, a right never comes back.
    """
    if not rights:
        return rights

    revoked: set[CastlingDirection] = set()
    if moving_piece.type == PieceType.KING:
        revoked.update(CASTLING_DIRECTIONS[moving_piece.color])
    for square in (move.from_square, move.to_square):
        if square in ROOK_HOME_SQUARES:
            revoked.add(ROOK_HOME_SQUARES[square])
    return rights - revoked


def en_passant_target(move: Move) -> Optional[Square]:
    """The square skipped over by a double step. Only available for the very next move."""
    if not move.is_double_step:
        return None
    return Square(move.from_square.file, (move.from_square.rank + move.to_square.rank) // 2)
