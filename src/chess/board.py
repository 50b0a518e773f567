"""The Game board: the configuration of pieces on the board plus the state needed to know which moves are allowed next.

Boards are immutable. Making a move produces a new Board (see applier.py).
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Self

from src.chess.castling import CastlingDirection
from src.chess.fen import STARTING_FEN, FENState
from src.chess.moves import ATTACK_RULES, promotion_rank
from src.chess.pieces import Piece
from src.chess.square import ALL_SQUARES, Square
from src.core.exceptions import BoardInvariantError, InvalidFENError
from src.core.shared_types import Color, PieceType

MAX_PIECES_PER_COLOR = 16


@dataclass(frozen=True)
class Board:
    """
    Occupied squares plus the state that decides which moves are allowed next.

    `position` is a read-only view over a private copy: a Board in a game's history cannot be changed afterwards.
    """

    position: Mapping[Square, Piece]
    side_to_move: Color = Color.WHITE
    castling_rights: frozenset[CastlingDirection] = frozenset(CastlingDirection)
    en_passant_square: Optional[Square] = None
    half_move_clock: int = 0
    full_move_number: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", MappingProxyType(dict(self.position)))

    def __hash__(self) -> int:
        return hash(self.to_fen())

    # --- CREATION / SNAPSHOTS ---
    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Construct a board from a full FEN string. Raises InvalidFENError for positions that break the rules."""
        state = FENState.from_fen(fen)
        board = cls(
            position=state.placement,
            side_to_move=state.color_to_move,
            castling_rights=state.castling_rights,
            en_passant_square=state.en_passant_square,
            half_move_clock=state.half_move_clock,
            full_move_number=state.num_turns,
        )
        try:
            board.check_invariants()
        except BoardInvariantError as err:
            raise InvalidFENError(f"{fen!r} is not a legal position: {err}") from err

        # the side that just moved cannot have left its own king in check
        if board.is_check(board.side_to_move.opponent):
            raise InvalidFENError(
                f"{fen!r} is not a legal position: {board.side_to_move.opponent} is in check but it is not their move."
            )
        return board

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)

    def to_fen(self) -> str:
        return FENState(
            placement=self.position,
            color_to_move=self.side_to_move,
            castling_rights=self.castling_rights,
            en_passant_square=self.en_passant_square,
            half_move_clock=self.half_move_clock,
            num_turns=self.full_move_number,
        ).to_fen()

    def repetition_key(self) -> str:
        """Two positions are 'the same' for the repetition rule when placement, side to move, castling rights and en passant square agree."""
        return " ".join(self.to_fen().split(" ")[:4])

    # --- QUERIES ---
    def piece_at(self, square: Square) -> Optional[Piece]:
        return self.position.get(square)

    def pieces(self, color: Optional[Color] = None) -> list[tuple[Square, Piece]]:
        """Occupied squares (of one color, if given) in square order: a1, b1, ..., h8"""
        return [
            (square, self.position[square])
            for square in ALL_SQUARES
            if square in self.position
            and (color is None or self.position[square].color == color)
        ]

    def locate_pieces(self, piece_type: PieceType, color: Color) -> list[Square]:
        target = Piece(piece_type, color)
        return sorted(
            square for square, piece in self.position.items() if piece == target
        )

    def king_square(self, color: Color) -> Square:
        kings = self.locate_pieces(PieceType.KING, color)
        if len(kings) != 1:
            raise BoardInvariantError(f"Expected exactly one {color} king, found {len(kings)}.")
        return kings[0]

    def is_square_attacked(self, square: Square, by_color: Color) -> bool:
        """
        Could any piece of `by_color` take on this square?

        NOTE: Whether that capture would leave the attacker's own king in check does not matter here.
        """
        return any(rule(square, by_color, self) for rule in ATTACK_RULES.values())

    def is_check(self, color: Optional[Color] = None) -> bool:
        """Is the king of `color` (default: the side to move) under attack?"""
        color = color or self.side_to_move
        return self.is_square_attacked(self.king_square(color), color.opponent)

    def count_material(self) -> dict[Color, int]:
        """Tally the points of material each player has on the board"""
        return {
            color: sum(piece.points for _, piece in self.pieces(color))
            for color in Color
        }

    # --- INVARIANTS ---
    def check_invariants(self) -> None:
        """
        Rules every position must obey:

        * exactly one king per color
        * at most 16 pieces per color
        * no pawns on the first or last rank
        """
        for color in Color:
            own_pieces = self.pieces(color)
            kings = [square for square, piece in own_pieces if piece.type == PieceType.KING]
            if len(kings) != 1:
                raise BoardInvariantError(
                    f"Expected exactly one {color} king, found {len(kings)}."
                )
            if len(own_pieces) > MAX_PIECES_PER_COLOR:
                raise BoardInvariantError(
                    f"{color} has {len(own_pieces)} pieces, at most {MAX_PIECES_PER_COLOR} allowed."
                )

        back_ranks = {promotion_rank(Color.WHITE), promotion_rank(Color.BLACK)}
        for square, piece in self.pieces():
            if piece.type == PieceType.PAWN and square.rank in back_ranks:
                raise BoardInvariantError(f"Pawn found on {square}.")
