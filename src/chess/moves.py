"""
Geometry/Base movement and capturing/attacking rules

Key idea: one movement rule and one attack rule per piece type, selected by an exhaustive match on PieceType.


Legality (king safety) is checked later by the generator
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, Self, assert_never

from src.chess.castling import CastlingDirection
from src.chess.pieces import FEN_TO_PIECE, PIECE_TO_FEN, PROMOTION_OPTIONS, Piece
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.shared_types import Color, PieceType


class Board(Protocol):
    """Just the parts the movement strategies need"""

    @property
    def en_passant_square(self) -> Optional[Square]: ...

    def piece_at(self, square: Square) -> Optional[Piece]: ...


Vector = tuple[int, int]

KNIGHT_DELTAS: tuple[Vector, ...] = (
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
)
KING_DELTAS: tuple[Vector, ...] = (
    (0, 1),
    (0, -1),
    (1, 0),
    (-1, 0),
    (1, 1),
    (1, -1),
    (-1, 1),
    (-1, -1),
)
DIAGONALS: tuple[Vector, ...] = ((1, 1), (-1, 1), (1, -1), (-1, -1))
STRAIGHTS: tuple[Vector, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))


@dataclass(frozen=True)
class Move:
    """
    A move, as generated for one specific board.

    `generated_from` holds the snapshot key of that board: moves from different boards never compare equal,
    so a stale move cannot be replayed on a later position.
    """

    from_square: Square
    to_square: Square
    promote_to: Optional[PieceType] = None
    is_capture: bool = False
    captured_square: Optional[Square] = None
    castling_direction: Optional[CastlingDirection] = None
    is_double_step: bool = False
    generated_from: str = field(default="", repr=False)

    @property
    def is_en_passant(self) -> bool:
        return self.is_capture and self.captured_square != self.to_square

    def to_uci(self) -> str:
        """
        Universal Chess Interface notation

        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)
        * "e1g1": the king castles king side
        """
        piece_char = PIECE_TO_FEN[self.promote_to] if self.promote_to else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{piece_char}"


def parse_uci(uci: str) -> tuple[Square, Square, Optional[PieceType]]:
    """Split a UCI string into (from, to, promotion). Which Move it is, is up to the legal move set."""
    if len(uci) not in (4, 5):
        raise ValueError(f"Cannot interpret {uci!r} as a UCI move.")
    from_sq = Square.from_algebraic(uci[:2])
    to_sq = Square.from_algebraic(uci[2:4])
    if len(uci) == 4:
        return from_sq, to_sq, None

    promotion = FEN_TO_PIECE.get(uci[4].lower())
    if promotion not in PROMOTION_OPTIONS:
        raise ValueError(f"Cannot promote into {uci[4]!r} in UCI move {uci!r}.")
    return from_sq, to_sq, promotion


@dataclass(frozen=True)
class AcceptedMove:
    """Snapshot of a move that has been played: what moved, what got taken and how it is written down."""

    move: Move
    moving_piece: Piece
    captured_piece: Optional[Piece]
    san: str

    @classmethod
    def from_move_and_board(cls, move: Move, board: Board, san: str) -> Self:
        """NOTE: board is the position BEFORE the move was made."""
        moving_piece = board.piece_at(move.from_square)
        assert moving_piece is not None, f"No piece to move on {move.from_square}"
        captured_piece = (
            board.piece_at(move.captured_square)
            if move.captured_square is not None
            else None
        )
        return cls(move, moving_piece, captured_piece, san)

    @property
    def color(self) -> Color:
        return self.moving_piece.color


def pawn_direction(color: Color) -> int:
    """White moves UP the board, black moves DOWN"""
    return 1 if color == Color.WHITE else -1


def pawn_start_rank(color: Color) -> int:
    return 1 if color == Color.WHITE else BOARD_DIMENSIONS[1] - 2


def promotion_rank(color: Color) -> int:
    return BOARD_DIMENSIONS[1] - 1 if color == Color.WHITE else 0


def _capture(from_square: Square, target_square: Square) -> Move:
    return Move(
        from_square=from_square,
        to_square=target_square,
        is_capture=True,
        captured_square=target_square,
    )


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Square, board: Board, directions: tuple[Vector, ...]
) -> list[Move]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.
    """
    piece = board.piece_at(square)
    assert piece is not None

    moves: list[Move] = []
    for df, dr in directions:
        target_square = square.offset(df, dr)
        while target_square.is_within_bounds():
            occupant = board.piece_at(target_square)
            if occupant is not None:
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if occupant.color != piece.color:
                    moves.append(_capture(square, target_square))
                break

            moves.append(Move(from_square=square, to_square=target_square))
            target_square = target_square.offset(df, dr)
    return moves


def single_step_move(
    square: Square, board: Board, deltas: tuple[Vector, ...]
) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just can move a single step along a direction"""
    piece = board.piece_at(square)
    assert piece is not None

    moves: list[Move] = []
    for df, dr in deltas:
        target_square = square.offset(df, dr)
        if not target_square.is_within_bounds():
            continue

        occupant = board.piece_at(target_square)
        if occupant is None:
            moves.append(Move(from_square=square, to_square=target_square))
        elif occupant.color != piece.color:
            moves.append(_capture(square, target_square))
    return moves


def candidate_pawn_moves(square: Square, board: Board) -> list[Move]:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - It can move by two in their first move (so when on their starting rank), if both squares are empty
    - takes diagonally, onto an opponent's piece or onto the en passant square
    - promotes when reaching the last rank (one move per piece type to promote into)
    """
    piece = board.piece_at(square)
    assert piece is not None
    forward = pawn_direction(piece.color)

    moves: list[Move] = []
    one_step = square.offset(0, forward)
    if one_step.is_within_bounds() and board.piece_at(one_step) is None:
        moves.append(Move(from_square=square, to_square=one_step))
        two_steps = one_step.offset(0, forward)
        if square.rank == pawn_start_rank(piece.color) and board.piece_at(two_steps) is None:
            moves.append(
                Move(from_square=square, to_square=two_steps, is_double_step=True)
            )

    # pawns take diagonally:
    for df in (-1, 1):
        target_square = square.offset(df, forward)
        if not target_square.is_within_bounds():
            continue
        occupant = board.piece_at(target_square)
        if occupant is not None and occupant.color != piece.color:
            moves.append(_capture(square, target_square))
        elif target_square == board.en_passant_square:
            # the pawn that gets taken stands next to ours, behind the en passant square
            taken_square = Square(target_square.file, square.rank)
            if board.piece_at(taken_square) != Piece(PieceType.PAWN, piece.color.opponent):
                continue
            moves.append(
                Move(
                    from_square=square,
                    to_square=target_square,
                    is_capture=True,
                    captured_square=taken_square,
                )
            )

    if one_step.rank == promotion_rank(piece.color):
        return [promotion for move in moves for promotion in expand_promotions(move)]
    return moves


def candidate_knight_moves(square: Square, board: Board) -> list[Move]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(square, board, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Square, board: Board) -> list[Move]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(square, board, DIAGONALS)


def candidate_rook_moves(square: Square, board: Board) -> list[Move]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, STRAIGHTS)


def candidate_queen_moves(square: Square, board: Board) -> list[Move]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return candidate_bishop_moves(square, board) + candidate_rook_moves(square, board)


def candidate_king_moves(square: Square, board: Board) -> list[Move]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (handled by the generator, as it needs to know about attacked squares).
    """
    return single_step_move(square, board, KING_DELTAS)


def expand_promotions(pawn_move: Move) -> list[Move]:
    """Return multiple copies of the pawn move with the piece type to promote into filled in."""
    return [
        Move(
            from_square=pawn_move.from_square,
            to_square=pawn_move.to_square,
            promote_to=piece_type,
            is_capture=pawn_move.is_capture,
            captured_square=pawn_move.captured_square,
        )
        for piece_type in PROMOTION_OPTIONS
    ]


# -- MOVEMENT RULES PER PIECE TYPE ---
CandidateMovesFn = Callable[[Square, Board], list[Move]]


def movement_rule(piece_type: PieceType) -> CandidateMovesFn:
    match piece_type:
        case PieceType.PAWN:
            return candidate_pawn_moves
        case PieceType.KNIGHT:
            return candidate_knight_moves
        case PieceType.BISHOP:
            return candidate_bishop_moves
        case PieceType.ROOK:
            return candidate_rook_moves
        case PieceType.QUEEN:
            return candidate_queen_moves
        case PieceType.KING:
            return candidate_king_moves
        case _:
            assert_never(piece_type)


MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    piece_type: movement_rule(piece_type) for piece_type in PieceType
}


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    square: Square,
    by_color: Color,
    by_piece_type: PieceType,
    board: Board,
    directions: tuple[Vector, ...],
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    Similar to raycasting moves.
    However, where `raycasting_move()` determines
    _"What is the line-of-sight of the piece standing on the specified square?"_

    This function determines:
    _"Is the specified square in the line-of-sight of a piece of the specified color and type
    that is allowed to move along the given direction?"_
    """
    for df, dr in directions:
        target_square = square.offset(df, dr)
        while target_square.is_within_bounds():
            piece_found = board.piece_at(target_square)
            if piece_found is not None:
                # only the first piece found along the ray can attack the square
                if piece_found == Piece(by_piece_type, by_color):
                    return True
                break
            target_square = target_square.offset(df, dr)
    return False


def single_step_attack(
    square: Square,
    by_color: Color,
    by_piece_type: PieceType,
    board: Board,
    deltas: tuple[Vector, ...],
) -> bool:
    """
    Raycasting is for sliding pieces. This is the equivalent for pawns, kings, and knights that just can move a single step along a direction.
    """
    attacker = Piece(by_piece_type, by_color)
    for df, dr in deltas:
        target_square = square.offset(df, dr)
        if target_square.is_within_bounds() and board.piece_at(target_square) == attacker:
            return True
    return False


def is_attacked_by_pawn(square: Square, by_color: Color, board: Board) -> bool:
    """
    Pawns take diagonally
    ----

    NOTE: Pawn moves are not symmetric, so to check IF a white pawn could take on your square -->
    Must look one rank DOWN the board. That is, you are asking "Could a white pawn, that moves UP the board, take on the specified square?"
    """
    backwards = -pawn_direction(by_color)
    return single_step_attack(
        square, by_color, PieceType.PAWN, board, ((1, backwards), (-1, backwards))
    )


def is_attacked_by_knight(square: Square, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KNIGHT, board, KNIGHT_DELTAS)


def is_attacked_by_bishop(square: Square, by_color: Color, board: Board) -> bool:
    return raycasting_attack(square, by_color, PieceType.BISHOP, board, DIAGONALS)


def is_attacked_by_rook(square: Square, by_color: Color, board: Board) -> bool:
    return raycasting_attack(square, by_color, PieceType.ROOK, board, STRAIGHTS)


def is_attacked_by_queen(square: Square, by_color: Color, board: Board) -> bool:
    return raycasting_attack(
        square, by_color, PieceType.QUEEN, board, STRAIGHTS + DIAGONALS
    )


def is_attacked_by_king(square: Square, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KING, board, KING_DELTAS)


# --- ATTACKING RULES PER PIECE TYPE ---
IsAttackedFn = Callable[[Square, Color, Board], bool]


def attack_rule(piece_type: PieceType) -> IsAttackedFn:
    match piece_type:
        case PieceType.PAWN:
            return is_attacked_by_pawn
        case PieceType.KNIGHT:
            return is_attacked_by_knight
        case PieceType.BISHOP:
            return is_attacked_by_bishop
        case PieceType.ROOK:
            return is_attacked_by_rook
        case PieceType.QUEEN:
            return is_attacked_by_queen
        case PieceType.KING:
            return is_attacked_by_king
        case _:
            assert_never(piece_type)


ATTACK_RULES: dict[PieceType, IsAttackedFn] = {
    piece_type: attack_rule(piece_type) for piece_type in PieceType
}
