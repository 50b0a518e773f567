"""
Board snapshots as FEN strings.

FEN, or Forsyth-Edwards Notation, is a standard notation for describing a particular board position of a chess game.
It holds all the necessary information to restart a game from a particular position.

<board position string> <active color> <castling rights> <en passant square> <# half move clock> <number turns played>

* The board position is read from the 8th rank down to the 1st, a-file first. Ranks are separated by slashes,
    letters denote pieces (capital letters for the white pieces), digits a number of consecutive empty squares.
* The active color is either "w" or "b"
* Castling rights are denoted as "k" for king-side or "q" for queen-side. Capital letters for the white pieces, small letters for the black pieces.
    In the starting position: KQkq (all rights available), and "-" once all rights have been revoked.
* The en passant square is the square a pawn skipped over on a double step. If not available a "-" is used.
* The half move clock counts the number of moves made since the last pawn move or capture.
* The number of turns starts at 1 and increments after every move black makes.

ex) The standard starting position:
rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1
"""

from dataclasses import dataclass
from string import ascii_lowercase
from typing import Mapping, Optional

from src.chess.castling import CASTLING_ORDER, CastlingDirection
from src.chess.pieces import FEN_TO_PIECE, Piece
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.exceptions import InvalidFENError
from src.core.shared_types import Color

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"


def castling_from_fen(castle_fen: str) -> frozenset[CastlingDirection]:
    """parse the part of the FEN string that encodes castling rights"""
    return frozenset(
        direction for direction in CastlingDirection if direction.value in castle_fen
    )


def castling_to_fen(castling_rights: frozenset[CastlingDirection]) -> str:
    """create the part of the FEN string that encodes castling rights"""
    castling_chars = "".join(
        [direction.value for direction in CASTLING_ORDER if direction in castling_rights]
    )
    return castling_chars or "-"


def is_valid_fen(fen: str) -> bool:
    """
    Check if given string follows proper FEN notation.

    NOTE: Only the syntax is checked here. Whether the position obeys the rules of chess is up to the Board.
    """

    # there should be 6 parts to the string
    parts = fen.split(" ")
    if len(parts) != 6:
        return False

    position, color, castling, en_passant, half_move_counter, full_move_counter = parts
    return (
        is_valid_position(position)
        and is_valid_color_code(color)
        and is_valid_castling_rights(castling)
        and is_valid_en_passant(en_passant)
        and is_valid_move_counter(half_move_counter)
        and is_valid_move_counter(full_move_counter)
    )


def is_valid_position(position: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    num_files, num_ranks = BOARD_DIMENSIONS
    rank_fens = position.split("/")
    if len(rank_fens) != num_ranks:
        return False

    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            # make sure every character is valid
            if character.isdigit():
                file_count += int(character)
            elif character.lower() in FEN_TO_PIECE:
                file_count += 1
            else:
                # immediately invalidate if the character is anything else
                return False

        # make sure you are creating a correctly sized board
        if file_count != num_files:
            return False
    return True


def is_valid_color_code(color: str) -> bool:
    return color in {"w", "b"}


def is_valid_castling_rights(castling: str) -> bool:
    """A valid castling encoding lists the rights in the order KQkq (each at most once) or is a '-' if all rights have been revoked."""
    if castling == "-":
        return True
    order = "".join(direction.value for direction in CASTLING_ORDER)
    remaining = order
    for character in castling:
        idx = remaining.find(character)
        if idx == -1:
            return False
        remaining = remaining[idx + 1 :]
    return bool(castling)


def is_valid_en_passant(en_passant: str) -> bool:
    """Valid en passant square encoding should be a square on the 3rd or 6th rank or a '-'"""
    if en_passant == "-":
        return True
    return is_valid_square(en_passant) and en_passant[1] in {"3", "6"}


def is_valid_square(square: str) -> bool:
    """Valid square should be a letter for the file + a number for the rank"""
    num_files, num_ranks = BOARD_DIMENSIONS

    # NOTE: The following works as long as we do not go beyond 26 files. Seems like a reasonable assumption for now ;-)
    if len(square) < 2:
        return False
    file_char, rank_char = square[0], square[1:]
    allowed_file_names = ascii_lowercase[:num_files]
    if file_char not in allowed_file_names:
        return False

    if not rank_char.isdigit():
        return False

    if not (1 <= int(rank_char) <= num_ranks):
        return False

    return True


def is_valid_move_counter(counter: str) -> bool:
    return counter.isdigit()


def position_from_fen(position: str) -> dict[Square, Piece]:
    """Piece placement: only occupied squares are present in the mapping."""
    placement: dict[Square, Piece] = {}
    for rank_idx, fen_one_rank in enumerate(position.split("/")):
        # FEN string is read from top rank (8th) to bottom rank (1st)
        rank = BOARD_DIMENSIONS[1] - 1 - rank_idx
        # ... but the first character is the a-file, so reads in normal direction
        file = 0
        for character in fen_one_rank:
            if character.isalpha():
                placement[Square(file, rank)] = Piece.from_fen(character)
                file += 1
            else:
                # A number denotes the amount of empty squares after each other
                file += int(character)
    return placement


def position_to_fen(placement: Mapping[Square, Piece]) -> str:
    """Ranks are separated by slashes in FEN string."""
    return "/".join(
        _rank_to_fen(placement, rank)
        for rank in range(BOARD_DIMENSIONS[1] - 1, -1, -1)
    )


def _rank_to_fen(placement: Mapping[Square, Piece], rank: int) -> str:
    """FEN string of a single rank"""
    fen_characters: list[str] = []
    empty_count = 0
    for file in range(BOARD_DIMENSIONS[0]):
        piece = placement.get(Square(file, rank))
        if piece is None:
            empty_count += 1
            continue
        if empty_count > 0:
            fen_characters.append(str(empty_count))
            empty_count = 0
        fen_characters.append(piece.to_fen())

    # if the entire rank is empty, then we still place this number in the string
    if empty_count > 0:
        fen_characters.append(str(empty_count))
    return "".join(fen_characters)


@dataclass(frozen=True)
class FENState:
    """The six fields of a FEN string, parsed into data."""

    placement: Mapping[Square, Piece]
    color_to_move: Color
    castling_rights: frozenset[CastlingDirection]
    en_passant_square: Optional[Square]
    half_move_clock: int
    num_turns: int

    @classmethod
    def from_fen(cls, fen: str) -> "FENState":
        """Parse the FEN into data"""

        # raise an exception if invalid FEN:
        if not is_valid_fen(fen):
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen}")

        # extract the different components. FEN is space separated
        (
            position,
            active_color,
            castling_str,
            en_passant_algebraic,
            half_move_clock,
            num_turns,
        ) = fen.split(" ")

        en_passant_square = (
            Square.from_algebraic(en_passant_algebraic)
            if en_passant_algebraic != "-"
            else None
        )
        return cls(
            placement=position_from_fen(position),
            color_to_move=Color.WHITE if active_color == "w" else Color.BLACK,
            castling_rights=castling_from_fen(castling_str),
            en_passant_square=en_passant_square,
            half_move_clock=int(half_move_clock),
            num_turns=int(num_turns),
        )

    def to_fen(self) -> str:
        """reverse operation: write a FEN from the given data"""
        active_color = "w" if self.color_to_move == Color.WHITE else "b"
        en_passant_algebraic = (
            self.en_passant_square.to_algebraic()
            if self.en_passant_square is not None
            else "-"
        )
        return (
            f"{position_to_fen(self.placement)} {active_color} {castling_to_fen(self.castling_rights)} "
            f"{en_passant_algebraic} {self.half_move_clock} {self.num_turns}"
        )
