"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)
FILE_NAMES = "abcdefgh"


@total_ordering
@dataclass(frozen=True)
class Square:
    """Zero-based coordinates: a1 is (0, 0), h8 is (7, 7). Squares sort rank by rank, a-file first."""

    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (0,0) - (7,7)"""
        if len(sq) != 2 or sq[0] not in FILE_NAMES or not sq[1].isdigit():
            raise ValueError(f"Cannot interpret {sq!r} as a square name.")
        square = cls(FILE_NAMES.index(sq[0]), int(sq[1]) - 1)
        if not square.is_within_bounds():
            raise ValueError(f"Square {sq!r} is not on the board.")
        return square

    def to_algebraic(self) -> str:
        return f"{FILE_NAMES[self.file]}{self.rank + 1}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.file < BOARD_DIMENSIONS[0]) and (
            0 <= self.rank < BOARD_DIMENSIONS[1]
        )

    def offset(self, df: int, dr: int) -> Square:
        """The square df files and dr ranks away. Might be off the board: check with is_within_bounds()"""
        return Square(self.file + df, self.rank + dr)

    def is_light(self) -> bool:
        """a1 is a dark square"""
        return (self.file + self.rank) % 2 == 1

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Square):
            return NotImplemented
        return (self.rank, self.file) < (other.rank, other.file)

    def __str__(self) -> str:
        return self.to_algebraic()


ALL_SQUARES: tuple[Square, ...] = tuple(
    Square(file, rank)
    for rank in range(BOARD_DIMENSIONS[1])
    for file in range(BOARD_DIMENSIONS[0])
)
