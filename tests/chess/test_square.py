"""Unit tests for /src/chess/square.py"""

from string import ascii_lowercase

import pytest

from src.chess.square import ALL_SQUARES, BOARD_DIMENSIONS, Square


@pytest.mark.parametrize(
    "file, rank, notation",
    [
        (file, rank, f"{ascii_lowercase[file]}{rank + 1}")
        for file in range(8)
        for rank in range(8)
    ],
)
def test_creating_from_algebraic(file: int, rank: int, notation: str) -> None:
    """Simply checks if the notation for 'a1' indeed maps to file 0, rank 0, etc."""
    square = Square.from_algebraic(notation)
    assert square.file == file
    assert square.rank == rank
    assert square.to_algebraic() == notation


@pytest.mark.parametrize("notation", ["", "a", "i1", "a9", "a0", "e44", "11", "E4"])
def test_invalid_square_names(notation: str) -> None:
    with pytest.raises(ValueError):
        Square.from_algebraic(notation)


def test_square_within_bounds() -> None:
    """happy case: squares within the dimensions of the board"""
    for file in range(BOARD_DIMENSIONS[0]):
        for rank in range(BOARD_DIMENSIONS[1]):
            assert Square(file, rank).is_within_bounds()


def test_square_out_of_bounds() -> None:
    assert not Square(BOARD_DIMENSIONS[0], BOARD_DIMENSIONS[1]).is_within_bounds()
    assert not Square(-1, 0).is_within_bounds()
    assert not Square(0, 8).is_within_bounds()


def test_square_ordering_is_rank_first() -> None:
    """a1 < h1 < a2: iteration goes rank by rank"""
    a1, h1, a2 = (Square.from_algebraic(name) for name in ("a1", "h1", "a2"))
    assert a1 < h1 < a2
    assert sorted([a2, h1, a1]) == [a1, h1, a2]


def test_all_squares() -> None:
    assert len(ALL_SQUARES) == 64
    assert len(set(ALL_SQUARES)) == 64
    assert list(ALL_SQUARES) == sorted(ALL_SQUARES)
    assert ALL_SQUARES[0] == Square.from_algebraic("a1")
    assert ALL_SQUARES[-1] == Square.from_algebraic("h8")


def test_square_colors() -> None:
    assert not Square.from_algebraic("a1").is_light()
    assert Square.from_algebraic("h1").is_light()
    assert Square.from_algebraic("d1").is_light()
    assert not Square.from_algebraic("e1").is_light()


def test_offset() -> None:
    assert Square.from_algebraic("e4").offset(1, 2) == Square.from_algebraic("f6")
    assert not Square.from_algebraic("h8").offset(1, 0).is_within_bounds()
