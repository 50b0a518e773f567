"""Unit tests for /src/chess/notation.py"""

import pytest

from src.chess.board import Board
from src.chess.generator import generate_legal_moves
from src.chess.notation import piece_letter, to_san
from src.core.shared_types import PieceType


def san_of(fen: str, uci: str) -> str:
    board = Board.from_fen(fen)
    legal_moves = generate_legal_moves(board)
    move = next(m for m in legal_moves if m.to_uci() == uci)
    return to_san(board, move, legal_moves)


@pytest.mark.parametrize(
    "piece_type, letter",
    [
        (PieceType.PAWN, ""),
        (PieceType.KNIGHT, "N"),
        (PieceType.BISHOP, "B"),
        (PieceType.ROOK, "R"),
        (PieceType.QUEEN, "Q"),
        (PieceType.KING, "K"),
    ],
)
def test_piece_letter(piece_type: PieceType, letter: str) -> None:
    assert piece_letter(piece_type) == letter


@pytest.mark.parametrize(
    "fen, uci, san",
    [
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1", "e2e4", "e4"),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1", "g1f3", "Nf3"),
        ("rnbqkbnr/ppp1pppp/8/3p4/4P3/8/PPPP1PPP/RNBQKBNR w KQkq d6 0 2", "e4d5", "exd5"),
        ("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 2", "e5d6", "exd6"),
        ("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1", "e1g1", "O-O"),
        ("r3k2r/8/8/8/8/8/8/R3K2R b KQkq - 0 1", "e8c8", "O-O-O"),
        ("4k3/P7/8/8/8/8/8/4K3 w - - 0 1", "a7a8q", "a8=Q+"),
        ("4k3/P7/8/8/8/8/8/4K3 w - - 0 1", "a7a8n", "a8=N"),
        ("1n2k3/P7/8/8/8/8/8/4K3 w - - 0 1", "a7b8r", "axb8=R+"),
    ],
)
def test_san(fen: str, uci: str, san: str) -> None:
    assert san_of(fen, uci) == san


@pytest.mark.parametrize(
    "fen, uci, san",
    [
        # knights on b1 and f1 can both reach d2: file tells them apart
        ("4k3/8/8/8/8/8/8/1N2KN2 w - - 0 1", "b1d2", "Nbd2"),
        # rooks on a1 and a5 can both reach a3: same file, rank tells them apart
        ("4k3/8/8/R7/8/8/8/R3K3 w - - 0 1", "a1a3", "R1a3"),
        # queens on d1, h1 and h5 all reach f3: h5 shares the file of h1, d1 shares its rank
        ("8/8/1k6/7Q/8/8/8/3QK2Q w - - 0 1", "h1f3", "Qh1f3"),
        # only the a1 rook reaches d1, the king on e1 blocks the other one
        ("4k3/8/8/8/8/8/8/R3K2R w - - 0 1", "a1d1", "Rd1"),
    ],
)
def test_san_disambiguation(fen: str, uci: str, san: str) -> None:
    assert san_of(fen, uci) == san


def test_checkmate_suffix() -> None:
    fen = "r1bqkb1r/pppp1ppp/2n2n2/4p2Q/2B1P3/8/PPPP1PPP/RNB1K1NR w KQkq - 4 4"
    assert san_of(fen, "h5f7") == "Qxf7#"


def test_check_suffix() -> None:
    assert san_of("4k3/8/8/8/8/8/8/4K2R w - - 0 1", "h1h8") == "Rh8+"


def test_back_rank_mate() -> None:
    assert san_of("6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1", "a1a8") == "Ra8#"
