"""
The Game class is the entrypoint into the domain layer for the service layer (and for any presentation layer embedding the engine).
It is responsible for orchestrating all the business logic required to play a turn:
validate the move against the legal move set, produce the next board, record it in the history and re-evaluate the status.

The history is a list of immutable Boards: undo is popping the last one, repetition detection is counting equal positions.
"""

import logging
from typing import Optional, Self

from src.chess.applier import apply_move
from src.chess.board import Board
from src.chess.draw import (
    RepetitionTracker,
    is_fifty_move_draw,
    is_insufficient_material,
)
from src.chess.generator import generate_legal_moves, legal_destinations
from src.chess.moves import AcceptedMove, Move, parse_uci
from src.chess.notation import to_san
from src.chess.pieces import Piece
from src.chess.square import ALL_SQUARES, Square
from src.core.exceptions import (
    GameOverError,
    GameStateError,
    IllegalMoveError,
    NoHistoryError,
    NotYourTurnError,
)
from src.core.models import GameModel
from src.core.shared_types import Color, PieceType, Status

logger = logging.getLogger(__name__)


class Game:
    """
    One game of chess.
    ----

    * boards: every position of the game, index 0 being the starting position
    * moves: the move that led to each position after the first (so always one shorter than boards)

    The status is never stored: it follows from the last board and the history.
    """

    def __init__(self, starting_board: Optional[Board] = None) -> None:
        self.boards: list[Board] = [starting_board or Board.starting_position()]
        self.moves: list[AcceptedMove] = []
        self._redo_stack: list[tuple[AcceptedMove, Board]] = []
        self._repetitions = RepetitionTracker(self.boards)
        self._legal_moves: Optional[list[Move]] = None

    # --- CREATION LOGIC ---
    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Start a game from a custom position."""
        return cls(Board.from_fen(fen))

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Rebuild a game by replaying its moves from the starting position. Undone moves end up on the redo stack again."""
        game = cls.from_fen(model.starting_fen)
        try:
            for uci in model.moves_uci:
                game.attempt_uci(uci)
            # the last undone move is the first one to redo
            for uci in reversed(model.undone_uci):
                game.attempt_uci(uci)
        except (IllegalMoveError, ValueError) as err:
            raise GameStateError(f"Stored game cannot be replayed: {err}") from err
        for _ in model.undone_uci:
            game.undo()
        return game

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        winner = self.winner
        return GameModel(
            starting_fen=self.starting_board.to_fen(),
            current_fen=self.board.to_fen(),
            moves_uci=[accepted.move.to_uci() for accepted in self.moves],
            undone_uci=[accepted.move.to_uci() for accepted, _ in self._redo_stack],
            status=self.status.value,
            winner=winner.value if winner else None,
        )

    # --- QUERIES ---
    @property
    def board(self) -> Board:
        return self.boards[-1]

    @property
    def starting_board(self) -> Board:
        return self.boards[0]

    @property
    def side_to_move(self) -> Color:
        return self.board.side_to_move

    @property
    def legal_moves(self) -> list[Move]:
        """Legal moves in the current position (computed once per position)."""
        if self._legal_moves is None:
            self._legal_moves = generate_legal_moves(self.board)
        return self._legal_moves

    @property
    def is_check(self) -> bool:
        return self.board.is_check()

    @property
    def status(self) -> Status:
        """
        Evaluated in this order:

        1. No legal moves: checkmate if in check, stalemate otherwise
        2. 100 half-moves without capture or pawn move
        3. Current position occurred three times
        4. Not enough material left to mate
        """
        board = self.board
        if not self.legal_moves:
            return Status.CHECKMATE if board.is_check() else Status.STALEMATE
        if is_fifty_move_draw(board):
            return Status.DRAW_FIFTY_MOVE
        if self._repetitions.is_threefold(board):
            return Status.DRAW_REPETITION
        if is_insufficient_material(board):
            return Status.DRAW_INSUFFICIENT_MATERIAL
        return Status.IN_PROGRESS

    @property
    def winner(self) -> Optional[Color]:
        """
        Only defined for checkmate.
        Given we know it is checkmate, the side to move just got mated and the opponent must be the winner
        """
        if self.status != Status.CHECKMATE:
            return None
        return self.side_to_move.opponent

    @property
    def move_history(self) -> list[str]:
        return [accepted.san for accepted in self.moves]

    @property
    def captured_pieces(self) -> dict[Color, list[Piece]]:
        """Pieces taken so far, grouped by the color that took them"""
        captured: dict[Color, list[Piece]] = {color: [] for color in Color}
        for accepted in self.moves:
            if accepted.captured_piece is not None:
                captured[accepted.color].append(accepted.captured_piece)
        return captured

    @property
    def can_undo(self) -> bool:
        return len(self.boards) > 1

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def position(self) -> dict[Square, Optional[Piece]]:
        """The full board, empty squares included, for rendering."""
        return {square: self.board.piece_at(square) for square in ALL_SQUARES}

    def legal_destinations(self, square: Square) -> list[Square]:
        """Where can the piece on this square go? Empty if there is nothing to move (or the game is over)."""
        if self.status.is_terminal:
            return []
        return legal_destinations(self.board, square)

    def status_line(self) -> str:
        """One line summary for display, ex. 'White to move' or 'Checkmate! Black wins!'"""
        status = self.status
        side = side_name(self.side_to_move)
        if status == Status.CHECKMATE:
            return f"Checkmate! {side_name(self.side_to_move.opponent)} wins!"
        if status == Status.STALEMATE:
            return "Stalemate!"
        if status.is_draw:
            return f"{status.value.capitalize()}!"
        if self.is_check:
            return f"{side} is in check!"
        return f"{side} to move"

    # --- COMMANDS ---
    def attempt_move(
        self,
        from_square: Square,
        to_square: Square,
        promotion: Optional[PieceType] = None,
    ) -> AcceptedMove:
        """
        Attempt to make a move
        -----

        1. make sure the game is still in progress
        2. make sure you move a piece of the side to move
        3. find the move in the set of legal moves (a pawn reaching the last rank needs a promotion choice)
        4. update the history and the status

        Any failure raises IllegalMoveError (or a subclass) and leaves the game untouched.
        """
        self._assert_in_progress()

        piece = self.board.piece_at(from_square)
        if piece is None:
            raise IllegalMoveError(f"There is no piece on {from_square} to move.")
        if piece.color != self.side_to_move:
            raise NotYourTurnError(
                f"It is not {piece.color}'s turn. Waiting for {self.side_to_move} to make a move first."
            )

        for move in self.legal_moves:
            if (
                move.from_square == from_square
                and move.to_square == to_square
                and move.promote_to == promotion
            ):
                return self._push(move)

        raise IllegalMoveError(self._rejection_reason(from_square, to_square, promotion))

    def attempt_uci(self, uci: str) -> AcceptedMove:
        """convenience method: move given in UCI notation, ex. 'e2e4' or 'a7a8q'"""
        from_square, to_square, promotion = parse_uci(uci)
        return self.attempt_move(from_square, to_square, promotion)

    def play(self, move: Move) -> AcceptedMove:
        """Play a Move object taken from `legal_moves`. Moves generated for an earlier position are rejected."""
        self._assert_in_progress()
        if move not in self.legal_moves:
            raise IllegalMoveError(
                f"Move {move.to_uci()} is not legal in the current position."
            )
        return self._push(move)

    def undo(self) -> AcceptedMove:
        """Take back the last move. It can be played again with redo()."""
        if not self.can_undo:
            raise NoHistoryError("Nothing to undo: the game is at its starting position.")
        board = self.boards.pop()
        accepted = self.moves.pop()
        self._repetitions.pop(board)
        self._redo_stack.append((accepted, board))
        self._legal_moves = None
        logger.debug("Took back %s", accepted.san)
        return accepted

    def redo(self) -> AcceptedMove:
        """Play the last undone move again."""
        if not self.can_redo:
            raise NoHistoryError("Nothing to redo.")
        accepted, board = self._redo_stack.pop()
        self._append(accepted, board)
        logger.debug("Replayed %s", accepted.san)
        return accepted

    def reset(self) -> None:
        """Back to the starting position, history and redo stack cleared."""
        starting_board = self.starting_board
        self.boards = [starting_board]
        self.moves = []
        self._redo_stack = []
        self._repetitions.clear()
        self._repetitions.push(starting_board)
        self._legal_moves = None
        logger.debug("Game reset to %s", starting_board.to_fen())

    # -- PRIVATE HELPERS ---
    def _assert_in_progress(self) -> None:
        status = self.status
        if status.is_terminal:
            raise GameOverError(f"Game is not in progress. status: {status}")

    def _push(self, move: Move) -> AcceptedMove:
        """Make a legal move: snapshot it, create the next board and record both."""
        board = self.board
        accepted = AcceptedMove.from_move_and_board(
            move, board, san=to_san(board, move, self.legal_moves)
        )
        new_board = apply_move(board, move)
        new_board.check_invariants()

        self._redo_stack.clear()
        self._append(accepted, new_board)
        logger.debug("%s played %s", accepted.color, accepted.san)

        status = self.status
        if status.is_terminal:
            logger.info("Game over after %s: %s", accepted.san, status)
        return accepted

    def _append(self, accepted: AcceptedMove, board: Board) -> None:
        self.boards.append(board)
        self.moves.append(accepted)
        self._repetitions.push(board)
        self._legal_moves = None

    def _rejection_reason(
        self, from_square: Square, to_square: Square, promotion: Optional[PieceType]
    ) -> str:
        """Human readable reason, for the one rejection that is easy to get wrong: the promotion choice."""
        reaches_square = [
            move
            for move in self.legal_moves
            if move.from_square == from_square and move.to_square == to_square
        ]
        if reaches_square and promotion is None:
            return f"Move {from_square}{to_square} needs a piece type to promote into."
        if reaches_square:
            return f"Cannot promote into a {promotion} with {from_square}{to_square}."
        return f"Move not allowed: {from_square}{to_square}"


def side_name(color: Color) -> str:
    return color.value.capitalize()
