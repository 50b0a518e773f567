"""
Custom exceptions.

Everything a caller is expected to recover from derives from ChessError.
BoardInvariantError is the exception: it signals a defect in the engine itself.
"""


class ChessError(Exception):
    """Base class for all recoverable errors raised by the application."""


# --- MOVES ---
class IllegalMoveError(ChessError):
    """The attempted move is not in the set of legal moves for the current board."""


class NotYourTurnError(IllegalMoveError):
    """Tried to move a piece of the side that is not to move."""


class GameOverError(IllegalMoveError):
    """The game has ended. No more moves are accepted."""


# --- GAME STATE ---
class GameStateError(ChessError):
    """Operation not allowed in the current state of the game."""


class NoHistoryError(GameStateError):
    """Nothing to undo (or redo)."""


# --- PARSING / VALIDATION ---
class InvalidFENError(ChessError):
    """String cannot be interpreted as a (valid) FEN snapshot."""


class InvalidRequestError(ChessError):
    """Request data could not be validated."""


# --- PERSISTENCE ---
class RepositoryError(ChessError):
    """Record could not be found / stored."""


# --- INTERNAL ---
class BoardInvariantError(AssertionError):
    """A board breaks the rules every position must obey. Never reachable through legal play."""
