"""
Storage of games by id, as the service layer sees it (implemented with SQLAlchemy in sql_repository.py).

A stored game is a GameModel: the starting FEN, the UCI moves played and the UCI moves undone (the redo stack).
The current FEN, status and winner are stored alongside, but the service always rebuilds the Game by replaying.
"""

from typing import Protocol
from uuid import UUID

from src.core.models import GameModel


class GameRepository(Protocol):
    def get_game(self, game_id: UUID) -> GameModel | None:
        """The stored game, or None for an unknown id."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store a new game. Returns what was stored together with its freshly generated id."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Overwrite the moves, redo stack and derived fields after a command. None for an unknown id."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game, returning its last stored state (None if there was nothing to remove)."""
        ...
