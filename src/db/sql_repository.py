"""Implementation of (Game)Repository using SQLAlchemy"""

import logging
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import GameModel
from src.db.schema import DBGame

logger = logging.getLogger(__name__)


class SQLGameRepository:
    """Games stored in a single SQL table, one row per game."""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        record = self._fetch_game(game_id)
        return None if record is None else self._to_model(record)

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Insert a new row. The id is generated here, not by the database."""
        record = DBGame(id=uuid4())
        self._write(record, game)
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        logger.debug("Stored new game %s", record.id)
        return self._to_model(record), record.id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        record = self._fetch_game(game_id)
        if record is None:
            return None
        self._write(record, game)
        self.db.commit()
        self.db.refresh(record)
        return self._to_model(record)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's row, returning what was stored (None if there was nothing)."""
        record = self._fetch_game(game_id)
        if record is None:
            return None
        deleted = self._to_model(record)
        self.db.delete(record)
        self.db.commit()
        logger.info("Deleted game %s", game_id)
        return deleted

    # -- helpers --
    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        return self.db.scalar(select(DBGame).where(DBGame.id == game_id))

    @staticmethod
    def _write(record: DBGame, game: GameModel) -> None:
        record.starting_fen = game.starting_fen
        record.current_fen = game.current_fen
        # always fresh lists: in-place changes of a JSON column are not tracked
        record.moves_uci = list(game.moves_uci)
        record.undone_uci = list(game.undone_uci)
        record.status = game.status
        record.winner = game.winner

    @staticmethod
    def _to_model(record: DBGame) -> GameModel:
        return GameModel(
            starting_fen=record.starting_fen,
            current_fen=record.current_fen,
            moves_uci=list(record.moves_uci),
            undone_uci=list(record.undone_uci),
            status=record.status,
            winner=record.winner,
        )
