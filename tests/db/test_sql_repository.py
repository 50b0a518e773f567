"""Unit tests for src/db/sql_repository.py"""

from uuid import uuid4

from sqlalchemy.orm import Session

from src.core.models import GameModel
from src.core.shared_types import Color, Status
from src.db.sql_repository import SQLGameRepository

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
AFTER_E4_FEN = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"


def make_model() -> GameModel:
    return GameModel(
        starting_fen=STARTING_FEN,
        current_fen=AFTER_E4_FEN,
        moves_uci=["e2e4"],
        undone_uci=["e7e5"],
        status=Status.IN_PROGRESS.value,
    )


def test_create_game(db_session_repo: Session) -> None:
    """Conversion from a GameModel to DBGame for a new entry to the database."""
    model = make_model()
    repo = SQLGameRepository(db_session_repo)
    record_in_db, _ = repo.create_game(model)
    assert isinstance(record_in_db, GameModel)
    assert record_in_db == model


def test_get_game_by_id(db_session_repo: Session) -> None:
    """Create a game, then fetch it from db."""
    repo = SQLGameRepository(db_session_repo)
    expected_game, game_id = repo.create_game(make_model())
    game_found = repo.get_game(game_id)
    assert isinstance(game_found, GameModel)
    assert game_found == expected_game


def test_get_unknown_game(db_session_repo: Session) -> None:
    """
    Should return None if ID does not match anything in database.

    NOTE with an empty database, any id is a valid test case.
    """
    repo = SQLGameRepository(db_session_repo)
    assert repo.get_game(uuid4()) is None

    # Now do it with creating a game, but retrieving from the wrong ID
    repo.create_game(make_model())
    assert repo.get_game(uuid4()) is None


def test_update_game(db_session_repo: Session) -> None:
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(make_model())

    finished = GameModel(
        starting_fen="k7/6RR/8/8/8/8/K7/8 w - - 0 1",
        current_fen="k6R/6R1/8/8/8/8/K7/8 b - - 1 1",
        moves_uci=["h7h8"],
        status=Status.CHECKMATE.value,
        winner=Color.WHITE.value,
    )
    updated = repo.update_game(game_id, finished)
    assert updated == finished
    assert repo.get_game(game_id) == finished


def test_update_appends_moves(db_session_repo: Session) -> None:
    """The move lists are JSON columns: replaced lists must be persisted."""
    repo = SQLGameRepository(db_session_repo)
    model, game_id = repo.create_game(make_model())
    model.moves_uci.append("e7e5")
    model.undone_uci.clear()
    repo.update_game(game_id, model)

    db_session_repo.expire_all()
    stored = repo.get_game(game_id)
    assert stored is not None
    assert stored.moves_uci == ["e2e4", "e7e5"]
    assert stored.undone_uci == []


def test_update_unknown_game(sql_repository: SQLGameRepository) -> None:
    assert sql_repository.update_game(uuid4(), make_model()) is None


def test_delete_game(sql_repository: SQLGameRepository) -> None:
    repo = sql_repository
    model, game_id = repo.create_game(make_model())
    deleted = repo.delete_game(game_id)
    assert deleted == model
    assert repo.get_game(game_id) is None
    assert repo.delete_game(game_id) is None
