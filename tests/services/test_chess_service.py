"""Unit tests for src/services/chess_service.py"""

from typing import Generator
from uuid import UUID, uuid4

import pytest

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    MoveResponse,
    RedoRequest,
    ResetRequest,
    UndoRequest,
)
from src.chess.fen import STARTING_FEN
from src.core.exceptions import (
    ChessError,
    GameOverError,
    IllegalMoveError,
    NoHistoryError,
    NotYourTurnError,
    RepositoryError,
)
from src.core.models import GameModel
from src.core.shared_types import Color, PieceType, Status
from src.services.chess_service import ChessService

# --- MOCK DEPENDENCIES ----
LADDER_MATE_FEN = "k7/6RR/8/8/8/8/K7/8 w - - 0 1"
PROMOTION_FEN = "4k3/P7/8/8/8/8/8/4K3 w - - 0 1"


class MockRepository:
    """Mock the GameRepository using a dictionary of game models."""

    def __init__(self) -> None:
        self._games: dict[UUID, GameModel] = {}

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        game_id = uuid4()
        self._games[game_id] = game
        return game, game_id

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        return self._games.get(game_id)

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        if game_id not in self._games:
            return None
        self._games[game_id] = game
        return game

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        return self._games.pop(game_id, None)

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._games.clear()


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def service(mock_repository: MockRepository) -> ChessService:
    return ChessService(mock_repository)


def make_moves(service: ChessService, game_id: UUID, *moves: str) -> MoveResponse:
    """Play moves given as 'e2e4' strings, return the last response."""
    response = None
    for move in moves:
        response = service.make_move(
            MoveRequest(game_id=game_id, from_square=move[:2], to_square=move[2:4])
        )
    assert response is not None
    return response


# --- SERVICE - CREATE NEW GAME ----
def test_create_a_new_game(
    service: ChessService, mock_repository: MockRepository
) -> None:
    """Check that new game is created, persisted in repo, and return has the appropriate information."""
    response = service.create_new_game(CreateGameRequest())

    # Check response structure
    assert isinstance(response, GameResponse)
    assert isinstance(response.game_id, UUID)

    # Check response data
    assert response.fen_state == STARTING_FEN
    assert response.starting_state == STARTING_FEN
    assert response.side_to_move == Color.WHITE
    assert response.status == Status.IN_PROGRESS
    assert response.status_line == "White to move"
    assert response.move_history == []
    assert response.captured_pieces == {Color.WHITE: [], Color.BLACK: []}
    assert len(response.board) == 64
    assert response.board["e1"] == "K"
    assert response.board["d8"] == "q"
    assert response.board["e4"] is None
    assert not response.can_undo
    assert not response.can_redo

    # Check persisted data
    stored_game = mock_repository.get_game(response.game_id)
    assert stored_game is not None
    assert stored_game.current_fen == STARTING_FEN
    assert stored_game.moves_uci == []
    assert stored_game.undone_uci == []
    assert stored_game.status == Status.IN_PROGRESS


def test_create_from_custom_position(service: ChessService) -> None:
    response = service.create_new_game(CreateGameRequest(starting_fen=PROMOTION_FEN))
    assert response.fen_state == PROMOTION_FEN
    assert response.board["a7"] == "P"


def test_create_with_invalid_fen(service: ChessService) -> None:
    """Make sure service propagates the exceptions."""
    mock_request = CreateGameRequest(starting_fen=" ".join(["mock"] * 6))

    # Test any top-level custom exception is raised (specific exception types are responsibility of other layers)
    with pytest.raises(ChessError):
        _ = service.create_new_game(mock_request)


# --- SERVICE - GET GAME ----
def test_get_existing_game_state(service: ChessService) -> None:
    """Retrieve a game from the repository from an ID generated during creation."""
    create_response = service.create_new_game(CreateGameRequest())
    make_moves(service, create_response.game_id, "e2e4")

    response = service.get_game_state(GetGameRequest(game_id=create_response.game_id))
    assert isinstance(response, GameResponse)
    assert response.side_to_move == Color.BLACK
    assert response.move_history == ["e4"]
    assert response.status_line == "Black to move"
    assert response.can_undo


def test_attempt_to_find_unknown_game(service: ChessService) -> None:
    """Ensure exception is raised when trying to look up a game with an unknown ID."""
    with pytest.raises(RepositoryError):
        _ = service.get_game_state(GetGameRequest(game_id=uuid4()))


# --- SERVICE - LEGAL MOVES ----
def test_getting_legal_moves(service: ChessService) -> None:
    """Given a proper LegalMovesRequest, does the service return the expected LegalMovesResponse?"""
    create_response = service.create_new_game(CreateGameRequest())
    request = LegalMovesRequest(game_id=create_response.game_id, square="e2")
    response = service.legal_moves(request)

    assert isinstance(response, LegalMovesResponse)
    assert response.game_id == create_response.game_id
    assert response.square == "e2"
    assert response.destinations == ["e3", "e4"]


def test_legal_moves_of_opponent_piece(service: ChessService) -> None:
    """Black pieces cannot move while it is white's turn: nothing to highlight."""
    create_response = service.create_new_game(CreateGameRequest())
    request = LegalMovesRequest(game_id=create_response.game_id, square="e7")
    assert service.legal_moves(request).destinations == []


def test_legal_moves_after_checkmate(service: ChessService) -> None:
    create_response = service.create_new_game(
        CreateGameRequest(starting_fen=LADDER_MATE_FEN)
    )
    make_moves(service, create_response.game_id, "h7h8")
    request = LegalMovesRequest(game_id=create_response.game_id, square="a8")
    assert service.legal_moves(request).destinations == []


# --- SERVICE - MAKE MOVE ---
def test_make_legal_move(
    service: ChessService, mock_repository: MockRepository
) -> None:
    """Attempt a legal move during your turn. Should result in a MoveResponse."""
    create_response = service.create_new_game(CreateGameRequest())
    response = make_moves(service, create_response.game_id, "g1f3")

    # Check response structure
    assert isinstance(response, MoveResponse)

    # Check response data
    assert response.san == "Nf3"
    assert response.uci == "g1f3"
    assert response.captured_piece is None
    assert response.game.fen_state == (
        "rnbqkbnr/pppppppp/8/8/8/5N2/PPPPPPPP/RNBQKB1R b KQkq - 1 1"
    )
    assert response.game.move_history == ["Nf3"]

    # Check persisted data
    stored_game = mock_repository.get_game(create_response.game_id)
    assert stored_game is not None
    assert stored_game.current_fen == response.game.fen_state
    assert stored_game.moves_uci == ["g1f3"]


def test_capture_is_reported(service: ChessService) -> None:
    create_response = service.create_new_game(CreateGameRequest())
    response = make_moves(service, create_response.game_id, "e2e4", "d7d5", "e4d5")
    assert response.san == "exd5"
    assert response.captured_piece == "p"
    assert response.game.captured_pieces == {Color.WHITE: ["p"], Color.BLACK: []}


def test_promotion(service: ChessService) -> None:
    create_response = service.create_new_game(
        CreateGameRequest(starting_fen=PROMOTION_FEN)
    )
    request = MoveRequest(
        game_id=create_response.game_id,
        from_square="a7",
        to_square="a8",
        promote_to=PieceType.QUEEN,
    )
    response = service.make_move(request)
    assert response.san == "a8=Q+"
    assert response.uci == "a7a8q"
    assert response.game.in_check
    assert response.game.board["a8"] == "Q"


def test_checkmate(service: ChessService) -> None:
    create_response = service.create_new_game(
        CreateGameRequest(starting_fen=LADDER_MATE_FEN)
    )
    response = make_moves(service, create_response.game_id, "h7h8")
    assert response.san == "Rh8#"
    assert response.game.status == Status.CHECKMATE
    assert response.game.winner == Color.WHITE
    assert response.game.status_line == "Checkmate! White wins!"

    with pytest.raises(GameOverError):
        make_moves(service, create_response.game_id, "a8b7")


def test_attempt_illegal_move(
    service: ChessService, mock_repository: MockRepository
) -> None:
    """Service must propagate error raised by Game upwards, and store nothing."""
    create_response = service.create_new_game(CreateGameRequest())
    with pytest.raises(IllegalMoveError):
        make_moves(service, create_response.game_id, "d1h5")

    stored_game = mock_repository.get_game(create_response.game_id)
    assert stored_game is not None
    assert stored_game.moves_uci == []


def test_attempt_move_before_your_turn(service: ChessService) -> None:
    create_response = service.create_new_game(CreateGameRequest())
    with pytest.raises(NotYourTurnError):
        make_moves(service, create_response.game_id, "e7e5")


def test_move_in_unknown_game(service: ChessService) -> None:
    with pytest.raises(RepositoryError):
        make_moves(service, uuid4(), "e2e4")


# --- SERVICE - UNDO / REDO / RESET ---
def test_undo_and_redo(
    service: ChessService, mock_repository: MockRepository
) -> None:
    create_response = service.create_new_game(CreateGameRequest())
    game_id = create_response.game_id
    make_moves(service, game_id, "e2e4", "e7e5")

    response = service.undo(UndoRequest(game_id=game_id))
    assert response.move_history == ["e4"]
    assert response.can_redo
    stored_game = mock_repository.get_game(game_id)
    assert stored_game is not None
    assert stored_game.undone_uci == ["e7e5"]

    response = service.redo(RedoRequest(game_id=game_id))
    assert response.move_history == ["e4", "e5"]
    assert not response.can_redo


def test_undo_without_history(service: ChessService) -> None:
    create_response = service.create_new_game(CreateGameRequest())
    with pytest.raises(NoHistoryError):
        service.undo(UndoRequest(game_id=create_response.game_id))


def test_reset(service: ChessService) -> None:
    create_response = service.create_new_game(
        CreateGameRequest(starting_fen=PROMOTION_FEN)
    )
    game_id = create_response.game_id
    make_moves(service, game_id, "e1d2", "e8d7")

    response = service.reset(ResetRequest(game_id=game_id))
    assert response.fen_state == PROMOTION_FEN
    assert response.move_history == []
    assert not response.can_undo


# --- SERVICE - DELETE GAME ---
def test_delete_game(service: ChessService, mock_repository: MockRepository) -> None:
    create_response = service.create_new_game(CreateGameRequest())
    service.delete_game(DeleteGameRequest(game_id=create_response.game_id))
    assert mock_repository.get_game(create_response.game_id) is None


def test_delete_unknown_game(service: ChessService) -> None:
    with pytest.raises(RepositoryError):
        service.delete_game(DeleteGameRequest(game_id=uuid4()))
