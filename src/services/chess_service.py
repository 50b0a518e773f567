"""Orchestration of communication from the presentation/API layer to business logic and persistence layers (and the reverse direction)."""

import logging
from typing import Optional
from uuid import UUID

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
from src.chess.game import Game
from src.chess.square import Square
from src.core.exceptions import RepositoryError
from src.core.models import GameModel
from src.db.repository import GameRepository

logger = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a new game, from the standard starting position unless a FEN is given."""
        new_game = Game.from_fen(request.starting_fen or STARTING_FEN)
        stored_game, game_id = self.repo.create_game(new_game.to_model())
        logger.info("Created game %s from %s", game_id, stored_game.starting_fen)
        return self._create_game_response(game_id, new_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Board, status line, move list and captured pieces: all a view needs to redraw.
        """
        game = self._load_game(request.game_id)
        return self._create_game_response(request.game_id, game)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Squares the selected piece can move to (empty if nothing of the side to move stands there)."""
        game = self._load_game(request.game_id)
        destinations = game.legal_destinations(Square.from_algebraic(request.square))
        return LegalMovesResponse(
            game_id=request.game_id,
            square=request.square,
            destinations=[square.to_algebraic() for square in destinations],
        )

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """
        Make a move attempt.

        IllegalMoveError propagates to the caller, and nothing gets stored in that case.
        """
        game = self._load_game(request.game_id)
        accepted = game.attempt_move(
            Square.from_algebraic(request.from_square),
            Square.from_algebraic(request.to_square),
            request.promote_to,
        )
        self._store(request.game_id, game)
        return MoveResponse(
            game_id=request.game_id,
            san=accepted.san,
            uci=accepted.move.to_uci(),
            captured_piece=accepted.captured_piece.to_fen()
            if accepted.captured_piece
            else None,
            game=self._create_game_response(request.game_id, game),
        )

    def undo(self, request: UndoRequest) -> GameResponse:
        game = self._load_game(request.game_id)
        game.undo()
        self._store(request.game_id, game)
        return self._create_game_response(request.game_id, game)

    def redo(self, request: RedoRequest) -> GameResponse:
        game = self._load_game(request.game_id)
        game.redo()
        self._store(request.game_id, game)
        return self._create_game_response(request.game_id, game)

    def reset(self, request: ResetRequest) -> GameResponse:
        game = self._load_game(request.game_id)
        game.reset()
        self._store(request.game_id, game)
        return self._create_game_response(request.game_id, game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        if self.repo.delete_game(request.game_id) is None:
            logger.warning("Tried to delete unknown game %s", request.game_id)
            raise RepositoryError(f"Game with game_id={request.game_id} not found.")

    # -- Internal helpers --
    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        """Convert the state of the Game into a GameResponse (for game with given ID.)"""
        winner = game.winner
        return GameResponse(
            game_id=game_id,
            fen_state=game.board.to_fen(),
            starting_state=game.starting_board.to_fen(),
            board={
                square.to_algebraic(): piece.to_fen() if piece else None
                for square, piece in game.position().items()
            },
            side_to_move=game.side_to_move,
            status=game.status,
            status_line=game.status_line(),
            winner=winner,
            in_check=game.is_check,
            move_history=game.move_history,
            captured_pieces={
                color: [piece.to_fen() for piece in pieces]
                for color, pieces in game.captured_pieces.items()
            },
            can_undo=game.can_undo,
            can_redo=game.can_redo,
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            logger.warning("Game %s not found", game_id)
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model

    def _load_game(self, game_id: UUID) -> Game:
        return Game.from_model(self._fetch_game(game_id))

    def _store(self, game_id: UUID, game: Game) -> Optional[GameModel]:
        return self.repo.update_game(game_id, game.to_model())
