"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class GameModel:
    """Transport-safe representation of a chess game used between API, Service, DB, and Game layers.

    The game itself is fully described by the starting FEN + the moves played (and the moves undone, which can be redone).
    current_fen, status and winner are derived, but stored so the records can be inspected without replaying.
    """

    starting_fen: str
    current_fen: str
    moves_uci: list[str] = field(default_factory=list)
    undone_uci: list[str] = field(default_factory=list)
    status: str = "in progress"
    winner: Optional[str] = None
