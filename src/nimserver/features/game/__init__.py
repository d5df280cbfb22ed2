"""Game feature: turn engine, storage, schemas, and API routers."""

from .repository import GameRepository, InMemoryGameRepository
from .router import create_game_routers
from .schemas import GamePayload, StatePayload, StrategiesPayload
from .service import GameService, MoveChooser

__all__ = [
    "GamePayload",
    "GameRepository",
    "GameService",
    "InMemoryGameRepository",
    "MoveChooser",
    "StatePayload",
    "StrategiesPayload",
    "create_game_routers",
]
