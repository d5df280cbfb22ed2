from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ...core.models import Game, GameState

__all__ = [
    "GamePayload",
    "StatePayload",
    "StrategiesPayload",
]


class _APIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class StatePayload(_APIModel):
    id: str
    heap_size: int = Field(alias="numMatches")
    turn_index: int = Field(alias="turn")
    is_players_turn: bool = Field(alias="playersTurn")

    @classmethod
    def from_state(cls, state: GameState) -> StatePayload:
        return cls(
            id=state.id,
            heap_size=state.heap_size,
            turn_index=state.turn_index,
            is_players_turn=state.is_players_turn,
        )


class GamePayload(_APIModel):
    id: str
    legal_moves: list[int] = Field(alias="allowedMoves")
    strategy: str = Field(alias="computerStrategy")
    winner: str
    current_state: StatePayload | None = Field(default=None, alias="currentState")
    history: list[StatePayload] | None = None

    @classmethod
    def from_game(cls, game: Game, *, include_history: bool = False) -> GamePayload:
        current = game.current_state
        return cls(
            id=game.id,
            legal_moves=list(game.legal_moves),
            strategy=game.strategy,
            winner=game.outcome.value,
            current_state=StatePayload.from_state(current) if current is not None else None,
            history=[StatePayload.from_state(state) for state in game.history] if include_history else None,
        )


class StrategiesPayload(_APIModel):
    strategies: list[str]
    default: str
