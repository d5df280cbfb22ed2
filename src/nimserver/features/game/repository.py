"""Storage for games and their state history."""

from __future__ import annotations

import threading
import uuid
from dataclasses import replace
from typing import Protocol

from ...core.models import Game, GameState


class GameRepository(Protocol):
    def new_id(self) -> str: ...

    def save_game(self, game: Game) -> None: ...

    def save_state(self, state: GameState) -> None: ...

    def find_game_by_id(self, game_id: str) -> Game | None: ...

    def delete_game(self, game_id: str) -> bool: ...


class InMemoryGameRepository:
    """Process-local repository.

    States live in an append-only arena keyed by state id; a stored game must
    only reference states already saved to that arena.
    """

    def __init__(self) -> None:
        self._games: dict[str, Game] = {}
        self._states: dict[str, GameState] = {}
        self._lock = threading.Lock()

    def new_id(self) -> str:
        return str(uuid.uuid4())

    def save_state(self, state: GameState) -> None:
        with self._lock:
            existing = self._states.get(state.id)
            if existing is not None and existing != state:
                raise ValueError(f"state {state.id} is immutable")
            self._states[state.id] = state

    def save_game(self, game: Game) -> None:
        with self._lock:
            if game.current_state is not None:
                if not game.history or game.history[-1] != game.current_state:
                    raise ValueError(f"game {game.id}: current state must be the last history entry")
            for state in game.history:
                if self._states.get(state.id) != state:
                    raise ValueError(f"game {game.id}: state {state.id} was not saved")
                if state.game_id != game.id:
                    raise ValueError(f"state {state.id} belongs to game {state.game_id}")
            self._games[game.id] = replace(game)

    def find_game_by_id(self, game_id: str) -> Game | None:
        with self._lock:
            game = self._games.get(game_id)
            return replace(game) if game is not None else None

    def delete_game(self, game_id: str) -> bool:
        with self._lock:
            game = self._games.pop(game_id, None)
            if game is None:
                return False
            for state in game.history:
                self._states.pop(state.id, None)
            return True

    def state(self, state_id: str) -> GameState | None:
        with self._lock:
            return self._states.get(state_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)
