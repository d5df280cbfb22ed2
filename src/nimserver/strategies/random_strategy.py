from __future__ import annotations

import random
import threading

from ..core.errors import IllegalMove
from ..core.models import Game
from ..core.rules import moves_for


class RandomStrategy:
    """Take a uniformly random legal number of tokens."""

    name = "RANDOM"

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        # random.Random is not safe to share across threads without a guard.
        self._lock = threading.Lock()

    def calculate_move(self, game: Game) -> int:
        candidates = moves_for(game)
        if not candidates:
            raise IllegalMove(f"No legal move left for {game.heap_size} tokens")
        with self._lock:
            return self._rng.choice(candidates)

    def forget(self, game_id: str) -> None:
        del game_id  # stateless between calls
