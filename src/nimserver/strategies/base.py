from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..core.models import Game


@runtime_checkable
class Strategy(Protocol):
    """Computer-player policy.

    ``calculate_move`` must return a member of ``game.legal_moves`` that does
    not exceed the current heap. ``forget`` releases anything the strategy
    keeps for ``game_id`` once that game is over or removed.
    """

    name: str

    def calculate_move(self, game: Game) -> int: ...

    def forget(self, game_id: str) -> None: ...
