from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from .errors import IllegalMove


class Outcome(str, Enum):
    """Who won a game, using the labels exposed on the wire."""

    NONE = "none"
    PLAYER = "Player"
    COMPUTER = "Computer"


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of a game after a half-move.

    A move never edits a state; it produces a successor with ``turn_index``
    one higher and ``is_players_turn`` flipped.
    """

    id: str
    game_id: str
    heap_size: int
    turn_index: int = 0
    is_players_turn: bool = True

    def successor(self, state_id: str, count: int) -> GameState:
        return GameState(
            id=state_id,
            game_id=self.game_id,
            heap_size=self.heap_size - count,
            turn_index=self.turn_index + 1,
            is_players_turn=not self.is_players_turn,
        )


@dataclass
class Game:
    id: str
    legal_moves: tuple[int, ...]
    strategy: str
    outcome: Outcome = Outcome.NONE
    current_state: GameState | None = None
    # Oldest first; appended to, never rewritten.
    history: tuple[GameState, ...] = field(default_factory=tuple)

    @property
    def heap_size(self) -> int:
        return self.current_state.heap_size if self.current_state is not None else 0

    @property
    def finished(self) -> bool:
        return self.outcome is not Outcome.NONE or self.heap_size == 0

    def require_state(self) -> GameState:
        if self.current_state is None:
            raise IllegalMove(f"Game {self.id} has no current state")
        return self.current_state

    def advance(self, state: GameState) -> Game:
        """Return a copy of this game with ``state`` installed as current."""

        return replace(self, current_state=state, history=(*self.history, state))

    def finish(self, outcome: Outcome) -> None:
        if outcome is Outcome.NONE:
            raise ValueError("a finished game needs a winner")
        if self.outcome is not Outcome.NONE:
            raise IllegalMove(f"Game {self.id} was already decided ({self.outcome.value})")
        self.outcome = outcome
