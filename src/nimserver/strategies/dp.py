"""Best response to a uniformly random opponent.

The computer does not assume perfect play from the human. Instead it models
the player as choosing uniformly among the legal moves and picks, for every
heap size, the move that maximises its own chance of winning under that
model. Two coupled tables capture this:

* ``computer_win[i]``: the computer's win probability when it is to move with
  ``i`` tokens left and always picks the best move.
* ``player_win[i]``: a random player's win probability when it is to move
  with ``i`` tokens left against that computer.

Taking the last token loses (misère rule), so a move that empties the heap is
worth 0 to whoever makes it. Both recurrences only look at strictly smaller
heaps, so one bottom-up pass fills them.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from ..core.errors import IllegalMove
from ..core.models import Game
from .cache import SolutionCache

logger = logging.getLogger(__name__)


class DPSolution:
    """Solved policy tables for heaps ``0..problem_size``."""

    def __init__(self, problem_size: int, legal_moves: Sequence[int]) -> None:
        if problem_size < 0:
            raise ValueError("problem_size must be non-negative")
        moves = np.array(sorted(set(int(move) for move in legal_moves)), dtype=np.int64)
        if moves.size == 0 or int(moves[0]) < 1:
            raise ValueError("legal_moves must be a non-empty set of positive integers")

        self.problem_size = problem_size
        self.legal_moves: tuple[int, ...] = tuple(int(move) for move in moves)
        self.computer_win = np.zeros(problem_size + 1, dtype=np.float64)
        self.player_win = np.zeros(problem_size + 1, dtype=np.float64)
        # 0 marks "no move": the empty heap, or a heap no legal move fits.
        self.best_move = np.zeros(problem_size + 1, dtype=np.int64)
        self._solve(moves)

    def _solve(self, moves: np.ndarray) -> None:
        largest = int(moves[-1])
        # Heaps smaller than the largest move only admit a prefix of the sorted moves.
        prefixes = [
            moves[: int(np.searchsorted(moves, size, side="right"))]
            for size in range(min(largest, self.problem_size + 1))
        ]
        for size in range(1, self.problem_size + 1):
            fitting = prefixes[size] if size < largest else moves
            if fitting.size == 0:
                # The side to move is stuck and loses; both tables stay at 0.
                continue
            remaining = size - fitting

            if size > largest:
                computer_values = 1.0 - self.player_win[remaining]
                player_values = 1.0 - self.computer_win[remaining]
            else:
                takes_last = remaining == 0
                computer_values = np.where(takes_last, 0.0, 1.0 - self.player_win[remaining])
                player_values = np.where(takes_last, 0.0, 1.0 - self.computer_win[remaining])

            # argmax returns the first maximum, i.e. the smallest winning move.
            best = int(np.argmax(computer_values))
            self.computer_win[size] = computer_values[best]
            self.best_move[size] = fitting[best]
            self.player_win[size] = float(np.mean(player_values))

    def _check_size(self, heap_size: int) -> None:
        if not 0 <= heap_size <= self.problem_size:
            raise ValueError(f"heap size {heap_size} outside solved range 0..{self.problem_size}")

    def next_move(self, heap_size: int) -> int:
        self._check_size(heap_size)
        move = int(self.best_move[heap_size])
        if move == 0:
            raise IllegalMove(f"No legal move left for {heap_size} tokens")
        return move

    def win_probability(self, heap_size: int) -> float:
        """Computer's chance to win when it is to move with ``heap_size`` tokens."""

        self._check_size(heap_size)
        return float(self.computer_win[heap_size])

    def player_win_probability(self, heap_size: int) -> float:
        """A random player's chance to win when it is to move with ``heap_size`` tokens."""

        self._check_size(heap_size)
        return float(self.player_win[heap_size])

    def covers(self, heap_size: int, legal_moves: Sequence[int]) -> bool:
        return heap_size <= self.problem_size and tuple(sorted(set(legal_moves))) == self.legal_moves


class DPStrategy:
    """Play the best response to a random player, solving once per game."""

    name = "DP"

    def __init__(self, cache: SolutionCache[DPSolution] | None = None) -> None:
        self.cache: SolutionCache[DPSolution] = cache if cache is not None else SolutionCache()

    def solution_for(self, game: Game) -> DPSolution:
        heap = game.heap_size
        legal_moves = game.legal_moves

        def _build() -> DPSolution:
            logger.debug(
                "Solving DP tables",
                extra={"game_id": game.id, "heap_size": heap, "legal_moves": legal_moves},
            )
            return DPSolution(heap, legal_moves)

        solution = self.cache.get_or_build(game.id, _build)
        if not solution.covers(heap, legal_moves):
            # The id was reused for a different configuration.
            self.cache.discard(game.id)
            solution = self.cache.get_or_build(game.id, _build)
        return solution

    def calculate_move(self, game: Game) -> int:
        heap = game.require_state().heap_size
        return self.solution_for(game).next_move(heap)

    def forget(self, game_id: str) -> None:
        if self.cache.discard(game_id):
            logger.debug("Released DP solution", extra={"game_id": game_id})
