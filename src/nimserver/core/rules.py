"""Move legality helpers shared by the engine and both strategies."""

from __future__ import annotations

from collections.abc import Iterable

from .errors import InvalidConfiguration
from .models import Game


def normalize_legal_moves(moves: Iterable[object]) -> tuple[int, ...]:
    """Return ``moves`` as a sorted tuple of distinct positive ints.

    Raises ``InvalidConfiguration`` for an empty collection, non-integers, or
    any value below 1 (a zero move would let a side pass forever).
    """

    values: set[int] = set()
    for raw in moves:
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise InvalidConfiguration("legal_moves", f"legal move {raw!r} is not an integer")
        if raw < 1:
            raise InvalidConfiguration("legal_moves", "legal moves must all be positive")
        values.add(raw)
    if not values:
        raise InvalidConfiguration("legal_moves", "legal moves must not be empty")
    return tuple(sorted(values))


def available_moves(legal_moves: Iterable[int], heap_size: int) -> tuple[int, ...]:
    """Legal moves that fit in a heap of ``heap_size``, smallest first."""

    return tuple(sorted(move for move in legal_moves if move <= heap_size))


def moves_for(game: Game) -> tuple[int, ...]:
    return available_moves(game.legal_moves, game.heap_size)


def is_stuck(legal_moves: Iterable[int], heap_size: int) -> bool:
    """True when tokens remain but no legal move fits."""

    return heap_size > 0 and not available_moves(legal_moves, heap_size)
