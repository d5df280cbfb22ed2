from __future__ import annotations

import random

import pytest

from nimserver.core.errors import IllegalMove
from nimserver.core.models import Game, GameState
from nimserver.strategies import RandomStrategy


def _game(heap: int, moves: tuple[int, ...]) -> Game:
    return Game(id="g1", legal_moves=moves, strategy="RANDOM").advance(
        GameState(id="s1", game_id="g1", heap_size=heap, is_players_turn=False)
    )


def test_random_moves_are_legal_and_cover_every_option() -> None:
    strategy = RandomStrategy(random.Random(3))
    game = _game(10, (1, 2, 3, 4))

    seen = {strategy.calculate_move(game) for _ in range(1000)}

    assert seen == {1, 2, 3, 4}


def test_random_moves_never_exceed_the_heap() -> None:
    strategy = RandomStrategy(random.Random(5))
    game = _game(2, (1, 2, 3))

    seen = {strategy.calculate_move(game) for _ in range(1000)}

    assert seen == {1, 2}


def test_seeded_generators_repeat() -> None:
    game = _game(20, (1, 2, 3, 5, 8))
    first = RandomStrategy(random.Random(42))
    second = RandomStrategy(random.Random(42))

    assert [first.calculate_move(game) for _ in range(50)] == [second.calculate_move(game) for _ in range(50)]


def test_no_fitting_move_raises() -> None:
    with pytest.raises(IllegalMove):
        RandomStrategy().calculate_move(_game(1, (2, 3)))
