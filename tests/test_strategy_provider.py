from __future__ import annotations

import pytest

from nimserver.core.errors import InvalidConfiguration, UnknownStrategy
from nimserver.core.models import Game, GameState
from nimserver.strategies import DP, RANDOM, DPStrategy, RandomStrategy, Strategy, StrategyProvider


def test_resolves_known_strategies_to_shared_instances() -> None:
    provider = StrategyProvider()

    assert isinstance(provider.resolve(RANDOM), RandomStrategy)
    assert isinstance(provider.resolve(DP), DPStrategy)
    assert provider.resolve(DP) is provider.resolve(DP)
    assert isinstance(provider.resolve(DP), Strategy)
    assert provider.available() == (RANDOM, DP)


def test_validity_is_case_sensitive() -> None:
    provider = StrategyProvider()
    assert provider.is_valid("DP")
    assert provider.is_valid("RANDOM")
    assert not provider.is_valid("dp")
    assert not provider.is_valid("INVALID")


def test_unknown_strategy_error() -> None:
    with pytest.raises(UnknownStrategy) as excinfo:
        StrategyProvider().resolve("INVALID")

    assert excinfo.value.message == "Strategy INVALID is not a valid strategy"
    assert isinstance(excinfo.value, InvalidConfiguration)
    assert excinfo.value.to_dict() == {
        "message": "Strategy INVALID is not a valid strategy",
        "code": "UNKNOWN_STRATEGY",
        "field": "strategy",
    }


def test_forget_reaches_every_strategy() -> None:
    provider = StrategyProvider(dp_cache_size=4)
    dp = provider.resolve(DP)
    assert isinstance(dp, DPStrategy)
    game = Game(id="g1", legal_moves=(1, 2), strategy=DP).advance(
        GameState(id="s1", game_id="g1", heap_size=6, is_players_turn=False)
    )
    dp.calculate_move(game)

    provider.forget("g1")

    assert "g1" not in dp.cache


def test_custom_strategy_table() -> None:
    random_strategy = RandomStrategy()
    provider = StrategyProvider(strategies={"ONLY": random_strategy})

    assert provider.available() == ("ONLY",)
    assert provider.resolve("ONLY") is random_strategy
    assert not provider.is_valid(DP)
