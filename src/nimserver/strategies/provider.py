from __future__ import annotations

import random
from collections.abc import Mapping

from ..core.errors import UnknownStrategy
from .base import Strategy
from .cache import SolutionCache
from .dp import DPStrategy
from .random_strategy import RandomStrategy

RANDOM = "RANDOM"
DP = "DP"


class StrategyProvider:
    """Lookup table from strategy id to a shared, long-lived strategy instance.

    Instances are created once per provider so per-game state such as the DP
    solution cache survives across requests.
    """

    def __init__(
        self,
        *,
        rng: random.Random | None = None,
        dp_cache_size: int = 1024,
        strategies: Mapping[str, Strategy] | None = None,
    ) -> None:
        if strategies is None:
            strategies = {
                RANDOM: RandomStrategy(rng),
                DP: DPStrategy(SolutionCache(dp_cache_size)),
            }
        self._strategies: dict[str, Strategy] = dict(strategies)

    def available(self) -> tuple[str, ...]:
        return tuple(self._strategies)

    def is_valid(self, strategy_id: str) -> bool:
        return strategy_id in self._strategies

    def resolve(self, strategy_id: str) -> Strategy:
        try:
            return self._strategies[strategy_id]
        except KeyError:
            raise UnknownStrategy(strategy_id) from None

    def forget(self, game_id: str) -> None:
        """Release per-game state held by every strategy."""

        for strategy in self._strategies.values():
            strategy.forget(game_id)
