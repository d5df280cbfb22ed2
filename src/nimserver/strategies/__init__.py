"""Computer-player strategies and the provider that resolves them by id."""

from .base import Strategy
from .cache import SolutionCache
from .dp import DPSolution, DPStrategy
from .provider import DP, RANDOM, StrategyProvider
from .random_strategy import RandomStrategy

__all__ = [
    "DP",
    "DPSolution",
    "DPStrategy",
    "RANDOM",
    "RandomStrategy",
    "SolutionCache",
    "Strategy",
    "StrategyProvider",
]
