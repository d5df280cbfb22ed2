"""Deterministic self-play benchmark for the computer strategies.

The benchmark plays many games through the regular game service with a
scripted player policy, then reports how often the computer wins. For the DP
strategy against a uniformly random player it also reports the win rate the
solved tables predict, which makes regressions in the recurrence easy to
spot without touching the HTTP layer.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass

from ..core.config import Settings
from ..core.models import Game, Outcome
from ..core.rules import moves_for
from ..features.game import GameService
from ..strategies import DP, RANDOM, DPSolution

PLAYER_POLICIES = ("random", "greedy", "cautious")


@dataclass(frozen=True)
class BenchmarkScenario:
    """Single deterministic configuration executed inside the benchmark."""

    name: str
    seed: int
    strategy: str = DP
    player_policy: str = "random"
    games: int | None = None

    def resolve_games(self, fallback: int) -> int:
        value = self.games
        return value if value and value > 0 else fallback


class _PlayerPolicy:
    def __init__(self, mode: str) -> None:
        key = mode.strip().lower()
        if key not in PLAYER_POLICIES:
            raise ValueError(f"Unknown player_policy '{mode}'. Options: {', '.join(PLAYER_POLICIES)}")
        self.mode = key

    def select(self, game: Game, rng: random.Random) -> int:
        moves = moves_for(game)
        if not moves:
            raise ValueError("no legal move available")
        if self.mode == "greedy":
            return moves[-1]
        if self.mode == "cautious":
            return moves[0]
        return rng.choice(moves)


@dataclass(frozen=True)
class BenchmarkConfig:
    games: int = 200
    seeds: tuple[int, ...] = (101,)
    heap_size: int = 13
    legal_moves: tuple[int, ...] = (1, 2, 3)
    strategy: str = DP
    player_policy: str = "random"
    scenarios: tuple[BenchmarkScenario, ...] | None = None

    def __post_init__(self) -> None:
        if self.games <= 0:
            raise ValueError("games must be positive")
        if self.heap_size <= 0:
            raise ValueError("heap_size must be positive")
        if not self.seeds:
            raise ValueError("at least one seed is required")
        scenarios = self.scenarios or (BenchmarkScenario("config", 0, self.strategy, self.player_policy),)
        for scenario in scenarios:
            if scenario.strategy not in (DP, RANDOM):
                raise ValueError(f"Unknown strategy '{scenario.strategy}'. Options: {DP}, {RANDOM}")
            _PlayerPolicy(scenario.player_policy)


@dataclass(frozen=True)
class GameStats:
    games: int
    computer_wins: int
    player_wins: int
    half_moves: int

    @property
    def computer_win_pct(self) -> float:
        return 100.0 * self.computer_wins / self.games if self.games else 0.0

    @property
    def avg_half_moves(self) -> float:
        return self.half_moves / self.games if self.games else 0.0


@dataclass(frozen=True)
class BenchmarkRun:
    scenario: BenchmarkScenario
    stats: GameStats
    predicted_computer_win_pct: float | None = None


@dataclass(frozen=True)
class BenchmarkResult:
    runs: tuple[BenchmarkRun, ...]
    combined: GameStats

    @property
    def computer_win_pct(self) -> float:
        return self.combined.computer_win_pct


def summarize_games(games: Sequence[Game]) -> GameStats:
    return GameStats(
        games=len(games),
        computer_wins=sum(1 for game in games if game.outcome is Outcome.COMPUTER),
        player_wins=sum(1 for game in games if game.outcome is Outcome.PLAYER),
        half_moves=sum(game.require_state().turn_index for game in games),
    )


def predicted_computer_win_pct(heap_size: int, legal_moves: Sequence[int]) -> float:
    """DP computer's win rate against a random player who moves first."""

    solution = DPSolution(heap_size, legal_moves)
    return 100.0 * (1.0 - solution.player_win_probability(heap_size))


def run_benchmark(config: BenchmarkConfig) -> BenchmarkResult:
    runs: list[BenchmarkRun] = []
    all_games: list[Game] = []

    for scenario in _expand_scenarios(config):
        policy = _PlayerPolicy(scenario.player_policy)
        settings = Settings(heap_size=config.heap_size, legal_moves=config.legal_moves, seed=scenario.seed)
        service = GameService(settings=settings)
        rng = random.Random(scenario.seed)
        finished: list[Game] = []
        try:
            for _ in range(scenario.resolve_games(config.games)):
                game = service.create_game(strategy=scenario.strategy)
                final = service.play_out(game.id, policy.select, rng)
                finished.append(final)
                service.remove_game(final.id)
        finally:
            service.close()

        predicted = None
        if scenario.strategy == DP and policy.mode == "random":
            predicted = predicted_computer_win_pct(config.heap_size, config.legal_moves)
        all_games.extend(finished)
        runs.append(BenchmarkRun(scenario=scenario, stats=summarize_games(finished), predicted_computer_win_pct=predicted))

    return BenchmarkResult(runs=tuple(runs), combined=summarize_games(all_games))


def _expand_scenarios(config: BenchmarkConfig) -> tuple[BenchmarkScenario, ...]:
    if config.scenarios:
        return config.scenarios

    return tuple(
        BenchmarkScenario(
            name=f"seed_{idx}_{seed}",
            seed=seed,
            strategy=config.strategy,
            player_policy=config.player_policy,
        )
        for idx, seed in enumerate(config.seeds)
    )
