#!/usr/bin/env python3

"""Run the strategy benchmark from the command line."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

if __package__ is None:
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    if str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))

from nimserver.analysis.benchmark import (
    PLAYER_POLICIES,
    BenchmarkConfig,
    BenchmarkScenario,
    run_benchmark,
)


def _parse_ints(raw: str) -> tuple[int, ...]:
    try:
        return tuple(int(item) for item in raw.split(",") if item.strip())
    except ValueError as exc:  # pragma: no cover - validation path
        raise argparse.ArgumentTypeError(f"invalid integer list '{raw}'") from exc


def _resolve_scenarios(pack: str, seeds: tuple[int, ...], games: int, strategy: str, policy: str) -> list[BenchmarkScenario]:
    if not seeds:
        raise ValueError("at least one seed must be supplied")

    if pack.strip().lower() == "seeded":
        return [
            BenchmarkScenario(name=f"seed_{idx}_{seed}", seed=seed, strategy=strategy, player_policy=policy, games=games)
            for idx, seed in enumerate(seeds)
        ]

    # Standard pack: both strategies against every scripted player.
    scenarios: list[BenchmarkScenario] = []
    for strategy_id in ("DP", "RANDOM"):
        for idx, player_policy in enumerate(PLAYER_POLICIES):
            scenarios.append(
                BenchmarkScenario(
                    name=f"{strategy_id.lower()}_vs_{player_policy}",
                    seed=seeds[idx % len(seeds)],
                    strategy=strategy_id,
                    player_policy=player_policy,
                    games=games,
                )
            )
    return scenarios


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run deterministic strategy benchmark")
    parser.add_argument("--games", type=int, default=200, help="Number of games per run")
    parser.add_argument("--heap", type=int, default=13, help="Tokens at the start of each game")
    parser.add_argument("--moves", type=_parse_ints, default=(1, 2, 3), help="Comma-separated legal moves")
    parser.add_argument(
        "--seeds",
        type=_parse_ints,
        default=(101,),
        help="Comma-separated list of integer seeds (default: 101)",
    )
    parser.add_argument("--strategy", type=str.upper, default="DP", choices=("DP", "RANDOM"))
    parser.add_argument("--player-policy", type=str, default="random", choices=PLAYER_POLICIES)
    parser.add_argument(
        "--scenario-pack",
        type=str,
        default="standard",
        choices=("standard", "seeded"),
        help="Scenario pack to run (default: every strategy against every player policy)",
    )
    args = parser.parse_args(argv)

    config = BenchmarkConfig(
        games=args.games,
        seeds=args.seeds,
        heap_size=args.heap,
        legal_moves=args.moves,
        strategy=args.strategy,
        player_policy=args.player_policy,
        scenarios=tuple(_resolve_scenarios(args.scenario_pack, args.seeds, args.games, args.strategy, args.player_policy)),
    )

    result = run_benchmark(config)
    payload = {
        "combined": {
            "games": result.combined.games,
            "computer_wins": result.combined.computer_wins,
            "computer_win_pct": result.computer_win_pct,
        },
        "runs": [
            {
                "scenario": run.scenario.name,
                "seed": run.scenario.seed,
                "strategy": run.scenario.strategy,
                "player_policy": run.scenario.player_policy,
                "games": run.stats.games,
                "computer_win_pct": run.stats.computer_win_pct,
                "predicted_computer_win_pct": run.predicted_computer_win_pct,
                "avg_half_moves": run.stats.avg_half_moves,
            }
            for run in result.runs
        ],
    }

    json.dump(payload, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    raise SystemExit(main())
