from __future__ import annotations

from functools import lru_cache

import pytest

from nimserver.core.errors import IllegalMove
from nimserver.core.models import Game, GameState
from nimserver.strategies import DPSolution, DPStrategy, SolutionCache


def _game(game_id: str, heap: int, moves: tuple[int, ...], *, players_turn: bool = False) -> Game:
    state = GameState(id=f"{game_id}-s", game_id=game_id, heap_size=heap, is_players_turn=players_turn)
    return Game(id=game_id, legal_moves=moves, strategy="DP").advance(state)


def _reference_tables(size: int, moves: tuple[int, ...]) -> tuple[list[float], list[float]]:
    """Straight recursive rendition of the same model, used as an oracle."""

    @lru_cache(maxsize=None)
    def computer(i: int) -> float:
        fitting = [m for m in moves if m <= i]
        if not fitting:
            return 0.0
        return max(0.0 if m == i else 1.0 - player(i - m) for m in fitting)

    @lru_cache(maxsize=None)
    def player(i: int) -> float:
        fitting = [m for m in moves if m <= i]
        if not fitting:
            return 0.0
        return sum(0.0 if m == i else 1.0 - computer(i - m) for m in fitting) / len(fitting)

    return [computer(i) for i in range(size + 1)], [player(i) for i in range(size + 1)]


def test_tables_for_four_tokens_with_one_to_three() -> None:
    solution = DPSolution(4, (1, 2, 3))

    assert solution.computer_win.tolist() == pytest.approx([0.0, 0.0, 1.0, 1.0, 1.0])
    assert solution.player_win.tolist() == pytest.approx([0.0, 0.0, 0.5, 1 / 3, 1 / 3])
    assert [solution.next_move(i) for i in range(1, 5)] == [1, 1, 2, 3]


def test_ties_prefer_the_smallest_move() -> None:
    # With five tokens taking 1 or 2 both win with probability 2/3.
    solution = DPSolution(5, (1, 2, 3))
    assert solution.next_move(5) == 1
    assert solution.win_probability(5) == pytest.approx(2 / 3)


@pytest.mark.parametrize("moves", [(1, 2, 3), (1, 3, 4), (2, 5), (1,), (3, 7, 8), (4, 9, 12), (1, 31)])
def test_tables_match_recursive_oracle(moves: tuple[int, ...]) -> None:
    size = 30
    solution = DPSolution(size, moves)
    computer, player = _reference_tables(size, moves)

    assert solution.computer_win.tolist() == pytest.approx(computer)
    assert solution.player_win.tolist() == pytest.approx(player)
    for heap in range(1, size + 1):
        fitting = [m for m in moves if m <= heap]
        if not fitting:
            assert solution.best_move[heap] == 0
            continue
        move = solution.next_move(heap)
        assert move in fitting
        value = 0.0 if move == heap else 1.0 - player[heap - move]
        assert value == pytest.approx(computer[heap])


def test_large_solve_extends_small_solve() -> None:
    small = DPSolution(40, (1, 2, 3))
    large = DPSolution(10_000, (1, 2, 3))

    assert large.computer_win[:41].tolist() == small.computer_win.tolist()
    assert large.player_win[:41].tolist() == small.player_win.tolist()
    assert large.best_move[:41].tolist() == small.best_move.tolist()
    assert large.next_move(10_000) in (1, 2, 3)


def test_probabilities_stay_in_unit_interval() -> None:
    solution = DPSolution(60, (1, 4, 6))
    assert ((solution.computer_win >= 0.0) & (solution.computer_win <= 1.0)).all()
    assert ((solution.player_win >= 0.0) & (solution.player_win <= 1.0)).all()


def test_stuck_heap_has_no_move() -> None:
    solution = DPSolution(3, (2,))

    assert solution.win_probability(1) == 0.0
    with pytest.raises(IllegalMove):
        solution.next_move(1)
    assert solution.next_move(2) == 2
    assert solution.next_move(3) == 2
    assert solution.win_probability(3) == 1.0


def test_out_of_range_queries_fail() -> None:
    solution = DPSolution(4, (1, 2, 3))
    with pytest.raises(ValueError):
        solution.next_move(5)
    with pytest.raises(ValueError):
        solution.player_win_probability(-1)


def test_invalid_problem_is_rejected() -> None:
    with pytest.raises(ValueError):
        DPSolution(-1, (1,))
    with pytest.raises(ValueError):
        DPSolution(4, ())
    with pytest.raises(ValueError):
        DPSolution(4, (0, 1))


def test_covers_checks_size_and_moves() -> None:
    solution = DPSolution(10, (3, 1, 2))
    assert solution.covers(10, (1, 2, 3))
    assert solution.covers(4, (3, 2, 1))
    assert not solution.covers(11, (1, 2, 3))
    assert not solution.covers(4, (1, 2))


def test_strategy_solves_once_per_game() -> None:
    strategy = DPStrategy(SolutionCache(8))
    first = _game("g1", 13, (1, 2, 3))

    move = strategy.calculate_move(first)
    solution = strategy.solution_for(first)
    later = _game("g1", 6, (1, 2, 3))

    assert strategy.solution_for(later) is solution
    assert strategy.calculate_move(first) == move
    assert strategy.calculate_move(later) == solution.next_move(6)
    assert strategy.cache.stats()["entries"] == 1


def test_strategy_rebuilds_when_configuration_changes() -> None:
    strategy = DPStrategy(SolutionCache(8))
    original = strategy.solution_for(_game("g1", 5, (1, 2)))
    rebuilt = strategy.solution_for(_game("g1", 9, (1, 2)))

    assert rebuilt is not original
    assert rebuilt.problem_size == 9


def test_strategy_moves_are_legal_for_every_heap() -> None:
    strategy = DPStrategy()
    moves = (1, 3, 4)
    for heap in range(1, 40):
        move = strategy.calculate_move(_game(f"g{heap}", heap, moves))
        assert move in moves
        assert move <= heap


def test_forget_releases_the_solution() -> None:
    strategy = DPStrategy(SolutionCache(8))
    strategy.calculate_move(_game("g1", 7, (1, 2, 3)))
    assert "g1" in strategy.cache

    strategy.forget("g1")
    strategy.forget("g1")
    assert "g1" not in strategy.cache
