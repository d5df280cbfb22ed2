from __future__ import annotations

import threading
import time

import pytest

from nimserver.strategies import SolutionCache


def test_lru_eviction_keeps_recent_entries() -> None:
    cache: SolutionCache[str] = SolutionCache(max_entries=2)
    cache.get_or_build("a", lambda: "A")
    cache.get_or_build("b", lambda: "B")
    assert cache.get("a") == "A"  # "b" is now least recent

    cache.get_or_build("c", lambda: "C")

    assert "a" in cache
    assert "b" not in cache
    assert "c" in cache
    assert len(cache) == 2
    assert cache.stats()["evictions"] == 1


def test_hits_and_misses_are_counted() -> None:
    cache: SolutionCache[int] = SolutionCache(max_entries=4)
    assert cache.get("x") is None
    cache.get_or_build("x", lambda: 1)
    assert cache.get_or_build("x", lambda: 2) == 1

    stats = cache.stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 2
    assert stats["hit_rate"] == pytest.approx(1 / 3)


def test_discard_and_clear() -> None:
    cache: SolutionCache[int] = SolutionCache()
    cache.get_or_build("x", lambda: 1)

    assert cache.discard("x") is True
    assert cache.discard("x") is False
    cache.get_or_build("y", lambda: 2)
    cache.clear()
    assert len(cache) == 0
    assert cache.stats()["misses"] == 0


def test_failed_build_is_not_cached() -> None:
    cache: SolutionCache[int] = SolutionCache()

    def _boom() -> int:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        cache.get_or_build("x", _boom)
    assert "x" not in cache
    assert cache.get_or_build("x", lambda: 5) == 5


def test_concurrent_callers_build_once() -> None:
    cache: SolutionCache[object] = SolutionCache()
    calls: list[int] = []
    barrier = threading.Barrier(8)
    results: list[object] = []
    results_lock = threading.Lock()

    def _build() -> object:
        calls.append(1)
        time.sleep(0.05)
        return object()

    def _worker() -> None:
        barrier.wait()
        value = cache.get_or_build("game", _build)
        with results_lock:
            results.append(value)

    threads = [threading.Thread(target=_worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(calls) == 1
    assert len(results) == 8
    assert all(value is results[0] for value in results)


def test_rejects_non_positive_capacity() -> None:
    with pytest.raises(ValueError):
        SolutionCache(0)
