"""Runtime settings for the game server.

Defaults for new games and cache sizing come from environment variables so
the same build can be tuned per deployment without code changes::

    from nimserver.core import config

    settings = config.load_settings()
    settings.heap_size  # 13 unless NIMSERVER_HEAP_SIZE says otherwise

Tests can temporarily replace individual values with :func:`override`.
Overrides are stacked, so nested contexts behave predictably.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, fields
from typing import Any, Final

from .errors import InvalidConfiguration
from .rules import normalize_legal_moves

ENV_HEAP_SIZE: Final = "NIMSERVER_HEAP_SIZE"
ENV_MAX_HEAP_SIZE: Final = "NIMSERVER_MAX_HEAP_SIZE"
ENV_LEGAL_MOVES: Final = "NIMSERVER_LEGAL_MOVES"
ENV_STRATEGY: Final = "NIMSERVER_STRATEGY"
ENV_CACHE_SIZE: Final = "NIMSERVER_DP_CACHE_SIZE"
ENV_SEED: Final = "NIMSERVER_SEED"
ENV_WORKERS: Final = "NIMSERVER_WORKERS"
ENV_BIND: Final = "BIND"
ENV_PORT: Final = "PORT"


@dataclass(frozen=True)
class Settings:
    heap_size: int = 13
    max_heap_size: int = 10_000
    legal_moves: tuple[int, ...] = (1, 2, 3)
    strategy: str = "DP"
    dp_cache_size: int = 1024
    seed: int | None = None
    workers: int | None = None
    bind: str = "0.0.0.0"
    port: int = 8000


_OVERRIDE_STACK: list[dict[str, Any]] = []


def _parse_int(name: str, raw: str, *, minimum: int) -> int:
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise InvalidConfiguration(name, f"{name} must be an integer, got {raw!r}") from exc
    if value < minimum:
        raise InvalidConfiguration(name, f"{name} must be at least {minimum}")
    return value


def _parse_moves(raw: str) -> tuple[int, ...]:
    entries = [entry for entry in raw.split(",") if entry.strip()]
    values = [_parse_int(ENV_LEGAL_MOVES, entry, minimum=1) for entry in entries]
    try:
        return normalize_legal_moves(values)
    except InvalidConfiguration as exc:
        raise InvalidConfiguration(ENV_LEGAL_MOVES, exc.message) from exc


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from ``environ`` (``os.environ`` by default)."""

    env = os.environ if environ is None else environ
    values: dict[str, Any] = {}

    raw = env.get(ENV_HEAP_SIZE)
    if raw:
        values["heap_size"] = _parse_int(ENV_HEAP_SIZE, raw, minimum=0)
    raw = env.get(ENV_MAX_HEAP_SIZE)
    if raw:
        values["max_heap_size"] = _parse_int(ENV_MAX_HEAP_SIZE, raw, minimum=1)
    raw = env.get(ENV_LEGAL_MOVES)
    if raw:
        values["legal_moves"] = _parse_moves(raw)
    raw = env.get(ENV_STRATEGY)
    if raw and raw.strip():
        values["strategy"] = raw.strip().upper()
    raw = env.get(ENV_CACHE_SIZE)
    if raw:
        values["dp_cache_size"] = _parse_int(ENV_CACHE_SIZE, raw, minimum=1)
    raw = env.get(ENV_SEED)
    if raw:
        values["seed"] = _parse_int(ENV_SEED, raw, minimum=0)
    raw = env.get(ENV_WORKERS)
    if raw:
        values["workers"] = _parse_int(ENV_WORKERS, raw, minimum=1)
    raw = env.get(ENV_BIND)
    if raw:
        values["bind"] = raw.strip()
    raw = env.get(ENV_PORT)
    if raw:
        values["port"] = _parse_int(ENV_PORT, raw, minimum=1)

    for layer in _OVERRIDE_STACK:
        values.update(layer)
    settings = Settings(**values)
    if settings.heap_size > settings.max_heap_size:
        raise InvalidConfiguration(
            ENV_HEAP_SIZE, f"{ENV_HEAP_SIZE} must be at most {ENV_MAX_HEAP_SIZE} ({settings.max_heap_size})"
        )
    return settings


@contextmanager
def override(**values: Any) -> Iterator[Settings]:
    """Temporarily replace settings within the context."""

    known = {f.name for f in fields(Settings)}
    unknown = set(values) - known
    if unknown:
        raise TypeError(f"unknown settings: {', '.join(sorted(unknown))}")
    if "legal_moves" in values:
        values["legal_moves"] = normalize_legal_moves(values["legal_moves"])
    _OVERRIDE_STACK.append(dict(values))
    try:
        yield load_settings()
    finally:
        _OVERRIDE_STACK.pop()
