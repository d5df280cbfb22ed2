from __future__ import annotations

import asyncio
import os
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any


def default_workers() -> int:
    return max(1, min(32, os.cpu_count() or 1))


class BlockingRunner:
    """Hand blocking engine calls to a worker pool from async handlers.

    The engine serialises each game with a thread lock, so request handlers
    must never call it directly on the event loop.
    """

    def __init__(self, max_workers: int | None = None) -> None:
        self.max_workers = max_workers or default_workers()
        self._executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="nim-game")

    async def run(self, func: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, partial(func, *args, **kwargs))

    def shutdown(self, *, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
