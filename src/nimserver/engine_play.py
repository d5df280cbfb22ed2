from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import replace

from rich.console import Console

from .core.config import load_settings
from .core.models import Game
from .features.game import GameService
from .ui.presenters import RichPresenter


def run_play(
    heap_size: int | None = None,
    legal_moves: Sequence[int] | None = None,
    strategy: str | None = None,
    seed: int | None = None,
    no_color: bool = False,
    _input_fn: Callable[[str], str] = input,
    _console: Console | None = None,
) -> Game:
    """Play one interactive game in the terminal; returns the final game."""

    settings = load_settings()
    if seed is not None:
        settings = replace(settings, seed=seed)
    service = GameService(settings=settings)
    presenter = RichPresenter(no_color=no_color, console=_console, input_fn=_input_fn)
    try:
        game = service.create_game(heap_size, legal_moves, strategy)
        presenter.start_game(game)
        while not game.finished:
            presenter.show_state(game)
            count = presenter.prompt_move(game)
            if count is None:
                break
            updated = service.make_move(game.id, count)
            presenter.show_round(game, updated)
            game = updated
        presenter.summary(game)
        return game
    finally:
        service.close()
