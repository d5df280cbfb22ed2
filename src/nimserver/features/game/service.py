from __future__ import annotations

import logging
import random
import threading
from collections.abc import Callable, Sequence
from typing import NoReturn

from ...core.config import Settings, load_settings
from ...core.errors import IllegalMove, InvalidConfiguration, NotFound, UnknownStrategy
from ...core.models import Game, GameState, Outcome
from ...core.rules import available_moves, is_stuck, normalize_legal_moves
from ...strategies.provider import StrategyProvider
from .concurrency import BlockingRunner
from .repository import GameRepository, InMemoryGameRepository

__all__ = ["GameService", "MoveChooser"]

logger = logging.getLogger(__name__)

MoveChooser = Callable[[Game, random.Random], int]


class GameService:
    """Turn engine: creates games and resolves one round per player move.

    A round is the player's half-move followed, unless that ended the game,
    by the computer's reply. Rounds on the same game are serialised with a
    per-game lock and committed to the repository only once fully resolved,
    so a rejected move leaves the stored game untouched.
    """

    def __init__(
        self,
        repository: GameRepository | None = None,
        provider: StrategyProvider | None = None,
        settings: Settings | None = None,
        runner: BlockingRunner | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.repository = repository or InMemoryGameRepository()
        if provider is None:
            rng = random.Random(self.settings.seed) if self.settings.seed is not None else None
            provider = StrategyProvider(rng=rng, dp_cache_size=self.settings.dp_cache_size)
        self.provider = provider
        self.runner = runner or BlockingRunner(self.settings.workers)
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # ------------------------------------------------------------------ operations
    def create_game(
        self,
        heap_size: int | None = None,
        legal_moves: Sequence[int] | None = None,
        strategy: str | None = None,
    ) -> Game:
        heap = self.settings.heap_size if heap_size is None else heap_size
        moves = self.settings.legal_moves if legal_moves is None else legal_moves
        strategy_id = self.settings.strategy if strategy is None else strategy

        if not self.provider.is_valid(strategy_id):
            raise UnknownStrategy(strategy_id)
        if isinstance(heap, bool) or not isinstance(heap, int) or heap < 0:
            raise InvalidConfiguration("heap_size", "Number of tokens at the beginning of the game should be at least 0")
        if heap > self.settings.max_heap_size:
            raise InvalidConfiguration(
                "heap_size",
                f"Number of tokens at the beginning of the game should be at most {self.settings.max_heap_size}",
            )
        normalized = normalize_legal_moves(moves)
        if is_stuck(normalized, heap):
            raise InvalidConfiguration("legal_moves", f"No legal move fits a heap of {heap}")

        game_id = self.repository.new_id()
        initial = GameState(id=self.repository.new_id(), game_id=game_id, heap_size=heap)
        game = Game(id=game_id, legal_moves=normalized, strategy=strategy_id).advance(initial)
        self.repository.save_state(initial)
        self.repository.save_game(game)
        logger.info(
            "Game created",
            extra={"game_id": game_id, "heap_size": heap, "legal_moves": normalized, "strategy": strategy_id},
        )
        return game

    def make_move(self, game_id: str, count: int) -> Game:
        # Unknown ids and finished games fail before a lock is allocated for them.
        current = self._require_game(game_id)
        if current.finished:
            self._reject(current, "Invalid turn, this game is already finished")
        with self._game_lock(game_id):
            game = self._require_game(game_id)
            state = game.require_state()
            if game.finished:
                # Another caller finished this game while we waited for its lock.
                self._release_lock(game_id)
                self._reject(game, "Invalid turn, this game is already finished")
            if isinstance(count, bool) or count not in game.legal_moves:
                self._reject(game, f"Invalid turn, taking {count} is not allowed")
            if count > state.heap_size:
                self._reject(game, "Invalid turn, trying to take more tokens than left on the heap")

            draft, new_states = self._play_round(game, count)

            for new_state in new_states:
                self.repository.save_state(new_state)
            self.repository.save_game(draft)

            if draft.finished:
                self.provider.forget(draft.id)
                self._release_lock(draft.id)
                logger.info(
                    "Game finished",
                    extra={"game_id": draft.id, "winner": draft.outcome.value, "turns": draft.require_state().turn_index},
                )
            return draft

    def get_game(self, game_id: str) -> Game:
        return self._require_game(game_id)

    def remove_game(self, game_id: str) -> None:
        with self._game_lock(game_id):
            removed = self.repository.delete_game(game_id)
            if removed:
                self.provider.forget(game_id)
        self._release_lock(game_id)
        if not removed:
            raise NotFound(f"No game with ID {game_id}")
        logger.debug("Game removed", extra={"game_id": game_id})

    def play_out(self, game_id: str, chooser: MoveChooser, rng: random.Random | None = None) -> Game:
        """Play ``game_id`` to the end, asking ``chooser`` for every player move."""

        rng = rng or random.Random()
        game = self.get_game(game_id)
        while not game.finished:
            game = self.make_move(game_id, chooser(game, rng))
        return game

    async def create_game_async(
        self,
        heap_size: int | None = None,
        legal_moves: Sequence[int] | None = None,
        strategy: str | None = None,
    ) -> Game:
        return await self.runner.run(self.create_game, heap_size, legal_moves, strategy)

    async def make_move_async(self, game_id: str, count: int) -> Game:
        return await self.runner.run(self.make_move, game_id, count)

    async def get_game_async(self, game_id: str) -> Game:
        return await self.runner.run(self.get_game, game_id)

    async def remove_game_async(self, game_id: str) -> None:
        await self.runner.run(self.remove_game, game_id)

    def close(self) -> None:
        self.runner.shutdown(wait=False)

    # ------------------------------------------------------------------ helpers
    def _game_lock(self, game_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(game_id)
            if lock is None:
                lock = self._locks[game_id] = threading.Lock()
            return lock

    def _release_lock(self, game_id: str) -> None:
        with self._locks_guard:
            self._locks.pop(game_id, None)

    def _require_game(self, game_id: str) -> Game:
        game = self.repository.find_game_by_id(game_id)
        if game is None:
            raise NotFound(f"No game with ID {game_id}")
        return game

    def _reject(self, game: Game, message: str) -> NoReturn:
        logger.warning("Move rejected: %s", message, extra={"game_id": game.id})
        raise IllegalMove(message)

    def _play_round(self, game: Game, count: int) -> tuple[Game, list[GameState]]:
        player_state = game.require_state().successor(self.repository.new_id(), count)
        draft = game.advance(player_state)
        logger.debug("Player took %d", count, extra={"game_id": game.id, "heap_size": player_state.heap_size})
        if self._settle(draft, empty_heap_winner=Outcome.COMPUTER):
            return draft, [player_state]

        strategy = self.provider.resolve(game.strategy)
        reply = strategy.calculate_move(draft)
        if reply not in available_moves(draft.legal_moves, player_state.heap_size):
            raise IllegalMove(f"Strategy {game.strategy} chose an illegal move ({reply})")

        computer_state = player_state.successor(self.repository.new_id(), reply)
        draft = draft.advance(computer_state)
        logger.debug("Computer took %d", reply, extra={"game_id": game.id, "heap_size": computer_state.heap_size})
        self._settle(draft, empty_heap_winner=Outcome.PLAYER)
        return draft, [player_state, computer_state]

    def _settle(self, draft: Game, *, empty_heap_winner: Outcome) -> bool:
        """Decide ``draft`` if its last half-move ended the game."""

        state = draft.require_state()
        if state.heap_size == 0:
            # Misère rule: whoever took the last token loses.
            draft.finish(empty_heap_winner)
            return True
        if is_stuck(draft.legal_moves, state.heap_size):
            # The side to move has no legal move and loses.
            winner = Outcome.COMPUTER if state.is_players_turn else Outcome.PLAYER
            logger.warning(
                "No legal move for %s with %d tokens left",
                "player" if state.is_players_turn else "computer",
                state.heap_size,
                extra={"game_id": draft.id},
            )
            draft.finish(winner)
            return True
        return False
