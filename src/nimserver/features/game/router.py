from __future__ import annotations

import uuid

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field, model_validator

from ...core.errors import IllegalMove, InvalidConfiguration, NimError, NotFound
from .schemas import GamePayload, StrategiesPayload
from .service import GameService

__all__ = ["CreateGameRequest", "LegacyMoveRequest", "MoveRequest", "create_game_routers"]

_STATUS_BY_ERROR: tuple[tuple[type[NimError], int], ...] = (
    (NotFound, 404),
    (IllegalMove, 403),
    (InvalidConfiguration, 422),
)


class CreateGameRequest(BaseModel):
    """New-game options; anything missing or malformed falls back to the server defaults."""

    model_config = ConfigDict(populate_by_name=True)

    heap_size: int | None = Field(default=None, alias="matches")
    legal_moves: list[int] | None = Field(default=None, alias="allowedMoves")
    strategy: str | None = Field(default=None, alias="computerStrategy")

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, data: object) -> object:
        if not isinstance(data, dict):
            return data
        cleaned: dict[str, object] = dict(data)
        for alias, name in (("matches", "heap_size"), ("allowedMoves", "legal_moves"), ("computerStrategy", "strategy")):
            key = alias if alias in cleaned else name
            if key not in cleaned:
                continue
            value = cleaned.pop(key)
            if name == "heap_size":
                cleaned[alias] = _coerce_int(value)
            elif name == "legal_moves":
                cleaned[alias] = _coerce_moves(value)
            elif isinstance(value, str) and value.strip():
                cleaned[alias] = value.strip().upper()
            else:
                cleaned[alias] = None
        return cleaned


class MoveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    count: int = Field(alias="nMatches")


class LegacyMoveRequest(MoveRequest):
    id: str


def _coerce_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _coerce_moves(value: object) -> list[int] | None:
    if not isinstance(value, list):
        return None
    moves: list[int] = []
    for item in value:
        coerced = _coerce_int(item)
        if coerced is None:
            return None
        moves.append(coerced)
    return moves


def _http_error(exc: NimError) -> HTTPException:
    for kind, status in _STATUS_BY_ERROR:
        if isinstance(exc, kind):
            return HTTPException(status, exc.to_dict())
    return HTTPException(400, exc.to_dict())


def _parse_game_id(raw: str) -> str:
    try:
        return str(uuid.UUID(raw))
    except (TypeError, ValueError) as exc:
        error = InvalidConfiguration("id", f"Invalid game id {raw!r}")
        raise _http_error(error) from exc


class _GameController:
    def __init__(self, service: GameService) -> None:
        self.service = service

    def _json_response(self, payload: GamePayload) -> JSONResponse:
        return JSONResponse(payload.to_dict())

    async def create(self, body: CreateGameRequest) -> Response:
        try:
            game = await self.service.create_game_async(body.heap_size, body.legal_moves, body.strategy)
        except NimError as exc:
            raise _http_error(exc) from exc
        return self._json_response(GamePayload.from_game(game))

    async def get(self, raw_id: str, *, history: bool = False) -> Response:
        game_id = _parse_game_id(raw_id)
        try:
            game = await self.service.get_game_async(game_id)
        except NimError as exc:
            raise _http_error(exc) from exc
        return self._json_response(GamePayload.from_game(game, include_history=history))

    async def move(self, raw_id: str, count: int) -> Response:
        game_id = _parse_game_id(raw_id)
        try:
            game = await self.service.make_move_async(game_id, count)
        except NimError as exc:
            raise _http_error(exc) from exc
        return self._json_response(GamePayload.from_game(game))

    async def remove(self, raw_id: str) -> Response:
        game_id = _parse_game_id(raw_id)
        try:
            await self.service.remove_game_async(game_id)
        except NimError as exc:
            raise _http_error(exc) from exc
        return Response(status_code=204)

    def strategies(self) -> Response:
        payload = StrategiesPayload(
            strategies=list(self.service.provider.available()),
            default=self.service.settings.strategy,
        )
        return JSONResponse(payload.to_dict())


def create_game_routers(service: GameService) -> tuple[APIRouter, APIRouter]:
    controller = _GameController(service)

    router_v1 = APIRouter(prefix="/api/v1/game", tags=["game"])
    router_legacy = APIRouter(prefix="/game", tags=["game-legacy"])

    @router_v1.post("")
    async def create_game(body: CreateGameRequest) -> Response:
        return await controller.create(body)

    @router_legacy.post("/new")
    async def create_game_legacy(body: CreateGameRequest) -> Response:
        return await controller.create(body)

    @router_v1.get("/strategies")
    async def list_strategies() -> Response:
        return controller.strategies()

    @router_v1.get("/{game_id}")
    async def get_game(game_id: str, history: bool = False) -> Response:
        return await controller.get(game_id, history=history)

    @router_legacy.get("/get")
    async def get_game_legacy(id: str) -> Response:  # noqa: A002 - query parameter name
        return await controller.get(id)

    @router_v1.post("/{game_id}/move")
    async def make_move(game_id: str, body: MoveRequest) -> Response:
        return await controller.move(game_id, body.count)

    @router_legacy.post("/makeMove")
    async def make_move_legacy(body: LegacyMoveRequest) -> Response:
        return await controller.move(body.id, body.count)

    @router_v1.delete("/{game_id}")
    async def remove_game(game_id: str) -> Response:
        return await controller.remove(game_id)

    return router_v1, router_legacy
