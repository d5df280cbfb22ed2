from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from ..core.config import load_settings
from ..features.game import GameService, create_game_routers


def create_app(service: GameService | None = None) -> FastAPI:
    service = service or GameService()

    @asynccontextmanager
    async def _lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        service.close()

    application = FastAPI(title="Nim Game Server", lifespan=_lifespan)
    application.state.game_service = service

    @application.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    router_v1, router_legacy = create_game_routers(service)
    application.include_router(router_v1)
    application.include_router(router_legacy)

    def _custom_openapi() -> dict[str, object]:
        if application.openapi_schema:
            return application.openapi_schema
        schema = get_openapi(
            title=application.title,
            version="1.0.0",
            description="Misère Nim against a random or DP computer player.",
            routes=application.routes,
        )
        application.openapi_schema = schema
        return schema

    application.openapi = _custom_openapi  # type: ignore[method-assign]
    return application


app = create_app()


def main(host: str | None = None, port: int | None = None) -> None:  # pragma: no cover - runner
    import uvicorn

    settings = load_settings()
    uvicorn.run(app, host=host or settings.bind, port=port or settings.port, factory=False)


if __name__ == "__main__":  # pragma: no cover
    main()
