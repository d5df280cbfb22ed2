from __future__ import annotations

from fastapi.testclient import TestClient

from nimserver.core.config import Settings
from nimserver.features.game import GameService
from nimserver.web.app import app, create_app


def test_healthz() -> None:
    client = TestClient(app)
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_web_game_flow_until_finished() -> None:
    service = GameService(settings=Settings(seed=3))
    with TestClient(create_app(service)) as client:
        r = client.post("/api/v1/game", json={"matches": 13, "computerStrategy": "DP"})
        assert r.status_code == 200
        game = r.json()
        game_id = game["id"]

        rounds = 0
        while game["winner"] == "none":
            left = game["currentState"]["numMatches"]
            take = min(move for move in game["allowedMoves"] if move <= left)
            r = client.post(f"/api/v1/game/{game_id}/move", json={"count": take})
            assert r.status_code == 200
            game = r.json()
            rounds += 1
            assert rounds <= 13

        assert game["winner"] in {"Player", "Computer"}
        history = client.get(f"/api/v1/game/{game_id}", params={"history": True}).json()["history"]
        assert len(history) == game["currentState"]["turn"] + 1


def test_openapi_lists_game_routes() -> None:
    client = TestClient(app)
    schema = client.get("/openapi.json").json()
    assert "/api/v1/game" in schema["paths"]
    assert "/game/makeMove" in schema["paths"]
