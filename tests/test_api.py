"""Tests for the FastAPI web UI.

Most tests create the poller through the app's lifespan without starting it
and drive :meth:`QuotePoller.tick` from the test thread, so every render goes
through the real asyncio hand-off.  ``TestLifespan`` covers restarts and the
background thread itself.
"""

from __future__ import annotations

import time

import pytest
from fastapi.testclient import TestClient

from api.routes import create_app


@pytest.fixture()
def client_for(make_provider):
    """Build a TestClient around a scripted provider."""
    clients: list[TestClient] = []

    def _build(script, chart_cfg=None):
        app = create_app(
            make_provider(script),
            interval=5.0,
            chart_cfg=chart_cfg or {"refresh_seconds": 1},
            start_poller=False,
        )
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return app, client

    yield _build

    for client in clients:
        client.__exit__(None, None, None)


class TestSeriesRoutes:
    def test_empty_series(self, client_for) -> None:
        _, client = client_for([])
        resp = client.get("/api/series")
        assert resp.status_code == 200
        assert resp.json() == {"symbol": "DIA", "points": []}

    def test_ticks_show_up_in_order(self, client_for, make_payload) -> None:
        app, client = client_for([
            make_payload("426.75"),
            make_payload("abc"),
            make_payload("427.00"),
        ])
        poller = app.state.poller
        for _ in range(3):
            poller.tick()

        resp = client.get("/api/series")
        assert resp.json()["points"] == [
            {"index": 1, "value": 426.75},
            {"index": 2, "value": 427.0},
        ]

    def test_chart_json(self, client_for, make_payload) -> None:
        app, client = client_for([make_payload("426.75")])
        app.state.poller.tick()

        body = client.get("/api/chart").json()
        assert body["data"][0]["name"] == "DIA"
        assert body["layout"]["xaxis"]["title"]["text"] == "Fetch #"


class TestPages:
    def test_index_renders(self, client_for) -> None:
        _, client = client_for([], chart_cfg={"title": "DIA Live", "refresh_seconds": 3})
        resp = client.get("/")
        assert resp.status_code == 200
        assert "DIA Live" in resp.text
        assert "const REFRESH_MS = 3000;" in resp.text

    def test_health(self, client_for, make_payload) -> None:
        app, client = client_for([make_payload("426.75"), "{"])
        app.state.poller.tick()
        app.state.poller.tick()

        body = client.get("/health").json()
        assert body["status"] == "ok"
        assert body["symbol"] == "DIA"
        assert body["running"] is False
        assert body["ticks"] == 2
        assert body["failures"] == 1
        assert body["counter"] == 1
        assert body["last_price"] == 426.75
        assert body["points"] == 1


class TestLifespan:
    def test_restart_continues_indices(self, make_provider, make_payload) -> None:
        app = create_app(
            make_provider([make_payload("1.0"), make_payload("2.0")]),
            interval=5.0,
            chart_cfg={},
            start_poller=False,
        )

        with TestClient(app):
            app.state.poller.tick()
        with TestClient(app) as client:
            app.state.poller.tick()
            points = client.get("/api/series").json()["points"]
            health = client.get("/health").json()

        assert points == [
            {"index": 1, "value": 1.0},
            {"index": 2, "value": 2.0},
        ]
        assert health["counter"] == 2
        assert health["points"] == 2
        assert health["ticks"] == 2

    def test_poller_runs_inside_lifespan_only(self, make_provider, make_payload) -> None:
        app = create_app(
            make_provider([make_payload("426.75")] * 10),
            interval=60.0,
            chart_cfg={},
        )

        with TestClient(app) as client:
            deadline = time.monotonic() + 5
            health = client.get("/health").json()
            while health["points"] < 1 and time.monotonic() < deadline:
                time.sleep(0.01)
                health = client.get("/health").json()

            assert health["running"] is True
            assert health["points"] == 1
            assert health["last_price"] == 426.75
            poller = app.state.poller

        assert not poller.is_running
