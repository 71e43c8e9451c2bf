# backend/tests/test_api.py
from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import FakeRepository, make_article
from stockwatch.core.errors import ConfigurationError, NoCompaniesError, StoreError
from stockwatch.schemas.stock import StockRecord


@pytest.fixture
def repo():
    return FakeRepository([
        StockRecord(company="IBM", ticker="IBM", history=[make_article("http://n.com/1")],
                    price_history={"2018-01-25": 165.0}),
    ])


@pytest.fixture
def updater():
    u = MagicMock()
    u.run = AsyncMock(return_value=[StockRecord(company="IBM", ticker="IBM")])
    return u


@pytest.fixture
def client(monkeypatch, repo, updater):
    # no real MongoDB or scheduler
    monkeypatch.setattr("stockwatch.main.connect_to_mongo", AsyncMock())
    monkeypatch.setattr("stockwatch.main.close_mongo_connection", AsyncMock())
    monkeypatch.setattr("stockwatch.main.start_scheduler", lambda: None)
    monkeypatch.setattr("stockwatch.main.shutdown_scheduler", lambda: None)

    from fastapi.testclient import TestClient
    from stockwatch.api.deps import get_stock_repository, get_stock_update
    from stockwatch.main import app

    app.dependency_overrides[get_stock_repository] = lambda: repo
    app.dependency_overrides[get_stock_update] = lambda: updater
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def test_root(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["api_endpoints"]["stocks"] == "/api/stocks"


def test_health(client, monkeypatch):
    db = MagicMock()
    db.command = AsyncMock(return_value={"ok": 1})
    monkeypatch.setattr("stockwatch.routers.health.get_db", lambda: db)
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["database"] == "healthy"
    assert r.json()["scheduler"]["running"] is False


def test_health_db_down(client, monkeypatch):
    db = MagicMock()
    db.command = AsyncMock(side_effect=RuntimeError("down"))
    monkeypatch.setattr("stockwatch.routers.health.get_db", lambda: db)
    data = client.get("/api/health").json()
    assert data["database"] == "unhealthy"
    assert data["status"] == "degraded"


def test_list_stocks(client):
    r = client.get("/api/stocks")
    assert r.status_code == 200
    data = r.json()
    assert [d["company"] for d in data] == ["IBM"]
    assert data[0]["history"][0]["url"] == "http://n.com/1"


def test_list_stocks_store_down(client, repo):
    repo.fail_search = True
    assert client.get("/api/stocks").status_code == 502


def test_get_stock(client):
    r = client.get("/api/stocks/IBM")
    assert r.status_code == 200
    assert r.json()["price_history"] == {"2018-01-25": 165.0}


def test_get_stock_missing(client):
    assert client.get("/api/stocks/Nope").status_code == 404


def test_refresh_with_companies(client, updater):
    r = client.post("/api/stocks/refresh", json={"companies": ["  IBM "]})
    assert r.status_code == 200
    assert r.json()[0]["company"] == "IBM"
    updater.run.assert_awaited_once_with(["IBM"])


def test_refresh_all(client, updater):
    r = client.post("/api/stocks/refresh")
    assert r.status_code == 200
    updater.run.assert_awaited_once_with(None)


@pytest.mark.parametrize("exc,status", [
    (ConfigurationError("not configured"), 503),
    (NoCompaniesError("none"), 404),
    (StoreError("down"), 502),
])
def test_refresh_errors(client, updater, exc, status):
    updater.run = AsyncMock(side_effect=exc)
    assert client.post("/api/stocks/refresh", json={"companies": ["IBM"]}).status_code == status


def test_refresh_rejects_blank_company(client):
    assert client.post("/api/stocks/refresh", json={"companies": ["   "]}).status_code == 400
