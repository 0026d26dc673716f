"""Shared fixtures: an isolated SQLite data dir and a pinned "today"."""
from datetime import date

import pytest
from fastapi.testclient import TestClient

from studyassist import app
from studyassist.config import settings
from studyassist.dependencies import get_today

TODAY = date(2024, 6, 10)


@pytest.fixture()
def today() -> date:
    return TODAY


@pytest.fixture()
def client(monkeypatch: pytest.MonkeyPatch, tmp_path):
    monkeypatch.setattr(settings, "data_dir", tmp_path / "data")
    app.dependency_overrides[get_today] = lambda: TODAY
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def project(client: TestClient) -> dict:
    resp = client.post(
        "/projects/",
        json={"user_id": "user-1", "title": "Biologia", "tags": ["enem"]},
    )
    assert resp.status_code == 201
    return resp.json()
