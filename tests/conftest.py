from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from family_api import db
from family_api.main import create_app

from fakes import FakePool, FakeStore


@pytest.fixture()
def store(monkeypatch: pytest.MonkeyPatch) -> FakeStore:
    fake = FakeStore()
    pool = FakePool(fake)
    monkeypatch.setattr(db, "get_pool", lambda: pool)
    return fake


@pytest.fixture()
def harmony_client(store: FakeStore) -> TestClient:
    return TestClient(create_app("harmony"))


@pytest.fixture()
def legacy_client(store: FakeStore) -> TestClient:
    return TestClient(create_app("legacy"))
