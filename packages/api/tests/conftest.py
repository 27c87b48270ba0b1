"""Shared test fixtures for heritage-api."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from heritage_shared.config import settings
from heritage_pipeline.pipelines.unclaimed_lands import CitySyncResult, SyncRunResult


def make_chain(data=None, count=0):
    """Create a chainable mock that returns given data on execute()."""
    chain = MagicMock()
    chain.execute.return_value = MagicMock(data=data or [], count=count)
    for method in ("select", "eq", "in_", "order", "limit"):
        getattr(chain, method).return_value = chain
    return chain


def make_supabase(fail: Exception | None = None):
    """A mock Supabase client; table() raises `fail` when given."""
    client = MagicMock()
    if fail is not None:
        client.table.side_effect = fail
    else:
        client.table.return_value = make_chain()
    return client


@pytest.fixture()
def secrets(monkeypatch):
    """Known secrets for the guarded endpoints."""
    monkeypatch.setattr(settings, "cron_secret", "cron-s3cret")
    monkeypatch.setattr(settings, "admin_api_key", "admin-s3cret")
    monkeypatch.setattr(settings, "environment", "development")
    return {"cron": "cron-s3cret", "admin": "admin-s3cret"}


@pytest.fixture()
def sync_result() -> SyncRunResult:
    return SyncRunResult(
        results=[
            CitySyncResult(city="台北市", success=True, records_added=10, records_updated=2),
            CitySyncResult(city="嘉義市", success=True, records_added=3),
        ]
    )


@pytest.fixture()
def run_sync(sync_result):
    """Patch the orchestrator entry point the routers call."""
    with patch(
        "heritage_pipeline.pipelines.unclaimed_lands.run",
        new_callable=AsyncMock,
        return_value=sync_result,
    ) as mock:
        yield mock


@pytest.fixture()
def app():
    from heritage_api.app import create_app
    return create_app()


@pytest.fixture()
def client(app):
    """HTTP test client."""
    return TestClient(app)


@pytest.fixture()
def store_up():
    return make_supabase()


@pytest.fixture()
def store_down():
    return make_supabase(fail=RuntimeError("connection refused"))
