"""
tests/conftest.py — Shared pytest fixtures for the pipeline test suite.

Provides:
  fixture_path()         — resolves paths to tests/fixtures/
  *_csv / taipei_page    — fixture payloads as text / parsed JSON
  mock_supabase_client() — MagicMock of the Supabase client (prevents real DB calls)
  fake_store()           — in-memory stand-in that honours upsert conflict keys
  mock_http              — configured respx router for faking HTTP responses
"""

from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace
from typing import Any
from unittest.mock import MagicMock

import pytest
import respx

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Path helpers and payloads
# ---------------------------------------------------------------------------

@pytest.fixture
def fixture_path() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def changhua_csv() -> str:
    return (FIXTURES_DIR / "changhua_sample.csv").read_text(encoding="utf-8")


@pytest.fixture
def chiayi_csv() -> str:
    return (FIXTURES_DIR / "chiayi_sample.csv").read_text(encoding="utf-8")


@pytest.fixture
def taipei_page() -> dict:
    """One data.taipei resourceAquire page."""
    return json.loads((FIXTURES_DIR / "taipei_page.json").read_text(encoding="utf-8"))


@pytest.fixture
def datagov_metadata() -> dict:
    """data.gov.tw dataset metadata with JSON and CSV resources."""
    return json.loads((FIXTURES_DIR / "datagov_metadata.json").read_text(encoding="utf-8"))


# ---------------------------------------------------------------------------
# Supabase client mock
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_supabase_client() -> MagicMock:
    """
    A MagicMock that simulates the supabase.Client interface.

    Every chain used by the loader returns empty data by default.
    Override in individual tests: mock_supabase_client.table.return_value...
    """
    client = MagicMock()

    default_result = MagicMock()
    default_result.data = []
    default_result.count = 0

    table = client.table.return_value
    table.select.return_value.execute.return_value = default_result
    table.select.return_value.eq.return_value.in_.return_value.execute.return_value = default_result
    table.select.return_value.in_.return_value.in_.return_value.execute.return_value = default_result
    table.upsert.return_value.execute.return_value = default_result
    table.insert.return_value.execute.return_value = default_result
    table.update.return_value.eq.return_value.execute.return_value = default_result

    return client


# ---------------------------------------------------------------------------
# In-memory store
# ---------------------------------------------------------------------------

class _FakeQuery:
    def __init__(self, store: "FakeSupabase", table: str) -> None:
        self._store = store
        self._table = table
        self._op = "select"
        self._payload: Any = None
        self._conflict: list[str] = []
        self._filters: list[Any] = []

    def select(self, columns: str = "*") -> "_FakeQuery":
        self._op = "select"
        return self

    def insert(self, row: dict[str, Any]) -> "_FakeQuery":
        self._op, self._payload = "insert", row
        return self

    def update(self, values: dict[str, Any]) -> "_FakeQuery":
        self._op, self._payload = "update", values
        return self

    def upsert(self, rows: list[dict[str, Any]], on_conflict: str = "") -> "_FakeQuery":
        self._op, self._payload = "upsert", rows
        self._conflict = on_conflict.split(",")
        return self

    def eq(self, column: str, value: Any) -> "_FakeQuery":
        self._filters.append(lambda r: str(r.get(column)) == str(value))
        return self

    def in_(self, column: str, values: list[Any]) -> "_FakeQuery":
        allowed = {str(v) for v in values}
        self._filters.append(lambda r: str(r.get(column)) in allowed)
        return self

    def order(self, *args: Any, **kwargs: Any) -> "_FakeQuery":
        return self

    def limit(self, n: int) -> "_FakeQuery":
        return self

    def _matching(self, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return [r for r in rows if all(f(r) for f in self._filters)]

    def execute(self) -> SimpleNamespace:
        rows = self._store.tables.setdefault(self._table, [])
        if self._op == "insert":
            rows.append(dict(self._payload))
            return SimpleNamespace(data=[dict(self._payload)])
        if self._op == "update":
            matched = self._matching(rows)
            for row in matched:
                row.update(self._payload)
            return SimpleNamespace(data=[dict(r) for r in matched])
        if self._op == "upsert":
            self._store.upsert_calls += 1
            for incoming in self._payload:
                key = tuple(str(incoming.get(c)) for c in self._conflict)
                existing = next(
                    (r for r in rows if tuple(str(r.get(c)) for c in self._conflict) == key),
                    None,
                )
                if existing is None:
                    rows.append(dict(incoming))
                else:
                    existing.update(incoming)
            return SimpleNamespace(data=[dict(r) for r in self._payload])
        return SimpleNamespace(data=[dict(r) for r in self._matching(rows)])


class FakeSupabase:
    """Just enough of supabase.Client for SupabaseLoader."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.upsert_calls = 0

    def table(self, name: str) -> _FakeQuery:
        return _FakeQuery(self, name)


@pytest.fixture
def fake_store() -> FakeSupabase:
    store = FakeSupabase()
    store.tables["data_sources"] = [
        {"city": "台北市", "dataset_id": "134972", "record_count": 0, "status": "active"},
        {"city": "嘉義市", "dataset_id": "52344", "record_count": 0, "status": "active"},
        {"city": "嘉義縣", "dataset_id": "133739", "record_count": 0, "status": "active"},
        {"city": "彰化縣", "dataset_id": "28529", "record_count": 0, "status": "active"},
    ]
    return store


# ---------------------------------------------------------------------------
# respx HTTP mock router
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_http():
    """
    Activate the respx mock router for all httpx requests.

    Usage in tests:
        def test_something(mock_http):
            mock_http.get("https://...").mock(return_value=httpx.Response(200, json={...}))
    """
    with respx.mock(assert_all_called=False) as router:
        yield router
