"""Tests for liveness/readiness and the store health cache."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from heritage_api.utils.health import StoreHealthCache

GET_CLIENT = "heritage_api.routers.health.get_supabase_client"


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


class TestReady:
    def test_store_available(self, client, store_up):
        with patch(GET_CLIENT, return_value=store_up):
            response = client.get("/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ready"
        assert body["store"]["available"] is True
        assert body["store"]["checked_at"] is not None

    def test_store_unavailable(self, client, store_down):
        with patch(GET_CLIENT, return_value=store_down):
            response = client.get("/ready")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "unavailable"
        assert body["store"]["error"] == "connection refused"

    def test_missing_key_is_unavailable(self, client):
        with patch(GET_CLIENT, side_effect=RuntimeError("SUPABASE_ANON_KEY is not set.")):
            response = client.get("/ready")

        assert response.status_code == 503

    def test_result_is_cached_on_the_app(self, app, client, store_up):
        with patch(GET_CLIENT, return_value=store_up) as factory:
            client.get("/ready")
            client.get("/ready")

        assert factory.call_count == 1
        assert app.state.store_health.available is True


class TestStoreHealthCache:
    def test_stale_until_first_check(self):
        cache = StoreHealthCache(ttl_s=60)
        assert cache.is_stale()
        assert cache.available is None

    def test_ttl_expiry_triggers_a_new_probe(self, store_up):
        clock = FakeClock()
        cache = StoreHealthCache(ttl_s=60, clock=clock)
        factory = MagicMock(return_value=store_up)

        assert cache.current(factory) is True
        clock.now += 59
        assert cache.current(factory) is True
        assert factory.call_count == 1

        clock.now += 1
        assert cache.is_stale()
        cache.current(factory)
        assert factory.call_count == 2

    def test_explicit_refresh_always_probes(self, store_up, store_down):
        cache = StoreHealthCache(ttl_s=60, clock=FakeClock())

        assert cache.refresh(lambda: store_up) is True
        assert cache.refresh(lambda: store_down) is False
        assert cache.snapshot()["available"] is False
        assert cache.error == "connection refused"

    def test_recovery_clears_error(self, store_up, store_down):
        cache = StoreHealthCache(ttl_s=0, clock=FakeClock())
        cache.refresh(lambda: store_down)
        cache.refresh(lambda: store_up)
        assert cache.available is True
        assert cache.error is None
