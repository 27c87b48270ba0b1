"""
db.py — Supabase (PostgREST) clients, one per key role per process.

The sync pipeline writes with the service-role key; the API's readiness probe
reads with the anon key, which is subject to the RLS policies in
supabase/migrations/001_initial_schema.sql.

Usage:
    from heritage_shared.db import get_supabase_client

    reader = get_supabase_client()                    # anon key
    writer = get_supabase_client(service_role=True)   # service-role key
"""

from __future__ import annotations

import threading
from typing import Literal

import structlog
from supabase import Client, create_client

from heritage_shared.config import settings

log = structlog.get_logger(__name__)

Role = Literal["anon", "service_role"]

_clients: dict[Role, Client] = {}
_lock = threading.Lock()


def _key_for(role: Role) -> str:
    if role == "service_role":
        if not settings.supabase_service_key:
            raise RuntimeError(
                "SUPABASE_SERVICE_KEY is not set. The sync pipeline needs the "
                "service-role key to write unclaimed_lands and sync_logs."
            )
        return settings.supabase_service_key
    if not settings.supabase_anon_key:
        raise RuntimeError("SUPABASE_ANON_KEY is not set.")
    return settings.supabase_anon_key


def get_supabase_client(*, service_role: bool = False) -> Client:
    """
    Return the process-wide client for the requested role, creating it once.

    Raises:
        RuntimeError: if the key for that role is not configured.
    """
    role: Role = "service_role" if service_role else "anon"
    with _lock:
        client = _clients.get(role)
        if client is None:
            client = create_client(settings.supabase_url, _key_for(role))
            _clients[role] = client
            log.info("supabase_client_created", role=role, url=settings.supabase_url)
        return client


def reset_supabase_clients() -> None:
    """Drop cached clients so the next call re-reads settings."""
    with _lock:
        _clients.clear()
