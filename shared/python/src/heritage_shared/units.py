"""
units.py — Area unit helpers (m² <-> 坪).

1 坪 (ping) = 3.30579 m². Results are rounded to 2 decimal places.

Usage:
    from heritage_shared.units import m2_to_ping, ping_to_m2

    m2_to_ping(150.5)   # 45.53
    ping_to_m2(45.53)   # 150.51
"""

from __future__ import annotations

from heritage_shared.constants import AREA_DECIMALS, M2_PER_PING


def m2_to_ping(m2: float) -> float:
    """Convert square metres to 坪, rounded to 2 decimals."""
    return round(m2 / M2_PER_PING, AREA_DECIMALS)


def ping_to_m2(ping: float) -> float:
    """Convert 坪 to square metres, rounded to 2 decimals."""
    return round(ping * M2_PER_PING, AREA_DECIMALS)
