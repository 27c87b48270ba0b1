"""
heritage_shared — shared utilities, models, and configuration for the heritage platform.

Usage:
    from heritage_shared.config import settings
    from heritage_shared.db import get_supabase_client
    from heritage_shared.models import RawLandRecord, NormalizedLand
    from heritage_shared.geo import DistrictLookup, normalize_city_name
    from heritage_shared.units import m2_to_ping
    from heritage_shared.constants import DEFAULT_LAND_STATUS, LANDS_TABLE
"""

__version__ = "0.1.0"
