"""
heritage_pipeline.sources — open-data fetchers.

Each source implements one upstream API shape:
  DataGovSource — data.gov.tw metadata document -> CSV resource download
  TaipeiSource  — data.taipei paginated JSON listing, re-serialized to CSV

Both return a FetchResult and never raise from fetch().
"""

from heritage_pipeline.sources.base import BaseSource, FetchResult
from heritage_pipeline.sources.datagov import DataGovSource
from heritage_pipeline.sources.taipei import TaipeiSource

__all__ = [
    "BaseSource",
    "FetchResult",
    "DataGovSource",
    "TaipeiSource",
]
