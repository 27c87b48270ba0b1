"""
parsers/taipei.py — 台北市 unclaimed-inheritance land list (data.taipei 134972).

Columns: 被繼承人姓名, 土地區段, 地段, 地號, 面積, 列管情形
The district lives in 土地區段, not a 鄉鎮市區 column.
"""

from __future__ import annotations

from heritage_shared.constants import TAIPEI
from heritage_pipeline.parsers.base import BaseParser, ParserKind


class TaipeiParser(BaseParser):
    kind = ParserKind.TAIPEI

    owner_columns = ("被繼承人姓名", "所有權人姓名")
    district_columns = ("土地區段", "行政區")
    section_columns = ("地段",)
    land_number_columns = ("地號",)
    area_m2_columns = ("面積", "面積(平方公尺)")
    area_ping_columns = ("面積(坪)",)
    status_columns = ("列管情形",)

    def __init__(self, city_name: str = TAIPEI) -> None:
        super().__init__(city_name)
