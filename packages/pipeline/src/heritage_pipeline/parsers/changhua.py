"""
parsers/changhua.py — 彰化縣 unclaimed-inheritance land list (data.gov.tw 28529).

Columns: 被繼承人姓名, 鄉鎮市區, 地段, 地號, 面積, 公告現值, 列管情形
公告現值 (announced land value) is kept only in raw_data.
"""

from __future__ import annotations

from heritage_shared.constants import CHANGHUA_COUNTY
from heritage_pipeline.parsers.base import BaseParser, ParserKind


class ChanghuaParser(BaseParser):
    kind = ParserKind.CHANGHUA

    owner_columns = ("被繼承人姓名", "所有權人姓名")
    district_columns = ("鄉鎮市區", "鄉鎮市")
    section_columns = ("地段",)
    land_number_columns = ("地號",)
    area_m2_columns = ("面積", "面積(平方公尺)", "土地面積(平方公尺)")
    area_ping_columns = ("面積(坪)",)
    status_columns = ("列管情形",)

    def __init__(self, city_name: str = CHANGHUA_COUNTY) -> None:
        super().__init__(city_name)
