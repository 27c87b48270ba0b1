"""
parsers/chiayi.py — 嘉義市 (data.gov.tw 52344) and 嘉義縣 (133739) lists.

The city and county publish under slightly different headers, so every
field has more than one candidate. When 地號 is blank the 小段 value stands
in for the land number before falling back to a placeholder.
"""

from __future__ import annotations

from typing import Any

from heritage_shared.constants import CHIAYI_CITY
from heritage_pipeline.parsers.base import BaseParser, ParserKind


class ChiayiParser(BaseParser):
    kind = ParserKind.CHIAYI

    owner_columns = ("被繼承人", "姓名", "被繼承人姓名")
    district_columns = ("區域", "鄉鎮市區", "鄉鎮市")
    section_columns = ("地段", "段")
    land_number_columns = ("地號",)
    area_m2_columns = ("面積", "土地面積", "土地面積(平方公尺)")
    area_ping_columns = ("面積(坪)",)
    status_columns = ("管理情形", "列管情形")

    def __init__(self, city_name: str = CHIAYI_CITY) -> None:
        super().__init__(city_name)

    def land_number_for(
        self, row: dict[str, Any], explicit: str | None, index: int
    ) -> str:
        if explicit:
            return explicit
        return self.first_value(row, "小段") or self.placeholder_land_number(index)
