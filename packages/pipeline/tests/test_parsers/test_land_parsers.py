"""
tests/test_parsers/test_land_parsers.py — Unit tests for the county CSV parsers.

Tests cover:
  - Row filtering (no owner and no land number -> dropped)
  - Placeholder land numbers derived from the row index
  - Owner-name cleaning and area parsing (malformed -> None, never 0)
  - Header spelling variants per county
  - Parser selection by kind with the caller's city label
"""

from __future__ import annotations

import pytest

from heritage_pipeline.parsers import (
    ChanghuaParser,
    ChiayiParser,
    ParserKind,
    TaipeiParser,
    get_parser,
)
from heritage_pipeline.parsers.base import BaseParser, clean_headers


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

class TestHelpers:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("1,234.5", 1234.5),
            (" 88 ", 88.0),
            ("0", 0.0),
            (".5", 0.5),
            ("abc", None),
            ("12abc", None),
            ("", None),
            (None, None),
        ],
    )
    def test_parse_area(self, text, expected):
        assert BaseParser.parse_area(text) == expected

    def test_clean_owner_name(self):
        assert BaseParser.clean_owner_name("  王 O  ") == "王O"
        assert BaseParser.clean_owner_name("趙 O 文") == "趙O文"
        assert BaseParser.clean_owner_name("   ") is None
        assert BaseParser.clean_owner_name(None) is None

    def test_first_value_skips_blank_candidates(self):
        row = {"被繼承人": "  ", "姓名": "林O"}
        assert BaseParser.first_value(row, "被繼承人", "姓名") == "林O"
        assert BaseParser.first_value(row, "不存在") is None

    def test_m2_to_ping(self):
        assert BaseParser.m2_to_ping(150.5) == 45.53

    def test_clean_headers(self):
        assert clean_headers(["地號", " 地號", "面積 "]) == {"面積 ": "面積"}
        assert clean_headers([" 地號", "地號 "]) == {" 地號": "地號"}
        assert clean_headers(["\ufeff被繼承人姓名"]) == {"\ufeff被繼承人姓名": "被繼承人姓名"}

    def test_bom_and_blank_input(self):
        parser = ChanghuaParser()
        assert parser.parse("") == []
        records = parser.parse("\ufeff被繼承人姓名,地號\n王O,0001\n")
        assert [r.land_number for r in records] == ["0001"]


# ---------------------------------------------------------------------------
# 彰化縣
# ---------------------------------------------------------------------------

class TestChanghuaParser:
    def test_parse_fixture(self, changhua_csv):
        records = ChanghuaParser().parse(changhua_csv)

        assert len(records) == 3
        first = records[0]
        assert first.source_city == "彰化縣"
        assert first.district == "彰化市"
        assert first.section == "中山段"
        assert first.land_number == "0123-0000"
        assert first.owner_name == "王O明"
        assert first.area_m2 == 1234.5
        assert first.area_ping == 373.44
        assert first.status == "列管中"
        assert first.raw_data["公告現值"] == "5600"

    def test_malformed_area_is_none(self, changhua_csv):
        second = ChanghuaParser().parse(changhua_csv)[1]
        assert second.area_m2 is None
        assert second.area_ping is None
        assert second.status is None

    def test_missing_land_number_gets_placeholder(self, changhua_csv):
        third = ChanghuaParser().parse(changhua_csv)[2]
        assert third.owner_name == "陳O"
        assert third.land_number == "unknown-2"

    def test_documented_example(self):
        csv_text = "被繼承人姓名,鄉鎮市區,地號,面積\n王 O,彰化市,0123-0000,150.5\n"
        (record,) = ChanghuaParser().parse(csv_text)
        assert record.owner_name == "王O"
        assert record.district == "彰化市"
        assert record.land_number == "0123-0000"
        assert record.area_m2 == 150.5
        assert record.area_ping == 45.53

    def test_distinct_placeholders(self):
        csv_text = "被繼承人姓名,地號\n王O,\n李O,\n"
        records = ChanghuaParser().parse(csv_text)
        assert [r.land_number for r in records] == ["unknown-0", "unknown-1"]

    def test_missing_district_defaults(self):
        (record,) = ChanghuaParser().parse("被繼承人姓名,地號\n王O,0001\n")
        assert record.district == "未知區"

    def test_alternate_area_header(self):
        csv_text = "被繼承人姓名,鄉鎮市,地號,面積(平方公尺)\n王O,和美鎮,0001,33.0579\n"
        (record,) = ChanghuaParser().parse(csv_text)
        assert record.district == "和美鎮"
        assert record.area_m2 == 33.0579
        assert record.area_ping == 10.0

    def test_stray_quote_does_not_drop_the_file(self):
        csv_text = (
            "被繼承人姓名,地號,面積\n"
            "王\"O,0001,\"1,234.5\"\n"
            "李O,0002,5\n"
        )
        records = ChanghuaParser().parse(csv_text)
        assert [r.land_number for r in records] == ["0001", "0002"]
        assert records[0].area_m2 == 1234.5
        assert records[1].owner_name == "李O"

    def test_padded_duplicate_header(self):
        (record,) = ChanghuaParser().parse("被繼承人姓名,地號, 地號\n王O,0001,x\n")
        assert record.land_number == "0001"
        assert record.owner_name == "王O"


# ---------------------------------------------------------------------------
# 嘉義市 / 嘉義縣
# ---------------------------------------------------------------------------

class TestChiayiParser:
    def test_parse_fixture(self, chiayi_csv):
        records = ChiayiParser().parse(chiayi_csv)

        assert len(records) == 2
        assert records[0].source_city == "嘉義市"
        assert records[0].owner_name == "林O"
        assert records[0].district == "東區"
        assert records[0].section == "北門段"
        assert records[0].land_number == "0012"
        assert records[0].area_m2 == 45.6

    def test_subsection_stands_in_for_land_number(self, chiayi_csv):
        second = ChiayiParser().parse(chiayi_csv)[1]
        assert second.land_number == "二小段"

    def test_county_label(self, chiayi_csv):
        records = ChiayiParser("嘉義縣").parse(chiayi_csv)
        assert {r.source_city for r in records} == {"嘉義縣"}

    def test_alternate_headers(self):
        csv_text = "姓名,鄉鎮市區,段,地號,面積,管理情形\n吳O,太保市,新埤段,0100,20,公告中\n"
        (record,) = ChiayiParser("嘉義縣").parse(csv_text)
        assert record.owner_name == "吳O"
        assert record.district == "太保市"
        assert record.section == "新埤段"
        assert record.status == "公告中"

    def test_row_with_only_land_number_is_kept(self):
        (record,) = ChiayiParser().parse("被繼承人,地號\n,0555\n")
        assert record.owner_name is None
        assert record.land_number == "0555"


# ---------------------------------------------------------------------------
# 台北市
# ---------------------------------------------------------------------------

class TestTaipeiParser:
    def test_district_from_land_zone_column(self):
        csv_text = "被繼承人姓名,土地區段,地段,地號,面積,列管情形\n張O,大安區,仁愛段,0001,150.5,公告中\n"
        (record,) = TaipeiParser().parse(csv_text)
        assert record.source_city == "台北市"
        assert record.district == "大安區"
        assert record.section == "仁愛段"
        assert record.area_ping == 45.53
        assert record.status == "公告中"

    def test_explicit_ping_column_wins(self):
        csv_text = "被繼承人姓名,地號,面積,面積(坪)\n張O,0001,150.5,45.5\n"
        (record,) = TaipeiParser().parse(csv_text)
        assert record.area_ping == 45.5


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

class TestGetParser:
    @pytest.mark.parametrize(
        "kind,cls",
        [
            (ParserKind.TAIPEI, TaipeiParser),
            (ParserKind.CHIAYI, ChiayiParser),
            (ParserKind.CHANGHUA, ChanghuaParser),
        ],
    )
    def test_kind_to_class(self, kind, cls):
        parser = get_parser(kind, "測試市")
        assert isinstance(parser, cls)
        assert parser.city_name == "測試市"
