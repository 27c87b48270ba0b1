"""
heritage_pipeline.parsers — per-source CSV parsers.

The set of layouts is closed: one ParserKind per government dataset format,
each mapped to its parser class in PARSERS. get_parser() builds a parser
labelled with the canonical city it parses for (嘉義市 and 嘉義縣 share the
CHIAYI layout).

    parser = get_parser(ParserKind.CHIAYI, "嘉義縣")
    records = parser.parse(csv_text)
"""

from __future__ import annotations

from heritage_pipeline.parsers.base import BaseParser, ParserKind
from heritage_pipeline.parsers.changhua import ChanghuaParser
from heritage_pipeline.parsers.chiayi import ChiayiParser
from heritage_pipeline.parsers.taipei import TaipeiParser

PARSERS: dict[ParserKind, type[BaseParser]] = {
    ParserKind.TAIPEI: TaipeiParser,
    ParserKind.CHIAYI: ChiayiParser,
    ParserKind.CHANGHUA: ChanghuaParser,
}


def get_parser(kind: ParserKind, city_name: str) -> BaseParser:
    return PARSERS[kind](city_name)


__all__ = [
    "BaseParser",
    "ParserKind",
    "PARSERS",
    "get_parser",
    "TaipeiParser",
    "ChiayiParser",
    "ChanghuaParser",
]
