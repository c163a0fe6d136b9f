"""
Tests for the pattern table and matching engine.
"""

import re
import sys
from pathlib import Path

# Add src to path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from commodity_ocr.patterns import PATTERN_TABLE, Matcher, PatternKind, PatternLibrary

LIBRARY = PatternLibrary()


def test_every_kind_has_matchers():
    for kind in PatternKind:
        assert PATTERN_TABLE[kind], kind


def test_commodity_header_phrases():
    for line in ("Commodity & Description", "COMMODITY AND DESCRIPTION", "Description of Goods", "item description"):
        assert LIBRARY.matches_any(PatternKind.COMMODITY_HEADER, line), line
    assert not LIBRARY.matches_any(PatternKind.COMMODITY_HEADER, "Description")


def test_overlapping_matchers_report_one_value():
    matches = LIBRARY.find_all(PatternKind.QUANTITY, "Qty: 12 pcs")

    assert [(m.value, m.matcher) for m in matches] == [("12", "qty_label")]


def test_matches_ordered_by_position():
    matches = LIBRARY.find_all(PatternKind.PRICE, "20 dollars then $5.50")

    assert [m.value for m in matches] == ["20", "5.50"]


def test_weight_unit_group():
    match = LIBRARY.search(PatternKind.WEIGHT, "net 12 LBS")

    assert match.value == "12"
    assert match.unit == "LBS"
    assert match.text == "12 LBS"


def test_product_code_is_case_sensitive():
    assert LIBRARY.matches_any(PatternKind.PRODUCT_CODE, "SKU123")
    assert not LIBRARY.matches_any(PatternKind.PRODUCT_CODE, "sku123")


def test_search_without_match():
    assert LIBRARY.search(PatternKind.PRICE, "no money here") is None


def test_custom_table():
    library = PatternLibrary({PatternKind.PRICE: (Matcher("euro", re.compile(r"(?P<value>\d+)\s*EUR")),)})

    assert [m.value for m in library.find_all(PatternKind.PRICE, "$5 and 7 EUR")] == ["7"]
    assert library.find_all(PatternKind.WEIGHT, "5 kg") == []
