"""
Pattern library for the text fallback extractor.

Every regular expression used to mine plain OCR text lives in one table,
keyed by PatternKind. Matchers capture the number of interest in a group
named "value" and, for weights, the unit in a group named "unit".
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple


class PatternKind(Enum):
    """Kinds of text the fallback extractor looks for."""
    COMMODITY_HEADER = "commodity_header"
    PRODUCT_NAME = "product_name"
    PRODUCT_CODE = "product_code"
    QUANTITY = "quantity"
    WEIGHT = "weight"
    PRICE = "price"
    LINE_QUANTITY = "line_quantity"
    LINE_WEIGHT = "line_weight"
    LINE_PRICE = "line_price"


@dataclass(frozen=True)
class Matcher:
    name: str
    regex: "re.Pattern[str]"


@dataclass(frozen=True)
class PatternMatch:
    """
    A single match of one matcher.

    Attributes:
        kind: Kind of the matcher that produced the match
        matcher: Name of the matcher
        text: The whole matched text
        value: The "value" group, or the whole match if the matcher has none
        unit: The "unit" group, if any
        start: Start offset of the value in the searched text
        end: End offset of the value in the searched text
    """
    kind: PatternKind
    matcher: str
    text: str
    value: str
    unit: Optional[str]
    start: int
    end: int


_UNITS = r"(?:pcs?|pieces?|units?|boxes?|cases?)"
_WEIGHT_UNITS = r"(?P<unit>lbs?|kg|pounds?)"
_NUMBER = r"\d+(?:\.\d+)?"


def _m(name: str, pattern: str, flags: int = re.IGNORECASE) -> Matcher:
    return Matcher(name=name, regex=re.compile(pattern, flags))


PATTERN_TABLE: Dict[PatternKind, Tuple[Matcher, ...]] = {
    PatternKind.COMMODITY_HEADER: (
        _m("commodity_and_description_symbol", r"commodity\s*[&:]\s*description"),
        _m("commodity_and_description", r"commodity\s*and\s*description"),
        _m("product_description", r"product\s*description"),
        _m("item_description", r"item\s*description"),
        _m("goods_description", r"goods\s*description"),
        _m("description_of_goods", r"description\s*of\s*goods"),
    ),
    PatternKind.PRODUCT_NAME: (
        _m("alphanumeric", r"^[A-Z0-9\-\s]+$"),
        _m("letters_then_digits", r"^[A-Z]{2,}\d+[A-Z0-9\-\s]*$"),
        _m("alphanumeric_min3", r"^[A-Z0-9\-\s]{3,}$"),
    ),
    # Case-sensitive: only uppercase item codes such as "SKU123"
    PatternKind.PRODUCT_CODE: (
        _m("letter_prefix_code", r"^[A-Z]{2,}\d+", flags=0),
    ),
    PatternKind.QUANTITY: (
        _m("qty_label", r"qty[:\s]*(?P<value>\d+)"),
        _m("quantity_label", r"quantity[:\s]*(?P<value>\d+)"),
        _m("count_with_unit", rf"(?P<value>\d+)\s*{_UNITS}"),
    ),
    PatternKind.WEIGHT: (
        _m("weight_label", rf"weight[:\s]*(?P<value>{_NUMBER})\s*{_WEIGHT_UNITS}"),
        _m("number_with_unit", rf"(?P<value>{_NUMBER})\s*{_WEIGHT_UNITS}"),
    ),
    PatternKind.PRICE: (
        _m("dollar_sign", rf"\$(?P<value>{_NUMBER})"),
        _m("dollars_word", rf"(?P<value>{_NUMBER})\s*dollars?"),
        _m("price_label", rf"price[:\s]*\$?(?P<value>{_NUMBER})"),
    ),
    PatternKind.LINE_QUANTITY: (
        _m("count_with_unit", rf"(?P<value>\d+)\s*{_UNITS}"),
    ),
    PatternKind.LINE_WEIGHT: (
        _m("number_with_unit", rf"(?P<value>{_NUMBER})\s*{_WEIGHT_UNITS}"),
    ),
    PatternKind.LINE_PRICE: (
        _m("dollar_sign", rf"\$(?P<value>{_NUMBER})", flags=0),
    ),
}


class PatternLibrary:
    """
    Generic matching engine over a PatternKind -> matchers table.

    Args:
        table: Pattern table to evaluate (defaults to PATTERN_TABLE)
    """

    def __init__(self, table: Optional[Dict[PatternKind, Tuple[Matcher, ...]]] = None):
        self.table = table if table is not None else PATTERN_TABLE

    def matchers(self, kind: PatternKind) -> Tuple[Matcher, ...]:
        return self.table.get(kind, ())

    def matches_any(self, kind: PatternKind, text: str) -> bool:
        """Check if any matcher of the kind matches anywhere in text."""
        return any(matcher.regex.search(text) for matcher in self.matchers(kind))

    def find_all(self, kind: PatternKind, text: str) -> List[PatternMatch]:
        """
        Find every match of a kind in text.

        All matchers of the kind are evaluated in order. A match whose value
        overlaps the value of an already accepted match is dropped, so one
        number is reported once even when several matchers describe it.

        Returns:
            Matches ordered by position in text
        """
        accepted: List[PatternMatch] = []
        for matcher in self.matchers(kind):
            for match in matcher.regex.finditer(text):
                found = self._to_match(kind, matcher, match)
                if any(found.start < other.end and other.start < found.end for other in accepted):
                    continue
                accepted.append(found)
        return sorted(accepted, key=lambda m: m.start)

    def search(self, kind: PatternKind, text: str) -> Optional[PatternMatch]:
        """Return the earliest match of a kind in text, or None."""
        matches = self.find_all(kind, text)
        return matches[0] if matches else None

    @staticmethod
    def _to_match(kind: PatternKind, matcher: Matcher, match: "re.Match[str]") -> PatternMatch:
        groups = match.groupdict()
        if groups.get("value") is not None:
            value, start, end = groups["value"], match.start("value"), match.end("value")
        else:
            value, start, end = match.group(0), match.start(), match.end()
        return PatternMatch(
            kind=kind,
            matcher=matcher.name,
            text=match.group(0),
            value=value,
            unit=groups.get("unit"),
            start=start,
            end=end,
        )
