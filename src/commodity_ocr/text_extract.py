"""
Fallback extraction from plain recognized text.

Used when the OCR engine returned text without a document structure.
Mines the text for commodity sections, standalone product names,
quantities, weights and prices.
"""

import re
from typing import List, Optional, Sequence
import logging

from .config import ExtractorConfig
from .models import (
    CommoditySection,
    PriceMatch,
    ProductLineInfo,
    QuantityMatch,
    TextProduct,
    WeightMatch,
)
from .patterns import PatternKind, PatternLibrary

logger = logging.getLogger(__name__)

# Punctuation other than hyphens is stripped from tokens before matching
_TOKEN_NOISE = re.compile(r"[^\w\-\s]", re.ASCII)
_UPPERCASE = re.compile(r"[A-Z]")
_DIGIT = re.compile(r"[0-9]")


def split_lines(text: str) -> List[str]:
    """Split text into trimmed, non-blank lines."""
    return [line.strip() for line in text.split("\n") if line.strip()]


def clean_token(token: str) -> str:
    return _TOKEN_NOISE.sub("", token).strip()


class TextFallbackExtractor:
    """
    Regex and heuristic extraction over plain OCR text.

    Args:
        config: Keyword tables and window size
        patterns: Pattern library to match with
    """

    def __init__(
        self,
        config: Optional[ExtractorConfig] = None,
        patterns: Optional[PatternLibrary] = None
    ):
        self.config = config or ExtractorConfig.from_env()
        self.patterns = patterns or PatternLibrary()

    def is_header_line(self, line: str) -> bool:
        """Check if a line holds invoice furniture (totals, dates, ...) rather than products."""
        lowered = line.lower()
        return any(keyword in lowered for keyword in self.config.header_line_keywords)

    def is_product_name(self, token: str) -> bool:
        return (
            len(token) >= self.config.min_product_length
            and self.patterns.matches_any(PatternKind.PRODUCT_NAME, token)
        )

    # ------------------------------------------------------------------
    # Commodity sections
    # ------------------------------------------------------------------

    def extract_commodities(self, lines: Sequence[str]) -> List[CommoditySection]:
        """
        Extract product lines found below commodity/description headers.

        Each header line opens a window over the next commodity_window lines.
        Short lines and header-keyword lines inside the window are skipped.

        Args:
            lines: Trimmed, non-blank lines

        Returns:
            One section per header that yielded at least one product line
        """
        sections = []
        for index, line in enumerate(lines):
            if not self.patterns.matches_any(PatternKind.COMMODITY_HEADER, line):
                continue

            window = lines[index + 1:index + 1 + self.config.commodity_window]
            products = []
            for candidate in window:
                if len(candidate) < 3 or self.is_header_line(candidate):
                    continue
                info = self.parse_product_line(candidate)
                if info is not None:
                    products.append(info)

            if products:
                sections.append(CommoditySection(header=line, products=products))

        logger.debug(f"[TextFallback] Found {len(sections)} commodity sections")
        return sections

    def parse_product_line(self, line: str) -> Optional[ProductLineInfo]:
        """
        Parse one line for a product name, quantity, weight and price.

        Returns:
            ProductLineInfo, or None when the line holds no product name
        """
        info = ProductLineInfo(raw_line=line)

        for part in line.split():
            token = clean_token(part)
            if self.is_product_name(token):
                info.product_name = token
                break

        if info.product_name is None:
            return None

        quantity = self.patterns.search(PatternKind.LINE_QUANTITY, line)
        if quantity:
            info.quantity = int(quantity.value)

        weight = self.patterns.search(PatternKind.LINE_WEIGHT, line)
        if weight:
            info.weight = float(weight.value)

        price = self.patterns.search(PatternKind.LINE_PRICE, line)
        if price:
            info.price = float(price.value)

        return info

    # ------------------------------------------------------------------
    # Standalone product names
    # ------------------------------------------------------------------

    def calculate_product_confidence(self, name: str) -> float:
        """
        Score a product-name token.

        Longer tokens, tokens mixing uppercase letters with digits and
        letter-prefixed codes score higher. The score never exceeds 1.0.
        """
        confidence = 0.5
        if len(name) >= 5:
            confidence += 0.2
        if len(name) >= 10:
            confidence += 0.1
        if _UPPERCASE.search(name) and _DIGIT.search(name):
            confidence += 0.2
        if self.patterns.matches_any(PatternKind.PRODUCT_CODE, name):
            confidence += 0.1
        return min(round(confidence, 10), 1.0)

    def extract_products(self, lines: Sequence[str]) -> List[TextProduct]:
        """
        Extract product-name tokens from every non-header line.

        Returns:
            Products de-duplicated by case-insensitive name (first occurrence
            wins), highest confidence first
        """
        products = []
        seen = set()
        for index, line in enumerate(lines):
            if self.is_header_line(line):
                continue
            for part in line.split():
                token = clean_token(part)
                if not self.is_product_name(token):
                    continue
                key = token.lower()
                if key in seen:
                    continue
                seen.add(key)
                products.append(TextProduct(
                    name=token,
                    line=index + 1,
                    context=line,
                    confidence=self.calculate_product_confidence(token),
                ))

        products.sort(key=lambda p: p.confidence, reverse=True)
        logger.debug(f"[TextFallback] Found {len(products)} product names")
        return products

    # ------------------------------------------------------------------
    # Regex sweeps
    # ------------------------------------------------------------------

    def extract_quantities(self, text: str) -> List[QuantityMatch]:
        return [
            QuantityMatch(value=int(match.value), context=match.text, confidence=self.config.match_confidence)
            for match in self.patterns.find_all(PatternKind.QUANTITY, text)
        ]

    def extract_weights(self, text: str) -> List[WeightMatch]:
        return [
            WeightMatch(
                value=float(match.value),
                unit=(match.unit or "unknown").lower(),
                context=match.text,
                confidence=self.config.match_confidence,
            )
            for match in self.patterns.find_all(PatternKind.WEIGHT, text)
        ]

    def extract_prices(self, text: str) -> List[PriceMatch]:
        return [
            PriceMatch(value=float(match.value), context=match.text, confidence=self.config.match_confidence)
            for match in self.patterns.find_all(PatternKind.PRICE, text)
        ]
