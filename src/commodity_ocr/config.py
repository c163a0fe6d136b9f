"""
Configuration module for loading environment variables.

This module loads environment variables from .env file and exposes the
thresholds and keyword tables used by the table parser and the text
fallback extractor.
"""

import os
from dataclasses import dataclass
from typing import Tuple

from dotenv import load_dotenv
load_dotenv()


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


# Geometry thresholds (pixel units of the OCR engine's page image)
ROW_Y_THRESHOLD = _env_float("OCR_ROW_Y_THRESHOLD", 30.0)
COLUMN_GAP_THRESHOLD = _env_float("OCR_COLUMN_GAP_THRESHOLD", 50.0)
HEADER_ROW_COUNT = _env_int("OCR_HEADER_ROW_COUNT", 2)

# Text fallback
COMMODITY_WINDOW = _env_int("OCR_COMMODITY_WINDOW", 20)
MATCH_CONFIDENCE = _env_float("OCR_MATCH_CONFIDENCE", 0.9)

# Word ingest
DEFAULT_WORD_CONFIDENCE = _env_float("OCR_DEFAULT_WORD_CONFIDENCE", 0.9)

# "positional" reads product cells by word order in the row, "span" by detected column span
COLUMN_ADDRESSING = os.getenv("OCR_COLUMN_ADDRESSING", "positional").strip().lower()

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING").upper()

COMMODITY_KEYWORDS = (
    "commodity",
    "description",
    "product",
    "item",
    "goods",
    "material",
    "article",
)

BORDER_KEYWORDS = (
    "total",
    "subtotal",
    "grand total",
    "sum",
    "amount",
    "end",
    "footer",
)

# Lines containing these are invoice furniture, not product lines
HEADER_LINE_KEYWORDS = (
    "total",
    "subtotal",
    "tax",
    "amount",
    "date",
    "invoice",
    "bill",
    "receipt",
)


@dataclass(frozen=True)
class ExtractorConfig:
    """
    Read-only settings shared by the table parser and the text extractor.

    Attributes:
        row_y_threshold: Maximum y-distance from the open row's centroid to join that row
        column_gap_threshold: Minimum x-gap between word starts that opens a new column span
        header_row_count: Number of leading rows treated as the header region
        commodity_window: Number of lines scanned below a commodity header line
        match_confidence: Confidence recorded for every regex sweep match
        default_word_confidence: Confidence used when the OCR word carries none
        column_addressing: "positional" (default) or "span" cell lookup for product names
        commodity_keywords: Substrings marking a commodity/description header
        border_keywords: Substrings marking a footer/total row
        header_line_keywords: Substrings marking non-product lines in plain text
        min_product_length: Minimum length of a product-name token
    """
    row_y_threshold: float = 30.0
    column_gap_threshold: float = 50.0
    header_row_count: int = 2
    commodity_window: int = 20
    match_confidence: float = 0.9
    default_word_confidence: float = 0.9
    column_addressing: str = "positional"
    commodity_keywords: Tuple[str, ...] = COMMODITY_KEYWORDS
    border_keywords: Tuple[str, ...] = BORDER_KEYWORDS
    header_line_keywords: Tuple[str, ...] = HEADER_LINE_KEYWORDS
    min_product_length: int = 3

    @classmethod
    def from_env(cls) -> "ExtractorConfig":
        """Build a config from the environment-backed module constants."""
        addressing = COLUMN_ADDRESSING if COLUMN_ADDRESSING in ("span", "positional") else "positional"
        return cls(
            row_y_threshold=ROW_Y_THRESHOLD,
            column_gap_threshold=COLUMN_GAP_THRESHOLD,
            header_row_count=max(HEADER_ROW_COUNT, 0),
            commodity_window=max(COMMODITY_WINDOW, 0),
            match_confidence=MATCH_CONFIDENCE,
            default_word_confidence=DEFAULT_WORD_CONFIDENCE,
            column_addressing=addressing,
        )
