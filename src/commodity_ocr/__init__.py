"""
Commodity extraction from document OCR output.

This package turns OCR results into structured product data:
- Table reconstruction from word bounding boxes (rows, column spans, headers)
- Commodity/description column detection and product name extraction
- Regex fallback over plain text for products, quantities, weights and prices
"""

from .config import ExtractorConfig
from .models import (
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
    TableExtraction,
    TextExtraction,
)
from .pipeline import DataExtractor, extract_structured_data
from .table_extract import TableParser
from .text_extract import TextFallbackExtractor

__all__ = [
    "ExtractorConfig",
    "ExtractionFailure",
    "ExtractionResult",
    "ExtractionSuccess",
    "TableExtraction",
    "TextExtraction",
    "DataExtractor",
    "extract_structured_data",
    "TableParser",
    "TextFallbackExtractor",
]
