"""
Structured data extraction from OCR results.

Routes an OCR result to the table path (document structure present) or
the plain-text fallback path, and wraps the outcome in a tagged result.
No exception leaves extract_structured_data; every failure comes back as
an ExtractionFailure with a short reason.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional
import logging

from .config import ExtractorConfig
from .ingest import extract_words, has_pages
from .models import (
    ExtractionFailure,
    ExtractionMetadata,
    ExtractionResult,
    ExtractionSuccess,
    TableExtraction,
    TextExtraction,
)
from .summary import summarize_tables, summarize_text
from .table_extract import TableParser
from .text_extract import TextFallbackExtractor, split_lines

logger = logging.getLogger(__name__)

NO_VALID_RESULT = "no valid result"
NO_DOCUMENT_STRUCTURE = "no document structure found"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DataExtractor:
    """
    Extracts products and table data from one OCR result per call.

    Args:
        config: Thresholds and keyword tables shared by both paths
        table_parser: Parser for the table path (built from config if omitted)
        text_extractor: Extractor for the text path (built from config if omitted)
        clock: Returns the extraction time; replaceable in tests
    """

    def __init__(
        self,
        config: Optional[ExtractorConfig] = None,
        table_parser: Optional[TableParser] = None,
        text_extractor: Optional[TextFallbackExtractor] = None,
        clock: Callable[[], datetime] = _utc_now
    ):
        self.config = config or ExtractorConfig.from_env()
        self.table_parser = table_parser or TableParser(self.config)
        self.text_extractor = text_extractor or TextFallbackExtractor(self.config)
        self.clock = clock

    def extract_structured_data(self, ocr_result: Optional[Mapping[str, Any]]) -> ExtractionResult:
        """
        Extract structured data from an OCR result.

        Args:
            ocr_result: OCR result mapping (success, fullText, tableData, file fields)

        Returns:
            ExtractionSuccess with a TableExtraction or TextExtraction, or ExtractionFailure
        """
        if not isinstance(ocr_result, Mapping) or ocr_result.get("success") is False:
            logger.info("[Extraction] No valid OCR result supplied")
            return ExtractionFailure(NO_VALID_RESULT)

        table_data = ocr_result.get("tableData")
        if isinstance(table_data, Mapping) and table_data.get("documentStructure") is not None:
            return self.extract_table_products(ocr_result)

        full_text = ocr_result.get("fullText")
        if isinstance(full_text, str) and full_text.strip():
            return self.extract_text(ocr_result)

        logger.info("[Extraction] OCR result has neither document structure nor text")
        return ExtractionFailure(NO_VALID_RESULT)

    def extract_table_products(self, ocr_result: Mapping[str, Any]) -> ExtractionResult:
        """Run the table path, converting unexpected errors into a failure."""
        try:
            result = self.parse_table_data(ocr_result["tableData"])
        except Exception as e:
            logger.error(f"[Extraction] Table product extraction failed: {e}", exc_info=True)
            return ExtractionFailure(f"failed to extract table products: {e}")

        if isinstance(result, ExtractionSuccess):
            result.data.metadata = self.extract_metadata(ocr_result)
        return result

    def parse_table_data(self, table_data: Mapping[str, Any]) -> ExtractionResult:
        """
        Reconstruct tables and product names from OCR table data.

        Args:
            table_data: Mapping with "success" and "documentStructure"

        Returns:
            ExtractionSuccess(TableExtraction) or ExtractionFailure
        """
        if table_data.get("success") is False:
            logger.info("[Extraction] Table data reported failure")
            return ExtractionFailure(NO_VALID_RESULT)

        document_structure = table_data.get("documentStructure")
        if not has_pages(document_structure):
            logger.info("[Extraction] Document structure has no pages")
            return ExtractionFailure(NO_DOCUMENT_STRUCTURE)

        words = extract_words(document_structure, default_confidence=self.config.default_word_confidence)
        tables = self.table_parser.build_tables(words)
        if not tables:
            logger.info(f"[Extraction] No rows found among {len(words)} words")
            return ExtractionFailure(NO_DOCUMENT_STRUCTURE)

        commodity_column = self.table_parser.find_commodity_column(tables)
        if commodity_column is None:
            logger.info("[Extraction] No commodity column identified")
        products = self.table_parser.extract_product_names(tables, commodity_column)

        return ExtractionSuccess(TableExtraction(
            tables=tables,
            commodity_column=commodity_column,
            products=products,
            summary=summarize_tables(tables, commodity_column, products),
        ))

    def extract_text(self, ocr_result: Mapping[str, Any]) -> ExtractionResult:
        """Run the plain-text fallback path."""
        text = ocr_result["fullText"]
        lines = split_lines(text)
        extractor = self.text_extractor

        extraction = TextExtraction(
            commodities=extractor.extract_commodities(lines),
            products=extractor.extract_products(lines),
            quantities=extractor.extract_quantities(text),
            weights=extractor.extract_weights(text),
            prices=extractor.extract_prices(text),
            metadata=self.extract_metadata(ocr_result),
        )
        extraction.summary = summarize_text(extraction)
        logger.debug(f"[Extraction] Text fallback summary: {extraction.summary}")
        return ExtractionSuccess(extraction)

    def extract_metadata(self, ocr_result: Mapping[str, Any]) -> ExtractionMetadata:
        """Copy the caller's document fields and stamp the extraction time."""
        return ExtractionMetadata(
            file_name=ocr_result.get("fileName"),
            file_size=ocr_result.get("fileSize"),
            file_type=ocr_result.get("fileType"),
            confidence=ocr_result.get("confidence"),
            is_scanned_pdf=bool(ocr_result.get("isScannedPDF") or False),
            page_count=ocr_result.get("pageCount") or 1,
            extracted_at=self.clock().isoformat(),
        )


def extract_structured_data(
    ocr_result: Optional[Mapping[str, Any]],
    config: Optional[ExtractorConfig] = None
) -> ExtractionResult:
    """Extract structured data with a freshly built DataExtractor."""
    return DataExtractor(config).extract_structured_data(ocr_result)
