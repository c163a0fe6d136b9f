"""
Data models for the OCR extraction pipeline.

Defines the structure for recognized words, clustered rows, reconstructed
tables, product records, text-fallback matches and the tagged extraction
result returned to callers. Every object is created fresh per extraction
and never persisted.
"""

from typing import List, Dict, Any, Optional, Tuple, Union
from dataclasses import dataclass, field, asdict


Point = Tuple[float, float]


@dataclass(frozen=True)
class Word:
    """
    A single recognized word with spatial information.

    Attributes:
        text: The recognized text
        bounding_box: Four (x, y) corner points, top-left first
        confidence: OCR confidence for this word (0.0-1.0)
        page_index: Zero-based page the word was found on
        block_type: Block type reported by the OCR engine ("TEXT", "TABLE", ...)
    """
    text: str
    bounding_box: Tuple[Point, Point, Point, Point]
    confidence: float = 0.9
    page_index: int = 0
    block_type: str = "TEXT"

    @property
    def x(self) -> float:
        """Left x of the top-left corner"""
        return self.bounding_box[0][0]

    @property
    def y(self) -> float:
        """Top y of the top-left corner"""
        return self.bounding_box[0][1]


@dataclass
class Row:
    """
    A horizontal line of words.

    Attributes:
        words: Member words, ascending by x
        y: Running centroid of the member words' y
        text: Words' text joined by a space
        page_index: Page the row belongs to
    """
    words: List[Word]
    y: float
    text: str
    page_index: int = 0


@dataclass(frozen=True)
class ColumnSpan:
    """An x-interval covering the start coordinates of one column's words."""
    start: float
    end: float

    def contains(self, x: float) -> bool:
        return self.start <= x <= self.end


@dataclass
class HeaderCell:
    """
    One word of the header region.

    Attributes:
        text: Header word text
        column_index: Position in the flattened header words
        confidence: OCR confidence of the word
        is_commodity_column: Whether the text names a commodity/description column
        span_index: Index of the ColumnSpan holding the word (None if unknown)
    """
    text: str
    column_index: int
    confidence: float
    is_commodity_column: bool = False
    span_index: Optional[int] = None


@dataclass
class Cell:
    """
    One cell of a data row.

    Placeholder cells fill column spans that received no word; they have
    empty text and zero confidence.
    """
    text: str
    column_index: int
    confidence: float
    bounding_box: Optional[Tuple[Point, Point, Point, Point]] = None
    span_index: Optional[int] = None
    is_placeholder: bool = False


@dataclass
class DataRow:
    """
    A non-header row of a table.

    Attributes:
        row_index: Zero-based index among non-header rows
        cells: One cell per word, in x order (column_index is the position in the row)
        text: The row's joined text
        is_border_row: Row holds a total/subtotal/footer keyword
        is_empty: Row has no cells or only blank cells
        columns: Dense grid with one cell per column span, placeholders for gaps
    """
    row_index: int
    cells: List[Cell]
    text: str = ""
    is_border_row: bool = False
    is_empty: bool = False
    columns: List[Cell] = field(default_factory=list)

    def cell_at(self, column_index: int) -> Optional[Cell]:
        """Return the cell at a row-relative position, or None."""
        if 0 <= column_index < len(self.cells):
            return self.cells[column_index]
        return None

    def cell_in_span(self, span_index: int) -> Optional[Cell]:
        """Return the grid cell for a column span, or None if out of range."""
        if 0 <= span_index < len(self.columns):
            return self.columns[span_index]
        return None


@dataclass
class Table:
    """
    A reconstructed table.

    Attributes:
        table_index: Position of the table in the extraction
        headers: Header cells in flattened order
        rows: Data rows following the header region
        total_rows: Number of clustered rows, header region included
        total_columns: Number of detected column spans
        has_commodity_column: Any header or cell holds a commodity keyword
        column_spans: The detected column spans
        spans_separate_headers: No two words of one header row share a span;
            data rows carry a column grid only when this holds
    """
    table_index: int
    headers: List[HeaderCell]
    rows: List[DataRow]
    total_rows: int
    total_columns: int
    has_commodity_column: bool = False
    column_spans: List[ColumnSpan] = field(default_factory=list)
    spans_separate_headers: bool = False


@dataclass
class CommodityColumnRef:
    """Location of the commodity/description column."""
    table_index: int
    column_index: int
    header_text: str
    confidence: float
    span_index: Optional[int] = None


@dataclass
class ProductRecord:
    """A product name read from the commodity column of a table."""
    name: str
    row_index: int
    table_index: int
    confidence: float
    context: str


@dataclass
class ProductLineInfo:
    """
    Product information parsed from one line under a commodity header.

    Attributes:
        raw_line: The source line
        product_name: First product-name token on the line
        quantity: Count preceding a unit keyword (pcs, boxes, ...)
        weight: Number preceding lbs/kg/pounds
        price: Number following a dollar sign
    """
    raw_line: str
    product_name: Optional[str] = None
    quantity: Optional[int] = None
    weight: Optional[float] = None
    price: Optional[float] = None


@dataclass
class CommoditySection:
    """Lines parsed below one commodity/description header line."""
    header: str
    products: List[ProductLineInfo] = field(default_factory=list)


@dataclass
class TextProduct:
    """A standalone product-name token found in plain text."""
    name: str
    line: int
    context: str
    confidence: float


@dataclass
class QuantityMatch:
    value: int
    context: str
    confidence: float = 0.9


@dataclass
class WeightMatch:
    value: float
    unit: str
    context: str
    confidence: float = 0.9


@dataclass
class PriceMatch:
    value: float
    context: str
    confidence: float = 0.9


@dataclass
class ExtractionMetadata:
    """
    Caller-supplied document fields plus the extraction timestamp.

    Attributes:
        file_name: Source file name
        file_size: Source file size in bytes
        file_type: Source file type ("pdf", "image", ...)
        confidence: Overall OCR confidence
        is_scanned_pdf: Whether the source was a scanned PDF
        page_count: Number of pages in the source
        extracted_at: ISO-8601 time the extraction ran
    """
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    file_type: Optional[str] = None
    confidence: Optional[float] = None
    is_scanned_pdf: bool = False
    page_count: int = 1
    extracted_at: str = ""


@dataclass
class TableSummary:
    total_tables: int = 0
    total_rows: int = 0
    total_columns: int = 0
    tables_with_commodity: int = 0
    commodity_column_found: bool = False
    product_names_count: int = 0


@dataclass
class TextSummary:
    total_commodities: int = 0
    total_products: int = 0
    total_quantities: int = 0
    total_weights: int = 0
    total_prices: int = 0


@dataclass
class TableExtraction:
    """Result of the table path."""
    tables: List[Table]
    commodity_column: Optional[CommodityColumnRef]
    products: List[ProductRecord]
    summary: TableSummary
    metadata: Optional[ExtractionMetadata] = None


@dataclass
class TextExtraction:
    """Result of the plain-text fallback path."""
    commodities: List[CommoditySection]
    products: List[TextProduct]
    quantities: List[QuantityMatch]
    weights: List[WeightMatch]
    prices: List[PriceMatch]
    metadata: Optional[ExtractionMetadata] = None
    summary: TextSummary = field(default_factory=TextSummary)


@dataclass
class ExtractionSuccess:
    """Successful extraction carrying either a table or a text payload."""
    data: Union[TableExtraction, TextExtraction]
    success: bool = field(default=True, init=False)

    @property
    def is_table(self) -> bool:
        return isinstance(self.data, TableExtraction)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "kind": "table" if self.is_table else "text",
            "data": asdict(self.data),
        }


@dataclass
class ExtractionFailure:
    """Failed extraction with a short reason."""
    reason: str
    success: bool = field(default=False, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "error": self.reason}


ExtractionResult = Union[ExtractionSuccess, ExtractionFailure]
