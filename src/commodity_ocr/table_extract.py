"""
Table extraction from OCR words.

This module reconstructs one logical table from the clustered rows of a
document, flags the commodity/description column, tags footer and empty
rows, and reads product names out of the commodity column.
"""

from typing import Any, Dict, List, Optional, Sequence
import logging

from .config import ExtractorConfig
from .models import (
    Cell,
    ColumnSpan,
    CommodityColumnRef,
    DataRow,
    HeaderCell,
    ProductRecord,
    Row,
    Table,
    Word,
)
from .parser import group_words_into_rows, identify_column_boundaries, locate_span

logger = logging.getLogger(__name__)


def _contains_keyword(text: Optional[str], keywords: Sequence[str]) -> bool:
    if not text:
        return False
    lowered = text.lower().strip()
    return any(keyword in lowered for keyword in keywords)


class TableParser:
    """
    Reconstructs tables from recognized words.

    The parser holds no per-document state; one instance can serve any
    number of documents, from any number of threads.
    """

    def __init__(self, config: Optional[ExtractorConfig] = None):
        self.config = config or ExtractorConfig.from_env()

    # ------------------------------------------------------------------
    # Keyword checks
    # ------------------------------------------------------------------

    def is_commodity_column(self, header_text: Optional[str]) -> bool:
        """Check if header text names a commodity/description column."""
        return _contains_keyword(header_text, self.config.commodity_keywords)

    def is_border_row(self, row: DataRow) -> bool:
        """Check if any cell of the row holds a total/footer keyword."""
        return any(_contains_keyword(cell.text, self.config.border_keywords) for cell in row.cells)

    def is_empty_row(self, row: DataRow) -> bool:
        if not row.cells:
            return True
        return all(not cell.text or not cell.text.strip() for cell in row.cells)

    # ------------------------------------------------------------------
    # Table assembly
    # ------------------------------------------------------------------

    def build_tables(self, words: Sequence[Word]) -> List[Table]:
        """
        Build tables from a document's words.

        Args:
            words: All words of the document

        Returns:
            A single-table list, or an empty list when the words form no rows
        """
        rows = group_words_into_rows(words, row_threshold=self.config.row_y_threshold)
        if not rows:
            logger.debug("[TableParser] No rows clustered, no table produced")
            return []

        spans = identify_column_boundaries(rows, gap_threshold=self.config.column_gap_threshold)
        aligned = self.spans_separate_headers(rows, spans)
        if spans and not aligned:
            logger.debug("[TableParser] Header words share a column span, skipping the column grid")
        table = Table(
            table_index=0,
            headers=self.extract_headers(rows, spans),
            rows=self.extract_data_rows(rows, spans, build_grid=aligned),
            total_rows=len(rows),
            total_columns=len(spans),
            has_commodity_column=self.has_commodity_column(rows),
            column_spans=spans,
            spans_separate_headers=aligned,
        )
        logger.debug(
            f"[TableParser] Table 0: {table.total_rows} rows x {table.total_columns} columns, "
            f"{len(table.headers)} header cells, commodity={table.has_commodity_column}"
        )
        return [table]

    def spans_separate_headers(self, rows: Sequence[Row], spans: Sequence[ColumnSpan]) -> bool:
        """
        Check if the column spans tell the header words apart.

        Spans are cut on gaps between word starts, so closely spaced columns
        can chain into one span. The spans are only trusted when no two
        words of the same header row fall into the same span.
        """
        if not spans:
            return False
        for row in rows[:self.config.header_row_count]:
            indices = [locate_span(word.x, spans) for word in row.words]
            if len(set(indices)) != len(indices):
                return False
        return True

    def extract_headers(self, rows: Sequence[Row], spans: Sequence[ColumnSpan] = ()) -> List[HeaderCell]:
        """
        Read header cells from the leading rows.

        Header words are flattened row by row, left to right; column_index is
        the position in that flattened sequence.
        """
        header_words = [
            word
            for row in rows[:self.config.header_row_count]
            for word in row.words
        ]
        return [
            HeaderCell(
                text=word.text,
                column_index=index,
                confidence=word.confidence,
                is_commodity_column=self.is_commodity_column(word.text),
                span_index=locate_span(word.x, spans) if spans else None,
            )
            for index, word in enumerate(header_words)
        ]

    def extract_data_rows(
        self,
        rows: Sequence[Row],
        spans: Sequence[ColumnSpan] = (),
        build_grid: bool = True
    ) -> List[DataRow]:
        """Convert the rows after the header region into tagged data rows."""
        data_rows = []
        for row_index, row in enumerate(rows[self.config.header_row_count:]):
            cells = [
                Cell(
                    text=word.text,
                    column_index=position,
                    confidence=word.confidence,
                    bounding_box=word.bounding_box,
                    span_index=locate_span(word.x, spans) if spans else None,
                )
                for position, word in enumerate(row.words)
            ]
            data_row = DataRow(
                row_index=row_index,
                cells=cells,
                text=row.text,
                columns=self._build_grid(cells, len(spans)) if build_grid else [],
            )
            data_row.is_border_row = self.is_border_row(data_row)
            data_row.is_empty = self.is_empty_row(data_row)
            data_rows.append(data_row)
        return data_rows

    @staticmethod
    def _build_grid(cells: Sequence[Cell], column_count: int) -> List[Cell]:
        """
        Align cells to column spans.

        Cells sharing a span are joined with a space; spans without a cell
        get an empty placeholder.
        """
        grid = [
            Cell(text="", column_index=index, confidence=0.0, span_index=index, is_placeholder=True)
            for index in range(column_count)
        ]
        for cell in cells:
            if cell.span_index is None or cell.span_index >= column_count:
                continue
            slot = grid[cell.span_index]
            if slot.is_placeholder:
                grid[cell.span_index] = Cell(
                    text=cell.text,
                    column_index=cell.span_index,
                    confidence=cell.confidence,
                    bounding_box=cell.bounding_box,
                    span_index=cell.span_index,
                )
            else:
                slot.text = f"{slot.text} {cell.text}"
                slot.confidence = min(slot.confidence, cell.confidence)
        return grid

    def has_commodity_column(self, rows: Sequence[Row]) -> bool:
        """Check if any word of any row, header or data, holds a commodity keyword."""
        return any(self.is_commodity_column(word.text) for row in rows for word in row.words)

    # ------------------------------------------------------------------
    # Commodity column and product names
    # ------------------------------------------------------------------

    def find_commodity_column(self, tables: Sequence[Table]) -> Optional[CommodityColumnRef]:
        """
        Find the first commodity header across all tables.

        Returns:
            Reference to the column, or None when no header qualifies
        """
        for table_index, table in enumerate(tables):
            for header in sorted(table.headers, key=lambda h: h.column_index):
                if header.is_commodity_column:
                    return CommodityColumnRef(
                        table_index=table_index,
                        column_index=header.column_index,
                        header_text=header.text,
                        confidence=header.confidence,
                        span_index=header.span_index,
                    )
        return None

    def extract_product_names(
        self,
        tables: Sequence[Table],
        commodity_column: Optional[CommodityColumnRef]
    ) -> List[ProductRecord]:
        """
        Read product names from the commodity column.

        Border and empty rows are skipped. The cell is read by its position
        within the row. In "span" addressing it is read from the column grid
        instead, provided the table's spans separate its header words.

        Args:
            tables: Tables from build_tables
            commodity_column: Result of find_commodity_column

        Returns:
            One ProductRecord per non-blank commodity cell
        """
        if commodity_column is None:
            return []
        if not 0 <= commodity_column.table_index < len(tables):
            logger.warning(f"[TableParser] Commodity column points at missing table {commodity_column.table_index}")
            return []

        table = tables[commodity_column.table_index]
        by_span = (
            self.config.column_addressing == "span"
            and commodity_column.span_index is not None
            and table.spans_separate_headers
        )

        products = []
        for row in table.rows:
            if row.is_border_row or row.is_empty:
                continue
            if by_span:
                cell = row.cell_in_span(commodity_column.span_index)
            else:
                cell = row.cell_at(commodity_column.column_index)
            if cell is None or not cell.text or not cell.text.strip():
                continue
            products.append(ProductRecord(
                name=cell.text.strip(),
                row_index=row.row_index,
                table_index=table.table_index,
                confidence=cell.confidence,
                context=row.text,
            ))

        logger.debug(f"[TableParser] Extracted {len(products)} product names ({'span' if by_span else 'positional'} addressing)")
        return products

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def detect_table_borders(self, tables: Sequence[Table]) -> List[Dict[str, Any]]:
        """List every border row, the rows that end itemized data."""
        borders = []
        for table_index, table in enumerate(tables):
            for row in table.rows:
                if row.is_border_row:
                    borders.append({
                        "table_index": table_index,
                        "row_index": row.row_index,
                        "type": "keyword_border",
                        "text": row.text,
                    })
        return borders

    def get_table_structure(self, tables: Sequence[Table]) -> List[Dict[str, Any]]:
        """Summarize each table's headers and dimensions for display."""
        return [
            {
                "table_index": table.table_index,
                "headers": [
                    {
                        "text": header.text,
                        "is_commodity_column": header.is_commodity_column,
                        "confidence": header.confidence,
                    }
                    for header in table.headers
                ],
                "row_count": table.total_rows,
                "column_count": table.total_columns,
                "has_commodity_column": table.has_commodity_column,
            }
            for table in tables
        ]
