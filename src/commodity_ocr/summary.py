"""
Summary counts for extraction results.

Counts are always derived from the collections being returned, so a
summary can never disagree with its payload.
"""

from typing import Optional, Sequence

from .models import (
    CommodityColumnRef,
    ProductRecord,
    Table,
    TableSummary,
    TextExtraction,
    TextSummary,
)


def summarize_tables(
    tables: Sequence[Table],
    commodity_column: Optional[CommodityColumnRef],
    products: Sequence[ProductRecord]
) -> TableSummary:
    """
    Summarize the table path.

    Args:
        tables: Reconstructed tables
        commodity_column: Located commodity column, if any
        products: Product names read from that column

    Returns:
        TableSummary with totals across all tables
    """
    return TableSummary(
        total_tables=len(tables),
        total_rows=sum(table.total_rows for table in tables),
        total_columns=sum(table.total_columns for table in tables),
        tables_with_commodity=sum(1 for table in tables if table.has_commodity_column),
        commodity_column_found=commodity_column is not None,
        product_names_count=len(products),
    )


def summarize_text(extraction: TextExtraction) -> TextSummary:
    """Summarize the text fallback path."""
    return TextSummary(
        total_commodities=len(extraction.commodities),
        total_products=len(extraction.products),
        total_quantities=len(extraction.quantities),
        total_weights=len(extraction.weights),
        total_prices=len(extraction.prices),
    )
