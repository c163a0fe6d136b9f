"""
Row clustering and column span detection.

This module turns a flat list of recognized words into:
- Horizontal rows, grouped by vertical proximity
- Column spans, derived from horizontal gaps between word start positions
"""

from bisect import bisect_right
from typing import List, Optional, Sequence
import logging

from .models import ColumnSpan, Row, Word

logger = logging.getLogger(__name__)


def _close_row(words: List[Word], y: float) -> Row:
    ordered = sorted(words, key=lambda w: w.x)
    return Row(
        words=ordered,
        y=y,
        text=" ".join(w.text for w in ordered),
        page_index=ordered[0].page_index,
    )


def group_words_into_rows(
    words: Sequence[Word],
    row_threshold: float = 30.0
) -> List[Row]:
    """
    Group words into rows based on y-position.

    Words are walked top to bottom. A word joins the open row when its y lies
    within row_threshold of the row's running centroid; the centroid then moves
    to the midpoint of the old centroid and the word's y. A page change always
    closes the open row.

    Args:
        words: Words to group
        row_threshold: Maximum y-distance to the open row's centroid (in pixels)

    Returns:
        List of rows, top to bottom, each with words sorted by x
    """
    if not words:
        return []

    rows: List[Row] = []
    current_row: List[Word] = []
    current_y: Optional[float] = None
    current_page: Optional[int] = None

    for word in sorted(words, key=lambda w: (w.page_index, w.y)):
        same_page = current_page is None or word.page_index == current_page
        if current_y is None or (same_page and abs(word.y - current_y) <= row_threshold):
            current_row.append(word)
            current_y = word.y if current_y is None else (current_y + word.y) / 2
        else:
            rows.append(_close_row(current_row, current_y))
            current_row = [word]
            current_y = word.y
        current_page = word.page_index

    if current_row:
        rows.append(_close_row(current_row, current_y))

    logger.debug(f"[RowClusterer] Grouped {len(words)} words into {len(rows)} rows")
    return rows


def identify_column_boundaries(
    rows: Sequence[Row],
    gap_threshold: float = 50.0
) -> List[ColumnSpan]:
    """
    Detect column spans from the x-start of every word.

    Distinct start positions are sorted and split wherever two neighbours are
    more than gap_threshold apart.

    Args:
        rows: Clustered rows
        gap_threshold: Minimum gap between columns (in pixels)

    Returns:
        Column spans, left to right
    """
    sorted_x = sorted({word.x for row in rows for word in row.words})
    if not sorted_x:
        return []

    spans: List[ColumnSpan] = []
    start = sorted_x[0]
    for previous, x in zip(sorted_x, sorted_x[1:]):
        if x - previous > gap_threshold:
            spans.append(ColumnSpan(start=start, end=previous))
            start = x
    spans.append(ColumnSpan(start=start, end=sorted_x[-1]))

    logger.debug(f"[ColumnSurvey] Detected {len(spans)} column spans from {len(sorted_x)} x-positions")
    return spans


def locate_span(x: float, spans: Sequence[ColumnSpan]) -> Optional[int]:
    """
    Find the span containing an x-coordinate.

    Returns:
        Index of the containing span, or None when x falls in a gap or outside all spans
    """
    index = bisect_right([span.start for span in spans], x) - 1
    if index >= 0 and spans[index].contains(x):
        return index
    return None
