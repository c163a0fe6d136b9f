"""
Tests for row clustering and column span detection.
"""

import sys
from pathlib import Path

# Add src to path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from commodity_ocr.models import ColumnSpan, Word
from commodity_ocr.parser import group_words_into_rows, identify_column_boundaries, locate_span


def word(text, x, y, page_index=0):
    return Word(
        text=text,
        bounding_box=((x, y), (x + 40, y), (x + 40, y + 20), (x, y + 20)),
        confidence=0.9,
        page_index=page_index,
    )


def test_no_words_yields_no_rows():
    assert group_words_into_rows([]) == []


def test_row_words_sorted_by_x():
    rows = group_words_into_rows([
        word("C", 300, 12), word("A", 10, 10), word("B", 150, 15),
        word("F", 320, 80), word("D", 5, 82), word("E", 90, 79),
    ])

    assert [r.text for r in rows] == ["A B C", "D E F"]
    for row in rows:
        xs = [w.x for w in row.words]
        assert xs == sorted(xs)


def test_threshold_boundary():
    same = group_words_into_rows([word("A", 10, 100), word("B", 100, 130)])
    split = group_words_into_rows([word("A", 10, 100), word("B", 100, 131)])

    assert len(same) == 1
    assert len(split) == 2


def test_running_centroid_moves_to_midpoint():
    # centroid: 100 -> 112.5 after B; C at 140 is 27.5 away
    rows = group_words_into_rows([word("A", 10, 100), word("B", 60, 125), word("C", 110, 140)])

    assert len(rows) == 1
    assert rows[0].y == (112.5 + 140) / 2


def test_custom_threshold():
    rows = group_words_into_rows([word("A", 10, 100), word("B", 60, 110)], row_threshold=5)
    assert len(rows) == 2


def test_page_change_closes_row():
    rows = group_words_into_rows([word("A", 10, 100, page_index=0), word("B", 10, 100, page_index=1)])

    assert [(r.text, r.page_index) for r in rows] == [("A", 0), ("B", 1)]


def test_column_spans_split_on_gaps():
    rows = group_words_into_rows([
        word("a", 10, 10), word("b", 40, 10), word("c", 200, 10),
        word("d", 230, 50), word("e", 500, 50), word("f", 10, 50),
    ])

    spans = identify_column_boundaries(rows)

    assert spans == [ColumnSpan(10, 40), ColumnSpan(200, 230), ColumnSpan(500, 500)]


def test_gap_equal_to_threshold_does_not_split():
    rows = group_words_into_rows([word("a", 0, 10), word("b", 50, 10)])
    assert len(identify_column_boundaries(rows)) == 1


def test_no_rows_no_spans():
    assert identify_column_boundaries([]) == []


def test_locate_span():
    spans = [ColumnSpan(10, 40), ColumnSpan(200, 230)]

    assert locate_span(10, spans) == 0
    assert locate_span(40, spans) == 0
    assert locate_span(215, spans) == 1
    assert locate_span(100, spans) is None
    assert locate_span(5, spans) is None
    assert locate_span(5, []) is None
