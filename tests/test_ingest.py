"""
Tests for flattening the OCR document structure into words.
"""

import sys
from pathlib import Path

import pytest

# Add src to path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from commodity_ocr.ingest import IngestError, extract_word_text, extract_words, parse_bounding_box
from ocr_payloads import make_document, make_ocr_word


def test_word_text_joins_symbols():
    assert extract_word_text({"symbols": [{"text": "A"}, {"text": "B"}, {"text": "1"}]}) == "AB1"


def test_word_text_falls_back_to_text_field():
    assert extract_word_text({"text": "Widget"}) == "Widget"
    assert extract_word_text({}) == ""


def test_missing_coordinates_read_as_zero():
    box = parse_bounding_box({"vertices": [{}, {"x": 50}, {"x": 50, "y": 20}, {"y": 20}]})
    assert box == ((0.0, 0.0), (50.0, 0.0), (50.0, 20.0), (0.0, 20.0))


@pytest.mark.parametrize("bounding_box", [
    None,
    {},
    {"vertices": [{"x": 1, "y": 1}, {"x": 2, "y": 1}, {"x": 2, "y": 2}]},
    {"vertices": [{"x": "left", "y": 1}, {"x": 2, "y": 1}, {"x": 2, "y": 2}, {"x": 1, "y": 2}]},
])
def test_malformed_bounding_box_raises(bounding_box):
    with pytest.raises(IngestError):
        parse_bounding_box(bounding_box)


def test_malformed_word_is_dropped_without_failing_pass():
    document = make_document([("Widget", 10, 10), ("Bolt", 100, 10)])
    words = document["pages"][0]["blocks"][0]["paragraphs"][0]["words"]
    words[0]["boundingBox"]["vertices"] = words[0]["boundingBox"]["vertices"][:2]

    result = extract_words(document)

    assert [w.text for w in result] == ["Bolt"]


@pytest.mark.parametrize("raw_word", ["Widget", {"symbols": ["A"]}, {"symbols": [{"text": "A"}, 7]}])
def test_non_object_word_or_symbol_raises(raw_word):
    with pytest.raises(IngestError):
        extract_word_text(raw_word)


def test_word_with_non_object_symbols_is_dropped_without_failing_pass():
    document = make_document([("Widget", 10, 10), ("Bolt", 100, 10)])
    words = document["pages"][0]["blocks"][0]["paragraphs"][0]["words"]
    words[0]["symbols"] = ["W"]
    words.append("stray")

    result = extract_words(document)

    assert [w.text for w in result] == ["Bolt"]


def test_blank_words_are_skipped():
    document = make_document([("Widget", 10, 10), ("   ", 100, 10)])
    assert [w.text for w in extract_words(document)] == ["Widget"]


def test_confidence_default_and_clamp():
    document = {"pages": [{"blocks": [{"paragraphs": [{"words": [
        make_ocr_word("Low", 10, 10, confidence=None),
        make_ocr_word("High", 100, 10, confidence=1.7),
        make_ocr_word("Unscored", 200, 10, confidence=0),
    ]}]}]}]}

    words = extract_words(document, default_confidence=0.8)

    assert words[0].confidence == 0.8
    assert words[1].confidence == 1.0
    assert words[2].confidence == 0.8


def test_words_carry_page_index_and_block_type():
    document = make_document([("First", 10, 10)], [("Second", 10, 10)])
    document["pages"][1]["blocks"][0]["blockType"] = "TABLE"

    words = extract_words(document)

    assert [(w.text, w.page_index, w.block_type) for w in words] == [
        ("First", 0, "TEXT"),
        ("Second", 1, "TABLE"),
    ]
    assert (words[0].x, words[0].y) == (10.0, 10.0)


def test_empty_structure_yields_no_words():
    assert extract_words({"pages": []}) == []
    assert extract_words({"pages": [{}]}) == []
