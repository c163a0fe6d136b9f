"""
Word ingest from the OCR document structure.

Walks the page -> block -> paragraph -> word hierarchy returned by the
document OCR engine and flattens it into Word records. Words with a
malformed text or bounding box are dropped one at a time; they never fail the pass.
"""

from typing import Any, List, Mapping, Optional, Tuple
import logging

from .models import Word, Point

logger = logging.getLogger(__name__)


class IngestError(Exception):
    """Raised when a single OCR word cannot be converted into a Word."""
    pass


def extract_word_text(word: Any) -> str:
    """
    Extract text from an OCR word object.

    The engine reports text per symbol; a plain "text" field is accepted
    when symbols are absent.

    Raises:
        IngestError: If the word or one of its symbols is not an object
    """
    if not isinstance(word, Mapping):
        raise IngestError(f"word is not an object: {word!r}")
    symbols = word.get("symbols")
    if symbols:
        if not all(isinstance(symbol, Mapping) for symbol in symbols):
            raise IngestError(f"symbol is not an object: {symbols!r}")
        return "".join(str(symbol.get("text") or "") for symbol in symbols)
    return str(word.get("text") or "")


def parse_bounding_box(bounding_box: Any) -> Tuple[Point, Point, Point, Point]:
    """
    Convert an OCR bounding box into four (x, y) points.

    The engine omits coordinates equal to zero, so a missing x or y reads as 0.

    Args:
        bounding_box: Mapping with a "vertices" list of {x, y} objects

    Returns:
        Tuple of four (x, y) points, top-left first

    Raises:
        IngestError: If fewer than four vertices are present or a coordinate is not numeric
    """
    if not isinstance(bounding_box, Mapping):
        raise IngestError("bounding box missing")

    vertices = bounding_box.get("vertices") or []
    if len(vertices) < 4:
        raise IngestError(f"expected 4 vertices, got {len(vertices)}")

    points = []
    for vertex in vertices[:4]:
        if not isinstance(vertex, Mapping):
            raise IngestError(f"vertex is not an object: {vertex!r}")
        try:
            x = float(vertex.get("x") or 0)
            y = float(vertex.get("y") or 0)
        except (TypeError, ValueError):
            raise IngestError(f"non-numeric vertex: {vertex!r}")
        points.append((x, y))

    return tuple(points)


def _parse_confidence(value: Any, default: float) -> float:
    # A zero confidence is how the engine reports "not scored"
    if not value:
        return default
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return default
    return min(max(confidence, 0.0), 1.0)


def extract_words(
    document_structure: Mapping[str, Any],
    default_confidence: float = 0.9
) -> List[Word]:
    """
    Flatten an OCR document structure into Word records.

    Args:
        document_structure: Mapping with a "pages" list
        default_confidence: Confidence used when a word carries none

    Returns:
        Words in document order (page, block, paragraph, word)
    """
    words: List[Word] = []
    rejected = 0

    for page_index, page in enumerate(document_structure.get("pages") or []):
        for block in page.get("blocks") or []:
            block_type = block.get("blockType") or "TEXT"
            for paragraph in block.get("paragraphs") or []:
                for raw_word in paragraph.get("words") or []:
                    try:
                        text = extract_word_text(raw_word)
                        if not text.strip():
                            continue
                        bounding_box = parse_bounding_box(raw_word.get("boundingBox"))
                    except IngestError as e:
                        rejected += 1
                        logger.debug(f"[WordIngest] Dropping malformed word on page {page_index}: {e}")
                        continue
                    words.append(Word(
                        text=text,
                        bounding_box=bounding_box,
                        confidence=_parse_confidence(raw_word.get("confidence"), default_confidence),
                        page_index=page_index,
                        block_type=str(block_type),
                    ))

    if rejected:
        logger.warning(f"[WordIngest] Dropped {rejected} malformed word(s)")
    logger.debug(f"[WordIngest] Ingested {len(words)} words")
    return words


def has_pages(document_structure: Optional[Mapping[str, Any]]) -> bool:
    """Whether a document structure carries a pages list."""
    return isinstance(document_structure, Mapping) and isinstance(document_structure.get("pages"), list)
