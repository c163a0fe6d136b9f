"""
Command line entry point.

Reads one OCR result JSON file and prints the extraction result as JSON:

    python -m commodity_ocr ocr_result.json --indent 2
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import LOG_LEVEL
from .pipeline import DataExtractor

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Extract products and tables from an OCR result")
    parser.add_argument("input", type=Path, help="OCR result JSON file")
    parser.add_argument("--indent", type=int, default=None, help="JSON indentation")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else LOG_LEVEL)

    try:
        with open(args.input, "r", encoding="utf-8") as f:
            ocr_result = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"[CLI] Could not read {args.input}: {e}")
        return 2

    result = DataExtractor().extract_structured_data(ocr_result)
    print(json.dumps(result.to_dict(), indent=args.indent, default=str))
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
