"""
Tests for the command line entry point.
"""

import json
import sys
from pathlib import Path

# Add src to path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from commodity_ocr.__main__ import main
from ocr_payloads import INVOICE_TABLE, make_ocr_result


def test_cli_prints_success(tmp_path, capsys):
    path = tmp_path / "ocr.json"
    path.write_text(json.dumps(make_ocr_result(INVOICE_TABLE)), encoding="utf-8")

    assert main([str(path)]) == 0
    output = json.loads(capsys.readouterr().out)
    assert output["success"] is True
    assert [p["name"] for p in output["data"]["products"]] == ["WIDGET-100", "BOLT-7"]


def test_cli_failure_exit_status(tmp_path, capsys):
    path = tmp_path / "ocr.json"
    path.write_text(json.dumps({"success": False}), encoding="utf-8")

    assert main([str(path), "--indent", "2"]) == 1
    assert json.loads(capsys.readouterr().out) == {"success": False, "error": "no valid result"}


def test_cli_unreadable_input(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")

    assert main([str(bad)]) == 2
    assert main([str(tmp_path / "missing.json")]) == 2
