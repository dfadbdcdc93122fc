"""
Tests for api/routes/download.py: report exports.

CSV/NDJSON bodies are parsed back; the Excel export is reopened with openpyxl.
"""
import csv
import io
import json
import sys
from pathlib import Path

import openpyxl
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from api.routes.download import _sheet_title
from housing.reports import HOUSE_COLUMNS


def _csv_parts(text: str) -> tuple[list[str], list[dict]]:
    lines = text.splitlines()
    meta = [l for l in lines if l.startswith("# ")]
    body = [l for l in lines if not l.startswith("# ")]
    return meta, list(csv.DictReader(io.StringIO("\n".join(body))))


class TestCsv:
    def test_houses_default(self, client):
        resp = client.get("/api/v1/download")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert resp.headers["X-Total-Count"] == "4"
        assert "houses_report.csv" in resp.headers["Content-Disposition"]
        meta, rows = _csv_parts(resp.text)
        assert meta[0] == "# Source: SGAY Scheme Monitor"
        assert any(line.startswith("# Total Records: 4") for line in meta)
        assert len(rows) == 4
        assert list(rows[0]) == HOUSE_COLUMNS
        assert rows[1]["remaining"] == "Rs. 50,000"

    def test_monthly(self, client):
        resp = client.get("/api/v1/download", params={"report": "monthly", "month": "October 2026"})
        meta, rows = _csv_parts(resp.text)
        assert "# month: October 2026" in meta
        assert [r["id"] for r in rows] == ["1", "2"]

    def test_constituency_exports_villages(self, client):
        resp = client.get("/api/v1/download", params={"report": "constituency", "constituency": "Gangtok"})
        _, rows = _csv_parts(resp.text)
        assert [r["village"] for r in rows] == ["Ranipool", "Tadong"]


class TestJson:
    def test_metadata_first_line(self, client):
        resp = client.get("/api/v1/download", params={"report": "financial", "fmt": "json",
                                                      "period": "Last Year"})
        lines = resp.text.strip().splitlines()
        meta = json.loads(lines[0])["_metadata"]
        assert meta["report"] == "financial"
        assert meta["utilized"] == "Rs. 2,15,000"
        assert len(lines) == 5
        assert json.loads(lines[1])["beneficiary_name"] == "Ramesh Kumar"


class TestXlsx:
    def test_workbook_sheets(self, client):
        resp = client.get("/api/v1/download", params={"report": "financial", "fmt": "xlsx"})
        assert resp.status_code == 200
        assert resp.headers["Content-Length"] == str(len(resp.content))
        wb = openpyxl.load_workbook(io.BytesIO(resp.content))
        assert wb.sheetnames == ["Metadata", "Financial Report Last 6 Months"]
        meta = {row[0]: row[1] for row in wb["Metadata"].iter_rows(values_only=True)}
        assert meta["Source"] == "SGAY Scheme Monitor"
        assert meta["Total Records"] == 3
        data = list(wb["Financial Report Last 6 Months"].iter_rows(values_only=True))
        assert list(data[0]) == HOUSE_COLUMNS
        assert len(data) == 4

    def test_constituency_with_slash(self, client):
        resp = client.get("/api/v1/download", params={"report": "constituency", "fmt": "xlsx",
                                                      "constituency": "North/East"})
        assert resp.status_code == 200
        wb = openpyxl.load_workbook(io.BytesIO(resp.content))
        assert wb.sheetnames == ["Metadata", "Constituency Report NorthEast"]

    @pytest.mark.parametrize("title,expected", [
        ("Constituency Report: [Upper] Dzongu?*", "Constituency Report Upper Dzong"),
        ("Monthly Progress Report: October 2026", "Monthly Progress Report October"),
        ("a\\b/c", "abc"),
    ])
    def test_sheet_title(self, title, expected):
        assert _sheet_title(title) == expected


class TestText:
    def test_printable_report(self, client):
        resp = client.get("/api/v1/download", params={"report": "constituency", "fmt": "txt",
                                                      "constituency": "Namchi"})
        assert resp.status_code == 200
        assert resp.text.startswith("Constituency Report: Namchi")
        assert "Damthang" in resp.text


class TestValidation:
    @pytest.mark.parametrize("params", [
        {"fmt": "pdf"},
        {"report": "weekly"},
    ])
    def test_rejects_unknown_values(self, client, params):
        assert client.get("/api/v1/download", params=params).status_code == 422

    def test_bad_month_label(self, client):
        resp = client.get("/api/v1/download", params={"report": "monthly", "month": "13 2026"})
        assert resp.status_code == 400
