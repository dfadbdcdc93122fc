"""
GET /api/v1/download endpoint.

Exports the house list or one of the reports as CSV, JSON (newline-delimited),
Excel, or the printable plain-text report.

Every format starts with source attribution: ``# key: value`` rows in CSV, a
``_metadata`` first line in JSON, a "Metadata" sheet in Excel.  The
X-Total-Count header carries the number of exported rows.
"""

import csv
import io
import json
from datetime import date, datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse, StreamingResponse

from api.deps import get_house_store, get_today
from housing.reports import build_report, render_report_text, report_metadata, report_rows
from housing.store import HouseStore
from utils.patterns import SHEET_TITLE_FORBIDDEN

router = APIRouter(prefix="/download", tags=["download"])

_SOURCE = "SGAY Scheme Monitor"

_MEDIA_TYPES = {
    "csv": "text/csv",
    "json": "application/x-ndjson",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "txt": "text/plain",
}
_EXTENSIONS = {"csv": "csv", "json": "ndjson", "xlsx": "xlsx", "txt": "txt"}


def _sheet_title(title: str) -> str:
    """Worksheet name for *title*: Excel rejects some characters and caps names at 31."""
    return SHEET_TITLE_FORBIDDEN.sub("", title)[:31]


def _csv_stream(meta: dict[str, Any], columns: list[str], rows: list[dict[str, Any]]):
    buf = io.StringIO()
    writer_raw = csv.writer(buf)
    for key, value in meta.items():
        writer_raw.writerow([f"# {key}: {value}"])
    yield buf.getvalue()
    buf.seek(0)
    buf.truncate()
    writer = csv.DictWriter(buf, fieldnames=columns, extrasaction="ignore")
    writer.writeheader()
    yield buf.getvalue()
    for row in rows:
        buf.seek(0)
        buf.truncate()
        writer.writerow(row)
        yield buf.getvalue()


def _json_stream(meta: dict[str, Any], columns: list[str], rows: list[dict[str, Any]]):
    yield json.dumps({"_metadata": meta}, default=str) + "\n"
    for row in rows:
        yield json.dumps({c: row.get(c) for c in columns}, default=str) + "\n"


def _xlsx_bytes(meta: dict[str, Any], columns: list[str], rows: list[dict[str, Any]], sheet: str) -> bytes:
    import openpyxl

    wb = openpyxl.Workbook(write_only=True)
    meta_ws = wb.create_sheet("Metadata")
    for key, value in meta.items():
        meta_ws.append([key, value])
    ws = wb.create_sheet(sheet)
    ws.append(columns)
    for row in rows:
        ws.append([row.get(c) for c in columns])
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


@router.get("", summary="Download houses or a report as CSV, JSON, Excel or text")
def download(
    request: Request,
    report: str = Query("houses", pattern="^(houses|monthly|constituency|financial)$"),
    fmt: str = Query("csv", pattern="^(csv|json|xlsx|txt)$", description="Output format"),
    month: str | None = Query(None, description="Monthly report label, e.g. 'October 2026'"),
    constituency: str = Query("All", description="Constituency report filter"),
    period: str | None = Query(None, description="Financial report period"),
    store: HouseStore = Depends(get_house_store),
    today: date = Depends(get_today),
):
    """Export a report in the requested format."""
    data = build_report(
        report, store.fetch_all(), today,
        month=month, constituency=constituency, period=period,
    )
    columns, rows = report_rows(report, data)
    filename = f"{report}_report.{_EXTENSIONS[fmt]}"
    headers = {
        "Content-Disposition": f"attachment; filename={filename}",
        "X-Total-Count": str(len(rows)),
    }

    if fmt == "txt":
        return PlainTextResponse(render_report_text(report, data), headers=headers)

    meta = {
        "Source": _SOURCE,
        "Export Date": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        "URL": str(request.url),
        "Total Records": len(rows),
        **report_metadata(report, data),
    }

    if fmt == "xlsx":
        content = _xlsx_bytes(meta, columns, rows, sheet=_sheet_title(data["title"]))
        return StreamingResponse(
            iter([content]),
            media_type=_MEDIA_TYPES["xlsx"],
            headers={**headers, "Content-Length": str(len(content))},
        )

    stream = _csv_stream if fmt == "csv" else _json_stream
    return StreamingResponse(
        stream(meta, columns, rows),
        media_type=_MEDIA_TYPES[fmt],
        headers=headers,
    )
