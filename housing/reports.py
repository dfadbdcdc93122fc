"""
Report assembly shared by the download endpoint and ``main.py report``.

``build_report`` picks one of the aggregation reports by name and returns its
data; ``report_rows`` flattens that data into export rows (one dict per
house or group); ``render_report_text`` produces the printable plain-text
rendition.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Sequence

from housing import aggregation
from housing.models import House
from utils.formatting import ReportFormatter, TableFormatter, format_inr, format_percent, truncate_text

REPORT_NAMES = ("houses", "monthly", "constituency", "financial")

# Widest beneficiary name printed in the text house table
NAME_WIDTH = 24

HOUSE_COLUMNS = [
    "id", "beneficiary_name", "constituency", "village", "stage", "progress",
    "assigned_officer", "allocated", "released", "utilized", "remaining",
    "start_date", "expected_completion", "last_updated",
]


def house_row(house: House) -> dict[str, Any]:
    """Flat export row for one house; fund columns as display strings."""
    funds = house.fund_details
    return {
        "id": house.id,
        "beneficiary_name": house.beneficiary_name,
        "constituency": house.constituency,
        "village": house.village,
        "stage": house.stage,
        "progress": house.progress,
        "assigned_officer": house.assigned_officer,
        "allocated": funds.allocated,
        "released": funds.released,
        "utilized": funds.utilized,
        "remaining": funds.remaining,
        "start_date": house.start_date,
        "expected_completion": house.expected_completion,
        "last_updated": house.last_updated,
    }


def build_report(
    name: str,
    houses: Sequence[House],
    today: date,
    month: str | None = None,
    constituency: str = "All",
    period: str | None = None,
) -> dict[str, Any]:
    """Run the named report.

    Args:
        name: One of ``REPORT_NAMES``.
        month: "October 2026"-style label for the monthly report; defaults to
            the current month.

    Raises:
        ValueError: On an unknown report name or malformed month label.
    """
    if name == "houses":
        return {"title": "Beneficiary Houses", "houses": list(houses)}
    if name == "monthly":
        year, month_no = aggregation.parse_month_label(month) if month else (today.year, today.month)
        data = aggregation.monthly_report(houses, year, month_no)
        data["title"] = f"Monthly Progress Report: {data['month']}"
        return data
    if name == "constituency":
        data = aggregation.constituency_report(houses, constituency)
        data["title"] = f"Constituency Report: {data['constituency']}"
        return data
    if name == "financial":
        data = aggregation.financial_report(houses, period, today)
        data["title"] = f"Financial Report: {data['period']}"
        return data
    raise ValueError(f"report must be one of: {list(REPORT_NAMES)}")


def report_rows(name: str, data: dict[str, Any]) -> tuple[list[str], list[dict[str, Any]]]:
    """Columns and rows for a tabular export of *data*.

    The constituency report exports its village table; every other report
    exports the houses it selected.
    """
    if name == "constituency":
        columns = ["village", "houses", "completed", "completion_percentage"]
        return columns, list(data["villages"])
    return HOUSE_COLUMNS, [house_row(h) for h in data["houses"]]


def report_metadata(name: str, data: dict[str, Any]) -> dict[str, Any]:
    """Scalar summary fields written above an export."""
    meta: dict[str, Any] = {"report": name}
    for key in ("month", "constituency", "period", "start_date"):
        if key in data:
            meta[key] = data[key]
    if "summary" in data:
        meta.update(data["summary"])
    if "totals" in data:
        totals = data["totals"]
        meta["allocated"] = format_inr(totals["allocated"])
        meta["released"] = format_inr(totals["released"])
        meta["utilized"] = format_inr(totals["utilized"])
        meta["remaining"] = format_inr(totals["remaining"])
        meta["utilization_percentage"] = totals["utilization_percentage"]
    return meta


def _house_table(houses: Sequence[House]) -> TableFormatter:
    table = TableFormatter(["ID", "Beneficiary", "Constituency", "Village", "Stage", "Progress", "Utilized"])
    for h in houses:
        table.add_row([h.id, truncate_text(h.beneficiary_name, NAME_WIDTH), h.constituency, h.village,
                       h.stage, format_percent(h.progress, precision=0), h.fund_details.utilized])
    return table


def render_report_text(name: str, data: dict[str, Any]) -> str:
    """Printable plain-text version of a report built by ``build_report``."""
    report = ReportFormatter(data["title"])

    if name == "monthly":
        report.add_section("Summary", data["summary"])
        report.add_section("Stage Distribution",
                           {row["name"]: row["count"] for row in data["stage_chart"]})
    elif name == "constituency":
        report.add_section("Summary", data["summary"])
        report.add_section("Houses by Stage", data["stage_counts"])
        villages = TableFormatter(["Village", "Houses", "Completed", "Completion %"])
        for row in data["villages"]:
            villages.add_row([row["village"], row["houses"], row["completed"],
                              row["completion_percentage"]])
        report.add_section("Village Breakdown", villages)
    elif name == "financial":
        totals = data["totals"]
        report.add_section("Fund Position", {
            "Since": data["start_date"],
            "Allocated": format_inr(totals["allocated"]),
            "Released": format_inr(totals["released"]),
            "Utilized": format_inr(totals["utilized"]),
            "Remaining": format_inr(totals["remaining"]),
            "Utilization": format_percent(totals["utilization_percentage"], precision=0),
        })
        by_constituency = TableFormatter(["Constituency", "Houses", "Allocated", "Utilized", "Utilization %"])
        for row in data["by_constituency"]:
            by_constituency.add_row([row["constituency"], row["houses"], format_inr(row["allocated"]),
                                     format_inr(row["utilized"]), row["utilization_percentage"]])
        report.add_section("By Constituency", by_constituency)
        by_stage = TableFormatter(["Stage", "Houses", "Allocated", "Released"])
        for row in data["by_stage"]:
            by_stage.add_row([row["stage"], row["houses"], format_inr(row["allocated"]),
                              format_inr(row["released"])])
        report.add_section("By Stage", by_stage)

    if data["houses"]:
        report.add_section("Houses", _house_table(data["houses"]))
    else:
        report.add_section("Houses", "No houses match this report.")
    return report.to_string()
