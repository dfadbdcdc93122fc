"""
Summary statistics over a list of houses.

Every view (dashboard cards, charts, map filters, the three reports and the
exports) derives its numbers here so the arithmetic exists exactly once.
All functions are pure: they take houses, return plain dicts/lists, and never
touch a store.

Conventions:
    - Percentages are whole numbers rounded half-up; a zero denominator
      yields 0.
    - Amounts are parsed with ``utils.strings.parse_currency`` (malformed → 0).
    - Blank grouping keys are reported as "Unknown".
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable, Sequence
from datetime import date
from typing import Any

from housing.models import House, Officer
from utils.config import KnownValues
from utils.formatting import round_half_up
from utils.strings import parse_iso_date

UNKNOWN = "Unknown"

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June", "July",
    "August", "September", "October", "November", "December",
)

# house attribute -> grouping accessor, for the generic group-by endpoint
GROUP_KEYS: dict[str, Callable[[House], str]] = {
    "stage": lambda h: h.stage,
    "constituency": lambda h: h.constituency,
    "village": lambda h: h.village,
    "assigned_officer": lambda h: h.assigned_officer,
}


def percent(part: float, whole: float) -> int:
    """``part / whole`` as a whole-number percentage; 0 when *whole* is 0."""
    if not whole:
        return 0
    return round_half_up(part / whole * 100)


def _key(value: str | None) -> str:
    return value if value else UNKNOWN


def group_by(houses: Iterable[House], key: Callable[[House], str]) -> dict[str, list[House]]:
    """Bucket houses by ``key(house)``, preserving first-seen order."""
    groups: dict[str, list[House]] = defaultdict(list)
    for house in houses:
        groups[_key(key(house))].append(house)
    return dict(groups)


# ── Counts ────────────────────────────────────────────────────────────────────

def stage_counts(houses: Iterable[House]) -> dict[str, int]:
    """Houses per stage value; the counts always add up to ``len(houses)``."""
    return {stage: len(items) for stage, items in group_by(houses, GROUP_KEYS["stage"]).items()}


def constituency_counts(houses: Iterable[House]) -> dict[str, int]:
    """Houses per constituency (the constituency bar chart)."""
    groups = group_by(houses, GROUP_KEYS["constituency"])
    return {name: len(items) for name, items in groups.items()}


def unique_values(houses: Iterable[House], field: str) -> list[str]:
    """Sorted distinct non-empty values of *field*, for filter dropdowns."""
    return sorted({getattr(h, field) for h in houses if getattr(h, field)})


def average_progress(houses: Sequence[House]) -> int:
    if not houses:
        return 0
    return round_half_up(sum(h.progress for h in houses) / len(houses))


def dashboard_summary(houses: Sequence[House]) -> dict[str, int]:
    """Cards at the top of the dashboard."""
    total = len(houses)
    completed = sum(1 for h in houses if h.stage == "Completed")
    in_progress = sum(1 for h in houses if h.stage == "In Progress")
    delayed = sum(1 for h in houses if h.stage == "Delayed")
    return {
        "total_houses": total,
        "completed_houses": completed,
        "in_progress_houses": in_progress,
        "delayed_houses": delayed,
        "overall_progress": percent(sum(h.progress for h in houses), total * 100),
        "completed_percentage": percent(completed, total),
        "in_progress_percentage": percent(in_progress, total),
        "delayed_percentage": percent(delayed, total),
    }


def progress_distribution(houses: Iterable[House]) -> dict[str, int]:
    """Completed (100 %), in progress (25–99 %) and early (< 25 %) counts."""
    completed = in_progress = not_started = 0
    for house in houses:
        if house.progress >= 100:
            completed += 1
        elif house.progress >= 25:
            in_progress += 1
        else:
            not_started += 1
    return {"completed": completed, "in_progress": in_progress, "not_started": not_started}


def status_breakdown(houses: Sequence[House]) -> dict[str, int]:
    """Report cards: total, completed, in progress (anything else), not started."""
    completed = sum(1 for h in houses if h.stage == "Completed")
    not_started = sum(1 for h in houses if h.stage == "Not Started")
    return {
        "total": len(houses),
        "completed": completed,
        "in_progress": len(houses) - completed - not_started,
        "not_started": not_started,
    }


# ── Funds ─────────────────────────────────────────────────────────────────────

def fund_totals(houses: Iterable[House]) -> dict[str, float | int]:
    """Summed fund amounts across *houses*; ``remaining`` is allocated - utilized."""
    allocated = released = utilized = 0.0
    for house in houses:
        funds = house.fund_details
        allocated += funds.allocated_amount
        released += funds.released_amount
        utilized += funds.utilized_amount
    return {
        "allocated": allocated,
        "released": released,
        "utilized": utilized,
        "remaining": allocated - utilized,
        "utilization_percentage": percent(utilized, allocated),
    }


def funds_by_constituency(houses: Iterable[House]) -> list[dict[str, Any]]:
    rows = []
    for name, items in sorted(group_by(houses, GROUP_KEYS["constituency"]).items()):
        totals = fund_totals(items)
        rows.append({
            "constituency": name,
            "houses": len(items),
            "allocated": totals["allocated"],
            "utilized": totals["utilized"],
            "utilization_percentage": totals["utilization_percentage"],
        })
    return rows


def funds_by_stage(houses: Iterable[House]) -> list[dict[str, Any]]:
    rows = []
    for stage, items in sorted(group_by(houses, GROUP_KEYS["stage"]).items()):
        totals = fund_totals(items)
        rows.append({
            "stage": stage,
            "houses": len(items),
            "allocated": totals["allocated"],
            "released": totals["released"],
        })
    return rows


def fund_utilization_by(houses: Iterable[House], key: str = "constituency") -> list[dict[str, Any]]:
    """Total and average utilized amount per group (fund utilization chart)."""
    accessor = GROUP_KEYS[key]
    rows = []
    for name, items in group_by(houses, accessor).items():
        total = sum(h.fund_details.utilized_amount for h in items)
        rows.append({
            "name": name,
            "total": total,
            "average": round_half_up(total / len(items)),
        })
    return rows


def aggregate(houses: Sequence[House], key: str) -> list[dict[str, Any]]:
    """Generic group-by: count, average progress and fund sums per group.

    Raises:
        ValueError: If *key* is not one of ``GROUP_KEYS``.
    """
    if key not in GROUP_KEYS:
        raise ValueError(f"group_by must be one of: {sorted(GROUP_KEYS)}")
    groups = group_by(houses, GROUP_KEYS[key])
    total = len(houses)
    rows = []
    for name, items in groups.items():
        totals = fund_totals(items)
        rows.append({
            "group_value": name,
            "house_count": len(items),
            "pct_of_total": percent(len(items), total),
            "average_progress": average_progress(items),
            "allocated": totals["allocated"],
            "released": totals["released"],
            "utilized": totals["utilized"],
            "remaining": totals["remaining"],
        })
    rows.sort(key=lambda r: (-r["house_count"], r["group_value"]))
    return rows


# ── Filters ───────────────────────────────────────────────────────────────────

def filter_houses(
    houses: Iterable[House],
    constituency: str | None = None,
    stage: str | None = None,
    min_progress: int = 0,
    max_progress: int = 100,
    search: str | None = None,
    show_completed: bool = True,
    show_in_progress: bool = True,
    show_delayed: bool = True,
) -> list[House]:
    """Map and management-table filters, applied together.

    *constituency* / *stage* of ``None``, ``""`` or ``"All"`` mean no filter.
    *search* matches beneficiary name, village or assigned officer,
    case-insensitively.
    """
    hidden = set()
    if not show_completed:
        hidden.add("Completed")
    if not show_in_progress:
        hidden.add("In Progress")
    if not show_delayed:
        hidden.add("Delayed")
    needle = search.strip().lower() if search else ""

    result = []
    for house in houses:
        if constituency and constituency != "All" and house.constituency != constituency:
            continue
        if stage and stage != "All" and house.stage != stage:
            continue
        if not min_progress <= house.progress <= max_progress:
            continue
        if house.stage in hidden:
            continue
        if needle and not (
            needle in house.beneficiary_name.lower()
            or needle in house.village.lower()
            or needle in house.assigned_officer.lower()
        ):
            continue
        result.append(house)
    return result


def houses_for_officer(houses: Iterable[House], officer: Officer) -> list[House]:
    """Houses whose ``assigned_officer`` names *officer* (case-insensitive)."""
    name = officer.name.strip().lower()
    return [h for h in houses if h.assigned_officer.strip().lower() == name]


# ── Date windows ──────────────────────────────────────────────────────────────

def shift_months(day: date, months: int) -> date:
    """Move *day* back by *months* calendar months, clamping the day of month."""
    total = day.year * 12 + (day.month - 1) - months
    year, month_index = divmod(total, 12)
    month = month_index + 1
    for dom in (day.day, 30, 29, 28):
        try:
            return date(year, month, dom)
        except ValueError:
            continue
    raise ValueError(f"cannot shift {day} by {months} months")


def last_12_months(today: date) -> list[str]:
    """Labels like "October 2026", newest first, for the monthly report picker."""
    labels = []
    for i in range(12):
        first = shift_months(today.replace(day=1), i)
        labels.append(f"{MONTH_NAMES[first.month - 1]} {first.year}")
    return labels


def parse_month_label(label: str) -> tuple[int, int]:
    """``"October 2026"`` → ``(2026, 10)``.

    Raises:
        ValueError: If the label is not "<Month name> <year>".
    """
    parts = label.split()
    if len(parts) != 2 or parts[0].capitalize() not in MONTH_NAMES or not parts[1].isdigit():
        raise ValueError(f"Expected a label like 'October 2026', got {label!r}")
    return int(parts[1]), MONTH_NAMES.index(parts[0].capitalize()) + 1


def period_start(period: str | None, today: date) -> date:
    """First day included in a financial report period.

    Unknown or missing periods fall back to "Last 6 Months".
    """
    months = KnownValues.REPORT_PERIODS.get(
        period or "", KnownValues.REPORT_PERIODS[KnownValues.DEFAULT_REPORT_PERIOD]
    )
    return shift_months(today, months)


# ── Reports ───────────────────────────────────────────────────────────────────

def monthly_report(houses: Iterable[House], year: int, month: int) -> dict[str, Any]:
    """Houses last updated in the given month, with stage chart data."""
    selected = []
    for house in houses:
        updated = parse_iso_date(house.last_updated)
        if updated is not None and updated.year == year and updated.month == month:
            selected.append(house)
    chart = [
        {"name": stage, "count": sum(1 for h in selected if h.stage == stage)}
        for stage in KnownValues.REPORT_STAGES
    ]
    return {
        "month": f"{MONTH_NAMES[month - 1]} {year}",
        "summary": status_breakdown(selected),
        "stage_chart": chart,
        "houses": selected,
    }


def village_breakdown(houses: Iterable[House]) -> list[dict[str, Any]]:
    """Per-village totals with completed count and completion percentage."""
    rows = []
    groups = group_by((h for h in houses if h.village), GROUP_KEYS["village"])
    for village, items in sorted(groups.items()):
        completed = sum(1 for h in items if h.stage == "Completed")
        rows.append({
            "village": village,
            "houses": len(items),
            "completed": completed,
            "completion_percentage": percent(completed, len(items)),
        })
    return rows


def constituency_report(houses: Iterable[House], constituency: str = "All") -> dict[str, Any]:
    """One constituency (or all of them) with stage split and village table."""
    selected = filter_houses(houses, constituency=constituency)
    summary = status_breakdown(selected)
    summary["average_progress"] = average_progress(selected)
    return {
        "constituency": constituency or "All",
        "summary": summary,
        "stage_counts": stage_counts(selected),
        "villages": village_breakdown(selected),
        "houses": selected,
    }


def financial_report(houses: Iterable[House], period: str | None, today: date) -> dict[str, Any]:
    """Fund position for houses updated within *period* of *today*."""
    start = period_start(period, today)
    selected = []
    for house in houses:
        updated = parse_iso_date(house.last_updated)
        if updated is not None and updated >= start:
            selected.append(house)
    resolved = period if period in KnownValues.REPORT_PERIODS else KnownValues.DEFAULT_REPORT_PERIOD
    return {
        "period": resolved,
        "start_date": start.isoformat(),
        "totals": fund_totals(selected),
        "by_constituency": funds_by_constituency(selected),
        "by_stage": funds_by_stage(selected),
        "houses": selected,
    }
