"""
/api/v1/reports endpoints: monthly, constituency and financial reports.

Each returns ``{"title", "data", "houses"}``; ``data`` carries the report's
summary sections and ``houses`` the records it covers.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query

from api.deps import get_house_store, get_today
from api.models import ReportResponse
from housing import aggregation
from housing.reports import build_report
from housing.store import HouseStore
from utils.config import KnownValues

router = APIRouter(prefix="/reports", tags=["reports"])


def _respond(name: str, store: HouseStore, today: date, **options) -> ReportResponse:
    data = build_report(name, store.fetch_all(), today, **options)
    houses = data.pop("houses")
    title = data.pop("title")
    return ReportResponse(title=title, data=data, houses=houses)


@router.get("/months", summary="Month labels for the report picker")
def months(today: date = Depends(get_today)) -> list[str]:
    """The current month and the eleven before it, newest first."""
    return aggregation.last_12_months(today)


@router.get("/monthly", response_model=ReportResponse, summary="Monthly progress report")
def monthly(
    month: str | None = Query(None, description="Label like 'October 2026'; defaults to this month"),
    store: HouseStore = Depends(get_house_store),
    today: date = Depends(get_today),
) -> ReportResponse:
    """Houses last updated in *month*, with completion counts and stage chart."""
    return _respond("monthly", store, today, month=month)


@router.get("/constituency", response_model=ReportResponse, summary="Constituency report")
def constituency(
    constituency: str = Query("All", description="Constituency name or 'All'"),
    store: HouseStore = Depends(get_house_store),
    today: date = Depends(get_today),
) -> ReportResponse:
    return _respond("constituency", store, today, constituency=constituency)


@router.get("/financial", response_model=ReportResponse, summary="Financial report")
def financial(
    period: str = Query(
        KnownValues.DEFAULT_REPORT_PERIOD,
        description=f"One of: {', '.join(KnownValues.REPORT_PERIODS)}",
    ),
    store: HouseStore = Depends(get_house_store),
    today: date = Depends(get_today),
) -> ReportResponse:
    """Fund position for houses updated within *period*."""
    return _respond("financial", store, today, period=period)
