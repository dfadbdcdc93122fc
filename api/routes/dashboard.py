"""Dashboard and analytics endpoint for the overview page."""

from fastapi import APIRouter, Depends, Query

from api.deps import get_house_store
from housing import aggregation
from housing.store import HouseStore

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary", summary="Dashboard summary statistics")
def dashboard_summary(
    constituency: str | None = Query(None, description="Restrict every figure to one constituency"),
    store: HouseStore = Depends(get_house_store),
) -> dict:
    """Return the cards and chart series for the dashboard and analytics pages.

    Includes:
    - Totals and stage percentages (cards)
    - Houses per stage and per constituency (pie / bar charts)
    - Progress distribution (completed / in progress / early)
    - Fund totals and utilization per constituency
    - Distinct constituencies and stages for the filter dropdowns
    """
    houses = aggregation.filter_houses(store.fetch_all(), constituency=constituency)
    return {
        "summary": aggregation.dashboard_summary(houses),
        "stage_counts": aggregation.stage_counts(houses),
        "constituency_counts": aggregation.constituency_counts(houses),
        "progress_distribution": aggregation.progress_distribution(houses),
        "fund_totals": aggregation.fund_totals(houses),
        "fund_utilization": aggregation.fund_utilization_by(houses, "constituency"),
        "filters": {
            "constituencies": aggregation.unique_values(houses, "constituency"),
            "stages": aggregation.unique_values(houses, "stage"),
        },
    }
