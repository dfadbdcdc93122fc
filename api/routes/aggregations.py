"""
GET /api/v1/aggregations endpoint.

Groups houses by one dimension and reports count, share of the total,
average progress and fund sums per group.  Results come from the store's
cached snapshot, so there is no second cache here to go stale after a write.
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi import Query as FQuery

from api.deps import get_house_store
from api.models import AggregationResponse, AggregationRow
from housing import aggregation
from housing.store import HouseStore

router = APIRouter(prefix="/aggregations", tags=["aggregations"])


@router.get(
    "",
    response_model=AggregationResponse,
    summary="Aggregate houses",
    responses={
        400: {"description": "Invalid group_by parameter", "content": {"application/json": {"example": {"detail": "group_by must be one of: ['assigned_officer', 'constituency', 'stage', 'village']"}}}},
    },
)
def aggregate(
    group_by: str = FQuery(
        ...,
        description="Dimension to group by: stage, constituency, village, assigned_officer",
    ),
    constituency: str | None = FQuery(None, description="Pre-filter by constituency"),
    stage: str | None = FQuery(None, description="Pre-filter by stage"),
    store: HouseStore = Depends(get_house_store),
) -> AggregationResponse:
    """Group-by summary, largest groups first."""
    if group_by not in aggregation.GROUP_KEYS:
        raise HTTPException(
            status_code=400,
            detail=f"group_by must be one of: {sorted(aggregation.GROUP_KEYS)}",
        )
    houses = aggregation.filter_houses(store.fetch_all(), constituency=constituency, stage=stage)
    rows = [AggregationRow(**row) for row in aggregation.aggregate(houses, group_by)]
    return AggregationResponse(group_by=group_by, rows=rows)
