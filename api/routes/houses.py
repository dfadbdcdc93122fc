"""
/api/v1/houses endpoints.

Reads are open; every write requires a manager token (see ``api.deps``).
Validation failures on bodies surface as FastAPI's standard 422.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from api.deps import get_house_store, require_manager
from api.models import ErrorResponse, HouseListResponse, ProgressUpdate
from housing import aggregation
from housing.models import House, HouseUpdate
from housing.session import User
from housing.store import HouseStore

router = APIRouter(prefix="/houses", tags=["houses"])

_AUTH_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Missing or unknown token"},
    403: {"model": ErrorResponse, "description": "Role may not modify houses"},
    404: {"model": ErrorResponse, "description": "House not found"},
}


def _not_found(house_id: int) -> HTTPException:
    return HTTPException(status_code=404, detail=f"House {house_id} not found")


@router.get("", response_model=HouseListResponse, summary="List beneficiary houses")
def list_houses(
    constituency: str | None = Query(None, description="Exact constituency; 'All' for no filter"),
    stage: str | None = Query(None, description="Exact stage; 'All' for no filter"),
    min_progress: int = Query(0, ge=0, le=100),
    max_progress: int = Query(100, ge=0, le=100),
    q: str | None = Query(None, description="Matches beneficiary, village or officer"),
    store: HouseStore = Depends(get_house_store),
) -> HouseListResponse:
    """Filtered house list, as used by the map and the management table."""
    houses = aggregation.filter_houses(
        store.fetch_all(),
        constituency=constituency,
        stage=stage,
        min_progress=min_progress,
        max_progress=max_progress,
        search=q,
    )
    return HouseListResponse(total=len(houses), items=houses)


@router.get("/{house_id}", response_model=House, responses={404: _AUTH_RESPONSES[404]})
def get_house(house_id: int, store: HouseStore = Depends(get_house_store)) -> House:
    house = store.fetch_by_id(house_id)
    if house is None:
        raise _not_found(house_id)
    return house


@router.post("", response_model=House, status_code=201, responses=_AUTH_RESPONSES)
def create_house(
    body: House,
    store: HouseStore = Depends(get_house_store),
    user: User = Depends(require_manager),
) -> House:
    """Add a house; any ``id`` or ``lastUpdated`` in the body is replaced."""
    return store.create(body)


@router.patch("/{house_id}", response_model=House, responses=_AUTH_RESPONSES)
def update_house(
    house_id: int,
    body: HouseUpdate,
    store: HouseStore = Depends(get_house_store),
    user: User = Depends(require_manager),
) -> House:
    """Merge the fields present in the body into the house."""
    house = store.update(house_id, body)
    if house is None:
        raise _not_found(house_id)
    return house


@router.patch("/{house_id}/progress", response_model=House, responses=_AUTH_RESPONSES)
def update_progress(
    house_id: int,
    body: ProgressUpdate,
    store: HouseStore = Depends(get_house_store),
    user: User = Depends(require_manager),
) -> House:
    """Officer progress update; the stage only changes when sent."""
    house = store.update_progress(
        house_id,
        body.progress,
        stage=body.stage,
        fund_utilized=body.fund_utilized,
        remarks=body.remarks,
        new_images=body.new_images,
    )
    if house is None:
        raise _not_found(house_id)
    return house


@router.delete("/{house_id}", status_code=204, responses=_AUTH_RESPONSES)
def delete_house(
    house_id: int,
    store: HouseStore = Depends(get_house_store),
    user: User = Depends(require_manager),
) -> Response:
    if not store.delete(house_id):
        raise _not_found(house_id)
    return Response(status_code=204)
