"""/api/v1/officers endpoints (read-only)."""

from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_house_store, get_officer_store
from housing import aggregation
from housing.models import House, Officer
from housing.store import HouseStore, OfficerStore

router = APIRouter(prefix="/officers", tags=["officers"])


def _get_or_404(store: OfficerStore, officer_id: int) -> Officer:
    officer = store.fetch_by_id(officer_id)
    if officer is None:
        raise HTTPException(status_code=404, detail=f"Officer {officer_id} not found")
    return officer


@router.get("", response_model=list[Officer], summary="List field officers")
def list_officers(store: OfficerStore = Depends(get_officer_store)) -> list[Officer]:
    return store.fetch_all()


@router.get("/{officer_id}", response_model=Officer)
def get_officer(officer_id: int, store: OfficerStore = Depends(get_officer_store)) -> Officer:
    return _get_or_404(store, officer_id)


@router.get("/{officer_id}/houses", response_model=list[House], summary="Houses assigned to an officer")
def officer_houses(
    officer_id: int,
    store: OfficerStore = Depends(get_officer_store),
    houses: HouseStore = Depends(get_house_store),
) -> list[House]:
    """Houses whose ``assignedOfficer`` matches the officer's name."""
    officer = _get_or_404(store, officer_id)
    return aggregation.houses_for_officer(houses.fetch_all(), officer)
