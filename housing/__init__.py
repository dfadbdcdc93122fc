"""Beneficiary house tracking: records, stores, session and aggregation."""

from housing.errors import AuthenticationError, DataLoadError
from housing.models import (
    ComponentStatus,
    ConstructionDetails,
    FundDetails,
    House,
    HouseUpdate,
    Officer,
)
from housing.session import SessionContext, User
from housing.store import HouseStore, OfficerStore

__all__ = [
    "AuthenticationError",
    "DataLoadError",
    "ComponentStatus",
    "ConstructionDetails",
    "FundDetails",
    "House",
    "HouseUpdate",
    "Officer",
    "SessionContext",
    "User",
    "HouseStore",
    "OfficerStore",
]
