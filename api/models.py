"""
Pydantic request/response models for the API.

House and officer bodies reuse the record models from ``housing.models``
(camelCase on the wire); the models here cover everything else.  Summary
and report payloads use snake_case keys like the rest of the JSON views.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from housing.models import House


# ── Session models ────────────────────────────────────────────────────────────

class LoginRequest(BaseModel):
    """Credentials for the placeholder login."""
    username: str = Field("", description="admin or officer", examples=["admin"])
    password: str = Field("", examples=["admin123"])


class SessionOut(BaseModel):
    """The logged-in user and the token to send as ``Authorization: Bearer``."""
    username: str = Field(..., examples=["admin"])
    role: str = Field(..., examples=["admin"])
    token: str = Field(..., examples=["dummy-jwt-token-admin-1760860800000"])
    can_manage: bool = Field(..., description="May create, edit or delete houses")


# ── House write models ────────────────────────────────────────────────────────

class ProgressUpdate(BaseModel):
    """Body of PATCH /houses/{id}/progress."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    progress: int = Field(..., ge=0, le=100, examples=[60])
    stage: str | None = Field(None, description="Left unchanged when omitted", examples=["In Progress"])
    fund_utilized: str | None = Field(None, examples=["Rs. 70,000"])
    remarks: str | None = None
    new_images: list[str] = Field(default_factory=list, description="Image references appended to the house")


class HouseListResponse(BaseModel):
    """Response body for GET /api/v1/houses."""
    total: int = Field(..., description="Number of houses after filtering", examples=[8])
    items: list[House]


# ── Aggregation models ────────────────────────────────────────────────────────

class AggregationRow(BaseModel):
    """One group of the group-by summary."""
    group_value: str = Field(..., description="The grouped field value", examples=["Kolar"])
    house_count: int = Field(..., examples=[3])
    pct_of_total: int = Field(..., description="Share of all houses, whole percent")
    average_progress: int = Field(..., description="Mean progress, whole percent")
    allocated: float = Field(..., description="Sum of allocated rupees")
    released: float
    utilized: float
    remaining: float


class AggregationResponse(BaseModel):
    """Response body for GET /api/v1/aggregations."""
    group_by: str = Field(..., examples=["constituency"])
    rows: list[AggregationRow]


# ── Report models ─────────────────────────────────────────────────────────────

class ReportResponse(BaseModel):
    """A report: its scalar sections plus the houses it covers."""
    title: str
    data: dict[str, Any] = Field(..., description="Report sections keyed by name")
    houses: list[House]


# ── Error model ───────────────────────────────────────────────────────────────

class ErrorResponse(BaseModel):
    """Standard error response body."""
    error: str = Field(..., description="Short error category", examples=["Bad request"])
    detail: str | None = Field(None, description="Extended error detail")
    status_code: int = Field(..., ge=400, le=599, description="HTTP status code", examples=[400])
