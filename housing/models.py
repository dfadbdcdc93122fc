"""
Record models for beneficiary houses and field officers.

Attributes are snake_case; the seed files and the HTTP API use camelCase
(``beneficiaryName``, ``fundDetails``), handled through a shared alias
generator.  Unknown keys are ignored on input so older seed files with
extra columns still load.

``FundDetails.remaining`` is computed from ``allocated - utilized`` on every
access and is never stored, so no write path can leave it stale.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from utils.config import KnownValues
from utils.formatting import format_inr
from utils.strings import parse_currency

ComponentState = Literal[KnownValues.COMPONENT_STATUSES]  # type: ignore[valid-type]


def _money(v: Any) -> Any:
    # Bare numbers from JSON clients are rendered the way the UI writes them
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return format_inr(parse_currency(v))
    return v


class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )


# ── Fund details ──────────────────────────────────────────────────────────────

class FundDetails(_Record):
    """Allocated/released/utilized amounts as display strings ("Rs. 1,20,000")."""
    allocated: str = Field("Rs. 0", description="Sanctioned amount", examples=["Rs. 1,20,000"])
    released: str = Field("Rs. 0", description="Amount released so far", examples=["Rs. 80,000"])
    utilized: str = Field("Rs. 0", description="Amount spent so far", examples=["Rs. 60,000"])

    @field_validator("allocated", "released", "utilized", mode="before")
    @classmethod
    def _format_numbers(cls, v: Any) -> Any:
        return _money(v)

    @computed_field(description="allocated - utilized, derived on read")
    @property
    def remaining(self) -> str:
        return format_inr(self.remaining_amount)

    @property
    def allocated_amount(self) -> float:
        return parse_currency(self.allocated)

    @property
    def released_amount(self) -> float:
        return parse_currency(self.released)

    @property
    def utilized_amount(self) -> float:
        return parse_currency(self.utilized)

    @property
    def remaining_amount(self) -> float:
        return self.allocated_amount - self.utilized_amount


# ── Construction details ──────────────────────────────────────────────────────

class ComponentStatus(_Record):
    """Status of one construction component (foundation, walls, roof, finishing)."""
    status: ComponentState = "Not Started"
    completion_date: str | None = Field(None, description="Only kept while status is Completed")

    @model_validator(mode="after")
    def _date_only_when_completed(self) -> "ComponentStatus":
        if self.status != "Completed":
            self.completion_date = None
        return self


class ConstructionDetails(_Record):
    foundation: ComponentStatus = Field(default_factory=ComponentStatus)
    walls: ComponentStatus = Field(default_factory=ComponentStatus)
    roof: ComponentStatus = Field(default_factory=ComponentStatus)
    finishing: ComponentStatus = Field(default_factory=ComponentStatus)


# ── House ─────────────────────────────────────────────────────────────────────

class House(_Record):
    """A beneficiary house under construction.

    ``stage`` and ``progress`` are deliberately independent: a house may be
    at 100 % while still labelled "In Progress" if an officer says so.
    """
    id: int = Field(0, description="Store-assigned identifier", examples=[7])
    beneficiary_name: str = Field(..., min_length=1, description="Grant recipient", examples=["Ramesh Kumar"])
    constituency: str = Field("", examples=["Kolar"])
    village: str = Field("", examples=["Bangarpet"])
    stage: str = Field("Not Started", description="Not Started | In Progress | Delayed | Completed", examples=["In Progress"])
    progress: int = Field(0, ge=0, le=100, description="Percent complete", examples=[45])
    fund_utilized: str = Field("Rs. 0", description="Legacy mirror of fundDetails.utilized")
    lat: float = 0.0
    lng: float = 0.0
    images: list[str] = Field(default_factory=list, description="Data URLs or paths")
    last_updated: str = Field("", description="ISO date of the last write", examples=["2026-10-19"])
    start_date: str = ""
    expected_completion: str = ""
    contact_number: str = ""
    aadhar_number: str = ""
    family_members: int = Field(0, ge=0)
    assigned_officer: str = ""
    remarks: str = ""
    fund_details: FundDetails = Field(default_factory=FundDetails)
    construction_details: ConstructionDetails = Field(default_factory=ConstructionDetails)

    @field_validator("fund_utilized", mode="before")
    @classmethod
    def _format_utilized(cls, v: Any) -> Any:
        return _money(v)


# ── Officer ───────────────────────────────────────────────────────────────────

class Officer(_Record):
    """A field officer; ``assigned_houses`` is not checked against the houses."""
    id: int = Field(..., examples=[1])
    name: str = Field(..., examples=["Suresh Rao"])
    designation: str = Field("", examples=["Assistant Engineer"])
    constituency: str = ""
    contact_number: str = ""
    email: str = ""
    assigned_houses: list[int] = Field(default_factory=list)


# ── Partial updates ───────────────────────────────────────────────────────────

class FundDetailsUpdate(_Record):
    allocated: str | None = None
    released: str | None = None
    utilized: str | None = None

    @field_validator("allocated", "released", "utilized", mode="before")
    @classmethod
    def _format_numbers(cls, v: Any) -> Any:
        return _money(v)


class ComponentStatusUpdate(_Record):
    status: ComponentState | None = None
    completion_date: str | None = None


class ConstructionDetailsUpdate(_Record):
    foundation: ComponentStatusUpdate | None = None
    walls: ComponentStatusUpdate | None = None
    roof: ComponentStatusUpdate | None = None
    finishing: ComponentStatusUpdate | None = None


class HouseUpdate(_Record):
    """Partial house record; only fields that were sent are merged."""
    beneficiary_name: str | None = Field(None, min_length=1)
    constituency: str | None = None
    village: str | None = None
    stage: str | None = None
    progress: int | None = Field(None, ge=0, le=100)
    fund_utilized: str | None = None
    lat: float | None = None
    lng: float | None = None
    images: list[str] | None = None
    start_date: str | None = None
    expected_completion: str | None = None
    contact_number: str | None = None
    aadhar_number: str | None = None
    family_members: int | None = Field(None, ge=0)
    assigned_officer: str | None = None
    remarks: str | None = None
    fund_details: FundDetailsUpdate | None = None
    construction_details: ConstructionDetailsUpdate | None = None

    @field_validator("fund_utilized", mode="before")
    @classmethod
    def _format_utilized(cls, v: Any) -> Any:
        return _money(v)
