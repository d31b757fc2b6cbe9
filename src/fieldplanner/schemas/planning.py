"""Planning request/response schemas."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class LocationFields(BaseModel):
    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lng: Optional[float] = Field(default=None, ge=-180, le=180)

    @model_validator(mode="after")
    def _both_or_neither(self) -> "LocationFields":
        if (self.lat is None) != (self.lng is None):
            raise ValueError("lat and lng must be provided together")
        return self


class DepotModel(LocationFields):
    name: str
    address: str = ""


class ClientModel(LocationFields):
    client_id: str = Field(..., min_length=1)
    name: str
    address: str = ""
    frequency: str = Field(default="weekly", description="weekly, biweekly or monthly.")
    preferred_days: List[int] = Field(
        default_factory=list,
        description="Weekdays with 0=Sunday..6=Saturday. Empty means any day.",
    )
    duration_min: Optional[int] = Field(default=None, description="Service minutes; 60 when unset or non-positive.")
    window_start: Optional[str] = Field(default=None, description="HH:MM; 08:00 when unset or unparsable.")
    window_end: Optional[str] = Field(default=None, description="HH:MM; 17:00 when unset or unparsable.")

    @field_validator("preferred_days")
    @classmethod
    def validate_preferred_days(cls, value: List[int]) -> List[int]:
        for day in value:
            if not 0 <= day <= 6:
                raise ValueError("preferred_days entries must be between 0 (Sunday) and 6 (Saturday)")
        return value


class PlanRequest(BaseModel):
    depot: DepotModel
    clients: List[ClientModel] = Field(default_factory=list)
    start_date: date
    horizon_days: int = Field(default=7, description="Number of consecutive days to plan.")
    team_count: int = Field(default=2, description="Number of teams working each day.")
    persist: bool = Field(default=False, description="Write summary.json and stops.csv for this run.")
    run_label: Optional[str] = Field(default=None, description="Friendly name stored with the run.")

    @field_validator("clients")
    @classmethod
    def validate_unique_clients(cls, value: List[ClientModel]) -> List[ClientModel]:
        seen: set[str] = set()
        for client in value:
            if client.client_id in seen:
                raise ValueError(f"duplicate client_id '{client.client_id}'")
            seen.add(client.client_id)
        return value


class StopModel(BaseModel):
    client_id: str
    name: str
    address: str
    lat: float
    lng: float
    duration_min: int
    window_start: int
    window_end: int
    planned_start: float
    planned_end: float
    planned_start_label: str
    planned_end_label: str
    feasible: bool


class RouteModel(BaseModel):
    team_id: int
    total_minutes: float
    stop_count: int
    stops: List[StopModel]


class DayPlanModel(BaseModel):
    day: date
    version: int
    routes: List[RouteModel]


class PlanResponse(BaseModel):
    plan_id: str
    start_date: date
    horizon_days: int
    team_count: int
    metadata: dict
    days: List[DayPlanModel]
