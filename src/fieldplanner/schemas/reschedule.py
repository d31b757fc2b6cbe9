"""Reschedule request/response schemas."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from .planning import DayPlanModel, StopModel


class RescheduleSuggestRequest(BaseModel):
    client_id: str
    target_date: date


class RescheduleOptionModel(BaseModel):
    team_id: int
    index: int
    added_minutes: float
    feasible: bool
    planned_start: float
    planned_start_label: str
    timeline: List[StopModel]


class RescheduleSuggestResponse(BaseModel):
    plan_id: str
    client_id: str
    target_date: date
    version: int
    options: List[RescheduleOptionModel]


class RescheduleApplyRequest(BaseModel):
    client_id: str
    target_date: date
    team_id: int = Field(..., ge=1)
    index: int = Field(..., ge=0)
    source_date: Optional[date] = Field(
        default=None,
        description="Date the client is moved away from; its stops there are removed.",
    )
    expected_version: Optional[int] = Field(
        default=None,
        ge=0,
        description="Version of the target date the option was computed against.",
    )


class RescheduleApplyResponse(BaseModel):
    plan_id: str
    client_id: str
    applied: RescheduleOptionModel
    days: List[DayPlanModel]
