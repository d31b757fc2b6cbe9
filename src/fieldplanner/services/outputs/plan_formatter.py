"""Serializers turning plans into API models and JSON/CSV artifacts."""

from __future__ import annotations

import csv
import io
from datetime import date
from typing import Iterable, Sequence

from ...models.domain import Plan, RescheduleOption, Route, Stop
from ...persistence.plan_store import PlanRecord
from ...schemas.planning import DayPlanModel, PlanResponse, RouteModel, StopModel
from ...schemas.reschedule import RescheduleOptionModel
from ..routing.timeline import stop_is_feasible
from ..scheduling.visits import format_clock


def stop_to_model(stop: Stop) -> StopModel:
    visit = stop.visit
    return StopModel(
        client_id=visit.client_id,
        name=visit.name,
        address=visit.address,
        lat=visit.location.lat,
        lng=visit.location.lng,
        duration_min=visit.duration_min,
        window_start=visit.window_start,
        window_end=visit.window_end,
        planned_start=stop.planned_start,
        planned_end=stop.planned_end,
        planned_start_label=format_clock(stop.planned_start),
        planned_end_label=format_clock(stop.planned_end),
        feasible=stop_is_feasible(stop),
    )


def route_to_model(route: Route) -> RouteModel:
    return RouteModel(
        team_id=route.team_id,
        total_minutes=route.total_minutes,
        stop_count=len(route.stops),
        stops=[stop_to_model(stop) for stop in route.stops],
    )


def day_to_model(day: date, routes: Sequence[Route], version: int) -> DayPlanModel:
    return DayPlanModel(day=day, version=version, routes=[route_to_model(route) for route in routes])


def option_to_model(option: RescheduleOption) -> RescheduleOptionModel:
    inserted = option.inserted_stop
    return RescheduleOptionModel(
        team_id=option.team_id,
        index=option.index,
        added_minutes=option.added_minutes,
        feasible=option.feasible,
        planned_start=inserted.planned_start,
        planned_start_label=format_clock(inserted.planned_start),
        timeline=[stop_to_model(stop) for stop in option.timeline],
    )


def record_to_response(record: PlanRecord, metadata: dict | None = None) -> PlanResponse:
    return PlanResponse(
        plan_id=record.plan_id,
        start_date=record.start_date,
        horizon_days=record.horizon_days,
        team_count=record.team_count,
        metadata=metadata or {},
        days=[
            day_to_model(day, routes, record.version_of(day))
            for day, routes in sorted(record.plan.items())
        ],
    )


def plan_to_json(plan_id: str, plan: Plan, metadata: dict) -> dict:
    return {
        "plan_id": plan_id,
        "metadata": metadata,
        "days": [
            {
                "date": day.isoformat(),
                "routes": [route_to_model(route).model_dump() for route in routes],
            }
            for day, routes in sorted(plan.items())
        ],
    }


def _rows(plan: Plan) -> Iterable[dict]:
    for day, routes in sorted(plan.items()):
        for route in routes:
            for sequence, stop in enumerate(route.stops, start=1):
                yield {
                    "date": day.isoformat(),
                    "team_id": route.team_id,
                    "sequence": sequence,
                    "client_id": stop.client_id,
                    "client_name": stop.visit.name,
                    "window": f"{format_clock(stop.window_start)}-{format_clock(stop.window_end)}",
                    "planned_start": format_clock(stop.planned_start),
                    "planned_end": format_clock(stop.planned_end),
                    "duration_min": stop.visit.duration_min,
                    "route_total_minutes": round(route.total_minutes, 1),
                }


def plan_to_csv(plan: Plan) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "date",
        "team_id",
        "sequence",
        "client_id",
        "client_name",
        "window",
        "planned_start",
        "planned_end",
        "duration_min",
        "route_total_minutes",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for row in _rows(plan):
        writer.writerow(row)
    return buffer.getvalue()
