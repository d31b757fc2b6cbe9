"""High-level orchestration for planning requests."""

from __future__ import annotations

import logging
from datetime import date

from ...config import settings
from ...exceptions import InvalidConfiguration
from ...models.domain import Client, Depot, GeoPoint, RecurrenceRule
from ...persistence.filesystem import FileStorage
from ...persistence.plan_store import PlanRecord, PlanStore
from ...schemas.planning import ClientModel, DayPlanModel, DepotModel, PlanRequest, PlanResponse
from ..outputs.plan_formatter import day_to_model, plan_to_csv, plan_to_json, record_to_response
from ..scheduling.visits import find_unlocated_clients
from .planner import empty_routes, generate_plan

logger = logging.getLogger(__name__)


def _location(model: DepotModel | ClientModel) -> GeoPoint | None:
    if model.lat is None or model.lng is None:
        return None
    return GeoPoint(lat=model.lat, lng=model.lng)


def depot_from_model(model: DepotModel) -> Depot:
    return Depot(name=model.name, address=model.address, location=_location(model))


def client_from_model(model: ClientModel) -> Client:
    return Client(
        client_id=model.client_id,
        name=model.name,
        address=model.address,
        location=_location(model),
        recurrence=RecurrenceRule(frequency=model.frequency, preferred_days=tuple(model.preferred_days)),
        duration_min=model.duration_min,
        window_start=model.window_start,
        window_end=model.window_end,
    )


def _check_limits(payload: PlanRequest) -> None:
    if payload.team_count < 1:
        raise InvalidConfiguration("team_count must be >= 1")
    if payload.team_count > settings.max_team_count:
        raise InvalidConfiguration(f"team_count must be <= {settings.max_team_count}")
    if payload.horizon_days < 1:
        raise InvalidConfiguration("horizon_days must be >= 1")
    if payload.horizon_days > settings.max_horizon_days:
        raise InvalidConfiguration(f"horizon_days must be <= {settings.max_horizon_days}")


def _persist_run(record: PlanRecord, metadata: dict) -> None:
    run_dir = FileStorage().write_run(
        record.plan_id,
        plan_to_json(record.plan_id, record.plan, metadata),
        plan_to_csv(record.plan),
        label=metadata.get("run_label"),
    )
    metadata["output_dir"] = str(run_dir)


def process_plan_request(payload: PlanRequest, store: PlanStore) -> PlanResponse:
    _check_limits(payload)
    depot = depot_from_model(payload.depot)
    clients = [client_from_model(model) for model in payload.clients]

    unlocated = find_unlocated_clients(clients)
    if unlocated:
        logger.warning(f"{len(unlocated)} client(s) have no location and will not be scheduled: {unlocated}")

    plan = generate_plan(
        depot=depot,
        clients=clients,
        start_date=payload.start_date,
        horizon_days=payload.horizon_days,
        team_count=payload.team_count,
    )
    record = store.create(
        depot=depot,
        clients=clients,
        team_count=payload.team_count,
        start_date=payload.start_date,
        horizon_days=payload.horizon_days,
        plan=plan,
        warnings=[f"Client '{client_id}' has no location." for client_id in unlocated],
    )

    metadata: dict = {
        "status": "complete",
        "depot": depot.name,
        "client_count": len(clients),
        "visit_count": sum(len(route.stops) for routes in plan.values() for route in routes),
        "unlocated_clients": unlocated,
        "warnings": list(record.warnings),
    }
    if payload.run_label:
        metadata["run_label"] = payload.run_label

    if payload.persist:
        try:
            _persist_run(record, metadata)
        except OSError as exc:
            logger.warning(f"Failed to write plan outputs for {record.plan_id}: {exc}")

    return record_to_response(record, metadata)


def get_plan(store: PlanStore, plan_id: str) -> PlanResponse:
    record = store.get(plan_id)
    metadata = {"warnings": list(record.warnings), "created_at": record.created_at}
    return record_to_response(record, metadata)


def get_day(store: PlanStore, plan_id: str, day: date) -> DayPlanModel:
    version, routes = store.routes_for(plan_id, day)
    if routes is None:
        record = store.get(plan_id)
        routes = empty_routes(record.depot, record.team_count)
    return day_to_model(day, routes, version)
