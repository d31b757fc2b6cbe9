"""Reschedule orchestration against stored plans."""

from __future__ import annotations

import logging

from ...models.domain import Client, Plan
from ...persistence.plan_store import PlanRecord, PlanStore
from ...schemas.reschedule import (
    RescheduleApplyRequest,
    RescheduleApplyResponse,
    RescheduleSuggestRequest,
    RescheduleSuggestResponse,
)
from ..outputs.plan_formatter import day_to_model, option_to_model
from .advisor import apply_option, evaluate_insertion, is_scheduled, remove_client, suggest_reschedule

logger = logging.getLogger(__name__)


def _require_client(record: PlanRecord, client_id: str) -> Client:
    client = record.client_by_id(client_id)
    if client is None:
        raise ValueError(f"Client '{client_id}' is not part of plan '{record.plan_id}'.")
    if client.location is None:
        raise ValueError(f"Client '{client_id}' has no location and cannot be scheduled.")
    return client


def process_suggest_request(
    store: PlanStore, plan_id: str, payload: RescheduleSuggestRequest
) -> RescheduleSuggestResponse:
    record = store.get(plan_id)
    client = _require_client(record, payload.client_id)
    version, _ = store.routes_for(plan_id, payload.target_date)
    options = suggest_reschedule(
        record.plan,
        payload.target_date,
        record.depot,
        record.team_count,
        client,
    )
    return RescheduleSuggestResponse(
        plan_id=plan_id,
        client_id=client.client_id,
        target_date=payload.target_date,
        version=version,
        options=[option_to_model(option) for option in options],
    )


def process_apply_request(
    store: PlanStore, plan_id: str, payload: RescheduleApplyRequest
) -> RescheduleApplyResponse:
    """Apply one insertion to the stored plan.

    The option is recomputed from the stored routes while the date lock is
    held, so the written timeline always matches the plan it lands in. With
    ``source_date`` set the client's stops there are dropped first, which
    also covers moving a stop within the same date; ``index`` then refers to
    the route without that stop. A client may hold only one stop per date.
    """
    record = store.get(plan_id)
    client = _require_client(record, payload.client_id)
    applied = []

    def update(current: PlanRecord) -> Plan:
        plan = current.plan
        if payload.source_date is not None:
            plan = remove_client(plan, payload.source_date, client.client_id, current.depot)
        if is_scheduled(plan, payload.target_date, client.client_id):
            raise ValueError(
                f"Client '{client.client_id}' is already scheduled on {payload.target_date.isoformat()}."
            )
        option = evaluate_insertion(
            plan,
            payload.target_date,
            current.depot,
            current.team_count,
            client,
            team_id=payload.team_id,
            index=payload.index,
        )
        applied.append(option)
        return apply_option(plan, payload.target_date, option, current.depot, current.team_count)

    extra_days = [payload.source_date] if payload.source_date is not None else []
    record = store.update_day(
        plan_id,
        payload.target_date,
        update,
        expected_version=payload.expected_version,
        extra_days=extra_days,
    )
    option = applied[0]
    logger.info(
        f"Applied client {client.client_id} to team {option.team_id} index {option.index} "
        f"on {payload.target_date.isoformat()} (+{option.added_minutes:.1f} min, feasible={option.feasible})"
    )

    touched = sorted({payload.target_date, *extra_days})
    return RescheduleApplyResponse(
        plan_id=plan_id,
        client_id=client.client_id,
        applied=option_to_model(option),
        days=[day_to_model(day, record.plan.get(day, ()), record.version_of(day)) for day in touched],
    )
