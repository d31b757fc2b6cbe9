"""Planning endpoints."""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, HTTPException, Request, status

from ...exceptions import PlanNotFound
from ...persistence.plan_store import PlanStore
from ...schemas.planning import DayPlanModel, PlanRequest, PlanResponse
from ...services.planning.service import get_day, get_plan, process_plan_request

router = APIRouter(prefix="/plans", tags=["plans"])


def _store(request: Request) -> PlanStore:
    return request.app.state.plan_store


@router.post("/generate", response_model=PlanResponse, status_code=status.HTTP_200_OK)
def generate(payload: PlanRequest, request: Request) -> PlanResponse:
    try:
        return process_plan_request(payload, _store(request))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error generating plan: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate plan: {str(exc)}",
        ) from exc


@router.get("/{plan_id}", response_model=PlanResponse, status_code=status.HTTP_200_OK)
def read_plan(plan_id: str, request: Request) -> PlanResponse:
    try:
        return get_plan(_store(request), plan_id)
    except PlanNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.get("/{plan_id}/days/{day}", response_model=DayPlanModel, status_code=status.HTTP_200_OK)
def read_day(plan_id: str, day: date, request: Request) -> DayPlanModel:
    """Routes for one date with the version to pass back on apply."""
    try:
        return get_day(_store(request), plan_id, day)
    except PlanNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.delete("/{plan_id}", status_code=status.HTTP_200_OK)
def delete_plan(plan_id: str, request: Request) -> dict:
    if not _store(request).delete(plan_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Plan '{plan_id}' not found.")
    return {"success": True, "message": f"Plan {plan_id} deleted"}
