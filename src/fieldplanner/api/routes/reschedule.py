"""Reschedule endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request, status

from ...exceptions import PlanNotFound, VersionConflict
from ...schemas.reschedule import (
    RescheduleApplyRequest,
    RescheduleApplyResponse,
    RescheduleSuggestRequest,
    RescheduleSuggestResponse,
)
from ...services.reschedule.service import process_apply_request, process_suggest_request

router = APIRouter(prefix="/plans/{plan_id}/reschedule", tags=["reschedule"])


@router.post("/suggest", response_model=RescheduleSuggestResponse, status_code=status.HTTP_200_OK)
def suggest(plan_id: str, payload: RescheduleSuggestRequest, request: Request) -> RescheduleSuggestResponse:
    try:
        return process_suggest_request(request.app.state.plan_store, plan_id, payload)
    except PlanNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error suggesting reschedule slots: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to suggest reschedule slots: {str(exc)}",
        ) from exc


@router.post("/apply", response_model=RescheduleApplyResponse, status_code=status.HTTP_200_OK)
def apply(plan_id: str, payload: RescheduleApplyRequest, request: Request) -> RescheduleApplyResponse:
    try:
        return process_apply_request(request.app.state.plan_store, plan_id, payload)
    except PlanNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except VersionConflict as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error applying reschedule: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to apply reschedule: {str(exc)}",
        ) from exc
