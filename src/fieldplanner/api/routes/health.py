"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/store", status_code=status.HTTP_200_OK)
def health_store(request: Request) -> dict:
    """Report how many plans the in-memory store currently holds."""
    return {"service": "plan_store", "healthy": True, "plans": len(request.app.state.plan_store.list_ids())}
