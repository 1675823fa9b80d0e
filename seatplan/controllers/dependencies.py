"""Shared FastAPI dependency providers for controller layer."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from seatplan.services.scheduling_service import SchedulingService
from seatplan.utils.config import Settings, get_settings


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def get_scheduling_service(request: Request) -> SchedulingService:
    service = getattr(request.app.state, "scheduling_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Scheduling service is not initialized",
        )
    return service
