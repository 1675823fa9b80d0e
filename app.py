"""
app.py — FastAPI application factory.

This is the ASGI application object imported by uvicorn. It wires the
scheduling service into app.state and registers the seating router.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from seatplan.controllers.schedule_controller import router as seating_router
from seatplan.services.scheduling_service import SchedulingService
from seatplan.utils.config import Settings, get_settings
from seatplan.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build and wire the FastAPI application.

    The scheduling engine holds no state between calls, so one service
    instance is shared by every request through app.state.
    """
    resolved_settings = settings or get_settings()
    scheduling_service = SchedulingService(settings=resolved_settings)

    app = FastAPI(
        title=resolved_settings.app_name,
        version=resolved_settings.app_version,
    )
    app.include_router(seating_router)

    app.state.settings = resolved_settings
    app.state.scheduling_service = scheduling_service

    logger.info(
        "Application created | version=%s | default_algorithm=%s",
        resolved_settings.app_version,
        resolved_settings.default_algorithm,
    )
    return app


# Module-level app object for uvicorn
app = create_app()
