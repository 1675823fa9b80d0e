"""HTTP controller layer for seating plans."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from seatplan.controllers.dependencies import get_app_settings, get_scheduling_service
from seatplan.domain.models import Assignment, Room, ScheduleOptions, Student
from seatplan.services.override_service import (
    OverrideValidationError,
    SeatNotFoundError,
    SeatRef,
    find_bench_conflicts,
    swap_seats,
)
from seatplan.services.report_service import RoomSheetValidationError, render_room_sheet
from seatplan.services.scheduling_service import SchedulingService
from seatplan.utils.config import Settings
from seatplan.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["seating"])


class StudentPayload(BaseModel):
    roll: str = Field(min_length=1)
    name: str = ""
    subject: str = Field(min_length=1)
    preferred_room: Optional[str] = None

    def to_domain(self) -> Student:
        return Student(
            roll=self.roll,
            name=self.name,
            subject=self.subject,
            preferred_room=self.preferred_room or None,
        )


class RoomPayload(BaseModel):
    room_id: str = Field(min_length=1)
    room_name: str = Field(min_length=1)
    num_benches: int = Field(gt=0)
    seats_per_bench: int = Field(gt=0)

    def to_domain(self) -> Room:
        return Room(
            room_id=self.room_id,
            room_name=self.room_name,
            num_benches=self.num_benches,
            seats_per_bench=self.seats_per_bench,
        )


class ConstraintsPayload(BaseModel):
    no_same_subject_bench: bool = True


class ScheduleOptionsPayload(BaseModel):
    algorithm: Optional[str] = None
    constraints: ConstraintsPayload = Field(default_factory=ConstraintsPayload)
    seed: Optional[int] = None


class ScheduleRequest(BaseModel):
    students: list[StudentPayload]
    rooms: list[RoomPayload]
    options: ScheduleOptionsPayload = Field(default_factory=ScheduleOptionsPayload)


class AssignmentPayload(BaseModel):
    room_id: str = Field(min_length=1)
    room_name: str = ""
    bench_number: int = Field(ge=1)
    position: str = Field(min_length=1)
    student: StudentPayload

    def to_domain(self) -> Assignment:
        return Assignment(
            room_id=self.room_id,
            room_name=self.room_name or self.room_id,
            bench_number=self.bench_number,
            position=self.position,
            student=self.student.to_domain(),
        )


class ConflictResponse(BaseModel):
    type: str
    message: str
    room: Optional[str] = None
    bench_number: Optional[int] = None


class DiagnosticsResponse(BaseModel):
    feasible: bool
    conflicts: list[ConflictResponse]
    suggestions: list[str]


class SubjectSummaryResponse(BaseModel):
    subject: str
    count: int = Field(ge=0)
    ranges: str


class RoomSummaryResponse(BaseModel):
    room_id: str
    room_name: str
    total: int = Field(ge=0)
    subjects: list[SubjectSummaryResponse]
    subject_counts: dict[str, int]


class ScheduleResponse(BaseModel):
    success: bool
    assignments: list[AssignmentPayload]
    diagnostics: DiagnosticsResponse
    room_summaries: list[RoomSummaryResponse]


class RoomSheetRequest(BaseModel):
    room_id: str = Field(min_length=1)
    room_name: str = Field(min_length=1)
    exam_date: Optional[str] = None
    assignments: list[AssignmentPayload]


class SeatPayload(BaseModel):
    room_id: str = Field(min_length=1)
    bench_number: int = Field(ge=1)
    position: str = Field(min_length=1)


class OverrideRequest(BaseModel):
    assignments: list[AssignmentPayload]
    from_seat: SeatPayload
    to_seat: SeatPayload


class OverrideResponse(BaseModel):
    assignments: list[AssignmentPayload]
    conflicts: list[ConflictResponse]


def _seat(payload: SeatPayload) -> SeatRef:
    return SeatRef(
        room_id=payload.room_id,
        bench_number=payload.bench_number,
        position=payload.position,
    )


@router.get("/health", status_code=status.HTTP_200_OK)
async def health(settings: Settings = Depends(get_app_settings)) -> dict[str, Any]:
    return {"status": "ok", "version": settings.app_version}


@router.post(
    "/schedule",
    response_model=ScheduleResponse,
    status_code=status.HTTP_200_OK,
)
async def create_schedule(
    payload: ScheduleRequest,
    service: SchedulingService = Depends(get_scheduling_service),
) -> ScheduleResponse:
    """Run the seating engine; infeasible plans still return 200 with diagnostics."""
    try:
        options = ScheduleOptions(
            algorithm=payload.options.algorithm or service.default_algorithm,
            no_same_subject_bench=payload.options.constraints.no_same_subject_bench,
            seed=payload.options.seed,
        )
        result = service.schedule(
            [student.to_domain() for student in payload.students],
            [room.to_domain() for room in payload.rooms],
            options,
        )
        return ScheduleResponse(**result.to_api_dict())
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected scheduling failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to build seating plan",
        ) from exc


@router.post(
    "/room_sheet",
    response_class=HTMLResponse,
    status_code=status.HTTP_200_OK,
)
async def room_sheet(
    payload: RoomSheetRequest,
    settings: Settings = Depends(get_app_settings),
) -> HTMLResponse:
    """Render the printable sheet for one room of an existing plan."""
    try:
        html = render_room_sheet(
            room_id=payload.room_id,
            room_name=payload.room_name,
            assignments=[item.to_domain() for item in payload.assignments],
            exam_date=payload.exam_date,
            settings=settings,
        )
        return HTMLResponse(content=html)
    except RoomSheetValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc


@router.post(
    "/override",
    response_model=OverrideResponse,
    status_code=status.HTTP_200_OK,
)
async def override_seat(payload: OverrideRequest) -> OverrideResponse:
    """Swap two seats in a plan and report any bench that now repeats a subject."""
    try:
        updated = swap_seats(
            [item.to_domain() for item in payload.assignments],
            _seat(payload.from_seat),
            _seat(payload.to_seat),
        )
    except OverrideValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except SeatNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc

    return OverrideResponse(
        assignments=[item.to_api_dict() for item in updated],
        conflicts=[conflict.to_api_dict() for conflict in find_bench_conflicts(updated)],
    )
