"""Seating plan orchestration: validation, shuffling, feasibility, placement."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Optional, Union

from seatplan.domain.constraints import (
    check_capacity,
    check_subject_distribution,
    validate_inputs,
    validate_options,
)
from seatplan.domain.models import (
    CONFLICT_VALIDATION,
    Assignment,
    Conflict,
    Diagnostics,
    Room,
    ScheduleOptions,
    ScheduleResult,
    Student,
)
from seatplan.services.room_distribution import distribute_students
from seatplan.services.seat_assignment import assign_room_seats
from seatplan.services.summary_service import build_room_summaries
from seatplan.utils.config import Settings, get_settings
from seatplan.utils.logger import get_logger
from seatplan.utils.shuffle import seeded_shuffle


logger = get_logger(__name__)

DEFAULT_ALGORITHM = "greedy"

StudentInput = Union[Student, Mapping[str, Any]]
RoomInput = Union[Room, Mapping[str, Any]]
OptionsInput = Union[ScheduleOptions, Mapping[str, Any], None]
SchedulingStrategy = Callable[[list[Student], list[Room], ScheduleOptions], ScheduleResult]


def _as_student(item: StudentInput) -> Student:
    return item if isinstance(item, Student) else Student.from_mapping(item)


def _as_room(item: RoomInput) -> Room:
    return item if isinstance(item, Room) else Room.from_mapping(item)


def _as_options(options: OptionsInput) -> ScheduleOptions:
    if isinstance(options, ScheduleOptions):
        return options
    return ScheduleOptions.from_mapping(options)


def _as_items(value: Any) -> Optional[list[Any]]:
    if value is None:
        return []
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        return None
    return list(value)


def _shape_errors(
    student_items: Optional[list[Any]],
    room_items: Optional[list[Any]],
    options: Any,
) -> list[str]:
    """Report inputs that cannot be read as students, rooms or options at all."""
    errors: list[str] = []
    if student_items is None:
        errors.append("students must be a list")
    else:
        for index, item in enumerate(student_items, start=1):
            if not isinstance(item, (Student, Mapping)):
                errors.append(f"Student #{index} must be a mapping")
    if room_items is None:
        errors.append("rooms must be a list")
    else:
        for index, item in enumerate(room_items, start=1):
            if not isinstance(item, (Room, Mapping)):
                errors.append(f"Room #{index} must be a mapping")
    if options is not None and not isinstance(options, (ScheduleOptions, Mapping)):
        errors.append("options must be a mapping")
    elif isinstance(options, Mapping) and not isinstance(options.get("constraints") or {}, Mapping):
        errors.append("options.constraints must be a mapping")
    return errors


def _validation_rejected(errors: list[str]) -> ScheduleResult:
    logger.info("Scheduling rejected by validation | errors=%s", len(errors))
    return _rejected([Conflict(type=CONFLICT_VALIDATION, message=error) for error in errors])


def _rejected(conflicts: list[Conflict], suggestions: Optional[list[str]] = None) -> ScheduleResult:
    return ScheduleResult(
        success=False,
        assignments=[],
        diagnostics=Diagnostics(
            feasible=False,
            conflicts=conflicts,
            suggestions=suggestions or [],
        ),
        room_summaries=[],
    )


def greedy_pair_schedule(
    students: list[Student],
    rooms: list[Room],
    options: ScheduleOptions,
) -> ScheduleResult:
    """Distribute students over rooms, then pack each room bench by bench.

    ``options.no_same_subject_bench`` is informational; the greedy packer
    always tries to keep subjects apart.
    """
    del options

    infeasible = check_capacity(students, rooms) or check_subject_distribution(students)
    if infeasible is not None:
        return _rejected(infeasible.conflicts, infeasible.suggestions)

    assignments: list[Assignment] = []
    conflicts: list[Conflict] = []
    for allocation in distribute_students(students, rooms):
        seating = assign_room_seats(allocation.room, allocation.students)
        assignments.extend(seating.assignments)
        conflicts.extend(seating.conflicts)

    return ScheduleResult(
        success=not conflicts,
        assignments=assignments,
        diagnostics=Diagnostics(feasible=True, conflicts=conflicts, suggestions=[]),
        room_summaries=build_room_summaries(assignments, rooms),
    )


ALGORITHMS: dict[str, SchedulingStrategy] = {
    DEFAULT_ALGORITHM: greedy_pair_schedule,
}


def resolve_algorithm(tag: Optional[str]) -> SchedulingStrategy:
    strategy = ALGORITHMS.get(tag or DEFAULT_ALGORITHM)
    if strategy is None:
        logger.warning("Unknown scheduling algorithm, using greedy | algorithm=%s", tag)
        strategy = ALGORITHMS[DEFAULT_ALGORITHM]
    return strategy


def schedule(
    students: Iterable[StudentInput],
    rooms: Iterable[RoomInput],
    options: OptionsInput = None,
) -> ScheduleResult:
    """Build a seating plan; expected failures come back in ``diagnostics``."""
    student_items = _as_items(students)
    room_items = _as_items(rooms)
    shape_errors = _shape_errors(student_items, room_items, options)
    if shape_errors:
        return _validation_rejected(shape_errors)

    student_list = [_as_student(item) for item in student_items]
    room_list = [_as_room(item) for item in room_items]
    resolved_options = _as_options(options)

    errors = validate_inputs(student_list, room_list) + validate_options(resolved_options)
    if errors:
        return _validation_rejected(errors)

    if resolved_options.seed is not None:
        student_list = seeded_shuffle(student_list, resolved_options.seed)

    strategy = resolve_algorithm(resolved_options.algorithm)
    return strategy(student_list, room_list, resolved_options)


def _requested_seed(options: Any) -> Any:
    if isinstance(options, ScheduleOptions):
        return options.seed
    if isinstance(options, Mapping):
        return options.get("seed")
    return None


class SchedulingService:
    """Stateless seating engine bound to settings; safe to share across requests."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()

    @property
    def default_algorithm(self) -> str:
        return self._settings.default_algorithm

    def schedule(
        self,
        students: Iterable[StudentInput],
        rooms: Iterable[RoomInput],
        options: OptionsInput = None,
    ) -> ScheduleResult:
        if options is None:
            options = ScheduleOptions(algorithm=self.default_algorithm)
        elif isinstance(options, Mapping) and not options.get("algorithm"):
            options = {**options, "algorithm": self.default_algorithm}

        result = schedule(students, rooms, options)
        conflict_types = [conflict.type for conflict in result.diagnostics.conflicts]
        logger.info(
            (
                "Scheduling completed | success=%s | feasible=%s | assignments=%s | "
                "conflicts=%s | seed=%s"
            ),
            result.success,
            result.diagnostics.feasible,
            len(result.assignments),
            conflict_types,
            _requested_seed(options),
        )
        return result
