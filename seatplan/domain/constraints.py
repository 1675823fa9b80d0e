"""Structural validation and feasibility rules applied before seat placement."""

from __future__ import annotations

import math
from collections import Counter
from typing import Any, Optional, Sequence

from seatplan.domain.models import (
    CONFLICT_INFEASIBLE,
    Conflict,
    Diagnostics,
    Room,
    ScheduleOptions,
    Student,
)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _is_filled_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def validate_inputs(students: Sequence[Student], rooms: Sequence[Room]) -> list[str]:
    """Collect every structural problem in the inputs; never raises."""
    errors: list[str] = []

    if not students:
        errors.append("No students provided")
    if not rooms:
        errors.append("No rooms provided")

    seen_rolls: set[str] = set()
    reported_rolls: set[str] = set()
    for index, student in enumerate(students or (), start=1):
        if student.roll is not None and not isinstance(student.roll, str):
            errors.append(f"Student #{index} roll must be a string")
            continue
        if not _is_filled_text(student.roll):
            errors.append(f"Student #{index} has no roll number")
            continue
        if not _is_filled_text(student.subject):
            errors.append(f"Student {student.roll} has no subject")
        if student.roll in seen_rolls and student.roll not in reported_rolls:
            errors.append(f"Duplicate roll number: {student.roll}")
            reported_rolls.add(student.roll)
        seen_rolls.add(student.roll)

    seen_room_ids: set[str] = set()
    for index, room in enumerate(rooms or (), start=1):
        label = room.room_id if _is_filled_text(room.room_id) else f"#{index}"
        if not _is_filled_text(room.room_id):
            errors.append(f"Room #{index} has no room_id")
        elif room.room_id in seen_room_ids:
            errors.append(f"Duplicate room id: {room.room_id}")
        else:
            seen_room_ids.add(room.room_id)
        if not _is_filled_text(room.room_name):
            errors.append(f"Room {label} has no room_name")
        if not _is_positive_int(room.num_benches):
            errors.append(f"Room {label} must have a positive integer num_benches")
        if not _is_positive_int(room.seats_per_bench):
            errors.append(f"Room {label} must have a positive integer seats_per_bench")

    return errors


def validate_options(options: ScheduleOptions) -> list[str]:
    errors: list[str] = []
    seed = options.seed
    if seed is not None and (not isinstance(seed, int) or isinstance(seed, bool)):
        errors.append("seed must be an integer")
    if not isinstance(options.algorithm, str):
        errors.append("algorithm must be a string")
    return errors


def total_capacity(rooms: Sequence[Room]) -> int:
    return sum(room.capacity for room in rooms)


def max_subject_share(student_count: int) -> int:
    """Largest subject group that still fits the bench rule.

    Assumes two seats per bench across every room.
    """
    return math.ceil(student_count / 2)


def check_capacity(
    students: Sequence[Student],
    rooms: Sequence[Room],
) -> Optional[Diagnostics]:
    """Return infeasible diagnostics when there are more students than seats."""
    required = len(students)
    available = total_capacity(rooms)
    if required <= available:
        return None

    deficit = required - available
    return Diagnostics(
        feasible=False,
        conflicts=[
            Conflict(
                type=CONFLICT_INFEASIBLE,
                message=f"{required} students but only {available} seats across all rooms",
            )
        ],
        suggestions=[
            f"Not enough capacity. Need {required} seats but have {available} "
            f"(short by {deficit})."
        ],
    )


def check_subject_distribution(students: Sequence[Student]) -> Optional[Diagnostics]:
    """Return infeasible diagnostics when one subject cannot avoid sharing benches."""
    if not students:
        return None

    subject_counts = Counter(student.subject for student in students)
    largest_subject, largest_count = subject_counts.most_common(1)[0]
    allowed = max_subject_share(len(students))
    if largest_count <= allowed:
        return None

    return Diagnostics(
        feasible=False,
        conflicts=[
            Conflict(
                type=CONFLICT_INFEASIBLE,
                message=(
                    f"Subject {largest_subject} with {largest_count} students cannot be "
                    f"seated with bench constraint. Maximum allowed: {allowed}"
                ),
            )
        ],
    )
