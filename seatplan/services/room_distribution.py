"""Allocation of students to rooms ahead of per-room seat packing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from seatplan.domain.models import Room, Student
from seatplan.utils.logger import get_logger


logger = get_logger(__name__)


@dataclass
class RoomAllocation:
    """Students routed to one room; filled in a single pass, never rebalanced."""

    room: Room
    students: list[Student] = field(default_factory=list)

    @property
    def is_full(self) -> bool:
        return len(self.students) >= self.room.capacity


def _find_preferred(allocations: list[RoomAllocation], label: str | None) -> RoomAllocation | None:
    for allocation in allocations:
        if allocation.room.matches(label):
            return allocation
    return None


def distribute_students(
    students: Sequence[Student],
    rooms: Sequence[Room],
) -> list[RoomAllocation]:
    """Preferred room first, then round-robin over rooms that still have seats.

    When every room is full the surplus stays with the room under the
    round-robin cursor and surfaces as that room's overflow during seating.
    """
    allocations = [RoomAllocation(room=room) for room in rooms]
    if not allocations:
        return allocations

    fallback: list[Student] = []
    for student in students:
        preferred = _find_preferred(allocations, student.preferred_room)
        if preferred is not None and not preferred.is_full:
            preferred.students.append(student)
        else:
            fallback.append(student)

    cursor = 0
    room_count = len(allocations)
    for student in fallback:
        for _ in range(room_count):
            if not allocations[cursor].is_full:
                break
            cursor = (cursor + 1) % room_count
        allocations[cursor].students.append(student)
        cursor = (cursor + 1) % room_count

    logger.debug(
        "Room distribution completed | preferred=%s | round_robin=%s | rooms=%s",
        len(students) - len(fallback),
        len(fallback),
        room_count,
    )
    return allocations
