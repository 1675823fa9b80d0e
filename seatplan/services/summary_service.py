"""Per-room, per-subject roll-range summaries."""

from __future__ import annotations

from typing import Iterable, Sequence

from seatplan.domain.models import Assignment, Room, RoomSummary, SubjectSummary
from seatplan.utils.roll_ranges import format_roll_ranges


def build_subject_summaries(assignments: Iterable[Assignment]) -> list[SubjectSummary]:
    """Group rolls by subject, sort them lexically and compact into ranges."""
    rolls_by_subject: dict[str, list[str]] = {}
    for assignment in assignments:
        rolls_by_subject.setdefault(assignment.student.subject, []).append(
            assignment.student.roll
        )

    summaries: list[SubjectSummary] = []
    for subject in sorted(rolls_by_subject):
        rolls = sorted(rolls_by_subject[subject])
        summaries.append(
            SubjectSummary(
                subject=subject,
                count=len(rolls),
                ranges=format_roll_ranges(rolls),
            )
        )
    return summaries


def build_room_summaries(
    assignments: Sequence[Assignment],
    rooms: Sequence[Room],
) -> list[RoomSummary]:
    summaries: list[RoomSummary] = []
    for room in rooms:
        room_assignments = [item for item in assignments if item.room_id == room.room_id]
        summaries.append(
            RoomSummary(
                room_id=room.room_id,
                room_name=room.room_name,
                total=len(room_assignments),
                subjects=build_subject_summaries(room_assignments),
            )
        )
    return summaries
