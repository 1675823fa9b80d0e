"""Greedy bench packing inside a single room."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from seatplan.domain.models import (
    CONFLICT_CONSTRAINT,
    CONFLICT_OVERFLOW,
    Assignment,
    Conflict,
    Room,
    Student,
)
from seatplan.utils.logger import get_logger


logger = get_logger(__name__)

TWO_SEAT_LABELS = ("left", "right")


@dataclass(frozen=True)
class RoomSeating:
    assignments: list[Assignment]
    conflicts: list[Conflict]
    unseated: int


def position_label(seat_index: int, seats_per_bench: int) -> str:
    if seats_per_bench == len(TWO_SEAT_LABELS):
        return TWO_SEAT_LABELS[seat_index]
    return f"seat_{seat_index + 1}"


def _group_by_subject(students: Sequence[Student]) -> dict[str, list[Student]]:
    groups: dict[str, list[Student]] = {}
    for student in students:
        groups.setdefault(student.subject, []).append(student)
    return groups


def _largest_first(groups: dict[str, list[Student]]) -> list[str]:
    # sorted() is stable, so equal sizes keep first-appearance order.
    return sorted(groups, key=lambda subject: len(groups[subject]), reverse=True)


def assign_room_seats(room: Room, students: Sequence[Student]) -> RoomSeating:
    """Seat ``students`` bench by bench, draining the largest subject group first.

    A seat prefers a subject not yet on the current bench. When none is left,
    the largest group is seated anyway and a ``constraint`` conflict records
    the forced pairing. Placements are never revisited.
    """
    groups = _group_by_subject(students)
    remaining = len(students)
    assignments: list[Assignment] = []
    conflicts: list[Conflict] = []

    for bench_index in range(room.num_benches):
        if not remaining:
            break
        bench_number = bench_index + 1
        bench_subjects: set[str] = set()

        for seat_index in range(room.seats_per_bench):
            if not remaining:
                break
            ordered = _largest_first(groups)
            chosen = next((subject for subject in ordered if subject not in bench_subjects), None)
            forced = chosen is None
            if forced:
                chosen = ordered[0]

            group = groups[chosen]
            student = group.pop()
            if not group:
                del groups[chosen]
            remaining -= 1

            assignments.append(
                Assignment(
                    room_id=room.room_id,
                    room_name=room.room_name,
                    bench_number=bench_number,
                    position=position_label(seat_index, room.seats_per_bench),
                    student=student,
                )
            )
            if forced:
                conflicts.append(
                    Conflict(
                        type=CONFLICT_CONSTRAINT,
                        room=room.room_name,
                        bench_number=bench_number,
                        message=(
                            f"Had to seat two {student.subject} students on bench "
                            f"{bench_number} in {room.room_name}"
                        ),
                    )
                )
            else:
                bench_subjects.add(student.subject)

    if remaining:
        conflicts.append(
            Conflict(
                type=CONFLICT_OVERFLOW,
                room=room.room_name,
                message=f"Not enough benches in {room.room_name}",
            )
        )
        logger.warning(
            "Room overflow | room_id=%s | unseated=%s | capacity=%s",
            room.room_id,
            remaining,
            room.capacity,
        )

    return RoomSeating(assignments=assignments, conflicts=conflicts, unseated=remaining)
