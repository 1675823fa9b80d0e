"""Manual seat swaps on an existing plan, with bench re-checking."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence

from seatplan.domain.models import CONFLICT_CONSTRAINT, Assignment, Conflict
from seatplan.utils.logger import get_logger


logger = get_logger(__name__)


class OverrideValidationError(Exception):
    """Raised when a swap request is malformed."""


class SeatNotFoundError(Exception):
    """Raised when the source seat holds no student."""


@dataclass(frozen=True)
class SeatRef:
    room_id: str
    bench_number: int
    position: str

    @property
    def key(self) -> tuple[str, int, str]:
        return (self.room_id, self.bench_number, self.position)


def _move(assignment: Assignment, seat: SeatRef, room_names: dict[str, str]) -> Assignment:
    return replace(
        assignment,
        room_id=seat.room_id,
        room_name=room_names.get(seat.room_id, seat.room_id),
        bench_number=seat.bench_number,
        position=seat.position,
    )


def swap_seats(
    assignments: Sequence[Assignment],
    from_seat: SeatRef,
    to_seat: SeatRef,
) -> list[Assignment]:
    """Move the student at ``from_seat`` to ``to_seat``, swapping with any occupant."""
    if from_seat.key == to_seat.key:
        raise OverrideValidationError("from_seat and to_seat must differ")
    if to_seat.bench_number < 1:
        raise OverrideValidationError("bench_number must be >= 1")

    room_names = {item.room_id: item.room_name for item in assignments}
    source_index = next(
        (index for index, item in enumerate(assignments) if item.seat_key == from_seat.key),
        None,
    )
    if source_index is None:
        raise SeatNotFoundError(
            f"No student seated at {from_seat.room_id} bench {from_seat.bench_number} "
            f"{from_seat.position}"
        )
    target_index = next(
        (index for index, item in enumerate(assignments) if item.seat_key == to_seat.key),
        None,
    )

    updated = list(assignments)
    updated[source_index] = _move(assignments[source_index], to_seat, room_names)
    if target_index is not None:
        updated[target_index] = _move(assignments[target_index], from_seat, room_names)

    logger.info(
        "Seat override applied | from=%s | to=%s | swapped=%s",
        from_seat.key,
        to_seat.key,
        target_index is not None,
    )
    return updated


def find_bench_conflicts(assignments: Sequence[Assignment]) -> list[Conflict]:
    """One ``constraint`` conflict per repeated subject on a bench, in bench order."""
    benches: dict[tuple[str, int], list[Assignment]] = {}
    for assignment in assignments:
        benches.setdefault((assignment.room_id, assignment.bench_number), []).append(assignment)

    conflicts: list[Conflict] = []
    for (_, bench_number), seated in sorted(benches.items()):
        seen: set[str] = set()
        for assignment in seated:
            subject = assignment.student.subject
            if subject in seen:
                conflicts.append(
                    Conflict(
                        type=CONFLICT_CONSTRAINT,
                        room=assignment.room_name,
                        bench_number=bench_number,
                        message=(
                            f"Two {subject} students share bench {bench_number} "
                            f"in {assignment.room_name}"
                        ),
                    )
                )
            seen.add(subject)
    return conflicts
