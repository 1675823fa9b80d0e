"""Domain models for exam seating plans."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


CONFLICT_VALIDATION = "validation"
CONFLICT_INFEASIBLE = "infeasible"
CONFLICT_CONSTRAINT = "constraint"
CONFLICT_OVERFLOW = "overflow"


@dataclass(frozen=True)
class Student:
    roll: str
    name: str
    subject: str
    preferred_room: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Student":
        return cls(
            roll=data.get("roll"),
            name=data.get("name", ""),
            subject=data.get("subject"),
            preferred_room=data.get("preferred_room") or None,
        )

    def to_api_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "roll": self.roll,
            "name": self.name,
            "subject": self.subject,
        }
        if self.preferred_room:
            payload["preferred_room"] = self.preferred_room
        return payload


@dataclass(frozen=True)
class Room:
    room_id: str
    room_name: str
    num_benches: int
    seats_per_bench: int

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Room":
        return cls(
            room_id=data.get("room_id"),
            room_name=data.get("room_name"),
            num_benches=data.get("num_benches"),
            seats_per_bench=data.get("seats_per_bench"),
        )

    @property
    def capacity(self) -> int:
        return self.num_benches * self.seats_per_bench

    def matches(self, label: Optional[str]) -> bool:
        """True when ``label`` names this room by name or by id."""
        if not label:
            return False
        return label == self.room_name or label == self.room_id


@dataclass(frozen=True)
class Assignment:
    room_id: str
    room_name: str
    bench_number: int
    position: str
    student: Student

    @property
    def seat_key(self) -> tuple[str, int, str]:
        return (self.room_id, self.bench_number, self.position)

    def to_api_dict(self) -> dict[str, Any]:
        return {
            "room_id": self.room_id,
            "room_name": self.room_name,
            "bench_number": self.bench_number,
            "position": self.position,
            "student": self.student.to_api_dict(),
        }


@dataclass(frozen=True)
class Conflict:
    type: str
    message: str
    room: Optional[str] = None
    bench_number: Optional[int] = None

    def to_api_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.type, "message": self.message}
        if self.room is not None:
            payload["room"] = self.room
        if self.bench_number is not None:
            payload["bench_number"] = self.bench_number
        return payload


@dataclass(frozen=True)
class Diagnostics:
    feasible: bool
    conflicts: list[Conflict] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)

    def to_api_dict(self) -> dict[str, Any]:
        return {
            "feasible": self.feasible,
            "conflicts": [conflict.to_api_dict() for conflict in self.conflicts],
            "suggestions": list(self.suggestions),
        }


@dataclass(frozen=True)
class SubjectSummary:
    subject: str
    count: int
    ranges: str


@dataclass(frozen=True)
class RoomSummary:
    room_id: str
    room_name: str
    total: int
    subjects: list[SubjectSummary]

    @property
    def subject_counts(self) -> dict[str, int]:
        return {item.subject: item.count for item in self.subjects}

    def to_api_dict(self) -> dict[str, Any]:
        return {
            "room_id": self.room_id,
            "room_name": self.room_name,
            "total": self.total,
            "subjects": [
                {"subject": item.subject, "count": item.count, "ranges": item.ranges}
                for item in self.subjects
            ],
            "subject_counts": self.subject_counts,
        }


@dataclass(frozen=True)
class ScheduleOptions:
    algorithm: str = "greedy"
    no_same_subject_bench: bool = True
    seed: Optional[int] = None

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "ScheduleOptions":
        if not data:
            return cls()
        constraints = data.get("constraints") or {}
        return cls(
            algorithm=data.get("algorithm") or "greedy",
            no_same_subject_bench=bool(constraints.get("no_same_subject_bench", True)),
            seed=data.get("seed"),
        )


@dataclass(frozen=True)
class ScheduleResult:
    success: bool
    assignments: list[Assignment]
    diagnostics: Diagnostics
    room_summaries: list[RoomSummary]

    def to_api_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "assignments": [item.to_api_dict() for item in self.assignments],
            "diagnostics": self.diagnostics.to_api_dict(),
            "room_summaries": [item.to_api_dict() for item in self.room_summaries],
        }
