"""End-to-end tests for the seating engine entry point."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import replace

from seatplan.domain.models import ScheduleOptions
from seatplan.services.scheduling_service import (
    ALGORITHMS,
    SchedulingService,
    resolve_algorithm,
    schedule,
)
from seatplan.utils.config import get_settings
from seatplan.utils.shuffle import seeded_shuffle


SAMPLE_STUDENTS = [
    {"roll": "1043-1", "name": "Ajay", "subject": "BBA"},
    {"roll": "1043-2", "name": "Vijay", "subject": "BBA"},
    {"roll": "1043-3", "name": "Sanjay", "subject": "BBA"},
    {"roll": "1076-1", "name": "Rahul", "subject": "BCom"},
    {"roll": "1076-2", "name": "Rohit", "subject": "BCom"},
    {"roll": "1061-1", "name": "Neha", "subject": "BCA"},
    {"roll": "1061-2", "name": "Priya", "subject": "BCA"},
    {"roll": "1061-3", "name": "Sneha", "subject": "BCA"},
]

SAMPLE_ROOMS = [
    {"room_id": "R1", "room_name": "Room 1", "num_benches": 4, "seats_per_bench": 2},
]


def _two_by_two_rooms(count: int) -> list[dict]:
    return [
        {
            "room_id": f"R{index}",
            "room_name": f"Room {index}",
            "num_benches": 2,
            "seats_per_bench": 2,
        }
        for index in range(1, count + 1)
    ]


def _subjects_by_bench(result) -> dict[tuple[str, int], list[str]]:
    benches: dict[tuple[str, int], list[str]] = defaultdict(list)
    for assignment in result.assignments:
        benches[(assignment.room_id, assignment.bench_number)].append(assignment.student.subject)
    return benches


def test_end_to_end_single_room_plan():
    result = schedule(SAMPLE_STUDENTS, SAMPLE_ROOMS)

    assert result.success is True
    assert result.diagnostics.feasible is True
    assert result.diagnostics.conflicts == []
    assert len(result.assignments) == 8

    summary = result.room_summaries[0]
    assert summary.total == 8
    assert [(item.subject, item.count, item.ranges) for item in summary.subjects] == [
        ("BBA", 3, "1 to 3"),
        ("BCA", 3, "1 to 3"),
        ("BCom", 2, "1 to 2"),
    ]
    assert summary.subject_counts == {"BBA": 3, "BCA": 3, "BCom": 2}


def test_successful_plan_keeps_seats_unique_and_subjects_apart():
    result = schedule(SAMPLE_STUDENTS, SAMPLE_ROOMS, {"seed": 42})

    assert result.success is True
    seat_keys = [assignment.seat_key for assignment in result.assignments]
    assert len(seat_keys) == len(set(seat_keys)) == len(SAMPLE_STUDENTS)
    for subjects in _subjects_by_bench(result).values():
        assert len(subjects) == len(set(subjects))


def test_same_seed_gives_identical_plans():
    first = schedule(SAMPLE_STUDENTS, SAMPLE_ROOMS, {"seed": 42})
    second = schedule(SAMPLE_STUDENTS, SAMPLE_ROOMS, {"seed": 42})

    assert first.to_api_dict() == second.to_api_dict()


def test_seed_reorders_students_before_placement():
    students = [
        {"roll": "1", "name": "A", "subject": "BBA"},
        {"roll": "2", "name": "B", "subject": "BCom"},
        {"roll": "3", "name": "C", "subject": "BCA"},
    ]
    rooms = _two_by_two_rooms(1)

    expected = schedule(seeded_shuffle(students, 1), rooms)
    seeded = schedule(students, rooms, {"seed": 1})
    unseeded = schedule(students, rooms)

    assert seeded.success is True
    assert seeded.assignments == expected.assignments
    assert seeded.assignments != unseeded.assignments
    by_seat = {item.seat_key: item.student.roll for item in seeded.assignments}
    assert by_seat[("R1", 1, "left")] == "3"
    assert by_seat[("R1", 2, "left")] == "1"


def test_caller_sequences_are_not_modified():
    students = [dict(item) for item in SAMPLE_STUDENTS]
    snapshot = [dict(item) for item in students]

    schedule(students, SAMPLE_ROOMS, {"seed": 5})

    assert students == snapshot


def test_capacity_shortfall_is_reported_before_placement():
    students = [{"roll": str(i), "name": f"Student {i}", "subject": "BBA"} for i in range(20)]
    rooms = [{"room_id": "R1", "room_name": "Room 1", "num_benches": 2, "seats_per_bench": 2}]

    result = schedule(students, rooms)

    assert result.success is False
    assert result.assignments == []
    assert result.room_summaries == []
    assert result.diagnostics.feasible is False
    assert any("short by 16" in suggestion for suggestion in result.diagnostics.suggestions)


def test_dominant_subject_is_infeasible():
    students = [{"roll": str(i), "name": f"S{i}", "subject": "BBA"} for i in range(10)]
    students.append({"roll": "100", "name": "Sole", "subject": "BCom"})
    rooms = [{"room_id": "R1", "room_name": "Room 1", "num_benches": 6, "seats_per_bench": 2}]

    result = schedule(students, rooms)

    assert result.success is False
    assert result.assignments == []
    conflict_types = [conflict.type for conflict in result.diagnostics.conflicts]
    assert conflict_types == ["infeasible"]
    assert "Maximum allowed: 6" in result.diagnostics.conflicts[0].message


def test_preferred_room_is_honored():
    students = [
        {"roll": "1", "name": "A", "subject": "BBA", "preferred_room": "Room 1"},
        {"roll": "2", "name": "B", "subject": "BCom", "preferred_room": "Room 1"},
    ]

    result = schedule(students, _two_by_two_rooms(2))

    assert result.success is True
    assert [assignment.room_name for assignment in result.assignments] == ["Room 1", "Room 1"]
    assert [summary.total for summary in result.room_summaries] == [2, 0]


def test_students_spread_across_rooms():
    result = schedule(SAMPLE_STUDENTS, _two_by_two_rooms(3))

    assert result.success is True
    rooms_used = {assignment.room_id for assignment in result.assignments}
    assert rooms_used == {"R1", "R2", "R3"}
    assert [summary.total for summary in result.room_summaries] == [3, 3, 2]


def test_forced_collision_makes_run_unsuccessful_but_keeps_seats():
    # Round-robin sends two BBA students into a room with no other subject.
    students = [
        {"roll": "1", "name": "A", "subject": "BBA"},
        {"roll": "2", "name": "B", "subject": "BCom"},
        {"roll": "3", "name": "C", "subject": "BBA"},
        {"roll": "4", "name": "D", "subject": "BCom"},
    ]
    rooms = [
        {"room_id": "R1", "room_name": "Room 1", "num_benches": 1, "seats_per_bench": 2},
        {"room_id": "R2", "room_name": "Room 2", "num_benches": 1, "seats_per_bench": 2},
    ]

    result = schedule(students, rooms)

    assert result.diagnostics.feasible is True
    assert result.success is False
    assert len(result.assignments) == 4
    assert [conflict.type for conflict in result.diagnostics.conflicts] == [
        "constraint",
        "constraint",
    ]


def test_validation_failures_short_circuit():
    result = schedule([], [])

    assert result.success is False
    assert result.diagnostics.feasible is False
    assert [conflict.type for conflict in result.diagnostics.conflicts] == [
        "validation",
        "validation",
    ]
    assert result.diagnostics.suggestions == []


def test_duplicate_rolls_are_validation_conflicts():
    students = [
        {"roll": "1", "name": "A", "subject": "BBA"},
        {"roll": "1", "name": "B", "subject": "BCom"},
    ]
    result = schedule(students, SAMPLE_ROOMS)

    messages = [conflict.message for conflict in result.diagnostics.conflicts]
    assert messages == ["Duplicate roll number: 1"]
    assert result.assignments == []


def test_malformed_room_fails_closed():
    rooms = [{"room_id": "R1", "room_name": "Room 1", "num_benches": "lots", "seats_per_bench": 2}]
    result = schedule(SAMPLE_STUDENTS, rooms)

    assert result.success is False
    assert result.diagnostics.conflicts[0].type == "validation"


def _validation_messages(result) -> list[str]:
    assert result.success is False
    assert result.diagnostics.feasible is False
    assert result.assignments == []
    assert {conflict.type for conflict in result.diagnostics.conflicts} == {"validation"}
    return [conflict.message for conflict in result.diagnostics.conflicts]


def test_non_mapping_entries_fail_closed():
    result = schedule(SAMPLE_STUDENTS + [None], SAMPLE_ROOMS + ["R2"])

    assert _validation_messages(result) == [
        "Student #9 must be a mapping",
        "Room #2 must be a mapping",
    ]


def test_non_list_inputs_fail_closed():
    result = schedule(SAMPLE_STUDENTS[0], 42)

    assert _validation_messages(result) == ["students must be a list", "rooms must be a list"]


def test_malformed_options_fail_closed():
    bad_constraints = schedule(SAMPLE_STUDENTS, SAMPLE_ROOMS, {"constraints": "yes"})
    bad_options = schedule(SAMPLE_STUDENTS, SAMPLE_ROOMS, "seed=1")
    bad_algorithm = schedule(SAMPLE_STUDENTS, SAMPLE_ROOMS, {"algorithm": ["greedy"]})

    assert _validation_messages(bad_constraints) == ["options.constraints must be a mapping"]
    assert _validation_messages(bad_options) == ["options must be a mapping"]
    assert _validation_messages(bad_algorithm) == ["algorithm must be a string"]


def test_service_reports_malformed_options_instead_of_raising():
    service = SchedulingService(settings=get_settings())

    result = service.schedule(SAMPLE_STUDENTS, SAMPLE_ROOMS, {"constraints": ["no_same_subject_bench"]})

    assert _validation_messages(result) == ["options.constraints must be a mapping"]


def test_room_without_name_fails_closed():
    rooms = [{"room_id": "R1", "num_benches": 4, "seats_per_bench": 2}]

    result = schedule(SAMPLE_STUDENTS, rooms)

    assert _validation_messages(result) == ["Room R1 has no room_name"]
    assert result.room_summaries == []


def test_unknown_algorithm_falls_back_to_greedy(caplog):
    with caplog.at_level(logging.WARNING):
        fallback = schedule(SAMPLE_STUDENTS, SAMPLE_ROOMS, ScheduleOptions(algorithm="annealing"))
    greedy = schedule(SAMPLE_STUDENTS, SAMPLE_ROOMS, ScheduleOptions(algorithm="greedy"))

    assert fallback == greedy
    assert resolve_algorithm("annealing") is ALGORITHMS["greedy"]
    assert "Unknown scheduling algorithm" in caplog.text


def test_service_applies_configured_default_algorithm():
    settings = replace(get_settings(), default_algorithm="exact")
    service = SchedulingService(settings=settings)

    result = service.schedule(SAMPLE_STUDENTS, SAMPLE_ROOMS)

    assert service.default_algorithm == "exact"
    assert result.success is True
    assert len(result.assignments) == 8


def test_api_dict_shape():
    payload = schedule(SAMPLE_STUDENTS, SAMPLE_ROOMS).to_api_dict()

    assert set(payload) == {"success", "assignments", "diagnostics", "room_summaries"}
    first = payload["assignments"][0]
    assert first["room_id"] == "R1"
    assert first["bench_number"] == 1
    assert first["position"] == "left"
    assert set(first["student"]) == {"roll", "name", "subject"}
