#!/usr/bin/env python3
"""Validate local seating planner environment readiness."""

from __future__ import annotations

import importlib
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from seatplan.services.scheduling_service import SchedulingService
from seatplan.utils.config import get_settings

SEPARATOR_LINE = "=" * 44

REQUIRED_PACKAGES = [
    ("fastapi", "fastapi"),
    ("uvicorn", "uvicorn"),
    ("pydantic", "pydantic"),
    ("httpx", "httpx"),
    ("pytest", "pytest"),
]

SMOKE_STUDENTS = [
    {"roll": "1043-1", "name": "Ajay", "subject": "BBA"},
    {"roll": "1043-2", "name": "Vijay", "subject": "BBA"},
    {"roll": "1076-1", "name": "Rahul", "subject": "BCom"},
    {"roll": "1076-2", "name": "Rohit", "subject": "BCom"},
]
SMOKE_ROOMS = [
    {"room_id": "R1", "room_name": "Room 1", "num_benches": 2, "seats_per_bench": 2},
]


def _print_result(name: str, success: bool, detail: str = "") -> tuple[bool, str]:
    if success:
        return True, f"[PASS] {name}{detail}"
    return False, f"[FAIL] {name}: {detail}"


def main() -> int:
    results: list[str] = []
    all_passed = True

    # CHECK 1 — Python version >= 3.11
    if sys.version_info >= (3, 11):
        ok, line = _print_result("Python " + sys.version.split()[0], True)
    else:
        ok, line = _print_result(
            "Python version >= 3.11",
            False,
            f"found {sys.version.split()[0]}",
        )
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 2 — Required packages importable
    import_errors: list[str] = []
    for module_name, dist_name in REQUIRED_PACKAGES:
        try:
            importlib.import_module(module_name)
            version(dist_name)
        except (ImportError, PackageNotFoundError) as exc:
            import_errors.append(f"{module_name} ({exc})")
    if import_errors:
        ok, line = _print_result(
            "Required packages",
            False,
            "missing/unimportable -> " + "; ".join(import_errors),
        )
    else:
        ok, line = _print_result("Required packages: all importable", True)
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 3 — Smoke schedule
    try:
        service = SchedulingService(settings=get_settings())
        result = service.schedule(SMOKE_STUDENTS, SMOKE_ROOMS, {"seed": 7})
        if not result.success or len(result.assignments) != len(SMOKE_STUDENTS):
            raise RuntimeError(
                f"expected a clean plan, got conflicts {result.diagnostics.conflicts}"
            )
        ok, line = _print_result(
            "Smoke schedule",
            True,
            f": {len(result.assignments)} seats in {len(result.room_summaries)} room",
        )
    except Exception as exc:
        ok, line = _print_result("Smoke schedule", False, str(exc))
    results.append(line)
    all_passed = all_passed and ok

    print(SEPARATOR_LINE)
    print(" Seating Planner Environment Validation")
    print(SEPARATOR_LINE)
    for line in results:
        print(f" {line}")
    print(SEPARATOR_LINE)
    if all_passed:
        print(" All checks passed. Environment is ready.")
        print(SEPARATOR_LINE)
        return 0
    print(" One or more checks failed.")
    print(SEPARATOR_LINE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
