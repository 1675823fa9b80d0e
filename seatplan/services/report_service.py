"""Printable HTML room sheets built from a seating plan."""

from __future__ import annotations

from datetime import date as date_type
from html import escape
from typing import Optional, Sequence

from seatplan.domain.models import Assignment
from seatplan.services.seat_assignment import TWO_SEAT_LABELS
from seatplan.services.summary_service import build_subject_summaries
from seatplan.utils.config import Settings, get_settings


_SHEET_STYLE = """
    @page { margin: 20mm; }
    body { font-family: Arial, sans-serif; margin: 0; padding: 20px; font-size: 14pt; }
    .header { text-align: center; margin-bottom: 30px; }
    .date, .total { font-size: 16pt; font-weight: bold; margin-bottom: 10px; }
    .room-name { font-size: 18pt; font-weight: bold; margin-bottom: 30px; text-align: center; }
    .subject-list { line-height: 2; }
    table { border-collapse: collapse; width: 100%; margin-top: 30px; font-size: 11pt; }
    th, td { border-bottom: 1px solid #999; padding: 4px 8px; text-align: left; }
    @media print { body { padding: 0; } }
"""


class RoomSheetValidationError(Exception):
    """Raised when a room sheet is requested for assignments of another room."""


def subject_lines(assignments: Sequence[Assignment]) -> list[str]:
    """Lines such as ``BBA 1 to 3, 5 (4)``, one per subject in name order."""
    return [
        f"{item.subject} {item.ranges} ({item.count})"
        for item in build_subject_summaries(assignments)
    ]


def _seat_index(position: str) -> Optional[int]:
    if position in TWO_SEAT_LABELS:
        return TWO_SEAT_LABELS.index(position)
    label, _, number = position.partition("_")
    if label == "seat" and number.isdigit():
        return int(number) - 1
    return None


def _bench_order(assignment: Assignment) -> tuple[int, bool, int, str]:
    # Unrecognised labels sort after numbered seats, then by text.
    index = _seat_index(assignment.position)
    return (assignment.bench_number, index is None, index or 0, assignment.position)


def render_room_sheet(
    *,
    room_id: str,
    room_name: str,
    assignments: Sequence[Assignment],
    exam_date: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> str:
    resolved_settings = settings or get_settings()
    foreign = sorted({item.room_id for item in assignments if item.room_id != room_id})
    if foreign:
        raise RoomSheetValidationError(
            f"Assignments for rooms {', '.join(foreign)} cannot appear on the sheet for {room_id}"
        )

    sheet_date = exam_date or date_type.today().strftime(resolved_settings.report_date_format)
    lines_html = "".join(
        f'<div class="subject-line">{escape(line)}</div>' for line in subject_lines(assignments)
    )
    rows_html = "".join(
        "<tr>"
        f"<td>#{item.bench_number}</td>"
        f"<td>{escape(item.position)}</td>"
        f"<td>{escape(item.student.roll)}</td>"
        f"<td>{escape(item.student.name)}</td>"
        f"<td>{escape(item.student.subject)}</td>"
        "</tr>"
        for item in sorted(assignments, key=_bench_order)
    )

    return (
        "<!DOCTYPE html>\n"
        "<html>\n<head>\n"
        '  <meta charset="UTF-8">\n'
        f"  <title>{escape(room_name)} - Seating Arrangement</title>\n"
        f"  <style>{_SHEET_STYLE}</style>\n"
        "</head>\n<body>\n"
        '  <div class="header">\n'
        f'    <div class="date">{escape(sheet_date)}</div>\n'
        f'    <div class="total">TOTAL - {len(assignments)}</div>\n'
        "  </div>\n"
        f'  <div class="room-name">{escape(room_name.upper())}</div>\n'
        f'  <div class="subject-list">{lines_html}</div>\n'
        "  <table>\n"
        "    <thead><tr><th>Bench</th><th>Seat</th><th>Roll</th><th>Name</th><th>Subject</th></tr></thead>\n"
        f"    <tbody>{rows_html}</tbody>\n"
        "  </table>\n"
        "</body>\n</html>\n"
    )
