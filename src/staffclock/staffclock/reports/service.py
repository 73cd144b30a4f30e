from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List

from ..attendance.model import AttendanceRecord, sort_records
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import format_hhmm
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class TimesheetRow:
    date: str
    staff: str
    email: str
    time_in: str
    time_out: str
    location_in: str
    location_out: str


@dataclass(frozen=True)
class TimesheetReport:
    start: date
    end: date
    records: List[AttendanceRecord]
    rows: List[TimesheetRow]


class TimesheetReportService:
    """Use case: admin timesheet for a date range (read-only)."""

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def list_records(self, *, start: date, end: date) -> List[AttendanceRecord]:
        if start > end:
            raise ValidationError("Start date must not be after end date")
        # Inclusive on both ends; guard against stores that over-fetch.
        records = [r for r in self._attendance.find_by_date_range(start, end) if start <= r.work_date <= end]
        return sort_records(records)

    def build_timesheet(self, *, start: date, end: date) -> TimesheetReport:
        records = self.list_records(start=start, end=end)
        return TimesheetReport(start=start, end=end, records=records, rows=[self._to_row(r) for r in records])

    def _to_row(self, r: AttendanceRecord) -> TimesheetRow:
        return TimesheetRow(
            date=r.work_date.strftime("%Y-%m-%d"),
            staff=r.display_name,
            email=r.email,
            time_in=format_hhmm(r.time_in),
            time_out=format_hhmm(r.time_out),
            location_in=r.location_in.label() if r.location_in else "-",
            location_out=r.location_out.label() if r.location_out else "-",
        )
