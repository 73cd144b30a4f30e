from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import List

from ..common.datetime_utils import end_of_day, iter_days, start_of_day
from .model import AttendanceRecord, Location


@dataclass(frozen=True)
class SplitPlan:
    """How an OPEN record is closed when its session crosses midnight."""

    close_at: datetime
    continuations: List[AttendanceRecord]


def plan_split(
    record: AttendanceRecord,
    *,
    time_out: datetime,
    original_time_out: datetime,
    location_out: Location,
) -> SplitPlan:
    """Cut the session into one record per calendar day.

    The open record closes at 23:59:59 of its clock-in date. Each following
    day gets its own record starting 00:00:00; the last one ends at
    ``time_out``, the days in between end at 23:59:59.
    """

    opened_on: date = record.time_in.date() if record.time_in else record.work_date
    closed_on = time_out.date()
    if closed_on <= opened_on:
        raise ValueError("split requires a clock-out on a later date than clock-in")

    template = replace(
        record,
        record_id=None,
        location_in=location_out,
        location_out=location_out,
        original_time_in=None,
    )

    continuations: List[AttendanceRecord] = []
    for day in iter_days(opened_on + timedelta(days=1), closed_on):
        is_last = day == closed_on
        continuations.append(
            replace(
                template,
                work_date=day,
                time_in=start_of_day(day),
                time_out=time_out if is_last else end_of_day(day),
                original_time_out=original_time_out if is_last else None,
            )
        )

    return SplitPlan(close_at=end_of_day(opened_on), continuations=continuations)
