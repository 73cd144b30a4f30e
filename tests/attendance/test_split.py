from datetime import date, datetime

import pytest

from staffclock.attendance.model import AttendanceRecord, Location
from staffclock.attendance.split import plan_split

OUT_LOCATION = Location(lat=3.16, lng=101.76, place="Kuala Lumpur", area="Ampang")


def _open(time_in):
    return AttendanceRecord(
        record_id=7,
        user_id="u1",
        display_name="Aina",
        email="aina@example.com",
        work_date=time_in.date(),
        time_in=time_in,
        location_in=Location(lat=3.1, lng=101.6, place="Kuala Lumpur", area="Bangsar"),
        original_time_in=time_in,
    )


def test_one_midnight_gives_one_continuation():
    out = datetime(2024, 1, 16, 2, 15)

    plan = plan_split(_open(datetime(2024, 1, 15, 22, 0)), time_out=out, original_time_out=out, location_out=OUT_LOCATION)

    assert plan.close_at == datetime(2024, 1, 15, 23, 59, 59)
    assert len(plan.continuations) == 1
    cont = plan.continuations[0]
    assert cont.record_id is None
    assert cont.work_date == date(2024, 1, 16)
    assert cont.time_in == datetime(2024, 1, 16, 0, 0, 0)
    assert cont.time_out == out
    assert cont.location_in == OUT_LOCATION
    assert cont.location_out == OUT_LOCATION
    assert cont.original_time_in is None
    assert cont.original_time_out == out
    assert (cont.user_id, cont.display_name, cont.email) == ("u1", "Aina", "aina@example.com")


def test_multi_day_span_gets_one_record_per_day():
    out = datetime(2024, 1, 18, 6, 0)

    plan = plan_split(_open(datetime(2024, 1, 15, 21, 0)), time_out=out, original_time_out=out, location_out=OUT_LOCATION)

    assert [c.work_date for c in plan.continuations] == [date(2024, 1, 16), date(2024, 1, 17), date(2024, 1, 18)]
    assert plan.continuations[0].time_out == datetime(2024, 1, 16, 23, 59, 59)
    assert plan.continuations[1].time_in == datetime(2024, 1, 17, 0, 0)
    assert plan.continuations[1].original_time_out is None
    assert plan.continuations[-1].time_out == out


def test_split_needs_a_later_date():
    out = datetime(2024, 1, 15, 23, 0)

    with pytest.raises(ValueError):
        plan_split(_open(datetime(2024, 1, 15, 22, 0)), time_out=out, original_time_out=out, location_out=OUT_LOCATION)
