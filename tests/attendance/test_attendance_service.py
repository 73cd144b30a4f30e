from datetime import date, datetime

import pytest

from staffclock.attendance.gate import SessionGate
from staffclock.attendance.model import Location
from staffclock.attendance.service import AttendanceService
from staffclock.core.constants import UNKNOWN_PLACE
from staffclock.core.enums import ClockAction, GateVerdict
from staffclock.core.exceptions import RepositoryError


def test_clock_in_in_ampang_rounds_and_keeps_original(attendance_repo, resolver, service, staff_user):
    resolver.area = "Ampang Jaya"

    result = service.check_in(staff_user, lat=3.15, lng=101.76, now=datetime(2024, 1, 15, 7, 3))

    assert result.ok
    rec = attendance_repo.records[result.record_ids[0]]
    assert rec.time_in == datetime(2024, 1, 15, 7, 0, 0)
    assert rec.original_time_in == datetime(2024, 1, 15, 7, 3)
    assert rec.work_date == date(2024, 1, 15)
    assert rec.is_open
    assert rec.location_in == Location(lat=3.15, lng=101.76, place="Kuala Lumpur", area="Ampang Jaya")
    assert (rec.user_id, rec.display_name, rec.email) == ("u1", "Aina", "aina@example.com")
    assert result.state.is_clocked_in


def test_clock_in_elsewhere_keeps_time(attendance_repo, service, staff_user):
    result = service.check_in(staff_user, lat=3.13, lng=101.67, now=datetime(2024, 1, 15, 9, 0))

    rec = attendance_repo.records[result.record_ids[0]]
    assert rec.time_in == datetime(2024, 1, 15, 9, 0)
    assert rec.original_time_in == datetime(2024, 1, 15, 9, 0)


def test_clock_out_same_day_updates_open_record(attendance_repo, service, staff_user):
    service.check_in(staff_user, lat=3.1, lng=101.6, now=datetime(2024, 1, 15, 9, 0))

    result = service.check_out(staff_user, lat=3.2, lng=101.7, now=datetime(2024, 1, 15, 17, 30))

    assert result.ok
    assert result.decision.verdict == GateVerdict.ALLOW
    assert len(attendance_repo.records) == 1
    rec = attendance_repo.records[1]
    assert rec.time_out == datetime(2024, 1, 15, 17, 30)
    assert rec.original_time_out == datetime(2024, 1, 15, 17, 30)
    assert rec.location_out.lat == 3.2
    assert not result.state.is_clocked_in
    assert result.state.last_closed.record_id == 1


def test_cooldown_after_clock_out(service, staff_user):
    service.check_in(staff_user, lat=3.1, lng=101.6, now=datetime(2024, 1, 15, 9, 0))
    service.check_out(staff_user, lat=3.1, lng=101.6, now=datetime(2024, 1, 15, 14, 0))

    blocked = service.check_in(staff_user, lat=3.1, lng=101.6, now=datetime(2024, 1, 15, 14, 30))
    allowed = service.check_in(staff_user, lat=3.1, lng=101.6, now=datetime(2024, 1, 15, 15, 0))

    assert not blocked.ok
    assert blocked.decision.verdict == GateVerdict.BLOCK_COOLDOWN
    assert blocked.decision.remaining_minutes == 30
    assert allowed.ok


def test_blocked_request_writes_nothing(attendance_repo, service, staff_user):
    result = service.check_in(staff_user, lat=3.1, lng=101.6, now=datetime(2024, 1, 15, 12, 15))

    assert not result.ok
    assert result.decision.verdict == GateVerdict.BLOCK_LUNCH
    assert result.records == ()
    assert attendance_repo.records == {}


def test_double_clock_in_is_blocked(attendance_repo, service, staff_user):
    service.check_in(staff_user, lat=3.1, lng=101.6, now=datetime(2024, 1, 15, 9, 0))

    result = service.check_in(staff_user, lat=3.1, lng=101.6, now=datetime(2024, 1, 15, 9, 1))

    assert result.decision.verdict == GateVerdict.BLOCK_ALREADY_CLOCKED_IN
    assert len(attendance_repo.records) == 1


def test_clock_out_across_midnight_splits(attendance_repo, resolver, service, staff_user):
    service.check_in(staff_user, lat=3.1, lng=101.6, now=datetime(2024, 1, 15, 22, 0))
    resolver.area = "Ampang"

    result = service.check_out(staff_user, lat=3.16, lng=101.76, now=datetime(2024, 1, 16, 7, 20))

    assert result.ok
    assert result.decision.verdict == GateVerdict.SPLIT_REQUIRED
    assert result.record_ids == [1, 2]
    first, second = attendance_repo.records[1], attendance_repo.records[2]
    assert first.time_out == datetime(2024, 1, 15, 23, 59, 59)
    assert first.original_time_out == datetime(2024, 1, 16, 7, 20)
    assert first.location_out.area == "Ampang"
    assert second.work_date == date(2024, 1, 16)
    assert second.time_in == datetime(2024, 1, 16, 0, 0, 0)
    assert second.time_out == datetime(2024, 1, 16, 7, 30)
    assert second.location_in == second.location_out == first.location_out
    assert not result.state.is_clocked_in


def test_clock_out_after_several_days_splits_per_day(attendance_repo, service, staff_user):
    service.check_in(staff_user, lat=3.1, lng=101.6, now=datetime(2024, 1, 15, 22, 0))

    result = service.check_out(staff_user, lat=3.1, lng=101.6, now=datetime(2024, 1, 18, 6, 0))

    assert len(result.records) == 4
    assert [r.work_date for r in result.records] == [date(2024, 1, d) for d in (15, 16, 17, 18)]
    assert all(r.time_out is not None for r in attendance_repo.records.values())


def test_clock_out_never_precedes_clock_in(attendance_repo, resolver, service, staff_user):
    service.check_in(staff_user, lat=3.1, lng=101.6, now=datetime(2024, 1, 15, 7, 2))
    resolver.area = "Ampang"

    result = service.check_out(staff_user, lat=3.1, lng=101.6, now=datetime(2024, 1, 15, 7, 4))

    rec = attendance_repo.records[result.record_ids[0]]
    assert rec.time_in == datetime(2024, 1, 15, 7, 2)
    assert rec.time_out == rec.time_in


def test_resolver_failure_falls_back_to_unknown(attendance_repo, resolver, service, staff_user):
    resolver.fail = True

    result = service.check_in(staff_user, lat=3.1, lng=101.6, now=datetime(2024, 1, 15, 9, 0))

    assert result.ok
    loc = attendance_repo.records[1].location_in
    assert (loc.place, loc.area, loc.lat, loc.lng) == (UNKNOWN_PLACE, "", 3.1, 101.6)


def test_lost_ack_on_clock_in_is_recovered(attendance_repo, service, staff_user):
    attendance_repo.fail_create = True
    attendance_repo.persist_before_failing = True

    result = service.check_in(staff_user, lat=3.1, lng=101.6, now=datetime(2024, 1, 15, 9, 0))

    assert result.ok
    assert result.record_ids == [1]
    assert len(attendance_repo.records) == 1


def test_lost_ack_is_recovered_when_clock_has_microseconds(attendance_repo, service, staff_user):
    attendance_repo.fail_create = True
    attendance_repo.persist_before_failing = True

    result = service.check_in(staff_user, lat=3.1, lng=101.6, now=datetime(2024, 1, 15, 9, 0, 0, 623456))

    assert result.ok
    assert len(attendance_repo.records) == 1
    assert attendance_repo.records[1].original_time_in == datetime(2024, 1, 15, 9, 0, 0)


def test_clock_in_just_before_midnight_stays_on_its_day(attendance_repo, service, staff_user):
    result = service.check_in(staff_user, lat=3.1, lng=101.6, now=datetime(2024, 1, 15, 23, 59, 59, 700000))

    assert result.ok
    record = attendance_repo.records[1]
    assert record.work_date == date(2024, 1, 15)
    assert record.time_in == datetime(2024, 1, 15, 23, 59, 59)


def test_failed_clock_in_write_propagates(attendance_repo, service, staff_user):
    attendance_repo.fail_create = True

    with pytest.raises(RepositoryError):
        service.check_in(staff_user, lat=3.1, lng=101.6, now=datetime(2024, 1, 15, 9, 0))

    assert attendance_repo.records == {}


def test_read_failure_propagates(attendance_repo, service, staff_user):
    attendance_repo.fail_reads = True

    with pytest.raises(RepositoryError):
        service.clock(ClockAction.CLOCK_IN, staff_user, lat=3.1, lng=101.6, now=datetime(2024, 1, 15, 9, 0))


def test_open_session_from_yesterday_counts_as_clocked_in(attendance_repo, service):
    attendance_repo.add(work_date=date(2024, 1, 14), time_in=datetime(2024, 1, 14, 20, 0))

    state = service.get_session_state("u1", today=date(2024, 1, 15))

    assert state.is_clocked_in
    assert state.open_record.work_date == date(2024, 1, 14)


def test_session_state_uses_latest_closed_today(attendance_repo, service):
    attendance_repo.add(work_date=date(2024, 1, 15), time_in=datetime(2024, 1, 15, 8, 0), time_out=datetime(2024, 1, 15, 10, 0))
    attendance_repo.add(work_date=date(2024, 1, 15), time_in=datetime(2024, 1, 15, 11, 0), time_out=datetime(2024, 1, 15, 15, 0))
    attendance_repo.add(work_date=date(2024, 1, 14), time_in=datetime(2024, 1, 14, 8, 0), time_out=datetime(2024, 1, 14, 18, 0))

    state = service.get_session_state("u1", today=date(2024, 1, 15))

    assert not state.is_clocked_in
    assert state.last_closed.time_out == datetime(2024, 1, 15, 15, 0)


def test_history_is_sorted_and_limited(attendance_repo, service):
    attendance_repo.add(work_date=date(2024, 1, 14), time_in=datetime(2024, 1, 14, 8, 0))
    attendance_repo.add(work_date=date(2024, 1, 15), time_in=datetime(2024, 1, 15, 8, 0))
    attendance_repo.add(work_date=date(2024, 1, 15), time_in=datetime(2024, 1, 15, 15, 0))
    attendance_repo.add(user_id="u2", work_date=date(2024, 1, 16), time_in=datetime(2024, 1, 16, 8, 0))

    history = service.get_history("u1", limit=2)

    assert [r.time_in for r in history] == [datetime(2024, 1, 15, 15, 0), datetime(2024, 1, 15, 8, 0)]
    assert attendance_repo.limits == [2]


def test_history_limit_applies_to_newest_records(attendance_repo, service):
    for day in range(1, 31):
        attendance_repo.add(work_date=date(2024, 1, day), time_in=datetime(2024, 1, day, 8, 0))

    history = service.get_history("u1", limit=3)

    assert [r.work_date.day for r in history] == [30, 29, 28]


def test_settings_flow_into_gate(attendance_repo, resolver, staff_user):
    svc = AttendanceService(attendance_repo, resolver, gate=SessionGate(lunch_start_hour=13, lunch_end_hour=14))

    assert svc.check_in(staff_user, lat=3.1, lng=101.6, now=datetime(2024, 1, 15, 12, 30)).ok
