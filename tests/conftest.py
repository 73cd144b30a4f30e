from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional

import pytest

from staffclock.attendance.model import AttendanceRecord, Location
from staffclock.attendance.service import AttendanceService
from staffclock.core.enums import Role
from staffclock.core.exceptions import GeolocationError, RepositoryError
from staffclock.users.model import StaffUser


_DATETIME_FIELDS = ("time_in", "time_out", "original_time_in", "original_time_out")


def _stored(value):
    """DATETIME columns round fractional seconds half up."""
    if not isinstance(value, datetime) or not value.microsecond:
        return value
    rounded = value.replace(microsecond=0)
    return rounded + timedelta(seconds=1) if value.microsecond >= 500_000 else rounded


def _as_stored(fields: dict) -> dict:
    return {k: _stored(v) if k in _DATETIME_FIELDS else v for k, v in fields.items()}


class InMemoryAttendance:
    def __init__(self):
        self.records: dict[int, AttendanceRecord] = {}
        self._id = 0
        self.fail_create = False
        self.persist_before_failing = False
        self.fail_reads = False
        self.limits: list = []

    def _check_reads(self):
        if self.fail_reads:
            raise RepositoryError("store unavailable")

    def _insert(self, record: AttendanceRecord) -> int:
        self._id += 1
        stored = replace(record, **_as_stored({f: getattr(record, f) for f in _DATETIME_FIELDS}))
        self.records[self._id] = stored.with_id(self._id)
        return self._id

    def find_by_user_and_date(self, user_id: str, work_date: date):
        self._check_reads()
        return [r for r in self.records.values() if r.user_id == user_id and r.work_date == work_date]

    def find_by_user(self, user_id: str, *, limit: Optional[int] = None):
        self._check_reads()
        self.limits.append(limit)
        items = [r for r in self.records.values() if r.user_id == user_id]
        items.sort(key=lambda r: (r.work_date, r.time_in or datetime.min), reverse=True)
        return items if limit is None else items[:limit]

    def find_by_date_range(self, start: date, end: date):
        self._check_reads()
        return [r for r in self.records.values() if start <= r.work_date <= end]

    def find_open_session_for_user(self, user_id: str):
        self._check_reads()
        for r in self.records.values():
            if r.user_id == user_id and r.time_out is None:
                return r
        return None

    def find_todays_records(self, user_id: str, today: date):
        return self.find_by_user_and_date(user_id, today)

    def create(self, record: AttendanceRecord) -> int:
        if self.fail_create:
            if self.persist_before_failing:
                self._insert(record)
            raise RepositoryError("write acknowledgement lost")
        return self._insert(record)

    def update(self, record_id: int, **fields) -> bool:
        if record_id not in self.records:
            return False
        self.records[record_id] = replace(self.records[record_id], **_as_stored(fields))
        return True

    def close_and_continue(self, *, record_id, time_out, original_time_out, location_out, continuations):
        self.update(record_id, time_out=time_out, original_time_out=original_time_out, location_out=location_out)
        return [self._insert(c) for c in continuations]

    def add(self, **fields) -> AttendanceRecord:
        values = dict(record_id=None, user_id="u1", display_name="Aina", email="aina@example.com")
        values.update(fields)
        record_id = self._insert(AttendanceRecord(**values))
        return self.records[record_id]


class FakeResolver:
    def __init__(self, place: str = "Kuala Lumpur", area: str = "Bangsar", *, fail: bool = False):
        self.place = place
        self.area = area
        self.fail = fail
        self.calls: list[tuple[float, float]] = []

    def resolve(self, lat: float, lng: float) -> Location:
        self.calls.append((lat, lng))
        if self.fail:
            raise GeolocationError("lookup timed out")
        return Location(lat=lat, lng=lng, place=self.place, area=self.area)


class InMemoryUsers:
    def __init__(self, *users: StaffUser):
        self.users = {u.uid: u for u in users}
        self.created: list[str] = []

    def get_by_uid(self, uid: str):
        return self.users.get(uid)

    def create_user(self, user: StaffUser) -> None:
        self.users[user.uid] = user
        self.created.append(user.uid)

    def set_role(self, uid: str, role: Role) -> bool:
        if uid not in self.users:
            return False
        self.users[uid] = replace(self.users[uid], role=role)
        return True


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def users_repo():
    return InMemoryUsers()


@pytest.fixture
def staff_user():
    return StaffUser(
        uid="u1",
        email="aina@example.com",
        display_name="Aina",
        photo_url=None,
        role=Role.STAFF,
    )


@pytest.fixture
def service(attendance_repo, resolver):
    return AttendanceService(attendance_repo, resolver)
