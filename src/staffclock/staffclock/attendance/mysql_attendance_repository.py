from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.constants import UNKNOWN_PLACE
from ..core.exceptions import RepositoryError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, Location
from .repository import AttendanceRepository

_COLUMNS = """
    record_id, user_id, display_name, email, work_date, time_in, time_out,
    location_in_lat, location_in_lng, location_in_place, location_in_area,
    location_out_lat, location_out_lng, location_out_place, location_out_area,
    original_time_in, original_time_out
"""

_INSERT = """
    INSERT INTO attendance_records(
        user_id, display_name, email, work_date, time_in, time_out,
        location_in_lat, location_in_lng, location_in_place, location_in_area,
        location_out_lat, location_out_lng, location_out_place, location_out_area,
        original_time_in, original_time_out
    )
    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
"""

_UPDATABLE = ("time_out", "original_time_out", "location_out")


def _location_from_row(r: Dict[str, Any], prefix: str) -> Optional[Location]:
    lat = r.get(f"{prefix}_lat")
    lng = r.get(f"{prefix}_lng")
    if lat is None or lng is None:
        return None
    return Location(
        lat=float(lat),
        lng=float(lng),
        place=r.get(f"{prefix}_place") or UNKNOWN_PLACE,
        area=r.get(f"{prefix}_area") or "",
    )


def _location_params(location: Optional[Location]) -> tuple:
    if location is None:
        return (None, None, None, None)
    return (location.lat, location.lng, location.place, location.area)


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        user_id=str(r["user_id"]),
        display_name=r["display_name"],
        email=r["email"],
        work_date=r["work_date"],
        time_in=r.get("time_in"),
        time_out=r.get("time_out"),
        location_in=_location_from_row(r, "location_in"),
        location_out=_location_from_row(r, "location_out"),
        original_time_in=r.get("original_time_in"),
        original_time_out=r.get("original_time_out"),
    )


def _insert_params(record: AttendanceRecord) -> tuple:
    return (
        record.user_id,
        record.display_name,
        record.email,
        record.work_date,
        record.time_in,
        record.time_out,
        *_location_params(record.location_in),
        *_location_params(record.location_out),
        record.original_time_in,
        record.original_time_out,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select(self, where: str, params: tuple, *, suffix: str = "") -> list[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE {where} {suffix}", params)
            return [_to_record(r) for r in fetchall(cur)]

    def find_by_user_and_date(self, user_id: str, work_date: date) -> Sequence[AttendanceRecord]:
        return self._select("user_id=%s AND work_date=%s", (user_id, work_date))

    def find_by_user(self, user_id: str, *, limit: Optional[int] = None) -> Sequence[AttendanceRecord]:
        if limit is None:
            return self._select("user_id=%s", (user_id,), suffix="ORDER BY work_date DESC, time_in DESC")
        return self._select(
            "user_id=%s",
            (user_id, int(limit)),
            suffix="ORDER BY work_date DESC, time_in DESC LIMIT %s",
        )

    def find_by_date_range(self, start: date, end: date) -> Sequence[AttendanceRecord]:
        return self._select("work_date BETWEEN %s AND %s", (start, end))

    def find_open_session_for_user(self, user_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND time_out IS NULL
                ORDER BY time_in DESC
                LIMIT 1
                """,
                (user_id,),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def find_todays_records(self, user_id: str, today: date) -> Sequence[AttendanceRecord]:
        return self.find_by_user_and_date(user_id, today)

    def create(self, record: AttendanceRecord) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_INSERT, _insert_params(record))
            return int(cur.lastrowid)

    def update(self, record_id: int, **fields) -> bool:
        unknown = set(fields) - set(_UPDATABLE)
        if unknown:
            raise ValueError(f"Unsupported fields: {sorted(unknown)}")
        if not fields:
            return False

        assignments: list[str] = []
        params: list[Any] = []
        for name, value in fields.items():
            if name == "location_out":
                assignments += [
                    "location_out_lat=%s",
                    "location_out_lng=%s",
                    "location_out_place=%s",
                    "location_out_area=%s",
                ]
                params += list(_location_params(value))
            else:
                assignments.append(f"{name}=%s")
                params.append(value)
        params.append(int(record_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE attendance_records SET {', '.join(assignments)} WHERE record_id=%s",
                tuple(params),
            )
            return cur.rowcount > 0

    def close_and_continue(
        self,
        *,
        record_id: int,
        time_out: datetime,
        original_time_out: datetime,
        location_out: Location,
        continuations: Sequence[AttendanceRecord],
    ) -> list[int]:
        ids: list[int] = []
        # Single transaction: the close is rolled back if any insert fails.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET time_out=%s, original_time_out=%s,
                    location_out_lat=%s, location_out_lng=%s, location_out_place=%s, location_out_area=%s
                WHERE record_id=%s AND time_out IS NULL
                """,
                (time_out, original_time_out, *_location_params(location_out), int(record_id)),
            )
            if cur.rowcount == 0:
                raise RepositoryError(f"Record {record_id} is no longer open")
            for record in continuations:
                cur.execute(_INSERT, _insert_params(record))
                ids.append(int(cur.lastrowid))
        return ids
