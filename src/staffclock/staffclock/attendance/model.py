from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Iterable, List, Optional

from ..common.datetime_utils import to_iso
from ..core.constants import UNKNOWN_PLACE

_EPOCH = datetime(1970, 1, 1)


@dataclass(frozen=True)
class Location:
    """Device coordinates plus the place they resolved to."""

    lat: float
    lng: float
    place: str = UNKNOWN_PLACE
    area: str = ""

    def label(self) -> str:
        return f"{self.place}, {self.area}" if self.area else self.place

    def to_document(self) -> dict:
        return {"lat": self.lat, "lng": self.lng, "place": self.place, "area": self.area}


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one continuous clock-in/clock-out session.

    ``time_in``/``time_out`` hold the adjusted (possibly rounded) instants,
    ``original_time_in``/``original_time_out`` the raw ones. A record with
    no ``time_out`` is OPEN.
    """

    record_id: Optional[int]
    user_id: str
    display_name: str
    email: str
    work_date: date
    time_in: Optional[datetime]
    time_out: Optional[datetime] = None
    location_in: Optional[Location] = None
    location_out: Optional[Location] = None
    original_time_in: Optional[datetime] = None
    original_time_out: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.time_out is None

    def with_id(self, record_id: int) -> "AttendanceRecord":
        return replace(self, record_id=record_id)

    def to_document(self) -> dict:
        """Serialize with the persisted field names."""
        return {
            "id": self.record_id,
            "userId": self.user_id,
            "displayName": self.display_name,
            "email": self.email,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "timeIn": to_iso(self.time_in),
            "timeOut": to_iso(self.time_out),
            "locationIn": self.location_in.to_document() if self.location_in else None,
            "locationOut": self.location_out.to_document() if self.location_out else None,
            "originalTimeIn": to_iso(self.original_time_in),
            "originalTimeOut": to_iso(self.original_time_out),
        }


@dataclass(frozen=True)
class SessionState:
    """A user's current OPEN record if any, else their most recently closed one today."""

    open_record: Optional[AttendanceRecord] = None
    last_closed: Optional[AttendanceRecord] = None

    @property
    def is_clocked_in(self) -> bool:
        return self.open_record is not None

    @classmethod
    def from_records(
        cls,
        open_record: Optional[AttendanceRecord],
        todays_records: Iterable[AttendanceRecord],
    ) -> "SessionState":
        if open_record is not None:
            return cls(open_record=open_record)
        closed = [r for r in todays_records if r.time_out is not None]
        if not closed:
            return cls()
        return cls(last_closed=max(closed, key=lambda r: r.time_out))

    def to_document(self) -> dict:
        return {
            "isClockedIn": self.is_clocked_in,
            "openRecord": self.open_record.to_document() if self.open_record else None,
            "lastClosed": self.last_closed.to_document() if self.last_closed else None,
        }


def sort_records(records: Iterable[AttendanceRecord]) -> List[AttendanceRecord]:
    """Order by (date desc, timeIn desc); a missing timeIn sorts as epoch-zero."""
    return sorted(records, key=lambda r: (r.work_date, r.time_in or _EPOCH), reverse=True)
