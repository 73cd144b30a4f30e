from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, Location


class AttendanceRepository(Protocol):
    """Durable store of attendance records.

    Implementations raise ``RepositoryError`` for store/network failures.
    """

    def find_by_user_and_date(self, user_id: str, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def find_by_user(self, user_id: str, *, limit: Optional[int] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def find_by_date_range(self, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def find_open_session_for_user(self, user_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_todays_records(self, user_id: str, today: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create(self, record: AttendanceRecord) -> int:
        raise NotImplementedError

    def update(self, record_id: int, **fields) -> bool:
        """Partial update. Accepts ``time_out``, ``original_time_out``, ``location_out``."""

        raise NotImplementedError

    def close_and_continue(
        self,
        *,
        record_id: int,
        time_out: datetime,
        original_time_out: datetime,
        location_out: Location,
        continuations: Sequence[AttendanceRecord],
    ) -> list[int]:
        """Close ``record_id`` and insert ``continuations`` as one atomic unit.

        Returns the ids of the inserted continuation records in order.
        """

        raise NotImplementedError
