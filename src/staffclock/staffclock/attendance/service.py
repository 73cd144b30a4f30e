from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Callable, List, Optional, Sequence, Tuple

from ..common.datetime_utils import now_local
from ..common.locks import KeyedLocks
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import ClockAction, GateVerdict
from ..core.exceptions import RepositoryError
from ..geolocation.resolver import GeolocationResolver, resolve_or_unknown
from ..users.model import StaffUser
from .gate import GateDecision, SessionGate
from .model import AttendanceRecord, Location, SessionState, sort_records
from .repository import AttendanceRepository
from .rounding.policy import TimeRoundingPolicy
from .split import plan_split

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClockResult:
    ok: bool
    decision: GateDecision
    records: Tuple[AttendanceRecord, ...] = ()
    state: Optional[SessionState] = None

    @property
    def record_ids(self) -> List[int]:
        return [r.record_id for r in self.records if r.record_id is not None]

    def to_document(self) -> dict:
        doc = {"success": self.ok, **self.decision.to_document()}
        doc["records"] = [r.to_document() for r in self.records]
        doc["state"] = self.state.to_document() if self.state else None
        return doc


class AttendanceService:
    """Turns clock requests into persisted attendance records.

    Each request runs resolve -> gate -> round -> persist. The
    read-decide-write part is serialized per user.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        resolver: GeolocationResolver,
        *,
        gate: SessionGate | None = None,
        rounding: TimeRoundingPolicy | None = None,
        locks: KeyedLocks | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._resolver = resolver
        self._gate = gate or SessionGate()
        self._rounding = rounding or TimeRoundingPolicy.for_areas()
        self._locks = locks or KeyedLocks()
        self._clock = clock

    def get_session_state(self, user_id: str, *, today: date | None = None) -> SessionState:
        today = today or self._clock().date()
        open_record = self._attendance.find_open_session_for_user(user_id)
        if open_record is not None:
            return SessionState(open_record=open_record)
        return SessionState.from_records(None, self._attendance.find_todays_records(user_id, today))

    def get_history(self, user_id: str, *, limit: int = DEFAULT_HISTORY_LIMIT) -> List[AttendanceRecord]:
        limit = max(int(limit), 0)
        return sort_records(self._attendance.find_by_user(user_id, limit=limit))[:limit]

    def check_in(self, user: StaffUser, *, lat: float, lng: float, now: datetime | None = None) -> ClockResult:
        return self.clock(ClockAction.CLOCK_IN, user, now=now, lat=lat, lng=lng)

    def check_out(self, user: StaffUser, *, lat: float, lng: float, now: datetime | None = None) -> ClockResult:
        return self.clock(ClockAction.CLOCK_OUT, user, now=now, lat=lat, lng=lng)

    def clock(
        self,
        action: ClockAction,
        user: StaffUser,
        *,
        lat: float,
        lng: float,
        now: datetime | None = None,
    ) -> ClockResult:
        # Whole seconds, matching the DATETIME columns.
        now = (now or self._clock()).replace(microsecond=0)
        location = resolve_or_unknown(self._resolver, lat, lng)

        with self._locks.hold(user.uid):
            state = self.get_session_state(user.uid, today=now.date())
            decision = self._gate.decide(action, now, state)
            if decision.blocked:
                logger.info(
                    "clock request blocked",
                    extra={"uid": user.uid, "action": action.value, "verdict": decision.verdict.value},
                )
                return ClockResult(ok=False, decision=decision, state=state)

            if action == ClockAction.CLOCK_IN:
                records: Sequence[AttendanceRecord] = [self._open_session(user, now, location)]
            elif decision.verdict == GateVerdict.SPLIT_REQUIRED:
                records = self._close_split_session(state.open_record, now, location)
            else:
                records = [self._close_session(state.open_record, now, location)]

            refreshed = self.get_session_state(user.uid, today=now.date())

        logger.info(
            "clock request accepted",
            extra={"uid": user.uid, "action": action.value, "verdict": decision.verdict.value, "records": len(records)},
        )
        return ClockResult(ok=True, decision=decision, records=tuple(records), state=refreshed)

    def _open_session(self, user: StaffUser, now: datetime, location: Location) -> AttendanceRecord:
        record = AttendanceRecord(
            record_id=None,
            user_id=user.uid,
            display_name=user.display_name,
            email=user.email,
            work_date=now.date(),
            time_in=self._rounding.round(now, location.area),
            location_in=location,
            original_time_in=now,
        )
        try:
            record_id = self._attendance.create(record)
        except RepositoryError:
            written = self._find_written_session(user.uid, now)
            if written is None:
                raise
            logger.warning("clock-in write reported failure but record exists", extra={"uid": user.uid, "record_id": written.record_id})
            return written
        return record.with_id(record_id)

    def _find_written_session(self, user_id: str, original_time_in: datetime) -> Optional[AttendanceRecord]:
        try:
            open_record = self._attendance.find_open_session_for_user(user_id)
        except RepositoryError:
            logger.exception("read-after-write check failed", extra={"uid": user_id})
            return None
        if open_record is not None and open_record.original_time_in == original_time_in:
            return open_record
        return None

    def _close_session(self, record: AttendanceRecord, now: datetime, location: Location) -> AttendanceRecord:
        time_out = self._rounding.round(now, location.area)
        if record.time_in is not None and time_out < record.time_in:
            time_out = record.time_in

        self._attendance.update(
            record.record_id,
            time_out=time_out,
            original_time_out=now,
            location_out=location,
        )
        return replace(record, time_out=time_out, original_time_out=now, location_out=location)

    def _close_split_session(self, record: AttendanceRecord, now: datetime, location: Location) -> List[AttendanceRecord]:
        plan = plan_split(
            record,
            time_out=self._rounding.round(now, location.area),
            original_time_out=now,
            location_out=location,
        )
        ids = self._attendance.close_and_continue(
            record_id=record.record_id,
            time_out=plan.close_at,
            original_time_out=now,
            location_out=location,
            continuations=plan.continuations,
        )
        logger.info(
            "session split across midnight",
            extra={"record_id": record.record_id, "segments": len(plan.continuations) + 1},
        )
        closed = replace(record, time_out=plan.close_at, original_time_out=now, location_out=location)
        return [closed] + [c.with_id(i) for c, i in zip(plan.continuations, ids)]
