from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..core.constants import DEFAULT_COOLDOWN_MINUTES, DEFAULT_LUNCH_END_HOUR, DEFAULT_LUNCH_START_HOUR
from ..core.enums import ClockAction, GateVerdict
from .model import SessionState


@dataclass(frozen=True)
class GateDecision:
    verdict: GateVerdict
    message: str = ""
    remaining_minutes: Optional[int] = None

    @property
    def blocked(self) -> bool:
        return self.verdict not in (GateVerdict.ALLOW, GateVerdict.SPLIT_REQUIRED)

    def to_document(self) -> dict:
        doc = {"verdict": self.verdict.value, "message": self.message}
        if self.remaining_minutes is not None:
            doc["remainingMinutes"] = self.remaining_minutes
        return doc


ALLOW = GateDecision(GateVerdict.ALLOW)
SPLIT_REQUIRED = GateDecision(GateVerdict.SPLIT_REQUIRED)


class SessionGate:
    """Decide whether a clock action may proceed against the user's session state.

    Never raises for a well-formed request; blocking outcomes carry a
    user-facing message.
    """

    def __init__(
        self,
        *,
        cooldown_minutes: int = DEFAULT_COOLDOWN_MINUTES,
        lunch_start_hour: int = DEFAULT_LUNCH_START_HOUR,
        lunch_end_hour: int = DEFAULT_LUNCH_END_HOUR,
    ):
        self._cooldown = timedelta(minutes=int(cooldown_minutes))
        self._lunch_start = int(lunch_start_hour)
        self._lunch_end = int(lunch_end_hour)

    def in_lunch_blackout(self, now: datetime) -> bool:
        return self._lunch_start <= now.hour < self._lunch_end

    def decide(self, action: ClockAction, now: datetime, state: SessionState) -> GateDecision:
        if self.in_lunch_blackout(now):
            return GateDecision(
                GateVerdict.BLOCK_LUNCH,
                f"Clocking is paused during lunch ({self._lunch_start:02d}:00-{self._lunch_end:02d}:00).",
            )

        if action == ClockAction.CLOCK_IN:
            return self._decide_clock_in(now, state)
        return self._decide_clock_out(now, state)

    def _decide_clock_in(self, now: datetime, state: SessionState) -> GateDecision:
        if state.open_record is not None:
            return GateDecision(GateVerdict.BLOCK_ALREADY_CLOCKED_IN, "You are already clocked in.")

        last = state.last_closed
        if last is not None and last.time_out is not None:
            elapsed = now - last.time_out
            if elapsed < self._cooldown:
                remaining = max(1, math.ceil((self._cooldown - elapsed).total_seconds() / 60))
                return GateDecision(
                    GateVerdict.BLOCK_COOLDOWN,
                    f"Please wait {remaining} more minute(s) before starting a new session.",
                    remaining_minutes=remaining,
                )
        return ALLOW

    def _decide_clock_out(self, now: datetime, state: SessionState) -> GateDecision:
        record = state.open_record
        if record is None:
            return GateDecision(GateVerdict.BLOCK_NOT_CLOCKED_IN, "You are not clocked in.")

        opened_on = record.time_in.date() if record.time_in else record.work_date
        if now.date() != opened_on:
            return SPLIT_REQUIRED
        return ALLOW
