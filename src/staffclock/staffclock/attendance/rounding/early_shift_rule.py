from __future__ import annotations

from datetime import datetime, timedelta

from .base import RoundingRule


class EarlyShiftRoundingRule(RoundingRule):
    """Snap 07:xx clock times to the early-shift marks for areas containing ``keyword``.

    07:00-07:05 -> 07:00, 07:06-07:15 -> 07:15, 07:16-07:30 -> 07:30,
    07:31-07:59 -> 08:00. Other hours pass through.
    """

    HOUR = 7

    def __init__(self, keyword: str):
        self._keyword = keyword.strip().lower()

    @property
    def keyword(self) -> str:
        return self._keyword

    def matches(self, area: str) -> bool:
        return bool(self._keyword) and self._keyword in (area or "").lower()

    def adjust(self, instant: datetime) -> datetime:
        if instant.hour != self.HOUR:
            return instant

        minute = instant.minute
        base = instant.replace(minute=0, second=0, microsecond=0)
        if minute <= 5:
            return base
        if minute <= 15:
            return base.replace(minute=15)
        if minute <= 30:
            return base.replace(minute=30)
        return base + timedelta(hours=1)
