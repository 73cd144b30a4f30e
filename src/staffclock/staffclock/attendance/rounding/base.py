from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime


class RoundingRule(ABC):
    """Strategy Pattern: a site-specific way of snapping clock times."""

    @abstractmethod
    def matches(self, area: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def adjust(self, instant: datetime) -> datetime:
        raise NotImplementedError
