from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from ...core.constants import DEFAULT_ROUNDING_AREAS
from .base import RoundingRule
from .early_shift_rule import EarlyShiftRoundingRule


@dataclass
class TimeRoundingPolicy:
    """Choose the rounding rule for a resolved area; first match wins."""

    rules: List[RoundingRule] = field(default_factory=list)

    @classmethod
    def for_areas(cls, areas: Iterable[str] = DEFAULT_ROUNDING_AREAS) -> "TimeRoundingPolicy":
        return cls(rules=[EarlyShiftRoundingRule(a) for a in areas if a and a.strip()])

    def rule_for(self, area: str) -> Optional[RoundingRule]:
        for rule in self.rules:
            if rule.matches(area):
                return rule
        return None

    def round(self, instant: datetime, area: str) -> datetime:
        rule = self.rule_for(area)
        if rule is None:
            return instant
        return rule.adjust(instant)
