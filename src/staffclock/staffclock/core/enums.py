from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role used for authorization."""

    ADMIN = "admin"
    STAFF = "staff"


class ClockAction(str, Enum):
    """Clock event requested by a user. Values match the client payload."""

    CLOCK_IN = "clockIn"
    CLOCK_OUT = "clockOut"


class GateVerdict(str, Enum):
    ALLOW = "ALLOW"
    SPLIT_REQUIRED = "SPLIT_REQUIRED"
    BLOCK_LUNCH = "BLOCK_LUNCH"
    BLOCK_COOLDOWN = "BLOCK_COOLDOWN"
    BLOCK_ALREADY_CLOCKED_IN = "BLOCK_ALREADY_CLOCKED_IN"
    BLOCK_NOT_CLOCKED_IN = "BLOCK_NOT_CLOCKED_IN"
