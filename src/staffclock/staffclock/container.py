from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType
from typing import Any

from .attendance.gate import SessionGate
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.rounding.policy import TimeRoundingPolicy
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .geolocation.nominatim_resolver import NominatimResolver
from .geolocation.resolver import GeolocationResolver
from .reports.service import TimesheetReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    attendance_repo: AttendanceRepository
    users_repo: UserRepository
    resolver: GeolocationResolver

    auth_service: AuthService
    attendance_service: AttendanceService
    report_service: TimesheetReportService


def _setting(settings: ModuleType | Any, name: str, default: Any) -> Any:
    return getattr(settings, name, default)


def build_services(
    *,
    settings: ModuleType | Any,
    attendance_repo: AttendanceRepository,
    users_repo: UserRepository,
    resolver: GeolocationResolver,
) -> Container:
    """Wire services around already-built repositories and resolver."""
    gate = SessionGate(
        cooldown_minutes=_setting(settings, "COOLDOWN_MINUTES", 60),
        lunch_start_hour=_setting(settings, "LUNCH_START_HOUR", 12),
        lunch_end_hour=_setting(settings, "LUNCH_END_HOUR", 13),
    )
    rounding = TimeRoundingPolicy.for_areas(_setting(settings, "ROUNDING_AREAS", ["ampang"]))

    return Container(
        attendance_repo=attendance_repo,
        users_repo=users_repo,
        resolver=resolver,
        auth_service=AuthService(users_repo, admin_emails=_setting(settings, "ADMIN_EMAILS", [])),
        attendance_service=AttendanceService(attendance_repo, resolver, gate=gate, rounding=rounding),
        report_service=TimesheetReportService(attendance_repo),
    )


def build_container(*, settings: ModuleType | Any) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(settings.DB_CONFIG))
    resolver = NominatimResolver(
        url=_setting(settings, "GEOCODER_URL", "https://nominatim.openstreetmap.org/reverse"),
        timeout=_setting(settings, "GEOCODER_TIMEOUT_SECONDS", 5.0),
        connect_timeout=_setting(settings, "GEOCODER_CONNECT_TIMEOUT_SECONDS", None),
        user_agent=_setting(settings, "GEOCODER_USER_AGENT", "staffclock"),
    )
    return build_services(
        settings=settings,
        attendance_repo=MySQLAttendanceRepository(conn),
        users_repo=MySQLUserRepository(conn),
        resolver=resolver,
    )
