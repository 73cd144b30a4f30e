import os

from ..core.constants import (
    DEFAULT_COOLDOWN_MINUTES,
    DEFAULT_GEOCODER_TIMEOUT_SECONDS,
    DEFAULT_GEOCODER_URL,
    DEFAULT_LUNCH_END_HOUR,
    DEFAULT_LUNCH_START_HOUR,
)
from . import env_list

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "staffclock"),
}

# Emails that get the admin role on first sign-in.
ADMIN_EMAILS = env_list("ADMIN_EMAILS")

GEOCODER_URL = os.getenv("GEOCODER_URL", DEFAULT_GEOCODER_URL)
GEOCODER_TIMEOUT_SECONDS = float(os.getenv("GEOCODER_TIMEOUT_SECONDS", str(DEFAULT_GEOCODER_TIMEOUT_SECONDS)))
GEOCODER_CONNECT_TIMEOUT_SECONDS = float(os.getenv("GEOCODER_CONNECT_TIMEOUT_SECONDS", str(GEOCODER_TIMEOUT_SECONDS)))
GEOCODER_USER_AGENT = os.getenv("GEOCODER_USER_AGENT", "staffclock/1.0")

COOLDOWN_MINUTES = int(os.getenv("COOLDOWN_MINUTES", str(DEFAULT_COOLDOWN_MINUTES)))
LUNCH_START_HOUR = int(os.getenv("LUNCH_START_HOUR", str(DEFAULT_LUNCH_START_HOUR)))
LUNCH_END_HOUR = int(os.getenv("LUNCH_END_HOUR", str(DEFAULT_LUNCH_END_HOUR)))

# Areas (substring, case-insensitive) that get the early-shift rounding rule.
ROUNDING_AREAS = env_list("ROUNDING_AREAS", "ampang")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
