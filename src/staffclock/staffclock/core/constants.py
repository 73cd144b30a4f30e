"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_COOLDOWN_MINUTES = 60
DEFAULT_LUNCH_START_HOUR = 12
DEFAULT_LUNCH_END_HOUR = 13
DEFAULT_ROUNDING_AREAS = ("ampang",)

DEFAULT_HISTORY_LIMIT = 7
DEFAULT_REPORT_DAYS = 30

DEFAULT_GEOCODER_URL = "https://nominatim.openstreetmap.org/reverse"
DEFAULT_GEOCODER_TIMEOUT_SECONDS = 5.0

UNKNOWN_PLACE = "Unknown"
GENERIC_RECORD_FAILURE = "Failed to record. Please try again."
RECORDS_UNAVAILABLE = "Failed to load records. Please try again."
