import os


def get_settings_module() -> str:
    """Settings module for ``APP_ENV`` (default: development)."""
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "staffclock.settings.production"

    if env in {"test", "testing"}:
        return "staffclock.settings.testing"

    return "staffclock.settings.development"


def env_list(name: str, default: str = "") -> list[str]:
    """Comma-separated environment variable as a list of non-empty items."""
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]
