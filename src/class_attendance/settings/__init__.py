import os


def get_settings_module() -> str:
    """Settings module for the current APP_ENV (default: development)."""

    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "class_attendance.settings.production"

    if env in {"test", "testing"}:
        return "class_attendance.settings.testing"

    return "class_attendance.settings.development"
