"""Settings shared by every environment; each environment module overrides what it needs."""

import os


def env_list(name: str, default: str) -> list:
    """Comma-separated env var -> list of lower-cased names."""
    raw = os.getenv(name, default)
    return [part.strip().lower() for part in raw.split(",") if part.strip()]


def env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
JWT_SECRET = os.getenv("JWT_SECRET", SECRET_KEY)
JWT_EXPIRY_HOURS = int(os.getenv("JWT_EXPIRY_HOURS", "24"))

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "class_attendance"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
SESSION_COOKIE_SECURE = env_flag("SESSION_COOKIE_SECURE", "0")

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")

# Role groups: which literal role names may do what.
UNRESTRICTED_ROLES = env_list("UNRESTRICTED_ROLES", "admin,advisor,principal,hod")
WINDOW_RESTRICTED_ROLES = env_list("WINDOW_RESTRICTED_ROLES", "teacher")
STUDENT_MANAGER_ROLES = env_list("STUDENT_MANAGER_ROLES", "admin,advisor,principal,hod")
TIMETABLE_MANAGER_ROLES = env_list("TIMETABLE_MANAGER_ROLES", "admin,principal,hod")
ADMIN_ROLES = env_list("ADMIN_ROLES", "admin")
STATS_ROLES = env_list("STATS_ROLES", "admin,principal,hod")

# "now": periods of today's weekday; "date": periods of the marked date's weekday
WINDOW_REFERENCE_DAY = os.getenv("WINDOW_REFERENCE_DAY", "now").strip().lower()
# Bulk marking skips the timetable window unless this is on
BULK_WINDOW_CHECK = env_flag("BULK_WINDOW_CHECK", "0")

LOW_ATTENDANCE_THRESHOLD = int(os.getenv("LOW_ATTENDANCE_THRESHOLD", "75"))
REPORT_TITLE = os.getenv("REPORT_TITLE", "PGP Attendance Report")
