"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TOKEN_HOURS = 24
DEFAULT_LOW_ATTENDANCE_THRESHOLD = 75
DEFAULT_DASHBOARD_STUDENT_LIMIT = 10
DEFAULT_REPORT_TITLE = "PGP Attendance Report"

DEFAULT_COURSE = "B.Tech"
DEFAULT_YEAR = "III"
DEFAULT_BRANCH = "CSE"

DEFAULT_PERIOD_COLOR = "white"
