"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# String field lengths
MAX_EMAIL_LENGTH = 255
MAX_NAME_LENGTH = 255
MAX_DESCRIPTION_LENGTH = 255
MAX_URL_LENGTH = 512
MAX_TIMEZONE_LENGTH = 64
MAX_PERMISSION_NAME_LENGTH = 100
MAX_PERMISSION_MODULE_LENGTH = 50
MAX_PERMISSION_ACTION_LENGTH = 20
MAX_ROLE_LENGTH = 20
MAX_TASK_STATUS_LENGTH = 20

# Password requirements
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128
BCRYPT_ROUNDS = 12

# Pagination defaults
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# Token settings
ACCESS_TOKEN_JTI_LENGTH = 32

# Secret key requirements
MIN_SECRET_KEY_LENGTH = 32
DEFAULT_INSECURE_SECRET = "change-me-in-production"

# Attendance
DEFAULT_TIMEZONE = "UTC"
SECONDS_PER_HOUR = 3600
WORKWEEK_LENGTH = 5
MAX_REPORT_RANGE_DAYS = 366

# Dashboards
RECENT_TASKS_LIMIT = 5
COMPANY_FEED_LIMIT = 4
MONTHLY_TASK_HOURS_GOAL = 160
MONTHLY_ATTENDANCE_GOAL = 22
PRODUCTIVITY_GOAL = 100
