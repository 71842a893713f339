"""Default constants for quota windows and status thresholds."""

from __future__ import annotations

# Short (session) window
DEFAULT_WINDOW_HOURS = 5
FALLBACK_WINDOW_HOURS = 1  # used by the calculator when the window length is unusable
MAX_WINDOW_HOURS = 24

# Weekly window
WEEK_DAYS = 7
DEFAULT_WORK_DAYS = 5            # calculator fallback for an unusable work-day count
DEFAULT_STATE_WORK_DAYS = 7      # work days pre-filled in a fresh state
MIN_WORK_DAYS = 1
MAX_WORK_DAYS = 7
DEFAULT_WEEKLY_RESET_HOUR = 15   # hour of day for a freshly defaulted weekly reset

# Short window status thresholds (percentage points of usage ahead of time)
SESSION_WARNING_DEVIATION = 0.0
SESSION_CRITICAL_DEVIATION = 10.0
SESSION_CRITICAL_FORECAST = 150.0  # forecast % that forces critical regardless of deviation

# Weekly status thresholds
WEEKLY_CRITICAL_DEVIATION = 15.0
WEEKLY_WARNING_DEVIATION = 5.0
WEEKLY_PACE_TOLERANCE = 1.2  # daily pace above max safe × this is a warning

# Persisted state invalidation
STALE_SESSION_HOURS = 12

# Clock
TIME_MODES = ("local", "utc")
DEFAULT_TIME_MODE = "local"

# Display
REFRESH_SECONDS = 1
BAR_WIDTH = 30

# Storage
DB_FILE_NAME = "quota-pace.db"
LOG_FILE_NAME = "quota-pace.log"
STATE_KEY = "quota_inputs"
