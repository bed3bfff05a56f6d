"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_LUNCH_START = time(12, 0)
DEFAULT_LUNCH_END = time(13, 0)
DEFAULT_CUTOFF_TIME = time(17, 0)
DEFAULT_CUTOFF_CHECK_SECONDS = 30
DEFAULT_HISTORY_LIMIT = 30
DEFAULT_REPORT_DAYS = 7
