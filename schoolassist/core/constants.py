"""
Application-wide constants.
"""

# Pagination
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100

# Scheduling and statistics windows
RECENT_WINDOW_DAYS = 7
MONTH_WINDOW_DAYS = 30
RECENT_REPORTS = 5
DEFAULT_RECENT_DISRUPTIONS = 10
