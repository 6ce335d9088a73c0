"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_RECENT_LIMIT = 5
NEW_HIRE_WINDOW_DAYS = 30
DUE_SOON_WINDOW_DAYS = 7
