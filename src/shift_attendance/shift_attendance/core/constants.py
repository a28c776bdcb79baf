"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DAYS_PER_WEEK = 7
CHECKIN_WINDOW_MINUTES = 15
SWEEP_GRACE_MINUTES = 10
SWEEP_CHUNK_SIZE = 500
MISSED_LIST_LIMIT = 200
ADMIN_MISSED_LIMIT = 300

EARTH_RADIUS_METERS = 6_371_000
MAX_DISTANCE_METERS = 200
LOCATION_TIMEOUT_SECONDS = 15
LOCATION_MAX_AGE_SECONDS = 30

TIME_COLUMN = "Time"
TRUE_TOKEN = "TRUE"
