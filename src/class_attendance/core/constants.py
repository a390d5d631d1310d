"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Elapsed fraction of a session (inclusive upper bounds).
PRESENT_MAX_FRACTION = 0.15
LATE_MAX_FRACTION = 0.40

PRESENT_SCORE = 1.0
LATE_SCORE = 0.5
ABSENT_SCORE = 0.0

CHECKOUT_GRACE_MINUTES = 15

EARTH_RADIUS_METERS = 6371000

DEFAULT_STORE_TIMEOUT_SECONDS = 5.0

DEFAULT_GEOFENCE_RADIUS_METERS = 100
