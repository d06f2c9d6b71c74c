"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TOKEN_MAX_AGE_SECONDS = 120
DEFAULT_GEOFENCE_RADIUS_METERS = 200
DEFAULT_CLOCK_TICK_SECONDS = 60
DEFAULT_DISPLAY_TIMEZONE = "Asia/Kolkata"

COURSE_CHANNEL_PREFIX = "courses"
LOCATION_CHANNEL = "locations"

COURSE_NOT_FOUND_MESSAGE = "The requested course could not be found."
LOAD_FAILED_MESSAGE = "Failed to load course data. Please try again later."
LIVE_UPDATE_FAILED_MESSAGE = "Live updates are interrupted. The code shown may be out of date."
STUDENT_NOT_FOUND_MESSAGE = "Student not found"
ALREADY_MARKED_MESSAGE = "Attendance already marked for this course today"
