from config.config import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": "localhost",
    "port": 3306,
    "user": "root",
    "password": "",
    "database": "attendance_link_test",
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False

TOKEN_MAX_AGE_SECONDS = 120
GEOFENCE_RADIUS_METERS = 200
DISPLAY_TIMEZONE = "Asia/Kolkata"
CLOCK_TICK_SECONDS = 60

CORS_ALLOWED_ORIGINS = "*"
