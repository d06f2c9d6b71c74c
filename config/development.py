import os

from config.config import *  # noqa: F401,F403
from config.config import env_bool, env_list

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Apply schema.sql and create the bootstrap admin on startup (idempotent).
AUTO_INIT_DB = env_bool("AUTO_INIT_DB", "1")

CORS_ALLOWED_ORIGINS = env_list("CORS_ALLOWED_ORIGINS") or "*"
