# config.py
# Centralized configuration values, read from the environment (.env supported).

import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_NAME = os.getenv("DATABASE_NAME")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Shared secret the identity provider presents when exchanging a verified
# sign-in for a session token
IDENTITY_PROVIDER_SECRET = os.getenv("IDENTITY_PROVIDER_SECRET", "")
SESSION_TTL_DAYS = int(os.getenv("SESSION_TTL_DAYS", "7"))

# Matching / catalog limits
FEED_BATCH_LIMIT = int(os.getenv("FEED_BATCH_LIMIT", "50"))
FEED_MAX_LIMIT = 100
MAX_ACTIVE_PROJECTS = int(os.getenv("MAX_ACTIVE_PROJECTS", "5"))

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
PORT = int(os.getenv("PORT", "8000"))
