import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG = LOG_LEVEL == "DEBUG"

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise ValueError("DATABASE_URL must be set in the environment")

# Admin API that serves properties, stats and user management
BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:3001").rstrip("/")

# Assignment endpoint lives on its own service in some deployments
ASSIGNMENT_BACKEND_URL = os.getenv("ASSIGNMENT_BACKEND_URL", BACKEND_URL).rstrip("/")

HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))

LOOKUP_DEBOUNCE_SECONDS = float(os.getenv("LOOKUP_DEBOUNCE_SECONDS", "0.5"))

ALLOWED_ORIGINS_RAW = os.getenv("ALLOWED_ORIGINS")
if not ALLOWED_ORIGINS_RAW:
    raise ValueError("ALLOWED_ORIGINS must be set in the environment")

ALLOWED_ORIGINS: list[str] = [
    origin.strip() for origin in ALLOWED_ORIGINS_RAW.split(",")
]
