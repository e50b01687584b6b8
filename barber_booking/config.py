# barber_booking/config.py

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# SQLite database (file-based) unless overridden
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./barber.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# Security - no default secret key in production
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "change-me-later"  # noqa: S105 - Dev fallback only

JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

# Bootstrap administrator, created on startup when both are set
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Seed values for the single shop settings row
DEFAULT_SHOP_NAME = os.getenv("DEFAULT_SHOP_NAME", "Barbershop")
DEFAULT_SLOT_DURATION_MINUTES = int(os.getenv("DEFAULT_SLOT_DURATION_MINUTES", "30"))
DEFAULT_MORNING_START = os.getenv("DEFAULT_MORNING_START", "09:00")
DEFAULT_MORNING_END = os.getenv("DEFAULT_MORNING_END", "13:00")
DEFAULT_AFTERNOON_START = os.getenv("DEFAULT_AFTERNOON_START", "16:00")
DEFAULT_AFTERNOON_END = os.getenv("DEFAULT_AFTERNOON_END", "20:00")
# 0=Sun, 1=Mon, ..., 6=Sat
DEFAULT_WORKING_DAYS = [
    int(day) for day in os.getenv("DEFAULT_WORKING_DAYS", "1,2,3,4,5,6").split(",") if day.strip()
]
