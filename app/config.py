import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./marketplace.db")

# Security - CRITICAL: No default secret key in production
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
# Cookie used by browser clients; mobile clients send a Bearer token instead
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "session_token")

# Frontend base URL (used for CORS defaults)
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
ALLOWED_ORIGINS = [
    origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", FRONTEND_URL).split(",") if origin.strip()
]

ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"

# Push gateway (Expo/FCM compatible JSON endpoint). Unset = log only.
PUSH_GATEWAY_URL = os.getenv("PUSH_GATEWAY_URL")
PUSH_GATEWAY_TIMEOUT = float(os.getenv("PUSH_GATEWAY_TIMEOUT", "5.0"))

# Availability
WORK_START_HOUR = int(os.getenv("WORK_START_HOUR", "9"))
WORK_END_HOUR = int(os.getenv("WORK_END_HOUR", "17"))
SLOT_INTERVAL_MINUTES = int(os.getenv("SLOT_INTERVAL_MINUTES", "30"))
DEFAULT_BOOKING_DURATION_MINUTES = 60
MAX_AVAILABILITY_DAYS = 60
# "skip": bookings without a requested time never block a slot
UNTIMED_BOOKING_POLICY = "skip"

# Booking lifecycle
INSTANT_BOOKING_EXPIRY_MINUTES = int(os.getenv("INSTANT_BOOKING_EXPIRY_MINUTES", "30"))
RESCHEDULE_CUTOFF_MINUTES = int(os.getenv("RESCHEDULE_CUTOFF_MINUTES", "15"))

# Dynamic pricing surcharge: multiplier drawn from [1.0, 1.0 + MAX_SURCHARGE)
MAX_SURCHARGE = float(os.getenv("MAX_SURCHARGE", "0.3"))
