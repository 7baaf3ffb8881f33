"""
Runtime settings, read from the environment once at import.
"""
import os


def _flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


APP_NAME = os.getenv("APP_NAME", "SportZone E-commerce API")
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 8000))

# bcrypt cost factor
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 12))

# Artificial latency of the simulated mail sender, in seconds
EMAIL_DELAY_SECONDS = float(os.getenv("EMAIL_DELAY_SECONDS", 0.5))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("LOG_DIR") or None

SEED_CATALOG = _flag("SEED_CATALOG", True)

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
