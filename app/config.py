import logging
import os
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

RPM_VARIANTS = ("standar", "mendalam")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} is not a number, using {default}")
        return default
    if value < minimum:
        logger.warning(f"{name}={value} is below {minimum}, using {default}")
        return default
    return value


def _env_choice(name: str, default: str, choices) -> str:
    value = os.getenv(name, default).strip().lower()
    if value not in choices:
        logger.warning(f"{name}={value!r} is not one of {', '.join(choices)}, using {default!r}")
        return default
    return value


class Config:
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    SECRET_KEY = os.getenv("SECRET_KEY", "change_this_secret_locally")
    ENV = os.getenv("ENV", "DEVELOPMENT")
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Session cookie lifetime, also the idle lifetime of a stored form
    SESSION_MAX_AGE = _env_int("SESSION_MAX_AGE", 3600 * 24, minimum=60)
    RPM_MAX_SESSIONS = _env_int("RPM_MAX_SESSIONS", 1000, minimum=1)

    # RPM behaviour
    RPM_VARIANT = _env_choice("RPM_VARIANT", "standar", RPM_VARIANTS)
    RPM_MAX_MEETINGS = _env_int("RPM_MAX_MEETINGS", 10)  # 0 = tanpa batas
    RPM_CLEAR_RESULT_ON_SUBMIT = _env_bool("RPM_CLEAR_RESULT_ON_SUBMIT", "true")
    RPM_SIGNATURE_CITY = os.getenv("RPM_SIGNATURE_CITY", "Cikarang")
    RPM_SCROLL_DELAY_MS = _env_int("RPM_SCROLL_DELAY_MS", 100)

    # Export ke Google Docs
    RPM_EXPORT_URL = os.getenv("RPM_EXPORT_URL", "https://docs.new")
    RPM_OPEN_EXPORT_BEFORE_COPY = _env_bool("RPM_OPEN_EXPORT_BEFORE_COPY", "false")

    @classmethod
    def max_meetings(cls):
        """Upper bound for jumlah pertemuan, None when unbounded."""
        return cls.RPM_MAX_MEETINGS if cls.RPM_MAX_MEETINGS > 0 else None
