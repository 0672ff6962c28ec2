import os

from dotenv import load_dotenv

load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")

DATABASE_URL = os.getenv("DATABASE_URL")
SQL_ECHO = _get_bool(os.getenv("SQL_ECHO"), default=False)

CORS_ALLOWED_ORIGINS = _get_list(os.getenv("CORS_ALLOWED_ORIGINS"), default=["http://localhost:3000"])

DEFAULT_DURATION_MINUTES = int(os.getenv("DEFAULT_DURATION_MINUTES", "30"))
DEFAULT_SLOT_INTERVAL_MINUTES = int(os.getenv("DEFAULT_SLOT_INTERVAL_MINUTES", "30"))
DEFAULT_MAX_RESULTS = int(os.getenv("DEFAULT_MAX_RESULTS", "10"))
MAX_RESULTS_LIMIT = int(os.getenv("MAX_RESULTS_LIMIT", "100"))
DEFAULT_BUFFER_AFTER_MINUTES = int(os.getenv("DEFAULT_BUFFER_AFTER_MINUTES", "0"))


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and not DATABASE_URL:
        raise RuntimeError("DATABASE_URL must be set in production.")

    positive_settings = {
        "DEFAULT_DURATION_MINUTES": DEFAULT_DURATION_MINUTES,
        "DEFAULT_SLOT_INTERVAL_MINUTES": DEFAULT_SLOT_INTERVAL_MINUTES,
        "DEFAULT_MAX_RESULTS": DEFAULT_MAX_RESULTS,
        "MAX_RESULTS_LIMIT": MAX_RESULTS_LIMIT,
    }
    for name, value in positive_settings.items():
        if value <= 0:
            raise RuntimeError(f"{name} must be a positive integer.")

    if DEFAULT_MAX_RESULTS > MAX_RESULTS_LIMIT:
        raise RuntimeError("DEFAULT_MAX_RESULTS must not exceed MAX_RESULTS_LIMIT.")

    if DEFAULT_BUFFER_AFTER_MINUTES < 0:
        raise RuntimeError("DEFAULT_BUFFER_AFTER_MINUTES must not be negative.")
