import os

from dotenv import load_dotenv


load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///./appointments.db"


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")

DATABASE_URL = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
DATABASE_ECHO = _get_bool(os.getenv("DATABASE_ECHO"), default=False)

CORS_ALLOW_ORIGINS = _get_list(os.getenv("CORS_ALLOW_ORIGINS"), ["http://localhost:3000"])

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("API_PORT", "8000"))
API_RELOAD = _get_bool(os.getenv("API_RELOAD"), default=False)


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and DATABASE_URL == DEFAULT_DATABASE_URL:
        raise RuntimeError("DATABASE_URL must be set in production.")
