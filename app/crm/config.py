import os
from dataclasses import dataclass


DEFAULT_CATEGORY_PAGE_SIZE = 3
DEFAULT_REDIRECT_DELAY_MS = 1500
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class Settings:
    secret_key: str
    env: str
    database_url: str
    log_level: str

    api_base_url: str
    category_page_size: int
    redirect_delay_ms: int


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _getenv_int(name: str, default: int) -> int:
    raw = _getenv(name)
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _getenv_log_level(name: str, default: str) -> str:
    level = _getenv(name, default).upper()
    return level if level in LOG_LEVELS else default


def load_settings() -> Settings:
    return Settings(
        secret_key=_getenv("SECRET_KEY", "change-me"),
        env=_getenv("ENV", "development"),
        database_url=_getenv("DATABASE_URL", "sqlite:///crm.db"),
        log_level=_getenv_log_level("LOG_LEVEL", DEFAULT_LOG_LEVEL),
        api_base_url=_getenv("API_BASE_URL", "http://localhost:8080").rstrip("/"),
        category_page_size=_getenv_int("CATEGORY_PAGE_SIZE", DEFAULT_CATEGORY_PAGE_SIZE),
        redirect_delay_ms=_getenv_int("REDIRECT_DELAY_MS", DEFAULT_REDIRECT_DELAY_MS),
    )


def load_config() -> dict:
    s = load_settings()
    return {
        "SECRET_KEY": s.secret_key,
        "ENV": s.env,
        "DATABASE_URL": s.database_url,
        "LOG_LEVEL": s.log_level,
        "API_BASE_URL": s.api_base_url,
        # fixed page size for /api/category?pno=N
        "CATEGORY_PAGE_SIZE": s.category_page_size,
        # delay before a successful form submit navigates away
        "REDIRECT_DELAY_MS": s.redirect_delay_ms,
        "SESSION_COOKIE_HTTPONLY": True,
        "SESSION_COOKIE_SAMESITE": "Lax",
    }
