import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent / ".env")


def _get_bool(name: str, fallback: str = "false") -> bool:
    return os.getenv(name, fallback).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./farm_orders.db")
    database_echo: bool = _get_bool("DATABASE_ECHO")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    # internal error text is only returned to callers when explicitly enabled
    expose_error_detail: bool = _get_bool("EXPOSE_ERROR_DETAIL")


settings = Settings()
