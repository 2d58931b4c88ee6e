from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


def _as_bool(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def _csv_list(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass(frozen=True)
class Settings:
    # Store
    api_url: str
    api_timeout_seconds: float
    api_mutation_timeout_seconds: float | None

    # Table
    page_size: int
    page_size_options: tuple[int, ...]
    filterable_fields: tuple[str, ...]

    # Export
    export_path: str

    # Core/runtime
    log_level: str
    run_env: str

    # Audit trail for create/update/delete calls
    audit_trace: bool = False
    audit_log_path: str = "logs/mutations.jsonl"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()
    page_size = int(os.getenv("PAGE_SIZE", "5"))
    page_size_options = tuple(int(v) for v in _csv_list(os.getenv("PAGE_SIZE_OPTIONS", "5,10,20")))
    if page_size not in page_size_options:
        raise RuntimeError(
            f"PAGE_SIZE={page_size} must be one of PAGE_SIZE_OPTIONS={','.join(map(str, page_size_options))}"
        )

    mutation_timeout = os.getenv("API_MUTATION_TIMEOUT_SECONDS")
    return Settings(
        api_url=os.getenv("API_URL", "http://localhost:3001").rstrip("/"),
        api_timeout_seconds=float(os.getenv("API_TIMEOUT_SECONDS", "10")),
        api_mutation_timeout_seconds=float(mutation_timeout) if mutation_timeout else None,
        page_size=page_size,
        page_size_options=page_size_options,
        filterable_fields=tuple(_csv_list(os.getenv("FILTERABLE_FIELDS", "name,location,industry"))),
        export_path=os.getenv("EXPORT_PATH", "companies_directory.csv"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        run_env=os.getenv("RUN_ENV", "local"),
        audit_trace=_as_bool(os.getenv("AUDIT_TRACE")),
        audit_log_path=os.getenv("AUDIT_LOG_PATH", "logs/mutations.jsonl"),
    )
