"""Runtime settings loaded from the environment (and an optional .env file)."""
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

MAX_SEARCH_ROWS = 10


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return float(raw)


class Settings(BaseModel):
    """All tunables for the service. Credentials are never hard-coded."""
    google_api_key: Optional[str] = None
    summary_model: str = "gemini-2.5-pro"
    summary_stream: bool = True
    summary_timeout: float = Field(default=120.0, gt=0)
    archive_base_url: str = "https://archive.org"
    search_rows: int = MAX_SEARCH_ROWS
    http_timeout: float = Field(default=15.0, gt=0)
    extract_timeout: float = Field(default=60.0, gt=0)
    upload_dir: Optional[Path] = None  # None -> system temp dir
    cache_ttl: Optional[float] = None  # seconds; None keeps entries for the process lifetime
    host: str = "0.0.0.0"
    port: int = 8080

    @field_validator("search_rows")
    @classmethod
    def cap_search_rows(cls, v: int) -> int:
        """Never consider more than MAX_SEARCH_ROWS archive items."""
        if v < 1:
            raise ValueError("search_rows must be positive")
        return min(v, MAX_SEARCH_ROWS)

    @field_validator("archive_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("cache_ttl")
    @classmethod
    def validate_ttl(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("cache_ttl must be positive")
        return v

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, reading .env first."""
        load_dotenv()
        values = {
            "google_api_key": os.getenv("GOOGLE_API_KEY") or None,
            "summary_stream": _env_bool("PDFSCOUT_SUMMARY_STREAM", True),
            "cache_ttl": _env_float("PDFSCOUT_CACHE_TTL"),
        }
        optional = {
            "summary_model": os.getenv("PDFSCOUT_SUMMARY_MODEL"),
            "summary_timeout": _env_float("PDFSCOUT_SUMMARY_TIMEOUT"),
            "archive_base_url": os.getenv("PDFSCOUT_ARCHIVE_URL"),
            "search_rows": os.getenv("PDFSCOUT_SEARCH_ROWS"),
            "http_timeout": _env_float("PDFSCOUT_HTTP_TIMEOUT"),
            "extract_timeout": _env_float("PDFSCOUT_EXTRACT_TIMEOUT"),
            "upload_dir": os.getenv("PDFSCOUT_UPLOAD_DIR"),
            "host": os.getenv("HOST"),
            "port": os.getenv("PORT"),
        }
        values.update({k: v for k, v in optional.items() if v not in (None, "")})
        return cls(**values)
