from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Optional

from .auth import BearerTokenAuth
from .http_client import HttpClient
from .retry import RetryPolicy

DEFAULT_BASE_URL = "https://api.preview.platform.athenahealth.com"


@dataclass(frozen=True)
class Settings:
    base_url: str
    practice_id: str
    access_token: Optional[str] = None
    api_version: str = "v1"

    connect_timeout: float = 5.0
    read_timeout: float = 30.0

    # Attempts per call when wrapped with retry.call_with_retry
    retries: int = 3

    verbose: bool = False


def _require(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def load_settings() -> Settings:
    retries = int(os.getenv("MAX_RETRIES", "3"))
    if retries < 1:
        raise RuntimeError("MAX_RETRIES must be >= 1")

    verbose_raw = os.getenv("ATHENA_VERBOSE", "0").strip().lower()

    return Settings(
        base_url=os.getenv("ATHENA_BASE_URL", DEFAULT_BASE_URL),
        practice_id=_require("ATHENA_PRACTICE_ID"),
        access_token=os.getenv("ATHENA_ACCESS_TOKEN") or None,
        api_version=os.getenv("ATHENA_API_VERSION", "v1"),
        connect_timeout=float(os.getenv("CONNECT_TIMEOUT", "5")),
        read_timeout=float(os.getenv("READ_TIMEOUT", "30")),
        retries=retries,
        verbose=verbose_raw in {"1", "true", "yes"},
    )


def build_http_client(settings: Settings, **kwargs) -> HttpClient:
    """HttpClient for `settings`; extra kwargs (e.g. transport=) pass through."""
    auth = BearerTokenAuth(settings.access_token) if settings.access_token else None
    return HttpClient(
        base_url=settings.base_url,
        practice_id=settings.practice_id,
        connect_timeout=settings.connect_timeout,
        read_timeout=settings.read_timeout,
        api_version=settings.api_version,
        auth=auth,
        verbose=settings.verbose,
        **kwargs,
    )


def retry_policy(settings: Settings) -> RetryPolicy:
    return RetryPolicy(retries=settings.retries)
