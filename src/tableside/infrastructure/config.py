from __future__ import annotations

import os

from tableside.application.use_cases.get_menu import DEFAULT_IMAGE_BASE_URL
from tableside.application.use_cases.session_manager import DEFAULT_QR_BASE_URL

DEFAULT_MENU_CACHE_TTL_SECONDS = 300


def qr_base_url() -> str:
    return os.getenv("TABLE_QR_BASE_URL", DEFAULT_QR_BASE_URL)


def menu_image_base_url() -> str:
    return os.getenv("MENU_IMAGE_BASE_URL", DEFAULT_IMAGE_BASE_URL)


def menu_cache_ttl_seconds() -> int:
    raw = os.getenv("MENU_CACHE_TTL_SECONDS")
    if not raw:
        return DEFAULT_MENU_CACHE_TTL_SECONDS
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"MENU_CACHE_TTL_SECONDS must be an integer, got {raw!r}") from exc
    return max(1, value)


def app_env() -> str:
    return os.getenv("APP_ENV", "dev").lower()


def otel_service_name() -> str:
    return os.getenv("OTEL_SERVICE_NAME", "tableside-backend")


def otel_exporter_endpoint() -> str | None:
    return os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT") or None


def cors_allow_origins() -> list[str]:
    # dev/test: any origin, never with credentials
    if app_env() in {"dev", "test"}:
        return ["*"]
    raw_value = os.getenv("CORS_ALLOW_ORIGINS", "")
    return [origin.strip() for origin in raw_value.split(",") if origin.strip()]
