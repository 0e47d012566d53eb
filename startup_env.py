import logging
import os
from typing import List

logger = logging.getLogger("api.startup")

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _is_blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


def _validate_positive_int(key: str, errors: List[str]) -> None:
    raw = os.getenv(key)
    if _is_blank(raw):
        return
    try:
        value = int(str(raw).strip())
    except ValueError:
        errors.append(f"{key} must be an integer, got {raw!r}")
        return
    if value <= 0:
        errors.append(f"{key} must be greater than zero")


def _validate_non_negative_int(key: str, errors: List[str]) -> None:
    raw = os.getenv(key)
    if _is_blank(raw):
        return
    try:
        value = int(str(raw).strip())
    except ValueError:
        errors.append(f"{key} must be an integer, got {raw!r}")
        return
    if value < 0:
        errors.append(f"{key} must not be negative")


def _validate_positive_float(key: str, errors: List[str]) -> None:
    raw = os.getenv(key)
    if _is_blank(raw):
        return
    try:
        value = float(str(raw).strip())
    except ValueError:
        errors.append(f"{key} must be a number, got {raw!r}")
        return
    if value <= 0:
        errors.append(f"{key} must be greater than zero")


def _validate_log_level(value: str | None, errors: List[str]) -> None:
    if _is_blank(value):
        return
    if str(value).strip().upper() not in _LOG_LEVELS:
        errors.append(f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}")


def _validate_cors_allow_origins(value: str | None, errors: List[str]) -> None:
    if _is_blank(value):
        return

    origins = [x.strip() for x in str(value).split(",") if x.strip()]
    for origin in origins:
        if origin == "*":
            errors.append("CORS_ALLOW_ORIGINS must not contain '*' in strict allowlist mode")
            continue
        if not (origin.startswith("http://") or origin.startswith("https://")):
            errors.append(f"CORS origin must start with http:// or https://: {origin}")


def _validate_base_url(value: str | None, errors: List[str]) -> None:
    if _is_blank(value):
        return
    if not (value.startswith("http://") or value.startswith("https://")):
        errors.append("OPENAI_BASE_URL must start with http:// or https://")


def validate_startup_env() -> None:
    errors: List[str] = []
    warnings: List[str] = []

    _validate_positive_int("MAX_UPLOAD_SIZE_MB", errors)
    _validate_non_negative_int("MODEL_MAX_RETRIES", errors)
    _validate_positive_float("MODEL_TIMEOUT_SEC", errors)
    _validate_log_level(os.getenv("LOG_LEVEL"), errors)
    _validate_cors_allow_origins(os.getenv("CORS_ALLOW_ORIGINS"), errors)
    _validate_base_url(os.getenv("OPENAI_BASE_URL"), errors)

    if _is_blank(os.getenv("OPENAI_API_KEY")):
        warnings.append("OPENAI_API_KEY is not set; model calls will fail until it is configured")

    if errors:
        for err in errors:
            logger.error("startup_env_invalid %s", err)
        raise RuntimeError("Startup env validation failed: " + "; ".join(errors))

    for warning in warnings:
        logger.warning("startup_env_warning %s", warning)

    logger.info(
        "startup_env_validated keys=%s",
        ["DEFAULT_MODEL_NAME", "OPENAI_BASE_URL", "MAX_UPLOAD_SIZE_MB", "MODEL_TIMEOUT_SEC", "CORS_ALLOW_ORIGINS"],
    )
