# User value: This file wires the page conversion API together with consistent errors, logging, and request ids.
# app.py
import os
import logging
import time

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from utils.json_logging import configure_json_logging

# Load env before importing modules that read settings at import time.
load_dotenv(os.path.join(os.path.dirname(__file__), ".env"))


# User value: prepares structured logs before the first request is served.
def configure_logging() -> None:
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    configure_json_logging(service="page-transcribe-api", level=level)


configure_logging()
logger = logging.getLogger("api.error")
logger_access = logging.getLogger("api.access")
from startup_env import validate_startup_env
from utils.request_id import REQUEST_ID_HEADER, get_request_id, normalize_request_id, set_request_id

validate_startup_env()

from routes.conversion import router as conversion_router
from routes.health import router as health_router

app = FastAPI(title="Page Transcribe API")


# User value: normalizes data so users see consistent configuration behavior.
def _parse_csv_env(name: str) -> list[str]:
    raw = os.getenv(name, "")
    values = [x.strip() for x in raw.split(",") if x.strip()]
    seen = set()
    ordered = []
    for item in values:
        if item not in seen:
            seen.add(item)
            ordered.append(item)
    return ordered


@app.middleware("http")
# User value: ties every log line of a request together so support can trace one conversion end to end.
async def request_id_middleware(request: Request, call_next):
    request_id = normalize_request_id(request.headers.get(REQUEST_ID_HEADER))
    set_request_id(request_id)
    started = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = int(getattr(response, "status_code", 500))
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
    finally:
        duration_ms = (time.perf_counter() - started) * 1000.0
        logger_access.info(
            "http_request method=%s path=%s status_code=%s duration_ms=%.1f",
            request.method.upper(),
            request.url.path,
            status_code,
            duration_ms,
        )
        set_request_id(None)


# User value: supports _extract_error_message so every error reaches the caller as one readable string.
def _extract_error_message(detail) -> str:
    if isinstance(detail, dict):
        return str(detail.get("error") or detail.get("message") or detail.get("detail") or detail)
    if isinstance(detail, list):
        return "; ".join(str(x) for x in detail)
    return str(detail)


@app.exception_handler(RequestValidationError)
# User value: reports malformed request bodies as client errors in the same shape as every other error.
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(
        "request_failed_validation status=400 path=%s request_id=%s errors=%s",
        request.url.path,
        get_request_id() or normalize_request_id(request.headers.get(REQUEST_ID_HEADER)),
        exc.errors(),
    )
    return JSONResponse(status_code=400, content={"error": "Request validation failed"})


@app.exception_handler(StarletteHTTPException)
# User value: keeps error bodies to a single "error" field so clients parse them the same way everywhere.
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = _extract_error_message(exc.detail)
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "request_failed status=%s path=%s request_id=%s error_message=%s",
        exc.status_code,
        request.url.path,
        get_request_id() or normalize_request_id(request.headers.get(REQUEST_ID_HEADER)),
        message,
    )
    return JSONResponse(status_code=exc.status_code, content={"error": message})


@app.exception_handler(Exception)
# User value: never leaks internal details when something unexpected breaks.
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "request_failed_unhandled path=%s request_id=%s error=%s: %s",
        request.url.path,
        get_request_id() or normalize_request_id(request.headers.get(REQUEST_ID_HEADER)),
        exc.__class__.__name__,
        exc,
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


CORS_ALLOW_ORIGINS = _parse_csv_env("CORS_ALLOW_ORIGINS")
CORS_ALLOW_ORIGIN_REGEX = (os.getenv("CORS_ALLOW_ORIGIN_REGEX") or "").strip() or None
logger.info(
    "cors_configured allow_origins=%s allow_origin_regex=%s",
    CORS_ALLOW_ORIGINS,
    CORS_ALLOW_ORIGIN_REGEX or "",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_origin_regex=CORS_ALLOW_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[REQUEST_ID_HEADER],
)

app.include_router(health_router)
app.include_router(conversion_router)
