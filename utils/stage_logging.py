import json
import logging
from datetime import datetime, timezone
from typing import Any

from utils.request_id import get_request_id

logger = logging.getLogger("api.stage")


def _norm(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        return value
    return str(value)


def log_stage(
    *,
    stage: str,
    event: str,
    operation: str | None = None,
    model: str | None = None,
    filename: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    payload = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "request_id": get_request_id() or "",
        "stage": stage,
        "event": event.upper(),
    }

    if operation:
        payload["operation"] = operation
    if model:
        payload["model"] = model
    if filename:
        payload["filename"] = filename
    if error:
        payload["error"] = error

    for key, value in extra.items():
        norm = _norm(value)
        if norm is not None:
            payload[key] = norm

    msg = json.dumps(payload, ensure_ascii=False)
    if error or payload["event"] == "FAILED":
        logger.error("stage_event %s", msg)
    else:
        logger.info("stage_event %s", msg)
