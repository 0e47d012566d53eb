# User value: keeps logs readable by hiding embedded page images while still showing how large they were.
from typing import Any

DATA_URL_MARKER = "data:image"


def mask_data_urls(value: Any) -> Any:
    """Return a copy of ``value`` with embedded image data URIs replaced by a length placeholder.

    Walks mappings, lists and tuples recursively; every other value is returned as-is.
    The input is never modified.
    """
    if isinstance(value, str):
        if value.startswith(DATA_URL_MARKER):
            return f"[DATA_URL length={len(value)}]"
        return value
    if isinstance(value, dict):
        return {key: mask_data_urls(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [mask_data_urls(item) for item in value]
    return value
