# User value: This file makes sure users always get a well-formed page result, even when the model replies with broken or unexpected output.
"""
Recover a typed page result from an untrusted model reply.

The reply is treated as external input: every field is checked and coerced
explicitly. A reply that cannot be parsed is not an error; its raw text is
returned as the page markdown instead.
"""
import json
import logging
import re
from typing import Any, Dict, Optional

from services.tag_classification import validate_tags
from services.transcript import Message, Transcript

logger = logging.getLogger("api.extractor")

NO_ASSISTANT_OUTPUT = "(No assistant output returned.)"

_FENCE_RE = re.compile(r"^```(?:json)?\s*([\s\S]+?)\s*```$", re.IGNORECASE)


def flatten_content(message: Message) -> str:
    content = message.content
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    text = ""
    for part in content:
        if isinstance(part, str):
            text += part
        else:
            part_text = getattr(part, "text", None)
            if isinstance(part_text, str):
                text += part_text
    return text


def strip_json_code_fence(text: str) -> str:
    return _FENCE_RE.sub(r"\1", text.strip(), count=1).strip()


def _coerce_markdown(value: Any) -> str:
    if isinstance(value, str):
        return value
    if not value:
        return ""
    return json.dumps(value, ensure_ascii=False)


def parse_reply(text: str) -> Dict[str, Any]:
    """Parse the stripped reply text into ``markdown``/``isFirstPage`` and any valid optional fields."""
    try:
        parsed = json.loads(text)
    except ValueError:
        parsed = None

    if isinstance(parsed, list):
        # Arrays parse fine but carry no named fields.
        parsed = {}
    if not isinstance(parsed, dict):
        logger.warning("assistant_reply_not_json_object chars=%s, using raw text as markdown", len(text))
        return {"markdown": text, "isFirstPage": False}

    out: Dict[str, Any] = {
        "markdown": _coerce_markdown(parsed.get("markdown")),
        "isFirstPage": parsed.get("isFirstPage") if isinstance(parsed.get("isFirstPage"), bool) else False,
    }
    if isinstance(parsed.get("description"), str):
        out["description"] = parsed["description"]
    tags = validate_tags(parsed.get("tags"))
    if tags is not None:
        out["tags"] = tags
    return out


def extract_result(continuation: Transcript, describe: bool = True) -> Dict[str, Any]:
    assistant: Optional[Message] = continuation.first("assistant")
    if assistant is None:
        logger.warning("no_assistant_message_returned")
        return {"markdown": NO_ASSISTANT_OUTPUT, "isFirstPage": False}

    text = strip_json_code_fence(flatten_content(assistant))
    parsed = parse_reply(text)

    result: Dict[str, Any] = {
        "markdown": parsed["markdown"],
        "isFirstPage": parsed["isFirstPage"],
    }
    if describe:
        result["description"] = parsed.get("description", "")
    if "tags" in parsed:
        result["tags"] = parsed["tags"]
    return result
