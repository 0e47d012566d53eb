# User value: This file lets users define their own page labels and get back only the labels the model actually returned in a usable form.
import json
import logging
from typing import Any, Mapping

logger = logging.getLogger("api.tags")


# User value: accepts tag definitions either as an object or as a JSON string so clients can send whichever is easier.
def decode_tag_definitions(raw: Any) -> dict | None:
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        return dict(raw)
    if isinstance(raw, str):
        try:
            decoded = json.loads(raw)
        except ValueError:
            logger.warning("tag_definitions_decode_failed reason=invalid_json, ignoring tags")
            return None
        if not isinstance(decoded, dict):
            logger.warning("tag_definitions_decode_failed reason=not_an_object type=%s, ignoring tags", type(decoded).__name__)
            return None
        return decoded
    logger.warning("tag_definitions_ignored type=%s", type(raw).__name__)
    return None


# User value: tells the model which labels exist and what each one means, so labels follow meaning rather than keywords.
def render_tag_block(definitions: Mapping[str, Any]) -> str:
    lines = ["**The user also defines the following tags** (with definitions):"]
    for name, definition in definitions.items():
        lines.append(f'- Tag "{name}": {definition}')
    names = ", ".join(json.dumps(str(name), ensure_ascii=False) for name in definitions)
    return (
        "\n".join(lines)
        + "\n\n"
        + 'When you return the JSON, you may include "tags": ["tag1","tag2",...] '
        + f"using only these tag names: [{names}]. "
        + "Include a tag only if the page content meets its definition in meaning, "
        + "not merely because a word from the definition appears on the page.\n\n"
    )


# User value: only passes through tags that are a real list of names, so clients never receive a malformed tag field.
def validate_tags(value: Any) -> list[str] | None:
    if not isinstance(value, list):
        return None
    if not all(isinstance(item, str) for item in value):
        return None
    return list(value)
