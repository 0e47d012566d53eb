# User value: This file runs one page through prompt building, the model call, and result recovery so users get a single clean answer per page.
import logging
from typing import Any, Callable, Dict

from services.model_gateway import ChatModel, fetch_chat_model
from services.prompt_composer import ConversionRequest, compose_transcript
from services.response_extractor import extract_result
from utils.stage_logging import log_stage

logger = logging.getLogger("api.transcriber")


async def transcribe_page(
    req: ConversionRequest,
    image_source: str,
    *,
    model_factory: Callable[[str | None], ChatModel] | None = None,
) -> Dict[str, Any]:
    """Transcribe one page image into a ConversionResult payload.

    Gateway failures propagate to the caller; unparseable replies do not.
    """
    transcript = compose_transcript(req, image_source)
    chat_model = (model_factory or fetch_chat_model)(req.model_name)

    log_stage(
        stage="MODEL_INVOCATION",
        event="STARTED",
        operation="transcribe_image",
        model=chat_model.model_name,
        has_preceding_image=req.preceding_image_source is not None,
        tag_count=len(req.tag_definitions or {}),
        describe=req.describe,
    )
    continuation = await chat_model.extend_transcript(transcript)
    log_stage(
        stage="MODEL_INVOCATION",
        event="COMPLETED",
        operation="transcribe_image",
        model=chat_model.model_name,
        message_count=len(continuation),
    )

    result = extract_result(continuation, describe=req.describe)
    logger.info(
        "page_transcribed model=%s markdown_chars=%s is_first_page=%s tags=%s",
        chat_model.model_name,
        len(result["markdown"]),
        result["isFirstPage"],
        len(result.get("tags") or []),
    )
    return result
