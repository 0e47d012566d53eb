# User value: This file exposes page-image transcription and document text extraction to clients.
# routes/conversion.py
import json
import logging

from fastapi import APIRouter, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from config import get_settings
from schemas.requests import ImageConversionRequest
from schemas.responses import ConversionResult, ErrorResponse, FileConversionResponse
from services.file_dispatch import extract_upload_text, resolve_strategy
from services.model_gateway import fetch_chat_model
from services.page_transcriber import transcribe_page
from services.tag_classification import decode_tag_definitions
from services.upload_constraints import UploadRejected, ensure_size_allowed, get_upload_size_bytes
from utils.redaction import mask_data_urls
from utils.stage_logging import log_stage

router = APIRouter(prefix="/conversion", tags=["conversion"])
logger = logging.getLogger("api.conversion")

IMAGE_FAILURE_MESSAGE = "An unexpected error occurred while transcribing the image."
FILE_FAILURE_MESSAGE = "Error converting file."


@router.post(
    "/image",
    response_model=ConversionResult,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
# User value: turns one page image into Markdown, with an optional summary and the caller's own tags.
async def convert_image(payload: ImageConversionRequest):
    logger.info("[POST] /conversion/image -- converting image to markdown")
    logger.info(
        "request_body_masked %s",
        json.dumps(mask_data_urls(payload.model_dump(by_alias=True, exclude_unset=True)), ensure_ascii=False, default=str),
    )

    if not payload.image_url:
        log_stage(stage="CONVERT_IMAGE", event="FAILED", operation="transcribe_image", error="missing_image_url")
        raise HTTPException(status_code=400, detail='No "imageUrl" provided.')

    tag_definitions = decode_tag_definitions(payload.tags)
    req = payload.to_conversion_request(tag_definitions)

    log_stage(stage="CONVERT_IMAGE", event="STARTED", operation="transcribe_image", model=req.model_name)
    try:
        result = await transcribe_page(req, payload.image_url, model_factory=fetch_chat_model)
    except Exception as exc:
        logger.exception("convert_image_failed error=%s: %s", exc.__class__.__name__, exc)
        log_stage(stage="CONVERT_IMAGE", event="FAILED", operation="transcribe_image", error=exc.__class__.__name__)
        raise HTTPException(status_code=500, detail=IMAGE_FAILURE_MESSAGE) from exc

    log_stage(stage="CONVERT_IMAGE", event="COMPLETED", operation="transcribe_image", is_first_page=result["isFirstPage"])
    return result


@router.post(
    "/file",
    response_model=FileConversionResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
# User value: returns the plain text of an uploaded document or code file so users can reuse it as Markdown.
async def convert_file(file: UploadFile | None = File(default=None)):
    logger.info("[POST] /conversion/file -- converting doc to markdown")
    if file is None:
        log_stage(stage="CONVERT_FILE", event="FAILED", operation="convert_file", error="missing_file")
        raise HTTPException(status_code=400, detail="No file uploaded.")

    settings = get_settings()
    size_bytes = get_upload_size_bytes(file.file)
    logger.info(
        "upload_received %s",
        json.dumps(mask_data_urls({"filename": file.filename, "content_type": file.content_type, "size_bytes": size_bytes})),
    )

    try:
        strategy = resolve_strategy(file.filename, settings)
        ensure_size_allowed(size_bytes, settings)
    except UploadRejected as exc:
        logger.warning("upload_rejected filename=%s reason=%s", file.filename, exc.message)
        log_stage(stage="CONVERT_FILE", event="FAILED", operation="convert_file", filename=file.filename, error=exc.message)
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc

    log_stage(stage="CONVERT_FILE", event="STARTED", operation="convert_file", filename=file.filename, strategy=strategy.value)
    try:
        markdown_content = await run_in_threadpool(
            extract_upload_text,
            file.file,
            filename=file.filename,
            strategy=strategy,
            directory=settings.upload_tmp_dir,
        )
    except Exception as exc:
        logger.exception("convert_file_failed filename=%s error=%s: %s", file.filename, exc.__class__.__name__, exc)
        log_stage(stage="CONVERT_FILE", event="FAILED", operation="convert_file", filename=file.filename, error=exc.__class__.__name__)
        raise HTTPException(status_code=500, detail=FILE_FAILURE_MESSAGE) from exc

    log_stage(stage="CONVERT_FILE", event="COMPLETED", operation="convert_file", filename=file.filename, chars=len(markdown_content))
    return FileConversionResponse(markdownContent=markdown_content)
