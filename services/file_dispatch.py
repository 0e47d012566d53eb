# User value: This file pulls plain text out of uploaded documents and code files so users can reuse their content as-is.
import enum
import logging

import fitz  # PyMuPDF
from docx import Document as Docx

from config import Settings
from services.upload_constraints import ensure_extension_allowed, file_extension, materialized_upload

logger = logging.getLogger("api.file_dispatch")


class ExtractionStrategy(enum.Enum):
    PAGINATED_DOCUMENT = "paginated_document"
    WORD_PROCESSOR = "word_processor"
    PASSTHROUGH = "passthrough"


_EXTENSION_STRATEGIES = {
    ".pdf": ExtractionStrategy.PAGINATED_DOCUMENT,
    ".docx": ExtractionStrategy.WORD_PROCESSOR,
}


# User value: picks the right reader from the file name alone, refusing unknown types before the file is opened.
def resolve_strategy(filename: str | None, settings: Settings) -> ExtractionStrategy:
    ext = ensure_extension_allowed(filename, settings)
    return _EXTENSION_STRATEGIES.get(ext, ExtractionStrategy.PASSTHROUGH)


def _extract_paginated_document(path: str) -> str:
    with fitz.open(path) as doc:
        return "\n\n".join(page.get_text() for page in doc)


def _extract_word_processor(path: str) -> str:
    doc = Docx(path)
    return "\n\n".join(paragraph.text for paragraph in doc.paragraphs)


def _read_passthrough(path: str) -> str:
    with open(path, "rb") as fh:
        return fh.read().decode("utf-8", errors="replace")


def extract_text(path: str, strategy: ExtractionStrategy) -> str:
    """Run exactly one extraction strategy and return its text unmodified.

    Blocking; callers on the event loop should run it in a worker thread.
    """
    if strategy is ExtractionStrategy.PAGINATED_DOCUMENT:
        text = _extract_paginated_document(path)
    elif strategy is ExtractionStrategy.WORD_PROCESSOR:
        text = _extract_word_processor(path)
    elif strategy is ExtractionStrategy.PASSTHROUGH:
        text = _read_passthrough(path)
    else:
        raise ValueError(f"Unknown extraction strategy: {strategy!r}")

    logger.info("file_text_extracted strategy=%s chars=%s", strategy.value, len(text))
    return text


# User value: reads an uploaded file through a temporary copy that is always removed afterwards.
def extract_upload_text(file_obj, *, filename: str | None, strategy: ExtractionStrategy, directory: str) -> str:
    with materialized_upload(file_obj, suffix=file_extension(filename), directory=directory) as path:
        return extract_text(path, strategy)
