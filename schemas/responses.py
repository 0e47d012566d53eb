# User value: This file fixes the shape of every conversion reply so client code can rely on it.
from typing import List, Optional

from pydantic import BaseModel


class ConversionResult(BaseModel):
    # User value: the page transcription; always present, even when the model misbehaves.
    markdown: str
    isFirstPage: bool
    # User value: short page summary, only when the caller asked for one.
    description: Optional[str] = None
    # User value: caller-defined labels the model judged to apply to this page.
    tags: Optional[List[str]] = None


class FileConversionResponse(BaseModel):
    markdownContent: str


class ErrorResponse(BaseModel):
    error: str
