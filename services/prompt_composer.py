# User value: This file turns the caller's hints about a page into clear model instructions, so transcriptions follow what the user asked for.
"""
Prompt assembly for single-page transcription.

The user message is built from an ordered list of sections. Each section is a
``(predicate, renderer)`` pair; a section is rendered only when its predicate
holds for the request. Presence gates inclusion: a field set to ``""`` is
still rendered, only ``None`` suppresses it.
"""
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, Tuple

from services.tag_classification import render_tag_block
from services.transcript import ImageAttachment, Message, Transcript

SYSTEM_INSTRUCTIONS = (
    "You are an AI that transcribes images into Markdown and determines if the current page "
    "is likely the *first page of a new document*. "
    'Return valid JSON with keys "markdown" (string) and "isFirstPage" (boolean). '
    'Also, optionally include "description" (string) and "tags" (array of strings). '
    "Do NOT wrap the JSON in triple backticks. Return ONLY raw JSON."
)

USER_PREAMBLE = (
    "Please accurately transcribe this image into well-structured Markdown word for word, "
    "then decide if this is the first page of a document.\n"
    'Output must be raw JSON with at least { "markdown": "...", "isFirstPage": ... }\n\n'
)

USER_CLOSING = (
    'Return your answer as raw JSON (no code fences), with keys: "markdown", "isFirstPage", '
    'optional "description", optional "tags".\n'
)


@dataclass(frozen=True)
class ConversionRequest:
    description: Optional[str] = None
    intent: Optional[str] = None
    graphic_instructions: Optional[str] = None
    preceding_markdown: Optional[str] = None
    preceding_context: Optional[str] = None
    preceding_image_source: Optional[str] = None
    model_name: Optional[str] = None
    describe: bool = True
    tag_definitions: Optional[Mapping[str, str]] = None


Section = Tuple[Callable[[ConversionRequest], bool], Callable[[ConversionRequest], str]]


def _describe_instruction(req: ConversionRequest) -> str:
    if req.describe:
        return 'Please include a "description" field with 1–3 sentences summarizing the page.\n'
    return "No short description needed.\n"


USER_SECTIONS: List[Section] = [
    (
        lambda req: req.description is not None,
        lambda req: f"**High-level user-provided description**: {req.description}\n\n",
    ),
    (
        lambda req: req.intent is not None,
        lambda req: f"**Intended use**: {req.intent}\n\n",
    ),
    (
        lambda req: req.graphic_instructions is not None,
        lambda req: f"**Additional instructions for graphics**: {req.graphic_instructions}\n\n",
    ),
    (
        lambda req: req.preceding_markdown is not None,
        lambda req: f"**Preceding markdown**:\n{req.preceding_markdown}\n\n",
    ),
    (
        lambda req: req.preceding_context is not None,
        lambda req: f"**Preceding context**:\n{req.preceding_context}\n\n",
    ),
    (
        lambda req: req.preceding_image_source is not None,
        lambda req: "A preceding page image is provided.\n\n",
    ),
    (
        lambda req: req.tag_definitions is not None,
        lambda req: render_tag_block(req.tag_definitions),
    ),
    (lambda req: True, _describe_instruction),
]


def compose_user_text(req: ConversionRequest) -> str:
    text = USER_PREAMBLE
    for applies, render in USER_SECTIONS:
        if applies(req):
            text += render(req)
    return text + USER_CLOSING


def compose_attachments(req: ConversionRequest, image_source: str) -> List[ImageAttachment]:
    attachments = []
    if req.preceding_image_source is not None:
        attachments.append(ImageAttachment(req.preceding_image_source))
    attachments.append(ImageAttachment(image_source))
    return attachments


def compose_transcript(req: ConversionRequest, image_source: str) -> Transcript:
    """Build the system + user transcript for one page.

    The current page attachment is always the last content part of the user message.
    """
    user_content = [compose_user_text(req), *compose_attachments(req, image_source)]
    return (
        Transcript.empty()
        .plus(Message("system", SYSTEM_INSTRUCTIONS))
        .plus(Message("user", user_content))
    )
