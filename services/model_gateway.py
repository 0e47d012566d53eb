# User value: This file sends the page conversation to the chosen model and hands back its reply without second-guessing it.
import logging
from functools import lru_cache
from typing import Any, Dict, List, Protocol

from openai import AsyncOpenAI

from config import get_settings
from services.transcript import ImageAttachment, Message, TextPart, Transcript

logger = logging.getLogger("api.model_gateway")


class ChatModel(Protocol):
    """Anything that can continue a transcript. The returned transcript holds only the new messages."""

    model_name: str

    async def extend_transcript(self, transcript: Transcript) -> Transcript: ...


def _part_to_openai(part) -> Dict[str, Any]:
    if isinstance(part, ImageAttachment):
        return {"type": "image_url", "image_url": {"url": part.source}}
    if isinstance(part, TextPart):
        return {"type": "text", "text": part.text}
    return {"type": "text", "text": str(part)}


def to_openai_messages(transcript: Transcript) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for message in transcript:
        if isinstance(message.content, str):
            out.append({"role": message.role, "content": message.content})
        else:
            out.append({"role": message.role, "content": [_part_to_openai(p) for p in message.content]})
    return out


def _choice_to_message(choice) -> Message:
    content = getattr(choice.message, "content", None)
    return Message("assistant", content if isinstance(content, str) else "")


class OpenAIChatModel:
    """Chat model served by an OpenAI-compatible chat-completions endpoint.

    Retries and timeouts are handled by the client itself; failures propagate unchanged.
    """

    def __init__(self, model_name: str, client: AsyncOpenAI):
        self.model_name = model_name
        self._client = client

    async def extend_transcript(self, transcript: Transcript) -> Transcript:
        completion = await self._client.chat.completions.create(
            model=self.model_name,
            messages=to_openai_messages(transcript),
        )
        choices = list(completion.choices or [])
        logger.info("model_completion_received model=%s choices=%s", self.model_name, len(choices))
        return Transcript(tuple(_choice_to_message(choice) for choice in choices))


# Built once and shared by every request for the life of the process.
@lru_cache
def get_client() -> AsyncOpenAI:
    settings = get_settings()
    if not settings.openai_api_key:
        raise RuntimeError("OPENAI_API_KEY is not set")
    return AsyncOpenAI(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        timeout=settings.model_timeout_sec,
        max_retries=settings.model_max_retries,
    )


def fetch_chat_model(model_name: str | None = None) -> ChatModel:
    name = model_name or get_settings().default_model_name
    return OpenAIChatModel(name, get_client())
