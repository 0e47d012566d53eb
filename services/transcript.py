# User value: This file holds the conversation sent to the model so every page request is built the same predictable way.
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional, Tuple, Union

Role = Literal["system", "user", "assistant"]
ROLES = ("system", "user", "assistant")


@dataclass(frozen=True)
class TextPart:
    text: str


@dataclass(frozen=True)
class ImageAttachment:
    """Reference to page image content: a data URI or a remote URL."""

    source: str
    kind: str = field(default="image", init=False)


ContentPart = Union[str, TextPart, ImageAttachment]
ContentValue = Union[str, Tuple[ContentPart, ...]]


@dataclass(frozen=True)
class Message:
    role: Role
    content: ContentValue

    def __post_init__(self):
        if self.role not in ROLES:
            raise ValueError(f"Unknown message role: {self.role!r}")
        if not isinstance(self.content, str):
            # Freeze caller-provided lists so the message cannot change after construction.
            object.__setattr__(self, "content", tuple(self.content))
        if self.role == "system" and any(isinstance(part, ImageAttachment) for part in self.parts()):
            raise ValueError("System messages carry plain text only")

    def parts(self) -> Tuple[ContentPart, ...]:
        if isinstance(self.content, str):
            return (self.content,)
        return self.content


@dataclass(frozen=True)
class Transcript:
    """Append-only message history. ``plus`` returns a new transcript and leaves this one untouched."""

    messages: Tuple[Message, ...] = ()

    @classmethod
    def empty(cls) -> "Transcript":
        return cls()

    def plus(self, message: Message) -> "Transcript":
        return Transcript(self.messages + (message,))

    def extend(self, other: "Transcript") -> "Transcript":
        return Transcript(self.messages + other.messages)

    def first(self, role: Role) -> Optional[Message]:
        for message in self.messages:
            if message.role == role:
                return message
        return None

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self):
        return iter(self.messages)


def append(transcript: Transcript, message: Message) -> Transcript:
    return transcript.plus(message)
