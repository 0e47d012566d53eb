# User value: This file describes what callers may send for a page conversion so requests are read consistently.
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from services.prompt_composer import ConversionRequest


class ImageConversionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # User value: the page to transcribe, as a data URI or a remote URL. Checked in the route so callers get a clear message.
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    preceding_image_url: Optional[str] = None
    description: Optional[str] = None
    intent: Optional[str] = None
    graphic_instructions: Optional[str] = None
    preceding_content: Optional[str] = None
    preceding_context: Optional[str] = None
    model: Optional[str] = None
    describe: Optional[bool] = True
    # User value: tag name -> definition, either as an object or as a JSON-encoded string.
    tags: Any = None

    @field_validator("description", "intent", "graphic_instructions", "preceding_content", "preceding_context", mode="before")
    @classmethod
    def scalar_text(cls, v):
        """Render numbers and booleans as text; other values are left to normal validation."""
        if isinstance(v, bool):
            return "true" if v else "false"
        if isinstance(v, (int, float)):
            return str(v)
        return v

    def to_conversion_request(self, tag_definitions: Optional[dict]) -> ConversionRequest:
        return ConversionRequest(
            description=self.description,
            intent=self.intent,
            graphic_instructions=self.graphic_instructions,
            preceding_markdown=self.preceding_content,
            preceding_context=self.preceding_context,
            preceding_image_source=self.preceding_image_url,
            model_name=self.model or None,
            describe=bool(self.describe),
            tag_definitions=tag_definitions,
        )
