"""
survey_studio/services/text_generator.py
----------------------------------------
Prompt-to-text generation over a LangChain chat model.

Callers hand over an ordered list of prompt parts (plain text or an inline
image) and get the model's text back. There is no retry, streaming or
timeout here; a failed call surfaces as UpstreamError.

Usage
-----
    from survey_studio.services.text_generator import ImagePart, TextGenerator, TextPart

    generator = TextGenerator.from_settings()
    text = generator.generate([TextPart("Say hello"), ImagePart(png_bytes, "image/png")])
"""
from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from langchain_core.messages import HumanMessage
from langchain_core.output_parsers import StrOutputParser
from langchain_openai import ChatOpenAI

from survey_studio.config import Settings, get_settings
from survey_studio.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextPart:
    text: str


@dataclass(frozen=True)
class ImagePart:
    data: bytes
    mime_type: str

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


PromptPart = Union[TextPart, ImagePart]


def _to_content_block(part: PromptPart) -> Dict[str, Any]:
    if isinstance(part, ImagePart):
        return {"type": "image_url", "image_url": {"url": part.to_data_url()}}
    return {"type": "text", "text": part.text}


class TextGenerator:
    """Thin wrapper around ChatOpenAI | StrOutputParser."""

    def __init__(self, llm: ChatOpenAI):
        self.chain = llm | StrOutputParser()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "TextGenerator":
        settings = settings or get_settings()
        if not settings.openai_api_key:
            raise ConfigurationError("OPENAI_API_KEY is not configured. Check your .env file.")
        llm = ChatOpenAI(
            model=settings.openai_model,
            temperature=settings.openai_temperature,
            api_key=settings.openai_api_key,
        )
        return cls(llm)

    def generate(self, parts: Sequence[PromptPart]) -> str:
        """Send all parts as one user message and return the model's text."""
        content: List[Dict[str, Any]] = [_to_content_block(p) for p in parts]
        try:
            return self.chain.invoke([HumanMessage(content=content)])
        except Exception as e:
            logger.exception("Text generation failed")
            raise UpstreamError(f"AI text generation failed: {e}") from e
