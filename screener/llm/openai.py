"""OpenAI chat client that returns structured JSON replies."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List

import openai

from screener.config import ConfigurationError

logger = logging.getLogger(__name__)


class MalformedReplyError(ValueError):
    """Raised when the model output is not the expected JSON object."""


@dataclass
class OpenAIConfig:
    api_key: str
    model: str = "gpt-4o-mini"
    temperature: float = 0.3
    max_tokens: int = 400


class StructuredOpenAI:
    """
    Thin wrapper over the async OpenAI client for JSON-mode completions.

    Each call is a single request: the client is created with retries
    disabled, so a failed turn surfaces immediately to the caller.
    """

    def __init__(self, config: OpenAIConfig):
        if not config.api_key:
            logger.error("OPENAI_API_KEY is not set; the LLM engine cannot start.")
            raise ConfigurationError("Missing OpenAI API key")
        self.config = config
        self.client = openai.AsyncOpenAI(api_key=config.api_key, max_retries=0)

    async def generate_json(self, messages: List[dict[str, str]]) -> Dict[str, Any]:
        """
        Request a JSON object completion.

        Args:
            messages: Conversation history in OpenAI format, system prompt first

        Returns:
            The decoded JSON object
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.config.model,
                messages=messages,
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
                response_format={"type": "json_object"},
            )
        except openai.APIError as e:
            logger.error(f"OpenAI API error: {e}")
            raise

        if not response.choices:
            raise MalformedReplyError("Completion returned no choices")
        content = response.choices[0].message.content
        if not content:
            raise MalformedReplyError("Completion returned empty content")

        try:
            payload = json.loads(content)
        except json.JSONDecodeError as e:
            raise MalformedReplyError(f"Completion is not valid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise MalformedReplyError("Completion JSON is not an object")

        logger.debug(f"LLM reply payload: {payload}")
        return payload
