"""
LLM Service Module.

This module provides the LLMService class, which interfaces with the Google Gemini API
to generate article text from chat-style messages.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol

from google import genai

logger = logging.getLogger(__name__)


class TextModel(Protocol):
    """Text-generation collaborator: messages in, generated text out."""

    async def run(self, model_id: str, inputs: Dict[str, Any]) -> Dict[str, str]:
        """Runs the model and returns {"response": text}."""


class LLMService:
    """
    Service for interacting with the Google Gemini API.

    Accepts chat messages in the {"role", "content"} shape. System messages become
    the Gemini system instruction, assistant messages are sent with the "model" role.
    """

    def __init__(self, api_key: Optional[str]):
        self.client: Optional[genai.Client] = None
        if not api_key:
            logger.warning("GEMINI_KEY not set. Article generation disabled.")
            return

        try:
            self.client = genai.Client(api_key=api_key)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Failed to initialize Gemini client: %s", e)
            self.client = None

    @property
    def available(self) -> bool:
        """True when a Gemini client could be created."""
        return self.client is not None

    def _split_messages(self, messages: List[Dict[str, str]]):
        """Separates system instructions from conversation turns."""
        system_parts = []
        contents = []
        for message in messages:
            role = message.get("role", "user")
            text = message.get("content", "")
            if role == "system":
                system_parts.append(text)
            else:
                contents.append(
                    {
                        "role": "model" if role == "assistant" else "user",
                        "parts": [{"text": text}],
                    }
                )
        return "\n".join(system_parts), contents

    async def run(self, model_id: str, inputs: Dict[str, Any]) -> Dict[str, str]:
        """Generates text for the given messages within the max_tokens budget."""
        if not self.client:
            raise RuntimeError("Gemini client not initialized.")

        system_instruction, contents = self._split_messages(inputs.get("messages", []))
        config: Dict[str, Any] = {}
        if system_instruction:
            config["system_instruction"] = system_instruction
        if inputs.get("max_tokens"):
            config["max_output_tokens"] = int(inputs["max_tokens"])

        logger.info("Asking %s to write (max %s tokens)...", model_id, inputs.get("max_tokens"))
        response = await self.client.aio.models.generate_content(
            model=model_id,
            contents=contents,
            config=config,
        )
        return {"response": response.text if response.text else ""}


def open_text_model(api_key: Optional[str]) -> Optional[TextModel]:
    """Creates the Gemini-backed model, or None when it is not configured."""
    service = LLMService(api_key)
    return service if service.available else None
