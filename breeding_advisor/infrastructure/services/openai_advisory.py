from __future__ import annotations

import logging
from typing import Any

import openai

from breeding_advisor.application.errors import AdvisoryTransportError, MalformedAdviceError

logger = logging.getLogger(__name__)


class OpenAIAdvisoryProvider:
    """Breeding advisory provider backed by the OpenAI chat completions API."""

    def __init__(
        self,
        api_key: str,
        *,
        model: str = "gpt-4o",
        temperature: float = 0.2,
        timeout_seconds: float | None = None,
        client: Any | None = None,
    ):
        """Initialize the provider; `client` overrides the AsyncOpenAI instance."""
        self.model = model
        self.temperature = temperature
        # Single attempt; callers fall back to rules instead of retrying
        self.client = client or openai.AsyncOpenAI(
            api_key=api_key, timeout=timeout_seconds, max_retries=0
        )

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        """
        Request a JSON compatibility assessment.

        Returns:
            Raw message content from the model

        Raises:
            AdvisoryTransportError: For OpenAI API, network or timeout errors
            MalformedAdviceError: If the response carries no content
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                response_format={"type": "json_object"},
                temperature=self.temperature,
                max_tokens=800,
            )
        except openai.APIError as e:
            logger.warning("OpenAI API error: %s", e)
            raise AdvisoryTransportError(f"OpenAI request failed: {e}") from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError) as e:
            logger.error("Failed to read response content: %s", e)
            raise MalformedAdviceError("OpenAI response has no choices") from e
        if not content:
            raise MalformedAdviceError("Empty response from OpenAI")
        return content
