from __future__ import annotations

from typing import Protocol


class AdvisoryProvider(Protocol):
    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Return the provider's raw text answer for one prompt.

        Implementations raise AdvisoryProviderError subclasses on failure.
        """
        ...
