from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from pydantic import ValidationError as PydanticValidationError

from breeding_advisor.application.errors import AdvisoryProviderError, MalformedAdviceError
from breeding_advisor.application.interfaces.advisory_provider import AdvisoryProvider
from breeding_advisor.application.interfaces.history_store import HistoryStore
from breeding_advisor.application.services.compatibility_rules import evaluate, validate_pair
from breeding_advisor.domain.models.animal import Animal
from breeding_advisor.domain.models.compatibility import CompatibilityAdvice, EvaluationLogEntry
from breeding_advisor.domain.services.pedigree import RelationshipRisk, assess_relationship
from breeding_advisor.interfaces.schemas.compatibility import AdvicePayload
from breeding_advisor.utils.datetime_tz import utc_now

logger = logging.getLogger(__name__)

# Load prompt from file
PROMPTS_DIR = Path(__file__).parent / "prompts"
BREEDING_COMPATIBILITY_PROMPT = (PROMPTS_DIR / "breeding_compatibility.txt").read_text(
    encoding="utf-8"
)
SYSTEM_PROMPT = "You are a scientific animal breeding advisor providing evidence-based advice."

DEFAULT_PROVIDER_TIMEOUT_SECONDS = 20.0


def _unknown(value: Any, suffix: str = "") -> str:
    return "Unknown" if value is None else f"{value}{suffix}"


def build_prompt(male: Animal, female: Animal, now: datetime) -> str:
    fields: dict[str, str] = {}
    for prefix, animal in (("male", male), ("female", female)):
        age = animal.age_in_months(now)
        fields.update(
            {
                f"{prefix}_animal_id": animal.animal_id,
                f"{prefix}_name": animal.name,
                f"{prefix}_breed": animal.breed or "Unknown",
                f"{prefix}_age": _unknown(age, " months"),
                f"{prefix}_health": _unknown(animal.health),
                f"{prefix}_weight": _unknown(animal.weight, " kg"),
                f"{prefix}_parent_male_id": _unknown(animal.parent_male_id),
                f"{prefix}_parent_female_id": _unknown(animal.parent_female_id),
            }
        )
    return BREEDING_COMPATIBILITY_PROMPT.format(**fields)


def _strip_code_fence(content: str) -> str:
    if "```json" in content:
        start = content.find("```json") + 7
    elif "```" in content:
        start = content.find("```") + 3
    else:
        return content
    end = content.find("```", start)
    return content[start : (end if end != -1 else None)].strip()


def parse_advice(content: str, timestamp: datetime) -> CompatibilityAdvice:
    """Validate a provider answer and stamp it.

    Raises:
        MalformedAdviceError: If the content is not the expected JSON document
    """
    try:
        try:
            data = json.loads(content)
        except json.JSONDecodeError:
            # Models sometimes wrap JSON in markdown code blocks
            data = json.loads(_strip_code_fence(content))
        payload = AdvicePayload.model_validate(data)
    except (json.JSONDecodeError, PydanticValidationError) as e:
        logger.debug("Unparseable advisory response: %s", content[:200])
        raise MalformedAdviceError(f"Invalid advisory response: {e}") from e
    return payload.to_domain(timestamp)


class CompatibilityAdvisor:
    """Picks the advisory provider when configured, the rules otherwise."""

    def __init__(
        self,
        history: HistoryStore,
        provider: AdvisoryProvider | None = None,
        *,
        timeout_seconds: float = DEFAULT_PROVIDER_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.history = history
        self.provider = provider
        self.timeout_seconds = timeout_seconds
        self.clock = clock

    async def get_advice(self, male: Animal, female: Animal) -> CompatibilityAdvice:
        """
        Compatibility advice for a male/female pair; never returns None.

        Raises:
            ValidationError: If the pair cannot be evaluated
        """
        validate_pair(male, female)
        advice: CompatibilityAdvice | None = None
        if self.provider is not None:
            advice = await self._try_provider(male, female)
        if advice is None:
            advice = evaluate(male, female, now=self.clock())
        await self._record(male, female, advice)
        return advice

    def check_relationship(self, male: Animal, female: Animal) -> RelationshipRisk:
        """Inbreeding risk for a pair, reported separately from the advice score."""
        validate_pair(male, female)
        risk = assess_relationship(male, female)
        if risk.is_risky:
            logger.info(
                "Pairing %s x %s flagged: %s (%s risk)",
                male.animal_id,
                female.animal_id,
                risk.relationship.value,
                risk.risk_level.value,
            )
        return risk

    async def recent_evaluations(self, limit: int | None = None) -> list[EvaluationLogEntry]:
        try:
            return await self.history.entries(limit)
        except Exception as e:
            logger.error("Failed to read evaluation history: %s", e, exc_info=True)
            return []

    async def _try_provider(self, male: Animal, female: Animal) -> CompatibilityAdvice | None:
        assert self.provider is not None
        try:
            prompt = build_prompt(male, female, self.clock())
            content = await asyncio.wait_for(
                self.provider.complete(SYSTEM_PROMPT, prompt), timeout=self.timeout_seconds
            )
            return parse_advice(content, self.clock())
        except asyncio.TimeoutError:
            logger.warning(
                "Advisory provider timed out after %ss, using rule-based advice",
                self.timeout_seconds,
            )
        except AdvisoryProviderError as e:
            logger.warning("Advisory provider failed (%s), using rule-based advice", e.code)
            logger.debug("Advisory provider failure detail: %s", e.message)
        except Exception as e:
            logger.error("Unexpected advisory provider error: %s", e, exc_info=True)
        return None

    async def _record(self, male: Animal, female: Animal, advice: CompatibilityAdvice) -> None:
        entry = EvaluationLogEntry.create(male, female, advice, timestamp=self.clock())
        try:
            await self.history.append(entry)
        except Exception as e:
            logger.error("Error logging compatibility evaluation: %s", e, exc_info=True)
