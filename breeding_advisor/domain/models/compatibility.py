from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from breeding_advisor.domain.models.animal import Animal
from breeding_advisor.utils.datetime_tz import utc_now

MIN_SCORE = 0
MAX_SCORE = 100


class AdviceSource(str, Enum):
    PROVIDER = "provider"
    RULES = "rules"


def clamp_score(score: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, score))


@dataclass(frozen=True, slots=True)
class CompatibilityAdvice:
    compatible: bool
    recommendation_score: int  # 0-100
    reasoning: str
    breeding_recommendations: tuple[str, ...]
    health_considerations: tuple[str, ...]
    timestamp: datetime
    source: AdviceSource = AdviceSource.RULES

    def __post_init__(self) -> None:
        if not MIN_SCORE <= self.recommendation_score <= MAX_SCORE:
            raise ValueError(f"recommendation_score out of range: {self.recommendation_score}")
        if not self.reasoning.strip():
            raise ValueError("reasoning must not be empty")


@dataclass(frozen=True, slots=True)
class EvaluationLogEntry:
    male_id: int
    male_animal_id: str
    male_name: str
    female_id: int
    female_animal_id: str
    female_name: str
    advice: CompatibilityAdvice
    timestamp: datetime = field(default_factory=utc_now)

    @classmethod
    def create(
        cls,
        male: Animal,
        female: Animal,
        advice: CompatibilityAdvice,
        *,
        timestamp: datetime | None = None,
    ) -> EvaluationLogEntry:
        return cls(
            male_id=male.id,
            male_animal_id=male.animal_id,
            male_name=male.name,
            female_id=female.id,
            female_animal_id=female.animal_id,
            female_name=female.name,
            advice=advice,
            timestamp=timestamp or utc_now(),
        )
