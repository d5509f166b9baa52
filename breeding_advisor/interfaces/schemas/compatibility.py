from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator
from pydantic.alias_generators import to_camel

from breeding_advisor.domain.models.compatibility import (
    AdviceSource,
    CompatibilityAdvice,
    EvaluationLogEntry,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AdvicePayload(CamelModel):
    """JSON document the advisory provider must answer with (no timestamp)."""

    compatible: StrictBool
    recommendation_score: int = Field(ge=0, le=100)
    reasoning: str = Field(min_length=1)
    breeding_recommendations: list[str]
    health_considerations: list[str]

    @field_validator("reasoning")
    def ensure_reasoning_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("reasoning must not be blank")
        return v

    def to_domain(self, timestamp: datetime) -> CompatibilityAdvice:
        return CompatibilityAdvice(
            compatible=self.compatible,
            recommendation_score=self.recommendation_score,
            reasoning=self.reasoning,
            breeding_recommendations=tuple(self.breeding_recommendations),
            health_considerations=tuple(self.health_considerations),
            timestamp=timestamp,
            source=AdviceSource.PROVIDER,
        )


def _ensure_aware_utc(v: datetime) -> datetime:
    if v.tzinfo is None or v.tzinfo.utcoffset(v) is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


class CompatibilityAdviceSchema(AdvicePayload):
    timestamp: datetime
    source: AdviceSource = AdviceSource.RULES

    @field_validator("timestamp")
    def ensure_aware_utc(cls, v: datetime) -> datetime:
        return _ensure_aware_utc(v)

    @classmethod
    def from_domain(cls, advice: CompatibilityAdvice) -> CompatibilityAdviceSchema:
        return cls(
            compatible=advice.compatible,
            recommendation_score=advice.recommendation_score,
            reasoning=advice.reasoning,
            breeding_recommendations=list(advice.breeding_recommendations),
            health_considerations=list(advice.health_considerations),
            timestamp=advice.timestamp,
            source=advice.source,
        )

    def to_domain(self, timestamp: datetime | None = None) -> CompatibilityAdvice:
        return CompatibilityAdvice(
            compatible=self.compatible,
            recommendation_score=self.recommendation_score,
            reasoning=self.reasoning,
            breeding_recommendations=tuple(self.breeding_recommendations),
            health_considerations=tuple(self.health_considerations),
            timestamp=timestamp or self.timestamp,
            source=self.source,
        )


class EvaluationLogEntrySchema(CamelModel):
    timestamp: datetime
    male_id: int
    male_animal_id: str
    male_name: str
    female_id: int
    female_animal_id: str
    female_name: str
    advice: CompatibilityAdviceSchema

    @field_validator("timestamp")
    def ensure_aware_utc(cls, v: datetime) -> datetime:
        return _ensure_aware_utc(v)

    @classmethod
    def from_domain(cls, entry: EvaluationLogEntry) -> EvaluationLogEntrySchema:
        return cls(
            timestamp=entry.timestamp,
            male_id=entry.male_id,
            male_animal_id=entry.male_animal_id,
            male_name=entry.male_name,
            female_id=entry.female_id,
            female_animal_id=entry.female_animal_id,
            female_name=entry.female_name,
            advice=CompatibilityAdviceSchema.from_domain(entry.advice),
        )

    def to_domain(self) -> EvaluationLogEntry:
        return EvaluationLogEntry(
            male_id=self.male_id,
            male_animal_id=self.male_animal_id,
            male_name=self.male_name,
            female_id=self.female_id,
            female_animal_id=self.female_animal_id,
            female_name=self.female_name,
            advice=self.advice.to_domain(),
            timestamp=self.timestamp,
        )
