from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from breeding_advisor.application.errors import ValidationError
from breeding_advisor.domain.models.animal import Animal
from breeding_advisor.domain.models.compatibility import (
    AdviceSource,
    CompatibilityAdvice,
    clamp_score,
)
from breeding_advisor.domain.value_objects.gender import Gender
from breeding_advisor.utils.datetime_tz import to_utc, utc_now

BASELINE_SCORE = 85
BASELINE_REASONING = "Basic compatibility assessment based on standard breeding guidelines."

MIN_BREEDING_AGE_MONTHS = 6
MIN_BREEDING_HEALTH = 70

BREED_MISMATCH_PENALTY = 10
UNDERAGE_PENALTY = 20
LOW_HEALTH_PENALTY = 20

# Higher wins when choosing the headline reasoning
SEVERITY_BREED = 1
SEVERITY_AGE = 2
SEVERITY_HEALTH = 3

STANDARD_BREEDING_RECOMMENDATIONS: tuple[str, ...] = (
    "Ensure proper nutrition before and during breeding",
    "Provide a quiet, stress-free environment for breeding",
    "Monitor the health of both animals closely",
)

STANDARD_HEALTH_CONSIDERATIONS: tuple[str, ...] = (
    "Check for any signs of respiratory issues before breeding",
    "Ensure both animals are parasite-free",
    "Monitor for pregnancy complications in the female",
)


@dataclass(frozen=True, slots=True)
class Finding:
    severity: int
    penalty: int
    disqualifying: bool
    message: str


def _label(animal: Animal) -> str:
    role = "Male" if animal.gender is Gender.MALE else "Female"
    return f"{role} {animal.animal_id} ({animal.name})"


def _check_range(animal: Animal, field_name: str, low: int, high: int) -> None:
    value = getattr(animal, field_name)
    if value is not None and not low <= value <= high:
        raise ValidationError(
            f"{field_name} for animal {animal.animal_id} must be between {low} and {high}",
            details={"animal_id": animal.animal_id, "field": field_name, "value": value},
        )


def _validate_candidate(animal: Animal, expected: Gender) -> None:
    for field_name in ("animal_id", "name", "gender"):
        value = getattr(animal, field_name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(
                f"Animal {animal.id} is missing required field '{field_name}'",
                details={"id": animal.id, "field": field_name},
            )
    if animal.gender is not expected:
        raise ValidationError(
            f"Animal {animal.animal_id} must be {expected.value}, got {animal.gender.value}",
            details={"animal_id": animal.animal_id, "field": "gender"},
        )
    if not animal.status.is_breedable():
        raise ValidationError(
            f"Animal {animal.animal_id} has status '{animal.status.value}' and cannot be bred",
            details={"animal_id": animal.animal_id, "field": "status"},
        )
    if str(animal.id) in animal.ancestry:
        raise ValidationError(
            f"Animal {animal.animal_id} lists itself in its own ancestry",
            details={"animal_id": animal.animal_id, "field": "ancestry"},
        )
    for field_name in ("health", "fertility", "growth_rate"):
        _check_range(animal, field_name, 1, 100)
    _check_range(animal, "pedigree_level", 0, 5)
    if animal.generation < 0:
        raise ValidationError(
            f"generation for animal {animal.animal_id} must not be negative",
            details={"animal_id": animal.animal_id, "field": "generation"},
        )


def validate_pair(male: Animal, female: Animal) -> None:
    """Reject pairs that cannot be meaningfully scored."""
    _validate_candidate(male, Gender.MALE)
    _validate_candidate(female, Gender.FEMALE)
    if male.id == female.id:
        raise ValidationError(
            "Cannot evaluate an animal against itself",
            details={"id": male.id},
        )


def _breed_finding(male: Animal, female: Animal) -> Finding | None:
    if male.breed and female.breed and male.breed != female.breed:
        return Finding(
            severity=SEVERITY_BREED,
            penalty=BREED_MISMATCH_PENALTY,
            disqualifying=False,
            message=(
                f"Cross-breeding {male.breed} with {female.breed} can be done "
                "but may affect offspring traits."
            ),
        )
    return None


def _age_finding(animal: Animal, now: datetime) -> Finding | None:
    age = animal.age_in_months(now)
    if age is not None and age < MIN_BREEDING_AGE_MONTHS:
        return Finding(
            severity=SEVERITY_AGE,
            penalty=UNDERAGE_PENALTY,
            disqualifying=True,
            message=(
                f"{_label(animal)} is {age} months old, under the "
                f"{MIN_BREEDING_AGE_MONTHS}-month minimum age for breeding."
            ),
        )
    return None


def _health_finding(animal: Animal) -> Finding | None:
    if animal.health is not None and animal.health < MIN_BREEDING_HEALTH:
        return Finding(
            severity=SEVERITY_HEALTH,
            penalty=LOW_HEALTH_PENALTY,
            disqualifying=True,
            message=(
                f"{_label(animal)} has a below average health score ({animal.health}), "
                "not recommended for breeding."
            ),
        )
    return None


def collect_findings(male: Animal, female: Animal, now: datetime) -> list[Finding]:
    """Findings in rule order: breed, age, health (male before female)."""
    candidates = (
        _breed_finding(male, female),
        _age_finding(male, now),
        _age_finding(female, now),
        _health_finding(male),
        _health_finding(female),
    )
    return [f for f in candidates if f is not None]


def _compose_reasoning(findings: list[Finding]) -> str:
    if not findings:
        return BASELINE_REASONING
    # max() keeps the first of equal severities
    headline = max(findings, key=lambda f: f.severity)
    others = [f.message for f in findings if f is not headline]
    if not others:
        return headline.message
    return f"{headline.message} Additional concerns: {' '.join(others)}"


def evaluate(male: Animal, female: Animal, *, now: datetime | None = None) -> CompatibilityAdvice:
    """Rule-based compatibility advice for a male/female pair.

    Deterministic for a given `now`. Missing birth dates or health scores
    never disqualify a candidate.
    """
    validate_pair(male, female)
    now = to_utc(now) if now is not None else utc_now()

    findings = collect_findings(male, female, now)
    score = BASELINE_SCORE - sum(f.penalty for f in findings)
    compatible = not any(f.disqualifying for f in findings)

    return CompatibilityAdvice(
        compatible=compatible,
        recommendation_score=clamp_score(score),
        reasoning=_compose_reasoning(findings),
        breeding_recommendations=STANDARD_BREEDING_RECOMMENDATIONS,
        health_considerations=STANDARD_HEALTH_CONSIDERATIONS,
        timestamp=now,
        source=AdviceSource.RULES,
    )
