from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from breeding_advisor.domain.models.animal import Animal
from breeding_advisor.domain.models.compatibility import (
    CompatibilityAdvice,
    EvaluationLogEntry,
    clamp_score,
)
from breeding_advisor.domain.value_objects.animal_status import AnimalStatus
from breeding_advisor.domain.value_objects.gender import Gender


def make_advice(**overrides) -> CompatibilityAdvice:
    values = {
        "compatible": True,
        "recommendation_score": 80,
        "reasoning": "Fine",
        "breeding_recommendations": (),
        "health_considerations": (),
        "timestamp": datetime(2026, 1, 1, tzinfo=timezone.utc),
    }
    values.update(overrides)
    return CompatibilityAdvice(**values)


def test_clamp_score():
    assert clamp_score(-15) == 0
    assert clamp_score(130) == 100
    assert clamp_score(42) == 42


@pytest.mark.parametrize("score", [-1, 101])
def test_advice_rejects_out_of_range_score(score):
    with pytest.raises(ValueError):
        make_advice(recommendation_score=score)


def test_advice_rejects_blank_reasoning():
    with pytest.raises(ValueError):
        make_advice(reasoning=" ")


def test_log_entry_copies_candidate_identity(make_animal, now):
    male = make_animal("male", id=1, animal_id="M1", name="Hopper")
    female = make_animal("female", id=2, animal_id="F1", name="Fluffy")

    entry = EvaluationLogEntry.create(male, female, make_advice(), timestamp=now)

    assert (entry.male_id, entry.male_animal_id, entry.male_name) == (1, "M1", "Hopper")
    assert (entry.female_id, entry.female_animal_id, entry.female_name) == (2, "F1", "Fluffy")
    assert entry.timestamp == now


def test_animal_create_normalises_inputs():
    animal = Animal.create(
        id=3,
        animal_id="F3",
        name="Cotton",
        gender="Female",
        date_of_birth=datetime(2025, 7, 20, 8, 30),
        ancestry=[1, "2"],
        status="BREEDING",
    )

    assert animal.gender is Gender.FEMALE
    assert animal.status is AnimalStatus.BREEDING
    assert animal.date_of_birth == date(2025, 7, 20)
    assert animal.ancestry == ("1", "2")
    assert animal.parent_ids == ()
