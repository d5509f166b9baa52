from __future__ import annotations

import os
import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable

import pytest

os.environ.pop("OPENAI_API_KEY", None)

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(PROJECT_ROOT))

# ruff: noqa: E402
from breeding_advisor.domain.models.animal import Animal

FIXED_NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def birth_date_for_age(months: int, now: datetime = FIXED_NOW) -> date:
    """A birth date giving `months` whole average-length months at `now`."""
    return (now - timedelta(days=30.44 * months + 1)).date()


@pytest.fixture()
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture()
def make_animal() -> Callable[..., Animal]:
    counter = {"next": 100}

    def factory(gender: str = "male", *, age_months: int | None = 12, **overrides: Any) -> Animal:
        counter["next"] += 1
        ident = overrides.pop("id", counter["next"])
        prefix = "M" if gender == "male" else "F"
        values: dict[str, Any] = {
            "id": ident,
            "animal_id": f"{prefix}{ident}",
            "name": f"{'Buck' if gender == 'male' else 'Doe'} {ident}",
            "gender": gender,
            "breed": "New Zealand",
            "health": 85,
            "weight": 4.2,
            "date_of_birth": birth_date_for_age(age_months) if age_months is not None else None,
        }
        values.update(overrides)
        return Animal.create(**values)

    return factory
