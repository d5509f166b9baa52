from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable

from breeding_advisor.domain.value_objects.animal_status import AnimalStatus
from breeding_advisor.domain.value_objects.gender import Gender
from breeding_advisor.utils.datetime_tz import months_between


@dataclass(frozen=True, slots=True)
class Animal:
    """Pedigree record as supplied by the persistence layer.

    The engine only reads these; lineage fields are weak references to
    other records, never ownership.
    """

    id: int
    animal_id: str
    name: str
    gender: Gender | None
    breed: str | None = None
    secondary_breed: str | None = None
    is_mixed: bool = False
    mix_ratio: str | None = None  # e.g. "75% New Zealand, 25% Californian"
    date_of_birth: date | None = None
    health: int | None = None  # 1-100
    fertility: int | None = None  # 1-100
    growth_rate: int | None = None  # 1-100
    weight: float | None = None  # kg

    # Lineage
    parent_male_id: int | None = None
    parent_female_id: int | None = None
    generation: int = 0  # 0 = foundation stock
    ancestry: tuple[str, ...] = ()
    pedigree_level: int = 0  # 0-5, higher = more verified lineage

    status: AnimalStatus = AnimalStatus.ACTIVE

    @classmethod
    def create(
        cls,
        id: int,
        animal_id: str,
        name: str,
        gender: Gender | str | None,
        breed: str | None = None,
        secondary_breed: str | None = None,
        is_mixed: bool = False,
        mix_ratio: str | None = None,
        date_of_birth: date | datetime | None = None,
        health: int | None = None,
        fertility: int | None = None,
        growth_rate: int | None = None,
        weight: float | None = None,
        parent_male_id: int | None = None,
        parent_female_id: int | None = None,
        generation: int = 0,
        ancestry: Iterable[int | str] | None = None,
        pedigree_level: int = 0,
        status: AnimalStatus | str = AnimalStatus.ACTIVE,
    ) -> Animal:
        if isinstance(date_of_birth, datetime):
            date_of_birth = date_of_birth.date()
        return cls(
            id=id,
            animal_id=animal_id,
            name=name,
            gender=Gender(gender.lower()) if isinstance(gender, str) else gender,
            breed=breed,
            secondary_breed=secondary_breed,
            is_mixed=is_mixed,
            mix_ratio=mix_ratio,
            date_of_birth=date_of_birth,
            health=health,
            fertility=fertility,
            growth_rate=growth_rate,
            weight=weight,
            parent_male_id=parent_male_id,
            parent_female_id=parent_female_id,
            generation=generation,
            ancestry=tuple(str(a) for a in ancestry or ()),
            pedigree_level=pedigree_level,
            status=AnimalStatus(status.lower()) if isinstance(status, str) else status,
        )

    @property
    def parent_ids(self) -> tuple[int, ...]:
        return tuple(p for p in (self.parent_male_id, self.parent_female_id) if p is not None)

    def age_in_months(self, now: datetime) -> int | None:
        if self.date_of_birth is None:
            return None
        return months_between(self.date_of_birth, now)

    def known_ancestors(self) -> set[str]:
        """Ancestry list plus direct parents, as string identifiers."""
        return set(self.ancestry) | {str(p) for p in self.parent_ids}
