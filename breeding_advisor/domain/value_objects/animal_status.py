from __future__ import annotations

from enum import Enum


class AnimalStatus(str, Enum):
    ACTIVE = "active"
    BREEDING = "breeding"
    RETIRED = "retired"
    SOLD = "sold"
    DECEASED = "deceased"

    def is_breedable(self) -> bool:
        return self in {AnimalStatus.ACTIVE, AnimalStatus.BREEDING}
