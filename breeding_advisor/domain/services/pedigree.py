from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from breeding_advisor.domain.models.animal import Animal
from breeding_advisor.domain.value_objects.gender import Gender


class RiskLevel(str, Enum):
    NONE = "none"
    MEDIUM = "medium"
    HIGH = "high"


class Relationship(str, Enum):
    PARENT_CHILD = "parent_child"
    ANCESTOR_DESCENDANT = "ancestor_descendant"
    FULL_SIBLINGS = "full_siblings"
    HALF_SIBLINGS = "half_siblings"
    SHARED_ANCESTRY = "shared_ancestry"

    @property
    def label(self) -> str:
        return self.value.replace("_", "-")

    @property
    def risk_level(self) -> RiskLevel:
        if self is Relationship.SHARED_ANCESTRY:
            return RiskLevel.MEDIUM
        return RiskLevel.HIGH


@dataclass(frozen=True, slots=True)
class RelationshipRisk:
    is_risky: bool
    relationship: Relationship | None = None
    shared_ancestors: tuple[str, ...] = ()
    risk_level: RiskLevel = RiskLevel.NONE

    def describe(self) -> str:
        if self.relationship is None:
            return "No known relationship"
        if self.shared_ancestors:
            return (
                f"Candidates share ancestry ({', '.join(self.shared_ancestors)}), "
                "which increases inbreeding risk."
            )
        return f"Candidates are {self.relationship.label} relatives, which carries high inbreeding risk."


@dataclass(frozen=True, slots=True)
class OffspringLineage:
    generation: int
    ancestry: tuple[str, ...]
    parent_male_id: int
    parent_female_id: int


NO_RISK = RelationshipRisk(is_risky=False)


def _risk(relationship: Relationship, shared: tuple[str, ...] = ()) -> RelationshipRisk:
    return RelationshipRisk(
        is_risky=True,
        relationship=relationship,
        shared_ancestors=shared,
        risk_level=relationship.risk_level,
    )


def _is_direct_parent(parent: Animal, child: Animal) -> bool:
    return parent.id in child.parent_ids


def assess_relationship(male: Animal, female: Animal) -> RelationshipRisk:
    """Classify how closely two candidates are related.

    Checks run from closest to most distant relation; the first match wins.
    """
    if _is_direct_parent(male, female) or _is_direct_parent(female, male):
        return _risk(Relationship.PARENT_CHILD)

    if str(male.id) in female.known_ancestors() or str(female.id) in male.known_ancestors():
        return _risk(Relationship.ANCESTOR_DESCENDANT)

    same_sire = male.parent_male_id is not None and male.parent_male_id == female.parent_male_id
    same_dam = (
        male.parent_female_id is not None and male.parent_female_id == female.parent_female_id
    )
    if same_sire and same_dam:
        return _risk(Relationship.FULL_SIBLINGS)
    if same_sire or same_dam:
        return _risk(Relationship.HALF_SIBLINGS)

    shared = male.known_ancestors() & female.known_ancestors()
    if shared:
        return _risk(Relationship.SHARED_ANCESTRY, tuple(sorted(shared)))
    return NO_RISK


def find_potential_mates(animal: Animal, candidates: Iterable[Animal]) -> list[Animal]:
    """Breedable animals of the opposite gender with no lineage risk.

    Candidate order is preserved.
    """
    if animal.gender is None:
        return []
    wanted = animal.gender.opposite()
    mates: list[Animal] = []
    for candidate in candidates:
        if candidate.id == animal.id or candidate.gender is not wanted:
            continue
        if not candidate.status.is_breedable():
            continue
        if animal.gender is Gender.MALE:
            risk = assess_relationship(animal, candidate)
        else:
            risk = assess_relationship(candidate, animal)
        if not risk.is_risky:
            mates.append(candidate)
    return mates


def derive_offspring_lineage(sire: Animal, dam: Animal) -> OffspringLineage:
    """Generation and ancestry an offspring of `sire` x `dam` would carry."""
    ordered: list[str] = []
    candidates = (
        str(sire.id),
        str(dam.id),
        *(str(p) for p in sire.parent_ids),
        *sire.ancestry,
        *(str(p) for p in dam.parent_ids),
        *dam.ancestry,
    )
    for ancestor in candidates:
        if ancestor not in ordered:
            ordered.append(ancestor)
    return OffspringLineage(
        generation=max(sire.generation, dam.generation) + 1,
        ancestry=tuple(ordered),
        parent_male_id=sire.id,
        parent_female_id=dam.id,
    )
