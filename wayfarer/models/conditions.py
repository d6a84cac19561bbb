"""
Encounter option conditions.

Each condition kind is its own immutable class with a typed payload.
All conditions on an option must hold for the option to be visible.
Evaluation is pure and total: a missing context always evaluates False.
"""
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple, Type

from wayfarer.models.context import CrewStat, EncounterContext, ResourceType


class ConditionType(str, Enum):
    """Condition kinds."""
    HAS_RESOURCE = "has_resource"
    HAS_TRAIT = "has_trait"
    HAS_CARGO = "has_cargo"
    FACTION_REP = "faction_rep"
    SYSTEM_TAG = "system_tag"
    CREW_STAT = "crew_stat"
    HAS_FLAG = "has_flag"
    NOT = "not"
    ALL_OF = "all_of"
    ANY_OF = "any_of"


CONDITION_CLASSES: Dict[ConditionType, Type["Condition"]] = {}


@dataclass(frozen=True)
class Condition:
    """Base class for all conditions."""
    type: ClassVar[ConditionType]

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        CONDITION_CLASSES[cls.type] = cls

    def evaluate(self, context: Optional[EncounterContext]) -> bool:
        if context is None:
            return False
        return self._check(context)

    def _check(self, context: EncounterContext) -> bool:
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type.value}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Condition):
                value = value.to_dict()
            elif isinstance(value, tuple):
                value = [c.to_dict() for c in value]
            elif isinstance(value, Enum):
                value = value.value
            data[f.name] = value
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Condition":
        kind = ConditionType(data["type"])
        if kind == ConditionType.HAS_RESOURCE:
            return ResourceCondition(ResourceType(data["resource"]), data.get("threshold", 0))
        if kind == ConditionType.CREW_STAT:
            return CrewStatCondition(CrewStat(data["stat"]), data.get("threshold", 0))
        if kind == ConditionType.NOT:
            child = data.get("child")
            return NotCondition(Condition.from_dict(child) if child else None)
        if kind in (ConditionType.ALL_OF, ConditionType.ANY_OF):
            children = tuple(Condition.from_dict(c) for c in data.get("children", []))
            return CONDITION_CLASSES[kind](children)
        payload = {k: v for k, v in data.items() if k != "type"}
        return CONDITION_CLASSES[kind](**payload)


# =============================================================================
# VARIANTS
# =============================================================================

@dataclass(frozen=True)
class ResourceCondition(Condition):
    """Resource balance at or above a threshold."""
    type: ClassVar[ConditionType] = ConditionType.HAS_RESOURCE
    resource: ResourceType
    threshold: int = 0

    def _check(self, context: EncounterContext) -> bool:
        return context.get_resource(self.resource) >= self.threshold


@dataclass(frozen=True)
class TraitCondition(Condition):
    """Any crew member has the trait."""
    type: ClassVar[ConditionType] = ConditionType.HAS_TRAIT
    trait_id: str

    def _check(self, context: EncounterContext) -> bool:
        return context.has_crew_with_trait(self.trait_id)


@dataclass(frozen=True)
class CargoCondition(Condition):
    """Cargo value at or above a threshold."""
    type: ClassVar[ConditionType] = ConditionType.HAS_CARGO
    min_value: int = 0

    def _check(self, context: EncounterContext) -> bool:
        return context.cargo_value >= self.min_value


@dataclass(frozen=True)
class FactionRepCondition(Condition):
    """Reputation with a faction at or above a threshold."""
    type: ClassVar[ConditionType] = ConditionType.FACTION_REP
    faction_id: str
    threshold: int = 0

    def _check(self, context: EncounterContext) -> bool:
        return context.get_faction_rep(self.faction_id) >= self.threshold


@dataclass(frozen=True)
class SystemTagCondition(Condition):
    """Current system carries a tag."""
    type: ClassVar[ConditionType] = ConditionType.SYSTEM_TAG
    tag: str

    def _check(self, context: EncounterContext) -> bool:
        return self.tag in context.system_tags


@dataclass(frozen=True)
class CrewStatCondition(Condition):
    """Best crew value for a stat at or above a threshold."""
    type: ClassVar[ConditionType] = ConditionType.CREW_STAT
    stat: CrewStat
    threshold: int = 0

    def _check(self, context: EncounterContext) -> bool:
        return context.get_best_crew_stat(self.stat) >= self.threshold


@dataclass(frozen=True)
class FlagCondition(Condition):
    """Campaign flag is set."""
    type: ClassVar[ConditionType] = ConditionType.HAS_FLAG
    flag_id: str

    def _check(self, context: EncounterContext) -> bool:
        return context.has_flag(self.flag_id)


@dataclass(frozen=True)
class NotCondition(Condition):
    """Negation of a child condition. Without a child it never holds."""
    type: ClassVar[ConditionType] = ConditionType.NOT
    child: Optional[Condition] = None

    def _check(self, context: EncounterContext) -> bool:
        return self.child is not None and not self.child.evaluate(context)


@dataclass(frozen=True)
class AllOf(Condition):
    """Every child holds. Empty holds."""
    type: ClassVar[ConditionType] = ConditionType.ALL_OF
    children: Tuple[Condition, ...] = ()

    def _check(self, context: EncounterContext) -> bool:
        return all(c.evaluate(context) for c in self.children)


@dataclass(frozen=True)
class AnyOf(Condition):
    """At least one child holds. Empty never holds."""
    type: ClassVar[ConditionType] = ConditionType.ANY_OF
    children: Tuple[Condition, ...] = ()

    def _check(self, context: EncounterContext) -> bool:
        return any(c.evaluate(context) for c in self.children)


# =============================================================================
# FACTORIES
# =============================================================================

def has_credits(minimum: int) -> ResourceCondition:
    return ResourceCondition(ResourceType.MONEY, minimum)


def has_fuel(minimum: int) -> ResourceCondition:
    return ResourceCondition(ResourceType.FUEL, minimum)


def has_parts(minimum: int) -> ResourceCondition:
    return ResourceCondition(ResourceType.PARTS, minimum)


def has_trait(trait_id: str) -> TraitCondition:
    return TraitCondition(trait_id)


def has_cargo_value(minimum: int) -> CargoCondition:
    return CargoCondition(minimum)


def faction_rep_min(faction_id: str, minimum: int) -> FactionRepCondition:
    return FactionRepCondition(faction_id, minimum)


def system_has_tag(tag: str) -> SystemTagCondition:
    return SystemTagCondition(tag)


def crew_stat_min(stat: CrewStat, minimum: int) -> CrewStatCondition:
    return CrewStatCondition(stat, minimum)


def flag_set(flag_id: str) -> FlagCondition:
    return FlagCondition(flag_id)


def negate(condition: Condition) -> NotCondition:
    return NotCondition(condition)


def all_of(*conditions: Condition) -> AllOf:
    return AllOf(tuple(conditions))


def any_of(*conditions: Condition) -> AnyOf:
    return AnyOf(tuple(conditions))
