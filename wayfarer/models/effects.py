"""
Encounter effects.

An effect is one atomic consequence accumulated while an encounter is
played. The runtime only accumulates effects; applying them to crew,
ship, cargo or campaign stores is done by whoever owns those stores.
Two effect kinds steer the encounter itself instead of being
accumulated: GotoNodeEffect and EndEncounterEffect.
"""
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Type

from wayfarer.models.context import ResourceType


class EffectType(str, Enum):
    """Effect kinds."""
    ADD_RESOURCE = "add_resource"
    CREW_INJURY = "crew_injury"
    CREW_XP = "crew_xp"
    CREW_TRAIT = "crew_trait"
    ADD_CREW = "add_crew"
    SHIP_DAMAGE = "ship_damage"
    FACTION_REP = "faction_rep"
    SET_FLAG = "set_flag"
    TIME_DELAY = "time_delay"
    ADD_CARGO = "add_cargo"
    REMOVE_CARGO = "remove_cargo"
    GOTO_NODE = "goto_node"
    END_ENCOUNTER = "end_encounter"
    TRIGGER_TACTICAL = "trigger_tactical"


class InjuryType(str, Enum):
    WOUNDED = "wounded"
    CRITICAL = "critical"
    CONCUSSED = "concussed"
    BLEEDING = "bleeding"


EFFECT_CLASSES: Dict[EffectType, Type["Effect"]] = {}


@dataclass(frozen=True)
class Effect:
    """Base class for all effects."""
    type: ClassVar[EffectType]

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        EFFECT_CLASSES[cls.type] = cls

    @property
    def is_flow_control(self) -> bool:
        return self.type in (EffectType.GOTO_NODE, EffectType.END_ENCOUNTER)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type.value}
        for f in fields(self):
            value = getattr(self, f.name)
            data[f.name] = value.value if isinstance(value, Enum) else value
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Effect":
        kind = EffectType(data["type"])
        payload = {k: v for k, v in data.items() if k != "type"}
        if kind == EffectType.ADD_RESOURCE:
            payload["resource"] = ResourceType(payload["resource"])
        elif kind == EffectType.CREW_INJURY and "injury" in payload:
            payload["injury"] = InjuryType(payload["injury"])
        return EFFECT_CLASSES[kind](**payload)


# =============================================================================
# VARIANTS
# =============================================================================

@dataclass(frozen=True)
class ResourceEffect(Effect):
    """Resource delta. Negative amounts spend."""
    type: ClassVar[EffectType] = EffectType.ADD_RESOURCE
    resource: ResourceType
    amount: int


@dataclass(frozen=True)
class CrewInjuryEffect(Effect):
    """Injure a crew member. No crew_id means the applier picks one."""
    type: ClassVar[EffectType] = EffectType.CREW_INJURY
    injury: InjuryType = InjuryType.WOUNDED
    crew_id: Optional[str] = None


@dataclass(frozen=True)
class CrewXpEffect(Effect):
    """Experience grant. No crew_id means the whole crew."""
    type: ClassVar[EffectType] = EffectType.CREW_XP
    amount: int
    crew_id: Optional[str] = None


@dataclass(frozen=True)
class CrewTraitEffect(Effect):
    """Add or remove a trait."""
    type: ClassVar[EffectType] = EffectType.CREW_TRAIT
    trait_id: str
    add: bool = True
    crew_id: Optional[str] = None


@dataclass(frozen=True)
class AddCrewEffect(Effect):
    """Recruit a new crew member."""
    type: ClassVar[EffectType] = EffectType.ADD_CREW
    name: str
    role: str = "soldier"


@dataclass(frozen=True)
class ShipDamageEffect(Effect):
    type: ClassVar[EffectType] = EffectType.SHIP_DAMAGE
    amount: int


@dataclass(frozen=True)
class FactionRepEffect(Effect):
    type: ClassVar[EffectType] = EffectType.FACTION_REP
    faction_id: str
    amount: int


@dataclass(frozen=True)
class SetFlagEffect(Effect):
    type: ClassVar[EffectType] = EffectType.SET_FLAG
    flag_id: str
    value: bool = True


@dataclass(frozen=True)
class TimeDelayEffect(Effect):
    type: ClassVar[EffectType] = EffectType.TIME_DELAY
    days: int


@dataclass(frozen=True)
class AddCargoEffect(Effect):
    type: ClassVar[EffectType] = EffectType.ADD_CARGO
    item_id: str
    quantity: int = 1


@dataclass(frozen=True)
class RemoveCargoEffect(Effect):
    type: ClassVar[EffectType] = EffectType.REMOVE_CARGO
    item_id: str
    quantity: int = 1


@dataclass(frozen=True)
class GotoNodeEffect(Effect):
    """Jump to another node of the same template."""
    type: ClassVar[EffectType] = EffectType.GOTO_NODE
    node_id: str


@dataclass(frozen=True)
class EndEncounterEffect(Effect):
    type: ClassVar[EffectType] = EffectType.END_ENCOUNTER


@dataclass(frozen=True)
class TriggerTacticalEffect(Effect):
    """Hand off to tactical play; the encounter pauses until it returns."""
    type: ClassVar[EffectType] = EffectType.TRIGGER_TACTICAL
    mission_type: str


# =============================================================================
# FACTORIES
# =============================================================================

def add_credits(amount: int) -> ResourceEffect:
    return ResourceEffect(ResourceType.MONEY, amount)


def lose_credits(amount: int) -> ResourceEffect:
    return ResourceEffect(ResourceType.MONEY, -amount)


def add_fuel(amount: int) -> ResourceEffect:
    return ResourceEffect(ResourceType.FUEL, amount)


def lose_fuel(amount: int) -> ResourceEffect:
    return ResourceEffect(ResourceType.FUEL, -amount)


def add_parts(amount: int) -> ResourceEffect:
    return ResourceEffect(ResourceType.PARTS, amount)


def add_meds(amount: int) -> ResourceEffect:
    return ResourceEffect(ResourceType.MEDS, amount)


def crew_injury(injury: InjuryType = InjuryType.WOUNDED) -> CrewInjuryEffect:
    return CrewInjuryEffect(injury)


def crew_xp(amount: int) -> CrewXpEffect:
    return CrewXpEffect(amount)


def add_trait(trait_id: str) -> CrewTraitEffect:
    return CrewTraitEffect(trait_id, add=True)


def remove_trait(trait_id: str) -> CrewTraitEffect:
    return CrewTraitEffect(trait_id, add=False)


def add_crew(name: str, role: str = "soldier") -> AddCrewEffect:
    return AddCrewEffect(name, role)


def ship_damage(amount: int) -> ShipDamageEffect:
    return ShipDamageEffect(amount)


def faction_rep(faction_id: str, delta: int) -> FactionRepEffect:
    return FactionRepEffect(faction_id, delta)


def set_flag(flag_id: str, value: bool = True) -> SetFlagEffect:
    return SetFlagEffect(flag_id, value)


def time_delay(days: int) -> TimeDelayEffect:
    return TimeDelayEffect(days)


def add_cargo(item_id: str, quantity: int = 1) -> AddCargoEffect:
    return AddCargoEffect(item_id, quantity)


def remove_cargo(item_id: str, quantity: int = 1) -> RemoveCargoEffect:
    return RemoveCargoEffect(item_id, quantity)


def goto_node(node_id: str) -> GotoNodeEffect:
    return GotoNodeEffect(node_id)


def end_encounter() -> EndEncounterEffect:
    return EndEncounterEffect()


def trigger_tactical(mission_type: str) -> TriggerTacticalEffect:
    return TriggerTacticalEffect(mission_type)
