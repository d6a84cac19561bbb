"""
Encounter context.

A read-only snapshot of campaign and world state used to evaluate option
conditions and resolve skill checks. Built fresh each time it is needed
and never mutated by the encounter runtime.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Union, TYPE_CHECKING

from wayfarer.core.rng import RngStream

if TYPE_CHECKING:
    from wayfarer.models.campaign import CampaignState, CrewMember
    from wayfarer.models.travel import TravelContext


DEFAULT_FACTION_REP = 50


class CrewStat(str, Enum):
    """The six crew stats."""
    GRIT = "grit"
    REFLEXES = "reflexes"
    AIM = "aim"
    TECH = "tech"
    SAVVY = "savvy"
    RESOLVE = "resolve"

    @classmethod
    def parse(cls, value: Union[str, "CrewStat", None]) -> Optional["CrewStat"]:
        """Parse a stat name case-insensitively. Returns None if unknown."""
        if isinstance(value, CrewStat):
            return value
        if not value:
            return None
        try:
            return cls(value.lower())
        except ValueError:
            return None


class ResourceType(str, Enum):
    """Campaign resources that conditions and effects refer to."""
    MONEY = "money"
    FUEL = "fuel"
    PARTS = "parts"
    MEDS = "meds"
    AMMO = "ammo"


@dataclass(frozen=True)
class CrewSnapshot:
    """Immutable summary of one crew member."""
    id: str
    name: str
    trait_ids: frozenset = frozenset()
    grit: int = 0
    reflexes: int = 0
    aim: int = 0
    tech: int = 0
    savvy: int = 0
    resolve: int = 0

    def get_stat(self, stat: CrewStat) -> int:
        return getattr(self, stat.value, 0)

    def has_trait(self, trait_id: str) -> bool:
        return trait_id in self.trait_ids

    @classmethod
    def from_crew(cls, crew: "CrewMember") -> "CrewSnapshot":
        stats = crew.stats
        return cls(
            id=crew.id,
            name=crew.name,
            trait_ids=frozenset(crew.traits),
            grit=stats.get(CrewStat.GRIT, 0),
            reflexes=stats.get(CrewStat.REFLEXES, 0),
            aim=stats.get(CrewStat.AIM, 0),
            tech=stats.get(CrewStat.TECH, 0),
            savvy=stats.get(CrewStat.SAVVY, 0),
            resolve=stats.get(CrewStat.RESOLVE, 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "traits": sorted(self.trait_ids),
            "stats": {stat.value: self.get_stat(stat) for stat in CrewStat},
        }


@dataclass
class EncounterContext:
    """Snapshot used to evaluate conditions and roll skill checks."""
    money: int = 0
    fuel: int = 0
    parts: int = 0
    ammo: int = 0
    meds: int = 0
    crew: List[CrewSnapshot] = field(default_factory=list)
    current_system_id: Optional[int] = None
    system_tags: Set[str] = field(default_factory=set)
    system_owner_faction_id: Optional[str] = None
    faction_rep: Dict[str, int] = field(default_factory=dict)
    cargo_value: int = 0
    has_illegal_cargo: bool = False
    flags: Set[str] = field(default_factory=set)
    rng: Optional[RngStream] = None

    # ==================== Queries ====================

    def get_resource(self, resource: Union[str, ResourceType]) -> int:
        key = resource.value if isinstance(resource, ResourceType) else resource
        return {
            ResourceType.MONEY.value: self.money,
            ResourceType.FUEL.value: self.fuel,
            ResourceType.PARTS.value: self.parts,
            ResourceType.AMMO.value: self.ammo,
            ResourceType.MEDS.value: self.meds,
        }.get(key, 0)

    def has_crew_with_trait(self, trait_id: str) -> bool:
        if not trait_id:
            return False
        return any(c.has_trait(trait_id) for c in self.crew)

    def get_faction_rep(self, faction_id: Optional[str]) -> int:
        if not faction_id:
            return DEFAULT_FACTION_REP
        return self.faction_rep.get(faction_id, DEFAULT_FACTION_REP)

    def has_flag(self, flag_id: str) -> bool:
        if not flag_id:
            return False
        return flag_id in self.flags

    def get_best_crew_stat(self, stat: Union[str, CrewStat]) -> int:
        """Highest value of a stat across the crew; 0 for unknown stat or no crew."""
        parsed = CrewStat.parse(stat)
        if parsed is None or not self.crew:
            return 0
        return max(c.get_stat(parsed) for c in self.crew)

    # ==================== Factories ====================

    @classmethod
    def from_campaign(cls, campaign: Optional["CampaignState"]) -> "EncounterContext":
        if campaign is None:
            return cls()

        context = cls(
            money=campaign.money,
            fuel=campaign.fuel,
            parts=campaign.parts,
            ammo=campaign.ammo,
            meds=campaign.meds,
            current_system_id=campaign.current_node_id,
            cargo_value=campaign.cargo_value,
            has_illegal_cargo=campaign.has_illegal_cargo,
            faction_rep=dict(campaign.faction_rep),
            flags=set(campaign.flags),
            rng=campaign.rng.campaign if campaign.rng else None,
        )

        system = campaign.get_current_system()
        if system is not None:
            context.system_tags = set(system.tags)
            context.system_owner_faction_id = system.owning_faction_id

        context.crew = [CrewSnapshot.from_crew(c) for c in campaign.get_alive_crew()]
        return context

    @classmethod
    def from_travel_context(
        cls,
        travel: Optional["TravelContext"],
        campaign: Optional["CampaignState"],
    ) -> "EncounterContext":
        """Campaign snapshot with location and cargo taken from the travel situation."""
        context = cls.from_campaign(campaign)
        if travel is not None:
            context.current_system_id = travel.current_system_id
            context.system_tags = set(travel.system_tags)
            context.system_owner_faction_id = travel.system_owner_faction_id
            context.cargo_value = travel.cargo_value
            context.has_illegal_cargo = travel.has_illegal_cargo
        return context
