"""
Campaign state consumed by travel and encounters.

This is the minimal authoritative store the simulation reads from:
resource balances, the crew roster, reputation, flags, cargo, the world
graph, the campaign clock and the random streams. The travel executor
spends fuel and advances time through it; everything else is read-only
to the simulation core.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, TYPE_CHECKING

from wayfarer.core.rng import RngService
from wayfarer.core.world import StarSystem, WorldState
from wayfarer.models.context import CrewStat

if TYPE_CHECKING:
    from wayfarer.core.encounter_generator import EncounterGenerator
    from wayfarer.models.encounter import EncounterInstance

logger = logging.getLogger(__name__)


@dataclass
class CrewMember:
    """A crew member on the roster."""
    id: str
    name: str
    role: str = "soldier"
    traits: List[str] = field(default_factory=list)
    stats: Dict[CrewStat, int] = field(default_factory=dict)
    is_alive: bool = True
    injuries: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "traits": list(self.traits),
            "stats": {stat.value: value for stat, value in self.stats.items()},
            "is_alive": self.is_alive,
            "injuries": list(self.injuries),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CrewMember":
        stats = {}
        for key, value in data.get("stats", {}).items():
            stat = CrewStat.parse(key)
            if stat is not None:
                stats[stat] = int(value)
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            role=data.get("role", "soldier"),
            traits=list(data.get("traits", [])),
            stats=stats,
            is_alive=data.get("is_alive", True),
            injuries=list(data.get("injuries", [])),
        )


@dataclass
class CampaignState:
    """Authoritative campaign data."""
    world: WorldState
    rng: RngService
    current_node_id: int
    money: int = 0
    fuel: int = 0
    parts: int = 0
    meds: int = 0
    ammo: int = 0
    crew: List[CrewMember] = field(default_factory=list)
    faction_rep: Dict[str, int] = field(default_factory=dict)
    flags: Set[str] = field(default_factory=set)
    cargo_value: int = 0
    has_illegal_cargo: bool = False
    day: int = 0
    active_encounter: Optional["EncounterInstance"] = None
    encounter_generator: Optional["EncounterGenerator"] = None

    def get_current_system(self) -> Optional[StarSystem]:
        return self.world.get_system(self.current_node_id)

    def get_alive_crew(self) -> List[CrewMember]:
        return [c for c in self.crew if c.is_alive]

    def spend_fuel(self, amount: int) -> bool:
        """Spend fuel if the balance allows it."""
        if amount < 0 or amount > self.fuel:
            logger.warning(f"Cannot spend {amount} fuel with {self.fuel} in the tank")
            return False
        self.fuel -= amount
        return True

    def advance_time(self, days: int) -> None:
        if days > 0:
            self.day += days
