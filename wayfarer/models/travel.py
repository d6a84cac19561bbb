"""
Travel data models.

Plans and segments are immutable once built by the planner. TravelState
is the mutable cursor the executor advances day by day; it is plain data
so a paused journey can be snapshotted and resumed later.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple, TYPE_CHECKING

from wayfarer.core.travel_costs import EncounterType
from wayfarer.core.world import Route, StarSystem, SystemMetrics

if TYPE_CHECKING:
    from wayfarer.models.encounter import EncounterInstance


class PlanInvalidReason(str, Enum):
    """Why a plan could not be built."""
    NONE = "none"
    NO_ROUTE = "no_route"
    SAME_LOCATION = "same_location"
    INVALID_LOCATION = "invalid_location"


class TravelValidationFailure(str, Enum):
    """Why a plan cannot be executed with the fuel on hand."""
    NONE = "none"
    NULL_PLAN = "null_plan"
    INVALID_PLAN = "invalid_plan"
    INSUFFICIENT_FUEL = "insufficient_fuel"


class TravelStatus(str, Enum):
    """Travel executor states."""
    EXECUTING = "executing"
    COMPLETED = "completed"
    INTERRUPTED = "interrupted"
    PAUSED_FOR_ENCOUNTER = "paused_for_encounter"
    CANCELLED = "cancelled"


class InterruptReason(str, Enum):
    """Why a journey stopped short of its destination."""
    NONE = "none"
    INSUFFICIENT_FUEL = "insufficient_fuel"
    PLAYER_ABORT = "player_abort"
    ENCOUNTER_DEFEAT = "encounter_defeat"
    ENCOUNTER_CAPTURE = "encounter_capture"
    ROUTE_BLOCKED = "route_blocked"


class EncounterResolution(str, Enum):
    """How an encounter met during travel ended."""
    PENDING = "pending"
    COMPLETED = "completed"
    DEFEAT = "defeat"
    CAPTURED = "captured"
    FLED = "fled"


# =============================================================================
# PLANS
# =============================================================================

@dataclass(frozen=True)
class TravelSegment:
    """One directed traversal of a single route."""
    from_system_id: int
    to_system_id: int
    route: Optional[Route]
    distance: float
    fuel_cost: int
    time_days: int
    encounter_chance: float
    suggested_encounter_type: EncounterType = EncounterType.RANDOM

    @property
    def hazard_level(self) -> int:
        return self.route.hazard_level if self.route else 0

    @property
    def route_tags(self) -> Set[str]:
        return set(self.route.tags) if self.route else set()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from_system_id": self.from_system_id,
            "to_system_id": self.to_system_id,
            "route_id": self.route.id if self.route else None,
            "distance": self.distance,
            "fuel_cost": self.fuel_cost,
            "time_days": self.time_days,
            "encounter_chance": round(self.encounter_chance, 4),
            "hazard_level": self.hazard_level,
            "route_tags": sorted(self.route_tags),
            "suggested_encounter_type": self.suggested_encounter_type.value,
        }


@dataclass(frozen=True)
class TravelPlan:
    """
    A route from origin to destination with precomputed totals.

    Build with from_segments() or invalid(); totals are derived from the
    segments and never set independently.
    """
    origin_system_id: int
    destination_system_id: int
    segments: Tuple[TravelSegment, ...] = ()
    total_fuel_cost: int = 0
    total_days: int = 0
    total_distance: float = 0.0
    total_hazard: int = 0
    average_encounter_chance: float = 0.0
    is_valid: bool = False
    invalid_reason: PlanInvalidReason = PlanInvalidReason.NONE

    @classmethod
    def invalid(cls, origin: int, destination: int, reason: PlanInvalidReason) -> "TravelPlan":
        return cls(
            origin_system_id=origin,
            destination_system_id=destination,
            is_valid=False,
            invalid_reason=reason,
        )

    @classmethod
    def from_segments(cls, origin: int, destination: int, segments: List[TravelSegment]) -> "TravelPlan":
        count = len(segments)
        return cls(
            origin_system_id=origin,
            destination_system_id=destination,
            segments=tuple(segments),
            total_fuel_cost=sum(s.fuel_cost for s in segments),
            total_days=sum(s.time_days for s in segments),
            total_distance=sum(s.distance for s in segments),
            total_hazard=sum(s.hazard_level for s in segments),
            average_encounter_chance=(sum(s.encounter_chance for s in segments) / count) if count else 0.0,
            is_valid=True,
            invalid_reason=PlanInvalidReason.NONE,
        )

    @property
    def system_count(self) -> int:
        """Number of systems visited, origin included."""
        return len(self.segments) + 1 if self.segments else 0

    def can_afford(self, fuel: int) -> bool:
        return self.is_valid and fuel >= self.total_fuel_cost

    def get_path(self) -> List[int]:
        """Ordered system ids from origin to destination."""
        if not self.segments:
            return []
        path = [self.segments[0].from_system_id]
        path.extend(s.to_system_id for s in self.segments)
        return path

    def to_dict(self) -> Dict[str, Any]:
        return {
            "origin_system_id": self.origin_system_id,
            "destination_system_id": self.destination_system_id,
            "is_valid": self.is_valid,
            "invalid_reason": self.invalid_reason.value,
            "path": self.get_path(),
            "segments": [s.to_dict() for s in self.segments],
            "total_fuel_cost": self.total_fuel_cost,
            "total_days": self.total_days,
            "total_distance": self.total_distance,
            "total_hazard": self.total_hazard,
            "average_encounter_chance": round(self.average_encounter_chance, 4),
        }


# =============================================================================
# EXECUTION STATE
# =============================================================================

@dataclass
class TravelEncounterRecord:
    """An encounter that triggered during a journey."""
    segment_index: int
    day_in_segment: int
    system_id: int
    encounter_type: str
    encounter_id: str
    outcome: EncounterResolution = EncounterResolution.PENDING

    def to_dict(self) -> Dict[str, Any]:
        return {
            "segment_index": self.segment_index,
            "day_in_segment": self.day_in_segment,
            "system_id": self.system_id,
            "encounter_type": self.encounter_type,
            "encounter_id": self.encounter_id,
            "outcome": self.outcome.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TravelEncounterRecord":
        return cls(
            segment_index=data["segment_index"],
            day_in_segment=data["day_in_segment"],
            system_id=data["system_id"],
            encounter_type=data["encounter_type"],
            encounter_id=data["encounter_id"],
            outcome=EncounterResolution(data.get("outcome", "pending")),
        )


@dataclass
class TravelState:
    """Resumable cursor over a plan."""
    plan: TravelPlan
    current_system_id: int
    current_segment_index: int = 0
    current_day_in_segment: int = 0
    fuel_consumed: int = 0
    days_elapsed: int = 0
    is_paused_for_encounter: bool = False
    pending_encounter_id: Optional[str] = None
    paused_encounter: Optional["EncounterInstance"] = None
    encounter_history: List[TravelEncounterRecord] = field(default_factory=list)

    @classmethod
    def create(cls, plan: TravelPlan, start_system_id: int) -> "TravelState":
        return cls(plan=plan, current_system_id=start_system_id)

    @property
    def is_complete(self) -> bool:
        return self.current_segment_index >= len(self.plan.segments)

    @property
    def current_segment(self) -> Optional[TravelSegment]:
        if self.is_complete:
            return None
        return self.plan.segments[self.current_segment_index]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_system_id": self.current_system_id,
            "current_segment_index": self.current_segment_index,
            "current_day_in_segment": self.current_day_in_segment,
            "fuel_consumed": self.fuel_consumed,
            "days_elapsed": self.days_elapsed,
            "is_paused_for_encounter": self.is_paused_for_encounter,
            "pending_encounter_id": self.pending_encounter_id,
            "encounter_history": [r.to_dict() for r in self.encounter_history],
        }


@dataclass
class TravelResult:
    """What happened when a journey was executed or resumed."""
    status: TravelStatus
    final_system_id: int
    fuel_consumed: int = 0
    days_elapsed: int = 0
    encounters: List[TravelEncounterRecord] = field(default_factory=list)
    interrupt_reason: InterruptReason = InterruptReason.NONE
    paused_state: Optional[TravelState] = None

    @property
    def is_paused(self) -> bool:
        return self.status == TravelStatus.PAUSED_FOR_ENCOUNTER

    @classmethod
    def completed(
        cls,
        destination_id: int,
        fuel_consumed: int,
        days_elapsed: int,
        encounters: Optional[List[TravelEncounterRecord]] = None,
    ) -> "TravelResult":
        return cls(
            status=TravelStatus.COMPLETED,
            final_system_id=destination_id,
            fuel_consumed=fuel_consumed,
            days_elapsed=days_elapsed,
            encounters=list(encounters or []),
        )

    @classmethod
    def interrupted(
        cls,
        current_system_id: int,
        reason: InterruptReason,
        fuel_consumed: int,
        days_elapsed: int,
        state: Optional[TravelState] = None,
    ) -> "TravelResult":
        return cls(
            status=TravelStatus.INTERRUPTED,
            final_system_id=current_system_id,
            fuel_consumed=fuel_consumed,
            days_elapsed=days_elapsed,
            encounters=list(state.encounter_history) if state else [],
            interrupt_reason=reason,
            paused_state=state,
        )

    @classmethod
    def paused(cls, state: TravelState) -> "TravelResult":
        return cls(
            status=TravelStatus.PAUSED_FOR_ENCOUNTER,
            final_system_id=state.current_system_id,
            fuel_consumed=state.fuel_consumed,
            days_elapsed=state.days_elapsed,
            encounters=list(state.encounter_history),
            paused_state=state,
        )

    @classmethod
    def cancelled(cls, state: TravelState) -> "TravelResult":
        return cls(
            status=TravelStatus.CANCELLED,
            final_system_id=state.current_system_id,
            fuel_consumed=state.fuel_consumed,
            days_elapsed=state.days_elapsed,
            encounters=list(state.encounter_history),
            interrupt_reason=InterruptReason.PLAYER_ABORT,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "final_system_id": self.final_system_id,
            "fuel_consumed": self.fuel_consumed,
            "days_elapsed": self.days_elapsed,
            "interrupt_reason": self.interrupt_reason.value,
            "encounters": [e.to_dict() for e in self.encounters],
            "paused_state": self.paused_state.to_dict() if self.paused_state else None,
        }


@dataclass
class TravelContext:
    """Situation on the day an encounter triggers, handed to the selector."""
    current_system_id: int
    destination_system_id: int
    route: Optional[Route] = None
    current_system: Optional[StarSystem] = None
    system_tags: Set[str] = field(default_factory=set)
    system_metrics: Optional[SystemMetrics] = None
    route_tags: Set[str] = field(default_factory=set)
    route_hazard: int = 0
    suggested_encounter_type: EncounterType = EncounterType.RANDOM
    cargo_value: int = 0
    has_illegal_cargo: bool = False
    crew_count: int = 0
    crew_traits: Set[str] = field(default_factory=set)
    system_owner_faction_id: Optional[str] = None
    player_rep_with_owner: int = 50
