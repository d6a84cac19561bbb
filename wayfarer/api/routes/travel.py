"""
Travel API routes.

Endpoints for:
- Creating an in-memory travel session (world, ship, crew, resources, seed)
- Planning a route
- Executing, resuming and cancelling a journey
- Snapshotting a suspended journey
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from fastapi import APIRouter
from pydantic import BaseModel, Field

from wayfarer.config import get_settings
from wayfarer.core.encounter_generator import get_encounter_generator
from wayfarer.core.encounter_runner import EncounterRunner
from wayfarer.core.errors import (
    SessionNotFoundError,
    TravelInProgressError,
    TravelNotPausedError,
    ValidationError,
)
from wayfarer.core.rng import RngService
from wayfarer.core.travel_executor import TravelExecutor, get_travel_executor
from wayfarer.core.travel_planner import TravelPlanner
from wayfarer.core.world import SystemType, WorldState
from wayfarer.models.campaign import CampaignState, CrewMember
from wayfarer.models.snapshots import TravelStateSnapshot
from wayfarer.models.travel import EncounterResolution, TravelResult, TravelState

logger = logging.getLogger(__name__)

router = APIRouter()

runner = EncounterRunner()


# =============================================================================
# Session Storage (in-memory)
# =============================================================================

@dataclass
class TravelSession:
    """A campaign plus the journey it may be in the middle of."""
    id: str
    campaign: CampaignState
    planner: TravelPlanner
    executor: TravelExecutor
    travel_state: Optional[TravelState] = None

    def summary(self) -> dict:
        campaign = self.campaign
        return {
            "session_id": self.id,
            "current_system_id": campaign.current_node_id,
            "day": campaign.day,
            "resources": {
                "money": campaign.money,
                "fuel": campaign.fuel,
                "parts": campaign.parts,
                "meds": campaign.meds,
                "ammo": campaign.ammo,
            },
            "crew_count": len(campaign.get_alive_crew()),
            "traveling": self.travel_state is not None,
            "has_active_encounter": campaign.active_encounter is not None,
        }


active_sessions: Dict[str, TravelSession] = {}


def get_session(session_id: str) -> TravelSession:
    session = active_sessions.get(session_id)
    if session is None:
        raise SessionNotFoundError(session_id)
    return session


def _hold_journey(session: TravelSession, result: TravelResult) -> None:
    """Keep a paused journey on the session and enter its encounter."""
    if not result.is_paused:
        session.travel_state = None
        return
    session.travel_state = result.paused_state
    runner.start(result.paused_state.paused_encounter)


# =============================================================================
# Request/Response Models
# =============================================================================

class FactionData(BaseModel):
    id: str
    name: str


class SystemData(BaseModel):
    """A star system in the session's world."""
    id: int
    name: str
    type: SystemType = SystemType.OUTPOST
    position: Tuple[float, float] = (0.0, 0.0)
    owning_faction_id: Optional[str] = None
    metrics: Optional[Dict[str, int]] = None
    tags: List[str] = Field(default_factory=list)


class RouteData(BaseModel):
    """A route between two systems. Distance defaults to the straight line."""
    system_a: int
    system_b: int
    distance: Optional[float] = Field(None, gt=0)
    hazard_level: int = Field(0, ge=0, le=5)
    tags: List[str] = Field(default_factory=list)


class CrewData(BaseModel):
    id: str
    name: str
    role: str = "soldier"
    traits: List[str] = Field(default_factory=list)
    stats: Dict[str, int] = Field(default_factory=dict)


class CreateSessionRequest(BaseModel):
    """Request to create a travel session."""
    systems: List[SystemData] = Field(..., min_length=1)
    routes: List[RouteData] = Field(default_factory=list)
    factions: List[FactionData] = Field(default_factory=list)
    current_system_id: int
    seed: Optional[int] = Field(None, description="Master seed; defaults to DEFAULT_SEED")
    money: int = Field(0, ge=0)
    fuel: int = Field(0, ge=0)
    parts: int = Field(0, ge=0)
    meds: int = Field(0, ge=0)
    ammo: int = Field(0, ge=0)
    crew: List[CrewData] = Field(default_factory=list)
    faction_rep: Dict[str, int] = Field(default_factory=dict)
    flags: List[str] = Field(default_factory=list)
    cargo_value: int = Field(0, ge=0)
    has_illegal_cargo: bool = False
    ship_speed: Optional[float] = Field(None, gt=0)
    ship_efficiency: Optional[float] = Field(None, gt=0)
    safety_weight: Optional[float] = Field(None, gt=0)


class PlanRequest(BaseModel):
    destination_system_id: int


class ResumeRequest(BaseModel):
    outcome: EncounterResolution = Field(
        EncounterResolution.COMPLETED,
        description="How the encounter ended: completed, defeat, captured, fled"
    )


# =============================================================================
# Session Endpoints
# =============================================================================

@router.post("/sessions")
async def create_session(request: CreateSessionRequest):
    """Create a travel session from a world description and campaign resources."""
    settings = get_settings()
    world = WorldState.from_dict({
        "systems": [s.model_dump(mode="json") for s in request.systems],
        "routes": [r.model_dump() for r in request.routes],
        "factions": [f.model_dump() for f in request.factions],
    })
    if world.get_system(request.current_system_id) is None:
        raise ValidationError("current_system_id", "Unknown starting system", request.current_system_id)

    campaign = CampaignState(
        world=world,
        rng=RngService(request.seed if request.seed is not None else settings.DEFAULT_SEED),
        current_node_id=request.current_system_id,
        money=request.money,
        fuel=request.fuel,
        parts=request.parts,
        meds=request.meds,
        ammo=request.ammo,
        crew=[CrewMember.from_dict(c.model_dump()) for c in request.crew],
        faction_rep=dict(request.faction_rep),
        flags=set(request.flags),
        cargo_value=request.cargo_value,
        has_illegal_cargo=request.has_illegal_cargo,
        encounter_generator=get_encounter_generator(),
    )
    planner = TravelPlanner(
        world,
        speed=request.ship_speed or settings.SHIP_SPEED,
        efficiency=request.ship_efficiency or settings.SHIP_EFFICIENCY,
        safety_weight=request.safety_weight or settings.SAFETY_WEIGHT,
    )

    session = TravelSession(
        id=str(uuid.uuid4()),
        campaign=campaign,
        planner=planner,
        executor=get_travel_executor(),
    )
    active_sessions[session.id] = session
    logger.info(f"Travel session {session.id} created at system {request.current_system_id}")
    return session.summary()


@router.get("/sessions/{session_id}")
async def get_session_state(session_id: str):
    return get_session(session_id).summary()


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str):
    get_session(session_id)
    del active_sessions[session_id]
    return {"success": True, "session_id": session_id}


# =============================================================================
# Travel Endpoints
# =============================================================================

@router.post("/sessions/{session_id}/plan")
async def plan_route(session_id: str, request: PlanRequest):
    """Plan a route without moving. Invalid plans come back with a reason."""
    session = get_session(session_id)
    campaign = session.campaign
    plan = session.planner.plan_route(campaign.current_node_id, request.destination_system_id)
    failure = session.planner.get_validation_failure(plan, campaign.fuel)
    return {
        "plan": plan.to_dict(),
        "can_travel": session.planner.validate(plan, campaign.fuel),
        "validation_failure": failure.value,
    }


@router.post("/sessions/{session_id}/travel")
async def travel(session_id: str, request: PlanRequest):
    """
    Plan and execute a journey.

    A journey that pauses for an encounter stays on the session until
    it is resumed or cancelled.
    """
    session = get_session(session_id)
    if session.travel_state is not None:
        raise TravelInProgressError()

    campaign = session.campaign
    plan = session.planner.plan_route(campaign.current_node_id, request.destination_system_id)
    result = session.executor.execute(plan, campaign)
    _hold_journey(session, result)

    return {
        "plan": plan.to_dict(),
        "result": result.to_dict(),
        "session": session.summary(),
    }


@router.post("/sessions/{session_id}/resume")
async def resume_travel(session_id: str, request: ResumeRequest):
    """Resume a journey after its encounter has been played."""
    session = get_session(session_id)
    if session.travel_state is None:
        raise TravelNotPausedError()

    result = session.executor.resume(session.travel_state, session.campaign, request.outcome)
    _hold_journey(session, result)

    return {
        "result": result.to_dict(),
        "session": session.summary(),
    }


@router.post("/sessions/{session_id}/cancel")
async def cancel_travel(session_id: str):
    """Abandon the current journey where it stands."""
    session = get_session(session_id)
    if session.travel_state is None:
        raise TravelNotPausedError()

    result = session.executor.cancel(session.travel_state)
    session.travel_state = None
    session.campaign.active_encounter = None

    return {
        "result": result.to_dict(),
        "session": session.summary(),
    }


@router.get("/sessions/{session_id}/snapshot")
async def snapshot_travel(session_id: str):
    """Serializable snapshot of the suspended journey and stream positions."""
    session = get_session(session_id)
    if session.travel_state is None:
        raise TravelNotPausedError()

    snapshot = TravelStateSnapshot.from_state(session.travel_state, session.campaign.rng)
    return {"snapshot": snapshot.model_dump()}
