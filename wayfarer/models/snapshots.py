"""
Save/resume snapshots.

Pydantic models holding the minimum needed to continue a paused journey
in a later process: the travel cursor, the active encounter instance and
the campaign stream positions. Plans and templates are not serialized;
the caller re-plans the route and looks templates up in a registry.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from wayfarer.core.encounter_registry import EncounterRegistry
from wayfarer.core.errors import TemplateMissingError, ValidationError
from wayfarer.core.rng import RngService, RngStream
from wayfarer.models.effects import Effect
from wayfarer.models.encounter import EncounterInstance
from wayfarer.models.travel import TravelEncounterRecord, TravelPlan, TravelState


class RngStateSnapshot(BaseModel):
    """Position of one random stream."""
    name: str
    seed: int
    call_count: int = Field(default=0, ge=0)

    @classmethod
    def from_stream(cls, stream: RngStream) -> "RngStateSnapshot":
        return cls(**stream.get_state())

    def restore(self, stream: RngStream) -> None:
        stream.restore_state(self.seed, self.call_count)


class RngServiceSnapshot(BaseModel):
    master_seed: int
    streams: List[RngStateSnapshot] = Field(default_factory=list)

    @classmethod
    def from_service(cls, service: RngService) -> "RngServiceSnapshot":
        state = service.get_state()
        return cls(
            master_seed=state["master_seed"],
            streams=[RngStateSnapshot(**s) for s in state["streams"]],
        )

    def restore(self, service: RngService) -> None:
        service.restore_state({
            "master_seed": self.master_seed,
            "streams": [s.model_dump() for s in self.streams],
        })


class EncounterInstanceSnapshot(BaseModel):
    """An encounter in progress, minus its template."""
    instance_id: str
    template_id: str
    current_node_id: Optional[str] = None
    visited_nodes: List[str] = Field(default_factory=list)
    pending_effects: List[Dict[str, Any]] = Field(default_factory=list)
    resolved_parameters: Dict[str, str] = Field(default_factory=dict)
    is_complete: bool = False
    is_paused_for_tactical: bool = False
    pending_tactical_mission_id: Optional[str] = None

    @classmethod
    def from_instance(cls, instance: EncounterInstance) -> "EncounterInstanceSnapshot":
        return cls(**instance.get_state())

    def restore(self, registry: EncounterRegistry) -> EncounterInstance:
        """Rebuild the instance against its registered template."""
        template = registry.get(self.template_id)
        if template is None:
            raise TemplateMissingError(self.template_id)
        return EncounterInstance(
            template=template,
            instance_id=self.instance_id,
            current_node_id=self.current_node_id,
            visited_nodes=list(self.visited_nodes),
            pending_effects=[Effect.from_dict(e) for e in self.pending_effects],
            resolved_parameters=dict(self.resolved_parameters),
            is_complete=self.is_complete,
            is_paused_for_tactical=self.is_paused_for_tactical,
            pending_tactical_mission_id=self.pending_tactical_mission_id,
        )


class TravelStateSnapshot(BaseModel):
    """A journey's cursor plus the encounter it is waiting on."""
    origin_system_id: int
    destination_system_id: int
    current_system_id: int
    current_segment_index: int = Field(default=0, ge=0)
    current_day_in_segment: int = Field(default=0, ge=0)
    fuel_consumed: int = Field(default=0, ge=0)
    days_elapsed: int = Field(default=0, ge=0)
    is_paused_for_encounter: bool = False
    pending_encounter_id: Optional[str] = None
    paused_encounter: Optional[EncounterInstanceSnapshot] = None
    encounter_history: List[Dict[str, Any]] = Field(default_factory=list)
    rng: Optional[RngServiceSnapshot] = None

    @classmethod
    def from_state(cls, state: TravelState, rng: Optional[RngService] = None) -> "TravelStateSnapshot":
        paused = state.paused_encounter
        return cls(
            origin_system_id=state.plan.origin_system_id,
            destination_system_id=state.plan.destination_system_id,
            current_system_id=state.current_system_id,
            current_segment_index=state.current_segment_index,
            current_day_in_segment=state.current_day_in_segment,
            fuel_consumed=state.fuel_consumed,
            days_elapsed=state.days_elapsed,
            is_paused_for_encounter=state.is_paused_for_encounter,
            pending_encounter_id=state.pending_encounter_id,
            paused_encounter=EncounterInstanceSnapshot.from_instance(paused) if paused else None,
            encounter_history=[r.to_dict() for r in state.encounter_history],
            rng=RngServiceSnapshot.from_service(rng) if rng is not None else None,
        )

    def restore(
        self,
        plan: TravelPlan,
        registry: Optional[EncounterRegistry] = None,
        rng: Optional[RngService] = None,
    ) -> TravelState:
        """
        Rebuild the travel state over a re-planned route.

        The plan must run between the same endpoints and have room for the
        saved cursor. Stream positions are written back into rng when both
        the snapshot and the service are present.
        """
        if plan.origin_system_id != self.origin_system_id \
                or plan.destination_system_id != self.destination_system_id:
            raise ValidationError("plan", "Plan endpoints do not match the saved journey")
        if self.current_segment_index > len(plan.segments):
            raise ValidationError("plan", "Plan is shorter than the saved journey", self.current_segment_index)

        paused = None
        if self.paused_encounter is not None:
            if registry is None:
                raise TemplateMissingError(self.paused_encounter.template_id)
            paused = self.paused_encounter.restore(registry)

        if self.rng is not None and rng is not None:
            self.rng.restore(rng)

        return TravelState(
            plan=plan,
            current_system_id=self.current_system_id,
            current_segment_index=self.current_segment_index,
            current_day_in_segment=self.current_day_in_segment,
            fuel_consumed=self.fuel_consumed,
            days_elapsed=self.days_elapsed,
            is_paused_for_encounter=self.is_paused_for_encounter,
            pending_encounter_id=self.pending_encounter_id,
            paused_encounter=paused,
            encounter_history=[TravelEncounterRecord.from_dict(r) for r in self.encounter_history],
        )
