"""
Travel Executor.

Advances a travel plan one day at a time: spends the day's fuel share,
moves the campaign clock, and rolls the segment's encounter chance
against the campaign stream. A triggered encounter suspends the journey
and hands a live encounter instance back to the caller; resume()
continues from the saved cursor once the encounter has been played.
"""
import logging
from typing import Optional, Union

from wayfarer.core.encounter_generator import EncounterGenerator, get_encounter_generator
from wayfarer.core.errors import TravelNotPausedError
from wayfarer.core.travel_costs import EncounterType
from wayfarer.models.campaign import CampaignState
from wayfarer.models.travel import (
    EncounterResolution,
    InterruptReason,
    TravelContext,
    TravelEncounterRecord,
    TravelPlan,
    TravelResult,
    TravelSegment,
    TravelState,
)

logger = logging.getLogger(__name__)


def calculate_daily_fuel(segment: TravelSegment, day_index: int) -> int:
    """Even share of the segment's fuel, remainder on the last day."""
    if segment.time_days <= 0:
        return segment.fuel_cost
    base, remainder = divmod(segment.fuel_cost, segment.time_days)
    if day_index == segment.time_days - 1:
        return base + remainder
    return base


def build_travel_context(state: TravelState, campaign: CampaignState) -> TravelContext:
    """Snapshot the situation on the current day for the encounter selector."""
    segment = state.current_segment
    route = segment.route if segment else None
    system = campaign.world.get_system(state.current_system_id) if campaign.world else None
    owner = system.owning_faction_id if system else None

    crew = campaign.get_alive_crew()
    traits = set()
    for member in crew:
        traits.update(member.traits)

    return TravelContext(
        current_system_id=state.current_system_id,
        destination_system_id=state.plan.destination_system_id,
        route=route,
        current_system=system,
        system_tags=set(system.tags) if system else set(),
        system_metrics=system.metrics if system else None,
        route_tags=set(route.tags) if route else set(),
        route_hazard=route.hazard_level if route else 0,
        suggested_encounter_type=segment.suggested_encounter_type if segment else EncounterType.RANDOM,
        cargo_value=campaign.cargo_value,
        has_illegal_cargo=campaign.has_illegal_cargo,
        crew_count=len(crew),
        crew_traits=traits,
        system_owner_faction_id=owner,
        player_rep_with_owner=campaign.faction_rep.get(owner, 50) if owner else 50,
    )


class TravelExecutor:
    """
    Runs travel plans against a campaign.

    Holds no journey state of its own; everything needed to continue a
    suspended journey lives on the TravelState returned in the result.
    """

    def __init__(self, generator: Optional[EncounterGenerator] = None):
        self.generator = generator

    def _get_generator(self, campaign: CampaignState) -> EncounterGenerator:
        if campaign.encounter_generator is not None:
            return campaign.encounter_generator
        if self.generator is not None:
            return self.generator
        return get_encounter_generator()

    # ==================== Entry points ====================

    def execute(self, plan: Optional[TravelPlan], campaign: CampaignState) -> TravelResult:
        """Start a journey. Nothing is spent if the pre-flight checks fail."""
        if plan is None or not plan.is_valid:
            logger.info("Travel refused: plan is missing or invalid")
            return TravelResult.interrupted(campaign.current_node_id, InterruptReason.ROUTE_BLOCKED, 0, 0)

        if campaign.fuel < plan.total_fuel_cost:
            logger.info(f"Travel refused: insufficient fuel ({campaign.fuel}/{plan.total_fuel_cost})")
            return TravelResult.interrupted(campaign.current_node_id, InterruptReason.INSUFFICIENT_FUEL, 0, 0)

        state = TravelState.create(plan, campaign.current_node_id)
        logger.info(
            f"Travel started: {plan.origin_system_id} -> {plan.destination_system_id}, "
            f"{plan.total_days} days, {plan.total_fuel_cost} fuel, {len(plan.segments)} segment(s)"
        )
        return self._run(state, campaign)

    def resume(
        self,
        state: Optional[TravelState],
        campaign: CampaignState,
        outcome: Union[EncounterResolution, str] = EncounterResolution.COMPLETED,
    ) -> TravelResult:
        """
        Continue a journey that paused for an encounter.

        The encounter's resolution is written to the history. Defeat or
        capture ends the journey where it stands; anything else resumes
        day-stepping from the saved cursor.
        """
        if state is None or not state.is_paused_for_encounter:
            raise TravelNotPausedError()

        resolution = EncounterResolution(outcome)
        if state.encounter_history:
            state.encounter_history[-1].outcome = resolution
        logger.info(f"Travel resumed after encounter {state.pending_encounter_id} ({resolution.value})")

        state.is_paused_for_encounter = False
        state.pending_encounter_id = None
        state.paused_encounter = None
        campaign.active_encounter = None

        if resolution in (EncounterResolution.DEFEAT, EncounterResolution.CAPTURED):
            reason = (
                InterruptReason.ENCOUNTER_CAPTURE
                if resolution == EncounterResolution.CAPTURED
                else InterruptReason.ENCOUNTER_DEFEAT
            )
            logger.info(f"Travel interrupted at system {state.current_system_id}: {reason.value}")
            return TravelResult.interrupted(
                state.current_system_id, reason, state.fuel_consumed, state.days_elapsed, state
            )

        return self._run(state, campaign)

    def cancel(self, state: TravelState) -> TravelResult:
        """Abandon a journey where it stands."""
        logger.info(f"Travel cancelled at system {state.current_system_id}")
        state.is_paused_for_encounter = False
        state.paused_encounter = None
        return TravelResult.cancelled(state)

    # ==================== Day loop ====================

    def _run(self, state: TravelState, campaign: CampaignState) -> TravelResult:
        while not state.is_complete:
            segment = state.current_segment
            if state.current_day_in_segment == 0:
                logger.debug(
                    f"Segment {state.current_segment_index + 1}/{len(state.plan.segments)}: "
                    f"{segment.from_system_id} -> {segment.to_system_id}"
                )

            while state.current_day_in_segment < segment.time_days:
                daily_fuel = calculate_daily_fuel(segment, state.current_day_in_segment)
                if not campaign.spend_fuel(daily_fuel):
                    logger.info(f"Out of fuel on day {state.days_elapsed + 1} at system {state.current_system_id}")
                    return TravelResult.interrupted(
                        state.current_system_id,
                        InterruptReason.INSUFFICIENT_FUEL,
                        state.fuel_consumed,
                        state.days_elapsed,
                        state,
                    )
                state.fuel_consumed += daily_fuel

                campaign.advance_time(1)
                state.days_elapsed += 1
                state.current_day_in_segment += 1

                paused = self._roll_encounter(state, campaign, segment)
                if paused is not None:
                    return paused

            state.current_system_id = segment.to_system_id
            campaign.current_node_id = segment.to_system_id
            logger.debug(f"Arrived at system {segment.to_system_id}")

            state.current_segment_index += 1
            state.current_day_in_segment = 0

        logger.info(
            f"Travel complete: {state.days_elapsed} days, {state.fuel_consumed} fuel, "
            f"{len(state.encounter_history)} encounter(s)"
        )
        return TravelResult.completed(
            state.plan.destination_system_id,
            state.fuel_consumed,
            state.days_elapsed,
            state.encounter_history,
        )

    def _roll_encounter(
        self,
        state: TravelState,
        campaign: CampaignState,
        segment: TravelSegment,
    ) -> Optional[TravelResult]:
        """One day's encounter roll. Returns a paused result or None to keep going."""
        stream = campaign.rng.campaign
        roll = stream.next_float()
        if roll >= segment.encounter_chance:
            return None

        encounter_type = segment.suggested_encounter_type.value
        logger.debug(f"Encounter triggered: type {encounter_type}, roll {roll:.2f} < {segment.encounter_chance:.2f}")

        context = build_travel_context(state, campaign)
        encounter = self._get_generator(campaign).generate(context, campaign)

        if encounter is not None:
            encounter_id = encounter.instance_id
        else:
            encounter_id = f"enc_{state.current_system_id}_{state.days_elapsed}_{stream.next_int(10000)}"

        record = TravelEncounterRecord(
            segment_index=state.current_segment_index,
            day_in_segment=state.current_day_in_segment,
            system_id=state.current_system_id,
            encounter_type=encounter.template_id if encounter else encounter_type,
            encounter_id=encounter_id,
        )
        state.encounter_history.append(record)

        if encounter is None:
            record.outcome = EncounterResolution.COMPLETED
            logger.debug(f"No eligible encounter for {encounter_id}, continuing")
            return None

        campaign.active_encounter = encounter
        state.is_paused_for_encounter = True
        state.pending_encounter_id = encounter_id
        state.paused_encounter = encounter
        logger.info(f"Travel paused for encounter {encounter.template_id} ({encounter_id})")
        return TravelResult.paused(state)


# Singleton
_executor: Optional[TravelExecutor] = None


def get_travel_executor() -> TravelExecutor:
    global _executor
    if _executor is None:
        _executor = TravelExecutor()
    return _executor
