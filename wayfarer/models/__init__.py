# Simulation data models

from .context import (
    CrewStat,
    ResourceType,
    CrewSnapshot,
    EncounterContext,
)

from .encounter import (
    EncounterTag,
    SkillCheckDef,
    SkillCheckResult,
    EncounterOutcome,
    EncounterOption,
    EncounterNode,
    EncounterTemplate,
    EncounterInstance,
    StepResult,
)

from .travel import (
    PlanInvalidReason,
    TravelValidationFailure,
    TravelStatus,
    InterruptReason,
    EncounterResolution,
    TravelSegment,
    TravelPlan,
    TravelEncounterRecord,
    TravelState,
    TravelResult,
    TravelContext,
)

from .campaign import (
    CrewMember,
    CampaignState,
)

__all__ = [
    # Context
    "CrewStat",
    "ResourceType",
    "CrewSnapshot",
    "EncounterContext",
    # Encounter
    "EncounterTag",
    "SkillCheckDef",
    "SkillCheckResult",
    "EncounterOutcome",
    "EncounterOption",
    "EncounterNode",
    "EncounterTemplate",
    "EncounterInstance",
    "StepResult",
    # Travel
    "PlanInvalidReason",
    "TravelValidationFailure",
    "TravelStatus",
    "InterruptReason",
    "EncounterResolution",
    "TravelSegment",
    "TravelPlan",
    "TravelEncounterRecord",
    "TravelState",
    "TravelResult",
    "TravelContext",
    # Campaign
    "CrewMember",
    "CampaignState",
]
