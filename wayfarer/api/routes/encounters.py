"""
Encounter API routes.

Endpoints for:
- Viewing the active encounter of a travel session
- Choosing an option on the current node

Effects are reported, not applied. The client applies them and then
resumes travel through the travel routes.
"""
from fastapi import APIRouter
from pydantic import BaseModel, Field

from wayfarer.api.routes.travel import get_session, runner
from wayfarer.core.errors import EncounterNotActiveError
from wayfarer.core.skill_checks import get_success_chance
from wayfarer.models.context import EncounterContext

router = APIRouter()


# =============================================================================
# Request/Response Models
# =============================================================================

class ChooseOptionRequest(BaseModel):
    """Select an option by its index in the visible option list."""
    option_index: int = Field(..., ge=0)


def _get_active_encounter(session_id: str):
    session = get_session(session_id)
    instance = session.campaign.active_encounter
    if instance is None:
        raise EncounterNotActiveError()
    return session, instance


def _describe(instance, context: EncounterContext) -> dict:
    node = runner.get_current_node(instance)
    options = []
    for index, option in enumerate(runner.get_available_options(instance, context)):
        entry = {
            "index": index,
            "id": option.id,
            "text_key": option.text_key,
            "skill_check": None,
        }
        if option.has_skill_check:
            entry["skill_check"] = {
                **option.skill_check.to_dict(),
                "success_chance": get_success_chance(option.skill_check, context),
            }
        options.append(entry)

    return {
        "instance_id": instance.instance_id,
        "template_id": instance.template_id,
        "name": instance.template.name,
        "current_node_id": instance.current_node_id,
        "text_key": node.text_key if node else None,
        "parameters": dict(instance.resolved_parameters),
        "options": options,
        "is_complete": runner.is_complete(instance),
        "is_paused_for_tactical": instance.is_paused_for_tactical,
        "pending_tactical_mission_id": instance.pending_tactical_mission_id,
        "pending_effects": [e.to_dict() for e in runner.get_pending_effects(instance)],
    }


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/sessions/{session_id}")
async def get_encounter(session_id: str):
    """Current node, resolved text parameters and visible options."""
    session, instance = _get_active_encounter(session_id)
    context = EncounterContext.from_campaign(session.campaign)
    return {"encounter": _describe(instance, context)}


@router.post("/sessions/{session_id}/choose")
async def choose_option(session_id: str, request: ChooseOptionRequest):
    """
    Choose an option on the current node.

    An out-of-range index returns success=false and leaves the
    encounter untouched.
    """
    session, instance = _get_active_encounter(session_id)
    context = EncounterContext.from_campaign(session.campaign)

    result = runner.select_option(instance, context, request.option_index)
    return {
        "step": result.to_dict(),
        "encounter": _describe(instance, context),
    }


@router.post("/sessions/{session_id}/tactical-complete")
async def complete_tactical(session_id: str):
    """Clear a tactical pause once the mission has been played elsewhere."""
    session, instance = _get_active_encounter(session_id)
    runner.resume_after_tactical(instance)
    context = EncounterContext.from_campaign(session.campaign)
    return {"encounter": _describe(instance, context)}
