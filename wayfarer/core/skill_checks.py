"""
Encounter skill checks.

A check names a crew stat and a difficulty. The best-qualified crew
member acts: the one with the highest stat plus trait bonus, earliest
on the roster winning ties. A d10 roll is drawn from the context's
stream and success means roll + stat + trait bonus >= difficulty.

Trait bonus: +2 for each bonus trait the crew member has, -2 for each
penalty trait.
"""
import logging
from typing import List, Optional, Sequence, Tuple

from wayfarer.models.context import CrewSnapshot, EncounterContext
from wayfarer.models.encounter import SkillCheckDef, SkillCheckResult

logger = logging.getLogger(__name__)

DIE_SIDES = 10
TRAIT_MODIFIER = 2


def get_trait_bonus(check: SkillCheckDef, crew: CrewSnapshot) -> Tuple[int, List[str], List[str]]:
    """Net trait bonus and the bonus/penalty traits that applied."""
    applied_bonus = [t for t in check.bonus_traits if crew.has_trait(t)]
    applied_penalty = [t for t in check.penalty_traits if crew.has_trait(t)]
    bonus = TRAIT_MODIFIER * len(applied_bonus) - TRAIT_MODIFIER * len(applied_penalty)
    return bonus, applied_bonus, applied_penalty


def get_effective_value(check: SkillCheckDef, crew: CrewSnapshot) -> int:
    """Stat value plus net trait bonus."""
    bonus, _, _ = get_trait_bonus(check, crew)
    return crew.get_stat(check.stat) + bonus


def select_best_crew(check: SkillCheckDef, crew: Sequence[CrewSnapshot]) -> Optional[CrewSnapshot]:
    """Crew member with the highest effective value. Ties go to the earlier one."""
    best = None
    best_value = None
    for member in crew:
        value = get_effective_value(check, member)
        if best is None or value > best_value:
            best = member
            best_value = value
    return best


def resolve_skill_check(
    check: SkillCheckDef,
    context: EncounterContext,
    crew: Optional[CrewSnapshot] = None,
) -> SkillCheckResult:
    """
    Roll a skill check.

    Args:
        check: The check to roll
        context: Supplies the crew roster and the random stream
        crew: Acting crew member; when omitted the best-qualified is used

    Returns:
        SkillCheckResult. With no crew available the check fails without
        drawing from the stream and records no acting crew. Without a
        stream it fails with no roll.
    """
    actor = crew if crew is not None else select_best_crew(check, context.crew)
    if actor is None:
        logger.debug(f"Skill check {check.stat.value} DC {check.difficulty}: no crew, automatic failure")
        return SkillCheckResult(
            success=False,
            stat=check.stat,
            difficulty=check.difficulty,
            margin=-check.difficulty,
        )

    if context.rng is None:
        logger.warning(f"Skill check {check.stat.value} DC {check.difficulty}: no random stream, automatic failure")
        return SkillCheckResult(
            success=False,
            stat=check.stat,
            difficulty=check.difficulty,
            margin=-check.difficulty,
            crew_id=actor.id,
            crew_name=actor.name,
        )

    roll = context.rng.next_int(1, DIE_SIDES + 1)

    stat_value = actor.get_stat(check.stat)
    bonus, applied_bonus, applied_penalty = get_trait_bonus(check, actor)
    total = roll + stat_value + bonus
    margin = total - check.difficulty

    result = SkillCheckResult(
        success=total >= check.difficulty,
        stat=check.stat,
        difficulty=check.difficulty,
        roll=roll,
        stat_value=stat_value,
        trait_bonus=bonus,
        total=total,
        margin=margin,
        crew_id=actor.id,
        crew_name=actor.name,
        applied_bonus_traits=applied_bonus,
        applied_penalty_traits=applied_penalty,
    )
    logger.debug(
        f"Skill check {check.stat.value} DC {check.difficulty} by {actor.name}: "
        f"{roll} + {stat_value} + {bonus} = {total} ({'success' if result.success else 'failure'})"
    )
    return result


def chance_for_value(difficulty: int, value: int) -> int:
    """Percent chance that a d10 plus value meets the difficulty."""
    needed = difficulty - value
    if needed <= 1:
        return 100
    if needed > DIE_SIDES:
        return 0
    return (DIE_SIDES + 1 - needed) * 10


def get_success_chance(check: SkillCheckDef, context: EncounterContext) -> int:
    """Success chance for the crew member who would act. 0 with no crew."""
    actor = select_best_crew(check, context.crew)
    if actor is None:
        return 0
    return chance_for_value(check.difficulty, get_effective_value(check, actor))


def get_success_chance_with_crew(check: SkillCheckDef, crew: CrewSnapshot) -> int:
    """Success chance for a specific crew member."""
    return chance_for_value(check.difficulty, get_effective_value(check, crew))
