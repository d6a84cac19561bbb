"""
Production encounter library.

The encounters players meet while travelling. Text keys point into the
presentation layer's string tables; {param} placeholders in those
strings are filled from the instance's resolved parameters.
"""
from typing import List

from wayfarer.core.encounter_registry import EncounterRegistry
from wayfarer.core.world import SystemTag
from wayfarer.models import conditions as cond
from wayfarer.models import effects as fx
from wayfarer.models.context import CrewStat
from wayfarer.models.encounter import (
    EncounterNode,
    EncounterOption,
    EncounterOutcome as Outcome,
    EncounterTag as Tag,
    EncounterTemplate,
    SkillCheckDef,
)


# =============================================================================
# TUNING VALUES
# =============================================================================

EASY = 5
MEDIUM = 8
HARD = 11
VERY_HARD = 14

FIGHT_DAMAGE = 15
FIGHT_REWARD = 100
FLEE_FAIL_DAMAGE = 10
SURRENDER_COST = 150
BRIBE_COST = 50
BRIBE_FAIL_FINE = 75
FLEEING_FINE = 100
AMBUSH_DAMAGE = 20
RESCUE_REWARD = 120
RESCUE_XP = 20
REPAIR_PARTS = 2


def _template(template_id: str, name: str, tags, nodes: List[EncounterNode],
              entry: str = "intro", required=()) -> EncounterTemplate:
    return EncounterTemplate(
        id=template_id,
        name=name,
        entry_node_id=entry,
        nodes={node.id: node for node in nodes},
        tags=frozenset(tags),
        required_context_keys=frozenset(required),
    )


def _end_node(key: str, node_id: str, *effects) -> EncounterNode:
    return EncounterNode(
        id=node_id,
        text_key=f"encounter.{key}.{node_id}",
        auto_transition=Outcome.end_with(*effects),
    )


# =============================================================================
# PIRATE ENCOUNTERS
# =============================================================================

def pirate_ambush() -> EncounterTemplate:
    """Pirates demand cargo or a fight."""
    key = "pirate_ambush"
    return _template("prod_pirate_ambush", "Pirate Ambush",
        {Tag.TRAVEL, Tag.PIRATE, Tag.COMBAT, Tag.CHOICE},
        [
            EncounterNode(
                id="intro",
                text_key=f"encounter.{key}.intro",
                options=(
                    EncounterOption(
                        id="fight",
                        text_key=f"encounter.{key}.fight",
                        outcome=Outcome.goto_with("combat_result",
                            fx.trigger_tactical("pirate_boarding"),
                            fx.ship_damage(FIGHT_DAMAGE),
                            fx.add_credits(FIGHT_REWARD)),
                    ),
                    EncounterOption(
                        id="flee",
                        text_key=f"encounter.{key}.flee",
                        skill_check=SkillCheckDef(CrewStat.REFLEXES, MEDIUM,
                                                  bonus_traits=("pilot", "quick_reflexes"),
                                                  penalty_traits=("slow",)),
                        success_outcome=Outcome.goto_with("escaped", fx.time_delay(1)),
                        failure_outcome=Outcome.goto_with("caught", fx.ship_damage(FLEE_FAIL_DAMAGE)),
                    ),
                    EncounterOption(
                        id="surrender",
                        text_key=f"encounter.{key}.surrender",
                        conditions=(cond.has_credits(SURRENDER_COST),),
                        outcome=Outcome.goto_with("surrendered", fx.lose_credits(SURRENDER_COST)),
                    ),
                    EncounterOption(
                        id="negotiate",
                        text_key=f"encounter.{key}.negotiate",
                        skill_check=SkillCheckDef(CrewStat.SAVVY, VERY_HARD,
                                                  bonus_traits=("smooth_talker", "intimidating")),
                        success_outcome=Outcome.goto("talked_down"),
                        failure_outcome=Outcome.goto("intro"),
                    ),
                ),
            ),
            _end_node(key, "combat_result"),
            _end_node(key, "escaped"),
            _end_node(key, "caught"),
            _end_node(key, "surrendered"),
            _end_node(key, "talked_down", fx.crew_xp(10)),
        ])


def pirate_haven_toll() -> EncounterTemplate:
    """A pirate haven's gatekeepers collect their due. Only near pirate havens."""
    key = "pirate_haven_toll"
    return _template("prod_pirate_haven_toll", "Haven Toll",
        {Tag.TRAVEL, Tag.PIRATE, Tag.SOCIAL, Tag.RARE},
        [
            EncounterNode(
                id="intro",
                text_key=f"encounter.{key}.intro",
                options=(
                    EncounterOption(
                        id="pay",
                        text_key=f"encounter.{key}.pay",
                        conditions=(cond.has_credits(BRIBE_COST),),
                        outcome=Outcome.end_with(fx.lose_credits(BRIBE_COST), fx.set_flag("haven_toll_paid")),
                    ),
                    EncounterOption(
                        id="known_friend",
                        text_key=f"encounter.{key}.known_friend",
                        conditions=(cond.flag_set("haven_toll_paid"),),
                        outcome=Outcome.end(),
                    ),
                    EncounterOption(
                        id="refuse",
                        text_key=f"encounter.{key}.refuse",
                        outcome=Outcome.goto_with("refused", fx.faction_rep("pirates", -10)),
                    ),
                ),
            ),
            _end_node(key, "refused", fx.ship_damage(FLEE_FAIL_DAMAGE)),
        ],
        required=(f"system_tag:{SystemTag.PIRATE_HAVEN}",))


# =============================================================================
# PATROL ENCOUNTERS
# =============================================================================

def patrol_inspection() -> EncounterTemplate:
    """Security patrol requests an inspection."""
    key = "patrol_inspection"
    return _template("prod_patrol_inspection", "Patrol Inspection",
        {Tag.TRAVEL, Tag.PATROL, Tag.SOCIAL, Tag.SKILL_CHECK},
        [
            EncounterNode(
                id="intro",
                text_key=f"encounter.{key}.intro",
                options=(
                    EncounterOption(
                        id="comply",
                        text_key=f"encounter.{key}.comply",
                        outcome=Outcome.goto("inspection"),
                    ),
                    EncounterOption(
                        id="bribe",
                        text_key=f"encounter.{key}.bribe",
                        conditions=(cond.has_credits(BRIBE_COST),),
                        skill_check=SkillCheckDef(CrewStat.SAVVY, EASY),
                        success_outcome=Outcome.goto_with("bribed", fx.lose_credits(BRIBE_COST)),
                        failure_outcome=Outcome.goto("bribe_failed"),
                    ),
                    EncounterOption(
                        id="flee",
                        text_key=f"encounter.{key}.flee",
                        skill_check=SkillCheckDef(CrewStat.REFLEXES, HARD),
                        success_outcome=Outcome.goto_with("fled", fx.set_flag("fled_patrol")),
                        failure_outcome=Outcome.goto_with("caught_fleeing", fx.lose_credits(FLEEING_FINE)),
                    ),
                ),
            ),
            EncounterNode(
                id="inspection",
                text_key=f"encounter.{key}.inspection",
                auto_transition=Outcome.goto("cleared"),
            ),
            _end_node(key, "cleared"),
            _end_node(key, "bribed"),
            EncounterNode(
                id="bribe_failed",
                text_key=f"encounter.{key}.bribe_failed",
                auto_transition=Outcome.goto_with("inspection", fx.lose_credits(BRIBE_FAIL_FINE)),
            ),
            _end_node(key, "fled"),
            _end_node(key, "caught_fleeing"),
        ])


# =============================================================================
# DISTRESS ENCOUNTERS
# =============================================================================

def distress_signal() -> EncounterTemplate:
    """A distress call that may be genuine or a trap."""
    key = "distress_signal"
    return _template("prod_distress_signal", "Distress Signal",
        {Tag.TRAVEL, Tag.DISTRESS, Tag.CHOICE, Tag.SKILL_CHECK},
        [
            EncounterNode(
                id="intro",
                text_key=f"encounter.{key}.intro",
                options=(
                    EncounterOption(
                        id="investigate",
                        text_key=f"encounter.{key}.investigate",
                        outcome=Outcome.goto("approach"),
                    ),
                    EncounterOption(
                        id="scan",
                        text_key=f"encounter.{key}.scan",
                        skill_check=SkillCheckDef(CrewStat.TECH, EASY,
                                                  bonus_traits=("sensor_specialist", "cautious")),
                        success_outcome=Outcome.goto("scan_result"),
                        failure_outcome=Outcome.goto("approach"),
                    ),
                    EncounterOption(
                        id="ignore",
                        text_key=f"encounter.{key}.ignore",
                        outcome=Outcome.goto("ignored"),
                    ),
                ),
            ),
            EncounterNode(
                id="scan_result",
                text_key=f"encounter.{key}.scan_result",
                options=(
                    EncounterOption(id="help", text_key=f"encounter.{key}.help",
                                    outcome=Outcome.goto("genuine_rescue")),
                    EncounterOption(id="leave", text_key=f"encounter.{key}.leave",
                                    outcome=Outcome.goto("avoided_trap")),
                ),
            ),
            EncounterNode(
                id="approach",
                text_key=f"encounter.{key}.approach",
                options=(
                    EncounterOption(
                        id="proceed",
                        text_key=f"encounter.{key}.proceed",
                        skill_check=SkillCheckDef(CrewStat.SAVVY, MEDIUM,
                                                  bonus_traits=("cautious", "perceptive")),
                        success_outcome=Outcome.goto("genuine_rescue"),
                        failure_outcome=Outcome.goto_with("ambushed", fx.ship_damage(AMBUSH_DAMAGE)),
                    ),
                    EncounterOption(id="retreat", text_key=f"encounter.{key}.retreat",
                                    outcome=Outcome.goto("ignored")),
                ),
            ),
            _end_node(key, "genuine_rescue", fx.add_credits(RESCUE_REWARD), fx.crew_xp(RESCUE_XP)),
            _end_node(key, "ambushed", fx.crew_injury()),
            _end_node(key, "avoided_trap", fx.crew_xp(10)),
            _end_node(key, "ignored"),
        ])


# =============================================================================
# TRADER ENCOUNTERS
# =============================================================================

def trader_opportunity() -> EncounterTemplate:
    """A passing merchant offers a trade."""
    key = "trader"
    return _template("prod_trader_opportunity", "Trader Opportunity",
        {Tag.TRAVEL, Tag.TRADER, Tag.SOCIAL, Tag.CHOICE},
        [
            EncounterNode(
                id="intro",
                text_key=f"encounter.{key}.intro",
                options=(
                    EncounterOption(
                        id="buy_fuel",
                        text_key=f"encounter.{key}.buy_fuel",
                        conditions=(cond.has_credits(50),),
                        outcome=Outcome.goto_with("traded", fx.lose_credits(50), fx.add_fuel(10)),
                    ),
                    EncounterOption(
                        id="buy_parts",
                        text_key=f"encounter.{key}.buy_parts",
                        conditions=(cond.has_credits(80),),
                        outcome=Outcome.goto_with("traded", fx.lose_credits(80), fx.add_parts(5)),
                    ),
                    EncounterOption(
                        id="haggle",
                        text_key=f"encounter.{key}.haggle",
                        conditions=(cond.has_credits(30),),
                        skill_check=SkillCheckDef(CrewStat.SAVVY, MEDIUM, bonus_traits=("smooth_talker",)),
                        success_outcome=Outcome.goto_with("traded", fx.lose_credits(30), fx.add_fuel(10)),
                        failure_outcome=Outcome.goto("haggle_failed"),
                    ),
                    EncounterOption(
                        id="decline",
                        text_key=f"encounter.{key}.decline",
                        outcome=Outcome.end(),
                    ),
                ),
            ),
            _end_node(key, "traded"),
            _end_node(key, "haggle_failed"),
        ])


def smuggler_contact() -> EncounterTemplate:
    """A smuggler offers a discreet job."""
    key = "smuggler_contact"
    return _template("prod_smuggler_contact", "Smuggler Contact",
        {Tag.TRAVEL, Tag.SMUGGLER, Tag.SOCIAL, Tag.CARGO},
        [
            EncounterNode(
                id="intro",
                text_key=f"encounter.{key}.intro",
                options=(
                    EncounterOption(
                        id="accept",
                        text_key=f"encounter.{key}.accept",
                        outcome=Outcome.goto_with("accepted",
                            fx.add_cargo("contraband_crate", 1),
                            fx.add_credits(60)),
                    ),
                    EncounterOption(
                        id="sell_contraband",
                        text_key=f"encounter.{key}.sell_contraband",
                        conditions=(cond.has_cargo_value(100),),
                        outcome=Outcome.end_with(
                            fx.remove_cargo("contraband_crate", 1),
                            fx.add_credits(150)),
                    ),
                    EncounterOption(
                        id="report",
                        text_key=f"encounter.{key}.report",
                        conditions=(cond.negate(cond.has_trait("criminal_past")),),
                        outcome=Outcome.end_with(fx.faction_rep("authority", 5), fx.set_flag("reported_smuggler")),
                    ),
                    EncounterOption(
                        id="decline",
                        text_key=f"encounter.{key}.decline",
                        outcome=Outcome.end(),
                    ),
                ),
            ),
            _end_node(key, "accepted", fx.set_flag("smuggler_job")),
        ])


# =============================================================================
# GENERIC ENCOUNTERS
# =============================================================================

def derelict_discovery() -> EncounterTemplate:
    """A drifting hulk that may hold salvage."""
    key = "derelict"
    return _template("prod_derelict_discovery", "Derelict Discovery",
        {Tag.TRAVEL, Tag.EXPLORATION, Tag.GENERIC, Tag.SKILL_CHECK, Tag.RESOURCE},
        [
            EncounterNode(
                id="intro",
                text_key=f"encounter.{key}.intro",
                options=(
                    EncounterOption(
                        id="board",
                        text_key=f"encounter.{key}.board",
                        skill_check=SkillCheckDef(CrewStat.TECH, MEDIUM,
                                                  bonus_traits=("engineer",), penalty_traits=("reckless",)),
                        success_outcome=Outcome.goto_with("salvage", fx.add_parts(REPAIR_PARTS * 2)),
                        failure_outcome=Outcome.goto_with("accident", fx.crew_injury()),
                    ),
                    EncounterOption(
                        id="survivor",
                        text_key=f"encounter.{key}.survivor",
                        conditions=(cond.crew_stat_min(CrewStat.RESOLVE, 4),),
                        outcome=Outcome.end_with(fx.add_crew("Survivor", "technician")),
                    ),
                    EncounterOption(
                        id="leave",
                        text_key=f"encounter.{key}.leave",
                        outcome=Outcome.end(),
                    ),
                ),
            ),
            _end_node(key, "salvage", fx.crew_xp(5)),
            _end_node(key, "accident"),
        ])


def mechanical_failure() -> EncounterTemplate:
    """Something on the ship breaks mid-route."""
    key = "mechanical_failure"
    return _template("prod_mechanical_failure", "Mechanical Failure",
        {Tag.TRAVEL, Tag.SHIP, Tag.GENERIC, Tag.SKILL_CHECK},
        [
            EncounterNode(
                id="intro",
                text_key=f"encounter.{key}.intro",
                options=(
                    EncounterOption(
                        id="repair",
                        text_key=f"encounter.{key}.repair",
                        skill_check=SkillCheckDef(CrewStat.TECH, MEDIUM, bonus_traits=("engineer",)),
                        success_outcome=Outcome.goto("fixed"),
                        failure_outcome=Outcome.goto_with("limp_on", fx.time_delay(1), fx.ship_damage(5)),
                    ),
                    EncounterOption(
                        id="use_parts",
                        text_key=f"encounter.{key}.use_parts",
                        conditions=(cond.has_parts(REPAIR_PARTS),),
                        outcome=Outcome.goto_with("fixed",
                            fx.ResourceEffect(fx.ResourceType.PARTS, -REPAIR_PARTS)),
                    ),
                    EncounterOption(
                        id="drift",
                        text_key=f"encounter.{key}.drift",
                        outcome=Outcome.goto_with("limp_on", fx.time_delay(2)),
                    ),
                ),
            ),
            _end_node(key, "fixed"),
            _end_node(key, "limp_on", fx.lose_fuel(2)),
        ])


def get_all_templates() -> List[EncounterTemplate]:
    return [
        pirate_ambush(),
        pirate_haven_toll(),
        patrol_inspection(),
        distress_signal(),
        trader_opportunity(),
        smuggler_contact(),
        derelict_discovery(),
        mechanical_failure(),
    ]


def build_default_registry() -> EncounterRegistry:
    """Registry holding the full production library."""
    registry = EncounterRegistry(strict=True)
    registry.register_all(get_all_templates())
    return registry
