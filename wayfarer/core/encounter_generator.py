"""
Encounter Selector.

Turns a travel situation into a ready-to-run encounter instance:
eligibility filtering through the registry, contextual weighting,
cumulative-weight roulette with one draw from the campaign stream, and
deterministic resolution of text parameters (names, ships, cargo,
reward sizes) from the same stream.
"""
import logging
from typing import Dict, List, Optional, TYPE_CHECKING

from wayfarer.core import name_generator
from wayfarer.core.encounter_registry import EncounterRegistry
from wayfarer.core.rng import RngStream
from wayfarer.core.rules_config import RulesConfig, get_rules_config
from wayfarer.core.travel_costs import EncounterType
from wayfarer.models.encounter import EncounterInstance, EncounterTag, EncounterTemplate
from wayfarer.models.travel import TravelContext

if TYPE_CHECKING:
    from wayfarer.models.campaign import CampaignState

logger = logging.getLogger(__name__)

DEFAULT_METRIC_LEVEL = 2
HOSTILE_REP_THRESHOLD = 25


class EncounterGenerator:
    """Selects and parameterizes encounters from a registry."""

    def __init__(self, registry: EncounterRegistry, rules: Optional[RulesConfig] = None):
        self.registry = registry
        self._rules = rules

    @property
    def rules(self) -> RulesConfig:
        return self._rules if self._rules is not None else get_rules_config()

    def generate(
        self,
        context: Optional[TravelContext],
        campaign: Optional["CampaignState"],
    ) -> Optional[EncounterInstance]:
        """
        Pick and instantiate an encounter for a travel situation.

        Returns None when there is no context, no random stream, or no
        eligible template. Callers treat None as "no encounter this roll".
        """
        if context is None:
            logger.debug("Encounter generation skipped: no travel context")
            return None

        rng = campaign.rng.campaign if campaign is not None and campaign.rng is not None else None
        if rng is None:
            logger.debug("Encounter generation skipped: no random stream")
            return None

        eligible = self.registry.get_eligible(context)
        if not eligible:
            logger.debug(
                f"No eligible templates at system {context.current_system_id} "
                f"(suggested {context.suggested_encounter_type.value})"
            )
            return None

        weights = self.calculate_weights(eligible, context)
        template = self._weighted_select(eligible, weights, rng)
        logger.debug(f"Selected template '{template.id}' from {len(eligible)} eligible")

        instance = EncounterInstance.create(template, rng)
        self.resolve_parameters(instance, context, campaign, rng)
        return instance

    # ==================== Weighting ====================

    def calculate_weights(self, templates: List[EncounterTemplate], context: TravelContext) -> Dict[str, float]:
        """Selection weight per template id."""
        return {t.id: self.get_template_weight(t, context) for t in templates}

    def get_template_weight(self, template: Optional[EncounterTemplate], context: TravelContext) -> float:
        """Contextual weight of one template, floored at the configured minimum."""
        if template is None:
            return 0.0

        cfg = self.rules
        metrics = context.system_metrics
        weight = cfg.base_weight

        if template.has_tag(EncounterTag.PIRATE):
            crime = metrics.criminal_activity if metrics else cfg.default_crime_level
            weight *= cfg.pirate_base_multiplier + crime * cfg.pirate_crime_scale

        if template.has_tag(EncounterTag.PATROL):
            security = metrics.security_level if metrics else DEFAULT_METRIC_LEVEL
            weight *= cfg.patrol_base_multiplier + security * cfg.patrol_security_scale

        if template.has_tag(EncounterTag.TRADER):
            economy = metrics.economic_activity if metrics else DEFAULT_METRIC_LEVEL
            weight *= cfg.trader_base_multiplier + economy * cfg.trader_economic_scale

        if template.has_tag(EncounterTag.SMUGGLER):
            security = metrics.security_level if metrics else DEFAULT_METRIC_LEVEL
            crime = metrics.criminal_activity if metrics else DEFAULT_METRIC_LEVEL
            weight *= (5 - security) * cfg.smuggler_security_scale
            weight *= cfg.smuggler_crime_base + crime * cfg.smuggler_crime_scale

        if template.has_tag(EncounterTag.CARGO) and context.cargo_value > cfg.cargo_value_threshold:
            weight *= cfg.cargo_multiplier

        if template.has_tag(EncounterTag.COMBAT):
            weight *= cfg.combat_base_multiplier + context.route_hazard * cfg.combat_hazard_scale

        if template.has_tag(EncounterTag.RARE):
            weight *= cfg.rare_multiplier

        suggested = context.suggested_encounter_type
        if suggested != EncounterType.RANDOM and template.has_tag(suggested.value):
            weight *= cfg.suggested_type_multiplier

        if template.has_tag(EncounterTag.FACTION) and context.system_owner_faction_id:
            weight *= cfg.faction_multiplier

        if template.has_tag(EncounterTag.DISTRESS):
            weight *= cfg.distress_multiplier

        return max(cfg.min_weight, weight)

    def _weighted_select(
        self,
        templates: List[EncounterTemplate],
        weights: Dict[str, float],
        rng: RngStream,
    ) -> EncounterTemplate:
        """Select a template using cumulative weights and one stream draw."""
        total_weight = sum(weights.get(t.id, 0.0) for t in templates)
        roll = rng.next_float() * total_weight

        cumulative = 0.0
        for template in templates:
            cumulative += weights.get(template.id, 0.0)
            if roll <= cumulative:
                return template

        return templates[-1]

    # ==================== Parameters ====================

    def resolve_parameters(
        self,
        instance: EncounterInstance,
        context: TravelContext,
        campaign: Optional["CampaignState"],
        rng: RngStream,
    ) -> None:
        """Fill the instance's text parameters. Draw order is fixed."""
        params = instance.resolved_parameters
        world = campaign.world if campaign is not None else None

        # Location
        params["system_name"] = context.current_system.name if context.current_system else "Unknown System"
        params["system_id"] = str(context.current_system_id)
        destination = world.get_system(context.destination_system_id) if world else None
        params["destination_name"] = destination.name if destination else "destination"

        # Faction
        params["faction_id"] = context.system_owner_faction_id or "neutral"
        faction = world.get_faction(context.system_owner_faction_id) if world else None
        params["faction_name"] = faction.name if faction else "local authorities"

        # NPCs
        params["npc_name"] = name_generator.generate_npc_name(rng)
        params["npc_first_name"] = name_generator.generate_first_name(rng)
        params["pirate_name"] = name_generator.generate_pirate_name(rng)
        params["captain_name"] = name_generator.generate_npc_name(rng, include_nickname=False)

        # Ships
        params["ship_name"] = name_generator.generate_ship_name(rng)
        params["ship_name_simple"] = name_generator.generate_ship_name_simple(rng)
        params["pirate_ship"] = name_generator.generate_pirate_ship_name(rng)

        # Cargo
        params["cargo_type"] = name_generator.generate_cargo_type(rng)
        params["valuable_cargo"] = name_generator.generate_cargo_type(rng, valuable=True)
        params["illegal_cargo"] = name_generator.generate_cargo_type(rng, illegal=True)

        # Reward and cost sizes scale with route hazard
        base_credits = 50 + context.route_hazard * 20
        params["small_credits"] = str(base_credits // 2)
        params["medium_credits"] = str(base_credits)
        params["large_credits"] = str(base_credits * 2)

        base_fuel = 5 + context.route_hazard
        params["small_fuel"] = str(base_fuel // 2)
        params["medium_fuel"] = str(base_fuel)
        params["large_fuel"] = str(base_fuel * 2)

        # Situation
        params["has_cargo"] = str(context.cargo_value > 0).lower()
        params["cargo_value"] = str(context.cargo_value)
        params["has_illegal"] = str(context.has_illegal_cargo).lower()
        params["crew_count"] = str(context.crew_count)
        params["is_hostile_territory"] = str(context.player_rep_with_owner < HOSTILE_REP_THRESHOLD).lower()
        params["player_reputation"] = str(context.player_rep_with_owner)

        metrics = context.system_metrics
        if metrics is not None:
            params["security_level"] = str(metrics.security_level)
            params["criminal_activity"] = str(metrics.criminal_activity)
            params["economic_activity"] = str(metrics.economic_activity)


# Singleton instance
_generator: Optional[EncounterGenerator] = None


def get_encounter_generator() -> EncounterGenerator:
    """Get the singleton generator over the production encounter library."""
    global _generator
    if _generator is None:
        from wayfarer.core.encounter_library import build_default_registry
        _generator = EncounterGenerator(build_default_registry())
    return _generator
