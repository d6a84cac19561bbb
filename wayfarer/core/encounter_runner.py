"""
Encounter Runtime.

Steps an EncounterInstance through its template one player choice at a
time. Option visibility is decided by conditions against a context
snapshot, skill checks pick the success or failure branch, and outcome
effects are accumulated on the instance for an external applier. The
runner never applies effects itself.
"""
import logging
from typing import List, Optional

from wayfarer.core.rules_config import get_rules_config
from wayfarer.core.skill_checks import resolve_skill_check
from wayfarer.models.context import EncounterContext
from wayfarer.models.effects import (
    Effect,
    EndEncounterEffect,
    GotoNodeEffect,
    TriggerTacticalEffect,
)
from wayfarer.models.encounter import (
    EncounterInstance,
    EncounterNode,
    EncounterOption,
    EncounterOutcome,
    SkillCheckResult,
    StepResult,
)

logger = logging.getLogger(__name__)


class EncounterRunner:
    """Drives encounter instances."""

    def __init__(self, max_auto_transitions: Optional[int] = None):
        self.max_auto_transitions = max_auto_transitions

    def _auto_transition_limit(self) -> int:
        if self.max_auto_transitions is not None:
            return self.max_auto_transitions
        return get_rules_config().max_auto_transitions

    # ==================== Queries ====================

    def get_current_node(self, instance: Optional[EncounterInstance]) -> Optional[EncounterNode]:
        if instance is None or instance.is_complete:
            return None
        return instance.get_current_node()

    def get_available_options(
        self,
        instance: Optional[EncounterInstance],
        context: Optional[EncounterContext],
    ) -> List[EncounterOption]:
        """Options on the current node whose conditions all hold."""
        node = self.get_current_node(instance)
        if node is None:
            return []
        return [option for option in node.options if option.is_available(context)]

    def is_complete(self, instance: Optional[EncounterInstance]) -> bool:
        return instance is None or instance.is_complete

    def get_pending_effects(self, instance: Optional[EncounterInstance]) -> List[Effect]:
        """Accumulated effects, read-only until an applier consumes them."""
        if instance is None:
            return []
        return list(instance.pending_effects)

    # ==================== Stepping ====================

    def start(self, instance: Optional[EncounterInstance]) -> StepResult:
        """Enter the encounter, resolving any auto-transitions from the entry node."""
        if instance is None:
            return StepResult.invalid("Instance is missing")

        logger.info(f"Encounter {instance.instance_id} started ({instance.template.name})")
        self.process_auto_transitions(instance)
        if instance.is_complete:
            logger.info(f"Encounter {instance.instance_id} completed on entry")
        return StepResult.ok(instance)

    def select_option(
        self,
        instance: Optional[EncounterInstance],
        context: Optional[EncounterContext],
        option_index: int,
    ) -> StepResult:
        """
        Choose an option by its index in the filtered option list.

        An invalid index or a finished instance returns a failed result
        and leaves the instance untouched.
        """
        if instance is None or instance.is_complete:
            return StepResult.invalid("Encounter is missing or complete", instance)

        available = self.get_available_options(instance, context)
        if option_index < 0 or option_index >= len(available):
            return StepResult.invalid(f"Invalid option index: {option_index}", instance)

        option = available[option_index]
        outcome, check_result = self._resolve_outcome(option, context)
        if outcome is None:
            return StepResult.invalid(f"Option '{option.id}' has no outcome", instance)

        logger.debug(f"Encounter {instance.instance_id}: selected '{option.id}' on '{instance.current_node_id}'")
        self.process_outcome(instance, outcome)
        self.process_auto_transitions(instance)

        if instance.is_complete:
            logger.info(
                f"Encounter {instance.instance_id} completed: "
                f"{len(instance.pending_effects)} effects, {len(instance.visited_nodes)} nodes visited"
            )
        return StepResult.ok(instance, check_result)

    def _resolve_outcome(self, option: EncounterOption, context: Optional[EncounterContext]):
        if not option.has_skill_check:
            return option.outcome, None

        check_result: Optional[SkillCheckResult] = resolve_skill_check(
            option.skill_check, context or EncounterContext()
        )
        if check_result.success:
            outcome = option.success_outcome or option.outcome
        else:
            outcome = option.failure_outcome or option.outcome
        return outcome, check_result

    def process_outcome(self, instance: EncounterInstance, outcome: Optional[EncounterOutcome]) -> None:
        """Accumulate an outcome's effects and apply its flow control."""
        if outcome is None:
            return

        for effect in outcome.effects:
            if isinstance(effect, GotoNodeEffect):
                self.transition(instance, effect.node_id)
            elif isinstance(effect, EndEncounterEffect):
                instance.is_complete = True
            elif isinstance(effect, TriggerTacticalEffect):
                instance.is_paused_for_tactical = True
                instance.pending_tactical_mission_id = effect.mission_type
                instance.pending_effects.append(effect)
            else:
                instance.pending_effects.append(effect)

        if not instance.is_complete and outcome.next_node_id:
            self.transition(instance, outcome.next_node_id)

        if outcome.is_end_encounter:
            instance.is_complete = True

    def transition(self, instance: EncounterInstance, node_id: Optional[str]) -> None:
        """Move to a node. Unknown nodes are ignored."""
        if not node_id:
            return
        if instance.template.get_node(node_id) is None:
            logger.warning(f"Encounter {instance.instance_id}: node '{node_id}' not found in template")
            return
        instance.current_node_id = node_id
        instance.visited_nodes.append(node_id)

    def process_auto_transitions(self, instance: Optional[EncounterInstance]) -> None:
        """
        Resolve a chain of auto-transition nodes in one call.

        Landing on a node with no options and no auto-transition completes
        the instance. The chain is bounded; exceeding the bound completes
        the instance.
        """
        if instance is None or instance.is_complete:
            return

        limit = self._auto_transition_limit()
        steps = 0
        node = instance.get_current_node()
        while node is not None and node.has_auto_transition and not instance.is_complete:
            if steps >= limit:
                logger.warning(
                    f"Encounter {instance.instance_id}: auto-transition chain exceeded {limit} steps "
                    f"at '{node.id}', ending encounter"
                )
                instance.is_complete = True
                return
            steps += 1
            self.process_outcome(instance, node.auto_transition)
            node = instance.get_current_node()

        if node is not None and node.is_end_node:
            instance.is_complete = True

    def resume_after_tactical(self, instance: Optional[EncounterInstance]) -> None:
        """Clear the tactical pause once the mission has been played."""
        if instance is None:
            return
        instance.is_paused_for_tactical = False
        instance.pending_tactical_mission_id = None
