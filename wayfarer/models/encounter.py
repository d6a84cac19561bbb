"""
Encounter content model.

Templates are reusable, immutable encounter definitions: a graph of
nodes whose options lead, through outcomes, to other nodes or to the
end. An EncounterInstance is one playthrough's mutable progress through
a template.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from wayfarer.core.rng import RngStream
from wayfarer.models.conditions import Condition
from wayfarer.models.context import CrewStat, EncounterContext
from wayfarer.models.effects import Effect


class EncounterTag:
    """Template tag vocabulary."""
    # Trigger context
    TRAVEL = "travel"
    STATION = "station"
    EXPLORATION = "exploration"

    # Encounter type
    PIRATE = "pirate"
    PATROL = "patrol"
    TRADER = "trader"
    SMUGGLER = "smuggler"
    DISTRESS = "distress"
    ANOMALY = "anomaly"
    CREW = "crew"
    FACTION = "faction"

    # Mechanics
    COMBAT = "combat"
    SOCIAL = "social"
    CHOICE = "choice"
    SKILL_CHECK = "skill_check"

    # Selection
    GENERIC = "generic"
    RARE = "rare"
    STORY = "story"

    # Stakes
    CARGO = "cargo"
    SHIP = "ship"
    RESOURCE = "resource"


SYSTEM_TAG_KEY_PREFIX = "system_tag:"


# =============================================================================
# SKILL CHECKS
# =============================================================================

@dataclass(frozen=True)
class SkillCheckDef:
    """A stat check attached to an option."""
    stat: CrewStat
    difficulty: int
    bonus_traits: Tuple[str, ...] = ()
    penalty_traits: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stat": self.stat.value,
            "difficulty": self.difficulty,
            "bonus_traits": list(self.bonus_traits),
            "penalty_traits": list(self.penalty_traits),
        }


@dataclass
class SkillCheckResult:
    """Outcome of rolling a skill check."""
    success: bool
    stat: CrewStat
    difficulty: int
    roll: int = 0
    stat_value: int = 0
    trait_bonus: int = 0
    total: int = 0
    margin: int = 0
    crew_id: Optional[str] = None
    crew_name: Optional[str] = None
    applied_bonus_traits: List[str] = field(default_factory=list)
    applied_penalty_traits: List[str] = field(default_factory=list)

    @property
    def is_critical_success(self) -> bool:
        return self.success and self.margin >= 5

    @property
    def is_critical_failure(self) -> bool:
        return not self.success and self.margin <= -5

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "stat": self.stat.value,
            "difficulty": self.difficulty,
            "roll": self.roll,
            "stat_value": self.stat_value,
            "trait_bonus": self.trait_bonus,
            "total": self.total,
            "margin": self.margin,
            "is_critical_success": self.is_critical_success,
            "is_critical_failure": self.is_critical_failure,
            "crew_id": self.crew_id,
            "crew_name": self.crew_name,
            "applied_bonus_traits": list(self.applied_bonus_traits),
            "applied_penalty_traits": list(self.applied_penalty_traits),
        }


# =============================================================================
# TEMPLATE PARTS
# =============================================================================

@dataclass(frozen=True)
class EncounterOutcome:
    """Effects to accumulate plus where the encounter goes next."""
    effects: Tuple[Effect, ...] = ()
    next_node_id: Optional[str] = None
    is_end_encounter: bool = False

    @classmethod
    def end(cls) -> "EncounterOutcome":
        return cls(is_end_encounter=True)

    @classmethod
    def end_with(cls, *effects: Effect) -> "EncounterOutcome":
        return cls(effects=tuple(effects), is_end_encounter=True)

    @classmethod
    def goto(cls, node_id: str) -> "EncounterOutcome":
        return cls(next_node_id=node_id)

    @classmethod
    def goto_with(cls, node_id: str, *effects: Effect) -> "EncounterOutcome":
        return cls(effects=tuple(effects), next_node_id=node_id)


@dataclass(frozen=True)
class EncounterOption:
    """A player choice on a node."""
    id: str
    text_key: str
    conditions: Tuple[Condition, ...] = ()
    outcome: Optional[EncounterOutcome] = None
    skill_check: Optional[SkillCheckDef] = None
    success_outcome: Optional[EncounterOutcome] = None
    failure_outcome: Optional[EncounterOutcome] = None

    @property
    def has_skill_check(self) -> bool:
        return self.skill_check is not None

    def is_available(self, context: Optional[EncounterContext]) -> bool:
        """All conditions hold. No conditions means always visible."""
        return all(c.evaluate(context) for c in self.conditions)

    def referenced_nodes(self) -> List[str]:
        nodes = []
        for outcome in (self.outcome, self.success_outcome, self.failure_outcome):
            if outcome is not None:
                nodes.extend(_outcome_targets(outcome))
        return nodes


@dataclass(frozen=True)
class EncounterNode:
    """One step of an encounter."""
    id: str
    text_key: str
    options: Tuple[EncounterOption, ...] = ()
    auto_transition: Optional[EncounterOutcome] = None

    @property
    def has_auto_transition(self) -> bool:
        return self.auto_transition is not None

    @property
    def is_end_node(self) -> bool:
        return not self.options and self.auto_transition is None

    @property
    def requires_input(self) -> bool:
        return bool(self.options)


def _outcome_targets(outcome: EncounterOutcome) -> List[str]:
    targets = []
    if outcome.next_node_id:
        targets.append(outcome.next_node_id)
    for effect in outcome.effects:
        node_id = getattr(effect, "node_id", None)
        if node_id:
            targets.append(node_id)
    return targets


@dataclass(frozen=True)
class EncounterTemplate:
    """Reusable encounter definition. Never mutated at runtime."""
    id: str
    name: str
    entry_node_id: str
    nodes: Dict[str, EncounterNode] = field(default_factory=dict)
    tags: FrozenSet[str] = frozenset()
    required_context_keys: FrozenSet[str] = frozenset()

    def get_node(self, node_id: Optional[str]) -> Optional[EncounterNode]:
        if node_id is None:
            return None
        return self.nodes.get(node_id)

    def get_entry_node(self) -> Optional[EncounterNode]:
        return self.get_node(self.entry_node_id)

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def is_valid(self) -> bool:
        return bool(self.id) and bool(self.entry_node_id) and bool(self.nodes) \
            and self.entry_node_id in self.nodes

    def validate(self) -> List[str]:
        """Authoring check: structural problems and dangling node references."""
        problems = []
        if not self.id:
            problems.append("template has no id")
        if not self.nodes:
            problems.append("template has no nodes")
        if self.entry_node_id not in self.nodes:
            problems.append(f"entry node '{self.entry_node_id}' does not exist")

        for node_id, node in self.nodes.items():
            targets = []
            for option in node.options:
                targets.extend(option.referenced_nodes())
                if option.outcome is None and option.success_outcome is None \
                        and option.failure_outcome is None:
                    problems.append(f"option '{option.id}' on node '{node_id}' has no outcome")
            if node.auto_transition is not None:
                targets.extend(_outcome_targets(node.auto_transition))
            for target in targets:
                if target not in self.nodes:
                    problems.append(f"node '{node_id}' references missing node '{target}'")
        return problems

    def required_system_tags(self) -> List[str]:
        return sorted(
            key[len(SYSTEM_TAG_KEY_PREFIX):]
            for key in self.required_context_keys
            if key.startswith(SYSTEM_TAG_KEY_PREFIX)
        )


# =============================================================================
# INSTANCE
# =============================================================================

_PARAM_PATTERN = re.compile(r"\{(\w+)\}")


@dataclass
class EncounterInstance:
    """One playthrough of a template."""
    template: EncounterTemplate
    instance_id: str
    current_node_id: Optional[str]
    visited_nodes: List[str] = field(default_factory=list)
    pending_effects: List[Effect] = field(default_factory=list)
    resolved_parameters: Dict[str, str] = field(default_factory=dict)
    is_complete: bool = False
    is_paused_for_tactical: bool = False
    pending_tactical_mission_id: Optional[str] = None

    @classmethod
    def create(cls, template: EncounterTemplate, rng: Optional[RngStream] = None) -> "EncounterInstance":
        suffix = rng.next_int(0, 999999) if rng is not None else 0
        return cls(
            template=template,
            instance_id=f"enc_{template.id}_{suffix}",
            current_node_id=template.entry_node_id,
            visited_nodes=[template.entry_node_id],
        )

    @property
    def template_id(self) -> str:
        return self.template.id

    def get_current_node(self) -> Optional[EncounterNode]:
        if self.is_complete:
            return None
        return self.template.get_node(self.current_node_id)

    def resolve_text(self, text: str) -> str:
        """Substitute {param} placeholders with resolved parameters."""
        return _PARAM_PATTERN.sub(
            lambda m: self.resolved_parameters.get(m.group(1), m.group(0)),
            text,
        )

    def get_state(self) -> Dict[str, Any]:
        return {
            "instance_id": self.instance_id,
            "template_id": self.template.id,
            "current_node_id": self.current_node_id,
            "visited_nodes": list(self.visited_nodes),
            "pending_effects": [e.to_dict() for e in self.pending_effects],
            "resolved_parameters": dict(self.resolved_parameters),
            "is_complete": self.is_complete,
            "is_paused_for_tactical": self.is_paused_for_tactical,
            "pending_tactical_mission_id": self.pending_tactical_mission_id,
        }

    @classmethod
    def from_state(cls, data: Dict[str, Any], template: EncounterTemplate) -> "EncounterInstance":
        return cls(
            template=template,
            instance_id=data["instance_id"],
            current_node_id=data.get("current_node_id"),
            visited_nodes=list(data.get("visited_nodes", [])),
            pending_effects=[Effect.from_dict(e) for e in data.get("pending_effects", [])],
            resolved_parameters=dict(data.get("resolved_parameters", {})),
            is_complete=data.get("is_complete", False),
            is_paused_for_tactical=data.get("is_paused_for_tactical", False),
            pending_tactical_mission_id=data.get("pending_tactical_mission_id"),
        )


@dataclass
class StepResult:
    """Result of one runtime step."""
    success: bool
    current_node_id: Optional[str] = None
    is_complete: bool = False
    error_message: Optional[str] = None
    skill_check: Optional[SkillCheckResult] = None

    @classmethod
    def ok(cls, instance: EncounterInstance, skill_check: Optional[SkillCheckResult] = None) -> "StepResult":
        return cls(
            success=True,
            current_node_id=instance.current_node_id,
            is_complete=instance.is_complete,
            skill_check=skill_check,
        )

    @classmethod
    def invalid(cls, message: str, instance: Optional[EncounterInstance] = None) -> "StepResult":
        return cls(
            success=False,
            current_node_id=instance.current_node_id if instance else None,
            is_complete=instance.is_complete if instance else False,
            error_message=message,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "current_node_id": self.current_node_id,
            "is_complete": self.is_complete,
            "error_message": self.error_message,
            "skill_check": self.skill_check.to_dict() if self.skill_check else None,
        }
