"""
Encounter template registry.

Holds the templates the generator can choose from and answers
eligibility queries for a travel situation.
"""
import logging
from typing import Dict, Iterable, List, Optional

from wayfarer.core.errors import TemplateInvalidError
from wayfarer.core.travel_costs import EncounterType
from wayfarer.models.encounter import EncounterTag, EncounterTemplate
from wayfarer.models.travel import TravelContext

logger = logging.getLogger(__name__)


class EncounterRegistry:
    """Templates by id, in registration order."""

    def __init__(self, strict: bool = False):
        """
        Args:
            strict: Reject templates with dangling node references
                instead of only logging them.
        """
        self.strict = strict
        self._templates: Dict[str, EncounterTemplate] = {}

    def register(self, template: EncounterTemplate) -> None:
        """Add or replace a template."""
        problems = template.validate()
        if problems:
            if self.strict:
                raise TemplateInvalidError(template.id, problems)
            logger.warning(f"Template '{template.id}' has authoring problems: {problems}")
        self._templates[template.id] = template

    def register_all(self, templates: Iterable[EncounterTemplate]) -> None:
        for template in templates:
            self.register(template)

    def get(self, template_id: str) -> Optional[EncounterTemplate]:
        return self._templates.get(template_id)

    def contains(self, template_id: str) -> bool:
        return template_id in self._templates

    def remove(self, template_id: str) -> bool:
        return self._templates.pop(template_id, None) is not None

    def clear(self) -> None:
        self._templates.clear()

    @property
    def count(self) -> int:
        return len(self._templates)

    def all(self) -> List[EncounterTemplate]:
        return list(self._templates.values())

    # ==================== Tag queries ====================

    def get_by_tag(self, tag: str) -> List[EncounterTemplate]:
        return [t for t in self._templates.values() if t.has_tag(tag)]

    def get_by_any_tag(self, *tags: str) -> List[EncounterTemplate]:
        return [t for t in self._templates.values() if any(t.has_tag(tag) for tag in tags)]

    def get_by_all_tags(self, *tags: str) -> List[EncounterTemplate]:
        return [t for t in self._templates.values() if all(t.has_tag(tag) for tag in tags)]

    # ==================== Eligibility ====================

    def get_eligible(self, context: Optional[TravelContext]) -> List[EncounterTemplate]:
        """
        Templates that may trigger in a travel situation.

        A template is eligible when it is structurally valid, tagged for
        travel, carries the suggested encounter type or the generic tag
        (unless the suggestion is random), and every system tag it
        requires is present on the current system.
        """
        if context is None:
            return []
        return [t for t in self._templates.values() if self.is_eligible(t, context)]

    @staticmethod
    def is_eligible(template: EncounterTemplate, context: TravelContext) -> bool:
        if not template.is_valid():
            return False
        if not template.has_tag(EncounterTag.TRAVEL):
            return False

        suggested = context.suggested_encounter_type
        if suggested != EncounterType.RANDOM:
            if not (template.has_tag(suggested.value) or template.has_tag(EncounterTag.GENERIC)):
                return False

        for tag in template.required_system_tags():
            if tag not in context.system_tags:
                return False
        return True
