"""Tests for the encounter runtime."""
import pytest
from unittest.mock import patch

from wayfarer.core.encounter_runner import EncounterRunner
from wayfarer.core.rng import RngStream
from wayfarer.core.rules_config import RulesContext
from wayfarer.models import conditions as cond
from wayfarer.models import effects as fx
from wayfarer.models.context import CrewStat, EncounterContext
from wayfarer.models.encounter import (
    EncounterInstance,
    EncounterNode,
    EncounterOption,
    EncounterOutcome,
    EncounterTemplate,
    SkillCheckDef,
    SkillCheckResult,
)


def make_template(nodes, entry="start", template_id="runner_test"):
    return EncounterTemplate(
        id=template_id,
        name="Runner Test",
        entry_node_id=entry,
        nodes={node.id: node for node in nodes},
    )


def option(option_id, outcome=None, **kwargs):
    return EncounterOption(id=option_id, text_key=f"opt.{option_id}", outcome=outcome, **kwargs)


@pytest.fixture
def runner():
    return EncounterRunner()


@pytest.fixture
def checkpoint_template():
    """A patrol stop with a bribe, a skill check and a fight."""
    return make_template([
        EncounterNode(
            id="start",
            text_key="checkpoint.start",
            options=(
                option("bribe", EncounterOutcome.goto_with("waved", fx.lose_credits(50)),
                       conditions=(cond.has_credits(50),)),
                option("rich_bribe", EncounterOutcome.end(), conditions=(cond.has_credits(10000),)),
                option(
                    "bluff",
                    skill_check=SkillCheckDef(CrewStat.SAVVY, 9),
                    success_outcome=EncounterOutcome.goto("waved"),
                    failure_outcome=EncounterOutcome.goto_with("fined", fx.faction_rep("authority", -5)),
                ),
                option("fight", EncounterOutcome(effects=(fx.trigger_tactical("patrol_fight"),),
                                                 next_node_id="aftermath")),
            ),
        ),
        EncounterNode(id="waved", text_key="checkpoint.waved",
                      auto_transition=EncounterOutcome.end_with(fx.crew_xp(1))),
        EncounterNode(id="fined", text_key="checkpoint.fined",
                      auto_transition=EncounterOutcome.goto("released")),
        EncounterNode(id="released", text_key="checkpoint.released"),
        EncounterNode(
            id="aftermath",
            text_key="checkpoint.aftermath",
            options=(option("leave", EncounterOutcome.end()),),
        ),
    ])


def check_result(success):
    return SkillCheckResult(success=success, stat=CrewStat.SAVVY, difficulty=9)


class TestQueries:
    """Test read-only runner queries."""

    def test_available_options_filtered(self, runner, checkpoint_template, encounter_context):
        instance = EncounterInstance.create(checkpoint_template)

        options = runner.get_available_options(instance, encounter_context)

        assert [o.id for o in options] == ["bribe", "bluff", "fight"]

    def test_missing_context_hides_conditional_options(self, runner, checkpoint_template):
        instance = EncounterInstance.create(checkpoint_template)

        options = runner.get_available_options(instance, None)

        assert [o.id for o in options] == ["bluff", "fight"]

    def test_missing_instance(self, runner):
        assert runner.get_current_node(None) is None
        assert runner.get_available_options(None, EncounterContext()) == []
        assert runner.is_complete(None)
        assert runner.get_pending_effects(None) == []


class TestSelectOption:
    """Test stepping through choices."""

    def test_index_counts_visible_options(self, runner, checkpoint_template, encounter_context):
        """Index 0 is the bribe, since the rich bribe is hidden."""
        instance = EncounterInstance.create(checkpoint_template)

        result = runner.select_option(instance, encounter_context, 0)

        assert result.success
        assert result.is_complete
        assert instance.visited_nodes == ["start", "waved"]
        assert runner.get_pending_effects(instance) == [fx.lose_credits(50), fx.crew_xp(1)]

    @pytest.mark.parametrize("index", [-1, 3, 99])
    def test_invalid_index_leaves_instance_untouched(self, runner, checkpoint_template, encounter_context, index):
        instance = EncounterInstance.create(checkpoint_template)
        before = instance.get_state()

        result = runner.select_option(instance, encounter_context, index)

        assert not result.success
        assert "Invalid option index" in result.error_message
        assert instance.get_state() == before

    def test_complete_instance_rejects_choices(self, runner, checkpoint_template, encounter_context):
        instance = EncounterInstance.create(checkpoint_template)
        instance.is_complete = True

        result = runner.select_option(instance, encounter_context, 0)

        assert not result.success
        assert result.is_complete

    def test_skill_success_branch(self, runner, checkpoint_template, encounter_context):
        instance = EncounterInstance.create(checkpoint_template)

        with patch("wayfarer.core.encounter_runner.resolve_skill_check", return_value=check_result(True)):
            result = runner.select_option(instance, encounter_context, 1)

        assert result.skill_check.success
        assert instance.visited_nodes == ["start", "waved"]
        assert instance.is_complete

    def test_skill_failure_branch_chains_auto_transitions(self, runner, checkpoint_template, encounter_context):
        """Failure goes to fined, which auto-transitions into the released end node."""
        instance = EncounterInstance.create(checkpoint_template)

        with patch("wayfarer.core.encounter_runner.resolve_skill_check", return_value=check_result(False)):
            result = runner.select_option(instance, encounter_context, 1)

        assert not result.skill_check.success
        assert instance.visited_nodes == ["start", "fined", "released"]
        assert instance.current_node_id == "released"
        assert instance.is_complete
        assert runner.get_pending_effects(instance) == [fx.faction_rep("authority", -5)]

    def test_skill_check_falls_back_to_plain_outcome(self, runner, encounter_context):
        template = make_template([
            EncounterNode(id="start", text_key="s", options=(
                option("try", EncounterOutcome.end_with(fx.add_parts(1)),
                       skill_check=SkillCheckDef(CrewStat.TECH, 30)),
            )),
        ])
        instance = EncounterInstance.create(template)

        result = runner.select_option(instance, encounter_context, 0)

        assert result.success
        assert not result.skill_check.success
        assert runner.get_pending_effects(instance) == [fx.add_parts(1)]

    def test_skill_check_uses_context_stream(self, runner, checkpoint_template, encounter_context):
        encounter_context.rng = RngStream("test", 8)
        instance = EncounterInstance.create(checkpoint_template)

        runner.select_option(instance, encounter_context, 1)

        assert encounter_context.rng.call_count == 1


class TestFlowControl:
    """Test goto, end and auto-transition handling."""

    def test_goto_effect_is_not_accumulated(self, runner, encounter_context):
        template = make_template([
            EncounterNode(id="start", text_key="s", options=(
                option("go", EncounterOutcome(effects=(fx.add_meds(1), fx.goto_node("mid")))),
            )),
            EncounterNode(id="mid", text_key="m", options=(option("stop", EncounterOutcome.end()),)),
        ])
        instance = EncounterInstance.create(template)

        runner.select_option(instance, encounter_context, 0)

        assert instance.current_node_id == "mid"
        assert not instance.is_complete
        assert runner.get_pending_effects(instance) == [fx.add_meds(1)]

    def test_end_effect_stops_before_next_node(self, runner, encounter_context):
        template = make_template([
            EncounterNode(id="start", text_key="s", options=(
                option("quit", EncounterOutcome(effects=(fx.end_encounter(),), next_node_id="mid")),
            )),
            EncounterNode(id="mid", text_key="m", options=(option("x", EncounterOutcome.end()),)),
        ])
        instance = EncounterInstance.create(template)

        runner.select_option(instance, encounter_context, 0)

        assert instance.is_complete
        assert instance.visited_nodes == ["start"]
        assert runner.get_pending_effects(instance) == []

    def test_missing_target_node_is_ignored(self, runner, encounter_context):
        template = make_template([
            EncounterNode(id="start", text_key="s", options=(
                option("lost", EncounterOutcome.goto("nowhere")),
            )),
        ])
        instance = EncounterInstance.create(template)

        result = runner.select_option(instance, encounter_context, 0)

        assert result.success
        assert instance.current_node_id == "start"
        assert not instance.is_complete

    def test_start_resolves_entry_chain(self, runner):
        template = make_template([
            EncounterNode(id="start", text_key="s", auto_transition=EncounterOutcome.goto_with("b", fx.add_fuel(2))),
            EncounterNode(id="b", text_key="b", auto_transition=EncounterOutcome.goto("c")),
            EncounterNode(id="c", text_key="c", options=(option("ok", EncounterOutcome.end()),)),
        ])
        instance = EncounterInstance.create(template)

        result = runner.start(instance)

        assert result.success
        assert result.current_node_id == "c"
        assert not result.is_complete
        assert instance.visited_nodes == ["start", "b", "c"]

    def test_start_on_end_node_completes(self, runner):
        template = make_template([EncounterNode(id="start", text_key="s")])
        instance = EncounterInstance.create(template)

        assert runner.start(instance).is_complete

    def test_start_without_instance(self, runner):
        assert not runner.start(None).success

    def test_auto_transition_cycle_is_bounded(self, encounter_context):
        """A loop of auto-transitions ends the encounter instead of hanging."""
        template = make_template([
            EncounterNode(id="start", text_key="s", options=(option("go", EncounterOutcome.goto("ping")),)),
            EncounterNode(id="ping", text_key="p", auto_transition=EncounterOutcome.goto_with("pong", fx.crew_xp(1))),
            EncounterNode(id="pong", text_key="q", auto_transition=EncounterOutcome.goto("ping")),
        ])
        instance = EncounterInstance.create(template)

        with RulesContext(max_auto_transitions=5):
            EncounterRunner().select_option(instance, encounter_context, 0)

        assert instance.is_complete
        assert len(instance.visited_nodes) == 1 + 1 + 5
        assert len(instance.pending_effects) == 3

    def test_constructor_limit_overrides_rules(self, encounter_context):
        template = make_template([
            EncounterNode(id="start", text_key="s", auto_transition=EncounterOutcome.goto("start")),
        ])
        instance = EncounterInstance.create(template)

        EncounterRunner(max_auto_transitions=2).start(instance)

        assert instance.is_complete
        assert instance.visited_nodes == ["start", "start", "start"]


class TestTacticalPause:
    """Test handing off to tactical play."""

    def test_trigger_tactical_pauses(self, runner, checkpoint_template, encounter_context):
        instance = EncounterInstance.create(checkpoint_template)

        result = runner.select_option(instance, encounter_context, 2)

        assert result.success
        assert instance.is_paused_for_tactical
        assert instance.pending_tactical_mission_id == "patrol_fight"
        assert instance.current_node_id == "aftermath"
        assert fx.trigger_tactical("patrol_fight") in runner.get_pending_effects(instance)

    def test_resume_after_tactical(self, runner, checkpoint_template, encounter_context):
        instance = EncounterInstance.create(checkpoint_template)
        runner.select_option(instance, encounter_context, 2)

        runner.resume_after_tactical(instance)
        result = runner.select_option(instance, encounter_context, 0)

        assert not instance.is_paused_for_tactical
        assert instance.pending_tactical_mission_id is None
        assert result.is_complete
