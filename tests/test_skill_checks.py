"""Tests for encounter skill checks."""
import pytest

from wayfarer.core.rng import RngStream
from wayfarer.core.skill_checks import (
    chance_for_value,
    get_success_chance,
    get_success_chance_with_crew,
    get_trait_bonus,
    resolve_skill_check,
    select_best_crew,
)
from wayfarer.models.context import CrewSnapshot, CrewStat, EncounterContext
from wayfarer.models.encounter import SkillCheckDef


def make_crew(crew_id, **kwargs):
    traits = frozenset(kwargs.pop("traits", ()))
    return CrewSnapshot(id=crew_id, name=crew_id.title(), trait_ids=traits, **kwargs)


class TestResolveSkillCheck:
    """Test rolling checks."""

    def test_overwhelming_stat_always_succeeds(self):
        """Stat 10 against DC 5 cannot fail on any d10."""
        check = SkillCheckDef(CrewStat.GRIT, 5)
        context = EncounterContext(crew=[make_crew("ace", grit=10)])

        for seed in range(25):
            context.rng = RngStream("test", seed)
            result = resolve_skill_check(check, context)
            assert result.success
            assert 1 <= result.roll <= 10

        assert get_success_chance(check, context) == 100

    def test_hopeless_stat_always_fails(self):
        check = SkillCheckDef(CrewStat.GRIT, 25)
        context = EncounterContext(crew=[make_crew("rookie", grit=1)])

        for seed in range(25):
            context.rng = RngStream("test", seed)
            assert not resolve_skill_check(check, context).success

        assert get_success_chance(check, context) == 0

    def test_result_fields_add_up(self):
        check = SkillCheckDef(CrewStat.TECH, 9, bonus_traits=("engineer",))
        context = EncounterContext(
            crew=[make_crew("dax", tech=4, traits=["engineer"])],
            rng=RngStream("test", 3),
        )

        result = resolve_skill_check(check, context)

        assert result.stat_value == 4
        assert result.trait_bonus == 2
        assert result.total == result.roll + 6
        assert result.margin == result.total - 9
        assert result.success == (result.total >= 9)
        assert result.crew_id == "dax"
        assert result.applied_bonus_traits == ["engineer"]

    def test_consumes_one_draw(self):
        context = EncounterContext(crew=[make_crew("a", aim=3)], rng=RngStream("test", 1))

        resolve_skill_check(SkillCheckDef(CrewStat.AIM, 8), context)

        assert context.rng.call_count == 1

    def test_no_crew_fails_without_drawing(self):
        """An empty roster fails with margin -DC and no draw."""
        stream = RngStream("test", 1)
        context = EncounterContext(rng=stream)

        result = resolve_skill_check(SkillCheckDef(CrewStat.SAVVY, 7), context)

        assert not result.success
        assert result.margin == -7
        assert result.crew_id is None
        assert stream.call_count == 0

    def test_no_stream_fails_without_roll(self):
        """A context without a random stream cannot roll, so the check fails."""
        context = EncounterContext(crew=[make_crew("ace", aim=10)])

        result = resolve_skill_check(SkillCheckDef(CrewStat.AIM, 5), context)

        assert not result.success
        assert result.roll == 0
        assert result.margin == -5
        assert result.crew_id == "ace"

    def test_rolls_cover_every_die_face(self):
        check = SkillCheckDef(CrewStat.AIM, 8)
        context = EncounterContext(crew=[make_crew("a", aim=3)])

        rolls = set()
        for seed in range(200):
            context.rng = RngStream("test", seed)
            rolls.add(resolve_skill_check(check, context).roll)

        assert rolls == set(range(1, 11))

    def test_explicit_crew_is_used(self):
        weak = make_crew("weak", reflexes=1)
        strong = make_crew("strong", reflexes=6)
        context = EncounterContext(crew=[weak, strong], rng=RngStream("test", 2))

        result = resolve_skill_check(SkillCheckDef(CrewStat.REFLEXES, 5), context, crew=weak)

        assert result.crew_id == "weak"

    def test_same_seed_same_result(self):
        check = SkillCheckDef(CrewStat.RESOLVE, 8)
        crew = [make_crew("a", resolve=3)]

        first = resolve_skill_check(check, EncounterContext(crew=crew, rng=RngStream("s", 99)))
        second = resolve_skill_check(check, EncounterContext(crew=crew, rng=RngStream("s", 99)))

        assert first.to_dict() == second.to_dict()


class TestCrewSelection:
    """Test choosing who acts."""

    def test_highest_effective_value_wins(self):
        check = SkillCheckDef(CrewStat.SAVVY, 8, bonus_traits=("smooth_talker",))
        plain = make_crew("plain", savvy=5)
        talker = make_crew("talker", savvy=4, traits=["smooth_talker"])

        assert select_best_crew(check, [plain, talker]) is talker

    def test_tie_goes_to_earlier(self):
        check = SkillCheckDef(CrewStat.AIM, 8)
        first = make_crew("first", aim=4)
        second = make_crew("second", aim=4)

        assert select_best_crew(check, [first, second]) is first

    def test_empty_roster(self):
        assert select_best_crew(SkillCheckDef(CrewStat.AIM, 8), []) is None

    def test_penalty_traits(self):
        check = SkillCheckDef(
            CrewStat.RESOLVE, 8,
            bonus_traits=("veteran",),
            penalty_traits=("coward", "drunk"),
        )
        crew = make_crew("x", resolve=5, traits=["veteran", "coward", "drunk"])

        bonus, applied_bonus, applied_penalty = get_trait_bonus(check, crew)

        assert bonus == -2
        assert applied_bonus == ["veteran"]
        assert applied_penalty == ["coward", "drunk"]


class TestSuccessChance:
    """Test success chance previews."""

    @pytest.mark.parametrize("difficulty,value,expected", [
        (5, 10, 100),
        (10, 9, 100),
        (10, 8, 90),
        (11, 5, 50),
        (15, 5, 10),
        (16, 5, 0),
        (25, 1, 0),
    ])
    def test_chance_for_value(self, difficulty, value, expected):
        assert chance_for_value(difficulty, value) == expected

    def test_no_crew_is_zero(self):
        assert get_success_chance(SkillCheckDef(CrewStat.TECH, 1), EncounterContext()) == 0

    def test_chance_with_crew_counts_traits(self):
        check = SkillCheckDef(CrewStat.TECH, 11, bonus_traits=("engineer",))
        crew = make_crew("dax", tech=3, traits=["engineer"])

        assert get_success_chance_with_crew(check, crew) == 50
