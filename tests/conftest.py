"""
Wayfarer - Test Configuration and Fixtures
Shared test utilities and fixtures for pytest.
"""
import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from wayfarer.core.encounter_generator import EncounterGenerator
from wayfarer.core.encounter_registry import EncounterRegistry
from wayfarer.core.rng import RngService
from wayfarer.core.rules_config import reset_rules_config
from wayfarer.core.world import (
    Faction,
    RouteTag,
    StarSystem,
    SystemTag,
    SystemType,
    WorldState,
)
from wayfarer.models import effects as fx
from wayfarer.models.campaign import CampaignState, CrewMember
from wayfarer.models.context import CrewSnapshot, CrewStat, EncounterContext
from wayfarer.models.encounter import (
    EncounterNode,
    EncounterOption,
    EncounterOutcome,
    EncounterTag,
    EncounterTemplate,
)


@pytest.fixture(autouse=True)
def clean_rules_config():
    """Every test starts from the standard rules."""
    reset_rules_config()
    yield
    reset_rules_config()


# ==================== World Fixtures ====================

@pytest.fixture
def star_map() -> WorldState:
    """
    Small sector:

        Haven(1) --150-- Waypoint(2) --200-- Cinder(3)
           \\                                   /
            250 (dangerous, hazard 3)     250 (hazard 3)
               \\                           /
                 ------- Drift(4) ---------

    Lonely(5) has no routes.
    """
    world = WorldState()
    world.add_faction(Faction(id="authority", name="Colonial Authority"))
    world.add_system(StarSystem(
        id=1, name="Haven", type=SystemType.STATION, position=(0.0, 0.0),
        owning_faction_id="authority", tags={SystemTag.HUB, SystemTag.CORE},
    ))
    world.add_system(StarSystem(id=2, name="Waypoint", type=SystemType.OUTPOST, position=(150.0, 0.0)))
    world.add_system(StarSystem(id=3, name="Cinder", type=SystemType.OUTPOST, position=(350.0, 0.0)))
    world.add_system(StarSystem(
        id=4, name="Drift", type=SystemType.DERELICT, position=(150.0, 200.0),
        tags={SystemTag.LAWLESS},
    ))
    world.add_system(StarSystem(id=5, name="Lonely", type=SystemType.OUTPOST, position=(1000.0, 1000.0)))

    world.connect(1, 2, distance=150)
    world.connect(2, 3, distance=200)
    world.connect(1, 4, distance=250, hazard_level=3, tags={RouteTag.DANGEROUS})
    world.connect(4, 3, distance=250, hazard_level=3)
    return world


# ==================== Crew Fixtures ====================

@pytest.fixture
def crew():
    """Three crew members with distinct strengths."""
    return [
        CrewMember(
            id="crew-1", name="Mara Voss", role="pilot",
            traits=["pilot", "quick_reflexes"],
            stats={CrewStat.GRIT: 2, CrewStat.REFLEXES: 5, CrewStat.AIM: 3,
                   CrewStat.TECH: 1, CrewStat.SAVVY: 2, CrewStat.RESOLVE: 3},
        ),
        CrewMember(
            id="crew-2", name="Dax Okafor", role="engineer",
            traits=["engineer"],
            stats={CrewStat.GRIT: 3, CrewStat.REFLEXES: 1, CrewStat.AIM: 2,
                   CrewStat.TECH: 6, CrewStat.SAVVY: 1, CrewStat.RESOLVE: 4},
        ),
        CrewMember(
            id="crew-3", name="Wren Sato", role="face",
            traits=["smooth_talker", "criminal_past"],
            stats={CrewStat.GRIT: 1, CrewStat.REFLEXES: 2, CrewStat.AIM: 1,
                   CrewStat.TECH: 2, CrewStat.SAVVY: 5, CrewStat.RESOLVE: 2},
        ),
    ]


@pytest.fixture
def crew_snapshots(crew):
    return [CrewSnapshot.from_crew(c) for c in crew]


# ==================== Campaign Fixtures ====================

@pytest.fixture
def campaign(star_map, crew) -> CampaignState:
    """Seeded campaign docked at Haven."""
    return CampaignState(
        world=star_map,
        rng=RngService(42),
        current_node_id=1,
        money=200,
        fuel=100,
        parts=3,
        meds=2,
        ammo=10,
        crew=crew,
        faction_rep={"authority": 60},
        cargo_value=50,
    )


@pytest.fixture
def encounter_context(campaign) -> EncounterContext:
    return EncounterContext.from_campaign(campaign)


# ==================== Encounter Fixtures ====================

@pytest.fixture
def generic_template() -> EncounterTemplate:
    """Two-node travel encounter that can trigger anywhere."""
    return EncounterTemplate(
        id="test_generic",
        name="Generic Test",
        entry_node_id="start",
        nodes={
            "start": EncounterNode(
                id="start",
                text_key="test.start",
                options=(
                    EncounterOption(
                        id="take",
                        text_key="test.take",
                        outcome=EncounterOutcome.goto_with("done", fx.add_credits(25)),
                    ),
                    EncounterOption(
                        id="leave",
                        text_key="test.leave",
                        outcome=EncounterOutcome.end(),
                    ),
                ),
            ),
            "done": EncounterNode(id="done", text_key="test.done"),
        },
        tags=frozenset({EncounterTag.TRAVEL, EncounterTag.GENERIC}),
    )


@pytest.fixture
def test_registry(generic_template) -> EncounterRegistry:
    registry = EncounterRegistry()
    registry.register(generic_template)
    return registry


@pytest.fixture
def test_generator(test_registry) -> EncounterGenerator:
    return EncounterGenerator(test_registry)
