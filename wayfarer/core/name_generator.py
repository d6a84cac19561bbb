"""
Name Generator.

Deterministic names for systems, NPCs, ships and cargo. Every function
draws from the stream it is given, so the same stream position always
produces the same name.
"""
from typing import List

from wayfarer.core.rng import RngStream
from wayfarer.core.world import SystemType


# =============================================================================
# WORD LISTS
# =============================================================================

SYSTEM_PREFIXES = ["New", "Port", "Fort", "Outpost", "Camp", "Point"]

SYSTEM_NAMES = [
    "Haven", "Reach", "Prospect", "Terminus", "Horizon", "Vanguard",
    "Sentinel", "Bastion", "Refuge", "Waypoint", "Crossroads", "Anchor",
    "Beacon", "Gateway", "Meridian", "Apex", "Nexus", "Zenith",
    "Solace", "Vigil", "Citadel", "Spire", "Forge", "Anvil",
    "Ember", "Nova", "Pulsar", "Drift", "Tide", "Harbor",
]

SYSTEM_SUFFIXES = ["Prime", "Alpha", "Beta", "Gamma", "VII", "IX", "Hub", "Depot"]

DERELICT_PREFIXES = ["Wreck of", "Ruins of", "Hulk of", "Ghost of"]

ASTEROID_NAMES = ["Rockfall", "Ironvein", "Shatter", "Cinder", "Shard", "Rubble", "Flint", "Basalt"]

NEBULA_NAMES = ["Shroud", "Veil", "Mist", "Haze", "Murk", "Gloom", "Wisp", "Pall"]

FIRST_NAMES = [
    "Ada", "Bram", "Cass", "Dax", "Edda", "Finn", "Greta", "Hale",
    "Ines", "Jory", "Kira", "Lev", "Mara", "Nico", "Orla", "Pike",
    "Quinn", "Rhea", "Soren", "Tamsin", "Ulla", "Voss", "Wren", "Yara",
]

LAST_NAMES = [
    "Okafor", "Varga", "Lindqvist", "Moreau", "Castellan", "Ibarra",
    "Kessler", "Nakamura", "Oduya", "Petrov", "Quill", "Ransome",
    "Sato", "Thorne", "Vance", "Whitlock", "Yilmaz", "Zeller",
]

NICKNAMES = [
    "Red", "Knuckles", "Ghost", "Patch", "Lucky", "Viper",
    "Dutch", "Scrap", "Hex", "Bones", "Sparks", "Crow",
]

PIRATE_TITLES = ["Captain", "Mad", "Black", "Iron", "Bloody", "One-Eyed"]

SHIP_PREFIXES = ["ISV", "CSV", "MSV", "FTS"]

SHIP_NAMES = [
    "Wandering Star", "Iron Promise", "Last Light", "Quiet Harvest",
    "Northern Wind", "Long Shot", "Second Chance", "Patient Hand",
    "Morning Glory", "Stubborn Mule", "Silver Thread", "Far Horizon",
]

PIRATE_SHIP_NAMES = [
    "Blood Moon", "Widowmaker", "Carrion", "Black Tide", "Gutter Queen",
    "Rust Fang", "Grave Robber", "Red Debt", "Jackal", "Hungry Void",
]

CARGO_TYPES = [
    "machine parts", "water ice", "grain", "medical supplies",
    "construction alloys", "fuel cells", "textiles", "electronics",
]

VALUABLE_CARGO = [
    "rare isotopes", "antique artwork", "quantum processors",
    "refined platinum", "experimental alloys", "luxury synthwine",
]

ILLEGAL_CARGO = [
    "unregistered weapons", "stims", "stolen ship codes",
    "contraband tech", "unlicensed AI cores", "forged transit papers",
]


def _pick(rng: RngStream, words: List[str]) -> str:
    return words[rng.next_int(len(words))]


# =============================================================================
# SYSTEMS
# =============================================================================

def generate_system_name(system_type: SystemType, rng: RngStream) -> str:
    """Name a system in the style of its type."""
    if system_type == SystemType.DERELICT:
        return f"{_pick(rng, DERELICT_PREFIXES)} {_pick(rng, SYSTEM_NAMES)}"
    if system_type == SystemType.ASTEROID:
        return f"{_pick(rng, ASTEROID_NAMES)} {_pick(rng, SYSTEM_SUFFIXES)}"
    if system_type == SystemType.NEBULA:
        return f"{_pick(rng, SYSTEM_NAMES)} {_pick(rng, NEBULA_NAMES)}"

    use_prefix = rng.next_float() < 0.3
    use_suffix = rng.next_float() < 0.4
    name = _pick(rng, SYSTEM_NAMES)
    if use_prefix:
        name = f"{_pick(rng, SYSTEM_PREFIXES)} {name}"
    if use_suffix:
        name = f"{name} {_pick(rng, SYSTEM_SUFFIXES)}"
    return name


# =============================================================================
# PEOPLE
# =============================================================================

def generate_first_name(rng: RngStream) -> str:
    return _pick(rng, FIRST_NAMES)


def generate_npc_name(rng: RngStream, include_nickname: bool = True) -> str:
    """Full name, sometimes with a quoted nickname."""
    first = _pick(rng, FIRST_NAMES)
    last = _pick(rng, LAST_NAMES)
    if include_nickname and rng.next_float() < 0.25:
        return f"{first} \"{_pick(rng, NICKNAMES)}\" {last}"
    return f"{first} {last}"


def generate_pirate_name(rng: RngStream) -> str:
    return f"{_pick(rng, PIRATE_TITLES)} {_pick(rng, NICKNAMES)}"


# =============================================================================
# SHIPS
# =============================================================================

def generate_ship_name(rng: RngStream) -> str:
    """Registered ship name with hull prefix."""
    return f"{_pick(rng, SHIP_PREFIXES)} {_pick(rng, SHIP_NAMES)}"


def generate_ship_name_simple(rng: RngStream) -> str:
    return f"the {_pick(rng, SHIP_NAMES)}"


def generate_pirate_ship_name(rng: RngStream) -> str:
    return f"the {_pick(rng, PIRATE_SHIP_NAMES)}"


# =============================================================================
# CARGO
# =============================================================================

def generate_cargo_type(rng: RngStream, valuable: bool = False, illegal: bool = False) -> str:
    if illegal:
        return _pick(rng, ILLEGAL_CARGO)
    if valuable:
        return _pick(rng, VALUABLE_CARGO)
    return _pick(rng, CARGO_TYPES)
