"""
Deterministic random number streams.

Every random draw in the simulation (daily encounter rolls, template
selection, skill check dice, generated names) comes from a named,
seeded stream owned by the campaign. Each draw consumes exactly one
underlying float, so a stream's position is fully described by its seed
and call count and can be restored by replaying that many draws.
"""
import random
from typing import Any, Dict, List, Optional, Sequence, TypeVar

T = TypeVar("T")

CAMPAIGN_STREAM = "campaign"
TACTICAL_STREAM = "tactical"

_FNV_OFFSET = 2166136261
_FNV_PRIME = 16777619


class RngStream:
    """A named, seeded, replayable stream of random draws."""

    def __init__(self, name: str, seed: int):
        self.name = name
        self.seed = seed
        self.call_count = 0
        self._random = random.Random(seed)

    def next_float(self) -> float:
        """Uniform float in [0, 1)."""
        self.call_count += 1
        return self._random.random()

    def next_int(self, min_or_max: int, max_value: Optional[int] = None) -> int:
        """
        Uniform integer.

        next_int(n) returns a value in [0, n).
        next_int(a, b) returns a value in [a, b).
        """
        if max_value is None:
            low, high = 0, min_or_max
        else:
            low, high = min_or_max, max_value
        if high <= low:
            # Still consume a draw so stream positions stay aligned
            self.next_float()
            return low
        return low + int(self.next_float() * (high - low))

    def roll(self, probability: float) -> bool:
        """True with the given probability."""
        return self.next_float() < probability

    def pick(self, items: Sequence[T]) -> Optional[T]:
        """Pick one element uniformly, or None for an empty sequence."""
        if not items:
            return None
        return items[self.next_int(len(items))]

    def shuffle(self, items: List[Any]) -> None:
        """Fisher-Yates shuffle in place."""
        for i in range(len(items) - 1, 0, -1):
            j = self.next_int(i + 1)
            items[i], items[j] = items[j], items[i]

    def get_state(self) -> Dict[str, Any]:
        return {"name": self.name, "seed": self.seed, "call_count": self.call_count}

    def restore_state(self, seed: int, call_count: int) -> None:
        """Reseed and replay draws up to call_count."""
        self.seed = seed
        self._random = random.Random(seed)
        self.call_count = 0
        for _ in range(call_count):
            self.next_float()

    def __repr__(self) -> str:
        return f"RngStream(name={self.name!r}, seed={self.seed}, call_count={self.call_count})"


def derive_stream_seed(master_seed: int, stream_name: str) -> int:
    """FNV-1a (32-bit) mix of the master seed and a stream name."""
    value = (_FNV_OFFSET ^ (master_seed & 0xFFFFFFFF)) & 0xFFFFFFFF
    for char in stream_name:
        value ^= ord(char)
        value = (value * _FNV_PRIME) & 0xFFFFFFFF
    return value


class RngService:
    """
    Owns the campaign's random streams.

    Two well-known streams are created from the master seed: "campaign"
    for strategic-layer draws and "tactical" for mission play.
    """

    def __init__(self, master_seed: int):
        self.master_seed = master_seed
        self._streams: Dict[str, RngStream] = {}
        for name in (CAMPAIGN_STREAM, TACTICAL_STREAM):
            self._streams[name] = RngStream(name, derive_stream_seed(master_seed, name))

    @property
    def campaign(self) -> RngStream:
        return self._streams[CAMPAIGN_STREAM]

    @property
    def tactical(self) -> RngStream:
        return self._streams[TACTICAL_STREAM]

    def get_stream(self, name: str) -> RngStream:
        if name not in self._streams:
            raise KeyError(f"Unknown RNG stream: {name}")
        return self._streams[name]

    def has_stream(self, name: str) -> bool:
        return name in self._streams

    def reset_tactical_stream(self, mission_seed: int) -> None:
        self._streams[TACTICAL_STREAM] = RngStream(TACTICAL_STREAM, mission_seed)

    def get_state(self) -> Dict[str, Any]:
        return {
            "master_seed": self.master_seed,
            "streams": [stream.get_state() for stream in self._streams.values()],
        }

    def restore_state(self, state: Dict[str, Any]) -> None:
        self.master_seed = state["master_seed"]
        for stream_state in state.get("streams", []):
            name = stream_state["name"]
            stream = self._streams.get(name)
            if stream is None:
                stream = RngStream(name, stream_state["seed"])
                self._streams[name] = stream
            stream.restore_state(stream_state["seed"], stream_state["call_count"])
