"""Ring geometry and phase constants for Second Best."""

from __future__ import annotations

from typing import Iterable, List, Tuple

PLACE_COUNT = 8
LINE_LENGTH = 4
PLACEMENT_PIECES = 16
MOVE_OFFSETS: Tuple[int, ...] = (1, 4, 7)
MOVE_DISTANCES = frozenset({1, 4})

PHASE_PLACEMENT = "placement"
PHASE_MOVEMENT = "movement"


def in_ring(index: int) -> bool:
    """Return whether an index names a place on the ring."""
    return 0 <= index < PLACE_COUNT


def ring_distance(a: int, b: int) -> int:
    """Shortest number of steps between two places around the ring."""
    diff = abs(a - b) % PLACE_COUNT
    return min(diff, PLACE_COUNT - diff)


def is_ring_neighbour(a: int, b: int) -> bool:
    """Return whether a piece may travel from a to b: either neighbour or the opposite place."""
    return a != b and ring_distance(a, b) in MOVE_DISTANCES


def move_targets(index: int) -> Iterable[int]:
    """Yield the three reachable places from ``index`` in probe order."""
    for offset in MOVE_OFFSETS:
        yield (index + offset) % PLACE_COUNT


def ring_window(start: int, length: int = LINE_LENGTH) -> List[int]:
    """Return ``length`` ring-consecutive indices starting at ``start``."""
    return [(start + step) % PLACE_COUNT for step in range(length)]


def phase_for(piece_count: int) -> str:
    return PHASE_PLACEMENT if piece_count < PLACEMENT_PIECES else PHASE_MOVEMENT
