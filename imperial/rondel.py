"""
The rondel: eight action slots a nation's marker moves around.
"""

from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple


class RondelSlot(str, Enum):
    """Slots of the rondel, in clockwise order."""

    FACTORY = "factory"
    PRODUCTION1 = "production1"
    MANEUVER1 = "maneuver1"
    INVESTOR = "investor"
    IMPORT = "import"
    PRODUCTION2 = "production2"
    MANEUVER2 = "maneuver2"
    TAXATION = "taxation"


RONDEL_ORDER: List[RondelSlot] = list(RondelSlot)

# Cost of moving 1..6 slots forward. Seven or more is not allowed.
STEP_COSTS: Tuple[int, ...] = (0, 0, 0, 2, 4, 6)

PRODUCTION_SLOTS = frozenset({RondelSlot.PRODUCTION1, RondelSlot.PRODUCTION2})
MANEUVER_SLOTS = frozenset({RondelSlot.MANEUVER1, RondelSlot.MANEUVER2})

# Moves that cross the investor slot without stopping on it.
PASSES_INVESTOR: Dict[RondelSlot, FrozenSet[RondelSlot]] = {
    RondelSlot.MANEUVER1: frozenset(
        {
            RondelSlot.IMPORT,
            RondelSlot.PRODUCTION2,
            RondelSlot.MANEUVER2,
            RondelSlot.TAXATION,
            RondelSlot.FACTORY,
        }
    ),
    RondelSlot.PRODUCTION1: frozenset(
        {RondelSlot.IMPORT, RondelSlot.PRODUCTION2, RondelSlot.MANEUVER2, RondelSlot.TAXATION}
    ),
    RondelSlot.FACTORY: frozenset(
        {RondelSlot.IMPORT, RondelSlot.PRODUCTION2, RondelSlot.MANEUVER2}
    ),
    RondelSlot.TAXATION: frozenset({RondelSlot.IMPORT, RondelSlot.PRODUCTION2}),
    RondelSlot.MANEUVER2: frozenset({RondelSlot.IMPORT}),
}


def reachable_slots(position: Optional[RondelSlot]) -> List[Tuple[RondelSlot, int]]:
    """
    Slots a nation can move to from its current position, with their cost.

    A nation that has never moved may start on any slot for free.
    """
    if position is None:
        return [(slot, 0) for slot in RONDEL_ORDER]

    index = RONDEL_ORDER.index(position)
    return [
        (RONDEL_ORDER[(index + step) % len(RONDEL_ORDER)], cost)
        for step, cost in enumerate(STEP_COSTS, start=1)
    ]


def passes_investor(origin: Optional[RondelSlot], destination: RondelSlot) -> bool:
    """True if moving from origin to destination crosses the investor slot."""
    if origin is None:
        return False
    return destination in PASSES_INVESTOR.get(origin, frozenset())
