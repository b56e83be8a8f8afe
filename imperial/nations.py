"""
Nations and their mutable state.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from imperial.rondel import RondelSlot


class Nation(str, Enum):
    """The six great powers."""

    AH = "AH"
    IT = "IT"
    FR = "FR"
    GB = "GB"
    GE = "GE"
    RU = "RU"


# Fixed turn order; play wraps from RU back to AH.
NATION_ORDER: List[Nation] = [Nation.AH, Nation.IT, Nation.FR, Nation.GB, Nation.GE, Nation.RU]


def next_in_order(nation: Nation) -> Nation:
    """The nation that follows in turn order, controlled or not."""
    index = NATION_ORDER.index(nation)
    return NATION_ORDER[(index + 1) % len(NATION_ORDER)]


@dataclass
class NationState:
    """Mutable per-nation bookkeeping."""

    treasury: int = 0
    controller: Optional[str] = None
    rondel_position: Optional[RondelSlot] = None
    previous_rondel_position: Optional[RondelSlot] = None
    tax_chart_position: int = 5
    power_points: int = 0
