"""
Province and unit definitions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from imperial.nations import Nation


class FactoryType(str, Enum):
    """Kinds of factory. Only shipyards produce fleets."""

    ARMAMENTS = "armaments"
    SHIPYARD = "shipyard"


class UnitKind(str, Enum):
    """Kinds of military unit."""

    ARMY = "army"
    FLEET = "fleet"


@dataclass
class ProvinceState:
    """Mutable state of a province: its flag and its factory."""

    name: str
    flag: Optional[Nation] = None
    factory: Optional[FactoryType] = None

    def __repr__(self) -> str:
        return f"ProvinceState(name='{self.name}', flag={self.flag}, factory={self.factory})"


@dataclass
class UnitStack:
    """
    Units of one nation in one province.

    ``friendly`` marks a stack that entered peacefully; friendly stacks
    never count as occupying the province.
    """

    armies: int = 0
    fleets: int = 0
    friendly: bool = False

    @property
    def total(self) -> int:
        return self.armies + self.fleets

    def is_empty(self) -> bool:
        return self.total == 0

    def count(self, kind: UnitKind) -> int:
        return self.armies if kind is UnitKind.ARMY else self.fleets

    def add(self, kind: UnitKind, amount: int = 1) -> None:
        if kind is UnitKind.ARMY:
            self.armies += amount
        else:
            self.fleets += amount
