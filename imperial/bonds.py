"""
Government bonds and the bond bank.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Set

from imperial.nations import NATION_ORDER, Nation

# Purchase price -> interest paid at each investor payout.
UNCOST: Dict[int, int] = {
    2: 1,
    4: 2,
    6: 3,
    9: 4,
    12: 5,
    16: 6,
    20: 7,
    25: 8,
    30: 9,
}

BOND_COSTS = tuple(UNCOST)


@dataclass(frozen=True)
class Bond:
    """A bond of a nation, identified by its purchase price."""

    nation: Nation
    cost: int

    def __post_init__(self) -> None:
        if self.cost not in UNCOST:
            raise ValueError(f"No bond denomination costs {self.cost}")

    @property
    def number(self) -> int:
        """Interest paid to the holder."""
        return UNCOST[self.cost]

    def __repr__(self) -> str:
        return f"Bond({self.nation.value}, {self.cost})"


def bond_sort_key(bond: Bond):
    return (NATION_ORDER.index(bond.nation), bond.cost)


def sorted_bonds(bonds: Iterable[Bond]) -> List[Bond]:
    """Bonds in turn order of their nation, cheapest first."""
    return sorted(bonds, key=bond_sort_key)


def full_bond_bank() -> Set[Bond]:
    """One bond of every denomination for every nation."""
    return {Bond(nation, cost) for nation in NATION_ORDER for cost in BOND_COSTS}
