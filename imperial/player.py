"""
Player state and the descriptors used to seat players.
"""

from typing import Any, Dict, Optional, Set

from imperial.bonds import Bond
from imperial.nations import Nation


class PlayerDescriptor:
    """A seat at the table as named in the initialize payload."""

    def __init__(self, player_id: str, nation: Optional[Nation] = None):
        self.player_id = player_id
        self.nation = nation

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlayerDescriptor":
        nation = data.get("nation")
        return cls(str(data["id"]), Nation(nation) if nation else None)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.player_id}
        if self.nation is not None:
            data["nation"] = self.nation.value
        return data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlayerDescriptor):
            return NotImplemented
        return self.player_id == other.player_id and self.nation == other.nation

    def __repr__(self) -> str:
        return f"PlayerDescriptor(id='{self.player_id}', nation={self.nation})"


class PlayerState:
    """Mutable per-player state. Players are keyed by display name."""

    def __init__(self, name: str, cash: int = 0):
        self.name = name
        self.cash = cash
        self.bonds: Set[Bond] = set()
        self.raw_score = 0

    def bonds_of(self, nation: Nation) -> Set[Bond]:
        return {bond for bond in self.bonds if bond.nation is nation}

    def investment_in(self, nation: Nation) -> int:
        """Cumulative purchase price of this player's bonds in a nation."""
        return sum(bond.cost for bond in self.bonds_of(nation))

    @property
    def total_score(self) -> int:
        return self.raw_score + self.cash

    def __repr__(self) -> str:
        return (
            f"PlayerState(name='{self.name}', cash={self.cash}, "
            f"bonds={len(self.bonds)}, raw_score={self.raw_score})"
        )
