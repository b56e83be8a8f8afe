"""
The action model: a closed set of tagged actions, their wire form and the
structural match used to check a proposed action against the legal set.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Sequence

from imperial.exceptions import UnknownActionError
from imperial.nations import Nation
from imperial.player import PlayerDescriptor
from imperial.provinces import UnitKind
from imperial.rondel import RondelSlot


class ActionType(str, Enum):
    """Types of actions, keyed by their wire name."""

    INITIALIZE = "initialize"
    END_GAME = "endGame"
    NOOP = "noop"
    BOND_PURCHASE = "bondPurchase"
    SKIP_BOND_PURCHASE = "skipBondPurchase"
    END_MANEUVER = "endManeuver"
    FIGHT = "fight"
    COEXIST = "coexist"
    UNFRIENDLY_ENTRANCE = "unfriendlyEntrance"
    FRIENDLY_ENTRANCE = "friendlyEntrance"
    FORCE_INVESTOR = "forceInvestor"
    SKIP_FORCE_INVESTOR = "skipForceInvestor"
    BUILD_FACTORY = "buildFactory"
    DESTROY_FACTORY = "destroyFactory"
    SKIP_DESTROY_FACTORY = "skipDestroyFactory"
    IMPORT = "import"
    MANEUVER = "maneuver"
    RONDEL = "rondel"

    # Display-only entries of the annotated log
    PLAYER_PAYS_FOR_RONDEL = "playerPaysForRondel"
    PLAYER_GAINS_CASH = "playerGainsCash"
    NATION_GAINS_TREASURY = "nationGainsTreasury"
    NATION_GAINS_POWER_POINTS = "nationGainsPowerPoints"
    PLAYER_TRADED_IN_FOR_A_BOND = "playerTradedInForABond"
    PLAYER_INVESTS = "playerInvests"


_NATION_KEYS = frozenset({"nation", "incumbent", "challenger", "bond_nation"})


@dataclass(frozen=True)
class Placement:
    """One unit placed by an import."""

    province: str
    unit: UnitKind

    def to_dict(self) -> Dict[str, str]:
        return {"province": self.province, "type": self.unit.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Placement":
        return cls(data["province"], UnitKind(data["type"]))


def _to_camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.title() for part in rest)


def _to_snake(key: str) -> str:
    return "".join(f"_{char.lower()}" if char.isupper() else char for char in key)


def _encode(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (Placement, PlayerDescriptor)):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_encode(item) for item in value]
    return value


def _decode(key: str, value: Any) -> Any:
    if key in _NATION_KEYS:
        return Nation(value)
    if key == "slot":
        return RondelSlot(value)
    if key == "target_type":
        return UnitKind(value)
    if key == "placements":
        return tuple(Placement.from_dict(item) for item in value)
    if key == "players":
        return tuple(PlayerDescriptor.from_dict(item) for item in value)
    return value


class Action:
    """
    A game action: a type plus a payload of named fields.

    Payload keys are snake_case in Python and camelCase on the wire.
    Actions are immutable once logged.
    """

    def __init__(self, action_type: ActionType, **payload: Any):
        self.action_type = action_type
        self.payload = payload

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Action):
            return NotImplemented
        return self.action_type is other.action_type and self.payload == other.payload

    def __repr__(self) -> str:
        return f"Action({self.action_type.value}, {self.payload})"

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)

    # Wire format

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.action_type.value,
            "payload": {_to_camel(key): _encode(value) for key, value in self.payload.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Action":
        """
        Decode a wire action.

        Raises:
            UnknownActionError: If the type is unknown or the payload is malformed
        """
        if not isinstance(data, dict) or "type" not in data:
            raise UnknownActionError(f"Not an action: {data!r}")
        try:
            action_type = ActionType(data["type"])
        except ValueError:
            raise UnknownActionError(f"Unknown action type: {data['type']!r}") from None

        raw_payload = data.get("payload") or {}
        if not isinstance(raw_payload, dict):
            raise UnknownActionError(f"Payload of {action_type.value} must be an object")
        try:
            payload = {
                _to_snake(key): _decode(_to_snake(key), value)
                for key, value in raw_payload.items()
            }
        except (KeyError, TypeError, ValueError) as e:
            raise UnknownActionError(f"Malformed {action_type.value} payload: {e}") from e
        return cls(action_type, **payload)

    # Constructors

    @classmethod
    def initialize(cls, players: Sequence[PlayerDescriptor], solo_mode: bool = False) -> "Action":
        return cls(ActionType.INITIALIZE, players=tuple(players), solo_mode=solo_mode)

    @classmethod
    def end_game(cls) -> "Action":
        return cls(ActionType.END_GAME)

    @classmethod
    def noop(cls) -> "Action":
        return cls(ActionType.NOOP)

    @classmethod
    def rondel(cls, nation: Nation, slot: RondelSlot, cost: int) -> "Action":
        return cls(ActionType.RONDEL, nation=nation, cost=cost, slot=slot)

    @classmethod
    def bond_purchase(cls, nation: Nation, player: str, cost: int) -> "Action":
        return cls(ActionType.BOND_PURCHASE, nation=nation, player=player, cost=cost)

    @classmethod
    def skip_bond_purchase(cls, player: str) -> "Action":
        return cls(ActionType.SKIP_BOND_PURCHASE, player=player)

    @classmethod
    def force_investor(cls, player: str) -> "Action":
        return cls(ActionType.FORCE_INVESTOR, player=player)

    @classmethod
    def skip_force_investor(cls, player: str) -> "Action":
        return cls(ActionType.SKIP_FORCE_INVESTOR, player=player)

    @classmethod
    def build_factory(cls, province: str) -> "Action":
        return cls(ActionType.BUILD_FACTORY, province=province)

    @classmethod
    def destroy_factory(cls, province: str) -> "Action":
        return cls(ActionType.DESTROY_FACTORY, province=province)

    @classmethod
    def skip_destroy_factory(cls, province: str) -> "Action":
        return cls(ActionType.SKIP_DESTROY_FACTORY, province=province)

    @classmethod
    def import_units(cls, placements: Iterable[Placement]) -> "Action":
        return cls(ActionType.IMPORT, placements=tuple(placements))

    @classmethod
    def maneuver(cls, origin: str, destination: str) -> "Action":
        return cls(ActionType.MANEUVER, origin=origin, destination=destination)

    @classmethod
    def end_maneuver(cls) -> "Action":
        return cls(ActionType.END_MANEUVER)

    @classmethod
    def fight(
        cls, province: str, incumbent: Nation, challenger: Nation, target_type: UnitKind
    ) -> "Action":
        return cls(
            ActionType.FIGHT,
            province=province,
            incumbent=incumbent,
            challenger=challenger,
            target_type=target_type,
        )

    @classmethod
    def coexist(cls, province: str, incumbent: Nation, challenger: Nation) -> "Action":
        return cls(ActionType.COEXIST, province=province, incumbent=incumbent, challenger=challenger)

    @classmethod
    def unfriendly_entrance(cls, province: str, incumbent: Nation, challenger: Nation) -> "Action":
        return cls(
            ActionType.UNFRIENDLY_ENTRANCE,
            province=province,
            incumbent=incumbent,
            challenger=challenger,
        )

    @classmethod
    def friendly_entrance(cls, province: str, incumbent: Nation, challenger: Nation) -> "Action":
        return cls(
            ActionType.FRIENDLY_ENTRANCE,
            province=province,
            incumbent=incumbent,
            challenger=challenger,
        )

    # Annotated-log entries

    @classmethod
    def player_pays_for_rondel(cls, player: str, cost: int, slot: RondelSlot) -> "Action":
        return cls(ActionType.PLAYER_PAYS_FOR_RONDEL, player=player, cost=cost, slot=slot)

    @classmethod
    def player_gains_cash(cls, player: str, amount: int) -> "Action":
        return cls(ActionType.PLAYER_GAINS_CASH, player=player, amount=amount)

    @classmethod
    def nation_gains_treasury(cls, nation: Nation, amount: int) -> "Action":
        return cls(ActionType.NATION_GAINS_TREASURY, nation=nation, amount=amount)

    @classmethod
    def nation_gains_power_points(cls, nation: Nation, power_points: int) -> "Action":
        return cls(ActionType.NATION_GAINS_POWER_POINTS, nation=nation, power_points=power_points)

    @classmethod
    def player_traded_in_for_a_bond(cls, player: str, bond_nation: Nation, bond_cost: int) -> "Action":
        return cls(
            ActionType.PLAYER_TRADED_IN_FOR_A_BOND,
            player=player,
            bond_nation=bond_nation,
            bond_cost=bond_cost,
        )

    @classmethod
    def player_invests(cls, player: str) -> "Action":
        return cls(ActionType.PLAYER_INVESTS, player=player)


def _placements_match(legal: Sequence[Placement], proposed: Any) -> bool:
    if not isinstance(proposed, (list, tuple)) or len(legal) != len(proposed):
        return False
    for expected, actual in zip(legal, proposed):
        if not isinstance(actual, Placement):
            return False
        if expected.province != actual.province or expected.unit is not actual.unit:
            return False
    return True


def actions_match(legal: Action, proposed: Action) -> bool:
    """
    True if a proposed action matches a legal one.

    Every payload field of the legal action must be present in the proposed
    action with the same value. Imports compare their placements in order.
    """
    if legal.action_type is not proposed.action_type:
        return False
    if legal.action_type is ActionType.IMPORT:
        return _placements_match(legal.get("placements", ()), proposed.get("placements", ()))

    missing = object()
    return all(proposed.payload.get(key, missing) == value for key, value in legal.payload.items())


def contains(actions: Iterable[Action], proposed: Action) -> bool:
    """True if any action of a legal set matches the proposed one."""
    return any(actions_match(legal, proposed) for legal in actions)
