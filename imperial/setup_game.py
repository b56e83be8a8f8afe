"""
Standard setup: seating, nation assignment, starting bonds and units.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Set, Union

from imperial.board import BoardQuery
from imperial.bonds import Bond, full_bond_bank
from imperial.config import GameConfig
from imperial.exceptions import InvalidSetupError
from imperial.nations import NATION_ORDER, Nation, NationState
from imperial.player import PlayerDescriptor, PlayerState
from imperial.provinces import ProvinceState, UnitStack

# Each nation's starting player also receives a small bond of its partner.
PARTNER_NATIONS: Dict[Nation, Nation] = {
    Nation.AH: Nation.GB,
    Nation.GB: Nation.AH,
    Nation.IT: Nation.GE,
    Nation.GE: Nation.IT,
    Nation.FR: Nation.RU,
    Nation.RU: Nation.FR,
}


@dataclass
class InitialSetup:
    """Everything ``initialize`` installs into a fresh game."""

    nations: Dict[Nation, NationState]
    players: Dict[str, PlayerState]
    order: List[str]
    provinces: Dict[str, ProvinceState]
    units: Dict[Nation, Dict[str, UnitStack]]
    available_bonds: Set[Bond]
    current_nation: Nation
    investor_card_holder: str


def _descriptor(entry: Union[PlayerDescriptor, Dict[str, Any]]) -> PlayerDescriptor:
    if isinstance(entry, PlayerDescriptor):
        return entry
    try:
        return PlayerDescriptor.from_dict(entry)
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidSetupError(f"Bad player descriptor {entry!r}: {e}") from e


def assign_nations(descriptors: List[PlayerDescriptor]) -> Dict[Nation, str]:
    """
    Map every nation to a player.

    Nations named in a descriptor go to that player. The rest are dealt
    round-robin over the seating order.
    """
    assignments: Dict[Nation, str] = {}
    for descriptor in descriptors:
        if descriptor.nation is None:
            continue
        if descriptor.nation in assignments:
            raise InvalidSetupError(f"{descriptor.nation.value} is claimed by more than one player")
        assignments[descriptor.nation] = descriptor.player_id

    seat = 0
    for nation in NATION_ORDER:
        if nation in assignments:
            continue
        assignments[nation] = descriptors[seat % len(descriptors)].player_id
        seat += 1
    return {nation: assignments[nation] for nation in NATION_ORDER}


def standard_setup(
    players: Iterable[Union[PlayerDescriptor, Dict[str, Any]]],
    board: BoardQuery,
    config: Optional[GameConfig] = None,
) -> InitialSetup:
    """
    Build the initial state for a player list.

    Raises:
        InvalidSetupError: If there are no players, duplicate ids or a
            nation claimed twice
    """
    config = config or GameConfig()
    descriptors = [_descriptor(entry) for entry in players]
    if not descriptors:
        raise InvalidSetupError("A game needs at least one player")

    order = [descriptor.player_id for descriptor in descriptors]
    if len(set(order)) != len(order):
        raise InvalidSetupError(f"Duplicate player ids in {order}")

    assignments = assign_nations(descriptors)

    nations = {
        nation: NationState(tax_chart_position=config.initial_tax_chart_position)
        for nation in NATION_ORDER
    }
    player_states = {name: PlayerState(name) for name in order}
    available_bonds = full_bond_bank()

    for nation, name in assignments.items():
        player = player_states[name]
        for bond in (
            Bond(nation, config.primary_bond_cost),
            Bond(PARTNER_NATIONS[nation], config.secondary_bond_cost),
        ):
            available_bonds.discard(bond)
            player.bonds.add(bond)
            nations[bond.nation].treasury += bond.cost
        player.cash += config.starting_cash
        nations[nation].controller = name

    factories = board.starting_factories()
    provinces = {
        name: ProvinceState(name, factory=factories.get(name)) for name in board.province_names()
    }

    units: Dict[Nation, Dict[str, UnitStack]] = {}
    for nation in NATION_ORDER:
        home = set(board.home_provinces_of(nation))
        units[nation] = {
            name: UnitStack(friendly=name in home) for name in board.province_names()
        }

    current_nation = next(nation for nation in NATION_ORDER if nations[nation].controller)

    return InitialSetup(
        nations=nations,
        players=player_states,
        order=order,
        provinces=provinces,
        units=units,
        available_bonds=available_bonds,
        current_nation=current_nation,
        investor_card_holder=order[-1],
    )
