"""
Legal-action enumeration.

This module computes what a game offers next: rondel moves, bond offers,
factory sites, import bundles and maneuver/conflict choices. It also
provides the public helpers for querying and applying actions.
"""

from __future__ import annotations

from itertools import product
from typing import TYPE_CHECKING, List, Tuple

from imperial.actions import Action, Placement, contains
from imperial.bonds import sorted_bonds
from imperial.nations import Nation
from imperial.provinces import FactoryType, UnitKind, UnitStack
from imperial.rondel import RondelSlot, reachable_slots

if TYPE_CHECKING:
    from imperial.game import GameState


def rondel_actions(game: GameState, nation: Nation) -> List[Action]:
    """
    Rondel moves open to a nation.

    Moves its controller cannot pay for are dropped, and so is the factory
    slot when the treasury cannot pay for a factory.
    """
    state = game.nations[nation]
    controller = game.players.get(state.controller) if state.controller else None
    cash = controller.cash if controller is not None else 0

    actions: List[Action] = []
    for slot, cost in reachable_slots(state.rondel_position):
        if cost > cash:
            continue
        if slot is RondelSlot.FACTORY and state.treasury < game.config.factory_cost:
            continue
        actions.append(Action.rondel(nation, slot, cost))
    return actions


def bond_offers(game: GameState, player_name: str) -> List[Action]:
    """
    Bonds a player may buy, plus the option to skip.

    A bond is offered if the player can pay outright, or can trade up from
    their most expensive bond of that nation and cover the difference.
    """
    player = game.players[player_name]
    actions: List[Action] = []
    for bond in sorted_bonds(game.available_bonds):
        top = max((owned.cost for owned in player.bonds_of(bond.nation)), default=0)
        outright = bond.cost <= player.cash
        trade_up = top < bond.cost <= player.cash + top
        if outright or trade_up:
            actions.append(Action.bond_purchase(bond.nation, player_name, bond.cost))
    actions.append(Action.skip_bond_purchase(player_name))
    return actions


def force_investor_actions(game: GameState) -> List[Action]:
    actions: List[Action] = []
    for name in game.swiss_banks:
        actions.append(Action.force_investor(name))
        actions.append(Action.skip_force_investor(name))
    return actions


def factory_sites(game: GameState, nation: Nation) -> List[str]:
    """Home provinces without a factory and free of hostile armies."""
    return [
        province
        for province in game.board.home_provinces_of(nation)
        if game.provinces[province].factory is None
        and not game.is_occupying(province, nation)
    ]


def build_factory_actions(game: GameState, nation: Nation) -> List[Action]:
    return [Action.build_factory(province) for province in factory_sites(game, nation)]


def import_options(game: GameState, nation: Nation) -> List[Placement]:
    """Single-unit placements available to an import, in board order."""
    options: List[Placement] = []
    for province in game.board.home_provinces_of(nation):
        if game.is_occupying(province, nation):
            continue
        options.append(Placement(province, UnitKind.ARMY))
        if game.board.factory_type_of(province) is FactoryType.SHIPYARD:
            options.append(Placement(province, UnitKind.FLEET))
    return options


def import_limit(game: GameState, nation: Nation) -> int:
    treasury = game.nations[nation].treasury
    return max(0, min(game.config.max_imports, treasury // game.config.import_unit_cost))


def import_actions(game: GameState, nation: Nation) -> List[Action]:
    """
    Every import bundle the nation can pay for.

    Each unit of a bundle picks its placement independently, so every
    ordering of the same placements is offered. The empty import is always
    offered first.
    """
    actions = [Action.import_units(())]
    options = import_options(game, nation)
    for size in range(1, import_limit(game, nation) + 1):
        for bundle in product(options, repeat=size):
            actions.append(Action.import_units(bundle))
    return actions


def maneuver_actions(game: GameState) -> List[Action]:
    """Moves for the units still waiting to maneuver, after ``endManeuver``."""
    nation = game.current_nation
    stacks = game.units[nation]
    is_occupied = game.is_occupied(nation)
    friendly_fleets = game.friendly_fleets(nation)

    actions = [Action.end_maneuver()]
    seen: List[Tuple[str, UnitKind]] = []
    for origin, kind in game.units_to_move:
        if (origin, kind) in seen or stacks[origin].count(kind) == 0:
            continue
        seen.append((origin, kind))
        is_fleet = kind is UnitKind.FLEET
        destinations = game.board.neighbors_for(
            origin,
            nation,
            is_fleet,
            frozenset() if is_fleet else friendly_fleets,
            is_occupied,
        )
        for destination in destinations:
            action = Action.maneuver(origin, destination)
            if action not in actions:
                actions.append(action)
    return actions


def conflict_actions(
    province: str, incumbent: Nation, challenger: Nation, defender: UnitStack
) -> List[Action]:
    """A fight per kind of unit the defender has there, or coexistence."""
    actions: List[Action] = []
    if defender.armies > 0:
        actions.append(Action.fight(province, incumbent, challenger, UnitKind.ARMY))
    if defender.fleets > 0:
        actions.append(Action.fight(province, incumbent, challenger, UnitKind.FLEET))
    actions.append(Action.coexist(province, incumbent, challenger))
    return actions


def entrance_actions(province: str, incumbent: Nation, challenger: Nation) -> List[Action]:
    return [
        Action.unfriendly_entrance(province, incumbent, challenger),
        Action.friendly_entrance(province, incumbent, challenger),
    ]


def destroy_factory_actions(province: str) -> List[Action]:
    return [Action.destroy_factory(province), Action.skip_destroy_factory(province)]


def get_legal_actions(game: GameState) -> List[Action]:
    """
    Get all legal actions.

    This is the main interface for controllers to determine valid moves.
    The list is empty only once the game has ended.
    """
    if game.game_over:
        return []
    return list(game.available_actions)


def is_legal(game: GameState, action: Action) -> bool:
    return contains(get_legal_actions(game), action)


def apply_action(game: GameState, action: Action) -> bool:
    """
    Apply an action to the game.

    Returns:
        True if the action was accepted, False if it was rejected
    """
    return game.apply(action)
