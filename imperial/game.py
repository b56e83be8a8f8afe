"""
Core game state management.

``GameState`` owns every piece of mutable state of one Imperial game and
exposes a single mutator, ``apply``. State is fully determined by the
canonical log: replaying it through ``from_log`` rebuilds the same game.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple, Union

from imperial.actions import Action, ActionType, actions_match
from imperial.board import BoardQuery
from imperial.bonds import Bond
from imperial.config import GameConfig
from imperial.economy import (
    can_afford_investor_payout,
    compute_taxes,
    determine_winner,
    pay_investors,
    purchase_bond,
    update_raw_scores,
)
from imperial.exceptions import ImperialError, InvariantViolation
from imperial.maps import create_europe_board
from imperial.nations import NATION_ORDER, Nation, NationState, next_in_order
from imperial.player import PlayerState
from imperial.provinces import FactoryType, ProvinceState, UnitKind, UnitStack
from imperial.rondel import MANEUVER_SLOTS, PRODUCTION_SLOTS, RondelSlot, passes_investor
from imperial.rules import (
    bond_offers,
    build_factory_actions,
    conflict_actions,
    destroy_factory_actions,
    entrance_actions,
    force_investor_actions,
    import_actions,
    maneuver_actions,
    rondel_actions,
)
from imperial.setup_game import standard_setup

logger = logging.getLogger(__name__)

# Accepted without checking the legal set
UNVALIDATED_TYPES = frozenset({ActionType.INITIALIZE, ActionType.END_GAME})

Handler = Callable[[Action], Optional[Action]]


class GameState:
    """Complete state of an Imperial game."""

    def __init__(self, board: Optional[BoardQuery] = None, config: Optional[GameConfig] = None):
        self.board = board or create_europe_board()
        self.config = config or GameConfig()

        # The canonical log from which state is derived
        self.log: List[Action] = []
        # Canonical log plus display-only entries; never replayed
        self.annotated_log: List[Action] = []
        self.available_actions: List[Action] = []

        self.nations: Dict[Nation, NationState] = {}
        self.players: Dict[str, PlayerState] = {}
        self.order: List[str] = []
        self.provinces: Dict[str, ProvinceState] = {}
        self.units: Dict[Nation, Dict[str, UnitStack]] = {}
        self.available_bonds: Set[Bond] = set()

        self.current_nation: Optional[Nation] = None
        self.current_player_name: Optional[str] = None
        self.investor_card_holder: Optional[str] = None
        self.swiss_banks: List[str] = []

        # Maneuver phase
        self.units_to_move: List[Tuple[str, UnitKind]] = []
        self.fleet_convoy_count: Dict[str, int] = {}

        # Phase flags
        self.maneuvering = False
        self.handling_conflict = False
        self.passing_through_investor = False
        self.importing = False
        self.building_factory = False

        self.solo_mode = False
        self.game_over = False
        self.winner: Optional[str] = None

        self._handlers: Dict[ActionType, Handler] = {
            ActionType.INITIALIZE: self._initialize,
            ActionType.END_GAME: self._end_game,
            ActionType.NOOP: self._noop,
            ActionType.RONDEL: self._rondel,
            ActionType.BOND_PURCHASE: self._bond_purchase,
            ActionType.SKIP_BOND_PURCHASE: self._skip_bond_purchase,
            ActionType.FORCE_INVESTOR: self._force_investor,
            ActionType.SKIP_FORCE_INVESTOR: self._skip_force_investor,
            ActionType.BUILD_FACTORY: self._build_factory,
            ActionType.IMPORT: self._import,
            ActionType.MANEUVER: self._maneuver,
            ActionType.END_MANEUVER: self._end_maneuver,
            ActionType.FIGHT: self._fight,
            ActionType.COEXIST: self._coexist,
            ActionType.FRIENDLY_ENTRANCE: self._friendly_entrance,
            ActionType.UNFRIENDLY_ENTRANCE: self._unfriendly_entrance,
            ActionType.DESTROY_FACTORY: self._destroy_factory,
            ActionType.SKIP_DESTROY_FACTORY: self._skip_destroy_factory,
        }

    @classmethod
    def from_log(
        cls,
        log: Iterable[Union[Action, Dict[str, Any]]],
        board: Optional[BoardQuery] = None,
        config: Optional[GameConfig] = None,
    ) -> "GameState":
        """Rebuild a game by replaying a canonical log."""
        game = cls(board, config)
        for entry in log:
            action = entry if isinstance(entry, Action) else Action.from_dict(entry)
            game.apply(action)
        return game

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def apply(self, action: Action) -> bool:
        """
        Apply an action if it is legal.

        Illegal actions are ignored: nothing is mutated or logged.

        Returns:
            True if the action was accepted

        Raises:
            InvariantViolation: If an accepted action is inconsistent with
                the state. Neither log keeps the action.
        """
        if self.game_over:
            logger.debug(f"Game over, ignoring {action!r}")
            return False
        if action.action_type not in UNVALIDATED_TYPES:
            legal = self._find_legal(action)
            if legal is None:
                logger.debug(f"Rejected {action!r}")
                return False
            action = legal

        log_length = len(self.log)
        annotated_length = len(self.annotated_log)
        self.log.append(action)
        self.annotated_log.append(action)
        try:
            follow_up = self._handlers[action.action_type](action)
            while follow_up is not None:
                logger.debug(f"Follow-up {follow_up!r}")
                self.annotated_log.append(follow_up)
                follow_up = self._handlers[follow_up.action_type](follow_up)
        except ImperialError:
            del self.log[log_length:]
            del self.annotated_log[annotated_length:]
            raise
        return True

    def _find_legal(self, action: Action) -> Optional[Action]:
        """The member of the legal set a proposed action matches, in canonical form."""
        for legal in self.available_actions:
            if actions_match(legal, action):
                return legal
        return None

    def _annotate(self, action: Action) -> None:
        self.annotated_log.append(action)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_occupying(self, province: str, owner: Nation) -> bool:
        """True if another nation has hostile armies in the province."""
        for nation, stacks in self.units.items():
            if nation is owner:
                continue
            stack = stacks[province]
            if stack.armies > 0 and not stack.friendly:
                return True
        return False

    def is_occupied(self, nation: Nation) -> bool:
        """True if any home province of the nation holds hostile armies."""
        return any(
            self.is_occupying(province, nation) for province in self.board.home_provinces_of(nation)
        )

    def friendly_fleets(self, nation: Nation) -> Set[str]:
        """Provinces holding fleets of the nation that can still convoy."""
        return {
            province
            for province, stack in self.units[nation].items()
            if stack.fleets - self.fleet_convoy_count.get(province, 0) > 0
        }

    def unit_count(self, nation: Nation) -> int:
        return sum(stack.total for stack in self.units[nation].values())

    def flag_count(self, nation: Nation) -> int:
        return sum(1 for province in self.provinces.values() if province.flag is nation)

    def unoccupied_factory_count(self, nation: Nation) -> int:
        return sum(
            1
            for province in self.board.home_provinces_of(nation)
            if self.provinces[province].factory is not None
            and not self.is_occupying(province, nation)
        )

    def nations_controlled_by(self, player_name: str) -> List[Nation]:
        return [nation for nation, state in self.nations.items() if state.controller == player_name]

    def has_invested_this_turn(self, player_name: str) -> bool:
        """True if the player bought or skipped a bond since the last rondel move."""
        for action in reversed(self.log):
            if action.action_type is ActionType.RONDEL:
                return False
            if action.action_type in (ActionType.BOND_PURCHASE, ActionType.SKIP_BOND_PURCHASE):
                if action.get("player") == player_name:
                    return True
        return False

    # ------------------------------------------------------------------
    # Turn flow
    # ------------------------------------------------------------------

    def _next_nation(self, nation: Nation) -> Nation:
        candidate = nation
        for _ in NATION_ORDER:
            candidate = next_in_order(candidate)
            if self.nations[candidate].controller:
                return candidate
        return nation

    def _advance_turn(self) -> None:
        self.current_nation = self._next_nation(self.current_nation)
        self.current_player_name = self.nations[self.current_nation].controller
        self.available_actions = rondel_actions(self, self.current_nation)

    def _advance_investor_card(self) -> None:
        if self.investor_card_holder is None:
            return
        index = self.order.index(self.investor_card_holder)
        self.investor_card_holder = self.order[index - 1]

    def _refresh_swiss_banks(self) -> None:
        for name in self.players:
            if self.nations_controlled_by(name):
                if name in self.swiss_banks:
                    self.swiss_banks.remove(name)
            elif name not in self.swiss_banks:
                self.swiss_banks.append(name)

    def _complete_rondel_turn(self) -> None:
        """End the current nation's turn, running a pending investor visit first."""
        if self.passing_through_investor:
            self.passing_through_investor = False
            self._investor_sub_turn()
        else:
            self._advance_turn()

    def _investor_sub_turn(self) -> None:
        holder = self.investor_card_holder
        self.current_player_name = holder
        self.players[holder].cash += self.config.investor_bonus
        self._annotate(Action.player_invests(holder))
        self.available_actions = bond_offers(self, holder)

    def _continue_investor_round(self) -> None:
        for name in self.swiss_banks:
            if name != self.investor_card_holder and not self.has_invested_this_turn(name):
                self.current_player_name = name
                self.available_actions = bond_offers(self, name)
                return

        self._refresh_swiss_banks()
        self._advance_turn()
        self._advance_investor_card()

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _initialize(self, action: Action) -> None:
        setup = standard_setup(action.get("players", ()), self.board, self.config)
        self.nations = setup.nations
        self.players = setup.players
        self.order = setup.order
        self.provinces = setup.provinces
        self.units = setup.units
        self.available_bonds = setup.available_bonds
        self.current_nation = setup.current_nation
        self.investor_card_holder = setup.investor_card_holder
        self.current_player_name = self.nations[self.current_nation].controller
        self.solo_mode = bool(action.get("solo_mode", False))
        self.units_to_move = []
        self.fleet_convoy_count = {}
        self.maneuvering = False
        self.handling_conflict = False
        self.passing_through_investor = False
        self.importing = False
        self.building_factory = False
        self.winner = None
        self.swiss_banks = []
        self._refresh_swiss_banks()
        update_raw_scores(self)
        self.available_actions = rondel_actions(self, self.current_nation)
        logger.info(f"Initialized game for players {self.order} (solo_mode={self.solo_mode})")

    def _end_game(self, action: Action) -> None:
        update_raw_scores(self)
        self.winner = determine_winner(self)
        self.available_actions = []
        self.maneuvering = False
        self.handling_conflict = False
        self.game_over = True
        logger.info(f"Game over, winner: {self.winner}")

    def _noop(self, action: Action) -> None:
        return None

    def _rondel(self, action: Action) -> Optional[Action]:
        nation: Nation = action.payload["nation"]
        slot: RondelSlot = action.payload["slot"]
        cost: int = action.payload["cost"]
        state = self.nations[nation]
        self.current_nation = nation
        self.current_player_name = state.controller

        if passes_investor(state.rondel_position, slot) and not self.passing_through_investor:
            self.passing_through_investor = True
            if self.swiss_banks and can_afford_investor_payout(self, nation):
                self.available_actions = force_investor_actions(self)
                return None

        state.previous_rondel_position = state.rondel_position
        state.rondel_position = slot
        self.players[self.current_player_name].cash -= cost
        if cost > 0:
            self._annotate(Action.player_pays_for_rondel(self.current_player_name, cost, slot))

        if slot is RondelSlot.INVESTOR:
            return self._investor(nation)
        if slot is RondelSlot.IMPORT:
            self.importing = True
            self.available_actions = import_actions(self, nation)
            return None
        if slot in PRODUCTION_SLOTS:
            return self._production(nation)
        if slot is RondelSlot.TAXATION:
            return self._taxation(nation)
        if slot in MANEUVER_SLOTS:
            return self._begin_maneuver(nation)
        return self._factory(nation)

    def _investor(self, nation: Nation) -> None:
        pay_investors(self, nation)
        update_raw_scores(self)
        self.passing_through_investor = False
        self._investor_sub_turn()

    def _production(self, nation: Nation) -> None:
        stacks = self.units[nation]
        for province in self.board.home_provinces_of(nation):
            factory = self.provinces[province].factory
            if factory is None or self.is_occupying(province, nation):
                continue
            kind = UnitKind.FLEET if factory is FactoryType.SHIPYARD else UnitKind.ARMY
            stacks[province].add(kind)
        self._complete_rondel_turn()

    def _taxation(self, nation: Nation) -> Optional[Action]:
        state = self.nations[nation]
        player = self.players[self.current_player_name]
        result = compute_taxes(
            self.unoccupied_factory_count(nation),
            self.flag_count(nation),
            self.unit_count(nation),
            state.tax_chart_position,
            self.config,
        )

        player.cash += result.excess
        self._annotate(Action.player_gains_cash(player.name, result.excess))
        state.tax_chart_position = min(
            self.config.tax_chart_cap, state.tax_chart_position + result.excess
        )
        state.treasury += result.payment
        self._annotate(Action.nation_gains_treasury(nation, result.payment))
        state.power_points += result.power_points_gain

        if state.power_points + result.taxes >= self.config.power_point_cap:
            state.power_points = self.config.power_point_cap
            update_raw_scores(self)
            return Action.end_game()

        self._annotate(Action.nation_gains_power_points(nation, result.power_points_gain))
        update_raw_scores(self)
        self._complete_rondel_turn()
        return None

    def _factory(self, nation: Nation) -> None:
        actions = build_factory_actions(self, nation)
        if self.nations[nation].treasury < self.config.factory_cost or not actions:
            self._complete_rondel_turn()
            return
        self.building_factory = True
        self.available_actions = actions

    def _build_factory(self, action: Action) -> None:
        province = action.payload["province"]
        self.provinces[province].factory = self.board.factory_type_of(province)
        self.nations[self.current_nation].treasury -= self.config.factory_cost
        self.building_factory = False
        self._complete_rondel_turn()

    def _import(self, action: Action) -> None:
        for placement in action.get("placements", ()):
            owner = self.board.owner_of(placement.province)
            self.units[owner][placement.province].add(placement.unit)
            self.nations[owner].treasury -= self.config.import_unit_cost
        self.importing = False
        self._complete_rondel_turn()

    def _bond_purchase(self, action: Action) -> None:
        player_name = action.payload["player"]
        traded = purchase_bond(self, player_name, action.payload["nation"], action.payload["cost"])
        if traded is not None:
            self._annotate(Action.player_traded_in_for_a_bond(player_name, traded.nation, traded.cost))
        update_raw_scores(self)
        self._continue_investor_round()

    def _skip_bond_purchase(self, action: Action) -> None:
        self._continue_investor_round()

    def _force_investor(self, action: Action) -> None:
        nation = self.current_nation
        state = self.nations[nation]
        state.previous_rondel_position = state.rondel_position
        state.rondel_position = RondelSlot.INVESTOR
        self._investor(nation)

    def _skip_force_investor(self, action: Action) -> Action:
        for previous in reversed(self.log):
            if previous.action_type is ActionType.RONDEL:
                return previous
        raise InvariantViolation("skipForceInvestor without a pending rondel move")

    # ------------------------------------------------------------------
    # Maneuvers
    # ------------------------------------------------------------------

    def _begin_maneuver(self, nation: Nation) -> None:
        self.maneuvering = True
        self.fleet_convoy_count = {}
        self.units_to_move = []
        for province, stack in self.units[nation].items():
            self.units_to_move.extend((province, UnitKind.FLEET) for _ in range(stack.fleets))
            self.units_to_move.extend((province, UnitKind.ARMY) for _ in range(stack.armies))
        self.available_actions = maneuver_actions(self)

    def _resume_maneuver(self) -> None:
        self.handling_conflict = False
        if self.units_to_move:
            self.available_actions = maneuver_actions(self)
        else:
            self._finish_maneuver()

    def _finish_maneuver(self) -> None:
        self.units_to_move = []
        self.fleet_convoy_count = {}
        self.maneuvering = False
        self.handling_conflict = False
        self._complete_rondel_turn()

    def _end_maneuver(self, action: Action) -> None:
        self._finish_maneuver()

    def _convoy_path(self, nation: Nation, origin: str, destination: str) -> List[str]:
        """The path to a destination crossing the fewest oceans."""
        paths = [
            path
            for path in self.board.paths_from(
                origin, nation, False, self.friendly_fleets(nation), self.is_occupied(nation)
            )
            if path[-1] == destination
        ]
        if not paths:
            raise InvariantViolation(f"No path for an army from {origin} to {destination}")
        return min(paths, key=self.board.ocean_count)

    def _maneuver(self, action: Action) -> None:
        origin = action.payload["origin"]
        destination = action.payload["destination"]
        nation = self.current_nation
        stacks = self.units[nation]
        kind = UnitKind.FLEET if self.board.is_ocean(destination) else UnitKind.ARMY

        if kind is UnitKind.ARMY:
            path = self._convoy_path(nation, origin, destination)
            for province in path:
                if self.board.is_ocean(province):
                    self.fleet_convoy_count[province] = self.fleet_convoy_count.get(province, 0) + 1
            # Fleets cannot move once an army has
            self.units_to_move = [entry for entry in self.units_to_move if entry[1] is UnitKind.ARMY]

        stacks[origin].add(kind, -1)
        stacks[destination].add(kind)
        if stacks[origin].is_empty() and self.board.owner_of(origin) is not nation:
            stacks[origin].friendly = False
        if (origin, kind) in self.units_to_move:
            self.units_to_move.remove((origin, kind))

        for other in NATION_ORDER:
            if other is nation:
                continue
            defender = self.units[other][destination]
            if defender.total > 0:
                self.handling_conflict = True
                self.available_actions = conflict_actions(destination, other, nation, defender)
                return

        owner = self.board.owner_of(destination)
        if owner is not None and owner is not nation:
            self.handling_conflict = True
            self.available_actions = entrance_actions(destination, owner, nation)
            return

        if self._can_destroy_factory(destination):
            self.available_actions = destroy_factory_actions(destination)
            return

        if owner is None:
            self.provinces[destination].flag = nation
        self._resume_maneuver()

    def _can_destroy_factory(self, province: str) -> bool:
        nation = self.current_nation
        if self.provinces[province].factory is None:
            return False
        if self.board.owner_of(province) is nation:
            return False
        if self.units[nation][province].armies < self.config.destroy_factory_armies:
            return False
        previous = self.log[-2] if len(self.log) > 1 else None
        skipped_here = (
            previous is not None
            and previous.action_type is ActionType.SKIP_DESTROY_FACTORY
            and previous.get("province") == province
        )
        return not skipped_here

    @staticmethod
    def _remove_unit(stack: UnitStack, preferred: UnitKind) -> None:
        other = UnitKind.FLEET if preferred is UnitKind.ARMY else UnitKind.ARMY
        for kind in (preferred, other):
            if stack.count(kind) > 0:
                stack.add(kind, -1)
                return

    def _fight(self, action: Action) -> None:
        province = action.payload["province"]
        incumbent: Nation = action.payload["incumbent"]
        challenger: Nation = action.payload["challenger"]
        defender = self.units[incumbent][province]
        attacker = self.units[challenger][province]

        if defender.fleets > 0 and action.payload["target_type"] is UnitKind.FLEET:
            defender.add(UnitKind.FLEET, -1)
            attacker_loss = UnitKind.ARMY if attacker.armies == 1 else UnitKind.FLEET
            self._remove_unit(attacker, attacker_loss)
        elif defender.total > 0:
            self._remove_unit(defender, UnitKind.ARMY)
            self._remove_unit(attacker, UnitKind.ARMY)

        attacker.friendly = False
        if attacker.total > defender.total and not self.board.owner_of(province):
            self.provinces[province].flag = challenger
        self._resume_maneuver()

    def _coexist(self, action: Action) -> None:
        self.units[action.payload["challenger"]][action.payload["province"]].friendly = True
        self._resume_maneuver()

    def _friendly_entrance(self, action: Action) -> None:
        self.units[action.payload["challenger"]][action.payload["province"]].friendly = True
        self._resume_maneuver()

    def _unfriendly_entrance(self, action: Action) -> None:
        province = action.payload["province"]
        self.units[action.payload["challenger"]][province].friendly = False
        self.handling_conflict = False
        if self._can_destroy_factory(province):
            self.available_actions = destroy_factory_actions(province)
            return
        self._resume_maneuver()

    def _destroy_factory(self, action: Action) -> None:
        province = action.payload["province"]
        stack = self.units[self.current_nation][province]
        self.provinces[province].factory = None
        stack.armies = max(0, stack.armies - self.config.destroy_factory_armies)
        self._resume_maneuver()

    def _skip_destroy_factory(self, action: Action) -> None:
        self._resume_maneuver()

    def __repr__(self) -> str:
        return (
            f"GameState(players={self.order}, current_nation={self.current_nation}, "
            f"log={len(self.log)}, game_over={self.game_over})"
        )


def create_game(
    players: Iterable[Any],
    solo_mode: bool = False,
    board: Optional[BoardQuery] = None,
    config: Optional[GameConfig] = None,
) -> GameState:
    """
    Create and initialize a new game.

    Args:
        players: Player descriptors or ``{"id", "nation"?}`` dicts, in seating order
        solo_mode: Whether one person plays every seat
        board: Board to play on (defaults to the 1914 map)
        config: Rule constants

    Returns:
        Initialized GameState
    """
    game = GameState(board, config)
    game.apply(Action.initialize(tuple(players), solo_mode))
    return game
