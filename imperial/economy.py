"""
Economic formulas: taxation, investor payout, bond purchases and scoring.

Functions here mutate the game passed in but never touch the legal-action
set; the state machine decides what is offered next.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from imperial.bonds import Bond, sorted_bonds
from imperial.config import GameConfig
from imperial.exceptions import BondNotAvailableError, NoBondToTradeError
from imperial.nations import Nation

if TYPE_CHECKING:
    from imperial.game import GameState

logger = logging.getLogger(__name__)


@dataclass
class TaxResult:
    """Outcome of a taxation move."""

    taxes: int
    excess: int
    payment: int
    power_points_gain: int


def compute_taxes(
    unoccupied_factories: int,
    flags: int,
    units: int,
    tax_chart_position: int,
    config: Optional[GameConfig] = None,
) -> TaxResult:
    """
    Evaluate the taxation formulas.

    Args:
        unoccupied_factories: Home factories with no hostile army present
        flags: Provinces carrying the nation's flag
        units: Armies and fleets the nation has on the board
        tax_chart_position: Current tax-chart position of the nation
        config: Rule constants

    Returns:
        TaxResult with the tax take, the success bonus paid to the player,
        the treasury payment and the power-point gain
    """
    config = config or GameConfig()
    taxes = min(config.tax_cap, 2 * unoccupied_factories + flags)
    return TaxResult(
        taxes=taxes,
        excess=max(0, taxes - tax_chart_position),
        payment=max(0, taxes - units),
        power_points_gain=max(0, taxes - config.success_bonus_threshold),
    )


def interest_owed(game: GameState, nation: Nation) -> int:
    """Total interest a nation owes across every bondholder."""
    return sum(
        bond.number for player in game.players.values() for bond in player.bonds_of(nation)
    )


def can_afford_investor_payout(game: GameState, nation: Nation) -> bool:
    return interest_owed(game, nation) <= game.nations[nation].treasury


def pay_investors(game: GameState, nation: Nation) -> None:
    """
    Pay interest on every bond of a nation.

    Other players are paid from the treasury when it covers a bond, else
    out of the acting player's cash, else whatever cash the acting player
    has left. The acting player's own bonds are paid from the treasury only.
    """
    state = game.nations[nation]
    acting = game.players[game.current_player_name]

    for name, player in game.players.items():
        if name == acting.name:
            continue
        for bond in sorted_bonds(player.bonds_of(nation)):
            payment = bond.number
            if state.treasury >= payment:
                state.treasury -= payment
            elif acting.cash >= payment:
                acting.cash -= payment
            else:
                payment = acting.cash
                acting.cash = 0
            player.cash += payment

    owed = sum(bond.number for bond in acting.bonds_of(nation))
    payment = min(owed, state.treasury)
    acting.cash += payment
    state.treasury -= payment


def total_investment(game: GameState, player_name: Optional[str], nation: Nation) -> int:
    player = game.players.get(player_name) if player_name else None
    if player is None:
        return 0
    return player.investment_in(nation)


def purchase_bond(game: GameState, player_name: str, nation: Nation, cost: int) -> Optional[Bond]:
    """
    Sell a bond from the bank to a player.

    A player who cannot pay outright trades in their most expensive bond of
    the same nation and pays the difference. Control of the nation passes to
    the buyer if it had no controller or the buyer's investment now strictly
    exceeds the controller's.

    Returns:
        The bond traded in, if any

    Raises:
        BondNotAvailableError: If the bond is not in the bank
        NoBondToTradeError: If a trade-in is needed but the player holds no
            bond of that nation
    """
    player = game.players[player_name]
    state = game.nations[nation]
    new_bond = Bond(nation, cost)
    if new_bond not in game.available_bonds:
        raise BondNotAvailableError(f"{new_bond!r} is not available")

    traded: Optional[Bond] = None
    if cost > player.cash:
        owned = player.bonds_of(nation)
        if not owned:
            raise NoBondToTradeError(f"{player_name} has no {nation.value} bond to trade in")
        traded = max(owned, key=lambda bond: bond.cost)
        net_cost = cost - traded.cost
        player.bonds.remove(traded)
        game.available_bonds.add(traded)
    else:
        net_cost = cost

    player.cash -= net_cost
    state.treasury += net_cost
    player.bonds.add(new_bond)
    game.available_bonds.discard(new_bond)

    if state.controller is None:
        state.controller = player_name
    elif player.investment_in(nation) > total_investment(game, state.controller, nation):
        logger.debug(f"Control of {nation.value} passes from {state.controller} to {player_name}")
        state.controller = player_name
    return traded


def update_raw_scores(game: GameState) -> None:
    """Recompute every player's raw score from bonds and power points."""
    for player in game.players.values():
        player.raw_score = sum(
            bond.number * (game.nations[bond.nation].power_points // 5) for bond in player.bonds
        )


def determine_winner(game: GameState) -> Optional[str]:
    """
    The player with the highest raw score plus cash.

    Ties go to the tied player who invested most in the nation that reached
    the power-point cap.
    """
    if not game.players:
        return None

    best = max(player.total_score for player in game.players.values())
    tied = [name for name, player in game.players.items() if player.total_score == best]
    if len(tied) == 1:
        return tied[0]

    cap = game.config.power_point_cap
    capped = [nation for nation, state in game.nations.items() if state.power_points >= cap]
    if game.current_nation in capped:
        winning_nation = game.current_nation
    elif capped:
        winning_nation = capped[0]
    else:
        return tied[0]
    return max(tied, key=lambda name: total_investment(game, name, winning_nation))
