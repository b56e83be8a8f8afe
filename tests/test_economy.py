"""
Tests for taxation, investor payout, bond purchases and scoring.
"""

import pytest

from imperial.actions import Action, ActionType
from imperial.bonds import BOND_COSTS, UNCOST, Bond, full_bond_bank
from imperial.config import GameConfig
from imperial.economy import (
    can_afford_investor_payout,
    compute_taxes,
    determine_winner,
    pay_investors,
    purchase_bond,
    update_raw_scores,
)
from imperial.exceptions import BondNotAvailableError, NoBondToTradeError
from imperial.nations import Nation
from imperial.rondel import RondelSlot


class TestBonds:
    """The uncost table and the bond bank."""

    def test_uncost_is_a_bijection(self):
        assert len(UNCOST) == 9
        assert sorted(UNCOST.values()) == list(range(1, 10))

    def test_bond_number(self):
        assert Bond(Nation.FR, 25).number == 8

    def test_unknown_denomination_rejected(self):
        with pytest.raises(ValueError):
            Bond(Nation.FR, 10)

    def test_bank_has_one_of_each(self):
        bank = full_bond_bank()
        assert len(bank) == 6 * len(BOND_COSTS)


class TestTaxation:
    """The taxation formulas."""

    def test_worked_example(self):
        result = compute_taxes(
            unoccupied_factories=3, flags=2, units=4, tax_chart_position=10
        )

        assert result.taxes == 8
        assert result.excess == 0
        assert result.payment == 4
        assert result.power_points_gain == 3

    def test_taxes_capped_at_twenty(self):
        result = compute_taxes(unoccupied_factories=8, flags=9, units=0, tax_chart_position=5)

        assert result.taxes == 20
        assert result.excess == 15
        assert result.power_points_gain == 15

    def test_payment_never_negative(self):
        result = compute_taxes(unoccupied_factories=1, flags=0, units=6, tax_chart_position=5)
        assert result.payment == 0

    def test_custom_config(self):
        config = GameConfig(tax_cap=6)
        result = compute_taxes(5, 5, 0, 0, config)
        assert result.taxes == 6

    def test_taxation_in_game(self, game):
        game.apply(Action.rondel(Nation.AH, RondelSlot.TAXATION, 0))

        state = game.nations[Nation.AH]
        # vienna and trieste have factories: taxes = 4
        assert state.treasury == 15
        assert state.tax_chart_position == 5
        assert state.power_points == 0
        assert game.players["alice"].cash == 6
        annotations = [a.action_type for a in game.annotated_log[2:]]
        assert annotations == [
            ActionType.PLAYER_GAINS_CASH,
            ActionType.NATION_GAINS_TREASURY,
            ActionType.NATION_GAINS_POWER_POINTS,
        ]
        assert game.current_nation is Nation.IT

    def test_success_bonus_moves_tax_chart(self, game):
        for province in ("balkans", "greece", "tunis"):
            game.provinces[province].flag = Nation.AH
        game.nations[Nation.AH].tax_chart_position = 5

        game.apply(Action.rondel(Nation.AH, RondelSlot.TAXATION, 0))

        # taxes = 2 * 2 + 3 = 7
        assert game.players["alice"].cash == 8
        assert game.nations[Nation.AH].tax_chart_position == 7
        assert game.nations[Nation.AH].power_points == 2


class TestInvestorPayout:
    """Paying interest when a nation lands on investor."""

    def test_paid_from_treasury(self, game):
        pay_investors(game, Nation.AH)

        # bob holds AH 2 (interest 1), alice holds AH 9 (interest 4)
        assert game.players["bob"].cash == 7
        assert game.players["alice"].cash == 10
        assert game.nations[Nation.AH].treasury == 6

    def test_acting_player_covers_shortfall(self, game):
        game.nations[Nation.AH].treasury = 0

        pay_investors(game, Nation.AH)

        assert game.players["bob"].cash == 7
        assert game.players["alice"].cash == 5

    def test_partial_payment_when_nobody_can_pay(self, game):
        game.nations[Nation.AH].treasury = 0
        game.players["alice"].cash = 0

        pay_investors(game, Nation.AH)

        assert game.players["bob"].cash == 6
        assert game.players["alice"].cash == 0

    def test_own_bonds_paid_up_to_treasury(self, game):
        game.nations[Nation.AH].treasury = 3

        pay_investors(game, Nation.AH)

        # 1 to bob, the remaining 2 to alice
        assert game.players["bob"].cash == 7
        assert game.players["alice"].cash == 8
        assert game.nations[Nation.AH].treasury == 0

    def test_can_afford(self, game):
        assert can_afford_investor_payout(game, Nation.AH)
        game.nations[Nation.AH].treasury = 4
        assert not can_afford_investor_payout(game, Nation.AH)


class TestBondPurchase:
    """Buying, trading in and control of nations."""

    def test_outright_purchase(self, game):
        traded = purchase_bond(game, "bob", Nation.AH, 4)

        assert traded is None
        assert game.players["bob"].cash == 2
        assert game.nations[Nation.AH].treasury == 15
        assert Bond(Nation.AH, 4) in game.players["bob"].bonds
        assert Bond(Nation.AH, 4) not in game.available_bonds

    def test_trade_in_pays_the_difference(self, game):
        game.players["bob"].cash = 3

        traded = purchase_bond(game, "bob", Nation.AH, 4)

        assert traded == Bond(Nation.AH, 2)
        assert game.players["bob"].cash == 1
        assert game.nations[Nation.AH].treasury == 13
        assert game.players["bob"].bonds_of(Nation.AH) == {Bond(Nation.AH, 4)}
        assert Bond(Nation.AH, 2) in game.available_bonds

    def test_trade_in_without_bond_raises(self, game):
        game.players["bob"].bonds.discard(Bond(Nation.AH, 2))
        game.players["bob"].cash = 0
        treasury = game.nations[Nation.AH].treasury

        with pytest.raises(NoBondToTradeError):
            purchase_bond(game, "bob", Nation.AH, 4)

        assert game.nations[Nation.AH].treasury == treasury
        assert Bond(Nation.AH, 4) in game.available_bonds

    def test_bond_not_in_bank_raises(self, game):
        with pytest.raises(BondNotAvailableError):
            purchase_bond(game, "bob", Nation.AH, 9)

        assert game.players["bob"].cash == 6

    def test_control_requires_strictly_more_investment(self, game):
        alice = game.players["alice"]
        alice.bonds.remove(Bond(Nation.AH, 9))
        alice.bonds.add(Bond(Nation.AH, 6))
        game.available_bonds.add(Bond(Nation.AH, 9))
        game.available_bonds.discard(Bond(Nation.AH, 6))
        game.players["bob"].cash = 30

        purchase_bond(game, "bob", Nation.AH, 4)
        assert game.nations[Nation.AH].controller == "alice"

        purchase_bond(game, "bob", Nation.AH, 12)
        assert game.nations[Nation.AH].controller == "bob"

    def test_uncontrolled_nation_goes_to_buyer(self, game):
        game.nations[Nation.AH].controller = None

        purchase_bond(game, "bob", Nation.AH, 4)

        assert game.nations[Nation.AH].controller == "bob"


class TestScoring:
    """Raw scores and the winner."""

    def test_raw_score(self, game):
        game.nations[Nation.AH].power_points = 12

        update_raw_scores(game)

        # floor(12 / 5) = 2; alice AH 9 -> 4 * 2, bob AH 2 -> 1 * 2
        assert game.players["alice"].raw_score == 8
        assert game.players["bob"].raw_score == 2

    def test_highest_total_wins(self, game):
        game.players["bob"].cash = 50
        assert determine_winner(game) == "bob"

    def test_tie_broken_by_investment_in_capped_nation(self, game):
        game.nations[Nation.IT].power_points = 25
        update_raw_scores(game)
        alice, bob = game.players["alice"], game.players["bob"]
        # IT interest: alice 1 * 5, bob 4 * 5
        alice.cash = bob.raw_score + bob.cash - alice.raw_score

        assert alice.total_score == bob.total_score
        assert determine_winner(game) == "bob"
