"""
Tests for seating, nation assignment and starting holdings.
"""

import pytest

from imperial.actions import Action
from imperial.bonds import Bond
from imperial.exceptions import InvalidSetupError
from imperial.game import create_game
from imperial.nations import Nation
from imperial.player import PlayerDescriptor
from imperial.setup_game import PARTNER_NATIONS, assign_nations, standard_setup


class TestAssignment:
    """Dealing nations to players."""

    def test_round_robin(self):
        assignments = assign_nations([PlayerDescriptor("a"), PlayerDescriptor("b")])

        assert assignments == {
            Nation.AH: "a",
            Nation.IT: "b",
            Nation.FR: "a",
            Nation.GB: "b",
            Nation.GE: "a",
            Nation.RU: "b",
        }

    def test_explicit_nations_first(self):
        assignments = assign_nations(
            [PlayerDescriptor("a", Nation.RU), PlayerDescriptor("b", Nation.AH)]
        )

        assert assignments[Nation.RU] == "a"
        assert assignments[Nation.AH] == "b"
        assert assignments[Nation.IT] == "a"
        assert assignments[Nation.FR] == "b"

    def test_nation_claimed_twice(self):
        with pytest.raises(InvalidSetupError):
            assign_nations([PlayerDescriptor("a", Nation.FR), PlayerDescriptor("b", Nation.FR)])


class TestStandardSetup:
    """Starting holdings."""

    def test_no_players(self, mini_board):
        with pytest.raises(InvalidSetupError):
            standard_setup([], mini_board)

    def test_duplicate_ids(self, mini_board):
        with pytest.raises(InvalidSetupError):
            standard_setup([{"id": "a"}, {"id": "a"}], mini_board)

    def test_bad_descriptor(self, mini_board):
        with pytest.raises(InvalidSetupError):
            standard_setup([{"id": "a", "nation": "XX"}], mini_board)

    def test_six_players(self, europe_game):
        for nation in Nation:
            state = europe_game.nations[nation]
            assert state.treasury == 11
            assert state.tax_chart_position == 5
            assert state.power_points == 0
            assert state.rondel_position is None
        assert all(player.cash == 2 for player in europe_game.players.values())
        assert europe_game.investor_card_holder == "fay"
        assert europe_game.current_player_name == "ann"

    def test_partner_bonds(self, europe_game):
        ann = europe_game.players["ann"]

        assert ann.bonds == {Bond(Nation.AH, 9), Bond(PARTNER_NATIONS[Nation.AH], 2)}
        assert Bond(Nation.AH, 9) not in europe_game.available_bonds

    def test_starting_factories(self, game):
        assert game.provinces["vienna"].factory is not None
        assert game.provinces["budapest"].factory is None
        assert game.provinces["rome"].factory is not None

    def test_home_stacks_are_friendly(self, game):
        assert game.units[Nation.AH]["vienna"].friendly
        assert not game.units[Nation.AH]["rome"].friendly

    def test_first_nation_with_a_controller_starts(self, mini_board):
        players = [PlayerDescriptor("a", Nation.RU)]

        game = create_game(players, board=mini_board)

        assert game.current_nation is Nation.AH
        assert game.nations_controlled_by("a") == list(Nation)


class TestInitialize:
    """The initialize action."""

    def test_failed_initialize_logs_nothing(self, empty_game):
        with pytest.raises(InvalidSetupError):
            empty_game.apply(Action.initialize(()))

        assert empty_game.log == []
        assert empty_game.annotated_log == []

    def test_solo_mode(self, mini_board, two_players):
        game = create_game(two_players, solo_mode=True, board=mini_board)

        assert game.solo_mode
        assert game.log[0].payload["solo_mode"] is True
