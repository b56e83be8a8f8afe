"""
Tests for the import slot.
"""

from imperial.actions import Action, ActionType, Placement
from imperial.nations import Nation
from imperial.provinces import UnitKind
from imperial.rondel import RondelSlot
from imperial.rules import import_actions, import_options


def _start_import(game):
    assert game.apply(Action.rondel(Nation.AH, RondelSlot.IMPORT, 0))
    assert game.importing


class TestImportBundles:
    """Enumerating what a nation may import."""

    def test_options_in_board_order(self, game):
        assert import_options(game, Nation.AH) == [
            Placement("vienna", UnitKind.ARMY),
            Placement("trieste", UnitKind.ARMY),
            Placement("trieste", UnitKind.FLEET),
            Placement("budapest", UnitKind.ARMY),
        ]

    def test_full_treasury_offers_every_bundle_up_to_three(self, game):
        _start_import(game)

        # 1 empty + 4 singles + 16 ordered pairs + 64 ordered triples
        assert len(game.available_actions) == 85
        assert game.available_actions[0] == Action.import_units([])
        assert all(a.action_type is ActionType.IMPORT for a in game.available_actions)

    def test_treasury_limits_bundle_size(self, game):
        game.nations[Nation.AH].treasury = 2

        assert len(import_actions(game, Nation.AH)) == 21

    def test_empty_treasury_offers_only_the_empty_import(self, game):
        game.nations[Nation.AH].treasury = 0

        assert import_actions(game, Nation.AH) == [Action.import_units([])]

    def test_occupied_province_is_excluded(self, game):
        game.units[Nation.IT]["budapest"].armies = 1

        options = import_options(game, Nation.AH)

        assert all(p.province != "budapest" for p in options)
        assert len(options) == 3

    def test_friendly_armies_do_not_block_imports(self, game):
        stack = game.units[Nation.IT]["budapest"]
        stack.armies = 1
        stack.friendly = True

        assert Placement("budapest", UnitKind.ARMY) in import_options(game, Nation.AH)


class TestApplyImport:
    """Placing imported units."""

    def test_units_placed_and_paid_for(self, game):
        _start_import(game)

        bundle = [Placement("vienna", UnitKind.ARMY), Placement("trieste", UnitKind.FLEET)]
        assert game.apply(Action.import_units(bundle))

        assert game.units[Nation.AH]["vienna"].armies == 1
        assert game.units[Nation.AH]["trieste"].fleets == 1
        assert game.nations[Nation.AH].treasury == 9
        assert not game.importing
        assert game.current_nation is Nation.IT

    def test_repeated_placement(self, game):
        _start_import(game)

        bundle = [Placement("vienna", UnitKind.ARMY)] * 3
        assert game.apply(Action.import_units(bundle))

        assert game.units[Nation.AH]["vienna"].armies == 3
        assert game.nations[Nation.AH].treasury == 8

    def test_empty_import_ends_turn(self, game):
        _start_import(game)

        assert game.apply(Action.import_units([]))

        assert game.unit_count(Nation.AH) == 0
        assert game.nations[Nation.AH].treasury == 11
        assert game.current_nation is Nation.IT

    def test_any_order_of_placements_is_accepted(self, game):
        _start_import(game)

        bundle = [Placement("trieste", UnitKind.FLEET), Placement("vienna", UnitKind.ARMY)]

        assert game.apply(Action.import_units(bundle))

        assert game.log[-1] == Action.import_units(bundle)
        assert game.units[Nation.AH]["vienna"].armies == 1
        assert game.units[Nation.AH]["trieste"].fleets == 1
        assert not game.importing
