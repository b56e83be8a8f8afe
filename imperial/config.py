"""
Game configuration settings.
"""

from dataclasses import dataclass


@dataclass
class GameConfig:
    """Rule constants for an Imperial game."""

    # Setup: each assigned nation gives its player a 9m bond of it,
    # a 2m bond of its partner nation, and this much cash.
    starting_cash: int = 2
    primary_bond_cost: int = 9
    secondary_bond_cost: int = 2
    initial_tax_chart_position: int = 5

    factory_cost: int = 5
    import_unit_cost: int = 1
    max_imports: int = 3
    destroy_factory_armies: int = 3

    tax_cap: int = 20
    tax_chart_cap: int = 15
    success_bonus_threshold: int = 5
    power_point_cap: int = 25

    investor_bonus: int = 2
