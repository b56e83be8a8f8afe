"""
Public snapshot serialization of GameState.

Produces a JSON-ready view of the current game for clients. The canonical
log stays the only persisted format; snapshots are derived on demand.
"""

from __future__ import annotations

from typing import Any, Dict, List

from imperial.bonds import sorted_bonds
from imperial.game import GameState


def _enum_value(value: Any) -> Any:
    return value.value if value is not None else None


def serialize_snapshot(game: GameState) -> Dict[str, Any]:
    """Serialize a GameState into a public, stable JSON dict.

    The snapshot includes:
    - current nation and acting player, investor card holder, swiss banks
    - nations with treasury, controller, rondel and tax-chart positions
    - players with cash, bonds and scores
    - province flags and factories, and every non-empty unit stack
    - phase flags, the legal actions and the winner
    """
    nations: List[Dict[str, Any]] = []
    for nation, state in game.nations.items():
        nations.append(
            {
                "nation": nation.value,
                "treasury": state.treasury,
                "controller": state.controller,
                "rondel_position": _enum_value(state.rondel_position),
                "previous_rondel_position": _enum_value(state.previous_rondel_position),
                "tax_chart_position": state.tax_chart_position,
                "power_points": state.power_points,
            }
        )

    players: List[Dict[str, Any]] = []
    for name in game.order:
        player = game.players[name]
        players.append(
            {
                "name": name,
                "cash": player.cash,
                "raw_score": player.raw_score,
                "total_score": player.total_score,
                "bonds": [
                    {"nation": bond.nation.value, "cost": bond.cost, "number": bond.number}
                    for bond in sorted_bonds(player.bonds)
                ],
            }
        )

    provinces = {
        name: {"flag": _enum_value(province.flag), "factory": _enum_value(province.factory)}
        for name, province in game.provinces.items()
    }

    units: List[Dict[str, Any]] = []
    for nation, stacks in game.units.items():
        for province, stack in stacks.items():
            if stack.is_empty():
                continue
            units.append(
                {
                    "nation": nation.value,
                    "province": province,
                    "armies": stack.armies,
                    "fleets": stack.fleets,
                    "friendly": stack.friendly,
                }
            )

    snapshot: Dict[str, Any] = {
        "current_nation": _enum_value(game.current_nation),
        "current_player": game.current_player_name,
        "investor_card_holder": game.investor_card_holder,
        "swiss_banks": list(game.swiss_banks),
        "solo_mode": game.solo_mode,
        "nations": nations,
        "players": players,
        "provinces": provinces,
        "units": units,
        "available_bonds": [
            {"nation": bond.nation.value, "cost": bond.cost}
            for bond in sorted_bonds(game.available_bonds)
        ],
        "phase": {
            "maneuvering": game.maneuvering,
            "handling_conflict": game.handling_conflict,
            "passing_through_investor": game.passing_through_investor,
            "importing": game.importing,
            "building_factory": game.building_factory,
        },
        "units_to_move": [
            {"province": province, "type": kind.value} for province, kind in game.units_to_move
        ],
        "available_actions": [action.to_dict() for action in game.available_actions],
        "log_length": len(game.log),
        "game_over": game.game_over,
        "winner": game.winner,
    }
    return snapshot
