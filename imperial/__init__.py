"""
Imperial rules engine.

Game state is derived by replaying a log of actions through
``GameState.apply``; every other module supports that state machine.
"""

from imperial.actions import Action, ActionType, Placement
from imperial.board import Board, BoardQuery, ProvinceData
from imperial.bonds import Bond
from imperial.config import GameConfig
from imperial.game import GameState, create_game
from imperial.maps import create_europe_board
from imperial.nations import Nation
from imperial.player import PlayerDescriptor
from imperial.provinces import FactoryType, UnitKind
from imperial.rondel import RondelSlot
from imperial.rules import apply_action, get_legal_actions, is_legal
from imperial.snapshot import serialize_snapshot

__all__ = [
    "Action",
    "ActionType",
    "Board",
    "BoardQuery",
    "Bond",
    "FactoryType",
    "GameConfig",
    "GameState",
    "Nation",
    "Placement",
    "PlayerDescriptor",
    "ProvinceData",
    "RondelSlot",
    "UnitKind",
    "apply_action",
    "create_europe_board",
    "create_game",
    "get_legal_actions",
    "is_legal",
    "serialize_snapshot",
]
