"""Shared test fixtures for Imperial engine tests."""

import pytest

from imperial import (
    Action,
    Board,
    GameState,
    Nation,
    PlayerDescriptor,
    ProvinceData,
    RondelSlot,
    create_game,
)
from imperial.provinces import FactoryType


@pytest.fixture
def mini_board():
    """
    A small board around the Adriatic.

    AH: vienna (factory), trieste (shipyard, factory), budapest
    IT: rome (factory), naples (shipyard)
    Oceans: adriatic, ionian
    Neutral: balkans, greece, tunis
    """
    provinces = [
        ProvinceData("vienna", Nation.AH, False, FactoryType.ARMAMENTS, True),
        ProvinceData("trieste", Nation.AH, False, FactoryType.SHIPYARD, True),
        ProvinceData("budapest", Nation.AH, False, FactoryType.ARMAMENTS, False),
        ProvinceData("rome", Nation.IT, False, FactoryType.ARMAMENTS, True),
        ProvinceData("naples", Nation.IT, False, FactoryType.SHIPYARD, False),
        ProvinceData("adriatic", is_ocean=True),
        ProvinceData("ionian", is_ocean=True),
        ProvinceData("balkans"),
        ProvinceData("greece"),
        ProvinceData("tunis"),
    ]
    edges = [
        ("vienna", "budapest"),
        ("vienna", "trieste"),
        ("budapest", "balkans"),
        ("trieste", "adriatic"),
        ("trieste", "rome"),
        ("adriatic", "balkans"),
        ("adriatic", "greece"),
        ("adriatic", "ionian"),
        ("ionian", "greece"),
        ("ionian", "naples"),
        ("ionian", "tunis"),
        ("rome", "naples"),
        ("balkans", "greece"),
    ]
    return Board(provinces, edges)


@pytest.fixture
def two_players():
    """Alice starts with Austria-Hungary, Bob with Italy."""
    return [PlayerDescriptor("alice", Nation.AH), PlayerDescriptor("bob", Nation.IT)]


@pytest.fixture
def game(mini_board, two_players):
    """
    Two-player game on the mini board.

    Alice controls AH, FR and GE; Bob controls IT, GB and RU.
    Every treasury starts at 11 and each player has 6 cash.
    """
    return create_game(two_players, board=mini_board)


@pytest.fixture
def three_player_game(mini_board):
    """
    Three-player game where Carol controls nothing.

    Carol is dealt GE at setup. Bob outbids her for GE during the Italian
    investor visit, which makes her a swiss bank. France is next to move
    with Alice holding the investor card; cash stands at alice 10, bob 1,
    carol 5.
    """
    players = [
        PlayerDescriptor("alice", Nation.AH),
        PlayerDescriptor("bob", Nation.IT),
        PlayerDescriptor("carol"),
    ]
    game = create_game(players, board=mini_board)
    assert game.apply(Action.rondel(Nation.AH, RondelSlot.INVESTOR, 0))
    assert game.apply(Action.skip_bond_purchase("carol"))
    assert game.apply(Action.rondel(Nation.IT, RondelSlot.INVESTOR, 0))
    assert game.apply(Action.bond_purchase(Nation.GE, "bob", 12))
    return game


@pytest.fixture
def europe_game():
    """Six players on the standard map, one nation each."""
    names = ["ann", "ben", "cat", "dan", "eve", "fay"]
    return create_game([{"id": name} for name in names])


@pytest.fixture
def empty_game(mini_board):
    """A game that has not been initialized."""
    return GameState(board=mini_board)
