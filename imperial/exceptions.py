"""
Custom exception hierarchy for the Imperial engine and server.

Rejected actions are never exceptions: an action outside the legal set is
silently ignored. The errors below signal desynchronised callers or bad
input that cannot be turned into a game state.
"""


class ImperialError(Exception):
    """Base exception for all game-related errors."""


class InvariantViolation(ImperialError):
    """An accepted action is inconsistent with the current state."""


class NoBondToTradeError(InvariantViolation):
    """A trade-in was required but the player holds no bond of that nation."""


class BondNotAvailableError(InvariantViolation):
    """The requested bond is not in the bank."""


class InvalidSetupError(ImperialError, ValueError):
    """The initialize payload cannot produce a game."""


class UnknownActionError(ImperialError, ValueError):
    """A wire action could not be decoded."""


class GameNotFoundError(ImperialError):
    """Game does not exist."""
