"""Bundled board definitions."""

from imperial.maps.europe import create_europe_board

__all__ = ["create_europe_board"]
