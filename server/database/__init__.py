"""
Optional persistence of canonical action logs.
"""

from server.database.models import ActionRecord, Base, GameRecord
from server.database.repository import GameLogRepository
from server.database.session import close_db, init_db, session_scope

__all__ = [
    "Base",
    "GameRecord",
    "ActionRecord",
    "GameLogRepository",
    "init_db",
    "close_db",
    "session_scope",
]
