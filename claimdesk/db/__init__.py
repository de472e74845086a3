"""
Database module for the claims core.

Exports database connection utilities.
"""

from claimdesk.db.connection import (
    check_db_connection,
    close_db_connection,
    create_engine,
    create_session_maker,
    get_engine,
    get_session,
    get_session_maker,
    init_db,
)

__all__ = [
    "check_db_connection",
    "close_db_connection",
    "create_engine",
    "create_session_maker",
    "get_engine",
    "get_session",
    "get_session_maker",
    "init_db",
]
