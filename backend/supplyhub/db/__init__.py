"""Database package with session management and transaction helpers."""

from supplyhub.db.session import async_session_maker, dispose_engine, engine, get_session
from supplyhub.db.transaction import atomic, read_transaction

__all__ = [
    "async_session_maker",
    "atomic",
    "dispose_engine",
    "engine",
    "get_session",
    "read_transaction",
]
