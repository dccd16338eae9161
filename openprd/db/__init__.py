"""Database package."""
from openprd.db.database import AsyncSessionLocal, Base, engine, get_db, get_session_factory, init_db

__all__ = ["AsyncSessionLocal", "Base", "engine", "get_db", "get_session_factory", "init_db"]
