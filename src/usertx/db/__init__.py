"""Database models and utilities for user storage."""

from .db_init import create_db_engine, init_db
from .models import Base, UserModel

__all__ = [
    "Base",
    "UserModel",
    "create_db_engine",
    "init_db",
]
