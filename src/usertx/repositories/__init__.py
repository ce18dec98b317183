"""Data access objects."""

from .user_dao import UserDao

__all__ = ["UserDao"]
