"""Domain models for the user service."""

from .user import Level, User

__all__ = ["Level", "User"]
