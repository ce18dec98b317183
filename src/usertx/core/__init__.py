"""Core configuration primitives."""

from .config import AppSettings

__all__ = ["AppSettings"]
