"""Callbacks fired around the completion of a transaction scope."""

from __future__ import annotations

from enum import Enum


class CompletionStatus(str, Enum):
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class TransactionSynchronization:
    """Base class for completion callbacks; override the hooks you need.

    Hooks registered on a scope fire once, when the outermost status of that
    scope commits or rolls back. ``after_commit`` and ``after_completion`` run
    after the database work is done and must not expect the session to be
    usable.
    """

    def before_commit(self, read_only: bool) -> None:
        return None

    def before_completion(self) -> None:
        return None

    def after_commit(self) -> None:
        return None

    def after_completion(self, status: CompletionStatus) -> None:
        return None
