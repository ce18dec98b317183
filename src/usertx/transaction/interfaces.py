"""Transaction demarcation protocol shared by repositories and services."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Protocol

from .definition import TransactionDefinition
from .status import TransactionStatus
from .synchronization import TransactionSynchronization


class TransactionManager(Protocol):
    """Begins, commits and rolls back transactions described by a definition."""

    def get_transaction(
        self, definition: TransactionDefinition | None = None
    ) -> TransactionStatus:
        """Return a status for a new or joined transaction."""

        raise NotImplementedError

    def commit(self, status: TransactionStatus) -> None:
        """Commit the work tracked by ``status``."""

        raise NotImplementedError

    def rollback(self, status: TransactionStatus) -> None:
        """Roll back the work tracked by ``status``."""

        raise NotImplementedError

    def transaction(
        self, definition: TransactionDefinition | None = None
    ) -> AbstractContextManager[TransactionStatus]:
        """Run a block in a transaction: commit on success, roll back on error."""

        raise NotImplementedError

    def register_synchronization(self, synchronization: TransactionSynchronization) -> None:
        """Attach completion callbacks to the current scope."""

        raise NotImplementedError
