"""Handles for in-flight transactions."""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy.orm import Session, SessionTransaction

from .definition import TransactionDefinition
from .synchronization import TransactionSynchronization


@dataclass(slots=True, eq=False)
class TransactionScope:
    """State bound to the running context while a scope is current.

    ``session`` is ``None`` for non-transactional scopes opened by
    ``SUPPORTS``, ``NOT_SUPPORTED`` or ``NEVER``.
    """

    definition: TransactionDefinition
    session: Session | None = None
    rollback_only: bool = False
    synchronizations: list[TransactionSynchronization] = field(default_factory=list)

    @property
    def active(self) -> bool:
        return self.session is not None

    @property
    def read_only(self) -> bool:
        return self.definition.read_only


@dataclass(slots=True, eq=False)
class TransactionStatus:
    """Handle returned by ``get_transaction`` and passed to commit/rollback."""

    scope: TransactionScope
    definition: TransactionDefinition
    new_transaction: bool = False
    new_scope: bool = False
    savepoint: SessionTransaction | None = None
    suspended: TransactionScope | None = None
    local_rollback_only: bool = False
    completed: bool = False

    @property
    def has_transaction(self) -> bool:
        return self.scope.active

    @property
    def is_new_transaction(self) -> bool:
        return self.new_transaction and self.scope.active

    @property
    def has_savepoint(self) -> bool:
        return self.savepoint is not None

    @property
    def is_read_only(self) -> bool:
        return self.definition.read_only

    @property
    def is_rollback_only(self) -> bool:
        return self.local_rollback_only or self.scope.rollback_only

    @property
    def session(self) -> Session | None:
        return self.scope.session

    def set_rollback_only(self) -> None:
        """Make the only possible outcome of this status a rollback."""

        self.local_rollback_only = True
