"""SQLAlchemy session backed transaction manager."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from functools import wraps
from typing import Any, TypeVar

import structlog
from sqlalchemy import event
from sqlalchemy.orm import ORMExecuteState, Session, sessionmaker

from ..exceptions import (
    IllegalTransactionStateError,
    ReadOnlyTransactionError,
    UnexpectedRollbackError,
    handle_sqlalchemy_errors,
)
from .definition import Propagation, TransactionDefinition
from .status import TransactionScope, TransactionStatus
from .synchronization import CompletionStatus, TransactionSynchronization

logger = structlog.get_logger(__name__)

READ_ONLY_KEY = "usertx.read_only"

F = TypeVar("F", bound=Callable[..., Any])


def _reject_read_only_flush(
    session: Session, flush_context: object, instances: object
) -> None:
    if not session.info.get(READ_ONLY_KEY):
        return
    if not (session.new or session.dirty or session.deleted):
        return
    # Drop the rejected changes so later reads do not autoflush them again.
    for instance in list(session.new) + list(session.deleted):
        session.expunge(instance)
    for instance in list(session.dirty):
        session.expire(instance)
    raise ReadOnlyTransactionError("flush attempted in a read-only transaction")


def _reject_read_only_statement(orm_execute_state: ORMExecuteState) -> None:
    if orm_execute_state.is_select:
        return
    if orm_execute_state.session.info.get(READ_ONLY_KEY):
        raise ReadOnlyTransactionError("write statement attempted in a read-only transaction")


class SessionTransactionManager:
    """Map transaction definitions onto SQLAlchemy sessions.

    The current scope is bound to the running context, so code called inside a
    transaction picks up the same session through :meth:`bound_session`.
    A new transaction always gets its own session from ``session_factory``;
    participants and savepoints reuse the session of the scope they join.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self._current: ContextVar[TransactionScope | None] = ContextVar(
            f"usertx_transaction_scope_{id(self)}", default=None
        )
        event.listen(session_factory, "before_flush", _reject_read_only_flush)
        event.listen(session_factory, "do_orm_execute", _reject_read_only_statement)

    def get_transaction(
        self, definition: TransactionDefinition | None = None
    ) -> TransactionStatus:
        definition = definition or TransactionDefinition()
        current = self._current.get()

        if current is not None and current.active:
            return self._handle_existing(definition, current)

        if definition.propagation is Propagation.MANDATORY:
            raise IllegalTransactionStateError(
                "no existing transaction found for propagation 'mandatory'"
            )
        if definition.starts_transaction:
            return self._begin(definition, suspended=current)
        if current is not None:
            return TransactionStatus(scope=current, definition=definition)
        return self._open_empty_scope(definition, suspended=None)

    def commit(self, status: TransactionStatus) -> None:
        self._ensure_not_completed(status)

        if status.local_rollback_only:
            logger.debug("transaction.commit.rollback_only", name=status.definition.name)
            self._process_rollback(status, unexpected=False)
            return

        if status.scope.rollback_only:
            logger.warning(
                "transaction.commit.global_rollback_only",
                name=status.definition.name,
                new_transaction=status.is_new_transaction,
            )
            self._process_rollback(status, unexpected=status.is_new_transaction)
            return

        self._process_commit(status)

    def rollback(self, status: TransactionStatus) -> None:
        self._ensure_not_completed(status)
        self._process_rollback(status, unexpected=False)

    def register_synchronization(self, synchronization: TransactionSynchronization) -> None:
        """Attach completion callbacks to the current scope."""

        scope = self._current.get()
        if scope is None:
            raise IllegalTransactionStateError("transaction synchronization is not active")
        scope.synchronizations.append(synchronization)

    def is_transaction_active(self) -> bool:
        scope = self._current.get()
        return scope is not None and scope.active

    @contextmanager
    def bound_session(self, *, savepoint: bool = False) -> Iterator[Session]:
        """Yield the transactional session, or a session committed on exit.

        With ``savepoint=True`` work on a transactional session runs inside a
        savepoint, so a failed write leaves the surrounding transaction usable.
        """

        scope = self._current.get()
        if scope is not None and scope.session is not None:
            if savepoint:
                with scope.session.begin_nested():
                    yield scope.session
            else:
                yield scope.session
            return

        session = self._session_factory()
        session.info[READ_ONLY_KEY] = bool(scope is not None and scope.read_only)
        try:
            with session.begin():
                yield session
        finally:
            session.close()

    @contextmanager
    def transaction(
        self, definition: TransactionDefinition | None = None
    ) -> Iterator[TransactionStatus]:
        """Run a block in a transaction: commit on success, roll back on error."""

        status = self.get_transaction(definition)
        try:
            yield status
        except Exception:
            if not status.completed:
                self.rollback(status)
            raise
        if not status.completed:
            self.commit(status)

    def transactional(
        self, definition: TransactionDefinition | None = None, **options: Any
    ) -> Callable[[F], F]:
        """Decorate a callable so every call runs inside :meth:`transaction`.

        Usage::

            @manager.transactional(propagation=Propagation.REQUIRES_NEW)
            def record_audit_entry():
                ...
        """

        resolved = definition or TransactionDefinition(**options)

        def decorator(func: F) -> F:
            @wraps(func)
            def wrapper(*args: Any, **kwargs: Any) -> Any:
                with self.transaction(resolved):
                    return func(*args, **kwargs)

            return wrapper  # type: ignore[return-value]

        return decorator

    def _handle_existing(
        self, definition: TransactionDefinition, current: TransactionScope
    ) -> TransactionStatus:
        propagation = definition.propagation

        if propagation is Propagation.NEVER:
            raise IllegalTransactionStateError(
                "existing transaction found for propagation 'never'"
            )
        if propagation is Propagation.NOT_SUPPORTED:
            return self._open_empty_scope(definition, suspended=current)
        if propagation is Propagation.REQUIRES_NEW:
            return self._begin(definition, suspended=current)
        if propagation is Propagation.NESTED:
            with handle_sqlalchemy_errors(entity="transaction"):
                savepoint = self._session_of(current).begin_nested()
            logger.debug("transaction.savepoint", name=definition.name)
            return TransactionStatus(scope=current, definition=definition, savepoint=savepoint)

        return TransactionStatus(scope=current, definition=definition)

    def _begin(
        self, definition: TransactionDefinition, *, suspended: TransactionScope | None
    ) -> TransactionStatus:
        session = self._session_factory()
        session.info[READ_ONLY_KEY] = definition.read_only
        try:
            with handle_sqlalchemy_errors(entity="transaction"):
                session.begin()
                if definition.isolation_level:
                    session.connection(
                        execution_options={"isolation_level": definition.isolation_level}
                    )
        except Exception:
            session.close()
            raise

        scope = TransactionScope(definition=definition, session=session)
        self._current.set(scope)
        logger.debug(
            "transaction.begin",
            name=definition.name,
            propagation=definition.propagation.value,
            read_only=definition.read_only,
            suspended=suspended is not None,
        )
        return TransactionStatus(
            scope=scope,
            definition=definition,
            new_transaction=True,
            new_scope=True,
            suspended=suspended,
        )

    def _open_empty_scope(
        self, definition: TransactionDefinition, *, suspended: TransactionScope | None
    ) -> TransactionStatus:
        scope = TransactionScope(definition=definition)
        self._current.set(scope)
        return TransactionStatus(
            scope=scope,
            definition=definition,
            new_scope=True,
            suspended=suspended,
        )

    def _process_commit(self, status: TransactionStatus) -> None:
        scope = status.scope
        try:
            if status.new_scope:
                self._trigger(scope, "before_commit", scope.read_only)
                self._trigger(scope, "before_completion")
            with handle_sqlalchemy_errors(entity="transaction"):
                if status.savepoint is not None:
                    status.savepoint.commit()
                elif status.is_new_transaction:
                    self._session_of(scope).commit()
        except Exception:
            try:
                self._rollback_on_commit_failure(status)
            finally:
                self._cleanup(status)
            raise

        self._cleanup(status)
        if status.is_new_transaction:
            logger.debug("transaction.commit", name=status.definition.name)
        if status.new_scope:
            self._trigger(scope, "after_commit")
            self._trigger(scope, "after_completion", CompletionStatus.COMMITTED)

    def _process_rollback(self, status: TransactionStatus, *, unexpected: bool) -> None:
        scope = status.scope
        try:
            if status.new_scope:
                self._trigger(scope, "before_completion")
            with handle_sqlalchemy_errors(entity="transaction"):
                if status.savepoint is not None:
                    status.savepoint.rollback()
                elif status.is_new_transaction:
                    self._session_of(scope).rollback()
                elif status.has_transaction:
                    scope.rollback_only = True
        finally:
            self._cleanup(status)

        if status.has_transaction:
            logger.debug(
                "transaction.rollback",
                name=status.definition.name,
                new_transaction=status.is_new_transaction,
                savepoint=status.has_savepoint,
            )
        if status.new_scope:
            self._trigger(scope, "after_completion", CompletionStatus.ROLLED_BACK)
        if unexpected:
            raise UnexpectedRollbackError(
                "transaction rolled back because it has been marked as rollback-only"
            )

    def _rollback_on_commit_failure(self, status: TransactionStatus) -> None:
        scope = status.scope
        if status.savepoint is not None:
            if status.savepoint.is_active:
                status.savepoint.rollback()
        elif status.is_new_transaction:
            self._session_of(scope).rollback()
        elif status.has_transaction:
            scope.rollback_only = True
        if status.new_scope:
            self._trigger(scope, "after_completion", CompletionStatus.ROLLED_BACK)

    def _cleanup(self, status: TransactionStatus) -> None:
        status.completed = True
        if status.is_new_transaction:
            self._session_of(status.scope).close()
        if status.new_scope:
            self._current.set(status.suspended)

    @staticmethod
    def _session_of(scope: TransactionScope) -> Session:
        if scope.session is None:
            raise IllegalTransactionStateError("scope has no transactional session")
        return scope.session

    @staticmethod
    def _trigger(scope: TransactionScope, hook: str, *args: Any) -> None:
        for synchronization in list(scope.synchronizations):
            getattr(synchronization, hook)(*args)

    @staticmethod
    def _ensure_not_completed(status: TransactionStatus) -> None:
        if status.completed:
            raise IllegalTransactionStateError(
                "transaction is already completed; do not call commit or rollback more than once"
            )
