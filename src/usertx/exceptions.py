"""Domain level exceptions and helpers for repository and transaction layers."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from sqlalchemy import exc as sa_exc

__all__ = [
    "AppError",
    "RepositoryError",
    "NotFoundError",
    "IntegrityConstraintViolation",
    "DatabaseOperationError",
    "TransactionError",
    "IllegalTransactionStateError",
    "UnexpectedRollbackError",
    "ReadOnlyTransactionError",
    "IllegalLevelUpgradeError",
    "ensure_found",
    "handle_sqlalchemy_errors",
]


class AppError(Exception):
    """Base class for application specific errors."""


class RepositoryError(AppError):
    """Base class for persistence layer failures."""


class NotFoundError(RepositoryError):
    """Raised when a record could not be located."""


class IntegrityConstraintViolation(RepositoryError):
    """Raised when a database constraint is violated."""


class DatabaseOperationError(RepositoryError):
    """Raised for unexpected database errors."""


class TransactionError(AppError):
    """Base class for transaction demarcation failures."""


class IllegalTransactionStateError(TransactionError):
    """Raised when the requested propagation conflicts with the current scope."""


class UnexpectedRollbackError(TransactionError):
    """Raised when a commit ended in a rollback because a participant failed."""


class ReadOnlyTransactionError(TransactionError):
    """Raised when a write is attempted inside a read-only transaction."""


class IllegalLevelUpgradeError(AppError):
    """Raised when a user cannot move to the next level."""


@dataclass(slots=True)
class _EntityContext:
    """Internal helper describing the entity for error messages."""

    entity: str | None = None

    def format(self, message: str) -> str:
        if self.entity:
            return f"{self.entity}: {message}"
        return message


def ensure_found(record: object | None, *, entity: str, identifier: str) -> object:
    """Ensure a record exists, otherwise raise :class:`NotFoundError`."""

    if record is None:
        raise NotFoundError(f"{entity} '{identifier}' not found")
    return record


def _translate_sqlalchemy_error(exc: Exception, *, context: _EntityContext) -> RepositoryError:
    if isinstance(exc, sa_exc.IntegrityError):
        return IntegrityConstraintViolation(context.format("integrity constraint violated"))
    if isinstance(exc, sa_exc.PendingRollbackError):
        return DatabaseOperationError(
            context.format("transaction must be rolled back after a failed flush")
        )
    if isinstance(exc, sa_exc.DBAPIError):
        return DatabaseOperationError(context.format("database operation failed"))
    return RepositoryError(context.format(str(exc)))


@contextmanager
def handle_sqlalchemy_errors(*, entity: str | None = None) -> Iterator[None]:
    """Translate SQLAlchemy errors into domain specific ones."""

    context = _EntityContext(entity)
    try:
        yield
    except (sa_exc.IntegrityError, sa_exc.DBAPIError, sa_exc.PendingRollbackError) as exc:
        raise _translate_sqlalchemy_error(exc, context=context) from exc
