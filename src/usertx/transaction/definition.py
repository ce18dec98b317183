"""Transaction propagation and definition types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Propagation(str, Enum):
    """How a requested transaction relates to one that is already running."""

    REQUIRED = "required"
    """Join the current transaction, or begin a new one (default)."""

    SUPPORTS = "supports"
    """Join the current transaction, or run non-transactionally."""

    MANDATORY = "mandatory"
    """Join the current transaction; fail when there is none."""

    REQUIRES_NEW = "requires_new"
    """Always begin a new transaction on its own session, suspending the current one."""

    NOT_SUPPORTED = "not_supported"
    """Run non-transactionally, suspending the current transaction."""

    NEVER = "never"
    """Run non-transactionally; fail when a transaction is running."""

    NESTED = "nested"
    """Open a savepoint inside the current transaction, or begin a new one.

    Unlike ``REQUIRES_NEW``, rolling back the outer transaction also discards
    the work committed to the savepoint.
    """


@dataclass(frozen=True, slots=True)
class TransactionDefinition:
    """Requested behavior of a transaction."""

    propagation: Propagation = Propagation.REQUIRED
    read_only: bool = False
    isolation_level: str | None = None
    name: str | None = None

    @property
    def starts_transaction(self) -> bool:
        """Whether this propagation begins a transaction when none is running."""

        return self.propagation in (
            Propagation.REQUIRED,
            Propagation.REQUIRES_NEW,
            Propagation.NESTED,
        )
