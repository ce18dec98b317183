"""Transaction demarcation over SQLAlchemy sessions."""

from .definition import Propagation, TransactionDefinition
from .interfaces import TransactionManager
from .manager import READ_ONLY_KEY, SessionTransactionManager
from .status import TransactionScope, TransactionStatus
from .synchronization import CompletionStatus, TransactionSynchronization

__all__ = [
    "CompletionStatus",
    "Propagation",
    "READ_ONLY_KEY",
    "SessionTransactionManager",
    "TransactionDefinition",
    "TransactionManager",
    "TransactionScope",
    "TransactionStatus",
    "TransactionSynchronization",
]
