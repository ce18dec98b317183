from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from usertx.db import create_db_engine, init_db
from usertx.domain import Level, User
from usertx.repositories import UserDao
from usertx.services import LOG_COUNT_FOR_SILVER, REC_COUNT_FOR_GOLD, UserService
from usertx.transaction import (
    SessionTransactionManager,
    TransactionDefinition,
    TransactionStatus,
)

from tests.helpers.users import create_user
from tests.mocks.mail import RecordingMailSender


@dataclass
class ManagedTransaction:
    """Transaction opened before a test and rolled back after it."""

    status: TransactionStatus
    callbacks: list[Callable[[], None]] = field(default_factory=list)

    def after_transaction(self, callback: Callable[[], None]) -> None:
        self.callbacks.append(callback)


@pytest.fixture
def engine(tmp_path) -> Iterator[Engine]:
    engine = create_db_engine(f"sqlite:///{tmp_path / 'usertx.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def transaction_manager(session_factory: sessionmaker[Session]) -> SessionTransactionManager:
    return SessionTransactionManager(session_factory)


@pytest.fixture
def user_dao(transaction_manager: SessionTransactionManager) -> UserDao:
    return UserDao(transaction_manager)


@pytest.fixture
def mail_sender() -> RecordingMailSender:
    return RecordingMailSender()


@pytest.fixture
def user_service(
    user_dao: UserDao,
    transaction_manager: SessionTransactionManager,
    mail_sender: RecordingMailSender,
) -> UserService:
    return UserService(user_dao, transaction_manager, mail_sender=mail_sender)


@pytest.fixture
def users() -> list[User]:
    return [
        create_user("1", "hong", "1234", Level.BASIC, LOG_COUNT_FOR_SILVER - 1, 0),
        create_user("2", "hong1", "1234", Level.BASIC, LOG_COUNT_FOR_SILVER, 10),
        create_user("3", "hong12", "1234", Level.SILVER, 55, REC_COUNT_FOR_GOLD),
        create_user("4", "hong22", "1234", Level.GOLD, 60, REC_COUNT_FOR_GOLD),
    ]


@pytest.fixture
def managed_transaction(
    transaction_manager: SessionTransactionManager,
) -> Iterator[ManagedTransaction]:
    status = transaction_manager.get_transaction(TransactionDefinition(name="test"))
    managed = ManagedTransaction(status=status)
    yield managed
    if not status.completed:
        transaction_manager.rollback(status)
    for callback in managed.callbacks:
        callback()
