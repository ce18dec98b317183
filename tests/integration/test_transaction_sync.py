"""Batches of add/delete_all calls inside a test-managed transaction.

Every test runs inside a transaction that is rolled back afterwards; the
after-transaction check then confirms nothing leaked into the database.
"""

from __future__ import annotations

import pytest

from usertx.transaction import Propagation, TransactionDefinition

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def after_transaction(managed_transaction, user_service):
    managed_transaction.after_transaction(lambda: _assert_empty(user_service))
    yield


def _assert_empty(user_service) -> None:
    assert user_service.get_count() == 0


def test_read_only_definition_joins_the_running_transaction(
    transaction_manager, user_service, users
) -> None:
    """A read-only request joins the read-write test transaction and may write."""

    definition = TransactionDefinition(read_only=True)
    status = transaction_manager.get_transaction(definition)
    assert not status.is_new_transaction

    user_service.delete_all()
    user_service.add(users[2])
    user_service.add(users[3])

    transaction_manager.commit(status)
    assert user_service.get_count() == 2


def test_requires_new_rollback_restores_count(transaction_manager, user_service, users) -> None:
    definition = TransactionDefinition(propagation=Propagation.REQUIRES_NEW)
    status = transaction_manager.get_transaction(definition)
    assert status.is_new_transaction

    try:
        user_service.delete_all()
        user_service.add(users[0])
        user_service.add(users[1])
        assert user_service.get_count() == 2
    finally:
        transaction_manager.rollback(status)

    assert user_service.get_count() == 0


def test_test_transaction_rollback_discards_writes(user_service, users) -> None:
    user_service.delete_all()
    user_service.add(users[0])
    user_service.add(users[1])

    assert user_service.get_count() == 2


def test_upgrade_levels_inside_test_transaction_defers_mail(
    user_service, users, mail_sender
) -> None:
    for user in users:
        user_service.add(user)

    upgraded = user_service.upgrade_levels()

    assert [user.id for user in upgraded] == ["2", "3"]
    assert mail_sender.messages == []
