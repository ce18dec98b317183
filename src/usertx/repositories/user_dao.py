"""Persistence layer for user records."""

from __future__ import annotations

import sqlalchemy as sa

from ..db.models import UserModel
from ..domain import Level, User
from ..exceptions import ensure_found, handle_sqlalchemy_errors
from ..transaction import SessionTransactionManager


class UserDao:
    """Store users in the ``users`` table.

    Every call runs on the session of the current transaction when one is
    active; otherwise each call commits on its own. Writes inside a
    transaction run in a savepoint, so a rejected write only undoes itself.
    """

    def __init__(self, transaction_manager: SessionTransactionManager) -> None:
        self._transaction_manager = transaction_manager

    def add(self, user: User) -> None:
        with handle_sqlalchemy_errors(entity="user"):
            with self._transaction_manager.bound_session(savepoint=True) as session:
                session.add(self._to_model(user))
                session.flush()

    def get(self, user_id: str) -> User:
        with handle_sqlalchemy_errors(entity="user"):
            with self._transaction_manager.bound_session() as session:
                model = session.get(UserModel, user_id)
                ensure_found(model, entity="user", identifier=user_id)
                return self._to_domain(model)

    def get_all(self) -> list[User]:
        with handle_sqlalchemy_errors(entity="user"):
            with self._transaction_manager.bound_session() as session:
                rows = session.scalars(sa.select(UserModel).order_by(UserModel.id)).all()
                return [self._to_domain(row) for row in rows]

    def update(self, user: User) -> None:
        with handle_sqlalchemy_errors(entity="user"):
            with self._transaction_manager.bound_session(savepoint=True) as session:
                model = session.get(UserModel, user.id)
                ensure_found(model, entity="user", identifier=user.id)
                model.name = user.name
                model.password = user.password
                model.level = int(user.level or Level.BASIC)
                model.login = user.login
                model.recommend = user.recommend
                model.email = user.email
                model.last_login_at = user.last_login_at
                session.flush()

    def delete_all(self) -> None:
        with handle_sqlalchemy_errors(entity="user"):
            with self._transaction_manager.bound_session(savepoint=True) as session:
                session.execute(sa.delete(UserModel))

    def get_count(self) -> int:
        with handle_sqlalchemy_errors(entity="user"):
            with self._transaction_manager.bound_session() as session:
                return session.scalar(sa.select(sa.func.count()).select_from(UserModel)) or 0

    @staticmethod
    def _to_model(user: User) -> UserModel:
        return UserModel(
            id=user.id,
            name=user.name,
            password=user.password,
            level=int(user.level or Level.BASIC),
            login=user.login,
            recommend=user.recommend,
            email=user.email,
            created_at=user.created_at,
            last_login_at=user.last_login_at,
        )

    @staticmethod
    def _to_domain(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            password=model.password,
            level=Level.from_value(model.level),
            login=model.login,
            recommend=model.recommend,
            email=model.email,
            created_at=model.created_at,
            last_login_at=model.last_login_at,
        )
