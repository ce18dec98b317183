"""Application configuration builder."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .core.config import AppSettings
from .db.db_init import create_db_engine, init_db
from .repositories import UserDao
from .services import DefaultUserLevelUpgradePolicy, LoggingMailSender, UserService
from .transaction import SessionTransactionManager


@dataclass(slots=True)
class AppConfig:
    settings: AppSettings
    engine: Engine
    session_factory: sessionmaker[Session]


@dataclass(slots=True)
class AppContainer:
    config: AppConfig
    transaction_manager: SessionTransactionManager
    user_dao: UserDao
    user_service: UserService


def load_config(settings: AppSettings | None = None) -> AppConfig:
    """Build engine and session factory from settings and create the schema."""
    settings = settings or AppSettings()
    engine = create_db_engine(settings.database_url, echo=settings.echo_sql)
    session_factory: sessionmaker[Session] = sessionmaker(bind=engine, expire_on_commit=False)

    init_db(engine)

    return AppConfig(settings=settings, engine=engine, session_factory=session_factory)


def build_app(config: AppConfig | None = None) -> AppContainer:
    """Wire the transaction manager, DAO and service together."""
    config = config or load_config()
    settings = config.settings

    transaction_manager = SessionTransactionManager(config.session_factory)
    user_dao = UserDao(transaction_manager)
    user_service = UserService(
        user_dao,
        transaction_manager,
        mail_sender=LoggingMailSender(sender=settings.mail_sender_address),
        upgrade_policy=DefaultUserLevelUpgradePolicy(
            log_count_for_silver=settings.log_count_for_silver,
            rec_count_for_gold=settings.rec_count_for_gold,
        ),
        mail_from=settings.mail_sender_address,
    )
    return AppContainer(
        config=config,
        transaction_manager=transaction_manager,
        user_dao=user_dao,
        user_service=user_service,
    )
