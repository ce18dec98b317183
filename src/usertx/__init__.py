"""usertx: user administration with explicit transaction demarcation.

``build_app`` wires a :class:`~usertx.services.UserService` over a
:class:`~usertx.repositories.UserDao` and a
:class:`~usertx.transaction.SessionTransactionManager`.
"""

from .config import AppConfig, AppContainer, build_app, load_config
from .domain import Level, User

__all__ = ["AppConfig", "AppContainer", "Level", "User", "build_app", "load_config"]
