"""Database layer: model, repository, engine/session utilities."""

from notification_dispatch.db.models import Base, NotificationLog
from notification_dispatch.db.repositories import NotificationRepository
from notification_dispatch.db.session import create_db_engine, create_session_factory

__all__ = [
    "Base",
    "create_db_engine",
    "create_session_factory",
    "NotificationLog",
    "NotificationRepository",
]
