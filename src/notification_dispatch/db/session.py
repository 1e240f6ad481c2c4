"""Engine and session construction for the notification store."""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from notification_dispatch.config import PostgresConfig


def create_db_engine(target: PostgresConfig | str, **kwargs: object) -> Engine:
    """Create an engine from a ``PostgresConfig`` or a raw DSN.

    Engines built from a ``PostgresConfig`` get ``pool_pre_ping=True``
    unless overridden, so connections dropped by a database restart are
    replaced before the pipeline's next commit.
    """
    if isinstance(target, PostgresConfig):
        kwargs.setdefault("pool_pre_ping", True)
        target = target.dsn
    return create_engine(target, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Sessions that keep committed records readable.

    The pipeline returns the finalized ``NotificationLog`` after its
    session has closed, and the API serializes it from there, so
    attributes must not expire on commit.
    """
    return sessionmaker(bind=engine, expire_on_commit=False)
