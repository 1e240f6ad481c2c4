"""Test fixtures: SQLite in-memory database, mock providers, pipeline."""

from collections.abc import Generator
from unittest.mock import MagicMock

import pytest
from flask import Flask
from flask.testing import FlaskClient
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from notification_dispatch.api.app import create_app
from notification_dispatch.db.models import Base
from notification_dispatch.enums import Channel
from notification_dispatch.pipeline import DeliveryPipeline
from notification_dispatch.providers import ProviderRegistry

from tests.helpers import BASE_DELAY, make_mock_provider


@pytest.fixture(scope="session")
def db_engine() -> Engine:
    """Create a single in-memory SQLite engine for the test session."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture()
def db_session(db_engine: Engine) -> Generator[Session, None, None]:
    """Transactional session that rolls back after each test."""
    connection = db_engine.connect()
    transaction = connection.begin()
    session = Session(bind=connection)

    yield session

    session.close()
    if transaction.is_active:
        transaction.rollback()
    connection.close()


@pytest.fixture()
def session_factory(db_session: Session) -> MagicMock:
    """Session factory that always returns the test session.

    ``with session_factory() as session:`` yields our transactional
    session; commits inside it never reach the outer transaction.
    """
    factory = MagicMock(spec=sessionmaker)
    ctx = MagicMock()
    ctx.__enter__ = MagicMock(return_value=db_session)
    ctx.__exit__ = MagicMock(return_value=False)
    factory.return_value = ctx
    return factory


@pytest.fixture()
def email_provider() -> MagicMock:
    return make_mock_provider(Channel.EMAIL)


@pytest.fixture()
def sms_provider() -> MagicMock:
    return make_mock_provider(Channel.SMS)


@pytest.fixture()
def push_provider() -> MagicMock:
    return make_mock_provider(Channel.PUSH)


@pytest.fixture()
def provider_registry(
    email_provider: MagicMock,
    sms_provider: MagicMock,
    push_provider: MagicMock,
) -> ProviderRegistry:
    return ProviderRegistry([email_provider, sms_provider, push_provider])


@pytest.fixture()
def sleep_calls() -> list[float]:
    """Backoff pauses requested by the pipeline, in order."""
    return []


@pytest.fixture()
def pipeline(
    session_factory: MagicMock,
    provider_registry: ProviderRegistry,
    sleep_calls: list[float],
) -> DeliveryPipeline:
    return DeliveryPipeline(
        session_factory,
        provider_registry,
        base_delay_seconds=BASE_DELAY,
        sleep=sleep_calls.append,
    )


@pytest.fixture()
def app(pipeline: DeliveryPipeline, session_factory: MagicMock) -> Flask:
    app = create_app(pipeline, session_factory)
    app.config["TESTING"] = True
    return app


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture()
def otp_payload() -> dict:
    return {
        "to": "user@example.com",
        "channel": "email",
        "type": "otp",
        "language": "en",
        "variables": {"code": "482910", "expiry": "10"},
    }
