"""Integration test fixtures using testcontainers.

A session-scoped PostgreSQL container migrated with Alembic, and a live
API served from a background thread.
"""

import threading
from collections.abc import Generator
from pathlib import Path

import httpx
import pytest
from sqlalchemy import Engine, text
from sqlalchemy.orm import Session, sessionmaker
from testcontainers.postgres import PostgresContainer
from werkzeug.serving import make_server

from notification_dispatch.api.app import create_app
from notification_dispatch.config import ProviderConfig
from notification_dispatch.db.session import create_db_engine, create_session_factory
from notification_dispatch.pipeline import DeliveryPipeline
from notification_dispatch.providers import ProviderRegistry, create_default_registry

pytestmark = pytest.mark.integration

ROOT_DIR = Path(__file__).resolve().parents[2]


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    with PostgresContainer("postgres:16-alpine", driver="psycopg2") as pg:
        yield pg


@pytest.fixture(scope="session")
def db_engine(postgres_container: PostgresContainer) -> Generator[Engine, None, None]:
    """Create engine and run Alembic migrations against the container."""
    from alembic import command
    from alembic.config import Config as AlembicConfig

    dsn = postgres_container.get_connection_url()
    engine = create_db_engine(dsn, pool_pre_ping=True)

    alembic_cfg = AlembicConfig(str(ROOT_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(ROOT_DIR / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", dsn)
    command.upgrade(alembic_cfg, "head")

    yield engine
    engine.dispose()


@pytest.fixture(scope="session")
def session_factory(db_engine: Engine) -> sessionmaker[Session]:
    return create_session_factory(db_engine)


@pytest.fixture(autouse=True)
def _cleanup_db(session_factory: sessionmaker[Session]) -> Generator[None, None, None]:
    yield
    with session_factory() as session:
        session.execute(text("TRUNCATE notification_logs"))
        session.commit()


@pytest.fixture()
def provider_registry() -> Generator[ProviderRegistry, None, None]:
    """Simulated providers that always deliver."""
    registry = create_default_registry(ProviderConfig(simulated_failure_rate=0.0))
    yield registry
    registry.close()


@pytest.fixture()
def pipeline(
    session_factory: sessionmaker[Session], provider_registry: ProviderRegistry
) -> DeliveryPipeline:
    return DeliveryPipeline(session_factory, provider_registry, base_delay_seconds=0)


@pytest.fixture()
def api_url(
    pipeline: DeliveryPipeline, session_factory: sessionmaker[Session]
) -> Generator[str, None, None]:
    """Serve the API in a background thread, yield its base URL."""
    app = create_app(pipeline, session_factory)
    app.config["TESTING"] = True

    server = make_server("127.0.0.1", 0, app, threaded=True)
    port = server.server_address[1]

    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield f"http://127.0.0.1:{port}"

    server.shutdown()


@pytest.fixture()
def http_client(api_url: str) -> Generator[httpx.Client, None, None]:
    with httpx.Client(base_url=api_url, timeout=10.0) as client:
        yield client
