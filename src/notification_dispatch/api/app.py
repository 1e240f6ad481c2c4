import atexit
import logging

from flask import Flask
from sqlalchemy.orm import Session, sessionmaker

from notification_dispatch.api.routes import bp
from notification_dispatch.config import (
    ApiConfig,
    DeliveryConfig,
    PostgresConfig,
    ProviderConfig,
)
from notification_dispatch.db.session import create_db_engine, create_session_factory
from notification_dispatch.log import setup_logging
from notification_dispatch.pipeline import DeliveryPipeline
from notification_dispatch.providers import create_default_registry

logger = logging.getLogger(__name__)


def create_app(
    pipeline: DeliveryPipeline,
    session_factory: sessionmaker[Session],
) -> Flask:
    """Flask application factory.

    Args:
        pipeline: Delivery pipeline used by the submit endpoint.
        session_factory: Session source for the read endpoints and health check.
    """
    app = Flask(__name__)
    app.extensions["delivery_pipeline"] = pipeline
    app.extensions["session_factory"] = session_factory

    app.register_blueprint(bp)

    logger.info("Notification API initialized")
    return app


def build_app(api_config: ApiConfig | None = None) -> Flask:
    """Wire configuration, database, providers and pipeline into an app."""
    api_config = api_config or ApiConfig()
    delivery_config = DeliveryConfig()
    setup_logging(api_config.log_level)

    engine = create_db_engine(PostgresConfig())
    session_factory = create_session_factory(engine)

    providers = create_default_registry(ProviderConfig())
    atexit.register(providers.close)
    atexit.register(engine.dispose)

    pipeline = DeliveryPipeline(
        session_factory,
        providers,
        base_delay_seconds=delivery_config.retry_base_delay_seconds,
    )
    return create_app(pipeline, session_factory)
