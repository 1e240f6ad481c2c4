import logging
from typing import Any
from uuid import UUID

from flask import Blueprint, Response, current_app, jsonify, request
from pydantic import ValidationError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from notification_dispatch.db.repositories import NotificationRepository
from notification_dispatch.errors import ConfigurationError, PersistenceError
from notification_dispatch.pipeline import DeliveryPipeline
from notification_dispatch.schemas import (
    NotificationFilter,
    NotificationOut,
    NotificationRequest,
)

logger = logging.getLogger(__name__)

bp = Blueprint("notifications", __name__)


def _error(message: str, status: int, **extra: Any) -> tuple[Response, int]:
    body: dict[str, Any] = {"error": message}
    body.update(extra)
    return jsonify(body), status


def _session_factory() -> sessionmaker[Session]:
    return current_app.extensions["session_factory"]


def _serialize(notification: object) -> dict[str, Any]:
    return NotificationOut.model_validate(notification).model_dump(mode="json")


@bp.post("/notifications")
def submit_notification() -> tuple[Response, int]:
    body = request.get_json(silent=True)
    if body is None:
        return _error("Request body must be valid JSON", 400)
    if not isinstance(body, dict):
        return _error("Request body must be a JSON object", 400)

    try:
        notification_request = NotificationRequest.model_validate(body)
    except ValidationError as exc:
        return _error(
            "Payload validation failed",
            400,
            details=exc.errors(include_url=False, include_context=False),
        )

    pipeline: DeliveryPipeline = current_app.extensions["delivery_pipeline"]
    try:
        notification = pipeline.submit(notification_request)
    except ConfigurationError as exc:
        logger.error("Notification configuration error: %s", exc)
        return _error("Notification configuration error", 500, details=str(exc))
    except (PersistenceError, SQLAlchemyError):
        logger.exception("Failed to persist notification")
        return _error("Notification store unavailable", 500)

    out = NotificationOut.model_validate(notification)
    code = 201 if out.success else 502
    return jsonify({
        "success": out.success,
        "notification": out.model_dump(mode="json"),
    }), code


@bp.get("/notifications")
def list_notifications() -> tuple[Response, int]:
    try:
        filters = NotificationFilter.model_validate(request.args.to_dict())
    except ValidationError as exc:
        return _error(
            "Invalid filter",
            400,
            details=exc.errors(include_url=False, include_context=False),
        )

    with _session_factory()() as session:
        notifications = NotificationRepository(session).list_notifications(
            status=filters.status,
            channel=filters.channel,
            notification_type=filters.type,
        )
        items = [_serialize(n) for n in notifications]

    return jsonify({"total": len(items), "notifications": items}), 200


@bp.get("/notifications/<notification_id>")
def get_notification(notification_id: str) -> tuple[Response, int]:
    try:
        nid = UUID(notification_id)
    except ValueError:
        return _error("Not found", 404)

    with _session_factory()() as session:
        notification = NotificationRepository(session).get_by_id(nid)
        if notification is None:
            return _error("Not found", 404)
        return jsonify(_serialize(notification)), 200


@bp.get("/health")
def health() -> tuple[Response, int]:
    try:
        with _session_factory()() as session:
            session.execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        db_ok = False

    status = "healthy" if db_ok else "unhealthy"
    code = 200 if db_ok else 503

    return jsonify({
        "status": status,
        "checks": {"database": "ok" if db_ok else "unreachable"},
    }), code
