"""Delivery pipeline: render, persist, send, retry, finalize."""

import logging
import threading
import time
import uuid
from collections.abc import Callable, Mapping
from typing import Any

from sqlalchemy.orm import Session, sessionmaker

from notification_dispatch.db.models import NotificationLog, utcnow
from notification_dispatch.db.repositories import NotificationRepository
from notification_dispatch.enums import NotificationStatus
from notification_dispatch.errors import NotificationNotFoundError
from notification_dispatch.log import notification_context
from notification_dispatch.providers import ProviderRegistry
from notification_dispatch.schemas import NotificationRequest
from notification_dispatch.templates import TemplateCatalog, default_catalog

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY_SECONDS = 0.5


class DeliveryPipeline:
    """Drives one notification from request to a terminal status.

    A submitted request is validated, rendered and matched to a provider
    before anything is written. The record is then created as PENDING and
    every attempt is persisted *before* the provider is called, so the
    stored ``attempts`` never undercounts sends even if the process dies
    mid-send. The call blocks until the record is SENT, FAILED or
    CANCELLED.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        providers: ProviderRegistry,
        catalog: TemplateCatalog = default_catalog,
        *,
        base_delay_seconds: float = DEFAULT_BASE_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._session_factory = session_factory
        self._providers = providers
        self._catalog = catalog
        self._base_delay = base_delay_seconds
        self._sleep = sleep

    def submit(
        self,
        request: NotificationRequest | Mapping[str, Any],
        cancel_event: threading.Event | None = None,
    ) -> NotificationLog:
        """Deliver a notification and return its finalized record.

        Raises pydantic.ValidationError for a malformed request and a
        ConfigurationError subclass for a missing template or provider;
        in both cases nothing is persisted. Persistence errors propagate.

        If *cancel_event* is given it is checked before every retry and
        the backoff pause waits on it; once set, the record is finalized
        as CANCELLED.
        """
        if not isinstance(request, NotificationRequest):
            request = NotificationRequest.model_validate(request)

        content = self._catalog.render(
            request.type, request.language, request.channel, request.variables
        )
        provider = self._providers.get(request.channel)

        now = utcnow()
        notification = NotificationLog(
            id=uuid.uuid4(),
            created_at=now,
            updated_at=now,
            channel=request.channel,
            notification_type=request.type,
            language=request.language,
            recipient=request.to,
            subject=content.subject,
            body=content.body,
            status=NotificationStatus.PENDING,
            attempts=0,
            meta=request.metadata,
        )
        nid = notification.id

        with self._session_factory() as session:
            repo = NotificationRepository(session)
            repo.create(notification)
            session.commit()

            log_ctx = notification_context(notification)
            logger.info("Notification created", extra=log_ctx)

            last_error: str | None = None

            for attempt in range(1, MAX_ATTEMPTS + 1):
                log_ctx["attempt"] = attempt

                if attempt > 1 and _is_set(cancel_event):
                    return self._finalize_cancelled(
                        session, repo, nid, attempt - 1, log_ctx
                    )

                status = (
                    NotificationStatus.PENDING
                    if attempt == 1
                    else NotificationStatus.RETRIED
                )
                notification = _require(
                    repo.update(nid, status=status, attempts=attempt), nid
                )
                session.commit()

                result = provider.send(notification)

                if result.success:
                    notification = _require(
                        repo.update(
                            nid,
                            status=NotificationStatus.SENT,
                            attempts=attempt,
                            clear_error=True,
                        ),
                        nid,
                    )
                    session.commit()
                    logger.info(
                        "Delivery succeeded",
                        extra={**log_ctx, "message_id": result.message_id},
                    )
                    return notification

                last_error = result.error or "Unknown delivery error"

                if attempt < MAX_ATTEMPTS:
                    backoff = get_backoff(attempt, self._base_delay)
                    logger.warning(
                        "Delivery failed, retrying",
                        extra={
                            **log_ctx,
                            "backoff_seconds": backoff,
                            "reason": last_error,
                        },
                    )
                    if self._pause(backoff, cancel_event):
                        return self._finalize_cancelled(
                            session, repo, nid, attempt, log_ctx
                        )

            notification = _require(
                repo.update(nid, status=NotificationStatus.FAILED, error=last_error),
                nid,
            )
            session.commit()
            logger.error(
                "Delivery permanently failed",
                extra={**log_ctx, "reason": last_error},
            )
            return notification

    def _pause(self, seconds: float, cancel_event: threading.Event | None) -> bool:
        """Wait out a backoff. Returns True if cancelled during the wait."""
        if cancel_event is None:
            self._sleep(seconds)
            return False
        return cancel_event.wait(seconds)

    @staticmethod
    def _finalize_cancelled(
        session: Session,
        repo: NotificationRepository,
        nid: uuid.UUID,
        attempts: int,
        log_ctx: dict[str, Any],
    ) -> NotificationLog:
        notification = _require(
            repo.update(
                nid,
                status=NotificationStatus.CANCELLED,
                error=f"Delivery cancelled after {attempts} attempt(s)",
            ),
            nid,
        )
        session.commit()
        logger.warning("Delivery cancelled", extra=log_ctx)
        return notification


def get_backoff(attempt: int, base_delay: float) -> float:
    """Return the pause after failed *attempt* (1-based): linear backoff."""
    return base_delay * attempt


def _is_set(event: threading.Event | None) -> bool:
    return event is not None and event.is_set()


def _require(
    notification: NotificationLog | None, nid: uuid.UUID
) -> NotificationLog:
    if notification is None:
        raise NotificationNotFoundError(nid)
    return notification
