"""Data access for the notification log, with a constructor-injected session."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from notification_dispatch.db.models import NotificationLog, utcnow
from notification_dispatch.enums import TERMINAL_STATUSES
from notification_dispatch.errors import DuplicateNotificationError


class NotificationRepository:
    """Create, update and query notification records.

    Methods flush but never commit; the caller owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, notification: NotificationLog) -> NotificationLog:
        """Insert a new record.

        Raises DuplicateNotificationError if the id is already taken.
        """
        if (
            notification.id is not None
            and self._session.get(NotificationLog, notification.id) is not None
        ):
            raise DuplicateNotificationError(notification.id)

        self._session.add(notification)
        try:
            self._session.flush()
        except IntegrityError as exc:
            raise DuplicateNotificationError(notification.id) from exc
        return notification

    def get_by_id(self, notification_id: UUID) -> NotificationLog | None:
        """Fetch a record by primary key."""
        return self._session.get(NotificationLog, notification_id)

    def update(
        self,
        notification_id: UUID,
        *,
        status: str | None = None,
        attempts: int | None = None,
        error: str | None = None,
        clear_error: bool = False,
    ) -> NotificationLog | None:
        """Apply a partial update and bump ``updated_at``.

        Applying the same update twice leaves the record unchanged apart
        from ``updated_at``. Returns the updated record, or None if not
        found. Raises ValueError for a write that would move a terminal
        record to another status or lower the attempts counter.
        """
        notification = self.get_by_id(notification_id)
        if notification is None:
            return None

        if (
            status is not None
            and notification.status in TERMINAL_STATUSES
            and status != notification.status
        ):
            raise ValueError(
                f"Notification {notification_id} is already {str(notification.status)!r}"
            )
        if attempts is not None and attempts < notification.attempts:
            raise ValueError(
                f"attempts cannot decrease ({notification.attempts} -> {attempts})"
            )

        if status is not None:
            notification.status = status
        if attempts is not None:
            notification.attempts = attempts
        if clear_error:
            notification.error = None
        elif error is not None:
            notification.error = error
        notification.updated_at = utcnow()

        self._session.flush()
        return notification

    def list_notifications(
        self,
        *,
        status: str | None = None,
        channel: str | None = None,
        notification_type: str | None = None,
    ) -> list[NotificationLog]:
        """Return records matching every given filter, newest first.

        Records sharing a ``created_at`` are ordered by id, descending.
        """
        stmt = select(NotificationLog)
        if status is not None:
            stmt = stmt.where(NotificationLog.status == status)
        if channel is not None:
            stmt = stmt.where(NotificationLog.channel == channel)
        if notification_type is not None:
            stmt = stmt.where(NotificationLog.notification_type == notification_type)
        stmt = stmt.order_by(
            NotificationLog.created_at.desc(), NotificationLog.id.desc()
        )
        return list(self._session.scalars(stmt).all())
