"""Exception hierarchy for conditions that abort a notification request.

Provider failures are not exceptions: they come back as a failed
``DeliveryResult`` and are retried by the pipeline.
"""


class NotificationError(Exception):
    """Base class for dispatch errors."""


class ConfigurationError(NotificationError):
    """A deployment defect: something the request needs is not registered."""


class TemplateNotFoundError(ConfigurationError, LookupError):
    def __init__(self, notification_type: str, language: str, channel: str) -> None:
        self.notification_type = str(notification_type)
        self.language = str(language)
        self.channel = str(channel)
        super().__init__(
            f"No template for type={self.notification_type!r} "
            f"language={self.language!r} channel={self.channel!r}"
        )


class ProviderNotFoundError(ConfigurationError, LookupError):
    def __init__(self, channel: str) -> None:
        self.channel = str(channel)
        super().__init__(f"No provider registered for channel: {self.channel!r}")


class PersistenceError(NotificationError):
    """The notification log rejected a write."""


class DuplicateNotificationError(PersistenceError):
    def __init__(self, notification_id: object) -> None:
        super().__init__(f"Notification {notification_id} already exists")
        self.notification_id = notification_id


class NotificationNotFoundError(PersistenceError, LookupError):
    def __init__(self, notification_id: object) -> None:
        super().__init__(f"Notification {notification_id} not found")
        self.notification_id = notification_id
