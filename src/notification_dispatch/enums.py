from enum import StrEnum


class Channel(StrEnum):
    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"


class NotificationType(StrEnum):
    OTP = "otp"
    ALERT = "alert"
    MARKETING = "marketing"
    RECEIPT = "receipt"


class Language(StrEnum):
    EN = "en"
    ES = "es"


class NotificationStatus(StrEnum):
    PENDING = "pending"
    RETRIED = "retried"
    SENT = "sent"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES: frozenset[NotificationStatus] = frozenset(
    {NotificationStatus.SENT, NotificationStatus.FAILED, NotificationStatus.CANCELLED}
)

# Statuses reported to callers as a successful submission.
SUCCESS_STATUSES: frozenset[NotificationStatus] = frozenset(
    {NotificationStatus.SENT, NotificationStatus.RETRIED}
)
