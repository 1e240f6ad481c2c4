"""Request and response models for the dispatch API."""

from datetime import datetime
from typing import Any, Self
from uuid import UUID

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from notification_dispatch.enums import (
    Channel,
    Language,
    NotificationStatus,
    NotificationType,
    SUCCESS_STATUSES,
)

_EMAIL_ADAPTER: TypeAdapter[str] = TypeAdapter(EmailStr)


class NotificationRequest(BaseModel):
    """A request to notify one recipient over one channel."""

    to: str = Field(min_length=1)
    channel: Channel
    type: NotificationType
    language: Language = Language.EN
    variables: dict[str, str] = Field(default_factory=dict)
    metadata: dict[str, Any] | None = None

    @field_validator("to")
    @classmethod
    def _strip_recipient(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("recipient must not be blank")
        return value

    @field_validator("language", "variables", mode="before")
    @classmethod
    def _null_means_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return Language.EN if info.field_name == "language" else {}
        return value

    @model_validator(mode="after")
    def _check_email_recipient(self) -> Self:
        if self.channel == Channel.EMAIL:
            try:
                _EMAIL_ADAPTER.validate_python(self.to)
            except ValidationError as exc:
                raise ValueError(
                    "recipient must be a valid email address for the email channel"
                ) from exc
        return self


class NotificationFilter(BaseModel):
    """Optional equality filters for listing notifications."""

    model_config = ConfigDict(extra="ignore")

    status: NotificationStatus | None = None
    channel: Channel | None = None
    type: NotificationType | None = None

    @field_validator("status", "channel", "type", mode="before")
    @classmethod
    def _blank_means_unfiltered(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class NotificationOut(BaseModel):
    """Serialized view of a persisted notification record."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: datetime
    updated_at: datetime
    channel: Channel
    type: NotificationType = Field(
        validation_alias=AliasChoices("notification_type", "type")
    )
    language: Language
    to: str = Field(validation_alias=AliasChoices("recipient", "to"))
    subject: str | None = None
    body: str
    status: NotificationStatus
    attempts: int
    error: str | None = None
    metadata: dict[str, Any] | None = Field(
        default=None, validation_alias=AliasChoices("meta", "metadata")
    )

    @property
    def success(self) -> bool:
        return self.status in SUCCESS_STATUSES
