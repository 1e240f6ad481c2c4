from urllib.parse import quote_plus

from pydantic import Field, SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PostgresConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="POSTGRES_")

    host: str = "localhost"
    port: int = 5432
    database: str = "notifications"
    user: str = "postgres"
    password: str = "postgres"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def dsn(self) -> str:
        return (
            f"postgresql://{quote_plus(self.user)}:{quote_plus(self.password)}"
            f"@{self.host}:{self.port}/{self.database}"
        )


class DeliveryConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DELIVERY_")

    retry_base_delay_seconds: float = Field(default=0.5, ge=0)


class ProviderConfig(BaseSettings):
    """Provider settings, read once at startup.

    Setting ``PROVIDER_RESEND_API_KEY`` switches the email provider from
    simulation to live delivery through the Resend HTTP API.
    """

    model_config = SettingsConfigDict(env_prefix="PROVIDER_")

    resend_api_key: SecretStr | None = None
    resend_api_url: str = "https://api.resend.com/emails"
    email_from: str = "notifications@yourdomain.com"
    timeout_seconds: float = 10.0
    simulated_failure_rate: float = Field(default=0.1, ge=0, le=1)


class ApiConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="NOTIFICATION_API_")

    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
