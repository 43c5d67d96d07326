"""Service settings, read from the environment and an optional .env file.

Names map to upper-case environment variables (``database_backend`` is
DATABASE_BACKEND). The connection settings of the selected credential
store and SECRET_KEY are checked when settings are first loaded.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: str = "onetime-access"
    app_version: str = "1.0.0"
    debug: bool = False

    # Credential store
    database_backend: Literal["firestore", "postgres"] = "firestore"
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None
    firestore_timeout_seconds: float = Field(default=30.0, gt=0)

    # Admin bearer tokens
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = Field(default=480, gt=0)
    admin_role: str = "admin"
    admin_emails: str = ""  # comma-separated

    # HTTP
    allowed_origins: str = "http://localhost:3000"  # comma-separated
    request_timeout_seconds: int = Field(default=30, gt=0)
    request_id_header: str = "X-Request-ID"
    login_rate_limit: str = "10/minute"
    validate_rate_limit: str = "120/minute"
    admin_write_rate_limit: str = "60/minute"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: Literal["console", "otlp", "none"] = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = Field(default=1.0, ge=0.0, le=1.0)
    telemetry_environment: str = "development"

    @property
    def admin_email_list(self) -> list[str]:
        """ADMIN_EMAILS lower-cased, blanks dropped."""
        return [e.strip().lower() for e in self.admin_emails.split(",") if e.strip()]

    @property
    def allowed_origin_list(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @model_validator(mode="after")
    def _check_store_and_secret(self) -> "Settings":
        if self.database_backend == "postgres" and not self.database_url:
            raise ValueError("DATABASE_URL is required when DATABASE_BACKEND=postgres")
        if self.database_backend == "firestore":
            key = self.firebase_service_account_key
            if not (key and key.get_secret_value()) and not self.firebase_service_account_path:
                raise ValueError(
                    "DATABASE_BACKEND=firestore needs FIREBASE_SERVICE_ACCOUNT_KEY "
                    "(JSON string) or FIREBASE_SERVICE_ACCOUNT_PATH (JSON file)"
                )
        if not self.secret_key.get_secret_value():
            raise ValueError("SECRET_KEY is required (e.g. openssl rand -hex 32)")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, validated on first call.

    Tests that change environment variables call ``get_settings.cache_clear()``.
    """
    return Settings()
