"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Storage credentials are optional at load time; a
missing credential surfaces as ConfigurationError on first storage use.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from blobstore.core.constants import (
    AZURE_MAX_BATCH_SIZE,
    DEFAULT_DELETE_BATCH_SIZE,
    DEPLOYMENT_TARGETS,
)


class Settings(BaseSettings):
    """Settings loaded from environment and .env.

    All settings have defaults. validate_storage checks the deployment
    target and the numeric limits the Azure batch and upload APIs impose.
    """

    # App
    app_name: str = "blobstore"
    app_version: str = "1.0.0"
    debug: bool = False

    # Deployment target: "server" (connection string or container URL) or "browser" (container URL only)
    deployment_target: str = "server"

    # Storage
    blob_storage_connection_string: SecretStr | None = None
    blob_storage_container: str | None = None
    # Container URL including its SAS token.
    blob_storage_url: SecretStr | None = None
    blob_storage_base_path: str = ""

    # Bulk delete: Azure accepts at most 256 sub-requests per batch.
    delete_batch_size: int = DEFAULT_DELETE_BATCH_SIZE

    # Streamed upload
    upload_block_size: int = 4 * 1024 * 1024  # 4MB
    upload_max_concurrency: int = 20

    # Signed download URLs
    download_url_expiry_hours: int = 24
    download_url_clock_skew_minutes: int = 5

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_storage(self) -> "Settings":
        """Validate deployment target and storage limits."""
        if self.deployment_target not in DEPLOYMENT_TARGETS:
            raise ValueError(
                f"Invalid deployment_target '{self.deployment_target}'. "
                f"Must be one of: {', '.join(repr(t) for t in DEPLOYMENT_TARGETS)}"
            )
        if self.delete_batch_size > AZURE_MAX_BATCH_SIZE:
            raise ValueError(
                f"delete_batch_size must not exceed {AZURE_MAX_BATCH_SIZE} "
                "(Azure blob batch limit)."
            )
        if self.upload_block_size <= 0 or self.upload_max_concurrency <= 0:
            raise ValueError(
                "upload_block_size and upload_max_concurrency must be positive."
            )
        if self.download_url_expiry_hours <= 0:
            raise ValueError("download_url_expiry_hours must be positive.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
