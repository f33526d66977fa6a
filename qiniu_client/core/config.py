"""Client configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from ``QINIU_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="QINIU_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Credentials
    access_key: str = Field(default="", description="Qiniu access key")
    secret_key: str = Field(default="", description="Qiniu secret key")

    # Transport settings
    use_https: bool = Field(default=False, description="Use HTTPS endpoints and URLs by default")
    connect_timeout: float = Field(default=10.0, gt=0, description="Connect timeout in seconds")
    read_timeout: float = Field(default=30.0, gt=0, description="Read timeout in seconds")

    # Batch and listing limits
    batch_max_size: int = Field(
        default=1000,
        ge=1,
        le=1000,
        description="Maximum number of operations sent in one batch request",
    )
    list_page_size: int = Field(
        default=1000,
        ge=1,
        le=1000,
        description="Number of items requested per list page",
    )

    # URL settings
    default_url_lifetime: int = Field(
        default=3600,
        ge=1,
        description="Lifetime in seconds of signed URLs when no expiry is given",
    )

    # Service hosts
    default_region: str = Field(default="z0", description="Region for buckets without a zone")
    uc_host: str = Field(default="uc.qbox.me", description="Bucket configuration service host")
    pili_host: str = Field(default="pili.qiniuapi.com", description="Streaming hub service host")

    @computed_field
    @property
    def uc_url(self) -> str:
        """Bucket configuration service base URL."""
        return self.service_url(self.uc_host)

    @computed_field
    @property
    def pili_url(self) -> str:
        """Streaming hub service base URL."""
        return self.service_url(self.pili_host)

    @property
    def credentials_configured(self) -> bool:
        """Check if both keys are set."""
        return bool(self.access_key and self.secret_key)

    def service_url(self, host: str, https: bool | None = None) -> str:
        """Build a base URL for a fixed service host."""
        if https is None:
            https = self.use_https
        return f"{'https' if https else 'http'}://{host}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def reset_settings() -> None:
    """Reset cached settings (useful for testing)."""
    get_settings.cache_clear()
