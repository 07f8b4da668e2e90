"""Configuration management for Teko using Pydantic Settings."""

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_RPC_ENDPOINT = "https://carrot.megaeth.com/rpc"
DEFAULT_BLOCK_EXPLORER_URL = "https://explorer.megaeth.network"


class TekoConfig(BaseSettings):
    """Teko client configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    # Network
    rpc_endpoint: str = Field(default=DEFAULT_RPC_ENDPOINT, alias="TEKO_RPC_ENDPOINT")
    block_explorer_url: str = Field(
        default=DEFAULT_BLOCK_EXPLORER_URL, alias="TEKO_BLOCK_EXPLORER_URL"
    )

    # Wallet
    wallet_private_key: SecretStr | None = Field(default=None, alias="TEKO_WALLET_PRIVATE_KEY")
    wallet_private_key_file: str | None = Field(default=None, alias="TEKO_WALLET_PRIVATE_KEY_FILE")
    account_label: str = Field(default="1", alias="TEKO_ACCOUNT_LABEL")

    # Retry
    max_attempts: int = Field(default=3, alias="TEKO_MAX_ATTEMPTS", gt=0)
    pause_min_seconds: int = Field(default=5, alias="TEKO_PAUSE_MIN_SECONDS", ge=0)
    pause_max_seconds: int = Field(default=10, alias="TEKO_PAUSE_MAX_SECONDS", ge=0)
    provider_init_retries: int = Field(default=3, alias="TEKO_PROVIDER_INIT_RETRIES", gt=0)
    provider_init_delay_seconds: float = Field(
        default=5.0, alias="TEKO_PROVIDER_INIT_DELAY_SECONDS", ge=0
    )

    # Transactions
    fallback_gas_price_gwei: int = Field(default=20, alias="TEKO_FALLBACK_GAS_PRICE_GWEI", gt=0)
    receipt_timeout_seconds: float | None = Field(
        default=None, alias="TEKO_RECEIPT_TIMEOUT_SECONDS", gt=0
    )

    # Observability
    metrics_port: int | None = Field(default=None, alias="TEKO_METRICS_PORT", ge=1, le=65535)
    log_level: str = Field(default="INFO", alias="TEKO_LOG_LEVEL")
    log_format: str = Field(default="text", alias="TEKO_LOG_FORMAT")

    @model_validator(mode="after")
    def _check_pause_range(self) -> "TekoConfig":
        if self.pause_min_seconds > self.pause_max_seconds:
            raise ValueError(
                f"TEKO_PAUSE_MIN_SECONDS ({self.pause_min_seconds}) must not exceed "
                f"TEKO_PAUSE_MAX_SECONDS ({self.pause_max_seconds})"
            )
        return self

    @property
    def pause_range(self) -> tuple[int, int]:
        """Inclusive backoff range in seconds between retry attempts."""
        return (self.pause_min_seconds, self.pause_max_seconds)
