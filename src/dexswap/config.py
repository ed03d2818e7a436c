"""Application configuration using pydantic-settings.

Only the pipeline factory reads settings. The core components take
explicit constructor arguments, and the chain id is fixed once the
pipeline is built.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug logging")

    # ======================
    # Network
    # ======================
    chain_id: int = Field(default=1, description="EVM chain id the pipeline is bound to")
    rpc_url: str = Field(
        default="https://eth.llamarpc.com", description="JSON-RPC URL for the local signer"
    )

    # ======================
    # Aggregator
    # ======================
    paraswap_api_url: str = Field(
        default="https://api.paraswap.io", description="ParaSwap API URL"
    )
    paraswap_api_version: str = Field(default="6.2", description="ParaSwap route version")
    paraswap_api_key: Optional[str] = Field(default=None, description="ParaSwap API key")
    partner: str = Field(default="dexswap", description="Partner tag sent to the aggregator")
    request_timeout: Optional[float] = Field(
        default=30.0, description="Aggregator request timeout in seconds (None = no timeout)"
    )

    # ======================
    # Quotes
    # ======================
    quote_ttl_seconds: int = Field(default=60, ge=1, description="Quote validity period")
    slippage_bps: Optional[int] = Field(
        default=None,
        ge=0,
        le=10000,
        description="Slippage in basis points sent instead of the exact destAmount",
    )
    ignore_checks: bool = Field(
        default=False, description="Skip aggregator balance/allowance checks on build"
    )

    # ======================
    # Local signer
    # ======================
    signer_private_key: Optional[str] = Field(
        default=None, description="Hot wallet key for scripted swaps"
    )

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "chain_id": self.chain_id,
            "rpc_url": self.rpc_url,
            "aggregator": {
                "url": self.paraswap_api_url,
                "version": self.paraswap_api_version,
                "api_key": "***" if self.paraswap_api_key else "(not set)",
                "partner": self.partner,
                "timeout": self.request_timeout,
            },
            "quotes": {
                "ttl_seconds": self.quote_ttl_seconds,
                "slippage_bps": self.slippage_bps,
                "ignore_checks": self.ignore_checks,
            },
            "signer_key": "***" if self.signer_private_key else "(not set)",
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
