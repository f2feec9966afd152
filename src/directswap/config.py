"""Application configuration using pydantic-settings.

One swap intent per run: the wallet phrase, endpoints and swap parameters are
read from environment variables (or a .env file) and frozen for the lifetime
of the pipeline.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Swap settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # ======================
    # Wallet
    # ======================
    wallet_seed_phrase: Optional[str] = Field(
        default=None, description="BIP39 12/24 word recovery phrase of the signing wallet"
    )
    derivation_index: int = Field(
        default=0, ge=0, description="Address index on m/44'/60'/0'/0/index"
    )

    # ======================
    # Endpoints
    # ======================
    rpc_url: str = Field(
        default="https://bsc-dataseed1.binance.org/", description="Blockchain JSON-RPC URL"
    )
    api_url: str = Field(
        default="https://trade.orion.xyz/bsc-mainnet", description="Trading backend base URL"
    )
    http_timeout: float = Field(default=30.0, gt=0, description="Backend request timeout (seconds)")

    # ======================
    # Swap intent
    # ======================
    amount_in: Decimal = Field(default=Decimal("0.1"), description="Amount of asset_in to swap")
    asset_in: str = Field(default="USDT", description="Symbol of the asset to sell")
    asset_in_decimals: int = Field(
        default=18, ge=0, description="Native decimals of asset_in (used for the approval)"
    )
    asset_out: str = Field(default="ORN", description="Symbol of the asset to buy")
    slippage_tolerance: Decimal = Field(
        default=Decimal("0.99"),
        description="Fraction of the quoted output accepted as minimum return (0 < x <= 1)",
    )
    decimals: int = Field(
        default=8, ge=0, description="Protocol-wide fixed-point precision of swap amounts"
    )

    # ======================
    # Transactions
    # ======================
    swap_gas_limit: int = Field(
        default=600000, gt=0, description="Gas limit for swaps through the pools"
    )
    approval_gas_limit: int = Field(
        default=100000, gt=0, description="Gas limit for the ERC20 approval"
    )
    wait_for_approval: bool = Field(
        default=False, description="Wait for the approval to be mined before swapping"
    )
    confirmation_timeout: float = Field(
        default=300.0, ge=0, description="Seconds to wait for inclusion (0 = wait forever)"
    )
    poll_interval: float = Field(default=2.0, gt=0, description="Receipt polling interval")

    # ======================
    # Environment
    # ======================
    debug: bool = Field(default=False, description="Enable debug logging")

    @field_validator("slippage_tolerance")
    @classmethod
    def _check_slippage(cls, value: Decimal) -> Decimal:
        if value <= 0 or value > 1:
            raise ValueError("slippage_tolerance must be in (0, 1]")
        return value

    @field_validator("asset_in", "asset_out")
    @classmethod
    def _upper_symbol(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def has_wallet(self) -> bool:
        """Check if wallet seed phrase is configured."""
        return bool(self.wallet_seed_phrase and len(self.wallet_seed_phrase.split()) >= 12)

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "wallet_configured": self.has_wallet,
            "derivation_index": self.derivation_index,
            "rpc_url": self.rpc_url,
            "api_url": self.api_url,
            "swap": {
                "amount_in": str(self.amount_in),
                "asset_in": self.asset_in,
                "asset_in_decimals": self.asset_in_decimals,
                "asset_out": self.asset_out,
                "slippage_tolerance": str(self.slippage_tolerance),
                "decimals": self.decimals,
            },
            "gas": {
                "swap_gas_limit": self.swap_gas_limit,
                "approval_gas_limit": self.approval_gas_limit,
            },
            "wait_for_approval": self.wait_for_approval,
            "confirmation_timeout": self.confirmation_timeout,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
