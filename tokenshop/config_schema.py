"""Pydantic schema for configuration validation.

All config values are validated at startup. Typos and invalid values
fail fast with clear error messages.

Usage:
    from tokenshop.config_schema import load_validated_config, AppConfig
    config = load_validated_config("config/config.yaml")
    # config is now a validated AppConfig instance
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =============================================================================
# BASE MODEL WITH STRICT VALIDATION
# =============================================================================

class StrictModel(BaseModel):
    """Base model that rejects unknown fields (catches typos)."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# TOKEN MODEL
# =============================================================================

class TokenConfig(StrictModel):
    """Token metadata and numeric range."""

    name: str = Field(default="Shop Token", min_length=1, description="Display name")
    symbol: str = Field(default="SHOP", min_length=1, description="Ticker symbol")
    decimals: Literal[0] = Field(
        default=0,
        description="Subunits per whole token (always 0: whole units only)"
    )
    max_amount: int = Field(
        default=2**256 - 1,
        gt=0,
        description="Largest representable balance, supply or cost"
    )


# =============================================================================
# GENESIS MODEL
# =============================================================================

class GenesisItem(StrictModel):
    """An item added by the administrator when the shop is created."""

    name: str = Field(description="Item display name")
    cost: int = Field(ge=0, description="Redemption cost in whole tokens")


class GenesisConfig(StrictModel):
    """Initial state applied through regular administrator operations."""

    balances: dict[str, int] = Field(
        default_factory=dict,
        description="Account -> amount minted at creation"
    )
    items: list[GenesisItem] = Field(
        default_factory=list,
        description="Items added at creation, in order"
    )

    @field_validator("balances")
    @classmethod
    def balances_positive(cls, v: dict[str, int]) -> dict[str, int]:
        """Genesis mints follow mint rules: amounts must be positive."""
        for account, amount in v.items():
            if not account:
                raise ValueError("genesis account ids must be non-empty")
            if amount <= 0:
                raise ValueError(f"genesis balance for '{account}' must be positive, got {amount}")
        return v


# =============================================================================
# LOGGING MODEL
# =============================================================================

class LoggingConfig(StrictModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Python logging level for the CLI"
    )
    events_file: str | None = Field(
        default=None,
        description="JSONL file for event records (None = memory only)"
    )
    default_recent: int = Field(
        default=50,
        gt=0,
        description="Default number of recent events to return"
    )
    memory_window: int = Field(
        default=10000,
        gt=0,
        description="Event records kept in memory when events_file is unset"
    )


# =============================================================================
# ROOT MODEL
# =============================================================================

class AppConfig(StrictModel):
    """Root configuration model."""

    administrator: str = Field(
        default="admin",
        min_length=1,
        description="Account allowed to mint and manage items"
    )
    token: TokenConfig = Field(default_factory=TokenConfig)
    genesis: GenesisConfig = Field(default_factory=GenesisConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def genesis_within_range(self) -> "AppConfig":
        """Genesis supply and costs must fit in token.max_amount."""
        limit = self.token.max_amount
        if sum(self.genesis.balances.values()) > limit:
            raise ValueError(f"genesis balances exceed token.max_amount ({limit})")
        for item in self.genesis.items:
            if item.cost > limit:
                raise ValueError(f"genesis item '{item.name}' cost exceeds token.max_amount ({limit})")
        return self


def load_validated_config(config_path: str | Path = "config/config.yaml") -> AppConfig:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to config YAML file.

    Returns:
        Validated AppConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid (with detailed error message).
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw_config = yaml.safe_load(f) or {}

    return AppConfig.model_validate(raw_config)


def validate_config_dict(config_dict: dict[str, Any]) -> AppConfig:
    """Validate a configuration dictionary.

    Raises:
        pydantic.ValidationError: If config is invalid.
    """
    return AppConfig.model_validate(config_dict)


__all__ = [
    "AppConfig",
    "TokenConfig",
    "GenesisConfig",
    "GenesisItem",
    "LoggingConfig",
    "StrictModel",
    "load_validated_config",
    "validate_config_dict",
]
