"""
Centralized configuration for forge-contracts.

Uses Pydantic BaseSettings for environment variable integration
and validation.

Configuration sources (in order of precedence):
1. Explicit constructor arguments
2. Environment variables (FORGE_CONTRACTS_*)
3. .env file
4. Default values

Example:
    from forge_contracts.config import get_config

    config = get_config()
    print(config.schemas_dir)  # From FORGE_CONTRACTS_SCHEMAS_DIR or default

    # Override at runtime
    config = get_config(schemas_dir="contracts/schemas")
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional

from jsonschema.validators import validator_for
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from forge_contracts.types import (
    DEFAULT_BASE_URI,
    DEFAULT_DIALECT,
    DEFAULT_IDENTITY_FIELD,
)


class ForgeContractsConfig(BaseSettings):
    """
    Central configuration for forge-contracts.

    All settings can be overridden via environment variables
    prefixed with FORGE_CONTRACTS_.

    Example:
        export FORGE_CONTRACTS_SCHEMAS_DIR=contracts/schemas
        export FORGE_CONTRACTS_LOG_LEVEL=debug
    """

    model_config = SettingsConfigDict(
        env_prefix="FORGE_CONTRACTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage layout
    schemas_dir: str = Field(
        default="schemas",
        description="Directory holding {name}.{version}.schema.json documents",
    )
    fixtures_dir: str = Field(
        default="fixtures",
        description="Directory holding {name}.{version}.example.json fixtures",
    )

    # Schema identity
    base_uri: str = Field(
        default=DEFAULT_BASE_URI,
        description="Prefix of every schema $id",
    )
    identity_field: str = Field(
        default=DEFAULT_IDENTITY_FIELD,
        min_length=1,
        description="Property carrying the 'name.version' identity constant",
    )

    # Validation
    dialect: str = Field(
        default=DEFAULT_DIALECT,
        description="JSON Schema dialect applied to every document",
    )

    # Logging
    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="warning",
        description="Logging level for the CLI",
    )

    @field_validator("schemas_dir", "fixtures_dir")
    @classmethod
    def expand_path(cls, v: str) -> str:
        """Expand ~ and environment variables in paths."""
        return os.path.expanduser(os.path.expandvars(v))

    @field_validator("base_uri")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        """Schema ids are built as base_uri + file name."""
        return v if v.endswith("/") else v + "/"

    @field_validator("dialect")
    @classmethod
    def validate_dialect(cls, v: str) -> str:
        """Reject dialects jsonschema has no validator for."""
        if validator_for({"$schema": v}, default=None) is None:
            raise ValueError(f"Unsupported JSON Schema dialect: {v}")
        return v

    def get_schemas_path(self) -> Path:
        return Path(self.schemas_dir)

    def get_fixtures_path(self) -> Path:
        return Path(self.fixtures_dir)


# Global singleton
_config: Optional[ForgeContractsConfig] = None


def get_config(**overrides) -> ForgeContractsConfig:
    """
    Get the global configuration instance.

    Creates a singleton on first call. Subsequent calls return
    the same instance unless overrides are provided.

    Args:
        **overrides: Override any config values

    Returns:
        ForgeContractsConfig instance
    """
    global _config

    if overrides or _config is None:
        _config = ForgeContractsConfig(**overrides)

    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
