"""Configuration management for the Azure MCP Gateway.

Supports an optional YAML configuration file with environment variable
overrides. Configuration is loaded once and cached.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AzureSettings(BaseSettings):
    """Service principal and subscription used by the Azure provider."""
    tenant_id: Optional[str] = Field(default=None)
    client_id: Optional[str] = Field(default=None)
    client_secret: Optional[str] = Field(default=None)
    subscription_id: Optional[str] = Field(default=None)

    model_config = SettingsConfigDict(
        env_prefix="AZURE_",
        env_file=".env",
        extra="ignore"
    )


class GatewaySettings(BaseSettings):
    """HTTP gateway configuration."""
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8001)

    catalog: Literal["full", "status"] = Field(
        default="full", description="Tool catalog variant to expose"
    )
    provider: Literal["azure", "memory"] = Field(
        default="azure", description="Cloud capability provider binding"
    )

    # CORS
    open_access: bool = Field(default=False)
    allowed_origins: list[str] = Field(default_factory=lambda: ["https://claude.ai"])

    # Execution
    call_timeout_seconds: float = Field(default=30.0, gt=0)
    validate_arguments: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="GATEWAY_",
        env_file=".env",
        extra="ignore"
    )


class Settings(BaseSettings):
    """Main application settings."""
    environment: str = Field(default="development")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    gateway: GatewaySettings = Field(default_factory=GatewaySettings)
    azure: AzureSettings = Field(default_factory=AzureSettings)

    model_config = SettingsConfigDict(
        env_prefix="MCP_",
        env_file=".env",
        extra="ignore"
    )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """
        Load settings from a YAML file, falling back to defaults.

        Environment variables (and ``.env``) take precedence over the file,
        section by section.
        """
        data = load_yaml_config(path)
        data["gateway"] = with_env_overrides(GatewaySettings, data.get("gateway") or {})
        data["azure"] = with_env_overrides(AzureSettings, data.get("azure") or {})
        return cls(**with_env_overrides(cls, data))


def with_env_overrides(settings_cls: type[BaseSettings], data: dict[str, Any]) -> dict[str, Any]:
    """Overlay the values ``settings_cls`` reads from its env sources onto ``data``."""
    from_env = settings_cls().model_dump(exclude_unset=True)
    return {**data, **from_env}


def load_yaml_config(path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file."""
    path = Path(path)
    if not path.exists():
        return {}

    with open(path) as f:
        return yaml.safe_load(f) or {}


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    config_path = os.environ.get("MCP_CONFIG_PATH", "config/settings.yaml")
    return Settings.from_yaml(config_path)
