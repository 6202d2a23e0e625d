"""
Configuration management using pydantic-settings.

Hierarchical configuration with environment variable support.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ElectricityMapsSettings(BaseSettings):
    """Electricity Maps carbon-intensity API settings."""

    model_config = SettingsConfigDict(env_prefix="ELECTRICITYMAPS_")

    api_key: str = Field(default="", description="auth-token for the API; empty disables live data")
    base_url: str = Field(default="https://api.electricitymaps.com/v3")
    timeout_seconds: float = Field(default=10.0, ge=0.1)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


class DeploySettings(BaseSettings):
    """Cluster deployment settings."""

    model_config = SettingsConfigDict(env_prefix="DEPLOY_")

    enabled: bool = Field(default=False, description="Run kubectl apply; dry-run when false")
    kubectl_context: str | None = Field(default=None)
    kubectl_binary: str = Field(default="kubectl")
    timeout_seconds: float = Field(default=120.0, ge=1.0)

    # Footprint estimation
    power_kw_per_replica: float = Field(default=0.1, gt=0.0)
    fallback_carbon_intensity: float = Field(default=500.0, gt=0.0)
    fallback_cost_per_replica: float = Field(default=0.25, gt=0.0)


class CurrencySettings(BaseSettings):
    """Currency conversion used for cost estimates."""

    model_config = SettingsConfigDict(env_prefix="CURRENCY_")

    usd_to_inr: float = Field(default=85.0, gt=0.0)


class ManifestSettings(BaseSettings):
    """Kubernetes manifest generation settings."""

    model_config = SettingsConfigDict(env_prefix="MANIFEST_")

    namespace: str = Field(default="greenops-app")
    image_registry: str = Field(default="your-docker-username")
    container_port: int = Field(default=4000, ge=1, le=65535)
    service_port: int = Field(default=80, ge=1, le=65535)


class AppSettings(BaseSettings):
    """Application-level settings."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: Literal["development", "staging", "production"] = Field(default="development")
    debug: bool = Field(default=True)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "console"] = Field(default="json")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=4000, ge=1, le=65535)

    # Nested settings
    electricity_maps: ElectricityMapsSettings = Field(default_factory=ElectricityMapsSettings)
    deploy: DeploySettings = Field(default_factory=DeploySettings)
    currency: CurrencySettings = Field(default_factory=CurrencySettings)
    manifest: ManifestSettings = Field(default_factory=ManifestSettings)

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def is_development(self) -> bool:
        return self.env == "development"


@lru_cache
def get_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings()
