"""Configuration management for accelerator hotplug."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SysfsConfig(BaseModel):
    """sysfs location configuration."""

    devices_root: Path = Field(
        default=Path("/sys/bus/pci/devices"), description="PCI bus devices directory"
    )


class DeviceConfig(BaseModel):
    """Function numbers of the accelerator's physical functions."""

    management_function: int = Field(default=0, ge=0, le=7, description="Management PF number")
    user_function: int = Field(default=1, ge=0, le=7, description="User PF number")

    @model_validator(mode="after")
    def check_distinct(self) -> DeviceConfig:
        if self.management_function == self.user_function:
            raise ValueError("management_function and user_function must differ")
        return self


class MetricsConfig(BaseModel):
    """Metrics export configuration."""

    textfile_path: Path | None = Field(
        default=None, description="Prometheus textfile collector output path"
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="console", description="Log format")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="accel_hotplug", description="Service name for tracing")


class Config(BaseSettings):
    """Main configuration for accelerator hotplug."""

    model_config = SettingsConfigDict(
        env_prefix="ACCEL_HOTPLUG_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    sysfs: SysfsConfig = Field(default_factory=SysfsConfig)
    device: DeviceConfig = Field(default_factory=DeviceConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
