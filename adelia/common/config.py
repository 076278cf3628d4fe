"""
Configuration management for Adelia.

Supports loading from YAML files and environment variables.
Settings cover the creative build pipeline (storage, upload, tracking,
embed snippets) and the HTTP service that fronts it.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, get_origin

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from adelia.common.exceptions import ConfigError


# ---------------------------------------------------------------------------
# Infrastructure
# ---------------------------------------------------------------------------

class ServerSettings(BaseSettings):
    """Uvicorn / HTTP server configuration."""

    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1
    reload: bool = False
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class StorageSettings(BaseSettings):
    """Local asset storage served under /media."""

    root_dir: str = "./media"
    public_base_url: str = "http://localhost:8000/media"


class UploadSettings(BaseSettings):
    """Upload collaborator configuration."""

    backend: Literal["local", "http"] = "local"

    # Base URL of the remote storage service (http backend only)
    endpoint: str = ""
    timeout_seconds: float = 30.0

    # Each upload is attempted this many times before the build aborts
    max_attempts: int = 3
    retry_delay_seconds: float = 0.2


# ---------------------------------------------------------------------------
# Creative pipeline
# ---------------------------------------------------------------------------

class TrackingSettings(BaseSettings):
    """Tracking script injected into hosted renderings."""

    enabled: bool = True
    endpoint: str = "http://localhost:8000/api/track"


class EmbedSettings(BaseSettings):
    """Publisher loader snippet configuration."""

    # Ad-server macro substituted with the outer click redirect at serve time
    click_macro: str = "%%CLICK_URL_UNESC%%"
    click_param: str = "clickTag"

    # Query parameter carrying the container id into the creative frame
    container_param: str = "adeliaContainer"
    container_prefix: str = "ad_container_"


class RuntimeSettings(BaseSettings):
    """Host-side runtime timings baked into loader snippets."""

    unlock_remove_delay_ms: int = 2000
    fade_out_ms: int = 500


class ManifestSettings(BaseSettings):
    """Archive manifest configuration."""

    version: str = "1.0.0"


# ---------------------------------------------------------------------------
# Observability
# ---------------------------------------------------------------------------

class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: str = "INFO"
    format: Literal["json", "console"] = "json"
    max_value_length: int = Field(500, ge=16, description="Longer string fields are cut in log output")
    quiet_loggers: list[str] = Field(default_factory=lambda: ["httpx", "httpcore", "uvicorn.access"])


class MonitoringSettings(BaseSettings):
    """Prometheus / monitoring configuration."""

    enabled: bool = True


# ---------------------------------------------------------------------------
# Root Settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="ADELIA_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Application
    app_name: str = "Adelia"
    app_version: str = "0.3.0"
    debug: bool = False
    env: Literal["dev", "prod", "test"] = "dev"

    # Nested settings
    server: ServerSettings = Field(default_factory=ServerSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    upload: UploadSettings = Field(default_factory=UploadSettings)
    tracking: TrackingSettings = Field(default_factory=TrackingSettings)
    embed: EmbedSettings = Field(default_factory=EmbedSettings)
    runtime: RuntimeSettings = Field(default_factory=RuntimeSettings)
    manifest: ManifestSettings = Field(default_factory=ManifestSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        if v not in ("dev", "prod", "test"):
            raise ValueError(f"Invalid environment: {v}")
        return v


# ---------------------------------------------------------------------------
# YAML Loader
# ---------------------------------------------------------------------------

def load_yaml_config(config_path: Path) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}
    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}", {"path": str(config_path)}) from e
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping", {"path": str(config_path)})
    return data


def merge_configs(base: dict, override: dict) -> dict:
    """Deep-merge two configuration dictionaries."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result


_SECTION_CLASSES: dict[str, type[BaseSettings]] = {
    "server": ServerSettings,
    "storage": StorageSettings,
    "upload": UploadSettings,
    "tracking": TrackingSettings,
    "embed": EmbedSettings,
    "runtime": RuntimeSettings,
    "manifest": ManifestSettings,
    "logging": LoggingSettings,
    "monitoring": MonitoringSettings,
}


def _coerce_env_value(settings_cls: type[BaseSettings], field_name: str, value: str) -> object:
    """List fields take comma-separated values from the environment."""
    field = settings_cls.model_fields.get(field_name)
    if field is not None and get_origin(field.annotation) is list:
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings.

    Loads from:
    1. configs/base.yaml (base configuration)
    2. configs/{env}.yaml (environment-specific overrides)
    3. Environment variables (highest priority)
    """
    import os

    env = os.getenv("ADELIA_ENV", "dev")

    config_dir = Path(__file__).parent.parent.parent / "configs"

    base_config = load_yaml_config(config_dir / "base.yaml")
    env_config = load_yaml_config(config_dir / f"{env}.yaml")
    merged = merge_configs(base_config, env_config)

    flat_config: dict = {}
    if "app" in merged:
        flat_config["app_name"] = merged["app"].get("name", "Adelia")
        flat_config["app_version"] = str(merged["app"].get("version", "0.3.0"))
        flat_config["debug"] = merged["app"].get("debug", False)

    flat_config["env"] = env

    # pydantic-settings gives init kwargs priority over env vars, so
    # ADELIA_SECTION__FIELD overrides are merged into the YAML dict first.
    for section_key, settings_cls in _SECTION_CLASSES.items():
        section_data = dict(merged.get(section_key, {}))

        prefix = f"ADELIA_{section_key.upper()}__"
        for env_key, env_value in os.environ.items():
            if env_key.startswith(prefix):
                field_name = env_key[len(prefix):].lower()
                section_data[field_name] = _coerce_env_value(settings_cls, field_name, env_value)

        flat_config[section_key] = settings_cls(**section_data)

    return Settings(**flat_config)


# Convenience alias
settings = get_settings()
