"""Configuration management for dreamdns."""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dreamdns.errors import ConfigInvalid, ConfigMissing, SecretMissing

API_KEY_VAR = "DREAMHOST_API_KEY"

DEFAULT_IP_SERVICES = [
    "https://checkip.amazonaws.com",
    "https://owljet.com/ip",
    "https://api.ipify.org",
]


class DreamDNSConfig(BaseModel):
    """Tunables read from dreamdns.yaml. Every field has a default."""

    api_url: str = "https://api.dreamhost.com/"
    domains_file: str = "domains.csv"
    snapshot_file: str = "dns.yaml"
    final_snapshot_file: str = "dns_final.yaml"
    call_delay: float = Field(default=1.0, ge=0)  # Seconds between provider calls
    request_timeout: float = Field(default=30.0, gt=0)
    ip_services: list[str] = Field(default_factory=lambda: list(DEFAULT_IP_SERVICES))
    ip_connect_timeout: float = Field(default=5.0, gt=0)
    ip_timeout: float = Field(default=10.0, gt=0)

    @field_validator("ip_services")
    @classmethod
    def require_ip_services(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("at least one IP service is required")
        return v


class EnvironmentSettings(BaseSettings):
    """Secrets from the environment and the .env file."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    dreamhost_api_key: str | None = None


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find dreamdns.yaml in current or parent directories."""
    search_path = start_path or Path.cwd()

    for path in [search_path, *search_path.parents]:
        config_file = path / "dreamdns.yaml"
        if config_file.exists():
            return config_file
        config_file = path / "dreamdns.yml"
        if config_file.exists():
            return config_file

    return None


def load_config(config_path: Path | None = None) -> DreamDNSConfig:
    """Load configuration from YAML, falling back to defaults when there is none.

    Raises:
        ConfigInvalid: If the file is not valid YAML or has invalid settings
    """
    if config_path is None:
        config_path = find_config_file()

    if config_path is None or not config_path.exists():
        return DreamDNSConfig()

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigInvalid(config_path, str(e)) from e

    if not isinstance(data, dict):
        raise ConfigInvalid(config_path, "expected a mapping of settings")

    try:
        return DreamDNSConfig(**data)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigInvalid(config_path, errors) from e


def get_project_root() -> Path:
    """Get the project root directory (where dreamdns.yaml is located)."""
    config_file = find_config_file()
    if config_file:
        return config_file.parent
    return Path.cwd()


def resolve_path(value: str | Path, root: Path | None = None) -> Path:
    """Resolve a configured path relative to the project root."""
    path = Path(value).expanduser()
    if path.is_absolute():
        return path
    return (root or get_project_root()) / path


def load_env_settings(env_file: Path | None = None) -> EnvironmentSettings:
    """Load secrets from .env and environment variables.

    Raises:
        ConfigMissing: If the .env file is absent and the key is not exported
    """
    env_path = env_file or resolve_path(".env")

    if env_path.is_file():
        return EnvironmentSettings(_env_file=env_path)
    if API_KEY_VAR in os.environ:
        return EnvironmentSettings(_env_file=None)
    raise ConfigMissing(env_path)


def require_api_key(settings: EnvironmentSettings) -> str:
    """Return the API key, or raise SecretMissing if it is unset or blank."""
    key = (settings.dreamhost_api_key or "").strip()
    if not key:
        raise SecretMissing(API_KEY_VAR)
    return key


def dump_yaml(data, stream=None) -> str | None:
    """Dump data to YAML in block style, keeping key order."""
    return yaml.safe_dump(data, stream=stream, default_flow_style=False, sort_keys=False)
