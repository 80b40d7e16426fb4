"""
Shared configuration management for the Feature Proxy.
"""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_token_list(value: Optional[str]) -> List[str]:
    """Split a comma-separated token string, keeping configured order."""
    if not value:
        return []
    return [token.strip() for token in value.split(",") if token.strip()]


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PROXY_",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")


class ProxyConfig(BaseConfig):
    """Proxy service configuration.

    Token lists are read from the environment as comma-separated strings,
    e.g. ``PROXY_CLIENT_KEYS="proxy-secret, another-secret"``.
    """

    service_name: str
    port: int
    host: str = "0.0.0.0"

    # Authorization
    client_keys: str = Field(default="")
    server_side_tokens: str = Field(default="")
    client_keys_header_name: str = Field(default="authorization")

    # Routing and responses
    proxy_base_path: str = Field(default="/proxy")
    cache_max_age_seconds: int = Field(default=2)

    # Evaluation client
    bootstrap_file: Optional[str] = Field(default=None)

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)

    @property
    def client_key_list(self) -> List[str]:
        return parse_token_list(self.client_keys)

    @property
    def server_side_token_list(self) -> List[str]:
        return parse_token_list(self.server_side_tokens)


def get_config(service_name: str, port: int, **overrides) -> ProxyConfig:
    """Get configuration for a specific service."""
    return ProxyConfig(service_name=service_name, port=port, **overrides)
