"""Configuration loading, validation, and access."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, field_validator

from unified_price.core.exceptions import ConfigError


class HttpConfig(BaseModel):
    """Outbound HTTP settings shared by every source."""

    model_config = ConfigDict(frozen=True)

    timeout: float = 15.0
    user_agent: str = "Mozilla/5.0"

    @field_validator("timeout")
    @classmethod
    def timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be > 0")
        return v


class SourcesConfig(BaseModel):
    """Base URLs of the upstream price sources."""

    model_config = ConfigDict(frozen=True)

    equity_base_url: str = "https://query1.finance.yahoo.com"
    fund_estimate_base_url: str = "https://fundgz.1234567.com.cn"
    fund_history_base_url: str = "https://fund.eastmoney.com"
    crypto_base_url: str = "https://api.coingecko.com"
    fx_base_url: str = "https://open.er-api.com"

    @field_validator(
        "equity_base_url",
        "fund_estimate_base_url",
        "fund_history_base_url",
        "crypto_base_url",
        "fx_base_url",
    )
    @classmethod
    def http_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base URL must start with http:// or https://, got {v!r}")
        return v.rstrip("/")


class APIConfig(BaseModel):
    """FastAPI server configuration."""

    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = 8000
    api_key: str | None = None


class ResolverConfig(BaseModel):
    """Root configuration for unified-price."""

    model_config = ConfigDict(frozen=True)

    http: HttpConfig = HttpConfig()
    sources: SourcesConfig = SourcesConfig()
    api: APIConfig = APIConfig()


def load_config(
    config_path: str | None = None,
    env_prefix: str = "UNIFIED_PRICE_",
) -> ResolverConfig:
    """Load configuration from environment + YAML file + defaults.

    Resolution order (highest priority first):
    1. Environment variables (UNIFIED_PRICE_HTTP__TIMEOUT, etc.)
    2. YAML file at config_path
    3. Built-in defaults

    Nested keys use double-underscore in env vars:
        UNIFIED_PRICE_API__PORT=9000  ->  api.port = 9000
    """
    try:
        yaml_path = _resolve_config_path(config_path)
        base: dict = {}
        if yaml_path is not None:
            base = _load_yaml(yaml_path)

        merged = _merge_env_vars(base, env_prefix)
        return ResolverConfig.model_validate(merged)
    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(str(e), context={"source": "load_config"}) from e


def _resolve_config_path(explicit: str | None) -> Path | None:
    """Determine config file path."""
    if explicit is not None:
        p = Path(explicit)
        if not p.exists():
            raise ConfigError(
                f"Config file not found: {explicit}",
                context={"field": "config_path", "value": explicit},
            )
        return p

    env_path = os.environ.get("UNIFIED_PRICE_CONFIG")
    if env_path:
        p = Path(env_path)
        if not p.exists():
            raise ConfigError(
                f"Config file from UNIFIED_PRICE_CONFIG not found: {env_path}",
                context={"field": "UNIFIED_PRICE_CONFIG", "value": env_path},
            )
        return p

    default = Path("unified-price.yml")
    if default.exists():
        return default

    return None


def _load_yaml(path: Path) -> dict:
    """Load and parse YAML file."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"YAML config must be a mapping, got {type(data).__name__}",
                context={"field": "config_file", "value": str(path)},
            )
        return data
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Failed to parse YAML config: {e}",
            context={"field": "config_file", "value": str(path)},
        ) from e


def _merge_env_vars(base: dict, prefix: str) -> dict:
    """Overlay environment variables onto base config dict.

    Double-underscore separates nesting levels. Values are auto-cast.
    """
    result = dict(base)

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        remainder = key[len(prefix) :]
        parts = [p.lower() for p in remainder.split("__")]

        if parts == ["config"]:
            continue

        cast_value = _auto_cast(value)

        target = result
        for part in parts[:-1]:
            if not isinstance(target.get(part), dict):
                target[part] = {}
            else:
                target[part] = dict(target[part])
            target = target[part]
        target[parts[-1]] = cast_value

    return result


def _auto_cast(value: str) -> str | int | float | bool:
    """Auto-cast string values from environment variables."""
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value
