"""Configuration management for stdb-console.

Handles TOML config files, environment variables, named profiles,
the saved session and configuration precedence resolution.

Precedence order (highest to lowest):
1. CLI flags (--url, --host, --port, --database, --token, --timeout)
2. Environment variables (STDB_URL, STDB_HOST, STDB_PORT, STDB_DATABASE, STDB_TOKEN)
3. Named profile (--profile or STDB_PROFILE env var)
4. Saved session (written by `stdb-console connect`)
5. default_profile from the config file
6. Config file defaults
7. Built-in defaults

A layer that supplies a URL drops host/port inherited from lower layers;
a layer that supplies a host drops an inherited URL.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, field_validator

from stdb_console.core.exceptions import ConfigError

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "stdb-console"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.toml"

_ENV_VARS: dict[str, str] = {
    "STDB_URL": "url",
    "STDB_HOST": "host",
    "STDB_PORT": "port",
    "STDB_DATABASE": "database",
    "STDB_TOKEN": "token",  # pragma: allowlist secret
}

_CONNECTION_FIELDS = ("url", "host", "port", "database", "token", "timeout")

_LOCAL_PREFIXES = ("192.168.", "10.", "172.")

_DEFAULT_TIMEOUT = 30.0
_DEFAULT_FORMAT = "table"
_FORMATS = ("table", "json", "csv")


def is_local_host(host: str) -> bool:
    """Hosts on loopback or private ranges are reached over plain http."""
    if "localhost" in host or "127.0.0.1" in host:
        return True
    return host.startswith(_LOCAL_PREFIXES)


def build_base_url(
    url: str | None = None, host: str | None = None, port: int | None = None
) -> str:
    """Build the API base URL from either a full URL or a host/port pair.

    A URL wins when both are given. Local hosts get http, anything else https.
    """
    if url:
        return url[:-1] if url.endswith("/") else url
    if host and port:
        scheme = "http" if is_local_host(host) else "https"
        return f"{scheme}://{host}:{port}"
    msg = "Either url or both host and port must be provided"
    raise ConfigError(msg)


class ConnectionProfile(BaseModel):
    url: str | None = None
    host: str | None = None
    port: int | None = None
    database: str | None = None
    token: str | None = None
    timeout: float = _DEFAULT_TIMEOUT

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        if v is None:
            return v
        scheme = urlparse(v).scheme
        if scheme not in ("http", "https"):
            msg = f"Invalid URL scheme: '{scheme}'. Expected 'http' or 'https'"
            raise ValueError(msg)
        return v

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int | None) -> int | None:
        if v is not None and not (1 <= v <= 65535):
            msg = f"Invalid port: {v}. Must be 1-65535"
            raise ValueError(msg)
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            msg = f"Invalid timeout: {v}. Must be positive"
            raise ValueError(msg)
        return v


class AppConfig(BaseModel):
    default_timeout: float = _DEFAULT_TIMEOUT
    default_format: str = _DEFAULT_FORMAT
    default_profile: str | None = None
    profiles: dict[str, ConnectionProfile] = {}

    @field_validator("default_format")
    @classmethod
    def validate_default_format(cls, v: str) -> str:
        if v not in _FORMATS:
            msg = f"Invalid default_format: {v!r}. Must be one of: table, json, csv"
            raise ValueError(msg)
        return v


class ResolvedConfig(BaseModel):
    url: str | None = None
    host: str | None = None
    port: int | None = None
    database: str | None = None
    token: str | None = None
    timeout: float = _DEFAULT_TIMEOUT
    default_format: str = _DEFAULT_FORMAT
    active_profile: str | None = None
    sources: dict[str, str] = {}

    @property
    def base_url(self) -> str:
        return build_base_url(self.url, self.host, self.port)

    def to_profile(self) -> ConnectionProfile:
        """Connection fields only, for persisting as the saved session."""
        data = {
            key: getattr(self, key)
            for key in _CONNECTION_FIELDS
            if getattr(self, key) is not None
            and self.sources.get(key) not in ("default", "config")
        }
        return ConnectionProfile(**data)


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from TOML file.

    Returns default AppConfig if file doesn't exist.
    Raises ConfigError on malformed TOML or invalid config.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return AppConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Malformed TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return AppConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid configuration in {config_path}: {e}"
        raise ConfigError(msg) from e


def _apply(
    resolved: dict[str, Any],
    sources: dict[str, str],
    layer: dict[str, Any],
    labels: dict[str, str],
) -> None:
    if "url" in layer:
        for key in ("host", "port"):
            resolved[key] = None
            sources.pop(key, None)
    elif "host" in layer:
        resolved["url"] = None
        sources.pop("url", None)
    for key, value in layer.items():
        resolved[key] = value
        sources[key] = labels[key]


def _profile_layer(profile: ConnectionProfile) -> dict[str, Any]:
    return {
        key: getattr(profile, key)
        for key in profile.model_fields_set
        if key in _CONNECTION_FIELDS
    }


def resolve_config(
    config: AppConfig,
    profile_name: str | None = None,
    session: ConnectionProfile | None = None,
    **cli_overrides: Any,
) -> ResolvedConfig:
    """Resolve configuration using precedence chain.

    CLI > env > profile > session > default profile > config defaults >
    built-in defaults.
    """
    sources: dict[str, str] = {}
    resolved: dict[str, Any] = {key: None for key in _CONNECTION_FIELDS}

    # Layer 1: Built-in defaults
    resolved["timeout"] = _DEFAULT_TIMEOUT
    resolved["default_format"] = _DEFAULT_FORMAT
    sources["timeout"] = "default"
    sources["default_format"] = "default"

    # Layer 2: Config file global defaults
    if config.default_timeout != _DEFAULT_TIMEOUT:
        resolved["timeout"] = config.default_timeout
        sources["timeout"] = "config"
    if config.default_format != _DEFAULT_FORMAT:
        resolved["default_format"] = config.default_format
        sources["default_format"] = "config"

    # Layer 3: Profile, saved session, or the config's default profile
    effective_profile = profile_name or os.environ.get("STDB_PROFILE")
    if effective_profile:
        if effective_profile not in config.profiles:
            available = (
                ", ".join(sorted(config.profiles.keys())) if config.profiles else "none"
            )
            msg = (
                f"Unknown profile: '{effective_profile}'. "
                f"Available profiles: {available}"
            )
            raise ConfigError(msg)
        layer = _profile_layer(config.profiles[effective_profile])
        label = f"profile: {effective_profile}"
        _apply(resolved, sources, layer, dict.fromkeys(layer, label))
    elif session is not None:
        layer = _profile_layer(session)
        _apply(resolved, sources, layer, dict.fromkeys(layer, "session"))
    elif config.default_profile:
        effective_profile = config.default_profile
        if effective_profile not in config.profiles:
            msg = f"Default profile '{effective_profile}' is not defined"
            raise ConfigError(msg)
        layer = _profile_layer(config.profiles[effective_profile])
        label = f"profile: {effective_profile}"
        _apply(resolved, sources, layer, dict.fromkeys(layer, label))

    # Layer 4: Environment variables
    env_layer: dict[str, Any] = {}
    env_sources: dict[str, str] = {}
    for env_var, field_name in _ENV_VARS.items():
        value = os.environ.get(env_var)
        if value is None:
            continue
        if field_name == "port":
            try:
                env_layer[field_name] = int(value)
            except ValueError:
                msg = f"Invalid {env_var} value: '{value}'. Must be an integer"
                raise ConfigError(msg) from None
        else:
            env_layer[field_name] = value
        env_sources[field_name] = f"env: {env_var}"
    if env_layer:
        _apply(resolved, sources, env_layer, env_sources)

    # Layer 5: CLI flags (highest priority)
    cli_layer = {
        key: cli_overrides[key]
        for key in _CONNECTION_FIELDS
        if cli_overrides.get(key) is not None
    }
    if cli_layer:
        cli_sources = {key: f"cli: --{key}" for key in cli_layer}
        _apply(resolved, sources, cli_layer, cli_sources)

    resolved["active_profile"] = effective_profile
    resolved["sources"] = sources
    return ResolvedConfig(**resolved)
