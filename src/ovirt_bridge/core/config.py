"""Configuration management for ovirt-bridge.

This module provides a Pydantic-based configuration system that supports:
- YAML configuration files
- Environment variable fallback for the engine password
- CLI option overrides
- Default values with validation

The resolved configuration is frozen: it is built once at startup and
passed explicitly to the client and discovery loop.

The default config location is ~/.ovirt-bridge/config.yaml, which can be
overridden with the OVIRT_BRIDGE_CONFIG environment variable.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated, Any
from urllib.parse import urlsplit

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
    field_validator,
    model_validator,
)

from ovirt_bridge.core.exceptions import ConfigNotFoundError, ConfigurationError

PASSWORD_ENV = "ENGINE_PASSWORD"
DEFAULT_ENGINE_CA = "/etc/pki/vdsm/certs/cacert.pem"
DEFAULT_TIMEOUT = 30.0


def get_default_config_path() -> Path:
    """Get the default configuration file path.

    The path can be overridden by setting the OVIRT_BRIDGE_CONFIG
    environment variable.

    Returns:
        Path to the configuration file.
    """
    env_path = os.environ.get("OVIRT_BRIDGE_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / ".ovirt-bridge" / "config.yaml"


class LoggingConfig(BaseModel):
    """Logging configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR); None leaves the
            console level to the -v count.
        file: Path to log file (optional).
    """

    model_config = ConfigDict(frozen=True)

    level: str | None = Field(default=None, description="Log level")
    file: str | None = Field(default=None, description="Log file path")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str | None) -> str | None:
        """Validate log level is valid."""
        if v is None:
            return None
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper


class EngineConfig(BaseModel):
    """Connection settings for the oVirt engine API.

    Args:
        url: Engine base URL; only https is accepted.
        user: Engine user for basic authentication.
        password: Engine password.
        verify: Verify the engine certificate.
        ca_file: CA bundle to verify against; None uses the system trust store.
        timeout: Request timeout in seconds.
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(default="https://localhost:8443", description="Engine URL")
    user: Annotated[str, Field(min_length=1)] = Field(
        default="admin@internal", description="Engine user"
    )
    password: SecretStr = Field(
        default=SecretStr(""), validate_default=True, description="Engine password"
    )
    verify: bool = Field(default=True, description="Verify the engine certificate")
    ca_file: str | None = Field(default=DEFAULT_ENGINE_CA, description="Engine CA bundle")
    timeout: Annotated[float, Field(gt=0)] | None = Field(
        default=None, description="Request timeout in seconds"
    )

    @field_validator("url")
    @classmethod
    def require_https(cls, v: str) -> str:
        """Only https engine URLs are supported."""
        if not v.lower().startswith("https://"):
            raise ValueError("Only URLs starting with 'https' are supported")
        if not urlsplit(v).hostname:
            raise ValueError(f"Engine URL has no host: {v!r}")
        return v.rstrip("/")

    @field_validator("password")
    @classmethod
    def require_password(cls, v: SecretStr) -> SecretStr:
        """An engine password must be supplied."""
        if not v.get_secret_value():
            raise ValueError(
                f"No engine password supplied (use --engine-password or {PASSWORD_ENV})"
            )
        return v

    @field_validator("ca_file")
    @classmethod
    def expand_ca_path(cls, v: str | None) -> str | None:
        """Expand ~ in the CA path; an empty path means system trust."""
        if not v:
            return None
        return str(Path(v).expanduser())

    @property
    def hosts_url(self) -> str:
        """URL of the hosts collection."""
        return f"{self.url}/ovirt-engine/api/hosts"


class DiscoveryConfig(BaseModel):
    """Discovery loop settings.

    Args:
        output: File the target groups are written to.
        interval: Seconds to wait between discovery cycles.
    """

    model_config = ConfigDict(frozen=True)

    output: Annotated[str, Field(min_length=1)] = Field(
        default="engine-hosts.json", description="Target file for Prometheus"
    )
    interval: Annotated[int, Field(ge=1)] = Field(
        default=60, description="Host discovery interval in seconds"
    )


class BridgeConfig(BaseModel):
    """Main configuration model for ovirt-bridge.

    Args:
        engine: Engine connection settings.
        discovery: Discovery loop settings.
        logging: Logging configuration.

    Example config.yaml:
        ```yaml
        engine:
          url: https://engine.example.com
          user: admin@internal
          password: secret
          verify: true
          ca_file: /etc/pki/vdsm/certs/cacert.pem

        discovery:
          output: /etc/prometheus/engine-hosts.json
          interval: 60

        logging:
          level: INFO
        ```
    """

    model_config = ConfigDict(frozen=True)

    engine: EngineConfig
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def timeout_within_interval(self) -> BridgeConfig:
        """A request must never outlive the polling interval."""
        timeout = self.engine.timeout
        if timeout is not None and timeout > self.discovery.interval:
            raise ValueError(
                f"Request timeout ({timeout}s) must not exceed the update "
                f"interval ({self.discovery.interval}s)"
            )
        return self

    @property
    def request_timeout(self) -> float:
        """Effective request timeout in seconds."""
        if self.engine.timeout is not None:
            return self.engine.timeout
        return min(DEFAULT_TIMEOUT, float(self.discovery.interval))

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary with the password masked."""
        return self.model_dump(mode="json")


def _merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge overrides into base, skipping None values."""
    merged = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        elif isinstance(value, dict):
            merged[key] = _merge({}, value)
        else:
            merged[key] = value
    return merged


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"])
        msg = err["msg"].removeprefix("Value error, ")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)


class ConfigManager:
    """Resolves the bridge configuration from file, environment and overrides.

    Args:
        path: Optional path to config file. Uses default if not specified.
        required: Fail if the config file does not exist.

    Attributes:
        path: Path to the configuration file.

    Example:
        >>> cm = ConfigManager()
        >>> config = cm.load({"engine": {"url": "https://engine.example.com"}})
        >>> config.engine.hosts_url
        'https://engine.example.com/ovirt-engine/api/hosts'
    """

    def __init__(self, path: Path | str | None = None, required: bool = False) -> None:
        if path is None:
            self.path = get_default_config_path()
        else:
            self.path = Path(path).expanduser()
        self.required = required

    def read_file(self) -> dict[str, Any]:
        """Read raw settings from the YAML file.

        Returns:
            Parsed settings, empty if the file does not exist.

        Raises:
            ConfigNotFoundError: If the file is required but missing.
            ConfigurationError: If the file is not valid YAML.
        """
        if not self.path.exists():
            if self.required:
                raise ConfigNotFoundError(str(self.path))
            return {}

        try:
            with self.path.open("r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in config file: {e}",
                details={"path": str(self.path)},
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read config: {e}",
                details={"path": str(self.path)},
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                "Config file must contain a mapping",
                details={"path": str(self.path)},
            )
        return data

    def load(self, overrides: dict[str, Any] | None = None) -> BridgeConfig:
        """Resolve and validate the configuration.

        Precedence is overrides, then environment, then file, then defaults.

        Args:
            overrides: Nested settings from the command line; None values
                are ignored.

        Returns:
            Validated, immutable BridgeConfig.

        Raises:
            ConfigurationError: If the resolved settings are invalid.
        """
        file_data = self.read_file()
        if not isinstance(file_data.get("engine", {}), dict):
            raise ConfigurationError(
                "'engine' section must be a mapping",
                details={"path": str(self.path)},
            )

        environment = {"engine": {"password": os.environ.get(PASSWORD_ENV) or None}}
        data = _merge(_merge(file_data, environment), overrides or {})

        try:
            return BridgeConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration: {_format_validation_error(e)}",
                details={"path": str(self.path)},
            ) from e

    @classmethod
    def create_example_config(cls, path: Path | None = None) -> Path:
        """Create an example configuration file.

        Args:
            path: Optional path for the config. Uses default if not specified.

        Returns:
            Path to the created config file.
        """
        path = get_default_config_path() if path is None else Path(path).expanduser()

        path.parent.mkdir(parents=True, exist_ok=True)

        example_config = {
            "engine": {
                "url": "https://engine.example.com",
                "user": "admin@internal",
                "verify": True,
                "ca_file": DEFAULT_ENGINE_CA,
            },
            "discovery": {
                "output": "/etc/prometheus/engine-hosts.json",
                "interval": 60,
            },
            "logging": {
                "level": "INFO",
            },
        }

        with path.open("w") as f:
            yaml.safe_dump(example_config, f, default_flow_style=False, sort_keys=False)

        return path
