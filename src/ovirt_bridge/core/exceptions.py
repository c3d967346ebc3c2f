"""Custom exceptions for ovirt-bridge.

This module defines a hierarchy of exceptions used throughout ovirt-bridge
to separate startup-fatal problems from failures that only abandon a
single discovery cycle.

Exception Hierarchy:
    BridgeError (base)
    ├── ConfigurationError          (startup-fatal)
    │   ├── ConfigNotFoundError
    │   └── CertificateError
    ├── EngineError                 (cycle-recoverable)
    │   ├── EngineConnectionError
    │   │   └── EngineTimeoutError
    │   └── EngineResponseError
    ├── InventoryDecodeError        (cycle-recoverable)
    └── TargetWriteError            (cycle-recoverable)
"""

from __future__ import annotations

from typing import Any


class BridgeError(Exception):
    """Base exception for all ovirt-bridge errors.

    Args:
        message: Human-readable error message.
        details: Optional dictionary with additional error context.

    Attributes:
        message: The error message.
        details: Additional context about the error.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class ConfigurationError(BridgeError):
    """Raised when the configuration cannot be used to start the bridge.

    Examples:
        - Invalid YAML syntax in config file
        - Engine URL not using https
        - No engine password supplied
    """


class ConfigNotFoundError(ConfigurationError):
    """Raised when an explicitly requested configuration file is missing.

    Args:
        path: The path where the config was expected.
    """

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Configuration file not found: {path}",
            details={"path": path},
        )
        self.path = path


class CertificateError(ConfigurationError):
    """Raised when the engine CA bundle cannot be loaded.

    Args:
        path: Path to the CA bundle.
        message: Description of the failure.
    """

    def __init__(self, path: str, message: str) -> None:
        super().__init__(
            f"Could not load engine CA certificate: {message}",
            details={"path": path},
        )
        self.path = path


class EngineError(BridgeError):
    """Base class for failures talking to the engine API."""


class EngineConnectionError(EngineError):
    """Raised when the engine cannot be reached.

    Covers refused connections, DNS failures and TLS handshake errors.

    Args:
        url: The URL that was requested.
        message: Description of the failure.
    """

    def __init__(self, url: str, message: str) -> None:
        super().__init__(
            f"Request to '{url}' failed: {message}",
            details={"url": url},
        )
        self.url = url


class EngineTimeoutError(EngineConnectionError):
    """Raised when the engine does not answer in time.

    Args:
        url: The URL that was requested.
        timeout: The timeout value in seconds.
    """

    def __init__(self, url: str, timeout: float) -> None:
        super().__init__(url, f"timed out after {timeout}s")
        self.timeout = timeout
        self.details["timeout"] = timeout


class EngineResponseError(EngineError):
    """Raised when the engine answers with a non-success status.

    Args:
        url: The URL that was requested.
        status_code: HTTP status code of the response.
        body: Leading part of the response body.
    """

    def __init__(self, url: str, status_code: int, body: str = "") -> None:
        message = f"Engine returned HTTP {status_code} for '{url}'"
        if body:
            message = f"{message}: {body}"
        super().__init__(message, details={"status": status_code})
        self.url = url
        self.status_code = status_code
        self.body = body


class InventoryDecodeError(BridgeError):
    """Raised when the host inventory is not valid JSON of the expected shape."""


class TargetWriteError(BridgeError):
    """Raised when the target file cannot be written.

    Args:
        path: The output path.
        message: Description of the failure.
    """

    def __init__(self, path: str, message: str) -> None:
        super().__init__(
            f"Failed to write targets to '{path}': {message}",
            details={"path": path},
        )
        self.path = path
