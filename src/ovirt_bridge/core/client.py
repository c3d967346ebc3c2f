"""HTTPS client for the oVirt engine host inventory.

This module provides the InventoryClient, which issues one authenticated
request per discovery cycle and returns the raw response body. It handles:
- HTTP basic authentication
- Certificate verification against the engine CA bundle, the system
  trust store, or not at all when explicitly disabled
- An explicit request timeout
- Mapping transport and status failures onto cycle-recoverable errors
"""

from __future__ import annotations

import ssl

import requests
import urllib3

from ovirt_bridge.core.config import EngineConfig
from ovirt_bridge.core.exceptions import (
    CertificateError,
    EngineConnectionError,
    EngineResponseError,
    EngineTimeoutError,
)
from ovirt_bridge.utils.logging import get_logger

logger = get_logger("client")

BODY_SNIPPET_LENGTH = 200


def resolve_verify(engine: EngineConfig) -> bool | str:
    """Work out the ``verify`` argument for requests.

    The CA bundle is loaded once here so that an unreadable or invalid
    bundle stops the bridge at startup rather than failing every cycle.

    Args:
        engine: Engine connection settings.

    Returns:
        False when verification is disabled, the CA bundle path when one
        is configured, True for the system trust store.

    Raises:
        CertificateError: If the CA bundle cannot be loaded.
    """
    if not engine.verify:
        return False
    if engine.ca_file is None:
        return True

    try:
        ssl.create_default_context(cafile=engine.ca_file)
    except FileNotFoundError as e:
        raise CertificateError(engine.ca_file, "file not found") from e
    except (ssl.SSLError, OSError, ValueError) as e:
        raise CertificateError(engine.ca_file, str(e)) from e
    return engine.ca_file


class InventoryClient:
    """Fetches the host inventory from the engine.

    Args:
        engine: Engine connection settings.
        timeout: Request timeout in seconds.
        session: Optional pre-built session, mainly for tests.

    Example:
        >>> with InventoryClient(config.engine, timeout=30) as client:
        ...     body = client.fetch_hosts()
    """

    def __init__(
        self,
        engine: EngineConfig,
        timeout: float,
        session: requests.Session | None = None,
    ) -> None:
        self.engine = engine
        self.timeout = timeout
        self.url = engine.hosts_url

        self.session = session or requests.Session()
        self.session.auth = (engine.user, engine.password.get_secret_value())
        self.session.headers.update({"Accept": "application/json"})
        self.session.verify = resolve_verify(engine)

        if self.session.verify is False:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
            logger.warning("Engine certificate verification is disabled")

    def fetch_hosts(self) -> bytes:
        """Request the hosts collection.

        Returns:
            Raw response body.

        Raises:
            EngineTimeoutError: If the engine does not answer in time.
            EngineConnectionError: On connection or TLS failures.
            EngineResponseError: If the engine returns a non-2xx status.
        """
        logger.debug(f"GET {self.url}")

        try:
            with self.session.get(self.url, timeout=self.timeout) as response:
                body = response.content
                status = response.status_code

        except requests.exceptions.Timeout as e:
            raise EngineTimeoutError(self.url, self.timeout) from e

        except requests.exceptions.RequestException as e:
            raise EngineConnectionError(self.url, str(e)) from e

        if not 200 <= status < 300:
            snippet = body[:BODY_SNIPPET_LENGTH].decode("utf-8", errors="replace").strip()
            raise EngineResponseError(self.url, status, snippet)

        logger.debug(f"Received {len(body)} bytes from engine")
        return body

    def close(self) -> None:
        """Release pooled connections."""
        self.session.close()

    def __enter__(self) -> InventoryClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
