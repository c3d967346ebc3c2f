"""Pytest configuration and fixtures for ovirt-bridge tests.

This module provides shared fixtures for testing ovirt-bridge components
including sample engine responses, resolved configurations and mocked
HTTP sessions.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest
import yaml

from ovirt_bridge.core.config import BridgeConfig, DiscoveryConfig, EngineConfig
from ovirt_bridge.models.host import Cluster, Host

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

    from click.testing import CliRunner


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Keep tests away from the real environment and home directory."""
    monkeypatch.delenv("ENGINE_PASSWORD", raising=False)
    monkeypatch.delenv("OVIRT_BRIDGE_CONFIG", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    yield
    # CLI runs bind handlers to CliRunner streams that are closed afterwards
    logging.getLogger("ovirt_bridge").handlers.clear()
    logging.getLogger("urllib3").handlers.clear()


@pytest.fixture
def inventory_data() -> dict:
    """Engine response with two clusters, A seen first."""
    return {
        "host": [
            {"address": "h1", "cluster": {"id": "A"}},
            {"address": "h2", "cluster": {"id": "B"}},
            {"address": "h3", "cluster": {"id": "A"}},
        ]
    }


@pytest.fixture
def inventory_json(inventory_data: dict) -> bytes:
    """Raw engine response body for inventory_data."""
    return json.dumps(inventory_data).encode()


@pytest.fixture
def engine_inventory_json() -> bytes:
    """Engine response carrying the extra fields a real engine sends."""
    return json.dumps(
        {
            "host": [
                {
                    "address": "node1.example.com",
                    "name": "node1",
                    "id": "8f2a0c1e-0001",
                    "status": "up",
                    "href": "/ovirt-engine/api/hosts/8f2a0c1e-0001",
                    "cluster": {
                        "href": "/ovirt-engine/api/clusters/c-prod",
                        "id": "c-prod",
                    },
                },
                {
                    "address": "node2.example.com",
                    "name": "node2",
                    "id": "8f2a0c1e-0002",
                    "status": "maintenance",
                    "cluster": {"id": "c-test"},
                },
            ]
        }
    ).encode()


@pytest.fixture
def sample_hosts() -> list[Host]:
    """Hosts matching inventory_data."""
    return [
        Host(address="h1", cluster=Cluster(id="A")),
        Host(address="h2", cluster=Cluster(id="B")),
        Host(address="h3", cluster=Cluster(id="A")),
    ]


@pytest.fixture
def output_path(tmp_path: Path) -> Path:
    """Location of the target file."""
    return tmp_path / "engine-hosts.json"


@pytest.fixture
def engine_config() -> EngineConfig:
    """Engine settings using the system trust store."""
    return EngineConfig(
        url="https://engine.example.com",
        user="admin@internal",
        password="secret",
        ca_file=None,
    )


@pytest.fixture
def bridge_config(engine_config: EngineConfig, output_path: Path) -> BridgeConfig:
    """Resolved configuration writing to a temporary file."""
    return BridgeConfig(
        engine=engine_config,
        discovery=DiscoveryConfig(output=str(output_path), interval=60),
    )


@pytest.fixture
def sample_config_data(output_path: Path) -> dict:
    """Create sample configuration data."""
    return {
        "engine": {
            "url": "https://engine.example.com/",
            "user": "monitor@internal",
            "password": "from-file",
            "verify": False,
        },
        "discovery": {
            "output": str(output_path),
            "interval": 120,
        },
        "logging": {
            "level": "debug",
        },
    }


@pytest.fixture
def temp_config_file(tmp_path: Path, sample_config_data: dict) -> Path:
    """Create a temporary config file with sample data."""
    config_path = tmp_path / "config.yaml"
    with config_path.open("w") as f:
        yaml.safe_dump(sample_config_data, f)
    return config_path


def make_response(status_code: int = 200, body: bytes = b"{}") -> MagicMock:
    """Build a mocked requests.Response usable as a context manager."""
    response = MagicMock()
    response.status_code = status_code
    response.content = body
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    return response


@pytest.fixture
def response_factory() -> Callable[..., MagicMock]:
    """Factory for mocked requests responses."""
    return make_response


@pytest.fixture
def mock_session(inventory_json: bytes) -> MagicMock:
    """Create a mocked requests session answering with inventory_json."""
    session = MagicMock()
    session.headers = {}
    session.get.return_value = make_response(200, inventory_json)
    return session


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner."""
    from click.testing import CliRunner

    return CliRunner()
