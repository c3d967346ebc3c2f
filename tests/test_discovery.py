"""Tests for the discovery loop."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from ovirt_bridge.core.client import InventoryClient
from ovirt_bridge.core.config import BridgeConfig
from ovirt_bridge.core.discovery import CycleResult, DiscoveryLoop
from ovirt_bridge.core.exceptions import (
    EngineConnectionError,
    EngineResponseError,
    InventoryDecodeError,
    TargetWriteError,
)
from ovirt_bridge.core.writer import TargetWriter

PREVIOUS = '[\n  {\n    "targets": ["old"],\n    "labels": {"cluster": "old"}\n  }\n]\n'


class TestDiscoveryLoop:
    """Tests for DiscoveryLoop."""

    @pytest.fixture
    def mock_client(self, inventory_json: bytes) -> MagicMock:
        """Create a mocked inventory client."""
        client = MagicMock(spec=InventoryClient)
        client.url = "https://engine.example.com/ovirt-engine/api/hosts"
        client.fetch_hosts.return_value = inventory_json
        return client

    @pytest.fixture
    def loop(self, bridge_config: BridgeConfig, mock_client: MagicMock) -> DiscoveryLoop:
        """Create a loop with a mocked client and a real writer."""
        return DiscoveryLoop(bridge_config, client=mock_client)

    def test_init_from_config(self, bridge_config: BridgeConfig, output_path: Path) -> None:
        """Test that the client and writer are built from the config."""
        loop = DiscoveryLoop(bridge_config)

        assert isinstance(loop.client, InventoryClient)
        assert loop.client.timeout == 30.0
        assert loop.writer.path == output_path
        assert loop.interval == 60
        assert loop.last_success is None

    def test_run_once_writes_targets(self, loop: DiscoveryLoop, output_path: Path) -> None:
        """Test a full cycle writes grouped targets."""
        result = loop.run_once()

        assert result.success is True
        assert result.hosts == 3
        assert result.groups == 2
        assert result.duration >= 0
        assert loop.last_success is not None
        assert json.loads(output_path.read_text()) == [
            {"targets": ["h1", "h3"], "labels": {"cluster": "A"}},
            {"targets": ["h2"], "labels": {"cluster": "B"}},
        ]

    def test_empty_inventory_writes_empty_list(
        self,
        loop: DiscoveryLoop,
        mock_client: MagicMock,
        output_path: Path,
    ) -> None:
        """Test that an engine without hosts produces []."""
        mock_client.fetch_hosts.return_value = b"{}"

        result = loop.run_once()

        assert result.success is True
        assert output_path.read_text() == "[]\n"

    def test_malformed_json_keeps_previous_file(
        self,
        loop: DiscoveryLoop,
        mock_client: MagicMock,
        output_path: Path,
    ) -> None:
        """Test that a decode failure leaves the output untouched."""
        output_path.write_text(PREVIOUS)
        mock_client.fetch_hosts.return_value = b'{"host": [{"address": '

        result = loop.run_once()

        assert result.success is False
        assert isinstance(result.error, InventoryDecodeError)
        assert output_path.read_text() == PREVIOUS
        assert loop.last_success is None

    @pytest.mark.parametrize(
        "error",
        [
            EngineConnectionError("https://engine.example.com", "connection refused"),
            EngineResponseError("https://engine.example.com", 401, "Unauthorized"),
        ],
    )
    def test_engine_failure_keeps_previous_file(
        self,
        loop: DiscoveryLoop,
        mock_client: MagicMock,
        output_path: Path,
        error: Exception,
    ) -> None:
        """Test that transport and status failures leave the output untouched."""
        output_path.write_text(PREVIOUS)
        mock_client.fetch_hosts.side_effect = error

        result = loop.run_once()

        assert result.error is error
        assert output_path.read_text() == PREVIOUS

    def test_write_failure_is_cycle_level(
        self,
        bridge_config: BridgeConfig,
        mock_client: MagicMock,
        output_path: Path,
    ) -> None:
        """Test that a write failure is reported instead of raised."""
        writer = MagicMock(spec=TargetWriter)
        writer.path = output_path
        writer.write.side_effect = TargetWriteError(str(output_path), "Permission denied")
        loop = DiscoveryLoop(bridge_config, client=mock_client, writer=writer)

        result = loop.run_once()

        assert isinstance(result.error, TargetWriteError)
        assert loop.last_success is None

    def test_unexpected_errors_propagate(
        self,
        loop: DiscoveryLoop,
        mock_client: MagicMock,
    ) -> None:
        """Test that programming errors are not swallowed."""
        mock_client.fetch_hosts.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            loop.run_once()

    def test_run_waits_interval_between_cycles(
        self,
        loop: DiscoveryLoop,
        mock_client: MagicMock,
        mocker: MockerFixture,
    ) -> None:
        """Test that cycles are separated by the configured interval."""
        mock_wait = mocker.patch.object(loop._stop, "wait", return_value=False)

        cycles = loop.run(max_cycles=3)

        assert cycles == 3
        assert mock_client.fetch_hosts.call_count == 3
        assert mock_wait.call_count == 2
        mock_wait.assert_called_with(60)

    def test_failed_cycle_does_not_stop_loop(
        self,
        loop: DiscoveryLoop,
        mock_client: MagicMock,
        inventory_json: bytes,
        output_path: Path,
        mocker: MockerFixture,
    ) -> None:
        """Test that the next cycle runs after a transport failure."""
        mock_client.fetch_hosts.side_effect = [
            EngineConnectionError("https://engine.example.com", "connection refused"),
            inventory_json,
        ]
        mocker.patch.object(loop._stop, "wait", return_value=False)

        loop.run(max_cycles=2)

        assert mock_client.fetch_hosts.call_count == 2
        assert output_path.exists()

    def test_stop_before_run(self, loop: DiscoveryLoop, mock_client: MagicMock) -> None:
        """Test that a stopped loop runs no cycles."""
        loop.stop()

        assert loop.stopped is True
        assert loop.run() == 0
        mock_client.fetch_hosts.assert_not_called()

    def test_stop_during_cycle(
        self,
        loop: DiscoveryLoop,
        mock_client: MagicMock,
        inventory_json: bytes,
    ) -> None:
        """Test that stop() ends the loop after the in-flight cycle."""

        def fetch_and_stop() -> bytes:
            loop.stop()
            return inventory_json

        mock_client.fetch_hosts.side_effect = fetch_and_stop

        assert loop.run() == 1

    def test_context_manager_closes_client(
        self,
        loop: DiscoveryLoop,
        mock_client: MagicMock,
    ) -> None:
        """Test that leaving the context closes the client."""
        with loop:
            pass

        mock_client.close.assert_called_once()


class TestCycleResult:
    """Tests for CycleResult."""

    def test_success_and_duration(self) -> None:
        """Test the derived properties."""
        result = CycleResult(started_at=100.0, finished_at=101.5)

        assert result.success is True
        assert result.duration == 1.5

    def test_failure(self) -> None:
        """Test that an error marks the cycle as failed."""
        result = CycleResult(started_at=0.0, error=TargetWriteError("/x", "denied"))
        assert result.success is False
