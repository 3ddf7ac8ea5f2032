"""Tests for server configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from contract_proxy.config import LatencyRange, ServerConfig, latency_or_none, parse_latency
from contract_proxy.errors import DirectoryUnavailable, InvalidConfiguration


class TestParseLatency:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("500-2000", (500, 2000)), ("0-0", (0, 0)), (" 10 - 20 ", (10, 20))],
    )
    def test_valid(self, value: str, expected: tuple[int, int]) -> None:
        latency = parse_latency(value)
        assert (latency.min_ms, latency.max_ms) == expected

    @pytest.mark.parametrize("value", ["", "fast", "500", "-5-10", "1.5-2"])
    def test_bad_format(self, value: str) -> None:
        with pytest.raises(InvalidConfiguration, match="min-max"):
            parse_latency(value)

    def test_min_above_max(self) -> None:
        with pytest.raises(InvalidConfiguration, match="lower than or equal"):
            parse_latency("2000-500")


def test_latency_or_none_logs_and_ignores_invalid(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        assert latency_or_none("2000-500") is None
    assert "latency simulation disabled" in caplog.text
    assert latency_or_none(None) is None
    assert latency_or_none("1-2") == LatencyRange(min_ms=1, max_ms=2)


def test_all_directories_keeps_local_first(tmp_path: Path) -> None:
    config = ServerConfig(contracts_dir=tmp_path / "local", external_dirs=[tmp_path / "x", tmp_path / "y"])
    assert config.all_directories == [tmp_path / "local", tmp_path / "x", tmp_path / "y"]


def test_prepare_creates_missing_local_directory(tmp_path: Path) -> None:
    config = ServerConfig(contracts_dir=tmp_path / "contracts")
    config.prepare_directories()
    assert (tmp_path / "contracts").is_dir()


def test_prepare_rejects_missing_external_directory(tmp_path: Path) -> None:
    config = ServerConfig(contracts_dir=tmp_path, external_dirs=[tmp_path / "shared"])
    with pytest.raises(DirectoryUnavailable) as excinfo:
        config.prepare_directories()
    assert excinfo.value.path == str(tmp_path / "shared")
    assert str(excinfo.value).startswith("External directory not found")


def test_defaults() -> None:
    config = ServerConfig()
    assert config.port == 8080
    assert config.hot_reload is True
    assert config.cache is True
    assert config.parser == "regex"
    assert config.target_url is None


def test_summary_is_serializable(tmp_path: Path) -> None:
    summary = ServerConfig(contracts_dir=tmp_path, target_url="http://localhost:3000").summary()
    assert summary["contracts_dir"] == str(tmp_path)
    assert summary["target_url"] == "http://localhost:3000"
