"""Tests for the t212-monitor CLI."""

import json
from datetime import datetime
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from src.business.alerts import AlertEngine
from src.business.cli.main import cli
from src.business.config import MonitorConfig
from src.business.monitoring import PortfolioMonitor
from src.business.notification import LogChannel
from src.data.models import CashBalance, Position
from src.data.providers import AuthenticationError, PortfolioDataSource
from src.data.store import InstrumentCache, SnapshotStore, StateFile


class FakeSource(PortfolioDataSource):
    """In-memory data source."""

    def __init__(self, price: float = 160.0, fail: bool = False):
        self.price = price
        self.fail = fail

    @property
    def name(self) -> str:
        return "fake"

    def fetch_positions(self):
        if self.fail:
            raise AuthenticationError("bad key", status_code=401)
        return [Position("AAPL_US_EQ", 2, 150.0, self.price, 20.0)]

    def fetch_cash(self):
        if self.fail:
            raise AuthenticationError("bad key", status_code=401)
        return CashBalance(free=10.0, total=330.0, ppl=20.0, result=0.0, invested=320.0)

    def fetch_instrument_metadata(self):
        return []


@pytest.fixture
def state_path(tmp_path, monkeypatch):
    path = tmp_path / "portfolio-data.json"
    monkeypatch.setenv("MONITOR_STORAGE_PATH", str(path))
    monkeypatch.setenv("MONITOR_TIMEZONE", "UTC")
    return path


@pytest.fixture
def runner():
    return CliRunner()


def _monitor(state_path, source, now: datetime | None = None) -> PortfolioMonitor:
    state_file = StateFile(state_path)
    return PortfolioMonitor(
        source=source,
        snapshot_store=SnapshotStore(state_file),
        instrument_cache=InstrumentCache(state_file),
        alert_engine=AlertEngine(channel=LogChannel()),
        config=MonitorConfig(),
        clock=(lambda: now) if now else None,
    )


def _seed(state_path, prices: list[float]) -> None:
    store = SnapshotStore(StateFile(state_path))
    for day, price in enumerate(prices, start=11):
        store.save_snapshot(
            [Position("AAPL_US_EQ", 1, 100.0, price)],
            datetime(2024, 3, day, 10, 0),
        )


class TestRefreshCommand:
    """Tests for `refresh`"""

    def test_ok_without_alerts(self, runner, state_path):
        monitor = _monitor(state_path, FakeSource())
        with patch("src.business.cli.commands.refresh.build_monitor", return_value=monitor):
            result = runner.invoke(cli, ["refresh"])
        assert result.exit_code == 0
        assert "AAPL" in result.output

    def test_exit_one_on_alerts(self, runner, state_path):
        _monitor(state_path, FakeSource(160.0)).refresh(datetime(2024, 3, 14, 10, 0))
        monitor = _monitor(state_path, FakeSource(150.0), now=datetime(2024, 3, 15, 10, 0))
        with patch("src.business.cli.commands.refresh.build_monitor", return_value=monitor):
            result = runner.invoke(cli, ["refresh"])
        assert result.exit_code == 1
        assert "AAPL is down -6.25% today" in result.output

    def test_json_output(self, runner, state_path):
        monitor = _monitor(state_path, FakeSource())
        with patch("src.business.cli.commands.refresh.build_monitor", return_value=monitor):
            result = runner.invoke(cli, ["refresh", "-o", "json"])
        data = json.loads(result.output)
        assert data["positions"][0]["ticker"] == "AAPL_US_EQ"
        assert data["error"] is None

    def test_exit_three_on_fetch_error(self, runner, state_path):
        monitor = _monitor(state_path, FakeSource(fail=True))
        with patch("src.business.cli.commands.refresh.build_monitor", return_value=monitor):
            result = runner.invoke(cli, ["refresh"])
        assert result.exit_code == 3
        assert "bad key" in result.output
        assert not state_path.exists()

    def test_exit_three_on_config_error(self, runner, state_path):
        with patch(
            "src.business.cli.commands.refresh.build_monitor",
            side_effect=ValueError("credentials missing"),
        ):
            result = runner.invoke(cli, ["refresh"])
        assert result.exit_code == 3


class TestHistoryCommand:
    """Tests for `history`"""

    def test_lists_days(self, runner, state_path):
        _seed(state_path, [100.0, 95.0, 90.0])
        result = runner.invoke(cli, ["history"])
        assert result.exit_code == 0
        assert "2024-03-13" in result.output
        assert "3 snapshots stored" in result.output

    def test_json(self, runner, state_path):
        _seed(state_path, [100.0, 95.0])
        result = runner.invoke(cli, ["history", "-o", "json"])
        data = json.loads(result.output)
        assert [d["date"] for d in data] == ["2024-03-11", "2024-03-12"]

    def test_empty(self, runner, state_path):
        result = runner.invoke(cli, ["history"])
        assert result.exit_code == 0
        assert "No snapshots" in result.output


class TestTrendsCommand:
    """Tests for `trends`"""

    def test_downtrend(self, runner, state_path):
        _seed(state_path, [100.0, 95.0, 90.0, 88.0, 85.0])
        result = runner.invoke(cli, ["trends"])
        assert result.exit_code == 0
        assert "Downtrends (1)" in result.output
        assert "Down 15.00% over 5 days" in result.output

    def test_custom_threshold_and_direction(self, runner, state_path):
        _seed(state_path, [100.0, 95.0])
        result = runner.invoke(cli, ["trends", "-t", "5", "--direction", "down", "-o", "json"])
        data = json.loads(result.output)
        assert len(data) == 1
        assert data[0]["direction"] == "down"

    def test_not_enough_history(self, runner, state_path):
        _seed(state_path, [100.0])
        result = runner.invoke(cli, ["trends"])
        assert "Not enough history" in result.output


class TestNotifyCommand:
    """Tests for `notify`"""

    def test_log_channel(self, runner, state_path):
        result = runner.invoke(cli, ["notify", "--channel", "log"])
        assert result.exit_code == 0
        assert "Sent" in result.output


class TestWatchCommand:
    """Tests for `watch`"""

    def test_starts_scheduler(self, runner, state_path):
        monitor = _monitor(state_path, FakeSource())
        with patch("src.business.cli.commands.watch.build_monitor", return_value=monitor), patch(
            "src.business.cli.commands.watch.PollingScheduler"
        ) as scheduler_cls, patch("src.business.cli.commands.watch.signal.signal"):
            result = runner.invoke(cli, ["watch", "-i", "60"])

        assert result.exit_code == 0
        scheduler_cls.assert_called_once()
        assert scheduler_cls.call_args[1]["interval_seconds"] == 60
        scheduler_cls.return_value.run.assert_called_once_with(initial=True)

    def test_connection_failure(self, runner, state_path):
        monitor = _monitor(state_path, FakeSource(fail=True))
        with patch("src.business.cli.commands.watch.build_monitor", return_value=monitor):
            result = runner.invoke(cli, ["watch"])
        assert result.exit_code == 3
        assert "Could not connect" in result.output
