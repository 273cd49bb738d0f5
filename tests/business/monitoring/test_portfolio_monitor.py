"""Tests for the portfolio refresh cycle."""

import json
from datetime import datetime, timedelta
from unittest.mock import MagicMock, patch

import pytest

from src.business.alerts import AlertEngine, AlertKind
from src.business.config import MonitorConfig
from src.business.monitoring import PortfolioMonitor
from src.business.notification import LogChannel
from src.data.models import CashBalance, InstrumentMetadata, Position
from src.data.providers import (
    PortfolioDataSource,
    SourceUnavailableError,
    Trading212Config,
    Trading212Provider,
)
from src.data.store import InstrumentCache, SnapshotStore, StateFile
from src.engine.models import TrendDirection

DAY1 = datetime(2024, 3, 14, 10, 0)
DAY2 = datetime(2024, 3, 15, 10, 0)


class FakeSource(PortfolioDataSource):
    """In-memory data source."""

    def __init__(self):
        self.positions = [Position("AAPL_US_EQ", 2, 150.0, 160.0, 20.0)]
        self.cash = CashBalance(free=10.0, total=330.0, ppl=20.0, result=0.0, invested=320.0)
        self.instruments = [InstrumentMetadata("AAPL_US_EQ", "Apple", "USD", "US0378331005")]
        self.fail_positions = False
        self.fail_instruments = False
        self.instrument_calls = 0

    @property
    def name(self) -> str:
        return "fake"

    def fetch_positions(self):
        if self.fail_positions:
            raise SourceUnavailableError("API down", status_code=503)
        return list(self.positions)

    def fetch_cash(self):
        return self.cash

    def fetch_instrument_metadata(self):
        self.instrument_calls += 1
        if self.fail_instruments:
            raise SourceUnavailableError("metadata down")
        return list(self.instruments)


@pytest.fixture
def source():
    return FakeSource()


@pytest.fixture
def state_path(tmp_path):
    return tmp_path / "portfolio-data.json"


@pytest.fixture
def channel():
    return LogChannel()


def _build(source, state_path, channel, config=None, fx_provider=None):
    config = config or MonitorConfig()
    state_file = StateFile(state_path)
    return PortfolioMonitor(
        source=source,
        snapshot_store=SnapshotStore(state_file, tz=config.tzinfo),
        instrument_cache=InstrumentCache(state_file),
        alert_engine=AlertEngine(channel=channel),
        config=config,
        fx_provider=fx_provider,
    )


@pytest.fixture
def monitor(source, state_path, channel):
    return _build(source, state_path, channel)


class TestEndToEnd:
    """Two-day scenario: AAPL 160 -> 150."""

    def test_daily_loss_scenario(self, monitor, source, channel):
        first = monitor.refresh(DAY1)
        assert first.success
        assert first.alerts == []
        assert first.enriched_positions[0].has_previous_data is False

        source.positions = [Position("AAPL_US_EQ", 2, 150.0, 150.0, 0.0)]
        second = monitor.refresh(DAY2)

        [aapl] = second.enriched_positions
        assert aapl.has_previous_data is True
        assert abs(aapl.daily_change_percent - (-6.25)) < 1e-9
        assert len(second.alerts) == 1
        assert second.alerts[0].kind == AlertKind.DAILY_LOSS
        assert second.alerts[0].ticker == "AAPL_US_EQ"
        assert channel.sent == [("📉 AAPL Down", "AAPL has dropped 6.25% today")]

        repeat = monitor.refresh(DAY2 + timedelta(hours=1))
        assert repeat.alerts == []
        assert len(channel.sent) == 1

    def test_annotations_from_metadata(self, monitor):
        result = monitor.refresh(DAY1)
        assert result.enriched_positions[0].company_name == "Apple"
        assert result.enriched_positions[0].instrument_currency == "USD"
        assert result.cash.total == 330.0


class TestFailures:
    """Test degraded paths."""

    def test_fetch_failure_writes_nothing(self, monitor, source, state_path):
        monitor.refresh(DAY1)
        before = state_path.read_text(encoding="utf-8")

        source.fail_positions = True
        result = monitor.refresh(DAY2)

        assert result.success is False
        assert "API down" in result.error
        assert result.alerts == []
        assert state_path.read_text(encoding="utf-8") == before
        assert monitor.snapshot_store.dates() == ["2024-03-14"]

    def test_metadata_failure_proceeds_unannotated(self, monitor, source):
        source.fail_instruments = True
        result = monitor.refresh(DAY1)
        assert result.success
        assert result.enriched_positions[0].company_name is None
        assert monitor.snapshot_store.dates() == ["2024-03-14"]

    def test_metadata_retried_next_cycle(self, monitor, source):
        source.fail_instruments = True
        monitor.refresh(DAY1)
        source.fail_instruments = False
        result = monitor.refresh(DAY1 + timedelta(minutes=5))
        assert source.instrument_calls == 2
        assert result.enriched_positions[0].company_name == "Apple"

    def test_save_failure_aborts_cycle(self, monitor):
        with patch.object(monitor.snapshot_store, "save_snapshot", side_effect=OSError("read-only")):
            result = monitor.refresh(DAY1)
        assert result.success is False
        assert result.alerts == []


class TestMalformedApiPayloads:
    """Refresh cycle over the Trading 212 client with malformed responses."""

    @staticmethod
    def _provider(payloads):
        def get(url, params=None, timeout=None):
            response = MagicMock()
            response.json.return_value = next(v for k, v in payloads.items() if url.endswith(k))
            return response

        session = MagicMock()
        session.headers = {}
        session.get.side_effect = get
        config = Trading212Config(api_key="k", api_secret="s", environment="demo", rate_limit=0)
        return Trading212Provider(config, session=session)

    def test_position_without_ticker_returns_error_result(self, state_path, channel):
        provider = self._provider(
            {
                "/equity/portfolio": [{"quantity": 1, "currentPrice": 10}],
                "/equity/account/cash": {"free": 1, "total": 10},
                "/equity/metadata/instruments": [],
            }
        )
        result = _build(provider, state_path, channel).refresh(DAY1)

        assert result.success is False
        assert "ticker" in result.error
        assert result.alerts == []
        assert not state_path.exists()

    def test_malformed_instruments_leave_positions_unannotated(self, state_path, channel):
        provider = self._provider(
            {
                "/equity/portfolio": [{"ticker": "AAPL_US_EQ", "quantity": 1, "currentPrice": 10}],
                "/equity/account/cash": {"free": 1, "total": 10},
                "/equity/metadata/instruments": ["oops"],
            }
        )
        result = _build(provider, state_path, channel).refresh(DAY1)

        assert result.success
        [aapl] = result.enriched_positions
        assert aapl.company_name is None
        assert aapl.instrument_currency is None

    def test_instruments_payload_not_a_list_proceeds(self, state_path, channel):
        provider = self._provider(
            {
                "/equity/portfolio": [{"ticker": "AAPL_US_EQ", "quantity": 1, "currentPrice": 10}],
                "/equity/account/cash": {"free": 1, "total": 10},
                "/equity/metadata/instruments": {"code": "oops"},
            }
        )
        monitor = _build(provider, state_path, channel)
        result = monitor.refresh(DAY1)

        assert result.success
        assert result.enriched_positions[0].company_name is None
        assert monitor.instrument_cache.state.value == "failed"


class TestTrends:
    """Test trend detection inside the cycle."""

    def test_downtrend_alert(self, monitor, source, channel):
        prices = [100.0, 97.0, 94.0, 91.0, 85.0]
        for offset, price in enumerate(prices):
            source.positions = [Position("AAPL_US_EQ", 1, 100.0, price)]
            result = monitor.refresh(datetime(2024, 3, 11, 10, 0) + timedelta(days=offset))

        [trend] = [t for t in result.trend_results if t.direction == TrendDirection.DOWN]
        assert abs(trend.change_percent - (-15.0)) < 1e-9
        assert trend.days == 5
        kinds = [a.kind for a in result.alerts]
        assert AlertKind.DOWNTREND in kinds
        assert any(title == "⚠️ AAPL Downtrend" for title, _ in channel.sent)

    def test_uptrend_alerts_can_be_disabled(self, source, state_path, channel):
        config = MonitorConfig()
        config.trend.alert_uptrends = False
        monitor = _build(source, state_path, channel, config=config)
        for offset, price in enumerate([100.0, 120.0]):
            source.positions = [Position("AAPL_US_EQ", 1, 100.0, price)]
            result = monitor.refresh(datetime(2024, 3, 11, 10, 0) + timedelta(days=offset))

        assert [t.direction for t in result.trend_results] == [TrendDirection.UP]
        assert AlertKind.UPTREND not in [a.kind for a in result.alerts]


class TestCachedStartup:
    """Test startup from stored data."""

    def test_fresh_data_used(self, source, state_path, channel):
        _build(source, state_path, channel).refresh(DAY1)

        restarted = _build(source, state_path, channel)
        cached = restarted.load_cached(DAY1 + timedelta(minutes=10))

        assert cached is not None
        assert cached.from_cache is True
        assert cached.alerts == []
        assert cached.cash.total == 330.0
        assert cached.enriched_positions[0].company_name == "Apple"
        assert cached.timestamp == DAY1

    def test_stale_data_ignored(self, source, state_path, channel):
        _build(source, state_path, channel).refresh(DAY1)
        restarted = _build(source, state_path, channel)
        assert restarted.load_cached(DAY1 + timedelta(minutes=31)) is None

    def test_alert_dedup_not_persisted(self, source, state_path, channel):
        monitor = _build(source, state_path, channel)
        monitor.refresh(DAY1)
        source.positions = [Position("AAPL_US_EQ", 2, 150.0, 150.0)]
        assert len(monitor.refresh(DAY2).alerts) == 1

        restarted = _build(source, state_path, channel)
        assert len(restarted.refresh(DAY2 + timedelta(hours=1)).alerts) == 1


class TestFxConversion:
    """Test base-currency market values."""

    def test_market_value_base(self, source, state_path, channel):
        fx = MagicMock()
        fx.fetch_rates.return_value = {"USD": 1.25}
        monitor = _build(source, state_path, channel, fx_provider=fx)

        result = monitor.refresh(DAY1)

        assert result.fx_rates == {"USD": 1.25}
        assert abs(result.enriched_positions[0].market_value_base - 256.0) < 1e-9
        fx.fetch_rates.assert_called_once_with(["USD"], base="GBP")

    def test_fx_failure_ignored(self, source, state_path, channel):
        fx = MagicMock()
        fx.fetch_rates.return_value = None
        result = _build(source, state_path, channel, fx_provider=fx).refresh(DAY1)
        assert result.success
        assert result.enriched_positions[0].market_value_base is None


class TestRefreshResult:
    """Test result serialization."""

    def test_to_dict_is_json_serializable(self, monitor):
        result = monitor.refresh(DAY1)
        data = json.loads(json.dumps(result.to_dict()))
        assert data["positions"][0]["short_ticker"] == "AAPL"
        assert data["from_cache"] is False


class TestFromConfig:
    """Test assembly from configuration."""

    def test_requires_credentials(self, tmp_path):
        config = MonitorConfig()
        config.storage.path = str(tmp_path / "state.json")
        with pytest.raises(ValueError):
            PortfolioMonitor.from_config(config)

    def test_with_injected_source(self, tmp_path, source):
        config = MonitorConfig()
        config.storage.path = str(tmp_path / "state.json")
        config.fx.enabled = False
        monitor = PortfolioMonitor.from_config(config, source=source, channel=LogChannel())
        assert monitor.fx_provider is None
        assert monitor.refresh(DAY1).success
