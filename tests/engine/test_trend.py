"""Tests for multi-day trend detection."""

from datetime import datetime

from src.data.models import Position, Snapshot
from src.engine.models import TrendDirection
from src.engine.performance import (
    calc_change_percent,
    detect_downtrends,
    detect_trends,
    detect_uptrends,
)


def _snapshot(day: str, prices: dict[str, float]) -> Snapshot:
    return Snapshot(
        date=day,
        positions=tuple(Position(t, 1, 100.0, p) for t, p in prices.items()),
        captured_at=datetime.fromisoformat(f"{day}T12:00:00"),
    )


class TestDetectDowntrends:
    """Test downtrend detection."""

    def test_first_vs_last(self):
        window = [
            _snapshot("2024-03-11", {"AAPL_US_EQ": 100.0}),
            _snapshot("2024-03-15", {"AAPL_US_EQ": 85.0}),
        ]
        [trend] = detect_downtrends(window, -10)

        assert trend.ticker == "AAPL_US_EQ"
        assert trend.short_ticker == "AAPL"
        assert trend.direction == TrendDirection.DOWN
        assert abs(trend.change_percent - (-15.0)) < 1e-9
        assert trend.days == 2
        assert trend.start_date == "2024-03-11"
        assert trend.end_date == "2024-03-15"

    def test_only_endpoints_compared(self):
        # Intermediate crash does not matter, only first and last
        window = [
            _snapshot("2024-03-11", {"AAPL_US_EQ": 100.0}),
            _snapshot("2024-03-12", {"AAPL_US_EQ": 50.0}),
            _snapshot("2024-03-13", {"AAPL_US_EQ": 95.0}),
        ]
        assert detect_downtrends(window, -10) == []

    def test_threshold_inclusive(self):
        window = [
            _snapshot("2024-03-11", {"AAPL_US_EQ": 100.0}),
            _snapshot("2024-03-12", {"AAPL_US_EQ": 90.0}),
        ]
        threshold = calc_change_percent(100.0, 90.0)
        assert len(detect_downtrends(window, threshold)) == 1
        assert len(detect_uptrends(window, -threshold)) == 0

    def test_ticker_missing_from_either_end(self):
        window = [
            _snapshot("2024-03-11", {"AAPL_US_EQ": 100.0}),
            _snapshot("2024-03-12", {"AAPL_US_EQ": 80.0, "TSLA_US_EQ": 10.0}),
            _snapshot("2024-03-13", {"TSLA_US_EQ": 5.0}),
        ]
        assert detect_downtrends(window, -10) == []

    def test_fewer_than_two_snapshots(self):
        assert detect_downtrends([], -10) == []
        assert detect_downtrends([_snapshot("2024-03-11", {"AAPL_US_EQ": 1.0})], -10) == []

    def test_zero_start_price_skipped(self):
        window = [
            _snapshot("2024-03-11", {"AAPL_US_EQ": 0.0}),
            _snapshot("2024-03-12", {"AAPL_US_EQ": 50.0}),
        ]
        assert detect_downtrends(window, -10) == []
        assert detect_uptrends(window, 10) == []

    def test_sorted_worst_first(self):
        window = [
            _snapshot("2024-03-11", {"A_US_EQ": 100.0, "B_US_EQ": 100.0, "C_US_EQ": 100.0}),
            _snapshot("2024-03-15", {"A_US_EQ": 85.0, "B_US_EQ": 70.0, "C_US_EQ": 85.0}),
        ]
        result = detect_downtrends(window, -10)
        assert [t.ticker for t in result] == ["B_US_EQ", "A_US_EQ", "C_US_EQ"]

    def test_days_counts_window(self):
        window = [_snapshot(f"2024-03-1{i}", {"AAPL_US_EQ": 100.0 - i * 5}) for i in range(5)]
        [trend] = detect_downtrends(window, -10)
        assert trend.days == 5


class TestDetectUptrends:
    """Test uptrend detection."""

    def test_uptrend(self):
        window = [
            _snapshot("2024-03-11", {"AAPL_US_EQ": 100.0, "TSLA_US_EQ": 100.0}),
            _snapshot("2024-03-15", {"AAPL_US_EQ": 112.0, "TSLA_US_EQ": 125.0}),
        ]
        result = detect_uptrends(window, 10)
        assert [t.ticker for t in result] == ["TSLA_US_EQ", "AAPL_US_EQ"]
        assert all(t.direction == TrendDirection.UP for t in result)

    def test_generic_direction(self):
        window = [
            _snapshot("2024-03-11", {"AAPL_US_EQ": 100.0}),
            _snapshot("2024-03-15", {"AAPL_US_EQ": 85.0}),
        ]
        assert detect_trends(window, 10, TrendDirection.UP) == []
        assert len(detect_trends(window, -10, TrendDirection.DOWN)) == 1

    def test_to_dict(self):
        window = [
            _snapshot("2024-03-11", {"AAPL_US_EQ": 100.0}),
            _snapshot("2024-03-15", {"AAPL_US_EQ": 120.0}),
        ]
        [trend] = detect_uptrends(window)
        data = trend.to_dict()
        assert data["direction"] == "up"
        assert data["days"] == 2
