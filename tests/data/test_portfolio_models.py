"""Tests for portfolio data models."""

from datetime import datetime

import pytest

from src.data.models import CashBalance, InstrumentMetadata, Position, Snapshot


class TestPosition:
    """Test Position parsing and persistence."""

    def test_from_api_camel_case(self):
        pos = Position.from_api(
            {
                "ticker": "AAPL_US_EQ",
                "quantity": 2,
                "averagePrice": 150.0,
                "currentPrice": 160.0,
                "ppl": 20.0,
                "fxPpl": -1.5,
                "initialFillDate": "2024-01-02T10:00:00.000+00:00",
            }
        )
        assert pos.ticker == "AAPL_US_EQ"
        assert pos.quantity == 2.0
        assert pos.average_price == 150.0
        assert pos.current_price == 160.0
        assert pos.ppl == 20.0
        assert pos.fx_ppl == -1.5

    def test_from_api_missing_optional_fields(self):
        pos = Position.from_api({"ticker": "VODl_EQ", "quantity": "10", "currentPrice": None})
        assert pos.quantity == 10.0
        assert pos.current_price == 0.0
        assert pos.ppl == 0.0
        assert pos.fx_ppl is None

    def test_dict_round_trip(self):
        pos = Position("AAPL_US_EQ", 2, 150.0, 160.0, 20.0)
        assert Position.from_dict(pos.to_dict()) == pos

    def test_market_value(self):
        pos = Position("AAPL_US_EQ", 2, 150.0, 160.0)
        assert pos.market_value == 320.0

    def test_immutable(self):
        pos = Position("AAPL_US_EQ", 2, 150.0, 160.0)
        with pytest.raises(AttributeError):
            pos.current_price = 1.0


class TestSnapshot:
    """Test Snapshot persistence."""

    def test_dict_round_trip(self):
        snap = Snapshot(
            date="2024-03-15",
            positions=(Position("AAPL_US_EQ", 2, 150.0, 160.0),),
            captured_at=datetime(2024, 3, 15, 14, 30),
        )
        restored = Snapshot.from_dict(snap.to_dict())
        assert restored == snap

    def test_price_map(self):
        snap = Snapshot(
            date="2024-03-15",
            positions=(
                Position("AAPL_US_EQ", 2, 150.0, 160.0),
                Position("TSLA_US_EQ", 1, 200.0, 180.0),
            ),
            captured_at=datetime(2024, 3, 15, 14, 30),
        )
        assert snap.price_map() == {"AAPL_US_EQ": 160.0, "TSLA_US_EQ": 180.0}


class TestInstrumentMetadata:
    """Test InstrumentMetadata parsing."""

    def test_from_api(self):
        meta = InstrumentMetadata.from_api(
            {"ticker": "AAPL_US_EQ", "name": "Apple", "currencyCode": "USD", "isin": "US0378331005"}
        )
        assert meta.name == "Apple"
        assert meta.currency_code == "USD"
        assert InstrumentMetadata.from_dict(meta.to_dict()) == meta


class TestCashBalance:
    """Test CashBalance parsing."""

    def test_from_api_keeps_unknown_fields(self):
        cash = CashBalance.from_api(
            {"free": 100.5, "total": 1000, "ppl": 12.3, "result": 4, "invested": 887.2, "pieCash": 0}
        )
        assert cash.free == 100.5
        assert cash.total == 1000.0
        assert cash.blocked is None
        assert cash.extra == {"pieCash": 0}

    def test_dict_round_trip(self):
        cash = CashBalance(free=1.0, total=2.0, ppl=3.0, result=4.0, invested=5.0, blocked=0.5)
        assert CashBalance.from_dict(cash.to_dict()) == cash
