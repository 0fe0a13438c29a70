from datetime import datetime, timedelta, timezone

import pytest

from fantasyfinance.holdings import Order
from fantasyfinance.portfolio import Holding, HoldingsService


def order():
    return Order(user="alice", symbol="AAPL", amount=1, price=10.0)


@pytest.mark.asyncio
async def test_record_updates_same_day():
    svc = HoldingsService()
    now = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)
    await svc.record(order(), 11.0, now)
    await svc.record(order(), 12.0, now + timedelta(hours=1))
    holdings = await svc.for_user("alice")
    assert len(holdings) == 1
    assert holdings[0].current_price == 12.0
    assert holdings[0].updated_at == now + timedelta(hours=1)


@pytest.mark.asyncio
async def test_record_new_day_adds_entry():
    svc = HoldingsService()
    now = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)
    await svc.record(order(), 11.0, now)
    await svc.record(order(), 12.0, now + timedelta(days=1))
    holdings = await svc.for_user("alice")
    assert len(holdings) == 2


@pytest.mark.asyncio
async def test_record_different_amount_adds_entry():
    svc = HoldingsService()
    now = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)
    await svc.record(order(), 11.0, now)
    await svc.record(Order(user="alice", symbol="AAPL", amount=2, price=10.0), 11.0, now)
    assert len(await svc.for_user("alice")) == 2


@pytest.mark.asyncio
async def test_all_and_unknown_user():
    svc = HoldingsService()
    now = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)
    await svc.record(order(), 11.0, now)
    await svc.record(Order(user="bob", symbol="MSFT", amount=1, price=2.0), 20.0, now)
    assert len(await svc.all()) == 2
    assert await svc.for_user("nobody") == []


@pytest.mark.asyncio
async def test_recorded_holding_fields():
    svc = HoldingsService()
    now = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)
    await svc.record(order(), 11.0, now)
    (holding,) = await svc.for_user("alice")
    assert holding == Holding(
        user="alice",
        symbol="AAPL",
        original_price=10.0,
        current_price=11.0,
        amount=1,
        updated_at=now,
    )


def test_holding_dict_round_trip():
    holding = Holding(
        user="alice",
        symbol="AAPL",
        original_price=10.0,
        current_price=12.0,
        amount=1,
        updated_at=datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc),
    )
    assert Holding.from_dict(holding.to_dict()) == holding


def test_holding_from_dict_accepts_z_suffix():
    holding = Holding.from_dict(
        {
            "user": "alice",
            "symbol": "AAPL",
            "original_price": 10.0,
            "current_price": 12.0,
            "amount": 1,
            "updated_at": "2024-05-01T09:00:00Z",
        }
    )
    assert holding.updated_at == datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)