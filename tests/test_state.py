import pytest

from fantasyfinance.holdings import Order
from fantasyfinance.market import PRICES_FILE, Quote, QuoteFetcher
from fantasyfinance.state import AppState


class MockFetcher(QuoteFetcher):
    async def fetch_quotes(self, symbol):
        return [Quote(0, 10.0, 10.0, 10.0, 0, 10.0, 10.0)]


def test_create_places_market_under_data_dir(tmp_path):
    state = AppState.create(tmp_path, MockFetcher())
    assert state.store.data_dir == tmp_path
    assert state.market.data_dir == tmp_path / "market"


@pytest.mark.asyncio
async def test_created_state_parts_work_together(tmp_path):
    state = AppState.create(tmp_path, MockFetcher())
    await state.store.add_order(Order("alice", "AAPL", 1, 1.0))
    await state.market.update(state.store, state.holdings)

    assert await state.market.prices() == {"AAPL": 10.0}
    holdings = await state.holdings.for_user("alice")
    assert [h.current_price for h in holdings] == [10.0]
    assert (tmp_path / "market" / "AAPL" / PRICES_FILE).exists()


@pytest.mark.asyncio
async def test_created_state_starts_empty(tmp_path):
    state = AppState.create(tmp_path, MockFetcher())
    assert await state.store.all_orders() == []
    assert await state.market.symbols() == []
    assert await state.holdings.all() == []