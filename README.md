# fantasyfinance

An asyncio library for playing at the stock market. Users record buy orders,
which are kept on disk; the library follows the market price of every symbol
that has been ordered, keeps a daily closing price per symbol, and values each
user's holdings against the latest price.

## Installing

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## The parts

### Orders — `fantasyfinance.holdings`

- `Order(user, symbol, amount, price)` is one buy order. `to_dict()` and
  `Order.from_dict(data)` convert to and from a plain mapping;
  `from_dict` raises `ValueError` on a missing field or a field of the wrong type.
- `HoldingStore(data_dir)` keeps orders per user in memory and writes each
  user's full order list to `data_dir/<user>/orders.json`.
  - `await add_order(order)` records an order; if the file cannot be written it
    raises `StoreError("failed to persist order")`.
  - `await all_orders()` returns every cached order.
  - `await orders_for_user(user)` returns a user's orders, reading them from
    disk when they are not cached yet. It raises `NoOrdersError` (a
    `StoreError`, message `no orders for user <user>`) when there are none, and
    `StoreError` when the file cannot be read.

### Holdings — `fantasyfinance.portfolio`

- `Holding` is an order valued at a current price at a point in time, with
  `to_dict()` and `Holding.from_dict(data)` (timestamps in ISO 8601).
- `HoldingsService` keeps holdings per user.
  `await record(order, current_price, now)` updates the holding for the same
  symbol, price and amount recorded on the same UTC day, or adds a new one.
  `await all()` and `await for_user(user)` list them.

### Market data — `fantasyfinance.market`

- `QuoteFetcher` is the abstract quote source: implement
  `async fetch_quotes(symbol)` returning a list of `Quote`, oldest first.
- `YahooFetcher` fetches daily quotes for the last month from the Yahoo chart
  service over HTTP. It accepts an optional `httpx.AsyncClient`, a base URL and
  a timeout.
- `MarketData(fetcher, data_dir, update_interval=120)`:
  - `await update(store, holdings)` fetches quotes for every symbol in the
    store, appends the latest close to `data_dir/<symbol>/prices.json` when it
    falls on a new day, and records a holding for every order whose symbol has
    a price. A failing fetch is logged and re-raised.
  - `await prices()` maps each tracked symbol to its latest close.
  - `await symbols()` lists the symbols tracked by the last update.
  - `await history(symbol)` returns the stored `DailyClose` entries.
  - `await run(store, holdings)` calls `update` forever, logging failures and
    sleeping `update_interval` seconds between rounds.

### Wiring — `fantasyfinance.state`

`AppState.create(data_dir, fetcher)` builds a `HoldingStore` at `data_dir`, a
`MarketData` under `data_dir/market` and an empty `HoldingsService`.

## Example

```python
import asyncio

from fantasyfinance.holdings import Order
from fantasyfinance.market import Quote, QuoteFetcher
from fantasyfinance.state import AppState


class FixedFetcher(QuoteFetcher):
    async def fetch_quotes(self, symbol):
        return [Quote(timestamp=0, open=10.0, high=10.0, low=10.0,
                      volume=0, close=10.0, adjclose=10.0)]


async def demo():
    state = AppState.create("data", FixedFetcher())
    await state.store.add_order(Order(user="alice", symbol="AAPL", amount=5, price=8.0))
    await state.market.update(state.store, state.holdings)
    print(await state.market.prices())          # {'AAPL': 10.0}
    print(await state.holdings.for_user("alice"))


asyncio.run(demo())
```

## What it does not do

The package is a library only. It has no HTTP server and no command to start
one: there are no endpoints for posting orders or reading holdings and prices,
and no error-to-response mapping. An application that wants to serve this data
has to build its own front end around `AppState`.