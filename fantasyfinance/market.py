"""Market prices for held symbols, refreshed periodically and persisted daily."""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import httpx

from .holdings import HoldingStore
from .portfolio import HoldingsService

logger = logging.getLogger(__name__)

PRICES_FILE = "prices.json"
UPDATE_INTERVAL_SECS = 120
YAHOO_CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart/{symbol}"
_QUOTE_FIELDS = ("open", "high", "low", "close", "volume")


@dataclass(frozen=True)
class Quote:
    """One bar of market data."""

    timestamp: int
    open: float
    high: float
    low: float
    volume: int
    close: float
    adjclose: float


@dataclass
class DailyClose:
    """The closing price of a symbol on one calendar day (ISO date)."""

    date: str
    close: float

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DailyClose:
        return cls(date=str(data["date"]), close=float(data["close"]))


@dataclass
class PriceInfo:
    """Historical quotes for a symbol."""

    history: list[Quote] = field(default_factory=list)

    def latest_price(self) -> float | None:
        return self.history[-1].close if self.history else None


class QuoteFetcher(ABC):
    """A source of quotes for a symbol."""

    @abstractmethod
    async def fetch_quotes(self, symbol: str) -> list[Quote]:
        """Return the recent quotes for ``symbol``, oldest first."""


def _column_value(column: list[Any], index: int) -> Any:
    return column[index] if index < len(column) else None


def _parse_chart(payload: dict[str, Any]) -> list[Quote]:
    chart = payload.get("chart") or {}
    error = chart.get("error")
    if error:
        description = error.get("description", error) if isinstance(error, dict) else error
        raise ValueError(f"quote service error: {description}")
    results = chart.get("result") or []
    if not results:
        raise ValueError("no chart data returned")
    result = results[0]
    timestamps = result.get("timestamp") or []
    indicators = result.get("indicators") or {}
    quote_block = (indicators.get("quote") or [{}])[0] or {}
    columns = {name: quote_block.get(name) or [] for name in _QUOTE_FIELDS}
    adj_block = indicators.get("adjclose") or []
    adjcloses = (adj_block[0] or {}).get("adjclose") or [] if adj_block else []

    quotes = []
    for index, stamp in enumerate(timestamps):
        values = {name: _column_value(column, index) for name, column in columns.items()}
        if any(value is None for value in values.values()):
            continue
        adjclose = _column_value(adjcloses, index)
        quotes.append(
            Quote(
                timestamp=int(stamp),
                open=float(values["open"]),
                high=float(values["high"]),
                low=float(values["low"]),
                volume=int(values["volume"]),
                close=float(values["close"]),
                adjclose=float(values["close"] if adjclose is None else adjclose),
            )
        )
    return quotes


class YahooFetcher(QuoteFetcher):
    """Fetches daily quotes for the last month from the Yahoo chart service."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        base_url: str = YAHOO_CHART_URL,
        timeout: float = 30.0,
    ) -> None:
        self._client = client
        self._base_url = base_url
        self._timeout = timeout

    async def fetch_quotes(self, symbol: str) -> list[Quote]:
        url = self._base_url.format(symbol=symbol)
        params = {"symbol": symbol, "interval": "1d", "range": "1mo"}
        if self._client is not None:
            response = await self._client.get(url, params=params)
        else:
            headers = {"User-Agent": "Mozilla/5.0"}
            async with httpx.AsyncClient(timeout=self._timeout, headers=headers) as client:
                response = await client.get(url, params=params)
        response.raise_for_status()
        return _parse_chart(response.json())


class MarketData:
    """In-memory market prices refreshed in the background, with daily closes on disk."""

    def __init__(
        self,
        fetcher: QuoteFetcher,
        data_dir: str | Path,
        update_interval: float = UPDATE_INTERVAL_SECS,
    ) -> None:
        self.fetcher = fetcher
        self.data_dir = Path(data_dir)
        self.update_interval = update_interval
        self._prices: dict[str, PriceInfo] = {}
        self._fs_lock = asyncio.Lock()

    def _symbol_file(self, symbol: str) -> Path:
        return self.data_dir / symbol / PRICES_FILE

    async def _write_symbol_file(self, symbol: str, closes: list[DailyClose]) -> None:
        async with self._fs_lock:
            path = self._symbol_file(symbol)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps([asdict(c) for c in closes]), encoding="utf-8")

    async def history(self, symbol: str) -> list[DailyClose]:
        """Return the persisted daily closes for ``symbol``, oldest first."""
        path = self._symbol_file(symbol)
        if not path.exists():
            return []
        async with self._fs_lock:
            raw = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(raw, list):
            raise ValueError("prices file must hold a list")
        return [DailyClose.from_dict(item) for item in raw]

    async def update(self, store: HoldingStore, holdings: HoldingsService) -> None:
        """Refresh quotes for every symbol held in ``store`` and record holdings."""
        orders = await store.all_orders()
        symbols = {order.symbol for order in orders}

        fresh: dict[str, PriceInfo] = {}
        for symbol in symbols:
            logger.info("fetching quotes for %s", symbol)
            try:
                quotes = await self.fetcher.fetch_quotes(symbol)
            except Exception as exc:
                logger.error("failed to fetch quotes for %s: %s", symbol, exc)
                raise
            logger.info("received %d quotes for %s", len(quotes), symbol)
            if quotes:
                last = quotes[-1]
                day = datetime.fromtimestamp(last.timestamp, tz=timezone.utc).date().isoformat()
                closes = await self.history(symbol)
                if not closes or closes[-1].date != day:
                    closes.append(DailyClose(date=day, close=last.close))
                    await self._write_symbol_file(symbol, closes)
            fresh[symbol] = PriceInfo(history=list(quotes))

        self._prices = fresh

        now = datetime.now(timezone.utc)
        latest = {
            symbol: price
            for symbol, info in fresh.items()
            if (price := info.latest_price()) is not None
        }
        for order in orders:
            price = latest.get(order.symbol)
            if price is not None:
                await holdings.record(order, price, now)

    async def prices(self) -> dict[str, float]:
        """Current price of every tracked symbol that has quotes."""
        return {
            symbol: price
            for symbol, info in self._prices.items()
            if (price := info.latest_price()) is not None
        }

    async def symbols(self) -> list[str]:
        """Symbols tracked by the last update."""
        return list(self._prices)

    async def run(self, store: HoldingStore, holdings: HoldingsService) -> None:
        """Update forever, pausing ``update_interval`` seconds between rounds."""
        while True:
            logger.info("running market data update")
            try:
                await self.update(store, holdings)
            except Exception as exc:
                logger.error("market data update failed: %s", exc)
            await asyncio.sleep(self.update_interval)