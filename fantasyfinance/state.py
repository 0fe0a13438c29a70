"""Shared application state handed to request handlers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .holdings import HoldingStore
from .market import MarketData, QuoteFetcher
from .portfolio import HoldingsService


@dataclass
class AppState:
    """The order store, market data and holdings used by the web application."""

    store: HoldingStore
    market: MarketData
    holdings: HoldingsService

    @classmethod
    def create(cls, data_dir: str | Path, fetcher: QuoteFetcher) -> AppState:
        """Build state rooted at ``data_dir``, with market data kept under ``market``."""
        root = Path(data_dir)
        return cls(
            store=HoldingStore(root),
            market=MarketData(fetcher, root / "market"),
            holdings=HoldingsService(),
        )