"""Order storage: an in-memory cache per user, persisted to one file per user."""

from __future__ import annotations

import asyncio
import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

ORDERS_FILE = "orders.json"


class StoreError(Exception):
    """Raised when the order store cannot complete an operation."""


class NoOrdersError(StoreError):
    """Raised when a user has no recorded orders."""

    def __init__(self, user: str) -> None:
        super().__init__(f"no orders for user {user}")
        self.user = user


@dataclass
class Order:
    """A single buy order placed by a user."""

    user: str
    symbol: str
    amount: int
    price: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Order:
        """Build an order from a mapping, validating field types."""
        try:
            user = data["user"]
            symbol = data["symbol"]
            amount = data["amount"]
            price = data["price"]
        except KeyError as exc:
            raise ValueError(f"missing field {exc.args[0]}") from exc
        if not isinstance(user, str) or not isinstance(symbol, str):
            raise ValueError("user and symbol must be strings")
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ValueError("amount must be an integer")
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            raise ValueError("price must be a number")
        return cls(user=user, symbol=symbol, amount=amount, price=float(price))


class HoldingStore:
    """Keeps orders per user in memory and mirrors each user's orders to disk."""

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)
        self._orders: dict[str, list[Order]] = {}
        self._fs_lock = asyncio.Lock()

    def _user_file(self, user: str) -> Path:
        return self.data_dir / user / ORDERS_FILE

    async def add_order(self, order: Order) -> None:
        """Record an order and persist the user's full order list."""
        self._orders.setdefault(order.user, []).append(order)
        try:
            await self._write_user_file(order.user)
        except OSError as exc:
            raise StoreError("failed to persist order") from exc

    async def all_orders(self) -> list[Order]:
        return [order for orders in self._orders.values() for order in orders]

    async def orders_for_user(self, user: str) -> list[Order]:
        """Return a user's orders, loading them from disk if not cached."""
        cached = self._orders.get(user)
        if cached is not None:
            return list(cached)

        try:
            loaded = await self._read_user_file(user)
        except (OSError, ValueError, TypeError) as exc:
            raise StoreError(f"failed to load orders for {user}") from exc
        if not loaded:
            raise NoOrdersError(user)

        self._orders[user] = list(loaded)
        return loaded

    async def _write_user_file(self, user: str) -> None:
        async with self._fs_lock:
            path = self._user_file(user)
            path.parent.mkdir(parents=True, exist_ok=True)
            orders = [order.to_dict() for order in self._orders.get(user, [])]
            path.write_text(json.dumps(orders), encoding="utf-8")

    async def _read_user_file(self, user: str) -> list[Order]:
        path = self._user_file(user)
        if not path.exists():
            return []
        async with self._fs_lock:
            raw = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(raw, list):
            raise ValueError("orders file must hold a list")
        return [Order.from_dict(item) for item in raw]