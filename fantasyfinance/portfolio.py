"""Per-user holdings snapshots priced at the latest market value."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any

from .holdings import Order


def _utc_date(moment: datetime) -> date:
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(timezone.utc).date()


@dataclass
class Holding:
    """An order valued at a current price at a point in time."""

    user: str
    symbol: str
    original_price: float
    current_price: float
    amount: int
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "user": self.user,
            "symbol": self.symbol,
            "original_price": self.original_price,
            "current_price": self.current_price,
            "amount": self.amount,
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Holding:
        stamp = data["updated_at"]
        if stamp.endswith("Z"):
            stamp = stamp[:-1] + "+00:00"
        return cls(
            user=data["user"],
            symbol=data["symbol"],
            original_price=float(data["original_price"]),
            current_price=float(data["current_price"]),
            amount=int(data["amount"]),
            updated_at=datetime.fromisoformat(stamp),
        )


class HoldingsService:
    """Tracks holdings per user, keeping one snapshot per order per day."""

    def __init__(self) -> None:
        self._holdings: dict[str, list[Holding]] = {}

    async def record(self, order: Order, current_price: float, now: datetime) -> None:
        """Update today's snapshot for the order, or add a new one."""
        entries = self._holdings.setdefault(order.user, [])
        today = _utc_date(now)
        for existing in entries:
            if (
                existing.symbol == order.symbol
                and abs(existing.original_price - order.price) < sys.float_info.epsilon
                and existing.amount == order.amount
                and _utc_date(existing.updated_at) == today
            ):
                existing.current_price = current_price
                existing.updated_at = now
                return
        entries.append(
            Holding(
                user=order.user,
                symbol=order.symbol,
                original_price=order.price,
                current_price=current_price,
                amount=order.amount,
                updated_at=now,
            )
        )

    async def all(self) -> list[Holding]:
        return [holding for entries in self._holdings.values() for holding in entries]

    async def for_user(self, user: str) -> list[Holding]:
        return list(self._holdings.get(user, []))