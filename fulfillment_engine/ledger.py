from __future__ import annotations

import threading
from decimal import Decimal
from typing import Any, Dict, List, Optional, Set

from fulfillment_engine.journal import Journal
from fulfillment_engine.models import Item, to_decimal


def _positive_amount(amount: Any) -> Optional[Decimal]:
    try:
        qty = to_decimal(amount)
    except ValueError:
        return None
    return qty if qty > 0 else None


class StockLedger:
    """
    Catalog plus quantity on hand, kept in memory.

    Stock rows may exist without a catalog entry (restocking by name), but
    such rows never show up in catalog queries. Quantities never go below 0.
    """

    def __init__(self, journal: Optional[Journal] = None) -> None:
        self.journal = journal or Journal()
        self._catalog: Dict[str, Item] = {}
        self._stock: Dict[str, Decimal] = {}
        self._lock = threading.Lock()

    def register_item(self, item: Item, initial_quantity: Any = 0) -> None:
        qty = to_decimal(initial_quantity)
        if qty < 0:
            raise ValueError(f"Initial stock for {item.name} must be >= 0")
        with self._lock:
            self._catalog[item.name] = item
            self._stock[item.name] = qty
        self.journal.log(f"[stock] registered {item.describe()} on_hand={qty}")

    def credit(self, name: str, amount: Any) -> None:
        qty = _positive_amount(amount)
        if qty is None:
            return
        with self._lock:
            on_hand = self._stock.get(name, Decimal("0")) + qty
            self._stock[name] = on_hand
        self.journal.log(f"[stock] credited {name} qty={qty} (on_hand={on_hand})")

    def debit(self, name: str, amount: Any) -> bool:
        qty = _positive_amount(amount)
        if qty is None:
            return False
        with self._lock:
            on_hand = self._stock.get(name)
            if on_hand is None or on_hand < qty:
                return False
            on_hand -= qty
            self._stock[name] = on_hand
        self.journal.log(f"[stock] debited {name} qty={qty} (on_hand={on_hand})")
        return True

    def low_stock(self, threshold: Any = 5) -> Set[Item]:
        limit = to_decimal(threshold)
        with self._lock:
            return {
                self._catalog[name]
                for name, on_hand in self._stock.items()
                if on_hand < limit and name in self._catalog
            }

    # Read helpers
    def quantity(self, name: str) -> Decimal:
        with self._lock:
            return self._stock.get(name, Decimal("0"))

    def item(self, name: str) -> Item:
        with self._lock:
            item = self._catalog.get(name)
        if item is None:
            raise KeyError(f"Item {name} not found")
        return item

    def has_item(self, name: str) -> bool:
        with self._lock:
            return name in self._catalog

    def catalog(self) -> List[Item]:
        with self._lock:
            items = list(self._catalog.values())
        return sorted(items, key=lambda it: it.name)

    def stock(self) -> Dict[str, Decimal]:
        with self._lock:
            return dict(self._stock)
