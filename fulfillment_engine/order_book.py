from __future__ import annotations

import threading
from collections import deque
from decimal import Decimal
from typing import Deque, List, Optional, Tuple

from fulfillment_engine.journal import Journal
from fulfillment_engine.ledger import StockLedger
from fulfillment_engine.models import Order


class OrderBook:
    """
    Pending queue, committed orders and the revenue they add up to.

    process_next() is the commit: dequeue the head, debit its stock, book it.
    An order that cannot be covered by stock is dropped, not re-queued, and
    the call returns False just like it does for an empty queue. Callers that
    want to retry must enqueue the order again.
    """

    def __init__(self, journal: Optional[Journal] = None) -> None:
        self.journal = journal or Journal()
        self._pending: Deque[Order] = deque()
        self._committed: List[Order] = []
        self._revenue = Decimal("0")
        self._lock = threading.Lock()
        self.last_discarded: Optional[Order] = None

    def enqueue(self, order: Order) -> None:
        with self._lock:
            self._pending.append(order)
            depth = len(self._pending)
        self.journal.log(f"[order={order}] queued (pending={depth})")

    def process_next(self, ledger: StockLedger) -> bool:
        return self.commit_next(ledger) is not None

    def commit_next(self, ledger: StockLedger) -> Optional[Order]:
        """Same as process_next(), but returns the committed order or None."""
        with self._lock:
            if not self._pending:
                return None
            order = self._pending.popleft()

            if not ledger.debit(order.item.name, order.quantity):
                self.last_discarded = order
                self.journal.log(
                    f"[order={order}] discarded: insufficient stock "
                    f"(on_hand={ledger.quantity(order.item.name)})"
                )
                return None

            self._committed.append(order)
            self._revenue += order.total_price
            revenue = self._revenue

        self.journal.log(f"[order={order}] committed total={order.total_price} (revenue={revenue})")
        return order

    def pending(self) -> Tuple[Order, ...]:
        with self._lock:
            return tuple(self._pending)

    def committed(self) -> Tuple[Order, ...]:
        with self._lock:
            return tuple(self._committed)

    @property
    def revenue(self) -> Decimal:
        with self._lock:
            return self._revenue
