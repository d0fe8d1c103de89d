from __future__ import annotations

import threading
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Optional, Set, Tuple

from fulfillment_engine.actuator import RobotLink
from fulfillment_engine.journal import Journal
from fulfillment_engine.ledger import StockLedger
from fulfillment_engine.models import Item, Order
from fulfillment_engine.order_book import OrderBook

DispatchCallback = Callable[[Order, Optional[Exception]], None]


@dataclass(frozen=True, slots=True)
class Snapshot:
    pending: Tuple[Order, ...]
    committed: Tuple[Order, ...]
    revenue: Decimal


@dataclass(frozen=True, slots=True)
class FulfillmentResult:
    committed: bool
    snapshot: Snapshot
    order: Optional[Order] = None
    # Background robot dispatch; join() only for diagnostics/tests.
    dispatch: Optional[threading.Thread] = None


class FulfillmentCoordinator:
    """
    Entry point for the UI: catalog/stock calls, enqueue, fulfill_next and
    read-only snapshots.

    The sale is final once process_next() commits. The robot is told to move
    afterwards on a background thread; whatever happens on that thread is
    logged and passed to on_dispatch, never raised to the caller and never
    undone in the books.
    """

    def __init__(
        self,
        ledger: Optional[StockLedger] = None,
        book: Optional[OrderBook] = None,
        actuator: Optional[RobotLink] = None,
        journal: Optional[Journal] = None,
        on_dispatch: Optional[DispatchCallback] = None,
    ):
        self.journal = journal or Journal()
        self.ledger = ledger or StockLedger(self.journal)
        self.book = book or OrderBook(self.journal)
        self.actuator = actuator
        self.on_dispatch = on_dispatch

    # Ledger passthrough
    def register_item(self, item: Item, initial_quantity: Any = 0) -> None:
        self.ledger.register_item(item, initial_quantity)

    def credit(self, name: str, amount: Any) -> None:
        self.ledger.credit(name, amount)

    def debit(self, name: str, amount: Any) -> bool:
        return self.ledger.debit(name, amount)

    def quantity(self, name: str) -> Decimal:
        return self.ledger.quantity(name)

    def low_stock(self, threshold: Any = 5) -> Set[Item]:
        return self.ledger.low_stock(threshold)

    def enqueue(self, item_name: str, quantity: Any) -> Optional[Order]:
        if not self.ledger.has_item(item_name):
            self.journal.log(f"[order={item_name} x {quantity}] rejected: unknown item")
            return None
        try:
            order = Order(self.ledger.item(item_name), quantity)
        except ValueError as e:
            self.journal.log(f"[order={item_name} x {quantity}] rejected: {e}")
            return None

        self.book.enqueue(order)
        return order

    def fulfill_next(self) -> FulfillmentResult:
        order = self.book.commit_next(self.ledger)
        if order is None:
            return FulfillmentResult(committed=False, snapshot=self.snapshot())

        dispatch = self._start_dispatch(order)
        return FulfillmentResult(committed=True, snapshot=self.snapshot(), order=order, dispatch=dispatch)

    def snapshot(self) -> Snapshot:
        return Snapshot(
            pending=self.book.pending(),
            committed=self.book.committed(),
            revenue=self.book.revenue,
        )

    def _start_dispatch(self, order: Order) -> Optional[threading.Thread]:
        if self.actuator is None:
            self.journal.log(f"[order={order}] robot disabled, no dispatch")
            return None

        thread = threading.Thread(target=self._dispatch, args=(order,), name=f"dispatch-{order.item.name}", daemon=True)
        thread.start()
        return thread

    def _dispatch(self, order: Order) -> None:
        self.journal.log(f"[order={order}] DISPATCH to {self.actuator.host}")
        error: Optional[Exception] = None
        try:
            self.actuator.release_and_run()
            self.journal.log(f"[order={order}] DISPATCH OK")
        except Exception as e:
            error = e
            self.journal.warn(f"[order={order}] DISPATCH FAILED: {e}")

        if self.on_dispatch is not None:
            try:
                self.on_dispatch(order, error)
            except Exception as cb_exc:
                self.journal.warn(f"[order={order}] dispatch callback failed: {cb_exc}")
