"""Pytest fixtures: seeded ledger, order book, fake robot controller."""

import socket
import threading
import time
from typing import List, Tuple

import pytest

from fulfillment_engine.journal import Journal
from fulfillment_engine.ledger import StockLedger
from fulfillment_engine.models import Item
from fulfillment_engine.order_book import OrderBook


class CaptureServer:
    """Accepts connections on a localhost port and records what each one sent."""

    def __init__(self) -> None:
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(8)
        self._sock.settimeout(0.2)
        self.port: int = self._sock.getsockname()[1]
        self.received: List[bytes] = []
        self._cond = threading.Condition()
        self._running = True
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self) -> None:
        while self._running:
            try:
                conn, _ = self._sock.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            with conn:
                conn.settimeout(2.0)
                chunks = []
                while True:
                    chunk = conn.recv(4096)
                    if not chunk:
                        break
                    chunks.append(chunk)
            with self._cond:
                self.received.append(b"".join(chunks))
                self._cond.notify_all()

    def wait_for(self, count: int, timeout: float = 5.0) -> List[bytes]:
        deadline = time.monotonic() + timeout
        with self._cond:
            while len(self.received) < count:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self._cond.wait(remaining)
            return list(self.received)

    def close(self) -> None:
        self._running = False
        self._sock.close()
        self._thread.join(timeout=2.0)


@pytest.fixture
def journal() -> Journal:
    return Journal()


@pytest.fixture
def ledger(journal) -> StockLedger:
    ledger = StockLedger(journal)

    ledger.register_item(Item.discrete("pump", price=8500), initial_quantity=5)
    ledger.register_item(Item.discrete("plc", price=1200), initial_quantity=10)
    ledger.register_item(Item.discrete("servo", price=4300), initial_quantity=3)
    ledger.register_item(Item.bulk("hydraulic oil", price="42.50", unit="liter"), initial_quantity="120.5")

    return ledger


@pytest.fixture
def book(journal) -> OrderBook:
    return OrderBook(journal)


@pytest.fixture
def robot_ports() -> Tuple[CaptureServer, CaptureServer]:
    control, program = CaptureServer(), CaptureServer()
    yield control, program
    control.close()
    program.close()


@pytest.fixture
def unreachable_port() -> int:
    # Bind and release: nothing listens there afterwards.
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]
