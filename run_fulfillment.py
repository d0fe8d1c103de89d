from __future__ import annotations

import argparse
import logging

from fulfillment_engine.actuator import RobotLink
from fulfillment_engine.coordinator import FulfillmentCoordinator
from fulfillment_engine.models import Item
from fulfillment_engine.settings import RobotSettings


def seed(coordinator: FulfillmentCoordinator) -> None:
    coordinator.register_item(Item.discrete("hydraulic pump", price=8500), initial_quantity=5)
    coordinator.register_item(Item.discrete("PLC module", price=1200), initial_quantity=10)
    coordinator.register_item(Item.discrete("servo motor", price=4300), initial_quantity=3)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    settings = RobotSettings()

    p = argparse.ArgumentParser(description="Queue orders, fulfill them and send the robot its pick/place program.")
    p.add_argument("--order", action="append", nargs=2, metavar=("ITEM", "QTY"), default=None,
                   help="Order to enqueue, may be repeated (default: 'hydraulic pump' 2)")
    p.add_argument("--robot-host", type=str, default=settings.host)
    p.add_argument("--control-port", type=int, default=settings.control_port)
    p.add_argument("--program-port", type=int, default=settings.program_port)
    p.add_argument("--no-robot", action="store_true", default=not settings.enabled, help="Do not contact the robot")
    args = p.parse_args()

    settings = settings.model_copy(update={
        "host": args.robot_host,
        "control_port": args.control_port,
        "program_port": args.program_port,
        "enabled": not args.no_robot,
    })
    actuator = RobotLink.from_settings(settings) if settings.enabled else None

    coordinator = FulfillmentCoordinator(actuator=actuator)
    seed(coordinator)

    for name, qty in args.order or [("hydraulic pump", "2")]:
        coordinator.enqueue(name, qty)

    dispatches = []
    while coordinator.snapshot().pending:
        result = coordinator.fulfill_next()
        if result.dispatch is not None:
            dispatches.append(result.dispatch)

    # the robot runs on its own; wait only so the demo prints its outcome
    for thread in dispatches:
        thread.join(timeout=settings.timeout * 2 + 1)

    snap = coordinator.snapshot()
    print("\n=== RESULT ===")
    print("committed:", [str(o) for o in snap.committed])
    print("revenue:", snap.revenue)
    print("stock:", coordinator.ledger.stock())
    print("low stock:", sorted(it.name for it in coordinator.low_stock()))


if __name__ == "__main__":
    main()
