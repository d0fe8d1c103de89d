from __future__ import annotations

import enum
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except InvalidOperation:
            raise ValueError(f"Not a number: {value!r}") from None
    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


class ItemKind(enum.Enum):
    DISCRETE = "discrete"
    BULK = "bulk"


@dataclass(frozen=True, slots=True)
class Item:
    """
    Catalog entry. The catalog owns items; orders only hold a reference.

    Discrete goods are sold per piece and carry a weight, bulk goods are
    sold by measure and carry a unit ("kg", "liter").
    """

    name: str
    price: Decimal
    kind: ItemKind = ItemKind.DISCRETE
    weight: Optional[Decimal] = None
    unit: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Item name must not be empty")
        object.__setattr__(self, "price", to_decimal(self.price))
        if self.price < 0:
            raise ValueError(f"Item {self.name}: price must be >= 0")
        if self.kind is ItemKind.BULK:
            if not self.unit:
                raise ValueError(f"Bulk item {self.name} needs a unit")
            if self.weight is not None:
                raise ValueError(f"Bulk item {self.name} cannot carry a weight")
        else:
            if self.unit is not None:
                raise ValueError(f"Discrete item {self.name} cannot carry a unit")
            weight = to_decimal(0 if self.weight is None else self.weight)
            if weight < 0:
                raise ValueError(f"Item {self.name}: weight must be >= 0")
            object.__setattr__(self, "weight", weight)

    @classmethod
    def discrete(cls, name: str, price: Any, weight: Any = 0) -> Item:
        return cls(name=name, price=price, kind=ItemKind.DISCRETE, weight=weight)

    @classmethod
    def bulk(cls, name: str, price: Any, unit: str) -> Item:
        return cls(name=name, price=price, kind=ItemKind.BULK, unit=unit)

    def describe(self) -> str:
        if self.kind is ItemKind.BULK:
            return f"{self.name} ({self.price} DKK/{self.unit})"
        return f"{self.name} ({self.price} DKK/pcs, {self.weight} kg)"

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True, slots=True)
class Order:
    """One item, one quantity. Orders have no identity of their own."""

    item: Item
    quantity: Decimal

    def __post_init__(self) -> None:
        if self.item is None:
            raise ValueError("Order needs an item")
        object.__setattr__(self, "quantity", to_decimal(self.quantity))
        if self.quantity <= 0:
            raise ValueError("quantity must be > 0")

    @property
    def total_price(self) -> Decimal:
        return self.item.price * self.quantity

    def __str__(self) -> str:
        return f"{self.item.name} x {self.quantity}"
