"""
Data models for the shipping cost calculator.

LineItem and PricingConfig are transient inputs consumed within one call.
OrderCost is the order-level breakdown produced by the DataFrame pipeline.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping, Optional, Union

OrderDate = Union[date, datetime, str]

TRUE_STRINGS = ["true", "t", "yes", "y", "1"]


def as_flag(value) -> bool:
    """Fragile flag from a bool, number or string such as "false" or "yes"."""
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return bool(value)


@dataclass
class LineItem:
    """A single line in an order's basket."""
    qty: Optional[int] = None
    weight_kg: Optional[float] = None  # per unit, None = no weight charge
    fragile: bool = False
    order_date: Optional[OrderDate] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LineItem":
        """
        Build a LineItem from a mapping.

        Accepts snake_case keys as well as the camelCase keys used by
        checkout payloads (weightKg, orderDate).
        """
        return cls(
            qty=data.get("qty"),
            weight_kg=data.get("weight_kg", data.get("weightKg")),
            fragile=as_flag(data.get("fragile", False)),
            order_date=data.get("order_date", data.get("orderDate")),
        )


@dataclass(frozen=True)
class PricingConfig:
    """
    Rate card supplied by the caller on every calculation.

    Attributes:
        kg_rate     - Charge per kilogram (weight_kg * qty * kg_rate)
        fragile_fee - Fixed fee per chargeable fragile line
        sunday_rate - Fixed fee charged at most once per order
    """
    kg_rate: float
    fragile_fee: float = 0.0
    sunday_rate: float = 0.0

    def __post_init__(self):
        errors = []
        for name in ("kg_rate", "fragile_fee", "sunday_rate"):
            value = getattr(self, name)
            if value is None or value < 0:
                errors.append(f"{name} must be >= 0, got {value!r}")
        if errors:
            raise ValueError("Pricing configuration errors:\n  " + "\n  ".join(errors))


@dataclass(frozen=True)
class OrderCost:
    """Order-level cost breakdown."""
    line_count: int
    chargeable_lines: int
    fragile_lines: int
    sunday_surcharge: bool
    cost_weight: float
    cost_fragile: float
    cost_sunday: float
    cost_total: float
    calculator_version: str

    def to_dict(self) -> dict:
        """Plain dict, e.g. for JSON responses."""
        return {
            "line_count": self.line_count,
            "chargeable_lines": self.chargeable_lines,
            "fragile_lines": self.fragile_lines,
            "sunday_surcharge": self.sunday_surcharge,
            "cost_weight": self.cost_weight,
            "cost_fragile": self.cost_fragile,
            "cost_sunday": self.cost_sunday,
            "cost_total": self.cost_total,
            "calculator_version": self.calculator_version,
        }


__all__ = [
    "LineItem",
    "PricingConfig",
    "OrderCost",
    "OrderDate",
    "TRUE_STRINGS",
    "as_flag",
]
