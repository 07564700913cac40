"""
Order Shipping Cost Calculator

Prices an order's line items into one shipping charge: weight charge,
fragile handling fee per fragile line, Sunday surcharge once per order.

Usage:
    from order_shipping import compute_shipping_cost, LineItem, PricingConfig
"""

from .calculate_costs import (
    compute_shipping_cost,
    calculate_costs,
    calculate_order,
)
from .errors import ValidationError, MissingQuantity, NegativeValue
from .models import LineItem, PricingConfig, OrderCost
from .version import VERSION

__all__ = [
    "compute_shipping_cost",
    "calculate_costs",
    "calculate_order",
    "ValidationError",
    "MissingQuantity",
    "NegativeValue",
    "LineItem",
    "PricingConfig",
    "OrderCost",
    "VERSION",
]
