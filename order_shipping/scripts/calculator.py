"""
Order Shipping Cost Calculator
==============================

Calculates the shipping cost of one order from a CSV of line items.

CSV columns:
    qty,weight_kg,fragile,order_date
    2,0.4,true,2025-07-23
    0,3.0,false,

Usage:
    python -m order_shipping.scripts.calculator basket.csv
    python -m order_shipping.scripts.calculator basket.csv --rate-card rates.csv
    python -m order_shipping.scripts.calculator basket.csv --kg-rate 2.5 --sunday-rate 0
"""

import argparse
import sys
from dataclasses import replace

import polars as pl

from order_shipping.calculate_costs import calculate_order
from order_shipping.data import load_line_items, load_rate_card
from order_shipping.errors import ValidationError
from order_shipping.models import OrderCost, PricingConfig
from order_shipping.version import VERSION


def build_pricing(args: argparse.Namespace) -> PricingConfig:
    """Rate card from file (or reference), with command-line overrides."""
    pricing = load_rate_card(args.rate_card)

    overrides = {
        "kg_rate": args.kg_rate,
        "fragile_fee": args.fragile_fee,
        "sunday_rate": args.sunday_rate,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        pricing = replace(pricing, **overrides)

    return pricing


def print_results(order: OrderCost, pricing: PricingConfig) -> None:
    """Print calculation results."""
    print("\n" + "=" * 50)
    print("CALCULATION RESULTS")
    print("=" * 50)

    print(f"\nLines: {order.line_count} ({order.chargeable_lines} chargeable)")
    print(f"Rates: {pricing.kg_rate:.2f}/kg, fragile {pricing.fragile_fee:.2f}, "
          f"Sunday {pricing.sunday_rate:.2f}")

    surcharges = []
    if order.fragile_lines:
        surcharges.append(f"FRAGILE x{order.fragile_lines}")
    if order.sunday_surcharge:
        surcharges.append("SUNDAY")
    print(f"\nSurcharges: {', '.join(surcharges) if surcharges else 'None'}")

    print("\n--- Cost Breakdown ---")
    print(f"Weight:             {order.cost_weight:>10.2f}")
    if order.cost_fragile > 0:
        print(f"Fragile handling:   {order.cost_fragile:>10.2f}")
    if order.cost_sunday > 0:
        print(f"Sunday surcharge:   {order.cost_sunday:>10.2f}")
    print(f"                    {'=' * 10}")
    print(f"TOTAL:              {order.cost_total:>10.2f}")
    print()


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description=f"Calculate the shipping cost of an order (calculator {VERSION})",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m order_shipping.scripts.calculator basket.csv
  python -m order_shipping.scripts.calculator basket.csv --rate-card rates.csv
  python -m order_shipping.scripts.calculator basket.csv --kg-rate 2.5
        """
    )
    parser.add_argument(
        "items",
        metavar="CSV",
        help="Line items CSV (qty, weight_kg, fragile, order_date)"
    )
    parser.add_argument(
        "--rate-card",
        metavar="PATH",
        help="Rate card CSV (kg_rate, fragile_fee, sunday_rate). Default: reference rate card"
    )
    parser.add_argument("--kg-rate", type=float, help="Override charge per kg")
    parser.add_argument("--fragile-fee", type=float, help="Override fee per fragile line")
    parser.add_argument("--sunday-rate", type=float, help="Override Sunday surcharge")

    args = parser.parse_args(argv)

    try:
        pricing = build_pricing(args)
        df = load_line_items(args.items)
        order = calculate_order(df, pricing)
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError, pl.exceptions.PolarsError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print_results(order, pricing)
    return 0


if __name__ == "__main__":
    sys.exit(main())
