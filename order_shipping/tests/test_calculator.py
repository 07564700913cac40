"""
Tests for data loaders and the command-line calculator.
"""

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import pytest
import polars as pl
from datetime import date

from order_shipping.data import (
    FRAGILE_FEE,
    KG_RATE,
    SUNDAY_RATE,
    line_items_frame,
    load_line_items,
    load_rate_card,
)
from order_shipping.models import LineItem, PricingConfig
from order_shipping.scripts.calculator import main


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def basket_csv(tmp_path):
    """Mid-week basket: two fragile tumblers and an out-of-stock lamp."""
    path = tmp_path / "basket.csv"
    path.write_text(
        "qty,weight_kg,fragile,order_date\n"
        "2,0.4,true,2025-07-23\n"
        "0,3.0,false,2025-07-23\n"
    )
    return path


@pytest.fixture
def sunday_csv(tmp_path):
    path = tmp_path / "sunday.csv"
    path.write_text(
        "qty,weight_kg,fragile,order_date\n"
        "1,1,,2025-07-19T23:30:00-01:00\n"
        "1,1,no,\n"
    )
    return path


# =============================================================================
# RATE CARD TESTS
# =============================================================================

class TestRateCard:
    """Tests for rate card loading."""

    def test_reference_rate_card(self):
        pricing = load_rate_card()
        assert pricing == PricingConfig(kg_rate=KG_RATE, fragile_fee=FRAGILE_FEE, sunday_rate=SUNDAY_RATE)

    def test_custom_rate_card(self, tmp_path):
        path = tmp_path / "rates.csv"
        path.write_text("kg_rate,fragile_fee,sunday_rate\n1.5,4,0\n")
        assert load_rate_card(path) == PricingConfig(kg_rate=1.5, fragile_fee=4, sunday_rate=0)

    def test_missing_column(self, tmp_path):
        path = tmp_path / "rates.csv"
        path.write_text("kg_rate,fragile_fee\n1.5,4\n")
        with pytest.raises(ValueError, match="missing columns: sunday_rate"):
            load_rate_card(path)

    def test_more_than_one_row(self, tmp_path):
        path = tmp_path / "rates.csv"
        path.write_text("kg_rate,fragile_fee,sunday_rate\n1,1,1\n2,2,2\n")
        with pytest.raises(ValueError, match="exactly one row"):
            load_rate_card(path)

    def test_negative_rate(self, tmp_path):
        path = tmp_path / "rates.csv"
        path.write_text("kg_rate,fragile_fee,sunday_rate\n2,-5,10\n")
        with pytest.raises(ValueError, match="fragile_fee must be >= 0"):
            load_rate_card(path)


# =============================================================================
# LINE ITEM LOADER TESTS
# =============================================================================

class TestLineItems:
    """Tests for line item loaders."""

    def test_load_csv(self, basket_csv):
        df = load_line_items(basket_csv)
        assert df["qty"].to_list() == [2, 0]
        assert df["weight_kg"].to_list() == pytest.approx([0.4, 3.0])
        assert df["fragile"].to_list() == [True, False]
        assert df["order_date"].to_list() == [date(2025, 7, 23), date(2025, 7, 23)]

    def test_load_csv_utc_dates_and_blanks(self, sunday_csv):
        df = load_line_items(sunday_csv)
        assert df["order_date"].to_list() == [date(2025, 7, 20), None]
        assert df["fragile"].to_list() == [False, False]

    def test_load_csv_missing_qty_cell(self, tmp_path):
        path = tmp_path / "items.csv"
        path.write_text("qty,weight_kg\n1,2\n,3\n")
        assert load_line_items(path)["qty"].to_list() == [1, None]

    def test_frame_from_items(self):
        df = line_items_frame([
            LineItem(qty=1, weight_kg=2, fragile=True, order_date="2025-07-20"),
            {"qty": 3, "weightKg": 0.5},
        ])
        assert df.schema["qty"] == pl.Int64
        assert df.schema["order_date"] == pl.Date
        assert df["weight_kg"].to_list() == [2.0, 0.5]
        assert df["order_date"].to_list() == [date(2025, 7, 20), None]

    def test_empty_frame(self):
        assert len(line_items_frame([])) == 0


# =============================================================================
# CALCULATOR CLI TESTS
# =============================================================================

class TestCalculator:
    """Tests for the command-line calculator."""

    def test_prints_breakdown(self, basket_csv, capsys):
        assert main([str(basket_csv)]) == 0
        out = capsys.readouterr().out
        assert "Lines: 2 (1 chargeable)" in out
        assert "FRAGILE x1" in out
        assert "TOTAL:" in out
        assert "6.60" in out

    def test_sunday_order(self, sunday_csv, capsys):
        assert main([str(sunday_csv)]) == 0
        out = capsys.readouterr().out
        assert "SUNDAY" in out
        assert "14.00" in out

    def test_rate_overrides(self, sunday_csv, capsys):
        assert main([str(sunday_csv), "--kg-rate", "3", "--sunday-rate", "0"]) == 0
        out = capsys.readouterr().out
        assert "Sunday surcharge:" not in out
        assert "6.00" in out

    def test_validation_error_exit_code(self, tmp_path, capsys):
        path = tmp_path / "bad.csv"
        path.write_text("qty,weight_kg\n1,1\n-2,1\n")
        assert main([str(path)]) == 1
        assert "line 1: negative not allowed" in capsys.readouterr().err

    def test_missing_file_exit_code(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.csv")]) == 2
        assert "Error:" in capsys.readouterr().err

    def test_negative_rate_card_exit_code(self, basket_csv, tmp_path, capsys):
        card = tmp_path / "rates.csv"
        card.write_text("kg_rate,fragile_fee,sunday_rate\n2,-5,10\n")
        assert main([str(basket_csv), "--rate-card", str(card)]) == 2
        err = capsys.readouterr().err
        assert "Error:" in err
        assert "fragile_fee must be >= 0" in err

    def test_negative_override_exit_code(self, basket_csv, capsys):
        assert main([str(basket_csv), "--kg-rate", "-1"]) == 2
        assert "kg_rate must be >= 0" in capsys.readouterr().err

    def test_non_integer_qty_exit_code(self, tmp_path, capsys):
        path = tmp_path / "basket.csv"
        path.write_text("qty,weight_kg\n1,1\n1.5,1\n")
        assert main([str(path)]) == 2
        captured = capsys.readouterr()
        assert "Error:" in captured.err
        assert captured.out == ""


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
