# tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - The engine is pure: no DB, no app, no network. Nothing to seed.
# - Every test passes tax / withholding explicitly unless it is testing
#   the configured defaults.
# - Amounts are written as strings so expectations are exact Decimals.
# ---------------------------------------------------------------------
from __future__ import annotations

import pytest

from doctotals.schemas.totals import (
    DocumentDiscount,
    LineItem,
    TaxConfig,
    WithholdingConfig,
)


# ---------- Factories ----------
@pytest.fixture
def make_item():
    def _make(quantity="1", unit_price="0", discount_percent="0",
              discount_amount="0", **extra) -> LineItem:
        return LineItem(quantity=quantity,
                        unit_price=unit_price,
                        discount_percent=discount_percent,
                        discount_amount=discount_amount,
                        **extra)
    return _make

# ---------- Common configurations ----------
@pytest.fixture
def vat7_exclusive() -> TaxConfig:
    return TaxConfig(rate="7", mode="exclusive")

@pytest.fixture
def vat7_inclusive() -> TaxConfig:
    return TaxConfig(rate="7", mode="inclusive")

@pytest.fixture
def no_discount() -> DocumentDiscount:
    return DocumentDiscount(percent="0", amount="0")

@pytest.fixture
def no_withholding() -> WithholdingConfig:
    return WithholdingConfig(enabled=False, percent="0")

@pytest.fixture
def quotation_items(make_item):
    """(3 x 50.00) and (1 x 200.00 less 10%): nets 150.00 and 180.00."""
    return [
        make_item(quantity="3", unit_price="50.00"),
        make_item(quantity="1", unit_price="200.00", discount_percent="10"),
    ]
