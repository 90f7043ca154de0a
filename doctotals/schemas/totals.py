# FILE: doctotals/schemas/totals.py
from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, List, Optional, Tuple

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

from doctotals.core.config import settings


def _coerce_decimal(v: Any) -> Any:
    # float -> str first so 0.1 stays 0.1; "1,234.50" from a form field
    if isinstance(v, float):
        return str(v)
    if isinstance(v, str):
        return v.strip().replace(",", "")
    return v


def _coerce_decimal_or_zero(v: Any) -> Any:
    if v is None or (isinstance(v, str) and not v.strip()):
        return Decimal("0")
    return _coerce_decimal(v)


DecimalIn = Annotated[Decimal, BeforeValidator(_coerce_decimal)]
DecimalOrZero = Annotated[Decimal, BeforeValidator(_coerce_decimal_or_zero)]


class TaxMode(str, Enum):
    EXCLUSIVE = "exclusive"
    INCLUSIVE = "inclusive"


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class LineItem(_Record):
    """One priced row of a quotation / order / invoice.

    Range constraints (quantity > 0, percent in [0, 100] ...) are checked by
    services.validation so that every violation of a document is reported
    together, not here at construction time.
    """
    quantity: DecimalIn
    unit_price: DecimalIn
    discount_percent: DecimalOrZero = Decimal("0")
    discount_amount: DecimalOrZero = Decimal("0")
    # purchase cost per unit; only used by the profit report
    cost_price: Optional[DecimalIn] = None
    description: Optional[str] = None
    unit: Optional[str] = None


class DocumentDiscount(_Record):
    percent: DecimalOrZero = Decimal("0")
    amount: DecimalOrZero = Decimal("0")


class TaxConfig(_Record):
    rate: DecimalOrZero = Field(
        default_factory=lambda: Decimal(settings.DEFAULT_TAX_RATE))
    mode: TaxMode = Field(
        default_factory=lambda: TaxMode(settings.DEFAULT_TAX_MODE))

    @field_validator("mode", mode="before")
    @classmethod
    def _norm_mode(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class WithholdingConfig(_Record):
    enabled: bool = Field(
        default_factory=lambda: settings.DEFAULT_WITHHOLDING_ENABLED)
    percent: DecimalOrZero = Field(
        default_factory=lambda: Decimal(settings.DEFAULT_WITHHOLDING_PERCENT))


class DocumentTotalsIn(_Record):
    items: List[LineItem]
    document_discount: DocumentDiscount = Field(default_factory=DocumentDiscount)
    tax: TaxConfig = Field(default_factory=TaxConfig)
    withholding: WithholdingConfig = Field(default_factory=WithholdingConfig)


class DocumentTotals(_Record):
    """Finalized figures, each rounded once to currency precision."""
    subtotal: Decimal
    tax_amount: Decimal
    gross_total: Decimal
    withholding_amount: Decimal
    net_payable: Decimal

    line_totals: Tuple[Decimal, ...] = ()
    line_sum: Decimal = Decimal("0.00")
    document_discount_total: Decimal = Decimal("0.00")


# ============================================================
# Profit report
# ============================================================
class ProfitExpenses(_Record):
    """Extra costs of fulfilling a quotation, outside the line items."""
    shipping: DecimalOrZero = Decimal("0")
    fees: DecimalOrZero = Decimal("0")
    other: DecimalOrZero = Decimal("0")


class LineProfit(_Record):
    cost_price: Decimal
    total_cost: Decimal
    revenue: Decimal
    profit: Decimal
    profit_percent: Decimal


class ProfitSummary(_Record):
    """
    Cost / revenue / profit of a quotation, rounded to currency precision.

    Revenue is quantity * unit_price before discounts. Profit figures may be
    negative (a loss); percents are of cost and are 0 when cost is 0.
    """
    total_cost: Decimal
    total_revenue: Decimal
    gross_profit: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    profit_percent: Decimal

    lines: Tuple[LineProfit, ...] = ()
