# FILE: doctotals/__init__.py
from doctotals.core.errors import (
    FieldError,
    InvalidAmount,
    InvalidLineItem,
    TotalsError,
    ValidationError,
)
from doctotals.schemas.totals import (
    DocumentDiscount,
    DocumentTotals,
    LineItem,
    LineProfit,
    ProfitExpenses,
    ProfitSummary,
    TaxConfig,
    TaxMode,
    WithholdingConfig,
)
from doctotals.services.document_totals import (
    compute_document_totals,
    compute_totals_from_payload,
)
from doctotals.services.money import Money
from doctotals.services.profit import compute_profit, landed_unit_cost

__all__ = [
    "FieldError",
    "InvalidAmount",
    "InvalidLineItem",
    "TotalsError",
    "ValidationError",
    "DocumentDiscount",
    "DocumentTotals",
    "LineItem",
    "LineProfit",
    "ProfitExpenses",
    "ProfitSummary",
    "TaxConfig",
    "TaxMode",
    "WithholdingConfig",
    "compute_document_totals",
    "compute_totals_from_payload",
    "compute_profit",
    "landed_unit_cost",
    "Money",
]
