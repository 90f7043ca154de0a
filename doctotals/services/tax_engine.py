# FILE: doctotals/services/tax_engine.py
"""
Document aggregation and VAT.

Order of operations (changing it changes totals):

  1. line_sum      = sum of resolved line nets
  2. after_percent = line_sum - line_sum * discount.percent / 100
  3. after_fixed   = max(0, after_percent - discount.amount)
  4. EXCLUSIVE: tax = after_fixed * rate / 100
                subtotal = after_fixed, gross = subtotal + tax
     INCLUSIVE: tax = after_fixed - after_fixed / (1 + rate / 100)
                subtotal = after_fixed - tax, gross = after_fixed

Nothing in this module rounds. Callers round each field independently
when finalizing.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple

from doctotals.core.config import settings
from doctotals.schemas.totals import DocumentDiscount, TaxConfig, TaxMode
from doctotals.services.money import HUNDRED, Money, sum_money, to_decimal

logger = logging.getLogger(__name__)

_ONE = to_decimal(1)


@dataclass(frozen=True)
class TaxBreakdown:
    line_sum: Money
    after_percent: Money
    after_fixed: Money
    subtotal: Money
    tax_amount: Money
    gross_total: Money

    @property
    def document_discount_total(self) -> Money:
        return self.line_sum.subtract(self.after_fixed)


def _inclusive_divisor(rate: Any) -> Money:
    # 1 + rate / 100
    return Money(rate).divide(HUNDRED).add(_ONE)


def apply_document_discount(line_sum: Money,
                            discount: DocumentDiscount) -> Tuple[Money, Money]:
    """Returns (after_percent, after_fixed). Percent first, then fixed amount."""
    after_percent = line_sum.subtract(line_sum.percentage_of(discount.percent))
    after_fixed = after_percent.subtract(discount.amount).floor_at_zero()
    return after_percent, after_fixed


def compute_tax(after_fixed: Money, tax: TaxConfig) -> Tuple[Money, Money, Money]:
    """Returns (subtotal, tax_amount, gross_total), unrounded."""
    mode = TaxMode(tax.mode)
    if mode is TaxMode.EXCLUSIVE:
        tax_amount = after_fixed.percentage_of(tax.rate)
        subtotal = after_fixed
        gross = subtotal.add(tax_amount)
    else:
        net_of_tax = after_fixed.divide(_inclusive_divisor(tax.rate))
        tax_amount = after_fixed.subtract(net_of_tax)
        subtotal = after_fixed.subtract(tax_amount)
        gross = after_fixed
    return subtotal, tax_amount, gross


def aggregate(line_nets: Iterable[Money], discount: DocumentDiscount,
              tax: TaxConfig) -> TaxBreakdown:
    line_sum = sum_money(line_nets)
    after_percent, after_fixed = apply_document_discount(line_sum, discount)
    subtotal, tax_amount, gross = compute_tax(after_fixed, tax)
    logger.debug(
        "aggregate: line_sum=%s after_percent=%s after_fixed=%s mode=%s rate=%s tax=%s",
        line_sum, after_percent, after_fixed, tax.mode, tax.rate, tax_amount)
    return TaxBreakdown(
        line_sum=line_sum,
        after_percent=after_percent,
        after_fixed=after_fixed,
        subtotal=subtotal,
        tax_amount=tax_amount,
        gross_total=gross,
    )


# ============================================================
# Shelf-price helpers
# ============================================================
def price_including_tax(base_price: Any, rate: Optional[Any] = None) -> Money:
    """
    VAT-inclusive selling price for a product that only stores its base
    price, e.g. 100 -> 107 at the standard 7%.
    """
    r = settings.STANDARD_VAT_RATE if rate is None else rate
    base = Money(base_price)
    return base.add(base.percentage_of(r))


def price_excluding_tax(price_incl: Any, rate: Optional[Any] = None) -> Money:
    """Inverse of price_including_tax: strips VAT out of an inclusive price."""
    r = settings.STANDARD_VAT_RATE if rate is None else rate
    return Money(price_incl).divide(_inclusive_divisor(r))
