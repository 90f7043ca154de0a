# FILE: doctotals/services/withholding.py
from __future__ import annotations

from typing import Tuple

from doctotals.schemas.totals import WithholdingConfig
from doctotals.services.money import Money


def apply_withholding(gross_total: Money,
                      withholding: WithholdingConfig) -> Tuple[Money, Money]:
    """
    Returns (withholding_amount, net_payable), both rounded.

    withholding_amount = gross_total * percent / 100 when enabled, else 0.
    net_payable        = max(0, gross_total - withholding_amount)

    Withholding is a deduction from what the payer hands over. It never
    touches subtotal or tax_amount, and it is never added to gross_total.
    """
    gross = gross_total.round_to_cents()
    if not withholding.enabled:
        return Money.zero().round_to_cents(), gross

    amount = gross_total.percentage_of(withholding.percent).round_to_cents()
    net = gross.subtract(amount).floor_at_zero().round_to_cents()
    return amount, net
