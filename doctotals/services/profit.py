# FILE: doctotals/services/profit.py
"""
Profit report of a quotation: what the listed goods cost, what they sell
for and what is left after the extra expenses of fulfilling the order.

    per line   total_cost = cost_price * quantity
               revenue    = unit_price * quantity
               profit     = revenue - total_cost
               percent    = (unit_price - cost_price) / cost_price * 100

    document   net_profit = sum(profit) - (shipping + fees + other)
               percent    = net_profit / sum(total_cost) * 100

Revenue is taken before line and document discounts, as on the quotation's
cost sheet. A line without cost_price costs 0. Percents are 0 when the cost
they are measured against is 0.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from doctotals.core.errors import ValidationError
from doctotals.schemas.totals import LineItem, LineProfit, ProfitExpenses, ProfitSummary
from doctotals.services.line_items import LineItemLike
from doctotals.services.money import HUNDRED, Money, sum_money
from doctotals.services.validation import (
    coerce_items,
    coerce_part,
    expenses_errors,
    raise_for_errors,
)

logger = logging.getLogger(__name__)

__all__ = ["compute_profit", "landed_unit_cost", "PROFIT_PERCENT_PLACES"]

# percents are shown with one decimal on the cost sheet
PROFIT_PERCENT_PLACES = 1


def _percent(part: Money, whole: Money) -> Money:
    if whole.is_zero():
        return Money.zero()
    return part.multiply(HUNDRED).divide(whole).round_to_cents(PROFIT_PERCENT_PLACES)


def landed_unit_cost(quantity: Any, unit_price: Any, shipping_cost: Any = 0) -> Money:
    """
    Unit cost of goods bought in for an order, with the purchase's shipping
    spread over every unit: (quantity * unit_price + shipping_cost) / quantity.

    Unrounded. Raises InvalidAmount for a zero quantity.
    """
    return (Money(unit_price).multiply(quantity)
            .add(shipping_cost)
            .divide(quantity))


def _line_profit(item: LineItem) -> Tuple[Money, Money, LineProfit]:
    cost = Money(item.cost_price if item.cost_price is not None else 0)
    price = Money(item.unit_price)
    total_cost = cost.multiply(item.quantity)
    revenue = price.multiply(item.quantity)
    return total_cost, revenue, LineProfit(
        cost_price=cost.round_to_cents().amount,
        total_cost=total_cost.round_to_cents().amount,
        revenue=revenue.round_to_cents().amount,
        profit=revenue.subtract(total_cost).round_to_cents().amount,
        profit_percent=_percent(price.subtract(cost), cost).amount,
    )


def compute_profit(
    items: Iterable[LineItemLike],
    expenses: Optional[Union[ProfitExpenses, Mapping[str, Any]]] = None,
) -> ProfitSummary:
    records, errors = coerce_items(items)
    exp, exp_errors = coerce_part(ProfitExpenses, expenses, "expenses", expenses_errors)
    errors.extend(exp_errors)
    try:
        raise_for_errors(errors)
    except ValidationError as e:
        logger.info("profit report rejected: %d invalid field(s)", len(e.errors))
        raise

    total_cost: List[Money] = []
    revenue: List[Money] = []
    lines: List[LineProfit] = []
    for it in records:
        cost, rev, line = _line_profit(it)
        total_cost.append(cost)
        revenue.append(rev)
        lines.append(line)

    cost_sum = sum_money(total_cost)
    revenue_sum = sum_money(revenue)
    gross_profit = revenue_sum.subtract(cost_sum)
    total_expenses = Money(exp.shipping).add(exp.fees).add(exp.other)
    net_profit = gross_profit.subtract(total_expenses)

    summary = ProfitSummary(
        total_cost=cost_sum.round_to_cents().amount,
        total_revenue=revenue_sum.round_to_cents().amount,
        gross_profit=gross_profit.round_to_cents().amount,
        total_expenses=total_expenses.round_to_cents().amount,
        net_profit=net_profit.round_to_cents().amount,
        profit_percent=_percent(net_profit, cost_sum).amount,
        lines=tuple(lines),
    )
    if net_profit.is_negative():
        logger.debug("quotation runs at a loss: %s", summary.net_profit)
    return summary
