# FILE: doctotals/services/line_items.py
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Union

from doctotals.core.errors import FieldError
from doctotals.schemas.totals import LineItem
from doctotals.services.money import Money
from doctotals.services.validation import (
    coerce_items,
    coerce_part,
    raise_for_errors,
)

logger = logging.getLogger(__name__)

LineItemLike = Union[LineItem, Mapping[str, Any]]


def coerce_line_items(items: Iterable[LineItemLike]) -> List[LineItem]:
    """Build LineItem records, reporting every row that fails coercion."""
    out: List[LineItem] = []
    errors: List[FieldError] = []
    for i, raw in enumerate(items):
        rec, errs = coerce_part(LineItem, raw, f"items[{i}]", lambda _: [])
        errors.extend(errs)
        if rec is not None:
            out.append(rec)
    raise_for_errors(errors)
    return out


def line_gross(item: LineItem) -> Money:
    return Money(item.unit_price).multiply(item.quantity)


def resolve_line(item: LineItem) -> Money:
    """
    Net amount of one line, unrounded:

        gross       = quantity * unit_price
        percent_off = gross * discount_percent / 100
        net         = max(0, gross - percent_off - discount_amount)

    A discount larger than the line is accepted and floors at 0.
    Constraints are not re-checked here; use resolve_lines() for
    unvalidated input.
    """
    gross = line_gross(item)
    percent_off = gross.percentage_of(item.discount_percent)
    net = gross.subtract(percent_off).subtract(item.discount_amount)
    if net.is_negative():
        logger.debug("line discount exceeds line value (%s); flooring at 0", gross)
        return Money.zero()
    return net


def resolve_lines(items: Iterable[LineItemLike]) -> List[Money]:
    """
    Resolve every line of a document, atomically.

    All rows are coerced and validated first; if any row is invalid an
    InvalidLineItem listing every offending field (unparseable values and
    out-of-range ones alike) is raised and nothing is computed.
    """
    records, errors = coerce_items(items)
    raise_for_errors(errors)
    return [resolve_line(it) for it in records]
