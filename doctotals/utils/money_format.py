# FILE: doctotals/utils/money_format.py
from __future__ import annotations

import logging
from typing import Any, Optional

from doctotals.core.config import settings
from doctotals.services.money import Money

_log = logging.getLogger(__name__)


def format_money(
    v: Any,
    symbol: Optional[str] = None,
    places: Optional[int] = None,
) -> str:
    """
    Format an amount for a printed document: "฿1,234.56".

    Symbol and places are explicit arguments; when omitted they come from
    settings (CURRENCY_SYMBOL / CURRENCY_DECIMAL_PLACES), never from any
    locale state. Rounds half away from zero, same as the engine.

    Raises InvalidAmount if v is not a finite amount.
    """
    sym = settings.CURRENCY_SYMBOL if symbol is None else symbol
    p = settings.CURRENCY_DECIMAL_PLACES if places is None else int(places)

    amount = Money(v).round_to_cents(p).amount
    sign = "-" if amount < 0 else ""
    text = f"{sign}{sym}{abs(amount):,.{p}f}"
    _log.debug("format_money: %r -> %s", v, text)
    return text
