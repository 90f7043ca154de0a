# FILE: doctotals/services/document_totals.py
"""
Entry point of the totals engine.

    compute_document_totals(items, document_discount, tax, withholding)

Pure function: no I/O, no caches, safe to call from any number of threads.
Either returns a fresh DocumentTotals or raises ValidationError /
InvalidAmount; never a partially computed result.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Union

from doctotals.core.config import settings
from doctotals.core.errors import ValidationError
from doctotals.schemas.totals import (
    DocumentDiscount,
    DocumentTotals,
    DocumentTotalsIn,
    TaxConfig,
    TaxMode,
    WithholdingConfig,
)
from doctotals.services.line_items import LineItemLike, resolve_line
from doctotals.services.tax_engine import aggregate
from doctotals.services.validation import coerce_document
from doctotals.services.withholding import apply_withholding

logger = logging.getLogger(__name__)

__all__ = ["compute_document_totals", "compute_totals_from_payload"]


def _config(value: Any) -> Any:
    # None -> let the model default (settings) apply
    if value is None:
        return None
    if hasattr(value, "model_dump"):
        return value.model_dump()
    return dict(value)


def _build_request(items: Iterable[LineItemLike],
                   document_discount: Any,
                   tax: Any,
                   withholding: Any) -> DocumentTotalsIn:
    payload = {
        "items": [
            it.model_dump() if hasattr(it, "model_dump") else it
            for it in (items or [])
        ],
    }
    for key, value in (("document_discount", document_discount),
                       ("tax", tax),
                       ("withholding", withholding)):
        cfg = _config(value)
        if cfg is not None:
            payload[key] = cfg
    return coerce_document(payload)


def compute_document_totals(
    items: Iterable[LineItemLike],
    document_discount: Optional[Union[DocumentDiscount, Mapping[str, Any]]] = None,
    tax: Optional[Union[TaxConfig, Mapping[str, Any]]] = None,
    withholding: Optional[Union[WithholdingConfig, Mapping[str, Any]]] = None,
) -> DocumentTotals:
    try:
        req = _build_request(items, document_discount, tax, withholding)
    except ValidationError as e:
        logger.info("document totals rejected: %d invalid field(s)", len(e.errors))
        raise

    line_nets = [resolve_line(it) for it in req.items]
    breakdown = aggregate(line_nets, req.document_discount, req.tax)
    withholding_amount, net_payable = apply_withholding(
        breakdown.gross_total, req.withholding)

    totals = DocumentTotals(
        subtotal=breakdown.subtotal.round_to_cents().amount,
        tax_amount=breakdown.tax_amount.round_to_cents().amount,
        gross_total=breakdown.gross_total.round_to_cents().amount,
        withholding_amount=withholding_amount.amount,
        net_payable=net_payable.amount,
        line_totals=tuple(n.round_to_cents().amount for n in line_nets),
        line_sum=breakdown.line_sum.round_to_cents().amount,
        document_discount_total=breakdown.document_discount_total.round_to_cents().amount,
    )
    logger.debug("document totals: %s", totals.model_dump())
    return totals


# ============================================================
# Stored-record adapter
# ============================================================
def compute_totals_from_payload(payload: Mapping[str, Any]) -> DocumentTotals:
    """
    Compute totals for a whole stored document record (quotation, order ...)
    using the column names the persistence layer keeps:

        items, discount_percent, discount_amount, tax_rate, tax_type,
        withholding_tax, withholding_tax_percent

    Stored records follow the record defaults, not the new-document ones:
    a missing tax_type is exclusive, a missing tax_rate is the standard VAT
    rate and a missing withholding_tax_percent is the configured withholding
    percent. An explicit 0 is kept.
    """
    discount = {
        "percent": payload.get("discount_percent"),
        "amount": payload.get("discount_amount"),
    }

    rate = payload.get("tax_rate")
    tax = {
        "rate": settings.STANDARD_VAT_RATE if rate in (None, "") else rate,
        "mode": payload.get("tax_type") or TaxMode.EXCLUSIVE,
    }

    withholding = {}
    if payload.get("withholding_tax") is not None:
        # raw value; pydantic's bool parsing turns "false"/"0" into False
        withholding["enabled"] = payload["withholding_tax"]
    percent = payload.get("withholding_tax_percent")
    if percent not in (None, ""):
        withholding["percent"] = percent

    return compute_document_totals(
        payload.get("items") or [],
        document_discount=discount,
        tax=tax,
        withholding=withholding or None,
    )
