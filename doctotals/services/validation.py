# FILE: doctotals/services/validation.py
"""
Input checks that run before any arithmetic.

Every violation is collected; nothing here stops at the first problem.
Field names use the dotted/indexed form a form layer can map back to its
inputs: "items[2].discount_percent", "document_discount.percent", ...

Coercion (pydantic) and range checks are merged: when part of a payload
cannot be coerced, the parts that can are still range-checked, so one call
reports both kinds of error together.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError as PydanticValidationError

from doctotals.core.errors import FieldError, InvalidLineItem, ValidationError
from doctotals.schemas.totals import (
    DocumentDiscount,
    DocumentTotalsIn,
    LineItem,
    ProfitExpenses,
    TaxConfig,
    WithholdingConfig,
)

M = TypeVar("M", bound=BaseModel)

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")

MSG_REQUIRED_ITEMS = "at least one line item is required"
MSG_POSITIVE = "must be greater than 0"
MSG_NON_NEGATIVE = "must not be negative"
MSG_PERCENT_RANGE = "must be between 0 and 100"


def _percent_ok(v: Decimal) -> bool:
    return _ZERO <= v <= _HUNDRED


# -----------------------------
# Range checks per record
# -----------------------------

def line_item_errors(item: LineItem, index: int) -> List[FieldError]:
    prefix = f"items[{index}]"
    out: List[FieldError] = []
    if item.quantity <= _ZERO:
        out.append(FieldError(f"{prefix}.quantity", MSG_POSITIVE))
    if item.unit_price < _ZERO:
        out.append(FieldError(f"{prefix}.unit_price", MSG_NON_NEGATIVE))
    if not _percent_ok(item.discount_percent):
        out.append(FieldError(f"{prefix}.discount_percent", MSG_PERCENT_RANGE))
    if item.discount_amount < _ZERO:
        out.append(FieldError(f"{prefix}.discount_amount", MSG_NON_NEGATIVE))
    if item.cost_price is not None and item.cost_price < _ZERO:
        out.append(FieldError(f"{prefix}.cost_price", MSG_NON_NEGATIVE))
    return out


def discount_errors(disc: DocumentDiscount) -> List[FieldError]:
    out: List[FieldError] = []
    if not _percent_ok(disc.percent):
        out.append(FieldError("document_discount.percent", MSG_PERCENT_RANGE))
    if disc.amount < _ZERO:
        out.append(FieldError("document_discount.amount", MSG_NON_NEGATIVE))
    return out


def tax_errors(tax: TaxConfig) -> List[FieldError]:
    # rate 0 means "no tax"; a rate above 100 is a data-entry error
    if not _percent_ok(tax.rate):
        return [FieldError("tax.rate", MSG_PERCENT_RANGE)]
    return []


def withholding_errors(withholding: WithholdingConfig) -> List[FieldError]:
    if not _percent_ok(withholding.percent):
        return [FieldError("withholding.percent", MSG_PERCENT_RANGE)]
    return []


def expenses_errors(expenses: ProfitExpenses) -> List[FieldError]:
    return [
        FieldError(f"expenses.{name}", MSG_NON_NEGATIVE)
        for name in ("shipping", "fees", "other")
        if getattr(expenses, name) < _ZERO
    ]


def items_errors(items: Sequence[LineItem]) -> List[FieldError]:
    out: List[FieldError] = []
    if not items:
        out.append(FieldError("items", MSG_REQUIRED_ITEMS))
    for i, item in enumerate(items):
        out.extend(line_item_errors(item, i))
    return out


def document_errors(doc: DocumentTotalsIn) -> List[FieldError]:
    out = items_errors(doc.items)
    out.extend(discount_errors(doc.document_discount))
    out.extend(tax_errors(doc.tax))
    out.extend(withholding_errors(doc.withholding))
    return out


# -----------------------------
# Raising
# -----------------------------

def error_for(errors: Sequence[FieldError]) -> ValidationError:
    if errors and all(e.field.startswith("items[") for e in errors):
        return InvalidLineItem(errors)
    return ValidationError(errors)


def raise_for_errors(errors: Sequence[FieldError]) -> None:
    if errors:
        raise error_for(errors)


def validate_document(doc: DocumentTotalsIn) -> DocumentTotalsIn:
    raise_for_errors(document_errors(doc))
    return doc


# -----------------------------
# pydantic coercion errors
# -----------------------------

def _loc_to_field(loc: Tuple[Union[int, str], ...]) -> str:
    out = ""
    for part in loc:
        if isinstance(part, int):
            out += f"[{part}]"
        else:
            out += f".{part}" if out else str(part)
    return out or "__root__"


def pydantic_errors(exc: PydanticValidationError, prefix: str = "") -> List[FieldError]:
    """Translate a pydantic coercion failure into the engine's field errors."""
    errors = []
    for err in exc.errors():
        field = _loc_to_field(tuple(err.get("loc") or ()))
        if prefix:
            field = f"{prefix}.{field}" if field != "__root__" else prefix
        errors.append(FieldError(field, str(err.get("msg") or "invalid value")))
    return errors


def coerce_part(model: Type[M], raw: Any, prefix: str,
                check: Callable[[M], List[FieldError]]) -> Tuple[Optional[M], List[FieldError]]:
    """
    Coerce one record and range-check it.

    Returns (record, errors); record is None when it could not be coerced,
    in which case errors hold the coercion failures instead.
    """
    if isinstance(raw, model):
        return raw, check(raw)
    try:
        rec = model.model_validate({} if raw is None else raw)
    except PydanticValidationError as e:
        return None, pydantic_errors(e, prefix)
    return rec, check(rec)


def coerce_items(raw_items: Any) -> Tuple[List[LineItem], List[FieldError]]:
    """Coerce every row; range errors of good rows and coercion errors of bad rows together."""
    if not isinstance(raw_items, (list, tuple)):
        try:
            raw_items = list(raw_items or [])
        except TypeError:
            return [], [FieldError("items", "must be a list of line items")]

    records: List[LineItem] = []
    errors: List[FieldError] = []
    if not raw_items:
        errors.append(FieldError("items", MSG_REQUIRED_ITEMS))
    for i, raw in enumerate(raw_items):
        rec, errs = coerce_part(LineItem, raw, f"items[{i}]",
                                lambda it, i=i: line_item_errors(it, i))
        errors.extend(errs)
        if rec is not None:
            records.append(rec)
    return records, errors


def coerce_document(payload: Any) -> DocumentTotalsIn:
    """
    Build a validated DocumentTotalsIn or raise a ValidationError that lists
    every coercion and range violation of the payload.
    """
    if isinstance(payload, DocumentTotalsIn):
        return validate_document(payload)
    if not isinstance(payload, Mapping):
        raise ValidationError([FieldError("__root__", "document must be a mapping")])

    items, errors = coerce_items(payload.get("items"))
    parts = {}
    for key, model, check in (
        ("document_discount", DocumentDiscount, discount_errors),
        ("tax", TaxConfig, tax_errors),
        ("withholding", WithholdingConfig, withholding_errors),
    ):
        rec, errs = coerce_part(model, payload.get(key), key, check)
        errors.extend(errs)
        parts[key] = rec

    raise_for_errors(errors)
    return DocumentTotalsIn(items=items, **parts)
