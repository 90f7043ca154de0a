# FILE: doctotals/core/errors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List


class TotalsError(RuntimeError):
    pass


class InvalidAmount(TotalsError, ValueError):
    """A money value is NaN, infinite or beyond the configured precision.

    Raised from inside the Money type. This is a data-integrity failure,
    callers should not try to correct and retry it like a form error.
    """


@dataclass(frozen=True)
class FieldError:
    field: str
    reason: str

    def __str__(self) -> str:
        return f"{self.field}: {self.reason}"


class ValidationError(TotalsError, ValueError):
    """
    One or more input fields violate a constraint.

    `errors` holds one FieldError per violation (never only the first one),
    so a form can highlight every offending input in one pass.
    """

    def __init__(self, errors: Iterable[FieldError]):
        self.errors: List[FieldError] = list(errors)
        super().__init__(self._summary())

    def _summary(self) -> str:
        if not self.errors:
            return "Validation failed"
        return "Validation failed: " + "; ".join(str(e) for e in self.errors)

    @property
    def fields(self) -> List[str]:
        return [e.field for e in self.errors]

    def as_dict(self) -> Dict[str, List[str]]:
        out: Dict[str, List[str]] = {}
        for e in self.errors:
            out.setdefault(e.field, []).append(e.reason)
        return out


class InvalidLineItem(ValidationError):
    """Every violation is on a line item (items[i].<field>)."""
