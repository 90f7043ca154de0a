# FILE: doctotals/services/money.py
"""
Money value type used by every totals computation.

Amounts are held as Decimal at full precision (the configured number of
significant digits) and only rounded when a figure leaves the engine, via
round_to_cents(). Do not round intermediate line or document values: the
whole point is that rounding error does not compound across many lines.
"""
from __future__ import annotations

from decimal import Context, Decimal, InvalidOperation, ROUND_HALF_UP
from functools import total_ordering
from typing import Any, Iterable, Optional

from doctotals.core.config import settings
from doctotals.core.errors import InvalidAmount

__all__ = ["Money", "to_decimal", "sum_money", "ZERO", "HUNDRED"]

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def _ctx() -> Context:
    # fresh context per operation: decimal contexts carry mutable flags
    return Context(prec=settings.DECIMAL_PRECISION, rounding=ROUND_HALF_UP)


def _quantum(places: Optional[int] = None) -> Decimal:
    p = settings.CURRENCY_DECIMAL_PLACES if places is None else int(places)
    return Decimal(1).scaleb(-p)


def _checked(d: Decimal) -> Decimal:
    if not d.is_finite():
        raise InvalidAmount(f"Amount must be finite, got {d}")
    if len(d.as_tuple().digits) > settings.DECIMAL_PRECISION:
        raise InvalidAmount(
            f"Amount {d} has more than {settings.DECIMAL_PRECISION} significant digits"
        )
    return d


def to_decimal(x: Any) -> Decimal:
    """
    Strict conversion to Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1"), not the binary
    expansion. Unlike a form parser this never falls back to 0: bad input
    raises InvalidAmount.
    """
    if isinstance(x, Money):
        return x.amount
    if isinstance(x, bool):
        raise InvalidAmount(f"Cannot use a boolean as an amount: {x!r}")
    if isinstance(x, Decimal):
        return _checked(x)
    if isinstance(x, int):
        return _checked(Decimal(x))
    if isinstance(x, float):
        return _checked(Decimal(str(x)))
    if isinstance(x, str):
        try:
            return _checked(Decimal(x.strip().replace(",", "")))
        except InvalidOperation as e:
            raise InvalidAmount(f"Could not parse {x!r} as an amount") from e
    raise InvalidAmount(f"Unsupported amount type: {type(x).__name__}")


@total_ordering
class Money:
    __slots__ = ("_amount",)

    def __init__(self, amount: Any = ZERO):
        object.__setattr__(self, "_amount", to_decimal(amount))

    def __setattr__(self, name, value):
        raise AttributeError("Money is immutable")

    @classmethod
    def zero(cls) -> "Money":
        return cls(ZERO)

    @property
    def amount(self) -> Decimal:
        return self._amount

    # ---------- arithmetic ----------

    def _apply(self, op: str, other: Decimal) -> "Money":
        try:
            result = getattr(_ctx(), op)(self._amount, other)
        except ArithmeticError as e:
            raise InvalidAmount(f"{op} failed on {self._amount} and {other}: {e}") from e
        return Money(result)

    def add(self, other: Any) -> "Money":
        return self._apply("add", to_decimal(other))

    def subtract(self, other: Any) -> "Money":
        return self._apply("subtract", to_decimal(other))

    def multiply(self, factor: Any) -> "Money":
        return self._apply("multiply", to_decimal(factor))

    def divide(self, divisor: Any) -> "Money":
        d = to_decimal(divisor)
        if d == ZERO:
            raise InvalidAmount(f"Cannot divide {self._amount} by zero")
        return self._apply("divide", d)

    def percentage_of(self, percent: Any) -> "Money":
        """amount * percent / 100, unrounded."""
        return self.multiply(percent).divide(HUNDRED)

    # ---------- predicates / finalization ----------

    def is_negative(self) -> bool:
        return self._amount < ZERO

    def is_zero(self) -> bool:
        return self._amount == ZERO

    def floor_at_zero(self) -> "Money":
        return Money.zero() if self.is_negative() else self

    def round_to_cents(self, places: Optional[int] = None) -> "Money":
        """Round half away from zero to the currency precision."""
        try:
            rounded = self._amount.quantize(_quantum(places),
                                            rounding=ROUND_HALF_UP,
                                            context=_ctx())
        except InvalidOperation as e:
            raise InvalidAmount(f"Cannot round {self._amount} to currency precision") from e
        # -0.00 would print oddly on a document
        if rounded.is_zero():
            rounded = rounded.copy_abs()
        return Money(rounded)

    # ---------- dunder conveniences ----------

    def __add__(self, other: Any) -> "Money":
        return self.add(other)

    def __radd__(self, other: Any) -> "Money":
        # lets sum() start from int 0
        return self.add(other)

    def __sub__(self, other: Any) -> "Money":
        return self.subtract(other)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Money):
            return self._amount == other._amount
        if isinstance(other, (Decimal, int)) and not isinstance(other, bool):
            return self._amount == other
        return NotImplemented

    def __lt__(self, other: Any) -> bool:
        return self._amount < to_decimal(other)

    def __hash__(self) -> int:
        return hash(self._amount)

    def __repr__(self) -> str:
        return f"Money('{self._amount}')"

    def __str__(self) -> str:
        return str(self._amount)


def sum_money(values: Iterable[Money]) -> Money:
    total = Money.zero()
    for v in values:
        total = total.add(v)
    return total
