# FILE: doctotals/utils/text.py
from __future__ import annotations

from decimal import Decimal
from typing import Any

from doctotals.services.money import Money

_DIGITS = ["ศูนย์", "หนึ่ง", "สอง", "สาม", "สี่", "ห้า", "หก", "เจ็ด", "แปด", "เก้า"]
_PLACES = ["", "สิบ", "ร้อย", "พัน", "หมื่น", "แสน"]
_MILLION = 1_000_000


def _read_group(n: int, has_higher: bool) -> str:
    """Read 0 <= n < 1,000,000 in Thai. has_higher: a million group precedes it."""
    if n == 0:
        return ""
    out = []
    digits = str(n).rjust(6, "0")
    for i, ch in enumerate(digits):
        d = int(ch)
        place = 5 - i
        if d == 0:
            continue
        if place == 1 and d == 1:
            out.append("สิบ")
        elif place == 1 and d == 2:
            out.append("ยี่สิบ")
        elif place == 0 and d == 1 and (n > 1 or has_higher):
            out.append("เอ็ด")
        else:
            out.append(_DIGITS[d] + _PLACES[place])
    return "".join(out)


def _read_int(n: int, has_higher: bool = False) -> str:
    if n >= _MILLION:
        high, low = divmod(n, _MILLION)
        return _read_int(high, has_higher) + "ล้าน" + _read_group(low, True)
    return _read_group(n, has_higher)


def baht_text(v: Any) -> str:
    """
    Amount in Thai words, as printed under the grand total of a quotation.

        baht_text(0)         -> "ศูนย์บาทถ้วน"
        baht_text(101)       -> "หนึ่งร้อยเอ็ดบาทถ้วน"
        baht_text("1250.50") -> "หนึ่งพันสองร้อยห้าสิบบาทห้าสิบสตางค์"

    Rounded to satang (half away from zero) first.
    """
    amount = Money(v).round_to_cents(2).amount
    negative = amount < 0
    amount = abs(amount)

    baht = int(amount)
    satang = int((amount - Decimal(baht)) * 100)

    if baht == 0 and satang == 0:
        return "ศูนย์บาทถ้วน"

    text = ""
    if baht:
        text += _read_int(baht) + "บาท"
    if satang:
        text += _read_group(satang, False) + "สตางค์"
    else:
        text += "ถ้วน"
    return ("ลบ" + text) if negative else text
