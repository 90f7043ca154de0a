from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest

from doctotals import (
    DocumentDiscount,
    DocumentTotals,
    TaxConfig,
    ValidationError,
    WithholdingConfig,
    compute_document_totals,
    compute_totals_from_payload,
)

MONEY_FIELDS = ("subtotal", "tax_amount", "gross_total",
                "withholding_amount", "net_payable")


def _vat7_exclusive_quote(items, withholding=None):
    return compute_document_totals(
        items,
        document_discount=DocumentDiscount(percent="5"),
        tax=TaxConfig(rate="7", mode="exclusive"),
        withholding=withholding or WithholdingConfig(enabled=False, percent="0"),
    )


# ---------- end-to-end ----------

def test_quotation_scenario(quotation_items):
    t = _vat7_exclusive_quote(quotation_items)

    assert t.line_totals == (Decimal("150.00"), Decimal("180.00"))
    assert t.line_sum == Decimal("330.00")
    assert t.document_discount_total == Decimal("16.50")
    assert t.subtotal == Decimal("313.50")
    assert t.tax_amount == Decimal("21.95")
    assert t.gross_total == Decimal("335.45")
    assert t.withholding_amount == Decimal("0.00")
    assert t.net_payable == Decimal("335.45")


def test_quotation_scenario_with_withholding(quotation_items):
    t = _vat7_exclusive_quote(quotation_items,
                              WithholdingConfig(enabled=True, percent="3"))
    # gross, tax and subtotal are what the tax authority sees; unchanged
    assert (t.subtotal, t.tax_amount, t.gross_total) == (
        Decimal("313.50"), Decimal("21.95"), Decimal("335.45"))
    assert t.withholding_amount == Decimal("10.06")
    assert t.net_payable == Decimal("325.39")
    assert t.net_payable == t.gross_total - t.withholding_amount


def test_inclusive_document(make_item):
    t = compute_document_totals(
        [make_item(quantity="1", unit_price="107.00")],
        tax=TaxConfig(rate="7", mode="inclusive"),
        withholding=WithholdingConfig(enabled=False),
    )
    assert (t.subtotal, t.tax_amount, t.gross_total, t.net_payable) == (
        Decimal("100.00"), Decimal("7.00"), Decimal("107.00"), Decimal("107.00"))


def test_discounted_to_nothing(make_item):
    t = compute_document_totals(
        [make_item(quantity="1", unit_price="10.00", discount_amount="50.00")],
        tax=TaxConfig(rate="7", mode="exclusive"),
        withholding=WithholdingConfig(enabled=True, percent="3"),
    )
    assert t.line_totals == (Decimal("0.00"),)
    for name in MONEY_FIELDS:
        assert getattr(t, name) == Decimal("0.00")


def test_withholding_on_round_thousand(make_item):
    t = compute_document_totals(
        [make_item(quantity="10", unit_price="100")],
        tax=TaxConfig(rate="0", mode="exclusive"),
        withholding=WithholdingConfig(enabled=True, percent="3"),
    )
    assert t.gross_total == Decimal("1000.00")
    assert t.withholding_amount == Decimal("30.00")
    assert t.net_payable == Decimal("970.00")


def test_float_inputs_do_not_drift():
    t = compute_document_totals(
        [{"quantity": 3, "unit_price": 0.1}],
        tax={"rate": 0, "mode": "exclusive"},
        withholding={"enabled": False},
    )
    assert t.gross_total == Decimal("0.30")


# ---------- properties ----------

def test_idempotent(quotation_items):
    a = _vat7_exclusive_quote(quotation_items)
    b = _vat7_exclusive_quote(quotation_items)
    assert a == b
    assert a.model_dump_json() == b.model_dump_json()


def test_concurrent_calls_agree(quotation_items):
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: _vat7_exclusive_quote(quotation_items),
                                range(32)))
    assert all(r == results[0] for r in results)


@pytest.mark.parametrize("items, discount, tax, withholding", [
    ([{"quantity": 1, "unit_price": "0.01"}], {"percent": 100}, {"rate": 7, "mode": "exclusive"}, {"enabled": True, "percent": 100}),
    ([{"quantity": 2, "unit_price": "5", "discount_amount": "99"}], {"amount": "3"}, {"rate": 7, "mode": "inclusive"}, {"enabled": True, "percent": 3}),
    ([{"quantity": "0.333", "unit_price": "0.01"}], {}, {"rate": "100", "mode": "inclusive"}, {"enabled": False}),
    ([{"quantity": 1000, "unit_price": "99999.99", "discount_percent": "12.5"}], {"percent": "2.5", "amount": "1000"}, {"rate": 7, "mode": "exclusive"}, {"enabled": True, "percent": "1.5"}),
])
def test_money_fields_never_negative(items, discount, tax, withholding):
    t = compute_document_totals(items, discount, tax, withholding)
    for name in MONEY_FIELDS:
        assert getattr(t, name) >= 0, name
    assert all(v >= 0 for v in t.line_totals)


def test_result_is_immutable(quotation_items):
    t = _vat7_exclusive_quote(quotation_items)
    assert isinstance(t, DocumentTotals)
    with pytest.raises(Exception):
        t.net_payable = Decimal("1")  # type: ignore[misc]


def test_defaults_apply_when_config_is_omitted(make_item):
    # DEFAULT_TAX_RATE=0, withholding disabled unless configured otherwise
    t = compute_document_totals([make_item(quantity="2", unit_price="12.50")])
    assert t.gross_total == Decimal("25.00")
    assert t.tax_amount == Decimal("0.00")
    assert t.withholding_amount == Decimal("0.00")


# ---------- stored record adapter ----------

def test_payload_adapter_matches_direct_call(quotation_items):
    payload = {
        "quotation_number": "QT-2026-0001",
        "items": [
            {"product_name": "A", "quantity": 3, "unit": "ชิ้น", "unit_price": 50,
             "discount_percent": 0, "discount_amount": 0, "total": 150},
            {"product_name": "B", "quantity": 1, "unit": "กล่อง", "unit_price": 200,
             "discount_percent": 10, "discount_amount": 0, "total": 180},
        ],
        "discount_percent": 5,
        "discount_amount": 0,
        "tax_rate": 7,
        "tax_type": "exclusive",
        "withholding_tax": False,
        "withholding_tax_percent": 3,
    }
    assert compute_totals_from_payload(payload) == _vat7_exclusive_quote(quotation_items)


def test_payload_adapter_withholding_and_nulls():
    t = compute_totals_from_payload({
        "items": [{"quantity": 1, "unit_price": "1000"}],
        "discount_percent": None,
        "discount_amount": None,
        "tax_rate": 0,
        "tax_type": "exclusive",
        "withholding_tax": True,
        "withholding_tax_percent": 3,
    })
    assert t.withholding_amount == Decimal("30.00")
    assert t.net_payable == Decimal("970.00")


def test_payload_adapter_defaults_for_missing_columns():
    # a stored record without tax_type / tax_rate is a 7% exclusive document
    t = compute_totals_from_payload({
        "items": [{"quantity": 1, "unit_price": "100"}],
        "tax_rate": 7,
    })
    assert t.tax_amount == Decimal("7.00")
    assert t.gross_total == Decimal("107.00")

    t = compute_totals_from_payload({"items": [{"quantity": 1, "unit_price": "100"}]})
    assert (t.subtotal, t.tax_amount, t.gross_total) == (
        Decimal("100.00"), Decimal("7.00"), Decimal("107.00"))


def test_payload_adapter_keeps_explicit_zero_rate():
    t = compute_totals_from_payload({
        "items": [{"quantity": 1, "unit_price": "100"}],
        "tax_rate": 0,
    })
    assert t.gross_total == Decimal("100.00")


def test_payload_adapter_missing_withholding_percent_uses_default():
    t = compute_totals_from_payload({
        "items": [{"quantity": 10, "unit_price": "100"}],
        "tax_rate": 0,
        "withholding_tax": True,
    })
    assert t.withholding_amount == Decimal("30.00")


@pytest.mark.parametrize("flag, expected_withholding", [
    ("false", Decimal("0.00")),
    ("0", Decimal("0.00")),
    (0, Decimal("0.00")),
    ("true", Decimal("30.00")),
    (1, Decimal("30.00")),
])
def test_payload_adapter_parses_withholding_flag(flag, expected_withholding):
    t = compute_totals_from_payload({
        "items": [{"quantity": 1, "unit_price": "1000"}],
        "tax_rate": 0,
        "tax_type": "exclusive",
        "withholding_tax": flag,
        "withholding_tax_percent": 3,
    })
    assert t.withholding_amount == expected_withholding


def test_payload_adapter_rejects_unreadable_withholding_flag():
    with pytest.raises(ValidationError) as ei:
        compute_totals_from_payload({
            "items": [{"quantity": 1, "unit_price": "1000"}],
            "withholding_tax": "maybe",
        })
    assert ei.value.fields == ["withholding.enabled"]
