"""Invoice Validation - tests for the aggregated, five-phase rule engine.

Tests cover:
    - A sale/cash/B2C invoice with one valid TVA item passes
    - Every violation is collected in one pass, keyed by field path
    - Zero items -> exactly one items key, no item-level keys
    - B2B NCC presence and format
    - B2F currency and exchange rate, both errors can coexist
    - Sale items need valid tax codes; purchase items need none
    - Optional fields: currency membership, discounts, rne, custom taxes
    - collect_invoice_errors is idempotent and does not mutate the invoice
"""

import pytest

from fne.core.constants import InvoiceType, PaymentMethod, TaxType, Template
from fne.core.errors import ErrorKind, ValidationFailure
from fne.core.validate_invoice import collect_invoice_errors, validate_invoice

from tests.fakes import make_invoice, make_item


# ─── Happy Path ──────────────────────────────────────────────────

def test_valid_sale_invoice_passes():
    assert validate_invoice(make_invoice()) is None
    assert collect_invoice_errors(make_invoice()) == {}


def test_enum_members_accepted_like_raw_strings():
    invoice = make_invoice(
        invoice_type=InvoiceType.SALE,
        payment_method=PaymentMethod.MOBILE_MONEY,
        template=Template.B2G,
        with_item=False,
    )
    invoice.add_item(make_item(taxes=[TaxType.TVAB, TaxType.TVAD]))
    assert collect_invoice_errors(invoice) == {}


@pytest.mark.parametrize("phone", ["0709080765", "+2250709080765", "225 07 09 08 07 65", "07-09-08-07"])
def test_accepted_phone_formats(phone):
    assert "clientPhone" not in collect_invoice_errors(make_invoice(client_phone=phone))


# ─── Aggregation ─────────────────────────────────────────────────

def test_all_violations_reported_together():
    invoice = make_invoice(
        template="B2X",
        payment_method="",
        point_of_sale="   ",
        client_email="not-an-email",
        with_item=False,
    )
    invoice.add_item(make_item(description="", quantity=0, amount=-5, taxes=["VAT"]))

    with pytest.raises(ValidationFailure) as exc_info:
        validate_invoice(invoice)

    err = exc_info.value
    assert err.kind == ErrorKind.VALIDATION
    assert err.code == "VALIDATION_ERROR"
    assert set(err.field_names()) == {
        "paymentMethod",
        "template",
        "pointOfSale",
        "clientEmail",
        "items[0].description",
        "items[0].quantity",
        "items[0].amount",
        "items[0].taxes[0]",
    }
    assert err.message == "Validation failed: 8 error(s) found"


def test_missing_enum_value_reports_allowed_values():
    errors = collect_invoice_errors(make_invoice(template=None))
    assert "B2B, B2C, B2F, B2G" in errors["template"]


def test_keys_follow_discovery_order():
    invoice = make_invoice(
        invoice_type="", client_company_name="", with_item=False,
    )
    keys = list(collect_invoice_errors(invoice))
    assert keys.index("invoiceType") < keys.index("clientCompanyName") < keys.index("items")


def test_blank_phone_is_required_not_malformed():
    errors = collect_invoice_errors(make_invoice(client_phone="  "))
    assert errors["clientPhone"] == "The field phone is required"


def test_malformed_phone():
    errors = collect_invoice_errors(make_invoice(client_phone="12-34"))
    assert "not valid" in errors["clientPhone"]


# ─── Items ───────────────────────────────────────────────────────

def test_zero_items_yields_single_items_key():
    errors = collect_invoice_errors(make_invoice(with_item=False))
    assert errors == {"items": "The invoice must contain at least one item"}
    assert not any(k.startswith("items[") for k in errors)


def test_sale_item_without_taxes():
    invoice = make_invoice(with_item=False).add_item(make_item(taxes=[]))
    assert "items[0].taxes" in collect_invoice_errors(invoice)


def test_second_item_errors_indexed():
    invoice = make_invoice()
    invoice.add_item(make_item(taxes=["TVA", "XYZ"]))
    errors = collect_invoice_errors(invoice)
    assert list(errors) == ["items[1].taxes[1]"]
    assert "XYZ" in errors["items[1].taxes[1]"]


def test_purchase_item_needs_no_taxes():
    invoice = make_invoice(invoice_type="purchase", with_item=False)
    invoice.add_item(make_item(taxes=[]))
    assert collect_invoice_errors(invoice) == {}


def test_item_discount_out_of_range():
    item = make_item()
    item.discount = 150
    invoice = make_invoice(with_item=False).add_item(item)
    assert "items[0].discount" in collect_invoice_errors(invoice)


def test_bool_is_not_a_quantity():
    invoice = make_invoice(with_item=False).add_item(make_item(quantity=True))
    assert "items[0].quantity" in collect_invoice_errors(invoice)


# ─── Regime Rules ────────────────────────────────────────────────

def test_b2b_without_ncc():
    errors = collect_invoice_errors(make_invoice(template="B2B"))
    assert list(errors) == ["clientNcc"]
    assert "required" in errors["clientNcc"]


@pytest.mark.parametrize("ncc", ["950236N", "9502363n", "95023634N", "9502363N\n"])
def test_b2b_malformed_ncc(ncc):
    errors = collect_invoice_errors(make_invoice(template="B2B", client_ncc=ncc))
    assert "format" in errors["clientNcc"]


def test_b2b_with_valid_ncc_passes():
    assert collect_invoice_errors(make_invoice(template="B2B", client_ncc="9502363N")) == {}


def test_b2f_without_currency():
    errors = collect_invoice_errors(make_invoice(template="B2F"))
    assert "foreignCurrency" in errors
    assert "foreignCurrencyRate" not in errors


def test_b2f_currency_without_rate():
    errors = collect_invoice_errors(make_invoice(template="B2F", foreign_currency="EUR"))
    assert list(errors) == ["foreignCurrencyRate"]


def test_b2f_unknown_currency_and_bad_rate_coexist():
    invoice = make_invoice(template="B2F", foreign_currency="BTC", foreign_currency_rate=-1)
    errors = collect_invoice_errors(invoice)
    assert {"foreignCurrency", "foreignCurrencyRate"} <= set(errors)


def test_b2f_complete_passes():
    invoice = make_invoice(template="B2F", foreign_currency="USD", foreign_currency_rate=605.5)
    assert collect_invoice_errors(invoice) == {}


# ─── Optional Fields ─────────────────────────────────────────────

def test_foreign_currency_checked_outside_b2f():
    errors = collect_invoice_errors(make_invoice(foreign_currency="BTC"))
    assert "Invalid currency: BTC" in errors["foreignCurrency"]


def test_global_discount_out_of_range():
    invoice = make_invoice()
    invoice.discount = -1
    assert "discount" in collect_invoice_errors(invoice)


def test_rne_required_when_flagged():
    errors = collect_invoice_errors(make_invoice(is_rne=True))
    assert list(errors) == ["rne"]
    assert collect_invoice_errors(make_invoice(is_rne=True, rne="RNE-0001")) == {}


# ─── Purity ──────────────────────────────────────────────────────

def test_collect_is_idempotent_and_pure():
    invoice = make_invoice(template="B2B", client_email="bad", with_item=False)
    before = invoice.to_payload()

    first = collect_invoice_errors(invoice)
    second = collect_invoice_errors(invoice)

    assert first == second
    assert first is not second
    assert invoice.to_payload() == before
