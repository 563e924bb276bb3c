"""Invoice Validation - rule engine that aggregates every violation before any network call.

Invariants:
    - collect_invoice_errors is PURE: no IO, no mutation of the invoice, fresh error set per call
    - All five phases always run; only item-level checks are skipped when there are no items
    - Error keys are dotted/bracketed field paths (items[0].taxes[1]); one message per key,
      insertion order = discovery order
    - validate_invoice raises ValidationFailure carrying the full error set, or returns None

Phases:
    1. base fields      invoiceType, paymentMethod, template, pointOfSale, establishment
    2. client fields    clientCompanyName, clientPhone, clientEmail
    3. regime rules     B2B -> clientNcc; B2F -> foreignCurrency + foreignCurrencyRate
    4. items            at least one; per-item description/quantity/amount/taxes/discount/customTaxes
    5. optional fields  foreignCurrency, discount, rne, document customTaxes
"""

import math
from collections.abc import Iterable
from typing import Any

from fne.core.constants import (
    ALLOWED_CURRENCIES,
    ALLOWED_INVOICE_TYPES,
    ALLOWED_PAYMENT_METHODS,
    ALLOWED_TAX_TYPES,
    ALLOWED_TEMPLATES,
    InvoiceType,
    Template,
)
from fne.core.errors import ValidationFailure
from fne.core.field_formats import is_valid_email, is_valid_ncc, is_valid_phone
from fne.core.models import CustomTax, Invoice, InvoiceItem

ErrorSet = dict[str, str]


def validate_invoice(invoice: Invoice) -> None:
    """Raise ValidationFailure with every violation found, or return None."""
    errors = collect_invoice_errors(invoice)
    if errors:
        raise ValidationFailure.with_errors(errors)


def collect_invoice_errors(invoice: Invoice) -> ErrorSet:
    errors: ErrorSet = {}
    _check_base_fields(invoice, errors)
    _check_client_fields(invoice, errors)
    _check_template_rules(invoice, errors)
    _check_items(invoice, errors)
    _check_optional_fields(invoice, errors)
    return errors


# ─── Rule Primitives ─────────────────────────────────────────────

def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and not math.isnan(value)
    )


def _is_positive(value: Any) -> bool:
    return _is_number(value) and value > 0


def _is_percentage(value: Any) -> bool:
    return _is_number(value) and 0 <= value <= 100


def _require(errors: ErrorSet, key: str, value: Any, label: str) -> bool:
    if _is_blank(value):
        errors[key] = f"The field {label} is required"
        return False
    return True


def _require_one_of(
    errors: ErrorSet, key: str, value: Any, allowed: Iterable[str], label: str,
) -> bool:
    allowed = tuple(allowed)
    if value not in allowed:
        errors[key] = f"The value of {label} must be one of: {', '.join(allowed)}"
        return False
    return True


def _check_custom_taxes(
    errors: ErrorSet, prefix: str, custom_taxes: list[CustomTax],
) -> None:
    for index, tax in enumerate(custom_taxes):
        if _is_blank(tax.name):
            errors[f"{prefix}[{index}].name"] = "The custom tax name is required"
        if not _is_number(tax.amount) or tax.amount < 0:
            errors[f"{prefix}[{index}].amount"] = "The custom tax amount must be positive"


# ─── Phase 1: Base Fields ────────────────────────────────────────

def _check_base_fields(invoice: Invoice, errors: ErrorSet) -> None:
    _require(errors, "invoiceType", invoice.invoice_type, "invoice type")
    _require_one_of(
        errors, "invoiceType", invoice.invoice_type,
        ALLOWED_INVOICE_TYPES, "invoice type",
    )
    _require(errors, "paymentMethod", invoice.payment_method, "payment method")
    _require_one_of(
        errors, "paymentMethod", invoice.payment_method,
        ALLOWED_PAYMENT_METHODS, "payment method",
    )
    _require(errors, "template", invoice.template, "template")
    _require_one_of(
        errors, "template", invoice.template, ALLOWED_TEMPLATES, "template",
    )
    _require(errors, "pointOfSale", invoice.point_of_sale, "point of sale")
    _require(errors, "establishment", invoice.establishment, "establishment")


# ─── Phase 2: Client Fields ──────────────────────────────────────

def _check_client_fields(invoice: Invoice, errors: ErrorSet) -> None:
    _require(errors, "clientCompanyName", invoice.client_company_name, "client name")

    if _require(errors, "clientPhone", invoice.client_phone, "phone"):
        if not is_valid_phone(str(invoice.client_phone)):
            errors["clientPhone"] = "The phone number is not valid (format: 8-10 digits)"

    if _require(errors, "clientEmail", invoice.client_email, "email"):
        if not is_valid_email(str(invoice.client_email)):
            errors["clientEmail"] = "The email address is not valid"


# ─── Phase 3: Regime Rules ───────────────────────────────────────

def _check_template_rules(invoice: Invoice, errors: ErrorSet) -> None:
    if invoice.template == Template.B2B:
        ncc = invoice.client_ncc
        if _is_blank(ncc):
            errors["clientNcc"] = "The client NCC is required for B2B invoices"
        elif not is_valid_ncc(str(ncc)):
            errors["clientNcc"] = "The NCC is not valid (format: 7 digits + 1 uppercase letter)"

    if invoice.template == Template.B2F:
        currency = invoice.foreign_currency
        rate = invoice.foreign_currency_rate
        if not currency:
            errors["foreignCurrency"] = "The foreign currency is required for B2F invoices"
        else:
            _require_one_of(
                errors, "foreignCurrency", currency,
                ALLOWED_CURRENCIES, "foreign currency",
            )
        if currency and not _is_positive(rate):
            errors["foreignCurrencyRate"] = (
                "The exchange rate must be greater than 0 for B2F invoices"
            )


# ─── Phase 4: Items ──────────────────────────────────────────────

def _check_items(invoice: Invoice, errors: ErrorSet) -> None:
    items = invoice.items
    if not items:
        errors["items"] = "The invoice must contain at least one item"
        return
    for index, item in enumerate(items):
        _check_item(item, index, invoice.invoice_type, errors)


def _check_item(
    item: InvoiceItem, index: int, invoice_type: str, errors: ErrorSet,
) -> None:
    prefix = f"items[{index}]"

    if _is_blank(item.description):
        errors[f"{prefix}.description"] = "The description is required"
    if not _is_positive(item.quantity):
        errors[f"{prefix}.quantity"] = "The quantity must be greater than 0"
    if not _is_positive(item.amount):
        errors[f"{prefix}.amount"] = "The amount must be greater than 0"

    if invoice_type == InvoiceType.SALE:
        taxes = item.taxes
        if not taxes:
            errors[f"{prefix}.taxes"] = "At least one tax type is required for sale invoices"
        for tax_index, tax in enumerate(taxes):
            if tax not in ALLOWED_TAX_TYPES:
                errors[f"{prefix}.taxes[{tax_index}]"] = (
                    f"Invalid tax type: {tax}. "
                    f"Accepted values: {', '.join(ALLOWED_TAX_TYPES)}"
                )

    if not _is_percentage(item.discount):
        errors[f"{prefix}.discount"] = "The discount must be between 0 and 100"

    _check_custom_taxes(errors, f"{prefix}.customTaxes", item.custom_taxes)


# ─── Phase 5: Optional Fields ────────────────────────────────────

def _check_optional_fields(invoice: Invoice, errors: ErrorSet) -> None:
    currency = invoice.foreign_currency
    if currency and currency not in ALLOWED_CURRENCIES:
        errors["foreignCurrency"] = (
            f"Invalid currency: {currency}. "
            f"Accepted values: {', '.join(ALLOWED_CURRENCIES)}"
        )

    if not _is_percentage(invoice.discount):
        errors["discount"] = "The global discount must be between 0 and 100"

    if invoice.is_rne and _is_blank(invoice.rne):
        errors["rne"] = "The RNE number is required when isRne is true"

    _check_custom_taxes(errors, "customTaxes", invoice.custom_taxes)
