"""Document Models - invoice aggregate, line items, custom taxes, refunds and sign responses.

Invariants:
    - Invoice and InvoiceItem construction is permissive: rules are enforced by validate_invoice()
    - CustomTax and RefundItem are validated eagerly: invalid construction raises immediately
    - Invoice owns its items and custom taxes; accessors return copies, items are append-only
    - to_payload() omits empty optionals, except isRne and the foreignCurrency/foreignCurrencyRate
      pair which are always emitted ("" / 0 when unset)

Design Decisions:
    - Dataclasses for the permissive aggregate, Pydantic for the eager value types
      and for the response parsed at the API boundary
    - Field values may be str Enum members or raw strings; _wire() flattens both
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from fne.core.constants import InvoiceType, LOW_BALANCE_THRESHOLD, Template


def _wire(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _check_percentage(discount: float) -> None:
    if discount < 0 or discount > 100:
        raise ValueError("Discount must be between 0 and 100")


# ─── Custom Tax ──────────────────────────────────────────────────

class CustomTax(BaseModel):
    """Ad-hoc named levy (DTD, AIRSI, withholding...) on an invoice or an item."""

    model_config = ConfigDict(frozen=True)

    name: str
    amount: float = Field(ge=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("custom tax name is required")
        return v

    def to_payload(self) -> dict[str, Any]:
        return {"name": self.name, "amount": self.amount}


# ─── Line Item ───────────────────────────────────────────────────

@dataclass
class InvoiceItem:
    """One invoice line. Amount is the unit price excluding tax."""

    description: str
    quantity: float
    amount: float
    taxes: list[str] = field(default_factory=list)
    reference: str | None = None
    discount: float = 0
    measurement_unit: str | None = None
    _custom_taxes: list[CustomTax] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        self.taxes = list(self.taxes)

    def set_reference(self, reference: str | None) -> "InvoiceItem":
        self.reference = reference
        return self

    def set_discount(self, discount: float) -> "InvoiceItem":
        _check_percentage(discount)
        self.discount = discount
        return self

    def set_measurement_unit(self, unit: str | None) -> "InvoiceItem":
        self.measurement_unit = unit
        return self

    def add_custom_tax(self, name: str, amount: float) -> "InvoiceItem":
        self._custom_taxes.append(CustomTax(name=name, amount=amount))
        return self

    @property
    def custom_taxes(self) -> list[CustomTax]:
        return list(self._custom_taxes)

    def total_ht(self) -> float:
        return self.quantity * self.amount

    def total_ht_after_discount(self) -> float:
        return self.total_ht() * (1 - self.discount / 100)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "description": self.description,
            "quantity": self.quantity,
            "amount": self.amount,
            "taxes": [_wire(t) for t in self.taxes],
        }
        if self.reference:
            payload["reference"] = self.reference
        if self.discount > 0:
            payload["discount"] = self.discount
        if self.measurement_unit:
            payload["measurementUnit"] = self.measurement_unit
        if self._custom_taxes:
            payload["customTaxes"] = [t.to_payload() for t in self._custom_taxes]
        return payload


# ─── Invoice ─────────────────────────────────────────────────────

@dataclass
class Invoice:
    """Aggregate root for one invoice submitted for signature."""

    invoice_type: str
    payment_method: str
    template: str
    point_of_sale: str
    establishment: str
    client_company_name: str
    client_phone: str
    client_email: str
    client_ncc: str | None = None
    client_seller_name: str | None = None
    commercial_message: str | None = None
    footer: str | None = None
    foreign_currency: str | None = None
    foreign_currency_rate: float = 0
    is_rne: bool = False
    rne: str | None = None
    discount: float = 0
    _items: list[InvoiceItem] = field(default_factory=list, init=False, repr=False)
    _custom_taxes: list[CustomTax] = field(default_factory=list, init=False, repr=False)

    # Fluent setters

    def set_client_ncc(self, ncc: str | None) -> "Invoice":
        self.client_ncc = ncc
        return self

    def set_client_seller_name(self, name: str | None) -> "Invoice":
        self.client_seller_name = name
        return self

    def set_commercial_message(self, message: str | None) -> "Invoice":
        self.commercial_message = message
        return self

    def set_footer(self, footer: str | None) -> "Invoice":
        self.footer = footer
        return self

    def set_foreign_currency(self, currency: str | None, rate: float = 0) -> "Invoice":
        self.foreign_currency = currency
        self.foreign_currency_rate = rate
        return self

    def set_rne(self, is_rne: bool, rne: str | None = None) -> "Invoice":
        self.is_rne = is_rne
        self.rne = rne
        return self

    def set_discount(self, discount: float) -> "Invoice":
        _check_percentage(discount)
        self.discount = discount
        return self

    def add_item(self, item: InvoiceItem) -> "Invoice":
        self._items.append(item)
        return self

    def add_custom_tax(self, name: str, amount: float) -> "Invoice":
        self._custom_taxes.append(CustomTax(name=name, amount=amount))
        return self

    # Accessors

    @property
    def items(self) -> list[InvoiceItem]:
        return list(self._items)

    @property
    def custom_taxes(self) -> list[CustomTax]:
        return list(self._custom_taxes)

    def item_count(self) -> int:
        return len(self._items)

    def is_b2b(self) -> bool:
        return self.template == Template.B2B

    def is_b2f(self) -> bool:
        return self.template == Template.B2F

    def is_purchase(self) -> bool:
        return self.invoice_type == InvoiceType.PURCHASE

    def to_payload(self) -> dict[str, Any]:
        """Request body for POST /external/invoices/sign."""
        payload: dict[str, Any] = {
            "invoiceType": _wire(self.invoice_type),
            "paymentMethod": _wire(self.payment_method),
            "template": _wire(self.template),
            "pointOfSale": self.point_of_sale,
            "establishment": self.establishment,
            "clientCompanyName": self.client_company_name,
            "clientPhone": self.client_phone,
            "clientEmail": self.client_email,
            "isRne": self.is_rne,
            "items": [item.to_payload() for item in self._items],
        }
        if self.client_ncc:
            payload["clientNcc"] = self.client_ncc
        if self.client_seller_name:
            payload["clientSellerName"] = self.client_seller_name
        if self.commercial_message:
            payload["commercialMessage"] = self.commercial_message
        if self.footer:
            payload["footer"] = self.footer
        if self.foreign_currency:
            payload["foreignCurrency"] = _wire(self.foreign_currency)
            payload["foreignCurrencyRate"] = self.foreign_currency_rate
        else:
            payload["foreignCurrency"] = ""
            payload["foreignCurrencyRate"] = 0
        if self.rne:
            payload["rne"] = self.rne
        if self.discount > 0:
            payload["discount"] = self.discount
        if self._custom_taxes:
            payload["customTaxes"] = [t.to_payload() for t in self._custom_taxes]
        return payload


# ─── Refund ──────────────────────────────────────────────────────

class RefundItem(BaseModel):
    """Line of the original invoice to credit back."""

    model_config = ConfigDict(frozen=True)

    id: str
    quantity: float = Field(gt=0)

    @field_validator("id")
    @classmethod
    def strip_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("item id is required")
        return v


@dataclass
class RefundRequest:
    """Credit note request against a signed invoice."""

    _items: list[RefundItem] = field(default_factory=list, init=False, repr=False)

    def add_item(self, item_id: str, quantity: float) -> "RefundRequest":
        self._items.append(RefundItem(id=item_id, quantity=quantity))
        return self

    @property
    def items(self) -> list[RefundItem]:
        return list(self._items)

    def has_items(self) -> bool:
        return bool(self._items)

    def item_count(self) -> int:
        return len(self._items)

    def to_payload(self) -> dict[str, Any]:
        return {
            "items": [
                {"id": item.id, "quantity": item.quantity} for item in self._items
            ],
        }


# ─── Sign Response ───────────────────────────────────────────────

class SignResponse(BaseModel):
    """Signed invoice returned by the service. statusCode is injected locally."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    ncc: str = ""
    reference: str = ""
    token: str = ""
    warning: bool = False
    balance_sticker: int = 0
    invoice: dict[str, Any] = Field(default_factory=dict)
    status_code: int = Field(200, alias="statusCode")

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        """The service sends null for absent fields; fall back to defaults."""
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    @classmethod
    def from_api(cls, body: dict[str, Any], status_code: int) -> "SignResponse":
        return cls.model_validate({**body, "statusCode": status_code})

    @property
    def qr_code_url(self) -> str:
        """Verification URL encoded in the invoice QR code."""
        return self.token

    def has_warning(self) -> bool:
        return self.warning

    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def is_balance_low(self, threshold: int = LOW_BALANCE_THRESHOLD) -> bool:
        return self.balance_sticker < threshold

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
