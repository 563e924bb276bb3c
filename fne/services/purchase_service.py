"""Purchase Service - signs purchase invoices (agricultural and supplier purchases).

Invariants:
    - sign_purchase_invoice rejects non-purchase invoices before validation
    - Purchase items carry no tax codes
"""

from fne.core.constants import (
    ENDPOINT_SIGN_INVOICE,
    InvoiceType,
    PaymentMethod,
    Template,
)
from fne.core.errors import ValidationFailure
from fne.core.models import Invoice, InvoiceItem, SignResponse
from fne.core.validate_invoice import validate_invoice
from fne.infrastructure.http_client import ResilientHttpClient
from fne.services.sign_response import to_sign_response


class PurchaseService:

    def __init__(self, http: ResilientHttpClient):
        self.http = http

    async def sign_purchase_invoice(self, invoice: Invoice) -> SignResponse:
        if not invoice.is_purchase():
            raise ValidationFailure.for_field(
                "invoiceType",
                "This method only accepts purchase invoices (type: purchase)",
            )
        validate_invoice(invoice)
        envelope = await self.http.post(ENDPOINT_SIGN_INVOICE, invoice.to_payload())
        return to_sign_response(envelope)

    # ─── Factories ───────────────────────────────────────────────

    def create_purchase_invoice(
        self,
        point_of_sale: str,
        establishment: str,
        supplier_name: str,
        supplier_phone: str,
        supplier_email: str,
        payment_method: str = PaymentMethod.CASH,
        template: str = Template.B2C,
    ) -> Invoice:
        return Invoice(
            invoice_type=InvoiceType.PURCHASE,
            payment_method=payment_method,
            template=template,
            point_of_sale=point_of_sale,
            establishment=establishment,
            client_company_name=supplier_name,
            client_phone=supplier_phone,
            client_email=supplier_email,
        )

    def create_b2b_purchase_invoice(
        self,
        point_of_sale: str,
        establishment: str,
        supplier_name: str,
        supplier_phone: str,
        supplier_email: str,
        supplier_ncc: str,
        payment_method: str = PaymentMethod.CASH,
    ) -> Invoice:
        return Invoice(
            invoice_type=InvoiceType.PURCHASE,
            payment_method=payment_method,
            template=Template.B2B,
            point_of_sale=point_of_sale,
            establishment=establishment,
            client_company_name=supplier_name,
            client_phone=supplier_phone,
            client_email=supplier_email,
            client_ncc=supplier_ncc,
        )

    def create_cooperative_purchase(
        self,
        point_of_sale: str,
        establishment: str,
        cooperative_name: str,
        cooperative_phone: str,
        cooperative_email: str,
        payment_method: str = PaymentMethod.MOBILE_MONEY,
    ) -> Invoice:
        return Invoice(
            invoice_type=InvoiceType.PURCHASE,
            payment_method=payment_method,
            template=Template.B2C,
            point_of_sale=point_of_sale,
            establishment=establishment,
            client_company_name=cooperative_name,
            client_phone=cooperative_phone,
            client_email=cooperative_email,
        )

    def create_purchase_item(
        self,
        description: str,
        quantity: float,
        amount: float,
        measurement_unit: str | None = None,
    ) -> InvoiceItem:
        item = InvoiceItem(description=description, quantity=quantity, amount=amount, taxes=[])
        if measurement_unit:
            item.set_measurement_unit(measurement_unit)
        return item
