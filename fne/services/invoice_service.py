"""Invoice Service - validates, signs and builds sale invoices.

Invariants:
    - sign_invoice validates first: an invalid invoice never reaches the network
    - Factory helpers build permissive Invoice/InvoiceItem objects; they do not validate
"""

import logging

from fne.core.constants import (
    ENDPOINT_SIGN_INVOICE,
    Currency,
    InvoiceType,
    PaymentMethod,
    TaxType,
    Template,
)
from fne.core.models import Invoice, InvoiceItem, SignResponse
from fne.core.validate_invoice import validate_invoice
from fne.infrastructure.http_client import ResilientHttpClient
from fne.services.sign_response import to_sign_response

logger = logging.getLogger(__name__)


class InvoiceService:
    """Sale invoices (B2C, B2B, B2F, B2G)."""

    def __init__(self, http: ResilientHttpClient):
        self.http = http

    async def sign_invoice(self, invoice: Invoice) -> SignResponse:
        validate_invoice(invoice)
        envelope = await self.http.post(ENDPOINT_SIGN_INVOICE, invoice.to_payload())
        response = to_sign_response(envelope)
        logger.info(
            "Invoice signed",
            extra={"reference": response.reference, "status_code": response.status_code},
        )
        if response.has_warning():
            logger.warning(
                f"Sticker balance low: {response.balance_sticker} remaining",
                extra={"reference": response.reference},
            )
        return response

    # ─── Factories ───────────────────────────────────────────────

    def create_sale_invoice(
        self,
        point_of_sale: str,
        establishment: str,
        client_name: str,
        client_phone: str,
        client_email: str,
        payment_method: str = PaymentMethod.CASH,
        template: str = Template.B2C,
    ) -> Invoice:
        return Invoice(
            invoice_type=InvoiceType.SALE,
            payment_method=payment_method,
            template=template,
            point_of_sale=point_of_sale,
            establishment=establishment,
            client_company_name=client_name,
            client_phone=client_phone,
            client_email=client_email,
        )

    def create_b2b_invoice(
        self,
        point_of_sale: str,
        establishment: str,
        client_name: str,
        client_phone: str,
        client_email: str,
        client_ncc: str,
        payment_method: str = PaymentMethod.TRANSFER,
    ) -> Invoice:
        return Invoice(
            invoice_type=InvoiceType.SALE,
            payment_method=payment_method,
            template=Template.B2B,
            point_of_sale=point_of_sale,
            establishment=establishment,
            client_company_name=client_name,
            client_phone=client_phone,
            client_email=client_email,
            client_ncc=client_ncc,
        )

    def create_b2f_invoice(
        self,
        point_of_sale: str,
        establishment: str,
        client_name: str,
        client_phone: str,
        client_email: str,
        foreign_currency: str | Currency,
        exchange_rate: float,
        payment_method: str = PaymentMethod.TRANSFER,
    ) -> Invoice:
        """Export invoice: amounts in XOF plus currency and exchange rate."""
        return Invoice(
            invoice_type=InvoiceType.SALE,
            payment_method=payment_method,
            template=Template.B2F,
            point_of_sale=point_of_sale,
            establishment=establishment,
            client_company_name=client_name,
            client_phone=client_phone,
            client_email=client_email,
            foreign_currency=foreign_currency,
            foreign_currency_rate=exchange_rate,
        )

    def create_from_rne(
        self,
        rne_number: str,
        point_of_sale: str,
        establishment: str,
        client_name: str,
        client_phone: str,
        client_email: str,
        payment_method: str = PaymentMethod.CASH,
    ) -> Invoice:
        """Invoice issued from an electronic normalized receipt (RNE)."""
        return Invoice(
            invoice_type=InvoiceType.SALE,
            payment_method=payment_method,
            template=Template.B2C,
            point_of_sale=point_of_sale,
            establishment=establishment,
            client_company_name=client_name,
            client_phone=client_phone,
            client_email=client_email,
            is_rne=True,
            rne=rne_number,
        )

    def create_item(
        self,
        description: str,
        quantity: float,
        amount: float,
        taxes: list[str] | None = None,
    ) -> InvoiceItem:
        return InvoiceItem(
            description=description,
            quantity=quantity,
            amount=amount,
            taxes=taxes if taxes is not None else [TaxType.TVA],
        )
