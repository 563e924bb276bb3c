"""Refund Service - credit notes against a previously signed invoice.

Invariants:
    - Requests are validated before any network call
    - {id} in the refund endpoint is replaced by the original invoice id
"""

import logging
from collections.abc import Iterable
from typing import Any

from fne.core.constants import ENDPOINT_REFUND_INVOICE
from fne.core.models import RefundRequest, SignResponse
from fne.core.validate_refund import validate_refund_request
from fne.infrastructure.http_client import ResilientHttpClient
from fne.services.sign_response import to_sign_response

logger = logging.getLogger(__name__)


def refund_endpoint(invoice_id: str) -> str:
    return ENDPOINT_REFUND_INVOICE.replace("{id}", invoice_id)


class RefundService:

    def __init__(self, http: ResilientHttpClient):
        self.http = http

    async def create_refund(
        self, original_invoice_id: str, refund_request: RefundRequest,
    ) -> SignResponse:
        validate_refund_request(refund_request)
        envelope = await self.http.post(
            refund_endpoint(original_invoice_id), refund_request.to_payload(),
        )
        response = to_sign_response(envelope)
        logger.info(
            f"Refund created for invoice {original_invoice_id}",
            extra={"reference": response.reference, "status_code": response.status_code},
        )
        return response

    def create_refund_request(self) -> RefundRequest:
        return RefundRequest()

    async def create_full_refund(
        self, original_invoice_id: str, original_items: Iterable[dict[str, Any]],
    ) -> SignResponse:
        """Refund every line of the original invoice at its full quantity."""
        return await self.create_refund(original_invoice_id, _build_request(original_items))

    async def create_partial_refund(
        self, original_invoice_id: str, items_to_refund: Iterable[dict[str, Any]],
    ) -> SignResponse:
        return await self.create_refund(original_invoice_id, _build_request(items_to_refund))


def _build_request(items: Iterable[dict[str, Any]]) -> RefundRequest:
    request = RefundRequest()
    for item in items:
        request.add_item(item["id"], item["quantity"])
    return request
