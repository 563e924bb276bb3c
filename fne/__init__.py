"""Python client for the FNE electronic invoice signing API (Côte d'Ivoire DGI)."""

from fne.client import FneClient
from fne.config import FneSettings, get_settings
from fne.core.constants import (
    SDK_VERSION,
    Currency,
    InvoiceType,
    PaymentMethod,
    TaxType,
    Template,
)
from fne.core.errors import (
    AuthFailure,
    FneError,
    RemoteFailure,
    TransportFailure,
    ValidationFailure,
)
from fne.core.field_formats import (
    clean_phone_number,
    is_valid_email,
    is_valid_ncc,
    is_valid_phone,
    normalize_ncc,
)
from fne.core.invoice_math import (
    apply_discount,
    build_verification_url,
    calculate_ht,
    calculate_ttc,
    calculate_vat,
    convert_currency,
    extract_token_from_url,
    format_amount,
    format_amount_with_decimals,
    generate_unique_id,
    get_vat_rate,
)
from fne.core.models import (
    CustomTax,
    Invoice,
    InvoiceItem,
    RefundRequest,
    SignResponse,
)
from fne.core.validate_invoice import collect_invoice_errors, validate_invoice
from fne.infrastructure.observability import setup_logging

__version__ = SDK_VERSION

__all__ = [
    "AuthFailure",
    "Currency",
    "CustomTax",
    "FneClient",
    "FneError",
    "FneSettings",
    "Invoice",
    "InvoiceItem",
    "InvoiceType",
    "PaymentMethod",
    "RefundRequest",
    "RemoteFailure",
    "SignResponse",
    "TaxType",
    "Template",
    "TransportFailure",
    "ValidationFailure",
    "apply_discount",
    "build_verification_url",
    "calculate_ht",
    "calculate_ttc",
    "calculate_vat",
    "clean_phone_number",
    "collect_invoice_errors",
    "convert_currency",
    "extract_token_from_url",
    "format_amount",
    "format_amount_with_decimals",
    "generate_unique_id",
    "get_settings",
    "get_vat_rate",
    "is_valid_email",
    "is_valid_ncc",
    "is_valid_phone",
    "normalize_ncc",
    "setup_logging",
    "validate_invoice",
]
