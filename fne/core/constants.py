"""Domain Constants - closed value sets, endpoints and client defaults for FNE.

Invariants:
    - Every closed value set is a str Enum; ALLOWED_* tuples are derived from the Enum
    - Enum values are the exact wire strings expected by the signing service
    - TAX_RATES covers every TaxType member

Design Decisions:
    - str Enums: members compare equal to the raw strings found on Invoice fields,
      so models stay permissive (plain str) while validation checks membership
"""

from enum import Enum


# ─── Closed Value Sets ───────────────────────────────────────────

class InvoiceType(str, Enum):
    """Invoice direction: sale to a client or purchase from a supplier."""
    SALE = "sale"
    PURCHASE = "purchase"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    CHECK = "check"
    MOBILE_MONEY = "mobile-money"
    TRANSFER = "transfer"
    DEFERRED = "deferred"


class Template(str, Enum):
    """Invoicing regime: decides which client fields are mandatory."""
    B2B = "B2B"
    B2C = "B2C"
    B2F = "B2F"
    B2G = "B2G"


class TaxType(str, Enum):
    TVA = "TVA"      # 18%
    TVAB = "TVAB"    # 9%
    TVAC = "TVAC"    # 0%, conventional exemption
    TVAD = "TVAD"    # 0%, legal exemption


class Currency(str, Enum):
    XOF = "XOF"
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"
    CAD = "CAD"
    AUD = "AUD"
    CNH = "CNH"
    CHF = "CHF"
    HKD = "HKD"
    NZD = "NZD"


ALLOWED_INVOICE_TYPES: tuple[str, ...] = tuple(m.value for m in InvoiceType)
ALLOWED_PAYMENT_METHODS: tuple[str, ...] = tuple(m.value for m in PaymentMethod)
ALLOWED_TEMPLATES: tuple[str, ...] = tuple(m.value for m in Template)
ALLOWED_TAX_TYPES: tuple[str, ...] = tuple(m.value for m in TaxType)
ALLOWED_CURRENCIES: tuple[str, ...] = tuple(m.value for m in Currency)

TAX_RATES: dict[str, float] = {
    TaxType.TVA.value: 18,
    TaxType.TVAB.value: 9,
    TaxType.TVAC.value: 0,
    TaxType.TVAD.value: 0,
}


# ─── Endpoints ───────────────────────────────────────────────────

TEST_BASE_URL = "http://54.247.95.108/ws"

ENDPOINT_SIGN_INVOICE = "/external/invoices/sign"
ENDPOINT_REFUND_INVOICE = "/external/invoices/{id}/refund"


# ─── Client Defaults ─────────────────────────────────────────────

DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_CACHE_TTL_SECONDS = 3600
MIN_API_KEY_LENGTH = 20
BACKOFF_BASE_MS = 1000
LOW_BALANCE_THRESHOLD = 100

SDK_NAME = "FNE-SDK-Python"
SDK_VERSION = "1.0.0"
SDK_USER_AGENT = f"{SDK_NAME}/{SDK_VERSION}"
