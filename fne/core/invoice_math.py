"""Invoice Math - VAT, discounts, currency conversion and FCFA formatting.

Invariants:
    - Rates are percentages (18 means 18%)
    - apply_discount rejects percentages outside [0, 100]
    - convert_currency rejects non-positive exchange rates
    - Formatted amounts use a space as thousands separator (1 250 000 FCFA)
    - format_amount rounds half up (2.5 -> 3, -2.5 -> -2)
"""

import math
import random
import string
import time
from urllib.parse import urlparse

from fne.core.constants import TAX_RATES, TEST_BASE_URL


# ─── VAT ─────────────────────────────────────────────────────────

def calculate_ttc(amount_ht: float, vat_rate: float) -> float:
    """Tax-inclusive amount from a tax-exclusive one."""
    return amount_ht * (1 + vat_rate / 100)


def calculate_vat(amount_ht: float, vat_rate: float) -> float:
    return amount_ht * (vat_rate / 100)


def calculate_ht(amount_ttc: float, vat_rate: float) -> float:
    """Tax-exclusive amount from a tax-inclusive one."""
    return amount_ttc / (1 + vat_rate / 100)


def get_vat_rate(tax_type: str) -> float:
    """Rate for a tax code; unknown codes are 0."""
    return TAX_RATES.get(tax_type, 0)


# ─── Discounts & Currency ────────────────────────────────────────

def apply_discount(amount: float, discount_percent: float) -> float:
    if discount_percent < 0 or discount_percent > 100:
        raise ValueError("Discount percentage must be between 0 and 100")
    return amount * (1 - discount_percent / 100)


def convert_currency(
    amount: float, exchange_rate: float, from_xof: bool = True,
) -> float:
    """Convert XOF -> foreign currency (from_xof=True) or the reverse."""
    if exchange_rate <= 0:
        raise ValueError("Exchange rate must be greater than 0")
    return amount / exchange_rate if from_xof else amount * exchange_rate


# ─── Formatting ──────────────────────────────────────────────────

def _group_thousands(digits: str) -> str:
    return f"{int(digits):,}".replace(",", " ")


def format_amount(amount: float, include_symbol: bool = True) -> str:
    """Round half up to the unit and group thousands: 1250000 -> '1 250 000 FCFA'."""
    rounded = math.floor(amount + 0.5)
    sign = "-" if rounded < 0 else ""
    formatted = sign + _group_thousands(str(abs(rounded)))
    return f"{formatted} FCFA" if include_symbol else formatted


def format_amount_with_decimals(
    amount: float, decimals: int = 2, include_symbol: bool = True,
) -> str:
    """Comma as decimal separator: 1250000.5 -> '1 250 000,50 FCFA'."""
    fixed = f"{abs(amount):.{decimals}f}"
    integer_part, _, decimal_part = fixed.partition(".")
    sign = "-" if amount < 0 else ""
    formatted = sign + _group_thousands(integer_part)
    if decimal_part:
        formatted = f"{formatted},{decimal_part}"
    return f"{formatted} FCFA" if include_symbol else formatted


# ─── Verification Tokens ─────────────────────────────────────────

def extract_token_from_url(token_url: str) -> str | None:
    """Last path segment of a verification URL, or None."""
    parsed = urlparse(token_url)
    if not parsed.scheme or not parsed.netloc:
        return None
    token = parsed.path.split("/")[-1]
    return token or None


def build_verification_url(
    token: str, is_test_mode: bool = True, production_url: str | None = None,
) -> str:
    if is_test_mode:
        base_url = TEST_BASE_URL.replace("/ws", "")
    else:
        base_url = (production_url or "").replace("/ws", "")
    return f"{base_url}/fr/verification/{token}"


def generate_unique_id(prefix: str = "FNE") -> str:
    """e.g. 'FNE-1704067200000-abc123'."""
    timestamp = int(time.time() * 1000)
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=6))  # nosec B311
    return f"{prefix}-{timestamp}-{suffix}"
