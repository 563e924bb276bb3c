"""Field Formats - pure predicates and normalizers for Ivorian identifiers.

Invariants:
    - NCC: exactly 7 digits followed by one uppercase letter (e.g. 9500015F)
    - Phone: spaces, dots and dashes are stripped before matching
    - Phone accepts +225 + 10 digits, 225 + 10 digits, or a local 8-10 digit number (optional leading 0)
"""

import re

_NCC_RE = re.compile(r"^\d{7}[A-Z]$")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_SEPARATORS_RE = re.compile(r"[\s.\-]")
_PHONE_INTL_PLUS_RE = re.compile(r"^\+225\d{10}$")
_PHONE_INTL_RE = re.compile(r"^225\d{10}$")
_PHONE_LOCAL_RE = re.compile(r"^0?\d{8,10}$")


def clean_phone_number(phone: str) -> str:
    return _PHONE_SEPARATORS_RE.sub("", phone)


def normalize_ncc(ncc: str) -> str:
    return ncc.strip().upper()


def is_valid_ncc(ncc: str) -> bool:
    return bool(_NCC_RE.fullmatch(ncc))


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.fullmatch(email))


def is_valid_phone(phone: str) -> bool:
    cleaned = clean_phone_number(phone)
    if cleaned.startswith("+225"):
        return bool(_PHONE_INTL_PLUS_RE.fullmatch(cleaned))
    if cleaned.startswith("225"):
        return bool(_PHONE_INTL_RE.fullmatch(cleaned))
    return bool(_PHONE_LOCAL_RE.fullmatch(cleaned))
