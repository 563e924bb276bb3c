"""Refund Validation - checks a credit-note request before it is sent.

Invariants:
    - Empty request -> single "items" error (ValidationFailure.for_field)
    - Per-item id and quantity rules are enforced by RefundItem at construction,
      so a RefundRequest never holds an invalid item
"""

from fne.core.errors import ValidationFailure
from fne.core.models import RefundRequest


def validate_refund_request(request: RefundRequest) -> None:
    if not request.has_items():
        raise ValidationFailure.for_field(
            "items", "The refund request must contain at least one item",
        )
