"""Validation rules for notes and parties.

Rules run before anything reaches the store. Each collector returns a
mapping of field name to message; the `validate_*` wrappers raise a
ValidationError carrying that mapping.
"""

import re
from decimal import Decimal
from typing import Any, Optional

from bussnote.config import CURRENCIES, HOME_CURRENCY
from bussnote.domain.draft import SAME_PARTY_WARNING, InvoiceDraft
from bussnote.domain.errors import ValidationError
from bussnote.utils.money import decimal_places, standard_round

PHONE_PATTERN = re.compile(r"^\+?[0-9\s-]{10,15}$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

MAX_DECIMALS = 2


def collect_invoice_errors(draft: InvoiceDraft) -> dict[str, str]:
    """Return every rule the draft breaks, keyed by field."""
    errors: dict[str, str] = {}

    if draft.seller_id is None:
        errors["seller_id"] = "Seller is required"
    if draft.buyer_id is None:
        errors["buyer_id"] = "Buyer is required"
    elif draft.buyer_id == draft.seller_id:
        errors["buyer_id"] = SAME_PARTY_WARNING

    if draft.invoice_date is None:
        errors["invoice_date"] = "Note date is required"
    if draft.due_date is None:
        errors["due_date"] = "Due date is required"
    if draft.due_days is None:
        errors["due_days"] = "Due days is required"
    elif draft.due_days < 0:
        errors["due_days"] = "Due days cannot be negative"

    if not (draft.terms or "").strip():
        errors["terms"] = "Terms are required"

    if draft.currency not in CURRENCIES:
        errors["currency"] = f"Currency must be one of {', '.join(CURRENCIES)}"

    if draft.brokerage_rate < 0:
        errors["brokerage_rate"] = "Brokerage rate must be a positive number"
    # Checked at the stored precision
    if draft.currency != HOME_CURRENCY and standard_round(draft.exchange_rate) <= 0:
        errors["exchange_rate"] = "Exchange rate must be greater than 0"
    if draft.received_brokerage < 0:
        errors["received_brokerage"] = "Received brokerage cannot be negative"

    errors.update(_collect_item_errors(draft))
    return errors


def _collect_item_errors(draft: InvoiceDraft) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not draft.items:
        errors["items"] = "At least one item is required"
        return errors

    for index, item in enumerate(draft.items):
        key = f"items[{index}]"
        if not (item.description or "").strip():
            errors[f"{key}.description"] = "All items must have a description"
        if item.quantity <= 0:
            errors[f"{key}.quantity"] = "Quantity must be greater than 0"
        elif decimal_places(item.quantity) > MAX_DECIMALS:
            errors[f"{key}.quantity"] = "Quantity allows at most 2 decimals"
        if item.rate < 0:
            errors[f"{key}.rate"] = "Rate cannot be negative"
        elif decimal_places(item.rate) > MAX_DECIMALS:
            errors[f"{key}.rate"] = "Rate allows at most 2 decimals"
    return errors


def validate_invoice(draft: InvoiceDraft) -> None:
    """Raise ValidationError if the draft cannot be submitted."""
    errors = collect_invoice_errors(draft)
    if errors:
        raise ValidationError.from_fields(errors)


def collect_party_errors(values: dict[str, Any], partial: bool = False) -> dict[str, str]:
    """Check party fields.

    Args:
        values: Field values (name, contact_person, phone, email, ...)
        partial: If True, only validate the fields present (for updates)
    """
    errors: dict[str, str] = {}

    def check(name: str) -> bool:
        return not partial or name in values

    if check("name") and len((values.get("name") or "").strip()) < 2:
        errors["name"] = "Party name must be at least 2 characters"
    if check("contact_person") and len((values.get("contact_person") or "").strip()) < 2:
        errors["contact_person"] = "Contact person name is required"
    if check("phone") and not PHONE_PATTERN.match(values.get("phone") or ""):
        errors["phone"] = "Please enter a valid phone number"

    email: Optional[str] = values.get("email")
    if email and not EMAIL_PATTERN.match(email):
        errors["email"] = "Please enter a valid email address"
    return errors


def validate_party(values: dict[str, Any], partial: bool = False) -> None:
    """Raise ValidationError if party fields are invalid."""
    errors = collect_party_errors(values, partial=partial)
    if errors:
        raise ValidationError.from_fields(errors)


def validate_positive_amount(amount: Decimal, field_name: str = "amount") -> None:
    if amount <= 0:
        raise ValidationError.from_fields({field_name: "Amount must be greater than 0"})
