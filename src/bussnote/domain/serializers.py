"""Wire representation of domain entities.

Money is rendered as a string with exactly two fractional digits, dates as
YYYY-MM-DD and timestamps as ISO 8601, so nothing passes through float.
"""

from dataclasses import fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from bussnote.domain.entities import Invoice
from bussnote.domain.lifecycle import display_status
from bussnote.utils.date_parser import format_date
from bussnote.utils.money import format_money


def to_wire(value: Any) -> Any:
    """Convert a dataclass (or nested values) into JSON-safe primitives."""
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_wire(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return format_money(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return format_date(value)
    if isinstance(value, (list, tuple)):
        return [to_wire(v) for v in value]
    if isinstance(value, dict):
        return {k: to_wire(v) for k, v in value.items()}
    return value


def invoice_to_wire(invoice: Invoice, today: date | None = None) -> dict[str, Any]:
    """Note payload with derived fields (closed flag, display status, item amounts)."""
    payload = to_wire(invoice)
    payload["is_closed"] = invoice.is_closed
    payload["display_status"] = display_status(invoice.status, invoice.due_date, today).value
    for item_payload, item in zip(payload["items"], invoice.items):
        item_payload["amount"] = format_money(item.amount)
    return payload
