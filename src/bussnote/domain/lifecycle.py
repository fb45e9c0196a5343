"""Note status lifecycle.

Stored statuses are pending, paid, cancelled and closed. "Overdue" is a
display state derived at read time from a pending status and a past due
date.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from bussnote.domain.entities import DisplayStatus, InvoiceStatus
from bussnote.domain.errors import ConflictError, invalid_status_transition

SETTLED_STATUSES = frozenset({InvoiceStatus.PAID, InvoiceStatus.CLOSED})
OUTSTANDING_STATUSES = frozenset({InvoiceStatus.PENDING})
CLOSED_REPORT_STATUSES = frozenset({InvoiceStatus.PAID, InvoiceStatus.CANCELLED, InvoiceStatus.CLOSED})

ALLOWED_TRANSITIONS: dict[InvoiceStatus, frozenset[InvoiceStatus]] = {
    InvoiceStatus.PENDING: frozenset({InvoiceStatus.PAID, InvoiceStatus.CLOSED, InvoiceStatus.CANCELLED}),
    InvoiceStatus.PAID: frozenset({InvoiceStatus.PENDING, InvoiceStatus.CLOSED, InvoiceStatus.CANCELLED}),
    InvoiceStatus.CLOSED: frozenset({InvoiceStatus.PENDING, InvoiceStatus.PAID, InvoiceStatus.CANCELLED}),
    InvoiceStatus.CANCELLED: frozenset({InvoiceStatus.PENDING}),
}


@dataclass(frozen=True)
class StatusChange:
    """Outcome of a status transition."""

    status: InvoiceStatus
    payment_date: Optional[datetime]


def parse_status(value: "str | InvoiceStatus") -> InvoiceStatus:
    """Convert user input to an InvoiceStatus.

    Raises:
        ValueError: If the value is not a stored status
    """
    if isinstance(value, InvoiceStatus):
        return value
    try:
        return InvoiceStatus(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in InvoiceStatus)
        raise ValueError(f"Invalid status '{value}'. Allowed: {allowed}")


def transition(
    current: InvoiceStatus,
    requested: InvoiceStatus,
    payment_date: Optional[datetime],
    now: Optional[datetime] = None,
) -> StatusChange:
    """Apply a status change and derive the payment date.

    Entering paid or closed stamps the payment date (an existing stamp is
    kept when moving between those two); any other status clears it.

    Raises:
        ConflictError: If the transition is not allowed
    """
    if requested == current:
        return StatusChange(status=current, payment_date=payment_date)
    if requested not in ALLOWED_TRANSITIONS[current]:
        raise ConflictError(invalid_status_transition(current.value, requested.value))

    if requested in SETTLED_STATUSES:
        if current in SETTLED_STATUSES and payment_date is not None:
            return StatusChange(status=requested, payment_date=payment_date)
        return StatusChange(status=requested, payment_date=now or datetime.now())
    return StatusChange(status=requested, payment_date=None)


def initial_status(is_closed: bool) -> InvoiceStatus:
    """Status for a newly stored note; the closed flag maps onto CLOSED."""
    return InvoiceStatus.CLOSED if is_closed else InvoiceStatus.PENDING


def display_status(status: InvoiceStatus, due_date: date, today: Optional[date] = None) -> DisplayStatus:
    """Status to show: pending notes past their due date read as overdue."""
    today = today or date.today()
    if status == InvoiceStatus.PENDING and due_date < today:
        return DisplayStatus.OVERDUE
    return DisplayStatus(status.value)


def days_overdue(status: InvoiceStatus, due_date: date, today: Optional[date] = None) -> int:
    """Whole days a pending note is past due (0 otherwise)."""
    today = today or date.today()
    if status != InvoiceStatus.PENDING or due_date >= today:
        return 0
    return (today - due_date).days


def is_outstanding(status: InvoiceStatus) -> bool:
    """Pending notes (overdue included) count toward outstanding totals."""
    return status in OUTSTANDING_STATUSES
