"""Note (invoice) domain service."""

import logging
from datetime import date, datetime
from typing import Any, Iterable, Optional

from bussnote.config import INVOICE_NUMBER_PREFIX, INVOICE_NUMBER_WIDTH
from bussnote.database.base import Database
from bussnote.domain.activity import ActivityService
from bussnote.domain.calculations import InvoiceFigures
from bussnote.domain.draft import InvoiceDraft, recompute
from bussnote.domain.entities import (
    ActivityType,
    Invoice as InvoiceEntity,
    InvoiceItem as InvoiceItemEntity,
    InvoiceStatus,
)
from bussnote.domain.errors import NotFoundError, invoice_not_found, party_not_found
from bussnote.domain.lifecycle import initial_status, parse_status, transition
from bussnote.domain.transaction import PAYMENT_TYPE
from bussnote.domain.validation import validate_invoice
from bussnote.utils.money import format_money

logger = logging.getLogger(__name__)

PAYMENT_NOTE = "Payment received"
DEFAULT_RECENT_LIMIT = 5


def next_invoice_number(current_max: Optional[str], year: int) -> str:
    """Return the number following `current_max`, stamped with `year`.

    The sequence is the last dash-separated segment of the greatest stored
    number; it does not restart with the year.

    Examples:
        next_invoice_number(None, 2025) -> "INV-2025-0001"
        next_invoice_number("INV-2025-0041", 2026) -> "INV-2026-0042"
    """
    sequence = 0
    if current_max:
        try:
            sequence = int(current_max.rsplit("-", 1)[-1])
        except ValueError:
            logger.warning("Unparseable note number %r, restarting sequence", current_max)
    return f"{INVOICE_NUMBER_PREFIX}-{year}-{sequence + 1:0{INVOICE_NUMBER_WIDTH}d}"


def _invoice_values(draft: InvoiceDraft, figures: InvoiceFigures) -> dict[str, Any]:
    """Columns written for a note, derived money fields included."""
    return {
        "invoice_no": (draft.invoice_no or "").strip() or None,
        "seller_id": draft.seller_id,
        "buyer_id": draft.buyer_id,
        "invoice_date": draft.invoice_date,
        "due_days": draft.due_days,
        "due_date": draft.due_date,
        "terms": draft.terms.strip(),
        "currency": draft.currency,
        "brokerage_rate": figures.brokerage_rate,
        "exchange_rate": figures.exchange_rate,
        "subtotal": figures.subtotal,
        "brokerage": figures.brokerage,
        "brokerage_in_home_currency": figures.brokerage_in_home_currency,
        "received_brokerage": figures.received_brokerage,
        "balance_brokerage": figures.balance_brokerage,
        "total": figures.total,
        "notes": draft.remarks,
    }


def _item_values(draft: InvoiceDraft) -> list[dict[str, Any]]:
    return [
        {"description": item.description.strip(), "quantity": item.quantity, "rate": item.rate}
        for item in draft.items
    ]


class InvoiceService:
    """Service for creating notes and driving their lifecycle."""

    def __init__(self, db: Database):
        """Initialize note service.

        Args:
            db: Database instance
        """
        self.db = db
        self.activities = ActivityService(db)

    def _require_invoice(self, invoice_id: int) -> InvoiceEntity:
        invoice = self.db.get_invoice(invoice_id)
        if invoice is None:
            raise NotFoundError(invoice_not_found(invoice_id))
        return invoice

    def _require_parties(self, draft: InvoiceDraft) -> None:
        for party_id in (draft.seller_id, draft.buyer_id):
            if self.db.get_party(party_id) is None:
                raise NotFoundError(party_not_found(party_id))

    def generate_invoice_number(self, today: Optional[date] = None) -> str:
        """Next note number, e.g. INV-2025-0007."""
        today = today or date.today()
        return next_invoice_number(self.db.get_max_invoice_number(), today.year)

    def create_invoice(self, draft: InvoiceDraft, today: Optional[date] = None) -> int:
        """Validate a draft and store it as a new note with its items.

        Args:
            draft: Note draft
            today: Date used for the number's year (defaults to today)

        Returns:
            Note ID

        Raises:
            ValidationError: If the draft breaks a rule
            NotFoundError: If the seller or buyer does not exist
        """
        draft = recompute(draft)
        validate_invoice(draft)
        self._require_parties(draft)

        figures = draft.figures
        values = _invoice_values(draft, figures)
        status = initial_status(draft.is_closed)
        values["status"] = status.value
        values["payment_date"] = datetime.now() if status == InvoiceStatus.CLOSED else None

        invoice_number = self.generate_invoice_number(today)
        invoice_id = self.db.create_invoice(invoice_number, values, _item_values(draft))
        logger.info(
            "Created note %s (%s) with %d item(s), total %s",
            invoice_number,
            invoice_id,
            len(draft.items),
            format_money(figures.total),
        )

        invoice = self.db.get_invoice(invoice_id, include_items=False)
        self.activities.log(
            ActivityType.INVOICE_CREATED,
            title="New note created",
            description=(
                f"Note {invoice_number} created for {invoice.seller_name} "
                f"and {invoice.buyer_name}"
            ),
            party_id=draft.seller_id,
            invoice_id=invoice_id,
        )
        return invoice_id

    def update_invoice(self, invoice_id: int, draft: InvoiceDraft, now: Optional[datetime] = None) -> None:
        """Replace a note's fields and items from an edited draft.

        The closed flag on the draft opens or closes the note through the
        regular status transitions.

        Raises:
            NotFoundError: If the note, seller or buyer does not exist
            ValidationError: If the draft breaks a rule
            ConflictError: If the closed flag implies a forbidden transition
        """
        invoice = self._require_invoice(invoice_id)
        draft = recompute(draft)
        validate_invoice(draft)
        self._require_parties(draft)

        values = _invoice_values(draft, draft.figures)
        if draft.is_closed != invoice.is_closed:
            requested = InvoiceStatus.CLOSED if draft.is_closed else InvoiceStatus.PENDING
            change = transition(invoice.status, requested, invoice.payment_date, now)
            values["status"] = change.status.value
            values["payment_date"] = change.payment_date

        self.db.update_invoice(invoice_id, values, items=_item_values(draft))
        logger.info("Updated note %s (%s)", invoice.invoice_number, invoice_id)

    def update_status(
        self,
        invoice_id: int,
        status: "str | InvoiceStatus",
        now: Optional[datetime] = None,
        user_id: Optional[int] = None,
    ) -> InvoiceEntity:
        """Move a note to a new status.

        Marking a note paid records a payment transaction for its total
        against the seller and a payment_received activity.

        Args:
            invoice_id: Note ID
            status: Requested status
            now: Timestamp for the payment date (defaults to now)
            user_id: Optional acting user for the activity log

        Returns:
            The updated note

        Raises:
            ValueError: If the status is not recognized
            NotFoundError: If the note does not exist
            ConflictError: If the transition is not allowed
        """
        requested = parse_status(status)
        invoice = self._require_invoice(invoice_id)
        change = transition(invoice.status, requested, invoice.payment_date, now)
        if change.status == invoice.status:
            return invoice

        self.db.update_invoice(
            invoice_id, {"status": change.status.value, "payment_date": change.payment_date}
        )
        logger.info(
            "Note %s status %s -> %s", invoice.invoice_number, invoice.status.value, change.status.value
        )

        if change.status == InvoiceStatus.PAID:
            self.db.create_transaction(
                party_id=invoice.seller_id,
                amount=invoice.total,
                date=change.payment_date.date(),
                type=PAYMENT_TYPE,
                notes=PAYMENT_NOTE,
                invoice_id=invoice_id,
            )
            self.activities.log(
                ActivityType.PAYMENT_RECEIVED,
                title="Payment received",
                description=(
                    f"Payment of {format_money(invoice.total)} {invoice.currency} "
                    f"received for note {invoice.invoice_number}"
                ),
                party_id=invoice.seller_id,
                invoice_id=invoice_id,
                user_id=user_id,
            )

        return self._require_invoice(invoice_id)

    def set_closed(self, invoice_id: int, closed: bool, now: Optional[datetime] = None) -> InvoiceEntity:
        """Close a note, or reopen a closed one as pending.

        Reopening a note that is not closed leaves it unchanged.
        """
        invoice = self._require_invoice(invoice_id)
        if not closed and not invoice.is_closed:
            return invoice
        requested = InvoiceStatus.CLOSED if closed else InvoiceStatus.PENDING
        return self.update_status(invoice_id, requested, now=now)

    def update_notes(self, invoice_id: int, notes: Optional[str]) -> InvoiceEntity:
        """Replace a note's remarks.

        Raises:
            NotFoundError: If the note does not exist
        """
        self._require_invoice(invoice_id)
        notes = (notes or "").strip() or None
        self.db.update_invoice(invoice_id, {"notes": notes})
        return self._require_invoice(invoice_id)

    def delete_invoice(self, invoice_id: int) -> bool:
        """Delete a note with its items, transactions and activities.

        The deletion is all-or-nothing; a store failure leaves every row in
        place and propagates.

        Returns:
            True if the note was deleted, False if it did not exist
        """
        deleted = self.db.delete_invoice(invoice_id)
        if deleted:
            logger.info("Deleted note %s", invoice_id)
        return deleted

    def get_invoice(self, invoice_id: int) -> Optional[InvoiceEntity]:
        """Get a note with its items, or None if not found."""
        return self.db.get_invoice(invoice_id, include_items=True)

    def get_invoice_items(self, invoice_id: int) -> list[InvoiceItemEntity]:
        return self.db.get_invoice_items(invoice_id)

    def list_invoices(
        self,
        status: "Optional[str | InvoiceStatus]" = None,
        party_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[InvoiceEntity]:
        """List notes, newest note date first.

        Args:
            status: Optional status filter
            party_id: Optional party filter (seller or buyer)
            start_date: Optional earliest note date
            end_date: Optional latest note date
        """
        statuses: Optional[Iterable[InvoiceStatus]] = None
        if status is not None:
            statuses = (parse_status(status),)
        return self.db.list_invoices(
            party_id=party_id, statuses=statuses, start_date=start_date, end_date=end_date
        )

    def recent_invoices(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[InvoiceEntity]:
        """Most recently created notes."""
        if limit <= 0:
            raise ValueError("Limit must be greater than 0")
        return self.db.list_recent_invoices(limit)

    def list_party_invoices(self, party_id: int) -> list[InvoiceEntity]:
        """Notes where the party is seller or buyer."""
        return self.db.list_invoices(party_id=party_id)
