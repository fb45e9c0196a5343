"""Transaction (payment ledger) domain service."""

import logging
from datetime import date, datetime, time
from typing import Optional

from bussnote.database.base import Database
from bussnote.domain.activity import ActivityService
from bussnote.domain.entities import ActivityType, InvoiceStatus, Transaction as TransactionEntity
from bussnote.domain.errors import NotFoundError, invoice_not_found, party_not_found
from bussnote.domain.lifecycle import transition
from bussnote.domain.validation import validate_positive_amount
from bussnote.utils.money import MoneyInput, format_money, standard_round

logger = logging.getLogger(__name__)

PAYMENT_TYPE = "payment"


class TransactionService:
    """Service for recording payments and other ledger events."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db
        self.activities = ActivityService(db)

    def record_transaction(
        self,
        party_id: int,
        amount: MoneyInput,
        date: date,
        type: str = PAYMENT_TYPE,
        notes: Optional[str] = None,
        invoice_id: Optional[int] = None,
    ) -> int:
        """Record a ledger transaction.

        A payment against a note also marks that note paid.

        Args:
            party_id: Party the transaction belongs to
            amount: Positive amount
            date: Transaction date
            type: Transaction type (e.g. "payment")
            notes: Optional notes
            invoice_id: Optional note the transaction settles

        Returns:
            Transaction ID

        Raises:
            ValidationError: If the amount is not positive
            NotFoundError: If the party or note does not exist
            ConflictError: If the note cannot move to paid
        """
        amount = standard_round(amount)
        validate_positive_amount(amount)
        type = (type or PAYMENT_TYPE).strip().lower()

        if self.db.get_party(party_id) is None:
            raise NotFoundError(party_not_found(party_id))

        invoice = None
        status_change = None
        if invoice_id is not None:
            invoice = self.db.get_invoice(invoice_id, include_items=False)
            if invoice is None:
                raise NotFoundError(invoice_not_found(invoice_id))
            if type == PAYMENT_TYPE and invoice.status != InvoiceStatus.PAID:
                # Checked before any write so a refused transition stores nothing
                status_change = transition(
                    invoice.status,
                    InvoiceStatus.PAID,
                    invoice.payment_date,
                    now=datetime.combine(date, time.min),
                )

        transaction_id = self.db.create_transaction(
            party_id=party_id,
            amount=amount,
            date=date,
            type=type,
            notes=(notes or "").strip() or None,
            invoice_id=invoice_id,
        )
        logger.info("Recorded %s transaction %s of %s", type, transaction_id, format_money(amount))

        if status_change is not None:
            self.db.update_invoice(
                invoice_id,
                {"status": status_change.status.value, "payment_date": status_change.payment_date},
            )
            logger.info("Note %s marked paid by transaction %s", invoice.invoice_number, transaction_id)

        if type == PAYMENT_TYPE:
            target = f" for note {invoice.invoice_number}" if invoice else ""
            self.activities.log(
                ActivityType.PAYMENT_RECEIVED,
                title="Payment received",
                description=f"Payment of {format_money(amount)} received{target}",
                party_id=party_id,
                invoice_id=invoice_id,
            )
        return transaction_id

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def list_party_transactions(self, party_id: int) -> list[TransactionEntity]:
        """Transactions for a party, newest first, with note numbers joined in."""
        return self.db.list_transactions(party_id=party_id)

    def list_invoice_transactions(self, invoice_id: int) -> list[TransactionEntity]:
        return self.db.list_transactions(invoice_id=invoice_id)
