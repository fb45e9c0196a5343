"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from bussnote.domain.entities import (
    Activity,
    Invoice,
    InvoiceItem,
    InvoiceStatus,
    Party,
    Transaction,
)


class Database(ABC):
    """Abstract persistence gateway for bussnote.

    Reads return domain entities (or None when the record does not exist).
    Multi-row writes (note with items, item replacement, cascading delete)
    are atomic: either every row is written or none is.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Party operations
    @abstractmethod
    def create_party(
        self,
        name: str,
        contact_person: str,
        phone: str,
        email: Optional[str] = None,
        address: Optional[str] = None,
        tax_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create a party. Returns party ID."""
        pass

    @abstractmethod
    def get_party(self, party_id: int) -> Optional[Party]:
        """Get party by ID, with outstanding and last transaction date."""
        pass

    @abstractmethod
    def get_party_by_name(self, name: str) -> Optional[Party]:
        """Get party by name (case-insensitive)."""
        pass

    @abstractmethod
    def list_parties(self) -> list[Party]:
        """List all parties ordered by name."""
        pass

    @abstractmethod
    def update_party(self, party_id: int, values: dict[str, Any]) -> None:
        """Update the given party columns."""
        pass

    @abstractmethod
    def delete_party(self, party_id: int) -> None:
        """Delete a party row."""
        pass

    @abstractmethod
    def get_party_invoice_count(self, party_id: int) -> int:
        """Count notes where the party is seller or buyer."""
        pass

    @abstractmethod
    def get_party_transaction_count(self, party_id: int) -> int:
        """Count ledger transactions for the party."""
        pass

    # Invoice operations
    @abstractmethod
    def get_max_invoice_number(self) -> Optional[str]:
        """Return the greatest stored note number, if any."""
        pass

    @abstractmethod
    def create_invoice(
        self, invoice_number: str, values: dict[str, Any], items: Iterable[dict[str, Any]]
    ) -> int:
        """Create a note and its items in one transaction. Returns note ID."""
        pass

    @abstractmethod
    def get_invoice(self, invoice_id: int, include_items: bool = True) -> Optional[Invoice]:
        """Get note by ID with seller/buyer names joined in."""
        pass

    @abstractmethod
    def get_invoice_items(self, invoice_id: int) -> list[InvoiceItem]:
        """Get a note's items in insertion order."""
        pass

    @abstractmethod
    def list_invoices(
        self,
        party_id: Optional[int] = None,
        statuses: Optional[Iterable[InvoiceStatus]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        seller_only: bool = False,
    ) -> list[Invoice]:
        """List notes, newest note date first.

        Args:
            party_id: Only notes where this party is seller or buyer
            statuses: Only notes in these statuses
            start_date: Note date lower bound (inclusive)
            end_date: Note date upper bound (inclusive)
            seller_only: With party_id, only notes where the party is seller
        """
        pass

    @abstractmethod
    def list_invoices_paid_between(
        self,
        statuses: Iterable[InvoiceStatus],
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Invoice]:
        """List notes by payment timestamp range, newest payment first."""
        pass

    @abstractmethod
    def list_recent_invoices(self, limit: int) -> list[Invoice]:
        """List most recently created notes."""
        pass

    @abstractmethod
    def update_invoice(
        self,
        invoice_id: int,
        values: dict[str, Any],
        items: Optional[Iterable[dict[str, Any]]] = None,
    ) -> bool:
        """Update note columns; replace items when given. Returns False if missing."""
        pass

    @abstractmethod
    def delete_invoice(self, invoice_id: int) -> bool:
        """Delete a note with its items, transactions and activities.

        Returns False if the note does not exist. On failure nothing is
        deleted and the error propagates.
        """
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        party_id: int,
        amount: Decimal,
        date: date,
        type: str,
        notes: Optional[str] = None,
        invoice_id: Optional[int] = None,
    ) -> int:
        """Create a ledger transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self, party_id: Optional[int] = None, invoice_id: Optional[int] = None
    ) -> list[Transaction]:
        """List transactions, newest date first."""
        pass

    # Activity operations
    @abstractmethod
    def create_activity(
        self,
        type: str,
        title: str,
        description: str,
        party_id: Optional[int] = None,
        invoice_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> int:
        """Append an activity. Returns activity ID."""
        pass

    @abstractmethod
    def list_activities(
        self, limit: Optional[int] = None, invoice_id: Optional[int] = None
    ) -> list[Activity]:
        """List activities, newest first."""
        pass
