"""Party domain service."""

import logging
from typing import Any, Optional

from bussnote.database.base import Database
from bussnote.domain.activity import ActivityService
from bussnote.domain.entities import ActivityType, Party as PartyEntity
from bussnote.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    duplicate_party_name,
    party_delete_blocked,
    party_not_found,
)
from bussnote.domain.validation import validate_party

logger = logging.getLogger(__name__)

PARTY_FIELDS = ("name", "contact_person", "phone", "email", "address", "tax_id", "notes")
OPTIONAL_FIELDS = ("email", "address", "tax_id", "notes")


def _clean(values: dict[str, Any]) -> dict[str, Any]:
    """Strip strings; blank optional fields become None."""
    cleaned = {}
    for key, value in values.items():
        if isinstance(value, str):
            value = value.strip()
        if key in OPTIONAL_FIELDS and not value:
            value = None
        cleaned[key] = value
    return cleaned


class PartyService:
    """Service for managing buyers and sellers."""

    def __init__(self, db: Database):
        """Initialize party service.

        Args:
            db: Database instance
        """
        self.db = db
        self.activities = ActivityService(db)

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
        """Create a new party.

        Args:
            name: Party name (unique, case-insensitive)
            contact_person: Contact person name
            phone: Phone number
            email: Optional email address
            address: Optional postal address
            tax_id: Optional tax identifier
            notes: Optional notes

        Returns:
            Party ID

        Raises:
            ValidationError: If a field is invalid
            ConflictError: If the name is already taken
        """
        values = _clean(
            {
                "name": name,
                "contact_person": contact_person,
                "phone": phone,
                "email": email,
                "address": address,
                "tax_id": tax_id,
                "notes": notes,
            }
        )
        validate_party(values)

        if not self.is_name_available(values["name"]):
            logger.warning("Rejected duplicate party name %r", values["name"])
            raise ConflictError(duplicate_party_name(values["name"]))

        party_id = self.db.create_party(**values)
        logger.info("Created party %s (%s)", party_id, values["name"])

        self.activities.log(
            ActivityType.PARTY_ADDED,
            title="New party added",
            description=f"{values['name']} was added as a party",
            party_id=party_id,
        )
        return party_id

    def get_party(self, party_id: int) -> Optional[PartyEntity]:
        """Get party by ID.

        Args:
            party_id: Party ID

        Returns:
            Party entity (with outstanding total) or None if not found
        """
        return self.db.get_party(party_id)

    def get_party_by_name(self, name: str) -> Optional[PartyEntity]:
        """Get party by name, ignoring case."""
        return self.db.get_party_by_name(name)

    def list_parties(self) -> list[PartyEntity]:
        """List all parties ordered by name."""
        return self.db.list_parties()

    def update_party(self, party_id: int, **values: Any) -> None:
        """Update some fields of a party.

        Args:
            party_id: Party ID
            **values: Fields to change (name, contact_person, phone, email,
                address, tax_id, notes)

        Raises:
            NotFoundError: If the party does not exist
            ValidationError: If a field is invalid
            ConflictError: If the new name is already taken
            ValueError: If an unknown field is given
        """
        unknown = set(values) - set(PARTY_FIELDS)
        if unknown:
            raise ValueError(f"Unknown party field(s): {', '.join(sorted(unknown))}")

        party = self.db.get_party(party_id)
        if party is None:
            raise NotFoundError(party_not_found(party_id))

        values = _clean(values)
        validate_party(values, partial=True)

        if "name" in values and not self.is_name_available(values["name"], exclude_id=party_id):
            logger.warning("Rejected duplicate party name %r", values["name"])
            raise ConflictError(duplicate_party_name(values["name"]))

        if values:
            self.db.update_party(party_id, values)
            logger.info("Updated party %s: %s", party_id, ", ".join(sorted(values)))

    def delete_party(self, party_id: int) -> None:
        """Delete a party.

        Args:
            party_id: Party ID to delete

        Raises:
            NotFoundError: If the party does not exist
            DependencyError: If any note or transaction references the party
        """
        party = self.db.get_party(party_id)
        if party is None:
            raise NotFoundError(party_not_found(party_id))

        if self.has_invoices(party_id) or self.db.get_party_transaction_count(party_id) > 0:
            logger.warning("Refused to delete party %s: it has dependent records", party_id)
            raise DependencyError(party_delete_blocked(party_id))

        self.db.delete_party(party_id)
        logger.info("Deleted party %s", party_id)

    def has_invoices(self, party_id: int) -> bool:
        """True if the party is seller or buyer on any note."""
        return self.db.get_party_invoice_count(party_id) > 0

    def is_name_available(self, name: str, exclude_id: Optional[int] = None) -> bool:
        """Check whether a party name is free (case-insensitive).

        Args:
            name: Candidate name
            exclude_id: Party allowed to hold the name already (for renames)
        """
        existing = self.db.get_party_by_name(name)
        return existing is None or existing.id == exclude_id
