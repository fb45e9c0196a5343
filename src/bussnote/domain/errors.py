"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic.

    Attributes:
        field_errors: Mapping of field name to message, so callers can show
            each problem next to the input that caused it.
    """

    def __init__(self, message: str, field_errors: Optional[dict[str, str]] = None):
        super().__init__(message)
        self.field_errors = dict(field_errors or {})

    @classmethod
    def from_fields(cls, field_errors: dict[str, str]) -> "ValidationError":
        """Build an error whose message lists every failing field."""
        details = "; ".join(f"{field}: {msg}" for field, msg in field_errors.items())
        return cls(f"Validation failed ({details})", field_errors)


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


def party_not_found(party_id: int) -> str:
    """Return message for missing party."""
    return f"Party {party_id} not found"


def invoice_not_found(invoice_id: int) -> str:
    """Return message for missing invoice."""
    return f"Note {invoice_id} not found"


def duplicate_party_name(name: str) -> str:
    """Return message for a party name that is already taken."""
    return f"Party with name '{name}' already exists"


def party_delete_blocked(party_id: int) -> str:
    """Return the generic message shown when a party still has dependents."""
    return (
        f"Unable to delete party {party_id}: it has related notes or transactions. "
        "Please delete them first."
    )


def invalid_status_transition(current: str, requested: str) -> str:
    """Return message for a lifecycle transition that is not allowed."""
    return f"Cannot change status from '{current}' to '{requested}'"
