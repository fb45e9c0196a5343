"""Editable note draft.

An InvoiceDraft is an immutable value object describing a note before it is
stored. Field edits go through `update_draft`, which applies the derived
field rules (due date, buyer/seller clash, home currency exchange rate) and
returns a new draft. Money figures are a property, recomputed on every
access from the current inputs.
"""

from dataclasses import dataclass, field, fields, replace
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional

from bussnote.config import (
    DEFAULT_BROKERAGE_RATE,
    DEFAULT_DUE_DAYS,
    DEFAULT_EXCHANGE_RATE,
    DEFAULT_TERMS,
    HOME_CURRENCY,
)
from bussnote.domain.calculations import InvoiceFigures, calculate_figures
from bussnote.domain.entities import Invoice, InvoiceStatus
from bussnote.domain.errors import ValidationError
from bussnote.utils.date_parser import add_days, parse_date
from bussnote.utils.money import to_decimal

SAME_PARTY_WARNING = "Seller and buyer cannot be the same party"

MONEY_FIELDS = ("brokerage_rate", "exchange_rate", "received_brokerage")
DATE_FIELDS = ("invoice_date", "due_date")
PARTY_FIELDS = ("seller_id", "buyer_id")
DUE_DATE_TRIGGERS = ("invoice_date", "due_days")


@dataclass(frozen=True)
class ItemDraft:
    """Line item being edited."""

    description: str
    quantity: Decimal
    rate: Decimal

    @classmethod
    def parse(cls, description: str, quantity: Any, rate: Any) -> "ItemDraft":
        """Build an item from raw input, converting numbers once.

        Raises:
            ValidationError: If quantity or rate is not a number
        """
        errors = {}
        try:
            qty = to_decimal(quantity)
        except ValueError as e:
            errors["quantity"] = str(e)
        try:
            item_rate = to_decimal(rate)
        except ValueError as e:
            errors["rate"] = str(e)
        if errors:
            raise ValidationError.from_fields(errors)
        return cls(description=(description or "").strip(), quantity=qty, rate=item_rate)

    @property
    def amount(self) -> Decimal:
        return self.quantity * self.rate


@dataclass(frozen=True)
class InvoiceDraft:
    """Note inputs prior to validation and storage."""

    seller_id: Optional[int] = None
    buyer_id: Optional[int] = None
    invoice_no: Optional[str] = None
    invoice_date: Optional[date] = None
    due_days: int = DEFAULT_DUE_DAYS
    due_date: Optional[date] = None
    terms: str = DEFAULT_TERMS
    currency: str = HOME_CURRENCY
    brokerage_rate: Decimal = DEFAULT_BROKERAGE_RATE
    exchange_rate: Decimal = DEFAULT_EXCHANGE_RATE
    received_brokerage: Decimal = Decimal("0.00")
    is_closed: bool = False
    remarks: Optional[str] = None
    items: tuple[ItemDraft, ...] = field(default=())

    @property
    def figures(self) -> InvoiceFigures:
        """Derived money fields for the current inputs."""
        return calculate_figures(
            self.items,
            brokerage_rate=self.brokerage_rate,
            exchange_rate=self.exchange_rate,
            received_brokerage=self.received_brokerage,
            currency=self.currency,
        )

    @classmethod
    def from_invoice(cls, invoice: Invoice) -> "InvoiceDraft":
        """Draft for editing a stored note."""
        return cls(
            seller_id=invoice.seller_id,
            buyer_id=invoice.buyer_id,
            invoice_no=invoice.invoice_no,
            invoice_date=invoice.invoice_date,
            due_days=invoice.due_days,
            due_date=invoice.due_date,
            terms=invoice.terms,
            currency=invoice.currency,
            brokerage_rate=invoice.brokerage_rate,
            exchange_rate=invoice.exchange_rate,
            received_brokerage=invoice.received_brokerage,
            is_closed=invoice.status == InvoiceStatus.CLOSED,
            remarks=invoice.notes,
            items=tuple(
                ItemDraft(description=item.description, quantity=item.quantity, rate=item.rate)
                for item in invoice.items
            ),
        )


@dataclass(frozen=True)
class DraftUpdate:
    """Result of applying field changes to a draft."""

    draft: InvoiceDraft
    warnings: tuple[str, ...] = ()


def new_draft(today: Optional[date] = None) -> InvoiceDraft:
    """Blank draft dated today, due after the default number of days."""
    today = today or date.today()
    return InvoiceDraft(
        invoice_date=today,
        due_days=DEFAULT_DUE_DAYS,
        due_date=add_days(today, DEFAULT_DUE_DAYS),
        items=(ItemDraft(description="", quantity=Decimal("1"), rate=Decimal("0")),),
    )


def recompute(draft: InvoiceDraft) -> InvoiceDraft:
    """Normalize a draft without side effects.

    Currency codes are upper-cased and the exchange rate is pinned to 1.00
    for the home currency.
    """
    currency = (draft.currency or "").strip().upper()
    exchange_rate = DEFAULT_EXCHANGE_RATE if currency == HOME_CURRENCY else draft.exchange_rate
    if currency == draft.currency and exchange_rate == draft.exchange_rate:
        return draft
    return replace(draft, currency=currency, exchange_rate=exchange_rate)


def update_draft(draft: InvoiceDraft, **changes: Any) -> DraftUpdate:
    """Apply field changes in order and re-derive dependent fields.

    - Changing invoice_date or due_days recomputes due_date. A due_date
      set later (in this call or a later one) is kept until one of those
      two fields changes again.
    - If seller and buyer become equal, the buyer is cleared and a
      warning is returned.
    - Switching to the home currency pins the exchange rate to 1.00.

    Raises:
        ValueError: If a change names an unknown field
        ValidationError: If a value cannot be converted to the field's type,
            or the derived due date is out of range
    """
    known = {f.name for f in fields(InvoiceDraft)}
    warnings: list[str] = []

    for name, raw_value in changes.items():
        if name not in known:
            raise ValueError(f"Unknown draft field '{name}'")

        value = _coerce(name, raw_value)
        draft = replace(draft, **{name: value})

        if name in DUE_DATE_TRIGGERS and draft.invoice_date is not None and draft.due_days is not None:
            try:
                due_date = add_days(draft.invoice_date, draft.due_days)
            except ValueError as e:
                raise ValidationError.from_fields({name: str(e)})
            draft = replace(draft, due_date=due_date)

        if name in PARTY_FIELDS and draft.seller_id is not None and draft.seller_id == draft.buyer_id:
            draft = replace(draft, buyer_id=None)
            warnings.append(SAME_PARTY_WARNING)

    return DraftUpdate(draft=recompute(draft), warnings=tuple(warnings))


def build_draft(items: Iterable[ItemDraft] = (), today: Optional[date] = None, **values: Any) -> DraftUpdate:
    """Start from `new_draft` and apply `values` through `update_draft`."""
    return update_draft(new_draft(today), items=tuple(items), **values)


def _coerce(name: str, value: Any) -> Any:
    """Convert raw input for a draft field, rejecting malformed values."""
    if value is None:
        return None if name not in MONEY_FIELDS else Decimal("0.00")
    try:
        if name in MONEY_FIELDS:
            return to_decimal(value)
        if name in DATE_FIELDS:
            return value if isinstance(value, date) else parse_date(str(value))
        if name in PARTY_FIELDS:
            return int(value) if str(value).strip() else None
        if name == "due_days":
            return int(value)
        if name == "items":
            return tuple(value)
    except (TypeError, ValueError) as e:
        raise ValidationError.from_fields({name: str(e)})
    return value
