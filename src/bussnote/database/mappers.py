"""Mapper functions to convert SQLAlchemy models into domain entities.

Joined names (seller, buyer, invoice number) are resolved here so the
domain layer never touches ORM relationships.
"""

from decimal import Decimal
from datetime import date
from typing import Optional

from bussnote.domain import entities as domain
from bussnote.database.models import (
    Party as ORMParty,
    Invoice as ORMInvoice,
    InvoiceItem as ORMInvoiceItem,
    Transaction as ORMTransaction,
    Activity as ORMActivity,
)

UNKNOWN_PARTY = "Unknown"


def party_to_domain(
    orm_party: ORMParty,
    outstanding: Decimal = Decimal("0.00"),
    last_transaction_date: Optional[date] = None,
) -> domain.Party:
    """Convert SQLAlchemy Party model to domain Party entity."""
    return domain.Party(
        id=orm_party.id,
        name=orm_party.name,
        contact_person=orm_party.contact_person,
        phone=orm_party.phone,
        email=orm_party.email,
        address=orm_party.address,
        tax_id=orm_party.tax_id,
        notes=orm_party.notes,
        created_at=orm_party.created_at,
        updated_at=orm_party.updated_at,
        outstanding=outstanding,
        last_transaction_date=last_transaction_date,
    )


def invoice_item_to_domain(orm_item: ORMInvoiceItem) -> domain.InvoiceItem:
    """Convert SQLAlchemy InvoiceItem model to domain InvoiceItem entity."""
    return domain.InvoiceItem(
        id=orm_item.id,
        invoice_id=orm_item.invoice_id,
        description=orm_item.description,
        quantity=orm_item.quantity,
        rate=orm_item.rate,
    )


def invoice_to_domain(orm_invoice: ORMInvoice, include_items: bool = False) -> domain.Invoice:
    """Convert SQLAlchemy Invoice model to domain Invoice entity."""
    items: tuple[domain.InvoiceItem, ...] = ()
    if include_items:
        items = tuple(invoice_item_to_domain(item) for item in orm_invoice.items)

    return domain.Invoice(
        id=orm_invoice.id,
        invoice_number=orm_invoice.invoice_number,
        invoice_no=orm_invoice.invoice_no,
        seller_id=orm_invoice.seller_id,
        buyer_id=orm_invoice.buyer_id,
        seller_name=orm_invoice.seller.name if orm_invoice.seller else UNKNOWN_PARTY,
        buyer_name=orm_invoice.buyer.name if orm_invoice.buyer else UNKNOWN_PARTY,
        invoice_date=orm_invoice.invoice_date,
        due_days=orm_invoice.due_days,
        due_date=orm_invoice.due_date,
        terms=orm_invoice.terms,
        currency=orm_invoice.currency,
        brokerage_rate=orm_invoice.brokerage_rate,
        exchange_rate=orm_invoice.exchange_rate,
        subtotal=orm_invoice.subtotal,
        brokerage=orm_invoice.brokerage,
        brokerage_in_home_currency=orm_invoice.brokerage_in_home_currency,
        received_brokerage=orm_invoice.received_brokerage,
        balance_brokerage=orm_invoice.balance_brokerage,
        total=orm_invoice.total,
        status=domain.InvoiceStatus(orm_invoice.status),
        payment_date=orm_invoice.payment_date,
        notes=orm_invoice.notes,
        created_at=orm_invoice.created_at,
        updated_at=orm_invoice.updated_at,
        items=items,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        party_id=orm_transaction.party_id,
        invoice_id=orm_transaction.invoice_id,
        invoice_number=orm_transaction.invoice.invoice_number if orm_transaction.invoice else None,
        amount=orm_transaction.amount,
        date=orm_transaction.date,
        type=orm_transaction.type,
        notes=orm_transaction.notes,
        created_at=orm_transaction.created_at,
    )


def activity_to_domain(orm_activity: ORMActivity) -> domain.Activity:
    """Convert SQLAlchemy Activity model to domain Activity entity."""
    return domain.Activity(
        id=orm_activity.id,
        type=domain.ActivityType(orm_activity.type),
        title=orm_activity.title,
        description=orm_activity.description,
        timestamp=orm_activity.timestamp,
        party_id=orm_activity.party_id,
        invoice_id=orm_activity.invoice_id,
        user_id=orm_activity.user_id,
    )
