"""SQLAlchemy models for bussnote database."""

from datetime import datetime, UTC
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Text,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session
from sqlalchemy.types import TypeDecorator

from bussnote.utils.money import format_money

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class MoneyString(TypeDecorator):
    """Decimal stored as a string with exactly two fractional digits."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value: Optional[Decimal], dialect) -> Optional[str]:
        if value is None:
            return None
        return format_money(value)

    def process_result_value(self, value: Optional[str], dialect) -> Optional[Decimal]:
        if value is None:
            return None
        return Decimal(value)


class Party(Base):
    """Buyer/seller model."""

    __tablename__ = "parties"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    contact_person = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    email = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    tax_id = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)


class Invoice(Base):
    """Note model; money columns hold two-decimal strings."""

    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True)
    invoice_number = Column(String, unique=True, nullable=False)
    invoice_no = Column(String, nullable=True)
    seller_id = Column(Integer, ForeignKey("parties.id"), nullable=False)
    buyer_id = Column(Integer, ForeignKey("parties.id"), nullable=False)
    invoice_date = Column(Date, nullable=False)
    due_days = Column(Integer, default=0, nullable=False)
    due_date = Column(Date, nullable=False)
    terms = Column(String, default="Days", nullable=False)
    currency = Column(String, default="INR", nullable=False)
    brokerage_rate = Column(MoneyString, default=Decimal("0.00"), nullable=False)
    exchange_rate = Column(MoneyString, default=Decimal("1.00"), nullable=False)
    subtotal = Column(MoneyString, nullable=False)
    brokerage = Column(MoneyString, nullable=False)
    brokerage_in_home_currency = Column(MoneyString, default=Decimal("0.00"), nullable=False)
    received_brokerage = Column(MoneyString, default=Decimal("0.00"), nullable=False)
    balance_brokerage = Column(MoneyString, default=Decimal("0.00"), nullable=False)
    total = Column(MoneyString, nullable=False)
    status = Column(String, default="pending", nullable=False)
    payment_date = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    # Relationships
    seller = relationship("Party", foreign_keys=[seller_id])
    buyer = relationship("Party", foreign_keys=[buyer_id])
    items = relationship("InvoiceItem", back_populates="invoice", order_by="InvoiceItem.id")


class InvoiceItem(Base):
    """Line item model."""

    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False)
    description = Column(String, nullable=False)
    quantity = Column(MoneyString, nullable=False)
    rate = Column(MoneyString, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    invoice = relationship("Invoice", back_populates="items")


class Transaction(Base):
    """Payment / ledger event model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    party_id = Column(Integer, ForeignKey("parties.id"), nullable=False)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=True)
    amount = Column(MoneyString, nullable=False)
    date = Column(Date, nullable=False)
    type = Column(String, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    invoice = relationship("Invoice")


class Activity(Base):
    """Audit trail model; rows are only ever inserted."""

    __tablename__ = "activities"

    id = Column(Integer, primary_key=True)
    type = Column(String, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    timestamp = Column(DateTime, default=_utcnow, nullable=False)
    # Audit references to parties outlive the party row
    party_id = Column(Integer, nullable=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=True)
    user_id = Column(Integer, nullable=True)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
