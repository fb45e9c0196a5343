"""Domain model entities for bussnote.

These are pure data classes representing business concepts, independent of
the database schema. Monetary fields are Decimal values already rounded to
two places; dates are plain `date` objects.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class InvoiceStatus(str, Enum):
    """Stored lifecycle status of a note."""

    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"
    CLOSED = "closed"


class DisplayStatus(str, Enum):
    """Status shown to users; OVERDUE is derived, never stored."""

    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"
    CLOSED = "closed"
    OVERDUE = "overdue"


class ActivityType(str, Enum):
    """Kinds of audit trail entries."""

    INVOICE_CREATED = "invoice_created"
    PAYMENT_RECEIVED = "payment_received"
    PARTY_ADDED = "party_added"
    PAYMENT_REMINDER = "payment_reminder"
    OTHER = "other"


class SalesGroupBy(str, Enum):
    """Period granularity for the sales report."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


@dataclass(frozen=True)
class Party:
    """Buyer or seller.

    `outstanding` and `last_transaction_date` are computed on read.
    """

    id: int
    name: str
    contact_person: str
    phone: str
    email: Optional[str]
    address: Optional[str]
    tax_id: Optional[str]
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime
    outstanding: Decimal = Decimal("0.00")
    last_transaction_date: Optional[date] = None


@dataclass(frozen=True)
class InvoiceItem:
    """Line item owned by a note."""

    id: int
    invoice_id: int
    description: str
    quantity: Decimal
    rate: Decimal

    @property
    def amount(self) -> Decimal:
        return self.quantity * self.rate


@dataclass(frozen=True)
class Invoice:
    """Note between a seller and a buyer, with brokerage terms."""

    id: int
    invoice_number: str
    invoice_no: Optional[str]
    seller_id: int
    buyer_id: int
    seller_name: str
    buyer_name: str
    invoice_date: date
    due_days: int
    due_date: date
    terms: str
    currency: str
    brokerage_rate: Decimal
    exchange_rate: Decimal
    subtotal: Decimal
    brokerage: Decimal
    brokerage_in_home_currency: Decimal
    received_brokerage: Decimal
    balance_brokerage: Decimal
    total: Decimal
    status: InvoiceStatus
    payment_date: Optional[datetime]
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime
    items: tuple[InvoiceItem, ...] = field(default=())

    @property
    def is_closed(self) -> bool:
        """Closed flag, derived from the single authoritative status."""
        return self.status == InvoiceStatus.CLOSED


@dataclass(frozen=True)
class Transaction:
    """Payment or other ledger event for a party."""

    id: int
    party_id: int
    invoice_id: Optional[int]
    invoice_number: Optional[str]
    amount: Decimal
    date: date
    type: str
    notes: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Activity:
    """Append-only audit trail entry."""

    id: int
    type: ActivityType
    title: str
    description: str
    timestamp: datetime
    party_id: Optional[int] = None
    invoice_id: Optional[int] = None
    user_id: Optional[int] = None


@dataclass(frozen=True)
class OutstandingInvoice:
    """Pending note as shown in the outstanding report."""

    invoice: Invoice
    days_overdue: int
    display_status: DisplayStatus


@dataclass(frozen=True)
class SalesPeriod:
    """Aggregated sales for one reporting period."""

    key: str
    label: str
    invoice_count: int
    gross_sales: Decimal
    brokerage: Decimal
    net_sales: Decimal


@dataclass(frozen=True)
class SalesReport:
    """Sales grouped by period, with overall totals."""

    group_by: SalesGroupBy
    start_date: date
    end_date: date
    periods: tuple[SalesPeriod, ...]
    invoice_count: int
    gross_sales: Decimal
    brokerage: Decimal
    net_sales: Decimal


@dataclass(frozen=True)
class DashboardStats:
    """Headline numbers for a dashboard range."""

    date_range: str
    start_date: date
    end_date: date
    total_sales: Decimal
    total_invoices: int
    pending_invoices: int
    active_parties: int


@dataclass(frozen=True)
class BrokerageSummary:
    """Brokerage totals for one currency (or all currencies when currency is None)."""

    currency: Optional[str]
    invoice_count: int
    total_sales: Decimal
    brokerage_in_home_currency: Decimal
    received_brokerage: Decimal
    pending_brokerage: Decimal
    brokerage_percentage: Optional[Decimal]


@dataclass(frozen=True)
class BrokerageTrendPoint:
    """Monthly brokerage versus sales."""

    month: str
    brokerage_in_home_currency: Decimal
    received_brokerage: Decimal
    sales: Decimal


@dataclass(frozen=True)
class BrokerageAnalytics:
    """Brokerage analytics for a date range."""

    start_date: date
    end_date: date
    by_currency: tuple[BrokerageSummary, ...]
    totals: BrokerageSummary
    monthly_trend: tuple[BrokerageTrendPoint, ...]
