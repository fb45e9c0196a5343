"""Reporting domain service.

Aggregations run in Python over Decimal amounts read from the store, so
totals never pass through floating point.
"""

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Callable, Iterable, Optional

from dateutil.relativedelta import relativedelta

from bussnote.database.base import Database
from bussnote.domain.entities import (
    BrokerageAnalytics,
    BrokerageSummary,
    BrokerageTrendPoint,
    DashboardStats,
    Invoice,
    InvoiceStatus,
    OutstandingInvoice,
    SalesGroupBy,
    SalesPeriod,
    SalesReport,
)
from bussnote.domain.lifecycle import (
    CLOSED_REPORT_STATUSES,
    OUTSTANDING_STATUSES,
    days_overdue,
    display_status,
    parse_status,
)
from bussnote.utils.date_parser import end_of_month, get_date_range, start_of_month, start_of_week
from bussnote.utils.money import ZERO, standard_round

HUNDRED = Decimal("100")


def _sum(values: Iterable[Decimal]) -> Decimal:
    return standard_round(sum(values, ZERO))


def _period_key(group_by: SalesGroupBy, value: date) -> tuple[str, str]:
    """Return (sort key, label) of the period containing `value`."""
    if group_by == SalesGroupBy.DAILY:
        return value.isoformat(), value.strftime("%b %d, %Y")
    if group_by == SalesGroupBy.WEEKLY:
        start = start_of_week(value)
        end = start + timedelta(days=6)
        return start.isoformat(), f"{start:%b %d} - {end:%b %d, %Y}"
    if group_by == SalesGroupBy.MONTHLY:
        return value.strftime("%Y-%m"), value.strftime("%B %Y")
    quarter = (value.month - 1) // 3 + 1
    return f"{value.year}-Q{quarter}", f"Q{quarter} {value.year}"


def _sales_base(invoice: Invoice) -> Decimal:
    """Sales figure used for brokerage percentages: total, else subtotal."""
    return invoice.total if invoice.total > 0 else invoice.subtotal


def _brokerage_summary(currency: Optional[str], invoices: list[Invoice]) -> BrokerageSummary:
    in_home = _sum(inv.brokerage_in_home_currency for inv in invoices)
    received = _sum(inv.received_brokerage for inv in invoices)
    base = _sum(_sales_base(inv) for inv in invoices)
    return BrokerageSummary(
        currency=currency,
        invoice_count=len(invoices),
        total_sales=_sum(inv.subtotal for inv in invoices),
        brokerage_in_home_currency=in_home,
        received_brokerage=received,
        pending_brokerage=standard_round(in_home - received),
        brokerage_percentage=standard_round(in_home / base * HUNDRED) if base else None,
    )


def _group(invoices: Iterable[Invoice], key: Callable[[Invoice], str]) -> dict[str, list[Invoice]]:
    groups: dict[str, list[Invoice]] = {}
    for invoice in invoices:
        groups.setdefault(key(invoice), []).append(invoice)
    return groups


class ReportService:
    """Service for outstanding, closed, sales and brokerage reports."""

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db

    def outstanding_invoices(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        today: Optional[date] = None,
    ) -> list[OutstandingInvoice]:
        """Pending notes ordered by due date, with overdue information.

        Args:
            start_date: Optional earliest note date
            end_date: Optional latest note date
            today: Reference date for overdue checks (defaults to today)

        Returns:
            List of OutstandingInvoice, oldest due date first
        """
        today = today or date.today()
        invoices = self.db.list_invoices(
            statuses=OUTSTANDING_STATUSES, start_date=start_date, end_date=end_date
        )
        invoices.sort(key=lambda inv: (inv.due_date, inv.id))
        return [
            OutstandingInvoice(
                invoice=inv,
                days_overdue=days_overdue(inv.status, inv.due_date, today),
                display_status=display_status(inv.status, inv.due_date, today),
            )
            for inv in invoices
        ]

    def outstanding_total(self, today: Optional[date] = None) -> Decimal:
        """Sum of totals over all pending notes."""
        return _sum(entry.invoice.total for entry in self.outstanding_invoices(today=today))

    def closed_invoices(
        self,
        status: "Optional[str | InvoiceStatus]" = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Invoice]:
        """Paid, cancelled and closed notes, newest payment first.

        Args:
            status: Optional single status (paid, cancelled or closed)
            start_date: Optional earliest payment date
            end_date: Optional latest payment date (inclusive)

        Raises:
            ValueError: If status is not a closed-report status
        """
        statuses = CLOSED_REPORT_STATUSES
        if status is not None:
            requested = parse_status(status)
            if requested not in CLOSED_REPORT_STATUSES:
                raise ValueError(f"Status '{requested.value}' is not part of the closed report")
            statuses = frozenset({requested})

        start = datetime.combine(start_date, time.min) if start_date else None
        end = datetime.combine(end_date + timedelta(days=1), time.min) if end_date else None
        return self.db.list_invoices_paid_between(statuses, start=start, end=end)

    def sales_report(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        group_by: "str | SalesGroupBy" = SalesGroupBy.MONTHLY,
        today: Optional[date] = None,
    ) -> SalesReport:
        """Non-cancelled notes grouped by period.

        Args:
            start_date: First note date (defaults to the start of this month)
            end_date: Last note date (defaults to the end of this month)
            group_by: daily, weekly, monthly or quarterly
            today: Reference date for the defaults

        Returns:
            SalesReport with periods sorted chronologically
        """
        group_by = SalesGroupBy(group_by)
        today = today or date.today()
        start_date = start_date or start_of_month(today)
        end_date = end_date or end_of_month(today)
        if start_date > end_date:
            raise ValueError("Start date must be on or before end date")

        statuses = [s for s in InvoiceStatus if s != InvoiceStatus.CANCELLED]
        invoices = self.db.list_invoices(statuses=statuses, start_date=start_date, end_date=end_date)

        buckets = _group(invoices, lambda inv: _period_key(group_by, inv.invoice_date)[0])

        periods = tuple(
            SalesPeriod(
                key=key,
                label=_period_key(group_by, buckets[key][0].invoice_date)[1],
                invoice_count=len(buckets[key]),
                gross_sales=_sum(inv.subtotal for inv in buckets[key]),
                brokerage=_sum(inv.brokerage for inv in buckets[key]),
                net_sales=_sum(inv.total for inv in buckets[key]),
            )
            for key in sorted(buckets)
        )
        return SalesReport(
            group_by=group_by,
            start_date=start_date,
            end_date=end_date,
            periods=periods,
            invoice_count=sum(p.invoice_count for p in periods),
            gross_sales=_sum(p.gross_sales for p in periods),
            brokerage=_sum(p.brokerage for p in periods),
            net_sales=_sum(p.net_sales for p in periods),
        )

    def dashboard_stats(self, date_range: str = "month", today: Optional[date] = None) -> DashboardStats:
        """Headline numbers for notes dated within a dashboard range.

        Args:
            date_range: today, yesterday, week, month or year
            today: Reference date (defaults to today)
        """
        start_date, end_date = get_date_range(date_range, today)
        invoices = self.db.list_invoices(start_date=start_date, end_date=end_date)

        return DashboardStats(
            date_range=date_range.strip().lower(),
            start_date=start_date,
            end_date=end_date,
            total_sales=_sum(inv.total for inv in invoices if inv.status == InvoiceStatus.PAID),
            total_invoices=len(invoices),
            pending_invoices=sum(1 for inv in invoices if inv.status == InvoiceStatus.PENDING),
            active_parties=len({inv.seller_id for inv in invoices}),
        )

    def brokerage_analytics(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        today: Optional[date] = None,
    ) -> BrokerageAnalytics:
        """Brokerage totals per currency and by month.

        Args:
            start_date: First note date (defaults to one year before today)
            end_date: Last note date (defaults to today)
            today: Reference date for the defaults

        Returns:
            BrokerageAnalytics; currencies are ordered by sales, largest first
        """
        today = today or date.today()
        end_date = end_date or today
        start_date = start_date or (today - relativedelta(years=1))
        invoices = self.db.list_invoices(start_date=start_date, end_date=end_date)

        by_currency = [
            _brokerage_summary(currency, group)
            for currency, group in _group(invoices, lambda inv: inv.currency).items()
        ]
        by_currency.sort(key=lambda s: s.total_sales, reverse=True)

        trend = tuple(
            BrokerageTrendPoint(
                month=month,
                brokerage_in_home_currency=_sum(inv.brokerage_in_home_currency for inv in group),
                received_brokerage=_sum(inv.received_brokerage for inv in group),
                sales=_sum(_sales_base(inv) for inv in group),
            )
            for month, group in sorted(
                _group(invoices, lambda inv: inv.invoice_date.strftime("%Y-%m")).items()
            )
        )

        return BrokerageAnalytics(
            start_date=start_date,
            end_date=end_date,
            by_currency=tuple(by_currency),
            totals=_brokerage_summary(None, invoices),
            monthly_trend=trend,
        )
