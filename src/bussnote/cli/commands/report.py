"""Report commands."""

import click

from bussnote.cli.date_filters import resolve_cli_date_range
from bussnote.cli.error_handling import handle_domain_error
from bussnote.domain.entities import SalesGroupBy
from bussnote.domain.lifecycle import CLOSED_REPORT_STATUSES
from bussnote.domain.reports import ReportService
from bussnote.utils.date_parser import DASHBOARD_RANGES
from bussnote.utils.money import format_money


def _percent(value) -> str:
    return "-" if value is None else f"{format_money(value)}%"


@click.group()
def report_group():
    """Outstanding, closed, sales and brokerage reports."""
    pass


@report_group.command("outstanding")
@click.option("--start-date", help="Earliest note date")
@click.option("--end-date", help="Latest note date")
@click.pass_context
def outstanding_report(ctx, start_date, end_date):
    """Pending notes by due date, with days overdue."""
    service = ReportService(ctx.obj["db"])
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date)

    entries = service.outstanding_invoices(start_date=start, end_date=end)
    if not entries:
        click.echo("No outstanding notes.")
        return

    click.echo(f"\nOutstanding notes ({len(entries)}):")
    click.echo("-" * 100)
    for entry in entries:
        inv = entry.invoice
        overdue = f"{entry.days_overdue} day(s) overdue" if entry.days_overdue else entry.display_status.value
        click.echo(
            f"{inv.invoice_number} | due {inv.due_date} | {inv.seller_name[:18]:18s} -> "
            f"{inv.buyer_name[:18]:18s} | {inv.currency} {format_money(inv.total):>12s} | {overdue}"
        )
    total = sum((entry.invoice.total for entry in entries), start=0)
    click.echo("-" * 100)
    click.echo(f"Total outstanding: {format_money(total)}")


@report_group.command("closed")
@click.option(
    "--status",
    type=click.Choice(sorted(s.value for s in CLOSED_REPORT_STATUSES)),
    help="Only this status",
)
@click.option("--start-date", help="Earliest payment date")
@click.option("--end-date", help="Latest payment date")
@click.pass_context
def closed_report(ctx, status, start_date, end_date):
    """Paid, cancelled and closed notes, newest payment first."""
    service = ReportService(ctx.obj["db"])
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date)

    try:
        invoices = service.closed_invoices(status=status, start_date=start, end_date=end)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not invoices:
        click.echo("No closed notes.")
        return

    click.echo(f"\nClosed notes ({len(invoices)}):")
    click.echo("-" * 100)
    for inv in invoices:
        paid = f"{inv.payment_date:%Y-%m-%d}" if inv.payment_date else "-"
        click.echo(
            f"{inv.invoice_number} | {inv.status.value:9s} | paid {paid} | {inv.seller_name[:18]:18s} -> "
            f"{inv.buyer_name[:18]:18s} | {inv.currency} {format_money(inv.total):>12s}"
        )


@report_group.command("sales")
@click.option(
    "--group-by",
    type=click.Choice([g.value for g in SalesGroupBy]),
    default=SalesGroupBy.MONTHLY.value,
    show_default=True,
    help="Period size",
)
@click.option("--start-date", help="First note date (default: start of this month)")
@click.option("--end-date", help="Last note date (default: end of this month)")
@click.pass_context
def sales_report(ctx, group_by, start_date, end_date):
    """Sales per period, cancelled notes excluded."""
    service = ReportService(ctx.obj["db"])
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date)

    try:
        report = service.sales_report(start_date=start, end_date=end, group_by=group_by)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nSales {report.start_date} to {report.end_date} ({report.group_by.value}):")
    click.echo("-" * 90)
    if not report.periods:
        click.echo("No sales in this range.")
        return
    for period in report.periods:
        click.echo(
            f"{period.label:28s} | {period.invoice_count:4d} note(s) | gross {format_money(period.gross_sales):>12s} | "
            f"brokerage {format_money(period.brokerage):>10s} | net {format_money(period.net_sales):>12s}"
        )
    click.echo("-" * 90)
    click.echo(
        f"{'Total':28s} | {report.invoice_count:4d} note(s) | gross {format_money(report.gross_sales):>12s} | "
        f"brokerage {format_money(report.brokerage):>10s} | net {format_money(report.net_sales):>12s}"
    )


@report_group.command("dashboard")
@click.option(
    "--range",
    "date_range",
    type=click.Choice(DASHBOARD_RANGES),
    default="month",
    show_default=True,
    help="Date range",
)
@click.pass_context
def dashboard(ctx, date_range: str):
    """Headline numbers for a date range."""
    service = ReportService(ctx.obj["db"])
    stats = service.dashboard_stats(date_range)

    click.echo(f"\nDashboard ({stats.date_range}: {stats.start_date} to {stats.end_date})")
    click.echo(f"  Paid sales: {format_money(stats.total_sales)}")
    click.echo(f"  Notes: {stats.total_invoices}")
    click.echo(f"  Pending notes: {stats.pending_invoices}")
    click.echo(f"  Active parties: {stats.active_parties}")


@report_group.command("brokerage")
@click.option("--start-date", help="First note date (default: one year ago)")
@click.option("--end-date", help="Last note date (default: today)")
@click.pass_context
def brokerage_report(ctx, start_date, end_date):
    """Brokerage earned, received and pending, per currency and month."""
    service = ReportService(ctx.obj["db"])
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date)
    analytics = service.brokerage_analytics(start_date=start, end_date=end)

    click.echo(f"\nBrokerage {analytics.start_date} to {analytics.end_date}")
    click.echo("-" * 100)
    for summary in analytics.by_currency + (analytics.totals,):
        label = summary.currency or "All"
        click.echo(
            f"{label:4s} | {summary.invoice_count:4d} note(s) | sales {format_money(summary.total_sales):>12s} | "
            f"brokerage (INR) {format_money(summary.brokerage_in_home_currency):>10s} | "
            f"received {format_money(summary.received_brokerage):>10s} | "
            f"pending {format_money(summary.pending_brokerage):>10s} | {_percent(summary.brokerage_percentage)}"
        )

    if analytics.monthly_trend:
        click.echo("\nMonthly trend:")
        for point in analytics.monthly_trend:
            click.echo(
                f"  {point.month} | brokerage {format_money(point.brokerage_in_home_currency):>10s} | "
                f"received {format_money(point.received_brokerage):>10s} | sales {format_money(point.sales):>12s}"
            )


def register_commands(cli):
    """Register report commands with CLI."""
    cli.add_command(report_group, name="report")
