"""Note (invoice) commands."""

import json

import click

from bussnote.cli.date_filters import parse_date_or_exit, resolve_cli_date_range
from bussnote.cli.error_handling import handle_domain_error
from bussnote.cli.party_resolution import resolve_party_or_exit
from bussnote.config import CURRENCIES, TERMS_OPTIONS
from bussnote.domain.draft import InvoiceDraft, ItemDraft, build_draft, update_draft
from bussnote.domain.entities import InvoiceStatus
from bussnote.domain.invoice import InvoiceService
from bussnote.domain.lifecycle import display_status
from bussnote.domain.party import PartyService
from bussnote.domain.serializers import invoice_to_wire
from bussnote.utils.date_parser import DASHBOARD_RANGES
from bussnote.utils.money import format_money


def parse_item(value: str) -> ItemDraft:
    """Parse "description:quantity:rate"; the description may contain colons.

    Raises:
        ValueError: If the value does not have three parts or a number is invalid
    """
    parts = value.rsplit(":", 2)
    if len(parts) != 3:
        raise ValueError(f"Item '{value}' must look like DESCRIPTION:QUANTITY:RATE")
    description, quantity, rate = parts
    return ItemDraft.parse(description, quantity, rate)


def note_options(func):
    """Options shared by note create and update."""
    options = [
        click.option("--seller", help="Seller party name or ID"),
        click.option("--buyer", help="Buyer party name or ID"),
        click.option("--invoice-no", help="Reference number printed on the note"),
        click.option("--date", "invoice_date", help="Note date (YYYY-MM-DD or relative like 'today')"),
        click.option("--due-days", type=int, help="Days until due (recomputes the due date)"),
        click.option("--due-date", help="Explicit due date (overrides the computed one)"),
        click.option("--terms", type=click.Choice(TERMS_OPTIONS), help="Payment terms"),
        click.option("--currency", type=click.Choice(CURRENCIES, case_sensitive=False), help="Currency"),
        click.option("--brokerage-rate", help="Brokerage percentage (e.g. 0.75)"),
        click.option("--exchange-rate", help="Rate to INR (ignored for INR)"),
        click.option("--received-brokerage", help="Brokerage already received, in INR"),
        click.option("--remarks", help="Free-form remarks"),
        click.option("--closed/--open", "is_closed", default=None, help="Mark as settled"),
        click.option(
            "--item",
            "items",
            multiple=True,
            help='Line item "DESCRIPTION:QUANTITY:RATE" (repeatable; replaces all items on update)',
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _collect_changes(ctx, db, seller, buyer, invoice_date, due_days, due_date, **fields) -> dict:
    """Map CLI options to draft changes, in the order dates must be applied."""
    party_service = PartyService(db)
    changes = {}
    if seller is not None:
        changes["seller_id"] = resolve_party_or_exit(ctx, party_service, seller)
    if buyer is not None:
        changes["buyer_id"] = resolve_party_or_exit(ctx, party_service, buyer)
    if invoice_date is not None:
        changes["invoice_date"] = parse_date_or_exit(ctx, invoice_date, "note date")
    if due_days is not None:
        changes["due_days"] = due_days
    # Set after the date fields so an explicit due date is kept
    if due_date is not None:
        changes["due_date"] = parse_date_or_exit(ctx, due_date, "due date")
    for key, value in fields.items():
        if value is not None:
            changes[key] = value
    return changes


def _echo_warnings(warnings) -> None:
    for warning in warnings:
        click.echo(f"Warning: {warning}", err=True)


def _parse_items_or_exit(ctx, items: tuple[str, ...]) -> tuple[ItemDraft, ...]:
    try:
        return tuple(parse_item(value) for value in items)
    except ValueError as e:
        handle_domain_error(ctx, e)


@click.group()
def invoice_group():
    """Manage notes."""
    pass


@invoice_group.command("create")
@note_options
@click.pass_context
def create_invoice(ctx, seller, buyer, invoice_date, due_days, due_date, items, **fields):
    """Create a note.

    The due date defaults to the note date plus the due days (15 unless
    given). Brokerage and balance figures are computed from the items.

    Examples:
        bussnote invoice create --seller "Acme" --buyer "Globex" --item "Cotton bales:10:2500"
        bussnote invoice create --seller 1 --buyer 2 --currency USD --exchange-rate 83.10 \\
            --brokerage-rate 1 --item "Yarn:5:120.50" --item "Freight:1:40"
    """
    db = ctx.obj["db"]
    service = InvoiceService(db)

    if not items:
        click.echo("Error: At least one --item is required", err=True)
        ctx.exit(1)
    parsed_items = _parse_items_or_exit(ctx, items)
    changes = _collect_changes(ctx, db, seller, buyer, invoice_date, due_days, due_date, **fields)

    try:
        result = build_draft(items=parsed_items, **changes)
        _echo_warnings(result.warnings)
        invoice_id = service.create_invoice(result.draft)
    except ValueError as e:
        handle_domain_error(ctx, e)

    invoice = service.get_invoice(invoice_id)
    click.echo(f"Created note {invoice.invoice_number} (ID: {invoice_id})")
    click.echo(
        f"Subtotal: {format_money(invoice.subtotal)} {invoice.currency} | "
        f"Brokerage (INR): {format_money(invoice.brokerage_in_home_currency)} | "
        f"Balance: {format_money(invoice.balance_brokerage)}"
    )


@invoice_group.command("update")
@click.argument("invoice_id", type=int)
@note_options
@click.pass_context
def update_invoice(ctx, invoice_id: int, seller, buyer, invoice_date, due_days, due_date, items, **fields):
    """Update a note.

    Updates only the fields that are provided; --item replaces every line
    item. Derived money fields are recomputed.

    Examples:
        bussnote invoice update 4 --received-brokerage 150
        bussnote invoice update 4 --due-days 30
    """
    db = ctx.obj["db"]
    service = InvoiceService(db)

    invoice = service.get_invoice(invoice_id)
    if invoice is None:
        click.echo(f"Error: Note {invoice_id} not found", err=True)
        ctx.exit(1)

    changes = _collect_changes(ctx, db, seller, buyer, invoice_date, due_days, due_date, **fields)
    if items:
        changes["items"] = _parse_items_or_exit(ctx, items)
    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        result = update_draft(InvoiceDraft.from_invoice(invoice), **changes)
        _echo_warnings(result.warnings)
        service.update_invoice(invoice_id, result.draft)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated note {invoice.invoice_number}")


@invoice_group.command("list")
@click.option("--status", type=click.Choice([s.value for s in InvoiceStatus]), help="Only this status")
@click.option("--party", help="Party name or ID (seller or buyer)")
@click.option("--start-date", help="Earliest note date")
@click.option("--end-date", help="Latest note date")
@click.option("--period", type=click.Choice(DASHBOARD_RANGES), help="Preset date range")
@click.pass_context
def list_invoices(ctx, status, party, start_date, end_date, period):
    """List notes, newest first. Pending notes past due show as overdue."""
    db = ctx.obj["db"]
    service = InvoiceService(db)

    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date, period=period)
    party_id = resolve_party_or_exit(ctx, PartyService(db), party) if party else None

    invoices = service.list_invoices(status=status, party_id=party_id, start_date=start, end_date=end)
    if not invoices:
        click.echo("No notes found.")
        return

    _echo_invoice_table(invoices)


@invoice_group.command("recent")
@click.option("--limit", type=int, default=5, show_default=True, help="Number of notes")
@click.pass_context
def recent_invoices(ctx, limit: int):
    """Show the most recently created notes."""
    service = InvoiceService(ctx.obj["db"])
    try:
        invoices = service.recent_invoices(limit)
    except ValueError as e:
        handle_domain_error(ctx, e)
    if not invoices:
        click.echo("No notes found.")
        return
    _echo_invoice_table(invoices)


def _echo_invoice_table(invoices) -> None:
    click.echo(f"\nFound {len(invoices)} note(s):")
    click.echo("-" * 110)
    for inv in invoices:
        shown = display_status(inv.status, inv.due_date).value
        click.echo(
            f"ID: {inv.id:3d} | {inv.invoice_number} | {inv.invoice_date} | "
            f"{inv.seller_name[:18]:18s} -> {inv.buyer_name[:18]:18s} | "
            f"{inv.currency} {format_money(inv.total):>12s} | {shown}"
        )


@invoice_group.command("show")
@click.argument("invoice_id", type=int)
@click.option("--json", "as_json", is_flag=True, help="Print the note as JSON")
@click.pass_context
def show_invoice(ctx, invoice_id: int, as_json: bool):
    """Show a note with its items and money figures."""
    service = InvoiceService(ctx.obj["db"])

    invoice = service.get_invoice(invoice_id)
    if invoice is None:
        click.echo(f"Error: Note {invoice_id} not found", err=True)
        ctx.exit(1)

    if as_json:
        click.echo(json.dumps(invoice_to_wire(invoice), indent=2))
        return

    click.echo(f"\nNote {invoice.invoice_number} (ID: {invoice.id})")
    if invoice.invoice_no:
        click.echo(f"  Reference: {invoice.invoice_no}")
    click.echo(f"  Seller: {invoice.seller_name}")
    click.echo(f"  Buyer: {invoice.buyer_name}")
    click.echo(f"  Date: {invoice.invoice_date} | Due: {invoice.due_date} ({invoice.due_days} {invoice.terms})")
    click.echo(f"  Status: {display_status(invoice.status, invoice.due_date).value}")
    if invoice.payment_date:
        click.echo(f"  Paid/closed on: {invoice.payment_date:%Y-%m-%d %H:%M}")

    click.echo("\n  Items:")
    for item in invoice.items:
        click.echo(
            f"    {item.description[:40]:40s} {format_money(item.quantity):>10s} x "
            f"{format_money(item.rate):>10s} = {format_money(item.amount):>12s}"
        )

    click.echo(f"\n  Subtotal: {invoice.currency} {format_money(invoice.subtotal)}")
    click.echo(f"  Brokerage ({format_money(invoice.brokerage_rate)}%): {format_money(invoice.brokerage)}")
    if invoice.currency != "INR":
        click.echo(f"  Exchange rate: {format_money(invoice.exchange_rate)}")
    click.echo(f"  Brokerage (INR): {format_money(invoice.brokerage_in_home_currency)}")
    click.echo(f"  Received: {format_money(invoice.received_brokerage)}")
    click.echo(f"  Balance: {format_money(invoice.balance_brokerage)}")
    click.echo(f"  Total: {invoice.currency} {format_money(invoice.total)}")
    if invoice.notes:
        click.echo(f"\n  Remarks: {invoice.notes}")


@invoice_group.command("status")
@click.argument("invoice_id", type=int)
@click.argument("status", type=click.Choice([s.value for s in InvoiceStatus], case_sensitive=False))
@click.pass_context
def update_status(ctx, invoice_id: int, status: str):
    """Change a note's status.

    Marking a note paid records a payment for its total.

    Examples:
        bussnote invoice status 4 paid
        bussnote invoice status 4 cancelled
    """
    service = InvoiceService(ctx.obj["db"])
    try:
        invoice = service.update_status(invoice_id, status)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Note {invoice.invoice_number} is now {invoice.status.value}")


@invoice_group.command("notes")
@click.argument("invoice_id", type=int)
@click.argument("text", required=False)
@click.option("--clear", is_flag=True, help="Remove the remarks")
@click.pass_context
def update_notes(ctx, invoice_id: int, text: str | None, clear: bool):
    """Set or clear a note's remarks."""
    if text is None and not clear:
        click.echo("Error: Provide TEXT or --clear", err=True)
        ctx.exit(1)

    service = InvoiceService(ctx.obj["db"])
    try:
        invoice = service.update_notes(invoice_id, None if clear else text)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated remarks for note {invoice.invoice_number}")


@invoice_group.command("close")
@click.argument("invoice_id", type=int)
@click.pass_context
def close_invoice(ctx, invoice_id: int):
    """Mark a note as closed (settled outside the ledger)."""
    service = InvoiceService(ctx.obj["db"])
    try:
        invoice = service.set_closed(invoice_id, True)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Closed note {invoice.invoice_number}")


@invoice_group.command("reopen")
@click.argument("invoice_id", type=int)
@click.pass_context
def reopen_invoice(ctx, invoice_id: int):
    """Reopen a closed note as pending."""
    service = InvoiceService(ctx.obj["db"])
    try:
        invoice = service.set_closed(invoice_id, False)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Note {invoice.invoice_number} is {invoice.status.value}")


@invoice_group.command("delete")
@click.argument("invoice_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def delete_invoice(ctx, invoice_id: int, yes: bool):
    """Delete a note with its items, payments and activities."""
    service = InvoiceService(ctx.obj["db"])

    invoice = service.get_invoice(invoice_id)
    if invoice is None:
        click.echo(f"Error: Note {invoice_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Delete note {invoice.invoice_number} and everything attached to it?"):
        click.echo("Cancelled.")
        return

    if not service.delete_invoice(invoice_id):
        click.echo(f"Error: Note {invoice_id} not found", err=True)
        ctx.exit(1)
    click.echo(f"Deleted note {invoice.invoice_number}")


def register_commands(cli):
    """Register note commands with CLI."""
    cli.add_command(invoice_group, name="invoice")
