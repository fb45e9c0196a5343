"""Party management commands."""

import click

from bussnote.cli.error_handling import handle_domain_error
from bussnote.cli.party_resolution import resolve_party_or_exit
from bussnote.domain.invoice import InvoiceService
from bussnote.domain.party import PartyService
from bussnote.domain.transaction import TransactionService
from bussnote.utils.money import format_money


@click.group()
def party_group():
    """Manage buyers and sellers."""
    pass


@party_group.command("create")
@click.argument("name", metavar="PARTY_NAME")
@click.option("--contact", "contact_person", required=True, help="Contact person name")
@click.option("--phone", required=True, help="Phone number (10-15 digits, optional leading +)")
@click.option("--email", help="Email address")
@click.option("--address", help="Postal address")
@click.option("--tax-id", help="Tax identifier")
@click.option("--notes", help="Free-form notes")
@click.pass_context
def create_party(ctx, name: str, contact_person: str, phone: str, email, address, tax_id, notes):
    """Create a new party.

    Examples:
        bussnote party create "Acme Traders" --contact "R. Shah" --phone "+91 98200 12345"
    """
    service = PartyService(ctx.obj["db"])
    try:
        party_id = service.create_party(
            name=name,
            contact_person=contact_person,
            phone=phone,
            email=email,
            address=address,
            tax_id=tax_id,
            notes=notes,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created party '{name.strip()}' (ID: {party_id})")


@party_group.command("list")
@click.pass_context
def list_parties(ctx):
    """List all parties with their outstanding totals."""
    service = PartyService(ctx.obj["db"])

    parties = service.list_parties()
    if not parties:
        click.echo("No parties found.")
        return

    click.echo("\nParties:")
    click.echo("-" * 90)
    for p in parties:
        last = p.last_transaction_date.isoformat() if p.last_transaction_date else "-"
        click.echo(
            f"ID: {p.id:3d} | {p.name:25s} | {p.contact_person:18s} | "
            f"Outstanding: {format_money(p.outstanding):>12s} | Last txn: {last}"
        )


@party_group.command("show")
@click.argument("party", metavar="PARTY")
@click.pass_context
def show_party(ctx, party: str):
    """Show a party with its notes and transactions.

    PARTY can be a party name or ID.
    """
    db = ctx.obj["db"]
    service = PartyService(db)
    party_id = resolve_party_or_exit(ctx, service, party)
    p = service.get_party(party_id)

    click.echo(f"\n{p.name} (ID: {p.id})")
    click.echo(f"  Contact: {p.contact_person}")
    click.echo(f"  Phone: {p.phone}")
    for label, value in (("Email", p.email), ("Address", p.address), ("Tax ID", p.tax_id), ("Notes", p.notes)):
        if value:
            click.echo(f"  {label}: {value}")
    click.echo(f"  Outstanding: {format_money(p.outstanding)}")
    if p.last_transaction_date:
        click.echo(f"  Last transaction: {p.last_transaction_date.isoformat()}")

    invoices = InvoiceService(db).list_party_invoices(party_id)
    click.echo(f"\nNotes ({len(invoices)}):")
    for inv in invoices:
        role = "seller" if inv.seller_id == party_id else "buyer"
        click.echo(
            f"  {inv.invoice_number} | {inv.invoice_date} | {role:6s} | "
            f"{inv.currency} {format_money(inv.total):>12s} | {inv.status.value}"
        )

    transactions = TransactionService(db).list_party_transactions(party_id)
    click.echo(f"\nTransactions ({len(transactions)}):")
    for txn in transactions:
        ref = f" | {txn.invoice_number}" if txn.invoice_number else ""
        click.echo(f"  {txn.date} | {txn.type:8s} | {format_money(txn.amount):>12s}{ref}")


@party_group.command("update")
@click.argument("party", metavar="PARTY")
@click.option("--name", help="New party name")
@click.option("--contact", "contact_person", help="Contact person name")
@click.option("--phone", help="Phone number")
@click.option("--email", help="Email address (empty string to clear)")
@click.option("--address", help="Postal address (empty string to clear)")
@click.option("--tax-id", help="Tax identifier (empty string to clear)")
@click.option("--notes", help="Notes (empty string to clear)")
@click.pass_context
def update_party(ctx, party: str, **options):
    """Update a party.

    Updates only the fields that are provided.

    Examples:
        bussnote party update "Acme Traders" --phone "9820012345"
        bussnote party update 3 --email ""
    """
    service = PartyService(ctx.obj["db"])
    party_id = resolve_party_or_exit(ctx, service, party)

    values = {key: value for key, value in options.items() if value is not None}
    if not values:
        click.echo("Nothing to update.")
        return

    try:
        service.update_party(party_id, **values)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated party {party_id}")


@party_group.command("delete")
@click.argument("party", metavar="PARTY")
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def delete_party(ctx, party: str, yes: bool):
    """Delete a party.

    A party can only be deleted when no note or transaction refers to it.
    """
    service = PartyService(ctx.obj["db"])
    party_id = resolve_party_or_exit(ctx, service, party)
    p = service.get_party(party_id)

    if not yes and not click.confirm(f"Delete party '{p.name}'?"):
        click.echo("Cancelled.")
        return

    try:
        service.delete_party(party_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted party '{p.name}'")


@party_group.command("check-name")
@click.argument("name", metavar="PARTY_NAME")
@click.pass_context
def check_name(ctx, name: str):
    """Check whether a party name is still available."""
    service = PartyService(ctx.obj["db"])
    if service.is_name_available(name):
        click.echo(f"'{name}' is available")
    else:
        click.echo(f"'{name}' is already taken")
        ctx.exit(1)


def register_commands(cli):
    """Register party commands with CLI."""
    cli.add_command(party_group, name="party")
