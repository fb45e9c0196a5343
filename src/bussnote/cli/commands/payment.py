"""Payment (ledger transaction) commands."""

import click

from bussnote.cli.date_filters import parse_date_or_exit
from bussnote.cli.error_handling import handle_domain_error
from bussnote.cli.party_resolution import resolve_party_or_exit
from bussnote.domain.party import PartyService
from bussnote.domain.transaction import PAYMENT_TYPE, TransactionService
from bussnote.utils.money import format_money, parse_money


@click.group()
def payment_group():
    """Record and list payments."""
    pass


@payment_group.command("add")
@click.argument("party", metavar="PARTY")
@click.argument("amount")
@click.option("--date", "txn_date", default="today", show_default=True, help="Payment date")
@click.option("--type", "txn_type", default=PAYMENT_TYPE, show_default=True, help="Transaction type")
@click.option("--invoice", "invoice_id", type=int, help="Note ID the payment settles")
@click.option("--notes", help="Notes")
@click.pass_context
def add_payment(ctx, party: str, amount: str, txn_date: str, txn_type: str, invoice_id, notes):
    """Record a payment or other transaction for a party.

    A payment against a note marks that note paid.

    Examples:
        bussnote payment add "Acme Traders" 2500 --invoice 4
        bussnote payment add 1 "₹1,200.50" --date 2025-01-20 --notes "Cheque 0042"
    """
    db = ctx.obj["db"]
    service = TransactionService(db)
    party_id = resolve_party_or_exit(ctx, PartyService(db), party)
    payment_date = parse_date_or_exit(ctx, txn_date, "date")

    try:
        txn_amount = parse_money(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        transaction_id = service.record_transaction(
            party_id=party_id,
            amount=txn_amount,
            date=payment_date,
            type=txn_type,
            notes=notes,
            invoice_id=invoice_id,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded {txn_type} of {format_money(txn_amount)} (ID: {transaction_id})")


@payment_group.command("list")
@click.argument("party", metavar="PARTY")
@click.pass_context
def list_payments(ctx, party: str):
    """List a party's transactions, newest first."""
    db = ctx.obj["db"]
    service = TransactionService(db)
    party_id = resolve_party_or_exit(ctx, PartyService(db), party)

    transactions = service.list_party_transactions(party_id)
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 80)
    for txn in transactions:
        click.echo(
            f"ID: {txn.id:3d} | {txn.date} | {txn.type:8s} | {format_money(txn.amount):>12s} | "
            f"{txn.invoice_number or '-':14s} | {txn.notes or ''}"
        )


def register_commands(cli):
    """Register payment commands with CLI."""
    cli.add_command(payment_group, name="payment")
