"""Activity log commands."""

import click

from bussnote.cli.error_handling import handle_domain_error
from bussnote.domain.activity import ActivityService


@click.group()
def activity_group():
    """Show the activity trail."""
    pass


@activity_group.command("list")
@click.option("--limit", type=int, default=5, show_default=True, help="Number of entries")
@click.option("--invoice", "invoice_id", type=int, help="Only activities for this note ID")
@click.pass_context
def list_activities(ctx, limit: int, invoice_id: int | None):
    """Show recent activities, newest first."""
    service = ActivityService(ctx.obj["db"])
    try:
        if invoice_id is not None:
            activities = service.invoice_activities(invoice_id)
        else:
            activities = service.recent_activities(limit)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not activities:
        click.echo("No activities found.")
        return

    for act in activities:
        click.echo(f"{act.timestamp:%Y-%m-%d %H:%M} | {act.type.value:16s} | {act.title}")
        click.echo(f"    {act.description}")


def register_commands(cli):
    """Register activity commands with CLI."""
    cli.add_command(activity_group, name="activity")
