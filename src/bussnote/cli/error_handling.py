"""CLI error handling helpers."""

import click

from bussnote.domain.errors import DomainError, ValidationError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure.

    Validation errors list each failing field on its own line.
    """
    if isinstance(error, ValidationError) and error.field_errors:
        click.echo("Error: Validation failed", err=True)
        for field, message in error.field_errors.items():
            click.echo(f"  {field}: {message}", err=True)
    else:
        click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
