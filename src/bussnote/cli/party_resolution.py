"""CLI helpers for party resolution."""

from __future__ import annotations

import click

from bussnote.domain.party import PartyService
from bussnote.utils.party_resolver import resolve_party


def resolve_party_or_exit(ctx: click.Context, party_service: PartyService, party: str | int) -> int:
    """Resolve party name or ID, or exit with a CLI error."""
    try:
        return resolve_party(party_service, party)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
