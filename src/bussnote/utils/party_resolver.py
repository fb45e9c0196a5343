"""Utility for resolving party names to IDs."""

from bussnote.domain.party import PartyService


def resolve_party(party_service: PartyService, party: str | int) -> int:
    """Resolve party name or ID to party ID.

    Names are matched case-insensitively.

    Args:
        party_service: PartyService instance
        party: Party name (str) or ID (int or string representation of int)

    Returns:
        Party ID

    Raises:
        ValueError: If party is not found
    """
    if isinstance(party, int):
        if party_service.get_party(party) is None:
            raise ValueError(f"Party ID {party} not found")
        return party

    text = str(party).strip()
    if text.isdigit():
        party_id = int(text)
        if party_service.get_party(party_id) is not None:
            return party_id
        # A numeric name such as "2024" may still match by name below

    found = party_service.get_party_by_name(text)
    if found is None:
        raise ValueError(f"Party '{party}' not found")
    return found.id
