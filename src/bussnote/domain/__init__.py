"""Domain layer for bussnote application."""

_SERVICES = {
    "PartyService": "bussnote.domain.party",
    "InvoiceService": "bussnote.domain.invoice",
    "TransactionService": "bussnote.domain.transaction",
    "ActivityService": "bussnote.domain.activity",
    "ReportService": "bussnote.domain.reports",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    # Services import the database layer, which imports domain entities;
    # resolving them lazily keeps `bussnote.domain.entities` importable first.
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
