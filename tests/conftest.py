"""Shared pytest fixtures for bussnote tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from bussnote.database.factories import create_sqlite_database
from bussnote.domain.activity import ActivityService
from bussnote.domain.draft import ItemDraft, build_draft
from bussnote.domain.invoice import InvoiceService
from bussnote.domain.party import PartyService
from bussnote.domain.reports import ReportService
from bussnote.domain.transaction import TransactionService

NOTE_DATE = date(2025, 1, 1)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def party_service(temp_db):
    """Create a PartyService with a temporary database."""
    return PartyService(temp_db)


@pytest.fixture
def invoice_service(temp_db):
    """Create an InvoiceService with a temporary database."""
    return InvoiceService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def activity_service(temp_db):
    """Create an ActivityService with a temporary database."""
    return ActivityService(temp_db)


@pytest.fixture
def report_service(temp_db):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db)


@pytest.fixture
def seller(party_service):
    """Create a sample seller party."""
    party_id = party_service.create_party(
        name="Acme Traders", contact_person="Ravi Shah", phone="+91 98200 12345"
    )
    return party_service.get_party(party_id)


@pytest.fixture
def buyer(party_service):
    """Create a sample buyer party."""
    party_id = party_service.create_party(
        name="Globex Mills", contact_person="Anita Rao", phone="9820098200", email="anita@globex.in"
    )
    return party_service.get_party(party_id)


@pytest.fixture
def make_draft(seller, buyer):
    """Return a factory for valid drafts between the sample parties.

    Keyword arguments are applied through update_draft, after the defaults.
    """

    def factory(items=None, **changes):
        if items is None:
            items = [ItemDraft("Cotton bales", Decimal("10"), Decimal("1000.00"))]
        values = {"seller_id": seller.id, "buyer_id": buyer.id, "invoice_date": NOTE_DATE}
        values.update(changes)
        return build_draft(items=items, today=NOTE_DATE, **values).draft

    return factory


@pytest.fixture
def sample_invoice(invoice_service, make_draft):
    """Create a pending note worth 10000.00 at 2 % brokerage."""
    invoice_id = invoice_service.create_invoice(
        make_draft(brokerage_rate="2", received_brokerage="150"), today=NOTE_DATE
    )
    return invoice_service.get_invoice(invoice_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
