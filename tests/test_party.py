"""Tests for party service and commands."""

import pytest
from datetime import date
from decimal import Decimal

from bussnote.cli.main import cli
from bussnote.domain.entities import ActivityType
from bussnote.domain.errors import ConflictError, DependencyError, NotFoundError, ValidationError
from bussnote.utils.party_resolver import resolve_party


class TestPartyService:
    """Tests for PartyService."""

    def test_create_party(self, party_service):
        """Test creating a party strips input and blanks optional fields."""
        party_id = party_service.create_party(
            name="  Acme Traders ", contact_person="Ravi", phone="9820012345", email=""
        )
        party = party_service.get_party(party_id)

        assert party.name == "Acme Traders"
        assert party.email is None
        assert party.outstanding == Decimal("0.00")
        assert party.last_transaction_date is None

    def test_create_logs_activity(self, party_service, activity_service, seller):
        activities = activity_service.recent_activities()
        assert activities[0].type == ActivityType.PARTY_ADDED
        assert activities[0].party_id == seller.id
        assert "Acme Traders" in activities[0].description

    def test_duplicate_name_case_insensitive(self, party_service, seller):
        with pytest.raises(ConflictError, match="already exists"):
            party_service.create_party(name="ACME traders", contact_person="X Y", phone="9820012345")

    def test_invalid_fields(self, party_service):
        with pytest.raises(ValidationError) as exc_info:
            party_service.create_party(name="A", contact_person="Ravi", phone="123")
        assert set(exc_info.value.field_errors) == {"name", "phone"}

    def test_is_name_available(self, party_service, seller):
        assert not party_service.is_name_available("acme traders")
        assert party_service.is_name_available("acme traders", exclude_id=seller.id)
        assert party_service.is_name_available("Initech")

    def test_update_party(self, party_service, seller):
        party_service.update_party(seller.id, phone="9999999999", notes="Prefers email")
        party = party_service.get_party(seller.id)
        assert party.phone == "9999999999"
        assert party.notes == "Prefers email"
        assert party.name == "Acme Traders"

    def test_update_rename_conflict(self, party_service, seller, buyer):
        with pytest.raises(ConflictError):
            party_service.update_party(buyer.id, name="acme TRADERS")

    def test_update_unknown_field(self, party_service, seller):
        with pytest.raises(ValueError, match="Unknown party field"):
            party_service.update_party(seller.id, colour="red")

    def test_update_missing(self, party_service):
        with pytest.raises(NotFoundError):
            party_service.update_party(999, phone="9999999999")

    def test_get_missing_returns_none(self, party_service):
        assert party_service.get_party(999) is None

    def test_list_parties_sorted(self, party_service, seller, buyer):
        names = [p.name for p in party_service.list_parties()]
        assert names == ["Acme Traders", "Globex Mills"]


class TestPartyDeleteGuard:
    """Tests for the delete guard."""

    def test_delete_party_without_notes(self, party_service, seller):
        party_service.delete_party(seller.id)
        assert party_service.get_party(seller.id) is None

    @pytest.mark.parametrize("role", ["seller", "buyer"])
    def test_delete_blocked_by_note(self, party_service, sample_invoice, role):
        party_id = getattr(sample_invoice, f"{role}_id")
        assert party_service.has_invoices(party_id)

        with pytest.raises(DependencyError, match="Unable to delete"):
            party_service.delete_party(party_id)
        assert party_service.get_party(party_id) is not None

    def test_delete_blocked_by_transaction(self, party_service, transaction_service, seller):
        transaction_service.record_transaction(seller.id, "100", date(2025, 1, 5))
        with pytest.raises(DependencyError):
            party_service.delete_party(seller.id)

    def test_delete_allowed_after_note_deleted(self, party_service, invoice_service, sample_invoice):
        invoice_service.delete_invoice(sample_invoice.id)
        assert not party_service.has_invoices(sample_invoice.buyer_id)
        party_service.delete_party(sample_invoice.buyer_id)

    def test_delete_missing(self, party_service):
        with pytest.raises(NotFoundError):
            party_service.delete_party(42)


class TestPartyEnrichment:
    """Tests for values computed on read."""

    def test_outstanding_counts_pending_notes_as_seller(self, party_service, invoice_service, sample_invoice):
        seller = party_service.get_party(sample_invoice.seller_id)
        buyer = party_service.get_party(sample_invoice.buyer_id)
        assert seller.outstanding == Decimal("10200.00")
        assert buyer.outstanding == Decimal("0.00")

        invoice_service.update_status(sample_invoice.id, "paid")
        assert party_service.get_party(sample_invoice.seller_id).outstanding == Decimal("0.00")

    def test_last_transaction_date(self, party_service, transaction_service, seller):
        transaction_service.record_transaction(seller.id, "10", date(2025, 1, 5))
        transaction_service.record_transaction(seller.id, "10", date(2025, 1, 3))
        assert party_service.get_party(seller.id).last_transaction_date == date(2025, 1, 5)


class TestResolveParty:
    """Tests for resolving parties by name or ID."""

    def test_by_id_and_name(self, party_service, seller):
        assert resolve_party(party_service, seller.id) == seller.id
        assert resolve_party(party_service, str(seller.id)) == seller.id
        assert resolve_party(party_service, "acme traders") == seller.id

    def test_not_found(self, party_service):
        with pytest.raises(ValueError, match="not found"):
            resolve_party(party_service, "Nobody")
        with pytest.raises(ValueError, match="not found"):
            resolve_party(party_service, 77)


class TestPartyCommands:
    """Tests for party CLI commands."""

    def test_create_and_list(self, cli_runner, temp_db):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path", temp_db.database_path,
                "party", "create", "Initech",
                "--contact", "Bill L", "--phone", "+1 555 010 9999",
            ],
        )
        assert result.exit_code == 0
        assert "Created party 'Initech'" in result.output

        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "party", "list"])
        assert result.exit_code == 0
        assert "Initech" in result.output

    def test_list_empty(self, cli_runner, temp_db):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "party", "list"])
        assert result.exit_code == 0
        assert "No parties found" in result.output

    def test_create_invalid_phone(self, cli_runner, temp_db):
        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "party", "create", "Initech", "--contact", "Bill", "--phone", "12"],
        )
        assert result.exit_code == 1
        assert "phone" in result.output

    def test_delete_blocked(self, cli_runner, temp_db, sample_invoice):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "party", "delete", "Acme Traders", "--yes"]
        )
        assert result.exit_code == 1
        assert "Unable to delete party" in result.output

    def test_delete(self, cli_runner, temp_db, seller):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "party", "delete", str(seller.id), "--yes"]
        )
        assert result.exit_code == 0
        assert "Deleted party 'Acme Traders'" in result.output

    def test_show(self, cli_runner, temp_db, sample_invoice):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "party", "show", "Acme Traders"])
        assert result.exit_code == 0
        assert "Outstanding: 10200.00" in result.output
        assert sample_invoice.invoice_number in result.output

    def test_check_name(self, cli_runner, temp_db, seller):
        taken = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "party", "check-name", "acme TRADERS"])
        assert taken.exit_code == 1
        assert "already taken" in taken.output

        free = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "party", "check-name", "Initech"])
        assert free.exit_code == 0
        assert "is available" in free.output
