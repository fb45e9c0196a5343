"""Tests for note, payment and activity CLI commands."""

import json

from bussnote.cli.main import cli


def invoke(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])


class TestInvoiceCreateCommand:
    """Tests for `invoice create`."""

    def test_create(self, cli_runner, temp_db, seller, buyer):
        result = invoke(
            cli_runner, temp_db,
            "invoice", "create",
            "--seller", "Acme Traders",
            "--buyer", str(buyer.id),
            "--date", "2025-01-01",
            "--brokerage-rate", "2",
            "--item", "Cotton bales:10:1000",
        )
        assert result.exit_code == 0, result.output
        assert "Created note INV-" in result.output
        assert "-0001 (ID: 1)" in result.output
        assert "Subtotal: 10000.00 INR" in result.output
        assert "Brokerage (INR): 200.00" in result.output

    def test_description_with_colons(self, cli_runner, temp_db, seller, buyer):
        result = invoke(
            cli_runner, temp_db,
            "invoice", "create", "--seller", "Acme Traders", "--buyer", "Globex Mills",
            "--item", "Yarn: 40s count:2:50.50",
        )
        assert result.exit_code == 0, result.output

        shown = invoke(cli_runner, temp_db, "invoice", "show", "1")
        assert "Yarn: 40s count" in shown.output
        assert "101.00" in shown.output

    def test_requires_item(self, cli_runner, temp_db, seller, buyer):
        result = invoke(
            cli_runner, temp_db, "invoice", "create", "--seller", "Acme Traders", "--buyer", "Globex Mills"
        )
        assert result.exit_code == 1
        assert "At least one --item is required" in result.output

    def test_bad_item(self, cli_runner, temp_db, seller, buyer):
        result = invoke(
            cli_runner, temp_db,
            "invoice", "create", "--seller", "Acme Traders", "--buyer", "Globex Mills", "--item", "Yarn:2",
        )
        assert result.exit_code == 1
        assert "DESCRIPTION:QUANTITY:RATE" in result.output

    def test_same_party(self, cli_runner, temp_db, seller):
        result = invoke(
            cli_runner, temp_db,
            "invoice", "create", "--seller", "Acme Traders", "--buyer", "acme traders", "--item", "Yarn:1:1",
        )
        assert result.exit_code == 1
        assert "Warning: Seller and buyer cannot be the same party" in result.output
        assert "Error: Validation failed" in result.output
        assert "buyer_id: Buyer is required" in result.output

    def test_due_days_out_of_range(self, cli_runner, temp_db, seller, buyer):
        result = invoke(
            cli_runner, temp_db,
            "invoice", "create", "--seller", "Acme Traders", "--buyer", "Globex Mills",
            "--due-days", "100000000", "--item", "Yarn:1:1",
        )
        assert result.exit_code == 1
        assert "Error: Validation failed" in result.output
        assert "due_days:" in result.output

    def test_exchange_rate_rounding_to_zero(self, cli_runner, temp_db, seller, buyer):
        result = invoke(
            cli_runner, temp_db,
            "invoice", "create", "--seller", "Acme Traders", "--buyer", "Globex Mills",
            "--currency", "USD", "--exchange-rate", "0.004", "--item", "Yarn:1:1",
        )
        assert result.exit_code == 1
        assert "exchange_rate: Exchange rate must be greater than 0" in result.output
        assert "No notes found." in invoke(cli_runner, temp_db, "invoice", "list").output

    def test_unknown_party(self, cli_runner, temp_db, seller):
        result = invoke(
            cli_runner, temp_db,
            "invoice", "create", "--seller", "Acme Traders", "--buyer", "Initech", "--item", "Yarn:1:1",
        )
        assert result.exit_code == 1
        assert "Party 'Initech' not found" in result.output


class TestInvoiceCommands:
    """Tests for the remaining note commands."""

    def test_list(self, cli_runner, temp_db, sample_invoice):
        result = invoke(cli_runner, temp_db, "invoice", "list")
        assert result.exit_code == 0
        assert "Found 1 note(s)" in result.output
        assert "INV-2025-0001" in result.output
        assert "overdue" in result.output

    def test_list_by_status(self, cli_runner, temp_db, sample_invoice):
        result = invoke(cli_runner, temp_db, "invoice", "list", "--status", "paid")
        assert result.exit_code == 0
        assert "No notes found." in result.output

    def test_list_period_with_dates(self, cli_runner, temp_db):
        result = invoke(cli_runner, temp_db, "invoice", "list", "--period", "week", "--start-date", "2025-01-01")
        assert result.exit_code == 1
        assert "--period cannot be combined" in result.output

    def test_show_json(self, cli_runner, temp_db, sample_invoice):
        result = invoke(cli_runner, temp_db, "invoice", "show", str(sample_invoice.id), "--json")
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["invoice_number"] == "INV-2025-0001"
        assert payload["subtotal"] == "10000.00"
        assert payload["balance_brokerage"] == "50.00"
        assert payload["is_closed"] is False
        assert payload["items"][0]["amount"] == "10000.00"

    def test_show_missing(self, cli_runner, temp_db):
        result = invoke(cli_runner, temp_db, "invoice", "show", "42")
        assert result.exit_code == 1
        assert "Note 42 not found" in result.output

    def test_update(self, cli_runner, temp_db, sample_invoice):
        result = invoke(cli_runner, temp_db, "invoice", "update", str(sample_invoice.id), "--received-brokerage", "200")
        assert result.exit_code == 0, result.output
        assert "Updated note INV-2025-0001" in result.output

        shown = invoke(cli_runner, temp_db, "invoice", "show", str(sample_invoice.id))
        assert "Balance: 0.00" in shown.output

    def test_update_nothing(self, cli_runner, temp_db, sample_invoice):
        result = invoke(cli_runner, temp_db, "invoice", "update", str(sample_invoice.id))
        assert result.exit_code == 0
        assert "Nothing to update." in result.output

    def test_status_paid_records_payment(self, cli_runner, temp_db, sample_invoice):
        result = invoke(cli_runner, temp_db, "invoice", "status", str(sample_invoice.id), "paid")
        assert result.exit_code == 0, result.output
        assert "is now paid" in result.output

        payments = invoke(cli_runner, temp_db, "payment", "list", "Acme Traders")
        assert "Found 1 transaction(s)" in payments.output
        assert "10200.00" in payments.output

    def test_invalid_transition(self, cli_runner, temp_db, sample_invoice):
        invoke(cli_runner, temp_db, "invoice", "status", str(sample_invoice.id), "cancelled")
        result = invoke(cli_runner, temp_db, "invoice", "status", str(sample_invoice.id), "paid")
        assert result.exit_code == 1
        assert "Error: " in result.output

    def test_close_and_reopen(self, cli_runner, temp_db, sample_invoice):
        closed = invoke(cli_runner, temp_db, "invoice", "close", str(sample_invoice.id))
        assert "Closed note INV-2025-0001" in closed.output

        reopened = invoke(cli_runner, temp_db, "invoice", "reopen", str(sample_invoice.id))
        assert "is pending" in reopened.output

    def test_notes(self, cli_runner, temp_db, sample_invoice):
        result = invoke(cli_runner, temp_db, "invoice", "notes", str(sample_invoice.id), "Bale count checked")
        assert result.exit_code == 0
        shown = invoke(cli_runner, temp_db, "invoice", "show", str(sample_invoice.id))
        assert "Remarks: Bale count checked" in shown.output

        missing = invoke(cli_runner, temp_db, "invoice", "notes", str(sample_invoice.id))
        assert missing.exit_code == 1

    def test_delete(self, cli_runner, temp_db, sample_invoice):
        result = invoke(cli_runner, temp_db, "invoice", "delete", str(sample_invoice.id), "--yes")
        assert result.exit_code == 0
        assert "Deleted note INV-2025-0001" in result.output

        listed = invoke(cli_runner, temp_db, "invoice", "list")
        assert "No notes found." in listed.output

    def test_delete_cancelled_at_prompt(self, cli_runner, temp_db, sample_invoice):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "invoice", "delete", str(sample_invoice.id)], input="n\n"
        )
        assert "Cancelled." in result.output
        assert invoke(cli_runner, temp_db, "invoice", "show", str(sample_invoice.id)).exit_code == 0


class TestPaymentCommands:
    """Tests for `payment add` and `payment list`."""

    def test_add_against_note(self, cli_runner, temp_db, sample_invoice):
        result = invoke(
            cli_runner, temp_db,
            "payment", "add", "Acme Traders", "10,200", "--invoice", str(sample_invoice.id), "--date", "2025-01-05",
        )
        assert result.exit_code == 0, result.output
        assert "Recorded payment of 10200.00" in result.output

        shown = invoke(cli_runner, temp_db, "invoice", "show", str(sample_invoice.id))
        assert "Status: paid" in shown.output
        assert "Paid/closed on: 2025-01-05" in shown.output

    def test_invalid_amount(self, cli_runner, temp_db, seller):
        result = invoke(cli_runner, temp_db, "payment", "add", "Acme Traders", "lots")
        assert result.exit_code == 1
        assert "Invalid amount format" in result.output

    def test_non_positive_amount(self, cli_runner, temp_db, seller):
        result = invoke(cli_runner, temp_db, "payment", "add", "Acme Traders", "0")
        assert result.exit_code == 1

    def test_list_empty(self, cli_runner, temp_db, seller):
        result = invoke(cli_runner, temp_db, "payment", "list", "Acme Traders")
        assert "No transactions found." in result.output


class TestActivityCommands:
    """Tests for `activity list`."""

    def test_list(self, cli_runner, temp_db, sample_invoice):
        result = invoke(cli_runner, temp_db, "activity", "list")
        assert result.exit_code == 0
        assert "invoice_created" in result.output
        assert "party_added" in result.output

    def test_list_for_note(self, cli_runner, temp_db, sample_invoice):
        result = invoke(cli_runner, temp_db, "activity", "list", "--invoice", str(sample_invoice.id))
        assert "invoice_created" in result.output
        assert "party_added" not in result.output

    def test_bad_limit(self, cli_runner, temp_db):
        result = invoke(cli_runner, temp_db, "activity", "list", "--limit", "0")
        assert result.exit_code == 1
