"""Tests for CLI commands."""

import json
from datetime import date
from decimal import Decimal

import pytest

from khata.cli.main import cli


@pytest.fixture
def run(cli_runner, temp_db):
    """Invoke the CLI against the temporary database."""

    def invoke(*args, input=None):
        return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], input=input)

    return invoke


PARTY_ARGS = [
    "party",
    "add",
    "Acme",
    "--phone",
    "0221234567",
    "--bank-account",
    "00112233",
    "--bank-name",
    "SBI",
    "--contact-name",
    "Ravi",
    "--contact-mobile",
    "9876543210",
]


class TestPartyCommands:
    """Tests for party commands."""

    def test_add_party(self, run):
        """Test adding a party."""
        result = run(*PARTY_ARGS)

        assert result.exit_code == 0
        assert "Created party 'Acme' (ID: 1)" in result.output

    def test_add_duplicate_party(self, run):
        """Test that duplicate names fail."""
        run(*PARTY_ARGS)
        result = run(*PARTY_ARGS)

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_add_party_missing_option(self, run):
        """Test that every detail is required."""
        result = run("party", "add", "Acme", "--phone", "1")

        assert result.exit_code != 0

    def test_list_parties(self, run):
        """Test listing parties with balances."""
        run(*PARTY_ARGS)
        run("purchase", "--party", "Acme", "--amount", "1000", "--bill", "B-1", "--date", "2024-01-01")

        result = run("party", "list")

        assert result.exit_code == 0
        assert "Acme" in result.output
        assert "₹1,050.00" in result.output

    def test_list_parties_empty(self, run):
        """Test the empty directory message."""
        result = run("party", "list")

        assert "No parties found." in result.output

    def test_edit_party(self, run):
        """Test editing contact details."""
        run(*PARTY_ARGS)

        result = run("party", "edit", "Acme", "--contact-name", "Anil")
        shown = run("party", "show", "Acme")

        assert result.exit_code == 0
        assert "Updated party 'Acme'" in result.output
        assert "Anil" in shown.output

    def test_edit_party_without_options(self, run):
        """Test that an empty edit is an error."""
        run(*PARTY_ARGS)

        result = run("party", "edit", "Acme")

        assert result.exit_code == 1
        assert "Nothing to update" in result.output

    def test_show_unknown_party(self, run):
        """Test showing a party that does not exist."""
        result = run("party", "show", "Ghost")

        assert result.exit_code == 1
        assert "Party 'Ghost' not found" in result.output


class TestRecordCommands:
    """Tests for purchase, pay and return."""

    def test_purchase(self, run):
        """Test recording a purchase with GST."""
        run(*PARTY_ARGS)

        result = run("purchase", "--party", "Acme", "--amount", "1,000", "--bill", "B-1", "--date", "2024-01-01")

        assert result.exit_code == 0
        assert "GST: ₹50.00" in result.output
        assert "Total: ₹1,050.00" in result.output

    def test_purchase_without_gst(self, run):
        """Test --no-gst."""
        run(*PARTY_ARGS)

        result = run(
            "purchase", "--party", "Acme", "--amount", "1000", "--bill", "B-1", "--date", "2024-01-01", "--no-gst"
        )

        assert "Total: ₹1,000.00" in result.output

    def test_purchase_invalid_amount(self, run):
        """Test that a bad amount is reported."""
        run(*PARTY_ARGS)

        result = run("purchase", "--party", "Acme", "--amount", "lots", "--bill", "B-1", "--date", "today")

        assert result.exit_code == 1
        assert "Invalid amount" in result.output

    def test_purchase_invalid_date(self, run):
        """Test that a bad date is reported."""
        run(*PARTY_ARGS)

        result = run("purchase", "--party", "Acme", "--amount", "10", "--bill", "B-1", "--date", "someday")

        assert result.exit_code == 1
        assert "Invalid date" in result.output

    def test_overpayment_rejected(self, run):
        """Test that the overpayment guard applies from the CLI."""
        run(*PARTY_ARGS)
        run("purchase", "--party", "Acme", "--amount", "100", "--bill", "B-1", "--date", "2024-01-01")

        result = run("pay", "--party", "Acme", "--amount", "500", "--method", "Cash", "--date", "2024-01-02")

        assert result.exit_code == 1
        assert "exceeds" in result.output

    def test_allow_overpayment_flag(self, cli_runner, temp_db, run):
        """Test switching the overpayment guard off."""
        run(*PARTY_ARGS)

        result = cli_runner.invoke(
            cli,
            [
                "--db-path",
                temp_db.database_path,
                "--allow-overpayment",
                "pay",
                "--party",
                "Acme",
                "--amount",
                "500",
                "--method",
                "Cash",
                "--date",
                "2024-01-02",
            ],
        )

        assert result.exit_code == 0
        assert "Owed to Acme: ₹-500.00" in result.output

    def test_allow_overpayment_env(self, run, monkeypatch):
        """Test switching the overpayment guard off through the environment."""
        run(*PARTY_ARGS)
        monkeypatch.setenv("KHATA_ALLOW_OVERPAYMENT", "1")

        result = run("pay", "--party", "Acme", "--amount", "5", "--method", "Cash", "--date", "2024-01-02")

        assert result.exit_code == 0

    def test_neft_payment_needs_bank_funds(self, run):
        """Test the bank-funds guard and the bank balance after paying."""
        run(*PARTY_ARGS)
        run("purchase", "--party", "Acme", "--amount", "1000", "--bill", "B-1", "--date", "2024-01-01")

        rejected = run("pay", "--party", "Acme", "--amount", "200", "--method", "NEFT", "--date", "2024-01-02")
        run("bank", "deposit", "1000", "--date", "2024-01-01")
        accepted = run("pay", "--party", "Acme", "--amount", "200", "--method", "nft", "--date", "2024-01-02")

        assert rejected.exit_code == 1
        assert "Not enough money" in rejected.output
        assert accepted.exit_code == 0
        assert "(NEFT)" in accepted.output
        assert "Bank balance: ₹800.00" in accepted.output

    def test_return(self, run):
        """Test recording a return."""
        run(*PARTY_ARGS)
        run("purchase", "--party", "Acme", "--amount", "1000", "--bill", "B-1", "--date", "2024-01-01")

        result = run("return", "--party", "Acme", "--amount", "50", "--date", "2024-01-03", "--comment", "Damaged")

        assert result.exit_code == 0
        assert "Owed to Acme: ₹1,000.00" in result.output

    def test_return_requires_comment(self, run):
        """Test that --comment is mandatory."""
        run(*PARTY_ARGS)

        result = run("return", "--party", "Acme", "--amount", "50", "--date", "2024-01-03")

        assert result.exit_code != 0


class TestTransactionCommands:
    """Tests for the transaction group."""

    @pytest.fixture
    def ledger(self, run):
        run(*PARTY_ARGS)
        run("purchase", "--party", "Acme", "--amount", "1000", "--bill", "B-1", "--date", "2024-01-01")
        run("pay", "--party", "Acme", "--amount", "500", "--method", "Cash", "--date", "2024-01-02")
        return run

    def test_list(self, ledger):
        """Test listing with running balances."""
        result = ledger("transaction", "list", "--party", "Acme")

        assert result.exit_code == 0
        assert "balance ₹1,050.00" in result.output
        assert "balance ₹550.00" in result.output
        assert "Total: 2 transaction(s)" in result.output

    def test_list_by_type(self, ledger):
        """Test the --type filter."""
        result = ledger("transaction", "list", "--type", "payment")

        assert "Total: 1 transaction(s)" in result.output

    def test_list_empty_window(self, ledger):
        """Test a date range with nothing in it."""
        result = ledger("transaction", "list", "--start-date", "2030-01-01")

        assert "No transactions found." in result.output

    def test_edit_purchase_amount(self, ledger):
        """Test that --amount edits the base amount of a purchase."""
        result = ledger("transaction", "edit", "1", "--amount", "2000")
        owed = ledger("owed", "--party", "Acme")

        assert result.exit_code == 0
        assert "₹2,100.00" in result.output
        assert "Owed to Acme: ₹1,600.00" in owed.output

    def test_edit_without_options(self, ledger):
        """Test that an empty edit is an error."""
        result = ledger("transaction", "edit", "1")

        assert result.exit_code == 1
        assert "Nothing to update" in result.output

    def test_edit_unknown_transaction(self, ledger):
        """Test editing a missing transaction."""
        result = ledger("transaction", "edit", "99", "--amount", "5")

        assert result.exit_code == 1
        assert "Transaction 99 not found" in result.output

    def test_delete_with_confirmation(self, ledger):
        """Test deleting after confirming."""
        result = ledger("transaction", "delete", "2", input="y\n")
        owed = ledger("owed", "--party", "Acme")

        assert "Deleted transaction 2" in result.output
        assert "Owed to Acme: ₹1,050.00" in owed.output

    def test_delete_cancelled(self, ledger):
        """Test declining the confirmation."""
        result = ledger("transaction", "delete", "2", input="n\n")

        assert "Deletion cancelled." in result.output

    def test_delete_with_yes_flag(self, ledger):
        """Test skipping the prompt."""
        result = ledger("transaction", "delete", "1", "--yes")

        assert result.exit_code == 0
        assert "Deleted transaction 1" in result.output


class TestOwedCommand:
    """Tests for the owed report."""

    def test_owed_all_parties(self, run):
        """Test the per-party report and total."""
        run(*PARTY_ARGS)
        run(*[arg if arg != "Acme" else "Bharat" for arg in PARTY_ARGS])
        run("purchase", "--party", "Acme", "--amount", "1000", "--bill", "B-1", "--date", "2024-01-01")
        run("purchase", "--party", "Bharat", "--amount", "200", "--bill", "B-2", "--date", "2024-01-01", "--no-gst")

        result = run("owed")

        assert result.exit_code == 0
        assert "Bharat" in result.output
        assert "₹1,250.00" in result.output

    def test_owed_in_window(self, run):
        """Test that a window reports net movement."""
        run(*PARTY_ARGS)
        run("purchase", "--party", "Acme", "--amount", "1000", "--bill", "B-1", "--date", "2024-01-01")
        run("pay", "--party", "Acme", "--amount", "300", "--method", "Cash", "--date", "2024-02-01")

        result = run("owed", "--party", "Acme", "--start-date", "2024-02-01", "--end-date", "2024-02-29")

        assert "Owed to Acme: ₹-300.00" in result.output

    def test_owed_nothing(self, run):
        """Test the empty report."""
        result = run("owed")

        assert "Nothing owed." in result.output

    def test_owed_conflicting_periods(self, run):
        """Test that two period flags are rejected."""
        result = run("owed", "--this-month", "--last-year")

        assert result.exit_code == 1
        assert "Only one period option" in result.output


class TestBankCommands:
    """Tests for the bank group."""

    def test_deposit_and_balance(self, run):
        """Test depositing and reading the balance."""
        run("bank", "deposit", "1,20,000", "--date", "2024-04-01")

        result = run("bank", "balance")

        assert "Bank balance: ₹120,000.00" in result.output

    def test_withdraw_beyond_balance(self, run):
        """Test the funds guard on withdrawals."""
        result = run("bank", "withdraw", "100")

        assert result.exit_code == 1
        assert "Not enough money" in result.output

    def test_allow_overdraft_flag(self, cli_runner, temp_db):
        """Test switching the funds guard off."""
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "--allow-overdraft", "bank", "withdraw", "100"]
        )

        assert result.exit_code == 0
        assert "Bank balance: ₹-100.00" in result.output

    def test_ledger(self, run):
        """Test the bank ledger listing."""
        run(*PARTY_ARGS)
        run("purchase", "--party", "Acme", "--amount", "1000", "--bill", "B-1", "--date", "2024-01-01")
        run("bank", "deposit", "1000", "--date", "2024-01-01")
        run(
            "pay", "--party", "Acme", "--amount", "200", "--method", "Check",
            "--check-number", "004512", "--date", "2024-01-02",
        )

        result = run("bank", "ledger", "--oldest-first")

        assert result.exit_code == 0
        lines = [line for line in result.output.splitlines() if line.startswith("2024-")]
        assert len(lines) == 2
        assert "004512" in lines[1]
        assert lines[1].rstrip().endswith("₹800.00")

    def test_ledger_empty(self, run):
        """Test the empty ledger message."""
        assert "No bank entries found." in run("bank", "ledger").output

    def test_reconcile(self, run, temp_db):
        """Test reconciliation success and drift."""
        run("bank", "deposit", "500", "--date", "2024-01-01")
        ok = run("bank", "reconcile")
        temp_db.set_bank_balance(Decimal("400"))
        drift = run("bank", "reconcile")

        assert ok.exit_code == 0
        assert "consistent" in ok.output
        assert drift.exit_code == 1
        assert "Drift: ₹-100.00" in drift.output


class TestEmployeeAndSalaryCommands:
    """Tests for employee and salary groups."""

    def test_add_and_list_employee(self, run):
        """Test adding and listing employees."""
        add = run("employee", "add", "Suresh", "--basic-salary", "18000", "--period-start", "25", "--period-end", "24")
        listing = run("employee", "list")

        assert add.exit_code == 0
        assert "Created employee 'Suresh'" in add.output
        assert "day 25 to day 24" in listing.output

    def test_add_employee_half_period(self, run):
        """Test that a period needs both ends."""
        result = run("employee", "add", "Suresh", "--period-start", "5")

        assert result.exit_code == 1
        assert "both a start day and an end day" in result.output

    def test_add_employee_day_out_of_range(self, run):
        """Test click's range check on period days."""
        result = run("employee", "add", "Suresh", "--period-start", "0", "--period-end", "5")

        assert result.exit_code != 0

    def test_update_terms(self, run):
        """Test replacing salary terms."""
        run("employee", "add", "Suresh")

        result = run("employee", "terms", "Suresh", "--basic-salary", "12000", "--period-start", "1", "--period-end", "30")
        listing = run("employee", "list")

        assert result.exit_code == 0
        assert "₹12,000.00" in listing.output

    def test_pay_and_remaining(self, run):
        """Test paying salary and the remaining amount."""
        run("employee", "add", "Suresh", "--basic-salary", "10000", "--period-start", "1", "--period-end", "30")

        pay = run("salary", "pay", "Suresh", "--amount", "4000", "--date", "2024-04-10")
        remaining = run("salary", "remaining", "Suresh", "--as-of", "2024-04-20")

        assert pay.exit_code == 0
        assert "Recorded salary payment 1 of ₹4,000.00 to Suresh" in pay.output
        assert "Pay period: 2024-04-01 to 2024-04-30" in remaining.output
        assert "Remaining salary for Suresh: ₹6,000.00" in remaining.output

    def test_pay_unknown_employee(self, run):
        """Test paying someone who is not an employee."""
        result = run("salary", "pay", "Ghost", "--amount", "100")

        assert result.exit_code == 1
        assert "Employee 'Ghost' not found" in result.output

    def test_history(self, run):
        """Test the salary history listing."""
        run("employee", "add", "Suresh")
        run("salary", "pay", "Suresh", "--amount", "100", "--date", "2024-01-05", "--comment", "Advance")

        result = run("salary", "history", "Suresh")
        empty = run("salary", "history")

        assert "Advance" in result.output
        assert "₹100.00" in result.output
        assert "Suresh" in empty.output


class TestImportCommand:
    """Tests for the import command."""

    def test_import(self, run, tmp_path):
        """Test importing a snapshot file."""
        path = tmp_path / "snapshot.json"
        path.write_text(
            json.dumps(
                {
                    "parties": [{"businessName": "Acme"}],
                    "purchases": [
                        {"party": "Acme", "date": "2024-01-01", "baseAmount": 1000, "billNumber": "B-1"}
                    ],
                    "returns": [{"party": "Acme", "date": "2024-01-02", "amount": 5}],
                }
            ),
            encoding="utf-8",
        )

        result = run("import", str(path))
        owed = run("owed", "--party", "Acme")

        assert result.exit_code == 0
        assert "Imported: 1 parties" in result.output
        assert "Imported: 1 purchases" in result.output
        assert "Errors: 1" in result.output
        assert "returns[1]" in result.output
        assert "Owed to Acme: ₹1,050.00" in owed.output

    def test_import_invalid_json(self, run, tmp_path):
        """Test a file that is not JSON."""
        path = tmp_path / "snapshot.json"
        path.write_text("nope", encoding="utf-8")

        result = run("import", str(path))

        assert result.exit_code == 1
        assert "not valid JSON" in result.output


def test_help_does_not_need_database(cli_runner, tmp_path):
    """Test that --help works without touching the database."""
    result = cli_runner.invoke(cli, ["--db-path", str(tmp_path / "unused.db"), "--help"])

    assert result.exit_code == 0
    assert "bookkeeping" in result.output
    assert not (tmp_path / "unused.db").exists()


def test_verbose_logging(run, temp_db):
    """Test that --verbose runs commands normally."""
    result = run("-v", "bank", "deposit", "10", "--date", str(date(2024, 1, 1)))

    assert result.exit_code == 0
