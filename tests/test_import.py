"""Tests for importing document-store snapshots."""

import json
from datetime import date
from decimal import Decimal

import pytest

from khata.domain.bank import BankService
from khata.domain.entities import PaymentMethod, TransactionKind
from khata.domain.snapshot_import import ImportService
from khata.domain.transaction import TransactionService

SNAPSHOT = {
    "parties": [
        {
            "businessName": "Acme",
            "phoneNumber": "0221234567",
            "bankNumber": "00112233",
            "bankName": "SBI",
            "contactName": "Ravi",
            "contactMobile": "9876543210",
        },
        {"contactName": "No business name"},
    ],
    "employees": [
        {"name": "Suresh", "basicSalary": 10000, "salaryPeriodStart": 1, "salaryPeriodEnd": 30}
    ],
    "purchases": [
        {"party": "Acme", "date": "2024-01-01", "baseAmount": 1000, "hasGST": True, "billNumber": "B-1"}
    ],
    "payments": [
        {"party": "Acme", "date": "2024-01-02", "amount": 200, "method": "NFT"},
        {"party": "Acme", "date": "2024-01-03", "amount": 100, "method": "Cash"},
    ],
    "returns": [
        {"party": "Acme", "date": "2024-01-04", "amount": 50, "comment": "Damaged"},
        {"party": "Acme", "date": "2024-01-04", "amount": 20},
    ],
    "salaries": [{"employeeName": "Suresh", "amount": 5000, "date": "2024-01-05"}],
    "bankDeposits": [
        {"amount": 1000, "date": "2024-01-01"},
        {"amount": -200, "date": "2024-01-02", "party": "Acme", "isPaymentDeduction": True},
    ],
    "bankMeta": {"balance": 800},
}


@pytest.fixture
def import_service(temp_db):
    """Create an ImportService with a temporary database."""
    return ImportService(temp_db)


def test_import_snapshot_counts(import_service):
    """Test the per-collection counts and error reporting."""
    result = import_service.import_snapshot(SNAPSHOT)

    assert result["parties"] == 1
    assert result["employees"] == 1
    assert result["purchases"] == 1
    assert result["payments"] == 2
    assert result["returns"] == 1
    assert result["salaries"] == 1
    assert result["bank_deposits"] == 2
    assert result["skipped"] == 0
    assert len(result["errors"]) == 2
    assert result["errors"][0].startswith("parties[2]")
    assert result["errors"][1].startswith("returns[2]")
    assert result["bank_balance"] == Decimal("800")


def test_imported_ledger_matches_snapshot(import_service, temp_db):
    """Test balances computed from imported data."""
    import_service.import_snapshot(SNAPSHOT)
    transactions = TransactionService(temp_db)
    bank = BankService(temp_db)

    assert transactions.total_owed("Acme") == Decimal("700")
    [payment] = transactions.list_transactions(party="Acme", kind=TransactionKind.PAYMENT)[:1]
    assert payment.method is PaymentMethod.NEFT
    assert temp_db.get_party("Acme").bank_account_number == "00112233"
    assert bank.get_balance() == Decimal("800")
    assert bank.reconcile().is_consistent


def test_import_does_not_add_deductions(import_service, temp_db):
    """Test that imported payments rely on the snapshot's deduction records."""
    import_service.import_snapshot(SNAPSHOT)

    deductions = [r for r in temp_db.list_bank_deposits() if r.is_payment_deduction]
    assert len(deductions) == 1
    assert deductions[0].date == date(2024, 1, 2)


def test_import_rebuilds_balance_without_meta(import_service):
    """Test that the balance is rebuilt when the snapshot has none."""
    snapshot = {key: value for key, value in SNAPSHOT.items() if key != "bankMeta"}

    result = import_service.import_snapshot(snapshot)

    assert result["bank_balance"] == Decimal("800")


def test_reimport_skips_existing_parties(import_service):
    """Test that parties and employees are not duplicated."""
    import_service.import_snapshot({"parties": SNAPSHOT["parties"], "employees": SNAPSHOT["employees"]})

    result = import_service.import_snapshot(
        {"parties": SNAPSHOT["parties"], "employees": SNAPSHOT["employees"]}
    )

    assert result["parties"] == 0
    assert result["employees"] == 0
    assert result["skipped"] == 2


def test_import_file(import_service, tmp_path):
    """Test importing from a JSON file."""
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(SNAPSHOT), encoding="utf-8")

    result = import_service.import_file(str(path))

    assert result["purchases"] == 1


def test_import_file_missing(import_service, tmp_path):
    """Test a missing snapshot file."""
    with pytest.raises(FileNotFoundError):
        import_service.import_file(str(tmp_path / "missing.json"))


def test_import_file_invalid_json(import_service, tmp_path):
    """Test a file that isn't JSON."""
    path = tmp_path / "snapshot.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ValueError, match="not valid JSON"):
        import_service.import_file(str(path))


def test_import_file_not_an_object(import_service, tmp_path):
    """Test a JSON file with the wrong top-level shape."""
    path = tmp_path / "snapshot.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(ValueError, match="JSON object"):
        import_service.import_file(str(path))


def test_import_skips_non_finite_amounts(import_service, temp_db):
    """Test that NaN and infinite amounts are reported without aborting the import."""
    snapshot = {
        "parties": SNAPSHOT["parties"][:1],
        "purchases": SNAPSHOT["purchases"],
        "payments": [
            {"party": "Acme", "date": "2024-01-02", "amount": "NaN", "method": "Cash"},
            {"party": "Acme", "date": "2024-01-03", "amount": "Infinity", "method": "Cash"},
        ],
    }

    result = import_service.import_snapshot(snapshot)

    assert result["purchases"] == 1
    assert result["payments"] == 0
    assert [error.split(":")[0] for error in result["errors"]] == ["payments[1]", "payments[2]"]
    assert TransactionService(temp_db).total_owed("Acme") == Decimal("1050")


@pytest.mark.parametrize(
    "terms",
    [
        {"basicSalary": 10000, "salaryPeriodStart": 0, "salaryPeriodEnd": 10},
        {"basicSalary": 10000, "salaryPeriodStart": 5},
        {"basicSalary": -500, "salaryPeriodStart": 1, "salaryPeriodEnd": 30},
    ],
)
def test_import_rejects_invalid_salary_terms(import_service, temp_db, terms):
    """Test that employees with unusable salary terms are reported and skipped."""
    result = import_service.import_snapshot({"employees": [{"name": "Suresh", **terms}]})

    assert result["employees"] == 0
    assert result["errors"][0].startswith("employees[1]")
    assert temp_db.get_employee("Suresh") is None


def test_import_skips_records_for_unknown_names(import_service, temp_db):
    """Test that transactions and salaries must name a known party or employee."""
    snapshot = {
        "parties": SNAPSHOT["parties"][:1],
        "employees": SNAPSHOT["employees"],
        "purchases": [
            {"party": "Ghost", "date": "2024-01-01", "baseAmount": 500, "billNumber": "G-1"},
            {"party": "Acme", "date": "2024-01-01", "baseAmount": 1000, "billNumber": "B-1"},
        ],
        "salaries": [{"employeeName": "Nobody", "amount": 100, "date": "2024-01-05"}],
    }

    result = import_service.import_snapshot(snapshot)

    assert result["purchases"] == 1
    assert result["salaries"] == 0
    assert result["errors"] == [
        "purchases[1]: Party 'Ghost' not found",
        "salaries[1]: Employee 'Nobody' not found",
    ]
    assert TransactionService(temp_db).party_balances() == {"Acme": Decimal("1050")}
