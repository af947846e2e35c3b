"""Shared pytest fixtures for khata tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal

import pytest

from khata.database.factories import create_sqlite_database
from khata.domain.bank import BankService
from khata.domain.employee import EmployeeService
from khata.domain.party import PartyService
from khata.domain.policy import LedgerPolicy
from khata.domain.salary import SalaryService
from khata.domain.transaction import TransactionService


@pytest.fixture(autouse=True)
def clear_policy_env(monkeypatch):
    """Keep ledger guards at their defaults regardless of the caller's shell."""
    monkeypatch.delenv("KHATA_ALLOW_OVERPAYMENT", raising=False)
    monkeypatch.delenv("KHATA_ALLOW_OVERDRAFT", raising=False)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests that open their own connection
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def party_service(temp_db):
    """Create a PartyService with a temporary database."""
    return PartyService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with every ledger guard on."""
    return TransactionService(temp_db)


@pytest.fixture
def permissive_transaction_service(temp_db):
    """Create a TransactionService with the ledger guards switched off."""
    return TransactionService(temp_db, LedgerPolicy.permissive())


@pytest.fixture
def bank_service(temp_db):
    """Create a BankService with a temporary database."""
    return BankService(temp_db)


@pytest.fixture
def employee_service(temp_db):
    """Create an EmployeeService with a temporary database."""
    return EmployeeService(temp_db)


@pytest.fixture
def salary_service(temp_db):
    """Create a SalaryService with a temporary database."""
    return SalaryService(temp_db)


def _create_party(party_service, business_name):
    party_service.create_party(
        business_name=business_name,
        phone_number="0221234567",
        bank_account_number="00112233",
        bank_name="SBI",
        contact_name="Ravi",
        contact_mobile="9876543210",
    )
    return party_service.get_party(business_name)


@pytest.fixture
def make_party(party_service):
    """Factory creating parties with placeholder contact details."""

    def make(business_name="Acme"):
        return _create_party(party_service, business_name)

    return make


@pytest.fixture
def sample_party(make_party):
    """Create the party 'Acme'."""
    return make_party()


@pytest.fixture
def funded_bank(bank_service):
    """Put 10,000 in the bank so non-cash payments pass the funds guard."""
    bank_service.deposit(Decimal("10000"), date(2024, 1, 1))
    return bank_service


@pytest.fixture
def sample_employee(employee_service):
    """Create an employee paid 10,000 for the 1st to the 30th."""
    employee_service.create_employee(
        "Suresh",
        basic_salary=Decimal("10000"),
        salary_period_start=1,
        salary_period_end=30,
    )
    return employee_service.get_employee("Suresh")


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
