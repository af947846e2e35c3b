"""Mapper functions to convert between domain models and SQLAlchemy models.

Purchases, payments and returns share one ORM table; ``transaction_to_domain``
picks the domain class from the stored ``kind``.
"""

from khata.domain import entities as domain
from khata.database.models import (
    BankDeposit as ORMBankDeposit,
    Employee as ORMEmployee,
    Party as ORMParty,
    Salary as ORMSalary,
    Transaction as ORMTransaction,
)


def party_to_domain(orm_party: ORMParty) -> domain.Party:
    """Convert SQLAlchemy Party model to domain Party entity."""
    return domain.Party(
        id=orm_party.id,
        business_name=orm_party.business_name,
        phone_number=orm_party.phone_number,
        bank_account_number=orm_party.bank_account_number,
        bank_name=orm_party.bank_name,
        contact_name=orm_party.contact_name,
        contact_mobile=orm_party.contact_mobile,
        created_at=orm_party.created_at,
    )


def employee_to_domain(orm_employee: ORMEmployee) -> domain.Employee:
    """Convert SQLAlchemy Employee model to domain Employee entity."""
    return domain.Employee(
        id=orm_employee.id,
        name=orm_employee.name,
        basic_salary=orm_employee.basic_salary,
        salary_period_start=orm_employee.salary_period_start,
        salary_period_end=orm_employee.salary_period_end,
        salary_last_updated=orm_employee.salary_last_updated,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction row to a Purchase, Payment or Return."""
    kind = domain.TransactionKind(orm_transaction.kind)
    if kind is domain.TransactionKind.PURCHASE:
        return domain.Purchase(
            id=orm_transaction.id,
            party=orm_transaction.party,
            date=orm_transaction.date,
            amount=orm_transaction.amount,
            base_amount=orm_transaction.base_amount,
            gst_amount=orm_transaction.gst_amount,
            has_gst=bool(orm_transaction.has_gst),
            bill_number=orm_transaction.bill_number,
            comment=orm_transaction.comment,
        )
    if kind is domain.TransactionKind.PAYMENT:
        return domain.Payment(
            id=orm_transaction.id,
            party=orm_transaction.party,
            date=orm_transaction.date,
            amount=orm_transaction.amount,
            method=domain.PaymentMethod(orm_transaction.method),
            check_number=orm_transaction.check_number,
            comment=orm_transaction.comment,
        )
    return domain.Return(
        id=orm_transaction.id,
        party=orm_transaction.party,
        date=orm_transaction.date,
        amount=orm_transaction.amount,
        comment=orm_transaction.comment,
        bill_number=orm_transaction.bill_number,
    )


def salary_to_domain(orm_salary: ORMSalary) -> domain.Salary:
    """Convert SQLAlchemy Salary model to domain Salary entity."""
    return domain.Salary(
        id=orm_salary.id,
        employee_name=orm_salary.employee_name,
        amount=orm_salary.amount,
        date=orm_salary.date,
        comment=orm_salary.comment,
    )


def bank_deposit_to_domain(orm_deposit: ORMBankDeposit) -> domain.BankDepositRecord:
    """Convert SQLAlchemy BankDeposit model to domain BankDepositRecord entity."""
    return domain.BankDepositRecord(
        id=orm_deposit.id,
        amount=orm_deposit.amount,
        date=orm_deposit.date,
        party=orm_deposit.party,
        is_payment_deduction=orm_deposit.is_payment_deduction,
        payment_id=orm_deposit.payment_id,
    )
