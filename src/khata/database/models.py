"""SQLAlchemy models for khata database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Date,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()

# Wide enough for unrounded 5% GST on paise-precision amounts
Money = Numeric(14, 4)


class Party(Base):
    """Party (vendor/customer) model."""

    __tablename__ = "parties"

    id = Column(Integer, primary_key=True)
    business_name = Column(String, unique=True, nullable=False)
    phone_number = Column(String, nullable=False)
    bank_account_number = Column(String, nullable=False)
    bank_name = Column(String, nullable=False)
    contact_name = Column(String, nullable=False)
    contact_mobile = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Employee(Base):
    """Employee model with salary terms."""

    __tablename__ = "employees"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    basic_salary = Column(Money, nullable=True)
    salary_period_start = Column(Integer, nullable=True)
    salary_period_end = Column(Integer, nullable=True)
    salary_last_updated = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Transaction(Base):
    """Purchase, payment or return, discriminated by ``kind``.

    The three kinds share a table so that ``id`` is a single creation order
    across them; kind-specific columns are null for the other kinds.
    """

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    kind = Column(String, nullable=False, index=True)
    party = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False)
    amount = Column(Money, nullable=False)
    comment = Column(String, nullable=True)
    bill_number = Column(String, nullable=True)

    # Purchases
    base_amount = Column(Money, nullable=True)
    gst_amount = Column(Money, nullable=True)
    has_gst = Column(Boolean, nullable=True)

    # Payments
    method = Column(String, nullable=True)
    check_number = Column(String, nullable=True)

    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Salary(Base):
    """Salary payment model."""

    __tablename__ = "salaries"

    id = Column(Integer, primary_key=True)
    employee_name = Column(String, nullable=False, index=True)
    amount = Column(Money, nullable=False)
    date = Column(Date, nullable=False)
    comment = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class BankDeposit(Base):
    """Bank deposit log model (signed amounts)."""

    __tablename__ = "bank_deposits"

    id = Column(Integer, primary_key=True)
    amount = Column(Money, nullable=False)
    date = Column(Date, nullable=False)
    party = Column(String, nullable=True)
    is_payment_deduction = Column(Boolean, default=False, nullable=False)
    # Set for deduction records created alongside a payment; null on legacy rows
    payment_id = Column(Integer, nullable=True, index=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class BankMeta(Base):
    """Single-row table holding the running bank balance."""

    __tablename__ = "bank_meta"

    id = Column(Integer, primary_key=True)
    balance = Column(Money, nullable=False, default=0)
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
