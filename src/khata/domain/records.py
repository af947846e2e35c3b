"""Normalization of raw persisted records into domain entities.

Records exported from the hosted document store are loosely shaped dicts with
camelCase keys whose fields changed between app versions. The functions here
turn one such dict into a typed entity, applying the same rules the command
handlers apply to fresh input.
"""

from datetime import date, datetime, UTC
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from dateutil import parser as date_parser

from khata.domain.entities import (
    BankDepositRecord,
    Employee,
    Party,
    Payment,
    PaymentMethod,
    Purchase,
    Return,
    Salary,
    Transaction,
    TransactionKind,
)
from khata.domain import errors
from khata.domain.errors import ValidationError
from khata.domain.gst import compute_gst

PAISE = Decimal("0.01")

_METHOD_ALIASES = {
    "cash": PaymentMethod.CASH,
    "neft": PaymentMethod.NEFT,
    "nft": PaymentMethod.NEFT,
    "check": PaymentMethod.CHECK,
    "cheque": PaymentMethod.CHECK,
}

_KIND_ALIASES = {
    "purchase": TransactionKind.PURCHASE,
    "purchases": TransactionKind.PURCHASE,
    "payment": TransactionKind.PAYMENT,
    "payments": TransactionKind.PAYMENT,
    "return": TransactionKind.RETURN,
    "returns": TransactionKind.RETURN,
}


def parse_payment_method(value: Any) -> PaymentMethod:
    """Map a stored or typed payment method onto PaymentMethod.

    Accepts the legacy ``NFT`` spelling and ``Cheque``, case-insensitively.
    """
    if isinstance(value, PaymentMethod):
        return value
    key = str(value or "").strip().lower()
    if key not in _METHOD_ALIASES:
        raise ValidationError(
            f"Unknown payment method '{value}' (expected Cash, NEFT or Check)"
        )
    return _METHOD_ALIASES[key]


def parse_transaction_kind(value: Any) -> TransactionKind:
    """Map a record ``type`` or collection name onto TransactionKind."""
    if isinstance(value, TransactionKind):
        return value
    key = str(value or "").strip().lower()
    if key not in _KIND_ALIASES:
        raise ValidationError(f"Unknown transaction kind '{value}'")
    return _KIND_ALIASES[key]


def parse_record_date(value: Any) -> date:
    """Parse an ISO-ish date string, date or datetime into a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not str(value).strip():
        raise ValidationError("Record is missing a date")
    try:
        return date_parser.isoparse(str(value).strip()).date()
    except ValueError as e:
        raise ValidationError(f"Could not parse record date '{value}': {e}")


def parse_record_amount(value: Any, field: str = "amount") -> Decimal:
    """Parse a numeric or numeric-string amount into a Decimal."""
    if value is None or value == "":
        raise ValidationError(f"Record is missing {field}")
    if isinstance(value, float):
        value = repr(value)
    try:
        amount = Decimal(str(value).replace(",", "").strip())
    except InvalidOperation:
        raise ValidationError(f"Could not parse {field} '{value}'")
    if not amount.is_finite():
        raise ValidationError(f"Could not parse {field} '{value}'")
    return amount


def require_paise(label: str, amount: Decimal) -> None:
    """Reject amounts finer than one paisa."""
    if amount != amount.quantize(PAISE):
        raise ValidationError(errors.too_many_decimals(label, amount))


def _optional_text(record: Mapping[str, Any], key: str) -> Optional[str]:
    value = record.get(key)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _purchase_has_gst(record: Mapping[str, Any]) -> bool:
    if "hasGST" in record:
        return bool(record["hasGST"])
    gst_amount = record.get("gstAmount")
    if gst_amount is not None and parse_record_amount(gst_amount, "gstAmount") == 0:
        return False
    return True


def normalize_transaction(
    record: Mapping[str, Any],
    kind: Optional[Any] = None,
    record_id: int = 0,
) -> Transaction:
    """Build a Purchase, Payment or Return from a raw record.

    Args:
        record: Raw record dict
        kind: Transaction kind or collection name; falls back to the record's
            ``type`` field
        record_id: ID to give the entity

    Raises:
        ValidationError: If the record is missing required data
    """
    kind = parse_transaction_kind(kind if kind is not None else record.get("type"))
    party = _optional_text(record, "party")
    if party is None:
        raise ValidationError(f"{kind.value.capitalize()} record is missing a party")
    txn_date = parse_record_date(record.get("date"))

    if kind is TransactionKind.PURCHASE:
        raw_base = record.get("baseAmount")
        if raw_base is None:
            raw_base = record.get("amount")
        base_amount = parse_record_amount(raw_base, "baseAmount")
        if base_amount <= 0:
            raise ValidationError(f"Purchase base amount must be positive (got {base_amount})")
        require_paise("Purchase base amount", base_amount)
        has_gst = _purchase_has_gst(record)
        gst_amount, amount = compute_gst(base_amount, has_gst)
        return Purchase(
            id=record_id,
            party=party,
            date=txn_date,
            amount=amount,
            base_amount=base_amount,
            gst_amount=gst_amount,
            has_gst=has_gst,
            bill_number=_optional_text(record, "billNumber") or "",
            comment=_optional_text(record, "comment"),
        )

    amount = parse_record_amount(record.get("amount"))
    if amount < 0:
        raise ValidationError(f"{kind.value.capitalize()} amount cannot be negative (got {amount})")
    require_paise(f"{kind.value.capitalize()} amount", amount)

    if kind is TransactionKind.PAYMENT:
        method = parse_payment_method(record.get("method") or record.get("paymentMethod"))
        return Payment(
            id=record_id,
            party=party,
            date=txn_date,
            amount=amount,
            method=method,
            check_number=_optional_text(record, "checkNumber") if method is PaymentMethod.CHECK else None,
            comment=_optional_text(record, "comment"),
        )

    comment = _optional_text(record, "comment")
    if comment is None:
        raise ValidationError("Return record is missing the mandatory comment")
    return Return(
        id=record_id,
        party=party,
        date=txn_date,
        amount=amount,
        comment=comment,
        bill_number=_optional_text(record, "billNumber"),
    )


def normalize_deposit(record: Mapping[str, Any], record_id: int = 0) -> BankDepositRecord:
    """Build a BankDepositRecord from a raw bank-deposit log record."""
    return BankDepositRecord(
        id=record_id,
        amount=parse_record_amount(record.get("amount")),
        date=parse_record_date(record.get("date")),
        party=_optional_text(record, "party"),
        is_payment_deduction=bool(record.get("isPaymentDeduction", False)),
    )


def normalize_salary(record: Mapping[str, Any], record_id: int = 0) -> Salary:
    """Build a Salary from a raw salary record."""
    employee_name = _optional_text(record, "employeeName") or _optional_text(record, "employee")
    if employee_name is None:
        raise ValidationError("Salary record is missing an employee name")
    amount = parse_record_amount(record.get("amount"))
    if amount < 0:
        raise ValidationError(f"Salary amount cannot be negative (got {amount})")
    return Salary(
        id=record_id,
        employee_name=employee_name,
        amount=amount,
        date=parse_record_date(record.get("date")),
        comment=_optional_text(record, "comment"),
    )


def normalize_party(record: Mapping[str, Any], record_id: int = 0) -> Party:
    """Build a Party from a raw directory record.

    Older records used ``bankNumber`` for the account number. Missing contact
    fields become empty strings; only the business name is mandatory.
    """
    business_name = _optional_text(record, "businessName")
    if business_name is None:
        raise ValidationError("Party record is missing a business name")
    return Party(
        id=record_id,
        business_name=business_name,
        phone_number=_optional_text(record, "phoneNumber") or "",
        bank_account_number=(
            _optional_text(record, "bankAccountNumber") or _optional_text(record, "bankNumber") or ""
        ),
        bank_name=_optional_text(record, "bankName") or "",
        contact_name=_optional_text(record, "contactName") or "",
        contact_mobile=_optional_text(record, "contactMobile") or "",
        created_at=datetime.now(UTC),
    )


def _optional_day(record: Mapping[str, Any], key: str) -> Optional[int]:
    value = record.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, (date, datetime)) or not str(value).strip().isdigit():
        # Some versions stored a full date; only the day of month matters
        return parse_record_date(value).day
    return int(str(value).strip())


def normalize_employee(record: Mapping[str, Any], record_id: int = 0) -> Employee:
    """Build an Employee from a raw employee record."""
    name = _optional_text(record, "name")
    if name is None:
        raise ValidationError("Employee record is missing a name")
    basic_salary = record.get("basicSalary")
    last_updated = record.get("salaryLastUpdated")
    return Employee(
        id=record_id,
        name=name,
        basic_salary=(
            parse_record_amount(basic_salary, "basicSalary") if basic_salary not in (None, "") else None
        ),
        salary_period_start=_optional_day(record, "salaryPeriodStart"),
        salary_period_end=_optional_day(record, "salaryPeriodEnd"),
        salary_last_updated=date_parser.isoparse(str(last_updated)) if last_updated else None,
    )
