"""Snapshot import domain service.

Loads a JSON export of the hosted document store (one list per collection
plus the ``bankMeta`` document) into the database.
"""

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from khata.database.base import Database
from khata.domain import errors as messages
from khata.domain.bank_ledger import rebuild_bank_balance
from khata.domain.employee import validate_salary_terms
from khata.domain.entities import Payment, Purchase, Return
from khata.domain.records import (
    normalize_deposit,
    normalize_employee,
    normalize_party,
    normalize_salary,
    normalize_transaction,
    parse_record_amount,
)

logger = logging.getLogger(__name__)

# Order matters: records are created in this order, so transactions keep the
# purchase/payment/return sequence of the export for same-day tie-breaks.
TRANSACTION_COLLECTIONS = ("purchases", "payments", "returns")


class ImportService:
    """Service for importing document-store snapshots."""

    def __init__(self, db: Database):
        """Initialize import service.

        Args:
            db: Database instance
        """
        self.db = db

    def import_file(self, path: str) -> dict[str, Any]:
        """Import a snapshot from a JSON file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file is not a JSON object
        """
        snapshot_path = Path(path)
        if not snapshot_path.exists():
            raise FileNotFoundError(f"Snapshot file not found: {path}")
        with open(snapshot_path, "r", encoding="utf-8") as f:
            try:
                snapshot = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Snapshot is not valid JSON: {e}")
        if not isinstance(snapshot, dict):
            raise ValueError("Snapshot must be a JSON object keyed by collection name")
        return self.import_snapshot(snapshot)

    def import_snapshot(self, snapshot: Mapping[str, Any]) -> dict[str, Any]:
        """Import every collection of a snapshot.

        Invalid records, and transactions or salaries naming a party or
        employee that is not in the directory, are skipped and reported.
        Parties and employees that already exist are skipped as duplicates.
        All accepted records are written in a single unit of work. Payments are imported as they were
        recorded: their bank effect comes from the snapshot's deduction records
        and ``bankMeta.balance``. Without a stored balance, the balance is
        rebuilt from the imported history.

        Returns:
            Dict with a count per collection, ``skipped``, ``errors`` and the
            resulting ``bank_balance``
        """
        counts = {name: 0 for name in ("parties", "employees", *TRANSACTION_COLLECTIONS, "salaries", "bank_deposits")}
        skipped = 0
        errors: list[str] = []

        with self.db.atomic("import snapshot"):
            for index, record in enumerate(snapshot.get("parties", []), start=1):
                try:
                    party = normalize_party(record)
                except ValueError as e:
                    errors.append(f"parties[{index}]: {e}")
                    continue
                if self.db.get_party(party.business_name) is not None:
                    skipped += 1
                    continue
                self.db.create_party(
                    business_name=party.business_name,
                    phone_number=party.phone_number,
                    bank_account_number=party.bank_account_number,
                    bank_name=party.bank_name,
                    contact_name=party.contact_name,
                    contact_mobile=party.contact_mobile,
                )
                counts["parties"] += 1

            for index, record in enumerate(snapshot.get("employees", []), start=1):
                try:
                    employee = normalize_employee(record)
                    validate_salary_terms(
                        employee.basic_salary,
                        employee.salary_period_start,
                        employee.salary_period_end,
                    )
                except ValueError as e:
                    errors.append(f"employees[{index}]: {e}")
                    continue
                if self.db.get_employee(employee.name) is not None:
                    skipped += 1
                    continue
                self.db.create_employee(
                    name=employee.name,
                    basic_salary=employee.basic_salary,
                    salary_period_start=employee.salary_period_start,
                    salary_period_end=employee.salary_period_end,
                    salary_last_updated=employee.salary_last_updated,
                )
                counts["employees"] += 1

            for collection in TRANSACTION_COLLECTIONS:
                for index, record in enumerate(snapshot.get(collection, []), start=1):
                    try:
                        txn = normalize_transaction(record, kind=collection)
                    except ValueError as e:
                        errors.append(f"{collection}[{index}]: {e}")
                        continue
                    if self.db.get_party(txn.party) is None:
                        errors.append(f"{collection}[{index}]: {messages.party_not_found(txn.party)}")
                        continue
                    self._create_transaction(txn)
                    counts[collection] += 1

            for index, record in enumerate(snapshot.get("salaries", []), start=1):
                try:
                    salary = normalize_salary(record)
                except ValueError as e:
                    errors.append(f"salaries[{index}]: {e}")
                    continue
                if self.db.get_employee(salary.employee_name) is None:
                    errors.append(f"salaries[{index}]: {messages.employee_not_found(salary.employee_name)}")
                    continue
                self.db.create_salary(
                    employee_name=salary.employee_name,
                    amount=salary.amount,
                    date=salary.date,
                    comment=salary.comment,
                )
                counts["salaries"] += 1

            for index, record in enumerate(snapshot.get("bankDeposits", []), start=1):
                try:
                    deposit = normalize_deposit(record)
                except ValueError as e:
                    errors.append(f"bankDeposits[{index}]: {e}")
                    continue
                self.db.create_bank_deposit(
                    amount=deposit.amount,
                    date=deposit.date,
                    party=deposit.party,
                    is_payment_deduction=deposit.is_payment_deduction,
                )
                counts["bank_deposits"] += 1

            stored_balance = (snapshot.get("bankMeta") or {}).get("balance")
            if stored_balance is not None:
                balance = parse_record_amount(stored_balance, "bankMeta.balance")
            else:
                balance = rebuild_bank_balance(self.db.list_bank_deposits(), self.db.list_payments())
            self.db.set_bank_balance(balance)

        logger.info(
            "Imported snapshot: %s; skipped %d, %d error(s)",
            ", ".join(f"{count} {name}" for name, count in counts.items()),
            skipped,
            len(errors),
        )
        return {**counts, "skipped": skipped, "errors": errors, "bank_balance": balance}

    def _create_transaction(self, txn) -> None:
        if isinstance(txn, Purchase):
            self.db.create_purchase(
                party=txn.party,
                date=txn.date,
                base_amount=txn.base_amount,
                gst_amount=txn.gst_amount,
                amount=txn.amount,
                has_gst=txn.has_gst,
                bill_number=txn.bill_number,
                comment=txn.comment,
            )
        elif isinstance(txn, Payment):
            self.db.create_payment(
                party=txn.party,
                date=txn.date,
                amount=txn.amount,
                method=txn.method,
                check_number=txn.check_number,
                comment=txn.comment,
            )
        elif isinstance(txn, Return):
            self.db.create_return(
                party=txn.party,
                date=txn.date,
                amount=txn.amount,
                comment=txn.comment,
                bill_number=txn.bill_number,
            )
        else:
            raise TypeError(f"Unsupported transaction type: {type(txn).__name__}")
