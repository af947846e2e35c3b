"""Configurable ledger rules.

Earlier versions of the bookkeeping app disagreed on whether payments may
exceed the amount owed and whether non-cash payments may overdraw the bank.
Both checks are on by default and can be switched off per invocation or
through the environment.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ALLOW_OVERPAYMENT_ENV = "KHATA_ALLOW_OVERPAYMENT"
ALLOW_OVERDRAFT_ENV = "KHATA_ALLOW_OVERDRAFT"

_TRUTHY = {"1", "true", "yes", "on"}


def _is_truthy(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class LedgerPolicy:
    """Guards applied by the payment and withdrawal command handlers.

    Attributes:
        enforce_overpayment_guard: Reject payments larger than the total owed
            to the party, and any payment when nothing is owed.
        enforce_bank_funds_guard: Reject bank outflows (non-cash payments and
            withdrawals) larger than the current bank balance.
    """

    enforce_overpayment_guard: bool = True
    enforce_bank_funds_guard: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LedgerPolicy":
        """Build a policy from ``KHATA_ALLOW_OVERPAYMENT``/``KHATA_ALLOW_OVERDRAFT``."""
        if environ is None:
            environ = os.environ
        return cls(
            enforce_overpayment_guard=not _is_truthy(environ.get(ALLOW_OVERPAYMENT_ENV)),
            enforce_bank_funds_guard=not _is_truthy(environ.get(ALLOW_OVERDRAFT_ENV)),
        )

    @classmethod
    def permissive(cls) -> "LedgerPolicy":
        """Policy with every guard disabled."""
        return cls(enforce_overpayment_guard=False, enforce_bank_funds_guard=False)
