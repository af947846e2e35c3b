"""Party directory service."""

import logging
from typing import Optional

from khata.database.base import Database
from khata.domain import errors
from khata.domain.entities import Party as PartyEntity
from khata.domain.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

PARTY_FIELDS = (
    ("business_name", "business name"),
    ("phone_number", "phone number"),
    ("bank_account_number", "bank account number"),
    ("bank_name", "bank name"),
    ("contact_name", "contact name"),
    ("contact_mobile", "contact mobile"),
)


class PartyService:
    """Service for managing parties."""

    def __init__(self, db: Database):
        """Initialize party service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_party(
        self,
        business_name: str,
        phone_number: str,
        bank_account_number: str,
        bank_name: str,
        contact_name: str,
        contact_mobile: str,
    ) -> int:
        """Create a new party.

        Every field is required. The business name is the key other records
        use to refer to the party.

        Returns:
            Party ID

        Raises:
            ValidationError: If any field is empty
            ConflictError: If a party with this business name already exists
        """
        values = {
            "business_name": business_name,
            "phone_number": phone_number,
            "bank_account_number": bank_account_number,
            "bank_name": bank_name,
            "contact_name": contact_name,
            "contact_mobile": contact_mobile,
        }
        values = {key: (value or "").strip() for key, value in values.items()}
        missing = [label for key, label in PARTY_FIELDS if not values[key]]
        if missing:
            raise ValidationError(errors.missing_fields("add party", missing))

        if self.db.get_party(values["business_name"]) is not None:
            raise ConflictError(f"Party '{values['business_name']}' already exists")

        with self.db.atomic("add party"):
            party_id = self.db.create_party(**values)
        logger.info("Created party %s", values["business_name"])
        return party_id

    def get_party(self, business_name: str) -> Optional[PartyEntity]:
        """Get party by business name.

        Returns:
            Party entity or None if not found
        """
        return self.db.get_party(business_name)

    def require_party(self, business_name: str) -> PartyEntity:
        """Get party by business name or raise NotFoundError."""
        party = self.db.get_party(business_name)
        if party is None:
            raise NotFoundError(errors.party_not_found(business_name))
        return party

    def list_parties(self, search: Optional[str] = None) -> list[PartyEntity]:
        """List parties ordered by business name.

        Args:
            search: Optional filter. Business and contact names match
                case-insensitively; phone numbers match as substrings.
        """
        parties = self.db.list_parties()
        if not search:
            return parties

        needle = search.strip().lower()
        return [
            p
            for p in parties
            if needle in p.business_name.lower()
            or needle in p.contact_name.lower()
            or needle in p.phone_number
            or needle in p.contact_mobile
        ]

    def update_party(
        self,
        business_name: str,
        phone_number: Optional[str] = None,
        bank_account_number: Optional[str] = None,
        bank_name: Optional[str] = None,
        contact_name: Optional[str] = None,
        contact_mobile: Optional[str] = None,
    ) -> None:
        """Update a party's contact and bank details.

        The business name cannot change because transactions refer to it.
        Fields left as None are not updated; empty strings are rejected.

        Raises:
            NotFoundError: If the party doesn't exist
            ValidationError: If a provided field is blank
        """
        self.require_party(business_name)

        changes = {
            "phone_number": phone_number,
            "bank_account_number": bank_account_number,
            "bank_name": bank_name,
            "contact_name": contact_name,
            "contact_mobile": contact_mobile,
        }
        changes = {key: value.strip() for key, value in changes.items() if value is not None}
        blank = [label for key, label in PARTY_FIELDS if key in changes and not changes[key]]
        if blank:
            raise ValidationError(errors.missing_fields("update party", blank))
        if not changes:
            return

        with self.db.atomic("update party"):
            self.db.update_party(business_name, **changes)
        logger.info("Updated party %s (%s)", business_name, ", ".join(sorted(changes)))
