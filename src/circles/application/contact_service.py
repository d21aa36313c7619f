"""Contact create, update, delete, get, and search."""

import logging
import re
from dataclasses import replace

from circles.application.dto import (
    ContactCreated,
    ContactData,
    Invalid,
    NotFound,
)
from circles.application.ports import ContactRepository, RelationshipRepository
from circles.domain import Contact, ContactEmail, ContactPhone
from circles.domain.entities import utc_now

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D+")


def _clean_note(note: str | None) -> str | None:
    return None if note is None else str(note)


def _build_phones(data: ContactData) -> tuple[ContactPhone, ...]:
    """Drop blank entries. phone_normalized is filled in by the repository."""
    return tuple(
        ContactPhone(phone=p.phone.strip(), label=p.label)
        for p in data.phones
        if (p.phone or "").strip()
    )


def _build_emails(data: ContactData) -> tuple[ContactEmail, ...]:
    return tuple(
        ContactEmail(email=e.email.strip(), label=e.label)
        for e in data.emails
        if (e.email or "").strip()
    )


def _matches(contact: Contact, needle: str, needle_digits: str) -> bool:
    if needle in contact.display_name.lower():
        return True
    if any(needle in e.email.lower() for e in contact.emails):
        return True
    for p in contact.phones:
        if needle in p.phone.lower():
            return True
        if needle_digits and needle_digits in _NON_DIGITS.sub("", p.phone_normalized):
            return True
    return False


class ContactService:
    """Contacts and their phones/emails. Deleting a contact removes its relationships."""

    def __init__(
        self,
        repository: ContactRepository,
        relationships: RelationshipRepository,
    ) -> None:
        self._repo = repository
        self._relationships = relationships

    def create_contact(self, data: ContactData) -> ContactCreated | Invalid:
        """Store a new contact. Display name is required."""
        name = (data.display_name or "").strip()
        if not name:
            return Invalid(reason="displayName is required")

        now = utc_now()
        contact = Contact(
            display_name=name,
            note=_clean_note(data.note),
            phones=_build_phones(data),
            emails=_build_emails(data),
            created_at=now,
            updated_at=now,
        )
        self._repo.add(contact)
        logger.info("Created contact %s", contact.id)
        stored = self._repo.get_by_id(contact.id)
        return ContactCreated(contact=stored or contact)

    def update_contact(
        self, contact_id: str, data: ContactData
    ) -> Contact | NotFound | Invalid:
        """Replace name, note, phones, and emails. created_at is kept."""
        existing = self._repo.get_by_id(contact_id)
        if existing is None:
            return NotFound(id=contact_id)
        name = (data.display_name or "").strip()
        if not name:
            return Invalid(reason="displayName is required")

        updated = replace(
            existing,
            display_name=name,
            note=_clean_note(data.note),
            phones=_build_phones(data),
            emails=_build_emails(data),
            updated_at=utc_now(),
        )
        if not self._repo.update(updated):
            return NotFound(id=contact_id)
        logger.info("Updated contact %s", contact_id)
        return self._repo.get_by_id(contact_id) or updated

    def get_contact(self, contact_id: str) -> Contact | None:
        return self._repo.get_by_id(contact_id)

    def delete_contact(self, contact_id: str) -> bool:
        """Delete the contact and every relationship touching it."""
        if self._repo.get_by_id(contact_id) is None:
            return False
        removed = self._relationships.delete_for_contact(contact_id)
        deleted = self._repo.delete(contact_id)
        logger.info(
            "Deleted contact %s (%d relationships removed)", contact_id, removed
        )
        return deleted

    def search_contacts(self, query: str | None) -> list[Contact]:
        """Case-insensitive partial match on name, email, or phone.

        A blank query returns every contact. Results are ordered by display
        name, ignoring case.
        """
        needle = (query or "").strip().lower()
        contacts = self._repo.list_all()
        if needle:
            needle_digits = _NON_DIGITS.sub("", needle)
            contacts = [c for c in contacts if _matches(c, needle, needle_digits)]
        return sorted(contacts, key=lambda c: c.display_name.lower())
