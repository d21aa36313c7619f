"""In-memory implementations of the contact and relationship repositories (no DB)."""

from collections.abc import Collection
from dataclasses import replace

from circles.domain import Contact, Entity, Relationship
from circles.infrastructure.phone import searchable_phone


def _stored(contact: Contact) -> Contact:
    """Normalize phones; phones and emails come back sorted, as from Neo4j."""
    phones = tuple(
        sorted(
            (replace(p, phone_normalized=searchable_phone(p.phone)) for p in contact.phones),
            key=lambda p: p.phone,
        )
    )
    emails = tuple(sorted(contact.emails, key=lambda e: e.email))
    return replace(contact, phones=phones, emails=emails)


class InMemoryContactRepository:
    """Stores contacts in memory. Order preserved by insertion."""

    def __init__(self) -> None:
        self._by_id: dict[str, Contact] = {}

    def add(self, contact: Contact) -> None:
        if contact.id in self._by_id:
            return
        self._by_id[contact.id] = _stored(contact)

    def update(self, contact: Contact) -> bool:
        if contact.id not in self._by_id:
            return False
        self._by_id[contact.id] = _stored(contact)
        return True

    def delete(self, contact_id: str) -> bool:
        return self._by_id.pop(contact_id, None) is not None

    def get_by_id(self, contact_id: str) -> Contact | None:
        return self._by_id.get(contact_id)

    def get_entity(self, contact_id: str) -> Entity | None:
        contact = self._by_id.get(contact_id)
        if contact is None:
            return None
        return Entity(id=contact.id, display_name=contact.display_name)

    def list_all(self) -> list[Contact]:
        return list(self._by_id.values())


class InMemoryRelationshipRepository:
    """Stores relationships in memory. Order preserved by insertion."""

    def __init__(self) -> None:
        self._by_id: dict[str, Relationship] = {}

    def add(self, relationship: Relationship) -> None:
        self._by_id.setdefault(relationship.id, relationship)

    def delete(self, relationship_id: str) -> bool:
        return self._by_id.pop(relationship_id, None) is not None

    def get_by_id(self, relationship_id: str) -> Relationship | None:
        return self._by_id.get(relationship_id)

    def delete_for_contact(self, contact_id: str) -> int:
        doomed = [rid for rid, rel in self._by_id.items() if rel.touches(contact_id)]
        for rid in doomed:
            del self._by_id[rid]
        return len(doomed)

    def incident_relationships(
        self, contact_id: str, allowed_types: Collection[str] | None = None
    ) -> list[Relationship]:
        return [
            rel
            for rel in self._by_id.values()
            if rel.touches(contact_id)
            and (not allowed_types or rel.type in allowed_types)
        ]
