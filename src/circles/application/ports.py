"""Application ports (interfaces). Implemented by infrastructure adapters."""

from collections.abc import Collection
from typing import Protocol

from circles.domain import Contact, Entity, Relationship


class EntityLookup(Protocol):
    """Resolves a contact id to what the graph displays."""

    def get_entity(self, contact_id: str) -> Entity | None:
        """Return id and display name for the contact, or None."""
        ...


class RelationshipLookup(Protocol):
    def incident_relationships(
        self, contact_id: str, allowed_types: Collection[str] | None = None
    ) -> list[Relationship]:
        """Return every relationship where contact_id is either endpoint.

        When allowed_types is given and non-empty, only relationships whose
        type is in it are returned.
        """
        ...


class ContactRepository(EntityLookup, Protocol):
    """Persists and queries contacts with their phones and emails."""

    def add(self, contact: Contact) -> None:
        ...

    def update(self, contact: Contact) -> bool:
        """Replace the stored contact. Returns False if not found."""
        ...

    def delete(self, contact_id: str) -> bool:
        """Delete the contact. Returns False if not found."""
        ...

    def get_by_id(self, contact_id: str) -> Contact | None:
        ...

    def list_all(self) -> list[Contact]:
        """Return all contacts in any stable order."""
        ...


class RelationshipRepository(RelationshipLookup, Protocol):
    def add(self, relationship: Relationship) -> None:
        ...

    def delete(self, relationship_id: str) -> bool:
        ...

    def get_by_id(self, relationship_id: str) -> Relationship | None:
        ...

    def delete_for_contact(self, contact_id: str) -> int:
        """Delete every relationship touching the contact. Returns how many."""
        ...
