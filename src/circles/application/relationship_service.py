"""Relationship create, delete, and list for a contact."""

import logging

from circles.application.dto import (
    Invalid,
    NotFound,
    RelationshipData,
    RelationshipView,
)
from circles.application.ports import ContactRepository, RelationshipRepository
from circles.domain import Relationship
from circles.domain.entities import STRENGTH_MAX, STRENGTH_MIN, utc_now

logger = logging.getLogger(__name__)


def _parse_strength(raw: int | float | str | None) -> int | None | Invalid:
    """None or "" means unspecified. Anything else must be an integer in 1..5."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    invalid = Invalid(reason=f"strength must be {STRENGTH_MIN}-{STRENGTH_MAX}")
    if isinstance(raw, bool):
        return invalid
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return invalid
    if not value.is_integer() or not STRENGTH_MIN <= value <= STRENGTH_MAX:
        return invalid
    return int(value)


class RelationshipService:
    """Typed links between contacts. Parallel links between the same pair are allowed."""

    def __init__(
        self,
        contacts: ContactRepository,
        repository: RelationshipRepository,
    ) -> None:
        self._contacts = contacts
        self._repo = repository

    def create_relationship(
        self, data: RelationshipData
    ) -> RelationshipView | Invalid | NotFound:
        from_id = (data.from_contact_id or "").strip()
        to_id = (data.to_contact_id or "").strip()
        if not from_id or not to_id:
            return Invalid(reason="fromContactId and toContactId are required")
        if from_id == to_id:
            return Invalid(reason="cannot link contact to itself")
        strength = _parse_strength(data.strength)
        if isinstance(strength, Invalid):
            return strength

        for contact_id in (from_id, to_id):
            if self._contacts.get_entity(contact_id) is None:
                return NotFound(id=contact_id)

        now = utc_now()
        relationship = Relationship(
            from_contact_id=from_id,
            to_contact_id=to_id,
            type=data.type or "",
            directed=data.directed,
            strength=strength,
            note=data.note,
            created_at=now,
            updated_at=now,
        )
        self._repo.add(relationship)
        logger.info(
            "Created %s relationship %s (%s -> %s)",
            relationship.type,
            relationship.id,
            from_id,
            to_id,
        )
        # An endpoint deleted since the check above leaves nothing to show.
        return self._view(relationship) or NotFound(id=relationship.id)

    def delete_relationship(self, relationship_id: str) -> bool:
        existing = self._repo.get_by_id(relationship_id)
        if existing is None:
            return False
        deleted = self._repo.delete(relationship_id)
        if deleted:
            logger.info(
                "Deleted %s relationship %s (%s -> %s)",
                existing.type,
                relationship_id,
                existing.from_contact_id,
                existing.to_contact_id,
            )
        return deleted

    def list_for_contact(self, contact_id: str) -> list[RelationshipView]:
        """Relationships where the contact is either endpoint, most recently updated first.

        Relationships whose other endpoint no longer exists are left out.
        """
        views = []
        for rel in self._repo.incident_relationships(contact_id):
            view = self._view(rel)
            if view is not None:
                views.append(view)
        views.sort(key=lambda v: v.relationship.updated_at, reverse=True)
        return views

    def _view(self, relationship: Relationship) -> RelationshipView | None:
        source = self._contacts.get_entity(relationship.from_contact_id)
        target = self._contacts.get_entity(relationship.to_contact_id)
        if source is None or target is None:
            return None
        return RelationshipView(
            relationship=relationship,
            from_display_name=source.display_name,
            to_display_name=target.display_name,
        )
