"""Application layer: use cases, ports, and DTOs. Depends only on domain."""

from circles.application.contact_service import ContactService
from circles.application.dto import (
    ContactCreated,
    ContactData,
    EmailData,
    Invalid,
    NotFound,
    PhoneData,
    RelationshipData,
    RelationshipView,
)
from circles.application.local_graph import clamp_depth, expand, normalize_types
from circles.application.ports import (
    ContactRepository,
    EntityLookup,
    RelationshipLookup,
    RelationshipRepository,
)
from circles.application.relationship_service import RelationshipService

__all__ = [
    "ContactCreated",
    "ContactData",
    "ContactRepository",
    "ContactService",
    "EmailData",
    "EntityLookup",
    "Invalid",
    "NotFound",
    "PhoneData",
    "RelationshipData",
    "RelationshipLookup",
    "RelationshipRepository",
    "RelationshipService",
    "RelationshipView",
    "clamp_depth",
    "expand",
    "normalize_types",
]
