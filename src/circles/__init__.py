"""
Circles core: clean-architecture layout.

- domain: entities (Contact, Relationship) and local graph value objects. No outer dependencies.
- application: use cases (ContactService, RelationshipService, local graph expand), ports, DTOs.
- infrastructure: adapters (in-memory and Neo4j repositories, phone normalization).
"""

from circles.application import (
    ContactCreated,
    ContactData,
    ContactRepository,
    ContactService,
    EmailData,
    Invalid,
    NotFound,
    PhoneData,
    RelationshipData,
    RelationshipRepository,
    RelationshipService,
    RelationshipView,
    expand,
)
from circles.domain import Contact, LocalGraph, Relationship
from circles.infrastructure import (
    InMemoryContactRepository,
    InMemoryRelationshipRepository,
    Neo4jContactRepository,
    Neo4jRelationshipRepository,
)

__all__ = [
    "Contact",
    "ContactCreated",
    "ContactData",
    "ContactRepository",
    "ContactService",
    "EmailData",
    "InMemoryContactRepository",
    "InMemoryRelationshipRepository",
    "Invalid",
    "LocalGraph",
    "Neo4jContactRepository",
    "Neo4jRelationshipRepository",
    "NotFound",
    "PhoneData",
    "Relationship",
    "RelationshipData",
    "RelationshipRepository",
    "RelationshipService",
    "RelationshipView",
    "expand",
]
