"""Domain layer: entities and value objects. No dependencies on outer layers."""

from circles.domain.entities import (
    DEFAULT_RELATIONSHIP_TYPE,
    Contact,
    ContactEmail,
    ContactPhone,
    Relationship,
)
from circles.domain.graph import Entity, GraphEdge, GraphNode, LocalGraph

__all__ = [
    "DEFAULT_RELATIONSHIP_TYPE",
    "Contact",
    "ContactEmail",
    "ContactPhone",
    "Entity",
    "GraphEdge",
    "GraphNode",
    "LocalGraph",
    "Relationship",
]
