"""Infrastructure layer: concrete implementations of application ports."""

from circles.infrastructure.memory_repository import (
    InMemoryContactRepository,
    InMemoryRelationshipRepository,
)
from circles.infrastructure.persistence.neo4j_repository import (
    Neo4jContactRepository,
    Neo4jRelationshipRepository,
)
from circles.infrastructure.schema import ensure_constraints

__all__ = [
    "InMemoryContactRepository",
    "InMemoryRelationshipRepository",
    "Neo4jContactRepository",
    "Neo4jRelationshipRepository",
    "ensure_constraints",
]
