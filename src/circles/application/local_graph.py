"""Local graph: bounded breadth-first expansion around one contact.

The graph is never loaded up front. Each layer asks the relationship store for
the relationships touching the contacts it reached, so the cost is bounded by
max_depth and the fan-out of the contacts involved.
"""

import logging
from collections import deque
from collections.abc import Iterable

from circles.application.dto import NotFound
from circles.application.ports import EntityLookup, RelationshipLookup
from circles.domain import GraphEdge, GraphNode, LocalGraph

logger = logging.getLogger(__name__)

MIN_DEPTH = 1
MAX_DEPTH = 3


def clamp_depth(depth: int | None) -> int:
    """Clamp depth into [MIN_DEPTH, MAX_DEPTH]. None means MIN_DEPTH."""
    if depth is None:
        return MIN_DEPTH
    return max(MIN_DEPTH, min(MAX_DEPTH, int(depth)))


def normalize_types(types: Iterable[str] | None) -> frozenset[str] | None:
    """Strip entries and drop blanks. An empty filter means no filter (None)."""
    if types is None:
        return None
    cleaned = frozenset(t.strip() for t in types if t and t.strip())
    return cleaned or None


def expand(
    seed_id: str,
    max_depth: int,
    allowed_types: Iterable[str] | None = None,
    *,
    entities: EntityLookup,
    relationships: RelationshipLookup,
) -> LocalGraph | NotFound:
    """Return the contacts and relationships within max_depth hops of seed_id.

    Edge direction is ignored for reachability. A contact first reached at
    depth d is expanded only if d < max_depth. Endpoints that no longer
    resolve are left out of the nodes but their relationship is kept.
    """
    seed = entities.get_entity(seed_id)
    if seed is None:
        return NotFound(id=seed_id)

    max_depth = clamp_depth(max_depth)
    types = normalize_types(allowed_types)

    nodes: dict[str, GraphNode] = {seed.id: GraphNode(seed.id, seed.display_name)}
    edges: list[GraphEdge] = []
    seen_edges: set[str] = set()
    visited: set[str] = {seed.id}
    frontier: deque[tuple[str, int]] = deque([(seed.id, 0)])

    while frontier:
        contact_id, depth = frontier.popleft()
        if depth >= max_depth:
            continue
        for rel in relationships.incident_relationships(contact_id, types):
            if types is not None and rel.type not in types:
                continue
            if rel.id in seen_edges:
                continue
            seen_edges.add(rel.id)
            edges.append(
                GraphEdge(
                    id=rel.id,
                    from_id=rel.from_contact_id,
                    to_id=rel.to_contact_id,
                    type=rel.type,
                    directed=rel.directed,
                    strength=rel.strength,
                )
            )
            for other_id in (rel.from_contact_id, rel.to_contact_id):
                if other_id not in nodes:
                    entity = entities.get_entity(other_id)
                    if entity is not None:
                        nodes[other_id] = GraphNode(entity.id, entity.display_name)
                if other_id not in visited:
                    visited.add(other_id)
                    frontier.append((other_id, depth + 1))

    logger.debug(
        "Local graph for %s (depth=%d, types=%s): %d nodes, %d edges",
        seed_id,
        max_depth,
        sorted(types) if types else "any",
        len(nodes),
        len(edges),
    )
    return LocalGraph(nodes=list(nodes.values()), edges=edges)
