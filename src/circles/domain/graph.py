"""Value objects for a contact's local relationship graph."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Entity:
    """The part of a contact the graph needs: its id and display name."""

    id: str
    display_name: str


@dataclass(frozen=True)
class GraphNode:
    id: str
    display_name: str


@dataclass(frozen=True)
class GraphEdge:
    id: str
    from_id: str
    to_id: str
    type: str
    directed: bool
    strength: int | None = None


@dataclass(frozen=True)
class LocalGraph:
    """Nodes in discovery order (seed first) and edges, each id at most once."""

    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)

    def node_ids(self) -> list[str]:
        return [n.id for n in self.nodes]

    def edge_ids(self) -> list[str]:
        return [e.id for e in self.edges]
