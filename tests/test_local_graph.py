"""Unit tests for local graph expansion. In-memory repositories only."""

from types import SimpleNamespace

from circles.application import NotFound, clamp_depth, expand, normalize_types
from circles.domain import Contact, Entity, LocalGraph, Relationship
from circles.infrastructure import (
    InMemoryContactRepository,
    InMemoryRelationshipRepository,
)


class _Store:
    """Contacts and relationships keyed by short names for readable assertions."""

    def __init__(self) -> None:
        self.contacts = InMemoryContactRepository()
        self.relationships = InMemoryRelationshipRepository()

    def contact(self, name: str) -> str:
        self.contacts.add(Contact(id=name, display_name=name.title()))
        return name

    def link(self, rel_id: str, a: str, b: str, rel_type: str = "friend", **kw) -> str:
        self.relationships.add(
            Relationship(id=rel_id, from_contact_id=a, to_contact_id=b, type=rel_type, **kw)
        )
        return rel_id

    def expand(self, seed: str, depth: int, types=None) -> LocalGraph:
        result = expand(
            seed, depth, types, entities=self.contacts, relationships=self.relationships
        )
        assert isinstance(result, LocalGraph)
        return result


def _chain() -> _Store:
    """a -friend- b -coworker- c -friend- d"""
    s = _Store()
    for name in ("a", "b", "c", "d"):
        s.contact(name)
    s.link("ab", "a", "b", "friend")
    s.link("bc", "b", "c", "coworker")
    s.link("cd", "c", "d", "friend")
    return s


def test_unknown_seed_is_not_found() -> None:
    s = _Store()
    result = expand(
        "ghost", 2, entities=s.contacts, relationships=s.relationships
    )
    assert isinstance(result, NotFound)
    assert result.id == "ghost"


def test_isolated_seed_returns_only_itself() -> None:
    s = _Store()
    s.contact("a")
    graph = s.expand("a", 3)
    assert graph.node_ids() == ["a"]
    assert graph.nodes[0].display_name == "A"
    assert graph.edges == []


def test_depth_one_and_two() -> None:
    s = _chain()
    g1 = s.expand("a", 1)
    assert g1.node_ids() == ["a", "b"]
    assert g1.edge_ids() == ["ab"]

    g2 = s.expand("a", 2)
    assert g2.node_ids() == ["a", "b", "c"]
    assert g2.edge_ids() == ["ab", "bc"]


def test_type_filter_stops_at_excluded_edge() -> None:
    s = _chain()
    graph = s.expand("a", 2, {"friend"})
    assert graph.node_ids() == ["a", "b"]
    assert graph.edge_ids() == ["ab"]
    assert all(e.type == "friend" for e in graph.edges)


def test_empty_filter_means_no_filter() -> None:
    s = _chain()
    assert s.expand("a", 3, set()) == s.expand("a", 3)
    assert s.expand("a", 3, ["", "  "]) == s.expand("a", 3)


def test_expansion_is_monotonic_in_depth() -> None:
    s = _chain()
    s.contact("e")
    s.link("ae", "a", "e", "family")
    s.link("ed", "e", "d", "friend")
    previous = s.expand("a", 1)
    for depth in (2, 3):
        current = s.expand("a", depth)
        assert set(previous.node_ids()) <= set(current.node_ids())
        assert set(previous.edge_ids()) <= set(current.edge_ids())
        previous = current


def test_depth_one_nodes_are_adjacent_to_seed() -> None:
    s = _chain()
    s.contact("e")
    s.link("ea", "e", "a", "family", directed=True)
    graph = s.expand("a", 1)
    for node_id in graph.node_ids():
        if node_id == "a":
            continue
        assert any(
            {e.from_id, e.to_id} == {"a", node_id} for e in graph.edges
        )


def test_node_at_max_depth_is_not_expanded() -> None:
    s = _chain()
    graph = s.expand("b", 1)
    # c is reached at depth 1 but its edge to d is not followed.
    assert set(graph.node_ids()) == {"a", "b", "c"}
    assert "cd" not in graph.edge_ids()


def test_direction_does_not_limit_reachability() -> None:
    s = _Store()
    for name in ("a", "b", "c"):
        s.contact(name)
    s.link("ba", "b", "a", "mentor", directed=True)
    s.link("cb", "c", "b", "mentor", directed=True)
    graph = s.expand("a", 2)
    assert graph.node_ids() == ["a", "b", "c"]
    edge = graph.edges[0]
    assert (edge.from_id, edge.to_id, edge.directed) == ("b", "a", True)


def test_parallel_edges_are_kept_and_each_recorded_once() -> None:
    s = _Store()
    for name in ("a", "b"):
        s.contact(name)
    s.link("ab1", "a", "b", "friend", strength=5)
    s.link("ab2", "b", "a", "coworker")
    graph = s.expand("a", 3)
    assert graph.node_ids() == ["a", "b"]
    assert graph.edge_ids() == ["ab1", "ab2"]
    assert graph.edges[0].strength == 5
    assert graph.edges[1].strength is None


def test_triangle_edge_seen_from_both_sides_is_recorded_once() -> None:
    s = _Store()
    for name in ("a", "b", "c"):
        s.contact(name)
    s.link("ab", "a", "b")
    s.link("ac", "a", "c")
    s.link("bc", "b", "c")
    graph = s.expand("a", 2)
    assert sorted(graph.edge_ids()) == ["ab", "ac", "bc"]
    assert len(graph.edge_ids()) == len(set(graph.edge_ids()))
    assert len(graph.node_ids()) == 3


def test_dangling_endpoint_keeps_edge_but_not_node() -> None:
    s = _chain()
    s.contacts.delete("b")
    graph = s.expand("a", 2)
    assert graph.node_ids() == ["a", "c"]
    assert graph.edge_ids() == ["ab", "bc"]


def test_depth_is_clamped() -> None:
    s = _chain()
    assert s.expand("a", 0) == s.expand("a", 1)
    assert s.expand("a", 10) == s.expand("a", 3)
    assert s.expand("a", 3).node_ids() == ["a", "b", "c", "d"]


class _LoopLookup:
    """Relationship lookup returning a self-loop that validation would normally reject."""

    def incident_relationships(self, contact_id, allowed_types=None):
        loop = SimpleNamespace(
            id="loop",
            from_contact_id="a",
            to_contact_id="a",
            type="custom",
            directed=False,
            strength=None,
        )
        return [loop] if contact_id == "a" else []


class _OneContact:
    def get_entity(self, contact_id):
        if contact_id == "a":
            return Entity(id="a", display_name="A")
        return None


def test_self_loop_yields_single_node() -> None:
    graph = expand("a", 3, entities=_OneContact(), relationships=_LoopLookup())
    assert isinstance(graph, LocalGraph)
    assert graph.node_ids() == ["a"]
    assert graph.edge_ids() == ["loop"]


def test_clamp_and_normalize_helpers() -> None:
    assert clamp_depth(None) == 1
    assert clamp_depth(-4) == 1
    assert clamp_depth(2) == 2
    assert clamp_depth(7) == 3
    assert normalize_types(None) is None
    assert normalize_types([]) is None
    assert normalize_types([" friend ", "", "family"]) == frozenset({"friend", "family"})
