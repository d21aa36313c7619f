"""Integration tests for the Neo4j repositories. Require Docker
(testcontainers)."""

import pytest

from circles.application import (
    ContactCreated,
    ContactData,
    ContactService,
    EmailData,
    PhoneData,
    RelationshipData,
    RelationshipService,
    expand,
)
from circles.domain import Contact, ContactPhone, LocalGraph, Relationship
from circles.infrastructure import (
    Neo4jContactRepository,
    Neo4jRelationshipRepository,
    ensure_constraints,
)


@pytest.fixture(scope="session")
def neo4j_driver():
    from testcontainers.neo4j import Neo4jContainer

    with Neo4jContainer() as neo4j:
        driver = neo4j.get_driver()
        try:
            ensure_constraints(driver)
            yield driver
        finally:
            driver.close()


@pytest.fixture
def clean_neo4j(neo4j_driver):
    """Clear the graph before each test so tests are independent."""
    with neo4j_driver.session() as session:
        session.run("MATCH (n) DETACH DELETE n")
    yield neo4j_driver


@pytest.fixture
def repos(clean_neo4j):
    return Neo4jContactRepository(clean_neo4j), Neo4jRelationshipRepository(clean_neo4j)


def test_add_get_by_id_list_all(repos):
    contacts, _ = repos
    contact = Contact(
        display_name="Alice",
        note="Engineer",
        phones=(ContactPhone(phone="+1 202 555 1111", label="mobile"),),
    )
    contacts.add(contact)

    found = contacts.get_by_id(contact.id)
    assert found is not None
    assert found.display_name == "Alice"
    assert found.note == "Engineer"
    assert found.phones[0].phone == "+1 202 555 1111"
    assert found.phones[0].phone_normalized == "+12025551111"
    assert found.emails == ()
    assert found.created_at == contact.created_at

    entity = contacts.get_entity(contact.id)
    assert entity is not None
    assert entity.display_name == "Alice"
    assert contacts.get_entity("missing") is None

    assert [c.id for c in contacts.list_all()] == [contact.id]


def test_update_replaces_phones_and_emails(repos, clean_neo4j):
    contacts, relationships = repos
    service = ContactService(contacts, relationships)
    created = service.create_contact(
        ContactData(
            display_name="Bob",
            phones=[PhoneData(phone="555-0100"), PhoneData(phone="555-0101")],
            emails=[EmailData(email="bob@old.io")],
        )
    )
    assert isinstance(created, ContactCreated)
    contact_id = created.contact.id

    updated = service.update_contact(
        contact_id,
        ContactData(display_name="Robert", emails=[EmailData(email="rob@new.io", label="work")]),
    )
    assert isinstance(updated, Contact)
    assert updated.display_name == "Robert"
    assert updated.phones == ()
    assert [(e.email, e.label) for e in updated.emails] == [("rob@new.io", "work")]

    with clean_neo4j.session() as session:
        assert session.run("MATCH (p:Phone) RETURN count(p) AS cnt").single()["cnt"] == 0
        assert session.run("MATCH (e:Email) RETURN count(e) AS cnt").single()["cnt"] == 1

    assert contacts.update(Contact(id="missing", display_name="X")) is False


def test_delete_contact_detaches_relationships(repos, clean_neo4j):
    contacts, relationships = repos
    a = Contact(display_name="A", phones=(ContactPhone(phone="123"),))
    b = Contact(display_name="B")
    contacts.add(a)
    contacts.add(b)
    relationships.add(Relationship(id="ab", from_contact_id=a.id, to_contact_id=b.id))

    assert contacts.delete(a.id) is True
    assert contacts.delete(a.id) is False
    assert relationships.get_by_id("ab") is None
    assert relationships.incident_relationships(b.id) == []
    with clean_neo4j.session() as session:
        assert session.run("MATCH (p:Phone) RETURN count(p) AS cnt").single()["cnt"] == 0


def test_relationship_round_trip_keeps_direction(repos):
    contacts, relationships = repos
    a = Contact(display_name="A")
    b = Contact(display_name="B")
    contacts.add(a)
    contacts.add(b)
    rel = Relationship(
        from_contact_id=b.id, to_contact_id=a.id, type="mentor", directed=True, strength=4
    )
    relationships.add(rel)

    incident = relationships.incident_relationships(a.id)
    assert len(incident) == 1
    found = incident[0]
    assert (found.from_contact_id, found.to_contact_id) == (b.id, a.id)
    assert found.type == "mentor"
    assert found.directed is True
    assert found.strength == 4
    assert relationships.get_by_id(rel.id) == found

    assert relationships.delete(rel.id) is True
    assert relationships.delete(rel.id) is False


def test_incident_relationships_type_filter(repos):
    contacts, relationships = repos
    a, b = Contact(display_name="A"), Contact(display_name="B")
    contacts.add(a)
    contacts.add(b)
    relationships.add(Relationship(id="f", from_contact_id=a.id, to_contact_id=b.id, type="friend"))
    relationships.add(Relationship(id="w", from_contact_id=a.id, to_contact_id=b.id, type="coworker"))

    assert sorted(r.id for r in relationships.incident_relationships(a.id)) == ["f", "w"]
    assert sorted(r.id for r in relationships.incident_relationships(a.id, set())) == ["f", "w"]
    assert [r.id for r in relationships.incident_relationships(b.id, {"friend"})] == ["f"]
    assert relationships.delete_for_contact(b.id) == 2


def test_local_graph_over_neo4j(repos):
    contacts, relationships = repos
    contact_service = ContactService(contacts, relationships)
    rel_service = RelationshipService(contacts, relationships)
    ids = {}
    for name in ("A", "B", "C"):
        created = contact_service.create_contact(ContactData(display_name=name))
        ids[name] = created.contact.id
    rel_service.create_relationship(RelationshipData(ids["A"], ids["B"], "friend"))
    rel_service.create_relationship(RelationshipData(ids["B"], ids["C"], "coworker"))

    one = expand(ids["A"], 1, entities=contacts, relationships=relationships)
    assert isinstance(one, LocalGraph)
    assert one.node_ids() == [ids["A"], ids["B"]]
    assert len(one.edges) == 1

    two = expand(ids["A"], 2, entities=contacts, relationships=relationships)
    assert two.node_ids() == [ids["A"], ids["B"], ids["C"]]
    assert len(two.edges) == 2

    friends = expand(ids["A"], 2, {"friend"}, entities=contacts, relationships=relationships)
    assert friends.node_ids() == [ids["A"], ids["B"]]
