"""Neo4j implementations of the contact and relationship repositories.

Graph:
(c:Contact {id, display_name, note, created_at, updated_at})
(c)-[:HAS_PHONE]->(:Phone {id, label, phone, phone_normalized})
(c)-[:HAS_EMAIL]->(:Email {id, label, email})
(a:Contact)-[:RELATES {id, type, directed, strength, note, created_at, updated_at}]->(b:Contact)
Phones and emails belong to exactly one contact and are deleted with it.
"""

from collections.abc import Collection
from datetime import datetime

from circles.domain import Contact, ContactEmail, ContactPhone, Entity, Relationship
from circles.infrastructure.phone import searchable_phone


def _datetime_to_iso(dt: datetime) -> str:
    return dt.isoformat()


def _iso_to_datetime(s: str) -> datetime:
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


_CONTACT_RETURN = """
OPTIONAL MATCH (c)-[:HAS_PHONE]->(ph:Phone)
WITH c, ph ORDER BY ph.phone
WITH c, collect(ph {.*}) AS phones
OPTIONAL MATCH (c)-[:HAS_EMAIL]->(em:Email)
WITH c, phones, em ORDER BY em.email
RETURN c, phones, collect(em {.*}) AS emails
"""

_CREATE_CONTACT_QUERY = """
CREATE (c:Contact {
    id: $id,
    display_name: $display_name,
    note: $note,
    created_at: $created_at,
    updated_at: $updated_at
})
WITH c
FOREACH (p IN $phones |
    CREATE (c)-[:HAS_PHONE]->(:Phone {
        id: p.id, label: p.label, phone: p.phone, phone_normalized: p.phone_normalized
    })
)
FOREACH (e IN $emails |
    CREATE (c)-[:HAS_EMAIL]->(:Email {id: e.id, label: e.label, email: e.email})
)
"""

_UPDATE_CONTACT_QUERY = """
MATCH (c:Contact {id: $id})
SET c.display_name = $display_name,
    c.note = $note,
    c.updated_at = $updated_at
WITH c
OPTIONAL MATCH (c)-[:HAS_PHONE|HAS_EMAIL]->(old)
DETACH DELETE old
WITH DISTINCT c
FOREACH (p IN $phones |
    CREATE (c)-[:HAS_PHONE]->(:Phone {
        id: p.id, label: p.label, phone: p.phone, phone_normalized: p.phone_normalized
    })
)
FOREACH (e IN $emails |
    CREATE (c)-[:HAS_EMAIL]->(:Email {id: e.id, label: e.label, email: e.email})
)
RETURN c.id AS id
"""

_DELETE_CONTACT_QUERY = """
MATCH (c:Contact {id: $id})
OPTIONAL MATCH (c)-[:HAS_PHONE|HAS_EMAIL]->(owned)
DETACH DELETE owned
WITH DISTINCT c
DETACH DELETE c
RETURN count(c) AS deleted
"""

_GET_ENTITY_QUERY = """
MATCH (c:Contact {id: $id})
RETURN c.id AS id, c.display_name AS display_name
"""

_RELATIONSHIP_RETURN = """
RETURN r, a.id AS from_id, b.id AS to_id
"""


def _phone_params(contact: Contact) -> list[dict]:
    return [
        {
            "id": p.id,
            "label": p.label,
            "phone": p.phone,
            "phone_normalized": searchable_phone(p.phone),
        }
        for p in contact.phones
    ]


def _email_params(contact: Contact) -> list[dict]:
    return [{"id": e.id, "label": e.label, "email": e.email} for e in contact.emails]


class Neo4jContactRepository:
    """Stores contacts as Contact nodes with owned Phone and Email nodes."""

    def __init__(self, driver: object) -> None:
        self._driver = driver

    def add(self, contact: Contact) -> None:
        with self._driver.session() as session:
            session.run(
                _CREATE_CONTACT_QUERY,
                id=contact.id,
                display_name=contact.display_name,
                note=contact.note,
                created_at=_datetime_to_iso(contact.created_at),
                updated_at=_datetime_to_iso(contact.updated_at),
                phones=_phone_params(contact),
                emails=_email_params(contact),
            )

    def update(self, contact: Contact) -> bool:
        with self._driver.session() as session:
            result = session.run(
                _UPDATE_CONTACT_QUERY,
                id=contact.id,
                display_name=contact.display_name,
                note=contact.note,
                updated_at=_datetime_to_iso(contact.updated_at),
                phones=_phone_params(contact),
                emails=_email_params(contact),
            )
            return result.single() is not None

    def delete(self, contact_id: str) -> bool:
        """DETACH DELETE also drops every RELATES edge on the contact."""
        with self._driver.session() as session:
            record = session.run(_DELETE_CONTACT_QUERY, id=contact_id).single()
            return bool(record and record["deleted"])

    def get_by_id(self, contact_id: str) -> Contact | None:
        with self._driver.session() as session:
            result = session.run(
                "MATCH (c:Contact {id: $id})" + _CONTACT_RETURN,
                id=contact_id,
            )
            record = result.single()
        if not record:
            return None
        return _record_to_contact(record)

    def get_entity(self, contact_id: str) -> Entity | None:
        with self._driver.session() as session:
            record = session.run(_GET_ENTITY_QUERY, id=contact_id).single()
        if not record:
            return None
        return Entity(id=record["id"], display_name=record["display_name"])

    def list_all(self) -> list[Contact]:
        with self._driver.session() as session:
            result = session.run(
                "MATCH (c:Contact)" + _CONTACT_RETURN + "ORDER BY c.created_at"
            )
            return [_record_to_contact(rec) for rec in result]


class Neo4jRelationshipRepository:
    """Stores relationships as RELATES edges between Contact nodes.

    Both endpoints must already exist: add() is a no-op otherwise.
    """

    def __init__(self, driver: object) -> None:
        self._driver = driver

    def add(self, relationship: Relationship) -> None:
        with self._driver.session() as session:
            session.run(
                """
                MATCH (a:Contact {id: $from_id}), (b:Contact {id: $to_id})
                CREATE (a)-[:RELATES {
                    id: $id,
                    type: $type,
                    directed: $directed,
                    strength: $strength,
                    note: $note,
                    created_at: $created_at,
                    updated_at: $updated_at
                }]->(b)
                """,
                from_id=relationship.from_contact_id,
                to_id=relationship.to_contact_id,
                id=relationship.id,
                type=relationship.type,
                directed=relationship.directed,
                strength=relationship.strength,
                note=relationship.note,
                created_at=_datetime_to_iso(relationship.created_at),
                updated_at=_datetime_to_iso(relationship.updated_at),
            )

    def delete(self, relationship_id: str) -> bool:
        with self._driver.session() as session:
            result = session.run(
                """
                MATCH ()-[r:RELATES {id: $id}]->()
                DELETE r
                RETURN count(r) AS deleted
                """,
                id=relationship_id,
            )
            record = result.single()
            return bool(record and record["deleted"])

    def get_by_id(self, relationship_id: str) -> Relationship | None:
        with self._driver.session() as session:
            result = session.run(
                "MATCH (a:Contact)-[r:RELATES {id: $id}]->(b:Contact)"
                + _RELATIONSHIP_RETURN,
                id=relationship_id,
            )
            record = result.single()
        if not record:
            return None
        return _record_to_relationship(record)

    def delete_for_contact(self, contact_id: str) -> int:
        with self._driver.session() as session:
            result = session.run(
                """
                MATCH (:Contact {id: $id})-[r:RELATES]-()
                WITH DISTINCT r
                DELETE r
                RETURN count(r) AS deleted
                """,
                id=contact_id,
            )
            record = result.single()
            return record["deleted"] if record else 0

    def incident_relationships(
        self, contact_id: str, allowed_types: Collection[str] | None = None
    ) -> list[Relationship]:
        types = sorted(allowed_types) if allowed_types else None
        with self._driver.session() as session:
            # Match undirected, then re-read the stored direction for from/to.
            result = session.run(
                """
                MATCH (c:Contact {id: $id})-[r:RELATES]-()
                WHERE $types IS NULL OR r.type IN $types
                WITH DISTINCT r
                MATCH (a:Contact)-[r]->(b:Contact)
                """
                + _RELATIONSHIP_RETURN,
                id=contact_id,
                types=types,
            )
            return [_record_to_relationship(rec) for rec in result]


def _record_to_contact(record) -> Contact:
    c = record["c"]
    phones = tuple(
        ContactPhone(
            id=p["id"],
            label=p.get("label"),
            phone=p["phone"],
            phone_normalized=p.get("phone_normalized") or "",
        )
        for p in record["phones"]
        if p and p.get("phone")
    )
    emails = tuple(
        ContactEmail(id=e["id"], label=e.get("label"), email=e["email"])
        for e in record["emails"]
        if e and e.get("email")
    )
    return Contact(
        id=c["id"],
        display_name=c["display_name"],
        note=c.get("note"),
        phones=phones,
        emails=emails,
        created_at=_iso_to_datetime(c["created_at"]),
        updated_at=_iso_to_datetime(c["updated_at"]),
    )


def _record_to_relationship(record) -> Relationship:
    r = record["r"]
    strength = r.get("strength")
    return Relationship(
        id=r["id"],
        from_contact_id=record["from_id"],
        to_contact_id=record["to_id"],
        type=r["type"],
        directed=bool(r.get("directed")),
        strength=int(strength) if strength is not None else None,
        note=r.get("note"),
        created_at=_iso_to_datetime(r["created_at"]),
        updated_at=_iso_to_datetime(r["updated_at"]),
    )
