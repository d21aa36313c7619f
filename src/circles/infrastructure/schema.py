"""Neo4j schema: constraints and indexes the repositories rely on."""

_CONTACT_ID_CONSTRAINT = """
CREATE CONSTRAINT contact_id_unique IF NOT EXISTS
FOR (c:Contact) REQUIRE c.id IS UNIQUE
"""

# Local graph lookups filter incident RELATES edges by type.
_RELATES_TYPE_INDEX = """
CREATE INDEX relates_type IF NOT EXISTS
FOR ()-[r:RELATES]-() ON (r.type)
"""

_RELATES_ID_INDEX = """
CREATE INDEX relates_id IF NOT EXISTS
FOR ()-[r:RELATES]-() ON (r.id)
"""


def ensure_constraints(driver) -> None:
    """Create the unique Contact.id constraint and RELATES indexes if missing."""
    with driver.session() as session:
        session.run(_CONTACT_ID_CONSTRAINT)
        session.run(_RELATES_TYPE_INDEX)
        session.run(_RELATES_ID_INDEX)
