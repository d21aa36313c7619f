"""Input data and use-case result types. Services return these instead of raising."""

from dataclasses import dataclass, field

from circles.domain import Contact, Relationship


@dataclass(frozen=True)
class PhoneData:
    phone: str
    label: str | None = None


@dataclass(frozen=True)
class EmailData:
    email: str
    label: str | None = None


@dataclass(frozen=True)
class ContactData:
    """Contact fields as submitted by a client (create or full update)."""

    display_name: str
    note: str | None = None
    phones: list[PhoneData] = field(default_factory=list)
    emails: list[EmailData] = field(default_factory=list)


@dataclass(frozen=True)
class RelationshipData:
    from_contact_id: str
    to_contact_id: str
    type: str | None = None
    directed: bool = False
    strength: int | float | str | None = None
    note: str | None = None


@dataclass(frozen=True)
class RelationshipView:
    """A relationship with both endpoint display names."""

    relationship: Relationship
    from_display_name: str
    to_display_name: str


@dataclass(frozen=True)
class ContactCreated:
    contact: Contact


@dataclass(frozen=True)
class Invalid:
    reason: str


@dataclass(frozen=True)
class NotFound:
    """A referenced contact or relationship does not exist."""

    id: str
