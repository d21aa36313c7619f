"""Domain entities: Contact (with phones and emails) and Relationship."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

# Relationship type used when none is given.
DEFAULT_RELATIONSHIP_TYPE = "custom"
STRENGTH_MIN = 1
STRENGTH_MAX = 5


def _new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ContactPhone:
    """A phone number on a contact. phone_normalized is used for search."""

    phone: str
    phone_normalized: str = ""
    label: str | None = None
    id: str = field(default_factory=_new_id)

    def __post_init__(self):
        phone = (self.phone or "").strip()
        if not phone:
            raise ValueError("Phone must be non-empty.")
        object.__setattr__(self, "phone", phone)


@dataclass(frozen=True)
class ContactEmail:
    email: str
    label: str | None = None
    id: str = field(default_factory=_new_id)

    def __post_init__(self):
        email = (self.email or "").strip()
        if not email:
            raise ValueError("Email must be non-empty.")
        object.__setattr__(self, "email", email)


@dataclass(frozen=True)
class Contact:
    """
    A person in the address book.
    Phones and emails are owned by the contact and replaced as a whole on update.
    """

    display_name: str
    note: str | None = None
    phones: tuple[ContactPhone, ...] = ()
    emails: tuple[ContactEmail, ...] = ()
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        name = (self.display_name or "").strip()
        if not name:
            raise ValueError("Contact display_name must be non-empty.")
        object.__setattr__(self, "display_name", name)
        object.__setattr__(self, "phones", tuple(self.phones))
        object.__setattr__(self, "emails", tuple(self.emails))


@dataclass(frozen=True)
class Relationship:
    """
    A typed link between two contacts. Several relationships may connect the
    same pair; each has its own id. directed only changes how the link reads
    (from -> to), never which contacts it connects.
    """

    from_contact_id: str
    to_contact_id: str
    type: str = DEFAULT_RELATIONSHIP_TYPE
    directed: bool = False
    strength: int | None = None
    note: str | None = None
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        if not self.from_contact_id or not self.to_contact_id:
            raise ValueError("Relationship endpoints must be non-empty.")
        if self.from_contact_id == self.to_contact_id:
            raise ValueError("Relationship cannot link a contact to itself.")
        rel_type = (self.type or "").strip() or DEFAULT_RELATIONSHIP_TYPE
        object.__setattr__(self, "type", rel_type)
        object.__setattr__(self, "directed", bool(self.directed))
        if self.strength is not None and not (
            STRENGTH_MIN <= self.strength <= STRENGTH_MAX
        ):
            raise ValueError(
                f"Relationship strength must be between {STRENGTH_MIN} and {STRENGTH_MAX}."
            )

    def touches(self, contact_id: str) -> bool:
        return contact_id in (self.from_contact_id, self.to_contact_id)
