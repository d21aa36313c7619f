"""
FastAPI backend: REST API for contacts, relationships, and the local graph.
Run with uvicorn: uvicorn api.main:app --reload (or python -m api)
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from repo root (when run from repo root or from Docker)
for path in (
    Path(__file__).resolve().parent.parent.parent / ".env",
    Path.cwd() / ".env",
):
    if path.exists():
        load_dotenv(path)
        break

from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from neo4j import GraphDatabase
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
)
from pydantic.alias_generators import to_camel

from circles.application import (
    ContactCreated,
    ContactData,
    ContactRepository,
    ContactService,
    EmailData,
    Invalid,
    NotFound,
    PhoneData,
    RelationshipData,
    RelationshipRepository,
    RelationshipService,
    RelationshipView,
    clamp_depth,
    expand,
    normalize_types,
)
from circles.domain import Contact, LocalGraph
from circles.infrastructure import (
    Neo4jContactRepository,
    Neo4jRelationshipRepository,
    ensure_constraints,
)

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=os.environ.get("LOG_LEVEL", "INFO").strip().upper(),
)
logger = logging.getLogger(__name__)


def _neo4j_uri() -> str:
    return os.environ.get("NEO4J_URI", "bolt://localhost:7687").strip()


def _get_driver():
    user = os.environ.get("NEO4J_USER", "neo4j").strip()
    password = os.environ.get("NEO4J_PASSWORD", "password").strip()
    return GraphDatabase.driver(_neo4j_uri(), auth=(user, password))


def _get_cached_driver(app: FastAPI):
    if getattr(app.state, "driver", None) is None:
        app.state.driver = _get_driver()
    return app.state.driver


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.driver = None
    logger.info("Neo4j: %s", _neo4j_uri())
    try:
        app.state.driver = _get_driver()
        ensure_constraints(app.state.driver)
        yield
    finally:
        if getattr(app.state, "driver", None) is not None:
            app.state.driver.close()


app = FastAPI(title="Circles API", lifespan=lifespan)


# --- Dependencies ---


def get_contact_repository(request: Request) -> ContactRepository:
    return Neo4jContactRepository(_get_cached_driver(request.app))


def get_relationship_repository(request: Request) -> RelationshipRepository:
    return Neo4jRelationshipRepository(_get_cached_driver(request.app))


def get_contact_service(
    contacts: ContactRepository = Depends(get_contact_repository),
    relationships: RelationshipRepository = Depends(get_relationship_repository),
) -> ContactService:
    return ContactService(contacts, relationships)


def get_relationship_service(
    contacts: ContactRepository = Depends(get_contact_repository),
    relationships: RelationshipRepository = Depends(get_relationship_repository),
) -> RelationshipService:
    return RelationshipService(contacts, relationships)


# --- Wire models (camelCase JSON) ---


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PhoneBody(ApiModel):
    phone: str | None = None
    label: str | None = None


class EmailBody(ApiModel):
    email: str | None = None
    label: str | None = None


class ContactBody(ApiModel):
    display_name: str | None = None
    note: str | None = None
    phones: list[PhoneBody] = []
    emails: list[EmailBody] = []


class RelationshipBody(ApiModel):
    from_contact_id: str | None = None
    to_contact_id: str | None = None
    type: str | None = None
    directed: bool = False
    # Left unconverted so the service reports every bad value the same way.
    strength: StrictInt | StrictFloat | StrictStr | StrictBool | None = None
    note: str | None = None


class PhoneItem(ApiModel):
    id: str
    label: str | None = None
    phone: str


class EmailItem(ApiModel):
    id: str
    label: str | None = None
    email: str


class ContactSummary(ApiModel):
    id: str
    display_name: str
    note: str | None = None
    created_at: str
    updated_at: str


class ContactDetail(ContactSummary):
    phones: list[PhoneItem] = []
    emails: list[EmailItem] = []


class ContactList(ApiModel):
    contacts: list[ContactSummary]


class RelationshipItem(ApiModel):
    id: str
    from_contact_id: str
    to_contact_id: str
    type: str
    directed: bool
    strength: int | None = None
    note: str | None = None
    created_at: str
    updated_at: str
    from_display_name: str
    to_display_name: str


class RelationshipList(ApiModel):
    relationships: list[RelationshipItem]


class GraphNodeItem(ApiModel):
    id: str
    display_name: str


class GraphEdgeItem(ApiModel):
    id: str
    from_: str = Field(alias="from")
    to: str
    type: str
    directed: bool
    strength: int | None = None


class LocalGraphResponse(ApiModel):
    nodes: list[GraphNodeItem]
    edges: list[GraphEdgeItem]


class Ok(ApiModel):
    ok: bool = True


def _iso(dt: datetime) -> str:
    return dt.isoformat()


def _contact_summary(c: Contact) -> ContactSummary:
    return ContactSummary(
        id=c.id,
        display_name=c.display_name,
        note=c.note,
        created_at=_iso(c.created_at),
        updated_at=_iso(c.updated_at),
    )


def _contact_detail(c: Contact) -> ContactDetail:
    return ContactDetail(
        id=c.id,
        display_name=c.display_name,
        note=c.note,
        created_at=_iso(c.created_at),
        updated_at=_iso(c.updated_at),
        phones=[PhoneItem(id=p.id, label=p.label, phone=p.phone) for p in c.phones],
        emails=[EmailItem(id=e.id, label=e.label, email=e.email) for e in c.emails],
    )


def _relationship_item(view: RelationshipView) -> RelationshipItem:
    r = view.relationship
    return RelationshipItem(
        id=r.id,
        from_contact_id=r.from_contact_id,
        to_contact_id=r.to_contact_id,
        type=r.type,
        directed=r.directed,
        strength=r.strength,
        note=r.note,
        created_at=_iso(r.created_at),
        updated_at=_iso(r.updated_at),
        from_display_name=view.from_display_name,
        to_display_name=view.to_display_name,
    )


def _local_graph_response(graph: LocalGraph) -> LocalGraphResponse:
    return LocalGraphResponse(
        nodes=[GraphNodeItem(id=n.id, display_name=n.display_name) for n in graph.nodes],
        edges=[
            GraphEdgeItem(
                id=e.id,
                from_=e.from_id,
                to=e.to_id,
                type=e.type,
                directed=e.directed,
                strength=e.strength,
            )
            for e in graph.edges
        ],
    )


def _contact_data(body: ContactBody) -> ContactData:
    return ContactData(
        display_name=body.display_name,
        note=body.note,
        phones=[PhoneData(phone=p.phone, label=p.label) for p in body.phones],
        emails=[EmailData(email=e.email, label=e.label) for e in body.emails],
    )


def _parse_depth(raw: str | None) -> int:
    """Non-numeric or missing depth falls back to 1; numbers are clamped."""
    if not raw or not raw.strip():
        return clamp_depth(None)
    try:
        return clamp_depth(int(float(raw)))
    except (ValueError, OverflowError):
        return clamp_depth(None)


def _parse_types(raw: str | None) -> frozenset[str] | None:
    """Comma-separated list; blanks dropped. Empty means no filter."""
    if not raw:
        return None
    return normalize_types(raw.split(","))


# --- REST: health ---


@app.get("/api/health")
def health():
    return {"status": "ok"}


# --- REST: contacts ---


@app.get("/api/contacts", response_model=ContactList)
def list_contacts(
    query: str = "",
    service: ContactService = Depends(get_contact_service),
):
    contacts = service.search_contacts(query)
    return ContactList(contacts=[_contact_summary(c) for c in contacts])


@app.post("/api/contacts", response_model=ContactDetail, status_code=201)
def create_contact(
    body: ContactBody,
    service: ContactService = Depends(get_contact_service),
):
    result = service.create_contact(_contact_data(body))
    if isinstance(result, Invalid):
        raise HTTPException(status_code=400, detail=result.reason)
    if not isinstance(result, ContactCreated):
        raise HTTPException(status_code=400, detail="Failed to create contact")
    return _contact_detail(result.contact)


@app.get("/api/contacts/{contact_id}", response_model=ContactDetail)
def get_contact(
    contact_id: str,
    service: ContactService = Depends(get_contact_service),
):
    contact = service.get_contact(contact_id)
    if contact is None:
        raise HTTPException(status_code=404, detail="Not found")
    return _contact_detail(contact)


@app.put("/api/contacts/{contact_id}", response_model=ContactDetail)
def update_contact(
    contact_id: str,
    body: ContactBody,
    service: ContactService = Depends(get_contact_service),
):
    result = service.update_contact(contact_id, _contact_data(body))
    if isinstance(result, NotFound):
        raise HTTPException(status_code=404, detail="Not found")
    if isinstance(result, Invalid):
        raise HTTPException(status_code=400, detail=result.reason)
    return _contact_detail(result)


@app.delete("/api/contacts/{contact_id}", response_model=Ok)
def delete_contact(
    contact_id: str,
    service: ContactService = Depends(get_contact_service),
):
    if not service.delete_contact(contact_id):
        raise HTTPException(status_code=404, detail="Not found")
    return Ok()


# --- REST: relationships ---


@app.get("/api/contacts/{contact_id}/relationships", response_model=RelationshipList)
def list_relationships(
    contact_id: str,
    service: RelationshipService = Depends(get_relationship_service),
):
    views = service.list_for_contact(contact_id)
    return RelationshipList(relationships=[_relationship_item(v) for v in views])


@app.post("/api/relationships", response_model=RelationshipItem, status_code=201)
def create_relationship(
    body: RelationshipBody,
    service: RelationshipService = Depends(get_relationship_service),
):
    result = service.create_relationship(
        RelationshipData(
            from_contact_id=body.from_contact_id,
            to_contact_id=body.to_contact_id,
            type=body.type,
            directed=body.directed,
            strength=body.strength,
            note=body.note,
        )
    )
    if isinstance(result, Invalid):
        raise HTTPException(status_code=400, detail=result.reason)
    if isinstance(result, NotFound):
        raise HTTPException(status_code=404, detail="Not found")
    return _relationship_item(result)


@app.delete("/api/relationships/{relationship_id}", response_model=Ok)
def delete_relationship(
    relationship_id: str,
    service: RelationshipService = Depends(get_relationship_service),
):
    if not service.delete_relationship(relationship_id):
        raise HTTPException(status_code=404, detail="Not found")
    return Ok()


# --- REST: local graph ---


@app.get("/api/graph/local", response_model=LocalGraphResponse)
def local_graph(
    contact_id: str = Query("", alias="contactId"),
    depth: str | None = None,
    types: str | None = None,
    contacts: ContactRepository = Depends(get_contact_repository),
    relationships: RelationshipRepository = Depends(get_relationship_repository),
):
    contact_id = (contact_id or "").strip()
    if not contact_id:
        raise HTTPException(status_code=400, detail="contactId is required")
    result = expand(
        contact_id,
        _parse_depth(depth),
        _parse_types(types),
        entities=contacts,
        relationships=relationships,
    )
    if isinstance(result, NotFound):
        raise HTTPException(status_code=404, detail="Not found")
    return _local_graph_response(result)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})
