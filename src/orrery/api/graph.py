"""Graph layout endpoints.

Positions are computed server-side so a thin client only has to draw
them; the response also carries the camera pose that frames the graph.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, ConfigDict, Field

from orrery.layout.engine import LayoutEngine, LayoutSnapshot
from orrery.models import Entity, Relationship
from orrery.sources.base import EntityRelationshipSource, SourceError, TimeWindow
from orrery.view.camera import frame_all

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Request / Response Models
# ============================================================================


class EntityIn(BaseModel):
    """Entity record; any extra field becomes an attribute."""

    model_config = ConfigDict(extra="allow")

    id: int
    name: str = ""


class RelationshipIn(BaseModel):
    """Relationship record."""

    id: int | str
    source_id: int
    target_id: int
    strength: float | None = None
    relationship_type: str | None = None
    classification: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    source_name: str | None = None
    target_name: str | None = None


class LayoutRequest(BaseModel):
    """Snapshot to lay out."""

    entities: list[EntityIn] = Field(default_factory=list)
    relationships: list[RelationshipIn] = Field(default_factory=list)
    iterations: int | None = Field(default=None, ge=0, le=1000)


class CameraPose(BaseModel):
    """Camera pose framing the whole graph."""

    target: list[float]
    eye: list[float]
    distance: float


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    source_url: str | None = None
    version: str = "0.1.0"


# ============================================================================
# Helpers
# ============================================================================


def get_source(request: Request) -> EntityRelationshipSource:
    """Get data source from app state."""
    return request.app.state.source


def snapshot_response(snapshot: LayoutSnapshot) -> dict:
    """Serialize a snapshot plus its framing camera pose."""
    data = snapshot.to_dict()
    framing = frame_all(snapshot.spatial.positions)
    data["camera"] = (
        CameraPose(
            target=[float(v) for v in framing.target],
            eye=[float(v) for v in framing.eye],
            distance=framing.distance,
        ).model_dump()
        if framing is not None
        else None
    )
    data["duration_ms"] = snapshot.duration_ms
    return data


def _layout(
    entities: list[Entity], relationships: list[Relationship], iterations: int | None = None
) -> LayoutSnapshot:
    # Fresh engine per request: the random generator is not shared across threads
    return LayoutEngine().compute(entities, relationships, iterations=iterations)


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint."""
    source = getattr(request.app.state, "source", None)
    return HealthResponse(
        status="healthy" if source is not None else "degraded",
        source_url=getattr(source, "base_url", None),
    )


@router.post("/graph/layout")
async def layout_graph(body: LayoutRequest) -> dict:
    """Lay out a snapshot supplied in the request body."""
    entities = [Entity.from_dict(e.model_dump()) for e in body.entities]
    relationships = [Relationship(**r.model_dump()) for r in body.relationships]

    snapshot = await run_in_threadpool(_layout, entities, relationships, body.iterations)
    return snapshot_response(snapshot)


@router.get("/graph/data")
async def get_graph_data(
    request: Request,
    end: datetime | None = Query(default=None, description="Window end (default: now)"),
    start: datetime | None = Query(default=None, description="Window start (default: unbounded)"),
) -> dict:
    """Fetch a time window from the data source and lay it out."""
    source = get_source(request)
    window = TimeWindow(end=end or datetime.now(timezone.utc), start=start)

    def fetch_and_layout() -> LayoutSnapshot:
        entities = source.list_entities()
        relationships = source.list_relationships(window)
        return _layout(entities, relationships)

    try:
        snapshot = await run_in_threadpool(fetch_and_layout)
    except SourceError as e:
        logger.error(f"Data source unavailable: {e}")
        raise HTTPException(
            status_code=502,
            detail=f"Data source unavailable: {e}",
        )

    return snapshot_response(snapshot)
