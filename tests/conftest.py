"""Pytest configuration and fixtures."""

from datetime import datetime

import pytest

from orrery.config import Settings, get_test_settings
from orrery.layout import LayoutEngine
from orrery.models import Entity, Relationship
from orrery.sources import InMemorySource
from orrery.view import GraphView, InMemoryScene, Viewport


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        self.now += ms
        return self.now


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with deterministic seeding."""
    return get_test_settings()


@pytest.fixture
def sample_entities() -> list[Entity]:
    """Five people across two factions."""
    return [
        Entity(id=1, name="Ana Costa", attributes={"faction": "north", "risk_level": "high", "email": "ana@corp.example"}),
        Entity(id=2, name="Bruno Lima", attributes={"faction": "north", "risk_level": "medium"}),
        Entity(id=3, name="Carla Dias", attributes={"faction": "south", "risk_level": "critical"}),
        Entity(id=4, name="Davi Rocha", attributes={}),
        Entity(id=5, name="Eva Souza", attributes={"email_domain": "mail.example"}),
    ]


@pytest.fixture
def sample_relationships() -> list[Relationship]:
    """A path 1-2-3-4-5 with mixed types and classifications."""
    return [
        Relationship(
            id=101, source_id=1, target_id=2, strength=0.9,
            relationship_type="criminal_partner", classification="intra_faction",
            start_time=datetime(2020, 1, 1), end_time=None,
        ),
        Relationship(
            id=102, source_id=2, target_id=3, strength=0.4,
            relationship_type="rival", classification="inter_faction",
            start_time=datetime(2021, 6, 1), end_time=datetime(2022, 6, 1),
        ),
        Relationship(
            id=103, source_id=3, target_id=4, strength=None,
            relationship_type="suspicious_contact", classification="faction_civil",
            start_time=datetime(2019, 1, 1), end_time=datetime(2019, 12, 31),
        ),
        Relationship(
            id=104, source_id=4, target_id=5, strength=0.7,
            relationship_type="family", classification="civil",
            start_time=datetime(2023, 3, 1), end_time=None,
        ),
    ]


@pytest.fixture
def memory_source(sample_entities: list[Entity], sample_relationships: list[Relationship]) -> InMemorySource:
    """In-memory source over the sample snapshot."""
    return InMemorySource(sample_entities, sample_relationships)


@pytest.fixture
def engine() -> LayoutEngine:
    """Layout engine with a fixed random seed."""
    return LayoutEngine(seed=1234)


@pytest.fixture
def clock() -> FakeClock:
    """Manual clock starting at t=0."""
    return FakeClock()


@pytest.fixture
def view(engine: LayoutEngine, clock: FakeClock) -> GraphView:
    """Headless graph view on an 800x600 viewport."""
    return GraphView(engine=engine, scene=InMemoryScene(), viewport=Viewport(width=800, height=600), clock=clock)


def pixel_of(view: GraphView, entity_id: int) -> tuple[float, float]:
    """Screen position of an entity's node in the view's current camera."""
    ndc = view.camera.project(view.snapshot.position(entity_id))
    assert ndc is not None
    return view.viewport.to_pixels(*ndc)

